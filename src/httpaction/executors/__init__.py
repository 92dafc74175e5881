# Re-export executors for easy access
from .base import BaseExecutor
from .http_exec import HTTPExecutor
from .content_type import is_content_type_allowed
