# Re-export main modules and objects for easier imports
from .models import (
    ActionConfig, CreatePhaseConfig, HTTPMethod, LifecycleRecord, Phase, PhaseConfig,
    PhaseRecord, Phases, QueryConfig, QueryResult, RequestSpec, ResponseOutcome,
)
from .errors import (
    ConfigurationError, ConnectionError, HTTPActionError, ReadError,
    StatusMismatchError, UnsupportedContentTypeError,
)
from .executors import HTTPExecutor, is_content_type_allowed
from .merger import merge_phase
from .orchestrator import run_lifecycle_phase, run_query
from .config import settings
