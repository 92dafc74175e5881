"""
errors.py
---------
Exception taxonomy for request execution and lifecycle phases.
Every error aborts the current phase or query; none are retried.
"""
from typing import Optional


class HTTPActionError(Exception):
    pass


class ConfigurationError(HTTPActionError):
    """The request could not be built from the supplied configuration."""


class ConnectionError(HTTPActionError):
    """Transport-level failure: DNS, refused connection, timeout."""

    def __init__(self, phase: str, url: str, cause: Exception):
        self.phase = phase
        self.url = url
        self.cause = cause
        super().__init__(f"Error during making a {phase} request: {url}: {cause}")


class ReadError(HTTPActionError):
    """The connection succeeded but the response body could not be read."""

    def __init__(self, phase: str, reason):
        self.phase = phase
        self.reason = reason
        super().__init__(f"Error while reading {phase} response body. {reason}")


class StatusMismatchError(HTTPActionError):
    def __init__(self, phase: str, got: int, want: int, body_snippet: str = ""):
        self.phase = phase
        self.got = got
        self.want = want
        self.body_snippet = body_snippet
        message = f"{phase} HTTP request error. Response code: {got}"
        if body_snippet:
            message += f"\n\n{body_snippet}"
        super().__init__(message)


class UnsupportedContentTypeError(HTTPActionError):
    def __init__(self, content_type: Optional[str]):
        self.content_type = content_type or ""
        super().__init__(f"Content-Type is not a text type. Got: {self.content_type}")
