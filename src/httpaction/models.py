"""
models.py
---------
Pydantic models for request execution and the lifecycle record.
Phase configuration is validated here (method enum, status range) so the
executor and orchestrator never re-validate it.
"""
import enum
from dataclasses import dataclass, field
from typing import Dict, Optional

from pydantic import BaseModel, Field


class Phase(str, enum.Enum):
    QUERY = "query"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class HTTPMethod(str, enum.Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"
    PUT = "PUT"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    TRACE = "TRACE"


# Fields the user declares for a phase; everything else on a record is computed.
DECLARED_FIELDS = {"url", "method", "request_headers", "request_body", "response_status_code"}


class RequestSpec(BaseModel):
    method: str
    url: str
    headers: Dict[str, str] = {}
    body: Optional[str] = None
    expected_status: int = 200

    class Config:
        frozen = True


@dataclass(frozen=True)
class ResponseOutcome:
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def text(self) -> str:
        """
        Body decoded as UTF-8. Accepted responses declare no charset, utf-8 or
        us-ascii; undecodable bytes (status snippets of rejected responses,
        text/* bodies that lie about their encoding) become U+FFFD.
        """
        return self.body.decode("utf-8", errors="replace")


# Phase configuration

class PhaseConfig(BaseModel):
    url: str
    method: Optional[HTTPMethod] = None
    request_headers: Dict[str, str] = {}
    request_body: Optional[str] = None
    response_status_code: int = Field(200, ge=100, le=599)

    def declared(self) -> dict:
        return self.model_dump(include=DECLARED_FIELDS, mode="json")

    def to_request_spec(self) -> RequestSpec:
        return RequestSpec(
            method=self.method.value,
            url=self.url,
            headers=dict(self.request_headers),
            body=self.request_body,
            expected_status=self.response_status_code,
        )


class CreatePhaseConfig(PhaseConfig):
    method: Optional[HTTPMethod] = HTTPMethod.POST


class QueryConfig(PhaseConfig):
    method: HTTPMethod = HTTPMethod.GET


class ActionConfig(BaseModel):
    create: Optional[CreatePhaseConfig] = None
    update: Optional[PhaseConfig] = None
    delete: Optional[PhaseConfig] = None

    def phase(self, phase: Phase) -> Optional[PhaseConfig]:
        return getattr(self, Phase(phase).value)


# Lifecycle record

class PhaseRecord(PhaseConfig):
    body: str = ""
    headers: Dict[str, str] = {}


class Phases(BaseModel):
    create: Optional[PhaseRecord] = None
    update: Optional[PhaseRecord] = None
    delete: Optional[PhaseConfig] = None


class LifecycleRecord(BaseModel):
    id: Optional[str] = None
    triggers: Dict[str, str] = {}
    phases: Phases = Phases()


class QueryResult(BaseModel):
    id: str
    body: str
    headers: Dict[str, str] = {}
