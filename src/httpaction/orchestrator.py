"""
orchestrator.py
---------------
Core lifecycle logic. Runs one phase (create, update or delete) per external
lifecycle event, or a one-shot query, using a single HTTPExecutor call.

The host supplies the current record, the desired action configuration and
whether any update field changed; this module never diffs state itself and
never mutates the record it is given.
"""
import logging
import typing as _typing
import uuid
from datetime import datetime, timezone

from .executors.base import BaseExecutor
from .executors.http_exec import HTTPExecutor
from .merger import merge_phase
from .models import ActionConfig, LifecycleRecord, Phase, QueryConfig, QueryResult, RequestSpec

logger = logging.getLogger(__name__)


def _new_identifier() -> str:
    return str(uuid.uuid4())


def _timestamp_identifier() -> str:
    return str(datetime.now(timezone.utc))


def run_query(spec: _typing.Union[RequestSpec, QueryConfig], executor: _typing.Optional[BaseExecutor] = None) -> QueryResult:
    """
    One-shot request. The identifier is fresh on every call, even for
    identical inputs.
    """
    executor = executor or HTTPExecutor()
    if isinstance(spec, QueryConfig):
        spec = spec.to_request_spec()
    outcome = executor.execute(spec, {"phase": Phase.QUERY})
    return QueryResult(id=_new_identifier(), body=outcome.text, headers=dict(outcome.headers))


def run_lifecycle_phase(
    event: Phase,
    record: _typing.Optional[LifecycleRecord],
    action: ActionConfig,
    changed: bool = True,
    executor: _typing.Optional[BaseExecutor] = None,
) -> LifecycleRecord:
    """
    Executes the phase for `event` and returns the updated record.

    create: `record` may be None; triggers are taken from it when given.
    update: when `changed` is False the input record is returned as is.
    delete: the record is returned unchanged; removing it is up to the host.
    Any error propagates before the record is touched.
    """
    event = Phase(event)
    if event is Phase.QUERY:
        raise ValueError("Use run_query for query mode")
    if record is None:
        if event is not Phase.CREATE:
            raise ValueError(f"No existing record to {event.value}")
        record = LifecycleRecord()

    if event is Phase.UPDATE and not changed:
        logger.debug("update: no change detected for %s", record.id)
        return record

    config = action.phase(event)
    if config is None or config.method is None:
        logger.info("%s: no method configured, skipping request", event.value)
        if event is Phase.DELETE:
            return record
        updated = record.model_copy(deep=True)
        updated.phases = merge_phase(record.phases, event, config)
        if event is Phase.CREATE:
            updated.id = _timestamp_identifier()
        return updated

    executor = executor or HTTPExecutor()
    outcome = executor.execute(config.to_request_spec(), {"phase": event})

    if event is Phase.DELETE:
        return record

    updated = record.model_copy(deep=True)
    updated.phases = merge_phase(record.phases, event, config, outcome)
    if event is Phase.CREATE:
        updated.id = _new_identifier()
    logger.info("%s: record %s updated", event.value, updated.id)
    return updated
