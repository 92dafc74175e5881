"""
app.py
--------
Main FastAPI application entrypoint. Exposes query mode and the create/update/delete
lifecycle of HTTP resources, persisting each resource's record in the database.
State diffing (force-new and update-change detection) lives here, not in the core.
"""
import logging
from fastapi import FastAPI, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List
from httpaction.config import configure_logging
from httpaction.errors import ConfigurationError, HTTPActionError
from httpaction.merger import merge_phase
from httpaction.models import ActionConfig, LifecycleRecord, Phase, QueryConfig, QueryResult
from httpaction.orchestrator import run_lifecycle_phase, run_query
from httpaction.db import (
    SessionLocal,
    init_db,
    HTTPResource, ResourceCreate, ResourceUpdate, ResourceOut,
    save_record,
)

configure_logging()
logger = logging.getLogger(__name__)

# Initialize DB
init_db()

app = FastAPI(title="HTTP Action API")


# -------------------------------
# Dependency: get DB session
# -------------------------------
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _to_http_error(e: HTTPActionError) -> HTTPException:
    logger.warning("request failed: %s", e)
    if isinstance(e, ConfigurationError):
        return HTTPException(status_code=400, detail=str(e))
    return HTTPException(status_code=502, detail=str(e))


def _get_resource(db: Session, resource_id: str) -> HTTPResource:
    resource = db.query(HTTPResource).filter(HTTPResource.id == resource_id).first()
    if not resource:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource


def _declared(phase_config):
    return phase_config.declared() if phase_config is not None else None


def requires_replacement(record: LifecycleRecord, payload: ResourceUpdate) -> bool:
    """Triggers and create fields cannot be updated in place."""
    return (
        record.triggers != payload.triggers
        or _declared(record.phases.create) != _declared(payload.action.create)
    )


def update_changed(record: LifecycleRecord, payload: ResourceUpdate) -> bool:
    return _declared(record.phases.update) != _declared(payload.action.update)


def _create(payload: ResourceCreate) -> LifecycleRecord:
    record = run_lifecycle_phase(Phase.CREATE, LifecycleRecord(triggers=payload.triggers), payload.action)
    # Remember the update/delete configuration so later changes can be detected
    phases = merge_phase(record.phases, Phase.UPDATE, payload.action.update)
    record.phases = merge_phase(phases, Phase.DELETE, payload.action.delete)
    return record


# -------------------------------
# Query mode
# -------------------------------
@app.post("/queries/", response_model=QueryResult)
def query(config: QueryConfig):
    try:
        return run_query(config)
    except HTTPActionError as e:
        raise _to_http_error(e)


# -------------------------------
# Resources lifecycle
# -------------------------------
@app.post("/resources/", response_model=ResourceOut)
def create_resource(payload: ResourceCreate, db: Session = Depends(get_db)):
    try:
        record = _create(payload)
    except HTTPActionError as e:
        raise _to_http_error(e)
    save_record(db, record)
    return record


@app.get("/resources/", response_model=List[ResourceOut])
def list_resources(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    resources = db.query(HTTPResource).offset(skip).limit(limit).all()
    return [r.to_record() for r in resources]


@app.get("/resources/{resource_id}", response_model=ResourceOut)
def get_resource(resource_id: str, db: Session = Depends(get_db)):
    return _get_resource(db, resource_id).to_record()


@app.put("/resources/{resource_id}", response_model=ResourceOut)
def update_resource(resource_id: str, payload: ResourceUpdate, db: Session = Depends(get_db)):
    resource = _get_resource(db, resource_id)
    record = resource.to_record()

    if requires_replacement(record, payload):
        logger.info("resource %s must be replaced", resource_id)
        try:
            run_lifecycle_phase(Phase.DELETE, record, ActionConfig(delete=record.phases.delete))
            db.delete(resource)
            db.commit()
            new_record = _create(payload)
        except HTTPActionError as e:
            raise _to_http_error(e)
        save_record(db, new_record)
        return new_record

    try:
        record = run_lifecycle_phase(
            Phase.UPDATE, record, payload.action, changed=update_changed(record, payload)
        )
    except HTTPActionError as e:
        raise _to_http_error(e)
    record = record.model_copy(deep=True)
    record.phases = merge_phase(record.phases, Phase.DELETE, payload.action.delete)
    save_record(db, record)
    return record


@app.delete("/resources/{resource_id}")
def delete_resource(resource_id: str, db: Session = Depends(get_db)):
    resource = _get_resource(db, resource_id)
    record = resource.to_record()
    try:
        run_lifecycle_phase(Phase.DELETE, record, ActionConfig(delete=record.phases.delete))
    except HTTPActionError as e:
        raise _to_http_error(e)
    db.delete(resource)
    db.commit()
    return {"detail": "Resource deleted", "id": resource_id}
