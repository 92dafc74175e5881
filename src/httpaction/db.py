"""
db.py
-----
Defines the SQLAlchemy ORM model that persists lifecycle records.
Defines Pydantic schemas for API validation.
Handles database setup and initialization.
"""
from sqlalchemy import create_engine, Column, String, JSON, DateTime, func
from sqlalchemy.orm import declarative_base, sessionmaker
from pydantic import BaseModel
from typing import Dict
from .config import settings
from .models import ActionConfig, LifecycleRecord, Phases

Base = declarative_base()


# Models

class HTTPResource(Base):
    __tablename__ = "http_resources"
    id = Column(String, primary_key=True)
    triggers = Column(JSON, default=dict)
    phases = Column(JSON, nullable=False)  # create/update/delete snapshots with results
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    def to_record(self) -> LifecycleRecord:
        return LifecycleRecord(
            id=self.id,
            triggers=self.triggers or {},
            phases=Phases.model_validate(self.phases or {}),
        )


def save_record(session, record: LifecycleRecord) -> HTTPResource:
    row = session.query(HTTPResource).filter(HTTPResource.id == record.id).first()
    if row is None:
        row = HTTPResource(id=record.id)
        session.add(row)
    row.triggers = dict(record.triggers)
    row.phases = record.phases.model_dump(mode="json")
    session.commit()
    session.refresh(row)
    return row


# Pydantic Schemas

class ResourceBase(BaseModel):
    triggers: Dict[str, str] = {}
    action: ActionConfig

class ResourceCreate(ResourceBase):
    pass

class ResourceUpdate(ResourceBase):
    pass

class ResourceOut(BaseModel):
    id: str
    triggers: Dict[str, str] = {}
    phases: Phases
    class Config:
        from_attributes = True


# Database setup

engine = create_engine(settings.DB_URL, echo=False)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def init_db(bind=None):
    Base.metadata.create_all(bind=bind or engine)
