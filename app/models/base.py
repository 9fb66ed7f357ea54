"""Declarative Base Classes"""

import uuid
from sqlalchemy import Column, DateTime, Boolean, Uuid

from app.database import Base
from app.utils.time import get_utc_now


class BaseModel(Base):
    """
    Abstract parent for mutable entities: UUID key plus naive-UTC
    created/updated timestamps.
    """
    __abstract__ = True

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    created_at = Column(DateTime, default=get_utc_now, nullable=False, index=True)
    updated_at = Column(DateTime, default=get_utc_now, onupdate=get_utc_now, nullable=False)


class StatusMixin:
    """is_active flag; False means suspended"""
    is_active = Column(Boolean, default=True, nullable=False, index=True)
