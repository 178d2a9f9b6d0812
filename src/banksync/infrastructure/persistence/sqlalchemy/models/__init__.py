"""SQLAlchemy models."""

from banksync.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)
from banksync.infrastructure.persistence.sqlalchemy.models.document_model import (
    DocumentModel,
)

__all__ = [
    "Base",
    "DocumentModel",
    "TimestampMixin",
]
