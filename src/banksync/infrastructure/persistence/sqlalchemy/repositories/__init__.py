"""SQLAlchemy repository implementations."""

from banksync.infrastructure.persistence.sqlalchemy.repositories.document_store import (  # NOQA: E501
    DocumentStoreSQLAlchemy,
)

__all__ = [
    "DocumentStoreSQLAlchemy",
]
