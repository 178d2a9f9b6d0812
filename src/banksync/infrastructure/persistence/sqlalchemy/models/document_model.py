"""SQLAlchemy model for stored documents."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column

from banksync.infrastructure.persistence.sqlalchemy.models.base import (
    Base,
    TimestampMixin,
)


class DocumentModel(Base, TimestampMixin):
    """One JSON document of any doctype."""

    __tablename__ = "documents"

    # Insertion order, used to return query results oldest first
    pk: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)

    # Storage identifier exposed as "_id"
    id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    doctype: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(default=dict)

    __table_args__ = (Index("idx_documents_doctype", "doctype", "pk"),)

    def to_document(self) -> dict[str, Any]:
        return {**self.data, "_id": self.id}

    def __repr__(self) -> str:
        return f"<DocumentModel(id={self.id}, doctype={self.doctype})>"
