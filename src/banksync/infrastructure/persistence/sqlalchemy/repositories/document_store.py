"""SQLAlchemy implementation of DocumentStorePort."""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional, Sequence
from uuid import uuid4

from sqlalchemy import ColumnElement, Select, false, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from banksync.domain.integration.exceptions import (
    DocumentStoreUnavailableError,
    PersistenceConflictError,
)
from banksync.domain.integration.ports import (
    Document,
    DocumentStorePort,
    key_of,
    matches_selector,
)
from banksync.infrastructure.persistence.sqlalchemy.models import DocumentModel

logger = logging.getLogger(__name__)


def _index_key(key: Mapping[str, Any]) -> str:
    return json.dumps(key, sort_keys=True, default=str)


def _json_kind(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    return None


def _json_element(path: str, kind: str) -> ColumnElement:
    parts = tuple(path.split("."))
    element = DocumentModel.data[parts[0] if len(parts) == 1 else parts]
    return element.as_string() if kind == "string" else element.as_integer()


def selector_clauses(selector: Mapping[str, Any]) -> list[ColumnElement]:
    """
    SQL filters for the parts of ``selector`` the database can evaluate.

    String and integer equality and ``$in`` over values of one of those
    types become JSON path comparisons (``_id`` uses the id column). Other
    conditions are left to :func:`matches_selector`, which is applied to
    every row returned.
    """
    clauses: list[ColumnElement] = []
    for path, expected in selector.items():
        if isinstance(expected, Mapping) and "$in" in expected:
            values = list(expected["$in"])
            if not values:
                clauses.append(false())
                continue
            kinds = {_json_kind(value) for value in values}
            if len(kinds) != 1 or None in kinds:
                continue
            kind = kinds.pop()
            if path == "_id":
                if kind == "string":
                    clauses.append(DocumentModel.id.in_(values))
            else:
                clauses.append(_json_element(path, kind).in_(values))
            continue

        kind = _json_kind(expected)
        if kind is None:
            continue
        if path == "_id":
            if kind == "string":
                clauses.append(DocumentModel.id == expected)
            continue
        clauses.append(_json_element(path, kind) == expected)
    return clauses


def build_query(doctype: str, selector: Mapping[str, Any]) -> Select:
    """Rows of ``doctype`` narrowed by ``selector``, oldest first."""
    return (
        select(DocumentModel)
        .where(DocumentModel.doctype == doctype, *selector_clauses(selector))
        .order_by(DocumentModel.pk)
    )


class DocumentStoreSQLAlchemy(DocumentStorePort):
    """
    Document store on a single ``documents`` table.

    Every public call runs in its own session and transaction, so a write
    that succeeded stays committed even if a later one fails.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        engine: Optional[AsyncEngine] = None,
    ):
        self._session_factory = session_factory
        self._engine = engine

    @classmethod
    def from_url(cls, database_url: str) -> DocumentStoreSQLAlchemy:
        try:
            engine = create_async_engine(
                database_url,
                echo=False,
                pool_pre_ping=True,
            )
        except (SQLAlchemyError, ImportError) as e:
            logger.error("Cannot create database engine: %s", e)
            raise DocumentStoreUnavailableError("documents", str(e)) from e
        return cls(
            async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False),
            engine=engine,
        )

    @property
    def engine(self) -> Optional[AsyncEngine]:
        return self._engine

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    async def upsert_by_identifier(
        self,
        documents: Sequence[Document],
        doctype: str,
        key_fields: Sequence[str],
    ) -> list[Document]:
        if not documents:
            return []

        try:
            async with self._session_factory() as session, session.begin():
                index = await self._load_index(session, documents, doctype, key_fields)
                persisted = []
                for document in documents:
                    model = self._upsert_one(session, index, document, doctype, key_fields)
                    persisted.append(model.to_document())
                await session.flush()
        except SQLAlchemyError as e:
            logger.error("Upsert of %d %s documents failed: %s", len(documents), doctype, e)
            key = key_of(documents[0], key_fields) if len(documents) == 1 else None
            raise PersistenceConflictError(doctype, str(e.__cause__ or e), key=key) from e

        logger.debug("Upserted %d %s documents", len(persisted), doctype)
        return persisted

    async def query(
        self,
        doctype: str,
        selector: Mapping[str, Any],
        limit: Optional[int] = None,
    ) -> list[Document]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(build_query(doctype, selector))
                models = result.scalars().all()
        except SQLAlchemyError as e:
            logger.error("Query on %s failed: %s", doctype, e)
            raise DocumentStoreUnavailableError(doctype, str(e.__cause__ or e)) from e

        matches = []
        for model in models:
            document = model.to_document()
            if matches_selector(document, selector):
                matches.append(document)
                if limit is not None and len(matches) >= limit:
                    break
        return matches

    async def _load_index(
        self,
        session: AsyncSession,
        documents: Sequence[Document],
        doctype: str,
        key_fields: Sequence[str],
    ) -> dict[str, DocumentModel]:
        # Only rows sharing a key value with one of the incoming documents
        candidates = {
            field: {
                "$in": [
                    value
                    for value in (key_of(document, [field])[field] for document in documents)
                    if value is not None
                ],
            }
            for field in key_fields
        }

        result = await session.execute(build_query(doctype, candidates))
        index: dict[str, DocumentModel] = {}
        for model in result.scalars().all():
            index.setdefault(
                _index_key(key_of(model.to_document(), key_fields)),
                model,
            )
        return index

    def _upsert_one(
        self,
        session: AsyncSession,
        index: dict[str, DocumentModel],
        document: Document,
        doctype: str,
        key_fields: Sequence[str],
    ) -> DocumentModel:
        key = key_of(document, key_fields)
        data = {k: v for k, v in document.items() if k != "_id"}

        model = None
        if all(value is not None for value in key.values()):
            model = index.get(_index_key(key))

        if model is not None:
            # Attributes only present in the stored document are kept
            model.data = {**model.data, **data}
            return model

        model = DocumentModel(
            id=document.get("_id") or uuid4().hex,
            doctype=doctype,
            data=data,
        )
        session.add(model)
        index[_index_key(key_of(model.to_document(), key_fields))] = model
        return model
