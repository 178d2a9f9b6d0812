"""Document store port interface and selector semantics."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, Mapping, Optional, Sequence

Document = dict[str, Any]

_MISSING = object()


def get_path(document: Mapping[str, Any], path: str) -> Any:
    """Resolve a dotted path (``relationships.account.data._id``).

    Missing paths resolve to ``None``; use :func:`matches_selector` when
    "absent" and "null" must be told apart.
    """
    value = _resolve(document, path)
    return None if value is _MISSING else value


def _resolve(document: Mapping[str, Any], path: str) -> Any:
    current: Any = document
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return _MISSING
        current = current[part]
    return current


def matches_selector(document: Mapping[str, Any], selector: Mapping[str, Any]) -> bool:
    """Check a document against an equality selector.

    Keys are dotted paths. Values are compared for equality, except
    ``{"$in": [...]}`` which matches any of the listed values. An empty
    selector matches every document.
    """
    for path, expected in selector.items():
        actual = _resolve(document, path)
        if actual is _MISSING:
            return False
        if isinstance(expected, Mapping) and "$in" in expected:
            if actual not in expected["$in"]:
                return False
        elif actual != expected:
            return False
    return True


def key_of(document: Mapping[str, Any], key_fields: Iterable[str]) -> dict[str, Any]:
    """Selector matching ``document`` on ``key_fields``."""
    return {field: get_path(document, field) for field in key_fields}


class DocumentStorePort(ABC):
    """
    Interface for the document store (the persistence sink of a sync run).

    Documents are plain dicts; the store keeps the storage identifier under
    ``_id``.
    """

    @abstractmethod
    async def upsert_by_identifier(
        self,
        documents: Sequence[Document],
        doctype: str,
        key_fields: Sequence[str],
    ) -> list[Document]:
        """
        Create or update documents, matching existing ones on ``key_fields``.

        Existing documents keep their ``_id`` and get the incoming attributes
        merged over the stored ones; new documents get a fresh ``_id``.

        Parameters
        ----------
        documents
            Documents to write
        doctype
            Document type
        key_fields
            Dotted paths identifying a document (e.g. ``["vendorId"]``)

        Returns
        -------
        The persisted documents, ``_id`` populated, in input order

        Raises
        ------
        PersistenceConflictError
            If the store rejects the write
        """

    @abstractmethod
    async def query(
        self,
        doctype: str,
        selector: Mapping[str, Any],
        limit: Optional[int] = None,
    ) -> list[Document]:
        """
        Find documents matching ``selector``, oldest first.

        Parameters
        ----------
        doctype
            Document type
        selector
            Equality selector, see :func:`matches_selector`
        limit
            Maximum number of documents to return

        Returns
        -------
        Matching documents

        Raises
        ------
        DocumentStoreUnavailableError
            If the store cannot be read
        """
