"""Shared fixtures and test doubles."""

from tests.shared.fixtures.document_store import InMemoryDocumentStore
from tests.shared.fixtures.factories import (
    make_account,
    make_raw_account,
    make_raw_transaction,
    make_transaction,
)

__all__ = [
    "InMemoryDocumentStore",
    "make_account",
    "make_raw_account",
    "make_raw_transaction",
    "make_transaction",
]
