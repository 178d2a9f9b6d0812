"""Ports (interfaces) for the integration domain."""

from banksync.domain.integration.ports.document_store_port import (
    Document,
    DocumentStorePort,
    get_path,
    key_of,
    matches_selector,
)

__all__ = [
    "Document",
    "DocumentStorePort",
    "get_path",
    "key_of",
    "matches_selector",
]
