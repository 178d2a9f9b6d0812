"""Document types written to the document store."""

from enum import Enum


class DocType(str, Enum):
    """Doctype names of the documents a sync run persists."""

    ACCOUNTS = "bank.accounts"
    OPERATIONS = "bank.operations"
    BALANCE_HISTORIES = "bank.balancehistories"
