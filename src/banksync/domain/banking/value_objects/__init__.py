"""Value objects for banking domain."""

from banksync.domain.banking.value_objects.balance_history import BalanceHistory
from banksync.domain.banking.value_objects.bank import Bank
from banksync.domain.banking.value_objects.bank_account import BankAccount
from banksync.domain.banking.value_objects.bank_transaction import (
    UNCATEGORIZED_CATEGORY_ID,
    BankTransaction,
)
from banksync.domain.banking.value_objects.doctype import DocType
from banksync.domain.banking.value_objects.source_credentials import (
    SourceCredentials,
)

__all__ = [
    "UNCATEGORIZED_CATEGORY_ID",
    "BalanceHistory",
    "Bank",
    "BankAccount",
    "BankTransaction",
    "DocType",
    "SourceCredentials",
]
