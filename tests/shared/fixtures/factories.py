"""
Test data factories for banking records.

Usage:
    from tests.shared.fixtures import make_account, make_transaction

    account = make_account("A1", balance="100")
"""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from banksync.domain.banking.value_objects import BankAccount, BankTransaction

IMPORTED_AT = datetime(2024, 6, 15, 8, 0, tzinfo=timezone.utc)


def make_account(
    vendor_id: str = "A1",
    balance: Optional[str] = "100",
    label: str = "Compte courant",
    **overrides: Any,
) -> BankAccount:
    fields = {
        "vendor_id": vendor_id,
        "label": label,
        "institution_label": "Banque Test",
        "type": "Checkings",
        "number": vendor_id,
        "balance": Decimal(balance) if balance is not None else None,
        **overrides,
    }
    return BankAccount(**fields)


def make_transaction(
    vendor_id: str = "T1",
    account_vendor_id: str = "A1",
    amount: str = "-12.50",
    **overrides: Any,
) -> BankTransaction:
    fields = {
        "vendor_id": vendor_id,
        "vendor_account_id": account_vendor_id,
        "date": date(2024, 6, 14),
        "date_operation": date(2024, 6, 14),
        "date_import": IMPORTED_AT,
        "label": "CB Boulangerie",
        "original_label": "CB BOULANGERIE 13/06",
        "amount": Decimal(amount),
        "currency": "EUR",
        "automatic_category_id": 400110,
        **overrides,
    }
    return BankTransaction(**fields)


def make_raw_account(
    account_id: int = 1001,
    balance: Any = 100.0,
    bank_id: int = 408,
    account_type: str = "checking",
) -> dict[str, Any]:
    """Raw account record as returned by GET /accounts."""
    return {
        "id": account_id,
        "resource_uri": f"/v2/accounts/{account_id}",
        "name": "Compte courant",
        "balance": balance,
        "status": 0,
        "type": account_type,
        "currency_code": "EUR",
        "bank": {"id": bank_id, "resource_uri": f"/v2/banks/{bank_id}"},
    }


def make_raw_transaction(
    transaction_id: int = 5001,
    account_id: int = 1001,
    amount: Any = -12.5,
    category_id: Optional[int] = 273,
) -> dict[str, Any]:
    """Raw transaction record as returned by GET /accounts/{id}/transactions."""
    return {
        "id": transaction_id,
        "resource_uri": f"/v2/transactions/{transaction_id}",
        "description": "CB Boulangerie",
        "raw_description": "CB BOULANGERIE 13/06",
        "amount": amount,
        "date": "2024-06-14",
        "updated_at": "2024-06-14T09:12:00Z",
        "is_deleted": False,
        "currency_code": "EUR",
        "category": {"id": category_id} if category_id is not None else None,
        "account": {"id": account_id},
    }
