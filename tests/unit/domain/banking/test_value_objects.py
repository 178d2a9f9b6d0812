"""Tests for the banking value objects."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from banksync.domain.banking.value_objects import (
    BankAccount,
    BankTransaction,
    SourceCredentials,
)
from tests.shared.fixtures import make_account, make_transaction


class TestBankAccount:
    """Test cases for BankAccount."""

    def test_to_document_uses_camel_case(self):
        account = make_account("A1", balance="100.50")

        document = account.to_document()

        assert document == {
            "vendorId": "A1",
            "label": "Compte courant",
            "institutionLabel": "Banque Test",
            "type": "Checkings",
            "number": "A1",
            "balance": 100.5,
        }

    def test_storage_id_serialized_as_id(self):
        account = make_account("A1").with_storage_id("S1")

        assert account.is_persisted
        assert account.to_document()["_id"] == "S1"

    def test_from_document_round_trip(self):
        account = make_account("A1").with_storage_id("S1")

        restored = BankAccount.from_document(account.to_document())

        assert restored.storage_id == "S1"
        assert restored.vendor_id == "A1"
        assert restored.balance == Decimal("100")

    def test_integer_vendor_id_is_coerced(self):
        account = BankAccount(vendor_id=1001, label="x", number=1001)

        assert account.vendor_id == "1001"
        assert account.number == "1001"
        assert account.balance is None

    def test_is_immutable(self):
        account = make_account()

        with pytest.raises(PydanticValidationError):
            account.label = "other"


class TestBankTransaction:
    """Test cases for BankTransaction."""

    def test_to_document(self):
        tx = make_transaction("T1", "A1", amount="-12.50")

        document = tx.to_document()

        assert document["vendorId"] == "T1"
        assert document["vendorAccountId"] == "A1"
        assert document["dateOperation"] == "2024-06-14"
        assert document["amount"] == -12.5
        assert document["automaticCategoryId"] == 400110
        assert document["dateImport"].startswith("2024-06-15T08:00:00")
        assert "account" not in document

    def test_to_document_without_date_import(self):
        document = make_transaction().to_document(include_date_import=False)

        assert "dateImport" not in document

    def test_from_document(self):
        document = make_transaction().to_document()
        document["_id"] = "O1"
        document["account"] = "S1"

        tx = BankTransaction.from_document(document)

        assert tx.storage_id == "O1"
        assert tx.account == "S1"
        assert tx.date_import == datetime(2024, 6, 15, 8, 0, tzinfo=timezone.utc)

    def test_credit_and_debit(self):
        assert make_transaction(amount="5").is_credit()
        assert make_transaction(amount="-5").is_debit()


class TestSourceCredentials:
    """Test cases for SourceCredentials."""

    def test_secrets_are_hidden(self):
        credentials = SourceCredentials.from_plain(
            client_id="client",
            client_secret="s3cret",
            email="user@example.com",
            password="hunter2",
        )

        assert "s3cret" not in repr(credentials)
        assert "hunter2" not in str(credentials)
        assert credentials.password.get_secret_value() == "hunter2"
