"""Tests for RecordNormalizer."""

from datetime import date, datetime, timezone
from decimal import Decimal
from types import MappingProxyType

from banksync.application.services import RecordNormalizer
from banksync.domain.banking.value_objects import Bank
from banksync.domain.shared.exceptions import ErrorCode
from banksync.domain.shared.time import FixedClock
from tests.shared.fixtures import make_raw_account, make_raw_transaction

NOW = datetime(2024, 6, 15, 8, 0, tzinfo=timezone.utc)


class TestRecordNormalizer:
    """Test cases for RecordNormalizer."""

    def setup_method(self):
        """Set up test fixtures."""
        banks = MappingProxyType(
            {"408": Bank(id=408, name="Banque Populaire", country_code="FR")},
        )
        self.normalizer = RecordNormalizer(banks, FixedClock(NOW))

    def test_normalize_account(self):
        account = self.normalizer.normalize_account(make_raw_account(1001, 1234.56))

        assert account.vendor_id == "1001"
        assert account.number == "1001"
        assert account.label == "Compte courant"
        assert account.institution_label == "Banque Populaire"
        assert account.type == "Checkings"
        assert account.balance == Decimal("1234.56")
        assert account.storage_id is None

    def test_unknown_bank_and_type(self):
        raw = make_raw_account(bank_id=1, account_type="crypto")

        account = self.normalizer.normalize_account(raw)

        assert account.institution_label == "none"
        assert account.type == "none"

    def test_account_without_balance(self):
        account = self.normalizer.normalize_account(make_raw_account(balance=None))

        assert account.balance is None

    def test_normalize_transaction(self):
        tx = self.normalizer.normalize_transaction(make_raw_transaction(5001, 1001))

        assert tx.vendor_id == "5001"
        assert tx.vendor_account_id == "1001"
        assert tx.date == date(2024, 6, 14)
        assert tx.date_operation == date(2024, 6, 14)
        assert tx.date_import == NOW
        assert tx.label == "CB Boulangerie"
        assert tx.original_label == "CB BOULANGERIE 13/06"
        assert tx.amount == Decimal("-12.5")
        assert tx.currency == "EUR"
        assert tx.automatic_category_id == 400110
        assert tx.type == "none"

    def test_unknown_or_missing_category_is_zero(self):
        unknown = make_raw_transaction(category_id=999999)
        missing = make_raw_transaction(category_id=None)

        assert self.normalizer.normalize_transaction(unknown).automatic_category_id == 0
        assert self.normalizer.normalize_transaction(missing).automatic_category_id == 0

    def test_account_fallback_when_record_has_none(self):
        raw = make_raw_transaction()
        del raw["account"]

        tx = self.normalizer.normalize_transaction(raw, account_vendor_id="1001")

        assert tx.vendor_account_id == "1001"

    def test_malformed_records_are_reported(self):
        raw_transactions = [
            make_raw_transaction(5001),
            {"id": 5002, "description": "no date", "amount": 1},
            make_raw_transaction(5003, amount="not a number"),
        ]

        transactions, failures = self.normalizer.normalize_transactions(
            raw_transactions,
        )

        assert [tx.vendor_id for tx in transactions] == ["5001"]
        assert [f.vendor_id for f in failures] == ["5002", "5003"]
        assert {f.code for f in failures} == {ErrorCode.VALIDATION_ERROR}
        assert {f.doctype for f in failures} == {"bank.operations"}

    def test_malformed_account_is_reported(self):
        accounts, failures = self.normalizer.normalize_accounts(
            [make_raw_account(1001), {"id": 1002}],
        )

        assert [a.vendor_id for a in accounts] == ["1001"]
        assert failures[0].vendor_id == "1002"
        assert failures[0].doctype == "bank.accounts"

    def test_batch_shares_one_import_timestamp(self):
        transactions, _ = self.normalizer.normalize_transactions(
            [make_raw_transaction(1), make_raw_transaction(2)],
        )

        assert {tx.date_import for tx in transactions} == {NOW}
