"""Tests for the BalanceHistory value object."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from banksync.domain.banking.value_objects import BalanceHistory
from banksync.domain.shared.exceptions import ValidationError


class TestBalanceHistory:
    """Test cases for BalanceHistory."""

    def test_empty_history(self):
        history = BalanceHistory.empty(2025, "S2")

        assert history.year == 2025
        assert history.account_id == "S2"
        assert history.balances == {}
        assert history.version == 1
        assert history.storage_id is None

    def test_with_balance_adds_day(self):
        history = BalanceHistory(
            year=2024,
            account_id="S1",
            balances={"2024-01-01": Decimal("90")},
        )

        merged = history.with_balance(date(2024, 6, 15), Decimal("100"))

        assert merged.balances == {
            "2024-01-01": Decimal("90"),
            "2024-06-15": Decimal("100"),
        }
        # Original is unchanged
        assert history.balances == {"2024-01-01": Decimal("90")}

    def test_with_balance_is_idempotent(self):
        history = BalanceHistory.empty(2024, "S1")
        day = date(2024, 6, 15)

        once = history.with_balance(day, Decimal("100"))
        twice = once.with_balance(day, Decimal("100"))

        assert once == twice

    def test_with_balance_overwrites_same_day(self):
        history = BalanceHistory.empty(2024, "S1").with_balance(
            date(2024, 6, 15),
            Decimal("100"),
        )

        updated = history.with_balance(date(2024, 6, 15), Decimal("80"))

        assert updated.balance_on(date(2024, 6, 15)) == Decimal("80")
        assert len(updated.balances) == 1

    def test_with_balance_rejects_other_year(self):
        history = BalanceHistory.empty(2024, "S1")

        with pytest.raises(ValidationError) as exc_info:
            history.with_balance(date(2025, 1, 1), Decimal("1"))

        assert exc_info.value.details["year"] == 2024

    def test_rejects_non_iso_balance_keys(self):
        with pytest.raises(PydanticValidationError):
            BalanceHistory(year=2024, account_id="S1", balances={"15/06": Decimal("1")})

    def test_to_document(self):
        history = BalanceHistory(
            year=2025,
            account_id="S2",
            balances={"2025-01-01": Decimal("50")},
        )

        assert history.to_document() == {
            "year": 2025,
            "balances": {"2025-01-01": 50.0},
            "metadata": {"version": 1},
            "relationships": {
                "account": {"data": {"_id": "S2", "_type": "bank.accounts"}},
            },
        }

    def test_from_document_keeps_storage_id(self):
        document = {
            "_id": "H1",
            "year": 2024,
            "balances": {"2024-01-01": 90},
            "metadata": {"version": 1},
            "relationships": {
                "account": {"data": {"_id": "S1", "_type": "bank.accounts"}},
            },
        }

        history = BalanceHistory.from_document(document)

        assert history.storage_id == "H1"
        assert history.account_id == "S1"
        assert history.balance_on(date(2024, 1, 1)) == Decimal("90")
        assert history.to_document()["_id"] == "H1"

    def test_from_document_without_relationship_fails(self):
        with pytest.raises(ValidationError):
            BalanceHistory.from_document({"_id": "H1", "year": 2024, "balances": {}})

    @pytest.mark.parametrize(
        "document",
        [
            {"balances": {"2024-01-01": 90}},
            {"year": 2024, "balances": {"2024-01-01": None}},
            {"year": 2024, "balances": {"01/01/2024": 90}},
        ],
    )
    def test_from_malformed_document_raises_domain_error(self, document):
        document = {
            "_id": "H1",
            "relationships": {"account": {"data": {"_id": "S1"}}},
            **document,
        }

        with pytest.raises(ValidationError) as exc_info:
            BalanceHistory.from_document(document)

        assert exc_info.value.details == {"_id": "H1"}

    def test_unknown_metadata_is_written_back(self):
        document = {
            "_id": "H1",
            "year": 2024,
            "balances": {},
            "metadata": {"version": 1, "importedBy": "konnector"},
            "relationships": {"account": {"data": {"_id": "S1"}}},
        }

        history = BalanceHistory.from_document(document)
        merged = history.with_balance(date(2024, 6, 15), Decimal("100"))

        assert history.version == 1
        assert merged.to_document()["metadata"] == {
            "version": 1,
            "importedBy": "konnector",
        }
