"""Tests for the banking and integration exceptions."""

from banksync.domain.banking.exceptions import (
    AuthenticationFailedError,
    SourceUnavailableError,
    TransactionFetchError,
)
from banksync.domain.integration.exceptions import (
    DuplicateVendorIdError,
    OrphanReferenceError,
)
from banksync.domain.integration.value_objects import RecordFailure
from banksync.domain.shared.exceptions import (
    ConflictError,
    DomainException,
    EntityNotFoundError,
    ErrorCode,
)


class TestDomainExceptions:
    """Test cases for the exception hierarchy."""

    def test_transaction_fetch_error_is_source_error(self):
        error = TransactionFetchError(account_vendor_id="1001", reason="timeout")

        assert isinstance(error, SourceUnavailableError)
        assert error.code == ErrorCode.TRANSACTION_FETCH_FAILED
        assert error.details["account_vendor_id"] == "1001"
        assert error.details["operation"] == "list_transactions"

    def test_authentication_error_code(self):
        error = AuthenticationFailedError(email="user@example.com")

        assert isinstance(error, DomainException)
        assert error.code == ErrorCode.AUTHENTICATION_FAILED
        assert error.details == {"email": "user@example.com"}

    def test_orphan_reference_is_not_found(self):
        error = OrphanReferenceError("T9", "A9")

        assert isinstance(error, EntityNotFoundError)
        assert error.code == ErrorCode.ORPHAN_REFERENCE
        assert "A9" in str(error)

    def test_duplicate_vendor_id_is_conflict(self):
        error = DuplicateVendorIdError("bank.accounts", "A1")

        assert isinstance(error, ConflictError)
        assert error.code == ErrorCode.DUPLICATE_VENDOR_ID

    def test_record_failure_from_error(self):
        failure = RecordFailure.from_error(
            "bank.operations",
            "T9",
            OrphanReferenceError("T9", "A9"),
        )

        assert failure.code == ErrorCode.ORPHAN_REFERENCE
        assert failure.to_dict() == {
            "doctype": "bank.operations",
            "vendor_id": "T9",
            "code": "ORPHAN_REFERENCE",
            "message": "Transaction T9 references unknown account A9",
        }
