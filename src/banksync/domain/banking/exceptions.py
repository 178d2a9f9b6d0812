"""Banking domain exceptions.

These exceptions represent failures of the upstream banking-aggregation
source. All of them are fatal for the current sync run.
"""

from banksync.domain.shared.exceptions import DomainException, ErrorCode


class BankingDomainError(DomainException):
    """Base exception for banking domain errors."""


class SourceUnavailableError(BankingDomainError):
    """Raised when the aggregation source cannot be reached or fails.

    This is a general fetch error. Use more specific subclasses when the
    failing operation is known (e.g. TransactionFetchError).
    """

    def __init__(
        self,
        message: str = "Banking source is unavailable",
        operation: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.SOURCE_UNAVAILABLE,
            details={"operation": operation} if operation else None,
        )


class AuthenticationFailedError(BankingDomainError):
    """Raised when the aggregation source rejects the credentials."""

    def __init__(
        self,
        message: str = "Authentication failed. Please check your credentials.",
        email: str | None = None,
    ) -> None:
        super().__init__(
            message=message,
            code=ErrorCode.AUTHENTICATION_FAILED,
            details={"email": email} if email else None,
        )


class TransactionFetchError(SourceUnavailableError):
    """Raised when fetching the transactions of one account fails."""

    def __init__(
        self,
        message: str = "Failed to fetch transactions from source",
        account_vendor_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        super().__init__(message=message, operation="list_transactions")
        self.code = ErrorCode.TRANSACTION_FETCH_FAILED
        self.details.update(
            {"account_vendor_id": account_vendor_id, "reason": reason},
        )
