from __future__ import annotations

from decimal import Decimal
from typing import Optional


class LedgerError(Exception):
    """Base class for every typed failure the ledger surfaces to callers."""


class InvalidAccountError(LedgerError):
    """Raised when an account value has an empty id or holder, or a negative balance."""


class InvalidAmountError(LedgerError):
    """Raised when a money amount is zero or negative."""


class InvalidTransactionError(LedgerError):
    """Raised for malformed movement requests (no endpoints, self-transfer, blank id)."""

    def __init__(
        self,
        transaction_type: str = "unknown",
        amount: Optional[Decimal] = None,
        details: Optional[str] = None,
    ) -> None:
        self.transaction_type = transaction_type
        self.amount = amount
        self.details = details
        if transaction_type == "unknown" and amount is None:
            message = details or "Invalid transaction"
        else:
            message = (
                f"Invalid {transaction_type} transaction. "
                f"Amount: {amount}. Details: {details}"
            )
        super().__init__(message)


class AccountNotFoundError(LedgerError):
    """Raised when an account id is missing from the store."""

    def __init__(self, account_id: str) -> None:
        self.account_id = account_id
        super().__init__(f"Account not found with ID: {account_id}")


class InsufficientFundsError(LedgerError):
    """Raised when a withdrawal/transfer would drop balance below zero."""

    def __init__(self, account_id: str, requested: Decimal, available: Decimal) -> None:
        self.account_id = account_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient funds in account {account_id}. "
            f"Requested: {requested}, Available: {available}"
        )

    @property
    def shortfall(self) -> Decimal:
        return self.requested - self.available


class RepositoryError(LedgerError):
    """Wraps an unexpected failure raised while reading or writing the account store."""

    def __init__(
        self,
        operation: str,
        entity_type: str,
        entity_id: Optional[str],
        cause: Optional[BaseException] = None,
    ) -> None:
        self.operation = operation
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.cause = cause
        super().__init__(
            f"Repository error during {operation} operation "
            f"for {entity_type} with ID {entity_id}"
        )


class LockTimeoutError(TimeoutError):
    """Raised by the store when an account lock cannot be acquired in time."""

    def __init__(self, account_id: str, timeout: float) -> None:
        self.account_id = account_id
        self.timeout = timeout
        super().__init__(f"Timed out after {timeout}s waiting for lock on {account_id}")
