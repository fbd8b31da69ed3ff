from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from ..core.errors import InsufficientFundsError, InvalidAccountError, InvalidAmountError


@dataclass(frozen=True)
class Account:
    """A single ledger entry. Balance-changing methods return a new value."""

    id: str
    holder: str
    balance: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise InvalidAccountError("Account ID cannot be null or empty")
        if not isinstance(self.holder, str) or not self.holder.strip():
            raise InvalidAccountError("Account holder cannot be null or empty")
        if not isinstance(self.balance, Decimal):
            raise InvalidAccountError("Balance must be a Decimal")
        if self.balance < 0:
            raise InvalidAccountError("Balance cannot be negative")

    @classmethod
    def zero(cls, account_id: str, holder: str) -> Account:
        return cls(id=account_id, holder=holder, balance=Decimal("0"))

    def deposit(self, amount: Decimal) -> Account:
        if amount is None or amount <= 0:
            raise InvalidAmountError("Deposit amount must be positive")
        return replace(self, balance=self.balance + amount)

    def withdraw(self, amount: Decimal) -> Account:
        if amount is None or amount <= 0:
            raise InvalidAmountError("Withdrawal amount must be positive")
        if not self.has_sufficient_funds(amount):
            raise InsufficientFundsError(self.id, amount, self.balance)
        return replace(self, balance=self.balance - amount)

    def has_sufficient_funds(self, amount: Decimal) -> bool:
        return amount is not None and amount <= self.balance

    @property
    def is_active(self) -> bool:
        return self.balance > 0
