"""Movement intents and their results.

A caller's request names an optional source and an optional destination. It is
classified once, at the boundary, into one of three closed variants so the
engine never has to re-inspect nullable ids.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from ..core.errors import InvalidAmountError, InvalidTransactionError
from .account import Account


def _is_blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


def _require_positive(amount: Decimal, transaction_type: str) -> None:
    if amount is None or amount <= 0:
        raise InvalidAmountError(f"{transaction_type.capitalize()} amount must be positive")


@dataclass(frozen=True)
class DepositIntent:
    destination_id: str
    amount: Decimal

    def __post_init__(self) -> None:
        _require_positive(self.amount, "deposit")
        if _is_blank(self.destination_id):
            raise InvalidTransactionError(
                "deposit", self.amount, "Account ID cannot be null or empty"
            )


@dataclass(frozen=True)
class WithdrawalIntent:
    source_id: str
    amount: Decimal

    def __post_init__(self) -> None:
        _require_positive(self.amount, "withdrawal")
        if _is_blank(self.source_id):
            raise InvalidTransactionError(
                "withdrawal", self.amount, "Account ID cannot be null or empty"
            )


@dataclass(frozen=True)
class TransferIntent:
    source_id: str
    destination_id: str
    amount: Decimal

    def __post_init__(self) -> None:
        _require_positive(self.amount, "transfer")
        if _is_blank(self.source_id) or _is_blank(self.destination_id):
            raise InvalidTransactionError(
                "transfer", self.amount, "Both account IDs are required for a transfer"
            )
        if self.source_id == self.destination_id:
            raise InvalidTransactionError(
                "transfer", self.amount, "Cannot transfer to the same account"
            )


MovementIntent = Union[DepositIntent, WithdrawalIntent, TransferIntent]


def classify_intent(
    source_id: Optional[str],
    destination_id: Optional[str],
    amount: Decimal,
) -> MovementIntent:
    has_source = not _is_blank(source_id)
    has_destination = not _is_blank(destination_id)

    if has_source and has_destination:
        return TransferIntent(source_id=source_id, destination_id=destination_id, amount=amount)
    if has_destination:
        return DepositIntent(destination_id=destination_id, amount=amount)
    if has_source:
        return WithdrawalIntent(source_id=source_id, amount=amount)
    raise InvalidTransactionError(
        details="Invalid transfer request: both accounts cannot be empty"
    )


@dataclass(frozen=True)
class TransferResult:
    source: Optional[Account] = None
    destination: Optional[Account] = None

    def __post_init__(self) -> None:
        if self.source is None and self.destination is None:
            raise ValueError("At least one account must be provided in the result")
