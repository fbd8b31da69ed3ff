from __future__ import annotations

import logging

from ..core.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidTransactionError,
    LedgerError,
    RepositoryError,
)
from ..models import (
    Account,
    DepositIntent,
    MovementIntent,
    TransferIntent,
    TransferResult,
    WithdrawalIntent,
)
from .store import AccountStore


logger = logging.getLogger(__name__)

ENTITY_TYPE = "Account"


class TransferEngine:
    """Resolves deposit, withdrawal and transfer intents against an AccountStore.

    Each resolution reads, checks and writes while holding the store locks of
    every account involved, so concurrent callers can never commit against a
    stale balance. Typed ledger failures propagate unchanged; anything else
    raised during the store interaction becomes a ``RepositoryError``.
    """

    def __init__(self, store: AccountStore) -> None:
        self.store = store

    def execute(self, intent: MovementIntent) -> TransferResult:
        if isinstance(intent, DepositIntent):
            return self._execute_deposit(intent)
        if isinstance(intent, WithdrawalIntent):
            return self._execute_withdrawal(intent)
        if isinstance(intent, TransferIntent):
            return self._execute_transfer(intent)
        raise InvalidTransactionError(
            details="Invalid transfer request: both accounts cannot be empty"
        )

    # ------------------------------------------------------------------
    # Helper utilities
    # ------------------------------------------------------------------
    def _require(self, account_id: str) -> Account:
        account = self.store.get(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        return account

    def _check_funds(self, account: Account, amount) -> None:
        if not account.has_sufficient_funds(amount):
            raise InsufficientFundsError(account.id, amount, account.balance)

    # ------------------------------------------------------------------
    # Resolution per intent
    # ------------------------------------------------------------------
    def _execute_deposit(self, intent: DepositIntent) -> TransferResult:
        try:
            with self.store.locked(intent.destination_id):
                destination = self._require(intent.destination_id)
                updated = destination.deposit(intent.amount)
                self.store.put(updated)
        except LedgerError:
            raise
        except Exception as exc:
            logger.exception(
                "engine.deposit.failed",
                extra={"account_id": intent.destination_id},
            )
            raise RepositoryError("deposit", ENTITY_TYPE, intent.destination_id, exc) from exc

        return TransferResult(source=None, destination=updated)

    def _execute_withdrawal(self, intent: WithdrawalIntent) -> TransferResult:
        try:
            with self.store.locked(intent.source_id):
                source = self._require(intent.source_id)
                self._check_funds(source, intent.amount)
                updated = source.withdraw(intent.amount)
                self.store.put(updated)
        except LedgerError:
            raise
        except Exception as exc:
            logger.exception(
                "engine.withdrawal.failed",
                extra={"account_id": intent.source_id},
            )
            raise RepositoryError("withdrawal", ENTITY_TYPE, intent.source_id, exc) from exc

        return TransferResult(source=updated, destination=None)

    def _execute_transfer(self, intent: TransferIntent) -> TransferResult:
        try:
            with self.store.locked(intent.source_id, intent.destination_id):
                source = self._require(intent.source_id)
                destination = self._require(intent.destination_id)
                self._check_funds(source, intent.amount)

                updated_source = source.withdraw(intent.amount)
                updated_destination = destination.deposit(intent.amount)
                self.store.put_all(updated_source, updated_destination)
        except LedgerError:
            raise
        except Exception as exc:
            entity_id = f"{intent.source_id}->{intent.destination_id}"
            logger.exception("engine.transfer.failed", extra={"entity_id": entity_id})
            raise RepositoryError("transfer", ENTITY_TYPE, entity_id, exc) from exc

        return TransferResult(source=updated_source, destination=updated_destination)
