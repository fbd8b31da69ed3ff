from __future__ import annotations

import logging
from typing import Dict, Optional

from ..core.errors import (
    AccountNotFoundError,
    InvalidTransactionError,
    LedgerError,
    RepositoryError,
)
from ..models import (
    Account,
    AccountCreate,
    DepositIntent,
    TransactionRequest,
    TransferRequest,
    TransferResult,
    WithdrawalIntent,
)
from .engine import ENTITY_TYPE, TransferEngine
from .store import AccountStore


logger = logging.getLogger(__name__)


class LedgerService:
    def __init__(
        self,
        store: AccountStore,
        engine: Optional[TransferEngine] = None,
    ) -> None:
        self.store = store
        self.engine = engine or TransferEngine(store)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def get_account(self, account_id: str) -> Optional[Account]:
        return self.store.get(account_id)

    def get_balance(self, account_id: str) -> Optional[Account]:
        return self.store.get(account_id)

    def list_accounts(self) -> Dict[str, Account]:
        return self.store.list()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def create_account(self, payload: AccountCreate) -> Account:
        account_id = self.store.next_id()
        account = Account(
            id=account_id,
            holder=payload.holder,
            balance=payload.initial_balance,
        )
        try:
            self.store.put(account)
        except Exception as exc:
            raise RepositoryError("create", ENTITY_TYPE, account_id, exc) from exc

        logger.info(
            "account.created",
            extra={"account_id": account.id, "holder": account.holder},
        )
        return account

    def delete_account(self, account_id: str) -> None:
        try:
            with self.store.locked(account_id):
                if not self.store.contains(account_id):
                    raise AccountNotFoundError(account_id)
                self.store.remove(account_id)
        except LedgerError:
            raise
        except Exception as exc:
            raise RepositoryError("delete", ENTITY_TYPE, account_id, exc) from exc

        logger.info("account.deleted", extra={"account_id": account_id})

    def deposit(self, account_id: str, payload: TransactionRequest) -> Optional[Account]:
        intent = DepositIntent(destination_id=account_id, amount=payload.amount)
        result = self.engine.execute(intent)

        logger.info(
            "account.deposit",
            extra={
                "account_id": account_id,
                "amount": str(payload.amount),
                "balance": str(result.destination.balance),
            },
        )
        return result.destination

    def withdraw(self, account_id: str, payload: TransactionRequest) -> Optional[Account]:
        if account_id is None or not account_id.strip():
            raise InvalidTransactionError(
                "withdrawal", payload.amount, "Account ID cannot be null or empty"
            )

        intent = WithdrawalIntent(source_id=account_id, amount=payload.amount)
        result = self.engine.execute(intent)

        logger.info(
            "account.withdraw",
            extra={
                "account_id": account_id,
                "amount": str(payload.amount),
                "balance": str(result.source.balance),
            },
        )
        return result.source

    def transfer(self, payload: TransferRequest) -> TransferResult:
        result = self.engine.execute(payload.to_intent())

        logger.info(
            "account.transfer",
            extra={
                "source_account_id": payload.source_account_id,
                "dest_account_id": payload.dest_account_id,
                "amount": str(payload.amount),
            },
        )
        return result
