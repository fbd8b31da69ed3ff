from decimal import Decimal

import pytest

from ..core.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAccountError,
    InvalidTransactionError,
)
from ..models import AccountCreate, TransactionRequest, TransferRequest
from ..services import AccountStore, LedgerService


@pytest.fixture
def service() -> LedgerService:
    return LedgerService(AccountStore())


def test_create_account_issues_sequential_ids(service: LedgerService) -> None:
    first = service.create_account(
        AccountCreate(holder="John Doe", initial_balance=Decimal("500.00"))
    )
    second = service.create_account(AccountCreate(holder="Jane Smith"))

    assert first.id == "ACC001"
    assert first.balance == Decimal("500.00")
    assert second.id == "ACC002"
    assert second.balance == Decimal("0")
    assert service.get_account("ACC001") == first


def test_create_account_rejects_blank_holder(service: LedgerService) -> None:
    payload = AccountCreate.model_construct(holder="  ", initial_balance=Decimal("1"))
    with pytest.raises(InvalidAccountError):
        service.create_account(payload)


def test_deposit_and_withdraw(service: LedgerService) -> None:
    account = service.create_account(
        AccountCreate(holder="John Doe", initial_balance=Decimal("500.00"))
    )

    deposited = service.deposit(account.id, TransactionRequest(amount=Decimal("150.00")))
    assert deposited.balance == Decimal("650.00")

    with pytest.raises(InsufficientFundsError):
        service.withdraw(account.id, TransactionRequest(amount=Decimal("800.00")))

    withdrawn = service.withdraw(account.id, TransactionRequest(amount=Decimal("50.00")))
    assert withdrawn.balance == Decimal("600.00")
    assert service.get_balance(account.id).balance == Decimal("600.00")


def test_withdraw_rejects_blank_account_id(service: LedgerService) -> None:
    with pytest.raises(InvalidTransactionError) as excinfo:
        service.withdraw("  ", TransactionRequest(amount=Decimal("1")))
    assert excinfo.value.transaction_type == "withdrawal"
    assert excinfo.value.amount == Decimal("1")


def test_transfer_between_accounts(service: LedgerService) -> None:
    source = service.create_account(
        AccountCreate(holder="John Doe", initial_balance=Decimal("500.00"))
    )
    dest = service.create_account(
        AccountCreate(holder="Jane Smith", initial_balance=Decimal("300.00"))
    )

    result = service.transfer(
        TransferRequest(
            source_account_id=source.id,
            dest_account_id=dest.id,
            amount=Decimal("100.00"),
        )
    )

    assert result.source.balance == Decimal("400.00")
    assert result.destination.balance == Decimal("400.00")


def test_transfer_with_only_destination_is_a_deposit(service: LedgerService) -> None:
    account = service.create_account(AccountCreate(holder="John Doe"))

    result = service.transfer(
        TransferRequest(dest_account_id=account.id, amount=Decimal("20"))
    )

    assert result.source is None
    assert result.destination.balance == Decimal("20")


def test_list_accounts_is_a_snapshot(service: LedgerService) -> None:
    service.create_account(AccountCreate(holder="John Doe"))
    accounts = service.list_accounts()
    accounts.clear()

    assert list(service.list_accounts()) == ["ACC001"]


def test_delete_account_and_ids_stay_unique(service: LedgerService) -> None:
    service.create_account(AccountCreate(holder="John Doe"))
    service.create_account(AccountCreate(holder="Jane Smith"))

    service.delete_account("ACC002")
    assert service.get_account("ACC002") is None

    with pytest.raises(AccountNotFoundError):
        service.delete_account("ACC002")

    replacement = service.create_account(AccountCreate(holder="Carol"))
    assert replacement.id == "ACC003"
