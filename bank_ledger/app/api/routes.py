from fastapi import APIRouter, Depends, Response, status

from ..core.dependencies import get_ledger_service
from ..core.errors import AccountNotFoundError
from ..models import (
    AccountCreate,
    AccountResponse,
    BalanceResponse,
    TransactionRequest,
    TransferRequest,
    TransferResponse,
    WithdrawalResponse,
)
from ..services import LedgerService


router = APIRouter(prefix="/api/accounts", tags=["accounts"])

def _to_response(account) -> AccountResponse:
    return AccountResponse.from_account(account)

@router.get("", response_model=dict[str, AccountResponse])
def list_accounts(
    service: LedgerService = Depends(get_ledger_service),
) -> dict[str, AccountResponse]:
    return {
        account_id: _to_response(account)
        for account_id, account in service.list_accounts().items()
    }

@router.post("", response_model=AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    payload: AccountCreate,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    return _to_response(service.create_account(payload))

@router.post("/transfer", response_model=TransferResponse)
def transfer(
    payload: TransferRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> TransferResponse:
    result = service.transfer(payload)
    return TransferResponse(
        source=_to_response(result.source) if result.source else None,
        dest=_to_response(result.destination) if result.destination else None,
        amount=payload.amount,
    )

@router.get("/{account_id}", response_model=AccountResponse)
def get_account(
    account_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    account = service.get_account(account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    return _to_response(account)

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> Response:
    service.delete_account(account_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

@router.get("/{account_id}/balance", response_model=BalanceResponse)
def get_balance(
    account_id: str,
    service: LedgerService = Depends(get_ledger_service),
) -> BalanceResponse:
    account = service.get_balance(account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    return BalanceResponse(
        account_id=account.id,
        balance=account.balance,
        account_holder=account.holder,
    )

@router.post("/{account_id}/deposit", response_model=AccountResponse)
def deposit(
    account_id: str,
    payload: TransactionRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> AccountResponse:
    account = service.deposit(account_id, payload)
    if account is None:
        raise AccountNotFoundError(account_id)
    return _to_response(account)

@router.post("/{account_id}/withdraw", response_model=WithdrawalResponse)
def withdraw(
    account_id: str,
    payload: TransactionRequest,
    service: LedgerService = Depends(get_ledger_service),
) -> WithdrawalResponse:
    account = service.withdraw(account_id, payload)
    if account is None:
        raise AccountNotFoundError(account_id)
    return WithdrawalResponse(account=_to_response(account))

__all__ = ["router"]
