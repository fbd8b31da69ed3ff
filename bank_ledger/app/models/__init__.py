from .account import Account
from .schemas import (
    AccountCreate,
    AccountResponse,
    BalanceResponse,
    ErrorResponse,
    TransactionRequest,
    TransferRequest,
    TransferResponse,
    ValidationErrorItem,
    WithdrawalResponse,
)
from .transfer import (
    DepositIntent,
    MovementIntent,
    TransferIntent,
    TransferResult,
    WithdrawalIntent,
    classify_intent,
)

__all__ = [
    "Account",
    "AccountCreate",
    "AccountResponse",
    "BalanceResponse",
    "ErrorResponse",
    "TransactionRequest",
    "TransferRequest",
    "TransferResponse",
    "ValidationErrorItem",
    "WithdrawalResponse",
    "DepositIntent",
    "MovementIntent",
    "TransferIntent",
    "TransferResult",
    "WithdrawalIntent",
    "classify_intent",
]
