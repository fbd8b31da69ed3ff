from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .account import Account
from .transfer import MovementIntent, classify_intent


class AccountCreate(BaseModel):
    holder: str = Field(..., min_length=1, description="Name of the account holder")
    initial_balance: Decimal = Field(default=Decimal("0"), ge=0)

    @model_validator(mode="after")
    def _holder_not_blank(self) -> AccountCreate:
        if not self.holder.strip():
            raise ValueError("Account holder cannot be null or empty")
        return self


class AccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    holder: str
    balance: Decimal = Field(..., ge=0)

    @classmethod
    def from_account(cls, account: Account) -> AccountResponse:
        return cls.model_validate(account)


class TransactionRequest(BaseModel):
    amount: Decimal = Field(..., gt=0, description="Amount to move (must be > 0)")


class TransferRequest(BaseModel):
    source_account_id: Optional[str] = None
    dest_account_id: Optional[str] = None
    amount: Decimal = Field(..., gt=0)

    @model_validator(mode="after")
    def _check_endpoints(self) -> TransferRequest:
        source = (self.source_account_id or "").strip()
        dest = (self.dest_account_id or "").strip()
        if not source and not dest:
            raise ValueError("At least one account ID must be specified")
        if source and dest and self.source_account_id == self.dest_account_id:
            raise ValueError("Cannot transfer to the same account")
        return self

    def to_intent(self) -> MovementIntent:
        return classify_intent(self.source_account_id, self.dest_account_id, self.amount)


class WithdrawalResponse(BaseModel):
    account: AccountResponse
    message: str = "Withdrawal successful"


class BalanceResponse(BaseModel):
    account_id: str
    balance: Decimal
    account_holder: str


class TransferResponse(BaseModel):
    message: str = "Transfer successful"
    source: Optional[AccountResponse] = None
    dest: Optional[AccountResponse] = None
    amount: Decimal


class ValidationErrorItem(BaseModel):
    field: str
    rejected_value: Any = None
    message: str


class ErrorResponse(BaseModel):
    timestamp: datetime
    status: int
    error: str
    message: str
    path: str
    trace_id: Optional[str] = None
    details: Optional[dict[str, Any]] = None
    validation_errors: Optional[list[ValidationErrorItem]] = None
