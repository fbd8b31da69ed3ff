from __future__ import annotations

import logging
import uuid
from datetime import UTC, datetime
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..core.errors import (
    AccountNotFoundError,
    InsufficientFundsError,
    InvalidAccountError,
    InvalidAmountError,
    InvalidTransactionError,
    RepositoryError,
)
from ..models import ErrorResponse, ValidationErrorItem


logger = logging.getLogger(__name__)


def _trace_id() -> str:
    return uuid.uuid4().hex[:8]


def _error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    trace_id: str,
    details: Optional[dict[str, Any]] = None,
    validation_errors: Optional[list[ValidationErrorItem]] = None,
) -> JSONResponse:
    body = ErrorResponse(
        timestamp=datetime.now(UTC),
        status=status_code,
        error=error,
        message=message,
        path=request.url.path,
        trace_id=trace_id,
        details=details,
        validation_errors=validation_errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AccountNotFoundError)
    async def account_not_found_handler(
        request: Request, exc: AccountNotFoundError
    ) -> JSONResponse:
        trace_id = _trace_id()
        logger.warning(
            "account.not_found",
            extra={"trace_id": trace_id, "account_id": exc.account_id},
        )
        return _error_response(
            request,
            404,
            "Account Not Found",
            str(exc),
            trace_id,
            details={
                "account_id": exc.account_id,
                "suggestion": "Please verify the account ID and try again",
            },
        )

    @app.exception_handler(InsufficientFundsError)
    async def insufficient_funds_handler(
        request: Request, exc: InsufficientFundsError
    ) -> JSONResponse:
        trace_id = _trace_id()
        logger.warning(
            "account.insufficient_funds",
            extra={
                "trace_id": trace_id,
                "account_id": exc.account_id,
                "requested": str(exc.requested),
                "available": str(exc.available),
            },
        )
        return _error_response(
            request,
            400,
            "Insufficient Funds",
            str(exc),
            trace_id,
            details={
                "account_id": exc.account_id,
                "requested_amount": str(exc.requested),
                "available_balance": str(exc.available),
                "shortfall": str(exc.shortfall),
                "suggestion": "Please reduce the transaction amount or deposit additional funds",
            },
        )

    @app.exception_handler(InvalidTransactionError)
    async def invalid_transaction_handler(
        request: Request, exc: InvalidTransactionError
    ) -> JSONResponse:
        trace_id = _trace_id()
        logger.warning(
            "transaction.invalid",
            extra={
                "trace_id": trace_id,
                "transaction_type": exc.transaction_type,
                "details": exc.details,
            },
        )
        details: dict[str, Any] = {
            "transaction_type": exc.transaction_type,
            "details": exc.details,
            "suggestion": "Please check the transaction parameters and try again",
        }
        if exc.amount is not None:
            details["amount"] = str(exc.amount)
        return _error_response(
            request, 400, "Invalid Transaction", str(exc), trace_id, details=details
        )

    @app.exception_handler(InvalidAmountError)
    @app.exception_handler(InvalidAccountError)
    async def invalid_argument_handler(request: Request, exc: Exception) -> JSONResponse:
        trace_id = _trace_id()
        logger.warning("request.invalid_argument", extra={"trace_id": trace_id})
        return _error_response(
            request,
            400,
            "Invalid Argument",
            str(exc),
            trace_id,
            details={"suggestion": "Please check your request parameters and try again"},
        )

    @app.exception_handler(RepositoryError)
    async def repository_error_handler(
        request: Request, exc: RepositoryError
    ) -> JSONResponse:
        trace_id = _trace_id()
        logger.error(
            "repository.error",
            exc_info=exc,
            extra={
                "trace_id": trace_id,
                "operation": exc.operation,
                "entity_type": exc.entity_type,
                "entity_id": exc.entity_id,
            },
        )
        return _error_response(
            request,
            500,
            "Data Access Error",
            "An error occurred while accessing the data store",
            trace_id,
            details={
                "operation": exc.operation,
                "entity_type": exc.entity_type,
                "entity_id": exc.entity_id,
                "suggestion": "This is a system error. Please try again later or contact support",
            },
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        trace_id = _trace_id()
        logger.warning("request.validation_failed", extra={"trace_id": trace_id})
        items = [
            ValidationErrorItem(
                field=".".join(str(part) for part in error.get("loc", ()) if part != "body"),
                rejected_value=error.get("input"),
                message=error.get("msg", ""),
            )
            for error in exc.errors()
        ]
        return _error_response(
            request,
            400,
            "Validation Failed",
            "Request validation failed",
            trace_id,
            validation_errors=items,
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        trace_id = _trace_id()
        logger.error("request.unexpected_error", exc_info=exc, extra={"trace_id": trace_id})
        return _error_response(
            request,
            500,
            "Internal Server Error",
            "An unexpected error occurred while processing your request",
            trace_id,
            details={"type": type(exc).__name__},
        )
