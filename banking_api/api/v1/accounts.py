"""/api/account - account creation, balance lookup, deposits and withdrawals"""

import logging
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from banking_api.api.v1.schemas import (
    AccountCreateRequest,
    AccountSchema,
    BalanceSchema,
    ResponseWrapper,
    TransactionRequest,
    TransactionSchema,
)
from banking_api.api.dependencies import get_account_service, get_request_id, get_transaction_processor
from banking_api.domain.accounts import AccountService
from banking_api.domain.models import TransactionType
from banking_api.domain.outcomes import AccountNotFound, Conflict, Failure, ProcessResult, RejectedTransaction
from banking_api.domain.processor import TransactionProcessor

router = APIRouter()


def _respond(code: int, message: str, data=None) -> JSONResponse:
    body = ResponseWrapper(code=code, message=message, data=data)
    return JSONResponse(status_code=code, content=body.model_dump(mode="json"))


def _failure_status(failure: Failure) -> int:
    """Map a failure outcome to its HTTP status"""
    if isinstance(failure, AccountNotFound):
        return status.HTTP_404_NOT_FOUND
    if isinstance(failure, Conflict):
        return status.HTTP_409_CONFLICT
    if isinstance(failure, RejectedTransaction):
        return status.HTTP_400_BAD_REQUEST
    raise TypeError(f"Unmapped failure outcome: {type(failure).__name__}")


def _transaction_response(result: ProcessResult, success_message: str, request_id: str) -> JSONResponse:
    if isinstance(result, Failure):
        logging.info(f"Transaction not applied: {result.message}", extra={"request_id": request_id})
        return _respond(_failure_status(result), result.message)

    return _respond(
        status.HTTP_201_CREATED,
        success_message,
        TransactionSchema.from_domain(result).model_dump(mode="json"),
    )


@router.post("/account", response_model=ResponseWrapper, status_code=status.HTTP_201_CREATED)
def create_account(
    request_body: AccountCreateRequest,
    service: AccountService = Depends(get_account_service),
):
    """Open a zero-balance account; 409 if the account number is taken"""
    result = service.create_account(request_body.name, request_body.account_number)
    if isinstance(result, Conflict):
        return _respond(_failure_status(result), result.message)

    return _respond(
        status.HTTP_201_CREATED,
        "Account created successfully",
        AccountSchema.from_domain(result).model_dump(mode="json"),
    )


@router.get("/account/balance/{account_number}", response_model=ResponseWrapper)
def get_account_balance(
    account_number: str,
    service: AccountService = Depends(get_account_service),
):
    result = service.get_balance(account_number)
    if isinstance(result, AccountNotFound):
        return _respond(_failure_status(result), result.message)

    return _respond(
        status.HTTP_200_OK,
        "Balance fetched successfully",
        BalanceSchema(balance=result).model_dump(mode="json"),
    )


@router.post("/account/deposit", response_model=ResponseWrapper, status_code=status.HTTP_201_CREATED)
def deposit_funds(
    request_body: TransactionRequest,
    request: Request,
    processor: TransactionProcessor = Depends(get_transaction_processor),
):
    """
    Deposit funds into an account.

    Returns:
        201 with the committed transaction, 404 for an unknown account,
        400 when a per-transaction or daily limit would be exceeded
    """
    result = processor.process(request_body.account_number, TransactionType.DEPOSIT, request_body.amount)
    return _transaction_response(result, "Deposit successful", get_request_id(request))


@router.post("/account/withdraw", response_model=ResponseWrapper, status_code=status.HTTP_201_CREATED)
def withdraw_funds(
    request_body: TransactionRequest,
    request: Request,
    processor: TransactionProcessor = Depends(get_transaction_processor),
):
    """
    Withdraw funds from an account.

    Returns:
        201 with the committed transaction, 404 for an unknown account,
        400 for limit violations or insufficient balance
    """
    result = processor.process(request_body.account_number, TransactionType.WITHDRAWAL, request_body.amount)
    return _transaction_response(result, "Withdrawal successful", get_request_id(request))
