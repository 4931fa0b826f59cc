"""Dependency injection for FastAPI endpoints"""

from fastapi import Request
from banking_api.domain.accounts import AccountService
from banking_api.domain.processor import TransactionProcessor


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_transaction_processor(request: Request) -> TransactionProcessor:
    """Provide the processor built by create_app"""
    return request.app.state.transaction_processor


def get_account_service(request: Request) -> AccountService:
    """Provide the account service built by create_app"""
    return request.app.state.account_service
