"""Dependency injection for FastAPI endpoints"""

from fastapi import Depends, Request

from operator_gateway.domain.exceptions import UnsupportedOperatorError
from operator_gateway.domain.models import OperatorType
from operator_gateway.domain.resolver import CapabilityResolver
from operator_gateway.services.transactions import TransactionService


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_transaction_service(request: Request) -> TransactionService:
    """Service instance owned by the application (see create_app)"""
    return request.app.state.transaction_service


def get_resolver(service: TransactionService = Depends(get_transaction_service)) -> CapabilityResolver:
    return service.resolver


def get_operator_type(operator_type: str) -> OperatorType:
    """Parse the {operator_type} path segment; unknown names are a 404, not a validation error"""
    try:
        return OperatorType(operator_type.upper())
    except ValueError:
        supported = ", ".join(t.value for t in OperatorType)
        raise UnsupportedOperatorError(f"Unsupported operator: {operator_type}. Available types: {supported}") from None
