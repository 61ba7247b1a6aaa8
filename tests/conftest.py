"""Pytest fixtures for testing"""

import pytest
from typing import Any, Dict, List
from fastapi.testclient import TestClient

from operator_gateway.api.main import create_app
from operator_gateway.domain.director import TransactionDirector
from operator_gateway.domain.executor import TransactionExecutor
from operator_gateway.domain.fraud import RollingAverageFraudPolicy
from operator_gateway.domain.history import TransactionHistory
from operator_gateway.domain.resolver import CapabilityResolver, default_resolver
from operator_gateway.services.transactions import TransactionService


@pytest.fixture
def resolver() -> CapabilityResolver:
    """Resolver with the three built-in operator families"""
    return default_resolver()


@pytest.fixture
def audit_records() -> List[Dict[str, Any]]:
    """Captures records written by the Logging step"""
    return []


@pytest.fixture
def executor(audit_records: List[Dict[str, Any]]) -> TransactionExecutor:
    """Executor with a fixed fraud policy and an in-memory audit sink"""
    policy = RollingAverageFraudPolicy(multiplier=5, window=10, min_history=3, ceiling=5_000_000)
    return TransactionExecutor(fraud_policy=policy, audit_sink=audit_records.append)


@pytest.fixture
def history() -> TransactionHistory:
    return TransactionHistory()


@pytest.fixture
def director() -> TransactionDirector:
    return TransactionDirector()


@pytest.fixture
def service(
    resolver: CapabilityResolver,
    executor: TransactionExecutor,
    history: TransactionHistory,
    director: TransactionDirector,
) -> TransactionService:
    """Service with fresh, isolated history"""
    return TransactionService(resolver=resolver, executor=executor, history=history, director=director)


@pytest.fixture
def client(service: TransactionService) -> TestClient:
    """Create FastAPI test client bound to the isolated service"""
    app = create_app(service=service)
    return TestClient(app)
