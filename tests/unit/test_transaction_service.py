"""Unit tests for the transaction service"""

import pytest
from decimal import Decimal
from operator_gateway.domain.builder import TransactionBuilder
from operator_gateway.domain.commissions import Commission
from operator_gateway.domain.exceptions import IncompleteSpecError, UnsupportedOperatorError
from operator_gateway.domain.executor import TransactionExecutor
from operator_gateway.domain.fraud import RollingAverageFraudPolicy
from operator_gateway.domain.history import TransactionHistory
from operator_gateway.domain.models import OperatorType, Step, TransactionType
from operator_gateway.domain.resolver import CapabilityResolver
from operator_gateway.domain.operators.bank import BankFamily
from operator_gateway.services.transactions import TransactionService, build_transaction_service


def test_operator_is_required(service):
    spec = TransactionBuilder().type(TransactionType.DEPOSIT).amount(100).build()

    with pytest.raises(IncompleteSpecError):
        service.execute(spec)


def test_source_operator_used_when_not_given(service):
    spec = TransactionBuilder().type(TransactionType.DEPOSIT).from_("MF12345678", OperatorType.MICROFINANCE).amount(100).build()

    key, result = service.execute(spec)

    assert result.success
    assert service.history.get(key).operator_type == OperatorType.MICROFINANCE


def test_unregistered_operator_propagates():
    service = build_transaction_service(CapabilityResolver([BankFamily()]))

    with pytest.raises(UnsupportedOperatorError):
        service.execute_deposit(OperatorType.MOBILE_MONEY, "690123456", 1000)


def test_failed_verification_is_still_recorded(service):
    """Test policy failures stay in history for audit"""
    key, result = service.execute_full_transfer(OperatorType.BANK, "12-bad", "BK0987654321", 10000)

    assert not result.success
    assert "Invalid bank account format" in result.message
    assert len(service.history) == 1
    assert service.get(key).result is result


def test_fraud_window_uses_source_account_history(service):
    for _ in range(3):
        _, result = service.execute_full_transfer(OperatorType.BANK, "BK1234567890", "BK0987654321", 10000)
        assert result.success

    _, other_account = service.execute_full_transfer(OperatorType.BANK, "BK5555555555", "BK0987654321", 60000)
    _, tripped = service.execute_full_transfer(OperatorType.BANK, "BK1234567890", "BK0987654321", 60000)

    assert other_account.success
    assert not tripped.success
    assert not tripped.outcome_for(Step.FRAUD_CHECK.value).passed


def test_inter_operator_transfer_commission(service):
    key, result = service.execute_inter_operator_transfer(
        "BK1234567890", OperatorType.BANK, "690123456", OperatorType.MOBILE_MONEY, 400000
    )

    assert result.success
    assert result.total_commission == Decimal("6500")
    assert service.history.get(key).spec.destination_operator == OperatorType.MOBILE_MONEY


def test_bill_payment_found_by_reference(service):
    key, _ = service.execute_bill_payment(OperatorType.MOBILE_MONEY, "690123456", "ENEO-001", 25000, "BILL-9")

    assert service.get("BILL-9").key == key


def test_custom_transaction_steps(service):
    _, result = service.execute_custom(
        OperatorType.MOBILE_MONEY,
        TransactionType.PAYMENT,
        "690123456",
        20000,
        destination="691111111",
        with_verification=True,
        commissions=[Commission.percentage("Custom commission", "2.5")],
    )

    assert result.success
    assert result.total_commission == Decimal("500")
    assert result.operator_fee == Decimal("200")
    assert result.outcome_for(Step.LOGGING.value) is None


def test_compare_variants_executes_nothing(service):
    comparison = service.compare_variants(100000)

    assert comparison["quick"]["total_commission"] == Decimal("1000")
    assert comparison["full"]["total_commission"] == Decimal("1200")
    assert comparison["commission_difference"] == Decimal("200")
    assert len(service.history) == 0


def _service_with(resolver, **executor_kwargs):
    return TransactionService(
        resolver=resolver,
        executor=TransactionExecutor(**executor_kwargs),
        history=TransactionHistory(),
    )


def test_audit_failure_still_recorded_in_history(resolver):
    def disk_full(record):
        raise OSError("audit disk full")

    service = _service_with(resolver, audit_sink=disk_full)
    spec = TransactionBuilder().type(TransactionType.DEPOSIT).from_("BK1234567890").amount(1000).with_logging().build()

    key, result = service.execute(spec, OperatorType.BANK)

    assert result.success
    assert not result.outcome_for(Step.LOGGING.value).passed
    assert service.history.get(key).result is result


def test_fraud_window_follows_policy_window(resolver):
    """Test a policy wider than the default window sees all the history it asks for"""
    policy = RollingAverageFraudPolicy(multiplier=5, window=20, min_history=12, ceiling=5_000_000)
    service = _service_with(resolver, fraud_policy=policy, audit_sink=lambda record: None)
    for _ in range(15):
        _, result = service.execute_deposit(OperatorType.BANK, "BK1234567890", 1000)
        assert result.success

    spike = TransactionBuilder().type(TransactionType.DEPOSIT).from_("BK1234567890").amount(1_000_000).with_fraud_check().build()
    _, result = service.execute(spike, OperatorType.BANK)

    assert not result.success
    assert "rolling average" in result.message


def test_fraud_window_ignores_other_currencies(service):
    for _ in range(3):
        spec = TransactionBuilder().type(TransactionType.DEPOSIT).from_("BK1234567890").amount(100).currency("EUR").build()
        assert service.execute(spec, OperatorType.BANK)[1].success

    _, result = service.execute_full_transfer(OperatorType.BANK, "BK1234567890", "BK0987654321", 60000)

    assert result.success
    assert result.outcome_for(Step.FRAUD_CHECK.value).passed


def test_fraud_without_source_account_only_checks_ceiling(service):
    for _ in range(3):
        service.execute_deposit(OperatorType.BANK, "BK1234567890", 1000)

    def unattributed(amount):
        return TransactionBuilder().type(TransactionType.DEPOSIT).amount(amount).with_fraud_check().build()

    _, modest = service.execute(unattributed(100000), OperatorType.BANK)
    _, huge = service.execute(unattributed(6_000_000), OperatorType.BANK)

    assert modest.success
    assert not huge.success
    assert "fraud ceiling" in huge.message


def test_operator_may_be_given_as_string(service):
    key, result = service.execute_deposit("BANK", "BK1234567890", 1000)

    assert result.success
    assert service.history.get(key).operator_type is OperatorType.BANK


def test_compare_variants_accepts_accounts(service):
    comparison = service.compare_variants(50000, source="690123456", destination="690654321")

    assert comparison["amount"] == Decimal("50000")
    assert comparison["commission_difference"] == Decimal("200")
    assert len(service.history) == 0
