"""Unit tests for transaction assembly"""

import pytest
from decimal import Decimal
from operator_gateway.domain.builder import TransactionBuilder
from operator_gateway.domain.commissions import transfer_fee
from operator_gateway.domain.exceptions import IncompleteSpecError, InvalidAmountError, SpecificationError
from operator_gateway.domain.models import OperatorType, Step, TransactionType


def test_build_without_type_fails():
    with pytest.raises(IncompleteSpecError, match="type"):
        TransactionBuilder().amount(1000).build()


def test_build_without_amount_fails():
    with pytest.raises(SpecificationError, match="amount"):
        TransactionBuilder().type(TransactionType.DEPOSIT).build()


@pytest.mark.parametrize("amount", [0, -1, "-0.01"])
def test_build_rejects_non_positive_amount(amount):
    with pytest.raises(InvalidAmountError):
        TransactionBuilder().type(TransactionType.DEPOSIT).amount(amount).build()


def test_setters_chain_on_same_builder():
    builder = TransactionBuilder()
    assert builder.type(TransactionType.DEPOSIT) is builder
    assert builder.with_logging() is builder


def test_step_flags_are_idempotent():
    """Test enabling a step twice equals enabling it once"""
    once = TransactionBuilder().type(TransactionType.DEPOSIT).amount(100).with_logging().build()
    twice = TransactionBuilder().type(TransactionType.DEPOSIT).amount(100).with_logging().with_logging().build()

    assert once.enabled_steps == twice.enabled_steps == frozenset({Step.LOGGING})


def test_build_twice_yields_equal_specs():
    builder = (
        TransactionBuilder()
        .type(TransactionType.TRANSFER_INTERNAL)
        .from_("BK1234567890", OperatorType.BANK)
        .to("BK0987654321")
        .amount(50000)
        .with_full_security()
        .with_commission(transfer_fee())
    )

    assert builder.build() == builder.build()


def test_commissions_keep_insertion_order():
    spec = (
        TransactionBuilder()
        .type(TransactionType.PAYMENT)
        .amount(1000)
        .with_fixed_commission("First", 10)
        .with_percentage_commission("Second", 2)
        .with_commissions(transfer_fee())
        .build()
    )

    assert [c.label for c in spec.commissions] == ["First", "Second", "Transfer fee"]


def test_defaults_and_conversion_settings():
    spec = (
        TransactionBuilder()
        .type(TransactionType.TRANSFER_INTERNATIONAL)
        .amount(0.1)
        .with_currency_conversion("EUR", "0.0015")
        .build()
    )

    assert spec.amount == Decimal("0.1")
    assert spec.currency == "XAF"
    assert spec.target_currency == "EUR"
    assert spec.exchange_rate == Decimal("0.0015")
    assert spec.has_step(Step.CURRENCY_CONVERSION)


def test_with_all_features_enables_every_gate_but_conversion():
    spec = TransactionBuilder().type(TransactionType.DEPOSIT).amount(100).with_all_features().build()

    assert spec.enabled_steps == frozenset(
        {Step.VERIFICATION, Step.FRAUD_CHECK, Step.LOGGING, Step.NOTIFICATION}
    )


def test_spec_summary_follows_execution_order():
    spec = (
        TransactionBuilder()
        .type(TransactionType.DEPOSIT)
        .amount(100)
        .with_notification()
        .with_verification()
        .with_commission(transfer_fee())
        .build()
    )
    assert spec.summary() == "verification -> commissions(1) -> notification"


def test_configuration_summary_before_build():
    builder = TransactionBuilder().type(TransactionType.DEPOSIT).from_("MF12345678").amount(100).with_logging()
    summary = builder.configuration_summary()

    assert "type=DEPOSIT" in summary
    assert "source=MF12345678" in summary
    assert "steps=[logging]" in summary
