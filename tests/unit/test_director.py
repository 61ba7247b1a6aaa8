"""Unit tests for predefined transaction recipes"""

from decimal import Decimal
from operator_gateway.domain.models import OperatorType, Step, TransactionType


def test_quick_transfer_is_minimal(director):
    spec = director.quick_transfer("BK1234567890", "BK0987654321", 10000)

    assert spec.type == TransactionType.TRANSFER_INTERNAL
    assert spec.enabled_steps == frozenset({Step.NOTIFICATION})
    assert [c.label for c in spec.commissions] == ["Transfer fee"]


def test_full_transfer_has_all_gates_and_two_commissions(director):
    spec = director.full_transfer("BK1234567890", "BK0987654321", 10000)

    assert spec.enabled_steps == frozenset(
        {Step.VERIFICATION, Step.FRAUD_CHECK, Step.LOGGING, Step.NOTIFICATION}
    )
    assert [c.label for c in spec.commissions] == ["Transfer fee", "Service fee"]


def test_inter_operator_transfer_records_both_operators(director):
    spec = director.inter_operator_transfer(
        "BK1234567890", OperatorType.BANK, "690123456", OperatorType.MOBILE_MONEY, 400000
    )

    assert spec.source_operator == OperatorType.BANK
    assert spec.destination_operator == OperatorType.MOBILE_MONEY
    assert spec.commissions[0].calculate(spec.amount) == Decimal("6500")
    assert "Mobile Money" in spec.description


def test_international_transfer_converts(director):
    spec = director.international_transfer("BK1234567890", "FR7612345678", 100000, "XAF", "EUR", Decimal("0.0015"))

    assert spec.currency == "XAF"
    assert spec.target_currency == "EUR"
    assert spec.has_step(Step.CURRENCY_CONVERSION)
    assert [c.label for c in spec.commissions] == ["International fee", "Exchange fee"]


def test_deposit_variants(director):
    plain = director.deposit("MF12345678", 5000)
    verified = director.verified_deposit("MF12345678", 5000)

    assert plain.destination_account == "MF12345678"
    assert not plain.has_step(Step.VERIFICATION)
    assert verified.has_step(Step.VERIFICATION)
    assert verified.has_step(Step.FRAUD_CHECK)


def test_withdrawal_charges_half_percent(director):
    spec = director.withdrawal("690123456", 100000)

    assert spec.destination_account is None
    assert spec.commissions[0].label == "Withdrawal fee"
    assert spec.commissions[0].calculate(spec.amount) == Decimal("500")


def test_bill_payment_carries_reference(director):
    spec = director.bill_payment("690123456", "ENEO-001", 25000, "BILL-2024-001")

    assert spec.reference == "BILL-2024-001"
    assert spec.commissions[0].calculate(spec.amount) == Decimal("100")
    assert spec.description == "Bill payment: BILL-2024-001"


def test_preconfigured_builders_can_be_extended(director):
    transfer = director.transfer_builder().from_("BK1234567890").amount(1000).with_fraud_check().build()
    payment = director.payment_builder().amount(1000).build()

    assert transfer.type == TransactionType.TRANSFER_INTERNAL
    assert transfer.has_step(Step.FRAUD_CHECK)
    assert payment.type == TransactionType.PAYMENT
    assert [c.label for c in payment.commissions] == ["Service fee"]
