"""Unit tests for TransactionResult wire serialization"""

from decimal import Decimal
from operator_gateway.api.v1.schemas import TransactionResultSchema
from operator_gateway.domain.models import CommissionCharge, StepOutcome, TransactionResult


def _result() -> TransactionResult:
    return TransactionResult(
        success=True,
        final_amount=Decimal("152.4375"),
        currency="EUR",
        operator_fee=Decimal("502"),
        total_commission=Decimal("3500.01"),
        commissions=(
            CommissionCharge(label="International fee", amount=Decimal("3000")),
            CommissionCharge(label="Exchange fee", amount=Decimal("500.01")),
        ),
        step_outcomes=(
            StepOutcome(step="verification", passed=True, detail="approved"),
            StepOutcome(step="notification", passed=False, detail="timeout", critical=False),
        ),
        message="International transfer executed",
    )


def test_json_round_trip_is_lossless():
    """Test serialize -> deserialize reproduces identical values"""
    original = _result()

    payload = TransactionResultSchema.from_domain(original).model_dump_json()
    restored = TransactionResultSchema.model_validate_json(payload).to_domain()

    assert restored == original
    assert str(restored.final_amount) == "152.4375"
    assert str(restored.commissions[1].amount) == "500.01"


def test_schema_exposes_total_charges():
    schema = TransactionResultSchema.from_domain(_result())
    assert schema.total_charges == Decimal("4002.01")
