"""Unit tests for amount helpers and commission pricing"""

import pytest
from decimal import Decimal
from operator_gateway.domain.money import ceil_to_unit, format_amount, percent_of, to_decimal
from operator_gateway.domain.commissions import (
    Commission,
    CommissionKind,
    exchange_fee,
    inter_operator_fee,
    international_fee,
    service_fee,
    transfer_fee,
    vat,
)


def test_to_decimal_avoids_float_artifacts():
    """Test floats go through their string form"""
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal("19.25") == Decimal("19.25")
    assert to_decimal(500) == Decimal("500")


def test_ceil_to_unit_always_rounds_up():
    """Test fee rounding never under-collects"""
    assert ceil_to_unit(Decimal("10.01")) == Decimal("11")
    assert ceil_to_unit(Decimal("10")) == Decimal("10")


def test_percent_of_keeps_cents():
    assert percent_of(Decimal("333"), Decimal("1")) == Decimal("3.33")


def test_format_amount_groups_thousands_with_spaces():
    assert format_amount(Decimal("1500000")) == "1 500 000"
    assert format_amount(Decimal("950")) == "950"


def test_flat_commission_ignores_amount():
    """Test flat commissions are charged as-is"""
    commission = Commission.flat("Stamp duty", 1000)

    assert commission.kind == CommissionKind.FLAT
    assert commission.calculate(Decimal("100000")) == Decimal("1000")
    assert commission.calculate(Decimal("1")) == Decimal("1000")


def test_percentage_commission_rounds_up():
    commission = Commission.percentage("Custom", 1)
    assert commission.calculate(Decimal("333")) == Decimal("4")


def test_transfer_fee_minimum_applies():
    """Test 1% transfer fee with 100 floor"""
    assert transfer_fee().calculate(Decimal("100000")) == Decimal("1000")
    assert transfer_fee().calculate(Decimal("5000")) == Decimal("100")


def test_inter_operator_fee_base_plus_percentage():
    """Test 500 + 1.5% with a 1000 floor"""
    assert inter_operator_fee().calculate(Decimal("400000")) == Decimal("6500")
    assert inter_operator_fee().calculate(Decimal("10000")) == Decimal("1000")


@pytest.mark.parametrize(
    "amount,expected",
    [
        (Decimal("10000"), Decimal("3000")),  # 2200 below the floor
        (Decimal("100000"), Decimal("4000")),  # 2000 + 2%
        (Decimal("10000000"), Decimal("50000")),  # capped
    ],
)
def test_international_fee_clamped(amount, expected):
    """Test international fee min/max clamp"""
    assert international_fee().calculate(amount) == expected


def test_exchange_fee_minimum():
    assert exchange_fee().calculate(Decimal("50000")) == Decimal("500")
    assert exchange_fee().calculate(Decimal("200000")) == Decimal("1000")


def test_vat_rate():
    """Test 19.25% on 1000 = 192.50, rounded up"""
    assert vat().calculate(Decimal("1000")) == Decimal("193")


def test_service_fee_is_flat():
    assert service_fee(200).calculate(Decimal("999999")) == Decimal("200")


def test_formula_rendering():
    assert inter_operator_fee().formula() == "500 FCFA + 1.5% (min: 1000)"
    assert international_fee().formula() == "2000 FCFA + 2% (min: 3000) (max: 50000)"
    assert Commission.flat("Payment fee", 100).formula() == "100 FCFA"
