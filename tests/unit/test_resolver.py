"""Unit tests for the capability resolver"""

import pytest
from decimal import Decimal
from operator_gateway.domain.capabilities import CapabilityBundle
from operator_gateway.domain.exceptions import (
    CapabilityMismatchError,
    ConfigurationError,
    DuplicateOperatorError,
    UnsupportedOperatorError,
)
from operator_gateway.domain.models import OperatorType, TransactionType
from operator_gateway.domain.operators.bank import BankAccountValidator, BankFamily
from operator_gateway.domain.operators.mobile_money import (
    MobileMoneyExternalSystemAdapter,
    MobileMoneyNotificationModule,
    MobileMoneyRateCalculator,
)
from operator_gateway.domain.resolver import CapabilityResolver


@pytest.mark.parametrize("operator_type", list(OperatorType))
def test_bundle_members_share_operator_name(resolver, operator_type):
    """Test every capability in a bundle comes from the same family"""
    bundle = resolver.resolve(operator_type)

    names = {
        bundle.validator.operator_name,
        bundle.fee_calculator.operator_name,
        bundle.notifier.operator_name,
        bundle.external_adapter.operator_name,
    }
    assert names == {bundle.operator_name}
    assert bundle.operator_type == operator_type


def test_resolve_returns_prebuilt_bundle(resolver):
    """Test bundles are built once at construction"""
    assert resolver.resolve(OperatorType.BANK) is resolver.resolve(OperatorType.BANK)


def test_unregistered_operator_is_rejected():
    resolver = CapabilityResolver([BankFamily()])

    with pytest.raises(UnsupportedOperatorError, match="MOBILE_MONEY"):
        resolver.resolve(OperatorType.MOBILE_MONEY)

    assert not resolver.is_supported(OperatorType.MOBILE_MONEY)
    assert resolver.is_supported(OperatorType.BANK)


def test_resolve_accepts_string_values(resolver):
    assert resolver.resolve("BANK") is resolver.resolve(OperatorType.BANK)

    with pytest.raises(UnsupportedOperatorError, match="CRYPTO"):
        resolver.resolve("CRYPTO")


def test_duplicate_provider_fails_at_construction():
    with pytest.raises(DuplicateOperatorError):
        CapabilityResolver([BankFamily(), BankFamily(online=False)])


def test_mixed_family_bundle_is_rejected():
    """Test a bank validator cannot be paired with mobile money capabilities"""
    with pytest.raises(CapabilityMismatchError):
        CapabilityBundle(
            operator_type=OperatorType.MOBILE_MONEY,
            validator=BankAccountValidator(),
            fee_calculator=MobileMoneyRateCalculator(),
            notifier=MobileMoneyNotificationModule(),
            external_adapter=MobileMoneyExternalSystemAdapter(),
        )


def test_configuration_errors_share_a_base():
    assert issubclass(UnsupportedOperatorError, ConfigurationError)
    assert issubclass(CapabilityMismatchError, ConfigurationError)


def test_supported_types_in_declaration_order(resolver):
    assert resolver.list_supported_types() == [
        OperatorType.BANK,
        OperatorType.MOBILE_MONEY,
        OperatorType.MICROFINANCE,
    ]


def test_operator_info(resolver):
    info = resolver.operator_info(OperatorType.BANK)

    assert info.name == "Traditional Bank"
    assert info.minimum_deposit == Decimal("50000")
    assert info.base_rate == Decimal("0.01")
    assert info.protocol == "SWIFT/ISO20022"
    assert [i.operator_type for i in resolver.all_operator_info()] == list(OperatorType)


def test_compare_fees_prices_same_amount_per_operator(resolver):
    """Test fee comparison at 100 000 FCFA"""
    rows = resolver.compare_fees(Decimal("100000"), TransactionType.TRANSFER_INTERNAL)
    fees = {row["operator_type"]: row["fee"] for row in rows}

    assert fees[OperatorType.BANK] == Decimal("1500")  # 500 + 1%
    assert fees[OperatorType.MOBILE_MONEY] == Decimal("500")  # tier <= 100 000
    assert fees[OperatorType.MICROFINANCE] == Decimal("800")  # 0.8%
