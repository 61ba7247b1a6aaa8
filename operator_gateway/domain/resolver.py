"""Operator capability resolver - maps an operator type to its capability bundle"""

import logging
from decimal import Decimal
from types import MappingProxyType
from typing import Dict, Iterable, List

from operator_gateway.domain.capabilities import CapabilityBundle, OperatorFamily
from operator_gateway.domain.exceptions import DuplicateOperatorError, UnsupportedOperatorError
from operator_gateway.domain.models import OperatorInfo, OperatorType, TransactionType
from operator_gateway.domain.operators.bank import BankFamily
from operator_gateway.domain.operators.microfinance import MicrofinanceFamily
from operator_gateway.domain.operators.mobile_money import MobileMoneyFamily
from operator_gateway.infrastructure.observability.metrics import resolver_lookup_counter

logger = logging.getLogger(__name__)


class CapabilityResolver:
    """
    Read-only registry of operator families.

    Bundles are built once at construction and never replaced, so every
    capability handed out for an operator type belongs to the same family.
    Concurrent lookups need no locking.

    Raises:
        DuplicateOperatorError: two providers claim one operator type
    """

    def __init__(self, providers: Iterable[OperatorFamily]):
        bundles: Dict[OperatorType, CapabilityBundle] = {}
        for provider in providers:
            if provider.operator_type in bundles:
                raise DuplicateOperatorError(
                    f"Operator type {provider.operator_type.value} registered more than once"
                )
            bundles[provider.operator_type] = provider.create_bundle()

        self._bundles = MappingProxyType(bundles)
        logger.info(
            "Capability resolver initialised",
            extra={"operators": [t.value for t in self.list_supported_types()]},
        )

    def resolve(self, operator_type: OperatorType | str) -> CapabilityBundle:
        """Accepts the enum or its string value"""
        try:
            key = OperatorType(operator_type)
        except ValueError:
            key = None

        bundle = self._bundles.get(key) if key is not None else None
        if bundle is None:
            label = key.value if key is not None else str(operator_type)
            resolver_lookup_counter.labels(operator=label, outcome="unsupported").inc()
            supported = ", ".join(t.value for t in self.list_supported_types())
            raise UnsupportedOperatorError(f"Unsupported operator: {label}. Available types: {supported}")

        resolver_lookup_counter.labels(operator=key.value, outcome="resolved").inc()
        return bundle

    def is_supported(self, operator_type: OperatorType) -> bool:
        return operator_type in self._bundles

    def list_supported_types(self) -> List[OperatorType]:
        """Registered types in enum declaration order"""
        return [t for t in OperatorType if t in self._bundles]

    def operator_info(self, operator_type: OperatorType) -> OperatorInfo:
        bundle = self.resolve(operator_type)
        return OperatorInfo(
            name=bundle.operator_name,
            operator_type=operator_type,
            minimum_deposit=bundle.validator.minimum_deposit,
            base_rate=bundle.fee_calculator.base_rate,
            external_system=bundle.external_adapter.system_name,
            protocol=bundle.external_adapter.protocol,
        )

    def all_operator_info(self) -> List[OperatorInfo]:
        return [self.operator_info(t) for t in self.list_supported_types()]

    def compare_fees(self, amount: Decimal, transaction_type: TransactionType) -> List[Dict]:
        """Transaction fee each registered operator charges for the same amount"""
        comparison = []
        for operator_type in self.list_supported_types():
            bundle = self._bundles[operator_type]
            comparison.append(
                {
                    "operator_type": operator_type,
                    "operator_name": bundle.operator_name,
                    "fee": bundle.fee_calculator.calculate_transaction_fee(amount, transaction_type),
                }
            )
        return comparison


def default_resolver() -> CapabilityResolver:
    """Resolver with the bank, mobile money and microfinance families"""
    return CapabilityResolver([BankFamily(), MobileMoneyFamily(), MicrofinanceFamily()])
