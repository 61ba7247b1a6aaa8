"""Transaction service - resolves capabilities, executes specs and records history"""

import logging
import time
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from operator_gateway.domain.builder import TransactionBuilder
from operator_gateway.domain.commissions import Commission
from operator_gateway.domain.director import TransactionDirector
from operator_gateway.domain.exceptions import IncompleteSpecError
from operator_gateway.domain.executor import TransactionExecutor
from operator_gateway.domain.history import TransactionHistory
from operator_gateway.domain.models import OperatorType, TransactionResult, TransactionSpec, TransactionType
from operator_gateway.domain.resolver import CapabilityResolver, default_resolver
from operator_gateway.infrastructure.observability.logging import log_transaction
from operator_gateway.infrastructure.observability.metrics import record_transaction

logger = logging.getLogger(__name__)


class TransactionService:
    """
    Entry point used by the HTTP layer.

    Flow for every execution:
    1. Pick the operator (explicit argument wins over spec.source_operator)
    2. Resolve the operator's capability bundle
    3. Execute against recent history of the source account in the same
       currency, as many entries as the fraud policy asks for
    4. Append spec + result to history, failed or not
    5. Record metrics and a structured log line
    """

    def __init__(
        self,
        resolver: CapabilityResolver,
        executor: TransactionExecutor,
        history: TransactionHistory,
        director: TransactionDirector | None = None,
    ):
        self.resolver = resolver
        self.executor = executor
        self.history = history
        self.director = director or TransactionDirector()

    def execute(self, spec: TransactionSpec, operator_type: OperatorType | str | None = None) -> Tuple[str, TransactionResult]:
        """
        Run one spec end to end.

        Returns:
            (history key, result)

        Raises:
            IncompleteSpecError: no operator given and the spec names none
            UnsupportedOperatorError: operator not registered
            InvalidAmountError: non-positive amount (nothing recorded)
        """
        operator = operator_type or spec.source_operator
        if operator is None:
            raise IncompleteSpecError("No operator given and the transaction has no source operator")

        start_time = time.time()
        bundle = self.resolver.resolve(operator)
        operator = bundle.operator_type
        recent = self._fraud_window(spec)

        result = self.executor.execute(spec, bundle, recent)
        entry = self.history.append(spec, result, operator)

        duration_ms = (time.time() - start_time) * 1000
        record_transaction(operator.value, spec.type.value, result.success, result.total_commission)
        log_transaction(
            spec.reference or entry.key,
            operator.value,
            spec.type.value,
            result.success,
            str(result.total_commission),
            duration_ms,
        )
        if not result.success:
            logger.warning(f"Transaction {entry.key} failed: {result.message}", extra={"operator": operator.value})

        return entry.key, result

    def _fraud_window(self, spec: TransactionSpec) -> List[Decimal]:
        """Recent successful amounts of the same account and currency, sized by the fraud policy"""
        if spec.source_account is None:
            return []
        return self.history.recent_amounts(
            self.executor.fraud_policy.history_window, spec.source_account, spec.currency
        )

    # Preset shortcuts

    def execute_quick_transfer(self, operator: OperatorType, source: str, destination: str, amount):
        return self.execute(self.director.quick_transfer(source, destination, amount), operator)

    def execute_full_transfer(self, operator: OperatorType, source: str, destination: str, amount):
        return self.execute(self.director.full_transfer(source, destination, amount), operator)

    def execute_inter_operator_transfer(
        self,
        source: str,
        source_operator: OperatorType,
        destination: str,
        destination_operator: OperatorType,
        amount,
    ):
        spec = self.director.inter_operator_transfer(source, source_operator, destination, destination_operator, amount)
        return self.execute(spec, source_operator)

    def execute_international_transfer(
        self,
        operator: OperatorType,
        source: str,
        destination: str,
        amount,
        source_currency: str,
        target_currency: str,
        exchange_rate,
    ):
        spec = self.director.international_transfer(
            source, destination, amount, source_currency, target_currency, exchange_rate
        )
        return self.execute(spec, operator)

    def execute_deposit(self, operator: OperatorType, account: str, amount, verified: bool = False):
        if verified:
            return self.execute(self.director.verified_deposit(account, amount), operator)
        return self.execute(self.director.deposit(account, amount), operator)

    def execute_withdrawal(self, operator: OperatorType, account: str, amount):
        return self.execute(self.director.withdrawal(account, amount), operator)

    def execute_bill_payment(self, operator: OperatorType, source: str, merchant: str, amount, bill_reference: str):
        return self.execute(self.director.bill_payment(source, merchant, amount, bill_reference), operator)

    def execute_custom(
        self,
        operator: OperatorType,
        transaction_type: TransactionType,
        source: str,
        amount,
        destination: Optional[str] = None,
        with_verification: bool = False,
        with_fraud_check: bool = False,
        with_logging: bool = False,
        with_notification: bool = False,
        commissions: Iterable[Commission] = (),
    ):
        """Caller picks the steps one by one"""
        builder = TransactionBuilder().type(transaction_type).from_(source, operator).amount(amount)
        if destination:
            builder.to(destination)
        if with_verification:
            builder.with_verification()
        if with_fraud_check:
            builder.with_fraud_check()
        if with_logging:
            builder.with_logging()
        if with_notification:
            builder.with_notification()
        builder.with_commissions(*commissions)
        return self.execute(builder.build(), operator)

    # Read side

    def list_history(self) -> List:
        return self.history.snapshot()

    def get(self, key: str):
        """Lookup by history key, falling back to the business reference"""
        return self.history.get(key) or self.history.find_by_reference(key)

    def compare_variants(self, amount, source: str = "ACC001", destination: str = "ACC002") -> Dict[str, Any]:
        """
        Quick vs full transfer commissions for the same amount.

        Specs are built, not executed: nothing is appended to history.
        """
        quick = self.director.quick_transfer(source, destination, amount)
        full = self.director.full_transfer(source, destination, amount)

        quick_total = _commission_total(quick)
        full_total = _commission_total(full)
        return {
            "amount": quick.amount,
            "quick": {"variant": "Quick transfer", "total_commission": quick_total, "steps": quick.summary()},
            "full": {"variant": "Full transfer", "total_commission": full_total, "steps": full.summary()},
            "commission_difference": full_total - quick_total,
        }


def _commission_total(spec: TransactionSpec) -> Decimal:
    return sum((c.calculate(spec.amount) for c in spec.commissions), Decimal("0"))


def build_transaction_service(resolver: CapabilityResolver | None = None) -> TransactionService:
    """Service wired with the default families, fraud policy and an empty history"""
    return TransactionService(
        resolver=resolver or default_resolver(),
        executor=TransactionExecutor(),
        history=TransactionHistory(),
        director=TransactionDirector(),
    )
