"""Step-accumulating transaction assembly with a chainable API"""

from decimal import Decimal
from typing import List, Optional, Set

from operator_gateway.config import settings
from operator_gateway.domain.commissions import Commission
from operator_gateway.domain.exceptions import IncompleteSpecError, InvalidAmountError
from operator_gateway.domain.models import OperatorType, Step, TransactionSpec, TransactionType
from operator_gateway.domain.money import ZERO, to_decimal


class TransactionBuilder:
    """
    Mutable accumulator for a TransactionSpec.

    Every setter returns the builder itself. Step switches are a set, so
    enabling a step twice is the same as enabling it once. Commissions keep
    insertion order, which is the order they are reported in the result.

    Example:
        spec = (
            TransactionBuilder()
            .type(TransactionType.TRANSFER_INTER_OPERATOR)
            .from_("BK1234567890", OperatorType.BANK)
            .to("690000000", OperatorType.MOBILE_MONEY)
            .amount(50000)
            .with_verification()
            .with_commission(inter_operator_fee())
            .with_logging()
            .build()
        )
    """

    def __init__(self):
        self._type: Optional[TransactionType] = None
        self._source_account: Optional[str] = None
        self._source_operator: Optional[OperatorType] = None
        self._destination_account: Optional[str] = None
        self._destination_operator: Optional[OperatorType] = None
        self._amount: Optional[Decimal] = None
        self._currency: str = settings.default_currency
        self._reference: Optional[str] = None
        self._description: Optional[str] = None
        self._target_currency: Optional[str] = None
        self._exchange_rate: Optional[Decimal] = None
        self._commissions: List[Commission] = []
        self._steps: Set[Step] = set()

    # Base fields

    def type(self, transaction_type: TransactionType) -> "TransactionBuilder":
        self._type = transaction_type
        return self

    def from_(self, account: str, operator: OperatorType | None = None) -> "TransactionBuilder":
        self._source_account = account
        if operator is not None:
            self._source_operator = operator
        return self

    def to(self, account: str, operator: OperatorType | None = None) -> "TransactionBuilder":
        self._destination_account = account
        if operator is not None:
            self._destination_operator = operator
        return self

    def amount(self, amount) -> "TransactionBuilder":
        self._amount = to_decimal(amount)
        return self

    def currency(self, currency: str) -> "TransactionBuilder":
        self._currency = currency
        return self

    def reference(self, reference: str) -> "TransactionBuilder":
        self._reference = reference
        return self

    def description(self, description: str) -> "TransactionBuilder":
        self._description = description
        return self

    # Optional steps

    def with_verification(self) -> "TransactionBuilder":
        self._steps.add(Step.VERIFICATION)
        return self

    def with_fraud_check(self) -> "TransactionBuilder":
        self._steps.add(Step.FRAUD_CHECK)
        return self

    def with_logging(self) -> "TransactionBuilder":
        self._steps.add(Step.LOGGING)
        return self

    def with_notification(self) -> "TransactionBuilder":
        self._steps.add(Step.NOTIFICATION)
        return self

    def with_currency_conversion(self, target_currency: str, exchange_rate) -> "TransactionBuilder":
        # The rate is checked at execution time: a bad rate is a failed result, not a build error
        self._steps.add(Step.CURRENCY_CONVERSION)
        self._target_currency = target_currency
        self._exchange_rate = to_decimal(exchange_rate)
        return self

    def with_full_security(self) -> "TransactionBuilder":
        return self.with_verification().with_fraud_check()

    def with_all_features(self) -> "TransactionBuilder":
        return self.with_full_security().with_logging().with_notification()

    # Commissions

    def with_commission(self, commission: Commission) -> "TransactionBuilder":
        self._commissions.append(commission)
        return self

    def with_commissions(self, *commissions: Commission) -> "TransactionBuilder":
        self._commissions.extend(commissions)
        return self

    def with_percentage_commission(self, label: str, percent) -> "TransactionBuilder":
        return self.with_commission(Commission.percentage(label, percent))

    def with_fixed_commission(self, label: str, amount) -> "TransactionBuilder":
        return self.with_commission(Commission.flat(label, amount))

    # Construction

    def build(self) -> TransactionSpec:
        """
        Freeze the accumulated configuration.

        Raises:
            IncompleteSpecError: type or amount was never set
            InvalidAmountError: amount is zero or negative
        """
        missing = []
        if self._type is None:
            missing.append("type")
        if self._amount is None:
            missing.append("amount")
        if missing:
            raise IncompleteSpecError(f"Missing required transaction fields: {', '.join(missing)}")

        if self._amount <= ZERO:
            raise InvalidAmountError(f"Transaction amount must be positive, got {self._amount}")

        return TransactionSpec(
            type=self._type,
            source_account=self._source_account,
            source_operator=self._source_operator,
            destination_account=self._destination_account,
            destination_operator=self._destination_operator,
            amount=self._amount,
            currency=self._currency,
            target_currency=self._target_currency,
            exchange_rate=self._exchange_rate,
            reference=self._reference,
            description=self._description,
            commissions=tuple(self._commissions),
            enabled_steps=frozenset(self._steps),
        )

    def configuration_summary(self) -> str:
        """Current configuration, for debugging"""
        steps = [s.value for s in Step if s in self._steps]
        if self._commissions:
            steps.append(f"commissions({len(self._commissions)})")
        return (
            f"type={self._type.value if self._type else None} "
            f"source={self._source_account} destination={self._destination_account} "
            f"amount={self._amount} {self._currency} "
            f"steps=[{', '.join(steps) if steps else 'none'}]"
        )
