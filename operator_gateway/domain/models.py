"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from operator_gateway.domain.commissions import Commission
from operator_gateway.domain.money import ZERO


class OperatorType(str, Enum):
    """Category of financial institution; used only as a lookup key"""

    BANK = "BANK"
    MOBILE_MONEY = "MOBILE_MONEY"
    MICROFINANCE = "MICROFINANCE"

    @property
    def display_name(self) -> str:
        return _OPERATOR_LABELS[self][0]

    @property
    def description(self) -> str:
        return _OPERATOR_LABELS[self][1]


_OPERATOR_LABELS = {
    OperatorType.BANK: ("Traditional bank", "Classic banking institution"),
    OperatorType.MOBILE_MONEY: ("Mobile Money", "Mobile payment operator (Orange Money, MTN Money, etc.)"),
    OperatorType.MICROFINANCE: ("Microfinance", "Microfinance institution"),
}


class TransactionType(str, Enum):
    TRANSFER_INTERNAL = "TRANSFER_INTERNAL"
    TRANSFER_INTER_OPERATOR = "TRANSFER_INTER_OPERATOR"
    TRANSFER_INTERNATIONAL = "TRANSFER_INTERNATIONAL"
    DEPOSIT = "DEPOSIT"
    WITHDRAWAL = "WITHDRAWAL"
    PAYMENT = "PAYMENT"
    BILL_PAYMENT = "BILL_PAYMENT"

    @property
    def description(self) -> str:
        return self.value.replace("_", " ").capitalize()

    @property
    def is_transfer(self) -> bool:
        return self.name.startswith("TRANSFER_")


class Step(str, Enum):
    """Optional execution phases, listed in execution order"""

    VERIFICATION = "verification"
    FRAUD_CHECK = "fraud_check"
    CURRENCY_CONVERSION = "currency_conversion"
    LOGGING = "logging"
    NOTIFICATION = "notification"


# Fee/commission application is not optional, so it has no Step member
FEES_STAGE = "fees"


@dataclass(frozen=True)
class AccountValidationOutcome:
    approved: bool
    message: str
    operator_name: str


@dataclass(frozen=True)
class NotificationOutcome:
    delivered: bool
    formatted_message: str
    channel: str
    operator_name: str


@dataclass(frozen=True)
class ExternalTransferOutcome:
    succeeded: bool
    external_reference: Optional[str]
    system_name: str
    diagnostic: str


@dataclass(frozen=True)
class SyncOutcome:
    succeeded: bool
    records_synced: int
    message: str


@dataclass(frozen=True)
class OperatorInfo:
    """Catalogue entry describing one registered operator family"""

    name: str
    operator_type: OperatorType
    minimum_deposit: Decimal
    base_rate: Decimal
    external_system: str
    protocol: str


@dataclass(frozen=True)
class TransactionSpec:
    """Fully assembled transaction, immutable once built"""

    type: TransactionType
    source_account: Optional[str]
    amount: Decimal
    currency: str
    source_operator: Optional[OperatorType] = None
    destination_account: Optional[str] = None
    destination_operator: Optional[OperatorType] = None
    target_currency: Optional[str] = None
    exchange_rate: Optional[Decimal] = None
    reference: Optional[str] = None
    description: Optional[str] = None
    commissions: Tuple[Commission, ...] = ()
    enabled_steps: FrozenSet[Step] = frozenset()

    def has_step(self, step: Step) -> bool:
        return step in self.enabled_steps

    def summary(self) -> str:
        """Configured steps in execution order, e.g. 'verification -> commissions(2) -> logging'"""
        stages = [s.value for s in (Step.VERIFICATION, Step.FRAUD_CHECK, Step.CURRENCY_CONVERSION) if self.has_step(s)]
        if self.commissions:
            stages.append(f"commissions({len(self.commissions)})")
        stages.extend(s.value for s in (Step.LOGGING, Step.NOTIFICATION) if self.has_step(s))
        return " -> ".join(stages) if stages else "none"


@dataclass(frozen=True)
class StepOutcome:
    step: str
    passed: bool
    detail: str
    critical: bool = True


@dataclass(frozen=True)
class CommissionCharge:
    label: str
    amount: Decimal


@dataclass(frozen=True)
class TransactionResult:
    """Output of one execution; never mutated afterwards"""

    success: bool
    final_amount: Decimal
    currency: str
    operator_fee: Decimal = ZERO
    total_commission: Decimal = ZERO
    commissions: Tuple[CommissionCharge, ...] = ()
    step_outcomes: Tuple[StepOutcome, ...] = field(default_factory=tuple)
    message: str = ""

    @property
    def total_charges(self) -> Decimal:
        return self.operator_fee + self.total_commission

    def outcome_for(self, step: str) -> Optional[StepOutcome]:
        for outcome in self.step_outcomes:
            if outcome.step == step:
                return outcome
        return None
