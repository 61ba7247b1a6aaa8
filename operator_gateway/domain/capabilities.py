"""
Capability contracts shared by every operator family.

An operator family supplies one implementation of each contract. The four
objects are always created together in a CapabilityBundle, so a caller
never validates with one operator and charges fees with another.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict

from operator_gateway.domain.exceptions import CapabilityMismatchError
from operator_gateway.domain.models import (
    AccountValidationOutcome,
    ExternalTransferOutcome,
    NotificationOutcome,
    OperatorType,
    SyncOutcome,
    TransactionType,
)


class AccountValidator(ABC):
    """Account opening and per-transaction admission rules"""

    operator_name: str
    minimum_deposit: Decimal

    @abstractmethod
    def validate_account_creation(
        self, account_number: str, client_id: str, initial_deposit: Decimal
    ) -> AccountValidationOutcome: ...

    @abstractmethod
    def validate_transaction(
        self, account_number: str, amount: Decimal, transaction_type: TransactionType
    ) -> AccountValidationOutcome: ...


class RateCalculator(ABC):
    """Fee, commission and savings-rate tables"""

    operator_name: str
    base_rate: Decimal

    @abstractmethod
    def calculate_transaction_fee(self, amount: Decimal, transaction_type: TransactionType) -> Decimal: ...

    @abstractmethod
    def calculate_inter_operator_fee(self, amount: Decimal, destination_operator: OperatorType | None) -> Decimal: ...

    @abstractmethod
    def calculate_withdrawal_commission(self, amount: Decimal) -> Decimal: ...

    @abstractmethod
    def calculate_savings_interest_rate(self, balance: Decimal) -> Decimal: ...


class NotificationModule(ABC):
    """Operator-branded message formatting (no real channel I/O)"""

    operator_name: str
    message_prefix: str
    channel: str

    @abstractmethod
    def send_transaction_notification(
        self, recipient: str, transaction_type: TransactionType, amount: Decimal, balance: Decimal
    ) -> NotificationOutcome: ...

    @abstractmethod
    def send_welcome_notification(self, recipient: str, client_name: str, account_number: str) -> NotificationOutcome: ...

    @abstractmethod
    def send_security_alert(self, recipient: str, alert_type: str, details: str) -> NotificationOutcome: ...

    def _outcome(self, message: str) -> NotificationOutcome:
        return NotificationOutcome(
            delivered=True,
            formatted_message=message,
            channel=self.channel,
            operator_name=self.operator_name,
        )


class ExternalSystemAdapter(ABC):
    """Acknowledgment stub for the operator's external network"""

    operator_name: str
    system_name: str
    protocol: str

    def __init__(self, online: bool = True):
        self.online = online

    def check_connectivity(self) -> bool:
        return self.online

    @abstractmethod
    def execute_external_transfer(
        self, destination_account: str, amount: Decimal, reference: str
    ) -> ExternalTransferOutcome: ...

    @abstractmethod
    def fetch_external_balance(self, account_number: str) -> Decimal: ...

    @abstractmethod
    def synchronize(self, data: Dict[str, Any] | None) -> SyncOutcome: ...

    def _failure(self, diagnostic: str) -> ExternalTransferOutcome:
        return ExternalTransferOutcome(
            succeeded=False, external_reference=None, system_name=self.system_name, diagnostic=diagnostic
        )

    def _success(self, external_reference: str) -> ExternalTransferOutcome:
        return ExternalTransferOutcome(
            succeeded=True,
            external_reference=external_reference,
            system_name=self.system_name,
            diagnostic="Transfer acknowledged",
        )


@dataclass(frozen=True)
class CapabilityBundle:
    """The four capability objects of one operator family"""

    operator_type: OperatorType
    validator: AccountValidator
    fee_calculator: RateCalculator
    notifier: NotificationModule
    external_adapter: ExternalSystemAdapter

    def __post_init__(self):
        names = {
            self.validator.operator_name,
            self.fee_calculator.operator_name,
            self.notifier.operator_name,
            self.external_adapter.operator_name,
        }
        if len(names) != 1:
            raise CapabilityMismatchError(
                f"Capabilities for {self.operator_type.value} come from different families: {sorted(names)}"
            )

    @property
    def operator_name(self) -> str:
        return self.validator.operator_name


class OperatorFamily(ABC):
    """Provider that builds the capability bundle of one operator type"""

    operator_type: OperatorType
    operator_name: str

    @abstractmethod
    def create_bundle(self) -> CapabilityBundle: ...
