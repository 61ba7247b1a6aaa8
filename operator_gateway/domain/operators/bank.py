"""Traditional bank family: formal account rules, progressive savings rates, SWIFT network"""

import re
from decimal import Decimal
from typing import Any, Dict

from operator_gateway.domain.capabilities import (
    AccountValidator,
    CapabilityBundle,
    ExternalSystemAdapter,
    NotificationModule,
    OperatorFamily,
    RateCalculator,
)
from operator_gateway.domain.models import (
    AccountValidationOutcome,
    ExternalTransferOutcome,
    NotificationOutcome,
    OperatorType,
    SyncOutcome,
    TransactionType,
)
from operator_gateway.domain.money import ZERO, ceil_to_unit, format_amount
from operator_gateway.utils.references import random_suffix

OPERATOR_NAME = "Traditional Bank"

ACCOUNT_PATTERN = re.compile(r"[A-Z]{2}\d{10}")
MIN_CLIENT_ID_LENGTH = 5
MINIMUM_DEPOSIT = Decimal("50000")
MAX_TRANSACTION_AMOUNT = Decimal("10000000")

# Fee = BASE_FEE + PERCENTAGE_RATE * amount, percentage part discounted for large amounts
BASE_FEE = Decimal("500")
PERCENTAGE_RATE = Decimal("0.01")
INTER_OPERATOR_RATE = Decimal("0.015")
MOBILE_MONEY_SURCHARGE = Decimal("1000")
WITHDRAWAL_RATE = Decimal("0.005")

MEDIUM_THRESHOLD = Decimal("500000")
HIGH_THRESHOLD = Decimal("2000000")

SAVINGS_RATE_LOW = Decimal("0.025")
SAVINGS_RATE_MEDIUM = Decimal("0.035")
SAVINGS_RATE_HIGH = Decimal("0.045")


class BankAccountValidator(AccountValidator):
    operator_name = OPERATOR_NAME
    minimum_deposit = MINIMUM_DEPOSIT

    def validate_account_creation(self, account_number, client_id, initial_deposit) -> AccountValidationOutcome:
        if not account_number or not ACCOUNT_PATTERN.fullmatch(account_number):
            return self._reject("Invalid bank account format. Expected: XX0000000000")

        if not client_id or len(client_id) < MIN_CLIENT_ID_LENGTH:
            return self._reject(f"Invalid client identifier (minimum {MIN_CLIENT_ID_LENGTH} characters)")

        if initial_deposit is None or initial_deposit < MINIMUM_DEPOSIT:
            return self._reject(f"Initial deposit too low. Minimum required: {format_amount(MINIMUM_DEPOSIT)} FCFA")

        return AccountValidationOutcome(
            approved=True,
            message=f"Bank account approved. Initial deposit: {format_amount(initial_deposit)} FCFA",
            operator_name=OPERATOR_NAME,
        )

    def validate_transaction(self, account_number, amount, transaction_type) -> AccountValidationOutcome:
        if amount is None or amount <= ZERO:
            return self._reject("Invalid amount")

        if amount > MAX_TRANSACTION_AMOUNT:
            return self._reject(
                f"Amount exceeds the authorised ceiling ({format_amount(MAX_TRANSACTION_AMOUNT)} FCFA)"
            )

        if not account_number or not ACCOUNT_PATTERN.fullmatch(account_number):
            return self._reject("Invalid bank account format. Expected: XX0000000000")

        return AccountValidationOutcome(
            approved=True,
            message=f"{transaction_type.description} of {format_amount(amount)} FCFA approved",
            operator_name=OPERATOR_NAME,
        )

    def _reject(self, message: str) -> AccountValidationOutcome:
        return AccountValidationOutcome(approved=False, message=message, operator_name=OPERATOR_NAME)


class BankRateCalculator(RateCalculator):
    operator_name = OPERATOR_NAME
    base_rate = PERCENTAGE_RATE

    def calculate_transaction_fee(self, amount, transaction_type) -> Decimal:
        percentage_fee = amount * PERCENTAGE_RATE

        if amount >= HIGH_THRESHOLD:
            percentage_fee *= Decimal("0.5")
        elif amount >= MEDIUM_THRESHOLD:
            percentage_fee *= Decimal("0.75")

        return ceil_to_unit(BASE_FEE + percentage_fee)

    def calculate_inter_operator_fee(self, amount, destination_operator) -> Decimal:
        fee = amount * INTER_OPERATOR_RATE
        if destination_operator == OperatorType.MOBILE_MONEY:
            fee += MOBILE_MONEY_SURCHARGE
        return ceil_to_unit(fee)

    def calculate_withdrawal_commission(self, amount) -> Decimal:
        return ceil_to_unit(amount * WITHDRAWAL_RATE)

    def calculate_savings_interest_rate(self, balance) -> Decimal:
        # Progressive: larger balances earn more
        if balance >= HIGH_THRESHOLD:
            return SAVINGS_RATE_HIGH
        if balance >= MEDIUM_THRESHOLD:
            return SAVINGS_RATE_MEDIUM
        return SAVINGS_RATE_LOW


class BankNotificationModule(NotificationModule):
    operator_name = OPERATOR_NAME
    message_prefix = "[BANK]"
    channel = "SMS + Email"

    _VERBS = {
        TransactionType.DEPOSIT: "credited",
        TransactionType.WITHDRAWAL: "debited",
    }

    def send_transaction_notification(self, recipient, transaction_type, amount, balance) -> NotificationOutcome:
        verb = self._VERBS.get(transaction_type)
        if verb is None:
            verb = "debited (transfer)" if transaction_type.is_transfer else "updated"

        return self._outcome(
            f"{self.message_prefix} Your account has been {verb} with {format_amount(amount)} FCFA. "
            f"New balance: {format_amount(balance)} FCFA. For any claim, call 8888."
        )

    def send_welcome_notification(self, recipient, client_name, account_number) -> NotificationOutcome:
        return self._outcome(
            f"{self.message_prefix} Dear {client_name}, welcome to our bank. "
            f"Your account No. {mask_account_number(account_number)} has been opened. "
            "Download our mobile app to manage your account. Customer service: 8888"
        )

    def send_security_alert(self, recipient, alert_type, details) -> NotificationOutcome:
        return self._outcome(
            f"{self.message_prefix} SECURITY ALERT: {alert_type.upper()}. {details}. "
            "If you did not initiate this action, call 8888 immediately or block your card in the app."
        )


def mask_account_number(account_number: str) -> str:
    if len(account_number) <= 4:
        return account_number
    return f"{account_number[:2]}****{account_number[-4:]}"


class BankExternalSystemAdapter(ExternalSystemAdapter):
    operator_name = OPERATOR_NAME
    system_name = "BEAC/SWIFT Interbank Network"
    protocol = "SWIFT/ISO20022"

    def execute_external_transfer(self, destination_account, amount, reference) -> ExternalTransferOutcome:
        if not self.check_connectivity():
            return self._failure("Interbank network unreachable")

        # Simplified IBAN check
        if not destination_account or len(destination_account) < 10:
            return self._failure("Invalid destination account format")

        return self._success(f"SWIFT{random_suffix(8)}")

    def fetch_external_balance(self, account_number) -> Decimal:
        return Decimal("1000000")

    def synchronize(self, data: Dict[str, Any] | None) -> SyncOutcome:
        record_count = len(data) if data else 0
        return SyncOutcome(
            succeeded=True,
            records_synced=record_count,
            message=f"Synchronised with {self.system_name}. {record_count} records processed.",
        )


class BankFamily(OperatorFamily):
    operator_type = OperatorType.BANK
    operator_name = OPERATOR_NAME

    def __init__(self, online: bool = True):
        self.online = online

    def create_bundle(self) -> CapabilityBundle:
        return CapabilityBundle(
            operator_type=self.operator_type,
            validator=BankAccountValidator(),
            fee_calculator=BankRateCalculator(),
            notifier=BankNotificationModule(),
            external_adapter=BankExternalSystemAdapter(online=self.online),
        )
