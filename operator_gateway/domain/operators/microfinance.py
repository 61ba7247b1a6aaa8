"""
Microfinance family: low entry barriers and social pricing.

Small transactions are free, and savings rates are degressive (small
balances earn more than large ones). The degressive slope is deliberate
policy and is the opposite of the bank schedule.
"""

import re
from decimal import Decimal
from typing import Any, Callable, Dict, Sequence

from operator_gateway.domain.capabilities import (
    AccountValidator,
    CapabilityBundle,
    ExternalSystemAdapter,
    NotificationModule,
    OperatorFamily,
    RateCalculator,
)
from operator_gateway.domain.models import AccountValidationOutcome, OperatorType, SyncOutcome, TransactionType
from operator_gateway.domain.money import ZERO, ceil_to_unit, format_amount
from operator_gateway.utils.references import random_suffix

OPERATOR_NAME = "Microfinance"

ACCOUNT_PATTERN = re.compile(r"MF\d{8}")
PHONE_PATTERN = re.compile(r"\d{9}")
MIN_CLIENT_ID_LENGTH = 3
MINIMUM_DEPOSIT = Decimal("5000")
MAX_TRANSACTION_AMOUNT = Decimal("1000000")
WITHDRAWAL_NOTICE_THRESHOLD = Decimal("200000")

FREE_THRESHOLD = Decimal("10000")
TRANSACTION_RATE = Decimal("0.008")
INTER_OPERATOR_RATE = Decimal("0.012")
INTER_OPERATOR_MIN_FEE = Decimal("200")
FREE_WITHDRAWAL_THRESHOLD = Decimal("20000")
WITHDRAWAL_RATE = Decimal("0.01")

SMALL_BALANCE_THRESHOLD = Decimal("100000")
MEDIUM_BALANCE_THRESHOLD = Decimal("500000")
SAVINGS_RATE_SMALL = Decimal("0.04")
SAVINGS_RATE_MEDIUM = Decimal("0.035")
SAVINGS_RATE_LARGE = Decimal("0.03")

ADVISORS = ("Mr. Kamga", "Mrs. Nguemo", "Mr. Ondoua")

AdvisorChooser = Callable[[Sequence[str], str], str]


def checksum_advisor(advisors: Sequence[str], client_name: str) -> str:
    """Same client always gets the same advisor"""
    return advisors[sum(map(ord, client_name or "")) % len(advisors)]


class MicrofinanceAccountValidator(AccountValidator):
    operator_name = OPERATOR_NAME
    minimum_deposit = MINIMUM_DEPOSIT

    def validate_account_creation(self, account_number, client_id, initial_deposit):
        if not account_number or not ACCOUNT_PATTERN.fullmatch(account_number):
            return self._outcome(False, "Invalid microfinance account format. Expected: MF00000000")

        if not client_id or len(client_id) < MIN_CLIENT_ID_LENGTH:
            return self._outcome(False, "Invalid client identifier")

        if initial_deposit is None or initial_deposit < MINIMUM_DEPOSIT:
            return self._outcome(
                False,
                f"Initial deposit too low. Minimum required: {format_amount(MINIMUM_DEPOSIT)} FCFA. "
                "You can save progressively to reach this amount.",
            )

        return self._outcome(
            True,
            f"Microfinance account opened with {format_amount(initial_deposit)} FCFA! "
            "An advisor will contact you for personalised follow-up.",
        )

    def validate_transaction(self, account_number, amount, transaction_type):
        if amount is None or amount <= ZERO:
            return self._outcome(False, "Invalid amount")

        if amount > MAX_TRANSACTION_AMOUNT:
            return self._outcome(
                False,
                f"Amount exceeds the ceiling ({format_amount(MAX_TRANSACTION_AMOUNT)} FCFA). "
                "Contact your advisor for large transactions.",
            )

        if not account_number or not ACCOUNT_PATTERN.fullmatch(account_number):
            return self._outcome(False, "Invalid microfinance account format. Expected: MF00000000")

        # Large withdrawals pass, with an advisory
        if transaction_type == TransactionType.WITHDRAWAL and amount > WITHDRAWAL_NOTICE_THRESHOLD:
            return self._outcome(
                True,
                f"Transaction of {format_amount(amount)} FCFA approved. Note: notify your branch 24h "
                f"in advance for withdrawals above {format_amount(WITHDRAWAL_NOTICE_THRESHOLD)} FCFA.",
            )

        return self._outcome(True, f"Transaction of {format_amount(amount)} FCFA approved")

    def _outcome(self, approved: bool, message: str) -> AccountValidationOutcome:
        return AccountValidationOutcome(approved=approved, message=message, operator_name=OPERATOR_NAME)


class MicrofinanceRateCalculator(RateCalculator):
    operator_name = OPERATOR_NAME
    base_rate = TRANSACTION_RATE

    def calculate_transaction_fee(self, amount, transaction_type) -> Decimal:
        if amount <= FREE_THRESHOLD:
            return ZERO
        return ceil_to_unit(amount * TRANSACTION_RATE)

    def calculate_inter_operator_fee(self, amount, destination_operator) -> Decimal:
        return ceil_to_unit(max(amount * INTER_OPERATOR_RATE, INTER_OPERATOR_MIN_FEE))

    def calculate_withdrawal_commission(self, amount) -> Decimal:
        if amount <= FREE_WITHDRAWAL_THRESHOLD:
            return ZERO
        return ceil_to_unit(amount * WITHDRAWAL_RATE)

    def calculate_savings_interest_rate(self, balance) -> Decimal:
        if balance <= SMALL_BALANCE_THRESHOLD:
            return SAVINGS_RATE_SMALL
        if balance <= MEDIUM_BALANCE_THRESHOLD:
            return SAVINGS_RATE_MEDIUM
        return SAVINGS_RATE_LARGE


class MicrofinanceNotificationModule(NotificationModule):
    operator_name = OPERATOR_NAME
    message_prefix = "[Your Savings Bank]"
    channel = "SMS"

    def __init__(self, advisor_chooser: AdvisorChooser = checksum_advisor, advisors: Sequence[str] = ADVISORS):
        self.advisor_chooser = advisor_chooser
        self.advisors = tuple(advisors)

    def send_transaction_notification(self, recipient, transaction_type, amount, balance):
        if transaction_type == TransactionType.DEPOSIT:
            message = (
                f"{self.message_prefix} Well done! Deposit of {format_amount(amount)} FCFA received. "
                f"Balance: {format_amount(balance)} FCFA. Keep saving to reach your goals!"
            )
        else:
            message = (
                f"{self.message_prefix} {transaction_type.description} of {format_amount(amount)} FCFA done. "
                f"Balance: {format_amount(balance)} FCFA. Your advisor is here to help."
            )
        return self._outcome(message)

    def send_welcome_notification(self, recipient, client_name, account_number):
        advisor = self.advisor_chooser(self.advisors, client_name)
        return self._outcome(
            f"{self.message_prefix} Welcome to our family {client_name}! "
            f"Your account No. {account_number} is open. "
            f"Come and see us at the branch, your advisor {advisor} is waiting for you!"
        )

    def send_security_alert(self, recipient, alert_type, details):
        return self._outcome(
            f"{self.message_prefix} ATTENTION: {alert_type}. {details}. "
            "If in doubt, come to the branch with your ID card."
        )


class MicrofinanceExternalSystemAdapter(ExternalSystemAdapter):
    operator_name = OPERATOR_NAME
    system_name = "Partner Savings Network"
    protocol = "REST/XML"

    def execute_external_transfer(self, destination_account, amount, reference):
        if not self.check_connectivity():
            return self._failure("Partner savings network temporarily unavailable. Try again in a few minutes.")

        if not destination_account or not (
            ACCOUNT_PATTERN.fullmatch(destination_account) or PHONE_PATTERN.fullmatch(destination_account)
        ):
            return self._failure("Invalid destination account number")

        return self._success(f"MFI{random_suffix(10)}")

    def fetch_external_balance(self, account_number) -> Decimal:
        return Decimal("75000")

    def synchronize(self, data: Dict[str, Any] | None) -> SyncOutcome:
        # Daily batch with the central server
        record_count = len(data) if data else 0
        return SyncOutcome(
            succeeded=True,
            records_synced=record_count,
            message=f"Daily synchronisation done. {record_count} transactions synchronised. Next run: tomorrow 06:00.",
        )


class MicrofinanceFamily(OperatorFamily):
    operator_type = OperatorType.MICROFINANCE
    operator_name = OPERATOR_NAME

    def __init__(self, online: bool = True, advisor_chooser: AdvisorChooser = checksum_advisor):
        self.online = online
        self.advisor_chooser = advisor_chooser

    def create_bundle(self) -> CapabilityBundle:
        return CapabilityBundle(
            operator_type=self.operator_type,
            validator=MicrofinanceAccountValidator(),
            fee_calculator=MicrofinanceRateCalculator(),
            notifier=MicrofinanceNotificationModule(advisor_chooser=self.advisor_chooser),
            external_adapter=MicrofinanceExternalSystemAdapter(online=self.online),
        )
