"""Mobile money family: phone-number accounts, tiered flat fees, real-time telecom API"""

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
from operator_gateway.domain.models import AccountValidationOutcome, OperatorType, SyncOutcome, TransactionType
from operator_gateway.domain.money import ZERO, ceil_to_unit, format_amount
from operator_gateway.utils.references import generate_reference

OPERATOR_NAME = "Mobile Money"

# The account number is the subscriber's phone number
ACCOUNT_PATTERN = re.compile(r"6\d{8}")
DESTINATION_PATTERN = re.compile(r"\d{9}")
MINIMUM_DEPOSIT = ZERO
MAX_TRANSACTION_AMOUNT = Decimal("500000")

# (upper bound inclusive, flat fee)
FEE_TIERS = (
    (Decimal("5000"), Decimal("50")),
    (Decimal("10000"), Decimal("100")),
    (Decimal("25000"), Decimal("200")),
    (Decimal("50000"), Decimal("350")),
    (Decimal("100000"), Decimal("500")),
    (Decimal("250000"), Decimal("1000")),
    (Decimal("500000"), Decimal("1500")),
)
ABOVE_TIERS_RATE = Decimal("0.02")
INTER_OPERATOR_RATE = Decimal("0.02")
WITHDRAWAL_RATE = Decimal("0.02")


def mask_phone(phone: str) -> str:
    return f"{phone[:3]}***{phone[6:]}"


class MobileMoneyAccountValidator(AccountValidator):
    operator_name = OPERATOR_NAME
    minimum_deposit = MINIMUM_DEPOSIT

    def validate_account_creation(self, account_number, client_id, initial_deposit):
        if not account_number or not ACCOUNT_PATTERN.fullmatch(account_number):
            return self._reject("Invalid Mobile Money phone number. Format: 6XXXXXXXX")

        if not client_id:
            return self._reject("Client identifier required")

        deposit = initial_deposit if initial_deposit is not None else ZERO
        if deposit < MINIMUM_DEPOSIT:
            return self._reject("Initial deposit cannot be negative")

        return self._approve(
            f"Mobile Money account activated on {mask_phone(account_number)} "
            f"with {format_amount(deposit)} FCFA"
        )

    def validate_transaction(self, account_number, amount, transaction_type):
        if amount is None or amount <= ZERO:
            return self._reject("Invalid amount")

        if amount > MAX_TRANSACTION_AMOUNT:
            return self._reject(
                f"Amount exceeds the Mobile Money ceiling ({format_amount(MAX_TRANSACTION_AMOUNT)} FCFA). "
                "Use a bank for large amounts."
            )

        if not account_number or not ACCOUNT_PATTERN.fullmatch(account_number):
            return self._reject("Invalid Mobile Money phone number. Format: 6XXXXXXXX")

        return self._approve(f"Mobile Money transaction of {format_amount(amount)} FCFA approved")

    def _approve(self, message):
        return AccountValidationOutcome(approved=True, message=message, operator_name=OPERATOR_NAME)

    def _reject(self, message):
        return AccountValidationOutcome(approved=False, message=message, operator_name=OPERATOR_NAME)


class MobileMoneyRateCalculator(RateCalculator):
    operator_name = OPERATOR_NAME
    base_rate = Decimal("0.02")  # Average effective rate

    def calculate_transaction_fee(self, amount, transaction_type) -> Decimal:
        for upper_bound, fee in FEE_TIERS:
            if amount <= upper_bound:
                return fee
        return ceil_to_unit(amount * ABOVE_TIERS_RATE)

    def calculate_inter_operator_fee(self, amount, destination_operator) -> Decimal:
        base_fee = self.calculate_transaction_fee(amount, TransactionType.TRANSFER_INTER_OPERATOR)
        return ceil_to_unit(base_fee + amount * INTER_OPERATOR_RATE)

    def calculate_withdrawal_commission(self, amount) -> Decimal:
        base_fee = self.calculate_transaction_fee(amount, TransactionType.WITHDRAWAL)
        return ceil_to_unit(base_fee + amount * WITHDRAWAL_RATE)

    def calculate_savings_interest_rate(self, balance) -> Decimal:
        # Wallets are not savings accounts
        return ZERO


class MobileMoneyNotificationModule(NotificationModule):
    operator_name = OPERATOR_NAME
    message_prefix = "MoMo:"
    channel = "SMS"

    _LABELS = {
        TransactionType.DEPOSIT: ("+", "Received"),
        TransactionType.WITHDRAWAL: ("-", "Withdrawal"),
    }

    def send_transaction_notification(self, recipient, transaction_type, amount, balance):
        symbol, verb = self._LABELS.get(transaction_type, ("*", "Transaction"))
        if transaction_type.is_transfer:
            symbol, verb = ">", "Sent"

        return self._outcome(
            f"{self.message_prefix} {symbol} {verb} {format_amount(amount)} FCFA. "
            f"Balance: {format_amount(balance)} FCFA. Dial *126# for your history."
        )

    def send_welcome_notification(self, recipient, client_name, account_number):
        first_name = client_name.split(" ")[0] if client_name else ""
        return self._outcome(
            f"{self.message_prefix} Welcome {first_name}! Your Mobile Money wallet is active. "
            "Send money with *126*1#, withdraw with *126*2#. Never share your PIN!"
        )

    def send_security_alert(self, recipient, alert_type, details):
        return self._outcome(
            f"{self.message_prefix} WARNING! {alert_type}. {details}. "
            "If this was not you, call 123 right away (free)!"
        )


class MobileMoneyExternalSystemAdapter(ExternalSystemAdapter):
    operator_name = OPERATOR_NAME
    system_name = "Telecom Platform API"
    protocol = "REST/JSON"

    def execute_external_transfer(self, destination_account, amount, reference):
        if not self.check_connectivity():
            return self._failure("Mobile Money service temporarily unavailable")

        if not destination_account or not DESTINATION_PATTERN.fullmatch(destination_account):
            return self._failure("Invalid phone number")

        return self._success(generate_reference("MOMO"))

    def fetch_external_balance(self, account_number) -> Decimal:
        return Decimal("150000")

    def synchronize(self, data: Dict[str, Any] | None) -> SyncOutcome:
        # Real-time platform, nothing is batched
        return SyncOutcome(
            succeeded=True,
            records_synced=0,
            message="Mobile Money operates in real time - no synchronisation required",
        )


class MobileMoneyFamily(OperatorFamily):
    operator_type = OperatorType.MOBILE_MONEY
    operator_name = OPERATOR_NAME

    def __init__(self, online: bool = True):
        self.online = online

    def create_bundle(self) -> CapabilityBundle:
        return CapabilityBundle(
            operator_type=self.operator_type,
            validator=MobileMoneyAccountValidator(),
            fee_calculator=MobileMoneyRateCalculator(),
            notifier=MobileMoneyNotificationModule(),
            external_adapter=MobileMoneyExternalSystemAdapter(online=self.online),
        )
