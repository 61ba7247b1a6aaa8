"""Predefined transaction recipes built on TransactionBuilder"""

from decimal import Decimal

from operator_gateway.domain.builder import TransactionBuilder
from operator_gateway.domain.commissions import (
    exchange_fee,
    inter_operator_fee,
    international_fee,
    service_fee,
    transfer_fee,
)
from operator_gateway.domain.models import OperatorType, TransactionSpec, TransactionType


class TransactionDirector:
    """
    Named recipes over the builder.

    Recipes:
    - quick_transfer: transfer fee + notification, no checks (small internal moves)
    - full_transfer: verification, fraud check, transfer + service fees, logging, notification
    - inter_operator_transfer: full security + inter-operator fee
    - international_transfer: full security, conversion, international + exchange fees
    - deposit / verified_deposit / withdrawal / bill_payment
    """

    def quick_transfer(
        self,
        source_account: str,
        destination_account: str,
        amount,
        transaction_type: TransactionType = TransactionType.TRANSFER_INTERNAL,
        source_operator: OperatorType | None = None,
    ) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(transaction_type)
            .from_(source_account, source_operator)
            .to(destination_account)
            .amount(amount)
            .with_commission(transfer_fee())
            .with_notification()
            .description("Quick transfer")
            .build()
        )

    def full_transfer(
        self,
        source_account: str,
        destination_account: str,
        amount,
        source_operator: OperatorType | None = None,
    ) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(TransactionType.TRANSFER_INTERNAL)
            .from_(source_account, source_operator)
            .to(destination_account)
            .amount(amount)
            .with_full_security()
            .with_commissions(transfer_fee(), service_fee(200))
            .with_logging()
            .with_notification()
            .description("Secured full transfer")
            .build()
        )

    def inter_operator_transfer(
        self,
        source_account: str,
        source_operator: OperatorType,
        destination_account: str,
        destination_operator: OperatorType,
        amount,
    ) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(TransactionType.TRANSFER_INTER_OPERATOR)
            .from_(source_account, source_operator)
            .to(destination_account, destination_operator)
            .amount(amount)
            .with_full_security()
            .with_commission(inter_operator_fee())
            .with_logging()
            .with_notification()
            .description(f"Transfer from {source_operator.display_name} to {destination_operator.display_name}")
            .build()
        )

    def international_transfer(
        self,
        source_account: str,
        destination_account: str,
        amount,
        source_currency: str,
        target_currency: str,
        exchange_rate: Decimal,
        source_operator: OperatorType | None = None,
    ) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(TransactionType.TRANSFER_INTERNATIONAL)
            .from_(source_account, source_operator)
            .to(destination_account)
            .amount(amount)
            .currency(source_currency)
            .with_full_security()
            .with_currency_conversion(target_currency, exchange_rate)
            .with_commissions(international_fee(), exchange_fee())
            .with_logging()
            .with_notification()
            .description(f"International transfer {source_currency} -> {target_currency}")
            .build()
        )

    def deposit(self, account: str, amount, operator: OperatorType | None = None) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(TransactionType.DEPOSIT)
            .from_(account, operator)
            .to(account)
            .amount(amount)
            .with_logging()
            .with_notification()
            .description("Account deposit")
            .build()
        )

    def verified_deposit(self, account: str, amount, operator: OperatorType | None = None) -> TransactionSpec:
        """Deposit behind the full security gate, for large amounts"""
        return (
            TransactionBuilder()
            .type(TransactionType.DEPOSIT)
            .from_(account, operator)
            .to(account)
            .amount(amount)
            .with_all_features()
            .description("Verified deposit")
            .build()
        )

    def withdrawal(self, account: str, amount, operator: OperatorType | None = None) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(TransactionType.WITHDRAWAL)
            .from_(account, operator)
            .amount(amount)
            .with_verification()
            .with_percentage_commission("Withdrawal fee", Decimal("0.5"))
            .with_logging()
            .with_notification()
            .description("Withdrawal")
            .build()
        )

    def bill_payment(
        self,
        source_account: str,
        merchant_account: str,
        amount,
        bill_reference: str,
        operator: OperatorType | None = None,
    ) -> TransactionSpec:
        return (
            TransactionBuilder()
            .type(TransactionType.BILL_PAYMENT)
            .from_(source_account, operator)
            .to(merchant_account)
            .amount(amount)
            .reference(bill_reference)
            .with_verification()
            .with_fixed_commission("Payment fee", 100)
            .with_logging()
            .with_notification()
            .description(f"Bill payment: {bill_reference}")
            .build()
        )

    # Pre-configured builders for custom variants

    def transfer_builder(self) -> TransactionBuilder:
        return (
            TransactionBuilder()
            .type(TransactionType.TRANSFER_INTERNAL)
            .with_verification()
            .with_logging()
            .with_notification()
        )

    def payment_builder(self) -> TransactionBuilder:
        return (
            TransactionBuilder()
            .type(TransactionType.PAYMENT)
            .with_verification()
            .with_commission(service_fee(100))
            .with_logging()
            .with_notification()
        )
