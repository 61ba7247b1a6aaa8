"""Pydantic schemas for API request/response validation"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, Field

from operator_gateway.domain.models import (
    CommissionCharge,
    OperatorInfo,
    OperatorType,
    StepOutcome,
    TransactionResult,
    TransactionType,
)


# Operators

class OperatorInfoSchema(BaseModel):
    """Static description of one operator family"""

    name: str
    operator_type: OperatorType
    display_name: str
    description: str
    minimum_deposit: Decimal
    base_rate: Decimal
    external_system: str
    protocol: str

    @classmethod
    def from_domain(cls, info: OperatorInfo) -> "OperatorInfoSchema":
        return cls(
            name=info.name,
            operator_type=info.operator_type,
            display_name=info.operator_type.display_name,
            description=info.operator_type.description,
            minimum_deposit=info.minimum_deposit,
            base_rate=info.base_rate,
            external_system=info.external_system,
            protocol=info.protocol,
        )


class FeeComparisonItem(BaseModel):
    operator_type: OperatorType
    operator_name: str
    amount: Decimal
    fee: Decimal
    total: Decimal


class ValidateAccountRequest(BaseModel):
    """Request body for POST /v1/operators/{type}/validate-account"""

    account_number: str = Field(..., min_length=1)
    client_id: str = Field(..., min_length=1)
    initial_deposit: Decimal = Field(..., ge=0)


class ValidationResponse(BaseModel):
    operator_type: OperatorType
    approved: bool
    message: str
    operator_name: str


class CalculateFeeRequest(BaseModel):
    """Request body for POST /v1/operators/{type}/calculate-fee"""

    amount: Decimal = Field(..., gt=0)
    transaction_type: TransactionType = TransactionType.TRANSFER_INTERNAL
    destination_operator: Optional[OperatorType] = None


class FeeResponse(BaseModel):
    operator_type: OperatorType
    amount: Decimal
    transaction_type: TransactionType
    fee: Decimal
    total_with_fee: Decimal
    inter_operator_fee: Optional[Decimal] = None


class NotificationRequest(BaseModel):
    """Request body for POST /v1/operators/{type}/send-notification"""

    recipient: str = Field(..., min_length=1)
    transaction_type: TransactionType
    amount: Decimal = Field(..., gt=0)
    balance: Decimal


class NotificationResponse(BaseModel):
    operator_type: OperatorType
    delivered: bool
    channel: str
    formatted_message: str
    operator_name: str


class ExternalTransferRequest(BaseModel):
    """Request body for POST /v1/operators/{type}/transfer"""

    destination_account: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    reference: Optional[str] = None


class ExternalTransferResponse(BaseModel):
    operator_type: OperatorType
    succeeded: bool
    external_reference: Optional[str] = None
    system_name: str
    diagnostic: str
    reference: str


# Transactions

class QuickTransferRequest(BaseModel):
    """Request body for POST /v1/transactions/quick and /full"""

    operator: OperatorType
    source_account: str = Field(..., min_length=1)
    destination_account: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)


class InterOperatorTransferRequest(BaseModel):
    source_account: str = Field(..., min_length=1)
    source_operator: OperatorType
    destination_account: str = Field(..., min_length=1)
    destination_operator: OperatorType
    amount: Decimal = Field(..., gt=0)


class InternationalTransferRequest(BaseModel):
    operator: OperatorType
    source_account: str = Field(..., min_length=1)
    destination_account: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    source_currency: str = Field(..., min_length=3, max_length=3)
    target_currency: str = Field(..., min_length=3, max_length=3)
    # Not constrained here: a non-positive rate is a failed result, not a bad request
    exchange_rate: Decimal


class DepositRequest(BaseModel):
    operator: OperatorType
    account: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    verified: bool = False


class WithdrawalRequest(BaseModel):
    operator: OperatorType
    account: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)


class BillPaymentRequest(BaseModel):
    operator: OperatorType
    source_account: str = Field(..., min_length=1)
    merchant_account: str = Field(..., min_length=1)
    amount: Decimal = Field(..., gt=0)
    bill_reference: str = Field(..., min_length=1)


class CustomTransactionRequest(BaseModel):
    """Request body for POST /v1/transactions/custom - caller picks the steps"""

    operator: OperatorType
    type: TransactionType
    source_account: str = Field(..., min_length=1)
    destination_account: Optional[str] = None
    amount: Decimal = Field(..., gt=0)
    with_verification: bool = False
    with_fraud_check: bool = False
    with_logging: bool = False
    with_notification: bool = False
    commission_percentage: Decimal = Field(Decimal("0"), ge=0)


class StepOutcomeSchema(BaseModel):
    step: str
    passed: bool
    detail: str
    critical: bool = True


class CommissionChargeSchema(BaseModel):
    label: str
    amount: Decimal


class TransactionResultSchema(BaseModel):
    """
    Wire form of a TransactionResult.

    Amounts stay Decimal end to end (serialized as JSON strings), so
    from_domain -> JSON -> to_domain reproduces identical values.
    """

    success: bool
    final_amount: Decimal
    currency: str
    operator_fee: Decimal
    total_commission: Decimal
    total_charges: Decimal
    commissions: List[CommissionChargeSchema]
    step_outcomes: List[StepOutcomeSchema]
    message: str

    @classmethod
    def from_domain(cls, result: TransactionResult) -> "TransactionResultSchema":
        return cls(
            success=result.success,
            final_amount=result.final_amount,
            currency=result.currency,
            operator_fee=result.operator_fee,
            total_commission=result.total_commission,
            total_charges=result.total_charges,
            commissions=[CommissionChargeSchema(label=c.label, amount=c.amount) for c in result.commissions],
            step_outcomes=[
                StepOutcomeSchema(step=o.step, passed=o.passed, detail=o.detail, critical=o.critical)
                for o in result.step_outcomes
            ],
            message=result.message,
        )

    def to_domain(self) -> TransactionResult:
        return TransactionResult(
            success=self.success,
            final_amount=self.final_amount,
            currency=self.currency,
            operator_fee=self.operator_fee,
            total_commission=self.total_commission,
            commissions=tuple(CommissionCharge(label=c.label, amount=c.amount) for c in self.commissions),
            step_outcomes=tuple(
                StepOutcome(step=o.step, passed=o.passed, detail=o.detail, critical=o.critical)
                for o in self.step_outcomes
            ),
            message=self.message,
        )


class TransactionResponse(BaseModel):
    """Response for every POST /v1/transactions/* endpoint"""

    key: str
    variant: str
    operator_type: OperatorType
    transaction_type: TransactionType
    reference: Optional[str] = None
    steps: str
    result: TransactionResultSchema


class HistoryItem(BaseModel):
    """Single executed transaction in history"""

    key: str
    operator_type: OperatorType
    transaction_type: TransactionType
    reference: Optional[str] = None
    source_account: Optional[str] = None
    destination_account: Optional[str] = None
    amount: Decimal
    currency: str
    success: bool
    total_commission: Decimal
    recorded_at: datetime


class HistoryResponse(BaseModel):
    """Response for GET /v1/transactions"""

    count: int
    transactions: List[HistoryItem]


class TransactionDetail(HistoryItem):
    """Response for GET /v1/transactions/{key}"""

    description: Optional[str] = None
    steps: str
    result: TransactionResultSchema


class VariantSummary(BaseModel):
    variant: str
    total_commission: Decimal
    steps: str


class VariantComparison(BaseModel):
    """Response for GET /v1/transactions/compare-variants"""

    amount: Decimal
    quick: VariantSummary
    full: VariantSummary
    commission_difference: Decimal
