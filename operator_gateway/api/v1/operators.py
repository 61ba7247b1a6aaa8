"""/v1/operators - per-operator capability endpoints"""

import logging
from decimal import Decimal
from typing import List

from fastapi import APIRouter, Depends, Query, Request

from operator_gateway.api.dependencies import get_operator_type, get_request_id, get_resolver
from operator_gateway.api.v1.schemas import (
    CalculateFeeRequest,
    ExternalTransferRequest,
    ExternalTransferResponse,
    FeeComparisonItem,
    FeeResponse,
    NotificationRequest,
    NotificationResponse,
    OperatorInfoSchema,
    ValidateAccountRequest,
    ValidationResponse,
)
from operator_gateway.domain.models import OperatorType, TransactionType
from operator_gateway.domain.resolver import CapabilityResolver
from operator_gateway.utils.references import generate_reference

router = APIRouter()


@router.get("/operators", response_model=List[OperatorInfoSchema])
def list_operators(resolver: CapabilityResolver = Depends(get_resolver)):
    """All registered operator families, in declaration order"""
    return [OperatorInfoSchema.from_domain(info) for info in resolver.all_operator_info()]


@router.get("/operators/compare-fees", response_model=List[FeeComparisonItem])
def compare_fees(
    amount: Decimal = Query(..., gt=0, description="Transaction amount"),
    transaction_type: TransactionType = Query(TransactionType.TRANSFER_INTERNAL),
    resolver: CapabilityResolver = Depends(get_resolver),
):
    """Same amount priced by every operator"""
    return [
        FeeComparisonItem(
            operator_type=row["operator_type"],
            operator_name=row["operator_name"],
            amount=amount,
            fee=row["fee"],
            total=amount + row["fee"],
        )
        for row in resolver.compare_fees(amount, transaction_type)
    ]


@router.get("/operators/{operator_type}", response_model=OperatorInfoSchema)
def get_operator(
    operator_type: OperatorType = Depends(get_operator_type),
    resolver: CapabilityResolver = Depends(get_resolver),
):
    return OperatorInfoSchema.from_domain(resolver.operator_info(operator_type))


@router.post("/operators/{operator_type}/validate-account", response_model=ValidationResponse)
def validate_account(
    body: ValidateAccountRequest,
    operator_type: OperatorType = Depends(get_operator_type),
    resolver: CapabilityResolver = Depends(get_resolver),
):
    """
    Run the operator's account-opening rules.

    Rejections are a normal 200 response with approved=false.
    """
    validator = resolver.resolve(operator_type).validator
    outcome = validator.validate_account_creation(body.account_number, body.client_id, body.initial_deposit)
    return ValidationResponse(
        operator_type=operator_type,
        approved=outcome.approved,
        message=outcome.message,
        operator_name=outcome.operator_name,
    )


@router.post("/operators/{operator_type}/calculate-fee", response_model=FeeResponse)
def calculate_fee(
    body: CalculateFeeRequest,
    operator_type: OperatorType = Depends(get_operator_type),
    resolver: CapabilityResolver = Depends(get_resolver),
):
    calculator = resolver.resolve(operator_type).fee_calculator
    fee = calculator.calculate_transaction_fee(body.amount, body.transaction_type)

    inter_operator_fee = None
    if body.destination_operator is not None:
        inter_operator_fee = calculator.calculate_inter_operator_fee(body.amount, body.destination_operator)

    return FeeResponse(
        operator_type=operator_type,
        amount=body.amount,
        transaction_type=body.transaction_type,
        fee=fee,
        total_with_fee=body.amount + fee,
        inter_operator_fee=inter_operator_fee,
    )


@router.post("/operators/{operator_type}/send-notification", response_model=NotificationResponse)
def send_notification(
    body: NotificationRequest,
    operator_type: OperatorType = Depends(get_operator_type),
    resolver: CapabilityResolver = Depends(get_resolver),
):
    notifier = resolver.resolve(operator_type).notifier
    outcome = notifier.send_transaction_notification(body.recipient, body.transaction_type, body.amount, body.balance)
    return NotificationResponse(
        operator_type=operator_type,
        delivered=outcome.delivered,
        channel=outcome.channel,
        formatted_message=outcome.formatted_message,
        operator_name=outcome.operator_name,
    )


@router.post("/operators/{operator_type}/transfer", response_model=ExternalTransferResponse)
def external_transfer(
    body: ExternalTransferRequest,
    request: Request,
    operator_type: OperatorType = Depends(get_operator_type),
    resolver: CapabilityResolver = Depends(get_resolver),
):
    """Hand a transfer to the operator's external network (acknowledgment only)"""
    reference = body.reference or generate_reference("REF")
    adapter = resolver.resolve(operator_type).external_adapter
    outcome = adapter.execute_external_transfer(body.destination_account, body.amount, reference)

    if not outcome.succeeded:
        logging.warning(
            f"External transfer rejected: {outcome.diagnostic}",
            extra={"request_id": get_request_id(request), "operator": operator_type.value},
        )

    return ExternalTransferResponse(
        operator_type=operator_type,
        succeeded=outcome.succeeded,
        external_reference=outcome.external_reference,
        system_name=outcome.system_name,
        diagnostic=outcome.diagnostic,
        reference=reference,
    )
