"""/v1/transactions - preset and custom transaction execution, history lookup"""

from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query

from operator_gateway.api.dependencies import get_transaction_service
from operator_gateway.api.v1.schemas import (
    BillPaymentRequest,
    CustomTransactionRequest,
    DepositRequest,
    HistoryItem,
    HistoryResponse,
    InterOperatorTransferRequest,
    InternationalTransferRequest,
    QuickTransferRequest,
    TransactionDetail,
    TransactionResponse,
    TransactionResultSchema,
    VariantComparison,
    WithdrawalRequest,
)
from operator_gateway.domain.commissions import Commission
from operator_gateway.domain.history import HistoryEntry
from operator_gateway.services.transactions import TransactionService

router = APIRouter()


def _response(service: TransactionService, key: str, variant: str) -> TransactionResponse:
    entry = service.history.get(key)
    return TransactionResponse(
        key=key,
        variant=variant,
        operator_type=entry.operator_type,
        transaction_type=entry.spec.type,
        reference=entry.spec.reference,
        steps=entry.spec.summary(),
        result=TransactionResultSchema.from_domain(entry.result),
    )


def _history_fields(entry: HistoryEntry) -> dict:
    return dict(
        key=entry.key,
        operator_type=entry.operator_type,
        transaction_type=entry.spec.type,
        reference=entry.spec.reference,
        source_account=entry.spec.source_account,
        destination_account=entry.spec.destination_account,
        amount=entry.spec.amount,
        currency=entry.spec.currency,
        success=entry.result.success,
        total_commission=entry.result.total_commission,
        recorded_at=entry.recorded_at,
    )


@router.post("/transactions/quick", response_model=TransactionResponse)
def quick_transfer(body: QuickTransferRequest, service: TransactionService = Depends(get_transaction_service)):
    """Transfer fee + notification only, no checks"""
    key, _ = service.execute_quick_transfer(body.operator, body.source_account, body.destination_account, body.amount)
    return _response(service, key, "Quick transfer")


@router.post("/transactions/full", response_model=TransactionResponse)
def full_transfer(body: QuickTransferRequest, service: TransactionService = Depends(get_transaction_service)):
    """Verification, fraud check, transfer + service fee, logging, notification"""
    key, _ = service.execute_full_transfer(body.operator, body.source_account, body.destination_account, body.amount)
    return _response(service, key, "Full transfer")


@router.post("/transactions/inter-operator", response_model=TransactionResponse)
def inter_operator_transfer(
    body: InterOperatorTransferRequest, service: TransactionService = Depends(get_transaction_service)
):
    key, _ = service.execute_inter_operator_transfer(
        body.source_account,
        body.source_operator,
        body.destination_account,
        body.destination_operator,
        body.amount,
    )
    return _response(service, key, "Inter-operator transfer")


@router.post("/transactions/international", response_model=TransactionResponse)
def international_transfer(
    body: InternationalTransferRequest, service: TransactionService = Depends(get_transaction_service)
):
    key, _ = service.execute_international_transfer(
        body.operator,
        body.source_account,
        body.destination_account,
        body.amount,
        body.source_currency,
        body.target_currency,
        body.exchange_rate,
    )
    return _response(service, key, "International transfer")


@router.post("/transactions/deposit", response_model=TransactionResponse)
def deposit(body: DepositRequest, service: TransactionService = Depends(get_transaction_service)):
    key, _ = service.execute_deposit(body.operator, body.account, body.amount, verified=body.verified)
    return _response(service, key, "Verified deposit" if body.verified else "Deposit")


@router.post("/transactions/withdrawal", response_model=TransactionResponse)
def withdrawal(body: WithdrawalRequest, service: TransactionService = Depends(get_transaction_service)):
    key, _ = service.execute_withdrawal(body.operator, body.account, body.amount)
    return _response(service, key, "Withdrawal")


@router.post("/transactions/bill-payment", response_model=TransactionResponse)
def bill_payment(body: BillPaymentRequest, service: TransactionService = Depends(get_transaction_service)):
    key, _ = service.execute_bill_payment(
        body.operator, body.source_account, body.merchant_account, body.amount, body.bill_reference
    )
    return _response(service, key, "Bill payment")


@router.post("/transactions/custom", response_model=TransactionResponse)
def custom_transaction(body: CustomTransactionRequest, service: TransactionService = Depends(get_transaction_service)):
    commissions = []
    if body.commission_percentage > 0:
        commissions.append(Commission.percentage("Custom commission", body.commission_percentage))

    key, _ = service.execute_custom(
        body.operator,
        body.type,
        body.source_account,
        body.amount,
        destination=body.destination_account,
        with_verification=body.with_verification,
        with_fraud_check=body.with_fraud_check,
        with_logging=body.with_logging,
        with_notification=body.with_notification,
        commissions=commissions,
    )
    return _response(service, key, "Custom transaction")


@router.get("/transactions", response_model=HistoryResponse)
def list_transactions(service: TransactionService = Depends(get_transaction_service)):
    """Executed transactions, oldest first (failed ones included)"""
    entries = service.list_history()
    return HistoryResponse(count=len(entries), transactions=[HistoryItem(**_history_fields(e)) for e in entries])


@router.get("/transactions/compare-variants", response_model=VariantComparison)
def compare_variants(
    amount: Decimal = Query(Decimal("100000"), gt=0),
    service: TransactionService = Depends(get_transaction_service),
):
    """Quick vs full transfer commissions for one amount (nothing executed)"""
    return service.compare_variants(amount)


@router.get("/transactions/{key}", response_model=TransactionDetail)
def get_transaction(key: str, service: TransactionService = Depends(get_transaction_service)):
    entry = service.get(key)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Transaction not found: {key}")

    return TransactionDetail(
        **_history_fields(entry),
        description=entry.spec.description,
        steps=entry.spec.summary(),
        result=TransactionResultSchema.from_domain(entry.result),
    )
