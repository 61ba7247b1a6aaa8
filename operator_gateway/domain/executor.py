"""Transaction execution engine - runs assembled steps against a capability bundle"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, List, Sequence

from operator_gateway.domain.capabilities import CapabilityBundle
from operator_gateway.domain.exceptions import InvalidAmountError
from operator_gateway.domain.fraud import FraudPolicy, RollingAverageFraudPolicy
from operator_gateway.domain.models import (
    FEES_STAGE,
    CommissionCharge,
    Step,
    StepOutcome,
    TransactionResult,
    TransactionSpec,
    TransactionType,
)
from operator_gateway.domain.money import ZERO, format_amount
from operator_gateway.infrastructure.observability.logging import log_audit_record
from operator_gateway.infrastructure.observability.metrics import step_failure_counter

logger = logging.getLogger(__name__)

AuditSink = Callable[[Dict[str, Any]], None]


class _HardFailure(Exception):
    """Aborts the remaining steps; converted to a failed result, never raised to callers"""

    def __init__(self, step: Step, detail: str):
        super().__init__(detail)
        self.step = step
        self.detail = detail


class TransactionExecutor:
    """
    Execute a TransactionSpec with one operator's capabilities.

    Step order is fixed:
    1. Verification        (hard gate)
    2. Fraud check         (hard gate)
    3. Currency conversion (hard gate, rate must be > 0)
    4. Fees + commissions  (always)
    5. Logging             (audit record, non-critical)
    6. Notification        (non-critical)

    Policy failures produce a failed TransactionResult. Only specification
    errors (non-positive amount) raise.
    """

    def __init__(self, fraud_policy: FraudPolicy | None = None, audit_sink: AuditSink | None = None):
        self.fraud_policy = fraud_policy or RollingAverageFraudPolicy()
        self.audit_sink = audit_sink or log_audit_record

    def execute(
        self,
        spec: TransactionSpec,
        bundle: CapabilityBundle,
        recent_amounts: Sequence[Decimal] = (),
    ) -> TransactionResult:
        if spec.amount is None or spec.amount <= ZERO:
            raise InvalidAmountError(f"Transaction amount must be positive, got {spec.amount}")

        outcomes: List[StepOutcome] = []
        try:
            if spec.has_step(Step.VERIFICATION):
                self._verify(spec, bundle, outcomes)

            if spec.has_step(Step.FRAUD_CHECK):
                self._check_fraud(spec, recent_amounts, outcomes)

            final_amount, currency = spec.amount, spec.currency
            if spec.has_step(Step.CURRENCY_CONVERSION):
                final_amount, currency = self._convert(spec, outcomes)

        except _HardFailure as failure:
            step_failure_counter.labels(step=failure.step.value).inc()
            outcomes.append(StepOutcome(step=failure.step.value, passed=False, detail=failure.detail))
            return TransactionResult(
                success=False,
                final_amount=spec.amount,
                currency=spec.currency,
                step_outcomes=tuple(outcomes),
                message=failure.detail,
            )

        operator_fee = bundle.fee_calculator.calculate_transaction_fee(final_amount, spec.type)
        charges = tuple(CommissionCharge(label=c.label, amount=c.calculate(final_amount)) for c in spec.commissions)
        total_commission = sum((charge.amount for charge in charges), ZERO)
        outcomes.append(
            StepOutcome(
                step=FEES_STAGE,
                passed=True,
                detail=(
                    f"Operator fee {format_amount(operator_fee)}, "
                    f"{len(charges)} commission(s) totalling {format_amount(total_commission)}"
                ),
            )
        )

        if spec.has_step(Step.LOGGING):
            self._write_audit_record(spec, bundle, final_amount, currency, operator_fee, charges, outcomes)

        if spec.has_step(Step.NOTIFICATION):
            self._notify(spec, bundle, final_amount, operator_fee + total_commission, outcomes)

        return TransactionResult(
            success=True,
            final_amount=final_amount,
            currency=currency,
            operator_fee=operator_fee,
            total_commission=total_commission,
            commissions=charges,
            step_outcomes=tuple(outcomes),
            message=f"{spec.type.description} of {format_amount(final_amount)} {currency} executed successfully",
        )

    def _verify(self, spec: TransactionSpec, bundle: CapabilityBundle, outcomes: List[StepOutcome]) -> None:
        validation = bundle.validator.validate_transaction(spec.source_account, spec.amount, spec.type)
        if not validation.approved:
            raise _HardFailure(Step.VERIFICATION, validation.message)
        outcomes.append(StepOutcome(step=Step.VERIFICATION.value, passed=True, detail=validation.message))

    def _check_fraud(self, spec: TransactionSpec, recent_amounts: Sequence[Decimal], outcomes: List[StepOutcome]) -> None:
        verdict = self.fraud_policy.evaluate(spec, recent_amounts)
        if not verdict.passed:
            raise _HardFailure(Step.FRAUD_CHECK, verdict.reason)
        outcomes.append(StepOutcome(step=Step.FRAUD_CHECK.value, passed=True, detail=verdict.reason))

    def _convert(self, spec: TransactionSpec, outcomes: List[StepOutcome]) -> tuple[Decimal, str]:
        rate = spec.exchange_rate
        if rate is None or rate <= ZERO:
            raise _HardFailure(Step.CURRENCY_CONVERSION, f"Invalid exchange rate: {rate}")

        converted = spec.amount * rate
        target = spec.target_currency or spec.currency
        outcomes.append(
            StepOutcome(
                step=Step.CURRENCY_CONVERSION.value,
                passed=True,
                detail=f"{spec.amount} {spec.currency} -> {converted} {target} (rate {rate})",
            )
        )
        return converted, target

    def _write_audit_record(self, spec, bundle, final_amount, currency, operator_fee, charges, outcomes) -> None:
        record = {
            "recorded_at": datetime.now(timezone.utc).isoformat(),
            "operator": bundle.operator_type.value,
            "type": spec.type.value,
            "reference": spec.reference,
            "source_account": spec.source_account,
            "destination_account": spec.destination_account,
            "amount": str(spec.amount),
            "currency": spec.currency,
            "final_amount": str(final_amount),
            "final_currency": currency,
            "operator_fee": str(operator_fee),
            "commissions": [{"label": c.label, "amount": str(c.amount)} for c in charges],
            "steps": [o.step for o in outcomes],
        }
        try:
            self.audit_sink(record)
        except Exception as e:
            step_failure_counter.labels(step=Step.LOGGING.value).inc()
            logger.warning(f"Audit record not written: {e}", extra={"reference": spec.reference})
            outcomes.append(
                StepOutcome(step=Step.LOGGING.value, passed=False, detail=f"Audit failed: {e}", critical=False)
            )
            return
        outcomes.append(StepOutcome(step=Step.LOGGING.value, passed=True, detail="Audit record written"))

    def _notify(self, spec, bundle, final_amount, charges_total, outcomes) -> None:
        # Non-critical: any failure is recorded and the transaction still succeeds
        try:
            balance = bundle.external_adapter.fetch_external_balance(spec.source_account)
            if spec.type == TransactionType.DEPOSIT:
                balance = balance + final_amount
            else:
                balance = balance - final_amount - charges_total

            notification = bundle.notifier.send_transaction_notification(
                spec.source_account, spec.type, final_amount, balance
            )
        except Exception as e:
            step_failure_counter.labels(step=Step.NOTIFICATION.value).inc()
            logger.warning(f"Notification failed: {e}", extra={"reference": spec.reference})
            outcomes.append(
                StepOutcome(step=Step.NOTIFICATION.value, passed=False, detail=f"Notification failed: {e}", critical=False)
            )
            return

        if not notification.delivered:
            step_failure_counter.labels(step=Step.NOTIFICATION.value).inc()
        outcomes.append(
            StepOutcome(
                step=Step.NOTIFICATION.value,
                passed=notification.delivered,
                detail=notification.formatted_message,
                critical=False,
            )
        )
