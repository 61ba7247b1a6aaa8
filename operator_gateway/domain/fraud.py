"""Fraud gate policies used by the FraudCheck execution step"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Sequence

from operator_gateway.config import settings
from operator_gateway.domain.models import TransactionSpec
from operator_gateway.domain.money import format_amount, to_decimal


@dataclass(frozen=True)
class FraudVerdict:
    passed: bool
    reason: str


class FraudPolicy(ABC):
    @property
    def history_window(self) -> int:
        """How many recent amounts of the source account evaluate() wants"""
        return settings.fraud_window_size

    @abstractmethod
    def evaluate(self, spec: TransactionSpec, recent_amounts: Sequence[Decimal]) -> FraudVerdict: ...


class RollingAverageFraudPolicy(FraudPolicy):
    """
    Deterministic amount/velocity heuristic.

    Trips when:
    - amount is above an absolute ceiling, or
    - at least `min_history` recent amounts exist and the amount is more
      than `multiplier` times their mean (last `window` amounts only)
    """

    def __init__(
        self,
        multiplier: Decimal | float | None = None,
        window: int | None = None,
        min_history: int | None = None,
        ceiling: Decimal | int | None = None,
    ):
        self.multiplier = to_decimal(multiplier if multiplier is not None else settings.fraud_velocity_multiplier)
        self.window = window if window is not None else settings.fraud_window_size
        self.min_history = min_history if min_history is not None else settings.fraud_min_history
        self.ceiling = to_decimal(ceiling if ceiling is not None else settings.fraud_amount_ceiling)

    @property
    def history_window(self) -> int:
        return self.window

    def evaluate(self, spec: TransactionSpec, recent_amounts: Sequence[Decimal]) -> FraudVerdict:
        if spec.amount > self.ceiling:
            return FraudVerdict(
                passed=False,
                reason=f"Amount {format_amount(spec.amount)} above fraud ceiling {format_amount(self.ceiling)}; manual review required",
            )

        window = list(recent_amounts)[-self.window:] if self.window > 0 else []
        if len(window) >= self.min_history and window:
            average = sum(window, Decimal("0")) / len(window)
            if spec.amount > average * self.multiplier:
                return FraudVerdict(
                    passed=False,
                    reason=(
                        f"Amount {format_amount(spec.amount)} exceeds {self.multiplier}x "
                        f"the rolling average of {format_amount(average)}"
                    ),
                )

        return FraudVerdict(passed=True, reason="Fraud check passed")
