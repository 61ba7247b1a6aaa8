"""Commission items attached to a transaction at assembly time"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional

from operator_gateway.domain.money import ZERO, ceil_to_unit, percent_of, to_decimal


class CommissionKind(str, Enum):
    PERCENTAGE = "percentage"
    FLAT = "flat"


@dataclass(frozen=True)
class Commission:
    """
    Additional fee item charged on top of the operator fee.

    FLAT commissions charge `value` as-is. PERCENTAGE commissions charge
    `base_amount + value%` of the transaction amount, clamped to
    minimum/maximum when set, then rounded up to a whole unit.
    `value` is expressed in percent points for percentage commissions.
    """

    label: str
    kind: CommissionKind
    value: Decimal
    minimum: Optional[Decimal] = None
    maximum: Optional[Decimal] = None
    base_amount: Decimal = ZERO
    description: Optional[str] = None

    @classmethod
    def flat(cls, label: str, amount, description: str | None = None) -> "Commission":
        return cls(label=label, kind=CommissionKind.FLAT, value=to_decimal(amount), description=description)

    @classmethod
    def percentage(
        cls,
        label: str,
        percent,
        minimum=None,
        maximum=None,
        base_amount=0,
        description: str | None = None,
    ) -> "Commission":
        return cls(
            label=label,
            kind=CommissionKind.PERCENTAGE,
            value=to_decimal(percent),
            minimum=to_decimal(minimum) if minimum is not None else None,
            maximum=to_decimal(maximum) if maximum is not None else None,
            base_amount=to_decimal(base_amount),
            description=description,
        )

    def calculate(self, amount: Decimal) -> Decimal:
        """Commission owed on a (post-conversion) transaction amount"""
        if self.kind == CommissionKind.FLAT:
            return self.value

        commission = self.base_amount + percent_of(amount, self.value)

        if self.minimum is not None and commission < self.minimum:
            commission = self.minimum
        if self.maximum is not None and commission > self.maximum:
            commission = self.maximum

        return ceil_to_unit(commission)

    def formula(self) -> str:
        """Human-readable pricing rule, e.g. '500 FCFA + 1.5% (min: 1000)'"""
        parts = []
        if self.kind == CommissionKind.FLAT:
            parts.append(f"{self.value} FCFA")
        else:
            if self.base_amount > ZERO:
                parts.append(f"{self.base_amount} FCFA")
            parts.append(f"{self.value}%")
        formula = " + ".join(parts)
        if self.minimum is not None:
            formula += f" (min: {self.minimum})"
        if self.maximum is not None:
            formula += f" (max: {self.maximum})"
        return formula


# Standard commissions

def transfer_fee() -> Commission:
    return Commission.percentage("Transfer fee", 1, minimum=100, description="Standard transfer commission")


def inter_operator_fee() -> Commission:
    return Commission.percentage(
        "Inter-operator fee",
        "1.5",
        minimum=1000,
        base_amount=500,
        description="Commission for transfers between different operators",
    )


def international_fee() -> Commission:
    return Commission.percentage(
        "International fee",
        2,
        minimum=3000,
        maximum=50000,
        base_amount=2000,
        description="Commission for international transfers",
    )


def exchange_fee() -> Commission:
    return Commission.percentage("Exchange fee", "0.5", minimum=500, description="Currency exchange commission")


def service_fee(amount) -> Commission:
    return Commission.flat("Service fee", amount, description="Fixed service charge")


def vat() -> Commission:
    return Commission.percentage("VAT", "19.25", description="Value added tax")
