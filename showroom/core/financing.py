"""Deterministic financing engine.

Three pure calculators share one input contract (FinancingParams) and
produce a PaymentCalculation:

- Purchase: standard amortizing loan, M = P * r(1+r)^n / ((1+r)^n - 1)
- Lease: monthly depreciation plus finance charge (APR / 2400 money factor)
- Subscription: share of the net amount, straight-line, plus fixed
  insurance and maintenance

All three compute the same net amount first:
    tax = price * tax_rate
    adjusted_price = price + tax
    net = adjusted_price - trade_in_value - down_payment

Intermediate values stay unrounded; only the reported figures are rounded
half-up to whole currency units.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from ..config import FinancingAssumptions

logger = logging.getLogger(__name__)


class FinancingValidationError(ValueError):
    """Financing input violates a documented domain constraint."""

    pass


class PaymentScenario(str, Enum):
    PURCHASE = "purchase"
    LEASE = "lease"
    SUBSCRIPTION = "subscription"


class FinancingParams(BaseModel):
    """Validated input for one calculation.

    Accepts snake_case names or the boundary's camelCase keys
    (``downPayment``, ``termMonths``, ...).

    Attributes:
        price: Vehicle price, must be positive
        down_payment: Cash down, non-negative
        apr: Annual percentage rate in [0, 100]
        term_months: Positive number of monthly payments
        is_lease: Route calculate_payment() to the lease calculator
        is_subscription: Route calculate_payment() to the subscription calculator
        residual_value: Lease residual; None means residual_ratio * price
        trade_in_value: Trade-in credit, non-negative
        tax_rate: Sales tax as a fraction in [0, 1]
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        allow_inf_nan=False,
    )

    price: float = Field(gt=0)
    down_payment: float = Field(default=0.0, ge=0)
    apr: float = Field(default=5.5, ge=0, le=100)
    term_months: int = Field(default=60, gt=0)
    is_lease: bool = False
    is_subscription: bool = False
    residual_value: Optional[float] = Field(default=None, ge=0)
    trade_in_value: float = Field(default=0.0, ge=0)
    tax_rate: float = Field(default=0.08, ge=0, le=1)

    @property
    def tax(self) -> float:
        return self.price * self.tax_rate

    @property
    def adjusted_price(self) -> float:
        return self.price + self.tax

    @property
    def net_amount(self) -> float:
        """Amount left to pay after trade-in and down payment."""
        return self.adjusted_price - self.trade_in_value - self.down_payment


ParamsInput = Union[FinancingParams, Mapping[str, Any]]


def coerce_params(params: ParamsInput) -> FinancingParams:
    """Build FinancingParams from caller input.

    Raises:
        FinancingValidationError: If any field violates its constraint
    """
    if isinstance(params, FinancingParams):
        return params
    try:
        return FinancingParams.model_validate(dict(params))
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise FinancingValidationError(f"Invalid financing parameters: {problems}") from e


def round_currency(value: float) -> int:
    """Round half-up to whole currency units (2.5 -> 3)."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


@dataclass
class PaymentCalculation:
    """Result of one calculator call.

    Attributes:
        monthly_payment: Rounded monthly payment
        total_cost: Rounded payments plus down payment and trade-in
        breakdown: Rounded line items (keys depend on the scenario)
        scenario: Which calculator produced this
        total_interest: Purchase only
        residual_value: Lease only
    """

    monthly_payment: int
    total_cost: int
    breakdown: dict[str, int] = field(default_factory=dict)
    scenario: PaymentScenario = PaymentScenario.PURCHASE
    total_interest: int | None = None
    residual_value: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Boundary representation (camelCase keys, None-free)."""
        out: dict[str, Any] = {
            "monthlyPayment": self.monthly_payment,
            "totalCost": self.total_cost,
            "breakdown": dict(self.breakdown),
            "type": self.scenario.value,
        }
        if self.total_interest is not None:
            out["totalInterest"] = self.total_interest
        if self.residual_value is not None:
            out["residualValue"] = self.residual_value
        return out


@dataclass
class ScenarioSet:
    """All three scenarios for the same parameters."""

    buy: PaymentCalculation
    lease: PaymentCalculation
    subscription: PaymentCalculation

    def to_dict(self) -> dict[str, Any]:
        return {
            "buy": self.buy.to_dict(),
            "lease": self.lease.to_dict(),
            "subscription": self.subscription.to_dict(),
        }


def calculate_purchase(params: ParamsInput) -> PaymentCalculation:
    """Amortizing-loan purchase.

    A net amount of zero or less (trade-in and down payment cover the
    adjusted price) means no loan: payment 0, interest 0. A 0% APR is
    straight-line.

    Raises:
        FinancingValidationError: On invalid parameters
    """
    p = coerce_params(params)
    tax = p.tax
    net = p.net_amount

    if net <= 0:
        logger.debug(f"Purchase fully covered by trade-in/down payment (net {net:.2f})")
        return PaymentCalculation(
            monthly_payment=0,
            total_cost=round_currency(p.down_payment + p.trade_in_value),
            total_interest=0,
            breakdown={
                "principal": 0,
                "interest": 0,
                "taxes": round_currency(tax),
                "tradeIn": round_currency(p.trade_in_value),
            },
            scenario=PaymentScenario.PURCHASE,
        )

    monthly_rate = p.apr / 100 / 12
    if monthly_rate == 0:
        monthly = net / p.term_months
    else:
        # (1 + r) ** -n underflows to 0 on very long terms; the payment tends to net * r
        monthly = net * monthly_rate / (1 - (1 + monthly_rate) ** -p.term_months)

    total_cost = monthly * p.term_months + p.down_payment + p.trade_in_value
    total_interest = total_cost - p.adjusted_price

    return PaymentCalculation(
        monthly_payment=round_currency(monthly),
        total_cost=round_currency(total_cost),
        total_interest=round_currency(total_interest),
        breakdown={
            "principal": round_currency(net),
            "interest": round_currency(total_interest),
            "taxes": round_currency(tax),
            "tradeIn": round_currency(p.trade_in_value),
        },
        scenario=PaymentScenario.PURCHASE,
    )


def calculate_lease(
    params: ParamsInput,
    assumptions: FinancingAssumptions | None = None,
) -> PaymentCalculation:
    """Depreciation-plus-finance-charge lease.

    Raises:
        FinancingValidationError: On invalid parameters, or when the residual
            is not below the net amount
    """
    p = coerce_params(params)
    a = assumptions or FinancingAssumptions()
    net = p.net_amount

    residual = p.residual_value if p.residual_value is not None else p.price * a.residual_ratio
    if residual >= net:
        raise FinancingValidationError(
            f"Residual value ({residual:.2f}) must be less than the net amount ({net:.2f})"
        )

    monthly_depreciation = (net - residual) / p.term_months
    money_factor = p.apr / a.money_factor_divisor
    monthly_finance = (net + residual) * money_factor
    monthly = monthly_depreciation + monthly_finance
    total_cost = monthly * p.term_months + p.down_payment + p.trade_in_value

    return PaymentCalculation(
        monthly_payment=round_currency(monthly),
        total_cost=round_currency(total_cost),
        residual_value=round_currency(residual),
        breakdown={
            "depreciation": round_currency(monthly_depreciation),
            "finance": round_currency(monthly_finance),
            "taxes": round_currency(p.tax),
            "tradeIn": round_currency(p.trade_in_value),
        },
        scenario=PaymentScenario.LEASE,
    )


def calculate_subscription(
    params: ParamsInput,
    assumptions: FinancingAssumptions | None = None,
) -> PaymentCalculation:
    """All-inclusive subscription; no interest applies.

    A net amount of zero or less contributes no vehicle portion; insurance
    and maintenance are still charged.

    Raises:
        FinancingValidationError: On invalid parameters
    """
    p = coerce_params(params)
    a = assumptions or FinancingAssumptions()
    net = p.net_amount

    vehicle_portion = max(net, 0.0) * a.subscription_vehicle_share / p.term_months
    insurance = a.subscription_insurance
    maintenance = a.subscription_maintenance
    monthly = vehicle_portion + insurance + maintenance
    total_cost = monthly * p.term_months + p.down_payment + p.trade_in_value

    return PaymentCalculation(
        monthly_payment=round_currency(monthly),
        total_cost=round_currency(total_cost),
        breakdown={
            "vehicle": round_currency(vehicle_portion),
            "insurance": round_currency(insurance),
            "maintenance": round_currency(maintenance),
            "taxes": round_currency(p.tax),
            "tradeIn": round_currency(p.trade_in_value),
        },
        scenario=PaymentScenario.SUBSCRIPTION,
    )


def calculate_payment(
    params: ParamsInput,
    assumptions: FinancingAssumptions | None = None,
) -> PaymentCalculation:
    """Run the calculator the parameters ask for.

    is_subscription wins over is_lease; neither means purchase.
    """
    p = coerce_params(params)
    if p.is_subscription:
        return calculate_subscription(p, assumptions)
    if p.is_lease:
        return calculate_lease(p, assumptions)
    return calculate_purchase(p)


def calculate_all_scenarios(
    params: ParamsInput,
    assumptions: FinancingAssumptions | None = None,
) -> ScenarioSet:
    """Purchase, lease and subscription for the same parameters.

    Raises:
        FinancingValidationError: If any of the three rejects the parameters
    """
    p = coerce_params(params)
    result = ScenarioSet(
        buy=calculate_purchase(p),
        lease=calculate_lease(p, assumptions),
        subscription=calculate_subscription(p, assumptions),
    )
    logger.debug(
        f"Scenarios for price {p.price:.0f}: buy={result.buy.monthly_payment} "
        f"lease={result.lease.monthly_payment} "
        f"subscription={result.subscription.monthly_payment}"
    )
    return result


__all__ = [
    "FinancingParams",
    "FinancingValidationError",
    "PaymentCalculation",
    "PaymentScenario",
    "ScenarioSet",
    "calculate_all_scenarios",
    "calculate_lease",
    "calculate_payment",
    "calculate_purchase",
    "calculate_subscription",
    "coerce_params",
    "round_currency",
]
