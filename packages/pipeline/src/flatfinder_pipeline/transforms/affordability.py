"""
transforms/affordability.py — Which units each income bracket can finance.

Uses HDB loan guidelines: 30 % of gross monthly income towards the
mortgage, 2.6 % p.a. over 25 years, 20 % down payment.

    max price = PMT * (1 - (1 + r)^-n) / r / (1 - down payment)

where PMT = income * 0.30, r = annual rate / 12 and n = years * 12.

Usage:
    from flatfinder_pipeline.transforms.affordability import affordability_analysis

    analysis = affordability_analysis(filtered_units)
    analysis.brackets[0].max_affordable_price
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from flatfinder_shared.constants import (
    ANNUAL_INTEREST_RATE,
    DOWN_PAYMENT_RATIO,
    INCOME_BRACKETS,
    INCOME_TO_PAYMENT_RATIO,
    LOAN_TENURE_YEARS,
    UNIT_TYPES,
)
from flatfinder_shared.models import AffordabilityAnalysis, AffordabilityBracket, UnitRecord


def _annuity_factor() -> float:
    monthly_rate = ANNUAL_INTEREST_RATE / 12
    payments = LOAN_TENURE_YEARS * 12
    return (1 - (1 + monthly_rate) ** -payments) / monthly_rate


def max_affordable_price(monthly_income: float) -> float:
    """Highest purchase price a household with monthly_income can finance."""
    max_loan = monthly_income * INCOME_TO_PAYMENT_RATIO * _annuity_factor()
    return max_loan / (1 - DOWN_PAYMENT_RATIO)


def minimum_income_required(price: float) -> float:
    """Monthly income needed to finance price; inverse of max_affordable_price()."""
    loan = price * (1 - DOWN_PAYMENT_RATIO)
    return loan / _annuity_factor() / INCOME_TO_PAYMENT_RATIO


def _type_order(unit_type: str) -> tuple[int, str]:
    if unit_type in UNIT_TYPES:
        return (UNIT_TYPES.index(unit_type), unit_type)
    return (len(UNIT_TYPES), unit_type)


def affordability_analysis(units: Sequence[UnitRecord]) -> AffordabilityAnalysis:
    """
    Bucket units by the income brackets able to afford them.

    A bracket counts every unit priced at or below what its top income can
    finance, so brackets are cumulative. Units without a price are ignored.
    The cheapest unit per unit type is reported in display order.
    """
    priced = [u for u in units if u.price is not None]
    if not priced:
        return AffordabilityAnalysis()

    brackets = []
    for label, low, high in INCOME_BRACKETS:
        ceiling = max_affordable_price(high)
        affordable = [u for u in priced if u.price <= ceiling]
        prices = [u.price for u in affordable]
        brackets.append(
            AffordabilityBracket(
                label=label,
                min_income=low,
                max_income=high,
                max_affordable_price=ceiling,
                count=len(affordable),
                avg_price=sum(prices) / len(prices) if prices else 0.0,
                min_price=min(prices) if prices else 0.0,
                unit_type_counts=dict(Counter(u.unit_type or "" for u in affordable)),
            )
        )

    cheapest: dict[str, UnitRecord] = {}
    for unit in priced:
        key = unit.unit_type or ""
        if key not in cheapest or unit.price < cheapest[key].price:
            cheapest[key] = unit

    prices = [u.price for u in priced]
    return AffordabilityAnalysis(
        brackets=brackets,
        total_units=len(priced),
        avg_price=sum(prices) / len(prices),
        min_price=min(prices),
        max_price=max(prices),
        cheapest_by_unit_type={k: cheapest[k] for k in sorted(cheapest, key=_type_order)},
    )
