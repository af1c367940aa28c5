from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from rxcost_core.domain.errors import InvalidInput
from rxcost_core.domain.models import MONTH_NAMES, MonthlyCostPoint, ProjectionConfig, ProjectionResult


def validate_cost(value) -> float:
    """
    Coerce a currency-like value to float, rejecting negatives, NaN and infinities.
    """
    if isinstance(value, bool):
        raise InvalidInput(f"Monthly cost must be a number, got {value!r}")
    try:
        cost = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidInput(f"Monthly cost must be a number, got {value!r}") from exc
    if not math.isfinite(cost):
        raise InvalidInput(f"Monthly cost must be finite, got {value!r}")
    if cost < 0:
        raise InvalidInput(f"Monthly cost must be non-negative, got {value!r}")
    return cost


def project(
    starting_monthly_cost,
    config: Optional[ProjectionConfig] = None,
    rng: Optional[np.random.Generator] = None,
) -> ProjectionResult:
    """
    Twelve-month cost projection:
    - Each month draws a growth factor uniformly in [1 - spread/2, 1 + spread/2).
    - A sinusoidal seasonal factor 1 + sin(i / 2) * amplitude is applied on top.
    - The unrounded running cost carries forward; recorded amounts are rounded to cents.
    """
    config = config or ProjectionConfig()
    running_cost = validate_cost(starting_monthly_cost)
    if rng is None:
        rng = np.random.default_rng(config.seed)

    draws = rng.random(len(MONTH_NAMES))
    breakdown: List[MonthlyCostPoint] = []
    for i, month in enumerate(MONTH_NAMES):
        growth_factor = 1 + (float(draws[i]) - 0.5) * config.growth_spread
        seasonal_adjustment = 1 + math.sin(i / 2) * config.seasonal_amplitude
        running_cost = running_cost * growth_factor * seasonal_adjustment
        breakdown.append(MonthlyCostPoint(month=month, amount=round(running_cost, 2)))

    annual_cost = sum(p.amount for p in breakdown)
    return ProjectionResult(
        annual_cost=annual_cost,
        monthly_installment=annual_cost / 12,
        monthly_breakdown=tuple(breakdown),
    )
