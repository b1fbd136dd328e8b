# content_cost_model/engines/fixed_costs.py
"""Flat, non-labor costs. Independent of duration, roster and rates."""

from typing import Dict

from content_cost_model.config.models import FixedCosts


def fixed_cost_totals_by_category(fixed_costs: FixedCosts) -> Dict[str, float]:
    return {
        category: sum(cost.amount for cost in costs)
        for category, costs in fixed_costs.by_category().items()
    }


def total_fixed_costs(fixed_costs: FixedCosts) -> float:
    """Sum of every amount in all four categories; empty categories add nothing."""
    return sum(fixed_cost_totals_by_category(fixed_costs).values())
