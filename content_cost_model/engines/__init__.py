from .calculations import (
    calculate_fixed_costs,
    calculate_grand_total,
    calculate_project_costs,
    calculate_total_hours,
)
from .capacity import aggregate_capacity
from .cost import AllocationCost, CostCalculation, MemberCost, distribute_costs
from .demand import aggregate_demand, empty_demand
from .duration import DurationResult, resolve_duration, weeks_for_role
from .fixed_costs import fixed_cost_totals_by_category, total_fixed_costs

__all__ = [
    "AllocationCost",
    "CostCalculation",
    "DurationResult",
    "MemberCost",
    "aggregate_capacity",
    "aggregate_demand",
    "calculate_fixed_costs",
    "calculate_grand_total",
    "calculate_project_costs",
    "calculate_total_hours",
    "distribute_costs",
    "empty_demand",
    "fixed_cost_totals_by_category",
    "resolve_duration",
    "total_fixed_costs",
    "weeks_for_role",
]
