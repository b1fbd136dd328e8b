# content_cost_model/reporting/summary.py
"""
Summary tables built from a cost calculation, for display and CSV export.
"""

import logging
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd

from content_cost_model.config.models import FixedCosts
from content_cost_model.engines.cost import CostCalculation

logger = logging.getLogger(__name__)

ROLE_SUMMARY_COLUMNS = [
    "role",
    "demand_hours",
    "weekly_capacity",
    "weeks_required",
    "utilization",
    "is_bottleneck",
    "is_unstaffed",
]

MEMBER_COST_COLUMNS = ["member_id", "member", "role", "hours", "rate", "cost"]

FIXED_COST_COLUMNS = ["category", "id", "name", "amount"]


def role_summary_frame(calc: CostCalculation) -> pd.DataFrame:
    """One row per role that has demand or capacity.

    Demand roles come first in their aggregation order, followed by roles
    that only have capacity. ``weeks_required`` is NaN for unstaffed roles.
    """
    roles = list(calc.work_needed) + [r for r in calc.team_capacity if r not in calc.work_needed]
    if not roles:
        return pd.DataFrame(columns=ROLE_SUMMARY_COLUMNS)

    frame = pd.DataFrame({"role": roles})
    frame["demand_hours"] = frame["role"].map(calc.work_needed).fillna(0.0).astype(float)
    frame["weekly_capacity"] = frame["role"].map(calc.team_capacity).fillna(0.0).astype(float)
    frame["weeks_required"] = np.where(
        frame["weekly_capacity"] > 0,
        np.ceil(frame["demand_hours"] / frame["weekly_capacity"].where(frame["weekly_capacity"] > 0, 1.0)),
        np.nan,
    )
    frame["utilization"] = frame["role"].map(calc.utilization).fillna(0.0).astype(float)
    frame["is_bottleneck"] = frame["role"] == calc.bottleneck_role
    frame["is_unstaffed"] = frame["role"].isin(calc.unstaffed_roles)
    return frame[ROLE_SUMMARY_COLUMNS]


def member_cost_frame(calc: CostCalculation) -> pd.DataFrame:
    """One row per allocation with its billed hours and cost."""
    rows = [
        {
            "member_id": member.member_id,
            "member": member.name,
            "role": line.role,
            "hours": line.hours,
            "rate": line.rate,
            "cost": line.cost,
        }
        for member in calc.breakdown.values()
        for line in member.allocations
    ]
    return pd.DataFrame(rows, columns=MEMBER_COST_COLUMNS)


def fixed_cost_frame(fixed_costs: FixedCosts) -> pd.DataFrame:
    """One row per fixed cost line item, grouped by category in category order."""
    rows = [
        {"category": category, "id": cost.id, "name": cost.name, "amount": cost.amount}
        for category, costs in fixed_costs.by_category().items()
        for cost in costs
    ]
    return pd.DataFrame(rows, columns=FIXED_COST_COLUMNS)


def totals_frame(calc: CostCalculation, fixed_total: float) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"metric": "duration_weeks", "value": float(calc.duration)},
            {"metric": "labor_total", "value": calc.total},
            {"metric": "fixed_total", "value": fixed_total},
            {"metric": "grand_total", "value": calc.total + fixed_total},
        ]
    )


def save_cost_report(
    calc: CostCalculation,
    fixed_total: float,
    output_dir: Union[str, Path],
    fixed_costs: Optional[FixedCosts] = None,
) -> Dict[str, Path]:
    """Write the role, member and totals tables as CSV files into ``output_dir``.

    When ``fixed_costs`` is given its line items are written too, as ``fixed_costs.csv``.

    Returns:
        Mapping of table name to the file written.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    tables = {
        "roles": role_summary_frame(calc),
        "members": member_cost_frame(calc),
        "totals": totals_frame(calc, fixed_total),
    }
    if fixed_costs is not None:
        tables["fixed_costs"] = fixed_cost_frame(fixed_costs)
    written = {}
    for name, frame in tables.items():
        path = output_dir / f"{name}.csv"
        frame.to_csv(path, index=False)
        written[name] = path
        logger.info(f"Saved {name} table ({len(frame)} rows) to {path}")
    return written
