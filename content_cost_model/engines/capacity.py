# content_cost_model/engines/capacity.py
"""
Role capacity aggregation: weekly committed hours per role across the roster.
"""

import logging
from typing import Dict, Iterable

from content_cost_model.config.models import TeamMember
from content_cost_model.schema.columns import WORKING_DAYS_PER_WEEK

logger = logging.getLogger(__name__)


def aggregate_capacity(
    team_members: Iterable[TeamMember],
    days_per_week: int = WORKING_DAYS_PER_WEEK,
) -> Dict[str, float]:
    """Sum ``hours_per_day * days_per_week`` of every allocation into its role.

    A member allocated to several roles contributes to each independently.
    Roles nobody is allocated to are absent from the result.
    """
    capacity: Dict[str, float] = {}
    for member in team_members:
        for allocation in member.allocations:
            capacity[allocation.role] = capacity.get(allocation.role, 0.0) + allocation.weekly_hours(
                days_per_week
            )

    logger.debug(f"Weekly capacity by role ({days_per_week} days/week): {capacity}")
    return capacity
