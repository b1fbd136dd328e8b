# content_cost_model/engines/duration.py
"""
Bottleneck duration resolution.

The project lasts as long as its slowest role: for every role with both
positive demand and positive weekly capacity, ``ceil(demand / capacity)``
weeks are needed, and the project duration is the largest of these.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DurationResult:
    """Outcome of resolving the project duration."""

    weeks: int
    weeks_by_role: Dict[str, int] = field(default_factory=dict)
    bottleneck_role: Optional[str] = None
    # Roles with demand but no capacity; excluded from ``weeks``
    unstaffed_roles: List[str] = field(default_factory=list)

    @property
    def has_unstaffed_roles(self) -> bool:
        return bool(self.unstaffed_roles)


def weeks_for_role(demand: float, weekly_capacity: float) -> int:
    """Whole weeks needed to burn ``demand`` hours at ``weekly_capacity``, rounded up.

    Returns 0 when either quantity is not positive.
    """
    if demand <= 0 or weekly_capacity <= 0:
        return 0
    return int(math.ceil(demand / weekly_capacity))


def resolve_duration(demand: Mapping[str, float], capacity: Mapping[str, float]) -> DurationResult:
    """Resolve the project duration from the role bottleneck.

    A role with positive demand but zero capacity is left out of the maximum
    and reported in ``unstaffed_roles`` instead; the duration then reflects
    only staffed roles and understates how long the work really takes.
    Ties for the bottleneck go to the role listed first in ``demand``.
    """
    weeks_by_role: Dict[str, int] = {}
    unstaffed: List[str] = []
    bottleneck: Optional[str] = None
    max_weeks = 0

    for role, role_demand in demand.items():
        if role_demand <= 0:
            continue
        role_capacity = capacity.get(role, 0.0)
        if role_capacity <= 0:
            unstaffed.append(role)
            logger.warning(
                f"Role '{role}' has {role_demand:.1f} hours of demand but no capacity; "
                f"it is excluded from the duration"
            )
            continue
        weeks = weeks_for_role(role_demand, role_capacity)
        weeks_by_role[role] = weeks
        if weeks > max_weeks:
            max_weeks = weeks
            bottleneck = role

    logger.debug(f"Resolved duration {max_weeks} weeks (bottleneck: {bottleneck}), per role: {weeks_by_role}")
    return DurationResult(
        weeks=max_weeks,
        weeks_by_role=weeks_by_role,
        bottleneck_role=bottleneck,
        unstaffed_roles=unstaffed,
    )
