# content_cost_model/engines/cost.py
"""
Cost distribution under the budget-envelope model.

Every member is paid for their full committed hours over the whole resolved
duration, whichever role turned out to be the bottleneck. Cost is therefore
never a per-member calculation: the duration has to be resolved first, and
it multiplies everyone's billed hours.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Mapping, Optional

from content_cost_model.config.models import TeamMember
from content_cost_model.engines.duration import DurationResult
from content_cost_model.schema.columns import WORKING_DAYS_PER_WEEK

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AllocationCost:
    role: str
    hours: float
    rate: float
    cost: float


@dataclass(frozen=True)
class MemberCost:
    member_id: str
    name: str
    allocations: List[AllocationCost] = field(default_factory=list)
    total: float = 0.0


@dataclass(frozen=True)
class CostCalculation:
    """Derived cost and duration of a project. Never persisted."""

    total: float
    breakdown: Dict[str, MemberCost]
    work_needed: Dict[str, float]
    team_capacity: Dict[str, float]
    duration: int
    bottleneck_role: Optional[str] = None
    weeks_by_role: Dict[str, int] = field(default_factory=dict)
    unstaffed_roles: List[str] = field(default_factory=list)
    # demand / weekly capacity, in (unrounded) weeks of work
    load_by_role: Dict[str, float] = field(default_factory=dict)
    # demand / (weekly capacity * duration)
    utilization: Dict[str, float] = field(default_factory=dict)

    def member_total(self, member_id: str) -> float:
        member = self.breakdown.get(member_id)
        return member.total if member else 0.0


def allocation_hours(hours_per_day: float, duration_weeks: int, days_per_week: int = WORKING_DAYS_PER_WEEK) -> float:
    """Hours an allocation is billed for over the project."""
    return hours_per_day * days_per_week * duration_weeks


def cost_members(
    team_members: Iterable[TeamMember],
    duration_weeks: int,
    days_per_week: int = WORKING_DAYS_PER_WEEK,
) -> Dict[str, MemberCost]:
    """Per-member cost lines for a resolved duration, keyed by member id."""
    breakdown: Dict[str, MemberCost] = {}
    for member in team_members:
        lines = []
        for allocation in member.allocations:
            hours = allocation_hours(allocation.hours_per_day, duration_weeks, days_per_week)
            lines.append(
                AllocationCost(
                    role=allocation.role,
                    hours=hours,
                    rate=allocation.rate,
                    cost=hours * allocation.rate,
                )
            )
        breakdown[member.id] = MemberCost(
            member_id=member.id,
            name=member.name,
            allocations=lines,
            total=sum(line.cost for line in lines),
        )
    return breakdown


def role_load(demand: Mapping[str, float], capacity: Mapping[str, float]) -> Dict[str, float]:
    """Unrounded weeks of work per staffed role with demand."""
    return {
        role: hours / capacity[role]
        for role, hours in demand.items()
        if hours > 0 and capacity.get(role, 0.0) > 0
    }


def role_utilization(
    demand: Mapping[str, float], capacity: Mapping[str, float], duration_weeks: int
) -> Dict[str, float]:
    """Share of each role's capacity over the project that its demand uses.

    Roles in ``demand`` with no capacity, or a zero duration, report 0.
    """
    utilization = {}
    for role, hours in demand.items():
        available = capacity.get(role, 0.0) * duration_weeks
        utilization[role] = hours / available if available > 0 else 0.0
    return utilization


def distribute_costs(
    team_members: Iterable[TeamMember],
    demand: Mapping[str, float],
    capacity: Mapping[str, float],
    duration: DurationResult,
    days_per_week: int = WORKING_DAYS_PER_WEEK,
) -> CostCalculation:
    """Bill every allocation for its committed hours over ``duration.weeks``."""
    members = tuple(team_members)
    breakdown = cost_members(members, duration.weeks, days_per_week)
    total = sum(member.total for member in breakdown.values())

    if duration.weeks == 0 and any(m.allocations for m in members):
        logger.debug("Duration is zero weeks; all committed-hours costs are zero")

    return CostCalculation(
        total=total,
        breakdown=breakdown,
        work_needed=dict(demand),
        team_capacity=dict(capacity),
        duration=duration.weeks,
        bottleneck_role=duration.bottleneck_role,
        weeks_by_role=dict(duration.weeks_by_role),
        unstaffed_roles=list(duration.unstaffed_roles),
        load_by_role=role_load(demand, capacity),
        utilization=role_utilization(demand, capacity, duration.weeks),
    )
