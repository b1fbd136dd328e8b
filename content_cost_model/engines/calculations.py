# content_cost_model/engines/calculations.py
"""
Calculation entry points used by the rest of the system.

``calculate_project_costs`` composes demand -> capacity -> duration -> cost.
It is a pure function of the project snapshot and is simply re-run after
every change.
"""

import logging
from typing import Optional

from content_cost_model.config.models import EstimatorSettings, ProjectData, walk_subsections
from content_cost_model.engines.capacity import aggregate_capacity
from content_cost_model.engines.cost import CostCalculation, distribute_costs
from content_cost_model.engines.demand import aggregate_demand
from content_cost_model.engines.duration import resolve_duration
from content_cost_model.engines.fixed_costs import total_fixed_costs

logger = logging.getLogger(__name__)

_DEFAULT_SETTINGS = EstimatorSettings()


def calculate_project_costs(
    project: ProjectData, settings: Optional[EstimatorSettings] = None
) -> CostCalculation:
    settings = settings or _DEFAULT_SETTINGS
    days = settings.capacity_days_per_week

    demand = aggregate_demand(project.chapters, settings.demand_mapping)
    capacity = aggregate_capacity(project.team_members, days)
    duration = resolve_duration(demand, capacity)
    calculation = distribute_costs(project.team_members, demand, capacity, duration, days)

    logger.debug(
        f"Project '{project.name}': {calculation.duration} weeks, labor total {calculation.total:,.2f}"
    )
    return calculation


def calculate_fixed_costs(project: ProjectData) -> float:
    return total_fixed_costs(project.fixed_costs)


def calculate_total_hours(project: ProjectData) -> float:
    """Raw effort over every work item, all three fields, regardless of roles. For reporting."""
    return sum(subsection.total_hours for subsection in walk_subsections(project.chapters))


def calculate_grand_total(project: ProjectData, settings: Optional[EstimatorSettings] = None) -> float:
    """Labor total plus fixed costs."""
    return calculate_project_costs(project, settings).total + calculate_fixed_costs(project)
