from content_cost_model.config.models import ProjectData
from content_cost_model.engines.calculations import (
    calculate_fixed_costs,
    calculate_project_costs,
    calculate_total_hours,
)
from content_cost_model.schema.migration import load_project_snapshot
from content_cost_model.state.store import ProjectStore

__all__ = [
    "ProjectData",
    "ProjectStore",
    "calculate_fixed_costs",
    "calculate_project_costs",
    "calculate_total_hours",
    "load_project_snapshot",
]

__version__ = "0.1.0"
