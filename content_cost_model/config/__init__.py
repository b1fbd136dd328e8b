from .loaders import ConfigLoadError, load_settings, load_yaml_config, settings_from_dict
from .models import (
    DEFAULT_DEMAND_MAPPING,
    TIERED_REVIEW_MAPPING,
    Allocation,
    Chapter,
    DemandRule,
    EstimatorSettings,
    FixedCost,
    FixedCosts,
    Philosophy,
    ProjectData,
    RoleRates,
    Section,
    Subsection,
    TeamMember,
    walk_subsections,
)

__all__ = [
    "DEFAULT_DEMAND_MAPPING",
    "TIERED_REVIEW_MAPPING",
    "Allocation",
    "Chapter",
    "ConfigLoadError",
    "DemandRule",
    "EstimatorSettings",
    "FixedCost",
    "FixedCosts",
    "Philosophy",
    "ProjectData",
    "RoleRates",
    "Section",
    "Subsection",
    "TeamMember",
    "load_settings",
    "load_yaml_config",
    "settings_from_dict",
    "walk_subsections",
]
