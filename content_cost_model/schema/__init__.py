"""
Shared names for the estimator: role buckets, effort fields, fixed-cost
categories and the tabular content columns.

Snapshot migration lives in :mod:`content_cost_model.schema.migration`.

Example Usage:
    >>> from content_cost_model.schema import RoleNames, ContentColumns
    >>> RoleNames.EDITOR.value
    'Editor'
"""

from .columns import (
    CANONICAL_PRESET_RATES,
    FIXED_COST_CATEGORIES,
    LEGACY_ROLE_ALIASES,
    MAIN_TOPICS_SECTION,
    WORKING_DAYS_PER_WEEK,
    ContentColumns,
    EffortFields,
    FixedCostCategories,
    RoleNames,
)

__all__ = [
    "CANONICAL_PRESET_RATES",
    "FIXED_COST_CATEGORIES",
    "LEGACY_ROLE_ALIASES",
    "MAIN_TOPICS_SECTION",
    "WORKING_DAYS_PER_WEEK",
    "ContentColumns",
    "EffortFields",
    "FixedCostCategories",
    "RoleNames",
]
