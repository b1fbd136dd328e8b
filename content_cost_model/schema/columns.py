# content_cost_model/schema/columns.py
"""
Canonical names shared across the estimator: role buckets, effort fields,
fixed-cost categories and the tabular content format.
"""

from enum import Enum
from typing import Dict, List, Tuple


class RoleNames(str, Enum):
    """Preset roles that receive demand from the work tree."""

    EDITOR = "Editor"
    RESEARCHER = "Researcher"
    SPECIALIST_REVIEWER = "Specialist Reviewer"

    def __str__(self) -> str:
        return self.value


class EffortFields(str, Enum):
    """Effort quantities carried by every subsection."""

    EDITOR_HOURS = "editor_hours"
    RESEARCHER_HOURS = "researcher_hours"
    REVIEW_HOURS = "review_hours"

    def __str__(self) -> str:
        return self.value


class FixedCostCategories(str, Enum):
    SOFTWARE = "software"
    WORKSHOP = "workshop"
    CONSULTANTS = "consultants"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


CANONICAL_ROLE_RATE = 120.0

CANONICAL_PRESET_RATES: Dict[str, float] = {
    RoleNames.EDITOR.value: CANONICAL_ROLE_RATE,
    RoleNames.RESEARCHER.value: CANONICAL_ROLE_RATE,
    RoleNames.SPECIALIST_REVIEWER.value: CANONICAL_ROLE_RATE,
}

# Role names used by older snapshots, collapsed onto the canonical three
LEGACY_ROLE_ALIASES: Dict[str, str] = {
    "Lead Editor": RoleNames.EDITOR.value,
    "Editor/Researcher": RoleNames.EDITOR.value,
    "Research Assistant": RoleNames.RESEARCHER.value,
    "Topic Specialist": RoleNames.RESEARCHER.value,
    "Reviewer": RoleNames.SPECIALIST_REVIEWER.value,
}

FIXED_COST_CATEGORIES: Tuple[str, ...] = tuple(c.value for c in FixedCostCategories)

# Capacity is always counted over a five-day working week
WORKING_DAYS_PER_WEEK = 5

DEFAULT_HOURS_PER_DAY = 5.0
DEFAULT_DAYS_PER_WEEK = 5
MIN_HOURS_PER_DAY, MAX_HOURS_PER_DAY = 1.0, 8.0
MIN_DAYS_PER_WEEK, MAX_DAYS_PER_WEEK = 1, 7

COMPLEXITY_SIMPLE = 1
COMPLEXITY_MODERATE = 2
COMPLEXITY_COMPLEX = 3
VALID_COMPLEXITIES = (COMPLEXITY_SIMPLE, COMPLEXITY_MODERATE, COMPLEXITY_COMPLEX)

DEFAULT_PROJECT_NAME = "New Project"

# Section used for subsections that have no natural section of their own
MAIN_TOPICS_SECTION = "Main Topics"


class ContentColumns:
    """Headers of the tabular content import/export format, in order."""

    CHAPTER = "Chapter"
    SECTION = "Section"
    SUBSECTION = "Subsection"
    COMPLEXITY = "Complexity"
    EDITOR_HOURS = "Editor Hours"
    RESEARCHER_HOURS = "Researcher Hours"
    REVIEW_HOURS = "Review Hours"

    ALL: List[str] = [
        CHAPTER,
        SECTION,
        SUBSECTION,
        COMPLEXITY,
        EDITOR_HOURS,
        RESEARCHER_HOURS,
        REVIEW_HOURS,
    ]


# Values used when a numeric column is blank or not a number
CSV_FALLBACKS: Dict[str, float] = {
    ContentColumns.COMPLEXITY: COMPLEXITY_MODERATE,
    ContentColumns.EDITOR_HOURS: 4.0,
    ContentColumns.RESEARCHER_HOURS: 6.0,
    ContentColumns.REVIEW_HOURS: 2.0,
}

COMMENT_PREFIX = "#"
