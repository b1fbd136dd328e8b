# content_cost_model/config/models.py
"""
Pydantic models for the project aggregate (philosophy, roles, team, content
tree, fixed costs) and for the estimator settings loaded from YAML.

Domain models are frozen: every change produces a new object via
``model_copy(update=...)``. Attributes are snake_case; the persisted JSON keeps
its historical camelCase keys through aliases.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional, Tuple, Type

import numpy as np
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

from content_cost_model.schema.columns import (
    CANONICAL_PRESET_RATES,
    COMPLEXITY_MODERATE,
    CSV_FALLBACKS,
    DEFAULT_DAYS_PER_WEEK,
    DEFAULT_HOURS_PER_DAY,
    DEFAULT_PROJECT_NAME,
    FIXED_COST_CATEGORIES,
    MAX_DAYS_PER_WEEK,
    MAX_HOURS_PER_DAY,
    MIN_DAYS_PER_WEEK,
    MIN_HOURS_PER_DAY,
    VALID_COMPLEXITIES,
    WORKING_DAYS_PER_WEEK,
    EffortFields,
    RoleNames,
)
from content_cost_model.utils.parsing import clamp, to_int, to_non_negative, to_number

logger = logging.getLogger(__name__)


def new_id() -> str:
    return str(uuid.uuid4())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_items(value: Any, model_cls: Type[BaseModel]) -> Tuple[Any, ...]:
    """Keep only entries that can be validated as ``model_cls``; anything else is dropped."""
    if not isinstance(value, (list, tuple)):
        if value is not None:
            logger.warning(
                f"Expected a list of {model_cls.__name__}, got {type(value).__name__}; using empty list"
            )
        return ()
    kept = tuple(item for item in value if isinstance(item, (dict, model_cls)))
    if len(kept) != len(value):
        logger.warning(f"Dropped {len(value) - len(kept)} malformed {model_cls.__name__} entries")
    return kept


def _coerce_text(value: Any, default: str = "") -> str:
    if value is None:
        return default
    return str(value)


class DomainModel(BaseModel):
    """Base for persisted domain objects."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        extra="ignore",
    )


# --- Philosophy and roles ---


class Philosophy(DomainModel):
    """Sustainable-pace settings. ``hours_per_week`` is always derived."""

    hours_per_day: float = DEFAULT_HOURS_PER_DAY
    days_per_week: int = DEFAULT_DAYS_PER_WEEK

    @field_validator("hours_per_day", mode="before")
    @classmethod
    def _clamp_hours_per_day(cls, v: Any) -> float:
        return clamp(to_number(v, DEFAULT_HOURS_PER_DAY), MIN_HOURS_PER_DAY, MAX_HOURS_PER_DAY)

    @field_validator("days_per_week", mode="before")
    @classmethod
    def _clamp_days_per_week(cls, v: Any) -> int:
        days = to_int(v, DEFAULT_DAYS_PER_WEEK)
        return int(clamp(days, MIN_DAYS_PER_WEEK, MAX_DAYS_PER_WEEK))

    @computed_field(alias="hoursPerWeek")
    @property
    def hours_per_week(self) -> float:
        return self.hours_per_day * self.days_per_week


class RoleRates(DomainModel):
    """Hourly rate per role name, split into preset (demand buckets) and custom roles."""

    preset: Dict[str, float] = Field(default_factory=lambda: dict(CANONICAL_PRESET_RATES))
    custom: Dict[str, float] = Field(default_factory=dict)

    @field_validator("preset", "custom", mode="before")
    @classmethod
    def _coerce_rates(cls, v: Any) -> Dict[str, float]:
        if not isinstance(v, dict):
            return {}
        return {str(name): to_non_negative(rate) for name, rate in v.items()}

    def rate_for(self, role: str) -> Optional[float]:
        if role in self.preset:
            return self.preset[role]
        return self.custom.get(role)

    def all_roles(self) -> Dict[str, float]:
        return {**self.preset, **self.custom}


# --- Team ---


class Allocation(DomainModel):
    """A member's commitment of daily hours to one role at one hourly rate.

    The rate travels with the allocation; it is never looked up from the
    role table at calculation time.
    """

    role: str = ""
    hours_per_day: float = 0.0
    rate: float = 0.0

    @field_validator("role", mode="before")
    @classmethod
    def _coerce_role(cls, v: Any) -> str:
        return _coerce_text(v).strip()

    @field_validator("hours_per_day", "rate", mode="before")
    @classmethod
    def _coerce_amounts(cls, v: Any) -> float:
        return to_non_negative(v)

    def weekly_hours(self, days_per_week: int = WORKING_DAYS_PER_WEEK) -> float:
        return self.hours_per_day * days_per_week


class TeamMember(DomainModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    primary_role: str = ""
    allocations: Tuple[Allocation, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _coerce_text(v) or new_id()

    @field_validator("name", "primary_role", mode="before")
    @classmethod
    def _coerce_names(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator("allocations", mode="before")
    @classmethod
    def _coerce_allocations(cls, v: Any) -> Tuple[Any, ...]:
        return _coerce_items(v, Allocation)

    @property
    def total_hours_per_day(self) -> float:
        return sum(a.hours_per_day for a in self.allocations)

    def total_hours_per_week(self, days_per_week: int = WORKING_DAYS_PER_WEEK) -> float:
        return self.total_hours_per_day * days_per_week

    def roles(self) -> List[str]:
        return [a.role for a in self.allocations]


# --- Content tree ---


class Subsection(DomainModel):
    """Leaf work item. Complexity is informational; it only matters to tier-sensitive demand rules."""

    id: str = Field(default_factory=new_id)
    name: str = ""
    complexity: int = COMPLEXITY_MODERATE
    editor_hours: float = 0.0
    researcher_hours: float = 0.0
    review_hours: float = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _coerce_text(v) or new_id()

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator("complexity", mode="before")
    @classmethod
    def _coerce_complexity(cls, v: Any) -> int:
        tier = to_int(v, COMPLEXITY_MODERATE)
        return tier if tier in VALID_COMPLEXITIES else COMPLEXITY_MODERATE

    @field_validator("editor_hours", "researcher_hours", "review_hours", mode="before")
    @classmethod
    def _coerce_hours(cls, v: Any) -> float:
        return to_non_negative(v)

    def effort(self, field: str) -> float:
        return float(getattr(self, str(field), 0.0))

    @property
    def total_hours(self) -> float:
        return self.editor_hours + self.researcher_hours + self.review_hours


class Section(DomainModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    subsections: Tuple[Subsection, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _coerce_text(v) or new_id()

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator("subsections", mode="before")
    @classmethod
    def _coerce_subsections(cls, v: Any) -> Tuple[Any, ...]:
        return _coerce_items(v, Subsection)


class Chapter(DomainModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    sections: Tuple[Section, ...] = ()

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _coerce_text(v) or new_id()

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator("sections", mode="before")
    @classmethod
    def _coerce_sections(cls, v: Any) -> Tuple[Any, ...]:
        return _coerce_items(v, Section)


def walk_subsections(chapters: Tuple[Chapter, ...]) -> Iterator[Subsection]:
    """Yield every subsection of the tree, chapter by chapter, section by section."""
    for chapter in chapters:
        for section in chapter.sections:
            yield from section.subsections


# --- Fixed costs ---


class FixedCost(DomainModel):
    id: str = Field(default_factory=new_id)
    name: str = ""
    amount: float = 0.0

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _coerce_text(v) or new_id()

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return _coerce_text(v)

    @field_validator("amount", mode="before")
    @classmethod
    def _coerce_amount(cls, v: Any) -> float:
        return to_non_negative(v)


class FixedCosts(DomainModel):
    software: Tuple[FixedCost, ...] = ()
    workshop: Tuple[FixedCost, ...] = ()
    consultants: Tuple[FixedCost, ...] = ()
    other: Tuple[FixedCost, ...] = ()

    @field_validator("software", "workshop", "consultants", "other", mode="before")
    @classmethod
    def _coerce_costs(cls, v: Any) -> Tuple[Any, ...]:
        return _coerce_items(v, FixedCost)

    def by_category(self) -> Dict[str, Tuple[FixedCost, ...]]:
        return {category: getattr(self, category) for category in FIXED_COST_CATEGORIES}

    def with_cost(self, category: str, cost: FixedCost) -> "FixedCosts":
        _check_category(category)
        return self.model_copy(update={category: getattr(self, category) + (cost,)})

    def without_cost(self, category: str, cost_id: str) -> "FixedCosts":
        _check_category(category)
        kept = tuple(c for c in getattr(self, category) if c.id != cost_id)
        return self.model_copy(update={category: kept})


def _check_category(category: str) -> None:
    if category not in FIXED_COST_CATEGORIES:
        raise ValueError(
            f"Unknown fixed cost category '{category}'; expected one of {FIXED_COST_CATEGORIES}"
        )


# --- Aggregate root ---


class ProjectData(DomainModel):
    """The unit of persistence and migration."""

    id: str = Field(default_factory=new_id)
    name: str = DEFAULT_PROJECT_NAME
    philosophy: Philosophy = Field(default_factory=Philosophy)
    roles: RoleRates = Field(default_factory=RoleRates)
    team_members: Tuple[TeamMember, ...] = ()
    chapters: Tuple[Chapter, ...] = ()
    fixed_costs: FixedCosts = Field(default_factory=FixedCosts)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, v: Any) -> str:
        return _coerce_text(v) or new_id()

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> str:
        return _coerce_text(v) or DEFAULT_PROJECT_NAME

    @field_validator("philosophy", "roles", "fixed_costs", mode="before")
    @classmethod
    def _coerce_sub_models(cls, v: Any) -> Any:
        # None or a non-mapping falls back to the field default
        if isinstance(v, (dict, BaseModel)):
            return v
        return {}

    @field_validator("team_members", mode="before")
    @classmethod
    def _coerce_team(cls, v: Any) -> Tuple[Any, ...]:
        return _coerce_items(v, TeamMember)

    @field_validator("chapters", mode="before")
    @classmethod
    def _coerce_chapters(cls, v: Any) -> Tuple[Any, ...]:
        return _coerce_items(v, Chapter)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def _coerce_timestamp(cls, v: Any) -> Any:
        if isinstance(v, datetime):
            return v
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v.replace("Z", "+00:00"))
            except ValueError:
                logger.warning(f"Unparseable timestamp {v!r}; using current time")
        return utc_now()

    def touched(self, **updates: Any) -> "ProjectData":
        """Return a copy with ``updates`` applied and a fresh ``updated_at``."""
        updates["updated_at"] = utc_now()
        return self.model_copy(update=updates)

    def find_member(self, member_id: str) -> Optional[TeamMember]:
        return next((m for m in self.team_members if m.id == member_id), None)


# --- Estimator settings ---


class DemandRule(BaseModel):
    """Routes a share of one effort field to a role bucket.

    ``complexity`` restricts the rule to a single tier; ``None`` applies it to all.
    """

    model_config = ConfigDict(frozen=True)

    effort_field: EffortFields
    role: str
    share: float = Field(1.0, ge=0.0)
    complexity: Optional[int] = Field(None, ge=1, le=3)


DEFAULT_DEMAND_MAPPING: Tuple[DemandRule, ...] = (
    DemandRule(effort_field=EffortFields.EDITOR_HOURS, role=RoleNames.EDITOR.value),
    DemandRule(effort_field=EffortFields.RESEARCHER_HOURS, role=RoleNames.RESEARCHER.value),
    DemandRule(effort_field=EffortFields.REVIEW_HOURS, role=RoleNames.SPECIALIST_REVIEWER.value),
)

# Earlier mapping that split review hours across two roles by complexity tier
TIERED_REVIEW_MAPPING: Tuple[DemandRule, ...] = (
    DemandRule(effort_field=EffortFields.EDITOR_HOURS, role="Lead Editor"),
    DemandRule(effort_field=EffortFields.RESEARCHER_HOURS, role=RoleNames.RESEARCHER.value),
    DemandRule(effort_field=EffortFields.REVIEW_HOURS, role="Topic Specialist", share=0.6, complexity=3),
    DemandRule(effort_field=EffortFields.REVIEW_HOURS, role="Reviewer", share=0.4, complexity=3),
    DemandRule(effort_field=EffortFields.REVIEW_HOURS, role="Research Assistant", share=0.5, complexity=2),
    DemandRule(effort_field=EffortFields.REVIEW_HOURS, role="Reviewer", share=0.5, complexity=2),
    DemandRule(effort_field=EffortFields.REVIEW_HOURS, role="Research Assistant", share=1.0, complexity=1),
)


class EstimatorSettings(BaseModel):
    """Tunable constants of the estimator, optionally loaded from YAML."""

    canonical_rates: Dict[str, float] = Field(
        default_factory=lambda: dict(CANONICAL_PRESET_RATES),
        description="Preset role table re-asserted on every load",
    )
    capacity_days_per_week: int = Field(
        WORKING_DAYS_PER_WEEK, ge=1, le=7, description="Days per week counted as capacity"
    )
    storage_key: str = Field("project-estimator-storage", min_length=1)
    demand_mapping: List[DemandRule] = Field(default_factory=lambda: list(DEFAULT_DEMAND_MAPPING))
    csv_fallbacks: Dict[str, float] = Field(default_factory=lambda: dict(CSV_FALLBACKS))

    @field_validator("canonical_rates")
    @classmethod
    def check_rates_non_negative(cls, v: Dict[str, float]) -> Dict[str, float]:
        negative = {role: rate for role, rate in v.items() if rate < 0}
        if negative:
            raise ValueError(f"Role rates must be non-negative, got {negative}")
        return v

    @field_validator("csv_fallbacks")
    @classmethod
    def fill_missing_fallbacks(cls, v: Dict[str, float]) -> Dict[str, float]:
        return {**CSV_FALLBACKS, **v}

    @model_validator(mode="after")
    def check_demand_shares(self) -> "EstimatorSettings":
        """Warn when the shares routed from one effort field and tier do not add up to 1."""
        for field in EffortFields:
            for tier in VALID_COMPLEXITIES:
                share_sum = sum(
                    rule.share
                    for rule in self.demand_mapping
                    if rule.effort_field == field and rule.complexity in (None, tier)
                )
                if share_sum and not np.isclose(share_sum, 1.0):
                    logger.warning(
                        f"Demand shares for {field.value} at complexity {tier} sum to "
                        f"{share_sum:.4f}, not 1.0. Hours will be over- or under-counted."
                    )
        return self
