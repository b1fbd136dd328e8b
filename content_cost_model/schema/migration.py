# content_cost_model/schema/migration.py
"""
Versioned migration of persisted project snapshots.

A snapshot is a JSON object carrying a schema version and the project blob.
Older snapshots are upgraded by an ordered list of small steps, each
labelled with the version it upgrades from and to. Every step is idempotent,
so a snapshot older than the current version runs the whole chain whatever
version it reports. Steps work on plain dicts so they can cope with whatever
shape an old or hand-edited snapshot has; the result is validated into
:class:`ProjectData` only at the end.
"""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from content_cost_model.config.models import ProjectData, RoleRates
from content_cost_model.schema.columns import (
    CANONICAL_PRESET_RATES,
    FIXED_COST_CATEGORIES,
    LEGACY_ROLE_ALIASES,
)

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 7

Blob = Dict[str, Any]
Rates = Mapping[str, float]


class MigrationError(Exception):
    """Raised when the migration chain does not end at the current version."""

    pass


@dataclass(frozen=True)
class MigrationStep:
    """One upgrade of the project blob, labelled ``source_version`` -> ``target_version``.

    ``apply`` receives the project blob and the canonical preset rate table.
    """

    source_version: int
    target_version: int
    name: str
    apply: Callable[[Blob, Rates], Blob]


@dataclass
class MigrationResult:
    """Result of migrating a snapshot."""

    project: Blob
    source_version: int
    target_version: int
    applied_steps: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def migrated(self) -> bool:
        return bool(self.applied_steps)


# --- Steps ---


def canonicalize_preset_roles(project: Blob, rates: Rates = CANONICAL_PRESET_RATES) -> Blob:
    """Replace the preset rate table with ``rates``, dropping customised preset rates."""
    roles = project.get("roles")
    if not isinstance(roles, dict):
        roles = {}
    custom = roles.get("custom")
    project["roles"] = {
        "preset": dict(rates),
        "custom": custom if isinstance(custom, dict) else {},
    }
    return project


def canonicalize_allocation_roles(project: Blob, rates: Rates = CANONICAL_PRESET_RATES) -> Blob:
    """Rewrite legacy allocation role names onto the canonical roles at their canonical rate.

    The rate comes from ``rates``; a canonical role missing from it keeps the
    built-in canonical rate.
    """
    members = project.get("teamMembers")
    if not isinstance(members, list):
        project["teamMembers"] = []
        return project

    renamed = 0
    migrated_members = []
    for member in members:
        if not isinstance(member, dict):
            continue
        allocations = member.get("allocations")
        if not isinstance(allocations, list):
            allocations = []
        migrated_allocations = []
        for allocation in allocations:
            if not isinstance(allocation, dict):
                continue
            canonical = LEGACY_ROLE_ALIASES.get(allocation.get("role"))
            if canonical is not None:
                allocation = {
                    **allocation,
                    "role": canonical,
                    "rate": rates.get(canonical, CANONICAL_PRESET_RATES[canonical]),
                }
                renamed += 1
            migrated_allocations.append(allocation)
        migrated_members.append({**member, "allocations": migrated_allocations})

    if renamed:
        logger.info(f"Renamed {renamed} legacy allocation roles to canonical roles")
    project["teamMembers"] = migrated_members
    return project


def backfill_fixed_cost_categories(project: Blob, rates: Optional[Rates] = None) -> Blob:
    """Add any fixed-cost category missing from older snapshots as an empty list."""
    fixed_costs = project.get("fixedCosts")
    if not isinstance(fixed_costs, dict):
        fixed_costs = {}
    for category in FIXED_COST_CATEGORIES:
        if not isinstance(fixed_costs.get(category), list):
            fixed_costs[category] = []
    project["fixedCosts"] = fixed_costs
    return project


MIGRATION_STEPS: Tuple[MigrationStep, ...] = (
    MigrationStep(0, 5, "canonical_preset_roles", canonicalize_preset_roles),
    MigrationStep(5, 6, "canonical_allocation_roles", canonicalize_allocation_roles),
    MigrationStep(6, 7, "fixed_cost_categories", backfill_fixed_cost_categories),
)


# --- Envelope handling ---


def _read_version(snapshot: Mapping[str, Any]) -> int:
    version = snapshot.get("version")
    if isinstance(version, bool) or not isinstance(version, int):
        if version is not None:
            logger.warning(f"Snapshot version {version!r} is not an integer; treating as 0")
        return 0
    return version


def _extract_project(snapshot: Mapping[str, Any]) -> Blob:
    """Pull the project blob out of the current or the legacy browser-storage envelope."""
    project = snapshot.get("project")
    if project is None:
        state = snapshot.get("state")
        if isinstance(state, dict):
            project = state.get("project")
    if not isinstance(project, dict):
        logger.warning("Snapshot has no project object; starting from an empty project")
        return {}
    return copy.deepcopy(project)


def check_step_chain(steps: Tuple[MigrationStep, ...], current_version: int) -> None:
    """Raise :class:`MigrationError` unless ``steps`` chain without gaps up to ``current_version``."""
    if not steps:
        raise MigrationError(f"No migration steps lead to version {current_version}")
    for previous, step in zip(steps, steps[1:]):
        if step.source_version != previous.target_version:
            raise MigrationError(
                f"No migration path from version {previous.target_version} to {step.source_version} "
                f"(next step '{step.name}')"
            )
    if steps[-1].target_version != current_version:
        raise MigrationError(
            f"Migration ended at version {steps[-1].target_version}, expected {current_version}"
        )


def migrate_snapshot(
    snapshot: Optional[Mapping[str, Any]],
    steps: Tuple[MigrationStep, ...] = MIGRATION_STEPS,
    current_version: int = CURRENT_SCHEMA_VERSION,
    canonical_rates: Optional[Rates] = None,
) -> MigrationResult:
    """Upgrade a persisted snapshot to ``current_version``.

    A snapshot older than ``current_version`` runs every step in order; the
    step labels are only used for logging and chain checks. The input is
    never modified. Applying this to an already current snapshot changes
    nothing.

    Args:
        snapshot: Decoded JSON envelope. ``None`` or a non-mapping is treated as empty.
        steps: Ordered upgrade steps.
        current_version: Version the chain must end at.
        canonical_rates: Preset rate table the steps write; defaults to the built-in table.

    Returns:
        MigrationResult holding the upgraded project blob.

    Raises:
        MigrationError: If the steps do not chain up to ``current_version``.
    """
    if not isinstance(snapshot, Mapping):
        snapshot = {}
    rates = dict(canonical_rates if canonical_rates is not None else CANONICAL_PRESET_RATES)
    source_version = _read_version(snapshot)
    project = _extract_project(snapshot)
    result = MigrationResult(project=project, source_version=source_version, target_version=source_version)

    if source_version > current_version:
        message = (
            f"Snapshot version {source_version} is newer than supported version "
            f"{current_version}; loading without migration"
        )
        logger.warning(message)
        result.warnings.append(message)
        return result
    if source_version == current_version:
        return result

    check_step_chain(steps, current_version)
    for step in steps:
        logger.info(f"Applying migration '{step.name}' (v{step.source_version} -> v{step.target_version})")
        project = step.apply(project, rates)
        result.applied_steps.append(step.name)

    result.project = project
    result.target_version = current_version
    logger.info(
        f"Migrated snapshot from v{source_version} to v{current_version}: {', '.join(result.applied_steps)}"
    )
    return result


def normalize_loaded_project(project: ProjectData, canonical_rates: Optional[Rates] = None) -> ProjectData:
    """Re-assert the canonical preset rate table, whatever the snapshot version.

    Custom roles are kept as they are.
    """
    canonical = dict(canonical_rates if canonical_rates is not None else CANONICAL_PRESET_RATES)
    if project.roles.preset == canonical:
        return project
    logger.info(f"Resetting preset role rates {project.roles.preset} to canonical {canonical}")
    roles = RoleRates(preset=canonical, custom=dict(project.roles.custom))
    return project.model_copy(update={"roles": roles})


def load_project_snapshot(
    snapshot: Optional[Mapping[str, Any]],
    canonical_rates: Optional[Rates] = None,
) -> Tuple[ProjectData, MigrationResult]:
    """Migrate, validate and normalise a snapshot into a :class:`ProjectData`."""
    result = migrate_snapshot(snapshot, canonical_rates=canonical_rates)
    project = ProjectData.model_validate(result.project)
    return normalize_loaded_project(project, canonical_rates), result


def serialize_project(project: ProjectData, version: int = CURRENT_SCHEMA_VERSION) -> Blob:
    """Build the persisted envelope for ``project`` at ``version``."""
    return {
        "version": version,
        "project": project.model_dump(mode="json", by_alias=True),
    }
