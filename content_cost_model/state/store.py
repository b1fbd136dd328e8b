# content_cost_model/state/store.py
"""
Explicit state container for one project.

:class:`ProjectStore` holds the current :class:`ProjectData` snapshot. Each
intent builds a new snapshot, swaps it in, persists it and notifies
subscribers; nothing is edited in place. Calculations are re-run from the
current snapshot on request.
"""

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

from content_cost_model.config.models import (
    Chapter,
    EstimatorSettings,
    FixedCost,
    Philosophy,
    ProjectData,
    RoleRates,
    Section,
    Subsection,
    TeamMember,
    new_id,
    utc_now,
)
from content_cost_model.engines.calculations import (
    calculate_fixed_costs,
    calculate_project_costs,
    calculate_total_hours,
)
from content_cost_model.engines.cost import CostCalculation
from content_cost_model.schema.migration import load_project_snapshot, serialize_project
from content_cost_model.state.persistence import BlobStore, InMemoryStore

logger = logging.getLogger(__name__)

Listener = Callable[[ProjectData], None]


def new_project(settings: Optional[EstimatorSettings] = None, name: Optional[str] = None) -> ProjectData:
    """A fresh, empty project with the canonical role table."""
    settings = settings or EstimatorSettings()
    now = utc_now()
    fields: Dict[str, Any] = {
        "id": new_id(),
        "roles": RoleRates(preset=dict(settings.canonical_rates)),
        "created_at": now,
        "updated_at": now,
    }
    if name:
        fields["name"] = name
    return ProjectData(**fields)


def _replace_subsection(
    chapters: Iterable[Chapter],
    chapter_id: str,
    section_id: str,
    subsection_id: str,
    updates: Dict[str, Any],
) -> List[Chapter]:
    def update_sub(sub: Subsection) -> Subsection:
        if sub.id != subsection_id:
            return sub
        # Re-validate so lenient coercion applies to the new values too
        return Subsection.model_validate({**sub.model_dump(), **updates, "id": sub.id})

    def update_section(section: Section) -> Section:
        if section.id != section_id:
            return section
        return section.model_copy(update={"subsections": tuple(update_sub(s) for s in section.subsections)})

    def update_chapter(chapter: Chapter) -> Chapter:
        if chapter.id != chapter_id:
            return chapter
        return chapter.model_copy(update={"sections": tuple(update_section(s) for s in chapter.sections)})

    return [update_chapter(c) for c in chapters]


class ProjectStore:
    """Holds the current project snapshot and applies intents to it."""

    def __init__(
        self,
        settings: Optional[EstimatorSettings] = None,
        storage: Optional[BlobStore] = None,
        project: Optional[ProjectData] = None,
    ) -> None:
        self.settings = settings or EstimatorSettings()
        self.storage = storage if storage is not None else InMemoryStore()
        self._project = project or new_project(self.settings)
        self._listeners: List[Listener] = []

    @classmethod
    def open(
        cls,
        storage: BlobStore,
        settings: Optional[EstimatorSettings] = None,
    ) -> "ProjectStore":
        """Load the stored snapshot (migrating it if needed) or start a new project."""
        settings = settings or EstimatorSettings()
        document = storage.read(settings.storage_key)
        if document is None:
            logger.info("Nothing stored yet; starting a new project")
            return cls(settings=settings, storage=storage)

        project, result = load_project_snapshot(document, settings.canonical_rates)
        logger.info(
            f"Loaded project '{project.name}' (schema v{result.source_version} -> v{result.target_version})"
        )
        store = cls(settings=settings, storage=storage, project=project)
        if result.migrated:
            store._persist()
        return store

    @property
    def project(self) -> ProjectData:
        return self._project

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` to be called with each new snapshot. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _persist(self) -> None:
        self.storage.write(self.settings.storage_key, serialize_project(self._project))

    def _commit(self, project: ProjectData, intent: str) -> ProjectData:
        self._project = project
        self._persist()
        logger.debug(f"Applied intent '{intent}' to project '{project.name}'")
        for listener in list(self._listeners):
            listener(project)
        return project

    # --- Philosophy ---

    def update_philosophy(
        self, hours_per_day: Optional[float] = None, days_per_week: Optional[int] = None
    ) -> ProjectData:
        current = self._project.philosophy
        philosophy = Philosophy(
            hours_per_day=current.hours_per_day if hours_per_day is None else hours_per_day,
            days_per_week=current.days_per_week if days_per_week is None else days_per_week,
        )
        return self._commit(self._project.touched(philosophy=philosophy), "update_philosophy")

    # --- Team ---

    def add_team_member(self, member: TeamMember) -> ProjectData:
        members = self._project.team_members + (member,)
        return self._commit(self._project.touched(team_members=members), "add_team_member")

    def update_team_member(self, member_id: str, **updates: Any) -> ProjectData:
        """Replace fields of one member; an unknown id leaves the project unchanged."""
        if self._project.find_member(member_id) is None:
            logger.warning(f"No team member with id '{member_id}'; nothing updated")
            return self._project
        members = tuple(
            TeamMember.model_validate({**m.model_dump(), **updates, "id": m.id}) if m.id == member_id else m
            for m in self._project.team_members
        )
        return self._commit(self._project.touched(team_members=members), "update_team_member")

    def remove_team_member(self, member_id: str) -> ProjectData:
        members = tuple(m for m in self._project.team_members if m.id != member_id)
        if len(members) == len(self._project.team_members):
            logger.warning(f"No team member with id '{member_id}'; nothing removed")
            return self._project
        return self._commit(self._project.touched(team_members=members), "remove_team_member")

    # --- Content ---

    def add_chapter(self, chapter: Chapter) -> ProjectData:
        chapters = self._project.chapters + (chapter,)
        return self._commit(self._project.touched(chapters=chapters), "add_chapter")

    def update_subsection(
        self, chapter_id: str, section_id: str, subsection_id: str, **updates: Any
    ) -> ProjectData:
        chapters = tuple(
            _replace_subsection(self._project.chapters, chapter_id, section_id, subsection_id, updates)
        )
        return self._commit(self._project.touched(chapters=chapters), "update_subsection")

    def import_chapters(self, chapters: Iterable[Chapter]) -> ProjectData:
        """Replace the whole content tree."""
        chapters = tuple(chapters)
        logger.info(f"Importing {len(chapters)} chapters")
        return self._commit(self._project.touched(chapters=chapters), "import_chapters")

    # --- Fixed costs ---

    def add_fixed_cost(self, category: str, cost: FixedCost) -> ProjectData:
        fixed_costs = self._project.fixed_costs.with_cost(category, cost)
        return self._commit(self._project.touched(fixed_costs=fixed_costs), "add_fixed_cost")

    def remove_fixed_cost(self, category: str, cost_id: str) -> ProjectData:
        fixed_costs = self._project.fixed_costs.without_cost(category, cost_id)
        return self._commit(self._project.touched(fixed_costs=fixed_costs), "remove_fixed_cost")

    # --- Project ---

    def rename_project(self, name: str) -> ProjectData:
        return self._commit(self._project.touched(name=name), "rename_project")

    def reset_project(self) -> ProjectData:
        return self._commit(new_project(self.settings), "reset_project")

    def load_project(self, project: ProjectData) -> ProjectData:
        return self._commit(project.touched(), "load_project")

    # --- Queries ---

    def calculate_costs(self) -> CostCalculation:
        return calculate_project_costs(self._project, self.settings)

    def fixed_cost_total(self) -> float:
        return calculate_fixed_costs(self._project)

    def total_hours(self) -> float:
        return calculate_total_hours(self._project)
