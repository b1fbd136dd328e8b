import pytest

from content_cost_model.config.models import (
    Allocation,
    Chapter,
    EstimatorSettings,
    FixedCost,
    ProjectData,
    RoleRates,
)
from content_cost_model.schema.columns import CANONICAL_PRESET_RATES
from content_cost_model.schema.migration import CURRENT_SCHEMA_VERSION, serialize_project
from content_cost_model.state.persistence import InMemoryStore
from content_cost_model.state.store import ProjectStore, new_project

from conftest import make_chapter, make_member, make_subsection


@pytest.fixture
def storage():
    return InMemoryStore()


@pytest.fixture
def store(storage):
    return ProjectStore(storage=storage)


def stored(storage, key="project-estimator-storage"):
    return storage.read(key)


def test_new_project_defaults():
    project = new_project()
    assert project.name == "New Project"
    assert project.roles.preset == CANONICAL_PRESET_RATES
    assert project.team_members == ()
    assert project.philosophy.hours_per_week == 25


def test_mutations_replace_the_snapshot(store):
    before = store.project
    after = store.add_team_member(make_member("Alice", ("Editor", 3, 120)))
    assert after is store.project
    assert after is not before
    assert before.team_members == ()
    assert len(after.team_members) == 1
    assert after.updated_at >= before.updated_at


def test_every_intent_persists(store, storage):
    store.add_team_member(make_member("Alice", ("Editor", 3, 120), member_id="a"))
    store.add_chapter(make_chapter("Ch", {"S": [make_subsection(editor=10)]}))
    assert storage.write_count == 2
    document = stored(storage)
    assert document["version"] == CURRENT_SCHEMA_VERSION
    assert document["project"]["teamMembers"][0]["name"] == "Alice"


def test_update_philosophy_recomputes_hours_per_week(store):
    store.update_philosophy(hours_per_day=6)
    assert store.project.philosophy.hours_per_week == 30
    store.update_philosophy(days_per_week=4)
    assert store.project.philosophy.hours_per_day == 6
    assert store.project.philosophy.hours_per_week == 24


def test_update_team_member(store):
    store.add_team_member(make_member("Alice", ("Editor", 3, 120), member_id="a"))
    store.update_team_member("a", name="Alicia", allocations=[Allocation(role="Researcher", hours_per_day=2, rate=80)])
    member = store.project.team_members[0]
    assert member.id == "a"
    assert member.name == "Alicia"
    assert member.roles() == ["Researcher"]


def test_update_unknown_member_is_a_no_op(store, storage):
    before = store.project
    assert store.update_team_member("ghost", name="x") is before
    assert store.remove_team_member("ghost") is before
    assert storage.write_count == 0


def test_remove_team_member(store):
    store.add_team_member(make_member("Alice", member_id="a"))
    store.add_team_member(make_member("Bob", member_id="b"))
    store.remove_team_member("a")
    assert [m.id for m in store.project.team_members] == ["b"]


def test_update_subsection(store):
    chapter = make_chapter("Ch", {"S": [make_subsection("One", editor=1), make_subsection("Two", editor=2)]})
    store.add_chapter(chapter)
    section = chapter.sections[0]
    target = section.subsections[1]

    store.update_subsection(chapter.id, section.id, target.id, editor_hours=8, complexity=3)
    updated = store.project.chapters[0].sections[0].subsections
    assert updated[0] == section.subsections[0]
    assert updated[1].id == target.id
    assert updated[1].editor_hours == 8
    assert updated[1].complexity == 3


def test_update_subsection_coerces_bad_values(store):
    chapter = make_chapter("Ch", {"S": [make_subsection("One", editor=1)]})
    store.add_chapter(chapter)
    sub = chapter.sections[0].subsections[0]
    store.update_subsection(chapter.id, chapter.sections[0].id, sub.id, editor_hours="lots")
    assert store.project.chapters[0].sections[0].subsections[0].editor_hours == 0


def test_import_chapters_replaces_tree(store):
    store.add_chapter(make_chapter("Old", {}))
    store.import_chapters([Chapter(name="New A"), Chapter(name="New B")])
    assert [c.name for c in store.project.chapters] == ["New A", "New B"]


def test_fixed_costs(store):
    store.add_fixed_cost("software", FixedCost(id="s1", name="Wiki", amount=500))
    store.add_fixed_cost("consultants", FixedCost(id="c1", name="Advisor", amount=2000))
    assert store.fixed_cost_total() == 2500
    store.remove_fixed_cost("software", "s1")
    assert store.fixed_cost_total() == 2000
    assert store.project.fixed_costs.software == ()


def test_unknown_fixed_cost_category(store):
    with pytest.raises(ValueError):
        store.add_fixed_cost("catering", FixedCost(name="Lunch", amount=10))


def test_calculations_follow_mutations(store):
    store.add_chapter(make_chapter("Ch", {"S": [make_subsection(editor=10, researcher=15)]}))
    store.add_team_member(make_member("Member1", ("Editor", 3, 120), ("Researcher", 2, 80), member_id="m1"))
    assert store.calculate_costs().total == pytest.approx(5200)
    assert store.total_hours() == 25

    store.add_team_member(make_member("Helper", ("Researcher", 1, 10), member_id="h"))
    assert store.calculate_costs().duration == 1


def test_subscribers_are_notified(store):
    seen = []
    unsubscribe = store.subscribe(seen.append)
    store.rename_project("Handbook")
    unsubscribe()
    store.rename_project("Ignored")
    assert [p.name for p in seen] == ["Handbook"]


def test_reset_project(store):
    old_id = store.project.id
    store.add_team_member(make_member("Alice"))
    store.reset_project()
    assert store.project.team_members == ()
    assert store.project.id != old_id


def test_load_project(store):
    project = ProjectData(name="Imported")
    store.load_project(project)
    assert store.project.name == "Imported"
    assert store.project.id == project.id


def test_open_without_stored_snapshot(storage):
    store = ProjectStore.open(storage)
    assert store.project.name == "New Project"
    assert storage.write_count == 0


def test_open_migrates_and_persists_legacy_snapshot(storage, legacy_snapshot):
    storage.write("project-estimator-storage", legacy_snapshot)
    store = ProjectStore.open(storage)
    assert store.project.team_members[0].allocations[0].role == "Editor"
    assert stored(storage)["version"] == CURRENT_SCHEMA_VERSION
    assert storage.write_count == 2


def test_open_reasserts_canonical_rates(storage):
    tampered = ProjectData(roles=RoleRates(preset={"Editor": 5}))
    storage.write("project-estimator-storage", serialize_project(tampered))
    store = ProjectStore.open(storage)
    assert store.project.roles.preset == CANONICAL_PRESET_RATES


def test_open_uses_settings_storage_key(storage):
    settings = EstimatorSettings(storage_key="other")
    storage.write("other", serialize_project(ProjectData(name="Other")))
    assert ProjectStore.open(storage, settings).project.name == "Other"
