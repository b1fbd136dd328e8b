from content_cost_model.engines.capacity import aggregate_capacity

from conftest import make_member


def test_capacity_is_five_day_weeks_per_allocation():
    members = [make_member("A", ("Editor", 3, 120), ("Researcher", 2, 80))]
    assert aggregate_capacity(members) == {"Editor": 15.0, "Researcher": 10.0}


def test_capacity_accumulates_across_members():
    members = [
        make_member("A", ("Researcher", 2, 80)),
        make_member("B", ("Researcher", 5, 60)),
    ]
    assert aggregate_capacity(members) == {"Researcher": 35.0}


def test_unallocated_roles_are_absent():
    members = [make_member("A", ("Editor", 1, 100)), make_member("Nobody")]
    capacity = aggregate_capacity(members)
    assert "Specialist Reviewer" not in capacity
    assert capacity == {"Editor": 5.0}


def test_custom_days_per_week():
    members = [make_member("A", ("Editor", 4, 100))]
    assert aggregate_capacity(members, days_per_week=4) == {"Editor": 16.0}


def test_empty_roster():
    assert aggregate_capacity([]) == {}
