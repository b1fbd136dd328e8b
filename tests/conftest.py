import pytest

from content_cost_model.config.models import (
    Allocation,
    Chapter,
    FixedCost,
    FixedCosts,
    ProjectData,
    Section,
    Subsection,
    TeamMember,
)


def make_subsection(name="Sub", editor=0.0, researcher=0.0, review=0.0, complexity=2):
    return Subsection(
        name=name,
        complexity=complexity,
        editor_hours=editor,
        researcher_hours=researcher,
        review_hours=review,
    )


def make_chapter(name, sections):
    """``sections`` maps section name -> list of subsections."""
    return Chapter(
        name=name,
        sections=tuple(Section(name=sec, subsections=tuple(subs)) for sec, subs in sections.items()),
    )


def make_member(name, *allocations, member_id=None):
    """``allocations`` are (role, hours_per_day, rate) tuples."""
    fields = dict(
        name=name,
        primary_role=allocations[0][0] if allocations else "",
        allocations=tuple(Allocation(role=r, hours_per_day=h, rate=rate) for r, h, rate in allocations),
    )
    if member_id:
        fields["id"] = member_id
    return TeamMember(**fields)


@pytest.fixture
def scenario_a_project():
    """One member on two roles; Editor demand 10h, Researcher demand 15h."""
    member = make_member("Member1", ("Editor", 3, 120), ("Researcher", 2, 80), member_id="m1")
    chapter = make_chapter("Chapter 1", {"Section 1": [make_subsection("Sub 1", editor=10, researcher=15)]})
    return ProjectData(name="Scenario A", team_members=(member,), chapters=(chapter,))


@pytest.fixture
def sample_project():
    """Two members, two chapters and some fixed costs."""
    members = (
        make_member("Alice", ("Editor", 3, 120), ("Researcher", 2, 80), member_id="alice"),
        make_member("Bob", ("Researcher", 5, 80), ("Specialist Reviewer", 1, 150), member_id="bob"),
    )
    chapters = (
        make_chapter(
            "Chapter 1",
            {
                "Basics": [
                    make_subsection("Definitions", editor=4, researcher=6, review=2, complexity=1),
                    make_subsection("History", editor=6, researcher=10, review=3, complexity=3),
                ],
            },
        ),
        make_chapter(
            "Chapter 2",
            {"Practice": [make_subsection("Methods", editor=20, researcher=30, review=5, complexity=2)]},
        ),
    )
    fixed_costs = FixedCosts(
        software=(FixedCost(id="f1", name="Wiki", amount=500),),
        workshop=(FixedCost(id="f2", name="Workshop 1", amount=5000), FixedCost(id="f3", name="Workshop 2", amount=5000)),
    )
    return ProjectData(name="Sample", team_members=members, chapters=chapters, fixed_costs=fixed_costs)


@pytest.fixture
def legacy_snapshot():
    """A version-4 snapshot using old role names, a customised preset table and no consultants category."""
    return {
        "version": 4,
        "state": {
            "project": {
                "id": "legacy-1",
                "name": "Legacy Project",
                "philosophy": {"hoursPerDay": 5, "daysPerWeek": 5, "hoursPerWeek": 25},
                "roles": {
                    "preset": {"Lead Editor": 150, "Researcher": 80, "Research Assistant": 60},
                    "custom": {"Illustrator": 90},
                },
                "teamMembers": [
                    {
                        "id": "1",
                        "name": "Team Member 1",
                        "primaryRole": "Lead Editor",
                        "allocations": [
                            {"role": "Lead Editor", "hoursPerDay": 3, "rate": 150},
                            {"role": "Research Assistant", "hoursPerDay": 2, "rate": 60},
                            {"role": "Illustrator", "hoursPerDay": 1, "rate": 90},
                        ],
                        "totalHoursPerDay": 6,
                    },
                    {
                        "id": "2",
                        "name": "Team Member 2",
                        "primaryRole": "Reviewer",
                        "allocations": [{"role": "Reviewer", "hoursPerDay": 4, "rate": 70}],
                    },
                ],
                "chapters": [
                    {
                        "id": "ch1",
                        "name": "Chapter 1",
                        "sections": [
                            {
                                "id": "sec1",
                                "name": "Section 1",
                                "subsections": [
                                    {
                                        "id": "sub1",
                                        "name": "Subsection 1",
                                        "complexity": 2,
                                        "editorHours": 10,
                                        "researcherHours": 15,
                                        "reviewHours": 5,
                                    }
                                ],
                            }
                        ],
                    }
                ],
                "fixedCosts": {
                    "software": [{"id": "s1", "name": "Wiki.js", "amount": 500}],
                    "workshop": [],
                    "other": [],
                },
                "createdAt": "2024-01-15T10:00:00.000Z",
                "updatedAt": "2024-02-01T12:30:00.000Z",
            }
        },
    }
