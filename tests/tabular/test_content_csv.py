import io

import pandas as pd
import pytest

from content_cost_model.config.models import Chapter, Section, Subsection
from content_cost_model.engines.demand import aggregate_demand
from content_cost_model.schema.columns import ContentColumns
from content_cost_model.tabular.content_csv import (
    chapters_from_frame,
    chapters_to_frame,
    is_synthetic_section,
    read_content_csv,
    template_frame,
    write_content_csv,
    write_template_csv,
)

HEADER = "Chapter,Section,Subsection,Complexity,Editor Hours,Researcher Hours,Review Hours\n"


def read(text):
    return read_content_csv(io.StringIO(HEADER + text))


def test_rows_build_the_tree():
    chapters = read(
        "Intro,Context,Early,2,3,5,1\n"
        "Intro,Context,Modern,3,5,8,2\n"
        "Core,Details,Implementation,3,6,10,3\n"
    )
    assert [c.name for c in chapters] == ["Intro", "Core"]
    context = chapters[0].sections[0]
    assert context.name == "Context"
    assert [s.name for s in context.subsections] == ["Early", "Modern"]
    modern = context.subsections[1]
    assert (modern.complexity, modern.editor_hours, modern.researcher_hours, modern.review_hours) == (3, 5, 8, 2)


def test_blank_section_creates_section_named_after_subsection():
    chapters = read("Intro,,Overview,1,2,3,1\n")
    section = chapters[0].sections[0]
    assert section.name == "Overview"
    assert [s.name for s in section.subsections] == ["Overview"]


def test_chapter_resumes_by_exact_name():
    chapters = read(
        "Intro,A,One,1,1,1,1\n"
        "Core,B,Two,1,1,1,1\n"
        "Intro,A,Three,1,1,1,1\n"
    )
    assert [c.name for c in chapters] == ["Intro", "Core"]
    assert [s.name for s in chapters[0].sections[0].subsections] == ["One", "Three"]


def test_blank_chapter_continues_current_chapter():
    chapters = read("Intro,A,One,1,1,1,1\n,A,Two,1,1,1,1\n")
    assert len(chapters) == 1
    assert [s.name for s in chapters[0].sections[0].subsections] == ["One", "Two"]


def test_duplicate_subsection_keeps_first_row():
    chapters = read("Intro,A,One,1,1,1,1\nIntro,A,One,3,9,9,9\nIntro,,Solo,1,1,1,1\nIntro,,Solo,1,7,7,7\n")
    sections = chapters[0].sections
    assert len(sections[0].subsections) == 1
    assert sections[0].subsections[0].editor_hours == 1
    assert len(sections) == 2
    assert sections[1].subsections[0].editor_hours == 1


def test_numeric_fallbacks():
    chapters = read("Intro,A,Blank,,,,\nIntro,A,Words,hard,lots,some,few\nIntro,A,OutOfRange,7,1,1,1\n")
    blank, words, out_of_range = chapters[0].sections[0].subsections
    for sub in (blank, words):
        assert (sub.complexity, sub.editor_hours, sub.researcher_hours, sub.review_hours) == (2, 4, 6, 2)
    assert out_of_range.complexity == 2


def test_comment_blank_and_orphan_rows_are_skipped():
    chapters = read(
        "# Instructions: fill in below,,,,,,\n"
        ",,Orphan,1,1,1,1\n"
        ",,,,,,\n"
        "Intro,A,One,1,1,1,1\n"
    )
    assert [c.name for c in chapters] == ["Intro"]
    assert [s.name for s in chapters[0].sections[0].subsections] == ["One"]


def test_chapter_without_subsections_is_kept():
    chapters = read("Empty,,,,,,\n")
    assert chapters[0].name == "Empty"
    assert chapters[0].sections == ()


def test_short_frames_are_padded():
    frame = pd.DataFrame([["Intro", "", "Only Name"]], columns=["Chapter", "Section", "Subsection"])
    chapters = chapters_from_frame(frame)
    sub = chapters[0].sections[0].subsections[0]
    assert (sub.editor_hours, sub.researcher_hours, sub.review_hours) == (4, 6, 2)


def test_custom_fallbacks():
    frame = pd.DataFrame([["Intro", "", "X", "", "", "", ""]], columns=ContentColumns.ALL)
    chapters = chapters_from_frame(frame, {ContentColumns.EDITOR_HOURS: 1})
    assert chapters[0].sections[0].subsections[0].editor_hours == 1


def test_synthetic_sections():
    assert is_synthetic_section(Section(name="Main Topics", subsections=(Subsection(name="a"), Subsection(name="b"))))
    assert is_synthetic_section(Section(name="Solo", subsections=(Subsection(name="Solo"),)))
    assert not is_synthetic_section(Section(name="Context", subsections=(Subsection(name="Early"),)))


def test_export_blanks_synthetic_section_names():
    chapter = Chapter(
        name="Intro",
        sections=(
            Section(name="Overview", subsections=(Subsection(name="Overview", editor_hours=2.5),)),
            Section(name="Context", subsections=(Subsection(name="Early", complexity=3, editor_hours=3),)),
        ),
    )
    frame = chapters_to_frame([chapter])
    assert list(frame.columns) == ContentColumns.ALL
    assert frame[ContentColumns.SECTION].tolist() == ["", "Context"]
    assert frame[ContentColumns.EDITOR_HOURS].tolist() == ["2.5", "3"]
    assert frame[ContentColumns.COMPLEXITY].tolist() == ["2", "3"]


def test_round_trip_preserves_demand(sample_project, tmp_path):
    path = tmp_path / "content.csv"
    write_content_csv(sample_project.chapters, path)
    reimported = read_content_csv(path)
    assert aggregate_demand(reimported) == pytest.approx(aggregate_demand(sample_project.chapters))
    assert [c.name for c in reimported] == [c.name for c in sample_project.chapters]


def test_export_of_empty_tree_has_header_only(tmp_path):
    path = tmp_path / "empty.csv"
    write_content_csv([], path)
    assert path.read_text().strip() == HEADER.strip()
    assert read_content_csv(path) == []


def test_template_imports_cleanly(tmp_path):
    path = tmp_path / "template.csv"
    write_template_csv(path)
    chapters = read_content_csv(path)
    assert [c.name for c in chapters] == ["Chapter 1: Introduction", "Chapter 2: Core Concepts"]
    assert sum(len(s.subsections) for c in chapters for s in c.sections) == 7
    assert len(template_frame()) == 11


def test_empty_file_imports_nothing(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("")
    assert read_content_csv(path) == []


def test_malformed_file_raises_parser_error(tmp_path):
    path = tmp_path / "broken.csv"
    path.write_text("Chapter,Section\nA,B\nC,D,E,F\n")
    with pytest.raises(pd.errors.ParserError):
        read_content_csv(path)
