# content_cost_model/tabular/content_csv.py
"""
Tabular import and export of the content tree.

Seven ordered columns: Chapter, Section, Subsection, Complexity, Editor
Hours, Researcher Hours, Review Hours. On import a non-empty Chapter starts
or resumes that chapter by exact name; a subsection with an empty Section is
placed under a section named after itself. Blank or non-numeric numbers
fall back to fixed defaults.
"""

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd

from content_cost_model.config.models import Chapter, Section, Subsection, new_id
from content_cost_model.schema.columns import (
    COMMENT_PREFIX,
    CSV_FALLBACKS,
    MAIN_TOPICS_SECTION,
    ContentColumns,
)
from content_cost_model.utils.parsing import to_int, to_number

logger = logging.getLogger(__name__)

PathOrBuffer = Union[str, Path, object]

TEMPLATE_ROWS: List[List[str]] = [
    ["# Instructions: Fill in your content structure below. Delete this row and the example rows when done.", "", "", "", "", "", ""],
    ["# Complexity: 1=Simple (definitions), 2=Moderate (standard content), 3=Complex (technical concepts)", "", "", "", "", "", ""],
    ["# Leave Section blank if subsections belong directly to the chapter", "", "", "", "", "", ""],
    ["# Example rows below - replace with your content:", "", "", "", "", "", ""],
    ["Chapter 1: Introduction", "", "Overview of the Topic", "1", "2", "3", "1"],
    ["Chapter 1: Introduction", "", "Key Concepts", "2", "4", "6", "2"],
    ["Chapter 1: Introduction", "Historical Context", "Early Development", "2", "3", "5", "1"],
    ["Chapter 1: Introduction", "Historical Context", "Modern Evolution", "3", "5", "8", "2"],
    ["Chapter 2: Core Concepts", "", "Fundamental Principles", "2", "4", "6", "2"],
    ["Chapter 2: Core Concepts", "Technical Details", "Implementation", "3", "6", "10", "3"],
    ["Chapter 2: Core Concepts", "Technical Details", "Best Practices", "2", "4", "6", "2"],
]


# --- Import ---


class _ChapterBuilder:
    """Mutable scratch tree used only while reading rows."""

    def __init__(self, name: str) -> None:
        self.id = new_id()
        self.name = name
        self.sections: Dict[str, Dict[str, Subsection]] = {}
        self.section_ids: Dict[str, str] = {}

    def section(self, name: str) -> Dict[str, Subsection]:
        if name not in self.sections:
            self.sections[name] = {}
            self.section_ids[name] = new_id()
        return self.sections[name]

    def build(self) -> Chapter:
        sections = tuple(
            Section(id=self.section_ids[name], name=name, subsections=tuple(subs.values()))
            for name, subs in self.sections.items()
        )
        return Chapter(id=self.id, name=self.name, sections=sections)


def _subsection_from_row(name: str, row: Mapping[str, str], fallbacks: Mapping[str, float]) -> Subsection:
    return Subsection(
        name=name,
        complexity=to_int(row.get(ContentColumns.COMPLEXITY), int(fallbacks[ContentColumns.COMPLEXITY])),
        editor_hours=to_number(row.get(ContentColumns.EDITOR_HOURS), fallbacks[ContentColumns.EDITOR_HOURS]),
        researcher_hours=to_number(
            row.get(ContentColumns.RESEARCHER_HOURS), fallbacks[ContentColumns.RESEARCHER_HOURS]
        ),
        review_hours=to_number(row.get(ContentColumns.REVIEW_HOURS), fallbacks[ContentColumns.REVIEW_HOURS]),
    )


def chapters_from_frame(
    frame: pd.DataFrame, fallbacks: Optional[Mapping[str, float]] = None
) -> List[Chapter]:
    """Build the content tree from a frame of string cells in the seven-column layout.

    Columns are taken by position, so header spelling does not matter.
    Rows whose Chapter starts with ``#`` are comments. Rows before the first
    chapter are ignored. Repeated chapter, section and subsection names are
    reused; the first occurrence of a subsection wins.
    """
    fallbacks = {**CSV_FALLBACKS, **(fallbacks or {})}
    frame = frame.iloc[:, : len(ContentColumns.ALL)].copy()
    # Short rows come in as missing trailing columns
    for missing in ContentColumns.ALL[len(frame.columns):]:
        frame[missing] = ""
    frame.columns = ContentColumns.ALL
    frame = frame.fillna("").astype(str)
    for column in frame.columns:
        frame[column] = frame[column].str.strip()

    chapters: Dict[str, _ChapterBuilder] = {}
    current: Optional[_ChapterBuilder] = None
    skipped = 0

    for row in frame.to_dict(orient="records"):
        chapter_name = row[ContentColumns.CHAPTER]
        section_name = row[ContentColumns.SECTION]
        subsection_name = row[ContentColumns.SUBSECTION]

        if chapter_name.startswith(COMMENT_PREFIX):
            continue
        if not (chapter_name or section_name or subsection_name):
            continue

        if chapter_name:
            current = chapters.get(chapter_name)
            if current is None:
                current = _ChapterBuilder(chapter_name)
                chapters[chapter_name] = current

        if not subsection_name:
            continue
        if current is None:
            skipped += 1
            continue

        # No section: the subsection gets a section of its own name
        subsections = current.section(section_name or subsection_name)
        if subsection_name not in subsections:
            subsections[subsection_name] = _subsection_from_row(subsection_name, row, fallbacks)

    if skipped:
        logger.warning(f"Ignored {skipped} rows that appear before any chapter")

    result = [builder.build() for builder in chapters.values()]
    logger.info(f"Imported {len(result)} chapters from content table")
    return result


def read_content_csv(
    source: PathOrBuffer, fallbacks: Optional[Mapping[str, float]] = None
) -> List[Chapter]:
    """Read a content CSV (header row first) into chapters.

    An empty file yields no chapters. A malformed file raises
    ``pandas.errors.ParserError``.
    """
    try:
        frame = pd.read_csv(
            source,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            header=0,
        )
    except pd.errors.EmptyDataError:
        logger.warning(f"Content CSV {source} is empty; nothing to import")
        return []
    return chapters_from_frame(frame, fallbacks)


# --- Export ---


def is_synthetic_section(section: Section) -> bool:
    """True for sections that only exist to hold subsections placed directly under a chapter."""
    if section.name == MAIN_TOPICS_SECTION:
        return True
    return len(section.subsections) == 1 and section.subsections[0].name == section.name


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)


def chapters_to_frame(chapters: Iterable[Chapter]) -> pd.DataFrame:
    """Flatten the tree to one row per subsection; synthetic sections export as an empty Section."""
    rows = []
    for chapter in chapters:
        for section in chapter.sections:
            section_cell = "" if is_synthetic_section(section) else section.name
            for subsection in section.subsections:
                rows.append(
                    {
                        ContentColumns.CHAPTER: chapter.name,
                        ContentColumns.SECTION: section_cell,
                        ContentColumns.SUBSECTION: subsection.name,
                        ContentColumns.COMPLEXITY: str(subsection.complexity),
                        ContentColumns.EDITOR_HOURS: _format_number(subsection.editor_hours),
                        ContentColumns.RESEARCHER_HOURS: _format_number(subsection.researcher_hours),
                        ContentColumns.REVIEW_HOURS: _format_number(subsection.review_hours),
                    }
                )
    return pd.DataFrame(rows, columns=ContentColumns.ALL)


def write_content_csv(chapters: Iterable[Chapter], destination: PathOrBuffer) -> pd.DataFrame:
    frame = chapters_to_frame(chapters)
    frame.to_csv(destination, index=False)
    logger.info(f"Exported {len(frame)} subsections to content table")
    return frame


def template_frame() -> pd.DataFrame:
    """Header, instruction rows and example rows for a new content table."""
    return pd.DataFrame(TEMPLATE_ROWS, columns=ContentColumns.ALL)


def write_template_csv(destination: PathOrBuffer) -> None:
    template_frame().to_csv(destination, index=False)
