"""Renders the CONTENTS.txt overview of a course."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import List

from ..models import CourseStructure, Lecture
from .file_utils import OutputStore

CONTENTS_FILENAME = "CONTENTS.txt"


def format_created_date(created: str | None) -> str:
    if not created:
        return ""
    try:
        parsed = datetime.fromisoformat(created.replace("Z", "+00:00"))
    except ValueError:
        return created
    return parsed.strftime("%x")


def _lecture_details(lecture: Lecture) -> str:
    minutes = (lecture.duration_seconds or 0) // 60
    return f"[{minutes} min, {format_created_date(lecture.created)}]"


def render_contents(structure: CourseStructure) -> str:
    lines: List[str] = []
    for chapter in structure.chapters:
        lines.append(f"{chapter.index}. {chapter.title}")
        for lecture in chapter.lectures:
            lines.append(f"{chapter.index}.{lecture.lecture_index} {lecture.title} {_lecture_details(lecture)}")
        lines.append("")

    for lecture in structure.lectures:
        lines.append(f"{lecture.lecture_index}. {lecture.title} {_lecture_details(lecture)}")

    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def write_contents(structure: CourseStructure, store: OutputStore) -> str:
    store.write_text(CONTENTS_FILENAME, render_contents(structure), overwrite=True)
    path = store.path_for(CONTENTS_FILENAME)
    logging.info("%s has been created at %s", CONTENTS_FILENAME, path)
    return path
