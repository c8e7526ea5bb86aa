"""Turns the flat curriculum listing into chapters and numbered lectures."""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional

from ..models import Chapter, CourseStructure, CurriculumItem, CurriculumKind, Lecture


def build_course_structure(items: Iterable[CurriculumItem]) -> CourseStructure:
    """Groups lecture items under the chapter that precedes them.

    Items are ordered by descending ``sort_order`` (``sorted`` is stable, so
    ties keep their listing order). Only lectures backed by a video asset are
    kept; quizzes, practice items, articles and unknown entries are dropped.
    """

    ordered: List[CurriculumItem] = sorted(items, key=lambda item: item.sort_order, reverse=True)
    structure = CourseStructure()
    current_chapter: Optional[Chapter] = None
    chapter_counter = 1
    lecture_counter = 1
    dropped = 0

    for item in ordered:
        item_type = item.item_type
        if item_type is CurriculumKind.CHAPTER:
            current_chapter = Chapter(id=item.id, title=item.title, index=chapter_counter)
            chapter_counter += 1
            structure.chapters.append(current_chapter)
            lecture_counter = 1
            continue

        if item_type is not CurriculumKind.LECTURE or item.asset is None or not item.asset.is_video:
            dropped += 1
            continue

        lecture = Lecture(
            id=item.id,
            title=item.title,
            created=item.created,
            duration_seconds=item.asset.time_estimation,
            chapter_index=current_chapter.index if current_chapter else None,
            lecture_index=lecture_counter,
            captions=[caption for caption in item.asset.captions if caption.url],
        )
        lecture_counter += 1
        if current_chapter is not None:
            current_chapter.lectures.append(lecture)
        else:
            structure.lectures.append(lecture)

    logging.debug("Dropped %s non-video curriculum items", dropped)
    return structure
