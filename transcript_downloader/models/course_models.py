"""Pydantic models describing the reconciled course hierarchy and harvest results."""

from __future__ import annotations

from enum import Enum
from typing import Iterator, List, Optional, Tuple, Union

from pydantic import BaseModel, Field

from .curriculum_models import CaptionTrack


class Lecture(BaseModel):
    """A video lecture with its position inside the course."""

    id: Union[int, str]
    title: str
    created: Optional[str] = None
    duration_seconds: Optional[int] = None
    chapter_index: Optional[int] = None
    lecture_index: int
    captions: List[CaptionTrack] = Field(default_factory=list)

    @property
    def display_name(self) -> str:
        if self.chapter_index is not None:
            return f"{self.chapter_index}.{self.lecture_index} {self.title}"
        return f"{self.lecture_index}. {self.title}"


class Chapter(BaseModel):
    """A course section owning an ordered list of lectures."""

    id: Union[int, str]
    title: str
    index: int
    lectures: List[Lecture] = Field(default_factory=list)


class CourseStructure(BaseModel):
    """Chapters in course order plus lectures that precede the first chapter."""

    chapters: List[Chapter] = Field(default_factory=list)
    lectures: List[Lecture] = Field(default_factory=list)

    def all_lectures(self) -> Iterator[Tuple[Optional[Chapter], Lecture]]:
        for chapter in self.chapters:
            for lecture in chapter.lectures:
                yield chapter, lecture
        for lecture in self.lectures:
            yield None, lecture

    @property
    def lecture_count(self) -> int:
        return sum(len(chapter.lectures) for chapter in self.chapters) + len(self.lectures)


class LectureOutcome(str, Enum):
    SAVED = "saved"
    SKIPPED = "skipped"
    NO_TRANSCRIPT = "no_transcript"
    EMPTY = "empty"
    FAILED = "failed"


class HarvestReport(BaseModel):
    """Aggregated outcomes of a harvest run."""

    saved: int = 0
    skipped: int = 0
    no_transcript: int = 0
    empty: int = 0
    failed: int = 0
    failed_titles: List[str] = Field(default_factory=list)

    def record(self, lecture: Lecture, outcome: LectureOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)
        if outcome is LectureOutcome.FAILED:
            self.failed_titles.append(lecture.title)

    @property
    def total(self) -> int:
        return self.saved + self.skipped + self.no_transcript + self.empty + self.failed
