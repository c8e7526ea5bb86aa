"""Data models for curriculum items, course structure, and harvest results."""

from .course_models import Chapter, CourseStructure, HarvestReport, Lecture, LectureOutcome
from .curriculum_models import CaptionTrack, CurriculumAsset, CurriculumItem, CurriculumKind

__all__ = [
    "CaptionTrack",
    "CurriculumAsset",
    "CurriculumItem",
    "CurriculumKind",
    "Chapter",
    "Lecture",
    "CourseStructure",
    "LectureOutcome",
    "HarvestReport",
]
