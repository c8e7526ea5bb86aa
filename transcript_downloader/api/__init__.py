"""API layer for course id resolution and curriculum listing."""

from .course_api import CourseResolver, derive_course_slug
from .curriculum_api import CurriculumAPI, CurriculumError

__all__ = ["CourseResolver", "CurriculumAPI", "CurriculumError", "derive_course_slug"]
