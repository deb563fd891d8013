"""Use case layer for the Teaching context."""

from .courses import CoursesService, build_courses_service

__all__ = ["CoursesService", "build_courses_service"]
