"""Use case layer for the Learning context."""

from .dashboard import StudentDashboard, StudentDashboardService

__all__ = ["StudentDashboard", "StudentDashboardService"]
