"""Dashboard statistics schemas."""

from pydantic import BaseModel


class ReportStatistics(BaseModel):
    """Shape of ``GET /reports/stats/`` (also computed locally as a fallback)."""

    total_reports: int = 0
    recent_reports: int = 0  # last 24 hours
    people_injured: int = 0
    status_breakdown: dict[str, int] = {}
    disaster_type_breakdown: dict[str, int] = {}
    severity_breakdown: dict[str, int] = {}


class UserStatistics(BaseModel):
    """Counts shown above the user-management table."""

    total_users: int = 0
    active_users: int = 0
    inactive_users: int = 0
    role_breakdown: dict[str, int] = {}
