"""Report-related enums."""

from enum import Enum


class ReportStatus(str, Enum):
    """
    Emergency report lifecycle.

    pending → in_progress → resolved
    pending/in_progress → fake (terminal)
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    FAKE = "fake"

    @property
    def label(self) -> str:
        """Human-readable label ("In progress")."""
        return self.value.replace("_", " ").capitalize()


class DisasterType(str, Enum):
    """Disaster categories a citizen can report."""

    FLOOD = "flood"
    FIRE = "fire"
    ACCIDENT = "accident"
    LANDSLIDE = "landslide"
    STORM = "storm"
    EARTHQUAKE = "earthquake"
    OTHER = "other"


class SeverityLevel(str, Enum):
    """Severity chosen by the reporter, least to most severe."""

    MINOR = "minor"
    MODERATE = "moderate"
    SERIOUS = "serious"
    CRITICAL = "critical"


class DatePreset(str, Enum):
    """Relative date windows offered by the report filters."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"


class ExportFormat(str, Enum):
    """Supported report export formats."""

    CSV = "csv"
    JSON = "json"


DEFAULT_REPORT_STATUS = ReportStatus.PENDING
DEFAULT_SEVERITY_LEVEL = SeverityLevel.MINOR
