"""Report list filter schema (mirrors the staff console filter bar)."""

from datetime import datetime, timedelta, timezone
from typing import Any

from pydantic import BaseModel, field_validator, model_validator

from nadmo.enums import DatePreset, DisasterType, ReportStatus, SeverityLevel

DATE_PRESET_DAYS: dict[DatePreset, int] = {
    DatePreset.TODAY: 1,
    DatePreset.WEEK: 7,
    DatePreset.MONTH: 30,
    DatePreset.QUARTER: 90,
}

ALL_SENTINEL = "all"
DEFAULT_ORDERING = "-created_at"


class ReportFilters(BaseModel):
    """Filters for ``GET /reports/``. ``"all"`` and blanks mean unset."""

    status: ReportStatus | None = None
    disaster_type: DisasterType | None = None
    severity_level: SeverityLevel | None = None
    region: str | None = None
    date_preset: DatePreset | None = None
    created_after: datetime | None = None
    created_before: datetime | None = None
    search: str | None = None
    ordering: str | None = DEFAULT_ORDERING

    @field_validator(
        "status",
        "disaster_type",
        "severity_level",
        "region",
        "date_preset",
        "search",
        mode="before",
    )
    @classmethod
    def drop_all_sentinel(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip().lower() in ("", ALL_SENTINEL):
            return None
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def validate_range(self) -> "ReportFilters":
        if (
            self.created_after
            and self.created_before
            and self.created_after > self.created_before
        ):
            raise ValueError("created_after must be before created_before")
        return self

    def resolved_range(self, now: datetime | None = None) -> tuple[datetime | None, datetime | None]:
        """Explicit range, with a date preset filling in a missing lower bound."""
        start, end = self.created_after, self.created_before
        if self.date_preset and start is None:
            now = now or datetime.now(timezone.utc)
            start = now - timedelta(days=DATE_PRESET_DAYS[self.date_preset])
        return start, end

    def to_query_params(self, now: datetime | None = None) -> dict[str, str]:
        """Query string for the collaborator API; unset filters are omitted."""
        params: dict[str, str] = {}
        if self.status:
            params["status"] = self.status.value
        if self.disaster_type:
            params["disaster_type"] = self.disaster_type.value
        if self.severity_level:
            params["severity_level"] = self.severity_level.value
        if self.region:
            params["region"] = self.region
        start, end = self.resolved_range(now)
        if start:
            params["created_after"] = start.isoformat()
        if end:
            params["created_before"] = end.isoformat()
        if self.search:
            params["search"] = self.search
        if self.ordering:
            params["ordering"] = self.ordering
        return params
