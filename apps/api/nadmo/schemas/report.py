"""Pydantic schemas for emergency reports."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from nadmo.enums import DisasterType, ReportStatus, SeverityLevel
from nadmo.schemas.reference import Reference, parse_reference
from nadmo.utils.normalization import flatten_profile, normalize_id


class ReporterRef(BaseModel):
    """Submitter of a report, as expanded (or not) by the API."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    email: str | None = None
    full_name: str | None = None
    region: Reference | None = None
    district: Reference | None = None

    @model_validator(mode="before")
    @classmethod
    def accept_bare_id(cls, data: Any) -> Any:
        if isinstance(data, (str, int)) and not isinstance(data, bool):
            return {"id": data}
        return flatten_profile(data)

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return normalize_id(v)

    @field_validator("region", "district", mode="before")
    @classmethod
    def validate_reference(cls, v: Any) -> Reference | None:
        return parse_reference(v)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or "Unknown"


class Report(BaseModel):
    """Report row from ``GET /reports/``."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    disaster_type: DisasterType
    status: ReportStatus = ReportStatus.PENDING
    severity_level: SeverityLevel = SeverityLevel.MINOR
    location_description: str = ""
    gps_coordinates: str | None = None
    description: str | None = None
    are_people_hurt: bool | None = None
    number_injured: int | None = Field(None, ge=0)
    region: Reference | None = None
    district: Reference | None = None
    reporter: ReporterRef | None = None  # None for anonymous reports
    created_at: datetime
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return normalize_id(v)

    @field_validator("region", "district", mode="before")
    @classmethod
    def validate_reference(cls, v: Any) -> Reference | None:
        return parse_reference(v)

    @field_validator("gps_coordinates", "description", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @property
    def reporter_id(self) -> str | None:
        return self.reporter.id if self.reporter else None

    @property
    def is_anonymous(self) -> bool:
        return self.reporter is None

    def with_status(self, status: ReportStatus) -> "Report":
        """Copy of this snapshot after a status change."""
        return self.model_copy(update={"status": ReportStatus(status)})


class ReportStatusUpdate(BaseModel):
    """Request body for ``PATCH /reports/{id}/``."""

    status: ReportStatus


class ReportContentUpdate(BaseModel):
    """Content fields a reporter may edit while their report is pending."""

    disaster_type: DisasterType | None = None
    severity_level: SeverityLevel | None = None
    location_description: str | None = Field(None, min_length=1)
    gps_coordinates: str | None = None
    description: str | None = None
    are_people_hurt: bool | None = None


class ReportCreate(BaseModel):
    """
    Citizen report submission (``POST /reports/``).

    Works without an account; the submitting client attaches the reporter id
    when someone is signed in. ``are_people_hurt`` follows ``number_injured``
    unless it is given explicitly.
    """

    disaster_type: DisasterType
    location_description: str = Field(..., min_length=1, max_length=500)
    gps_coordinates: str | None = None
    severity_level: SeverityLevel
    number_injured: int | None = Field(None, ge=0)
    are_people_hurt: bool | None = None
    description: str | None = None

    @field_validator("location_description", mode="before")
    @classmethod
    def strip_location(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v

    @field_validator("gps_coordinates", "description", "number_injured", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("gps_coordinates")
    @classmethod
    def validate_coordinates(cls, v: str | None) -> str | None:
        if v is None:
            return None
        parts = [part.strip() for part in v.split(",")]
        try:
            lat, lng = (float(part) for part in parts)
        except ValueError:
            raise ValueError("GPS coordinates must be 'latitude,longitude'") from None
        if not (-90 <= lat <= 90 and -180 <= lng <= 180):
            raise ValueError("GPS coordinates are out of range")
        return f"{lat:.6f},{lng:.6f}"

    @model_validator(mode="after")
    def derive_people_hurt(self) -> "ReportCreate":
        if self.are_people_hurt is None:
            self.are_people_hurt = bool(self.number_injured)
        return self
