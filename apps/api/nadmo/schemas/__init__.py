"""Pydantic schemas for collaborator API payloads and policy inputs."""

from nadmo.schemas.filters import ReportFilters
from nadmo.schemas.pagination import Page
from nadmo.schemas.reference import (
    District,
    Reference,
    Region,
    parse_reference,
    same_reference,
)
from nadmo.schemas.report import (
    Report,
    ReportContentUpdate,
    ReportCreate,
    ReporterRef,
    ReportStatusUpdate,
)
from nadmo.schemas.stats import ReportStatistics, UserStatistics
from nadmo.schemas.user import Actor, ManagedUser, UserForm

__all__ = [
    "Actor",
    "District",
    "ManagedUser",
    "Page",
    "Reference",
    "Region",
    "Report",
    "ReportContentUpdate",
    "ReportCreate",
    "ReportFilters",
    "ReportStatistics",
    "ReportStatusUpdate",
    "ReporterRef",
    "UserForm",
    "UserStatistics",
    "parse_reference",
    "same_reference",
]
