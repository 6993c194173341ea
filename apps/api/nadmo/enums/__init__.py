"""Enum definitions for application constants."""

from nadmo.enums.auth import MutationAction, Role, Scope
from nadmo.enums.reports import (
    DEFAULT_REPORT_STATUS,
    DEFAULT_SEVERITY_LEVEL,
    DatePreset,
    DisasterType,
    ExportFormat,
    ReportStatus,
    SeverityLevel,
)

__all__ = [
    "DEFAULT_REPORT_STATUS",
    "DEFAULT_SEVERITY_LEVEL",
    "DatePreset",
    "DisasterType",
    "ExportFormat",
    "MutationAction",
    "ReportStatus",
    "Role",
    "Scope",
    "SeverityLevel",
]
