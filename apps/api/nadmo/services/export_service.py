"""Report exports (CSV/JSON) for the staff console.

Only reports the requesting actor can see are exported. Excel and PDF
downloads are not supported here; ``ExportFormat`` rejects them.
"""

from __future__ import annotations

import csv
import io
import json
import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

from nadmo.core.config import settings
from nadmo.core.structured_logging import build_log_context
from nadmo.core.visibility import filter_visible
from nadmo.enums import ExportFormat, ReportStatus
from nadmo.schemas import Actor, Reference, Report, ReporterRef

logger = logging.getLogger(__name__)

CSV_DANGEROUS_PREFIXES = ("=", "+", "-", "@")
DESCRIPTION_MAX_LENGTH = 100
DATETIME_FORMAT = "%d %b %Y %H:%M"


class ExportError(ValueError):
    """Export request cannot be fulfilled (no data, no fields, bad field)."""


@dataclass(frozen=True)
class ExportField:
    key: str
    label: str
    kind: str = "text"
    selected: bool = True


REPORT_EXPORT_FIELDS: tuple[ExportField, ...] = (
    ExportField("id", "Report ID"),
    ExportField("status", "Status", kind="enum"),
    ExportField("created_at", "Created Date", kind="datetime"),
    ExportField("disaster_type", "Disaster Type", kind="enum"),
    ExportField("location_description", "Location"),
    ExportField("severity_level", "Severity", kind="enum"),
    ExportField("reporter", "Reporter", kind="user"),
    ExportField("description", "Description", kind="description"),
    ExportField("region", "Region", kind="reference"),
    ExportField("district", "District", kind="reference"),
    ExportField("are_people_hurt", "People Hurt", kind="bool", selected=False),
    ExportField("number_injured", "Casualties", selected=False),
    ExportField("gps_coordinates", "Coordinates", selected=False),
    ExportField("updated_at", "Last Updated", kind="datetime", selected=False),
)

_FIELDS_BY_KEY = {field.key: field for field in REPORT_EXPORT_FIELDS}


def default_fields() -> list[ExportField]:
    return [field for field in REPORT_EXPORT_FIELDS if field.selected]


def resolve_fields(keys: Sequence[str] | None) -> list[ExportField]:
    """
    Map requested keys onto the field catalogue (None = default selection).

    Raises:
        ExportError: empty selection or unknown key
    """
    if keys is None:
        return default_fields()
    if not keys:
        raise ExportError("Please select at least one field to export")
    unknown = [key for key in keys if key not in _FIELDS_BY_KEY]
    if unknown:
        raise ExportError(f"Unknown export fields: {', '.join(unknown)}")
    return [_FIELDS_BY_KEY[key] for key in keys]


def format_value(value: Any, kind: str = "text") -> str:
    """Human-readable cell value."""
    if value is None:
        return "Anonymous" if kind == "user" else ""
    if kind == "enum" and isinstance(value, Enum):
        if isinstance(value, ReportStatus):
            return value.label
        return str(value.value).replace("_", " ").capitalize()
    if kind == "datetime" and isinstance(value, datetime):
        return value.strftime(DATETIME_FORMAT)
    if kind == "reference" and isinstance(value, Reference):
        return str(value)
    if kind == "user" and isinstance(value, ReporterRef):
        return value.display_name
    if kind == "bool":
        return "Yes" if value else "No"
    text = _clean_whitespace(str(value))
    if kind == "description" and len(text) > DESCRIPTION_MAX_LENGTH:
        return text[:DESCRIPTION_MAX_LENGTH] + "..."
    return text


def _clean_whitespace(value: str) -> str:
    return re.sub(r"\s+", " ", value).strip()


def _csv_safe(value: str) -> str:
    if value and value.startswith(CSV_DANGEROUS_PREFIXES):
        return f"'{value}"
    return value


def _rows(reports: Iterable[Report], fields: Sequence[ExportField]) -> list[list[str]]:
    return [
        [format_value(getattr(report, field.key), field.kind) for field in fields]
        for report in reports
    ]


def write_csv(reports: Sequence[Report], fields: Sequence[ExportField]) -> str:
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow([field.label for field in fields])
    for row in _rows(reports, fields):
        writer.writerow([_csv_safe(value) for value in row])
    return output.getvalue()


def write_json(reports: Sequence[Report], fields: Sequence[ExportField]) -> str:
    labels = [field.label for field in fields]
    data = [dict(zip(labels, row)) for row in _rows(reports, fields)]
    return json.dumps(data, indent=2, ensure_ascii=False)


def export_reports(
    actor: Actor,
    reports: Iterable[Report],
    fields: Sequence[str] | None = None,
    fmt: ExportFormat | str = ExportFormat.CSV,
    *,
    max_rows: int | None = None,
) -> str:
    """
    Render the actor-visible subset of ``reports``.

    Raises:
        ExportError: nothing visible to export, or bad field selection
    """
    fmt = ExportFormat(fmt)
    selected = resolve_fields(fields)
    visible = filter_visible(actor, reports)
    if not visible:
        raise ExportError("No data to export")

    limit = max_rows or settings.EXPORT_MAX_ROWS
    if len(visible) > limit:
        logger.warning(
            "Export truncated from %s to %s rows",
            len(visible),
            limit,
            extra=build_log_context(actor_id=actor.id, role=actor.role.value, action="export"),
        )
        visible = visible[:limit]

    if fmt == ExportFormat.JSON:
        return write_json(visible, selected)
    return write_csv(visible, selected)


def export_filename(prefix: str, fmt: ExportFormat | str, now: datetime | None = None) -> str:
    """``reports_2025-03-05.csv`` style download name."""
    now = now or datetime.now()
    return f"{prefix}_{now.strftime('%Y-%m-%d')}.{ExportFormat(fmt).value}"
