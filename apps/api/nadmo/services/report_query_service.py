"""Client-side report filtering, search, and sorting.

Mirrors the collaborator API's query semantics for data already fetched, so a
console can refine a page without another round trip.
"""

from collections.abc import Iterable
from datetime import datetime, timezone
from enum import Enum

from nadmo.core.visibility import filter_visible, report_region
from nadmo.enums import ReportStatus, SeverityLevel
from nadmo.schemas import Actor, Report, ReportFilters

SORTABLE_FIELDS = {
    "created_at",
    "updated_at",
    "status",
    "severity_level",
    "disaster_type",
    "location_description",
}

_SEVERITY_RANK = {level: index for index, level in enumerate(SeverityLevel)}
_STATUS_RANK = {status: index for index, status in enumerate(ReportStatus)}


def matches_search(report: Report, term: str) -> bool:
    """Case-insensitive match on id, location, disaster type, reporter email."""
    needle = term.strip().lower()
    if not needle:
        return True
    haystacks = [report.id, report.location_description, report.disaster_type.value]
    if report.reporter and report.reporter.email:
        haystacks.append(report.reporter.email)
    return any(needle in value.lower() for value in haystacks if value)


def matches_region(report: Report, region: str) -> bool:
    """Region filter value may be an id or a region name."""
    wanted = region.strip().lower()
    for ref in (report.region, report_region(report)):
        if ref is None:
            continue
        if ref.id.lower() == wanted or (ref.name and ref.name.lower() == wanted):
            return True
    return wanted in report.location_description.lower()


def matches_filters(report: Report, filters: ReportFilters, now: datetime | None = None) -> bool:
    if filters.status and report.status != filters.status:
        return False
    if filters.disaster_type and report.disaster_type != filters.disaster_type:
        return False
    if filters.severity_level and report.severity_level != filters.severity_level:
        return False
    if filters.region and not matches_region(report, filters.region):
        return False
    start, end = filters.resolved_range(now)
    created_at = _aware(report.created_at)
    if start and created_at < _aware(start):
        return False
    if end and created_at > _aware(end):
        return False
    if filters.search and not matches_search(report, filters.search):
        return False
    return True


def apply_filters(
    reports: Iterable[Report],
    filters: ReportFilters,
    *,
    now: datetime | None = None,
) -> list[Report]:
    """Filter, then order by ``filters.ordering`` (``-`` prefix = descending)."""
    now = now or datetime.now(timezone.utc)
    matched = [report for report in reports if matches_filters(report, filters, now)]
    if not filters.ordering:
        return matched
    field = filters.ordering.lstrip("-")
    return sort_reports(matched, field, descending=filters.ordering.startswith("-"))


def sort_reports(reports: Iterable[Report], field: str, *, descending: bool = True) -> list[Report]:
    """
    Sort by a report field. Severity and status sort by workflow order, not
    alphabetically; missing timestamps sort last.

    Raises:
        ValueError: field is not sortable
    """
    if field not in SORTABLE_FIELDS:
        raise ValueError(f"Cannot sort reports by {field!r}")

    items = list(reports)
    if field in ("created_at", "updated_at"):
        present = [r for r in items if getattr(r, field) is not None]
        missing = [r for r in items if getattr(r, field) is None]
        present.sort(key=lambda r: _aware(getattr(r, field)), reverse=descending)
        return present + missing
    if field == "severity_level":
        return sorted(items, key=lambda r: _SEVERITY_RANK[r.severity_level], reverse=descending)
    if field == "status":
        return sorted(items, key=lambda r: _STATUS_RANK[r.status], reverse=descending)
    return sorted(items, key=lambda r: _text_key(getattr(r, field)), reverse=descending)


def visible_reports(
    actor: Actor,
    reports: Iterable[Report],
    filters: ReportFilters | None = None,
    *,
    now: datetime | None = None,
) -> list[Report]:
    """Reports the actor may see, optionally narrowed by filters."""
    visible = filter_visible(actor, reports)
    if filters is None:
        return visible
    return apply_filters(visible, filters, now=now)


def _aware(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so mixed payloads compare."""
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


def _text_key(value: object) -> str:
    if isinstance(value, Enum):
        return str(value.value)
    return str(value).lower()
