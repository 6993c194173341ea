"""Dashboard statistics over actor-visible reports and users."""

from collections import Counter
from collections.abc import Iterable
from datetime import datetime, timedelta, timezone

from nadmo.core.visibility import filter_visible
from nadmo.schemas import Actor, ManagedUser, Report, ReportStatistics, UserStatistics

RECENT_WINDOW = timedelta(hours=24)


def report_stats(
    actor: Actor,
    reports: Iterable[Report],
    *,
    now: datetime | None = None,
) -> ReportStatistics:
    """Local equivalent of ``GET /reports/stats/``, scoped to the actor."""
    now = now or datetime.now(timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    cutoff = now - RECENT_WINDOW
    visible = filter_visible(actor, reports)

    recent = 0
    injured = 0
    for report in visible:
        created_at = report.created_at
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        if created_at >= cutoff:
            recent += 1
        injured += report.number_injured or 0

    return ReportStatistics(
        total_reports=len(visible),
        recent_reports=recent,
        people_injured=injured,
        status_breakdown=dict(Counter(r.status.value for r in visible)),
        disaster_type_breakdown=dict(Counter(r.disaster_type.value for r in visible)),
        severity_breakdown=dict(Counter(r.severity_level.value for r in visible)),
    )


def user_stats(actor: Actor, users: Iterable[ManagedUser]) -> UserStatistics:
    visible = filter_visible(actor, users)
    active = sum(1 for user in visible if user.is_active)
    return UserStatistics(
        total_users=len(visible),
        active_users=active,
        inactive_users=len(visible) - active,
        role_breakdown=dict(Counter(user.role.value for user in visible)),
    )
