"""Report status state machine.

pending → in_progress → resolved, with pending also able to resolve directly.
fake is reachable from pending or in_progress. resolved and fake are terminal.
"""

from nadmo.core.decisions import Decision, DenialReason, InvalidTransition
from nadmo.enums import ReportStatus

INITIAL_STATUS = ReportStatus.PENDING

# Single source of truth for report status transitions
REPORT_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset(
        {ReportStatus.IN_PROGRESS, ReportStatus.RESOLVED, ReportStatus.FAKE}
    ),
    ReportStatus.IN_PROGRESS: frozenset({ReportStatus.RESOLVED, ReportStatus.FAKE}),
    ReportStatus.RESOLVED: frozenset(),
    ReportStatus.FAKE: frozenset(),
}

TERMINAL_STATUSES: frozenset[ReportStatus] = frozenset(
    status for status, targets in REPORT_TRANSITIONS.items() if not targets
)


def _coerce(status: ReportStatus | str) -> ReportStatus | None:
    if isinstance(status, ReportStatus):
        return status
    try:
        return ReportStatus(status)
    except ValueError:
        return None


def allowed_transitions(status: ReportStatus | str) -> frozenset[ReportStatus]:
    """Legal target statuses from ``status`` (empty for unknown/terminal)."""
    current = _coerce(status)
    if current is None:
        return frozenset()
    return REPORT_TRANSITIONS[current]


def is_terminal(status: ReportStatus | str) -> bool:
    return _coerce(status) in TERMINAL_STATUSES


def is_legal_transition(current: ReportStatus | str, target: ReportStatus | str) -> bool:
    target_status = _coerce(target)
    return target_status is not None and target_status in allowed_transitions(current)


def check_transition(current: ReportStatus | str, target: ReportStatus | str) -> Decision:
    """Non-raising transition check."""
    if is_legal_transition(current, target):
        return Decision.allow()
    return Decision.deny(
        DenialReason.INVALID_TRANSITION,
        f"Invalid transition: {_label(current)} → {_label(target)}",
    )


def validate_transition(current: ReportStatus | str, target: ReportStatus | str) -> None:
    """
    Validate whether a report status transition is allowed.

    Raises InvalidTransition if not.
    """
    check_transition(current, target).raise_for_denial()


def _label(status: ReportStatus | str) -> str:
    return status.value if isinstance(status, ReportStatus) else str(status)
