"""Visibility filter - which users and reports an actor may see.

Scope rules:
- National (admin): everything, including other admins
- Regional: district officers and reporters in the same region; reports whose
  submitter (or, for anonymous reports, the report itself) is in the region
- District: reporters in the same district; reports in the same district
- Self (reporter): only reports they submitted, never user records

Region/district are compared by id only. A missing reference never matches.
"""

import logging
from collections.abc import Iterable
from typing import TypeVar

from nadmo.core.decisions import Decision, DenialReason
from nadmo.core.role_hierarchy import scope_of
from nadmo.core.structured_logging import build_log_context
from nadmo.enums import Role, Scope
from nadmo.schemas import Actor, ManagedUser, Reference, Report, same_reference

logger = logging.getLogger(__name__)

REGIONAL_VISIBLE_USER_ROLES = frozenset({Role.DISTRICT_OFFICER, Role.REPORTER})
DISTRICT_VISIBLE_USER_ROLES = frozenset({Role.REPORTER})

RecordT = TypeVar("RecordT", ManagedUser, Report)


def check_visibility(actor: Actor, record: ManagedUser | Report) -> Decision:
    """Visibility decision with a denial reason."""
    scope = scope_of(actor.role)

    if scope == Scope.NATIONAL:
        return Decision.allow()

    if isinstance(record, ManagedUser):
        decision = _check_user_visibility(actor, record, scope)
    elif isinstance(record, Report):
        decision = _check_report_visibility(actor, record, scope)
    else:
        decision = Decision.deny(
            DenialReason.PERMISSION_DENIED,
            f"Unsupported record type: {type(record).__name__}",
        )

    if not decision:
        logger.debug(
            "Visibility denied: %s",
            decision.detail,
            extra=build_log_context(
                actor_id=actor.id,
                role=actor.role.value,
                record_id=getattr(record, "id", None),
            ),
        )
    return decision


def is_visible(actor: Actor, record: ManagedUser | Report) -> bool:
    """Non-raising boolean form of check_visibility."""
    return check_visibility(actor, record).allowed


def filter_visible(actor: Actor, records: Iterable[RecordT]) -> list[RecordT]:
    """Visible subset of ``records``, order preserved."""
    return [record for record in records if is_visible(actor, record)]


def report_region(report: Report) -> Reference | None:
    """Submitter's region, falling back to the report's own region."""
    if report.reporter and report.reporter.region:
        return report.reporter.region
    return report.region


def report_district(report: Report) -> Reference | None:
    """Report's own district, falling back to the submitter's district."""
    if report.district:
        return report.district
    return report.reporter.district if report.reporter else None


def _check_user_visibility(actor: Actor, user: ManagedUser, scope: Scope) -> Decision:
    if scope == Scope.REGIONAL:
        if actor.region is None:
            return Decision.deny(
                DenialReason.MALFORMED_REFERENCE, "Regional officer has no region"
            )
        if not same_reference(user.region, actor.region):
            return Decision.deny(DenialReason.PERMISSION_DENIED, "User is outside your region")
        if user.role not in REGIONAL_VISIBLE_USER_ROLES:
            return Decision.deny(
                DenialReason.PERMISSION_DENIED, f"Cannot view {user.role.value} accounts"
            )
        return Decision.allow()

    if scope == Scope.DISTRICT:
        if actor.district is None:
            return Decision.deny(
                DenialReason.MALFORMED_REFERENCE, "District officer has no district"
            )
        if not same_reference(user.district, actor.district):
            return Decision.deny(DenialReason.PERMISSION_DENIED, "User is outside your district")
        if user.role not in DISTRICT_VISIBLE_USER_ROLES:
            return Decision.deny(
                DenialReason.PERMISSION_DENIED, f"Cannot view {user.role.value} accounts"
            )
        return Decision.allow()

    return Decision.deny(DenialReason.PERMISSION_DENIED, "Reporters cannot view user accounts")


def _check_report_visibility(actor: Actor, report: Report, scope: Scope) -> Decision:
    if scope == Scope.REGIONAL:
        if actor.region is None:
            return Decision.deny(
                DenialReason.MALFORMED_REFERENCE, "Regional officer has no region"
            )
        if same_reference(report_region(report), actor.region):
            return Decision.allow()
        return Decision.deny(DenialReason.PERMISSION_DENIED, "Report is outside your region")

    if scope == Scope.DISTRICT:
        if actor.district is None:
            return Decision.deny(
                DenialReason.MALFORMED_REFERENCE, "District officer has no district"
            )
        if same_reference(report_district(report), actor.district):
            return Decision.allow()
        return Decision.deny(DenialReason.PERMISSION_DENIED, "Report is outside your district")

    # Self scope: own reports only
    if report.reporter_id is not None and report.reporter_id == actor.id:
        return Decision.allow()
    return Decision.deny(DenialReason.PERMISSION_DENIED, "Report was submitted by someone else")
