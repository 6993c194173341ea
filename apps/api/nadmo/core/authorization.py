"""Mutation authorizer - who may edit, delete, or re-status a record.

Rules, applied on top of the visibility filter:
- Nobody deletes their own account
- Nobody deletes an admin account
- User accounts are only mutated downward: the target's role must rank
  strictly below the actor's
- Report content is edited only by its submitter, and only while pending
- Report status changes need a non-reporter scope, visibility, and a legal
  transition

Every denial is a Decision/False; these functions never raise unless the
caller asks for it via check_mutation.
"""

import logging

from nadmo.core.decisions import Decision, DenialReason
from nadmo.core.report_status import allowed_transitions, check_transition
from nadmo.core.role_hierarchy import assignable_roles, outranks, required_references, scope_of
from nadmo.core.structured_logging import build_log_context
from nadmo.core.visibility import check_visibility
from nadmo.enums import MutationAction, ReportStatus, Role, Scope
from nadmo.schemas import Actor, ManagedUser, Reference, Report, same_reference

logger = logging.getLogger(__name__)


def evaluate_mutation(
    actor: Actor,
    record: ManagedUser | Report,
    action: MutationAction | str,
    *,
    target_status: ReportStatus | str | None = None,
) -> Decision:
    """
    Decide whether ``actor`` may perform ``action`` on ``record``.

    Args:
        actor: The authenticated principal
        record: User account or report snapshot
        action: edit / delete / change_status
        target_status: Requested status for change_status. When omitted, the
            answer is whether any legal transition exists from the current
            status.

    Returns:
        Decision (truthy when allowed)
    """
    try:
        action = MutationAction(action)
    except ValueError:
        return Decision.deny(DenialReason.PERMISSION_DENIED, f"Unknown action: {action}")

    if isinstance(record, ManagedUser):
        decision = _evaluate_user_mutation(actor, record, action)
    elif isinstance(record, Report):
        decision = _evaluate_report_mutation(actor, record, action, target_status)
    else:
        decision = Decision.deny(
            DenialReason.PERMISSION_DENIED,
            f"Unsupported record type: {type(record).__name__}",
        )

    if not decision:
        logger.debug(
            "Mutation denied: %s",
            decision.detail,
            extra=build_log_context(
                actor_id=actor.id,
                role=actor.role.value,
                record_id=getattr(record, "id", None),
                action=action.value,
            ),
        )
    return decision


def can_mutate(
    actor: Actor,
    record: ManagedUser | Report,
    action: MutationAction | str,
    *,
    target_status: ReportStatus | str | None = None,
) -> bool:
    """Boolean form of evaluate_mutation, for enabling/hiding controls."""
    return evaluate_mutation(actor, record, action, target_status=target_status).allowed


def check_mutation(
    actor: Actor,
    record: ManagedUser | Report,
    action: MutationAction | str,
    *,
    target_status: ReportStatus | str | None = None,
) -> None:
    """
    Raising form of evaluate_mutation.

    Raises:
        InvalidTransition, PermissionDenied, or MalformedReference
    """
    evaluate_mutation(actor, record, action, target_status=target_status).raise_for_denial()


def _evaluate_user_mutation(
    actor: Actor, user: ManagedUser, action: MutationAction
) -> Decision:
    if action == MutationAction.CHANGE_STATUS:
        return Decision.deny(
            DenialReason.PERMISSION_DENIED, "Status changes apply to reports only"
        )

    if action == MutationAction.DELETE:
        if user.id == actor.id:
            return Decision.deny(
                DenialReason.PERMISSION_DENIED, "You cannot delete your own account"
            )
        if user.role == Role.ADMIN:
            return Decision.deny(
                DenialReason.PERMISSION_DENIED, "Admin accounts cannot be deleted"
            )

    if not outranks(actor.role, user.role):
        return Decision.deny(
            DenialReason.PERMISSION_DENIED,
            f"{actor.role.value} cannot modify {user.role.value} accounts",
        )

    return check_visibility(actor, user)


def _evaluate_report_mutation(
    actor: Actor,
    report: Report,
    action: MutationAction,
    target_status: ReportStatus | str | None,
) -> Decision:
    if action == MutationAction.EDIT:
        if report.reporter_id is None or report.reporter_id != actor.id:
            return Decision.deny(
                DenialReason.PERMISSION_DENIED, "Only the submitter can edit a report"
            )
        if report.status != ReportStatus.PENDING:
            return Decision.deny(
                DenialReason.PERMISSION_DENIED, "Only pending reports can be edited"
            )
        return Decision.allow()

    if scope_of(actor.role) == Scope.SELF:
        return Decision.deny(
            DenialReason.PERMISSION_DENIED,
            f"Reporters cannot {action.value.replace('_', ' ')} reports",
        )

    visibility = check_visibility(actor, report)
    if not visibility:
        return visibility

    if action == MutationAction.DELETE:
        return Decision.allow()

    if target_status is None:
        if allowed_transitions(report.status):
            return Decision.allow()
        return Decision.deny(
            DenialReason.INVALID_TRANSITION,
            f"Report is {report.status.value}; no further status changes",
        )
    return check_transition(report.status, target_status)


def check_actor_references(actor: Actor | ManagedUser) -> Decision:
    """Verify the account carries the references its role requires."""
    required = required_references(actor.role)
    if required.region and actor.region is None:
        return Decision.deny(
            DenialReason.MALFORMED_REFERENCE, f"{actor.role.value} requires a region"
        )
    if required.district and actor.district is None:
        return Decision.deny(
            DenialReason.MALFORMED_REFERENCE, f"{actor.role.value} requires a district"
        )
    return Decision.allow()


def evaluate_user_creation(
    actor: Actor,
    role: Role | str,
    region: Reference | None = None,
    district: Reference | None = None,
) -> Decision:
    """
    Decide whether ``actor`` may create (or re-role) an account.

    The new role must rank strictly below the actor's, the account must carry
    the references its role requires, and it must fall inside the actor's own
    region/district scope.
    """
    try:
        role = Role(role)
    except ValueError:
        return Decision.deny(DenialReason.PERMISSION_DENIED, f"Unknown role: {role}")

    if role not in assignable_roles(actor.role):
        return Decision.deny(
            DenialReason.PERMISSION_DENIED,
            f"{actor.role.value} cannot create {role.value} accounts",
        )

    required = required_references(role)
    if required.region and region is None:
        return Decision.deny(DenialReason.MALFORMED_REFERENCE, "Region is required for this role")
    if required.district and district is None:
        return Decision.deny(
            DenialReason.MALFORMED_REFERENCE, "District is required for this role"
        )

    scope = scope_of(actor.role)
    if scope == Scope.REGIONAL and not same_reference(region, actor.region):
        return Decision.deny(
            DenialReason.PERMISSION_DENIED, "Accounts must be in your assigned region"
        )
    if scope == Scope.DISTRICT and not same_reference(district, actor.district):
        return Decision.deny(
            DenialReason.PERMISSION_DENIED, "Accounts must be in your assigned district"
        )
    return Decision.allow()


def can_create_user(
    actor: Actor,
    role: Role | str,
    region: Reference | None = None,
    district: Reference | None = None,
) -> bool:
    return evaluate_user_creation(actor, role, region, district).allowed
