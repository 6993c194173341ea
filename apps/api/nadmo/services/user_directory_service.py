"""User-management listing and create/edit form rules."""

from collections.abc import Iterable, Sequence

from nadmo.core.authorization import can_mutate, evaluate_user_creation
from nadmo.core.decisions import Decision, DenialReason
from nadmo.core.role_hierarchy import assignable_roles, rank_of
from nadmo.core.visibility import filter_visible
from nadmo.enums import MutationAction, Role
from nadmo.schemas import Actor, District, ManagedUser, UserForm, same_reference
from nadmo.utils.normalization import normalize_role


def matches_user_search(user: ManagedUser, term: str) -> bool:
    needle = term.strip().lower()
    if not needle:
        return True
    return any(
        needle in value.lower()
        for value in (user.full_name, user.email, user.phone_number)
        if value
    )


def list_manageable_users(
    actor: Actor,
    users: Iterable[ManagedUser],
    *,
    search: str | None = None,
    role: Role | str | None = None,
    active: bool | None = None,
) -> list[ManagedUser]:
    """
    Users shown on the user-management screen.

    Visibility first, then the search/role/status filters. ``role="all"``
    means no role filter. Ordered by role rank, then name.
    """
    role = normalize_role(role) if role else None
    role_filter = None if role in (None, "all") else Role(role)
    rows = []
    for user in filter_visible(actor, users):
        if role_filter and user.role != role_filter:
            continue
        if active is not None and user.is_active != active:
            continue
        if search and not matches_user_search(user, search):
            continue
        rows.append(user)
    return sorted(rows, key=lambda u: (rank_of(u.role), (u.full_name or u.email or "").lower()))


def user_row_actions(actor: Actor, user: ManagedUser) -> dict[str, bool]:
    """Which row controls to enable for ``user``."""
    return {
        "edit": can_mutate(actor, user, MutationAction.EDIT),
        "delete": can_mutate(actor, user, MutationAction.DELETE),
    }


def role_options(actor: Actor) -> list[Role]:
    """Roles offered in the create/edit form's role select."""
    return assignable_roles(actor.role)


def validate_user_form(
    actor: Actor,
    form: UserForm,
    districts: Sequence[District] | None = None,
) -> Decision:
    """
    Full create-form check: role/scope rules plus district-in-region when the
    district lookup is available.
    """
    decision = evaluate_user_creation(actor, form.role, form.region, form.district)
    if not decision:
        return decision

    if form.district is not None and districts is not None:
        match = next((d for d in districts if d.id == form.district.id), None)
        if match is None:
            return Decision.deny(
                DenialReason.MALFORMED_REFERENCE, f"Unknown district: {form.district.id}"
            )
        if match.region is not None and not same_reference(match.region, form.region):
            return Decision.deny(
                DenialReason.MALFORMED_REFERENCE,
                "District does not belong to the selected region",
            )
    return Decision.allow()


def default_form_references(actor: Actor) -> dict[str, str | None]:
    """Prefilled region/district for a new-user form (actor's own scope)."""
    return {
        "region": actor.region.id if actor.region and actor.role != Role.ADMIN else None,
        "district": actor.district.id
        if actor.district and actor.role == Role.DISTRICT_OFFICER
        else None,
    }
