"""Role hierarchy: fixed privilege order and the scope each role covers.

The order below is configuration, not computed. A new role must be inserted
at an explicit position; no two roles may share a rank.
"""

from dataclasses import dataclass

from nadmo.enums import Role, Scope

# Most to least privileged
ROLE_ORDER: tuple[Role, ...] = (
    Role.ADMIN,
    Role.REGIONAL_OFFICER,
    Role.DISTRICT_OFFICER,
    Role.REPORTER,
)

ROLE_SCOPE: dict[Role, Scope] = {
    Role.ADMIN: Scope.NATIONAL,
    Role.REGIONAL_OFFICER: Scope.REGIONAL,
    Role.DISTRICT_OFFICER: Scope.DISTRICT,
    Role.REPORTER: Scope.SELF,
}

_RANKS: dict[Role, int] = {role: index for index, role in enumerate(ROLE_ORDER)}


@dataclass(frozen=True)
class RequiredReferences:
    """Which location references an account with a given role must carry."""

    region: bool
    district: bool


REQUIRED_REFERENCES: dict[Role, RequiredReferences] = {
    Role.ADMIN: RequiredReferences(region=False, district=False),
    Role.REGIONAL_OFFICER: RequiredReferences(region=True, district=False),
    Role.DISTRICT_OFFICER: RequiredReferences(region=True, district=True),
    Role.REPORTER: RequiredReferences(region=True, district=True),
}


def _coerce(role: Role | str) -> Role:
    return role if isinstance(role, Role) else Role(role)


def scope_of(role: Role | str) -> Scope:
    """Scope covered by a role (national/regional/district/self)."""
    return ROLE_SCOPE[_coerce(role)]


def rank_of(role: Role | str) -> int:
    """Index into ROLE_ORDER; lower means more privilege."""
    return _RANKS[_coerce(role)]


def outranks(role: Role | str, other: Role | str) -> bool:
    """True if ``role`` is strictly more privileged than ``other``."""
    return rank_of(role) < rank_of(other)


def assignable_roles(role: Role | str) -> list[Role]:
    """Roles an actor may create or assign: strictly below its own rank."""
    rank = rank_of(role)
    return list(ROLE_ORDER[rank + 1 :])


def required_references(role: Role | str) -> RequiredReferences:
    return REQUIRED_REFERENCES[_coerce(role)]
