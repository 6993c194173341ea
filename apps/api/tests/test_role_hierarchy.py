import pytest

from nadmo.core.role_hierarchy import (
    ROLE_ORDER,
    assignable_roles,
    outranks,
    rank_of,
    required_references,
    scope_of,
)
from nadmo.enums import Role, Scope


def test_role_order_is_total_and_unique() -> None:
    ranks = [rank_of(role) for role in Role]
    assert sorted(ranks) == list(range(len(Role)))
    assert set(ROLE_ORDER) == set(Role)


def test_admin_is_most_privileged_reporter_least() -> None:
    assert rank_of(Role.ADMIN) == 0
    assert rank_of(Role.REPORTER) == len(ROLE_ORDER) - 1
    assert outranks(Role.ADMIN, Role.REGIONAL_OFFICER)
    assert outranks(Role.REGIONAL_OFFICER, Role.DISTRICT_OFFICER)
    assert outranks(Role.DISTRICT_OFFICER, Role.REPORTER)
    assert not outranks(Role.REPORTER, Role.REPORTER)


@pytest.mark.parametrize(
    "role,scope",
    [
        (Role.ADMIN, Scope.NATIONAL),
        (Role.REGIONAL_OFFICER, Scope.REGIONAL),
        (Role.DISTRICT_OFFICER, Scope.DISTRICT),
        (Role.REPORTER, Scope.SELF),
    ],
)
def test_scope_of(role: Role, scope: Scope) -> None:
    assert scope_of(role) == scope
    assert scope_of(role.value) == scope


def test_unknown_role_string_raises() -> None:
    with pytest.raises(ValueError):
        rank_of("superuser")


def test_assignable_roles_are_strictly_lower() -> None:
    assert assignable_roles(Role.ADMIN) == [
        Role.REGIONAL_OFFICER,
        Role.DISTRICT_OFFICER,
        Role.REPORTER,
    ]
    assert assignable_roles(Role.REGIONAL_OFFICER) == [Role.DISTRICT_OFFICER, Role.REPORTER]
    assert assignable_roles(Role.DISTRICT_OFFICER) == [Role.REPORTER]
    assert assignable_roles(Role.REPORTER) == []


def test_required_references_by_role() -> None:
    assert not required_references(Role.ADMIN).region
    assert required_references(Role.REGIONAL_OFFICER).region
    assert not required_references(Role.REGIONAL_OFFICER).district
    assert required_references(Role.DISTRICT_OFFICER).district
    assert required_references(Role.REPORTER).district
