"""
Visibility filter tests.

Tests cover:
- Admin sees everything
- Regional/district scoping for users and reports
- Anonymous report fallback to report metadata
- Reporters never see user accounts
- Raw id vs expanded reference equality
"""

import pytest

from nadmo.core.decisions import DenialReason
from nadmo.core.visibility import check_visibility, filter_visible, is_visible
from nadmo.enums import Role


# =============================================================================
# Admin
# =============================================================================


def test_admin_sees_every_user_including_admins(make_actor, make_user) -> None:
    admin = make_actor(Role.ADMIN)
    for role in Role:
        assert is_visible(admin, make_user(role, region="R2", district="D3"))


def test_admin_sees_every_report(make_actor, make_report) -> None:
    admin = make_actor(Role.ADMIN)
    assert is_visible(admin, make_report(region="R2", district="D3", reporter=None))


# =============================================================================
# Regional officer
# =============================================================================


def test_regional_officer_sees_lower_roles_in_region(make_actor, make_user) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER)
    assert is_visible(officer, make_user(Role.DISTRICT_OFFICER))
    assert is_visible(officer, make_user(Role.REPORTER, district="D2"))


def test_regional_officer_cannot_see_peers_or_admins(make_actor, make_user) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER)
    assert not is_visible(officer, make_user(Role.REGIONAL_OFFICER))
    assert not is_visible(officer, make_user(Role.ADMIN))


def test_regional_officer_cannot_see_other_region(make_actor, make_user) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER)
    assert not is_visible(officer, make_user(Role.REPORTER, region="R2"))
    assert not is_visible(officer, make_user(Role.REPORTER, region=None))


def test_regional_report_visibility_uses_submitter_region(make_actor, make_report) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER)
    # Submitter in R1 even though report metadata says R2
    report = make_report(region="R2", reporter={"id": "u9", "region": "R1"})
    assert is_visible(officer, report)

    other = make_report(region="R1", reporter={"id": "u9", "region": "R2"})
    assert not is_visible(officer, other)


def test_anonymous_report_falls_back_to_report_region(make_actor, make_report) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER)
    assert is_visible(officer, make_report(reporter=None, region="R1"))
    assert not is_visible(officer, make_report(reporter=None, region="R2"))
    assert not is_visible(officer, make_report(reporter=None, region=None))


def test_regional_officer_without_region_is_malformed(make_actor, make_user) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER, region=None)
    decision = check_visibility(officer, make_user(Role.REPORTER))
    assert not decision
    assert decision.reason == DenialReason.MALFORMED_REFERENCE


# =============================================================================
# District officer
# =============================================================================


def test_district_officer_sees_reporters_in_district(make_actor, make_user) -> None:
    officer = make_actor(Role.DISTRICT_OFFICER, district="D1")
    assert is_visible(officer, make_user(Role.REPORTER, district="D1"))
    assert not is_visible(officer, make_user(Role.REPORTER, district="D2"))


def test_district_officer_cannot_see_other_officers(make_actor, make_user) -> None:
    officer = make_actor(Role.DISTRICT_OFFICER)
    assert not is_visible(officer, make_user(Role.DISTRICT_OFFICER))
    assert not is_visible(officer, make_user(Role.REGIONAL_OFFICER))


def test_district_report_visibility(make_actor, make_report) -> None:
    officer = make_actor(Role.DISTRICT_OFFICER, district="D1")
    assert is_visible(officer, make_report(district="D1"))
    assert not is_visible(officer, make_report(district="D2"))
    # No district on the report: submitter's district decides
    assert is_visible(officer, make_report(district=None, reporter={"id": "u1", "district": "D1"}))
    assert not is_visible(officer, make_report(district=None, reporter=None))


# =============================================================================
# Reporter
# =============================================================================


def test_reporter_never_sees_user_accounts(make_actor, make_user) -> None:
    reporter = make_actor(Role.REPORTER)
    for role in Role:
        assert not is_visible(reporter, make_user(role))
    assert not is_visible(reporter, reporter.as_managed_user())


def test_reporter_sees_only_own_reports(make_actor, make_report) -> None:
    reporter = make_actor(Role.REPORTER, id="u1")
    assert is_visible(reporter, make_report(reporter={"id": "u1"}))
    assert not is_visible(reporter, make_report(reporter={"id": "u2"}))
    assert not is_visible(reporter, make_report(reporter=None))


# =============================================================================
# Reference shapes
# =============================================================================


def test_raw_and_expanded_region_are_equal(make_actor, make_user) -> None:
    officer = make_actor(Role.REGIONAL_OFFICER, region="R1")
    user = make_user(Role.REPORTER, region={"id": "R1", "name": "Greater Accra"})
    assert is_visible(officer, user)

    expanded_officer = make_actor(Role.REGIONAL_OFFICER, region={"id": "R1", "name": "Greater Accra"})
    assert is_visible(expanded_officer, make_user(Role.REPORTER, region="R1"))


def test_filter_visible_preserves_order(make_actor, make_user) -> None:
    officer = make_actor(Role.DISTRICT_OFFICER)
    users = [
        make_user(Role.REPORTER, id="a"),
        make_user(Role.REPORTER, id="b", district="D2"),
        make_user(Role.REPORTER, id="c"),
    ]
    assert [u.id for u in filter_visible(officer, users)] == ["a", "c"]


@pytest.mark.parametrize("role", list(Role))
def test_visibility_is_idempotent(role, make_actor, make_user, make_report) -> None:
    actor = make_actor(role)
    for record in (make_user(Role.REPORTER), make_report()):
        assert is_visible(actor, record) == is_visible(actor, record)
