"""
Test configuration and fixtures.

Provides:
- Region/district reference data (two regions, three districts)
- Actor / ManagedUser / Report factories with sensible defaults
"""
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from nadmo.enums import DisasterType, ReportStatus, Role, SeverityLevel
from nadmo.schemas import Actor, District, ManagedUser, Region, Report


NOW = datetime(2025, 3, 5, 12, 0, tzinfo=timezone.utc)


# =============================================================================
# Reference data
# =============================================================================

@pytest.fixture
def regions() -> dict[str, Region]:
    return {
        "R1": Region(id="R1", name="Greater Accra"),
        "R2": Region(id="R2", name="Ashanti"),
    }


@pytest.fixture
def districts() -> list[District]:
    return [
        District(id="D1", name="Accra Metropolitan", region="R1"),
        District(id="D2", name="Tema Metropolitan", region="R1"),
        District(id="D3", name="Kumasi Metropolitan", region={"id": "R2", "name": "Ashanti"}),
    ]


# =============================================================================
# Factories
# =============================================================================

@pytest.fixture
def make_actor() -> Callable[..., Actor]:
    def _make(role: Role | str = Role.ADMIN, **overrides: Any) -> Actor:
        data: dict[str, Any] = {"id": f"actor-{Role(role).value}", "role": role}
        if Role(role) in (Role.REGIONAL_OFFICER, Role.DISTRICT_OFFICER, Role.REPORTER):
            data["region"] = "R1"
        if Role(role) in (Role.DISTRICT_OFFICER, Role.REPORTER):
            data["district"] = "D1"
        data.update(overrides)
        return Actor.model_validate(data)

    return _make


@pytest.fixture
def make_user() -> Callable[..., ManagedUser]:
    counter = iter(range(1, 10_000))

    def _make(role: Role | str = Role.REPORTER, **overrides: Any) -> ManagedUser:
        data: dict[str, Any] = {
            "id": f"user-{next(counter)}",
            "role": role,
            "region": "R1",
            "district": "D1",
            "is_active": True,
            "email": "kofi@example.com",
            "full_name": "Kofi Mensah",
        }
        data.update(overrides)
        return ManagedUser.model_validate(data)

    return _make


@pytest.fixture
def make_report() -> Callable[..., Report]:
    counter = iter(range(1, 10_000))

    def _make(**overrides: Any) -> Report:
        data: dict[str, Any] = {
            "id": f"RPT-{next(counter):04d}",
            "disaster_type": DisasterType.FLOOD,
            "status": ReportStatus.PENDING,
            "severity_level": SeverityLevel.MODERATE,
            "location_description": "Kaneshie market, Accra",
            "region": "R1",
            "district": "D1",
            "reporter": {"id": "actor-reporter", "email": "ama@example.com", "region": "R1", "district": "D1"},
            "created_at": NOW,
        }
        data.update(overrides)
        return Report.model_validate(data)

    return _make
