"""Auth-related enums."""

from enum import Enum


class Role(str, Enum):
    """
    User roles, listed from most to least privileged.

    - ADMIN: National NADMO administrator (all regions)
    - REGIONAL_OFFICER: Officer responsible for one region
    - DISTRICT_OFFICER: Officer responsible for one district
    - REPORTER: Citizen/reporter account (own reports only)
    """

    ADMIN = "admin"
    REGIONAL_OFFICER = "regional_officer"
    DISTRICT_OFFICER = "district_officer"
    REPORTER = "reporter"

    @classmethod
    def has_value(cls, value: str) -> bool:
        """Check if value is a valid role."""
        return value in cls._value2member_map_


class Scope(str, Enum):
    """Breadth of records a role is entitled to see."""

    NATIONAL = "national"
    REGIONAL = "regional"
    DISTRICT = "district"
    SELF = "self"


class MutationAction(str, Enum):
    """Actions checked by the mutation authorizer."""

    EDIT = "edit"
    DELETE = "delete"
    CHANGE_STATUS = "change_status"
