"""Normalization of collaborator API payload shapes.

The collaborator API expands nested reference data inconsistently: a user's
region may arrive as ``"R1"``, ``7``, ``{"id": "R1", "name": "Greater Accra"}``,
or nested under ``profile``. Everything here runs at the schema boundary so the
policy layer only ever compares canonical ``Reference`` ids.
"""

from collections.abc import Mapping
from typing import Any

from nadmo.core.decisions import MalformedReference
from nadmo.enums import Role


# Role spellings seen in API payloads and older accounts
ROLE_ALIASES: dict[str, Role] = {
    "ges_admin": Role.ADMIN,
    "nadmo_admin": Role.ADMIN,
    "ges_regional_officer": Role.REGIONAL_OFFICER,
    "ges_district_officer": Role.DISTRICT_OFFICER,
}

# Keys lifted from a nested ``profile`` object onto the record itself
PROFILE_KEYS = ("region", "district")
ASSIGNED_ALIASES: dict[str, tuple[str, ...]] = {
    "region": ("assigned_region", "assignedRegion"),
    "district": ("assigned_district", "assignedDistrict"),
}


def normalize_id(value: Any) -> str:
    """Coerce a raw id (str/int/UUID) to its canonical string form."""
    if value is None or isinstance(value, bool):
        raise MalformedReference(f"Invalid id: {value!r}")
    text = str(value).strip()
    if not text:
        raise MalformedReference("Empty id")
    return text


def normalize_role(value: Any) -> Any:
    """Map legacy/uppercase role spellings onto Role values.

    Unknown strings are passed through so enum validation rejects them.
    """
    if isinstance(value, Role) or not isinstance(value, str):
        return value
    key = value.strip().lower()
    if key in ROLE_ALIASES:
        return ROLE_ALIASES[key]
    return key


def split_reference(value: Any) -> tuple[str, str | None] | None:
    """Return ``(id, name)`` for a raw or expanded reference, or None if unset.

    Raises:
        MalformedReference: expanded object without an id, or unsupported type
    """
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    if isinstance(value, (str, int)) and not isinstance(value, bool):
        return normalize_id(value), None
    if isinstance(value, Mapping):
        raw_id = value.get("id", value.get("pk"))
        if raw_id is None:
            raise MalformedReference("Reference object has no id")
        name = value.get("name")
        return normalize_id(raw_id), (str(name) if name is not None else None)
    raise MalformedReference(f"Unsupported reference type: {type(value).__name__}")


def flatten_profile(data: Any) -> Any:
    """Lift region/district onto the record itself (top-level wins).

    Sources, in order: the record, its nested ``profile``, then the
    ``assigned_*`` spellings used by older user payloads.
    """
    if not isinstance(data, Mapping):
        return data
    flattened = dict(data)
    profile = data.get("profile")
    for key in PROFILE_KEYS:
        if flattened.get(key) is not None:
            continue
        if isinstance(profile, Mapping) and profile.get(key) is not None:
            flattened[key] = profile[key]
            continue
        for alias in ASSIGNED_ALIASES[key]:
            if data.get(alias) is not None:
                flattened[key] = data[alias]
                break
    return flattened
