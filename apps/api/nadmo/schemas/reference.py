"""Region/district reference schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from nadmo.utils.normalization import normalize_id, split_reference


class Reference(BaseModel):
    """
    Canonical pointer to shared reference data (region or district).

    Equality and hashing use the id only, so a bare id and an expanded object
    with a name compare equal.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return normalize_id(v)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Reference):
            return self.id == other.id
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name or self.id


def parse_reference(value: Any) -> Reference | None:
    """Normalize a raw id, expanded object, or Reference into a Reference.

    Raises:
        MalformedReference: value cannot be resolved to an id
    """
    if isinstance(value, Reference):
        return value
    if isinstance(value, (Region, District)):
        return value.as_reference()
    parts = split_reference(value)
    if parts is None:
        return None
    ref_id, name = parts
    return Reference(id=ref_id, name=name)


def same_reference(left: Reference | None, right: Reference | None) -> bool:
    """True iff both references are set and point at the same id."""
    if left is None or right is None:
        return False
    return left.id == right.id


class Region(BaseModel):
    """Region lookup row."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return normalize_id(v)

    def as_reference(self) -> Reference:
        return Reference(id=self.id, name=self.name)


class District(BaseModel):
    """District lookup row; belongs to exactly one region."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    region: Reference | None = None

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return normalize_id(v)

    @field_validator("region", mode="before")
    @classmethod
    def validate_region(cls, v: Any) -> Reference | None:
        return parse_reference(v)

    def as_reference(self) -> Reference:
        return Reference(id=self.id, name=self.name)
