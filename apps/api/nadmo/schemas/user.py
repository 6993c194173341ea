"""User-related Pydantic schemas."""

from typing import Any

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from nadmo.enums import Role
from nadmo.schemas.reference import Reference, parse_reference
from nadmo.utils.normalization import flatten_profile, normalize_id, normalize_role


class _ScopedPrincipal(BaseModel):
    """Shared id/role/region/district normalization."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    role: Role
    region: Reference | None = None
    district: Reference | None = None

    @model_validator(mode="before")
    @classmethod
    def lift_profile_references(cls, data: Any) -> Any:
        return flatten_profile(data)

    @field_validator("id", mode="before")
    @classmethod
    def validate_id(cls, v: Any) -> str:
        return normalize_id(v)

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> Any:
        return normalize_role(v)

    @field_validator("region", "district", mode="before")
    @classmethod
    def validate_reference(cls, v: Any) -> Reference | None:
        return parse_reference(v)


class Actor(_ScopedPrincipal):
    """The authenticated principal a policy decision is made for."""

    def as_managed_user(self) -> "ManagedUser":
        """The actor's own account as a user-management record."""
        return ManagedUser(
            id=self.id,
            role=self.role,
            region=self.region,
            district=self.district,
        )


class ManagedUser(_ScopedPrincipal):
    """User row from ``GET /users/``."""

    is_active: bool = True
    email: str | None = None
    full_name: str | None = None
    phone_number: str | None = None


class UserForm(BaseModel):
    """Create/edit user form submitted from the user-management screen."""

    email: EmailStr
    full_name: str = Field(..., min_length=3, max_length=255)
    phone_number: str | None = Field(None, max_length=20)
    role: Role
    region: Reference | None = None
    district: Reference | None = None

    @field_validator("role", mode="before")
    @classmethod
    def validate_role(cls, v: Any) -> Any:
        return normalize_role(v)

    @field_validator("region", "district", mode="before")
    @classmethod
    def validate_reference(cls, v: Any) -> Reference | None:
        return parse_reference(v)

    @field_validator("phone_number")
    @classmethod
    def validate_phone(cls, v: str | None) -> str | None:
        if v is None or v.strip() == "":
            return None
        digits = v.strip().replace(" ", "")
        if len(digits.lstrip("+")) < 10:
            raise ValueError("Please enter a valid phone number")
        return digits
