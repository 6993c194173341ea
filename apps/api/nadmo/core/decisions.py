"""Policy decisions and the policy error taxonomy.

Policy functions never raise for a denial. They return a ``Decision`` (truthy
when allowed) carrying a ``DenialReason``. Callers that prefer exceptions
(e.g. the API client before issuing a request) convert with
``Decision.raise_for_denial()``.
"""

from dataclasses import dataclass
from enum import Enum


class DenialReason(str, Enum):
    """Why a policy check was denied."""

    INVALID_TRANSITION = "invalid_transition"
    PERMISSION_DENIED = "permission_denied"
    MALFORMED_REFERENCE = "malformed_reference"


class PolicyError(Exception):
    """Base exception for policy denials raised on request."""

    reason: DenialReason = DenialReason.PERMISSION_DENIED


class InvalidTransition(PolicyError):
    """Status change not in the report transition table."""

    reason = DenialReason.INVALID_TRANSITION


class PermissionDenied(PolicyError):
    """Visibility or mutation check failed."""

    reason = DenialReason.PERMISSION_DENIED


class MalformedReference(PolicyError, ValueError):
    """Region/district reference missing or unresolvable."""

    reason = DenialReason.MALFORMED_REFERENCE


_ERRORS_BY_REASON: dict[DenialReason, type[PolicyError]] = {
    DenialReason.INVALID_TRANSITION: InvalidTransition,
    DenialReason.PERMISSION_DENIED: PermissionDenied,
    DenialReason.MALFORMED_REFERENCE: MalformedReference,
}


@dataclass(frozen=True)
class Decision:
    """Outcome of a policy check."""

    allowed: bool
    reason: DenialReason | None = None
    detail: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: DenialReason, detail: str = "") -> "Decision":
        return cls(allowed=False, reason=reason, detail=detail)

    def __bool__(self) -> bool:
        return self.allowed

    def raise_for_denial(self) -> None:
        """Raise the PolicyError matching the denial reason (no-op if allowed)."""
        if self.allowed:
            return
        error_cls = _ERRORS_BY_REASON.get(self.reason, PermissionDenied)
        raise error_cls(self.detail or (self.reason.value if self.reason else "denied"))
