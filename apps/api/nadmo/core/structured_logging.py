"""Structured logging helpers (PII-safe)."""

import logging
from typing import Any

from nadmo.core.config import settings


def build_log_context(
    *,
    actor_id: str | None = None,
    role: str | None = None,
    record_id: str | None = None,
    action: str | None = None,
    route: str | None = None,
    method: str | None = None,
) -> dict[str, Any]:
    """Return a PII-safe log context dict (ids and enums only)."""
    context: dict[str, Any] = {}
    if actor_id:
        context["actor_id"] = actor_id
    if role:
        context["role"] = role
    if record_id:
        context["record_id"] = record_id
    if action:
        context["action"] = action
    if route:
        context["route"] = route
    if method:
        context["method"] = method
    return context


def configure_logging(level: int | None = None) -> None:
    """Configure root logging (fallback when the host app hasn't)."""
    logging.basicConfig(
        level=level if level is not None else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
