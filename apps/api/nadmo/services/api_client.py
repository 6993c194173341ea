"""Async client for the collaborator API (persistence + authoritative checks).

Every mutating call runs the local policy check first so an illegal request
never leaves the process; the server still re-validates everything.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from datetime import datetime
from types import TracebackType
from typing import Any

import httpx
from pydantic import TypeAdapter

from nadmo.core.authorization import check_mutation, evaluate_user_creation
from nadmo.core.config import settings
from nadmo.core.report_status import INITIAL_STATUS
from nadmo.core.structured_logging import build_log_context
from nadmo.enums import MutationAction, ReportStatus
from nadmo.schemas import (
    Actor,
    District,
    ManagedUser,
    Page,
    Region,
    Report,
    ReportContentUpdate,
    ReportCreate,
    ReportFilters,
    ReportStatistics,
    ReportStatusUpdate,
    UserForm,
)
from nadmo.services.http_service import RetryPolicy, send_with_retries

logger = logging.getLogger(__name__)

_USER_PAGE = TypeAdapter(Page[ManagedUser])
_REPORT_PAGE = TypeAdapter(Page[Report])
_REPORT_LIST = TypeAdapter(list[Report])
_REGION_LIST = TypeAdapter(list[Region])
_DISTRICT_LIST = TypeAdapter(list[District])


class CollaboratorAPIError(Exception):
    """Non-2xx response from the collaborator API."""

    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(response: httpx.Response) -> str:
    """Prefer the API's ``error``/``detail``/``message`` text over the reason phrase."""
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        for key in ("error", "detail", "message"):
            value = payload.get(key)
            if value:
                return str(value)
    return response.reason_phrase or "Request failed"


def _results(payload: Any) -> Any:
    """Unwrap list endpoints that may or may not be paginated."""
    if isinstance(payload, dict) and "results" in payload:
        return payload["results"]
    return payload


class CollaboratorClient:
    """
    Typed wrapper over the collaborator API.

    Usage:
        async with CollaboratorClient() as client:
            page = await client.list_reports(ReportFilters(status="pending"))
    """

    def __init__(
        self,
        base_url: str | None = None,
        *,
        token: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        max_attempts: int | None = None,
        base_delay: float | None = None,
        max_delay: float | None = None,
    ):
        token = settings.API_TOKEN if token is None else token
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.api_base_url).rstrip("/"),
            headers=headers,
            timeout=timeout or settings.API_TIMEOUT_SECONDS,
            transport=transport,
        )
        self._retry_policy = RetryPolicy(
            max_attempts=max_attempts or settings.API_MAX_ATTEMPTS,
            base_delay=settings.API_RETRY_BASE_DELAY if base_delay is None else base_delay,
            max_delay=settings.API_RETRY_MAX_DELAY if max_delay is None else max_delay,
        )

    async def __aenter__(self) -> CollaboratorClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        retry: bool | None = None,
    ) -> httpx.Response:
        response = await send_with_retries(
            self._client,
            method,
            path,
            policy=self._retry_policy,
            retry=retry,
            params=params,
            json=json,
        )
        if response.is_error:
            message = _error_message(response)
            logger.error(
                "Collaborator API returned %s: %s",
                response.status_code,
                message,
                extra=build_log_context(route=path, method=method),
            )
            raise CollaboratorAPIError(response.status_code, message)
        return response

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def get_current_actor(self) -> Actor:
        """Profile of the authenticated account (``GET /users/profile/``)."""
        response = await self._request("GET", "/users/profile/")
        return Actor.model_validate(response.json())

    async def list_users(self, page: int = 1) -> Page[ManagedUser]:
        response = await self._request("GET", "/users/", params={"page": page})
        return _USER_PAGE.validate_python(response.json())

    async def list_reports(
        self,
        filters: ReportFilters | None = None,
        page: int = 1,
        *,
        now: datetime | None = None,
    ) -> Page[Report]:
        params: dict[str, Any] = filters.to_query_params(now) if filters else {}
        params["page"] = page
        response = await self._request("GET", "/reports/", params=params)
        return _REPORT_PAGE.validate_python(response.json())

    async def iter_reports(
        self,
        filters: ReportFilters | None = None,
        *,
        max_pages: int | None = None,
        now: datetime | None = None,
    ) -> AsyncIterator[Report]:
        """Walk every page of ``GET /reports/`` (optionally capped)."""
        page_number = 1
        while True:
            page = await self.list_reports(filters, page_number, now=now)
            for report in page.results:
                yield report
            if not page.has_next or (max_pages and page_number >= max_pages):
                return
            page_number += 1

    async def get_report(self, report_id: str) -> Report:
        response = await self._request("GET", f"/reports/{report_id}/")
        return Report.model_validate(response.json())

    async def track_report(self, report_id: str) -> Report:
        """Public tracking lookup, usable by anonymous reporters."""
        response = await self._request("GET", f"/reports/public/{report_id}/")
        return Report.model_validate(response.json())

    async def list_reporter_reports(self, reporter_id: str) -> list[Report]:
        response = await self._request("GET", f"/reports/reporter/{reporter_id}/")
        return _REPORT_LIST.validate_python(_results(response.json()))

    async def get_statistics(self) -> ReportStatistics:
        response = await self._request("GET", "/reports/stats/")
        return ReportStatistics.model_validate(response.json())

    async def list_regions(self) -> list[Region]:
        response = await self._request("GET", "/regions/")
        return _REGION_LIST.validate_python(_results(response.json()))

    async def list_districts(self, region_id: str | None = None) -> list[District]:
        params = {"region": region_id} if region_id else None
        response = await self._request("GET", "/districts/", params=params)
        return _DISTRICT_LIST.validate_python(_results(response.json()))

    # -------------------------------------------------------------------------
    # Mutations (local policy check first)
    # -------------------------------------------------------------------------

    async def create_user(self, actor: Actor, form: UserForm) -> ManagedUser:
        """
        Create an account (``POST /users/``).

        Raises:
            PermissionDenied / MalformedReference: local check failed
            CollaboratorAPIError: server rejected the request
        """
        evaluate_user_creation(actor, form.role, form.region, form.district).raise_for_denial()
        response = await self._request("POST", "/users/", json=_user_payload(form))
        logger.info(
            "User created",
            extra=build_log_context(actor_id=actor.id, role=actor.role.value, action="create"),
        )
        return ManagedUser.model_validate(response.json())

    async def update_user(self, actor: Actor, user: ManagedUser, form: UserForm) -> ManagedUser:
        """Edit an account (``PUT /users/{id}/``); the new role/scope is checked too."""
        check_mutation(actor, user, MutationAction.EDIT)
        evaluate_user_creation(actor, form.role, form.region, form.district).raise_for_denial()
        response = await self._request("PUT", f"/users/{user.id}/", json=_user_payload(form))
        return ManagedUser.model_validate(response.json())

    async def delete_user(self, actor: Actor, user: ManagedUser) -> None:
        check_mutation(actor, user, MutationAction.DELETE)
        await self._request("DELETE", f"/users/{user.id}/")
        logger.info(
            "User deleted",
            extra=build_log_context(
                actor_id=actor.id, role=actor.role.value, record_id=user.id, action="delete"
            ),
        )

    async def submit_report(self, payload: ReportCreate, actor: Actor | None = None) -> Report:
        """
        Submit a new report (``POST /reports/``), anonymously when ``actor`` is None.

        Sent once; a failed submission is not retried.
        """
        body = payload.model_dump(mode="json")
        body["status"] = INITIAL_STATUS.value
        body["reporter"] = actor.id if actor else None
        response = await self._request("POST", "/reports/", json=body)
        report = Report.model_validate(response.json())
        logger.info(
            "Report submitted",
            extra=build_log_context(
                actor_id=actor.id if actor else None,
                role=actor.role.value if actor else None,
                record_id=report.id,
                action="create",
            ),
        )
        return report

    async def update_report_status(
        self,
        actor: Actor,
        report: Report,
        new_status: ReportStatus | str,
    ) -> Report:
        """
        Move a report to ``new_status`` (``PATCH /reports/{id}/``).

        Raises:
            InvalidTransition: transition not in the state machine
            PermissionDenied: actor may not change this report's status
            CollaboratorAPIError: server rejected the request
        """
        check_mutation(actor, report, MutationAction.CHANGE_STATUS, target_status=new_status)
        body = ReportStatusUpdate(status=new_status)
        response = await self._request(
            "PATCH",
            f"/reports/{report.id}/",
            json=body.model_dump(mode="json"),
            retry=True,
        )
        logger.info(
            "Report status changed %s -> %s",
            report.status.value,
            body.status.value,
            extra=build_log_context(
                actor_id=actor.id,
                role=actor.role.value,
                record_id=report.id,
                action=MutationAction.CHANGE_STATUS.value,
            ),
        )
        return Report.model_validate(response.json())

    async def update_report_content(
        self,
        actor: Actor,
        report: Report,
        update: ReportContentUpdate,
    ) -> Report:
        """Submitter edit of a pending report (``PATCH /reports/{id}/``)."""
        check_mutation(actor, report, MutationAction.EDIT)
        response = await self._request(
            "PATCH",
            f"/reports/{report.id}/",
            json=update.model_dump(mode="json", exclude_none=True),
            retry=True,
        )
        return Report.model_validate(response.json())

    async def delete_report(self, actor: Actor, report: Report) -> None:
        check_mutation(actor, report, MutationAction.DELETE)
        await self._request("DELETE", f"/reports/{report.id}/")
        logger.info(
            "Report deleted",
            extra=build_log_context(
                actor_id=actor.id, role=actor.role.value, record_id=report.id, action="delete"
            ),
        )


def _user_payload(form: UserForm) -> dict[str, Any]:
    payload = form.model_dump(mode="json", exclude={"region", "district"})
    payload["region"] = form.region.id if form.region else None
    payload["district"] = form.district.id if form.district else None
    return payload
