"""Notifications data access over the backend REST API."""

from __future__ import annotations

import logging
from time import perf_counter
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from notifier_portal.core.enums import BackendOperationEnum
from notifier_portal.core.metrics import observe_backend_call
from notifier_portal.modules.notifications.schemas import (
    EmailNotificationDraft,
    NotificationRecord,
    NotificationStatusRecord,
    TelegramNotificationDraft,
    to_request_body,
)
from notifier_portal.shared.exceptions import ApplicationError, TransportError

logger = logging.getLogger(__name__)

_REDACTED = "***"


def redact_request_body(body: dict[str, Any]) -> dict[str, Any]:
    """Return a copy of a create body that is safe to log."""
    redacted = dict(body)
    email_config = redacted.get("email_config")
    if isinstance(email_config, dict) and "password" in email_config:
        redacted["email_config"] = {**email_config, "password": _REDACTED}
    return redacted


def _notification_path(notification_id: str) -> str:
    return f"/notify/{quote(notification_id, safe='')}"


class NotificationsRepository:
    """Create, read and cancel notifications held by the backend."""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self.http_client = http_client

    async def create_notification(
        self,
        draft: TelegramNotificationDraft | EmailNotificationDraft,
    ) -> NotificationRecord:
        """Submit a draft and return the record with its assigned identifier."""
        body = to_request_body(draft)
        logger.debug("Create request data: %s", redact_request_body(body))
        response = await self._send(BackendOperationEnum.CREATE, "POST", "/notify", json=body)
        return self._parse_record(response)

    async def get_notification(self, notification_id: str) -> NotificationStatusRecord:
        """Fetch one notification by identifier; a result without a status is malformed."""
        response = await self._send(
            BackendOperationEnum.LOOKUP,
            "GET",
            _notification_path(notification_id),
        )
        return self._parse_record(response, NotificationStatusRecord)

    async def cancel_notification(self, notification_id: str) -> None:
        """Ask the backend to cancel a pending notification."""
        await self._send(
            BackendOperationEnum.CANCEL,
            "DELETE",
            _notification_path(notification_id),
        )

    async def _send(
        self,
        operation: BackendOperationEnum,
        method: str,
        path: str,
        *,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        started_at = perf_counter()
        logger.info(
            "Sending %s request to %s%s",
            method,
            self.http_client.base_url,
            path.lstrip("/"),
        )
        try:
            response = await self.http_client.request(method, path, json=json)
        except httpx.HTTPError as exc:
            observe_backend_call(operation, "transport_error", perf_counter() - started_at)
            logger.error("Backend %s request failed: %s", operation.value, exc)
            raise TransportError(str(exc) or type(exc).__name__) from exc

        duration_seconds = perf_counter() - started_at
        logger.info("Backend %s response status: %s", operation.value, response.status_code)
        if response.is_success:
            observe_backend_call(operation, "success", duration_seconds)
            return response

        try:
            message = self._parse_error(response)
        except TransportError:
            observe_backend_call(operation, "transport_error", duration_seconds)
            raise
        observe_backend_call(operation, "application_error", duration_seconds)
        logger.warning(
            "Backend %s rejected with %s: %s",
            operation.value,
            response.status_code,
            message,
        )
        raise ApplicationError(message, response.status_code)

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            logger.error("Malformed backend response (status %s)", response.status_code)
            raise TransportError("Malformed response from backend") from exc

    def _parse_error(self, response: httpx.Response) -> str:
        data = self._decode(response)
        if isinstance(data, dict) and isinstance(data.get("error"), str):
            return data["error"]
        return response.reason_phrase or f"HTTP {response.status_code}"

    def _parse_record(
        self,
        response: httpx.Response,
        model: type[NotificationRecord] = NotificationRecord,
    ) -> Any:
        data = self._decode(response)
        result = data.get("result") if isinstance(data, dict) else None
        try:
            return model.model_validate(result)
        except ValidationError as exc:
            logger.error("Unexpected backend result shape: %s", exc)
            raise TransportError("Malformed response from backend") from exc
