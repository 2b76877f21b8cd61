from __future__ import annotations

import json
from collections.abc import Callable

import httpx
import pytest

from notifier_portal.modules.notifications.form import NotificationForm, toggle_channel_fields
from notifier_portal.modules.notifications.repository import NotificationsRepository
from notifier_portal.modules.notifications.schemas import LookupResult
from notifier_portal.modules.notifications.service import (
    CANCEL_CONFIRMATION,
    NotificationsController,
)

BASE_URL = "http://backend.test/api/v1"


class FakeFeedback:
    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.messages: list[str] = []
        self.questions: list[str] = []

    def alert(self, message: str) -> None:
        self.messages.append(message)

    def confirm(self, message: str) -> bool:
        self.questions.append(message)
        return self.answer


class FakeBackend:
    """Backend double keeping one notification per identifier."""

    def __init__(self, statuses: dict[str, str] | None = None) -> None:
        self.statuses = dict(statuses or {})
        self.requests: list[httpx.Request] = []
        self.create_response: httpx.Response | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.method == "POST":
            if self.create_response is not None:
                return self.create_response
            return httpx.Response(200, json={"result": {"id": "n-42", "status": "pending"}})

        notification_id = request.url.path.rsplit("/", 1)[-1]
        if notification_id not in self.statuses:
            return httpx.Response(404, json={"error": "Notification not found"})
        if request.method == "DELETE":
            self.statuses[notification_id] = "cancelled"
            return httpx.Response(200, json={"result": {"status": "OK"}})
        return httpx.Response(
            200,
            json={"result": {"id": notification_id, "status": self.statuses[notification_id]}},
        )

    def requests_with(self, method: str) -> list[httpx.Request]:
        return [request for request in self.requests if request.method == method]


def make_controller(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    confirm: bool = True,
) -> tuple[NotificationsController, FakeFeedback]:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    feedback = FakeFeedback(answer=confirm)
    return NotificationsController(NotificationsRepository(client), feedback), feedback


def telegram_form() -> NotificationForm:
    form = NotificationForm(
        channel="telegram",
        payload="hello",
        notification_date="2025-01-01T10:00",
        telegram_recipient="12345",
    )
    toggle_channel_fields(form)
    return form


def email_form(**overrides: str) -> NotificationForm:
    values = {
        "channel": "email",
        "payload": "Quarterly report",
        "notification_date": "2025-01-01T10:00",
        "email_recipient": "a@b.co",
        "email_subject": "Report",
        "email_from_name": "Reports bot",
        "email_from_email": "c@d.co",
        "email_smtp_host": "smtp.example.com",
        "email_smtp_port": "587",
        "email_username": "bot",
        "email_password": "secret",
    }
    values.update(overrides)
    form = NotificationForm(**values)
    toggle_channel_fields(form)
    return form


def test_validate_focuses_first_blank_field_and_alerts() -> None:
    controller, feedback = make_controller(FakeBackend())
    form = email_form(email_from_email="", email_username="")

    assert controller.validate(form) is False
    assert form.focused_field == "email_from_email"
    assert feedback.messages == ["Please fill in the Sender email field"]


def test_validate_reports_recipient_regardless_of_sender() -> None:
    controller, feedback = make_controller(FakeBackend())
    form = email_form(email_recipient="not-an-email")

    assert controller.validate(form) is False
    assert form.focused_field == "email_recipient"
    assert feedback.messages == ["Please enter a valid recipient email address"]


def test_validate_passes_complete_email_form() -> None:
    controller, feedback = make_controller(FakeBackend())

    assert controller.validate(email_form()) is True
    assert feedback.messages == []


@pytest.mark.asyncio
async def test_submit_telegram_sends_body_without_email_config_and_resets() -> None:
    backend = FakeBackend()
    controller, feedback = make_controller(backend)
    form = telegram_form()

    record = await controller.submit(form)

    assert record is not None and record.id == "n-42"
    body = json.loads(backend.requests_with("POST")[0].content)
    assert body["channel"] == "telegram"
    assert "email_config" not in body
    assert feedback.messages == ["Notification created! ID: n-42"]
    assert form.payload == ""
    assert form.telegram_recipient == ""
    assert form.telegram_fields.visible and form.telegram_fields.required
    assert not form.email_fields.visible


@pytest.mark.asyncio
async def test_submit_email_attaches_integer_port() -> None:
    backend = FakeBackend()
    controller, _ = make_controller(backend)

    await controller.submit(email_form())

    body = json.loads(backend.requests_with("POST")[0].content)
    assert body["recipient_id"] == "a@b.co"
    assert len(body["email_config"]) == 7
    assert body["email_config"]["smtp_port"] == 587


@pytest.mark.asyncio
async def test_submit_after_email_success_returns_to_default_channel() -> None:
    controller, _ = make_controller(FakeBackend())
    form = email_form()

    await controller.submit(form)

    assert form.channel == "telegram"
    assert form.telegram_fields.visible
    assert not form.email_fields.visible
    assert not form.email_fields.required


@pytest.mark.asyncio
async def test_submit_validation_failure_sends_nothing() -> None:
    backend = FakeBackend()
    controller, feedback = make_controller(backend)
    form = email_form(email_password=" ")

    assert await controller.submit(form) is None
    assert backend.requests == []
    assert feedback.messages == ["Please fill in the SMTP password field"]
    assert form.focused_field == "email_password"


@pytest.mark.asyncio
async def test_submit_application_error_keeps_form() -> None:
    backend = FakeBackend()
    backend.create_response = httpx.Response(400, json={"error": "invalid date"})
    controller, feedback = make_controller(backend)
    form = telegram_form()

    assert await controller.submit(form) is None
    assert feedback.messages == ["Error creating notification: invalid date"]
    assert form.payload == "hello"
    assert form.telegram_recipient == "12345"
    assert form.notification_date == "2025-01-01T10:00"


@pytest.mark.asyncio
async def test_submit_transport_error_reports_network_error() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    controller, feedback = make_controller(_refuse)
    form = telegram_form()

    assert await controller.submit(form) is None
    assert feedback.messages == ["Network error: connection refused"]
    assert form.payload == "hello"


@pytest.mark.asyncio
async def test_submit_invalid_date_is_validation_error() -> None:
    backend = FakeBackend()
    controller, feedback = make_controller(backend)
    form = telegram_form()
    form.notification_date = ""

    assert await controller.submit(form) is None
    assert backend.requests == []
    assert feedback.messages == ["Please enter a valid notification date"]
    assert form.focused_field == "notification_date"


@pytest.mark.asyncio
async def test_find_requires_identifier() -> None:
    backend = FakeBackend()
    controller, feedback = make_controller(backend)

    assert await controller.find_notification("   ") is None
    assert backend.requests == []
    assert feedback.messages == ["Please enter a notification ID"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("status", "cancel_enabled"),
    [("pending", True), ("failed", True), ("sent", False), ("cancelled", False)],
)
async def test_find_derives_cancel_state_from_status(status: str, cancel_enabled: bool) -> None:
    controller, _ = make_controller(FakeBackend({"n-1": status}))

    result = await controller.find_notification(" n-1 ")

    assert result is not None
    assert result.notification_id == "n-1"
    assert result.status_label == status.upper()
    assert result.cancel_enabled is cancel_enabled
    assert controller.search_result is result


@pytest.mark.asyncio
async def test_find_renders_server_error() -> None:
    controller, _ = make_controller(FakeBackend())

    result = await controller.find_notification("missing")

    assert result is not None
    assert result.error == "Notification not found"
    assert result.cancel_enabled is False


@pytest.mark.asyncio
async def test_find_result_without_status_is_an_error() -> None:
    controller, _ = make_controller(
        lambda _: httpx.Response(200, json={"result": {"id": "n-1"}}),
    )

    result = await controller.find_notification("n-1")

    assert result is not None
    assert result.error == "Error fetching notification"
    assert result.cancel_enabled is False


@pytest.mark.asyncio
async def test_find_transport_error_uses_generic_message() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadError("reset", request=request)

    controller, _ = make_controller(_refuse)

    result = await controller.find_notification("n-1")

    assert result is not None
    assert result.error == "Error fetching notification"


@pytest.mark.asyncio
async def test_new_lookup_overwrites_previous_result() -> None:
    controller, _ = make_controller(FakeBackend({"n-1": "pending", "n-2": "sent"}))

    await controller.find_notification("n-1")
    await controller.find_notification("n-2")

    assert controller.search_result is not None
    assert controller.search_result.notification_id == "n-2"


@pytest.mark.asyncio
async def test_cancel_without_confirmation_sends_no_delete() -> None:
    backend = FakeBackend({"n-1": "pending"})
    controller, feedback = make_controller(backend, confirm=False)

    assert await controller.cancel_notification("n-1") is False
    assert backend.requests_with("DELETE") == []
    assert feedback.questions == [CANCEL_CONFIRMATION]
    assert backend.statuses["n-1"] == "pending"


@pytest.mark.asyncio
async def test_cancel_with_confirmation_deletes_once_and_refreshes() -> None:
    backend = FakeBackend({"n-1": "pending"})
    controller, feedback = make_controller(backend)

    assert await controller.cancel_notification("n-1") is True

    deletes = backend.requests_with("DELETE")
    assert len(deletes) == 1
    assert deletes[0].url.path == "/api/v1/notify/n-1"
    assert feedback.messages == ["Notification cancelled successfully!"]
    assert controller.search_result is not None
    assert controller.search_result.status_label == "CANCELLED"
    assert controller.search_result.cancel_enabled is False


@pytest.mark.asyncio
async def test_cancel_reports_server_error() -> None:
    controller, feedback = make_controller(FakeBackend())

    assert await controller.cancel_notification("missing") is False
    assert feedback.messages == ["Error cancelling notification: Notification not found"]
    assert controller.search_result is None


@pytest.mark.asyncio
async def test_cancel_transport_error_uses_generic_message() -> None:
    def _refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    controller, feedback = make_controller(_refuse)

    assert await controller.cancel_notification("n-1") is False
    assert feedback.messages == ["Error cancelling notification"]


def test_lookup_result_without_status_keeps_cancel_disabled() -> None:
    result = LookupResult(notification_id="n-1")

    assert result.status_label == ""
    assert result.cancel_enabled is False
