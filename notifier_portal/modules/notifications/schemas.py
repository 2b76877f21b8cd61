"""Notifications schemas."""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from notifier_portal.core.enums import TERMINAL_STATUSES


class EmailConfig(BaseModel):
    """SMTP delivery settings attached to e-mail notifications."""

    subject: str
    from_name: str
    from_email: str
    smtp_host: str
    smtp_port: int
    username: str
    password: str


class TelegramNotificationDraft(BaseModel):
    """Telegram notification create request."""

    model_config = ConfigDict(extra="forbid")

    channel: Literal["telegram"] = "telegram"
    payload: str
    notification_date: str
    recipient_id: str


class EmailNotificationDraft(BaseModel):
    """E-mail notification create request."""

    model_config = ConfigDict(extra="forbid")

    channel: Literal["email"] = "email"
    payload: str
    notification_date: str
    recipient_id: str
    email_config: EmailConfig


NotificationDraft = Annotated[
    TelegramNotificationDraft | EmailNotificationDraft,
    Field(discriminator="channel"),
]

_draft_adapter: TypeAdapter[NotificationDraft] = TypeAdapter(NotificationDraft)


def parse_draft(data: dict[str, Any]) -> TelegramNotificationDraft | EmailNotificationDraft:
    """Validate a raw mapping into the matching draft variant."""
    return _draft_adapter.validate_python(data)


def to_request_body(draft: TelegramNotificationDraft | EmailNotificationDraft) -> dict[str, Any]:
    """Serialize a draft into the JSON body of ``POST /notify``."""
    return draft.model_dump(mode="json")


class NotificationRecord(BaseModel):
    """Notification as returned by the backend."""

    model_config = ConfigDict(extra="allow")

    id: str
    status: str | None = None
    payload: str | None = None
    channel: str | None = None
    notification_date: str | None = None
    recipient_id: str | None = None


class NotificationStatusRecord(NotificationRecord):
    """Notification returned by a lookup, which always reports its status."""

    status: str


class LookupResult(BaseModel):
    """Outcome of the latest notification lookup shown in the search panel."""

    notification_id: str
    status: str | None = None
    error: str | None = None

    @property
    def status_label(self) -> str:
        return (self.status or "").upper()

    @property
    def cancel_enabled(self) -> bool:
        return (
            self.error is None
            and self.status is not None
            and self.status not in TERMINAL_STATUSES
        )
