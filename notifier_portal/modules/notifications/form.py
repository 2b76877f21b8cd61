"""Typed view-model of the notification composition form."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from notifier_portal.core.enums import ChannelEnum

FIELD_PLACEHOLDERS: dict[str, str] = {
    "payload": "Notification text",
    "telegram_recipient": "Telegram chat ID",
    "email_recipient": "Recipient email",
    "email_subject": "Subject",
    "email_from_name": "Sender name",
    "email_from_email": "Sender email",
    "email_smtp_host": "SMTP host",
    "email_smtp_port": "SMTP port",
    "email_username": "SMTP username",
    "email_password": "SMTP password",
}

INPUT_FIELDS = (
    "channel",
    "payload",
    "notification_date",
    "telegram_recipient",
    "email_recipient",
    "email_subject",
    "email_from_name",
    "email_from_email",
    "email_smtp_host",
    "email_smtp_port",
    "email_username",
    "email_password",
    "search_id",
)


@dataclass(slots=True)
class FieldGroup:
    """Presentation state of one channel-specific block of inputs."""

    visible: bool = False
    required: bool = False


@dataclass
class NotificationForm:
    """Input values and presentation state of the create form."""

    channel: str = ChannelEnum.TELEGRAM.value
    payload: str = ""
    notification_date: str = ""
    telegram_recipient: str = ""
    email_recipient: str = ""
    email_subject: str = ""
    email_from_name: str = ""
    email_from_email: str = ""
    email_smtp_host: str = ""
    email_smtp_port: str = ""
    email_username: str = ""
    email_password: str = ""
    search_id: str = ""

    telegram_fields: FieldGroup = field(default_factory=FieldGroup)
    email_fields: FieldGroup = field(default_factory=FieldGroup)
    focused_field: str | None = None
    default_channel: str = ChannelEnum.TELEGRAM.value

    @classmethod
    def from_mapping(
        cls,
        data: Mapping[str, str],
        default_channel: str = ChannelEnum.TELEGRAM.value,
    ) -> NotificationForm:
        """Build a form from submitted key/value pairs; unknown keys are ignored."""
        values = {name: str(data[name]) for name in INPUT_FIELDS if name in data}
        values.setdefault("channel", default_channel)
        return cls(default_channel=default_channel, **values)

    def value(self, field_id: str) -> str:
        return getattr(self, field_id)

    def placeholder(self, field_id: str) -> str:
        return FIELD_PLACEHOLDERS.get(field_id, "")

    def focus(self, field_id: str) -> None:
        self.focused_field = field_id

    def reset(self) -> None:
        """Clear every input, keeping the lookup field, and select the default channel."""
        for name in INPUT_FIELDS:
            if name != "search_id":
                setattr(self, name, "")
        self.channel = self.default_channel
        self.focused_field = None


def toggle_channel_fields(form: NotificationForm) -> None:
    """Show and require the field group of the selected channel only."""
    if form.channel == ChannelEnum.TELEGRAM:
        form.telegram_fields.visible = True
        form.telegram_fields.required = True
        form.email_fields.visible = False
        form.email_fields.required = False
    elif form.channel == ChannelEnum.EMAIL:
        form.telegram_fields.visible = False
        form.telegram_fields.required = False
        form.email_fields.visible = True
        form.email_fields.required = True


def resolve_recipient_id(form: NotificationForm) -> str:
    """Return the recipient input matching the selected channel."""
    if form.channel == ChannelEnum.TELEGRAM:
        return form.telegram_recipient
    if form.channel == ChannelEnum.EMAIL:
        return form.email_recipient
    return ""
