"""Client-side checks and draft assembly for the create form."""

from __future__ import annotations

import re
from datetime import timezone, tzinfo

from notifier_portal.core.enums import ChannelEnum
from notifier_portal.modules.notifications.form import NotificationForm, resolve_recipient_id
from notifier_portal.modules.notifications.schemas import (
    EmailConfig,
    EmailNotificationDraft,
    TelegramNotificationDraft,
)
from notifier_portal.shared.exceptions import FormValidationError
from notifier_portal.shared.utils import to_utc_iso

EMAIL_REQUIRED_FIELDS = (
    "email_recipient",
    "email_from_email",
    "email_username",
    "email_password",
)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def is_valid_email(value: str) -> bool:
    return EMAIL_PATTERN.match(value) is not None


def check_email_fields(form: NotificationForm) -> None:
    """Reject an e-mail form with a blank required field or a malformed address.

    Required fields are checked first, in order, and the first blank one is
    reported. Only then are the recipient and sender addresses matched, the
    recipient first. Other channels pass unchecked.
    """
    if form.channel != ChannelEnum.EMAIL:
        return

    for field_id in EMAIL_REQUIRED_FIELDS:
        if not form.value(field_id).strip():
            label = form.placeholder(field_id) or field_id
            raise FormValidationError(field_id, f"Please fill in the {label} field")

    if not is_valid_email(form.email_recipient):
        raise FormValidationError(
            "email_recipient",
            "Please enter a valid recipient email address",
        )
    if not is_valid_email(form.email_from_email):
        raise FormValidationError(
            "email_from_email",
            "Please enter a valid sender email address",
        )


def parse_port(value: str) -> int:
    """Read the leading integer of ``value`` the way a browser's parseInt does."""
    match = _LEADING_INT.match(value)
    if match is None:
        raise FormValidationError("email_smtp_port", "Please enter a valid SMTP port")
    return int(match.group(1))


def build_draft(
    form: NotificationForm,
    local_tz: tzinfo = timezone.utc,
) -> TelegramNotificationDraft | EmailNotificationDraft:
    """Assemble the create request for the selected channel."""
    try:
        notification_date = to_utc_iso(form.notification_date, local_tz)
    except ValueError as exc:
        raise FormValidationError(
            "notification_date",
            "Please enter a valid notification date",
        ) from exc

    if form.channel == ChannelEnum.EMAIL:
        return EmailNotificationDraft(
            payload=form.payload,
            notification_date=notification_date,
            recipient_id=resolve_recipient_id(form),
            email_config=EmailConfig(
                subject=form.email_subject,
                from_name=form.email_from_name,
                from_email=form.email_from_email,
                smtp_host=form.email_smtp_host,
                smtp_port=parse_port(form.email_smtp_port),
                username=form.email_username,
                password=form.email_password,
            ),
        )
    if form.channel == ChannelEnum.TELEGRAM:
        return TelegramNotificationDraft(
            payload=form.payload,
            notification_date=notification_date,
            recipient_id=resolve_recipient_id(form),
        )
    raise FormValidationError("channel", f"Unsupported channel: {form.channel}")
