"""Notifications orchestration layer."""

from __future__ import annotations

import logging
from datetime import timezone, tzinfo

import httpx
from fastapi import Depends

from notifier_portal.core.config import Settings, get_settings
from notifier_portal.core.enums import ChannelEnum
from notifier_portal.core.http import get_http_client
from notifier_portal.modules.notifications.feedback import UserFeedback
from notifier_portal.modules.notifications.form import NotificationForm, toggle_channel_fields
from notifier_portal.modules.notifications.repository import NotificationsRepository
from notifier_portal.modules.notifications.schemas import LookupResult, NotificationRecord
from notifier_portal.modules.notifications.validation import build_draft, check_email_fields
from notifier_portal.shared.exceptions import ApplicationError, FormValidationError, TransportError

logger = logging.getLogger(__name__)

CANCEL_CONFIRMATION = "Are you sure you want to cancel this notification?"


class NotificationsController:
    """Create, look up and cancel notifications on behalf of the operator."""

    def __init__(
        self,
        repository: NotificationsRepository,
        feedback: UserFeedback,
        *,
        local_tz: tzinfo = timezone.utc,
    ) -> None:
        self.repository = repository
        self.feedback = feedback
        self.local_tz = local_tz
        self.search_result: LookupResult | None = None

    def _reject(self, form: NotificationForm, error: FormValidationError) -> None:
        logger.info("Form rejected on %s: %s", error.field_id, error.message)
        self.feedback.alert(error.message)
        form.focus(error.field_id)

    def validate(self, form: NotificationForm) -> bool:
        """Run the e-mail field checks; alert and focus the offending field on failure."""
        try:
            check_email_fields(form)
        except FormValidationError as exc:
            self._reject(form, exc)
            return False
        return True

    async def submit(self, form: NotificationForm) -> NotificationRecord | None:
        """Validate the form, create the notification and reset the form on success.

        On any failure the form is left as entered so it can be corrected and
        resubmitted.
        """
        if not self.validate(form):
            return None

        try:
            draft = build_draft(form, self.local_tz)
        except FormValidationError as exc:
            self._reject(form, exc)
            return None

        try:
            record = await self.repository.create_notification(draft)
        except ApplicationError as exc:
            self.feedback.alert(f"Error creating notification: {exc.message}")
            return None
        except TransportError as exc:
            self.feedback.alert(f"Network error: {exc.message}")
            return None

        logger.info("Notification %s created via %s", record.id, draft.channel)
        self.feedback.alert(f"Notification created! ID: {record.id}")
        form.reset()
        toggle_channel_fields(form)
        return record

    async def find_notification(self, search_id: str) -> LookupResult | None:
        """Fetch the status of one notification and publish it as the search result."""
        notification_id = search_id.strip()
        if not notification_id:
            self.feedback.alert("Please enter a notification ID")
            return None

        try:
            record = await self.repository.get_notification(notification_id)
        except ApplicationError as exc:
            result = LookupResult(notification_id=notification_id, error=exc.message)
        except TransportError:
            result = LookupResult(
                notification_id=notification_id,
                error="Error fetching notification",
            )
        else:
            result = LookupResult(notification_id=notification_id, status=record.status)

        self.search_result = result
        return result

    async def cancel_notification(self, notification_id: str) -> bool:
        """Cancel after confirmation, then refresh the displayed status."""
        if not self.feedback.confirm(CANCEL_CONFIRMATION):
            return False

        try:
            await self.repository.cancel_notification(notification_id)
        except ApplicationError as exc:
            self.feedback.alert(f"Error cancelling notification: {exc.message}")
            return False
        except TransportError:
            self.feedback.alert("Error cancelling notification")
            return False

        logger.info("Notification %s cancelled", notification_id)
        self.feedback.alert("Notification cancelled successfully!")
        await self.find_notification(notification_id)
        return True


def new_form(settings: Settings, channel: str | None = None) -> NotificationForm:
    """Return an empty form in a consistent default state."""
    default_channel = settings.default_channel.value
    form = NotificationForm(channel=channel or default_channel, default_channel=default_channel)
    toggle_channel_fields(form)
    return form


def is_known_channel(channel: str) -> bool:
    return channel in {item.value for item in ChannelEnum}


def get_notifications_repository(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> NotificationsRepository:
    """Dependency provider for the backend repository."""
    return NotificationsRepository(http_client)


def build_notifications_controller(
    repository: NotificationsRepository,
    feedback: UserFeedback,
    settings: Settings | None = None,
) -> NotificationsController:
    """Wire a controller with the configured display timezone."""
    settings = settings or get_settings()
    return NotificationsController(repository, feedback, local_tz=settings.tzinfo)
