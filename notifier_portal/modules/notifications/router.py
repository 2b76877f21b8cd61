"""Notifications portal router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from notifier_portal.core.config import Settings, get_settings
from notifier_portal.modules.notifications.feedback import CollectedFeedback
from notifier_portal.modules.notifications.form import NotificationForm, toggle_channel_fields
from notifier_portal.modules.notifications.repository import NotificationsRepository
from notifier_portal.modules.notifications.schemas import LookupResult
from notifier_portal.modules.notifications.service import (
    build_notifications_controller,
    get_notifications_repository,
    is_known_channel,
    new_form,
)
from notifier_portal.modules.notifications.views import render_confirmation, render_portal_page

router = APIRouter(prefix="/portal", tags=["portal"])


async def _read_form(request: Request) -> dict[str, str]:
    data = await request.form()
    return {key: value for key, value in data.items() if isinstance(value, str)}


def _bind_form(data: dict[str, str], settings: Settings) -> NotificationForm:
    form = NotificationForm.from_mapping(data, default_channel=settings.default_channel.value)
    if not is_known_channel(form.channel):
        form.channel = form.default_channel
    toggle_channel_fields(form)
    return form


def _shown_result(data: dict[str, str]) -> LookupResult | None:
    """Rebuild the lookup outcome the page was showing when it was posted."""
    notification_id = data.get("shown_id")
    if not notification_id:
        return None
    return LookupResult(
        notification_id=notification_id,
        status=data.get("shown_status") or None,
        error=data.get("shown_error") or None,
    )


def _page(
    settings: Settings,
    form: NotificationForm,
    feedback: CollectedFeedback | None = None,
    search_result: LookupResult | None = None,
    confirmation: str = "",
) -> HTMLResponse:
    return HTMLResponse(
        content=render_portal_page(
            settings.app_name,
            form,
            feedback=feedback,
            search_result=search_result,
            confirmation=confirmation,
        ),
    )


@router.get("", response_class=HTMLResponse)
async def portal_page(
    channel: str | None = None,
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Render an empty form for the requested or default channel."""
    if channel is not None and not is_known_channel(channel):
        channel = None
    return _page(settings, new_form(settings, channel))


@router.post("/channel", response_class=HTMLResponse)
async def switch_channel(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Re-render the submitted form with the field group of the new channel."""
    data = await _read_form(request)
    return _page(settings, _bind_form(data, settings), search_result=_shown_result(data))


@router.post("/notifications", response_class=HTMLResponse)
async def create_notification(
    request: Request,
    repository: NotificationsRepository = Depends(get_notifications_repository),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Submit the composition form to the backend."""
    data = await _read_form(request)
    form = _bind_form(data, settings)
    feedback = CollectedFeedback()
    controller = build_notifications_controller(repository, feedback, settings)
    await controller.submit(form)
    return _page(settings, form, feedback, _shown_result(data))


@router.post("/lookup", response_class=HTMLResponse)
async def find_notification(
    request: Request,
    repository: NotificationsRepository = Depends(get_notifications_repository),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Look up the status of a notification by identifier."""
    data = await _read_form(request)
    form = _bind_form(data, settings)
    form.search_id = form.search_id.strip()
    feedback = CollectedFeedback()
    controller = build_notifications_controller(repository, feedback, settings)
    await controller.find_notification(form.search_id)
    return _page(settings, form, feedback, controller.search_result or _shown_result(data))


@router.post("/cancel", response_class=HTMLResponse)
async def cancel_notification(
    request: Request,
    repository: NotificationsRepository = Depends(get_notifications_repository),
    settings: Settings = Depends(get_settings),
) -> HTMLResponse:
    """Cancel a notification once the operator has confirmed it.

    The cancel button posts ``notification_id``; the confirmation prompt posts
    the same identifier as ``confirm_cancel``.
    """
    data = await _read_form(request)
    confirmed_id = data.get("confirm_cancel")
    notification_id = (confirmed_id or data.get("notification_id", "")).strip()
    form = _bind_form(data, settings)
    feedback = CollectedFeedback(confirmed=confirmed_id is not None)
    if not notification_id:
        feedback.alert("Please enter a notification ID")
        return _page(settings, form, feedback, _shown_result(data))

    form.search_id = notification_id
    controller = build_notifications_controller(repository, feedback, settings)
    await controller.cancel_notification(notification_id)
    return _page(
        settings,
        form,
        feedback,
        controller.search_result or _shown_result(data),
        render_confirmation(feedback, notification_id),
    )
