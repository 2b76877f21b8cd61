"""Server-side rendering of the notifications portal page."""

from __future__ import annotations

from html import escape

from notifier_portal.core.enums import ChannelEnum
from notifier_portal.modules.notifications.feedback import CollectedFeedback
from notifier_portal.modules.notifications.form import FieldGroup, NotificationForm
from notifier_portal.modules.notifications.schemas import LookupResult

_CHANNEL_LABELS = {
    ChannelEnum.TELEGRAM.value: "Telegram",
    ChannelEnum.EMAIL.value: "Email",
}


def _attrs(form: NotificationForm, field_id: str, *, required: bool = False) -> str:
    parts = [
        f'id="{field_id}"',
        f'name="{field_id}"',
        f'placeholder="{escape(form.placeholder(field_id))}"',
    ]
    if required:
        parts.append("required")
    if form.focused_field == field_id:
        parts.append("autofocus")
    return " ".join(parts)


def _input(
    form: NotificationForm,
    field_id: str,
    *,
    input_type: str = "text",
    required: bool = False,
) -> str:
    # Secrets are never written back into the page.
    value = "" if input_type == "password" else escape(form.value(field_id))
    return (
        f'<input type="{input_type}" {_attrs(form, field_id, required=required)} '
        f'value="{value}" />'
    )


def _hidden(name: str, value: str | None) -> str:
    if value is None:
        return ""
    return f'<input type="hidden" name="{name}" value="{escape(value)}" />'


def _group(group_id: str, group: FieldGroup, body: str) -> str:
    hidden = "" if group.visible else " hidden"
    return f'<fieldset id="{group_id}"{hidden}>{body}</fieldset>'


def _channel_select(form: NotificationForm) -> str:
    options = []
    for value, label in _CHANNEL_LABELS.items():
        selected = " selected" if form.channel == value else ""
        options.append(f'<option value="{value}"{selected}>{label}</option>')
    return f'<select id="channel" name="channel">{"".join(options)}</select>'


def render_create_form(form: NotificationForm) -> str:
    """Render the composition inputs with exactly one channel group active.

    The inputs live inside the page-level ``portalForm`` so every action on the
    page posts the current draft along with it.
    """
    telegram = _group(
        "telegramFields",
        form.telegram_fields,
        _input(form, "telegram_recipient", required=form.telegram_fields.required),
    )
    email = _group(
        "emailFields",
        form.email_fields,
        "".join(
            [
                _input(
                    form,
                    "email_recipient",
                    input_type="email",
                    required=form.email_fields.required,
                ),
                _input(form, "email_subject"),
                _input(form, "email_from_name"),
                _input(form, "email_from_email", input_type="email"),
                _input(form, "email_smtp_host"),
                _input(form, "email_smtp_port", input_type="number"),
                _input(form, "email_username"),
                _input(form, "email_password", input_type="password"),
            ],
        ),
    )
    payload = escape(form.payload)
    return f"""
<div id="createForm">
  <textarea {_attrs(form, 'payload', required=True)}>{payload}</textarea>
  <input type="datetime-local" {_attrs(form, 'notification_date', required=True)}
         value="{escape(form.notification_date)}" />
  {_channel_select(form)}
  <button type="submit" formaction="/portal/channel" formnovalidate>Switch channel</button>
  {telegram}
  {email}
  <button type="submit" formaction="/portal/notifications">Create Notification</button>
</div>
"""


def render_search_result(result: LookupResult | None) -> str:
    """Render the latest lookup outcome; empty when nothing was looked up.

    The hidden ``shown_*`` inputs carry the displayed outcome into the next
    post, so other actions on the page keep it on screen.
    """
    if result is None:
        return ""
    shown = (
        _hidden("shown_id", result.notification_id)
        + _hidden("shown_status", result.status)
        + _hidden("shown_error", result.error)
    )
    if result.error is not None:
        return f'<div class="error">{escape(result.error)}</div>{shown}'

    disabled = "" if result.cancel_enabled else " disabled"
    status = escape(result.status or "")
    return f"""
<div class="notification-result">
  {shown}
  <div class="status-display">
    <strong>Status:</strong>
    <span class="status-{status}">{escape(result.status_label)}</span>
  </div>
  <div class="notification-actions">
    <button type="submit" class="cancel-btn"{disabled} formaction="/portal/cancel"
            formnovalidate name="notification_id"
            value="{escape(result.notification_id)}">Cancel Notification</button>
  </div>
</div>
"""


def render_confirmation(feedback: CollectedFeedback, notification_id: str) -> str:
    """Render the pending yes/no question of a destructive action."""
    if feedback.pending_confirmation is None:
        return ""
    return f"""
<div class="confirmation">
  <p>{escape(feedback.pending_confirmation)}</p>
  <button type="submit" formaction="/portal/cancel" formnovalidate
          name="confirm_cancel" value="{escape(notification_id)}">Yes, cancel it</button>
  <button type="submit" formaction="/portal/channel" formnovalidate>No</button>
</div>
"""


def render_portal_page(
    app_name: str,
    form: NotificationForm,
    *,
    feedback: CollectedFeedback | None = None,
    search_result: LookupResult | None = None,
    confirmation: str = "",
) -> str:
    """Assemble the full portal page."""
    messages = ""
    if feedback is not None:
        messages = "".join(
            f'<div class="alert" role="alert">{escape(message)}</div>'
            for message in feedback.messages
        )
    return f"""<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <title>{escape(app_name)}</title>
  </head>
  <body>
    <main class="container">
      <h1>{escape(app_name)}</h1>
      {messages}
      <form id="portalForm" method="post" action="/portal/notifications">
        <section id="create">
          <h2>Create Notification</h2>
          {render_create_form(form)}
        </section>
        <section id="search">
          <h2>Find Notification</h2>
          <input type="text" id="search_id" name="search_id"
                 placeholder="Notification ID" value="{escape(form.search_id)}" />
          <button type="submit" formaction="/portal/lookup" formnovalidate>Find</button>
          <div id="searchResult">{render_search_result(search_result)}</div>
          {confirmation}
        </section>
      </form>
    </main>
  </body>
</html>
"""
