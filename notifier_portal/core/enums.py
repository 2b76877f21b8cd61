"""Core enums used across modules."""

from enum import StrEnum


class ChannelEnum(StrEnum):
    """Notification delivery channel."""

    TELEGRAM = "telegram"
    EMAIL = "email"


class NotificationStatusEnum(StrEnum):
    """Notification status as reported by the backend."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset(
    {NotificationStatusEnum.SENT.value, NotificationStatusEnum.CANCELLED.value},
)


class BackendOperationEnum(StrEnum):
    """Backend calls issued by the portal."""

    CREATE = "create"
    LOOKUP = "lookup"
    CANCEL = "cancel"
