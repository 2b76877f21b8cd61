"""User feedback capability used by the notification controllers."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class UserFeedback(Protocol):
    """Common contract for surfacing messages and asking for confirmation."""

    def alert(self, message: str) -> None:
        """Show a message to the operator."""

    def confirm(self, message: str) -> bool:
        """Ask a yes/no question; True means proceed."""


class CollectedFeedback:
    """Feedback for request/response hosts: messages are kept for rendering.

    ``confirm`` cannot block on a page that is already rendered, so the answer
    comes from an explicit flag submitted with the request. An unanswered
    question is remembered in ``pending_confirmation`` so the page can ask it.
    """

    def __init__(self, confirmed: bool = False) -> None:
        self.confirmed = confirmed
        self.messages: list[str] = []
        self.pending_confirmation: str | None = None

    def alert(self, message: str) -> None:
        logger.debug("Feedback: %s", message)
        self.messages.append(message)

    def confirm(self, message: str) -> bool:
        if not self.confirmed:
            self.pending_confirmation = message
        return self.confirmed
