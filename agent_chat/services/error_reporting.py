"""User-facing reporting of stream errors, once per distinct message."""

from collections.abc import Callable
from typing import Any

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from agent_chat.models.snapshot import ConversationSnapshot
from agent_chat.utils.logging import get_logger

logger = get_logger(__name__)

ERROR_TITLE = "An error occurred. Please try again."

ErrorNotifier = Callable[[str], Any]


def format_error_description(message: str) -> str:
    """Description line shown under the error title."""
    return f"Error: {message}"


class LoggingNotifier:
    """Notifier that only writes to the log."""

    def __call__(self, message: str) -> None:
        logger.error(f"{ERROR_TITLE} {format_error_description(message)}")


class ConsoleNotifier:
    """Notifier that renders a red panel on a rich console."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def __call__(self, message: str) -> None:
        self.console.print(
            Panel(
                Text(format_error_description(message)),
                title=f"[bold red]{ERROR_TITLE}[/bold red]",
                border_style="red",
            )
        )


class ErrorDeduplicator:
    """Tracks the last reported error text for one conversation.

    An error is reported when its text differs from the last one reported.
    A snapshot without an error clears the cell, so the same text may be
    reported again after a clean snapshot.
    """

    def __init__(self, notifier: ErrorNotifier):
        self.notifier = notifier
        self.last_error: str | None = None

    def reset(self) -> None:
        """Forget the last reported error (thread switch)."""
        self.last_error = None

    def on_snapshot(self, snapshot: ConversationSnapshot) -> bool:
        """Report the snapshot's error if it has not been reported yet.

        Returns:
            True if a notification was emitted
        """
        if snapshot.error is None:
            self.last_error = None
            return False

        message = snapshot.error.message
        if not message or message == self.last_error:
            return False

        self.last_error = message
        try:
            self.notifier(message)
        except Exception as e:
            logger.warning(f"Error notification failed: {e}", exc_info=True)
        return True
