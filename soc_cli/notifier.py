"""
User-facing notifications for the CLI.

`ConsoleNotifier` renders toasts with rich. `OneShotNotifier` wraps any
notifier so a message is shown at most once until `reset()`, which is how
the auth guard avoids repeating its toast on every render.
"""

from enum import Enum
from typing import Optional

from rich.console import Console


class NotificationLevel(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


LEVEL_STYLES = {
    NotificationLevel.INFO: ("cyan", "i"),
    NotificationLevel.WARNING: ("yellow", "!"),
    NotificationLevel.ERROR: ("red", "✗"),
}


class ConsoleNotifier:
    """Print notifications to the terminal"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def notify(self, level: NotificationLevel, message: str) -> None:
        color, icon = LEVEL_STYLES[NotificationLevel(level)]
        self.console.print(f"[{color}]{icon} {message}[/{color}]")

    def info(self, message: str) -> None:
        self.notify(NotificationLevel.INFO, message)

    def warning(self, message: str) -> None:
        self.notify(NotificationLevel.WARNING, message)

    def error(self, message: str) -> None:
        self.notify(NotificationLevel.ERROR, message)


class OneShotState(str, Enum):
    IDLE = "idle"
    NOTIFIED = "notified"


class OneShotNotifier:
    """Forward the first notification, drop the rest until reset()"""

    def __init__(self, notifier):
        self.notifier = notifier
        self.state = OneShotState.IDLE

    @property
    def fired(self) -> bool:
        return self.state == OneShotState.NOTIFIED

    def notify(self, level: NotificationLevel, message: str) -> bool:
        if self.state == OneShotState.NOTIFIED:
            return False
        self.notifier.notify(level, message)
        self.state = OneShotState.NOTIFIED
        return True

    def reset(self) -> None:
        self.state = OneShotState.IDLE
