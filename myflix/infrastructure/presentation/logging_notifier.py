"""Notifier that writes user-facing messages to the log.

Stands in for a snack bar when the client runs headless. Keeps the last
messages so a shell or test can inspect what the user would have seen.
"""

from collections import deque
from typing import Deque, List, Tuple

import structlog

from myflix.domain.ports.presentation import INotifier, Severity

logger = structlog.get_logger("myflix.notifications")


class LoggingNotifier(INotifier):
    """Logs each notification at a level matching its severity."""

    def __init__(self, history_size: int = 20) -> None:
        self._history: Deque[Tuple[Severity, str]] = deque(maxlen=history_size)

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        self._history.append((severity, message))
        if severity is Severity.ERROR:
            logger.warning(message, severity=severity.value)
        else:
            logger.info(message, severity=severity.value)

    @property
    def history(self) -> List[Tuple[Severity, str]]:
        """Most recent notifications, oldest first."""
        return list(self._history)
