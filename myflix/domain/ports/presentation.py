"""
Ports for the UI collaborators.

The core reports outcomes and requests navigation; it never controls how
either is rendered.
"""

from enum import Enum
from typing import Protocol, runtime_checkable


class Severity(str, Enum):
    """Notification severity."""

    INFO = "info"
    SUCCESS = "success"
    ERROR = "error"


class Route(str, Enum):
    """Named routes the core may navigate to."""

    WELCOME = "welcome"
    MOVIES = "movies"
    PROFILE = "profile"


@runtime_checkable
class INotifier(Protocol):
    """Shows a short message to the user (snack bar, toast, status line)."""

    def notify(self, message: str, severity: Severity = Severity.INFO) -> None:
        """Present message."""
        ...


@runtime_checkable
class IRouter(Protocol):
    """Navigates to a named route."""

    def navigate(self, route: Route) -> None:
        """Request navigation."""
        ...
