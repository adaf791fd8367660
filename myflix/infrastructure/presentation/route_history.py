"""Router that records navigation requests."""

from typing import List, Optional

import structlog

from myflix.domain.ports.presentation import IRouter, Route

logger = structlog.get_logger(__name__)


class RouteHistory(IRouter):
    """In-process router: remembers where the core asked to go."""

    def __init__(self, start: Route = Route.WELCOME) -> None:
        self._visited: List[Route] = [start]

    def navigate(self, route: Route) -> None:
        logger.debug("Navigate", route=route.value)
        self._visited.append(route)

    @property
    def current(self) -> Optional[Route]:
        """Route most recently navigated to."""
        return self._visited[-1] if self._visited else None

    @property
    def visited(self) -> List[Route]:
        """All routes in order, including the start route."""
        return list(self._visited)
