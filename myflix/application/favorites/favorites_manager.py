"""
Favorites Manager.

Derives the favorite movie list from the user's id set and mutates the set
through the backend only. The local set is never changed ahead of server
confirmation: the user returned by the backend is committed as-is
(commit-then-reflect).
"""

from typing import Iterable, Optional, Union

import structlog

from myflix.application.session.operation_gate import UserOperationGate
from myflix.application.session.session_store import SessionStore
from myflix.domain.movie.models import Movie
from myflix.domain.ports.api_gateway import IMovieApiGateway
from myflix.domain.shared.errors import NotAuthenticatedError
from myflix.domain.user.models import User

logger = structlog.get_logger(__name__)

MovieRef = Union[Movie, str]


def _movie_id(movie: MovieRef) -> str:
    return movie.id if isinstance(movie, Movie) else movie


class FavoritesManager:
    """
    Favorite set queries and server-confirmed mutations.

    Dependencies (injected):
    - gateway: IMovieApiGateway - backend calls
    - session_store: SessionStore - commit target
    - gate: UserOperationGate - serializes mutations per user

    Example:
        >>> manager = FavoritesManager(gateway, store, gate)
        >>> manager.is_favorite(user, "m1")
        False
        >>> user = await manager.add_favorite("ana", "m1")
        >>> manager.is_favorite(user, "m1")
        True
    """

    def __init__(
        self,
        gateway: IMovieApiGateway,
        session_store: SessionStore,
        gate: Optional[UserOperationGate] = None,
    ):
        self.gateway = gateway
        self.session_store = session_store
        self.gate = gate or UserOperationGate()

    @staticmethod
    def is_favorite(user: User, movie: MovieRef) -> bool:
        """Membership test against the user's favorite ids."""
        return _movie_id(movie) in user.favorite_movie_ids

    @staticmethod
    def favorite_movies(user: User, catalog: Iterable[Movie]) -> list[Movie]:
        """
        Movies of catalog whose id is a favorite, in catalog order.

        A movie id appearing twice in the catalog is returned once.

        Args:
            user: User whose favorites to resolve
            catalog: Current catalog snapshot

        Returns:
            Favorite movies, empty when there are none
        """
        favorites = user.favorite_movie_ids
        if not favorites:
            return []

        seen: set[str] = set()
        result = []
        for movie in catalog:
            if movie.id in favorites and movie.id not in seen:
                seen.add(movie.id)
                result.append(movie)
        return result

    async def add_favorite(self, username: str, movie_id: str) -> User:
        """
        Add movie_id to the user's favorites on the server, then commit.

        Raises:
            NetworkError: If the backend call fails (nothing committed)
            NotAuthenticatedError: If the session changed meanwhile
        """
        async with self.gate.hold(username):
            return await self._add(username, movie_id)

    async def remove_favorite(self, username: str, movie_id: str) -> User:
        """
        Remove movie_id from the user's favorites on the server, then commit.

        Removing an id that is not a favorite is harmless: the backend
        returns the user unchanged and that is what gets committed.

        Raises:
            NetworkError: If the backend call fails (nothing committed)
            NotAuthenticatedError: If the session changed meanwhile
        """
        async with self.gate.hold(username):
            return await self._remove(username, movie_id)

    async def toggle_favorite(self, username: str, movie_id: str) -> User:
        """
        Add or remove movie_id depending on the held user's favorites.

        The choice is made under the user's gate, so back-to-back toggles
        see each other's committed result.

        Raises:
            NotAuthenticatedError: If no session is held for username
        """
        async with self.gate.hold(username):
            session = self.session_store.get()
            if session is None or session.user.username != username:
                raise NotAuthenticatedError(f"No active session for '{username}'")

            if self.is_favorite(session.user, movie_id):
                return await self._remove(username, movie_id)
            return await self._add(username, movie_id)

    # Callers must hold the user's gate

    async def _add(self, username: str, movie_id: str) -> User:
        user = await self.gateway.add_favorite(username, movie_id)
        return self._commit(user, "added", movie_id)

    async def _remove(self, username: str, movie_id: str) -> User:
        user = await self.gateway.remove_favorite(username, movie_id)
        return self._commit(user, "removed", movie_id)

    def _commit(self, user: User, action: str, movie_id: str) -> User:
        canonical = user.canonical()
        self.session_store.replace_user(canonical)
        logger.info(
            f"Favorite {action}",
            username=canonical.username,
            movie_id=movie_id,
            favorites=len(canonical.favorite_movie_ids),
        )
        return canonical
