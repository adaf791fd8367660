"""
Port for the remote movie backend.

Design Pattern: Ports & Adapters (Hexagonal Architecture)
Application services depend on this Protocol; the httpx adapter in
infrastructure implements it, tests substitute an AsyncMock.
"""

from typing import Any, Protocol, runtime_checkable

from myflix.domain.movie.models import Movie
from myflix.domain.user.models import (
    Credentials,
    RegistrationProfile,
    Session,
    User,
)


@runtime_checkable
class IMovieApiGateway(Protocol):
    """
    Stateless façade over the backend's REST operations.

    Every call is a single request/response exchange. There is no retry:
    callers decide what to do with a failure.
    """

    async def login(self, credentials: Credentials) -> Session:
        """
        Authenticate and obtain a session.

        Raises:
            AuthError: If credentials are rejected
            NetworkError: On transport or server failure
        """
        ...

    async def register(self, profile: RegistrationProfile) -> str:
        """
        Create a new account.

        Returns:
            Confirmation message for the user

        Raises:
            ValidationError: If the backend rejects the profile
            NetworkError: On transport or server failure
        """
        ...

    async def fetch_user(self, username: str) -> User:
        """
        Get the server's view of a user (raw birthday, raw favorites).

        Raises:
            AuthError: If the token is rejected
            NetworkError: On transport or server failure
        """
        ...

    async def edit_user(self, username: str, profile: dict[str, Any]) -> User:
        """
        Replace the user's profile.

        Args:
            username: Current username
            profile: Full profile including password

        Returns:
            Updated user as stored by the backend

        Raises:
            ValidationError: If the backend rejects the edit
            NetworkError: On transport or server failure
        """
        ...

    async def delete_user(self, username: str) -> str:
        """
        Delete the account.

        Returns:
            Acknowledgement message

        Raises:
            NetworkError: On transport or server failure
        """
        ...

    async def list_movies(self) -> list[Movie]:
        """Get the full movie catalog."""
        ...

    async def add_favorite(self, username: str, movie_id: str) -> User:
        """Add a movie to the user's favorites; returns the updated user."""
        ...

    async def remove_favorite(self, username: str, movie_id: str) -> User:
        """Remove a movie from the user's favorites; returns the updated user."""
        ...
