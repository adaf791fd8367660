"""
Profile Synchronizer.

Coordinates the backend, the Session Store and the Favorites Manager for
the profile workflows: refresh, edit and account deletion.

Every workflow commits only after the backend has confirmed, and commits
nothing on failure: the Session Store is either fully updated or exactly
as it was before the call.

Design Pattern: Service Layer + Dependency Injection
"""

from typing import Optional

import structlog
from pydantic import BaseModel, ConfigDict

from myflix.application.favorites.favorites_manager import FavoritesManager
from myflix.application.session.operation_gate import UserOperationGate
from myflix.application.session.session_store import SessionStore
from myflix.domain.movie.models import Movie
from myflix.domain.ports.api_gateway import IMovieApiGateway
from myflix.domain.ports.presentation import INotifier, IRouter, Route, Severity
from myflix.domain.shared.errors import (
    MyFlixError,
    NotAuthenticatedError,
    ValidationError,
)
from myflix.domain.user.models import ProfileForm, ProfilePatch, User

logger = structlog.get_logger(__name__)


class ProfileSnapshot(BaseModel):
    """Server view of the user plus the favorites resolved against the catalog."""

    model_config = ConfigDict(frozen=True)

    user: User
    favorite_movies: list[Movie]


class ProfileSynchronizer:
    """
    Profile workflows with commit-then-reflect semantics.

    Responsibilities:
    - Rehydrate the session from the server (refresh)
    - Apply profile edits only after the server accepts them
    - Delete the account remotely before tearing down local state

    Dependencies (injected):
    - gateway: IMovieApiGateway - backend calls
    - session_store: SessionStore - commit target
    - favorites: FavoritesManager - favorite set derivation
    - notifier: INotifier - user-facing messages
    - router: IRouter - navigation after deletion
    - gate: UserOperationGate - per-user serialization

    Example:
        >>> sync = ProfileSynchronizer(gateway, store, favorites, notifier, router)
        >>> snapshot = await sync.refresh("ana")
        >>> [m.title for m in snapshot.favorite_movies]
        ['Alien']
    """

    def __init__(
        self,
        gateway: IMovieApiGateway,
        session_store: SessionStore,
        favorites: FavoritesManager,
        notifier: INotifier,
        router: IRouter,
        gate: Optional[UserOperationGate] = None,
    ):
        self.gateway = gateway
        self.session_store = session_store
        self.favorites = favorites
        self.notifier = notifier
        self.router = router
        self.gate = gate or favorites.gate

    # ───────────────────────────────────────────────────────
    # REFRESH
    # ───────────────────────────────────────────────────────

    async def refresh(self, username: str) -> ProfileSnapshot:
        """
        Rehydrate the session from the server's view of the user.

        Workflow:
        1. Fetch the user
        2. Normalize the birthday
        3. Fetch the catalog and resolve favorites
        4. Commit the canonical user

        Args:
            username: User to refresh (must own the live session)

        Returns:
            ProfileSnapshot with the committed user and favorite movies

        Raises:
            NetworkError: If a backend call fails
            DateParseError: If the server birthday is unparseable
            NotAuthenticatedError: If the session is gone or owned by
                someone else when the commit happens
        """
        async with self.gate.hold(username):
            user = (await self.gateway.fetch_user(username)).canonical()
            catalog = await self.gateway.list_movies()
            favorite_movies = self.favorites.favorite_movies(user, catalog)

            self.session_store.replace_user(user)

        logger.info(
            "Profile refreshed",
            username=username,
            favorites=len(favorite_movies),
            catalog=len(catalog),
        )
        return ProfileSnapshot(user=user, favorite_movies=favorite_movies)

    # ───────────────────────────────────────────────────────
    # EDIT
    # ───────────────────────────────────────────────────────

    def profile_form(self) -> ProfileForm:
        """
        Prefill for the profile edit form (password left blank).

        Raises:
            NotAuthenticatedError: If logged out
        """
        session = self.session_store.get()
        if session is None:
            raise NotAuthenticatedError("No active session")
        return ProfileForm.from_user(session.user)

    async def update_profile(self, patch: ProfilePatch) -> User:
        """
        Edit the logged-in user's profile.

        The password is the server's confirmation for an edit, so an empty
        one fails locally without any network call.

        Args:
            patch: Password plus the fields to change

        Returns:
            Updated, committed user

        Raises:
            ValidationError: If the password is empty or the server
                rejects the edit
            NotAuthenticatedError: If logged out
            NetworkError: If the backend call fails
        """
        if not patch.has_password():
            self.notifier.notify("Password is required", Severity.ERROR)
            raise ValidationError("password required")

        session = self.session_store.get()
        if session is None:
            raise NotAuthenticatedError("No active session")
        username = session.user.username

        async with self.gate.hold(username):
            session = self.session_store.get()
            if session is None or session.user.username != username:
                raise NotAuthenticatedError(f"No active session for '{username}'")

            try:
                body = patch.merged_with(session.user)
                updated = (await self.gateway.edit_user(username, body)).canonical()
                self._commit_edit(username, updated)
            except MyFlixError as e:
                logger.warning("User update failed", username=username, error=str(e))
                self.notifier.notify("Failed to update user", Severity.ERROR)
                raise

        logger.info("User update success", username=updated.username)
        self.notifier.notify("User update successful", Severity.SUCCESS)
        return updated

    def _commit_edit(self, previous_username: str, user: User) -> None:
        current = self.session_store.get()
        if current is None or current.user.username != previous_username:
            raise NotAuthenticatedError(f"No active session for '{previous_username}'")
        # Username may change on edit, so replace the whole session directly
        self.session_store.set(current.model_copy(update={"user": user}))

    # ───────────────────────────────────────────────────────
    # DELETE
    # ───────────────────────────────────────────────────────

    async def delete_account(self, username: str) -> str:
        """
        Delete the account, remote first.

        Local state is torn down only after the backend confirms, so the UI
        never shows "logged out" for an account that still exists.
        If the session changes hands while the delete is in flight, the new
        session is left untouched.

        Args:
            username: Account to delete (must own the live session)

        Returns:
            Backend acknowledgement

        Raises:
            NotAuthenticatedError: If username does not own the session,
                checked again once the user's gate is acquired
            NetworkError: If the delete fails (session left intact)
        """
        session = self.session_store.get()
        if session is None or session.user.username != username:
            raise NotAuthenticatedError(f"No active session for '{username}'")

        async with self.gate.hold(username):
            session = self.session_store.get()
            if session is None or session.user.username != username:
                raise NotAuthenticatedError(f"No active session for '{username}'")

            try:
                ack = await self.gateway.delete_user(username)
            except MyFlixError as e:
                logger.warning("User delete failed", username=username, error=str(e))
                self.notifier.notify("Failed to delete user", Severity.ERROR)
                raise

            current = self.session_store.get()
            replaced = (
                current is None
                or current.token != session.token
                or current.user.username != username
            )
            if replaced:
                logger.warning("Session replaced during delete, keeping it", username=username)
                return ack

            self.session_store.clear()

        logger.info("User deleted", username=username)
        self.notifier.notify("User successfully deleted.", Severity.SUCCESS)
        self.router.navigate(Route.WELCOME)
        return ack
