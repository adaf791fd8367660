"""
Authentication workflows: login, registration, logout.

Login is the only way a session comes into existence; logout and account
deletion are the only ways it ends.
"""

from typing import TYPE_CHECKING, Optional

import structlog

from myflix.application.session.session_store import SessionStore
from myflix.domain.ports.api_gateway import IMovieApiGateway
from myflix.domain.ports.presentation import INotifier, IRouter, Route, Severity
from myflix.domain.shared.errors import MyFlixError
from myflix.domain.user.models import Credentials, RegistrationProfile, Session

if TYPE_CHECKING:
    from myflix.application.profile.profile_synchronizer import ProfileSynchronizer

logger = structlog.get_logger(__name__)


class AuthService:
    """
    Session lifecycle entry points.

    Example:
        >>> auth = AuthService(gateway, store, notifier, router)
        >>> session = await auth.login(Credentials(username="ana", password="x"))
        >>> store.get() == session
        True
    """

    def __init__(
        self,
        gateway: IMovieApiGateway,
        session_store: SessionStore,
        notifier: INotifier,
        router: IRouter,
        synchronizer: Optional["ProfileSynchronizer"] = None,
    ):
        """
        Initialize service.

        Args:
            gateway: Backend façade
            session_store: Session commit target
            notifier: User-facing messages
            router: Navigation after login/logout
            synchronizer: When given, login rehydrates through refresh
        """
        self.gateway = gateway
        self.session_store = session_store
        self.notifier = notifier
        self.router = router
        self.synchronizer = synchronizer

    async def login(self, credentials: Credentials) -> Session:
        """
        Log in and commit the session.

        A failed rehydration after a successful login is reported but does
        not undo the login: the session from the login response stays.

        Args:
            credentials: Username and password

        Returns:
            Committed session

        Raises:
            AuthError: If credentials are rejected
            NetworkError: If the backend is unreachable
        """
        try:
            issued = await self.gateway.login(credentials)
            session = issued.model_copy(update={"user": issued.user.canonical()})
        except MyFlixError as e:
            logger.warning("User login failed", username=credentials.username, error=str(e))
            self.notifier.notify("User login failed", Severity.ERROR)
            raise

        self.session_store.set(session)
        logger.info("User login successful", username=session.user.username)
        self.notifier.notify("User login successful", Severity.SUCCESS)
        self.router.navigate(Route.MOVIES)

        if self.synchronizer is not None:
            try:
                await self.synchronizer.refresh(session.user.username)
            except MyFlixError as e:
                logger.warning(
                    "Rehydration after login failed",
                    username=session.user.username,
                    error=str(e),
                )
                self.notifier.notify("Could not load your profile", Severity.ERROR)
            else:
                return self.session_store.get() or session

        return session

    async def register(self, profile: RegistrationProfile) -> str:
        """
        Create an account. Does not log in.

        Returns:
            Confirmation message from the backend

        Raises:
            ValidationError: If the profile is rejected or the birthday is
                unparseable
            NetworkError: If the backend is unreachable
        """
        try:
            message = await self.gateway.register(profile)
        except MyFlixError as e:
            logger.warning("User registration failed", username=profile.username, error=str(e))
            self.notifier.notify(str(e) or "User registration failed", Severity.ERROR)
            raise

        logger.info("User registered", username=profile.username)
        self.notifier.notify(message, Severity.SUCCESS)
        return message

    def logout(self) -> None:
        """Drop the session and go back to the welcome page."""
        session = self.session_store.get()
        self.session_store.clear()
        logger.info("User logged out", username=session.user.username if session else None)
        self.router.navigate(Route.WELCOME)
