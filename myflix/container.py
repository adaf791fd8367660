"""
Client composition root.

Wires settings, logging, storage, the backend gateway and the application
services into one object whose lifetime matches the HTTP client's.

Example:
    >>> async with MyFlixClient.from_env() as app:
    ...     await app.auth.login(Credentials(username="ana", password="x"))
    ...     snapshot = await app.profile.refresh("ana")
"""

from typing import Optional

import httpx
import structlog

from myflix.application.auth.auth_service import AuthService
from myflix.application.favorites.favorites_manager import FavoritesManager
from myflix.application.profile.profile_synchronizer import ProfileSynchronizer
from myflix.application.session.operation_gate import UserOperationGate
from myflix.application.session.session_store import SessionStore
from myflix.config import Settings, load_settings
from myflix.domain.ports.key_value_storage import IKeyValueStorage
from myflix.domain.ports.presentation import INotifier, IRouter
from myflix.infrastructure.api.gateway import MovieApiGateway
from myflix.infrastructure.presentation.logging_notifier import LoggingNotifier
from myflix.infrastructure.presentation.route_history import RouteHistory
from myflix.infrastructure.storage.factory import create_storage
from myflix.logging_config import configure_logging

logger = structlog.get_logger(__name__)


class MyFlixClient:
    """All core services sharing one session store, gateway and gate."""

    def __init__(
        self,
        settings: Settings,
        storage: Optional[IKeyValueStorage] = None,
        notifier: Optional[INotifier] = None,
        router: Optional[IRouter] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Build the object graph. Nothing touches the network until used.

        Args:
            settings: Client settings
            storage: Durable storage (default: from settings)
            notifier: UI notifier (default: LoggingNotifier)
            router: UI router (default: RouteHistory)
            http_client: Preconfigured httpx client (tests)
        """
        self.settings = settings
        self.session_store = SessionStore(storage or create_storage(settings))
        self.notifier = notifier or LoggingNotifier()
        self.router = router or RouteHistory()
        self.gate = UserOperationGate()

        self.gateway = MovieApiGateway(
            base_url=settings.api_url,
            token_provider=self.session_store.token,
            timeout_seconds=settings.http_timeout,
            client=http_client,
        )
        self.favorites = FavoritesManager(self.gateway, self.session_store, self.gate)
        self.profile = ProfileSynchronizer(
            self.gateway,
            self.session_store,
            self.favorites,
            self.notifier,
            self.router,
            self.gate,
        )
        self.auth = AuthService(
            self.gateway,
            self.session_store,
            self.notifier,
            self.router,
            synchronizer=self.profile,
        )

    @classmethod
    def from_env(cls) -> "MyFlixClient":
        """Load settings from the environment and configure logging."""
        settings = load_settings()
        configure_logging(settings.log_level)
        return cls(settings)

    async def __aenter__(self) -> "MyFlixClient":
        """Open the gateway and restore any persisted session."""
        await self.gateway.__aenter__()
        session = self.session_store.restore()
        logger.info(
            "Client started",
            api_url=self.settings.api_url,
            logged_in=session is not None,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        """Close the gateway."""
        await self.gateway.aclose()
