"""
Shared fixtures for myflix tests.

Application services get an AsyncMock gateway built from the port, an
in-memory storage and recording presentation adapters, so every test
can assert on exactly what was called, stored and shown.
"""

from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from myflix.application.auth.auth_service import AuthService
from myflix.application.favorites.favorites_manager import FavoritesManager
from myflix.application.profile.profile_synchronizer import ProfileSynchronizer
from myflix.application.session.operation_gate import UserOperationGate
from myflix.application.session.session_store import SessionStore
from myflix.domain.movie.models import Movie
from myflix.domain.ports.api_gateway import IMovieApiGateway
from myflix.domain.ports.presentation import INotifier, IRouter
from myflix.domain.user.models import Session, User
from myflix.infrastructure.storage.in_memory_storage import InMemoryKeyValueStorage


# ═══════════════════════════════════════════════════════════
# DOMAIN MODEL FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def user_payload() -> dict[str, Any]:
    """Raw backend user as returned by GET /users/:username."""
    return {
        "_id": "u1",
        "Username": "ana",
        "Password": "$2b$10$hashedpasswordvalue",
        "Email": "ana@example.com",
        "Birthday": "1990-07-04T00:00:00.000Z",
        "FavoriteMovies": ["m1"],
    }


@pytest.fixture
def sample_user() -> User:
    """Canonical user with one favorite."""
    return User(
        username="ana",
        email="ana@example.com",
        birthday="1990-07-04",
        favorite_movie_ids=frozenset({"m1"}),
    )


@pytest.fixture
def sample_session(sample_user: User) -> Session:
    """Session for sample_user."""
    return Session(user=sample_user, token="abc")


@pytest.fixture
def catalog() -> list[Movie]:
    """Three-movie catalog snapshot."""
    return [
        Movie(id="m1", title="Alien"),
        Movie(id="m2", title="Heat"),
        Movie(id="m3", title="Brazil"),
    ]


# ═══════════════════════════════════════════════════════════
# INFRASTRUCTURE FIXTURES
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def storage() -> InMemoryKeyValueStorage:
    """Empty in-memory durable storage."""
    return InMemoryKeyValueStorage()


@pytest.fixture
def session_store(storage: InMemoryKeyValueStorage) -> SessionStore:
    """Logged out session store."""
    return SessionStore(storage)


@pytest.fixture
def logged_in_store(session_store: SessionStore, sample_session: Session) -> SessionStore:
    """Session store holding sample_session."""
    session_store.set(sample_session)
    return session_store


@pytest.fixture
def mock_gateway() -> AsyncMock:
    """Mock backend gateway (interface-based).

    Override return values or side effects per test.
    """
    return AsyncMock(spec=IMovieApiGateway)


@pytest.fixture
def notifier() -> MagicMock:
    """Recording notifier."""
    return MagicMock(spec=INotifier)


@pytest.fixture
def router() -> MagicMock:
    """Recording router."""
    return MagicMock(spec=IRouter)


# ═══════════════════════════════════════════════════════════
# SERVICE FIXTURES WITH DEPENDENCY INJECTION
# ═══════════════════════════════════════════════════════════


@pytest.fixture
def gate() -> UserOperationGate:
    """Shared per-user operation gate."""
    return UserOperationGate()


@pytest.fixture
def favorites(
    mock_gateway: AsyncMock,
    session_store: SessionStore,
    gate: UserOperationGate,
) -> FavoritesManager:
    """Favorites manager over the mock gateway."""
    return FavoritesManager(mock_gateway, session_store, gate)


@pytest.fixture
def synchronizer(
    mock_gateway: AsyncMock,
    session_store: SessionStore,
    favorites: FavoritesManager,
    notifier: MagicMock,
    router: MagicMock,
    gate: UserOperationGate,
) -> ProfileSynchronizer:
    """Profile synchronizer with mocked collaborators."""
    return ProfileSynchronizer(
        mock_gateway,
        session_store,
        favorites,
        notifier,
        router,
        gate,
    )


@pytest.fixture
def auth_service(
    mock_gateway: AsyncMock,
    session_store: SessionStore,
    notifier: MagicMock,
    router: MagicMock,
) -> AuthService:
    """Auth service without rehydration."""
    return AuthService(mock_gateway, session_store, notifier, router)
