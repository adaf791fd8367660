"""Tests for AuthService login, registration and logout."""

from typing import Any

import pytest

from myflix.application.auth.auth_service import AuthService
from myflix.application.favorites.favorites_manager import FavoritesManager
from myflix.application.profile.profile_synchronizer import ProfileSynchronizer
from myflix.application.session.session_store import SessionStore
from myflix.domain.movie.models import Movie
from myflix.domain.ports.presentation import Route, Severity
from myflix.domain.shared.errors import AuthError, NetworkError, ValidationError
from myflix.domain.user.models import Credentials, RegistrationProfile, Session, User
from myflix.infrastructure.storage.in_memory_storage import InMemoryKeyValueStorage


@pytest.fixture
def issued_session() -> Session:
    """Login response for a user with no favorites yet."""
    return Session(
        user=User(username="ana", birthday="1990-07-04T00:00:00.000Z"),
        token="abc",
    )


# ═══════════════════════════════════════════════════════════
# LOGIN
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_commits_session(
    auth_service: AuthService,
    mock_gateway: Any,
    session_store: SessionStore,
    storage: InMemoryKeyValueStorage,
    notifier: Any,
    router: Any,
    issued_session: Session,
) -> None:
    """Successful login: session committed, persisted, user told, sent to movies."""
    mock_gateway.login.return_value = issued_session

    session = await auth_service.login(Credentials(username="ana", password="x"))

    assert session.token == "abc"
    assert session.user.birthday == "1990-07-04"
    assert session_store.get() == session
    assert storage.get("token") == "abc"
    assert not FavoritesManager.is_favorite(session.user, Movie(id="m1"))
    notifier.notify.assert_called_once_with("User login successful", Severity.SUCCESS)
    router.navigate.assert_called_once_with(Route.MOVIES)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [AuthError("Invalid username or password"), NetworkError("Backend unreachable")],
)
async def test_login_failure_stays_logged_out(
    auth_service: AuthService,
    mock_gateway: Any,
    session_store: SessionStore,
    storage: InMemoryKeyValueStorage,
    notifier: Any,
    router: Any,
    error: Exception,
) -> None:
    """Rejected login leaves the store absent and reports the failure."""
    mock_gateway.login.side_effect = error

    with pytest.raises(type(error)):
        await auth_service.login(Credentials(username="ana", password="wrong"))

    assert session_store.get() is None
    assert storage.snapshot() == {}
    notifier.notify.assert_called_once_with("User login failed", Severity.ERROR)
    router.navigate.assert_not_called()


@pytest.mark.asyncio
async def test_login_with_bad_birthday_not_committed(
    auth_service: AuthService,
    mock_gateway: Any,
    session_store: SessionStore,
) -> None:
    """A login response that cannot be canonicalized is treated as a failure."""
    mock_gateway.login.return_value = Session(
        user=User(username="ana", birthday="not a date"), token="abc"
    )

    with pytest.raises(ValidationError):
        await auth_service.login(Credentials(username="ana", password="x"))

    assert session_store.get() is None


@pytest.mark.asyncio
async def test_login_rehydrates_through_refresh(
    mock_gateway: Any,
    session_store: SessionStore,
    notifier: Any,
    router: Any,
    synchronizer: ProfileSynchronizer,
    issued_session: Session,
    catalog: list[Movie],
) -> None:
    """With a synchronizer, the server's full user is committed after login."""
    auth = AuthService(mock_gateway, session_store, notifier, router, synchronizer)
    mock_gateway.login.return_value = issued_session
    mock_gateway.fetch_user.return_value = User(
        username="ana",
        birthday="1990-07-04T00:00:00.000Z",
        favorite_movie_ids=frozenset({"m2"}),
    )
    mock_gateway.list_movies.return_value = catalog

    session = await auth.login(Credentials(username="ana", password="x"))

    mock_gateway.fetch_user.assert_awaited_once_with("ana")
    assert session.user.favorite_movie_ids == frozenset({"m2"})
    assert session.token == "abc"
    assert session_store.get() == session


@pytest.mark.asyncio
async def test_login_survives_failed_rehydration(
    mock_gateway: Any,
    session_store: SessionStore,
    notifier: Any,
    router: Any,
    synchronizer: ProfileSynchronizer,
    issued_session: Session,
) -> None:
    """Refresh failing after login keeps the login and reports the problem."""
    auth = AuthService(mock_gateway, session_store, notifier, router, synchronizer)
    mock_gateway.login.return_value = issued_session
    mock_gateway.fetch_user.side_effect = NetworkError("Backend error: 502", 502)

    session = await auth.login(Credentials(username="ana", password="x"))

    assert session_store.get() == session
    assert session.user.birthday == "1990-07-04"
    notifier.notify.assert_any_call("User login successful", Severity.SUCCESS)
    notifier.notify.assert_any_call("Could not load your profile", Severity.ERROR)


# ═══════════════════════════════════════════════════════════
# REGISTER / LOGOUT
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_register_reports_confirmation(
    auth_service: AuthService,
    mock_gateway: Any,
    session_store: SessionStore,
    notifier: Any,
) -> None:
    """Registration does not log in."""
    mock_gateway.register.return_value = "User ana registered successfully"
    profile = RegistrationProfile(username="ana", password="x", email="ana@example.com")

    message = await auth_service.register(profile)

    assert message == "User ana registered successfully"
    assert session_store.get() is None
    notifier.notify.assert_called_once_with(message, Severity.SUCCESS)


@pytest.mark.asyncio
async def test_register_rejected(
    auth_service: AuthService,
    mock_gateway: Any,
    notifier: Any,
) -> None:
    """The backend's reason is shown to the user."""
    mock_gateway.register.side_effect = ValidationError("ana already exists")
    profile = RegistrationProfile(username="ana", password="x", email="ana@example.com")

    with pytest.raises(ValidationError):
        await auth_service.register(profile)

    notifier.notify.assert_called_once_with("ana already exists", Severity.ERROR)


def test_logout_clears_and_navigates(
    auth_service: AuthService,
    logged_in_store: SessionStore,
    storage: InMemoryKeyValueStorage,
    router: Any,
) -> None:
    """Logout erases the session everywhere."""
    auth_service.logout()

    assert logged_in_store.get() is None
    assert storage.snapshot() == {}
    router.navigate.assert_called_once_with(Route.WELCOME)


def test_logout_when_logged_out(auth_service: AuthService, router: Any) -> None:
    """Logging out twice is harmless."""
    auth_service.logout()
    auth_service.logout()

    assert router.navigate.call_count == 2
