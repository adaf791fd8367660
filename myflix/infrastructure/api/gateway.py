"""
Movie backend API client.

Implements IMovieApiGateway over JSON/HTTPS with httpx. One request per
call, no retry. Responses are validated into domain models at this
boundary so nothing untyped leaks into the application layer.
"""

from typing import Any, Callable, Optional
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from myflix.domain.movie.models import Movie
from myflix.domain.shared.errors import AuthError, NetworkError, ValidationError
from myflix.domain.user.models import (
    Credentials,
    RegistrationProfile,
    Session,
    User,
)

logger = structlog.get_logger(__name__)

TokenProvider = Callable[[], Optional[str]]

_MOVIE_LIST = TypeAdapter(list[Movie])


def _segment(value: str) -> str:
    """Escape a value used as a single path segment."""
    return quote(value, safe="")


class MovieApiGateway:
    """
    httpx-based backend client.

    Use as an async context manager, or pass a preconfigured
    ``httpx.AsyncClient`` (tests use ``httpx.MockTransport``).

    Example:
        >>> async with MovieApiGateway("https://api.example.com", store.token) as api:
        ...     movies = await api.list_movies()
    """

    def __init__(
        self,
        base_url: str,
        token_provider: Optional[TokenProvider] = None,
        timeout_seconds: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        """Initialize API client.

        Args:
            base_url: Backend root URL
            token_provider: Returns the current bearer token, or None
            timeout_seconds: Request timeout
            client: Optional externally owned httpx client
        """
        self.base_url = base_url.rstrip("/")
        self.token_provider = token_provider or (lambda: None)
        self.timeout_seconds = timeout_seconds
        self._client = client
        self._owns_client = client is None

    async def __aenter__(self) -> "MovieApiGateway":
        """Async context manager entry."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout_seconds),
            )
            self._owns_client = True
        return self

    async def __aexit__(self, *args: object) -> None:
        """Async context manager exit."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying client if this gateway created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ═══════════════════════════════════════════════════════
    # OPERATIONS
    # ═══════════════════════════════════════════════════════

    async def login(self, credentials: Credentials) -> Session:
        """``POST /login`` → ``{user, token}``."""
        response = await self._send(
            "POST",
            "/login",
            json=credentials.to_payload(),
            authenticated=False,
        )
        if response.status_code in (400, 401, 403, 404):
            logger.info(
                "Login rejected",
                username=credentials.username,
                status_code=response.status_code,
            )
            raise AuthError("Invalid username or password")
        self._raise_for_status(response)
        return self._parse(Session, response)

    async def register(self, profile: RegistrationProfile) -> str:
        """``POST /users`` → confirmation message."""
        response = await self._send(
            "POST",
            "/users",
            json=profile.to_payload(),
            authenticated=False,
        )
        if response.status_code in (400, 409, 422):
            raise ValidationError(self._error_message(response, "Registration rejected"))
        self._raise_for_status(response)

        body = self._json(response)
        if isinstance(body, str):
            return body
        return f"User {profile.username} registered successfully"

    async def fetch_user(self, username: str) -> User:
        """``GET /users/:username``."""
        response = await self._send("GET", f"/users/{_segment(username)}")
        self._raise_for_status(response)
        return self._parse(User, response)

    async def edit_user(self, username: str, profile: dict[str, Any]) -> User:
        """``PUT /users/:username`` with the full profile."""
        response = await self._send("PUT", f"/users/{_segment(username)}", json=profile)
        if response.status_code in (400, 422):
            raise ValidationError(self._error_message(response, "Profile update rejected"))
        self._raise_for_status(response)
        return self._parse(User, response)

    async def delete_user(self, username: str) -> str:
        """``DELETE /users/:username`` → acknowledgement."""
        response = await self._send("DELETE", f"/users/{_segment(username)}")
        self._raise_for_status(response)
        return response.text or f"{username} was deleted."

    async def list_movies(self) -> list[Movie]:
        """``GET /movies``."""
        response = await self._send("GET", "/movies")
        self._raise_for_status(response)
        try:
            return _MOVIE_LIST.validate_python(self._json(response))
        except PydanticValidationError as e:
            raise ValidationError(f"Malformed movie list: {e.error_count()} errors") from e

    async def add_favorite(self, username: str, movie_id: str) -> User:
        """``POST /users/:username/movies/:movieId``."""
        path = f"/users/{_segment(username)}/movies/{_segment(movie_id)}"
        response = await self._send("POST", path)
        self._raise_for_status(response)
        return self._parse(User, response)

    async def remove_favorite(self, username: str, movie_id: str) -> User:
        """``DELETE /users/:username/movies/:movieId``."""
        path = f"/users/{_segment(username)}/movies/{_segment(movie_id)}"
        response = await self._send("DELETE", path)
        self._raise_for_status(response)
        return self._parse(User, response)

    # ═══════════════════════════════════════════════════════
    # HELPERS
    # ═══════════════════════════════════════════════════════

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[Any] = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        if self._client is None:
            raise NetworkError("Client not initialized, use async with")

        headers = {"Accept": "application/json"}
        if authenticated:
            token = self.token_provider()
            if token:
                headers["Authorization"] = f"Bearer {token}"

        logger.debug("Backend request", method=method, path=path)
        try:
            return await self._client.request(
                method, f"{self.base_url}{path}", json=json, headers=headers
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Backend timeout: {method} {path}") from e
        except httpx.HTTPError as e:
            raise NetworkError(f"Backend unreachable: {e}") from e

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        status = response.status_code
        if status < 400:
            return
        if status == 401:
            raise AuthError("Session expired or token rejected")

        logger.warning(
            "Backend error",
            method=response.request.method,
            path=response.request.url.path,
            status_code=status,
        )
        raise NetworkError(f"Backend error: {status}", status_code=status)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return response.text

    def _parse(self, model: type[BaseModel], response: httpx.Response) -> Any:
        body = self._json(response)
        try:
            return model.model_validate(body)
        except PydanticValidationError as e:
            logger.warning(
                "Malformed backend response",
                model=model.__name__,
                errors=e.error_count(),
            )
            raise ValidationError(f"Malformed {model.__name__} response") from e

    def _error_message(self, response: httpx.Response, fallback: str) -> str:
        body = self._json(response)
        if isinstance(body, str) and body.strip():
            return body.strip()
        if isinstance(body, dict):
            for key in ("message", "error", "detail"):
                if isinstance(body.get(key), str):
                    return body[key]
            errors = body.get("errors")
            if isinstance(errors, list) and errors:
                messages = [e.get("msg", str(e)) if isinstance(e, dict) else str(e) for e in errors]
                return "; ".join(messages)
        return fallback
