"""
Session Store.

Process-wide holder of the authenticated user and auth token, backed by
durable key-value storage. This is the only code that reads or writes the
persisted session.

All methods are synchronous: a ``set`` or ``clear`` can never be
suspended half-way, so two in-flight operations cannot interleave inside
a commit. The held Session is immutable and only ever replaced whole.
"""

from typing import Optional

import structlog
from pydantic import ValidationError as PydanticValidationError

from myflix.domain.ports.key_value_storage import IKeyValueStorage
from myflix.domain.shared.errors import NotAuthenticatedError
from myflix.domain.user.models import Session, User

logger = structlog.get_logger(__name__)

USER_KEY = "user"
TOKEN_KEY = "token"


class SessionStore:
    """
    Single write path for the current session.

    Invariant: immediately after ``set`` or ``clear`` returns, the held
    Session and the persisted ``"user"``/``"token"`` pair are identical.

    Example:
        >>> store = SessionStore(InMemoryKeyValueStorage())
        >>> store.set(Session(user=User(username="ana"), token="abc"))
        >>> store.get().user.username
        'ana'
        >>> store.clear()
        >>> store.get() is None
        True
    """

    def __init__(self, storage: IKeyValueStorage) -> None:
        """
        Initialize an empty (logged out) store.

        Args:
            storage: Durable storage holding the persisted session
        """
        self._storage = storage
        self._session: Optional[Session] = None

    def get(self) -> Optional[Session]:
        """Snapshot of the held session, None when logged out."""
        return self._session

    @property
    def is_logged_in(self) -> bool:
        """True while a session is held."""
        return self._session is not None

    def token(self) -> Optional[str]:
        """Held auth token, used as the gateway's token provider."""
        return self._session.token if self._session else None

    def set(self, session: Session) -> None:
        """
        Replace the held session and persist it.

        Storage is written first; if it fails the held session is left as
        it was and the error propagates.

        Args:
            session: New session (replaces any previous one wholesale)
        """
        self._storage.set_items(
            {
                USER_KEY: session.user.to_json(),
                TOKEN_KEY: session.token,
            }
        )
        self._session = session
        logger.debug("Session committed", username=session.user.username)

    def replace_user(self, user: User) -> Session:
        """
        Commit a server-confirmed user under the current token.

        Args:
            user: Authoritative user returned by the backend

        Returns:
            The new session

        Raises:
            NotAuthenticatedError: If no session is held, or it belongs to
                another username
        """
        current = self._session
        if current is None:
            raise NotAuthenticatedError("No active session")
        if current.user.username != user.username:
            raise NotAuthenticatedError(
                f"Session belongs to '{current.user.username}', not '{user.username}'"
            )

        session = Session(user=user, token=current.token)
        self.set(session)
        return session

    def clear(self) -> None:
        """Drop the held session and erase it from storage."""
        self._storage.remove_items([USER_KEY, TOKEN_KEY])
        username = self._session.user.username if self._session else None
        self._session = None
        logger.debug("Session cleared", username=username)

    def restore(self) -> Optional[Session]:
        """
        Rehydrate the held session from durable storage.

        Called once at start-up. A persisted pair that is incomplete or
        does not parse is erased so memory and storage agree on "logged
        out".

        Returns:
            Restored session, or None when logged out
        """
        raw_user = self._storage.get(USER_KEY)
        token = self._storage.get(TOKEN_KEY)

        if raw_user is None and token is None:
            self._session = None
            return None

        if raw_user is None or not token:
            logger.warning("Incomplete persisted session, clearing")
            self.clear()
            return None

        try:
            session = Session(user=User.model_validate_json(raw_user), token=token)
        except PydanticValidationError as e:
            logger.warning("Corrupt persisted session, clearing", error=str(e))
            self.clear()
            return None

        self._session = session
        logger.info("Session restored", username=session.user.username)
        return session
