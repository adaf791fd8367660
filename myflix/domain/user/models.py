"""
User domain models.

Entities exchanged with the backend and held by the Session Store.
The backend mixes spellings (``Username`` vs ``username``) and sometimes
returns favorites as resolved movie objects, so parsing accepts both and
standardizes on a single shape.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)

from myflix.domain.shared.dates import normalize_date
from myflix.domain.shared.errors import DateParseError


class User(BaseModel):
    """
    Authenticated user record.

    Username is the identity key. A password is never part of a User:
    any password field in a backend payload is dropped on parse.

    Example:
        >>> user = User.model_validate(
        ...     {"Username": "ana", "Email": "ana@example.com",
        ...      "Birthday": "1990-07-04T00:00:00.000Z",
        ...      "FavoriteMovies": ["m1", {"_id": "m2"}]}
        ... )
        >>> sorted(user.favorite_movie_ids)
        ['m1', 'm2']
        >>> user.canonical().birthday
        '1990-07-04'
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("username", "Username"),
    )
    email: str = Field(
        "",
        validation_alias=AliasChoices("email", "Email"),
    )
    birthday: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("birthday", "Birthday"),
    )
    favorite_movie_ids: frozenset[str] = Field(
        default_factory=frozenset,
        validation_alias=AliasChoices(
            "favorite_movie_ids",
            "favoriteMovieIds",
            "favoriteMovies",
            "FavoriteMovies",
        ),
        serialization_alias="favoriteMovieIds",
    )

    @field_validator("username")
    @classmethod
    def username_not_blank(cls, v: str) -> str:
        """Reject whitespace-only usernames."""
        if not v.strip():
            raise ValueError("username cannot be blank")
        return v

    @field_validator("email", mode="before")
    @classmethod
    def email_default(cls, v: Any) -> Any:
        """Treat a null email as empty."""
        return "" if v is None else v

    @field_validator("birthday", mode="before")
    @classmethod
    def birthday_as_text(cls, v: Any) -> Any:
        """Keep the raw birthday as text; empty means absent.

        Numbers are epoch milliseconds and are normalized right away.
        """
        if v is None or v == "":
            return None
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            try:
                return normalize_date(v)
            except DateParseError as e:
                raise ValueError(str(e)) from e
        return v if isinstance(v, str) else str(v)

    @field_validator("favorite_movie_ids", mode="before")
    @classmethod
    def favorite_ids(cls, v: Any) -> Any:
        """Extract ids from a list of ids or resolved movie objects."""
        if v is None:
            return frozenset()
        if isinstance(v, (str, bytes)) or not hasattr(v, "__iter__"):
            raise ValueError("favorite movies must be a list")

        ids = set()
        for entry in v:
            if isinstance(entry, str):
                ids.add(entry)
            elif isinstance(entry, dict) and (entry.get("_id") or entry.get("id")):
                ids.add(str(entry.get("_id") or entry.get("id")))
            else:
                raise ValueError(f"invalid favorite movie entry: {entry!r}")
        return frozenset(ids)

    @field_serializer("favorite_movie_ids")
    def serialize_favorite_ids(self, ids: frozenset[str]) -> list[str]:
        """Stable ordering so persisted JSON is deterministic."""
        return sorted(ids)

    def canonical(self) -> "User":
        """Return a copy with the birthday normalized to ``YYYY-MM-DD``.

        Raises:
            DateParseError: If the birthday cannot be parsed
        """
        if self.birthday is None:
            return self
        return self.model_copy(update={"birthday": normalize_date(self.birthday)})

    def to_json(self) -> str:
        """Serialize for durable storage."""
        return self.model_dump_json(by_alias=True)


class Session(BaseModel):
    """
    Authenticated session: the user and the opaque token the backend issued.

    Absence of a Session means logged out.
    """

    model_config = ConfigDict(frozen=True)

    user: User
    token: str = Field(..., min_length=1)

    def __repr__(self) -> str:
        """Debug representation without the token."""
        return f"Session(user='{self.user.username}')"


class Credentials(BaseModel):
    """Login credentials, sent as ``{Username, Password}``."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1, serialization_alias="Username")
    password: str = Field(..., min_length=1, serialization_alias="Password", repr=False)

    def to_payload(self) -> dict[str, str]:
        """Request body for ``POST /login``."""
        return self.model_dump(by_alias=True)


class RegistrationProfile(BaseModel):
    """New account data for ``POST /users``."""

    model_config = ConfigDict(frozen=True)

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1, repr=False)
    email: str
    birthday: Optional[str] = None

    def to_payload(self) -> dict[str, Any]:
        """Request body with the birthday normalized.

        Raises:
            DateParseError: If birthday is given but unparseable
        """
        payload = self.model_dump()
        if self.birthday:
            payload["birthday"] = normalize_date(self.birthday)
        return payload


class ProfilePatch(BaseModel):
    """
    Profile edit request.

    The password re-entry confirms the edit on the server. Fields left as
    None keep the currently held value.
    """

    model_config = ConfigDict(frozen=True)

    password: str = Field("", repr=False)
    username: Optional[str] = None
    email: Optional[str] = None
    birthday: Optional[str] = None

    def has_password(self) -> bool:
        """True when a non-empty password was supplied."""
        return bool(self.password)

    def merged_with(self, user: User) -> dict[str, Any]:
        """Full profile body for ``PUT /users/:username``.

        Args:
            user: Currently held user providing defaults

        Returns:
            Body with username, password, email and canonical birthday

        Raises:
            DateParseError: If the resulting birthday is unparseable
        """
        birthday = self.birthday if self.birthday is not None else user.birthday
        return {
            "username": self.username or user.username,
            "password": self.password,
            "email": self.email if self.email is not None else user.email,
            "birthday": normalize_date(birthday) if birthday else None,
        }


class ProfileForm(BaseModel):
    """Prefill values for the profile edit form. Password always blank."""

    model_config = ConfigDict(frozen=True)

    username: str
    password: str = ""
    email: str = ""
    birthday: str = ""

    @classmethod
    def from_user(cls, user: User) -> "ProfileForm":
        """Build the form from a (canonical) user."""
        canonical = user.canonical()
        return cls(
            username=canonical.username,
            email=canonical.email,
            birthday=canonical.birthday or "",
        )
