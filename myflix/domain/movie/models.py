"""
Movie catalog models.

Read-only to the client: movies are listed from the backend and only
ever filtered against the user's favorite ids.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _named(v: Any) -> Any:
    """Accept a plain name where a nested object is expected."""
    if isinstance(v, str):
        return {"name": v}
    return v


class Genre(BaseModel):
    """Movie genre."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., validation_alias=AliasChoices("name", "Name"))
    description: str = Field("", validation_alias=AliasChoices("description", "Description"))


class Director(BaseModel):
    """Movie director."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = Field(..., validation_alias=AliasChoices("name", "Name"))
    bio: str = Field("", validation_alias=AliasChoices("bio", "Bio"))


class Movie(BaseModel):
    """
    Catalog movie.

    Example:
        >>> movie = Movie.model_validate(
        ...     {"_id": "m1", "Title": "Alien", "Genre": {"Name": "Sci-Fi"}}
        ... )
        >>> movie.id, movie.genre.name
        ('m1', 'Sci-Fi')
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str = Field(..., min_length=1, validation_alias=AliasChoices("id", "_id"))
    title: str = Field("", validation_alias=AliasChoices("title", "Title"))
    description: str = Field("", validation_alias=AliasChoices("description", "Description"))
    genre: Optional[Genre] = Field(None, validation_alias=AliasChoices("genre", "Genre"))
    director: Optional[Director] = Field(
        None, validation_alias=AliasChoices("director", "Director")
    )
    image_path: Optional[str] = Field(
        None, validation_alias=AliasChoices("image_path", "imagePath", "ImagePath")
    )
    featured: bool = Field(False, validation_alias=AliasChoices("featured", "Featured"))

    @field_validator("genre", "director", mode="before")
    @classmethod
    def nested_or_name(cls, v: Any) -> Any:
        """Allow ``"Drama"`` as shorthand for ``{"name": "Drama"}``."""
        return _named(v)
