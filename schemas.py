"""
Database Schemas

Each Pydantic model represents a MongoDB collection:
- Movie -> "movies" collection
- CineKahaniAdmin -> "cinekahaniadmins" collection

createdAt/updatedAt are stamped by database.create_document, not stored
on the models.
"""

from pydantic import BaseModel, Field, field_validator
from typing import Optional

MOVIES = "movies"
ADMINS = "cinekahaniadmins"

PAID = "Paid"


def _strip(value):
    if isinstance(value, str):
        return value.strip()
    return value


class Movie(BaseModel):
    """
    Movies collection schema
    Collection name: "movies"
    """
    imageURL: Optional[str] = Field(None, description="Poster image URL")
    movieName: Optional[str] = Field(None, description="Title")
    movieDescription: Optional[str] = Field(None, description="Synopsis")
    movieLink: Optional[str] = Field(None, description="File host identifier of the movie file")
    movieType: Optional[str] = Field(None, description="Paid or Free")
    price: Optional[float] = Field(None, allow_inf_nan=False, description="Set only for Paid movies")

    @field_validator("movieName", "movieDescription")
    @classmethod
    def trim(cls, value):
        return _strip(value)


class MovieUpdate(Movie):
    """
    Partial update of a movie; only fields present in the request are applied.
    """

    def changes(self) -> dict:
        return self.model_dump(exclude_unset=True)


class CineKahaniAdmin(BaseModel):
    """
    Site counters, a single document
    Collection name: "cinekahaniadmins"
    """
    userVisited: int = Field(0, ge=0, description="Number of recorded visits")
    paidMovie: int = Field(0, ge=0)
    freeMovie: int = Field(0, ge=0)
    totalMovies: int = Field(0, ge=0, description="Movie count as of the last visit")
