"""
Queries against the movies collection.
"""

import logging
from typing import List, Optional

from bson.errors import InvalidId
from bson.objectid import ObjectId
from pymongo import ReturnDocument
from pymongo.database import Database

from database import create_document, get_documents, to_str_id, utcnow
from errors import NotFoundError, ValidationError
from schemas import MOVIES, PAID, Movie

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("imageURL", "movieName", "movieDescription", "movieLink", "movieType")


def _object_id(movie_id: str) -> ObjectId:
    # a malformed id can never match a document
    try:
        return ObjectId(movie_id)
    except (InvalidId, TypeError):
        raise NotFoundError("Movie not found")


def list_movies(db: Database) -> List[dict]:
    return [to_str_id(m) for m in get_documents(db, MOVIES)]


def find_by_name(db: Database, name: str) -> Optional[dict]:
    return to_str_id(db[MOVIES].find_one({"movieName": name}, sort=[("_id", 1)]))


def find_by_id(db: Database, movie_id: str) -> dict:
    movie = db[MOVIES].find_one({"_id": _object_id(movie_id)})
    if not movie:
        raise NotFoundError("Movie not found")
    return to_str_id(movie)


def create_movie(db: Database, fields: dict) -> str:
    """
    Validate and insert a movie, returning its id.

    Every field in REQUIRED_FIELDS must be truthy, and Paid movies also
    need a price. The price of any other movie type is dropped.
    """
    movie = Movie(**fields)
    if not all(getattr(movie, name) for name in REQUIRED_FIELDS):
        raise ValidationError("All fields are required")
    if movie.movieType == PAID and not movie.price:
        raise ValidationError("Price is required for Paid movies")
    if movie.movieType != PAID:
        movie.price = None

    movie_id = create_document(db, MOVIES, movie)
    logger.info("Movie %s added (%s)", movie_id, movie.movieName)
    return movie_id


def update_movie(db: Database, movie_id: str, updates: dict) -> dict:
    changes = dict(updates)
    changes["updatedAt"] = utcnow()
    movie = db[MOVIES].find_one_and_update(
        {"_id": _object_id(movie_id)},
        {"$set": changes},
        return_document=ReturnDocument.AFTER,
    )
    if not movie:
        raise NotFoundError("Movie not found")
    logger.info("Movie %s updated: %s", movie_id, sorted(updates))
    return to_str_id(movie)


def delete_movie(db: Database, movie_id: str) -> None:
    result = db[MOVIES].delete_one({"_id": _object_id(movie_id)})
    if result.deleted_count == 0:
        raise NotFoundError("Movie not found")
    logger.info("Movie %s deleted", movie_id)


def distinct_names(db: Database) -> list:
    return db[MOVIES].distinct("movieName")
