"""
Site-visit counters kept in a single cinekahaniadmins document.
"""

import logging

from pymongo import ReturnDocument
from pymongo.database import Database

from database import to_str_id
from errors import NotFoundError
from schemas import ADMINS, MOVIES, CineKahaniAdmin

logger = logging.getLogger(__name__)


def record_visit(db: Database) -> int:
    """
    Count one visit and refresh totalMovies; returns the new visit count.

    The counter document is created on the first visit. The increment is a
    single $inc so concurrent visits are never lost.
    """
    total_movies = db[MOVIES].count_documents({})
    defaults = CineKahaniAdmin().model_dump(exclude={"userVisited", "totalMovies"})
    counters = db[ADMINS].find_one_and_update(
        {},
        {
            "$inc": {"userVisited": 1},
            "$set": {"totalMovies": total_movies},
            "$setOnInsert": defaults,
        },
        sort=[("_id", 1)],
        upsert=True,
        return_document=ReturnDocument.AFTER,
    )
    logger.info("Visit %d recorded (%d movies)", counters["userVisited"], total_movies)
    return counters["userVisited"]


def get_stats(db: Database) -> dict:
    counters = db[ADMINS].find_one({}, sort=[("_id", 1)])
    if not counters:
        raise NotFoundError("No data found")
    return to_str_id(counters)
