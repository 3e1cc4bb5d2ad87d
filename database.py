"""
MongoDB access shared by the API.

The client is opened once at startup (see ``connect``) and handed to the
routes through the ``get_db`` dependency.
"""

import os
import logging
from datetime import datetime, timezone
from typing import Optional, Union

from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

from errors import StoreError

logger = logging.getLogger(__name__)

client: Optional[MongoClient] = None
db: Optional[Database] = None


def connect(url: Optional[str] = None, name: Optional[str] = None) -> Database:
    """Open the client and ping the server so a bad URL fails at startup."""
    global client, db
    url = url or os.getenv("DATABASE_URL") or os.getenv("MONGO_URI")
    name = name or os.getenv("DATABASE_NAME", "cinekahani")
    if not url:
        raise RuntimeError("DATABASE_URL is not set")

    client = MongoClient(url, serverSelectionTimeoutMS=5000)
    client.admin.command("ping")
    db = client[name]
    logger.info("MongoDB connected (database %s)", name)
    return db


def close():
    global client, db
    if client is not None:
        client.close()
    client = None
    db = None


def get_db() -> Database:
    if db is None:
        raise StoreError("Database not initialized")
    return db


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def create_document(database: Database, collection_name: str, data: Union[BaseModel, dict]) -> str:
    """Insert a document with createdAt/updatedAt stamps and return its id."""
    if isinstance(data, BaseModel):
        doc = data.model_dump()
    else:
        doc = dict(data)
    now = utcnow()
    doc["createdAt"] = now
    doc["updatedAt"] = now
    result = database[collection_name].insert_one(doc)
    return str(result.inserted_id)


def get_documents(database: Database, collection_name: str, filter_dict: Optional[dict] = None):
    return list(database[collection_name].find(filter_dict or {}).sort("_id", 1))


def to_str_id(doc):
    if not doc:
        return doc
    d = dict(doc)
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    return d
