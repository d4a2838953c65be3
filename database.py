"""
MongoDB access for the Tourvisto API.

Exposes the shared `db` handle, a FastAPI dependency that guards against a
missing connection, and small helpers for creating and listing documents.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.database import Database

import config

logger = logging.getLogger(__name__)

ACCOUNT_COLLECTION = "account"
USER_COLLECTION = "user"
TRIP_COLLECTION = "trip"

client: Optional[MongoClient] = None
db: Optional[Database] = None

if config.DATABASE_URL and config.DATABASE_NAME:
    client = MongoClient(config.DATABASE_URL)
    db = client[config.DATABASE_NAME]
else:
    logger.warning("DATABASE_URL or DATABASE_NAME is not set; database features are disabled")


def get_db() -> Database:
    if db is None:
        raise HTTPException(status_code=500, detail="Database not configured")
    return db


def utc_now_iso(now: Optional[datetime] = None) -> str:
    """Millisecond UTC timestamp in a fixed-width layout (2024-01-15T10:30:00.000Z).

    Stored timestamps are compared as strings, so the width must never vary.
    """
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def to_object_id(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def serialize(document: Dict[str, Any]) -> Dict[str, Any]:
    doc = dict(document)
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def create_document(database: Database, collection_name: str, data: Union[BaseModel, Dict[str, Any]]) -> str:
    if isinstance(data, BaseModel):
        data_dict = data.model_dump()
    else:
        data_dict = dict(data)
    result = database[collection_name].insert_one(data_dict)
    return str(result.inserted_id)


def get_documents(
    database: Database,
    collection_name: str,
    filter_dict: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
    offset: int = 0,
    sort: Optional[tuple] = None,
) -> List[Dict[str, Any]]:
    cursor = database[collection_name].find(filter_dict or {})
    if sort:
        cursor = cursor.sort(*sort)
    if offset:
        cursor = cursor.skip(offset)
    if limit:
        cursor = cursor.limit(limit)
    return [serialize(doc) for doc in cursor]
