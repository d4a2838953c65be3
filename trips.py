"""Trip queries: paginated listing and lookup by id."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from pymongo.database import Database

from database import TRIP_COLLECTION, get_documents, serialize, to_object_id

logger = logging.getLogger(__name__)


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def get_all_trips(db: Database, limit: int, offset: int) -> Tuple[List[Dict[str, Any]], int]:
    """Newest trips first, plus the store's total count for the pager."""
    total = db[TRIP_COLLECTION].count_documents({})
    if total == 0:
        logger.info("No trips found")
        return [], 0

    trips = get_documents(db, TRIP_COLLECTION, limit=limit, offset=offset, sort=("created_at", -1))
    return trips, total


def get_trip_by_id(db: Database, trip_id: str) -> Optional[Dict[str, Any]]:
    object_id = to_object_id(trip_id)
    trip = db[TRIP_COLLECTION].find_one({"_id": object_id}) if object_id else None
    if not trip:
        logger.info(f"Trip not found: {trip_id}")
        return None
    return serialize(trip)
