"""
Admin dashboard statistics.

Monthly counts are computed with range filters on the stored ISO-8601
strings, which sort chronologically because their width never varies.
"""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from pymongo.database import Database

from database import TRIP_COLLECTION, USER_COLLECTION, parse_iso, utc_now_iso
from itinerary import parse_trip_data
from schemas import DashboardStats, MonthlyCount, RoleCount, TrendResult

logger = logging.getLogger(__name__)


def calculate_trend_percentage(count_of_this_month: int, count_of_last_month: int) -> TrendResult:
    if count_of_last_month == 0:
        if count_of_this_month == 0:
            return TrendResult(trend="no change", percentage=0)
        return TrendResult(trend="increment", percentage=100)

    change = count_of_this_month - count_of_last_month
    percentage = abs(change / count_of_last_month * 100)

    if change > 0:
        return TrendResult(trend="increment", percentage=percentage)
    if change < 0:
        return TrendResult(trend="decrement", percentage=percentage)
    return TrendResult(trend="no change", percentage=0)


def month_boundaries(now: Optional[datetime] = None) -> Tuple[str, str]:
    """Start of the current and of the previous calendar month (UTC), as ISO strings."""
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    start_current = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    if start_current.month == 1:
        start_prev = start_current.replace(year=start_current.year - 1, month=12)
    else:
        start_prev = start_current.replace(month=start_current.month - 1)
    return utc_now_iso(start_current), utc_now_iso(start_prev)


def _monthly_count(db: Database, collection: str, key: str, start_current: str, start_prev: str,
                   extra: Optional[Dict] = None) -> MonthlyCount:
    base = dict(extra or {})
    current = db[collection].count_documents({**base, key: {"$gte": start_current}})
    last = db[collection].count_documents({**base, key: {"$gte": start_prev, "$lt": start_current}})
    return MonthlyCount(current_month=current, last_month=last)


def get_users_and_trips_stats(db: Database, now: Optional[datetime] = None) -> DashboardStats:
    start_current, start_prev = month_boundaries(now)
    role_filter = {"status": "user"}

    role_monthly = _monthly_count(db, USER_COLLECTION, "joined_at", start_current, start_prev, role_filter)
    return DashboardStats(
        total_users=db[USER_COLLECTION].count_documents({}),
        users_joined=_monthly_count(db, USER_COLLECTION, "joined_at", start_current, start_prev),
        user_role=RoleCount(
            total=db[USER_COLLECTION].count_documents(role_filter),
            current_month=role_monthly.current_month,
            last_month=role_monthly.last_month,
        ),
        total_trips=db[TRIP_COLLECTION].count_documents({}),
        trips_created=_monthly_count(db, TRIP_COLLECTION, "created_at", start_current, start_prev),
    )


# ----------------------
# Chart series
# ----------------------

def _day_label(timestamp: str) -> str:
    date = parse_iso(timestamp)
    return f"{date:%b} {date.day}"


def _count_per_day(db: Database, collection: str, key: str) -> List[Dict[str, object]]:
    counts: Counter = Counter()
    for doc in db[collection].find({}, {key: 1}):
        value = doc.get(key)
        if not value:
            continue
        try:
            counts[_day_label(value)] += 1
        except ValueError:
            logger.warning(f"Skipping {collection} document with malformed {key}: {value!r}")
    return [{"day": day, "count": count} for day, count in counts.items()]


def get_user_growth_per_day(db: Database) -> List[Dict[str, object]]:
    return _count_per_day(db, USER_COLLECTION, "joined_at")


def get_trips_created_per_day(db: Database) -> List[Dict[str, object]]:
    return _count_per_day(db, TRIP_COLLECTION, "created_at")


def get_trips_by_travel_style(db: Database) -> List[Dict[str, object]]:
    counts: Counter = Counter()
    for trip in db[TRIP_COLLECTION].find({}, {"trip_detail": 1}):
        detail = parse_trip_data(trip.get("trip_detail"))
        if detail and detail.get("travelStyle"):
            counts[detail["travelStyle"]] += 1
    return [{"travel_style": style, "count": count} for style, count in counts.items()]
