"""View models for the planner and dashboard front ends."""

import re
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from database import parse_iso
from dashboard import calculate_trend_percentage
from itinerary import parse_trip_data
from schemas import Itinerary, StatsCard, TripCard


def format_date(date_string: str) -> str:
    date = parse_iso(date_string)
    return f"{date:%B %d, %Y}"


def get_first_word(text: str = "") -> str:
    words = (text or "").split()
    return words[0] if words else ""


def format_key(key: str) -> str:
    spaced = re.sub(r"([A-Z])", r" \1", key)
    return spaced[:1].upper() + spaced[1:]


def _join_interests(interests: Any) -> str:
    if isinstance(interests, list):
        return ", ".join(str(i) for i in interests)
    return interests or ""


def trip_card(trip: Dict[str, Any]) -> Optional[TripCard]:
    """Summarise a stored trip document; None when its blob is unreadable."""
    detail = parse_trip_data(trip.get("trip_detail"))
    if detail is None:
        return None

    days = detail.get("itinerary") or []
    first_day = days[0] if days and isinstance(days[0], dict) else {}
    images = [url for url in trip.get("image_urls") or [] if url]
    tags = [_join_interests(detail.get("interests")), detail.get("travelStyle") or ""]

    return TripCard(
        id=str(trip["_id"]),
        name=detail.get("name") or "",
        location=first_day.get("location") or "",
        image_url=images[0] if images else "",
        tags=[get_first_word(tag) for tag in tags if tag],
        price=str(detail.get("estimatedPrice") or ""),
    )


def trip_cards(trips: List[Dict[str, Any]]) -> List[TripCard]:
    return [card for card in (trip_card(trip) for trip in trips) if card is not None]


def day_breakdown(itinerary: Itinerary) -> List[Dict[str, Any]]:
    return [
        {
            "heading": f"Day {day.day}: {day.location}",
            "theme": day.theme,
            "activities": [{"time": a.time, "description": a.description} for a in day.activities],
        }
        for day in itinerary.itinerary
    ]


def trip_detail_view(trip: Dict[str, Any], related: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    detail = parse_trip_data(trip.get("trip_detail"))
    if detail is None:
        return None
    try:
        itinerary = Itinerary.model_validate(detail)
    except ValidationError:
        return None

    return {
        "id": str(trip["_id"]),
        "created_at": format_date(trip["created_at"]) if trip.get("created_at") else None,
        "image_urls": trip.get("image_urls") or [],
        "trip": itinerary.model_dump(by_alias=True),
        "pills": [
            pill
            for pill in (
                itinerary.travel_style,
                itinerary.group_type,
                itinerary.budget,
                _join_interests(itinerary.interests),
            )
            if pill
        ],
        "visit_info": [
            {"title": "Best Time to Visit:", "content": itinerary.best_time_to_visit},
            {"title": "Weather Information:", "content": itinerary.weather_info},
        ],
        "days": day_breakdown(itinerary),
        "related_trips": [card.model_dump() for card in trip_cards(related)],
    }


def stats_card(header_title: str, total: int, current_month_count: int, last_month_count: int) -> StatsCard:
    trend = calculate_trend_percentage(current_month_count, last_month_count)
    return StatsCard(
        header_title=header_title,
        total=total,
        current_month_count=current_month_count,
        last_month_count=last_month_count,
        trend=trend.trend,
        percentage=trend.percentage,
    )
