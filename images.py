"""Unsplash photo search used to illustrate generated trips."""

import logging
from typing import List, Optional

import requests

import config

logger = logging.getLogger(__name__)

MAX_TRIP_IMAGES = 3


def fetch_trip_images(country: str, travel_style: str) -> List[Optional[str]]:
    """Return up to three image URLs for a destination and travel style.

    A failed search never blocks the trip: the caller gets an empty list.
    """
    if not config.UNSPLASH_ACCESS_KEY:
        logger.warning("UNSPLASH_ACCESS_KEY is not set; trip will have no images")
        return []

    query = f"{country} {travel_style}".strip()
    try:
        response = requests.get(
            config.UNSPLASH_SEARCH_URL,
            params={"query": query, "client_id": config.UNSPLASH_ACCESS_KEY},
            timeout=config.HTTP_TIMEOUT,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Unsplash search failed for '{query}': {e}")
        return []

    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        logger.error(f"Unexpected Unsplash response for '{query}'")
        return []

    return [_regular_url(result) for result in results[:MAX_TRIP_IMAGES]]


def _regular_url(result) -> Optional[str]:
    urls = result.get("urls") if isinstance(result, dict) else None
    return urls.get("regular") if isinstance(urls, dict) else None
