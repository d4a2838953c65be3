"""Country reference data for the destination picker."""

import logging
from typing import List

import requests

import config
from schemas import Country

logger = logging.getLogger(__name__)

COUNTRY_FIELDS = "flag,name,latlng,maps"


def fetch_countries() -> List[Country]:
    response = requests.get(
        config.COUNTRIES_API_URL,
        params={"status": "true", "fields": COUNTRY_FIELDS},
        timeout=config.HTTP_TIMEOUT,
    )
    response.raise_for_status()
    data = response.json()

    if not isinstance(data, list):
        logger.error(f"Expected a list of countries but got: {str(data)[:200]}")
        return []

    countries = []
    for country in data:
        common_name = (country.get("name") or {}).get("common", "")
        countries.append(
            Country(
                name=f"{country.get('flag', '')}{common_name}",
                coordinates=country.get("latlng") or [],
                value=common_name,
                open_street_map=(country.get("maps") or {}).get("openStreetMaps"),
            )
        )
    return countries
