"""
AI itinerary pipeline.

Validated trip preferences are turned into a prompt, sent to Gemini once, and
the fenced JSON block in the reply is parsed into an itinerary. The itinerary
is illustrated with Unsplash photos and persisted as a JSON blob.
"""

import json
import logging
import re
from typing import Any, Optional

import google.generativeai as genai
from pymongo.database import Database

import config
from database import TRIP_COLLECTION, create_document, utc_now_iso
from images import fetch_trip_images
from schemas import Trip, TripFormData

logger = logging.getLogger(__name__)

MIN_TRIP_DAYS = 1
MAX_TRIP_DAYS = 10

MISSING_FIELDS_MESSAGE = "Please fill in all fields"
DURATION_MESSAGE = f"Duration must be between {MIN_TRIP_DAYS} and {MAX_TRIP_DAYS} days"

TRAVEL_STYLES = ["Relaxed", "Luxury", "Adventure", "Cultural", "Nature & Outdoors", "City Exploration"]
INTERESTS = [
    "Food & Culinary",
    "Historical Sites",
    "Hiking & Nature Walks",
    "Beaches & Water Activities",
    "Museums & Art",
    "Nightlife & Bars",
    "Photography Spots",
    "Shopping",
    "Local Experiences",
]
BUDGET_OPTIONS = ["Budget", "Mid-range", "Luxury", "Premium"]
GROUP_TYPES = ["Solo", "Couple", "Family", "Friends", "Business"]

FENCED_JSON_RE = re.compile(r"```json\n([\s\S]+?)\n```")


class TripGenerationError(Exception):
    pass


# ----------------------
# Form validation
# ----------------------

def validate_trip_form(form: TripFormData) -> Optional[str]:
    """Return a user-facing message when the form can't be submitted."""
    required = [form.country, form.travel_style, form.interests, form.budget, form.group_type]
    if any(not value or (isinstance(value, str) and not value.strip()) for value in required):
        return MISSING_FIELDS_MESSAGE
    if form.duration < MIN_TRIP_DAYS or form.duration > MAX_TRIP_DAYS:
        return DURATION_MESSAGE
    return None


# ----------------------
# Prompt
# ----------------------

def build_trip_prompt(form: TripFormData) -> str:
    days = form.duration
    interests = form.interests
    interests_text = ", ".join(interests) if isinstance(interests, list) else interests
    interests_json = json.dumps(interests)

    return f"""You are an expert travel planner. Create a detailed {days}-day travel itinerary for {form.country}.

USER DETAILS:
Budget: {form.budget}
Interests: {interests_text}
Travel Style: {form.travel_style}
Group Type: {form.group_type}

REQUIREMENTS:
- Include realistic current pricing
- Balance popular attractions with authentic local experiences
- Consider budget constraints and travel style preferences
- Provide practical, actionable recommendations

Return ONLY a single ```json fenced code block, with nothing before or after it, containing this exact structure:

{{
"name": "Compelling trip title (max 60 characters)",
"description": "Engaging trip overview highlighting key experiences (80-100 words)",
"estimatedPrice": "$X,XXX",
"duration": {days},
"budget": {json.dumps(form.budget)},
"travelStyle": {json.dumps(form.travel_style)},
"country": {json.dumps(form.country)},
"interests": {interests_json},
"groupType": {json.dumps(form.group_type)},
"bestTimeToVisit": [
    "🌸 Spring (Mar-May): Pleasant weather, blooming scenery, moderate crowds",
    "☀️ Summer (Jun-Aug): Peak season, warmest weather, vibrant atmosphere",
    "🍁 Autumn (Sep-Nov): Comfortable temperatures, beautiful colors, fewer tourists",
    "❄️ Winter (Dec-Feb): Cool weather, unique seasonal activities, best prices"
],
"weatherInfo": [
    "🌸 Spring: 15-22°C (59-72°F) - Mild and pleasant",
    "☀️ Summer: 25-30°C (77-86°F) - Warm and sunny",
    "🍁 Autumn: 18-25°C (64-77°F) - Comfortable and crisp",
    "❄️ Winter: 10-17°C (50-63°F) - Cool and refreshing"
],
"location": {{
    "city": "Primary destination city or region",
    "coordinates": [latitude, longitude],
    "openStreetMap": "https://www.openstreetmap.org/#map=12/lat/lng"
}},
"budgetBreakdown": {{
    "accommodation": "$XXX ({days} nights)",
    "meals": "$XXX (all meals)",
    "activities": "$XXX (tours and attractions)",
    "transportation": "$XXX (local transport)",
    "miscellaneous": "$XXX (shopping and extras)"
}},
"itinerary": [
    {{
    "day": 1,
    "location": "Specific city or area name",
    "theme": "Day theme (e.g., Historic City Center)",
    "activities": [
        {{"time": "Morning (9:00-12:00)", "title": "Main morning activity name", "description": "🏛️ Detailed activity description with what to expect", "cost": "$XX", "tips": "Practical tip or recommendation"}},
        {{"time": "Afternoon (12:00-17:00)", "title": "Afternoon activity name", "description": "🍽️ Activity description including cultural context", "cost": "$XX", "tips": "Local insight or recommendation"}},
        {{"time": "Evening (17:00-21:00)", "title": "Evening activity name", "description": "🌅 Evening experience description", "cost": "$XX", "tips": "Helpful tip for the experience"}}
    ],
    "meals": {{
        "breakfast": "Recommended breakfast spot or local option",
        "lunch": "Suggested lunch venue or cuisine type",
        "dinner": "Evening dining recommendation"
    }},
    "accommodation": "Suggested neighborhood to stay with brief reason",
    "dailyTotal": "$XXX"
    }}
],
"localTips": [
    "💰 Best money-saving strategies for this destination",
    "🚗 Most efficient transportation methods",
    "🍴 Must-try local dishes and where to find them"
],
"packingEssentials": [
    "Weather-appropriate clothing for the season",
    "Important documents and travel items"
]
}}

The "itinerary" array must contain exactly {days} day entries."""


# ----------------------
# Model call and extraction
# ----------------------

def generate_trip_text(prompt: str) -> str:
    if not config.GEMINI_API_KEY:
        raise TripGenerationError("GEMINI_API_KEY is not set")
    genai.configure(api_key=config.GEMINI_API_KEY)
    model = genai.GenerativeModel(model_name=config.GEMINI_MODEL)
    response = model.generate_content([prompt])
    return response.text


def parse_markdown_to_json(markdown_text: str) -> Optional[Any]:
    match = FENCED_JSON_RE.search(markdown_text or "")
    if match and match.group(1):
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as e:
            logger.error(f"Error parsing JSON: {e}")
            return None
    logger.error("No valid JSON found in markdown text.")
    return None


def has_day_plans(trip: dict) -> bool:
    days = trip.get("itinerary")
    return isinstance(days, list) and bool(days) and all(isinstance(day, dict) for day in days)


def parse_trip_data(json_string: Optional[str]) -> Optional[dict]:
    try:
        data = json.loads(json_string)
    except (TypeError, json.JSONDecodeError) as e:
        logger.error(f"Failed to parse trip data: {e}")
        return None
    return data if isinstance(data, dict) else None


# ----------------------
# Pipeline
# ----------------------

def create_trip(db: Database, form: TripFormData, user_id: str) -> str:
    """Generate, illustrate and persist a trip; returns the new trip id."""
    reply = generate_trip_text(build_trip_prompt(form))

    trip = parse_markdown_to_json(reply)
    if not isinstance(trip, dict):
        raise TripGenerationError("Model reply did not contain a JSON itinerary")
    if not has_day_plans(trip):
        raise TripGenerationError("Model itinerary has no day plans")

    image_urls = fetch_trip_images(form.country, form.travel_style)

    document = Trip(
        trip_detail=json.dumps(trip),
        created_at=utc_now_iso(),
        image_urls=image_urls,
        user_id=user_id,
    )
    trip_id = create_document(db, TRIP_COLLECTION, document)
    logger.info(f"Created trip {trip_id} for {form.country} ({form.duration} days) with {len(image_urls)} image(s)")
    return trip_id
