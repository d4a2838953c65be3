import json
from typing import Any, Dict, List, Optional

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

import config
from database import get_db
from main import app


# In-memory stand-in for the slice of the pymongo API the app uses.

def _matches(doc: Dict[str, Any], filter_dict: Optional[Dict[str, Any]]) -> bool:
    for key, cond in (filter_dict or {}).items():
        value = doc.get(key)
        if isinstance(cond, dict) and any(op.startswith("$") for op in cond):
            for op, operand in cond.items():
                if value is None:
                    return False
                if op == "$gte" and not value >= operand:
                    return False
                if op == "$gt" and not value > operand:
                    return False
                if op == "$lt" and not value < operand:
                    return False
                if op == "$lte" and not value <= operand:
                    return False
        elif isinstance(value, list):
            if cond not in value:
                return False
        elif value != cond:
            return False
    return True


def _project(doc: Dict[str, Any], projection: Optional[Dict[str, int]]) -> Dict[str, Any]:
    if not projection:
        return dict(doc)
    keys = set(projection) | {"_id"}
    return {k: v for k, v in doc.items() if k in keys}


class FakeInsertResult:
    def __init__(self, inserted_id):
        self.inserted_id = inserted_id


class FakeCursor:
    def __init__(self, docs: List[Dict[str, Any]]):
        self._docs = docs

    def sort(self, key, direction=1):
        self._docs = sorted(self._docs, key=lambda d: d.get(key) or "", reverse=direction == -1)
        return self

    def skip(self, n):
        self._docs = self._docs[n:]
        return self

    def limit(self, n):
        if n:
            self._docs = self._docs[:n]
        return self

    def __iter__(self):
        return iter(self._docs)


class FakeCollection:
    def __init__(self):
        self.docs: List[Dict[str, Any]] = []

    def insert_one(self, doc):
        doc.setdefault("_id", ObjectId())
        self.docs.append(dict(doc))
        return FakeInsertResult(doc["_id"])

    def find_one(self, filter_dict=None, projection=None):
        for doc in self.docs:
            if _matches(doc, filter_dict):
                return _project(doc, projection)
        return None

    def find(self, filter_dict=None, projection=None):
        return FakeCursor([_project(d, projection) for d in self.docs if _matches(d, filter_dict)])

    def count_documents(self, filter_dict):
        return sum(1 for d in self.docs if _matches(d, filter_dict))

    def update_one(self, filter_dict, update):
        for doc in self.docs:
            if not _matches(doc, filter_dict):
                continue
            for key, value in update.get("$set", {}).items():
                doc[key] = value
            for key, value in update.get("$push", {}).items():
                doc.setdefault(key, []).append(value)
            for key, value in update.get("$pull", {}).items():
                doc[key] = [v for v in doc.get(key, []) if v != value]
            return


class FakeDatabase:
    def __init__(self):
        self.collections: Dict[str, FakeCollection] = {}

    def __getitem__(self, name):
        return self.collections.setdefault(name, FakeCollection())

    def list_collection_names(self):
        return list(self.collections)


# ----------------------
# Sample data
# ----------------------

def make_itinerary(**overrides) -> Dict[str, Any]:
    trip = {
        "name": "Lisbon Food Escape",
        "description": "Pastries, tiled streets and sunset viewpoints.",
        "estimatedPrice": "$1,200",
        "duration": 2,
        "budget": "Mid-range",
        "travelStyle": "Cultural",
        "country": "Portugal",
        "interests": "Food & Culinary",
        "groupType": "Couple",
        "bestTimeToVisit": ["🌸 Spring (Mar-May): Pleasant weather"],
        "weatherInfo": ["☀️ Summer: 25-30°C (77-86°F) - Warm and sunny"],
        "location": {"city": "Lisbon", "coordinates": [38.72, -9.14], "openStreetMap": "https://osm.org"},
        "itinerary": [
            {
                "day": 1,
                "location": "Alfama",
                "theme": "Old Town",
                "activities": [
                    {"time": "Morning (9:00-12:00)", "title": "Castle", "description": "🏰 Castelo", "cost": "$15", "tips": "Go early"},
                    {"time": "Afternoon (12:00-17:00)", "title": "Tram 28", "description": "🚋 Ride", "cost": "$3", "tips": "Hold on"},
                    {"time": "Evening (17:00-21:00)", "title": "Fado", "description": "🎶 Fado night", "cost": "$40", "tips": "Book ahead"},
                ],
                "meals": {"breakfast": "Pastel de nata", "lunch": "Bifana", "dinner": "Bacalhau"},
            },
            {
                "day": 2,
                "location": "Belém",
                "theme": "Discoveries",
                "activities": [
                    {"time": "Morning (9:00-12:00)", "title": "Tower", "description": "🗼 Belém Tower", "cost": "$10", "tips": "Buy combo"},
                ],
            },
        ],
    }
    trip.update(overrides)
    return trip


def fenced(data: Any) -> str:
    return "Here is your plan:\n```json\n" + json.dumps(data, indent=2) + "\n```\nEnjoy!"


def insert_trip(db: FakeDatabase, created_at: str, detail: Optional[Dict[str, Any]] = None,
                image_urls: Optional[List[str]] = None, user_id: str = "acct-1") -> str:
    doc = {
        "trip_detail": json.dumps(detail or make_itinerary()),
        "created_at": created_at,
        "image_urls": image_urls if image_urls is not None else ["https://img/1", "https://img/2"],
        "user_id": user_id,
    }
    return str(db["trip"].insert_one(doc).inserted_id)


def insert_profile(db: FakeDatabase, account_id: str, status: str = "user",
                   joined_at: str = "2026-10-01T10:00:00.000Z", email: str = "someone@example.com") -> dict:
    doc = {
        "account_id": account_id,
        "name": "Someone",
        "email": email,
        "image_url": None,
        "joined_at": joined_at,
        "status": status,
    }
    db["user"].insert_one(doc)
    return doc


def insert_account(db: FakeDatabase, token: str, email: str = "someone@example.com", name: str = "Someone") -> dict:
    doc = {"name": name, "email": email, "password_hash": "x", "salt": "y", "tokens": [token]}
    db["account"].insert_one(doc)
    return doc


# ----------------------
# Fixtures
# ----------------------

@pytest.fixture
def fake_db():
    return FakeDatabase()


@pytest.fixture
def client(fake_db):
    app.dependency_overrides[get_db] = lambda: fake_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def admin_emails(monkeypatch):
    monkeypatch.setattr(config, "ADMIN_EMAILS", ["boss@example.com"])
    return config.ADMIN_EMAILS
