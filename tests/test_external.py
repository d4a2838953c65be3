import pytest
import requests

import countries
import images


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


@pytest.fixture
def unsplash_key(monkeypatch):
    monkeypatch.setattr(images.config, "UNSPLASH_ACCESS_KEY", "test-key")


# ----------------------
# Unsplash
# ----------------------

def test_fetch_trip_images_keeps_first_three(monkeypatch, unsplash_key):
    calls = []
    results = [
        {"urls": {"regular": "https://img/1"}},
        {"urls": {}},
        {"urls": {"regular": "https://img/3"}},
        {"urls": {"regular": "https://img/4"}},
    ]

    def fake_get(url, params=None, timeout=None):
        calls.append(params)
        return FakeResponse({"results": results})

    monkeypatch.setattr(images.requests, "get", fake_get)

    assert images.fetch_trip_images("Japan", "Adventure") == ["https://img/1", None, "https://img/3"]
    assert calls[0]["query"] == "Japan Adventure"
    assert calls[0]["client_id"] == "test-key"


def test_fetch_trip_images_swallows_http_errors(monkeypatch, unsplash_key):
    monkeypatch.setattr(images.requests, "get", lambda *a, **kw: FakeResponse({}, status_code=403))
    assert images.fetch_trip_images("Japan", "Adventure") == []


@pytest.mark.parametrize("payload", [["not", "an", "object"], {"results": "none"}, None])
def test_fetch_trip_images_ignores_unexpected_payloads(monkeypatch, unsplash_key, payload):
    monkeypatch.setattr(images.requests, "get", lambda *a, **kw: FakeResponse(payload))
    assert images.fetch_trip_images("Japan", "Adventure") == []


def test_fetch_trip_images_swallows_network_errors(monkeypatch, unsplash_key):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(images.requests, "get", boom)
    assert images.fetch_trip_images("Japan", "Adventure") == []


def test_fetch_trip_images_without_key_skips_search(monkeypatch):
    monkeypatch.setattr(images.config, "UNSPLASH_ACCESS_KEY", "")
    monkeypatch.setattr(images.requests, "get", lambda *a, **kw: pytest.fail("should not search"))
    assert images.fetch_trip_images("Japan", "Adventure") == []


# ----------------------
# REST Countries
# ----------------------

def test_fetch_countries_maps_fields(monkeypatch):
    payload = [
        {
            "flag": "🇵🇹",
            "name": {"common": "Portugal", "official": "Portuguese Republic"},
            "latlng": [39.5, -8.0],
            "maps": {"openStreetMaps": "https://www.openstreetmap.org/relation/295480"},
        },
        {"flag": "🇯🇵", "name": {"common": "Japan"}, "latlng": [36.0, 138.0]},
    ]
    monkeypatch.setattr(countries.requests, "get", lambda *a, **kw: FakeResponse(payload))

    result = countries.fetch_countries()

    assert [c.value for c in result] == ["Portugal", "Japan"]
    assert result[0].name == "🇵🇹Portugal"
    assert result[0].coordinates == [39.5, -8.0]
    assert result[0].open_street_map == "https://www.openstreetmap.org/relation/295480"
    assert result[1].open_street_map is None


def test_fetch_countries_rejects_non_list(monkeypatch):
    monkeypatch.setattr(countries.requests, "get", lambda *a, **kw: FakeResponse({"message": "rate limited"}))
    assert countries.fetch_countries() == []
