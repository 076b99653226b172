from __future__ import annotations

import logging

import requests
from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

DATASET_CACHE_KEY = "flights:airports:dataset"
DEFAULT_CACHE_TTL = 60 * 60 * 24


def _normalize_record(item: dict) -> tuple[str, dict] | None:
    code = item.get("iata") or item.get("iataCode") or item.get("code")
    if not code or not isinstance(code, str):
        return None

    return code.strip().upper(), {
        "airport_name": item.get("airport_name") or item.get("name") or item.get("airportName"),
        "city": item.get("city"),
        "country_name": item.get("country_name") or item.get("country"),
    }


class AirportDirectory:
    """Read-only airport metadata lookup: code -> {airport_name, city, country_name}."""

    def __init__(self, airports: dict | None = None):
        self._airports = {
            str(code).upper(): dict(details)
            for code, details in (airports or {}).items()
            if isinstance(details, dict)
        }

    @classmethod
    def from_dataset(cls, payload) -> AirportDirectory:
        """Build from an airports.json style payload (dict of records or list of records)."""
        if isinstance(payload, dict):
            records = [value for value in payload.values() if isinstance(value, dict)]
        elif isinstance(payload, list):
            records = [item for item in payload if isinstance(item, dict)]
        else:
            records = []

        airports = {}
        for record in records:
            normalized = _normalize_record(record)
            if normalized:
                code, details = normalized
                airports[code] = details
        return cls(airports)

    def __len__(self):
        return len(self._airports)

    def __contains__(self, code):
        return isinstance(code, str) and code.upper() in self._airports

    def as_dict(self) -> dict:
        return {code: dict(details) for code, details in self._airports.items()}

    def get(self, code) -> dict | None:
        if not code or not isinstance(code, str):
            return None
        details = self._airports.get(code.upper())
        return dict(details) if details else None

    def describe(self, code) -> dict:
        details = self.get(code) or {}
        return {
            "code": code,
            "airport_name": details.get("airport_name"),
            "city": details.get("city"),
            "country_name": details.get("country_name"),
        }

    def city_of(self, code):
        details = self.get(code) or {}
        return details.get("city") or code


def _download_dataset(url: str):
    response = requests.get(url, timeout=15)
    response.raise_for_status()
    return response.json()


def load_airport_directory() -> AirportDirectory:
    """Directory built from ``settings.AIRPORTS_DATA_URL``, cached; empty when unavailable."""
    url = getattr(settings, "AIRPORTS_DATA_URL", None)
    if not url:
        return AirportDirectory()

    cached = cache.get(DATASET_CACHE_KEY)
    if isinstance(cached, dict):
        return AirportDirectory(cached)

    try:
        payload = _download_dataset(url)
    except (requests.RequestException, ValueError) as exc:
        logger.warning("Airport dataset download failed.", extra={"url": url, "error": str(exc)})
        return AirportDirectory()

    directory = AirportDirectory.from_dataset(payload)
    ttl = getattr(settings, "AIRPORTS_CACHE_TTL", DEFAULT_CACHE_TTL)
    cache.set(DATASET_CACHE_KEY, directory.as_dict(), ttl)
    return directory
