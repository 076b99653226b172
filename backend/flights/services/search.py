from flights.services.lookup import dicts
from flights.services.slices import MULTICITY, ONEWAY, ROUNDTRIP

TRIP_TYPE_ALIASES = {
    "oneway": ONEWAY,
    "one_way": ONEWAY,
    "one-way": ONEWAY,
    "roundtrip": ROUNDTRIP,
    "round": ROUNDTRIP,
    "return": ROUNDTRIP,
    "multicity": MULTICITY,
    "multi": MULTICITY,
    "multi-city": MULTICITY,
}


def _code(value) -> str | None:
    if not value or not isinstance(value, str):
        return None
    return value.strip().upper()


def _count(value) -> int:
    try:
        return int(value) if value is not None else 0
    except (TypeError, ValueError):
        return 0


def normalize_search(search: dict) -> dict:
    """Canonical search request: upper-cased codes, known trip types, integer pax counts."""
    raw_trip_type = search.get("trip_type")
    trip_type = raw_trip_type.strip().lower() if isinstance(raw_trip_type, str) else None

    normalized = {
        "from": _code(search.get("from")),
        "to": _code(search.get("to")),
        "departure": search.get("departure"),
        "return": search.get("return") or None,
        "trip_type": TRIP_TYPE_ALIASES.get(trip_type, trip_type),
        "adults": _count(search.get("adults")),
        "children": _count(search.get("children")),
        "infants": _count(search.get("infants")),
    }

    if search.get("slices") is not None:
        normalized["slices"] = [
            {
                "from": _code(leg.get("from")),
                "to": _code(leg.get("to")),
                "departure": leg.get("departure"),
            }
            for leg in dicts(search.get("slices"))
        ]

    return normalized
