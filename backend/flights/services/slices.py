import logging

from flights.services.lookup import dicts

logger = logging.getLogger(__name__)

ONEWAY = "oneway"
ROUNDTRIP = "roundtrip"
MULTICITY = "multicity"

OUTBOUND = "outbound"
INBOUND = "inbound"
MULTI = "multi"
UNKNOWN = "unknown"


def _slice(index, origin, destination, direction) -> dict:
    return {"index": index, "from": origin, "to": destination, "direction": direction}


def plan_slices(search) -> list[dict]:
    """Expected route slices for a normalized search request, in travel order."""
    search = search if isinstance(search, dict) else {}
    origin = search.get("from")
    destination = search.get("to")
    trip_type = search.get("trip_type")

    slices = []
    if trip_type == ONEWAY:
        slices.append(_slice(1, origin, destination, OUTBOUND))
    elif trip_type == ROUNDTRIP:
        slices.append(_slice(1, origin, destination, OUTBOUND))
        slices.append(_slice(2, destination, origin, INBOUND))
    elif trip_type == MULTICITY:
        for position, leg in enumerate(dicts(search.get("slices")), start=1):
            slices.append(_slice(position, leg.get("from"), leg.get("to"), MULTI))

    if not slices:
        slices.append(_slice(1, origin, destination, UNKNOWN))
    return slices


def match_slice(slices: list[dict], origin, destination) -> dict:
    for candidate in slices:
        if candidate.get("from") == origin and candidate.get("to") == destination:
            return candidate

    logger.debug("No slice matches %s -> %s", origin, destination)
    return {"index": 1, "from": origin, "to": destination, "direction": UNKNOWN}
