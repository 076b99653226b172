"""Id-keyed lookup maps built from a supplier's ReferenceList payload."""

import logging

from flights.services.lookup import dicts, dig, first_found
from flights.services.products import normalize_product

logger = logging.getLogger(__name__)

# Search responses carry the reference list next to the catalog; quote
# responses have been seen with it at the document root.
REFERENCE_LIST_PATHS = (
    ("CatalogProductOfferingsResponse", "ReferenceList"),
    ("ReferenceList",),
)

# discriminator -> (map name, key holding the items)
REFERENCE_KINDS = {
    "FlightList": ("flights", "Flight"),
    "ReferenceListFlight": ("flights", "Flight"),
    "ProductList": ("products", "Product"),
    "ReferenceListProduct": ("products", "Product"),
    "BrandList": ("brands", "Brand"),
    "ReferenceListBrand": ("brands", "Brand"),
    "TermsList": ("terms", "TermsAndConditions"),
    "ReferenceListTermsAndConditions": ("terms", "TermsAndConditions"),
}


def _endpoint(raw: dict, *names) -> dict:
    block = {}
    for name in names:
        value = raw.get(name)
        if isinstance(value, dict):
            block = value
            break
    return {
        "location": block.get("location"),
        "date": block.get("date"),
        "time": block.get("time"),
    }


def normalize_flight(raw: dict) -> dict:
    return {
        "id": raw.get("id"),
        "carrier": raw.get("carrier"),
        "number": raw.get("number"),
        "duration": raw.get("duration"),
        "departure": _endpoint(raw, "Departure", "departure"),
        "arrival": _endpoint(raw, "Arrival", "arrival"),
    }


NORMALIZERS = {
    "flights": normalize_flight,
    "products": normalize_product,
}


def find_reference_groups(raw) -> list[dict]:
    _, groups = first_found(raw, REFERENCE_LIST_PATHS)
    return dicts(groups)


def empty_references() -> dict:
    return {"flights": {}, "products": {}, "brands": {}, "terms": {}}


def resolve_references(raw) -> dict:
    references = empty_references()

    for group in find_reference_groups(raw):
        discriminator = group.get("@type")
        kind = REFERENCE_KINDS.get(discriminator) if isinstance(discriminator, str) else None
        if kind is None:
            logger.debug("Ignoring reference list %s", discriminator)
            continue

        map_name, items_key = kind
        normalizer = NORMALIZERS.get(map_name)
        target = references[map_name]

        for item in dicts(group.get(items_key)):
            item_id = item.get("id")
            if isinstance(item_id, bool) or not isinstance(item_id, (str, int)) or item_id == "":
                logger.debug("Skipping %s item without a usable id", map_name)
                continue
            target[item_id] = normalizer(item) if normalizer else item

    return references


def flight_endpoint(flights: dict, flight_ref, side: str) -> dict:
    """``side`` is "departure" or "arrival"; unknown refs give an empty dict."""
    return dig(flights, flight_ref, side, default={}) if flight_ref else {}
