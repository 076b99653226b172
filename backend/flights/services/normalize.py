import logging

from flights.airports import AirportDirectory
from flights.services.brands import map_brand_attributes
from flights.services.durations import (
    compose_datetime,
    format_gap,
    gap_seconds,
    parse_duration_to_minutes,
)
from flights.services.lookup import as_list, dicts, dig, first_found
from flights.services.pricing import SEARCH, normalize_price
from flights.services.products import main_cabin
from flights.services.references import flight_endpoint, resolve_references
from flights.services.slices import match_slice, plan_slices

logger = logging.getLogger(__name__)

OFFERINGS_PATHS = (
    ("CatalogProductOfferingsResponse", "CatalogProductOfferings", "CatalogProductOffering"),
    ("CatalogProductOfferings", "CatalogProductOffering"),
)

SEARCH_ID_PATHS = (
    ("CatalogProductOfferingsResponse", "CatalogProductOfferings", "Identifier", "value"),
    ("CatalogProductOfferings", "Identifier", "value"),
    ("CatalogProductOfferingsResponse", "transactionId"),
    ("transactionId",),
)


def _timestamp(endpoint: dict):
    return compose_datetime(endpoint.get("date"), endpoint.get("time"))


def _isoformat(endpoint: dict) -> str | None:
    value = _timestamp(endpoint)
    return value.isoformat() if value else None


def connection_gaps(flight_refs: list, flights: dict, airports: AirportDirectory) -> dict:
    """Layover duration per connecting city for adjacent flight pairs.

    Pairs with a missing flight or unparsable timestamp are skipped. A second
    connection through the same city replaces the first entry.
    """
    gaps = {}
    for current_ref, next_ref in zip(flight_refs, flight_refs[1:]):
        arrival = flight_endpoint(flights, current_ref, "arrival")
        departure = flight_endpoint(flights, next_ref, "departure")

        arrived_at = _timestamp(arrival)
        departs_at = _timestamp(departure)
        if arrived_at is None or departs_at is None:
            logger.debug("Skipping connection %s -> %s: unresolved timestamps", current_ref, next_ref)
            continue

        try:
            seconds = gap_seconds(arrived_at, departs_at)
        except (OverflowError, OSError, ValueError):
            logger.debug("Skipping connection %s -> %s: bad timestamps", current_ref, next_ref)
            continue

        location = arrival.get("location")
        if not isinstance(location, str) or not location:
            logger.debug("Skipping connection %s -> %s: no connecting airport", current_ref, next_ref)
            continue
        gaps[airports.city_of(location)] = format_gap(seconds)
    return gaps


def _new_summary(flight_refs: list, flights: dict, airports: AirportDirectory) -> dict:
    stops = max(len(flight_refs) - 1, 0)
    return {
        "stops": stops,
        "stops_details": connection_gaps(flight_refs, flights, airports) if stops > 0 else {},
        "is_direct": stops == 0,
        "has_stops": stops > 0,
        "duration": None,
        "duration_minutes": None,
        "main_cabin": None,
        "main_passenger_type": None,
        "departure_time": None,
        "arrival_time": None,
        "cheapest_price": None,
    }


def _set_first(summary: dict, field: str, value):
    if summary.get(field) is None and value is not None:
        summary[field] = value


def _fare_option_id(offer_id, product_ref, brand_ref) -> str:
    return "_".join(str(part) for part in (offer_id, product_ref, brand_ref) if part not in (None, ""))


def _update_summary(summary: dict, fare_option: dict, product: dict, flight_refs: list, flights: dict):
    if summary.get("duration") is None:
        duration = dig(product, "total_duration")
        if duration is not None:
            summary["duration"] = duration
            summary["duration_minutes"] = parse_duration_to_minutes(duration)

    _set_first(summary, "main_cabin", fare_option["cabin"])
    _set_first(summary, "main_passenger_type", fare_option["main_passenger_type"])
    if flight_refs:
        _set_first(summary, "departure_time", _isoformat(flight_endpoint(flights, flight_refs[0], "departure")))
        _set_first(summary, "arrival_time", _isoformat(flight_endpoint(flights, flight_refs[-1], "arrival")))

    pricing = fare_option["pricing"]
    cheapest = summary.get("cheapest_price")
    # Strictly lower only: on a tie the earliest fare stays.
    if cheapest is None or pricing["total"] < cheapest["total"]:
        summary["cheapest_price"] = {
            "fare_option_id": fare_option["id"],
            "currency": pricing["currency"],
            "base": pricing["base"],
            "taxes": pricing["taxes"],
            "fees": pricing["fees"],
            "surcharges": pricing["surcharges"],
            "total": pricing["total"],
        }


def build_fare_option(offer_id, brand_offering: dict, references: dict) -> tuple[dict, dict]:
    """FareOption for one ProductBrandOffering, plus the product it resolved to."""
    product_ref = dig(brand_offering, "Product", 0, "productRef")
    brand_ref = dig(brand_offering, "Brand", "BrandRef")
    terms_ref = dig(brand_offering, "TermsAndConditions", "termsAndConditionsRef")

    product = references["products"].get(product_ref) if isinstance(product_ref, str) else None
    product = product or {}
    brand = references["brands"].get(brand_ref) if isinstance(brand_ref, str) else None

    fare_option = {
        "id": _fare_option_id(offer_id, product_ref, brand_ref),
        "product_ref": product_ref,
        "brand_ref": brand_ref,
        "terms_ref": terms_ref,
        "combinability_code": [code for code in as_list(brand_offering.get("CombinabilityCode")) if code],
        "flight_additional_details": map_brand_attributes(brand),
        "cabin": main_cabin(product),
        "main_passenger_type": product.get("main_pax"),
        "pricing": normalize_price(brand_offering.get("BestCombinablePrice"), SEARCH),
    }
    return fare_option, product


def _flight_refs(options: dict) -> list[str]:
    return [ref for ref in as_list(options.get("flightRefs")) if isinstance(ref, str) and ref]


def normalize_catalog_offerings(raw, search, airports=None, supplier: str = "travelport") -> dict:
    """Turn a catalog offerings response into the canonical itinerary document."""
    if airports is None:
        airports = AirportDirectory()
    elif isinstance(airports, dict):
        airports = AirportDirectory(airports)

    search = search if isinstance(search, dict) else {}
    references = resolve_references(raw)
    flights = references["flights"]
    slices = plan_slices(search)

    _, search_id = first_found(raw, SEARCH_ID_PATHS)
    _, offerings = first_found(raw, OFFERINGS_PATHS)
    offerings = dicts(offerings)

    itineraries: list[dict] = []
    index_by_key: dict[tuple, int] = {}

    for offering in offerings:
        offer_id = offering.get("id")
        if not isinstance(offer_id, (str, int)):
            offer_id = None
        origin = offering.get("Departure")
        destination = offering.get("Arrival")
        origin_details = airports.describe(origin)
        destination_details = airports.describe(destination)
        slice_meta = match_slice(slices, origin, destination)

        for options in dicts(offering.get("ProductBrandOptions")):
            flight_refs = _flight_refs(options)
            key = (offer_id, tuple(flight_refs))

            if key not in index_by_key:
                index_by_key[key] = len(itineraries)
                itineraries.append(
                    {
                        "id": f"{offer_id}:{'-'.join(flight_refs)}",
                        "supplier": supplier,
                        "search_id": search_id,
                        "offer_id": offer_id,
                        "trip_type": search.get("trip_type"),
                        "slice_index": slice_meta["index"],
                        "direction": slice_meta["direction"],
                        "origin": origin,
                        "destination": destination,
                        "flight_refs": list(flight_refs),
                        "origin_details": origin_details,
                        "destination_details": destination_details,
                        "summary": _new_summary(flight_refs, flights, airports),
                        "fare_options": [],
                    }
                )
            itinerary = itineraries[index_by_key[key]]

            for brand_offering in dicts(options.get("ProductBrandOffering")):
                fare_option, product = build_fare_option(offer_id, brand_offering, references)
                itinerary["fare_options"].append(fare_option)
                _update_summary(itinerary["summary"], fare_option, product, flight_refs, flights)

    logger.info(
        "Normalized %s offerings into %s itineraries for %s",
        len(offerings),
        len(itineraries),
        supplier,
    )

    return {
        "supplier": supplier,
        "search_id": search_id,
        "references": references,
        "itineraries": itineraries,
    }
