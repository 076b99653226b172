from flights.services.lookup import dicts, dig

MAIN_PASSENGER_TYPE = "ADT"


def _passenger_product(flight_product: dict) -> dict:
    return {
        "class_of_service": flight_product.get("classOfService"),
        "cabin": flight_product.get("cabin"),
        "fare_basis_code": flight_product.get("fareBasisCode"),
        "fare_type": flight_product.get("fareType"),
        "fare_type_code": flight_product.get("fareTypeCode"),
        "brand_ref": dig(flight_product, "Brand", "BrandRef"),
    }


def _segment(segment: dict) -> dict:
    return {
        "sequence": segment.get("sequence"),
        "flight_ref": dig(segment, "Flight", "FlightRef"),
        "connection_duration": segment.get("connectionDuration"),
    }


def normalize_product(raw) -> dict:
    """Compact a ReferenceList product record into per-passenger-type fare data."""
    raw = raw if isinstance(raw, dict) else {}

    passenger_products: dict[str, dict] = {}
    for passenger_flight in dicts(raw.get("PassengerFlight")):
        passenger_type = passenger_flight.get("passengerTypeCode")
        if not passenger_type:
            continue
        # The last variant listed for a passenger type replaces earlier ones.
        for flight_product in dicts(passenger_flight.get("FlightProduct")):
            passenger_products[passenger_type] = _passenger_product(flight_product)

    if MAIN_PASSENGER_TYPE in passenger_products:
        main_pax = MAIN_PASSENGER_TYPE
    else:
        main_pax = next(iter(passenger_products), None)

    return {
        "id": raw.get("id"),
        "total_duration": raw.get("totalDuration"),
        "segments": [_segment(segment) for segment in dicts(raw.get("FlightSegment"))],
        "passenger_products": passenger_products,
        "main_pax": main_pax,
    }


def main_cabin(product) -> str | None:
    if not isinstance(product, dict):
        return None
    main_pax = product.get("main_pax")
    if not main_pax:
        return None
    return dig(product, "passenger_products", main_pax, "cabin")
