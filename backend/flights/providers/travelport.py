import logging

from django.conf import settings

from flights.airports import AirportDirectory
from flights.providers.base import FlightProvider, ProviderError
from flights.services.normalize import normalize_catalog_offerings
from flights.services.pricing import QUOTE, normalize_price
from flights.services.search import normalize_search
from flights.services.slices import MULTICITY, ROUNDTRIP

logger = logging.getLogger(__name__)

PASSENGER_TYPE_CODES = (
    ("adults", "ADT"),
    ("children", "CHD"),
    ("infants", "INF"),
)


def _search_criteria_flight(departure, origin, destination) -> dict:
    return {
        "@type": "SearchCriteriaFlight",
        "departureDate": departure,
        "From": {"value": origin},
        "To": {"value": destination},
    }


class TravelportProvider(FlightProvider):
    """Travelport JSON API (catalog product offerings).

    ``transport`` is a callable taking the request body and returning the
    decoded response document; HTTP and OAuth live with the caller.
    """

    code = "travelport"

    def __init__(self, transport=None, airports=None):
        self.transport = transport
        self.airports = airports if airports is not None else AirportDirectory()

    def build_request_body(self, search: dict) -> dict:
        req = normalize_search(search)

        passengers = []
        for field, type_code in PASSENGER_TYPE_CODES:
            if req[field] > 0:
                passengers.append(
                    {
                        "@type": "PassengerCriteria",
                        "number": req[field],
                        "passengerTypeCode": type_code,
                    }
                )

        if req["trip_type"] == MULTICITY and req.get("slices"):
            criteria = [
                _search_criteria_flight(leg["departure"], leg["from"], leg["to"])
                for leg in req["slices"]
            ]
        else:
            criteria = [_search_criteria_flight(req["departure"], req["from"], req["to"])]
            if req["trip_type"] == ROUNDTRIP and req["return"]:
                criteria.append(_search_criteria_flight(req["return"], req["to"], req["from"]))

        return {
            "CatalogProductOfferingsQueryRequest": {
                "CatalogProductOfferingsRequest": {
                    "@type": "CatalogProductOfferingsRequestAir",
                    "offersPerPage": getattr(settings, "TRAVELPORT_OFFERS_PER_PAGE", 15),
                    "maxNumberOfUpsellsToReturn": getattr(settings, "TRAVELPORT_MAX_UPSELLS", 4),
                    "contentSourceList": list(getattr(settings, "TRAVELPORT_CONTENT_SOURCES", ["GDS"])),
                    "PassengerCriteria": passengers,
                    "SearchCriteriaFlight": criteria,
                }
            }
        }

    def search_flights(self, params):
        if self.transport is None:
            raise ProviderError("Travelport transport is not configured.", status_code=501)

        search = normalize_search(params)
        body = self.build_request_body(search)
        raw = self.transport(body)
        if not isinstance(raw, dict):
            logger.warning("Travelport returned a non-document payload: %s", type(raw).__name__)
            raise ProviderError(
                "Travelport response was not a JSON document.",
                status_code=502,
                details={"type": type(raw).__name__},
            )
        return self.transform_to_common(raw, search)

    def transform_to_common(self, raw, search):
        search = normalize_search(search) if isinstance(search, dict) else {}
        return normalize_catalog_offerings(raw, search, airports=self.airports, supplier=self.code)

    def price_quote(self, raw) -> dict:
        return normalize_price(raw, QUOTE)
