from django.test import SimpleTestCase

from flights.airports import AirportDirectory
from flights.services.brands import NOT_OFFERED
from flights.services.normalize import connection_gaps, normalize_catalog_offerings
from flights.services.references import normalize_flight
from flights.tests import payloads

AIRPORTS = AirportDirectory(
    {
        "JFK": {"airport_name": "John F. Kennedy International", "city": "New York", "country_name": "United States"},
        "LHR": {"airport_name": "Heathrow", "city": "London", "country_name": "United Kingdom"},
        "LGW": {"airport_name": "Gatwick", "city": "London", "country_name": "United Kingdom"},
        "DUB": {"airport_name": "Dublin", "city": "Dublin", "country_name": "Ireland"},
    }
)

FLIGHTS = [
    payloads.flight("s1", "JFK", "DUB", "2024-01-10", "18:00:00", "2024-01-11", "05:30:00", carrier="EI"),
    payloads.flight("s2", "DUB", "LHR", "2024-01-11", "07:45:00", "2024-01-11", "09:00:00", carrier="EI"),
    payloads.flight("s3", "JFK", "LHR", "2024-01-10", "21:00:00", "2024-01-11", "09:05:00"),
    payloads.flight("s4", "LHR", "JFK", "2024-01-20", "11:00:00", "2024-01-20", "14:00:00"),
]


def _response(offerings, products=None, brands=None):
    return payloads.catalog_response(
        offerings=offerings,
        references=payloads.reference_list(
            flights=FLIGHTS,
            products=products if products is not None else [payloads.product("p1")],
            brands=brands if brands is not None else [payloads.brand("b1", attributes=[("CarryOn", "Included")])],
            terms=[{"id": "t1"}],
        ),
    )


def _normalize(offerings, **kwargs):
    return normalize_catalog_offerings(
        _response(offerings, **kwargs), payloads.roundtrip_search(), airports=AIRPORTS
    )


class NormalizeCatalogOfferingsTests(SimpleTestCase):
    def test_document_shape(self):
        result = _normalize(
            [payloads.offering("o1", "JFK", "LHR", payloads.brand_options(["s3"], payloads.brand_offering()))]
        )

        self.assertEqual(result["supplier"], "travelport")
        self.assertEqual(result["search_id"], "search-1")
        self.assertEqual(set(result["references"]), {"flights", "products", "brands", "terms"})
        self.assertEqual(len(result["itineraries"]), 1)

        itinerary = result["itineraries"][0]
        self.assertEqual(itinerary["id"], "o1:s3")
        self.assertEqual(itinerary["offer_id"], "o1")
        self.assertEqual(itinerary["search_id"], "search-1")
        self.assertEqual(itinerary["trip_type"], "roundtrip")
        self.assertEqual((itinerary["slice_index"], itinerary["direction"]), (1, "outbound"))
        self.assertEqual(itinerary["flight_refs"], ["s3"])
        self.assertEqual(itinerary["origin_details"]["city"], "New York")
        self.assertEqual(itinerary["destination_details"]["airport_name"], "Heathrow")

        summary = itinerary["summary"]
        self.assertEqual(summary["stops"], 0)
        self.assertTrue(summary["is_direct"])
        self.assertFalse(summary["has_stops"])
        self.assertEqual(summary["stops_details"], {})
        self.assertEqual(summary["duration"], "PT7H")
        self.assertEqual(summary["duration_minutes"], 420)
        self.assertEqual(summary["main_cabin"], "Economy")
        self.assertEqual(summary["main_passenger_type"], "ADT")
        self.assertEqual(summary["departure_time"], "2024-01-10T21:00:00")
        self.assertEqual(summary["arrival_time"], "2024-01-11T09:05:00")

        fare = itinerary["fare_options"][0]
        self.assertEqual(fare["id"], "o1_p1_b1")
        self.assertEqual(fare["terms_ref"], "t1")
        self.assertEqual(fare["combinability_code"], ["CC1"])
        self.assertEqual(fare["flight_additional_details"]["Carry-on baggage"], "Included")
        self.assertEqual(fare["pricing"]["total"], 100)

    def test_same_routing_twice_is_one_itinerary(self):
        options = payloads.brand_options(["s1", "s2"], payloads.brand_offering(total=100))
        result = _normalize([payloads.offering("o1", "JFK", "LHR", options, options)])

        self.assertEqual(len(result["itineraries"]), 1)
        self.assertEqual(len(result["itineraries"][0]["fare_options"]), 2)

    def test_different_routing_or_offer_is_a_new_itinerary(self):
        result = _normalize(
            [
                payloads.offering(
                    "o1",
                    "JFK",
                    "LHR",
                    payloads.brand_options(["s1", "s2"], payloads.brand_offering()),
                    payloads.brand_options(["s3"], payloads.brand_offering()),
                ),
                payloads.offering("o2", "JFK", "LHR", payloads.brand_options(["s3"], payloads.brand_offering())),
            ]
        )

        self.assertEqual([it["id"] for it in result["itineraries"]], ["o1:s1-s2", "o1:s3", "o2:s3"])

    def test_stops_and_connection_gap(self):
        result = _normalize(
            [payloads.offering("o1", "JFK", "LHR", payloads.brand_options(["s1", "s2"], payloads.brand_offering()))]
        )

        summary = result["itineraries"][0]["summary"]
        self.assertEqual(summary["stops"], 1)
        self.assertFalse(summary["is_direct"])
        self.assertTrue(summary["has_stops"])
        self.assertEqual(summary["stops_details"], {"Dublin": "2h 15m"})

    def test_cheapest_price_tie_keeps_first_fare(self):
        options = payloads.brand_options(
            ["s3"],
            payloads.brand_offering(brand_ref="b1", total=120),
            payloads.brand_offering(brand_ref="b2", total=100, price_block=payloads.price(100, taxes=10)),
            payloads.brand_offering(brand_ref="b3", total=100, price_block=payloads.price(100, taxes=30)),
        )
        result = _normalize([payloads.offering("o1", "JFK", "LHR", options)])

        cheapest = result["itineraries"][0]["summary"]["cheapest_price"]
        self.assertEqual(cheapest["total"], 100)
        self.assertEqual(cheapest["taxes"], 10)
        self.assertEqual(cheapest["fare_option_id"], "o1_p1_b2")

    def test_summary_fields_first_non_null_wins(self):
        products = [
            payloads.product("p-none", cabin=None),
            payloads.product("p-eco", cabin="Economy"),
            payloads.product("p-bus", cabin="Business"),
        ]
        options = payloads.brand_options(
            ["s3"],
            payloads.brand_offering(product_ref="p-none"),
            payloads.brand_offering(product_ref="p-eco"),
            payloads.brand_offering(product_ref="p-bus"),
        )
        result = _normalize([payloads.offering("o1", "JFK", "LHR", options)], products=products)

        itinerary = result["itineraries"][0]
        self.assertEqual([fare["cabin"] for fare in itinerary["fare_options"]], [None, "Economy", "Business"])
        self.assertEqual(itinerary["summary"]["main_cabin"], "Economy")

    def test_inbound_offering_matches_second_slice(self):
        result = _normalize(
            [payloads.offering("o2", "LHR", "JFK", payloads.brand_options(["s4"], payloads.brand_offering()))]
        )

        itinerary = result["itineraries"][0]
        self.assertEqual((itinerary["slice_index"], itinerary["direction"]), (2, "inbound"))

    def test_unknown_flight_ref_does_not_raise(self):
        result = _normalize(
            [payloads.offering("o1", "JFK", "LHR", payloads.brand_options(["s1", "missing"], payloads.brand_offering()))]
        )

        summary = result["itineraries"][0]["summary"]
        self.assertEqual(summary["stops"], 1)
        self.assertEqual(summary["stops_details"], {})
        self.assertEqual(summary["departure_time"], "2024-01-10T18:00:00")
        self.assertIsNone(summary["arrival_time"])

    def test_unresolved_brand_is_not_offered(self):
        options = payloads.brand_options(["s3"], payloads.brand_offering(brand_ref="nope"))
        result = _normalize([payloads.offering("o1", "JFK", "LHR", options)])

        details = result["itineraries"][0]["fare_options"][0]["flight_additional_details"]
        self.assertEqual(len(details), 6)
        self.assertEqual(set(details.values()), {NOT_OFFERED})

    def test_unresolved_product_leaves_fields_empty(self):
        options = payloads.brand_options(["s3"], payloads.brand_offering(product_ref="ghost"))
        result = _normalize([payloads.offering("o1", "JFK", "LHR", options)])

        itinerary = result["itineraries"][0]
        self.assertIsNone(itinerary["fare_options"][0]["cabin"])
        self.assertIsNone(itinerary["summary"]["main_cabin"])
        self.assertIsNone(itinerary["summary"]["duration"])
        self.assertIsNone(itinerary["summary"]["duration_minutes"])

    def test_fare_option_id_skips_empty_parts(self):
        offering = payloads.brand_offering()
        del offering["Brand"]
        result = _normalize([payloads.offering("o1", "JFK", "LHR", payloads.brand_options(["s3"], offering))])

        fare = result["itineraries"][0]["fare_options"][0]
        self.assertEqual(fare["id"], "o1_p1")
        self.assertIsNone(fare["brand_ref"])

    def test_zero_offer_id_is_kept_in_ids(self):
        result = _normalize([payloads.offering(0, "JFK", "LHR", payloads.brand_options(["s3"], payloads.brand_offering()))])

        itinerary = result["itineraries"][0]
        self.assertEqual(itinerary["id"], "0:s3")
        self.assertEqual(itinerary["fare_options"][0]["id"], "0_p1_b1")

    def test_missing_flight_time_leaves_summary_time_unset(self):
        flights = [payloads.flight("s1", "JFK", "LHR", "2024-01-10", None, "2024-01-11", "09:05:00")]
        raw = payloads.catalog_response(
            offerings=[payloads.offering("o1", "JFK", "LHR", payloads.brand_options(["s1"], payloads.brand_offering()))],
            references=payloads.reference_list(flights=flights, products=[payloads.product("p1")]),
        )

        summary = normalize_catalog_offerings(raw, payloads.roundtrip_search())["itineraries"][0]["summary"]

        self.assertIsNone(summary["departure_time"])
        self.assertEqual(summary["arrival_time"], "2024-01-11T09:05:00")

    def test_empty_and_malformed_inputs(self):
        self.assertEqual(normalize_catalog_offerings({}, {})["itineraries"], [])
        self.assertEqual(normalize_catalog_offerings(payloads.catalog_response(), {})["itineraries"], [])

        malformed = payloads.catalog_response(
            offerings=[
                "junk",
                {"id": "o1", "ProductBrandOptions": "junk"},
                {"id": "o2", "ProductBrandOptions": [{"flightRefs": None, "ProductBrandOffering": [None, {}]}]},
            ]
        )
        result = normalize_catalog_offerings(malformed, payloads.roundtrip_search())

        self.assertEqual(len(result["itineraries"]), 1)
        itinerary = result["itineraries"][0]
        self.assertEqual(itinerary["id"], "o2:")
        self.assertEqual(itinerary["summary"]["stops"], 0)
        self.assertEqual(itinerary["direction"], "unknown")
        self.assertEqual(itinerary["fare_options"][0]["pricing"]["total"], 0)
        self.assertIsNone(itinerary["summary"]["cheapest_price"]["currency"])

    def test_root_level_offerings(self):
        raw = {
            "CatalogProductOfferings": {
                "Identifier": {"value": "root-search"},
                "CatalogProductOffering": [
                    payloads.offering("o1", "JFK", "LHR", payloads.brand_options(["s3"], payloads.brand_offering()))
                ],
            },
            "ReferenceList": payloads.reference_list(flights=FLIGHTS, products=[payloads.product("p1")]),
        }

        result = normalize_catalog_offerings(raw, payloads.roundtrip_search(), supplier="travelport")

        self.assertEqual(result["search_id"], "root-search")
        self.assertEqual(result["itineraries"][0]["summary"]["main_cabin"], "Economy")


class ConnectionGapsTests(SimpleTestCase):
    def _flights(self, *records):
        return {record["id"]: normalize_flight(record) for record in records}

    def test_same_city_twice_overwrites(self):
        flights = self._flights(
            payloads.flight("a", "JFK", "LHR", "2024-01-10", "08:00:00", "2024-01-10", "20:00:00"),
            payloads.flight("b", "LHR", "DUB", "2024-01-10", "21:00:00", "2024-01-10", "22:00:00"),
            payloads.flight("c", "DUB", "LGW", "2024-01-11", "06:00:00", "2024-01-11", "07:00:00"),
            payloads.flight("d", "LGW", "JFK", "2024-01-11", "07:30:00", "2024-01-11", "10:00:00"),
        )

        gaps = connection_gaps(["a", "b", "c", "d"], flights, AIRPORTS)

        self.assertEqual(gaps, {"London": "30m", "Dublin": "8h 0m"})

    def test_unknown_city_uses_airport_code(self):
        flights = self._flights(
            payloads.flight("a", "JFK", "KEF", "2024-01-10", "08:00:00", "2024-01-10", "16:00:00"),
            payloads.flight("b", "KEF", "LHR", "2024-01-12", "17:00:00", "2024-01-12", "20:00:00"),
        )

        self.assertEqual(connection_gaps(["a", "b"], flights, AIRPORTS), {"KEF": "2d 1h"})

    def test_unparsable_pair_is_skipped(self):
        flights = self._flights(
            payloads.flight("a", "JFK", "DUB", "2024-01-10", "08:00:00", "bad-date", "16:00:00"),
            payloads.flight("b", "DUB", "LHR", "2024-01-11", "07:00:00", "2024-01-11", "08:00:00"),
            payloads.flight("c", "LHR", "JFK", "2024-01-11", "09:00:00", "2024-01-11", "12:00:00"),
        )

        self.assertEqual(connection_gaps(["a", "b", "c"], flights, AIRPORTS), {"London": "1h 0m"})

    def test_missing_arrival_time_is_skipped(self):
        flights = self._flights(
            payloads.flight("a", "JFK", "DUB", "2024-01-10", "08:00:00", "2024-01-10", None),
            payloads.flight("b", "DUB", "LHR", "2024-01-11", "07:00:00", "2024-01-11", "08:00:00"),
        )

        self.assertEqual(connection_gaps(["a", "b"], flights, AIRPORTS), {})

    def test_missing_connecting_airport_is_skipped(self):
        first = payloads.flight("a", "JFK", "DUB", "2024-01-10", "08:00:00", "2024-01-10", "16:00:00")
        first["Arrival"]["location"] = None
        flights = self._flights(
            first,
            payloads.flight("b", "DUB", "LHR", "2024-01-11", "07:00:00", "2024-01-11", "08:00:00"),
        )

        self.assertEqual(connection_gaps(["a", "b"], flights, AIRPORTS), {})
