from flights.services.lookup import dicts

NOT_OFFERED = "Not Offered"

# Display category -> supplier classification code. Closed set: a new
# category needs a new entry here.
BRAND_ATTRIBUTE_CATEGORIES = {
    "Carry-on baggage": "CarryOn",
    "Check-in baggage": "CheckedBag",
    "Seat Selection": "SeatAssignment",
    "Meal": "Meals",
    "Modification": "Rebooking",
    "Cancellation": "Refund",
}


def brand_attributes(brand) -> list[dict]:
    if not isinstance(brand, dict):
        return []
    return dicts(brand.get("BrandAttribute")) + dicts(brand.get("AdditionalBrandAttribute"))


def map_brand_attributes(brand, categories: dict = BRAND_ATTRIBUTE_CATEGORIES) -> dict:
    attributes = brand_attributes(brand)

    details = {}
    for label, classification in categories.items():
        matches = [attr for attr in attributes if attr.get("classification") == classification]
        inclusion = matches[0].get("inclusion") if matches else None
        details[label] = inclusion or NOT_OFFERED
    return details
