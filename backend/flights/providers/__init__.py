from django.conf import settings

from flights.providers.base import ProviderError
from flights.providers.travelport import TravelportProvider


def get_flight_provider(**kwargs):
    """Return the configured flight provider instance."""

    raw_name = getattr(settings, "FLIGHTS_PROVIDER", None) or "travelport"
    provider_name = str(raw_name).strip().lower()

    aliases = {
        "travelport": "travelport",
        "tp": "travelport",
        "travelport-jsonapi": "travelport",
    }

    provider_name = aliases.get(provider_name, provider_name)

    if provider_name == "travelport":
        return TravelportProvider(**kwargs)

    if provider_name in ("sabre", "amadeus"):
        raise ProviderError(f"{provider_name.title()} provider is not configured.", status_code=501)

    raise ProviderError(f"Unknown flights provider: {provider_name}", status_code=500)
