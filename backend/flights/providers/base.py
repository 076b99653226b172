class ProviderError(Exception):
    def __init__(self, message, status_code=502, details=None):
        super().__init__(message)
        self.status_code = status_code
        self.details = details or {}


class FlightProvider:
    code = None

    def search_flights(self, params):
        """
        Returns the canonical itinerary document for a search.
        """
        raise NotImplementedError

    def transform_to_common(self, raw, search):
        """
        Converts a raw supplier response into the canonical itinerary document.
        """
        raise NotImplementedError
