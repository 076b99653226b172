import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError

from flights.airports import AirportDirectory, load_airport_directory
from flights.providers import get_flight_provider
from flights.providers.base import ProviderError


def _read_json(path, label):
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise CommandError(f"Cannot read {label} file {path}: {exc}")
    except ValueError as exc:
        raise CommandError(f"{label.capitalize()} file {path} is not valid JSON: {exc}")


class Command(BaseCommand):
    help = "Normalize a saved supplier search (or quote) response into canonical itineraries"

    def add_arguments(self, parser):
        parser.add_argument("response", help="Supplier response JSON file")
        parser.add_argument("--search", help="Search request JSON file")
        parser.add_argument("--airports", help="Airport dataset JSON file (defaults to AIRPORTS_DATA_URL)")
        parser.add_argument("--quote", action="store_true", help="Treat the response as a price quote")
        parser.add_argument("--indent", type=int, default=2)

    def handle(self, *args, **options):
        raw = _read_json(options["response"], "response")

        if options["airports"]:
            airports = AirportDirectory.from_dataset(_read_json(options["airports"], "airports"))
        else:
            airports = load_airport_directory()

        try:
            provider = get_flight_provider(airports=airports)
        except ProviderError as exc:
            raise CommandError(str(exc))

        if options["quote"]:
            result = provider.price_quote(raw)
        else:
            if not options["search"]:
                raise CommandError("--search is required unless --quote is given.")
            search = _read_json(options["search"], "search")
            if not isinstance(search, dict):
                raise CommandError("Search file must contain a JSON object.")
            result = provider.transform_to_common(raw, search)

        self.stdout.write(json.dumps(result, indent=options["indent"]))
