import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.environ.get("DJANGO_SECRET_KEY", "dev-only-not-secret")
DEBUG = os.environ.get("DJANGO_DEBUG", "1") == "1"
ALLOWED_HOSTS = [h for h in os.environ.get("DJANGO_ALLOWED_HOSTS", "").split(",") if h]

INSTALLED_APPS = [
    "flights",
]

DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",
        "NAME": BASE_DIR / "db.sqlite3",
    }
}

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "flights",
    }
}

USE_TZ = True
TIME_ZONE = "UTC"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# --- Flights ---
FLIGHTS_PROVIDER = os.environ.get("FLIGHTS_PROVIDER", "travelport")

# Optional airports.json style dataset (code -> airport_name/city/country)
AIRPORTS_DATA_URL = os.environ.get("AIRPORTS_DATA_URL") or None
AIRPORTS_CACHE_TTL = int(os.environ.get("AIRPORTS_CACHE_TTL", 60 * 60 * 24))

TRAVELPORT_OFFERS_PER_PAGE = int(os.environ.get("TRAVELPORT_OFFERS_PER_PAGE", 15))
TRAVELPORT_MAX_UPSELLS = int(os.environ.get("TRAVELPORT_MAX_UPSELLS", 4))
TRAVELPORT_CONTENT_SOURCES = [
    s.strip() for s in os.environ.get("TRAVELPORT_CONTENT_SOURCES", "GDS").split(",") if s.strip()
]

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "simple": {"format": "%(asctime)s %(levelname)s %(name)s: %(message)s"},
    },
    "handlers": {
        "console": {"class": "logging.StreamHandler", "formatter": "simple"},
    },
    "loggers": {
        "flights": {
            "handlers": ["console"],
            "level": os.environ.get("FLIGHTS_LOG_LEVEL", "INFO"),
        },
    },
}
