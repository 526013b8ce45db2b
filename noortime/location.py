"""Location detection using IP geolocation and manual config."""

import json
import logging
import os
from dataclasses import asdict, dataclass
from typing import Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float
    name: Optional[str] = None
    timezone: Optional[str] = None

    @property
    def label(self) -> str:
        if self.name:
            return self.name
        return f"{self.latitude:.4f}, {self.longitude:.4f}"


DEFAULT_LOCATION = Coordinate(
    latitude=51.5074,
    longitude=-0.1278,
    name="London, GB",
    timezone="Europe/London",
)

IPAPI_URL = "http://ip-api.com/json/"

CONFIG_DIR = os.environ.get("NOORTIME_HOME", os.path.join(os.path.expanduser("~"), ".noortime"))
CONFIG_FILE = os.path.join(CONFIG_DIR, "location.json")


def get_location(timeout: int = 5) -> Coordinate:
    """
    Detect current location via IP geolocation.

    Falls back to DEFAULT_LOCATION when the lookup fails or is refused;
    callers never see an error from here.
    """
    try:
        resp = requests.get(
            IPAPI_URL,
            params={"fields": "city,countryCode,lat,lon,timezone,status,message"},
            timeout=timeout,
        )
        resp.raise_for_status()
        data = resp.json()
        if data.get("status") == "success":
            city = data.get("city")
            country = data.get("countryCode")
            name = ", ".join(part for part in (city, country) if part) or None
            return Coordinate(
                latitude=float(data["lat"]),
                longitude=float(data["lon"]),
                name=name,
                timezone=data.get("timezone"),
            )
        logger.warning("Geolocation refused: %s", data.get("message", "unknown reason"))
    except (requests.RequestException, ValueError, KeyError, TypeError) as exc:
        logger.warning("Geolocation unavailable: %s", exc)
    logger.info("Using default location %s", DEFAULT_LOCATION.label)
    return DEFAULT_LOCATION


def save_manual_location(location: Coordinate) -> None:
    """Save a manually-set location to the config file."""
    os.makedirs(CONFIG_DIR, exist_ok=True)
    with open(CONFIG_FILE, "w", encoding="utf-8") as f:
        json.dump(asdict(location), f, indent=2)


def load_manual_location() -> Coordinate | None:
    """Load a previously saved manual location, or return None."""
    if not os.path.isfile(CONFIG_FILE):
        return None
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
        return Coordinate(
            latitude=float(data["latitude"]),
            longitude=float(data["longitude"]),
            name=data.get("name"),
            timezone=data.get("timezone"),
        )
    except (OSError, ValueError, KeyError, TypeError) as exc:
        logger.warning("Ignoring unreadable manual location %s: %s", CONFIG_FILE, exc)
    return None


def clear_manual_location() -> None:
    """Remove the saved manual location config."""
    if os.path.isfile(CONFIG_FILE):
        os.remove(CONFIG_FILE)


def resolve_location() -> Coordinate:
    """Manual override if one is saved, otherwise the detected location."""
    manual = load_manual_location()
    if manual is not None:
        return manual
    return get_location()
