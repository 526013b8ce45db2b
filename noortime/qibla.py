"""Qibla bearing toward the Kaaba and compass helpers."""

import math

KAABA_LAT = 21.4225
KAABA_LON = 39.8262

COMPASS_POINTS = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def calculate_qibla(lat: float, lon: float) -> float:
    """
    Return the initial great-circle bearing from (lat, lon) to the Kaaba,
    in degrees clockwise from true north, normalised to [0, 360).

    Undefined exactly at the poles and at the Kaaba itself.
    """
    phi1 = math.radians(lat)
    phi2 = math.radians(KAABA_LAT)
    delta_lambda = math.radians(KAABA_LON - lon)

    y = math.sin(delta_lambda)
    x = math.cos(phi1) * math.tan(phi2) - math.sin(phi1) * math.cos(delta_lambda)
    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def relative_bearing(qibla: float, heading: float) -> float:
    """Angle to turn from the device heading to face the qibla, in [0, 360)."""
    return (qibla - heading + 360) % 360


def compass_point(bearing: float) -> str:
    """16-wind compass label for a bearing, e.g. 118.9 -> 'ESE'."""
    index = int((bearing % 360) / 22.5 + 0.5) % 16
    return COMPASS_POINTS[index]
