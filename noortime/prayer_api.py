"""Fetch prayer times and Hijri date from the Aladhan API."""

import datetime
import logging
import time

import requests

logger = logging.getLogger(__name__)

ALADHAN_BASE = "https://api.aladhan.com/v1"

# The five obligatory prayers, in chronological order
PRAYER_NAMES = ["Fajr", "Dhuhr", "Asr", "Maghrib", "Isha"]
SCHEDULE_NAMES = ["Fajr", "Sunrise", "Dhuhr", "Asr", "Maghrib", "Isha"]
AUXILIARY_NAMES = ["Imsak", "Midnight"]

PRAYER_METHODS = {
    2: "ISNA (North America)",
    3: "Muslim World League",
    4: "Umm al-Qura (Makkah)",
    5: "Egyptian General Authority",
    1: "University of Islamic Sciences, Karachi",
    8: "Gulf Region",
    9: "Kuwait",
    10: "Qatar",
    11: "Majlis Ugama Islam Singapura",
    12: "Union des Organisations Islamiques de France",
}

# School only moves Asr: Hanafi uses a shadow length of two
SCHOOLS = {
    0: "Shafi / Hanbali / Maliki",
    1: "Hanafi",
}

DEFAULT_METHOD = 2
DEFAULT_SCHOOL = 0


class PrayerFetchError(Exception):
    """The timing service could not produce a schedule."""


def fetch_prayer_times(
    lat: float,
    lon: float,
    method: int = DEFAULT_METHOD,
    school: int = DEFAULT_SCHOOL,
    timestamp: int = None,
    timeout: int = 10,
) -> dict:
    """
    Fetch prayer times and Hijri date for given coordinates at a unix time.

    Returns a dict with:
        timings: {prayer_name: "HH:MM"} for Fajr..Isha plus Sunrise and any
                 auxiliary marks the service sent
        hijri: {day, month_name, month_ar, year}
        gregorian: {date_str, weekday}
        timezone: IANA zone name of the coordinates, or None
    Raises PrayerFetchError on any failure. There is no retry.
    """
    if timestamp is None:
        timestamp = int(time.time())
    url = f"{ALADHAN_BASE}/timings/{timestamp}"
    params = {
        "latitude": lat,
        "longitude": lon,
        "method": method,
        "school": school,
    }
    try:
        resp = requests.get(url, params=params, timeout=timeout)
        resp.raise_for_status()
        body = resp.json()
    except (requests.RequestException, ValueError) as exc:
        raise PrayerFetchError(f"Aladhan request failed: {exc}") from exc

    if not isinstance(body, dict) or body.get("code") != 200:
        status = body.get("status") if isinstance(body, dict) else body
        raise PrayerFetchError(f"Aladhan API error: {status}")

    try:
        return _parse_timings_payload(body["data"])
    except (KeyError, TypeError, AttributeError) as exc:
        raise PrayerFetchError(f"Malformed Aladhan response: missing {exc}") from exc


def _parse_timings_payload(data: dict) -> dict:
    raw_timings = data["timings"]

    # "HH:MM", dropping suffixes like " (BST)"
    timings = {}
    for name in SCHEDULE_NAMES:
        timings[name] = raw_timings[name][:5]
    for name in AUXILIARY_NAMES:
        if name in raw_timings:
            timings[name] = raw_timings[name][:5]

    hijri_data = data["date"]["hijri"]
    hijri = {
        "day": hijri_data["day"],
        "month_name": hijri_data["month"]["en"],
        "month_ar": hijri_data["month"].get("ar", ""),
        "year": hijri_data["year"],
    }

    greg_data = data["date"].get("gregorian", {})
    gregorian = {
        "date_str": greg_data.get("date", ""),
        "weekday": greg_data.get("weekday", {}).get("en", ""),
    }

    timezone = data.get("meta", {}).get("timezone")
    logger.debug("Parsed schedule %s (%s)", timings, timezone)
    return {"timings": timings, "hijri": hijri, "gregorian": gregorian, "timezone": timezone}


def _minutes_of_day(time_str: str) -> int:
    hour, minute = map(int, time_str[:5].split(":"))
    return hour * 60 + minute


def get_next_prayer(timings: dict, now) -> str:
    """
    Name of the first prayer whose time is strictly after `now` (anything
    with .hour and .minute). A prayer at exactly the current minute counts
    as past. After Isha the answer is tomorrow's Fajr.
    """
    current = now.hour * 60 + now.minute
    for name in PRAYER_NAMES:
        if _minutes_of_day(timings[name]) > current:
            return name
    return PRAYER_NAMES[0]


def next_prayer_dt(timings: dict, name: str, now: datetime.datetime) -> datetime.datetime:
    """When `name` next occurs, using today's time and rolling to tomorrow if it has passed."""
    hour, minute = map(int, timings[name][:5].split(":"))
    wall_time = datetime.time(hour, minute)
    day = now.date()
    while True:
        naive = datetime.datetime.combine(day, wall_time)
        # pytz zones need localize() to pick the UTC offset valid on that date
        if hasattr(now.tzinfo, "localize"):
            prayer_dt = now.tzinfo.localize(naive)
        elif now.tzinfo is not None:
            prayer_dt = naive.replace(tzinfo=now.tzinfo)
        else:
            prayer_dt = naive
        if prayer_dt > now:
            return prayer_dt
        day += datetime.timedelta(days=1)


def seconds_until(target_dt: datetime.datetime, now: datetime.datetime = None) -> int:
    """Return seconds from now until target_dt (can be negative if past)."""
    if now is None:
        now = datetime.datetime.now(target_dt.tzinfo)
    delta = target_dt - now
    return int(delta.total_seconds())
