"""
The running session: owns the profile, current location, fetched schedule
and guidance, and saves the profile after every change.
"""

import datetime
import logging
import threading
from typing import Callable, List, Optional

import pytz

from noortime.guidance import Recommendation, get_personalized_guidance
from noortime.location import Coordinate
from noortime.prayer_api import (
    PrayerFetchError,
    fetch_prayer_times,
    get_next_prayer,
    next_prayer_dt,
    seconds_until,
)
from noortime.profile import Profile, ProfileStore
from noortime.progress import DailyProgress, day_key
from noortime.qibla import calculate_qibla, relative_bearing
from noortime.sensors import LatestValue

logger = logging.getLogger(__name__)

FALLBACK_PRAYER = "Dhuhr"


def _wall_clock(tz) -> datetime.datetime:
    return datetime.datetime.now(tz) if tz else datetime.datetime.now()


class Session:
    def __init__(
        self,
        store: ProfileStore = None,
        fetcher: Callable = fetch_prayer_times,
        advisor: Callable = get_personalized_guidance,
        now: Callable = _wall_clock,
    ):
        self.store = store or ProfileStore()
        self.profile: Profile = self.store.load()
        self.location = LatestValue()
        self.heading = LatestValue(0.0)
        self.schedule: Optional[dict] = None
        self.recommendations: List[Recommendation] = []

        self._fetcher = fetcher
        self._advisor = advisor
        self._now = now
        self._lock = threading.Lock()
        self._schedule_seq = 0
        self._guidance_busy = False
        self._day_seen: Optional[str] = None

    # ── location & schedule ─────────────────────────────────────────────
    def set_location(self, coord: Coordinate) -> None:
        logger.info("Location set to %s", coord.label)
        self.location.publish(coord)

    def refresh_schedule(self) -> Optional[dict]:
        """
        Fetch today's schedule for the current location and settings.

        Every call supersedes earlier ones: a response is applied only if no
        newer refresh started while it was in flight. Returns the applied
        schedule, or None when it failed or was superseded.
        """
        coord = self.location.value
        if coord is None:
            logger.debug("No location yet, skipping schedule fetch")
            return None

        with self._lock:
            self._schedule_seq += 1
            seq = self._schedule_seq
        method = self.profile.calculation_method
        school = self.profile.school

        try:
            result = self._fetcher(coord.latitude, coord.longitude, method, school)
        except PrayerFetchError as exc:
            logger.error("Prayer times unavailable: %s", exc)
            result = None

        with self._lock:
            if seq != self._schedule_seq:
                logger.debug("Discarding stale schedule #%d (latest #%d)", seq, self._schedule_seq)
                return None
            self.schedule = result
        return result

    def timezone(self):
        """pytz zone of the schedule (or the location), None for local time."""
        names = []
        if self.schedule:
            names.append(self.schedule.get("timezone"))
        if self.location.value is not None:
            names.append(self.location.value.timezone)
        for name in names:
            if not name:
                continue
            try:
                return pytz.timezone(name)
            except pytz.UnknownTimeZoneError:
                logger.warning("Unknown time zone %r", name)
        return None

    def current_time(self) -> datetime.datetime:
        return self._now(self.timezone())

    def next_prayer(self) -> Optional[str]:
        if not self.schedule:
            return None
        return get_next_prayer(self.schedule["timings"], self.current_time())

    def next_prayer_countdown(self) -> Optional[tuple]:
        """(name, seconds until it) or None without a schedule."""
        name = self.next_prayer()
        if name is None:
            return None
        now = self.current_time()
        target = next_prayer_dt(self.schedule["timings"], name, now)
        return name, seconds_until(target, now)

    # ── settings ───────────────────────────────────────────────────────
    def update_settings(
        self,
        name: str = None,
        calculation_method: int = None,
        school: int = None,
        notifications_enabled: bool = None,
    ) -> bool:
        """Apply and save settings. True when the schedule needs refetching."""
        profile = self.profile
        timing_changed = False
        if name is not None:
            profile.name = name.strip() or "Guest"
        if calculation_method is not None and calculation_method != profile.calculation_method:
            profile.calculation_method = calculation_method
            timing_changed = True
        if school is not None and school != profile.school:
            profile.school = school
            timing_changed = True
        if notifications_enabled is not None:
            profile.notifications_enabled = notifications_enabled
        self.store.save(profile)
        return timing_changed

    # ── daily progress ─────────────────────────────────────────────────
    def today_key(self) -> str:
        return day_key(self.current_time().date())

    def today_progress(self) -> DailyProgress:
        return self.profile.history.get_or_create(self.today_key())

    def day_changed(self) -> bool:
        """True once per calendar-day change since the previous call (first call primes it)."""
        key = self.today_key()
        previous, self._day_seen = self._day_seen, key
        return previous is not None and previous != key

    def recent_days(self, n: int = 5) -> List[DailyProgress]:
        """Last n recorded days, newest first."""
        return list(reversed(self.profile.history.recent(n)))

    def toggle_prayer(self, prayer: str, day: str = None) -> DailyProgress:
        record = self.profile.history.toggle(day or self.today_key(), prayer)
        self.store.save(self.profile)
        logger.info("%s %s on %s", prayer, "done" if record.prayers[prayer] else "undone", record.date)
        return record

    # ── guidance ───────────────────────────────────────────────────────
    def wants_guidance(self) -> bool:
        """Whether entering the guidance view should trigger a request."""
        return not self.recommendations and not self._guidance_busy

    def insight(self) -> Optional[Recommendation]:
        """Headline recommendation for the Today banner, if any is held."""
        return self.recommendations[0] if self.recommendations else None

    @property
    def guidance_busy(self) -> bool:
        return self._guidance_busy

    def load_guidance(self) -> Optional[List[Recommendation]]:
        """
        Request fresh guidance unless a request is already outstanding, in
        which case nothing is sent and None is returned.
        """
        with self._lock:
            if self._guidance_busy:
                return None
            self._guidance_busy = True
        try:
            recommendations = self._advisor(
                list(self.profile.history),
                self.next_prayer() or FALLBACK_PRAYER,
                self.profile.name,
            )
            self.recommendations = recommendations
            return recommendations
        finally:
            with self._lock:
                self._guidance_busy = False

    # ── qibla ──────────────────────────────────────────────────────────
    def qibla_bearing(self) -> Optional[float]:
        coord = self.location.value
        if coord is None:
            return None
        return calculate_qibla(coord.latitude, coord.longitude)

    def qibla_pointer(self) -> Optional[float]:
        """Pointer rotation for the latest device heading."""
        bearing = self.qibla_bearing()
        if bearing is None:
            return None
        return relative_bearing(bearing, self.heading.value or 0.0)
