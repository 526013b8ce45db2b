"""Per-day prayer completion records and the ordered history that holds them."""

import datetime
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from noortime.prayer_api import PRAYER_NAMES


def day_key(day: datetime.date) -> str:
    """Calendar-day key used in history, e.g. 'Mon Oct 19 2026'."""
    return day.strftime("%a %b %d %Y")


def _blank_prayers() -> Dict[str, bool]:
    return {name: False for name in PRAYER_NAMES}


@dataclass
class DailyProgress:
    date: str
    prayers: Dict[str, bool] = field(default_factory=_blank_prayers)

    def completed(self) -> List[str]:
        """Names of performed prayers, in prayer order."""
        return [name for name in PRAYER_NAMES if self.prayers.get(name)]

    @property
    def count(self) -> int:
        return len(self.completed())

    def toggled(self, prayer: str) -> "DailyProgress":
        """Copy of this record with one prayer flag flipped."""
        if prayer not in PRAYER_NAMES:
            raise ValueError(f"Unknown prayer: {prayer!r}")
        prayers = dict(self.prayers)
        prayers[prayer] = not prayers.get(prayer, False)
        return DailyProgress(date=self.date, prayers=prayers)

    def to_dict(self) -> dict:
        return {"date": self.date, "prayers": dict(self.prayers)}

    @classmethod
    def from_dict(cls, data: dict) -> "DailyProgress":
        raw = data.get("prayers") or {}
        prayers = {name: bool(raw.get(name, False)) for name in PRAYER_NAMES}
        return cls(date=str(data["date"]), prayers=prayers)


class ProgressHistory:
    """
    One DailyProgress per day key, in the order days were first recorded.

    Reads never mutate: get_or_create hands back a fresh blank record for an
    unseen day, and the day only joins the history on its first toggle.
    """

    def __init__(self, records=None):
        self._records: Dict[str, DailyProgress] = {}
        for record in records or []:
            self.upsert(record)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DailyProgress]:
        return iter(list(self._records.values()))

    def __contains__(self, key: str) -> bool:
        return key in self._records

    def __eq__(self, other) -> bool:
        if not isinstance(other, ProgressHistory):
            return NotImplemented
        return list(self._records.items()) == list(other._records.items())

    def __repr__(self) -> str:
        return f"ProgressHistory({list(self._records.values())!r})"

    def get(self, key: str) -> DailyProgress | None:
        return self._records.get(key)

    def get_or_create(self, key: str) -> DailyProgress:
        existing = self._records.get(key)
        if existing is not None:
            return existing
        return DailyProgress(date=key)

    def upsert(self, record: DailyProgress) -> None:
        """Replace the record for record.date in place, or append it for a new day."""
        self._records[record.date] = record

    def toggle(self, key: str, prayer: str) -> DailyProgress:
        updated = self.get_or_create(key).toggled(prayer)
        self.upsert(updated)
        return updated

    def recent(self, n: int) -> List[DailyProgress]:
        """Last n records, oldest first."""
        if n <= 0:
            return []
        return list(self._records.values())[-n:]

    def weekly_counts(self) -> List[Tuple[str, int]]:
        return [(record.date, record.count) for record in self.recent(7)]

    def to_list(self) -> List[dict]:
        return [record.to_dict() for record in self._records.values()]

    @classmethod
    def from_list(cls, items) -> "ProgressHistory":
        return cls(DailyProgress.from_dict(item) for item in items)
