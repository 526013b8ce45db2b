"""User profile and its persistence in a local JSON key-value file."""

import json
import logging
import os
from dataclasses import dataclass, field

from noortime.prayer_api import DEFAULT_METHOD, DEFAULT_SCHOOL
from noortime.progress import ProgressHistory

logger = logging.getLogger(__name__)

CONFIG_DIR = os.environ.get("NOORTIME_HOME", os.path.join(os.path.expanduser("~"), ".noortime"))
STORE_FILE = os.path.join(CONFIG_DIR, "store.json")
STORAGE_KEY = "noortime_profile"


@dataclass
class Profile:
    name: str = "Guest"
    calculation_method: int = DEFAULT_METHOD
    school: int = DEFAULT_SCHOOL
    notifications_enabled: bool = True
    history: ProgressHistory = field(default_factory=ProgressHistory)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "calculation_method": self.calculation_method,
            "school": self.school,
            "notifications_enabled": self.notifications_enabled,
            "history": self.history.to_list(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Profile":
        return cls(
            name=str(data.get("name", "Guest")),
            calculation_method=int(data.get("calculation_method", DEFAULT_METHOD)),
            school=int(data.get("school", DEFAULT_SCHOOL)),
            notifications_enabled=bool(data.get("notifications_enabled", True)),
            history=ProgressHistory.from_list(data.get("history") or []),
        )


class ProfileStore:
    """
    Opaque key-value store backed by one JSON file. The profile is a single
    record under STORAGE_KEY; other keys in the file are left alone.
    """

    def __init__(self, path: str = None):
        self.path = path or STORE_FILE

    def _read_all(self) -> dict:
        if not os.path.isfile(self.path):
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError("store root must be an object")
        return data

    def load(self) -> Profile:
        """Saved profile, or a default one when nothing usable is stored."""
        try:
            record = self._read_all().get(STORAGE_KEY)
            if record is None:
                logger.info("No saved profile in %s, starting fresh", self.path)
                return Profile()
            return Profile.from_dict(record)
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.warning("Could not read profile from %s: %s", self.path, exc)
            return Profile()

    def save(self, profile: Profile) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError) as exc:
            logger.warning("Overwriting unreadable store %s: %s", self.path, exc)
            data = {}
        data[STORAGE_KEY] = profile.to_dict()

        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = self.path + ".tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self.path)
        logger.debug("Saved profile to %s", self.path)
