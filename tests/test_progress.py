"""Tests for the progress module."""

import datetime
import unittest

from noortime.progress import DailyProgress, ProgressHistory, day_key


def _record(date, *done):
    record = DailyProgress(date=date)
    for name in done:
        record.prayers[name] = True
    return record


class TestDayKey(unittest.TestCase):
    def test_format(self):
        self.assertEqual(day_key(datetime.date(2026, 10, 19)), "Mon Oct 19 2026")
        self.assertEqual(day_key(datetime.date(2026, 3, 5)), "Thu Mar 05 2026")


class TestDailyProgress(unittest.TestCase):
    def test_new_record_all_false(self):
        record = DailyProgress(date="Mon Oct 19 2026")
        self.assertEqual(set(record.prayers), {"Fajr", "Dhuhr", "Asr", "Maghrib", "Isha"})
        self.assertFalse(any(record.prayers.values()))
        self.assertEqual(record.count, 0)

    def test_completed_in_prayer_order(self):
        record = _record("d", "Isha", "Fajr", "Asr")
        self.assertEqual(record.completed(), ["Fajr", "Asr", "Isha"])
        self.assertEqual(record.count, 3)

    def test_toggled_returns_copy(self):
        record = DailyProgress(date="d")
        flipped = record.toggled("Dhuhr")
        self.assertTrue(flipped.prayers["Dhuhr"])
        self.assertFalse(record.prayers["Dhuhr"])

    def test_toggled_rejects_unknown_prayer(self):
        with self.assertRaises(ValueError):
            DailyProgress(date="d").toggled("Sunrise")

    def test_from_dict_fills_missing_and_drops_unknown(self):
        record = DailyProgress.from_dict({"date": "d", "prayers": {"Fajr": True, "Tahajjud": True}})
        self.assertEqual(record.completed(), ["Fajr"])
        self.assertNotIn("Tahajjud", record.prayers)


class TestProgressHistory(unittest.TestCase):
    def test_get_or_create_does_not_mutate(self):
        history = ProgressHistory()
        record = history.get_or_create("Mon Oct 19 2026")
        self.assertEqual(record.count, 0)
        self.assertEqual(len(history), 0)

    def test_get_or_create_returns_existing(self):
        history = ProgressHistory([_record("a", "Fajr")])
        self.assertEqual(history.get_or_create("a").completed(), ["Fajr"])

    def test_toggle_new_date_creates_one_record(self):
        history = ProgressHistory()
        history.toggle("Mon Oct 19 2026", "Asr")

        self.assertEqual(len(history), 1)
        record = history.get("Mon Oct 19 2026")
        self.assertEqual(record.completed(), ["Asr"])

    def test_toggle_twice_restores(self):
        history = ProgressHistory()
        history.toggle("a", "Maghrib")
        history.toggle("a", "Maghrib")
        self.assertFalse(history.get("a").prayers["Maghrib"])
        self.assertEqual(len(history), 1)

    def test_never_duplicates_day(self):
        history = ProgressHistory()
        for day, prayer in [("a", "Fajr"), ("b", "Fajr"), ("a", "Dhuhr"), ("a", "Fajr"), ("b", "Isha")]:
            history.toggle(day, prayer)
        dates = [record.date for record in history]
        self.assertEqual(len(dates), len(set(dates)))
        self.assertEqual(history.get("a").completed(), ["Dhuhr"])

    def test_upsert_updates_existing_day_in_place(self):
        history = ProgressHistory([_record("a"), _record("b")])
        history.toggle("a", "Fajr")
        self.assertEqual([record.date for record in history], ["a", "b"])
        self.assertTrue(history.get("a").prayers["Fajr"])

    def test_upsert_appends_new_day(self):
        history = ProgressHistory([_record("a")])
        history.upsert(_record("b", "Isha"))
        self.assertEqual([record.date for record in history], ["a", "b"])

    def test_recent_slices_oldest_first(self):
        history = ProgressHistory([_record(d) for d in "abcdefghi"])
        self.assertEqual([r.date for r in history.recent(3)], ["g", "h", "i"])

    def test_recent_shorter_history_returned_whole(self):
        history = ProgressHistory([_record("a"), _record("b")])
        self.assertEqual([r.date for r in history.recent(5)], ["a", "b"])
        self.assertEqual(len(history), 2)

    def test_recent_zero(self):
        history = ProgressHistory([_record("a")])
        self.assertEqual(history.recent(0), [])

    def test_weekly_counts(self):
        records = [_record(str(i), "Fajr") for i in range(9)]
        records.append(_record("today", "Fajr", "Dhuhr", "Asr", "Maghrib", "Isha"))
        counts = ProgressHistory(records).weekly_counts()
        self.assertEqual(len(counts), 7)
        self.assertEqual(counts[-1], ("today", 5))
        self.assertEqual(counts[0], ("3", 1))

    def test_from_list_collapses_duplicate_days(self):
        history = ProgressHistory.from_list([
            {"date": "a", "prayers": {"Fajr": True}},
            {"date": "b", "prayers": {}},
            {"date": "a", "prayers": {"Isha": True}},
        ])
        self.assertEqual(len(history), 2)
        self.assertEqual(history.get("a").completed(), ["Isha"])

    def test_list_round_trip(self):
        history = ProgressHistory([_record("a", "Fajr"), _record("b", "Asr", "Isha")])
        self.assertEqual(ProgressHistory.from_list(history.to_list()), history)


if __name__ == "__main__":
    unittest.main()
