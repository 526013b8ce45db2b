"""Tests for the guidance module."""

import json
import unittest
from unittest.mock import MagicMock, patch

from noortime.guidance import (
    GUIDANCE_MODEL,
    RESPONSE_SCHEMA,
    Recommendation,
    build_prompt,
    get_personalized_guidance,
    parse_recommendations,
    summarize_history,
)
from noortime.progress import DailyProgress

REPLY = [
    {
        "type": "dua",
        "title": "Dua before Asr",
        "content": "Ask for steadfastness.",
        "arabic": "رَبِّ اجْعَلْنِي مُقِيمَ الصَّلَاةِ",
        "translation": "My Lord, make me an establisher of prayer.",
        "source": "Quran 14:40",
        "reasoning": "Asr was missed yesterday.",
    },
    {
        "type": "verse",
        "title": "On patience",
        "content": "Seek help through patience and prayer.",
        "source": "Quran 2:45",
        "reasoning": "Encouragement after a mixed week.",
    },
    {
        "type": "habit",
        "title": "Set an Asr alarm",
        "content": "Put a reminder ten minutes before Asr.",
        "reasoning": "Asr is the most often missed prayer.",
    },
]


def _day(date, *done):
    record = DailyProgress(date=date)
    for name in done:
        record.prayers[name] = True
    return record


HISTORY = [
    _day("Thu Oct 15 2026", "Fajr"),
    _day("Fri Oct 16 2026", "Fajr", "Dhuhr"),
    _day("Sat Oct 17 2026"),
    _day("Sun Oct 18 2026", "Fajr", "Dhuhr", "Maghrib", "Isha"),
]


def _client_replying(text):
    client = MagicMock()
    client.models.generate_content.return_value = MagicMock(text=text)
    return client


class TestBuildPrompt(unittest.TestCase):
    def test_summarizes_last_three_days(self):
        summary = summarize_history(HISTORY)
        self.assertNotIn("Oct 15", summary)
        self.assertEqual(
            summary.splitlines(),
            [
                "Fri Oct 16 2026: Fajr, Dhuhr",
                "Sat Oct 17 2026: None",
                "Sun Oct 18 2026: Fajr, Dhuhr, Maghrib, Isha",
            ],
        )

    def test_prompt_includes_context(self):
        prompt = build_prompt(HISTORY, "Asr", "Amina")
        self.assertIn("Amina", prompt)
        self.assertIn("Asr", prompt)
        self.assertIn("Sat Oct 17 2026: None", prompt)

    def test_empty_history(self):
        self.assertIn("No prayers recorded", build_prompt([], "Fajr", "Guest"))


class TestParseRecommendations(unittest.TestCase):
    def test_parses_reply(self):
        recs = parse_recommendations(json.dumps(REPLY))
        self.assertEqual([r.type for r in recs], ["dua", "verse", "habit"])
        self.assertEqual(recs[0].source, "Quran 14:40")
        self.assertIsNone(recs[2].arabic)

    def test_rejects_unknown_type(self):
        bad = [dict(REPLY[0], type="poem")]
        with self.assertRaises(ValueError):
            parse_recommendations(json.dumps(bad))

    def test_rejects_missing_reasoning(self):
        bad = [{k: v for k, v in REPLY[2].items() if k != "reasoning"}]
        with self.assertRaises(ValueError):
            parse_recommendations(json.dumps(bad))

    def test_rejects_non_array(self):
        with self.assertRaises(ValueError):
            parse_recommendations(json.dumps(REPLY[0]))


class TestGetPersonalizedGuidance(unittest.TestCase):
    def test_returns_recommendations(self):
        client = _client_replying(json.dumps(REPLY))

        recs = get_personalized_guidance(HISTORY, "Asr", "Amina", client=client)

        self.assertEqual(len(recs), 3)
        self.assertIsInstance(recs[0], Recommendation)
        kwargs = client.models.generate_content.call_args.kwargs
        self.assertEqual(kwargs["model"], GUIDANCE_MODEL)
        self.assertIn("Amina", kwargs["contents"])
        self.assertEqual(kwargs["config"].response_mime_type, "application/json")
        self.assertEqual(kwargs["config"].response_schema, RESPONSE_SCHEMA)

    def test_transport_failure_returns_empty(self):
        client = MagicMock()
        client.models.generate_content.side_effect = ConnectionError("unreachable")

        with self.assertLogs("noortime.guidance", level="ERROR"):
            self.assertEqual(get_personalized_guidance(HISTORY, "Asr", "Amina", client=client), [])

    def test_invalid_json_returns_empty(self):
        client = _client_replying("Here are some thoughts...")
        with self.assertLogs("noortime.guidance", level="ERROR"):
            self.assertEqual(get_personalized_guidance(HISTORY, "Asr", "Amina", client=client), [])

    def test_schema_violation_returns_empty(self):
        client = _client_replying(json.dumps([{"type": "dua", "title": "x"}]))
        with self.assertLogs("noortime.guidance", level="ERROR"):
            self.assertEqual(get_personalized_guidance(HISTORY, "Asr", "Amina", client=client), [])

    def test_empty_reply_returns_empty(self):
        client = _client_replying(None)
        with self.assertLogs("noortime.guidance", level="ERROR"):
            self.assertEqual(get_personalized_guidance(HISTORY, "Asr", "Amina", client=client), [])

    @patch("noortime.guidance.genai.Client")
    def test_builds_client_from_environment(self, mock_client_cls):
        mock_client_cls.return_value = _client_replying(json.dumps(REPLY))
        with patch.dict("os.environ", {"GEMINI_API_KEY": "test-key"}):
            recs = get_personalized_guidance(HISTORY, "Isha", "Guest")
        mock_client_cls.assert_called_once_with(api_key="test-key")
        self.assertEqual(len(recs), 3)

    @patch("noortime.guidance.genai.Client")
    def test_client_construction_failure_returns_empty(self, mock_client_cls):
        mock_client_cls.side_effect = ValueError("Missing key inputs argument")
        with self.assertLogs("noortime.guidance", level="ERROR"):
            self.assertEqual(get_personalized_guidance(HISTORY, "Isha", "Guest"), [])


if __name__ == "__main__":
    unittest.main()
