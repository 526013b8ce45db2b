"""Personalised spiritual guidance from Gemini, shaped by recent prayer history."""

import json
import logging
import os
from dataclasses import dataclass
from typing import Iterable, List, Optional

from google import genai
from google.genai import types

from noortime.progress import DailyProgress

logger = logging.getLogger(__name__)

GUIDANCE_MODEL = os.environ.get("NOORTIME_GEMINI_MODEL", "gemini-2.5-flash")
HISTORY_DAYS = 3

RECOMMENDATION_TYPES = ("dua", "verse", "habit", "quote")
REQUIRED_FIELDS = ("type", "title", "content", "reasoning")

RESPONSE_SCHEMA = types.Schema(
    type=types.Type.ARRAY,
    items=types.Schema(
        type=types.Type.OBJECT,
        properties={
            "type": types.Schema(type=types.Type.STRING, enum=list(RECOMMENDATION_TYPES)),
            "title": types.Schema(type=types.Type.STRING),
            "content": types.Schema(type=types.Type.STRING),
            "arabic": types.Schema(type=types.Type.STRING),
            "translation": types.Schema(type=types.Type.STRING),
            "source": types.Schema(type=types.Type.STRING),
            "reasoning": types.Schema(
                type=types.Type.STRING,
                description="Why this was suggested given the recent prayer history",
            ),
        },
        required=list(REQUIRED_FIELDS),
    ),
)

PROMPT_TEMPLATE = """You are NoorAI, a gentle and knowledgeable spiritual companion.

User context:
Name: {name}
Upcoming prayer: {prayer}
Prayers performed over the last {days} days:
{history}

Give exactly 3 recommendations for this moment:
- a dua fitting the time of day (Arabic text and English translation),
- a Quranic verse (Arabic text, translation and surah:ayah reference),
- one practical habit or practice to carry through today.

If prayers were missed recently, encourage kindly without blame.
If the record is consistent, acknowledge it and suggest a next step.
Explain in "reasoning" how the history shaped each suggestion.
"""


@dataclass
class Recommendation:
    type: str
    title: str
    content: str
    reasoning: str
    arabic: Optional[str] = None
    translation: Optional[str] = None
    source: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Recommendation":
        if not isinstance(data, dict):
            raise ValueError(f"Recommendation must be an object, got {type(data).__name__}")
        missing = [key for key in REQUIRED_FIELDS if not data.get(key)]
        if missing:
            raise ValueError(f"Recommendation missing {', '.join(missing)}")
        if data["type"] not in RECOMMENDATION_TYPES:
            raise ValueError(f"Unknown recommendation type {data['type']!r}")
        return cls(
            type=data["type"],
            title=str(data["title"]),
            content=str(data["content"]),
            reasoning=str(data["reasoning"]),
            arabic=data.get("arabic") or None,
            translation=data.get("translation") or None,
            source=data.get("source") or None,
        )


def summarize_history(history: Iterable[DailyProgress], days: int = HISTORY_DAYS) -> str:
    recent = list(history)[-days:]
    if not recent:
        return "No prayers recorded yet"
    lines = []
    for day in recent:
        completed = ", ".join(day.completed())
        lines.append(f"{day.date}: {completed or 'None'}")
    return "\n".join(lines)


def build_prompt(history: Iterable[DailyProgress], current_prayer: str, user_name: str) -> str:
    return PROMPT_TEMPLATE.format(
        name=user_name,
        prayer=current_prayer,
        days=HISTORY_DAYS,
        history=summarize_history(history),
    )


def parse_recommendations(text: str) -> List[Recommendation]:
    """Strict parse of the model's JSON reply; any defect raises ValueError."""
    payload = json.loads(text.strip())
    if not isinstance(payload, list):
        raise ValueError("Expected a JSON array of recommendations")
    return [Recommendation.from_dict(item) for item in payload]


def get_personalized_guidance(
    history: Iterable[DailyProgress],
    current_prayer: str,
    user_name: str,
    client=None,
) -> List[Recommendation]:
    """
    Ask Gemini for three recommendations tuned to the last few days.

    Guidance is advisory: every failure is logged and turned into an empty
    list, so the caller can show an empty state and offer a retry.
    """
    prompt = build_prompt(history, current_prayer, user_name)
    try:
        if client is None:
            client = genai.Client(api_key=os.environ.get("GEMINI_API_KEY"))
        response = client.models.generate_content(
            model=GUIDANCE_MODEL,
            contents=prompt,
            config=types.GenerateContentConfig(
                response_mime_type="application/json",
                response_schema=RESPONSE_SCHEMA,
            ),
        )
        if not response.text:
            raise ValueError("Empty response from guidance model")
        recommendations = parse_recommendations(response.text)
    except Exception:
        logger.exception("AI guidance request failed")
        return []
    logger.info("Received %d recommendations", len(recommendations))
    return recommendations
