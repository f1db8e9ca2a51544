"""
Claude calls for nutrient estimation, summary feedback and chat replies.
"""

from dataclasses import dataclass

from line_health_agent.config import CHAT_REPLY_MAX_CHARS, logger
from line_health_agent.extraction.nutrients import parse_nutrient_report
from line_health_agent.models import NutrientVector
from line_health_agent.prompts import NUTRITION_PROMPT, SUMMARY_FEEDBACK_PROMPT, COACH_PROMPT

CHAT_EMPTY_FALLBACK = "すみません、もう一度お願いします。"
CHAT_ERROR_FALLBACK = "内部エラーが発生しました。時間をおいて再試行してください。"


@dataclass(frozen=True)
class NutrientReport:
    nutrients: NutrientVector
    text: str


async def extract_nutrients(completion, meal_text: str) -> NutrientReport:
    """Ask Claude for a nutrient estimate of a meal and parse the report.

    Service failures propagate; unreadable report lines just become 0.
    """
    text = await completion.complete(
        [
            {"role": "system", "content": NUTRITION_PROMPT},
            {"role": "user", "content": meal_text},
        ],
        max_tokens=250,
        max_retries=1,
    )
    return NutrientReport(nutrients=parse_nutrient_report(text), text=text)


async def summary_feedback(completion, summary_text: str) -> str:
    """Short dietitian feedback on an aggregated summary."""
    return await completion.complete(
        [
            {"role": "system", "content": SUMMARY_FEEDBACK_PROMPT},
            {"role": "user", "content": summary_text},
        ],
        max_tokens=300,
        max_retries=1,
    )


async def chat_reply(completion, user_text: str) -> str:
    """Coach-persona reply to a message that is not a log. Never raises."""
    try:
        text = await completion.complete(
            [
                {"role": "system", "content": COACH_PROMPT},
                {"role": "user", "content": user_text},
            ],
            max_tokens=300,
            max_retries=2,
        )
    except Exception as e:
        logger.error(f"Chat reply failed: {e}")
        return CHAT_ERROR_FALLBACK

    text = (text or "").strip()
    if not text:
        return CHAT_EMPTY_FALLBACK
    return text[:CHAT_REPLY_MAX_CHARS]
