"""
Keyword-based intent classification for incoming chat messages.

Matching is a case-insensitive substring test. Categories are checked in a
fixed order (meal, exercise, meditation, journal) and the first hit wins, so a
message mentioning both lunch and a run is a meal log.
"""

from datetime import date, timedelta
from typing import Optional

from line_health_agent.models import Category, MealType
from line_health_agent.utils import now_local

# Checked in this order; first match wins.
MEAL_TYPE_KEYWORDS = (
    (MealType.BREAKFAST, ("朝", "breakfast")),
    (MealType.LUNCH, ("昼", "ランチ", "lunch")),
    (MealType.DINNER, ("夜", "夕", "dinner")),
    (MealType.SNACK, ("間食", "おやつ", "snack")),
)

# Mark a message as a meal without naming which one.
GENERIC_MEAL_KEYWORDS = ("食事", "ご飯", "ごはん", "食べ", "meal")

CATEGORY_KEYWORDS = (
    (Category.EXERCISE, ("運動", "走", "筋トレ", "workout", "run")),
    (Category.MEDITATION, ("瞑想", "meditation", "座禅")),
    (Category.JOURNAL, ("日記", "ジャーナル", "思った", "感じた", "journal")),
)

# Longest phrase first so "一昨日" is not read as "昨日".
MEAL_DATE_KEYWORDS = (
    (2, ("一昨日", "おととい", "day before yesterday")),
    (0, ("今日", "today")),
    (1, ("昨日", "yesterday")),
)


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def detect_meal_type(text: str) -> Optional[MealType]:
    """Return the meal named in the text, UNKNOWN for an unnamed meal, None if not a meal."""
    lowered = text.lower()
    for meal_type, keywords in MEAL_TYPE_KEYWORDS:
        if _contains_any(lowered, keywords):
            return meal_type
    if _contains_any(lowered, GENERIC_MEAL_KEYWORDS):
        return MealType.UNKNOWN
    return None


def classify_intent(text: str) -> Category:
    """Map a message to exactly one category."""
    if detect_meal_type(text) is not None:
        return Category.MEAL

    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if _contains_any(lowered, keywords):
            return category
    return Category.NONE


def detect_meal_date(text: str, today: Optional[date] = None) -> date:
    """Date the meal was eaten: today, yesterday, the day before, or today by default."""
    if today is None:
        today = now_local().date()

    lowered = text.lower()
    for days_back, keywords in MEAL_DATE_KEYWORDS:
        if _contains_any(lowered, keywords):
            return today - timedelta(days=days_back)
    return today
