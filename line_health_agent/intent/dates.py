"""
Relative date range phrases used by summary requests.
"""

from datetime import date, timedelta
from typing import Optional

from line_health_agent.models import DateRange
from line_health_agent.utils import now_local

ALL_TIME_PHRASES = ("これまで", "全期間", "entire history", "all time")
LAST_WEEK_PHRASES = ("先週", "last week")
THIS_WEEK_PHRASES = ("今週", "this week")
THIS_MONTH_PHRASES = ("今月", "this month")


def detect_date_range(text: str, today: Optional[date] = None) -> Optional[DateRange]:
    """Resolve a relative period in the text, or None when the text names no period.

    - all-time phrases: the ALL sentinel on both ends
    - last week: the seven days ending yesterday
    - this week: Monday of the current ISO week through today
    - this month: the first of the month through today
    """
    if today is None:
        today = now_local().date()
    lowered = text.lower()

    if any(p in lowered for p in ALL_TIME_PHRASES):
        return DateRange.everything()

    if any(p in lowered for p in LAST_WEEK_PHRASES):
        end = today - timedelta(days=1)
        return DateRange(end - timedelta(days=6), end)

    if any(p in lowered for p in THIS_WEEK_PHRASES):
        monday = today - timedelta(days=today.isoweekday() - 1)
        return DateRange(monday, today)

    if any(p in lowered for p in THIS_MONTH_PHRASES):
        return DateRange(today.replace(day=1), today)

    return None
