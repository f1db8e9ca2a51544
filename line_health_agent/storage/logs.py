"""
Meal, exercise, meditation and journal logs on top of the sheet store.

All filtering happens here after a full-range fetch; the store only appends
and returns ranges.
"""

from datetime import date
from typing import Optional

from line_health_agent.config import (
    MEAL_SHEET,
    EXERCISE_SHEET,
    MEDITATION_SHEET,
    JOURNAL_SHEET,
    logger,
)
from line_health_agent.models import Category, DateRange, MealLogEntry, SimpleLogEntry

MEAL_RANGE = "A2:N"
MEAL_DATE_RANGE = "C2:C"

SIMPLE_LOG_SHEETS = {
    Category.EXERCISE: EXERCISE_SHEET,
    Category.MEDITATION: MEDITATION_SHEET,
    Category.JOURNAL: JOURNAL_SHEET,
}


async def append_meal_log(store, entry: MealLogEntry):
    await store.append(MEAL_SHEET, entry.to_row())


async def append_simple_log(store, category: Category, entry: SimpleLogEntry):
    """Append an exercise, meditation or journal entry to its sheet."""
    sheet = SIMPLE_LOG_SHEETS.get(category)
    if sheet is None:
        raise ValueError(f"No log sheet for category {category.value}")
    await store.append(sheet, entry.to_row())


async def append_exercise_log(store, entry: SimpleLogEntry):
    await append_simple_log(store, Category.EXERCISE, entry)


async def append_meditation_log(store, entry: SimpleLogEntry):
    await append_simple_log(store, Category.MEDITATION, entry)


async def append_journal_log(store, entry: SimpleLogEntry):
    await append_simple_log(store, Category.JOURNAL, entry)


async def _load_meal_logs(store) -> list:
    rows = await store.query_range(MEAL_SHEET, MEAL_RANGE)
    return [MealLogEntry.from_row(row) for row in rows]


async def get_meal_logs_by_date(store, meal_date: date) -> list:
    """Meal entries eaten on one date."""
    entries = await _load_meal_logs(store)
    return [e for e in entries if e.meal_date == meal_date]


async def get_meal_logs_by_range(store, date_range: DateRange) -> list:
    """Meal entries whose meal date falls in the range; every entry for the ALL sentinel."""
    entries = await _load_meal_logs(store)
    if date_range.is_all:
        return entries

    return [
        e for e in entries
        if e.meal_date is not None and date_range.start <= e.meal_date <= date_range.end
    ]


async def get_meal_log_date_range(store) -> Optional[DateRange]:
    """Earliest and latest stored meal date, or None when no dated rows exist."""
    rows = await store.query_range(MEAL_SHEET, MEAL_DATE_RANGE)

    dates = []
    for row in rows:
        if not row or not row[0]:
            continue
        try:
            dates.append(date.fromisoformat(row[0].strip()))
        except ValueError:
            logger.warning(f"Ignoring non-date MealDate cell: {row[0]!r}")

    if not dates:
        return None
    return DateRange(min(dates), max(dates))
