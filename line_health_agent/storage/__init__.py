"""Sheet store and the log sheets built on it."""

from line_health_agent.storage.sheets import VolumeSheetStore, parse_range
from line_health_agent.storage.logs import (
    append_meal_log,
    append_simple_log,
    append_exercise_log,
    append_meditation_log,
    append_journal_log,
    get_meal_logs_by_date,
    get_meal_logs_by_range,
    get_meal_log_date_range,
)

__all__ = [
    "VolumeSheetStore",
    "parse_range",
    "append_meal_log",
    "append_simple_log",
    "append_exercise_log",
    "append_meditation_log",
    "append_journal_log",
    "get_meal_logs_by_date",
    "get_meal_logs_by_range",
    "get_meal_log_date_range",
]
