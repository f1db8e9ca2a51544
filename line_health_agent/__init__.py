"""
LINE Health Agent Package

Re-exports the public entry points so modal_agent.py and tests can import
from one place.
"""

# Config and constants
from line_health_agent.config import (
    Settings,
    load_settings,
    LOCAL_TZ,
    DATA_DIR,
    CLAUDE_MODEL,
    MEAL_SHEET,
    EXERCISE_SHEET,
    MEDITATION_SHEET,
    JOURNAL_SHEET,
    logger,
)

# Domain types
from line_health_agent.models import (
    ALL,
    Category,
    DateRange,
    EventKind,
    InboundEvent,
    MealLogEntry,
    MealType,
    NutrientVector,
    SimpleLogEntry,
)

# Intent
from line_health_agent.intent import (
    classify_intent,
    detect_meal_type,
    detect_meal_date,
    detect_date_range,
)

# Extraction and summaries
from line_health_agent.extraction import (
    parse_nutrient_report,
    summarize_meals,
    format_summary,
)

# Storage
from line_health_agent.storage import (
    VolumeSheetStore,
    append_meal_log,
    append_simple_log,
    get_meal_logs_by_range,
    get_meal_log_date_range,
)

# Claude
from line_health_agent.claude import (
    CompletionClient,
    is_retryable,
    extract_nutrients,
    summary_feedback,
    chat_reply,
)

# LINE
from line_health_agent.line import (
    LineClient,
    verify_signature,
    parse_events,
)

from line_health_agent.dispatcher import EventDispatcher
from line_health_agent.reminders import reminder_message, send_reminder
from line_health_agent.web import create_app

__all__ = [
    # Config
    "Settings",
    "load_settings",
    "LOCAL_TZ",
    "DATA_DIR",
    "CLAUDE_MODEL",
    "MEAL_SHEET",
    "EXERCISE_SHEET",
    "MEDITATION_SHEET",
    "JOURNAL_SHEET",
    "logger",
    # Models
    "ALL",
    "Category",
    "DateRange",
    "EventKind",
    "InboundEvent",
    "MealLogEntry",
    "MealType",
    "NutrientVector",
    "SimpleLogEntry",
    # Intent
    "classify_intent",
    "detect_meal_type",
    "detect_meal_date",
    "detect_date_range",
    # Extraction
    "parse_nutrient_report",
    "summarize_meals",
    "format_summary",
    # Storage
    "VolumeSheetStore",
    "append_meal_log",
    "append_simple_log",
    "get_meal_logs_by_range",
    "get_meal_log_date_range",
    # Claude
    "CompletionClient",
    "is_retryable",
    "extract_nutrients",
    "summary_feedback",
    "chat_reply",
    # LINE
    "LineClient",
    "verify_signature",
    "parse_events",
    # App
    "EventDispatcher",
    "reminder_message",
    "send_reminder",
    "create_app",
]
