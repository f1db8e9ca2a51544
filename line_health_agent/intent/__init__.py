"""Intent classification and date phrase resolution."""

from line_health_agent.intent.classifier import (
    classify_intent,
    detect_meal_type,
    detect_meal_date,
)
from line_health_agent.intent.dates import detect_date_range

__all__ = [
    "classify_intent",
    "detect_meal_type",
    "detect_meal_date",
    "detect_date_range",
]
