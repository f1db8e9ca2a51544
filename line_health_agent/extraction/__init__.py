"""Nutrient report parsing and meal summaries."""

from line_health_agent.extraction.nutrients import (
    parse_nutrient_report,
    report_template,
)
from line_health_agent.extraction.summary import (
    MealSummary,
    summarize_meals,
    format_summary,
)

__all__ = [
    "parse_nutrient_report",
    "report_template",
    "MealSummary",
    "summarize_meals",
    "format_summary",
]
