"""Claude completion client and handlers."""

from line_health_agent.claude.client import CompletionClient, is_retryable
from line_health_agent.claude.handlers import (
    NutrientReport,
    extract_nutrients,
    summary_feedback,
    chat_reply,
)

__all__ = [
    "CompletionClient",
    "is_retryable",
    "NutrientReport",
    "extract_nutrients",
    "summary_feedback",
    "chat_reply",
]
