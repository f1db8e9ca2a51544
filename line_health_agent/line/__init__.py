"""LINE Messaging API client and webhook helpers."""

from line_health_agent.line.client import LineClient, build_text_messages
from line_health_agent.line.webhook import (
    MalformedEnvelope,
    compute_signature,
    verify_signature,
    parse_events,
)

__all__ = [
    "LineClient",
    "build_text_messages",
    "MalformedEnvelope",
    "compute_signature",
    "verify_signature",
    "parse_events",
]
