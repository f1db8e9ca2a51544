"""
Utility functions for the LINE health agent.
"""

from datetime import datetime

from line_health_agent.config import LOCAL_TZ


def now_local() -> datetime:
    """Get current time in the agent's local timezone."""
    return datetime.now(LOCAL_TZ)


def chunk_text(text: str, size: int) -> list:
    """Split text into consecutive pieces of at most `size` characters."""
    return [text[i:i + size] for i in range(0, len(text), size)] or [""]
