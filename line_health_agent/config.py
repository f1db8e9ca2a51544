"""
Configuration constants, settings and logging setup for the LINE health agent.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

from dotenv import load_dotenv


def _load_local_env():
    """Load .env file for local development (skipped on Modal)."""
    env_file = Path(__file__).parent.parent / ".env"
    if env_file.exists():
        load_dotenv(env_file)


_load_local_env()

# Logging configuration
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger("line_health_agent")

# Timezone for all logged dates and times
LOCAL_TZ = ZoneInfo("Asia/Tokyo")

# Data directory (Modal volume path)
DATA_DIR = Path("/data")

# API configuration
LINE_API_BASE = "https://api.line.me/v2/bot"
LINE_MAX_TEXT_CHARS = 5000
LINE_MAX_REPLY_MESSAGES = 5
REPLY_TIMEOUT_SECONDS = 8.0
PUSH_TIMEOUT_SECONDS = 30.0

# Claude model
CLAUDE_MODEL = "claude-haiku-4-5"

# Completion retry backoff: min(BASE * 2^attempt, MAX) seconds
RETRY_BASE_DELAY_SECONDS = 0.5
RETRY_MAX_DELAY_SECONDS = 2.5

CHAT_REPLY_MAX_CHARS = 1000

# Store layout
MEAL_SHEET = "Meal Log"
EXERCISE_SHEET = "Exercise Log"
MEDITATION_SHEET = "Meditation Log"
JOURNAL_SHEET = "Journal Log"

SHEET_HEADERS = {
    MEAL_SHEET: [
        "Date", "Time", "MealDate", "MealType", "Input",
        "kcal", "protein", "fat", "carbs", "vitaminB6", "vitaminD",
        "magnesium", "iron", "zinc",
    ],
    EXERCISE_SHEET: ["Date", "Time", "Text"],
    MEDITATION_SHEET: ["Date", "Time", "Text"],
    JOURNAL_SHEET: ["Date", "Time", "Text"],
}

REQUIRED_ENV = (
    "ANTHROPIC_API_KEY",
    "LINE_CHANNEL_SECRET",
    "LINE_CHANNEL_ACCESS_TOKEN",
)


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed around."""

    line_channel_secret: str
    line_channel_access_token: str
    anthropic_api_key: str
    line_user_id: Optional[str] = None
    sheet_id: str = "health-log"
    data_dir: Path = DATA_DIR
    claude_model: str = CLAUDE_MODEL


def load_settings() -> Settings:
    """Read settings from the environment. Missing secrets are warned about, not fatal."""
    for key in REQUIRED_ENV:
        if not os.environ.get(key):
            logger.warning(f"{key} is missing. Set it in .env or the Modal secret")

    return Settings(
        line_channel_secret=os.environ.get("LINE_CHANNEL_SECRET", ""),
        line_channel_access_token=os.environ.get("LINE_CHANNEL_ACCESS_TOKEN", ""),
        anthropic_api_key=os.environ.get("ANTHROPIC_API_KEY", ""),
        line_user_id=os.environ.get("LINE_USER_ID") or None,
        sheet_id=os.environ.get("SHEET_ID", "health-log"),
        data_dir=Path(os.environ.get("DATA_DIR", str(DATA_DIR))),
        claude_model=os.environ.get("CLAUDE_MODEL", CLAUDE_MODEL),
    )
