"""
Shared pytest fixtures for LINE Health Agent tests.
"""

import sys
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace
from zoneinfo import ZoneInfo

import pytest

# Add parent directory to path so the package imports without installation
sys.path.insert(0, str(Path(__file__).parent.parent))

from line_health_agent.config import Settings
from line_health_agent.models import EventKind, InboundEvent


FIXED_NOW = datetime(2026, 1, 15, 12, 30, 0, tzinfo=ZoneInfo("Asia/Tokyo"))  # a Thursday


class FakeStore:
    """In-memory stand-in for the sheet store (rows only, no header)."""

    def __init__(self, sheets=None, fail_on_append=False):
        self.sheets = {name: [list(r) for r in rows] for name, rows in (sheets or {}).items()}
        self.appended = []
        self.queries = []
        self.fail_on_append = fail_on_append

    async def append(self, sheet_name, row):
        if self.fail_on_append:
            raise OSError("store unavailable")
        self.appended.append((sheet_name, list(row)))
        self.sheets.setdefault(sheet_name, []).append([str(c) for c in row])

    async def query_range(self, sheet_name, column_range):
        self.queries.append((sheet_name, column_range))
        rows = self.sheets.get(sheet_name, [])
        if column_range == "C2:C":
            return [[r[2]] for r in rows if len(r) > 2 and r[2]]
        return [list(r) for r in rows]


class FakeCompletion:
    """Completion client returning scripted results.

    `responder` is called with the user turn and returns text or raises.
    """

    def __init__(self, responder=None):
        self.calls = []
        self.responder = responder or (lambda user_text: "ok")

    async def complete(self, messages, temperature=0.6, max_tokens=250, max_retries=2):
        self.calls.append({
            "messages": messages,
            "temperature": temperature,
            "max_tokens": max_tokens,
            "max_retries": max_retries,
        })
        user_text = next(m["content"] for m in messages if m["role"] == "user")
        return self.responder(user_text)


class FakeLine:
    """Records replies and pushes instead of calling LINE."""

    def __init__(self, delivered=True):
        self.replies = []
        self.pushes = []
        self.delivered = delivered

    async def reply(self, reply_token, text):
        self.replies.append((reply_token, text))
        return self.delivered

    async def push(self, user_id, text):
        self.pushes.append((user_id, text))
        return self.delivered


def make_event(text, reply_token="reply-token", kind=EventKind.MESSAGE, user_id="U123"):
    return InboundEvent(
        kind=kind,
        source_user_id=user_id,
        reply_token=reply_token,
        text=text,
        received_at=FIXED_NOW,
    )


def text_response(text):
    """Anthropic-shaped message response with a single text block."""
    return SimpleNamespace(content=[SimpleNamespace(type="text", text=text)])


SAMPLE_NUTRITION_REPORT = """カロリー: 520 kcal
タンパク質: 18.5 g
脂質: 12 g
炭水化物: 80 g
ビタミンB6: 0.4 mg
ビタミンD: 1.2 μg
マグネシウム: 60 mg
鉄: 2.1 mg
亜鉛: 1.8 mg"""


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def fake_line():
    return FakeLine()


@pytest.fixture
def settings(tmp_path):
    return Settings(
        line_channel_secret="test-channel-secret",
        line_channel_access_token="test-access-token",
        anthropic_api_key="fake-key",
        line_user_id="U-reminder",
        sheet_id="test-log",
        data_dir=tmp_path,
    )


@pytest.fixture
def sample_meal_rows():
    """Meal sheet rows as the store returns them (strings)."""
    return [
        ["2026-01-10", "08:00", "2026-01-10", "Breakfast", "トーストと卵",
         "500", "20", "15", "60", "0.3", "1", "40", "1.5", "1.2"],
        ["2026-01-11", "12:30", "2026-01-11", "Lunch", "ラーメン",
         "700", "25", "20", "90", "0.5", "0", "50", "2", "1.5"],
    ]
