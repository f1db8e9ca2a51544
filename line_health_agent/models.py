"""
Typed entities for inbound events and log rows.

Everything untyped (LINE webhook JSON, store cells) is converted here and
nothing past this module handles raw dicts or cell lists.
"""

import math
from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from line_health_agent.config import LOCAL_TZ


class EventKind(Enum):
    MESSAGE = "message"
    OTHER = "other"


class Category(Enum):
    MEAL = "meal"
    EXERCISE = "exercise"
    MEDITATION = "meditation"
    JOURNAL = "journal"
    NONE = "none"


class MealType(Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"
    SNACK = "Snack"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class InboundEvent:
    kind: EventKind
    source_user_id: Optional[str]
    reply_token: Optional[str]
    text: str
    received_at: datetime

    @classmethod
    def from_payload(cls, payload: dict) -> "InboundEvent":
        """Build an event from one entry of the webhook `events` array.

        Only text messages become EventKind.MESSAGE; stickers, images, follow
        events and anything else are EventKind.OTHER with empty text.
        """
        message = payload.get("message") or {}
        is_text = payload.get("type") == "message" and message.get("type") == "text"

        timestamp_ms = payload.get("timestamp")
        if isinstance(timestamp_ms, (int, float)):
            received_at = datetime.fromtimestamp(timestamp_ms / 1000, LOCAL_TZ)
        else:
            received_at = datetime.now(LOCAL_TZ)

        text = message.get("text") if is_text else ""
        return cls(
            kind=EventKind.MESSAGE if is_text else EventKind.OTHER,
            source_user_id=(payload.get("source") or {}).get("userId"),
            reply_token=payload.get("replyToken"),
            text=(text or "").strip(),
            received_at=received_at,
        )


class _AllSentinel:
    """Marker for 'the full extent of stored data'."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "ALL"

    def __str__(self):
        return "ALL"


ALL = _AllSentinel()

DateBound = Union[date, _AllSentinel]


@dataclass(frozen=True)
class DateRange:
    start: DateBound
    end: DateBound

    @classmethod
    def everything(cls) -> "DateRange":
        return cls(ALL, ALL)

    @property
    def is_all(self) -> bool:
        return self.start is ALL or self.end is ALL

    @property
    def days(self) -> int:
        """Inclusive day count, never below 1. The ALL sentinel counts as one day."""
        if self.is_all:
            return 1
        return max((self.end - self.start).days + 1, 1)

    def label(self) -> str:
        return f"{_format_bound(self.start)} 〜 {_format_bound(self.end)}"


def _format_bound(bound: DateBound) -> str:
    if bound is ALL:
        return "全期間"
    return bound.isoformat()


# (attribute, label used in prompts and reports, unit)
NUTRIENTS = (
    ("kcal", "カロリー", "kcal"),
    ("protein_g", "タンパク質", "g"),
    ("fat_g", "脂質", "g"),
    ("carbs_g", "炭水化物", "g"),
    ("vitamin_b6_mg", "ビタミンB6", "mg"),
    ("vitamin_d_ug", "ビタミンD", "μg"),
    ("magnesium_mg", "マグネシウム", "mg"),
    ("iron_mg", "鉄", "mg"),
    ("zinc_mg", "亜鉛", "mg"),
)


def to_amount(value) -> float:
    """Coerce a cell or parsed token to a non-negative float, 0 when unusable."""
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        amount = float(str(value).strip().replace(",", ""))
    except ValueError:
        return 0.0
    if not math.isfinite(amount) or amount < 0:
        return 0.0
    return amount


@dataclass(frozen=True)
class NutrientVector:
    kcal: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0
    vitamin_b6_mg: float = 0.0
    vitamin_d_ug: float = 0.0
    magnesium_mg: float = 0.0
    iron_mg: float = 0.0
    zinc_mg: float = 0.0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, to_amount(getattr(self, f.name)))

    def __add__(self, other: "NutrientVector") -> "NutrientVector":
        return NutrientVector(**{
            f.name: getattr(self, f.name) + getattr(other, f.name) for f in fields(self)
        })

    def values(self) -> list:
        return [getattr(self, attr) for attr, _, _ in NUTRIENTS]


# Column positions in the meal sheet
MEAL_COLUMNS = 14
NUTRIENT_OFFSET = 5


@dataclass(frozen=True)
class MealLogEntry:
    logged_date: date
    logged_time: str
    meal_date: date
    meal_type: MealType
    raw_text: str
    nutrients: NutrientVector = field(default_factory=NutrientVector)

    def to_row(self) -> list:
        return [
            self.logged_date.isoformat(),
            self.logged_time,
            self.meal_date.isoformat(),
            self.meal_type.value,
            self.raw_text,
            *self.nutrients.values(),
        ]

    @classmethod
    def from_row(cls, cells: list) -> "MealLogEntry":
        """Rebuild an entry from stored string cells; short or garbled rows are padded."""
        cells = list(cells) + [""] * (MEAL_COLUMNS - len(cells))
        nutrient_cells = cells[NUTRIENT_OFFSET:MEAL_COLUMNS]
        nutrients = NutrientVector(**{
            attr: to_amount(cell) for (attr, _, _), cell in zip(NUTRIENTS, nutrient_cells)
        })
        try:
            meal_type = MealType(cells[3])
        except ValueError:
            meal_type = MealType.UNKNOWN
        return cls(
            logged_date=_parse_date(cells[0]),
            logged_time=str(cells[1]),
            meal_date=_parse_date(cells[2]),
            meal_type=meal_type,
            raw_text=str(cells[4]),
            nutrients=nutrients,
        )


def _parse_date(cell) -> Optional[date]:
    try:
        return date.fromisoformat(str(cell).strip())
    except ValueError:
        return None


@dataclass(frozen=True)
class SimpleLogEntry:
    logged_date: date
    logged_time: str
    raw_text: str

    def to_row(self) -> list:
        return [self.logged_date.isoformat(), self.logged_time, self.raw_text]
