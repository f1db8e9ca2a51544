"""
Per-event processing for webhook deliveries.

Every event of a delivery runs as its own task. A task never raises: whatever
goes wrong is logged and the remaining events carry on.
"""

import asyncio
from datetime import datetime

from line_health_agent.claude.handlers import chat_reply, extract_nutrients, summary_feedback
from line_health_agent.config import logger
from line_health_agent.extraction.summary import format_summary, summarize_meals
from line_health_agent.intent import classify_intent, detect_date_range, detect_meal_date, detect_meal_type
from line_health_agent.models import (
    Category,
    DateRange,
    EventKind,
    InboundEvent,
    MealLogEntry,
    MealType,
    SimpleLogEntry,
)
from line_health_agent.storage.logs import (
    append_exercise_log,
    append_journal_log,
    append_meal_log,
    append_meditation_log,
    get_meal_log_date_range,
    get_meal_logs_by_range,
)
from line_health_agent.utils import now_local

NO_RECORDS_MESSAGE = "その期間の記録はありません📭"

SIMPLE_LOG_ACKS = {
    Category.EXERCISE: "運動を記録しました💪",
    Category.MEDITATION: "瞑想を記録しました🧘",
    Category.JOURNAL: "ジャーナルを記録しました✍️",
}

SIMPLE_LOG_WRITERS = {
    Category.EXERCISE: append_exercise_log,
    Category.MEDITATION: append_meditation_log,
    Category.JOURNAL: append_journal_log,
}


class EventDispatcher:
    """Routes inbound events to summaries, logs or chat.

    `store`, `completion` and `line` are shared across concurrent tasks and must
    be safe to call concurrently. `clock` returns the current local datetime.
    """

    def __init__(self, store, completion, line, clock=now_local):
        self.store = store
        self.completion = completion
        self.line = line
        self.clock = clock

    async def dispatch(self, events: list):
        """Handle all events concurrently and wait until each has settled."""
        await asyncio.gather(*(self._handle_isolated(event) for event in events))

    async def _handle_isolated(self, event: InboundEvent):
        try:
            await self.handle_event(event)
        except Exception:
            logger.exception(f"[EVENT] handling failed for user {event.source_user_id}")

    async def handle_event(self, event: InboundEvent):
        if event.kind is not EventKind.MESSAGE or not event.text:
            return

        logger.info(f"[EVENT] message from user {event.source_user_id}")
        text = event.text
        now = self.clock()
        category = classify_intent(text)

        if category is Category.MEAL:
            date_range = detect_date_range(text, today=now.date())
            if date_range is not None:
                logger.info(f"[EVENT] summary request for {date_range.label()}")
                await self._reply_summary(event, date_range)
            else:
                logger.info("[EVENT] meal log")
                await self._log_meal(event, now)
        elif category in SIMPLE_LOG_ACKS:
            logger.info(f"[EVENT] {category.value} log")
            await self._log_simple(event, category, now)
        else:
            logger.info("[EVENT] chat")
            await self.line.reply(event.reply_token, await chat_reply(self.completion, text))

    async def _reply_summary(self, event: InboundEvent, date_range: DateRange):
        entries = await get_meal_logs_by_range(self.store, date_range)
        if not entries:
            await self.line.reply(event.reply_token, NO_RECORDS_MESSAGE)
            return

        if date_range.is_all:
            # Totals stay over every row; only the label and day count narrow
            actual = await get_meal_log_date_range(self.store)
            if actual is not None:
                date_range = actual

        summary_text = format_summary(summarize_meals(entries, date_range))
        try:
            feedback = await summary_feedback(self.completion, summary_text)
        except Exception as e:
            logger.error(f"Summary feedback failed, replying without it: {e}")
            await self.line.reply(event.reply_token, summary_text)
            return

        await self.line.reply(event.reply_token, f"{summary_text}\n\n💡 フィードバック:\n{feedback}")

    async def _log_meal(self, event: InboundEvent, now: datetime):
        report = await extract_nutrients(self.completion, event.text)
        entry = MealLogEntry(
            logged_date=now.date(),
            logged_time=now.strftime("%H:%M"),
            meal_date=detect_meal_date(event.text, today=now.date()),
            meal_type=detect_meal_type(event.text) or MealType.UNKNOWN,
            raw_text=event.text,
            nutrients=report.nutrients,
        )
        await append_meal_log(self.store, entry)
        await self.line.reply(event.reply_token, f"記録しました📊\n{report.text}")

    async def _log_simple(self, event: InboundEvent, category: Category, now: datetime):
        entry = SimpleLogEntry(
            logged_date=now.date(),
            logged_time=now.strftime("%H:%M"),
            raw_text=event.text,
        )
        await SIMPLE_LOG_WRITERS[category](self.store, entry)
        await self.line.reply(event.reply_token, f"{SIMPLE_LOG_ACKS[category]}\n{event.text}")
