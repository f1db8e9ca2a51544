"""
Scheduled reminder messages pushed to the configured LINE user.
"""

from line_health_agent.config import logger

REMINDER_MESSAGES = {
    "morning": "🌅 おはようございます！今日の体調をチェックして、朝食・瞑想・ジャーナルを記録しましょう。",
    "night": "🌙 1日お疲れさまでした！今日の食事・運動・瞑想・ジャーナルを振り返りましょう。",
}
DEFAULT_REMINDER = "📌 リマインダー"


def reminder_message(reminder_type: str = None) -> str:
    return REMINDER_MESSAGES.get(reminder_type, DEFAULT_REMINDER)


async def send_reminder(line, user_id: str, reminder_type: str = None) -> bool:
    """Push the reminder for `reminder_type`. Returns the delivery status."""
    delivered = await line.push(user_id, reminder_message(reminder_type))
    if not delivered:
        logger.warning(f"Reminder '{reminder_type}' was not delivered")
    return delivered
