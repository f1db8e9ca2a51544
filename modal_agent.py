"""
LINE Health Logging Agent
Receives LINE messages via webhook, logs meals/exercise/meditation/journal
entries, estimates nutrients with Claude and pushes daily reminders.

This is the Modal entrypoint. All logic is in the line_health_agent package.
"""

import asyncio

import modal

# ============================================================================
# MODAL CONFIGURATION
# ============================================================================

image = (
    modal.Image.debian_slim(python_version="3.11")
    .pip_install(
        "anthropic>=0.40.0",
        "httpx>=0.27.0",
        "fastapi>=0.100.0",
        "tenacity>=8.2.0",
        "python-dotenv>=1.0.0",
    )
    .add_local_dir("prompts", "/root/prompts")
    .add_local_dir("line_health_agent", "/root/line_health_agent")
)

app = modal.App("line-health-agent", image=image)

# Persistent volume holding the log sheets
volume = modal.Volume.from_name("line-health-data", create_if_missing=True)

SECRETS = [
    modal.Secret.from_name("anthropic"),
    modal.Secret.from_name("line"),
]

from line_health_agent.config import load_settings, logger
from line_health_agent.line.client import LineClient
from line_health_agent.reminders import send_reminder
from line_health_agent.web import create_app


# ============================================================================
# HELPER FUNCTION FOR VOLUME RELOAD
# ============================================================================

def _reload_volume():
    """Reload volume to see latest commits from other containers."""
    try:
        volume.reload()
    except RuntimeError:
        pass  # Running locally, not in Modal


# ============================================================================
# WEB ENDPOINTS (webhook, health, reminder)
# ============================================================================

@app.function(
    secrets=SECRETS,
    volumes={"/data": volume},
    timeout=300,
)
@modal.asgi_app()
def web():
    """LINE webhook, health check and reminder endpoints."""
    _reload_volume()
    settings = load_settings()
    return create_app(settings, commit=volume.commit)


# ============================================================================
# SCHEDULED REMINDERS
# ============================================================================

def _push_reminder(reminder_type: str) -> dict:
    settings = load_settings()
    if not settings.line_user_id:
        logger.error("LINE_USER_ID not configured - skipping reminder")
        return {"ok": False, "error": "LINE_USER_ID not set"}

    line = LineClient(settings.line_channel_access_token)
    delivered = asyncio.run(send_reminder(line, settings.line_user_id, reminder_type))
    return {"ok": delivered, "type": reminder_type}


@app.function(
    secrets=SECRETS,
    schedule=modal.Cron("0 22 * * *"),  # 22:00 UTC = 07:00 JST
)
def morning_reminder():
    """Morning nudge to log breakfast, meditation and journal."""
    return _push_reminder("morning")


@app.function(
    secrets=SECRETS,
    schedule=modal.Cron("0 12 * * *"),  # 12:00 UTC = 21:00 JST
)
def night_reminder():
    """Evening nudge to review the day's logs."""
    return _push_reminder("night")


@app.local_entrypoint()
def main(reminder_type: str = "morning"):
    """CLI entrypoint: push a reminder now to check the deployment."""
    fn = morning_reminder if reminder_type == "morning" else night_reminder
    logger.info(f"Triggering {reminder_type} reminder...")
    result = fn.remote()
    logger.info(f"Result: {result}")
