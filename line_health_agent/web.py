"""
FastAPI application: LINE webhook, health check and reminder trigger.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from line_health_agent.claude.client import CompletionClient
from line_health_agent.config import Settings, logger
from line_health_agent.dispatcher import EventDispatcher
from line_health_agent.line.client import LineClient
from line_health_agent.line.webhook import MalformedEnvelope, parse_events, verify_signature
from line_health_agent.reminders import send_reminder
from line_health_agent.storage.sheets import VolumeSheetStore
from line_health_agent.utils import now_local


def create_app(settings: Settings, *, store=None, completion=None, line=None, commit=None) -> FastAPI:
    """Build the web app. Collaborators default to the real clients for `settings`."""
    if store is None:
        store = VolumeSheetStore(settings.data_dir, settings.sheet_id, commit=commit)
    if completion is None:
        completion = CompletionClient(settings.anthropic_api_key, model=settings.claude_model)
    if line is None:
        line = LineClient(settings.line_channel_access_token)

    dispatcher = EventDispatcher(store, completion, line)
    app = FastAPI(title="LINE Health Agent")

    @app.post("/webhook")
    async def line_webhook(request: Request):
        """LINE webhook endpoint for receiving messages."""
        body = await request.body()
        signature = request.headers.get("x-line-signature", "")
        if not verify_signature(body, signature, settings.line_channel_secret):
            logger.warning("Webhook auth failed: invalid signature")
            return PlainTextResponse("Signature validation failed", status_code=401)

        try:
            events = parse_events(body)
            await dispatcher.dispatch(events)
        except MalformedEnvelope as e:
            logger.error(f"Malformed webhook envelope: {e}")
            return PlainTextResponse("Internal Server Error", status_code=500)
        except Exception as e:
            logger.error(f"Webhook handling error: {e}")
            return PlainTextResponse("Internal Server Error", status_code=500)

        return {"status": "ok"}

    @app.get("/webhook")
    async def health():
        return {"ok": True, "at": now_local().isoformat()}

    @app.get("/reminder")
    async def reminder(type: str = None):
        """Push one of the reminder templates to the configured user."""
        if not settings.line_user_id:
            return JSONResponse({"error": "LINE_USER_ID not set"}, status_code=400)

        await send_reminder(line, settings.line_user_id, type)
        return {"ok": True, "type": type}

    return app
