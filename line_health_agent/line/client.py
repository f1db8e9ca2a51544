"""
LINE Messaging API client for replies and push messages.

Delivery is best effort: failures are logged and reported through the return
value, never raised and never retried.
"""

import asyncio

import httpx

from line_health_agent.config import (
    LINE_API_BASE,
    LINE_MAX_TEXT_CHARS,
    LINE_MAX_REPLY_MESSAGES,
    REPLY_TIMEOUT_SECONDS,
    PUSH_TIMEOUT_SECONDS,
    logger,
)
from line_health_agent.utils import chunk_text


def build_text_messages(text: str) -> list:
    """Split text into LINE text message objects (5000 chars each, at most 5)."""
    chunks = chunk_text(text, LINE_MAX_TEXT_CHARS)[:LINE_MAX_REPLY_MESSAGES]
    return [{"type": "text", "text": chunk} for chunk in chunks]


class LineClient:
    def __init__(self, access_token: str, transport: httpx.AsyncBaseTransport = None):
        self._access_token = access_token
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._access_token}",
        }

    async def _send(self, path: str, payload: dict, timeout: float) -> httpx.Response:
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            return await client.post(
                f"{LINE_API_BASE}{path}",
                headers=self._headers(),
                json=payload,
            )

    async def _post(self, path: str, payload: dict, timeout: float, tag: str) -> bool:
        # httpx timeouts apply per phase; wait_for bounds the whole call
        try:
            response = await asyncio.wait_for(self._send(path, payload, timeout), timeout)
            logger.info(f"[LINE][{tag}] {response.status_code} {response.text[:120]}")
            return response.is_success
        except (httpx.TimeoutException, asyncio.TimeoutError):
            logger.error(f"[LINE][{tag}] timed out after {timeout}s, giving up")
            return False
        except httpx.HTTPError as e:
            logger.error(f"[LINE][{tag}] error: {e}")
            return False

    async def reply(self, reply_token: str, text: str) -> bool:
        """Answer a message event through its reply token."""
        if not reply_token:
            logger.warning("[LINE][REPLY] missing reply token, skipping")
            return False
        payload = {"replyToken": reply_token, "messages": build_text_messages(text)}
        return await self._post("/message/reply", payload, REPLY_TIMEOUT_SECONDS, "REPLY")

    async def push(self, user_id: str, text: str) -> bool:
        """Send an unsolicited message to a user id."""
        payload = {"to": user_id, "messages": build_text_messages(text)}
        return await self._post("/message/push", payload, PUSH_TIMEOUT_SECONDS, "PUSH")
