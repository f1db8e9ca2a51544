"""
Claude completion client with bounded exponential-backoff retry.

Rate limits and server-side errors are retried; everything else (bad request,
auth, connection setup) fails on the first attempt.
"""

import asyncio
from typing import Optional

import anthropic
from tenacity import AsyncRetrying, retry_if_exception, stop_after_attempt, wait_exponential

from line_health_agent.config import (
    CLAUDE_MODEL,
    RETRY_BASE_DELAY_SECONDS,
    RETRY_MAX_DELAY_SECONDS,
    logger,
)


def is_retryable(exc: BaseException) -> bool:
    """True for rate-limit (429) and 5xx failures."""
    if isinstance(exc, anthropic.RateLimitError):
        return True
    status = getattr(exc, "status_code", None)
    return isinstance(status, int) and (status == 429 or status >= 500)


def _log_retry(retry_state):
    exc = retry_state.outcome.exception()
    logger.warning(
        f"Claude call failed (attempt {retry_state.attempt_number}): {exc}; "
        f"retrying in {retry_state.next_action.sleep:.1f}s"
    )


def _split_system(messages: list) -> tuple:
    """Claude takes system prompts separately from the conversation turns."""
    system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
    turns = [
        {"role": m["role"], "content": m["content"]}
        for m in messages if m["role"] != "system"
    ]
    return system, turns


class CompletionClient:
    """Text completion over role-tagged messages.

    Each `complete` call is independent; the SDK's own retries are disabled so
    the backoff schedule here is the only one.
    """

    def __init__(self, api_key: Optional[str] = None, model: str = CLAUDE_MODEL, client=None, sleep=asyncio.sleep):
        self.model = model
        self._client = client or anthropic.AsyncAnthropic(api_key=api_key, max_retries=0)
        self._sleep = sleep

    async def complete(
        self,
        messages: list,
        temperature: float = 0.6,
        max_tokens: int = 250,
        max_retries: int = 2,
    ) -> str:
        system, turns = _split_system(messages)
        request = {
            "model": self.model,
            "max_tokens": max_tokens,
            "temperature": temperature,
            "messages": turns,
        }
        if system:
            request["system"] = system

        retrying = AsyncRetrying(
            stop=stop_after_attempt(max_retries + 1),
            wait=wait_exponential(multiplier=RETRY_BASE_DELAY_SECONDS, max=RETRY_MAX_DELAY_SECONDS),
            retry=retry_if_exception(is_retryable),
            before_sleep=_log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                response = await self._client.messages.create(**request)

        for block in response.content:
            if block.type == "text":
                return block.text
        return ""
