"""
Webhook boundary checks: request signature and event envelope.
"""

import base64
import hashlib
import hmac
import json

from line_health_agent.models import InboundEvent


class MalformedEnvelope(ValueError):
    """The request body is not a JSON object with an `events` list."""


def compute_signature(body: bytes, channel_secret: str) -> str:
    """base64(HMAC-SHA256(body, channel_secret)) as LINE sends it."""
    digest = hmac.new(channel_secret.encode("utf-8"), body, hashlib.sha256).digest()
    return base64.b64encode(digest).decode("ascii")


def verify_signature(body: bytes, signature: str, channel_secret: str) -> bool:
    if not signature or not channel_secret:
        return False
    expected = compute_signature(body, channel_secret)
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8"))


def parse_events(body: bytes) -> list:
    """Decode the envelope into typed events."""
    try:
        envelope = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedEnvelope(f"Invalid JSON: {e}") from e

    if not isinstance(envelope, dict) or not isinstance(envelope.get("events"), list):
        raise MalformedEnvelope("Envelope has no events list")

    return [
        InboundEvent.from_payload(payload)
        for payload in envelope["events"]
        if isinstance(payload, dict)
    ]
