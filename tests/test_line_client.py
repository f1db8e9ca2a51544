"""
Tests for the LINE Messaging API client.
"""

import asyncio
import json

import httpx

from line_health_agent.line.client import LineClient, build_text_messages


def _recording_transport(status=200, exc=None):
    requests = []

    def handler(request):
        requests.append(request)
        if exc is not None:
            raise exc
        return httpx.Response(status, json={})

    return httpx.MockTransport(handler), requests


class TestBuildTextMessages:
    """Tests for build_text_messages() chunking."""

    def test_short_text(self):
        assert build_text_messages("hi") == [{"type": "text", "text": "hi"}]

    def test_long_text_split(self):
        messages = build_text_messages("a" * 12000)
        assert [len(m["text"]) for m in messages] == [5000, 5000, 2000]

    def test_caps_at_five_messages(self):
        """Text past five messages is dropped."""
        assert len(build_text_messages("a" * 40000)) == 5


class TestLineClient:
    """Tests for LineClient.reply() and push()."""

    def test_reply_payload(self):
        transport, requests = _recording_transport()
        client = LineClient("token-abc", transport=transport)

        assert asyncio.run(client.reply("reply-1", "記録しました")) is True

        request = requests[0]
        assert request.url == "https://api.line.me/v2/bot/message/reply"
        assert request.headers["Authorization"] == "Bearer token-abc"
        assert json.loads(request.content) == {
            "replyToken": "reply-1",
            "messages": [{"type": "text", "text": "記録しました"}],
        }

    def test_push_payload(self):
        transport, requests = _recording_transport()
        client = LineClient("token-abc", transport=transport)

        assert asyncio.run(client.push("U1", "おはよう")) is True

        assert requests[0].url == "https://api.line.me/v2/bot/message/push"
        assert json.loads(requests[0].content)["to"] == "U1"

    def test_error_status_returns_false(self):
        transport, _ = _recording_transport(status=400)
        assert asyncio.run(LineClient("t", transport=transport).reply("r", "x")) is False

    def test_timeout_is_swallowed(self):
        transport, _ = _recording_transport(exc=httpx.ReadTimeout("slow"))
        assert asyncio.run(LineClient("t", transport=transport).reply("r", "x")) is False

    def test_connection_error_is_swallowed(self):
        transport, _ = _recording_transport(exc=httpx.ConnectError("down"))
        assert asyncio.run(LineClient("t", transport=transport).push("U1", "x")) is False

    def test_missing_reply_token(self):
        """No request is made without a reply token."""
        transport, requests = _recording_transport()
        assert asyncio.run(LineClient("t", transport=transport).reply(None, "x")) is False
        assert requests == []

    def test_slow_server_is_cut_off(self, monkeypatch):
        """The reply deadline covers the whole call, not each phase."""
        import line_health_agent.line.client as line_client

        monkeypatch.setattr(line_client, "REPLY_TIMEOUT_SECONDS", 0.05)

        async def stall(request):
            await asyncio.sleep(5)
            return httpx.Response(200, json={})

        client = LineClient("t", transport=httpx.MockTransport(stall))

        async def timed_reply():
            loop = asyncio.get_running_loop()
            started = loop.time()
            delivered = await client.reply("r", "x")
            return delivered, loop.time() - started

        delivered, elapsed = asyncio.run(timed_reply())

        assert delivered is False
        assert elapsed < 1
