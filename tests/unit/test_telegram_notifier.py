"""Tests for the Telegram Bot API client."""

import json

import httpx
import pytest

from src.projecthub.core.notifications import TelegramNotifier

pytestmark = pytest.mark.unit


def notifier_with(handler, bot_token: str | None = "abc", chat_id: str | None = "42"):
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TelegramNotifier(http, bot_token, chat_id, api_url="https://telegram.test/")


async def test_send_posts_markdown_to_the_chat():
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(200, json={"ok": True})

    result = await notifier_with(handler).send("🔔 *Nuevo mensaje*")

    assert result.ok
    assert str(requests[0].url) == "https://telegram.test/botabc/sendMessage"
    body = json.loads(requests[0].content)
    assert body["chat_id"] == "42"
    assert body["parse_mode"] == "Markdown"
    assert body["text"] == "🔔 *Nuevo mensaje*"


async def test_api_rejection_is_reported_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(400, text="Bad Request: chat not found")

    result = await notifier_with(handler).send("hola")

    assert not result.ok
    assert "400" in (result.error or "")


async def test_network_error_is_reported_not_raised():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    result = await notifier_with(handler).send("hola")

    assert not result.ok
    assert result.error == "timed out"


async def test_unconfigured_notifier_runs_in_dev_mode():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    notifier = notifier_with(handler, bot_token=None)

    assert not notifier.configured
    assert (await notifier.send("hola")).ok
    assert notifier.recipient == "42"
    check = await notifier.check_connection()
    assert not check.ok


async def test_check_connection_calls_get_me():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/botabc/getMe"
        return httpx.Response(200, json={"ok": True, "result": {"username": "hub_bot"}})

    assert (await notifier_with(handler).check_connection()).ok
