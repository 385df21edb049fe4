"""Tests for access notifications."""

import json

import httpx
import pytest

from config import Config
from shortlink.notify import NullNotifier, TelegramNotifier, build_notifier


def telegram_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
class TestTelegramNotifier:
    """Telegram delivery."""

    async def test_posts_message(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"ok": True})

        client = telegram_client(handler)
        notifier = TelegramNotifier("123:token", "42", client=client)

        await notifier.notify("Shortlink accessed: https://sho.rt/abc123")

        assert len(requests) == 1
        assert str(requests[0].url) == "https://api.telegram.org/bot123:token/sendMessage"
        assert json.loads(requests[0].content) == {
            "chat_id": "42",
            "text": "Shortlink accessed: https://sho.rt/abc123",
        }
        await client.aclose()

    async def test_api_error_is_logged_not_raised(self, caplog):
        def handler(request):
            return httpx.Response(403, json={"ok": False})

        client = telegram_client(handler)
        notifier = TelegramNotifier("123:secret", "42", client=client)

        await notifier.notify("hello")

        assert "403" in caplog.text
        assert "secret" not in caplog.text
        await client.aclose()

    async def test_transport_error_is_logged_not_raised(self, caplog):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = telegram_client(handler)
        notifier = TelegramNotifier("123:secret", "42", client=client)

        await notifier.notify("hello")

        assert "ConnectError" in caplog.text
        assert "secret" not in caplog.text
        await client.aclose()

    async def test_shared_client_is_not_closed(self):
        client = telegram_client(lambda request: httpx.Response(200))
        notifier = TelegramNotifier("123:token", "42", client=client)

        await notifier.close()

        assert not client.is_closed
        await client.aclose()

    async def test_owned_client_is_closed(self):
        notifier = TelegramNotifier("123:token", "42")
        client = notifier._get_client()

        await notifier.close()

        assert client.is_closed
        assert notifier._client is None


class TestBuildNotifier:
    """Sink selection from configuration."""

    def test_missing_credentials_give_null_notifier(self):
        config = Config(telegram_bot_token=None, telegram_chat_id=None)

        assert isinstance(build_notifier(config), NullNotifier)

    def test_partial_credentials_give_null_notifier(self):
        config = Config(telegram_bot_token="123:token", telegram_chat_id=None)

        assert isinstance(build_notifier(config), NullNotifier)

    def test_credentials_give_telegram(self):
        config = Config(
            telegram_bot_token="123:token",
            telegram_chat_id="42",
            notify_timeout_seconds=1.5,
        )

        notifier = build_notifier(config)

        assert isinstance(notifier, TelegramNotifier)
        assert notifier.chat_id == "42"
        assert notifier.timeout_seconds == 1.5

    @pytest.mark.asyncio
    async def test_null_notifier_accepts_messages(self):
        await NullNotifier().notify("anything")
