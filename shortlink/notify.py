"""Best-effort access notifications."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

import httpx


class NotificationSink(ABC):
    """Receiver for short, human-readable alerts. Never raises."""

    @abstractmethod
    async def notify(self, text: str) -> None:
        pass

    async def close(self) -> None:
        pass


class NullNotifier(NotificationSink):
    """Inert sink used when no notification channel is configured."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)

    async def notify(self, text: str) -> None:
        self.logger.debug("Notification dropped (no channel configured)")


class TelegramNotifier(NotificationSink):
    """Send notifications through the Telegram Bot API."""

    API_URL = "https://api.telegram.org/bot{token}/sendMessage"

    def __init__(
        self,
        bot_token: str,
        chat_id: str,
        timeout_seconds: float = 5.0,
        client: Optional[httpx.AsyncClient] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize Telegram notifier.

        Args:
            bot_token: Bot API token
            chat_id: Target chat
            timeout_seconds: HTTP timeout for each message
            client: Optional shared HTTP client
            logger: Optional logger instance
        """
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.timeout_seconds = timeout_seconds
        self.logger = logger or logging.getLogger(__name__)
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout_seconds)
        return self._client

    async def notify(self, text: str) -> None:
        url = self.API_URL.format(token=self.bot_token)

        # Error messages carry the request URL, which embeds the token; log
        # status and exception type only.
        try:
            response = await self._get_client().post(
                url,
                json={"chat_id": self.chat_id, "text": text},
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            self.logger.error(
                f"Telegram API error: {e.response.status_code} {e.response.reason_phrase}"
            )
        except httpx.HTTPError as e:
            self.logger.error(f"Failed to send Telegram message: {type(e).__name__}")

    async def close(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def build_notifier(config, logger: Optional[logging.Logger] = None) -> NotificationSink:
    """Pick a notification sink from configuration.

    Missing credentials give an inert sink, never an error.
    """
    logger = logger or logging.getLogger(__name__)

    if config.notifications_enabled:
        logger.info("Telegram notifications enabled")
        return TelegramNotifier(
            bot_token=config.telegram_bot_token,
            chat_id=config.telegram_chat_id,
            timeout_seconds=config.notify_timeout_seconds,
            logger=logger,
        )

    logger.warning("Telegram bot token or chat ID not set - notifications disabled")
    return NullNotifier(logger=logger)
