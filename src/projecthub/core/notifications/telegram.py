"""Telegram Bot API client for developer alerts."""

from dataclasses import dataclass

import httpx

from src.projecthub.core.config import Settings
from src.projecthub.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeliveryResult:
    ok: bool
    error: str | None = None


class TelegramNotifier:
    """Send Markdown alerts to one chat through the Telegram Bot API.

    Without a bot token or chat id the notifier runs in dev mode: alerts are
    logged and reported as delivered.
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        bot_token: str | None,
        chat_id: str | None,
        api_url: str = "https://api.telegram.org",
        timeout: float = 10.0,
    ):
        self.http = http
        self.bot_token = bot_token
        self.chat_id = chat_id
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout

    @classmethod
    def from_settings(cls, http: httpx.AsyncClient, settings: Settings) -> "TelegramNotifier":
        return cls(
            http,
            bot_token=settings.telegram_bot_token,
            chat_id=settings.telegram_chat_id,
            api_url=settings.telegram_api_url,
            timeout=settings.notification_timeout_seconds,
        )

    @property
    def configured(self) -> bool:
        return bool(self.bot_token and self.chat_id)

    @property
    def recipient(self) -> str:
        return self.chat_id or "unconfigured"

    async def send(self, text: str) -> DeliveryResult:
        """Deliver one alert.

        Returns:
            DeliveryResult with ok=False and the reason on any HTTP or API error.
        """
        if not self.configured:
            logger.warning("Telegram not configured - alert not sent", length=len(text))
            return DeliveryResult(ok=True)

        url = f"{self.api_url}/bot{self.bot_token}/sendMessage"
        try:
            response = await self.http.post(
                url,
                json={
                    "chat_id": self.chat_id,
                    "text": text,
                    "parse_mode": "Markdown",
                    "disable_web_page_preview": True,
                },
                timeout=self.timeout,
            )
        except httpx.HTTPError as e:
            error = str(e) or type(e).__name__
            logger.warning("Telegram request failed", error=error)
            return DeliveryResult(ok=False, error=error)

        if response.status_code != 200:
            error = f"Telegram API error: {response.status_code} {response.text[:200]}"
            logger.warning("Telegram rejected alert", status_code=response.status_code)
            return DeliveryResult(ok=False, error=error)

        logger.info("Telegram alert sent", chat_id=self.chat_id)
        return DeliveryResult(ok=True)

    async def check_connection(self) -> DeliveryResult:
        """Call getMe to verify the bot token."""
        if not self.configured:
            return DeliveryResult(ok=False, error="Telegram bot token or chat id not configured")
        try:
            response = await self.http.get(
                f"{self.api_url}/bot{self.bot_token}/getMe", timeout=self.timeout
            )
        except httpx.HTTPError as e:
            return DeliveryResult(ok=False, error=str(e) or type(e).__name__)
        if response.status_code != 200 or not response.json().get("ok"):
            return DeliveryResult(ok=False, error=f"Telegram API error: {response.status_code}")
        return DeliveryResult(ok=True)
