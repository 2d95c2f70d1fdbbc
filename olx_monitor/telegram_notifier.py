from __future__ import annotations

import logging

import requests

from olx_monitor.errors import NotifyError
from olx_monitor.models import Listing

LOGGER = logging.getLogger(__name__)


class TelegramNotifier:
    def __init__(self, bot_token: str, chat_id: str, timeout_seconds: int) -> None:
        self.chat_id = chat_id
        self.timeout_seconds = timeout_seconds
        self.endpoint = f"https://api.telegram.org/bot{bot_token}/sendMessage"

    def send(self, text: str) -> None:
        payload = {"chat_id": self.chat_id, "text": text}
        try:
            response = requests.post(self.endpoint, json=payload, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise NotifyError(f"Telegram request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            LOGGER.error(
                "Telegram send failed for chat_id=%s status=%s body=%s",
                self.chat_id,
                response.status_code,
                response.text,
            )
            raise NotifyError(f"Telegram returned HTTP {response.status_code}")
        LOGGER.debug("Telegram message sent to chat_id=%s", self.chat_id)


def format_listing_message(listing: Listing, tag: str = "") -> str:
    return f"{tag}{listing.title}\n{listing.price}\n{listing.date}\n{listing.url}"
