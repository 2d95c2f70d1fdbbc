from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from olx_monitor.models import Channel

TAXFREE_TAG = "‼️ БЕЗ КОМІСІЇ ‼️\n"


@dataclass(frozen=True)
class Settings:
    regular_url: str
    taxfree_url: str
    telegram_bot_token: str
    telegram_chat_id: str
    upstash_rest_url: str
    upstash_rest_token: str
    poll_interval_seconds: int
    http_timeout_seconds: int
    log_level: str
    user_agent: str
    port: int


def _get_int(name: str, default: int, minimum: int) -> int:
    raw_value = os.getenv(name, str(default)).strip()
    value = int(raw_value)
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}")
    return value


def _get_required(name: str) -> str:
    value = os.getenv(name, "").strip()
    if not value:
        raise ValueError(f"Missing required environment variable: {name}")
    return value


def load_settings() -> Settings:
    load_dotenv()

    return Settings(
        regular_url=_get_required("REGULAR_URL"),
        taxfree_url=_get_required("TAXFREE_URL"),
        telegram_bot_token=_get_required("TELEGRAM_BOT_TOKEN"),
        telegram_chat_id=_get_required("TELEGRAM_CHAT_ID"),
        upstash_rest_url=_get_required("UPSTASH_REDIS_REST_URL"),
        upstash_rest_token=_get_required("UPSTASH_REDIS_REST_TOKEN"),
        poll_interval_seconds=_get_int("POLL_INTERVAL_SECONDS", default=300, minimum=30),
        http_timeout_seconds=_get_int("HTTP_TIMEOUT_SECONDS", default=15, minimum=5),
        log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
        user_agent=os.getenv(
            "USER_AGENT",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/124.0 Safari/537.36",
        ).strip(),
        port=_get_int("PORT", default=3000, minimum=1),
    )


def build_channels(settings: Settings) -> tuple[Channel, ...]:
    return (
        Channel(
            name="tax-free",
            source_url=settings.taxfree_url,
            seen_set_key="seen_taxfree",
            message_tag=TAXFREE_TAG,
        ),
        Channel(
            name="regular",
            source_url=settings.regular_url,
            seen_set_key="seen_regular",
        ),
    )
