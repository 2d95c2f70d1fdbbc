"""Shared fakes for the OLX monitor tests."""

from __future__ import annotations

from typing import Iterable

import pytest
import requests

from olx_monitor.config import Settings
from olx_monitor.errors import FetchError, NotifyError, StoreError
from olx_monitor.olx_client import parse_listings


class FakeResponse:
    def __init__(self, status_code: int = 200, text: str = "", payload: object = None) -> None:
        self.status_code = status_code
        self.text = text
        self._payload = payload

    def json(self) -> object:
        if self._payload is None:
            raise ValueError("no JSON body")
        return self._payload


class FakeClient:
    """Serves canned HTML per URL and parses it with the real extractor."""

    def __init__(self, pages: dict[str, str]) -> None:
        self.pages = pages
        self.failing_urls: set[str] = set()
        self.requested: list[str] = []

    def fetch_listings(self, url: str):
        self.requested.append(url)
        if url in self.failing_urls:
            raise FetchError(f"GET {url} failed: connection refused")
        return parse_listings(self.pages[url])


class FakeSeenSetStore:
    def __init__(self) -> None:
        self.sets: dict[str, list[str]] = {}
        self.failing_members: set[str] = set()
        self.fail_adds = False
        self.calls: list[tuple[str, str]] = []

    def is_member(self, key: str, url: str) -> bool:
        self.calls.append(("is_member", url))
        if url in self.failing_members:
            raise StoreError("SISMEMBER request failed: timed out")
        return url in self.sets.get(key, [])

    def add_all(self, key: str, urls: Iterable[str]) -> int:
        members = list(urls)
        self.calls.append(("add_all", ",".join(members)))
        if self.fail_adds:
            raise StoreError("SADD rejected (HTTP 401): unauthorized")
        existing = self.sets.setdefault(key, [])
        added = 0
        for member in members:
            if member not in existing:
                existing.append(member)
                added += 1
        return added


class FakeNotifier:
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.failing_texts: set[str] = set()

    def send(self, text: str) -> None:
        if any(fragment in text for fragment in self.failing_texts):
            raise NotifyError("Telegram returned HTTP 502")
        self.sent.append(text)


def render_card(title: str | None, price: str | None, date: str | None, href: str | None) -> str:
    parts = ['<div data-cy="l-card">']
    if href is not None:
        parts.append(f'<a href="{href}">')
    if title is not None:
        parts.append(f"<h4>{title}</h4>")
    if href is not None:
        parts.append("</a>")
    if price is not None:
        parts.append(f'<p data-testid="ad-price">{price}</p>')
    if date is not None:
        parts.append(f'<p data-testid="location-date">{date}</p>')
    parts.append("</div>")
    return "".join(parts)


def render_page(*cards: str) -> str:
    return (
        "<html><body><main>"
        '<div data-testid="listing-grid">' + "".join(cards) + "</div>"
        "</main></body></html>"
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        regular_url="https://www.olx.ua/regular",
        taxfree_url="https://www.olx.ua/taxfree",
        telegram_bot_token="123:abc",
        telegram_chat_id="-100200",
        upstash_rest_url="https://example.upstash.io",
        upstash_rest_token="secret-token",
        poll_interval_seconds=300,
        http_timeout_seconds=15,
        log_level="INFO",
        user_agent="test-agent",
        port=3000,
    )


@pytest.fixture
def fake_store() -> FakeSeenSetStore:
    return FakeSeenSetStore()


@pytest.fixture
def fake_notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def make_client():
    return FakeClient


@pytest.fixture
def card():
    return render_card


@pytest.fixture
def page():
    return render_page


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture
def real_response():
    def build(status_code: int, body: bytes = b"") -> requests.Response:
        response = requests.Response()
        response.status_code = status_code
        response._content = body
        response.encoding = "utf-8"
        return response

    return build
