from __future__ import annotations

import logging
from typing import Iterator

import requests
from bs4 import BeautifulSoup, Tag
from requests.adapters import HTTPAdapter

from olx_monitor.errors import ExtractError, FetchError
from olx_monitor.models import Listing

LOGGER = logging.getLogger(__name__)

OLX_ORIGIN = "https://www.olx.ua"
LOCALITY = "Луцьк"

GRID_SELECTOR = 'div[data-testid="listing-grid"]'
CARD_SELECTOR = 'div[data-cy="l-card"]'
PRICE_SELECTOR = 'p[data-testid="ad-price"]'
LOCATION_DATE_SELECTOR = 'p[data-testid="location-date"]'


class OlxClient:
    def __init__(self, *, timeout_seconds: int, user_agent: str) -> None:
        self.timeout_seconds = timeout_seconds
        self.session = requests.Session()
        self.session.headers.update(
            {
                "User-Agent": user_agent,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "uk-UA,uk;q=0.9,en;q=0.6",
                "Cache-Control": "no-cache",
            }
        )
        adapter = HTTPAdapter(max_retries=0)
        self.session.mount("https://", adapter)
        self.session.mount("http://", adapter)

    def fetch_page(self, url: str) -> str:
        try:
            response = self.session.get(url, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise FetchError(f"GET {url} failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise FetchError(f"GET {url} returned HTTP {response.status_code}")
        return response.text

    def fetch_listings(self, url: str) -> Iterator[Listing]:
        return parse_listings(self.fetch_page(url))


def parse_listings(html: str) -> Iterator[Listing]:
    """Yield the listings of a search results page located in ``LOCALITY``.

    Cards are read in document order. Missing title, price or location text
    becomes an empty string; cards without a link are skipped because they
    have no identity to deduplicate on.
    """
    soup = BeautifulSoup(html, "html.parser")
    grid = soup.select_one(GRID_SELECTOR)
    if grid is None:
        raise ExtractError("listing grid not found on page")

    for card in grid.select(CARD_SELECTOR):
        anchor = card.find("a", href=True)
        href = anchor.get("href", "") if anchor else ""
        if not href:
            LOGGER.debug("Skipping card without a link")
            continue

        date = _text_of(card.select_one(LOCATION_DATE_SELECTOR))
        if LOCALITY not in date:
            continue

        yield Listing(
            title=_text_of(card.find("h4")),
            price=_text_of(card.select_one(PRICE_SELECTOR)),
            date=date,
            url=build_listing_url(href),
        )


def build_listing_url(href: str) -> str:
    if href.startswith(("http://", "https://")):
        return href
    if not href.startswith("/"):
        href = "/" + href
    return OLX_ORIGIN + href


def _text_of(element: Tag | None) -> str:
    if element is None:
        return ""
    return element.get_text().strip()
