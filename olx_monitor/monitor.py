from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Sequence

from olx_monitor.config import Settings, build_channels
from olx_monitor.errors import MonitorError, NotifyError, StoreError
from olx_monitor.models import Channel, Listing
from olx_monitor.olx_client import OlxClient
from olx_monitor.seen_store import SeenSetStore
from olx_monitor.telegram_notifier import TelegramNotifier, format_listing_message

LOGGER = logging.getLogger(__name__)


@dataclass
class PollSummary:
    channel: str
    matched: int = 0
    notified: int = 0
    failed: bool = False


class MonitorService:
    """Scrape, dedupe and notify for each configured channel.

    A listing URL is added to the channel's seen-set immediately after its
    notification is delivered. If that add fails, or the process stops between
    the send and the add, the one listing is notified again on the next poll.
    A failed membership check counts the listing as already seen.
    """

    def __init__(
        self,
        settings: Settings,
        client: OlxClient | None = None,
        seen_store: SeenSetStore | None = None,
        notifier: TelegramNotifier | None = None,
    ) -> None:
        self.settings = settings
        self.channels = build_channels(settings)
        self.client = client or OlxClient(
            timeout_seconds=settings.http_timeout_seconds,
            user_agent=settings.user_agent,
        )
        self.seen_store = seen_store or SeenSetStore(
            rest_url=settings.upstash_rest_url,
            token=settings.upstash_rest_token,
        )
        self.notifier = notifier or TelegramNotifier(
            bot_token=settings.telegram_bot_token,
            chat_id=settings.telegram_chat_id,
            timeout_seconds=settings.http_timeout_seconds,
        )
        self._run_lock = threading.Lock()

    def scrape(self, dry_run: bool = False) -> list[PollSummary]:
        if not self._run_lock.acquire(blocking=False):
            LOGGER.warning("Scrape already in progress, skipping this trigger")
            return []
        try:
            summaries = self.run(self.channels, dry_run=dry_run)
        finally:
            self._run_lock.release()
        LOGGER.info("Scraping complete")
        return summaries

    def run(self, channels: Sequence[Channel], dry_run: bool = False) -> list[PollSummary]:
        summaries: list[PollSummary] = []
        for channel in channels:
            summary = PollSummary(channel=channel.name)
            try:
                self._poll_channel(channel, summary, dry_run=dry_run)
            except MonitorError as exc:
                summary.failed = True
                LOGGER.error("Channel %s failed: %s: %s", channel.name, type(exc).__name__, exc)
            except Exception:
                summary.failed = True
                LOGGER.exception("Unexpected failure while polling channel %s", channel.name)
            LOGGER.info(
                "Poll finished: channel=%s matched=%s new=%s",
                channel.name,
                summary.matched,
                summary.notified,
            )
            summaries.append(summary)
        return summaries

    def run_forever(self, dry_run: bool = False) -> None:
        while True:
            self.scrape(dry_run=dry_run)
            LOGGER.debug("Sleeping for %ss before next poll", self.settings.poll_interval_seconds)
            time.sleep(self.settings.poll_interval_seconds)

    def _poll_channel(self, channel: Channel, summary: PollSummary, dry_run: bool) -> None:
        evaluated: set[str] = set()
        for listing in self.client.fetch_listings(channel.source_url):
            if listing.url in evaluated:
                continue
            evaluated.add(listing.url)
            summary.matched += 1
            if self._notify_if_new(channel, listing, dry_run=dry_run):
                summary.notified += 1

    def _notify_if_new(self, channel: Channel, listing: Listing, dry_run: bool) -> bool:
        try:
            if self.seen_store.is_member(channel.seen_set_key, listing.url):
                return False
        except StoreError as exc:
            LOGGER.error(
                "Channel %s: membership check failed for %s, treating as seen: %s",
                channel.name,
                listing.url,
                exc,
            )
            return False

        message = format_listing_message(listing, channel.message_tag)
        if dry_run:
            LOGGER.info("[DRY-RUN] New listing on %s:\n%s", channel.name, message)
            return True

        LOGGER.info("New listing found on %s:\n%s", channel.name, message)
        try:
            self.notifier.send(message)
        except NotifyError as exc:
            LOGGER.error("Channel %s: send failed for %s: %s", channel.name, listing.url, exc)
            return False

        try:
            self.seen_store.add_all(channel.seen_set_key, [listing.url])
        except StoreError as exc:
            LOGGER.error(
                "Channel %s: notified %s but could not record it as seen, "
                "it will be notified again next poll: %s",
                channel.name,
                listing.url,
                exc,
            )
        return True
