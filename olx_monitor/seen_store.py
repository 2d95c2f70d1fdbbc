from __future__ import annotations

import logging
from typing import Iterable

import httpx
from upstash_redis import Redis
from upstash_redis.errors import UpstashError

from olx_monitor.errors import StoreError

LOGGER = logging.getLogger(__name__)


class SeenSetStore:
    """Per-channel sets of already notified listing URLs.

    Backed by Upstash Redis. Only SISMEMBER and SADD are issued, so a set
    only ever grows.
    """

    def __init__(self, rest_url: str, token: str) -> None:
        self.redis = Redis(url=rest_url, token=token, rest_retries=0, allow_telemetry=False)

    def is_member(self, key: str, url: str) -> bool:
        try:
            return bool(self.redis.sismember(key, url))
        except (UpstashError, httpx.HTTPError, ValueError) as exc:
            raise StoreError(f"SISMEMBER {key} failed: {exc}") from exc

    def add_all(self, key: str, urls: Iterable[str]) -> int:
        members = list(dict.fromkeys(urls))
        if not members:
            raise ValueError("add_all requires at least one URL")
        try:
            added = self.redis.sadd(key, *members)
        except (UpstashError, httpx.HTTPError, ValueError) as exc:
            raise StoreError(f"SADD {key} failed: {exc}") from exc
        LOGGER.debug("SADD %s: %s of %s member(s) new", key, added, len(members))
        return int(added)
