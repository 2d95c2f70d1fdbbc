from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Listing:
    title: str
    price: str
    date: str
    url: str


@dataclass(frozen=True)
class Channel:
    name: str
    source_url: str
    seen_set_key: str
    message_tag: str = ""
