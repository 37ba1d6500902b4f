"""Shared machinery for RSS and podcast feed generation.

Rendering a feed means rewriting every item body, so feed generators keep a
cache record next to their step: the configuration, the rendered feed, and
the number of eligible items. A later run reuses the cached feed verbatim
when nothing that could change it has changed since the previous run.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import email.utils
import functools
import logging
import typing as typ
from pathlib import Path

import msgspec
from jinja2 import Environment, FileSystemLoader

from sitepress._constants import DEFAULT_RSS_PATH, FEED_CACHE_NAME

from .link_rewriter import rewrite_relative_urls

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitepress.content import Item
    from sitepress.context import PublishingContext

logger = logging.getLogger(__name__)

FEED_TEMPLATES_DIR = Path(__file__).resolve().parents[1] / "templates" / "feeds"


@dc.dataclass(frozen=True, slots=True)
class FeedConfiguration:
    """Settings shared by every kind of feed."""

    target_path: str = DEFAULT_RSS_PATH
    ttl_interval: int = 250
    maximum_item_count: int = 100


class FeedCacheRecord(msgspec.Struct, frozen=True):
    """What a feed generator remembers between runs."""

    config: dict[str, typ.Any]
    feed: str
    item_count: int


@dc.dataclass(frozen=True, slots=True)
class FeedEntry:
    """One item as it appears in a feed."""

    item: Item
    guid: str
    is_permalink: bool
    title: str
    description: str
    link: str
    date: dt.datetime
    body: str


def rfc822(value: dt.datetime) -> str:
    """Format ``value`` as an RFC 822 date for feed elements."""
    return email.utils.format_datetime(value.astimezone(dt.UTC))


@functools.cache
def feed_environment() -> Environment:
    env = Environment(
        loader=FileSystemLoader(FEED_TEMPLATES_DIR),
        autoescape=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["rfc822"] = rfc822
    return env


def load_cache_record(file: Path) -> FeedCacheRecord | None:
    data = file.read_bytes()
    if not data.strip():
        return None
    try:
        return msgspec.json.decode(data, type=FeedCacheRecord)
    except msgspec.DecodeError as exc:
        logger.warning("ignoring unreadable feed cache %s: %s", file, exc)
        return None


def config_fingerprint(config: FeedConfiguration) -> dict[str, typ.Any]:
    """Return ``config`` as JSON-compatible builtins for cache comparison."""
    return typ.cast("dict[str, typ.Any]", msgspec.to_builtins(config))


def make_entry(item: Item, context: PublishingContext) -> FeedEntry:
    """Build the feed representation of ``item`` with absolute URLs."""
    site = context.site
    properties = item.rss_properties
    body = f"{properties.body_prefix or ''}{item.body}{properties.body_suffix or ''}"
    url = site.url_for(item)
    return FeedEntry(
        item=item,
        guid=properties.guid or url,
        is_permalink=properties.guid is None and properties.link is None,
        title=item.rss_title,
        description=item.description,
        link=properties.link or url,
        date=item.date,
        body=rewrite_relative_urls(body, site.url),
    )


class CachedFeedGenerator:
    """Base class writing a feed through the incremental cache."""

    config: FeedConfiguration
    context: PublishingContext

    def eligible_items(self) -> list[Item]:
        raise NotImplementedError

    def render(self, items: cabc.Sequence[Item]) -> str:
        raise NotImplementedError

    def generate(self) -> None:
        items = self.eligible_items()
        cache_file = self.context.cache_file(FEED_CACHE_NAME)
        fingerprint = config_fingerprint(self.config)
        record = load_cache_record(cache_file)
        feed = self._reusable_feed(record, fingerprint, items)
        if feed is not None:
            logger.debug("reusing cached feed for %s", self.config.target_path)
        else:
            feed = self.render(items[: self.config.maximum_item_count])
            record = FeedCacheRecord(config=fingerprint, feed=feed, item_count=len(items))
            cache_file.write_bytes(msgspec.json.encode(record))
        self.context.write_output_file(self.config.target_path, feed)

    def _reusable_feed(
        self,
        record: FeedCacheRecord | None,
        fingerprint: dict[str, typ.Any],
        items: cabc.Sequence[Item],
    ) -> str | None:
        previous_run = self.context.last_generation_date
        if previous_run is None or record is None:
            return None
        if record.config != fingerprint or record.item_count != len(items):
            return None
        if any(item.last_modified > previous_run for item in items):
            return None
        return record.feed


__all__ = [
    "CachedFeedGenerator",
    "FeedCacheRecord",
    "FeedConfiguration",
    "FeedEntry",
    "config_fingerprint",
    "feed_environment",
    "load_cache_record",
    "make_entry",
    "rfc822",
]
