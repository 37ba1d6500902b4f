"""RSS feed generation for one or more sections."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import typing as typ

from sitepress._constants import DEFAULT_RSS_PATH

from .feed import CachedFeedGenerator, FeedConfiguration, feed_environment, make_entry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitepress.content import Item, Predicate
    from sitepress.context import PublishingContext


@dc.dataclass(frozen=True, slots=True)
class RSSFeedConfiguration(FeedConfiguration):
    """Settings for the site-wide RSS feed.

    Examples
    --------
    >>> RSSFeedConfiguration().target_path
    'feed.rss'
    """

    target_path: str = DEFAULT_RSS_PATH


class RSSFeedGenerator(CachedFeedGenerator):
    """Write an RSS 2.0 feed of the newest items in the included sections."""

    def __init__(
        self,
        *,
        section_ids: cabc.Iterable[str],
        predicate: Predicate[Item] | None,
        config: RSSFeedConfiguration,
        context: PublishingContext,
        date: dt.datetime | None = None,
    ) -> None:
        self.section_ids = tuple(section_ids)
        self.predicate = predicate
        self.config = config
        self.context = context
        self.date = date

    def eligible_items(self) -> list[Item]:
        items = [
            item
            for section_id in self.section_ids
            for item in self.context.sections[section_id].items
            if self.predicate is None or self.predicate.matches(item)
        ]
        return sorted(items, key=lambda item: item.date, reverse=True)

    def render(self, items: cabc.Sequence[Item]) -> str:
        site = self.context.site
        template = feed_environment().get_template("rss.jinja")
        return template.render(
            site=site,
            site_url=site.url,
            feed_url=site.url_for(self.config.target_path),
            date=self.date or dt.datetime.now(dt.UTC),
            config=self.config,
            entries=[make_entry(item, self.context) for item in items],
        )


__all__ = ["RSSFeedConfiguration", "RSSFeedGenerator"]
