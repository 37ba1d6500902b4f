"""Sitemap generation.

The sitemap is rebuilt on every run. Sections come first, ordered by id and
each followed by its items, then pages ordered by path. Any location whose
path starts with an excluded path is left out.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from sitepress._constants import SITEMAP_PATH

from .feed import feed_environment

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from sitepress.content import Section
    from sitepress.context import PublishingContext


@dc.dataclass(frozen=True, slots=True)
class SiteMapEntry:
    loc: str
    changefreq: str
    priority: float
    lastmod: dt.datetime


class SiteMapGenerator:
    """Write ``sitemap.xml`` listing every section, item and page."""

    def __init__(
        self, *, excluded_paths: cabc.Iterable[str], context: PublishingContext
    ) -> None:
        self.excluded_paths = tuple(excluded_paths)
        self.context = context

    def is_excluded(self, path: str) -> bool:
        return any(path.startswith(excluded) for excluded in self.excluded_paths)

    def entries(self) -> list[SiteMapEntry]:
        site = self.context.site
        entries: list[SiteMapEntry] = []
        for section_id in sorted(self.context.sections):
            section = self.context.sections[section_id]
            if self.is_excluded(section.path):
                continue
            entries.append(
                SiteMapEntry(site.url_for(section), "daily", 1.0, _section_lastmod(section))
            )
            entries.extend(
                SiteMapEntry(site.url_for(item), "monthly", 0.5, item.last_modified)
                for item in section.items
                if not self.is_excluded(item.path)
            )
        pages = sorted(self.context.pages.values(), key=lambda page: page.path)
        entries.extend(
            SiteMapEntry(site.url_for(page), "monthly", 0.5, page.last_modified)
            for page in pages
            if not self.is_excluded(page.path)
        )
        return entries

    def generate(self) -> None:
        template = feed_environment().get_template("sitemap.jinja")
        self.context.write_output_file(SITEMAP_PATH, template.render(entries=self.entries()))


def _section_lastmod(section: Section) -> dt.datetime:
    latest = section.last_item_modification_date
    if latest is None:
        return section.last_modified
    return max(section.last_modified, latest)


__all__ = ["SiteMapEntry", "SiteMapGenerator"]
