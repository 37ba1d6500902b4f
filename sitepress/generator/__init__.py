"""Renderers and generators that turn the content model into output files."""

from .html import HTMLFileMode, HTMLGenerator
from .link_rewriter import rewrite_relative_urls
from .podcast import PodcastAuthor, PodcastFeedConfiguration, PodcastFeedGenerator
from .renderer import HtmlContentRenderer, RenderedMarkdown
from .rss import RSSFeedConfiguration, RSSFeedGenerator
from .sitemap import SiteMapGenerator

__all__ = [
    "HTMLFileMode",
    "HTMLGenerator",
    "HtmlContentRenderer",
    "PodcastAuthor",
    "PodcastFeedConfiguration",
    "PodcastFeedGenerator",
    "RSSFeedConfiguration",
    "RSSFeedGenerator",
    "RenderedMarkdown",
    "SiteMapGenerator",
    "rewrite_relative_urls",
]
