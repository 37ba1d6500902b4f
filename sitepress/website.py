"""The website definition driving a publishing run.

A :class:`Website` names the site, its base URL and the sections it declares.
Its :meth:`Website.publish` method assembles the standard pipeline: install
plugins, copy resources, parse Markdown content, sort items, render HTML,
write the RSS feed and sitemap, and optionally deploy.

Examples
--------
>>> site = Website(name="Notes", url="https://example.com", section_ids=("posts",))
>>> site.url_for("posts/hello")
'https://example.com/posts/hello'
>>> site.path_for_tag(Tag("Python 3"))
'tags/python-3'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_FAVICON_PATH, DEFAULT_RSS_PATH, DEFAULT_TAG_BASE_PATH
from .content import Content, Location, SortOrder, Tag, append_component

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .deployment import DeploymentMethod
    from .generator.html import HTMLFileMode
    from .generator.rss import RSSFeedConfiguration
    from .pipeline import PublishedWebsite, RunMode
    from .plugins import Plugin
    from .steps import PublishingStep
    from .theme import Theme


@dc.dataclass(slots=True)
class Favicon:
    """Icon advertised in the ``<head>`` of every page."""

    path: str = DEFAULT_FAVICON_PATH
    type: str = "image/png"


@dc.dataclass(slots=True)
class TagHTMLConfiguration:
    """Where tag pages are generated and what content they carry."""

    base_path: str = DEFAULT_TAG_BASE_PATH
    content: Content = dc.field(default_factory=lambda: Content(title="Tags"))
    details_content: cabc.Callable[[Tag], Content] | None = None

    def content_for(self, tag: Tag) -> Content:
        if self.details_content is not None:
            return self.details_content(tag)
        return Content(title=f"Tagged with {tag}")


@dc.dataclass(slots=True)
class Website:
    """Describe a website and the sections it is made of."""

    name: str
    url: str
    description: str = ""
    language: str = "en"
    section_ids: tuple[str, ...] = ()
    image_path: str | None = None
    favicon: Favicon | None = dc.field(default_factory=Favicon)
    tag_html_config: TagHTMLConfiguration | None = dc.field(
        default_factory=TagHTMLConfiguration
    )
    item_metadata: type | None = None

    @property
    def tag_list_path(self) -> str:
        config = self.tag_html_config
        return config.base_path if config else DEFAULT_TAG_BASE_PATH

    def path_for_section(self, section_id: str) -> str:
        return section_id

    def path_for_tag(self, tag: Tag) -> str:
        return append_component(self.tag_list_path, tag.normalized_string())

    def url_for(self, target: str | Location) -> str:
        """Return the absolute URL of a path or location on this site."""
        path = target if isinstance(target, str) else target.path  # type: ignore[attr-defined]
        if path.startswith(("http://", "https://")):
            return path
        base = self.url.rstrip("/")
        path = path.lstrip("/")
        return f"{base}/{path}" if path else base

    def publish(
        self,
        theme: Theme | None = None,
        *,
        root_path: Path | None = None,
        mode: RunMode | None = None,
        file_mode: HTMLFileMode | None = None,
        rss_feed_sections: cabc.Iterable[str] | None = None,
        rss_feed_config: RSSFeedConfiguration | None = None,
        sitemap_excluded_paths: cabc.Iterable[str] = (),
        deployed_using: DeploymentMethod | None = None,
        additional_steps: cabc.Sequence[PublishingStep] = (),
        plugins: cabc.Sequence[Plugin] = (),
    ) -> PublishedWebsite:
        """Publish the site with the standard step sequence.

        Parameters
        ----------
        theme : Theme, optional
            Theme used to render HTML; defaults to the foundation theme.
        root_path : Path, optional
            Project root holding ``Content`` and ``Resources``; defaults to
            the current working directory.
        mode : RunMode, optional
            Which steps to run; defaults to generation.
        rss_feed_sections : Iterable[str], optional
            Sections included in the RSS feed; defaults to every declared
            section.
        rss_feed_config : RSSFeedConfiguration, optional
            Feed settings; defaults to ``feed.rss`` with standard limits.

        Returns
        -------
        PublishedWebsite
            Snapshot of the content model after the final step.
        """
        from . import steps
        from .generator.html import HTMLFileMode
        from .generator.rss import RSSFeedConfiguration
        from .pipeline import RunMode
        from .theme import Theme

        sections = (
            tuple(self.section_ids) if rss_feed_sections is None else tuple(rss_feed_sections)
        )
        feed_config = rss_feed_config or RSSFeedConfiguration(target_path=DEFAULT_RSS_PATH)
        pipeline_steps = [
            steps.group(steps.install_plugin(plugin) for plugin in plugins),
            steps.optional(steps.copy_resources()),
            steps.add_markdown_files(),
            steps.sort_items(key=lambda item: item.date, order=SortOrder.DESCENDING),
            steps.group(additional_steps),
            steps.generate_html(
                theme or Theme.foundation(),
                file_mode=file_mode or HTMLFileMode.FOLDERS_AND_INDEX_FILES,
            ),
            steps.generate_rss_feed(sections, config=feed_config),
            steps.generate_site_map(excluded_paths=sitemap_excluded_paths),
            steps.unwrap(deployed_using, steps.deploy),
        ]
        return self.publish_using(
            pipeline_steps, root_path=root_path, mode=mode or RunMode.GENERATION
        )

    def publish_using(
        self,
        steps: cabc.Sequence[PublishingStep],
        *,
        root_path: Path | None = None,
        mode: RunMode | None = None,
    ) -> PublishedWebsite:
        """Run ``steps`` against this site and return the published snapshot."""
        from .pipeline import PublishingPipeline, RunMode

        pipeline = PublishingPipeline(steps)
        return pipeline.execute(self, root_path, mode or RunMode.GENERATION)


__all__ = ["Favicon", "TagHTMLConfiguration", "Website"]
