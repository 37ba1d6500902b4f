"""Typed dataclasses describing a project's ``site.yaml``."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata


class SiteConfigError(ValueError):
    """Raised when the project configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteSettings:
    """Identity of the website and the sections it declares."""

    name: str
    url: str
    description: str = ""
    language: str = "en"
    section_ids: tuple[str, ...] = ()
    image_path: str | None = None
    favicon_path: str | None = None


@dc.dataclass(slots=True)
class TagSettings:
    """Where tag pages are written; disabled sites get no tag HTML."""

    enabled: bool = True
    base_path: str = "tags"


@dc.dataclass(slots=True)
class FeedSettings:
    """RSS feed options. ``section_ids`` of ``None`` means every section."""

    section_ids: tuple[str, ...] | None = None
    target_path: str = "feed.rss"
    ttl_interval: int = 250
    maximum_item_count: int = 100


@dc.dataclass(slots=True)
class PodcastSettings:
    """Podcast feed options for a single section."""

    section_id: str
    image_url: str
    copyright_text: str
    author_name: str
    author_email: str
    description: str
    subtitle: str
    category: str
    target_path: str = "podcast.rss"
    ttl_interval: int = 250
    subcategory: str | None = None
    is_explicit: bool = False
    podcast_type: str = "episodic"
    new_feed_url: str | None = None


@dc.dataclass(slots=True)
class DeploySettings:
    """How ``sitepress deploy`` ships the output folder."""

    method: str
    remote: str | None = None
    repository: str | None = None
    branch: str = "master"
    target_folder_path: str | None = None
    pages_source: str = "master"
    use_ssh: bool = True


@dc.dataclass(slots=True)
class ProjectConfig:
    """Everything needed to publish a project from its root folder."""

    root: Path
    site: SiteSettings
    tags: TagSettings = dc.field(default_factory=TagSettings)
    rss: FeedSettings = dc.field(default_factory=FeedSettings)
    podcast: PodcastSettings | None = None
    sitemap_excluded_paths: tuple[str, ...] = ()
    deploy: DeploySettings | None = None
    plugins: tuple[str, ...] = ()
    file_mode: str = "folders_and_index_files"
    templates_dir: Path | None = None
    pygments_style: str = "default"


__all__ = [
    "DeploySettings",
    "FeedSettings",
    "PodcastSettings",
    "ProjectConfig",
    "SiteConfigError",
    "SiteSettings",
    "TagSettings",
]
