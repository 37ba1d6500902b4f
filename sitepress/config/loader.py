"""Load ``site.yaml`` into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .helpers import (
    DEPLOY_METHODS,
    FILE_MODES,
    PAGES_SOURCES,
    _choice,
    _int,
    _mapping,
    _optional_str,
    _require,
    _string_tuple,
)
from .models import (
    DeploySettings,
    FeedSettings,
    PodcastSettings,
    ProjectConfig,
    SiteConfigError,
    SiteSettings,
    TagSettings,
)


def load_project_config(path: Path) -> ProjectConfig:
    """Load the YAML configuration describing a website project.

    Parameters
    ----------
    path : Path
        Filesystem path to the project's ``site.yaml``. Its parent folder is
        the project root holding ``Content`` and ``Resources``.

    Returns
    -------
    ProjectConfig
        Parsed configuration with defaults applied.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure is not a mapping or a required setting is
        missing or invalid.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from sitepress.config import load_project_config
    >>> config = load_project_config(Path("site.yaml"))  # doctest: +SKIP
    >>> config.site.section_ids  # doctest: +SKIP
    ('posts',)
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    root = path.resolve().parent

    site = _build_site_settings(_mapping(raw.get("site"), "site"))
    html = _mapping(raw.get("html"), "html")
    templates = _optional_str(html.get("templates"))
    sitemap = _mapping(raw.get("sitemap"), "sitemap")
    podcast_raw = raw.get("podcast")
    deploy_raw = raw.get("deploy")

    return ProjectConfig(
        root=root,
        site=site,
        tags=_build_tag_settings(raw.get("tags")),
        rss=_build_feed_settings(_mapping(raw.get("rss"), "rss")),
        podcast=(
            _build_podcast_settings(_mapping(podcast_raw, "podcast"))
            if podcast_raw is not None
            else None
        ),
        sitemap_excluded_paths=_string_tuple(sitemap.get("exclude")),
        deploy=(
            _build_deploy_settings(_mapping(deploy_raw, "deploy"))
            if deploy_raw is not None
            else None
        ),
        plugins=_string_tuple(raw.get("plugins")),
        file_mode=_choice(
            html.get("file_mode"), FILE_MODES, "html.file_mode", "folders_and_index_files"
        ),
        templates_dir=root / templates if templates else None,
        pygments_style=_optional_str(html.get("pygments_style")) or "default",
    )


def _build_site_settings(payload: dict[str, typ.Any]) -> SiteSettings:
    sections = _string_tuple(payload.get("sections"))
    if len(set(sections)) != len(sections):
        msg = "'site.sections' must not repeat a section id."
        raise SiteConfigError(msg)
    return SiteSettings(
        name=_require(payload, "name", "site"),
        url=_require(payload, "url", "site"),
        description=_optional_str(payload.get("description")) or "",
        language=_optional_str(payload.get("language")) or "en",
        section_ids=sections,
        image_path=_optional_str(payload.get("image")),
        favicon_path=_optional_str(payload.get("favicon")),
    )


def _build_tag_settings(value: object) -> TagSettings:
    match value:
        case False:
            return TagSettings(enabled=False)
        case None | True:
            return TagSettings()
        case _:
            payload = _mapping(value, "tags")
            return TagSettings(base_path=_optional_str(payload.get("base_path")) or "tags")


def _build_feed_settings(payload: dict[str, typ.Any]) -> FeedSettings:
    sections = payload.get("sections")
    return FeedSettings(
        section_ids=None if sections is None else _string_tuple(sections),
        target_path=_optional_str(payload.get("target_path")) or "feed.rss",
        ttl_interval=_int(payload.get("ttl"), "rss.ttl", 250),
        maximum_item_count=_int(payload.get("maximum_items"), "rss.maximum_items", 100),
    )


def _build_podcast_settings(payload: dict[str, typ.Any]) -> PodcastSettings:
    author = _mapping(payload.get("author"), "podcast.author")
    return PodcastSettings(
        section_id=_require(payload, "section", "podcast"),
        image_url=_require(payload, "image_url", "podcast"),
        copyright_text=_require(payload, "copyright", "podcast"),
        author_name=_require(author, "name", "podcast.author"),
        author_email=_require(author, "email", "podcast.author"),
        description=_require(payload, "description", "podcast"),
        subtitle=_require(payload, "subtitle", "podcast"),
        category=_require(payload, "category", "podcast"),
        target_path=_optional_str(payload.get("target_path")) or "podcast.rss",
        ttl_interval=_int(payload.get("ttl"), "podcast.ttl", 250),
        subcategory=_optional_str(payload.get("subcategory")),
        is_explicit=bool(payload.get("explicit", False)),
        podcast_type=_choice(
            payload.get("type"), {"episodic", "serial"}, "podcast.type", "episodic"
        ),
        new_feed_url=_optional_str(payload.get("new_feed_url")),
    )


def _build_deploy_settings(payload: dict[str, typ.Any]) -> DeploySettings:
    method = _choice(payload.get("method"), DEPLOY_METHODS, "deploy.method", "")
    if not method:
        msg = "Missing required 'deploy.method' setting."
        raise SiteConfigError(msg)
    settings = DeploySettings(
        method=method,
        remote=_optional_str(payload.get("remote")),
        repository=_optional_str(payload.get("repository")),
        branch=_optional_str(payload.get("branch")) or "master",
        target_folder_path=_optional_str(payload.get("target_folder")),
        pages_source=_choice(
            payload.get("source"), PAGES_SOURCES, "deploy.source", "master"
        ),
        use_ssh=bool(payload.get("use_ssh", True)),
    )
    match settings.method:
        case "git" if settings.remote is None:
            _require(payload, "remote", "deploy")
        case "github" | "github_pages" if settings.repository is None:
            _require(payload, "repository", "deploy")
    return settings


__all__ = ["load_project_config"]
