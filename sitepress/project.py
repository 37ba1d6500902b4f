"""Turn a project folder and its ``site.yaml`` into a published website.

The CLI works on plain folders: ``site.yaml`` describes the website, the
``Content`` folder holds Markdown and ``Resources`` holds static files. This
module builds the :class:`~sitepress.website.Website`, theme, feeds and
deployment method from the configuration and scaffolds new projects.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
import typing as typ

from . import deployment, steps
from ._constants import (
    CONFIG_FILE,
    CONTENT_FOLDER,
    DEFAULT_DATE_FORMAT,
    INTERNAL_FOLDER,
    OUTPUT_FOLDER,
    RESOURCES_FOLDER,
)
from .config import load_project_config
from .generator.html import HTMLFileMode
from .generator.podcast import PodcastAuthor, PodcastFeedConfiguration, PodcastType
from .generator.renderer import HtmlContentRenderer
from .generator.rss import RSSFeedConfiguration
from .pipeline import RunMode
from .plugins import Plugin, load_plugin
from .theme import Theme
from .website import Favicon, TagHTMLConfiguration, Website

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config import DeploySettings, PodcastSettings, ProjectConfig
    from .deployment import DeploymentMethod
    from .pipeline import PublishedWebsite
    from .steps import PublishingStep

logger = logging.getLogger(__name__)

DEFAULT_PROJECT_NAME = "SiteName"


class ProjectFolderNotEmptyError(RuntimeError):
    """Raised when ``new`` targets a folder that already has files."""


def build_website(config: ProjectConfig) -> Website:
    """Return the website described by ``config``."""
    settings = config.site
    return Website(
        name=settings.name,
        url=settings.url,
        description=settings.description,
        language=settings.language,
        section_ids=settings.section_ids,
        image_path=settings.image_path,
        favicon=Favicon(path=settings.favicon_path) if settings.favicon_path else Favicon(),
        tag_html_config=(
            TagHTMLConfiguration(base_path=config.tags.base_path)
            if config.tags.enabled
            else None
        ),
    )


def build_deployment(settings: DeploySettings | None) -> DeploymentMethod | None:
    """Return the deployment method selected by ``settings``, if any."""
    if settings is None:
        return None
    match settings.method:
        case "git":
            return deployment.git(
                settings.remote or "",
                branch=settings.branch,
                target_folder_path=settings.target_folder_path,
            )
        case "github":
            return deployment.github(
                settings.repository or "",
                branch=settings.branch,
                target_folder_path=settings.target_folder_path,
                use_ssh=settings.use_ssh,
            )
        case _:
            source = deployment.GitHubPagesSource[settings.pages_source.upper()]
            return deployment.github_pages(
                settings.repository or "", source, use_ssh=settings.use_ssh
            )


def build_podcast_step(settings: PodcastSettings | None) -> PublishingStep:
    if settings is None:
        return steps.empty()
    config = PodcastFeedConfiguration(
        target_path=settings.target_path,
        ttl_interval=settings.ttl_interval,
        type=PodcastType(settings.podcast_type),
        image_url=settings.image_url,
        copyright_text=settings.copyright_text,
        author=PodcastAuthor(name=settings.author_name, email_address=settings.author_email),
        description=settings.description,
        subtitle=settings.subtitle,
        is_explicit=settings.is_explicit,
        category=settings.category,
        subcategory=settings.subcategory,
        new_feed_url=settings.new_feed_url,
    )
    return steps.generate_podcast_feed(settings.section_id, config)


def build_plugins(config: ProjectConfig) -> list[Plugin]:
    """Return the configured plugins, preceded by the code highlighting style."""
    plugins: list[Plugin] = []
    if config.pygments_style != "default":
        style = config.pygments_style
        plugins.append(
            Plugin(
                name=f"Pygments style '{style}'",
                installer=lambda context: setattr(
                    context, "markdown_renderer", HtmlContentRenderer(pygments_style=style)
                ),
            )
        )
    plugins.extend(load_plugin(reference) for reference in config.plugins)
    return plugins


def publish_project(root: Path, mode: RunMode = RunMode.GENERATION) -> PublishedWebsite:
    """Publish the project at ``root`` as configured by its ``site.yaml``.

    Raises
    ------
    FileNotFoundError
        When ``root`` has no ``site.yaml``.
    SiteConfigError
        When the configuration is invalid.
    PublishingError
        When any publishing step fails.
    """
    config = load_project_config(root / CONFIG_FILE)
    site = build_website(config)
    rss = config.rss
    return site.publish(
        Theme.foundation(templates_dir=config.templates_dir),
        root_path=config.root,
        mode=mode,
        file_mode=HTMLFileMode(config.file_mode),
        rss_feed_sections=rss.section_ids,
        rss_feed_config=RSSFeedConfiguration(
            target_path=rss.target_path,
            ttl_interval=rss.ttl_interval,
            maximum_item_count=rss.maximum_item_count,
        ),
        sitemap_excluded_paths=config.sitemap_excluded_paths,
        deployed_using=build_deployment(config.deploy),
        additional_steps=[build_podcast_step(config.podcast)],
        plugins=build_plugins(config),
    )


def project_name(folder_name: str) -> str:
    """Return a CamelCase project name derived from ``folder_name``.

    Examples
    --------
    >>> project_name("my-new_site")
    'MyNewSite'
    >>> project_name("---")
    'SiteName'
    """
    trimmed = re.sub(r"^[^A-Za-z]+|[^A-Za-z]+$", "", folder_name)
    segments = [segment for segment in re.split(r"[^A-Za-z0-9]+", trimmed) if segment]
    if not segments:
        return DEFAULT_PROJECT_NAME
    return "".join(segment[0].upper() + segment[1:] for segment in segments)


def new_project(folder: Path, *, now: dt.datetime | None = None) -> list[Path]:
    """Scaffold a website project in the empty ``folder``.

    Returns
    -------
    list[Path]
        Every file written, in creation order.

    Raises
    ------
    ProjectFolderNotEmptyError
        When ``folder`` already contains files or folders.
    """
    folder.mkdir(parents=True, exist_ok=True)
    if any(folder.iterdir()):
        msg = "New projects can only be generated in empty directories."
        raise ProjectFolderNotEmptyError(msg)

    name = project_name(folder.resolve().name)
    stamp = (now or dt.datetime.now().astimezone()).strftime(DEFAULT_DATE_FORMAT)
    (folder / RESOURCES_FOLDER).mkdir()
    files = {
        ".gitignore": f".DS_Store\n/{OUTPUT_FOLDER}\n{INTERNAL_FOLDER}\n",
        CONFIG_FILE: (
            "site:\n"
            f"  name: {name}\n"
            "  url: https://your-website-url.com\n"
            "  description: A description of the site.\n"
            "  language: en\n"
            "  sections: [posts]\n"
        ),
        f"{CONTENT_FOLDER}/index.md": f"# Welcome to {name}!\n",
        f"{CONTENT_FOLDER}/posts/index.md": "# My posts\n",
        f"{CONTENT_FOLDER}/posts/first-post.md": (
            "---\n"
            f"date: {stamp}\n"
            "description: A description of my first post.\n"
            "tags: first, article\n"
            "---\n"
            "# My first post\n\n"
            "My first post's text.\n"
        ),
    }
    written: list[Path] = []
    for relative, text in files.items():
        path = folder / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        written.append(path)
    logger.info("generated website project '%s' in %s", name, folder)
    return written


__all__ = [
    "ProjectFolderNotEmptyError",
    "build_deployment",
    "build_plugins",
    "build_podcast_step",
    "build_website",
    "new_project",
    "project_name",
    "publish_project",
]
