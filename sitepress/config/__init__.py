"""Load and validate a project's ``site.yaml``.

The configuration names the website and its sections and selects the feed,
sitemap, tag page, deployment and plugin settings used by the CLI. The entry
point is :func:`load_project_config`, which applies defaults and returns a
:class:`ProjectConfig`.

Examples
--------
>>> from pathlib import Path
>>> from sitepress.config import load_project_config
>>> config = load_project_config(Path("site.yaml"))  # doctest: +SKIP
>>> config.site.name  # doctest: +SKIP
'My Site'
"""

from .loader import load_project_config
from .models import (
    DeploySettings,
    FeedSettings,
    PodcastSettings,
    ProjectConfig,
    SiteConfigError,
    SiteSettings,
    TagSettings,
)

__all__ = [
    "DeploySettings",
    "FeedSettings",
    "PodcastSettings",
    "ProjectConfig",
    "SiteConfigError",
    "SiteSettings",
    "TagSettings",
    "load_project_config",
]
