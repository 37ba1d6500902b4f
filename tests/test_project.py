"""End-to-end tests for scaffolding and publishing a project folder."""

from __future__ import annotations

import datetime as dt
import typing as typ

import pytest
from bs4 import BeautifulSoup

from sitepress.config import load_project_config
from sitepress.deployment import DeploymentMethod
from sitepress.pipeline import RunMode
from sitepress.project import (
    ProjectFolderNotEmptyError,
    build_deployment,
    build_plugins,
    new_project,
    project_name,
    publish_project,
)

if typ.TYPE_CHECKING:
    from pathlib import Path

SCAFFOLD_TIME = dt.datetime(2024, 7, 1, 8, 15, tzinfo=dt.UTC)


@pytest.fixture
def scaffolded(tmp_path: Path) -> Path:
    root = tmp_path / "my-blog"
    new_project(root, now=SCAFFOLD_TIME)
    return root


def test_project_name_is_camel_cased() -> None:
    assert project_name("my-blog") == "MyBlog"
    assert project_name("2024_site") == "Site"


def test_new_project_layout(scaffolded: Path) -> None:
    assert (scaffolded / "Resources").is_dir()
    assert (scaffolded / "Content" / "index.md").read_text(encoding="utf-8") == (
        "# Welcome to MyBlog!\n"
    )
    post = (scaffolded / "Content" / "posts" / "first-post.md").read_text(encoding="utf-8")
    assert "date: 2024-07-01 08:15" in post
    assert "tags: first, article" in post
    assert load_project_config(scaffolded / "site.yaml").site.name == "MyBlog"


def test_new_project_refuses_non_empty_folders(scaffolded: Path) -> None:
    with pytest.raises(ProjectFolderNotEmptyError):
        new_project(scaffolded)


def test_publish_scaffolded_project(scaffolded: Path) -> None:
    published = publish_project(scaffolded)

    output = scaffolded / "Output"
    for relative in (
        "index.html",
        "styles.css",
        "posts/index.html",
        "posts/first-post/index.html",
        "tags/index.html",
        "tags/first/index.html",
        "tags/article/index.html",
        "feed.rss",
        "sitemap.xml",
    ):
        assert (output / relative).is_file(), f"missing {relative}"
    assert [item.path for item in published.sections["posts"].items] == ["posts/first-post"]

    index = BeautifulSoup((output / "index.html").read_text(encoding="utf-8"), "html.parser")
    heading = index.select_one("div.description h1")
    assert heading is not None and heading.get_text() == "Welcome to MyBlog!"


def test_publish_in_deployment_mode_without_method_fails(scaffolded: Path) -> None:
    from sitepress.errors import PublishingError

    with pytest.raises(PublishingError) as excinfo:
        publish_project(scaffolded, RunMode.DEPLOYMENT)

    assert excinfo.value.info_message == "MyBlog has no deployment steps."


def test_build_deployment_selects_method(tmp_path: Path) -> None:
    config_path = tmp_path / "site.yaml"
    config_path.write_text(
        "site:\n  name: N\n  url: https://n.example\n"
        "deploy:\n  method: github\n  repository: n/site\n  use_ssh: false\n",
        encoding="utf-8",
    )
    config = load_project_config(config_path)

    method = build_deployment(config.deploy)

    assert isinstance(method, DeploymentMethod)
    assert method.name == "Git (https://github.com/n/site.git)"
    assert build_deployment(None) is None


def test_pygments_style_is_installed_as_a_plugin(tmp_path: Path) -> None:
    config_path = tmp_path / "site.yaml"
    config_path.write_text(
        "site:\n  name: N\n  url: https://n.example\nhtml:\n  pygments_style: monokai\n",
        encoding="utf-8",
    )

    plugins = build_plugins(load_project_config(config_path))

    assert [plugin.name for plugin in plugins] == ["Pygments style 'monokai'"]
