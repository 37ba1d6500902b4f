"""Tests for concurrent HTML generation through the foundation theme."""

from __future__ import annotations

import datetime as dt
import threading
import typing as typ

import pytest
from bs4 import BeautifulSoup

from sitepress import steps
from sitepress.content import Content, Item, Page, Tag
from sitepress.errors import PublishingError
from sitepress.generator.html import (
    HTMLFileMode,
    OutputCategory,
    run_output_categories,
)
from sitepress.pipeline import PublishingPipeline, RunMode
from sitepress.theme import Theme
from sitepress.website import Website

if typ.TYPE_CHECKING:
    from pathlib import Path


def _site(**overrides: typ.Any) -> Website:
    return Website(
        name="Notes",
        url="https://example.com",
        description="Short notes",
        section_ids=("posts",),
        **overrides,
    )


def _content_steps() -> list[steps.PublishingStep]:
    date = dt.datetime(2024, 5, 1, 12, 0, tzinfo=dt.UTC)
    return [
        steps.add_item(
            Item(
                "hello-world",
                section_id="posts",
                tags=[Tag("Python 3"), Tag("intro")],
                content=Content(
                    title="Hello, world",
                    description="The first post",
                    body="<p>Hi there</p>",
                    date=date,
                    last_modified=date,
                ),
            )
        ),
        steps.add_page(Page("about", content=Content(title="About", body="<p>Me</p>"))),
    ]


def _read(tmp_path: Path, relative: str) -> BeautifulSoup:
    html = (tmp_path / "Output" / relative).read_text(encoding="utf-8")
    return BeautifulSoup(html, "html.parser")


def _publish(site: Website, tmp_path: Path, *extra: steps.PublishingStep) -> None:
    PublishingPipeline([*_content_steps(), *extra]).execute(
        site, tmp_path, RunMode.GENERATION
    )


def test_foundation_theme_writes_every_location(tmp_path: Path) -> None:
    _publish(_site(), tmp_path, steps.generate_html(Theme.foundation()))
    output = tmp_path / "Output"

    expected = [
        "index.html",
        "styles.css",
        "posts/index.html",
        "posts/hello-world/index.html",
        "about/index.html",
        "tags/index.html",
        "tags/python-3/index.html",
        "tags/intro/index.html",
    ]
    missing = [path for path in expected if not (output / path).is_file()]
    assert not missing, f"expected output files were not written: {missing}"

    item = _read(tmp_path, "posts/hello-world/index.html")
    assert item.title is not None and item.title.string == "Hello, world | Notes"
    tag_links = [link["href"] for link in item.select("ul.tag-list a")]
    assert tag_links == ["/tags/python-3", "/tags/intro"]

    index = _read(tmp_path, "index.html")
    assert [link["href"] for link in index.select("article h1 a")] == [
        "/posts/hello-world"
    ]


def test_standalone_file_mode(tmp_path: Path) -> None:
    _publish(
        _site(),
        tmp_path,
        steps.generate_html(Theme.foundation(), HTMLFileMode.STANDALONE_FILES),
    )
    output = tmp_path / "Output"

    assert (output / "posts/hello-world.html").is_file()
    assert (output / "about.html").is_file()
    assert (output / "tags/intro.html").is_file()
    assert (output / "posts/index.html").is_file(), "sections always use index files"


def test_tag_pages_skipped_without_configuration(tmp_path: Path) -> None:
    _publish(_site(tag_html_config=None), tmp_path, steps.generate_html(Theme.foundation()))

    assert not (tmp_path / "Output" / "tags").exists()


def test_tag_details_page_lists_tagged_items(tmp_path: Path) -> None:
    _publish(_site(), tmp_path, steps.generate_html(Theme.foundation()))

    details = _read(tmp_path, "tags/python-3/index.html")
    assert details.select_one("span.tag").get_text() == "Python 3"
    assert [link.get_text() for link in details.select("article h1 a")] == [
        "Hello, world"
    ]


def test_theme_returning_none_skips_tag_details(tmp_path: Path) -> None:
    foundation = Theme.foundation()
    theme = Theme(
        make_index_html=foundation.make_index_html,
        make_section_html=foundation.make_section_html,
        make_item_html=foundation.make_item_html,
        make_page_html=foundation.make_page_html,
        make_tag_list_html=foundation.make_tag_list_html,
        make_tag_details_html=lambda page, context: None,
    )

    _publish(_site(), tmp_path, steps.generate_html(theme))

    assert (tmp_path / "Output" / "tags" / "index.html").is_file()
    assert not (tmp_path / "Output" / "tags" / "intro").exists()


def test_page_colliding_with_tag_list_fails(tmp_path: Path) -> None:
    clash = steps.add_page(Page("tags", content=Content(title="My tags")))

    with pytest.raises(PublishingError) as excinfo:
        _publish(_site(), tmp_path, clash, steps.generate_html(Theme.foundation()))

    error = excinfo.value
    assert error.step_name == "Generate HTML"
    assert error.path == "tags/index.html"
    assert error.info_message.endswith(": pages, tags"), (
        f"expected both colliding categories to be named, got {error.info_message!r}"
    )


def test_all_categories_finish_before_a_failure_is_raised() -> None:
    finished = threading.Event()

    def slow() -> list[str]:
        finished.wait(timeout=5)
        return ["slow.html"]

    def fail() -> list[str]:
        finished.set()
        msg = "theme exploded"
        raise RuntimeError(msg)

    def late_fail() -> list[str]:
        msg = "later failure"
        raise ValueError(msg)

    with pytest.raises(RuntimeError, match="theme exploded"):
        run_output_categories(
            [
                OutputCategory("slow", slow),
                OutputCategory("fail", fail),
                OutputCategory("late", late_fail),
            ]
        )
    assert finished.is_set()


def test_distinct_paths_are_merged() -> None:
    written = run_output_categories(
        [
            OutputCategory("a", lambda: ["a.html", "shared/a.html"]),
            OutputCategory("b", lambda: ["b.html"]),
        ]
    )

    assert sorted(written) == ["a.html", "b.html", "shared/a.html"]


def test_repeated_write_within_one_category_fails() -> None:
    with pytest.raises(PublishingError) as excinfo:
        run_output_categories(
            [
                OutputCategory("sections", lambda: ["posts/index.html", "posts/index.html"]),
                OutputCategory("pages", lambda: ["about.html"]),
            ]
        )

    error = excinfo.value
    assert error.path == "posts/index.html"
    assert error.info_message.endswith(": sections"), (
        f"expected the single writing category to be named, got {error.info_message!r}"
    )


def test_standalone_item_named_index_clashes_with_its_section(tmp_path: Path) -> None:
    clash = steps.add_item(Item("index", section_id="posts", content=Content(title="Oops")))

    with pytest.raises(PublishingError) as excinfo:
        _publish(
            _site(),
            tmp_path,
            clash,
            steps.generate_html(Theme.foundation(), HTMLFileMode.STANDALONE_FILES),
        )

    error = excinfo.value
    assert error.step_name == "Generate HTML"
    assert error.path == "posts/index.html"
    assert error.info_message.endswith(": sections")
