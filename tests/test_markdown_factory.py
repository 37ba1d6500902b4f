"""Tests for turning a Markdown content folder into site content."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import typing as typ
from pathlib import Path

import pytest

from sitepress import steps
from sitepress.content import AudioDuration, Tag
from sitepress.content.metadata import MetadataDecoder, MetadataDecodingError
from sitepress.errors import ContentError, ContentErrorReason, PublishingError
from sitepress.pipeline import PublishedWebsite, PublishingPipeline, RunMode
from sitepress.website import Website


@dc.dataclass
class PostMetadata:
    author: str
    reading_minutes: int = 5


def _write(root: Path, relative: str, text: str) -> None:
    path = root / "Content" / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _publish(root: Path, **site_options: typ.Any) -> PublishedWebsite:
    site = Website(
        name="Notes", url="https://example.com", section_ids=("posts",), **site_options
    )
    return PublishingPipeline([steps.add_markdown_files()]).execute(
        site, root, RunMode.GENERATION
    )


@pytest.fixture
def project(tmp_path: Path) -> Path:
    _write(tmp_path, "index.md", "# Welcome\n\nHello.")
    _write(tmp_path, "posts/index.md", "---\ndescription: All posts\n---\n# My posts\n")
    _write(
        tmp_path,
        "posts/first-post.md",
        "---\n"
        "date: 2024-04-02 10:30\n"
        "description: A first post\n"
        "tags: first, article\n"
        "rss.title_prefix: New: \n"
        "audio.url: https://cdn.example.com/1.mp3\n"
        "audio.duration: 01:02:03\n"
        "audio.size: 2048\n"
        "---\n"
        "# My first post\n\n"
        "```python\nprint('hi')\n```\n",
    )
    _write(tmp_path, "posts/2024/recap.markdown", "# Recap\n")
    _write(tmp_path, "posts/notes.txt", "Just text")
    _write(tmp_path, "posts/image.png", "not markdown")
    _write(tmp_path, "about.md", "---\ntitle: About us\n---\nWho we are.")
    _write(tmp_path, "docs/guide/setup.md", "# Setup\n")
    return tmp_path


def test_index_and_section_content(project: Path) -> None:
    published = _publish(project)

    assert published.index.title == "Welcome"
    posts = published.sections["posts"]
    assert posts.title == "My posts"
    assert posts.description == "All posts"


def test_section_items_are_found_recursively(project: Path) -> None:
    posts = _publish(project).sections["posts"]

    assert sorted(item.relative_path for item in posts.items) == [
        "2024/recap",
        "first-post",
        "notes",
    ]


def test_item_front_matter_is_decoded(project: Path) -> None:
    item = _publish(project).sections["posts"].item("first-post")
    assert item is not None

    assert item.title == "My first post"
    assert item.tags == [Tag("first"), Tag("article")]
    assert item.date == dt.datetime(2024, 4, 2, 10, 30).astimezone(dt.UTC)
    assert item.rss_title == "New:My first post"
    assert item.audio is not None
    assert item.audio.duration == AudioDuration(hours=1, minutes=2, seconds=3)
    assert item.audio.byte_size == 2048
    assert 'class="codehilite"' in item.body
    assert item.metadata["description"] == "A first post"


def test_pages_come_from_root_files_and_other_folders(project: Path) -> None:
    pages = _publish(project).pages

    assert sorted(pages) == ["about", "docs/guide/setup"]
    assert pages["about"].title == "About us"
    assert pages["docs/guide/setup"].title == "Setup"


def test_untitled_files_fall_back_to_their_name(project: Path) -> None:
    notes = _publish(project).sections["posts"].item("notes")
    assert notes is not None
    assert notes.title == "notes"


def test_typed_item_metadata(tmp_path: Path) -> None:
    _write(tmp_path, "posts/typed.md", "---\nauthor: Jo\nreading_minutes: 7\n---\n# Typed\n")

    item = _publish(tmp_path, item_metadata=PostMetadata).sections["posts"].item("typed")

    assert item is not None
    assert item.metadata == PostMetadata(author="Jo", reading_minutes=7)


def test_missing_typed_metadata_names_the_key(tmp_path: Path) -> None:
    _write(tmp_path, "posts/untyped.md", "# No author\n")

    with pytest.raises(PublishingError) as excinfo:
        _publish(tmp_path, item_metadata=PostMetadata)

    assert excinfo.value.info_message == "Missing metadata value for key 'author'"
    assert excinfo.value.path == "posts/untyped.md"


def test_malformed_date_is_a_content_error(tmp_path: Path) -> None:
    _write(tmp_path, "posts/bad.md", "---\ndate: yesterday\n---\n# Bad\n")

    with pytest.raises(PublishingError) as excinfo:
        _publish(tmp_path)

    cause = excinfo.value.__cause__
    assert isinstance(cause, ContentError)
    assert cause.reason is ContentErrorReason.METADATA_DECODING_FAILED
    assert excinfo.value.info_message == "Invalid metadata value for key 'date'"


def test_decoder_splits_lists_and_parses_booleans() -> None:
    decoder = MetadataDecoder({"flags": "a, b ,c", "draft": "true"}, "%Y-%m-%d")

    assert decoder.decode("flags", list[str]) == ["a", "b", "c"]
    assert decoder.decode("draft", bool) is True
    assert decoder.decode_optional("missing", str) is None
    with pytest.raises(MetadataDecodingError):
        decoder.decode("flags", int)
