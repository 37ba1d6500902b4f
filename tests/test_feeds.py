"""Tests for RSS and podcast feed generation and the feed cache."""

from __future__ import annotations

import datetime as dt
import typing as typ
import xml.etree.ElementTree as ET

import msgspec
import pytest

from sitepress import steps
from sitepress.content import (
    Audio,
    AudioDuration,
    Content,
    Item,
    ItemRSSProperties,
    Predicate,
)
from sitepress.errors import PodcastError, PodcastErrorReason, PublishingError
from sitepress.generator import feed as feed_module
from sitepress.generator.podcast import (
    PodcastAuthor,
    PodcastEpisodeMetadata,
    PodcastFeedConfiguration,
)
from sitepress.generator.rss import RSSFeedConfiguration
from sitepress.pipeline import PublishingPipeline, RunMode
from sitepress.website import Website

if typ.TYPE_CHECKING:
    from pathlib import Path

    from pytest_mock import MockerFixture

FIXED_DATE = dt.datetime(2024, 6, 1, 9, 30, tzinfo=dt.UTC)
ITUNES = "{http://www.itunes.com/dtds/podcast-1.0.dtd}"
CONTENT = "{http://purl.org/rss/1.0/modules/content/}"


@pytest.fixture
def site() -> Website:
    return Website(
        name="Notes",
        url="https://example.com",
        description="Short notes",
        section_ids=("posts", "episodes"),
    )


def _post(path: str, day: int, **content: typ.Any) -> Item:
    date = dt.datetime(2024, 1, day, tzinfo=dt.UTC)
    return Item(
        path,
        section_id="posts",
        content=Content(title=path.title(), date=date, last_modified=date, **content),
    )


def _run(site: Website, root: Path, *pipeline: steps.PublishingStep) -> None:
    PublishingPipeline(list(pipeline)).execute(site, root, RunMode.GENERATION)


def _channel(root: Path, name: str = "feed.rss") -> ET.Element:
    tree = ET.parse(root / "Output" / name)  # noqa: S314
    channel = tree.getroot().find("channel")
    assert channel is not None, "feed must contain a channel element"
    return channel


def test_rss_feed_lists_newest_items_first(site: Website, tmp_path: Path) -> None:
    _run(
        site,
        tmp_path,
        steps.add_items([_post("older", 1), _post("newer", 2)]),
        steps.generate_rss_feed(["posts"], date=FIXED_DATE),
    )

    channel = _channel(tmp_path)
    assert channel.findtext("title") == "Notes"
    assert channel.findtext("lastBuildDate") == "Sat, 01 Jun 2024 09:30:00 +0000"
    assert channel.findtext("ttl") == "250"
    assert [item.findtext("link") for item in channel.iter("item")] == [
        "https://example.com/posts/newer",
        "https://example.com/posts/older",
    ]


def test_rss_feed_honours_limit_predicate_and_item_properties(
    site: Website, tmp_path: Path
) -> None:
    featured = _post(
        "featured",
        3,
        body='<p><a href="/about">About</a> <img src="//cdn.example/x.png"></p>',
    )
    featured.rss_properties = ItemRSSProperties(
        guid="custom-guid", title_prefix="[Star] ", body_suffix='<a href="/more">More</a>'
    )
    _run(
        site,
        tmp_path,
        steps.add_items([_post("draft", 1), _post("plain", 2), featured]),
        steps.generate_rss_feed(
            ["posts"],
            predicate=~Predicate(lambda item: item.relative_path == "draft"),
            config=RSSFeedConfiguration(maximum_item_count=1),
            date=FIXED_DATE,
        ),
    )

    items = list(_channel(tmp_path).iter("item"))
    assert len(items) == 1, "the feed must be capped at the maximum item count"
    entry = items[0]
    guid = entry.find("guid")
    assert guid is not None and guid.text == "custom-guid"
    assert guid.get("isPermaLink") == "false"
    assert entry.findtext("title") == "[Star] Featured"
    body = entry.findtext(f"{CONTENT}encoded") or ""
    assert 'href="https://example.com/about"' in body
    assert 'href="https://example.com/more"' in body
    assert 'src="//cdn.example/x.png"' in body, "protocol-relative URLs stay as they are"


def test_rss_feed_step_is_empty_without_sections() -> None:
    assert steps.generate_rss_feed(()).name is None


def test_feed_cache_is_reused_when_nothing_changed(
    site: Website, tmp_path: Path, mocker: MockerFixture
) -> None:
    pipeline = [steps.add_items([_post("first", 1)]), steps.generate_rss_feed(["posts"])]
    _run(site, tmp_path, *pipeline)
    cache = tmp_path / ".publish" / "Caches" / "generate-rss-feed" / "feed"
    record = msgspec.json.decode(cache.read_bytes(), type=feed_module.FeedCacheRecord)
    assert record.item_count == 1
    first_feed = (tmp_path / "Output" / "feed.rss").read_text(encoding="utf-8")

    spy = mocker.spy(feed_module, "rewrite_relative_urls")
    _run(site, tmp_path, *pipeline)

    assert spy.call_count == 0, "an unchanged feed must not be re-rendered"
    assert (tmp_path / "Output" / "feed.rss").read_text(encoding="utf-8") == first_feed


def test_feed_cache_invalidated_by_item_count(
    site: Website, tmp_path: Path, mocker: MockerFixture
) -> None:
    _run(site, tmp_path, steps.add_items([_post("first", 1)]), steps.generate_rss_feed(["posts"]))

    spy = mocker.spy(feed_module, "rewrite_relative_urls")
    _run(
        site,
        tmp_path,
        steps.add_items([_post("first", 1), _post("second", 2)]),
        steps.generate_rss_feed(["posts"]),
    )

    assert spy.call_count == 2
    links = [item.findtext("link") for item in _channel(tmp_path).iter("item")]
    assert links == ["https://example.com/posts/second", "https://example.com/posts/first"]


def test_feed_cache_invalidated_by_recently_modified_item(
    site: Website, tmp_path: Path, mocker: MockerFixture
) -> None:
    _run(site, tmp_path, steps.add_items([_post("first", 1)]), steps.generate_rss_feed(["posts"]))

    touched = _post("first", 1)
    touched.content.last_modified = dt.datetime.now(dt.UTC) + dt.timedelta(minutes=5)
    spy = mocker.spy(feed_module, "rewrite_relative_urls")
    _run(site, tmp_path, steps.add_items([touched]), steps.generate_rss_feed(["posts"]))

    assert spy.call_count == 1

def test_feed_cache_invalidated_by_maximum_item_count(
    site: Website, tmp_path: Path, mocker: MockerFixture
) -> None:
    posts = [_post("first", 1), _post("second", 2), _post("third", 3)]
    _run(
        site,
        tmp_path,
        steps.add_items(posts),
        steps.generate_rss_feed(["posts"], config=RSSFeedConfiguration(maximum_item_count=3)),
    )

    spy = mocker.spy(feed_module, "rewrite_relative_urls")
    _run(
        site,
        tmp_path,
        steps.add_items(posts),
        steps.generate_rss_feed(["posts"], config=RSSFeedConfiguration(maximum_item_count=1)),
    )

    assert spy.call_count == 1, "a changed item limit must re-render the capped feed"
    links = [item.findtext("link") for item in _channel(tmp_path).iter("item")]
    assert links == ["https://example.com/posts/third"]



def _episode(path: str, audio: Audio | None, **metadata: str) -> Item:
    return Item(
        path,
        section_id="episodes",
        metadata=dict(metadata),
        content=Content(title=path.title(), description=f"About {path}", audio=audio),
    )


def _podcast_config() -> PodcastFeedConfiguration:
    return PodcastFeedConfiguration(
        target_path="podcast.rss",
        image_url="https://example.com/cover.png",
        copyright_text="Copyright Notes",
        author=PodcastAuthor(name="Sam Doe", email_address="sam@example.com"),
        description="A show about notes",
        subtitle="Notes, spoken",
        category="Technology",
        subcategory="Software",
    )


def test_podcast_feed_includes_itunes_elements(site: Website, tmp_path: Path) -> None:
    audio = Audio(
        url="https://cdn.example.com/ep1.mp3",
        duration=AudioDuration(minutes=42, seconds=5),
        byte_size=1234,
    )
    _run(
        site,
        tmp_path,
        steps.add_item(
            _episode("ep1", audio, **{"podcast.episode": "1", "podcast.explicit": "true"})
        ),
        steps.generate_podcast_feed("episodes", _podcast_config(), date=FIXED_DATE),
    )

    channel = _channel(tmp_path, "podcast.rss")
    assert channel.findtext("link") == "https://example.com/episodes"
    assert channel.findtext(f"{ITUNES}author") == "Sam Doe"
    category = channel.find(f"{ITUNES}category")
    assert category is not None and category.get("text") == "Technology"
    nested = category.find(f"{ITUNES}category")
    assert nested is not None and nested.get("text") == "Software"
    item = channel.find("item")
    assert item is not None
    assert item.findtext(f"{ITUNES}duration") == "00:42:05"
    assert item.findtext(f"{ITUNES}episode") == "1"
    assert item.findtext(f"{ITUNES}explicit") == "yes"
    enclosure = item.find("enclosure")
    assert enclosure is not None
    assert enclosure.attrib == {
        "url": "https://cdn.example.com/ep1.mp3",
        "length": "1234",
        "type": "audio/mp3",
    }


@pytest.mark.parametrize(
    ("audio", "reason"),
    [
        (None, PodcastErrorReason.MISSING_AUDIO),
        (Audio(url="https://x/a.mp3", byte_size=10), PodcastErrorReason.MISSING_AUDIO_DURATION),
        (
            Audio(url="https://x/a.mp3", duration=AudioDuration(seconds=3)),
            PodcastErrorReason.MISSING_AUDIO_SIZE,
        ),
    ],
)
def test_podcast_items_need_complete_audio(
    site: Website, tmp_path: Path, audio: Audio | None, reason: PodcastErrorReason
) -> None:
    with pytest.raises(PublishingError) as excinfo:
        _run(
            site,
            tmp_path,
            steps.add_item(_episode("ep1", audio)),
            steps.generate_podcast_feed("episodes", _podcast_config()),
        )

    error = excinfo.value
    assert error.step_name == "Generate podcast feed"
    assert error.path == "episodes/ep1"
    assert error.info_message == reason.value
    assert isinstance(error.__cause__, PodcastError)


def test_episode_metadata_read_from_dataclass_metadata(
    site: Website, tmp_path: Path
) -> None:
    class ShowMetadata:
        podcast = PodcastEpisodeMetadata(episode=7, season=2)

    audio = Audio(url="https://x/a.mp3", duration=AudioDuration(seconds=30), byte_size=5)
    item = _episode("ep7", audio)
    item.metadata = ShowMetadata()
    _run(
        site,
        tmp_path,
        steps.add_item(item),
        steps.generate_podcast_feed("episodes", _podcast_config()),
    )

    entry = _channel(tmp_path, "podcast.rss").find("item")
    assert entry is not None
    assert entry.findtext(f"{ITUNES}season") == "2"
    assert entry.findtext(f"{ITUNES}explicit") == "no"
