"""Podcast feed generation for a single section.

Every eligible item must carry audio with a duration and a byte size; the
feed adds the iTunes elements podcast directories expect on top of the
plain RSS channel.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import sys
import typing as typ

from sitepress.content.metadata import MetadataDecoder, MetadataDecodingError
from sitepress.errors import PodcastError, PodcastErrorReason

from .feed import CachedFeedGenerator, FeedConfiguration, feed_environment, make_entry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sitepress.content import Audio, AudioDuration, Item, Predicate
    from sitepress.context import PublishingContext


class PodcastType(enum.Enum):
    EPISODIC = "episodic"
    SERIAL = "serial"


@dc.dataclass(frozen=True, slots=True)
class PodcastAuthor:
    name: str
    email_address: str


@dc.dataclass(frozen=True, slots=True, kw_only=True)
class PodcastFeedConfiguration(FeedConfiguration):
    """Settings for a podcast feed.

    Parameters
    ----------
    image_url : str
        Absolute URL of the podcast artwork.
    author : PodcastAuthor
        Listed as both the author and the owner of the feed.
    category : str
        Top-level iTunes category; ``subcategory`` nests inside it.
    new_feed_url : str, optional
        Tells podcast directories to move subscribers to another feed.
    """

    maximum_item_count: int = sys.maxsize
    type: PodcastType = PodcastType.EPISODIC
    image_url: str
    copyright_text: str
    author: PodcastAuthor
    description: str
    subtitle: str
    is_explicit: bool = False
    category: str
    subcategory: str | None = None
    new_feed_url: str | None = None


@dc.dataclass(frozen=True, slots=True)
class PodcastEpisodeMetadata:
    episode: int | None = None
    season: int | None = None
    explicit: bool = False


@dc.dataclass(frozen=True, slots=True)
class PodcastEpisode:
    """An item together with the audio details its feed entry needs."""

    audio: Audio
    duration: AudioDuration
    byte_size: int
    metadata: PodcastEpisodeMetadata


class PodcastFeedGenerator(CachedFeedGenerator):
    """Write a podcast feed of the items in one section."""

    def __init__(
        self,
        *,
        section_id: str,
        predicate: Predicate[Item] | None,
        config: PodcastFeedConfiguration,
        context: PublishingContext,
        date: dt.datetime | None = None,
    ) -> None:
        self.section_id = section_id
        self.predicate = predicate
        self.config = config
        self.context = context
        self.date = date

    def eligible_items(self) -> list[Item]:
        section = self.context.sections[self.section_id]
        items = [
            item
            for item in section.items
            if self.predicate is None or self.predicate.matches(item)
        ]
        return sorted(items, key=lambda item: item.date, reverse=True)

    def render(self, items: cabc.Sequence[Item]) -> str:
        site = self.context.site
        episodes = [(make_entry(item, self.context), self.episode_for(item)) for item in items]
        template = feed_environment().get_template("podcast.jinja")
        return template.render(
            site=site,
            section_url=site.url_for(site.path_for_section(self.section_id)),
            feed_url=site.url_for(self.config.target_path),
            date=self.date or dt.datetime.now(dt.UTC),
            config=self.config,
            episodes=episodes,
        )

    def episode_for(self, item: Item) -> PodcastEpisode:
        """Return the podcast details of ``item``.

        Raises
        ------
        PodcastError
            When the item lacks audio, an audio duration or an audio size, or
            its ``podcast`` metadata cannot be decoded.
        """
        audio = item.audio
        if audio is None:
            raise PodcastError(item.path, PodcastErrorReason.MISSING_AUDIO)
        if audio.duration is None:
            raise PodcastError(item.path, PodcastErrorReason.MISSING_AUDIO_DURATION)
        if audio.byte_size is None:
            raise PodcastError(item.path, PodcastErrorReason.MISSING_AUDIO_SIZE)
        return PodcastEpisode(
            audio=audio,
            duration=audio.duration,
            byte_size=audio.byte_size,
            metadata=self._episode_metadata(item),
        )

    def _episode_metadata(self, item: Item) -> PodcastEpisodeMetadata:
        match item.metadata:
            case dict() as raw:
                decoder = MetadataDecoder(raw, self.context.date_format)
                try:
                    return decoder.decode_dataclass(PodcastEpisodeMetadata, "podcast")
                except MetadataDecodingError as exc:
                    raise PodcastError(
                        item.path, PodcastErrorReason.MISSING_METADATA
                    ) from exc
            case _:
                metadata = getattr(item.metadata, "podcast", None)
                if isinstance(metadata, PodcastEpisodeMetadata):
                    return metadata
                return PodcastEpisodeMetadata()


__all__ = [
    "PodcastAuthor",
    "PodcastEpisode",
    "PodcastEpisodeMetadata",
    "PodcastFeedConfiguration",
    "PodcastFeedGenerator",
    "PodcastType",
]
