"""Typed dataclasses describing the content of a website."""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import typing as typ

from .paths import append_component, normalized


def _now() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


@dc.dataclass(frozen=True, slots=True, order=True)
class Tag:
    """A free-form label attached to items."""

    name: str

    def __str__(self) -> str:
        return self.name

    def normalized_string(self) -> str:
        """Return the URL-safe form used for tag pages."""
        return normalized(self.name)


@dc.dataclass(frozen=True, slots=True)
class AudioDuration:
    """Length of an audio file."""

    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    @classmethod
    def parse(cls, text: str) -> AudioDuration:
        """Parse ``HH:mm:ss``, ``mm:ss`` or plain seconds."""
        components = text.strip().split(":")
        if not 1 <= len(components) <= 3:
            msg = "Audio duration strings should be formatted as either HH:mm:ss or mm:ss"
            raise ValueError(msg)
        values: list[int] = []
        for component in components:
            try:
                values.append(int(component))
            except ValueError as exc:
                msg = f"Invalid audio duration component '{component}'"
                raise ValueError(msg) from exc
        values = [0] * (3 - len(values)) + values
        return cls(hours=values[0], minutes=values[1], seconds=values[2])

    @property
    def total_seconds(self) -> int:
        return self.hours * 3600 + self.minutes * 60 + self.seconds

    def __str__(self) -> str:
        return f"{self.hours:02d}:{self.minutes:02d}:{self.seconds:02d}"


@dc.dataclass(slots=True)
class Audio:
    """Audio attached to a piece of content, typically a podcast episode."""

    url: str
    format: str = "mp3"
    duration: AudioDuration | None = None
    byte_size: int | None = dc.field(default=None, metadata={"key": "size"})

    @property
    def mime_type(self) -> str:
        return f"audio/{self.format}"


@dc.dataclass(slots=True)
class Video:
    """A video hosted on YouTube, Vimeo, or at an arbitrary URL."""

    youtube: str | None = None
    vimeo: str | None = None
    url: str | None = None

    @property
    def embed_url(self) -> str | None:
        if self.youtube:
            return f"https://www.youtube-nocookie.com/embed/{self.youtube}"
        if self.vimeo:
            return f"https://player.vimeo.com/video/{self.vimeo}"
        return self.url


@dc.dataclass(slots=True)
class Content:
    """Renderable content shared by every location on a site."""

    title: str = ""
    description: str = ""
    body: str = ""
    date: dt.datetime = dc.field(default_factory=_now)
    last_modified: dt.datetime = dc.field(default_factory=_now)
    image_path: str | None = None
    audio: Audio | None = None
    video: Video | None = None


@dc.dataclass(slots=True)
class ItemRSSProperties:
    """Per-item overrides applied when an item appears in a feed."""

    guid: str | None = None
    title_prefix: str | None = None
    title_suffix: str | None = None
    body_prefix: str | None = None
    body_suffix: str | None = None
    link: str | None = None


class Location:
    """Mixin exposing a location's content fields directly."""

    __slots__ = ()

    content: Content

    @property
    def title(self) -> str:
        return self.content.title

    @property
    def description(self) -> str:
        return self.content.description

    @property
    def body(self) -> str:
        return self.content.body

    @property
    def date(self) -> dt.datetime:
        return self.content.date

    @property
    def last_modified(self) -> dt.datetime:
        return self.content.last_modified

    @property
    def image_path(self) -> str | None:
        return self.content.image_path

    @property
    def audio(self) -> Audio | None:
        return self.content.audio

    @property
    def video(self) -> Video | None:
        return self.content.video


@dc.dataclass(slots=True)
class Item(Location):
    """A dated content entry belonging to exactly one section.

    ``relative_path`` identifies the item inside its section and cannot be
    reassigned once the item exists.
    """

    relative_path: str
    section_id: str = ""
    metadata: typ.Any = dc.field(default_factory=dict)
    tags: list[Tag] = dc.field(default_factory=list)
    content: Content = dc.field(default_factory=Content)
    rss_properties: ItemRSSProperties = dc.field(default_factory=ItemRSSProperties)

    def __setattr__(self, name: str, value: object) -> None:
        if name == "relative_path" and hasattr(self, "relative_path"):
            msg = "An item's relative path cannot be changed"
            raise AttributeError(msg)
        object.__setattr__(self, name, value)

    @property
    def path(self) -> str:
        return append_component(self.section_id, self.relative_path)

    @property
    def rss_title(self) -> str:
        prefix = self.rss_properties.title_prefix or ""
        suffix = self.rss_properties.title_suffix or ""
        return f"{prefix}{self.title}{suffix}"

    def copy(self) -> Item:
        """Return a copy safe to mutate without touching this item."""
        return dc.replace(
            self,
            metadata=_copy_metadata(self.metadata),
            tags=list(self.tags),
            content=dc.replace(self.content),
            rss_properties=dc.replace(self.rss_properties),
        )


@dc.dataclass(slots=True)
class Page(Location):
    """A free-standing page addressed by an explicit path."""

    path: str
    content: Content = dc.field(default_factory=Content)
    metadata: dict[str, typ.Any] = dc.field(default_factory=dict)

    def copy(self) -> Page:
        return dc.replace(
            self, content=dc.replace(self.content), metadata=dict(self.metadata)
        )


@dc.dataclass(slots=True)
class Index(Location):
    """The website's root page."""

    content: Content = dc.field(default_factory=Content)

    @property
    def path(self) -> str:
        return ""


@dc.dataclass(slots=True)
class TagListPage(Location):
    """The page listing every tag used on the site."""

    tags: list[Tag]
    path: str
    content: Content = dc.field(default_factory=Content)


@dc.dataclass(slots=True)
class TagDetailsPage(Location):
    """The page listing every item carrying a single tag."""

    tag: Tag
    path: str
    content: Content = dc.field(default_factory=Content)


def _copy_metadata(metadata: typ.Any) -> typ.Any:
    if isinstance(metadata, dict):
        return dict(metadata)
    if dc.is_dataclass(metadata) and not isinstance(metadata, type):
        return dc.replace(metadata)
    return metadata


__all__ = [
    "Audio",
    "AudioDuration",
    "Content",
    "Index",
    "Item",
    "ItemRSSProperties",
    "Location",
    "Page",
    "Tag",
    "TagDetailsPage",
    "TagListPage",
    "Video",
]
