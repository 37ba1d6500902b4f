"""Error taxonomy raised while publishing a website.

Precise errors (:class:`ContentError`, :class:`FileIOError`,
:class:`PodcastError`) describe what went wrong and where. The pipeline turns
each of them into a :class:`PublishingError` carrying the name of the step
that was running, so users always see a single uniform report::

    Publish encountered an error:
    [step] Generate RSS feed
    [path] posts/first
    [info] Item mutation failed
    [error] boom
"""

from __future__ import annotations

import enum


def _describe(error: BaseException | str | None) -> str | None:
    """Return a printable message for an underlying error."""
    if error is None:
        return None
    if isinstance(error, str):
        return error
    return str(error) or type(error).__name__


class PublishingErrorConvertible(Exception):
    """Base class for errors that know how to become a ``PublishingError``."""

    def publishing_error(self, step_name: str | None) -> PublishingError:
        raise NotImplementedError


class PublishingError(PublishingErrorConvertible):
    """Top-level error reported by a publishing run."""

    def __init__(
        self,
        info_message: str,
        *,
        step_name: str | None = None,
        path: str | None = None,
        underlying_error: BaseException | str | None = None,
    ) -> None:
        self.info_message = info_message
        self.step_name = step_name
        self.path = path
        self.underlying_error_message = _describe(underlying_error)
        super().__init__(self.description)

    @property
    def description(self) -> str:
        lines = ["Publish encountered an error:"]
        if self.step_name is not None:
            lines.append(f"[step] {self.step_name}")
        if self.path is not None:
            lines.append(f"[path] {self.path}")
        lines.append(f"[info] {self.info_message}")
        if self.underlying_error_message is not None:
            lines.append(f"[error] {self.underlying_error_message}")
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.description

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PublishingError):
            return NotImplemented
        return (
            self.info_message,
            self.step_name,
            self.path,
            self.underlying_error_message,
        ) == (
            other.info_message,
            other.step_name,
            other.path,
            other.underlying_error_message,
        )

    __hash__ = None  # type: ignore[assignment]

    def publishing_error(self, step_name: str | None) -> PublishingError:
        """Return a copy of this error attributed to ``step_name``."""
        return PublishingError(
            self.info_message,
            step_name=step_name,
            path=self.path,
            underlying_error=self.underlying_error_message,
        )


class ContentErrorReason(enum.Enum):
    """Why a content lookup, mutation or decode failed."""

    ITEM_NOT_FOUND = "item_not_found"
    ITEM_MUTATION_FAILED = "item_mutation_failed"
    PAGE_NOT_FOUND = "page_not_found"
    PAGE_MUTATION_FAILED = "page_mutation_failed"
    METADATA_DECODING_FAILED = "metadata_decoding_failed"


class ContentError(PublishingErrorConvertible):
    """Raised when content cannot be found, mutated or decoded."""

    def __init__(
        self,
        path: str,
        reason: ContentErrorReason,
        *,
        underlying_error: BaseException | None = None,
        key_path: str | None = None,
        value_found: bool = False,
    ) -> None:
        self.path = path
        self.reason = reason
        self.underlying_error = underlying_error
        self.key_path = key_path
        self.value_found = value_found
        super().__init__(self.info_message)

    @property
    def info_message(self) -> str:
        match self.reason:
            case ContentErrorReason.ITEM_NOT_FOUND:
                return f"No item found at '{self.path}'."
            case ContentErrorReason.ITEM_MUTATION_FAILED:
                return "Item mutation failed"
            case ContentErrorReason.PAGE_NOT_FOUND:
                return "Page not found"
            case ContentErrorReason.PAGE_MUTATION_FAILED:
                return "Page mutation failed"
            case ContentErrorReason.METADATA_DECODING_FAILED:
                key = f"key '{self.key_path}'" if self.key_path else "unknown key"
                adjective = "Invalid" if self.value_found else "Missing"
                return f"{adjective} metadata value for {key}"
        raise AssertionError(self.reason)  # pragma: no cover - exhaustive match

    def publishing_error(self, step_name: str | None) -> PublishingError:
        return PublishingError(
            self.info_message,
            step_name=step_name,
            path=self.path,
            underlying_error=self.underlying_error,
        )


class FileIOErrorReason(enum.Enum):
    """Storage operations that can fail."""

    ROOT_FOLDER_NOT_FOUND = "The project's root folder could not be found"
    FOLDER_NOT_FOUND = "Folder not found"
    FOLDER_CREATION_FAILED = "Failed to create folder"
    FOLDER_COPYING_FAILED = "The folder could not be copied"
    FILE_NOT_FOUND = "File not found"
    FILE_CREATION_FAILED = "Failed to create file"
    FILE_COULD_NOT_BE_READ = "The file could not be read"
    FILE_COPYING_FAILED = "The file could not be copied"
    DEPLOYMENT_FOLDER_SETUP_FAILED = "Failed to setup deployment folder."


class FileIOError(PublishingErrorConvertible):
    """Raised when a file or folder operation fails."""

    def __init__(
        self,
        path: str,
        reason: FileIOErrorReason,
        *,
        underlying_error: BaseException | None = None,
    ) -> None:
        self.path = path
        self.reason = reason
        self.underlying_error = underlying_error
        super().__init__(f"{reason.value}: {path}")

    def publishing_error(self, step_name: str | None) -> PublishingError:
        # Only deployment setup failures surface their cause.
        underlying = (
            self.underlying_error
            if self.reason is FileIOErrorReason.DEPLOYMENT_FOLDER_SETUP_FAILED
            else None
        )
        return PublishingError(
            self.reason.value,
            step_name=step_name,
            path=self.path,
            underlying_error=underlying,
        )


class PodcastErrorReason(enum.Enum):
    """Missing data that prevents an item from appearing in a podcast feed."""

    MISSING_AUDIO = "Podcast items need to include audio data"
    MISSING_AUDIO_DURATION = (
        "Podcast items need to include audio duration info (audio.duration)"
    )
    MISSING_AUDIO_SIZE = "Podcast items need to include audio size info (audio.size)"
    MISSING_METADATA = "Podcast items need to define 'podcast' metadata"


class PodcastError(PublishingErrorConvertible):
    """Raised when an item cannot be rendered as a podcast episode."""

    def __init__(self, path: str, reason: PodcastErrorReason) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{reason.value}: {path}")

    def publishing_error(self, step_name: str | None) -> PublishingError:
        return PublishingError(self.reason.value, step_name=step_name, path=self.path)


__all__ = [
    "ContentError",
    "ContentErrorReason",
    "FileIOError",
    "FileIOErrorReason",
    "PodcastError",
    "PodcastErrorReason",
    "PublishingError",
    "PublishingErrorConvertible",
]
