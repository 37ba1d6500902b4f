"""Decode flat ``key: value`` front matter into typed values.

Front matter is a flat mapping of strings. Dotted keys (``audio.url``) address
fields of nested dataclasses, comma-separated values become lists, dates are
parsed with a configurable ``strptime`` format, and booleans accept ``true``
or ``false``. The target shape is read from dataclass type hints, so an item
metadata class such as::

    @dc.dataclass
    class PostMetadata:
        author: str
        reading_minutes: int = 5

decodes from ``author: Jo`` plus an optional ``reading_minutes: 7``.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import enum
import types
import typing as typ

from .models import Tag

if typ.TYPE_CHECKING:
    import collections.abc as cabc

T = typ.TypeVar("T")


class MetadataDecodingError(ValueError):
    """Raised when a metadata value is missing or cannot be converted."""

    def __init__(self, key_path: str, *, value_found: bool, detail: str = "") -> None:
        self.key_path = key_path
        self.value_found = value_found
        adjective = "Invalid" if value_found else "Missing"
        message = f"{adjective} metadata value for key '{key_path}'"
        super().__init__(f"{message}: {detail}" if detail else message)


def parse_front_matter(text: str) -> tuple[dict[str, str], str]:
    """Split ``text`` into its ``---`` delimited metadata and Markdown body.

    Examples
    --------
    >>> parse_front_matter("---\\ntitle: Hi\\n---\\n# Body")
    ({'title': 'Hi'}, '# Body')
    """
    lines = text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, text
    for end, line in enumerate(lines[1:], start=1):
        if line.strip() == "---":
            break
    else:
        return {}, text
    metadata: dict[str, str] = {}
    for line in lines[1:end]:
        key, separator, value = line.partition(":")
        if not separator or not key.strip():
            continue
        metadata[key.strip()] = value.strip()
    return metadata, "\n".join(lines[end + 1 :])


class MetadataDecoder:
    """Convert flat string metadata into the types a dataclass declares."""

    def __init__(self, metadata: cabc.Mapping[str, str], date_format: str) -> None:
        self.metadata = dict(metadata)
        self.date_format = date_format

    def decode(self, key: str, hint: typ.Any) -> typ.Any:
        """Decode ``key`` as ``hint``, raising when it is absent."""
        return self._decode(key, hint)

    def decode_optional(self, key: str, hint: typ.Any) -> typ.Any | None:
        """Decode ``key`` as ``hint``, returning ``None`` when it is absent."""
        if not self._is_present(key):
            return None
        return self._decode(key, hint)

    def decode_dataclass(self, cls: type[T], prefix: str = "") -> T:
        hints = typ.get_type_hints(cls)
        values: dict[str, typ.Any] = {}
        for field in dc.fields(cls):  # type: ignore[arg-type]
            if not field.init:
                continue
            name = field.metadata.get("key", field.name)
            key = f"{prefix}.{name}" if prefix else name
            has_default = (
                field.default is not dc.MISSING or field.default_factory is not dc.MISSING
            )
            if has_default and not self._is_present(key):
                continue
            values[field.name] = self._decode(key, hints[field.name])
        return cls(**values)

    def _decode(self, key: str, hint: typ.Any) -> typ.Any:
        origin = typ.get_origin(hint)
        if origin in (typ.Union, types.UnionType):
            options = [arg for arg in typ.get_args(hint) if arg is not type(None)]
            if not self._is_present(key):
                if len(options) < len(typ.get_args(hint)):
                    return None
                raise MetadataDecodingError(key, value_found=False)
            return self._decode(key, options[0])
        if dc.is_dataclass(hint) and not _is_scalar(hint):
            if not self._is_present(key):
                raise MetadataDecodingError(key, value_found=False)
            return self.decode_dataclass(hint, key)
        raw = self.metadata.get(key)
        if raw is None:
            raise MetadataDecodingError(key, value_found=False)
        if origin in (list, tuple, set, frozenset):
            args = typ.get_args(hint)
            element = args[0] if args else str
            parts = [part.strip() for part in raw.split(",") if part.strip()]
            values = [self._convert(key, element, part) for part in parts]
            return values if origin is list else origin(values)
        return self._convert(key, hint, raw)

    def _convert(self, key: str, hint: typ.Any, raw: str) -> typ.Any:
        try:
            return self._convert_value(hint, raw)
        except (TypeError, ValueError) as exc:
            raise MetadataDecodingError(key, value_found=True, detail=str(exc)) from exc

    def _convert_value(self, hint: typ.Any, raw: str) -> typ.Any:
        match hint:
            case type() if hint is str or hint is typ.Any:
                return raw
            case type() if hint is bool:
                lowered = raw.lower()
                if lowered not in {"true", "false"}:
                    msg = f"expected 'true' or 'false', found '{raw}'"
                    raise ValueError(msg)
                return lowered == "true"
            case type() if hint is int or hint is float:
                return hint(raw)
            case type() if hint is dt.datetime:
                parsed = dt.datetime.strptime(raw, self.date_format)  # noqa: DTZ007
                return parsed.astimezone(dt.UTC)
            case type() if hint is Tag:
                return Tag(raw)
            case type() if issubclass(hint, enum.Enum):
                return hint(raw)
            case type() if hasattr(hint, "parse"):
                return hint.parse(raw)
            case _:
                if hint is typ.Any:
                    return raw
                msg = f"unsupported metadata type {hint!r}"
                raise TypeError(msg)

    def _is_present(self, key: str) -> bool:
        prefix = f"{key}."
        return key in self.metadata or any(name.startswith(prefix) for name in self.metadata)


def _is_scalar(hint: typ.Any) -> bool:
    """Return whether ``hint`` is parsed from a single value."""
    return hint is Tag or hasattr(hint, "parse")


__all__ = ["MetadataDecoder", "MetadataDecodingError", "parse_front_matter"]
