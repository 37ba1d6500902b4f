"""Utility helpers shared by the project configuration loader."""

from __future__ import annotations

import typing as typ

from .models import SiteConfigError

FILE_MODES = frozenset({"folders_and_index_files", "standalone_files"})
DEPLOY_METHODS = frozenset({"git", "github", "github_pages"})
PAGES_SOURCES = frozenset({"master", "master_docs", "gh_pages"})


def _mapping(value: object, key: str) -> dict[str, typ.Any]:
    """Return ``value`` as a dict, treating ``None`` as empty."""
    match value:
        case None:
            return {}
        case dict():
            return dict(value)
        case _:
            msg = f"'{key}' must be a mapping."
            raise SiteConfigError(msg)


def _require(payload: typ.Mapping[str, typ.Any], key: str, scope: str) -> str:
    """Return the non-empty string at ``key`` or raise ``SiteConfigError``."""
    value = _optional_str(payload.get(key))
    if value is None:
        msg = f"Missing required '{scope}.{key}' setting."
        raise SiteConfigError(msg)
    return value


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _string_tuple(value: str | list[object] | None) -> tuple[str, ...]:
    """Normalize a comma separated string or a list into non-empty strings."""
    if isinstance(value, str):
        return tuple(segment.strip() for segment in value.split(",") if segment.strip())
    if isinstance(value, list):
        return tuple(text for segment in value if (text := str(segment).strip()))
    return ()


def _choice(value: object | None, choices: typ.Collection[str], key: str, default: str) -> str:
    """Return ``value`` normalized to snake case when it is one of ``choices``."""
    text = _optional_str(value)
    if text is None:
        return default
    normalized = text.lower().replace("-", "_")
    if normalized not in choices:
        options = ", ".join(sorted(choices))
        msg = f"'{key}' must be one of: {options} (found '{text}')."
        raise SiteConfigError(msg)
    return normalized


def _int(value: object | None, key: str, default: int) -> int:
    if value is None:
        return default
    try:
        return int(typ.cast("typ.SupportsInt", value))
    except (TypeError, ValueError) as exc:
        msg = f"'{key}' must be an integer (found '{value}')."
        raise SiteConfigError(msg) from exc


__all__ = [
    "DEPLOY_METHODS",
    "FILE_MODES",
    "PAGES_SOURCES",
    "_choice",
    "_int",
    "_mapping",
    "_optional_str",
    "_require",
    "_string_tuple",
]
