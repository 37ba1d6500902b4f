"""Helpers for the slash-separated, root-relative paths used by site content."""

from __future__ import annotations


def normalized(text: str) -> str:
    """Return ``text`` lowercased with whitespace dashed and symbols removed.

    Examples
    --------
    >>> normalized("Rust & Python 3")
    'rust--python-3'
    """
    characters: list[str] = []
    for character in text.lower():
        if character.isspace():
            characters.append("-")
        elif character.isalnum():
            characters.append(character)
    return "".join(characters)


def append_component(path: str, component: str) -> str:
    """Join ``component`` onto ``path`` with exactly one separating slash."""
    if not path:
        return component
    component = component.lstrip("/")
    separator = "" if path.endswith("/") else "/"
    return f"{path}{separator}{component}"


def absolute_string(path: str) -> str:
    """Return ``path`` rooted at ``/`` unless it already is, or is a URL."""
    if path.startswith(("/", "http://", "https://")):
        return path
    return f"/{path}"


__all__ = ["absolute_string", "append_component", "normalized"]
