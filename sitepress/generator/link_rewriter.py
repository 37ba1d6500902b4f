"""Rewrite root-relative links in feed HTML into absolute URLs."""

from __future__ import annotations

import re

ROOT_RELATIVE_ATTRIBUTE = re.compile(r'\b(href|src)="(/(?!/)[^"]*)"')


def rewrite_relative_urls(html: str, base_url: str) -> str:
    """Prefix every ``href="/..."`` and ``src="/..."`` value with ``base_url``.

    Feed readers resolve links without the page that contained them, so
    root-relative paths have to carry the site's origin. Protocol-relative
    (``//host``) and already absolute values are left untouched.

    Examples
    --------
    >>> rewrite_relative_urls('<img src="/a.png"><a href="b">', "https://x.io/")
    '<img src="https://x.io/a.png"><a href="b">'
    """
    base = base_url.rstrip("/")

    def _repl(match: re.Match[str]) -> str:
        attribute, path = match.groups()
        return f'{attribute}="{base}{path}"'

    return ROOT_RELATIVE_ATTRIBUTE.sub(_repl, html)


__all__ = ["rewrite_relative_urls"]
