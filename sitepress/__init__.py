"""Build static websites from Markdown content through publishing steps.

A :class:`~sitepress.website.Website` runs an ordered list of steps against a
shared content model, renders it to HTML through a theme, writes feeds and a
sitemap, and can deploy the result.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from sitepress import main
>>> main()  # doctest: +SKIP
>>> from sitepress import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
