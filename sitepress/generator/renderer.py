"""Markdown to HTML conversion with Pygments-highlighted code blocks."""

from __future__ import annotations

import dataclasses as dc
import html
import re

from markdown import Markdown
from pygments.formatters.html import HtmlFormatter

FENCE_PATTERN = re.compile(r"^[ ]{0,3}([`~]{3,})([A-Za-z0-9_+#.-]+)?[^\n]*$", re.MULTILINE)
FENCE_LABEL_PATTERN = re.compile(
    r"^([`~]{3,})([A-Za-z0-9_+#.-]+)?(,[^\r\n]+)$", re.MULTILINE
)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
FIRST_HEADING = re.compile(r"<h1[^>]*>(.*?)</h1>", re.DOTALL)
TAG_PATTERN = re.compile(r"<[^>]+>")

MARKDOWN_EXTENSIONS = ("fenced_code", "codehilite", "tables", "sane_lists")


@dc.dataclass(frozen=True, slots=True)
class RenderedMarkdown:
    """HTML produced from a Markdown document plus its first heading."""

    html: str
    title: str | None


class HtmlContentRenderer:
    """Render Markdown bodies into HTML for site content.

    A fresh ``Markdown`` instance is built per call, so one renderer can be
    shared by concurrently running generators.
    """

    def __init__(self, pygments_style: str = "default") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def render(self, text: str) -> RenderedMarkdown:
        """Convert ``text`` to HTML and extract its first ``<h1>`` text."""
        normalized = self._strip_fence_labels(text)
        if not normalized.strip():
            return RenderedMarkdown(html="", title=None)
        md = Markdown(
            extensions=list(MARKDOWN_EXTENSIONS),
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        body = self._annotate_languages(md.convert(normalized), normalized)
        return RenderedMarkdown(html=body, title=self._first_heading(body))

    def markdown(self, text: str) -> str:
        return self.render(text).html

    @staticmethod
    def _first_heading(body: str) -> str | None:
        match = FIRST_HEADING.search(body)
        if match is None:
            return None
        title = html.unescape(TAG_PATTERN.sub("", match.group(1))).strip()
        return title or None

    @staticmethod
    def _annotate_languages(body: str, source: str) -> str:
        """Tag each highlighted block with the language of its opening fence."""
        fences = [match.group(2) or "text" for match in FENCE_PATTERN.finditer(source)]
        # Every block has an opening and a closing fence line.
        languages = fences[::2]
        if not languages:
            return body
        remaining = iter(languages)

        def _repl(_match: re.Match[str]) -> str:
            language = html.escape(next(remaining, "text"), quote=True)
            return f'<div class="codehilite" data-language="{language}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, body, len(languages))

    @staticmethod
    def _strip_fence_labels(text: str) -> str:
        def _repl(match: re.Match[str]) -> str:
            fence, language, _extras = match.groups()
            return f"{fence}{language or ''}"

        return FENCE_LABEL_PATTERN.sub(_repl, text)


__all__ = ["HtmlContentRenderer", "RenderedMarkdown"]
