"""Concurrent HTML generation with output conflict detection.

HTML output is produced by five independent categories (theme resources, the
index, sections with their items, pages, and tags) that run concurrently on
a thread pool. Categories fan out further per section, item, page or tag.
Each unit reports the output paths it wrote; once every unit has finished,
the paths are merged and any path written by more than one category fails
the step with an error naming the colliding categories.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ
from concurrent.futures import ThreadPoolExecutor

from sitepress import storage
from sitepress.content import TagDetailsPage, TagListPage, append_component
from sitepress.errors import FileIOError, FileIOErrorReason, PublishingError

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from sitepress.content import Item, Page, Section, Tag
    from sitepress.context import PublishingContext
    from sitepress.theme import Theme

logger = logging.getLogger(__name__)

OutputTask = typ.Callable[[], list[str]]


class HTMLFileMode(enum.Enum):
    """How a location path maps onto an HTML file."""

    FOLDERS_AND_INDEX_FILES = "folders_and_index_files"
    STANDALONE_FILES = "standalone_files"

    def file_path(self, path: str) -> str:
        """Return the output file for ``path``.

        Examples
        --------
        >>> HTMLFileMode.FOLDERS_AND_INDEX_FILES.file_path("posts/hello")
        'posts/hello/index.html'
        >>> HTMLFileMode.STANDALONE_FILES.file_path("posts/hello")
        'posts/hello.html'
        """
        if self is HTMLFileMode.STANDALONE_FILES:
            return f"{path}.html"
        return append_component(path, "index.html")


@dc.dataclass(frozen=True, slots=True)
class OutputCategory:
    """A named unit of output generation returning the paths it wrote."""

    name: str
    generate: OutputTask


def run_output_categories(categories: cabc.Sequence[OutputCategory]) -> list[str]:
    """Run ``categories`` concurrently and return every path written.

    All categories run to completion before any failure is reported; the
    first failing category in submission order wins.

    Raises
    ------
    PublishingError
        When an output path was written more than once, whether by two
        categories or twice by the same one.
    """
    if not categories:
        return []
    with ThreadPoolExecutor(max_workers=len(categories)) as executor:
        futures = [executor.submit(category.generate) for category in categories]
    # Every write is recorded, repeats within one category included.
    writers: dict[str, list[str]] = {}
    for category, future in zip(categories, futures, strict=True):
        for path in future.result():
            writers.setdefault(path, []).append(category.name)
    conflicts = {path: names for path, names in writers.items() if len(names) > 1}
    if conflicts:
        path, names = min(conflicts.items())
        msg = (
            "HTML output path written more than once by: "
            + ", ".join(dict.fromkeys(names))
        )
        raise PublishingError(msg, path=path)
    return list(writers)


def fan_out(tasks: cabc.Iterable[OutputTask]) -> list[str]:
    """Run ``tasks`` concurrently, joining them before reporting results."""
    with ThreadPoolExecutor() as executor:
        futures = [executor.submit(task) for task in tasks]
    written: list[str] = []
    for future in futures:
        written.extend(future.result())
    return written


class HTMLGenerator:
    """Render every location of a site through a theme."""

    def __init__(
        self, *, theme: Theme, file_mode: HTMLFileMode, context: PublishingContext
    ) -> None:
        self.theme = theme
        self.file_mode = file_mode
        self.context = context

    def categories(self) -> list[OutputCategory]:
        return [
            OutputCategory("theme resources", self.copy_theme_resources),
            OutputCategory("index", self.generate_index_html),
            OutputCategory("sections", self.generate_section_html),
            OutputCategory("pages", self.generate_page_html),
            OutputCategory("tags", self.generate_tag_html),
        ]

    def generate(self) -> list[str]:
        written = run_output_categories(self.categories())
        logger.debug("wrote %d HTML output files", len(written))
        return written

    def copy_theme_resources(self) -> list[str]:
        root = self.theme.resource_root or self.context.folders.root
        output = self.context.folders.output
        written: list[str] = []
        for path in self.theme.resource_paths:
            source = root / path
            if not source.exists():
                raise FileIOError(path, FileIOErrorReason.FILE_NOT_FOUND)
            destination = storage.copy_into(source, output, path)
            written.extend(_relative_files(destination, output))
        return written

    def generate_index_html(self) -> list[str]:
        html = self.theme.make_index_html(self.context.index, self.context)
        return [self._write("index.html", html)]

    def generate_section_html(self) -> list[str]:
        sections = list(self.context.sections.values())
        return fan_out(
            [lambda section=section: self._render_section(section) for section in sections]
        )

    def generate_page_html(self) -> list[str]:
        pages = list(self.context.pages.values())
        return fan_out([lambda page=page: self._render_page(page) for page in pages])

    def generate_tag_html(self) -> list[str]:
        config = self.context.site.tag_html_config
        if config is None:
            return []
        tags = sorted(self.context.all_tags)
        written: list[str] = []
        if self.theme.make_tag_list_html is not None:
            page = TagListPage(
                tags=tags, path=self.context.site.tag_list_path, content=config.content
            )
            html = self.theme.make_tag_list_html(page, self.context)
            if html is not None:
                written.append(self._write(append_component(page.path, "index.html"), html))
        if self.theme.make_tag_details_html is not None:
            written.extend(fan_out([lambda tag=tag: self._render_tag(tag) for tag in tags]))
        return written

    def _render_section(self, section: Section) -> list[str]:
        html = self.theme.make_section_html(section, self.context)
        written = [self._write(append_component(section.path, "index.html"), html)]
        written.extend(
            fan_out([lambda item=item: self._render_item(item) for item in section.items])
        )
        return written

    def _render_item(self, item: Item) -> list[str]:
        html = self.theme.make_item_html(item, self.context)
        return [self._write(self.file_mode.file_path(item.path), html)]

    def _render_page(self, page: Page) -> list[str]:
        html = self.theme.make_page_html(page, self.context)
        return [self._write(self.file_mode.file_path(page.path), html)]

    def _render_tag(self, tag: Tag) -> list[str]:
        site = self.context.site
        config = site.tag_html_config
        content = config.content_for(tag) if config else None
        page = TagDetailsPage(tag=tag, path=site.path_for_tag(tag))
        if content is not None:
            page.content = content
        html = self.theme.make_tag_details_html(page, self.context)  # type: ignore[misc]
        if html is None:
            return []
        return [self._write(self.file_mode.file_path(page.path), html)]

    def _write(self, path: str, html: str) -> str:
        self.context.write_output_file(path, html)
        return path


def _relative_files(location: Path, output: Path) -> list[str]:
    if location.is_file():
        return [location.relative_to(output).as_posix()]
    return sorted(
        file.relative_to(output).as_posix() for file in location.rglob("*") if file.is_file()
    )


__all__ = [
    "HTMLFileMode",
    "HTMLGenerator",
    "OutputCategory",
    "fan_out",
    "run_output_categories",
]
