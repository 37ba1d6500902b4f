"""The mutable content model shared by every step of a publishing run.

A :class:`PublishingContext` is created once per run by the pipeline. Steps
read and mutate it in order; generators read it to produce output. It owns
the index page, one :class:`~sitepress.content.Section` per declared section
id, the pages keyed by path, and the folder helpers used to read project
files and write output.
"""

from __future__ import annotations

import collections.abc as cabc
import datetime as dt
import logging
import typing as typ

from . import storage
from ._constants import DEFAULT_DATE_FORMAT, LAST_GENERATION_MARKER
from .content import Index, Item, Page, Predicate, Section, SortOrder, Tag, normalized
from .errors import ContentError, ContentErrorReason, FileIOError, FileIOErrorReason
from .generator.renderer import HtmlContentRenderer

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .content.factory import MarkdownContentFactory
    from .storage import FolderGroup
    from .website import Website

logger = logging.getLogger(__name__)


class SectionMap(cabc.Mapping[str, Section]):
    """Sections keyed by id, with every declared id always present."""

    def __init__(self, section_ids: cabc.Iterable[str]) -> None:
        self._sections = {section_id: Section(section_id) for section_id in section_ids}

    def __getitem__(self, section_id: str) -> Section:
        return self._sections[section_id]

    def __iter__(self) -> cabc.Iterator[str]:
        return iter(self._sections)

    def __len__(self) -> int:
        return len(self._sections)

    def __repr__(self) -> str:
        return f"SectionMap({list(self._sections)!r})"

    @property
    def ids(self) -> list[str]:
        return list(self._sections)

    def revision(self) -> tuple[int, ...]:
        """Return a value that changes whenever any section is mutated."""
        return tuple(section.revision for section in self._sections.values())


class PublishingContext:
    """Content, folders and run state available to publishing steps."""

    def __init__(
        self, site: Website, folders: FolderGroup, first_step_name: str
    ) -> None:
        self.site = site
        self.index = Index()
        self.date_format = DEFAULT_DATE_FORMAT
        self.markdown_renderer = HtmlContentRenderer()
        self.last_generation_date: dt.datetime | None = None
        self.step_name = first_step_name
        self._folders = folders
        self._sections = SectionMap(site.section_ids)
        self._pages: dict[str, Page] = {}
        self._tag_cache: tuple[tuple[int, ...], frozenset[Tag]] | None = None

    @property
    def sections(self) -> SectionMap:
        return self._sections

    @sections.setter
    def sections(self, sections: SectionMap) -> None:
        self._sections = sections
        self._tag_cache = None

    @property
    def pages(self) -> cabc.Mapping[str, Page]:
        return dict(self._pages)

    @property
    def folders(self) -> FolderGroup:
        return self._folders

    @property
    def all_tags(self) -> frozenset[Tag]:
        """Return the tags carried by at least one item in any section."""
        revision = self._sections.revision()
        cached = self._tag_cache
        if cached is not None and cached[0] == revision:
            return cached[1]
        tags = frozenset(
            tag for section in self._sections.values() for tag in section.all_tags
        )
        self._tag_cache = (revision, tags)
        return tags

    # Files and folders

    def folder(self, path: str) -> Path:
        return storage.existing_folder(self._folders.root, path)

    def file(self, path: str) -> Path:
        return storage.existing_file(self._folders.root, path)

    def output_folder(self, path: str) -> Path:
        return storage.existing_folder(self._folders.output, path)

    def output_file(self, path: str) -> Path:
        return storage.existing_file(self._folders.output, path)

    def create_folder(self, path: str) -> Path:
        return storage.create_folder(self._folders.root, path)

    def create_file(self, path: str) -> Path:
        return storage.create_file(self._folders.root, path)

    def create_output_folder(self, path: str) -> Path:
        return storage.create_folder(self._folders.output, path)

    def create_output_file(self, path: str) -> Path:
        return storage.create_file(self._folders.output, path)

    def write_output_file(self, path: str, text: str) -> Path:
        """Write ``text`` to ``path`` inside the output folder."""
        return storage.write_text(self._folders.output, path, text)

    def copy_folder_to_output(self, origin_path: str, target_folder_path: str | None = None) -> None:
        source = self.folder(origin_path)
        storage.copy_into(source, self._target_folder(target_folder_path), origin_path)

    def copy_file_to_output(self, origin_path: str, target_folder_path: str | None = None) -> None:
        source = self.file(origin_path)
        storage.copy_into(source, self._target_folder(target_folder_path), origin_path)

    def create_deployment_folder(
        self,
        prefix: str,
        configure: cabc.Callable[[Path], object],
        output_folder_path: str | None = None,
    ) -> Path:
        """Prepare ``.publish/<prefix>Deploy`` holding a copy of the output.

        ``configure`` runs against the emptied folder before the output is
        copied in, typically to clone or initialise a repository there.

        Raises
        ------
        FileIOError
            With ``DEPLOYMENT_FOLDER_SETUP_FAILED`` when ``configure`` fails.
        """
        path = f"{prefix}Deploy"
        folder = storage.create_folder(self._folders.internal, path)
        storage.empty_folder(folder, include_hidden=False)
        try:
            configure(folder)
        except Exception as exc:
            raise FileIOError(
                path, FileIOErrorReason.DEPLOYMENT_FOLDER_SETUP_FAILED, underlying_error=exc
            ) from exc
        target = folder
        if output_folder_path:
            target = storage.create_folder(folder, output_folder_path)
        storage.copy_contents(self._folders.output, target, path)
        return folder

    def cache_file(self, name: str) -> Path:
        """Return this step's cache file called ``name``, creating it if needed."""
        folder = storage.create_folder(self._folders.caches, normalized(self.step_name))
        return storage.create_file(folder, normalized(name))

    # Content

    def all_items(
        self,
        key: cabc.Callable[[Item], typ.Any],
        order: SortOrder = SortOrder.ASCENDING,
    ) -> list[Item]:
        items = [item for section in self._sections.values() for item in section.items]
        return sorted(items, key=key, reverse=order.reverse)

    def items_tagged(
        self,
        tag: Tag,
        key: cabc.Callable[[Item], typ.Any] | None = None,
        order: SortOrder = SortOrder.ASCENDING,
    ) -> list[Item]:
        items = [
            item for section in self._sections.values() for item in section.items_tagged(tag)
        ]
        if key is None:
            return items
        return sorted(items, key=key, reverse=order.reverse)

    def add_item(self, item: Item) -> None:
        """Add ``item`` to the section named by its ``section_id``."""
        self._sections[item.section_id].add_item(item)

    def add_page(self, page: Page) -> None:
        self._pages[page.path] = page

    def mutate_all_sections(self, mutations: cabc.Callable[[Section], object]) -> None:
        for section in self._sections.values():
            mutations(section)

    def mutate_page(
        self,
        path: str,
        mutations: cabc.Callable[[Page], object],
        predicate: Predicate[Page] | None = None,
    ) -> None:
        """Apply ``mutations`` to the page at ``path``, re-keying it if moved.

        Raises
        ------
        ContentError
            With ``PAGE_NOT_FOUND`` for an unknown path and with
            ``PAGE_MUTATION_FAILED`` when ``mutations`` raises.
        """
        original = self._pages.get(path)
        if original is None:
            raise ContentError(path, ContentErrorReason.PAGE_NOT_FOUND)
        if predicate is not None and not predicate.matches(original):
            return
        page = original.copy()
        try:
            mutations(page)
        except Exception as exc:
            raise ContentError(
                page.path, ContentErrorReason.PAGE_MUTATION_FAILED, underlying_error=exc
            ) from exc
        if page.path != path:
            del self._pages[path]
        self._pages[page.path] = page

    # Run lifecycle

    def generation_will_begin(self) -> None:
        """Load the previous run's timestamp and record this run's."""
        marker = self._folders.internal / LAST_GENERATION_MARKER
        try:
            if marker.is_file():
                previous = marker.read_text(encoding="utf-8").strip()
                self.last_generation_date = dt.datetime.fromtimestamp(float(previous), dt.UTC)
            marker.write_text(str(dt.datetime.now(dt.UTC).timestamp()), encoding="utf-8")
        except (OSError, ValueError) as exc:
            logger.warning("could not update %s: %s", marker, exc)

    def prepare_for_step(self, name: str) -> None:
        self.step_name = name

    def make_markdown_content_factory(self) -> MarkdownContentFactory:
        from .content.factory import MarkdownContentFactory

        return MarkdownContentFactory(
            renderer=self.markdown_renderer,
            date_format=self.date_format,
            item_metadata=self.site.item_metadata,
        )

    def _target_folder(self, target_folder_path: str | None) -> Path:
        if target_folder_path is None:
            return self._folders.output
        return self.create_output_folder(target_folder_path)


__all__ = ["PublishingContext", "SectionMap"]
