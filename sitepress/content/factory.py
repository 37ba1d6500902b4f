"""Build site content from Markdown files.

The ``Content`` folder of a project is laid out as follows:

* ``index.md`` becomes the index page content;
* each folder named after a declared section holds that section's items
  (searched recursively), with its own ``index.md`` becoming the section's
  content;
* any other folder is walked recursively for pages, and Markdown files at the
  top level become pages too.

Each file may start with ``---`` delimited front matter; see
:mod:`sitepress.content.metadata` for how values are decoded.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

from sitepress import storage
from sitepress._constants import MARKDOWN_EXTENSIONS
from sitepress.errors import ContentError, ContentErrorReason

from .metadata import MetadataDecoder, MetadataDecodingError, parse_front_matter
from .models import Audio, Content, Item, ItemRSSProperties, Page, Tag, Video
from .paths import append_component

if typ.TYPE_CHECKING:
    from pathlib import Path

    from sitepress.context import PublishingContext
    from sitepress.generator.renderer import HtmlContentRenderer


def _modification_date(file: Path) -> dt.datetime:
    return dt.datetime.fromtimestamp(file.stat().st_mtime, dt.UTC)


def is_markdown(file: Path) -> bool:
    return file.is_file() and file.suffix.lstrip(".").lower() in MARKDOWN_EXTENSIONS


class MarkdownContentFactory:
    """Turn Markdown files into content, items and pages."""

    def __init__(
        self,
        *,
        renderer: HtmlContentRenderer,
        date_format: str,
        item_metadata: type | None = None,
    ) -> None:
        self.renderer = renderer
        self.date_format = date_format
        self.item_metadata = item_metadata

    def make_content(self, file: Path) -> Content:
        metadata, body = self._read(file)
        return self._content(file, body, MetadataDecoder(metadata, self.date_format))

    def make_item(self, file: Path, path: str, section_id: str) -> Item:
        metadata, body = self._read(file)
        decoder = MetadataDecoder(metadata, self.date_format)
        if self.item_metadata is None:
            item_metadata: typ.Any = dict(metadata)
        else:
            item_metadata = decoder.decode_dataclass(self.item_metadata)
        return Item(
            relative_path=decoder.decode_optional("path", str) or path,
            section_id=section_id,
            metadata=item_metadata,
            tags=decoder.decode_optional("tags", list[Tag]) or [],
            content=self._content(file, body, decoder),
            rss_properties=(
                decoder.decode_optional("rss", ItemRSSProperties) or ItemRSSProperties()
            ),
        )

    def make_page(self, file: Path, path: str) -> Page:
        metadata, body = self._read(file)
        content = self._content(file, body, MetadataDecoder(metadata, self.date_format))
        return Page(path=path, content=content, metadata=dict(metadata))

    def _read(self, file: Path) -> tuple[dict[str, str], str]:
        return parse_front_matter(storage.read_text(file))

    def _content(self, file: Path, body: str, decoder: MetadataDecoder) -> Content:
        rendered = self.renderer.render(body)
        modified = _modification_date(file)
        return Content(
            title=decoder.decode_optional("title", str) or rendered.title or file.stem,
            description=decoder.decode_optional("description", str) or "",
            body=rendered.html,
            date=decoder.decode_optional("date", dt.datetime) or modified,
            last_modified=modified,
            image_path=decoder.decode_optional("image", str),
            audio=decoder.decode_optional("audio", Audio),
            video=decoder.decode_optional("video", Video),
        )


class MarkdownFileHandler:
    """Walk a content folder and add everything it holds to a context."""

    def __init__(self, context: PublishingContext) -> None:
        self.context = context
        self.factory = context.make_markdown_content_factory()

    def add_markdown_files(self, folder: Path) -> None:
        index_file = folder / "index.md"
        if index_file.is_file():
            self.context.index.content = self._wrap(
                "index.md", lambda: self.factory.make_content(index_file)
            )
        for subfolder in sorted(entry for entry in folder.iterdir() if entry.is_dir()):
            section_id = subfolder.name.lower()
            if section_id not in self.context.sections:
                self._add_pages(subfolder, parent_path=subfolder.name, recursive=True)
                continue
            self._add_section(folder, subfolder, section_id)
        self._add_pages(folder, parent_path="", recursive=False)

    def _add_section(self, root: Path, folder: Path, section_id: str) -> None:
        section = self.context.sections[section_id]
        for file in sorted(folder.rglob("*")):
            if not is_markdown(file):
                continue
            relative = file.relative_to(root).as_posix()
            if file.stem == "index" and file.parent == folder:
                section.content = self._wrap(relative, lambda: self.factory.make_content(file))
                continue
            parent = file.parent.relative_to(folder).as_posix()
            path = file.stem if parent == "." else append_component(parent, file.stem)
            item = self._wrap(
                relative, lambda: self.factory.make_item(file, path, section_id)
            )
            self.context.add_item(item)

    def _add_pages(self, folder: Path, *, parent_path: str, recursive: bool) -> None:
        for file in sorted(entry for entry in folder.iterdir() if is_markdown(entry)):
            if file.stem == "index" and not recursive:
                continue
            path = append_component(parent_path, file.stem)
            self.context.add_page(self._wrap(path, lambda: self.factory.make_page(file, path)))
        if not recursive:
            return
        for subfolder in sorted(entry for entry in folder.iterdir() if entry.is_dir()):
            self._add_pages(
                subfolder,
                parent_path=append_component(parent_path, subfolder.name),
                recursive=True,
            )

    @staticmethod
    def _wrap(path: str, build: typ.Callable[[], typ.Any]) -> typ.Any:
        try:
            return build()
        except MetadataDecodingError as exc:
            raise ContentError(
                path,
                ContentErrorReason.METADATA_DECODING_FAILED,
                key_path=exc.key_path,
                value_found=exc.value_found,
            ) from exc


__all__ = ["MarkdownContentFactory", "MarkdownFileHandler", "is_markdown"]
