"""Themes turn locations into HTML.

A :class:`Theme` is a bundle of plain callables, one per kind of location,
plus the resource files (stylesheets, images) it needs copied to the output.
The bundled foundation theme renders Jinja templates shipped in
``sitepress/templates/foundation`` and copies
``sitepress/resources/foundation/styles.css`` to the output root.

Examples
--------
>>> theme = Theme.foundation()
>>> theme.resource_paths
('styles.css',)
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader

from .content import SortOrder, absolute_string

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .content import Index, Item, Location, Page, Section, TagDetailsPage, TagListPage
    from .context import PublishingContext

    HTMLRenderer = cabc.Callable[[typ.Any, PublishingContext], str]
    OptionalHTMLRenderer = cabc.Callable[[typ.Any, PublishingContext], str | None]

PACKAGE_ROOT = Path(__file__).parent
DEFAULT_TEMPLATES_DIR = PACKAGE_ROOT / "templates" / "foundation"
DEFAULT_RESOURCES_DIR = PACKAGE_ROOT / "resources" / "foundation"


@dc.dataclass(frozen=True, slots=True)
class Theme:
    """Render callables for every kind of location plus theme resources.

    ``make_tag_list_html`` and ``make_tag_details_html`` may return ``None``
    to skip generating that page. ``resource_paths`` are resolved against
    ``resource_root`` (the project root when unset) and copied to the root of
    the output folder.
    """

    make_index_html: HTMLRenderer
    make_section_html: HTMLRenderer
    make_item_html: HTMLRenderer
    make_page_html: HTMLRenderer
    make_tag_list_html: OptionalHTMLRenderer | None = None
    make_tag_details_html: OptionalHTMLRenderer | None = None
    resource_paths: tuple[str, ...] = ()
    resource_root: Path | None = None

    @classmethod
    def foundation(cls, *, templates_dir: Path | None = None) -> Theme:
        """Return the default theme backed by the foundation templates."""
        factory = FoundationHTMLFactory(templates_dir=templates_dir)
        return cls(
            make_index_html=factory.make_index_html,
            make_section_html=factory.make_section_html,
            make_item_html=factory.make_item_html,
            make_page_html=factory.make_page_html,
            make_tag_list_html=factory.make_tag_list_html,
            make_tag_details_html=factory.make_tag_details_html,
            resource_paths=("styles.css",),
            resource_root=DEFAULT_RESOURCES_DIR,
        )


class FoundationHTMLFactory:
    """Render the foundation theme's Jinja templates."""

    def __init__(self, *, templates_dir: Path | None = None) -> None:
        """Initialize the Jinja environment.

        Parameters
        ----------
        templates_dir : Path, optional
            Directory containing the theme templates. Defaults to
            ``sitepress/templates/foundation``.

        Notes
        -----
        Jinja environments are safe to share across threads once built, so
        one factory serves every concurrent HTML generation task.
        """
        self.templates_dir = templates_dir or DEFAULT_TEMPLATES_DIR
        self.env = Environment(
            loader=FileSystemLoader(self.templates_dir),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["href"] = _href
        self.env.filters["date"] = _format_date

    def make_index_html(self, index: Index, context: PublishingContext) -> str:
        items = context.all_items(key=lambda item: item.date, order=SortOrder.DESCENDING)
        return self._render("index.jinja", index, context, items=items[:10])

    def make_section_html(self, section: Section, context: PublishingContext) -> str:
        return self._render("section.jinja", section, context, items=section.items)

    def make_item_html(self, item: Item, context: PublishingContext) -> str:
        section = context.sections[item.section_id]
        return self._render("item.jinja", item, context, section=section)

    def make_page_html(self, page: Page, context: PublishingContext) -> str:
        return self._render("page.jinja", page, context)

    def make_tag_list_html(self, page: TagListPage, context: PublishingContext) -> str:
        return self._render("tag_list.jinja", page, context, tags=sorted(page.tags))

    def make_tag_details_html(
        self, page: TagDetailsPage, context: PublishingContext
    ) -> str:
        items = context.items_tagged(
            page.tag, key=lambda item: item.date, order=SortOrder.DESCENDING
        )
        return self._render("tag_details.jinja", page, context, items=items)

    def _render(
        self,
        template_name: str,
        location: Location,
        context: PublishingContext,
        **extra: typ.Any,
    ) -> str:
        site = context.site
        navigation = [context.sections[section_id] for section_id in site.section_ids]
        return self.env.get_template(template_name).render(
            site=site,
            location=location,
            navigation=navigation,
            tag_path=lambda tag: absolute_string(site.path_for_tag(tag)),
            tag_list_path=absolute_string(site.tag_list_path),
            **extra,
        )


def _href(location: Location | str) -> str:
    path = location if isinstance(location, str) else location.path  # type: ignore[attr-defined]
    return absolute_string(path)


def _format_date(value: typ.Any, pattern: str = "%B %d, %Y") -> str:
    return value.strftime(pattern)


__all__ = ["FoundationHTMLFactory", "Theme"]
