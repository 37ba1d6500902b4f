"""Publishing steps and the factories that build them.

A :class:`PublishingStep` has a :class:`StepKind` and a body that is either
empty, a named operation run against the
:class:`~sitepress.context.PublishingContext`, or a group of nested steps.
Steps are plain values: combinators such as :func:`when`, :func:`unwrap` and
:func:`optional` resolve when the pipeline is built, not while it runs.

Examples
--------
>>> from sitepress import steps
>>> pipeline = [
...     steps.add_markdown_files(),
...     steps.when(False, steps.copy_resources()),
...     steps.generate_site_map(),
... ]
>>> [step.kind.value for step in pipeline]
['generation', 'system', 'generation']
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import typing as typ

from ._constants import CONTENT_FOLDER, RESOURCES_FOLDER
from .content import Item, Page, Predicate, SortOrder

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    import datetime as dt

    from .context import PublishingContext
    from .deployment import DeploymentMethod
    from .generator.html import HTMLFileMode
    from .generator.podcast import PodcastFeedConfiguration
    from .generator.rss import RSSFeedConfiguration
    from .plugins import Plugin
    from .theme import Theme

logger = logging.getLogger(__name__)

Operation = typ.Callable[["PublishingContext"], object]
T = typ.TypeVar("T")


class StepKind(enum.Enum):
    """When a step runs: always, while generating, or while deploying."""

    SYSTEM = "system"
    GENERATION = "generation"
    DEPLOYMENT = "deployment"


@dc.dataclass(frozen=True, slots=True)
class EmptyBody:
    """A step that does nothing."""


@dc.dataclass(frozen=True, slots=True)
class OperationBody:
    """A named callable run against the context."""

    name: str
    run: Operation


@dc.dataclass(frozen=True, slots=True)
class GroupBody:
    """Steps run in order as one unit."""

    steps: tuple[PublishingStep, ...]


StepBody = EmptyBody | OperationBody | GroupBody


@dc.dataclass(frozen=True, slots=True)
class PublishingStep:
    """One unit of work in a publishing pipeline."""

    kind: StepKind
    body: StepBody

    @property
    def name(self) -> str | None:
        return self.body.name if isinstance(self.body, OperationBody) else None


# Core


def step(name: str, run: Operation, kind: StepKind = StepKind.GENERATION) -> PublishingStep:
    """Return a step called ``name`` that runs ``run`` against the context."""
    return PublishingStep(kind=kind, body=OperationBody(name=name, run=run))


def empty() -> PublishingStep:
    return PublishingStep(kind=StepKind.SYSTEM, body=EmptyBody())


def group(steps: cabc.Iterable[PublishingStep]) -> PublishingStep:
    return PublishingStep(kind=StepKind.SYSTEM, body=GroupBody(steps=tuple(steps)))


def when(condition: bool, wrapped: PublishingStep) -> PublishingStep:  # noqa: FBT001
    """Return ``wrapped`` when ``condition`` holds, otherwise an empty step."""
    return wrapped if condition else empty()


def unwrap(value: T | None, transform: cabc.Callable[[T], PublishingStep]) -> PublishingStep:
    """Build a step from ``value`` when it is not ``None``."""
    return empty() if value is None else transform(value)


def optional(wrapped: PublishingStep) -> PublishingStep:
    """Return ``wrapped`` with failures of every nested operation ignored.

    Groups are rewritten recursively so each operation inside them becomes
    optional on its own; a failing operation does not stop its siblings.
    """
    match wrapped.body:
        case EmptyBody():
            return wrapped
        case GroupBody(steps=children):
            return PublishingStep(
                kind=wrapped.kind,
                body=GroupBody(steps=tuple(optional(child) for child in children)),
            )
        case OperationBody(name=name, run=run):

            def _run_ignoring_errors(context: PublishingContext) -> None:
                try:
                    run(context)
                except Exception as exc:  # noqa: BLE001
                    logger.info("skipping optional step '%s': %s", name, exc)

            return step(name, _run_ignoring_errors, kind=wrapped.kind)
    raise AssertionError(wrapped.body)  # pragma: no cover - exhaustive match


def install_plugin(plugin: Plugin) -> PublishingStep:
    return step(f"Install plugin '{plugin.name}'", plugin.install)


# Content


def add_item(item: Item) -> PublishingStep:
    return step(f"Add item '{item.path}'", lambda context: context.add_item(item))


def add_items(items: cabc.Iterable[Item]) -> PublishingStep:
    def _add(context: PublishingContext) -> None:
        for item in items:
            context.add_item(item)

    return step("Add items in sequence", _add)


def add_page(page: Page) -> PublishingStep:
    return step(f"Add page '{page.path}'", lambda context: context.add_page(page))


def add_pages(pages: cabc.Iterable[Page]) -> PublishingStep:
    def _add(context: PublishingContext) -> None:
        for page in pages:
            context.add_page(page)

    return step("Add pages in sequence", _add)


def add_markdown_files(path: str = CONTENT_FOLDER) -> PublishingStep:
    def _add(context: PublishingContext) -> None:
        from .content.factory import MarkdownFileHandler

        MarkdownFileHandler(context).add_markdown_files(context.folder(path))

    return step(f"Add Markdown files from '{path}' folder", _add)


def _section_suffix(section_id: str | None) -> str:
    return f" in '{section_id}'" if section_id else ""


def _target_sections(context: PublishingContext, section_id: str | None) -> list[str]:
    return [section_id] if section_id else context.sections.ids


def remove_all_items(
    section_id: str | None = None, predicate: Predicate[Item] | None = None
) -> PublishingStep:
    def _remove(context: PublishingContext) -> None:
        for target in _target_sections(context, section_id):
            context.sections[target].remove_items(predicate)

    return step("Remove items" + _section_suffix(section_id), _remove)


def mutate_all_items(
    mutations: cabc.Callable[[Item], object],
    section_id: str | None = None,
    predicate: Predicate[Item] | None = None,
) -> PublishingStep:
    def _mutate(context: PublishingContext) -> None:
        for target in _target_sections(context, section_id):
            context.sections[target].mutate_items(mutations, predicate)

    return step("Mutate items" + _section_suffix(section_id), _mutate)


def mutate_item(
    path: str, section_id: str, mutations: cabc.Callable[[Item], object]
) -> PublishingStep:
    return step(
        f"Mutate item at '{path}' in {section_id}",
        lambda context: context.sections[section_id].mutate_item(path, mutations),
    )


def mutate_page(path: str, mutations: cabc.Callable[[Page], object]) -> PublishingStep:
    return step(
        f"Mutate page at '{path}'", lambda context: context.mutate_page(path, mutations)
    )


def mutate_all_pages(
    mutations: cabc.Callable[[Page], object], predicate: Predicate[Page] | None = None
) -> PublishingStep:
    def _mutate(context: PublishingContext) -> None:
        for path in list(context.pages):
            context.mutate_page(path, mutations, predicate)

    return step("Mutate all pages", _mutate)


def sort_items(
    key: cabc.Callable[[Item], typ.Any],
    section_id: str | None = None,
    order: SortOrder = SortOrder.ASCENDING,
) -> PublishingStep:
    def _sort(context: PublishingContext) -> None:
        for target in _target_sections(context, section_id):
            context.sections[target].sort_items(key, order)

    return step("Sort items" + _section_suffix(section_id), _sort)


# Files and folders


def copy_resources(
    path: str = RESOURCES_FOLDER,
    target_folder_path: str | None = None,
    *,
    include_folder: bool = False,
) -> PublishingStep:
    return copy_files(path, target_folder_path, include_folder=include_folder)


def copy_file(path: str, target_folder_path: str | None = None) -> PublishingStep:
    return step(
        f"Copy file '{path}'",
        lambda context: context.copy_file_to_output(path, target_folder_path),
    )


def copy_files(
    path: str,
    target_folder_path: str | None = None,
    *,
    include_folder: bool = False,
) -> PublishingStep:
    """Copy a project folder, or everything inside it, to the output."""

    def _copy(context: PublishingContext) -> None:
        if include_folder:
            context.copy_folder_to_output(path, target_folder_path)
            return
        folder = context.folder(path)
        for entry in sorted(folder.iterdir()):
            relative = entry.relative_to(context.folders.root).as_posix()
            if entry.is_dir():
                context.copy_folder_to_output(relative, target_folder_path)
            else:
                context.copy_file_to_output(relative, target_folder_path)

    return step(f"Copy '{path}' files", _copy)


# Generation


def generate_html(theme: Theme, file_mode: HTMLFileMode | None = None) -> PublishingStep:
    def _generate(context: PublishingContext) -> None:
        from .generator.html import HTMLFileMode, HTMLGenerator

        mode = file_mode or HTMLFileMode.FOLDERS_AND_INDEX_FILES
        HTMLGenerator(theme=theme, file_mode=mode, context=context).generate()

    return step("Generate HTML", _generate)


def generate_rss_feed(
    section_ids: cabc.Iterable[str],
    predicate: Predicate[Item] | None = None,
    config: RSSFeedConfiguration | None = None,
    date: dt.datetime | None = None,
) -> PublishingStep:
    """Return the RSS feed step, or an empty step when no section is included."""
    included = tuple(section_ids)
    if not included:
        return empty()

    def _generate(context: PublishingContext) -> None:
        from .generator.rss import RSSFeedConfiguration, RSSFeedGenerator

        RSSFeedGenerator(
            section_ids=included,
            predicate=predicate,
            config=config or RSSFeedConfiguration(),
            context=context,
            date=date,
        ).generate()

    return step("Generate RSS feed", _generate)


def generate_podcast_feed(
    section_id: str,
    config: PodcastFeedConfiguration,
    predicate: Predicate[Item] | None = None,
    date: dt.datetime | None = None,
) -> PublishingStep:
    def _generate(context: PublishingContext) -> None:
        from .generator.podcast import PodcastFeedGenerator

        PodcastFeedGenerator(
            section_id=section_id,
            predicate=predicate,
            config=config,
            context=context,
            date=date,
        ).generate()

    return step("Generate podcast feed", _generate)


def generate_site_map(excluded_paths: cabc.Iterable[str] = ()) -> PublishingStep:
    excluded = tuple(excluded_paths)

    def _generate(context: PublishingContext) -> None:
        from .generator.sitemap import SiteMapGenerator

        SiteMapGenerator(excluded_paths=excluded, context=context).generate()

    return step("Generate site map", _generate)


# Deployment


def deploy(method: DeploymentMethod) -> PublishingStep:
    return step(f"Deploy using {method.name}", method.run, kind=StepKind.DEPLOYMENT)


__all__ = [
    "EmptyBody",
    "GroupBody",
    "OperationBody",
    "PublishingStep",
    "StepKind",
    "add_item",
    "add_items",
    "add_markdown_files",
    "add_page",
    "add_pages",
    "copy_file",
    "copy_files",
    "copy_resources",
    "deploy",
    "empty",
    "generate_html",
    "generate_podcast_feed",
    "generate_rss_feed",
    "generate_site_map",
    "group",
    "install_plugin",
    "mutate_all_items",
    "mutate_all_pages",
    "mutate_item",
    "mutate_page",
    "optional",
    "remove_all_items",
    "sort_items",
    "step",
    "unwrap",
    "when",
]
