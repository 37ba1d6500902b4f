"""Run a sequence of publishing steps against a fresh context.

The pipeline resolves the project folders, flattens the step tree for the
requested :class:`RunMode`, executes the surviving operations strictly in
order, and reports any failure as a :class:`~sitepress.errors.PublishingError`
naming the step that raised it.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import logging
import types
import typing as typ
from pathlib import Path

from . import storage
from .context import PublishingContext
from .errors import PublishingError, PublishingErrorConvertible
from .steps import EmptyBody, GroupBody, OperationBody, PublishingStep, StepKind
from .storage import FolderGroup

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .content import Index, Page, Section
    from .website import Website

logger = logging.getLogger(__name__)


class RunMode(enum.Enum):
    """Which kind of steps a run executes besides system steps."""

    GENERATION = "generation"
    DEPLOYMENT = "deployment"

    @property
    def step_kind(self) -> StepKind:
        return StepKind(self.value)


@dc.dataclass(frozen=True, slots=True)
class PublishedWebsite:
    """The content model as it stood after the final step."""

    index: Index
    sections: cabc.Mapping[str, Section]
    pages: cabc.Mapping[str, Page]


class PublishingPipeline:
    """Execute publishing steps for a website."""

    def __init__(self, steps: cabc.Sequence[PublishingStep]) -> None:
        self.steps = tuple(steps)

    def execute(
        self, site: Website, root_path: Path | None, mode: RunMode
    ) -> PublishedWebsite:
        """Run every step relevant to ``mode`` and return the published site.

        Parameters
        ----------
        site : Website
            The website being published.
        root_path : Path or None
            Project root; ``None`` uses the current working directory.
        mode : RunMode
            Generation runs empty the output folder first; deployment runs
            leave it in place so it can be shipped.

        Raises
        ------
        PublishingError
            When the root folder is missing, no step matches ``mode``, or any
            step fails.
        """
        folders = self._set_up_folders(root_path, mode)
        operations = self._flatten(self.steps, mode)
        if not operations:
            msg = f"{site.name} has no {mode.value} steps."
            raise PublishingError(msg)

        context = PublishingContext(site, folders, operations[0].name)
        context.generation_will_begin()

        noun = "step" if len(operations) == 1 else "steps"
        logger.info("Publishing %s (%d %s)", site.name, len(operations), noun)
        for number, operation in enumerate(operations, start=1):
            logger.info("[%d/%d] %s", number, len(operations), operation.name)
            context.prepare_for_step(operation.name)
            self._run(operation, context)
        logger.info("Successfully published %s", site.name)

        return PublishedWebsite(
            index=context.index,
            sections=types.MappingProxyType(dict(context.sections)),
            pages=types.MappingProxyType(dict(context.pages)),
        )

    @staticmethod
    def _run(operation: OperationBody, context: PublishingContext) -> None:
        try:
            operation.run(context)
        except PublishingErrorConvertible as exc:
            raise exc.publishing_error(operation.name) from exc
        except Exception as exc:
            raise PublishingError(
                f"An unknown error occurred: {exc}",
                step_name=operation.name,
                underlying_error=exc,
            ) from exc

    @staticmethod
    def _set_up_folders(root_path: Path | None, mode: RunMode) -> FolderGroup:
        root = Path.cwd() if root_path is None else root_path
        if not root.is_dir():
            raise PublishingError(
                "Could not find the requested root folder", path=str(root)
            )
        folders = FolderGroup.for_root(root)
        try:
            if mode is RunMode.GENERATION:
                storage.empty_folder(folders.output)
            folders.create()
        except OSError as exc:
            raise PublishingError(
                "Failed to set up root folder structure",
                path=str(root),
                underlying_error=exc,
            ) from exc
        return folders

    @classmethod
    def _flatten(
        cls, steps: cabc.Iterable[PublishingStep], mode: RunMode
    ) -> list[OperationBody]:
        operations: list[OperationBody] = []
        for candidate in steps:
            if candidate.kind not in (StepKind.SYSTEM, mode.step_kind):
                continue
            match candidate.body:
                case EmptyBody():
                    continue
                case GroupBody(steps=children):
                    operations.extend(cls._flatten(children, mode))
                case OperationBody() as operation:
                    operations.append(operation)
        return operations


__all__ = ["PublishedWebsite", "PublishingPipeline", "RunMode"]
