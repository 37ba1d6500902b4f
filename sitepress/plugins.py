"""Plugins bundle a named installer that runs as a generation step."""

from __future__ import annotations

import dataclasses as dc
import importlib
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .context import PublishingContext


@dc.dataclass(frozen=True, slots=True)
class Plugin:
    """A named callable that customises the context, e.g. the Markdown renderer."""

    name: str
    installer: cabc.Callable[[PublishingContext], object]

    def install(self, context: PublishingContext) -> None:
        self.installer(context)


def load_plugin(reference: str) -> Plugin:
    """Import a plugin from a ``package.module:attribute`` reference.

    The attribute may be a :class:`Plugin` or a zero-argument callable
    returning one.
    """
    module_name, separator, attribute = reference.partition(":")
    if not separator or not module_name or not attribute:
        msg = f"Plugin reference '{reference}' must look like 'module:attribute'."
        raise ValueError(msg)
    target = getattr(importlib.import_module(module_name), attribute)
    plugin = target if isinstance(target, Plugin) else target()
    if not isinstance(plugin, Plugin):
        msg = f"Plugin reference '{reference}' did not resolve to a Plugin."
        raise TypeError(msg)
    return plugin


__all__ = ["Plugin", "load_plugin"]
