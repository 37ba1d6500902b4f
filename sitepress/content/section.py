"""Ordered, indexed collections of items.

A :class:`Section` owns its items together with two secondary indexes: one
from each item's relative path to its position, and one from each tag to the
positions of the items carrying it. Every mutating method leaves both indexes
describing the current item list exactly, so lookups by path or tag never see
stale entries. Items go in and come out as copies; the only way to change a
stored item is :meth:`Section.mutate_item`.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

from sitepress.errors import ContentError, ContentErrorReason

from .models import Content, Item, Location, Tag
from .predicates import Predicate, SortOrder

if typ.TYPE_CHECKING:
    import collections.abc as cabc


class Section(Location):
    """A named group of items, such as ``posts`` or ``episodes``."""

    def __init__(self, section_id: str, content: Content | None = None) -> None:
        self.id = section_id
        self.content = content or Content(title=section_id.capitalize())
        self.last_item_modification_date: dt.datetime | None = None
        self.revision = 0
        self._items: list[Item] = []
        self._paths: dict[str, int] = {}
        # Dict keys act as an insertion-ordered set of item positions.
        self._tags: dict[Tag, dict[int, None]] = {}

    def __repr__(self) -> str:
        return f"Section(id={self.id!r}, items={len(self._items)})"

    def __len__(self) -> int:
        return len(self._items)

    @property
    def path(self) -> str:
        return self.id

    @property
    def items(self) -> tuple[Item, ...]:
        """Return copies of the items; change them through ``mutate_item``."""
        return tuple(item.copy() for item in self._items)

    @property
    def all_tags(self) -> list[Tag]:
        """Return every tag carried by at least one item in this section."""
        return list(self._tags)

    def item(self, path: str) -> Item | None:
        """Return the item at the relative ``path``, if any."""
        index = self._paths.get(path)
        return None if index is None else self._items[index].copy()

    def items_tagged(self, tag: Tag) -> list[Item]:
        """Return the items carrying ``tag``, in section order."""
        return [self._items[index].copy() for index in sorted(self._tags.get(tag, ()))]

    def add_item(self, item: Item) -> None:
        """Add a copy of ``item``, replacing any existing item with the same path."""
        item = item.copy()
        item.section_id = self.id
        existing = self._paths.get(item.relative_path)
        if existing is not None:
            self._replace(existing, item)
            return
        index = len(self._items)
        self._items.append(item)
        self._register(index, item)
        self.revision += 1

    def mutate_item(self, path: str, mutations: cabc.Callable[[Item], object]) -> None:
        """Apply ``mutations`` to the item at ``path`` in place.

        The callable receives a copy of the stored item; the copy only replaces
        the stored item when the callable returns without raising.

        Raises
        ------
        ContentError
            With ``ITEM_NOT_FOUND`` when no item lives at ``path`` and with
            ``ITEM_MUTATION_FAILED`` when ``mutations`` raises.
        """
        index = self._paths.get(path)
        if index is None:
            raise ContentError(path, ContentErrorReason.ITEM_NOT_FOUND)
        item = self._items[index].copy()
        try:
            mutations(item)
        except Exception as exc:
            raise ContentError(
                path, ContentErrorReason.ITEM_MUTATION_FAILED, underlying_error=exc
            ) from exc
        item.section_id = self.id
        self._replace(index, item)

    def mutate_items(
        self,
        mutations: cabc.Callable[[Item], object],
        predicate: Predicate[Item] | None = None,
    ) -> None:
        """Apply ``mutations`` to every item matching ``predicate``."""
        for item in list(self._items):
            if predicate is None or predicate.matches(item):
                self.mutate_item(item.relative_path, mutations)

    def remove_items(self, predicate: Predicate[Item] | None = None) -> None:
        """Remove every item matching ``predicate`` (all items when omitted)."""
        if predicate is None:
            self._items = []
        else:
            self._items = [item for item in self._items if not predicate.matches(item)]
        self._rebuild_indexes()

    def sort_items(
        self,
        key: cabc.Callable[[Item], typ.Any],
        order: SortOrder = SortOrder.ASCENDING,
    ) -> None:
        """Stable-sort the items by ``key`` in the given ``order``."""
        self._items.sort(key=key, reverse=order.reverse)
        self._rebuild_indexes()

    def _replace(self, index: int, item: Item) -> None:
        previous = self._items[index]
        old_tags = set(previous.tags)
        new_tags = set(item.tags)
        for tag in old_tags - new_tags:
            self._discard_tag(tag, index)
        for tag in item.tags:
            if tag not in old_tags:
                self._tags.setdefault(tag, {})[index] = None
        self._items[index] = item
        self._raise_watermark(item)
        self.revision += 1

    def _register(self, index: int, item: Item) -> None:
        self._paths[item.relative_path] = index
        for tag in item.tags:
            self._tags.setdefault(tag, {})[index] = None
        self._raise_watermark(item)

    def _discard_tag(self, tag: Tag, index: int) -> None:
        positions = self._tags.get(tag)
        if positions is None:
            return
        positions.pop(index, None)
        if not positions:
            del self._tags[tag]

    def _rebuild_indexes(self) -> None:
        self._paths.clear()
        self._tags.clear()
        for index, item in enumerate(self._items):
            self._register(index, item)
        self.revision += 1

    def _raise_watermark(self, item: Item) -> None:
        current = self.last_item_modification_date
        if current is None or item.date > current:
            self.last_item_modification_date = item.date


__all__ = ["Section"]
