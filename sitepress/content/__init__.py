"""Content model for sitepress websites.

Locations (the index, sections, items and pages) carry a :class:`Content`
payload. Sections keep their items indexed by path and tag so steps can look
them up and mutate them cheaply while a website is being published.

Examples
--------
>>> from sitepress.content import Item, Section, Tag
>>> posts = Section("posts")
>>> posts.add_item(Item("hello", tags=[Tag("intro")]))
>>> [item.path for item in posts.items_tagged(Tag("intro"))]
['posts/hello']
"""

from .models import (
    Audio,
    AudioDuration,
    Content,
    Index,
    Item,
    ItemRSSProperties,
    Location,
    Page,
    Tag,
    TagDetailsPage,
    TagListPage,
    Video,
)
from .paths import absolute_string, append_component, normalized
from .predicates import (
    Predicate,
    SortOrder,
    attribute_contains,
    attribute_equals,
    attribute_greater_than,
    attribute_less_than,
)
from .section import Section

__all__ = [
    "Audio",
    "AudioDuration",
    "Content",
    "Index",
    "Item",
    "ItemRSSProperties",
    "Location",
    "Page",
    "Predicate",
    "Section",
    "SortOrder",
    "Tag",
    "TagDetailsPage",
    "TagListPage",
    "Video",
    "absolute_string",
    "append_component",
    "attribute_contains",
    "attribute_equals",
    "attribute_greater_than",
    "attribute_less_than",
    "normalized",
]
