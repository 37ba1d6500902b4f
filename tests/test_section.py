"""Unit tests for section item storage and its path and tag indexes."""

from __future__ import annotations

import datetime as dt

import pytest

from sitepress.content import Content, Item, Predicate, Section, SortOrder, Tag
from sitepress.errors import ContentError, ContentErrorReason


def _item(path: str, *tags: str, day: int = 1) -> Item:
    date = dt.datetime(2024, 1, day, tzinfo=dt.UTC)
    return Item(
        path,
        tags=[Tag(tag) for tag in tags],
        content=Content(title=path.title(), date=date, last_modified=date),
    )


@pytest.fixture
def posts() -> Section:
    section = Section("posts")
    section.add_item(_item("first", "python", "intro", day=1))
    section.add_item(_item("second", "python", day=2))
    section.add_item(_item("third", "rust", day=3))
    return section


def test_section_defaults_title_to_capitalized_id() -> None:
    assert Section("posts").title == "Posts"


def test_add_item_assigns_section_and_indexes_path(posts: Section) -> None:
    item = posts.item("second")
    assert item is not None, "expected the item to be found by its relative path"
    assert item.section_id == "posts"
    assert item.path == "posts/second"
    assert posts.item("missing") is None


def test_items_tagged_returns_items_in_section_order(posts: Section) -> None:
    tagged = [item.relative_path for item in posts.items_tagged(Tag("python"))]
    assert tagged == ["first", "second"]
    assert posts.items_tagged(Tag("unused")) == []


def test_add_item_with_existing_path_replaces_it(posts: Section) -> None:
    posts.add_item(_item("first", "go"))

    assert len(posts) == 3, "replacing an item must not grow the section"
    assert [item.relative_path for item in posts.items_tagged(Tag("go"))] == ["first"]
    assert Tag("intro") not in posts.all_tags, (
        "tags only carried by the replaced item should leave the index"
    )


def test_mutate_item_updates_tag_index(posts: Section) -> None:
    def retag(item: Item) -> None:
        item.tags = [Tag("rust")]

    posts.mutate_item("first", retag)

    assert [item.relative_path for item in posts.items_tagged(Tag("python"))] == ["second"]
    assert [item.relative_path for item in posts.items_tagged(Tag("rust"))] == [
        "first",
        "third",
    ]
    assert Tag("intro") not in posts.all_tags


def test_mutate_item_raises_for_unknown_path(posts: Section) -> None:
    with pytest.raises(ContentError) as excinfo:
        posts.mutate_item("missing", lambda item: None)
    assert excinfo.value.reason is ContentErrorReason.ITEM_NOT_FOUND
    assert excinfo.value.info_message == "No item found at 'missing'."


def test_failed_mutation_leaves_item_untouched(posts: Section) -> None:
    def explode(item: Item) -> None:
        item.content.title = "Changed"
        item.tags.append(Tag("broken"))
        msg = "boom"
        raise RuntimeError(msg)

    with pytest.raises(ContentError) as excinfo:
        posts.mutate_item("first", explode)

    assert excinfo.value.reason is ContentErrorReason.ITEM_MUTATION_FAILED
    item = posts.item("first")
    assert item is not None
    assert item.title == "First"
    assert Tag("broken") not in posts.all_tags


def test_mutate_items_honours_predicate(posts: Section) -> None:
    tagged_python = Predicate(lambda item: Tag("python") in item.tags)

    def mark(item: Item) -> None:
        item.content.description = "python post"

    posts.mutate_items(mark, tagged_python)

    descriptions = {item.relative_path: item.description for item in posts.items}
    assert descriptions == {"first": "python post", "second": "python post", "third": ""}


def test_remove_items_rebuilds_indexes(posts: Section) -> None:
    posts.remove_items(Predicate(lambda item: item.relative_path == "first"))

    assert [item.relative_path for item in posts.items] == ["second", "third"]
    assert posts.item("first") is None
    second = posts.item("second")
    assert second is not None and second.relative_path == "second"
    assert [item.relative_path for item in posts.items_tagged(Tag("python"))] == ["second"]


def test_remove_all_items_keeps_watermark(posts: Section) -> None:
    watermark = posts.last_item_modification_date
    posts.remove_items()

    assert posts.items == ()
    assert posts.all_tags == []
    assert posts.last_item_modification_date == watermark, (
        "the modification watermark must never move backwards"
    )


def test_sort_items_keeps_indexes_consistent(posts: Section) -> None:
    posts.sort_items(key=lambda item: item.date, order=SortOrder.DESCENDING)

    assert [item.relative_path for item in posts.items] == ["third", "second", "first"]
    for item in posts.items:
        assert posts.item(item.relative_path) == item
    assert [item.relative_path for item in posts.items_tagged(Tag("python"))] == [
        "second",
        "first",
    ]


def test_relative_path_cannot_be_reassigned() -> None:
    item = _item("first")
    with pytest.raises(AttributeError):
        item.relative_path = "moved"


def test_changes_to_returned_items_do_not_reach_the_indexes(posts: Section) -> None:
    item = posts.item("first")
    assert item is not None
    item.tags.append(Tag("go"))
    for listed in posts.items:
        listed.tags.clear()
    posts.items_tagged(Tag("rust"))[0].tags.append(Tag("zig"))

    assert posts.items_tagged(Tag("go")) == []
    assert Tag("zig") not in posts.all_tags
    assert [entry.relative_path for entry in posts.items_tagged(Tag("python"))] == [
        "first",
        "second",
    ], "stored items must keep their tags after callers edit returned copies"


def test_added_item_is_stored_as_a_copy() -> None:
    section = Section("posts")
    original = _item("first", "python")
    section.add_item(original)

    original.tags.append(Tag("rust"))

    assert section.items_tagged(Tag("rust")) == []
    assert original.section_id == "", "adding an item must not modify the caller's item"
