"""Tests for Collection, Files and Pages."""

from types import SimpleNamespace

import pytest

from kirby.cms.collection import Collection, Files, Pages
from kirby.cms.content import Field


def item(id, **attrs):
    return SimpleNamespace(id=id, **attrs)


@pytest.fixture
def collection():
    return Collection([item("a", num=2), item("b", num=None), item("c", num=1)])


def test_lookup_and_order(collection):
    assert collection.keys() == ["a", "b", "c"]
    assert collection.count() == len(collection) == 3
    assert collection.first().id == "a"
    assert collection.last().id == "c"
    assert collection.nth(1).id == "b"
    assert collection.nth(5) is None
    assert collection[0].id == "a"
    assert collection["c"].id == "c"
    assert collection.find("missing") is None
    assert "b" in collection
    assert item("b") in collection


def test_index_next_and_prev(collection):
    b = collection["b"]

    assert collection.index_of(b) == 1
    assert collection.index_of("missing") == -1
    assert collection.next_of(b).id == "c"
    assert collection.prev_of(b).id == "a"
    assert collection.prev_of(collection["a"]) is None
    assert collection.next_of(collection["c"]) is None
    assert collection.next_of(item("x")) is None


def test_append_and_prepend(collection):
    collection.append(item("d"))
    collection.prepend(item("z"))
    collection.prepend(collection["c"])

    assert collection.keys() == ["c", "z", "a", "b", "d"]


def test_not_filter_and_sort_return_copies(collection):
    assert collection.not_("a", collection["c"]).keys() == ["b"]
    assert collection.filter(lambda x: x.num is not None).keys() == ["a", "c"]
    assert collection.filter_by("num", 1).keys() == ["c"]
    assert collection.sort_by("num").keys() == ["c", "a", "b"]
    assert collection.keys() == ["a", "b", "c"]


def test_filter_by_calls_methods_and_unwraps_fields():
    collection = Collection(
        [
            item("a", template=lambda: "image", title=Field(None, "title", "A")),
            item("b", template=lambda: "document", title=Field(None, "title", "B")),
        ]
    )

    assert collection.filter_by("template", "image").keys() == ["a"]
    assert collection.filter_by("title", "B").keys() == ["b"]


def test_to_array_with_mapper(collection):
    assert collection.to_array(lambda x: x.num) == {"a": 2, "b": None, "c": 1}


def test_files_find_by_filename():
    parent = SimpleNamespace(id="projects/alpha")
    files = Files(
        [
            item("projects/alpha/photo.jpg", filename="photo.jpg", type="image"),
            item("projects/alpha/report.pdf", filename="report.pdf", type="document"),
        ],
        parent=parent,
    )

    assert files.find("projects/alpha/photo.jpg").filename == "photo.jpg"
    assert files.find("report.pdf").filename == "report.pdf"
    assert files.find("missing.gif") is None
    assert files.images().keys() == ["projects/alpha/photo.jpg"]
    assert files.documents().keys() == ["projects/alpha/report.pdf"]
    assert files.images().parent is parent


def test_pages_listed_and_unlisted():
    pages = Pages([item("projects", num=1), item("about", num=None)])

    assert pages.listed().keys() == ["projects"]
    assert pages.unlisted().keys() == ["about"]
