"""Tests for slugs, dotted queries and string templates."""

from types import SimpleNamespace

import pytest

from kirby.core.exceptions import InvalidArgumentError
from kirby.core.utils import query, slugify, snake_case, template


def test_slugify_ascii_and_length():
    assert slugify("Hello World") == "hello-world"
    assert slugify("Café au lait") == "cafe-au-lait"
    assert slugify("!!!") == "untitled"
    assert slugify("a" * 80, max_len=10) == "a" * 10


def test_snake_case():
    assert snake_case("mediaUrl") == "media_url"
    assert snake_case("panelImage") == "panel_image"
    assert snake_case("plain") == "plain"


class Thing:
    def __init__(self, name):
        self.name = name

    def media_url(self):
        return f"/media/{self.name}"

    def greet(self, greeting="Hello", punctuation="!"):
        return f"{greeting} {self.name}{punctuation}"


def test_query_walks_mappings_attributes_and_methods():
    data = {"thing": Thing("ada"), "meta": {"size": 3}}

    assert query("thing.name", data) == "ada"
    assert query("meta.size", data) == 3
    assert query("thing.greet", data) == "Hello ada!"
    assert query('thing.greet("Hi", "?")', data) == "Hi ada?"


def test_query_camel_case_falls_back_to_snake_case():
    assert query("thing.mediaUrl", {"thing": Thing("ada")}) == "/media/ada"


def test_query_stops_at_none():
    data = {"thing": SimpleNamespace(parent=None)}

    assert query("thing.parent.name", data) is None
    assert query("missing.anything", data) is None
    assert query(None, data) is None
    assert query("  ", data) is None


def test_query_arguments_keep_dots_inside_quotes():
    files = {"a.jpg": "first", "b.jpg": "second"}
    data = {"files": SimpleNamespace(find=files.get)}

    assert query('files.find("b.jpg")', data) == "second"


def test_query_literal_arguments():
    data = {"echo": SimpleNamespace(value=lambda *args: args)}

    assert query("echo.value(1, true, null, 'x')", data) == (1, True, None, "x")


def test_query_unbalanced_raises():
    with pytest.raises(InvalidArgumentError):
        query('thing.greet("Hi)', {"thing": Thing("ada")})


def test_template_replaces_placeholders():
    data = {"thing": Thing("ada")}

    assert template("Name: {{ thing.name }}", data) == "Name: ada"
    assert template("{{thing.greet('Bye', '.')}}", data) == "Bye ada."


def test_template_uses_fallback_for_missing_values():
    assert template("[{{ nothing.here }}]", {}) == "[]"
    assert template("[{{ nothing }}]", {}, fallback="-") == "[-]"
    assert template('[{{ broken("x }}]', {}, fallback="?") == "[?]"
