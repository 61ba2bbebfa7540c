"""Tests for path parsing and nested lookup in topogroup._path."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from topogroup._path import AttributePart, ItemPart, Path, deep_get

# --- Test Fixtures ---


class Package(BaseModel):
    name: str
    version: str | None = None


@dataclass
class Task:
    id: int
    package: Package


# --- Path.parse() Tests ---


class TestPathParse:
    @pytest.mark.parametrize(
        ("path_str", "expected_root", "expected_parts"),
        [
            ("name", "name", ()),
            ("package.name", "package", (AttributePart("name"),)),
            ("a.b.c", "a", (AttributePart("b"), AttributePart("c"))),
        ],
    )
    def test_parse_with_attributes(self, path_str: str, expected_root: str, expected_parts: tuple):
        path = Path.parse(path_str)
        assert path.root == expected_root
        assert path.parts == expected_parts

    @pytest.mark.parametrize(
        ("path_str", "expected_root", "expected_parts"),
        [
            ("deps[0]", "deps", (ItemPart("0"),)),
            ("deps[0].id", "deps", (ItemPart("0"), AttributePart("id"))),
            ("[1]", "", (ItemPart("1"),)),
            ("a[x].b[ 2 ]", "a", (ItemPart("x"), AttributePart("b"), ItemPart("2"))),
        ],
    )
    def test_parse_with_items(self, path_str: str, expected_root: str, expected_parts: tuple):
        path = Path.parse(path_str)
        assert path.root == expected_root
        assert path.parts == expected_parts

    def test_parse_with_whitespace(self):
        path = Path.parse("  package.name  ")
        assert path.root == "package"
        assert path.parts == (AttributePart("name"),)

    def test_unclosed_bracket_raises(self):
        with pytest.raises(ValueError, match="Unclosed"):
            Path.parse("deps[0")

    def test_unexpected_character_raises(self):
        with pytest.raises(ValueError, match="Unexpected character"):
            Path.parse("deps[0]x")

    def test_segments_skip_empty_root(self):
        assert Path.parse("[0].id").segments == ("0", "id")
        assert Path.parse("package.name").segments == ("package", "name")


class TestPathStr:
    @pytest.mark.parametrize("path_str", ["name", "package.name", "deps[0].id", "a[x].b"])
    def test_str_roundtrip(self, path_str: str):
        assert str(Path.parse(path_str)) == path_str


# --- deep_get() Tests ---


class TestDeepGet:
    def test_top_level_key(self):
        assert deep_get({"name": "A"}, "name") == "A"

    def test_nested_mapping(self):
        assert deep_get({"package": {"name": "A"}}, "package.name") == "A"

    def test_sequence_index(self):
        data = {"deps": [{"id": 1}, {"id": 2}]}
        assert deep_get(data, "deps[1].id") == 2
        assert deep_get(data, "deps.0.id") == 1

    def test_integer_mapping_key(self):
        assert deep_get({"by_id": {7: "seven"}}, "by_id[7]") == "seven"

    def test_pydantic_attribute(self):
        assert deep_get({"package": Package(name="lib")}, "package.name") == "lib"

    def test_dataclass_attribute(self):
        task = Task(id=3, package=Package(name="core"))
        assert deep_get(task, "package.name") == "core"
        assert deep_get(task, "id") == 3

    def test_accepts_parsed_path(self):
        assert deep_get({"a": {"b": 1}}, Path.parse("a.b")) == 1

    @pytest.mark.parametrize(
        ("data", "path"),
        [
            ({"package": {}}, "package.name"),
            ({"package": None}, "package.name"),
            ({"deps": [1]}, "deps[5]"),
            ({"deps": [1]}, "deps[x]"),
            ({"a": {}}, "a.²"),
            ({"deps": [1]}, "deps[١]"),
            ({"name": "A"}, "name.first"),
            (None, "name"),
            (42, "name"),
        ],
    )
    def test_missing_returns_default(self, data, path: str):
        assert deep_get(data, path) is None
        assert deep_get(data, path, "fallback") == "fallback"

    def test_none_value_counts_as_missing(self):
        assert deep_get(Package(name="x"), "version", "unset") == "unset"

    def test_falsy_values_are_returned(self):
        assert deep_get({"count": 0}, "count", "fallback") == 0
        assert deep_get({"name": ""}, "name", "fallback") == ""
