"""Unit tests for ContextResolver."""

import pytest

from quire_core.template import ContextResolver


@pytest.fixture
def resolver():
    return ContextResolver()


class TestResolvePath:
    """Tests for ContextResolver.resolve_path."""

    def test_top_level_key(self, resolver):
        assert resolver.resolve_path({"title": "Hello"}, "title") == "Hello"

    def test_dotted_path(self, resolver):
        context = {"author": {"name": "Ada", "links": {"site": "ada.dev"}}}
        assert resolver.resolve_path(context, "author.name") == "Ada"
        assert resolver.resolve_path(context, "author.links.site") == "ada.dev"

    def test_indexed_path(self, resolver):
        context = {"posts": [{"title": "First"}, {"title": "Second"}]}
        assert resolver.resolve_path(context, "posts[1].title") == "Second"
        assert resolver.resolve_path(context, "posts.0.title") == "First"

    def test_nested_indexes(self, resolver):
        context = {"grid": [[1, 2], [3, 4]]}
        assert resolver.resolve_path(context, "grid[1][0]") == 3

    def test_whole_key_with_dot_wins(self, resolver):
        """A literal dotted key is tried before walking segments."""
        context = {"a.b": "literal", "a": {"b": "walked"}}
        assert resolver.resolve_path(context, "a.b") == "literal"

    def test_missing_path_returns_none(self, resolver):
        assert resolver.resolve_path({}, "missing") is None
        assert resolver.resolve_path({"a": {}}, "a.b.c") is None
        assert resolver.resolve_path({"a": "text"}, "a.b") is None

    def test_index_out_of_range_returns_none(self, resolver):
        assert resolver.resolve_path({"items": [1]}, "items[5]") is None

    def test_empty_path_returns_none(self, resolver):
        assert resolver.resolve_path({"": "x"}, "  ") is None

    def test_whitespace_is_trimmed(self, resolver):
        assert resolver.resolve_path({"title": "Hi"}, "  title ") == "Hi"

    def test_frame_shadows_context(self, resolver):
        context = {"title": "Page"}
        frame = {"title": "Item"}
        assert resolver.resolve_path(context, "title", frame) == "Item"

    def test_falls_back_to_context(self, resolver):
        assert resolver.resolve_path({"site": "Quire"}, "site", {"title": "Item"}) == "Quire"

    def test_falls_back_to_this_properties(self, resolver):
        context = {"this": {"name": "from-this"}}
        assert resolver.resolve_path(context, "name") == "from-this"

    def test_this_comes_from_frame(self, resolver):
        assert resolver.resolve_path({"this": "outer"}, "this", {"this": "inner"}) == "inner"
        assert resolver.resolve_path({"this": "outer"}, "this") == "outer"

    def test_falsy_values_are_not_missing(self, resolver):
        context = {"zero": 0, "empty": "", "off": False}
        assert resolver.resolve_path(context, "zero") == 0
        assert resolver.resolve_path(context, "empty") == ""
        assert resolver.resolve_path(context, "off") is False


class TestGetArray:
    """Tests for ContextResolver.get_array."""

    def test_list_is_used_as_is(self, resolver):
        assert resolver.get_array({"tags": ["a", "b"]}, "tags") == ["a", "b"]

    def test_tuple_becomes_list(self, resolver):
        assert resolver.get_array({"tags": ("a", "b")}, "tags") == ["a", "b"]

    def test_same_named_sequence_is_unwrapped(self, resolver):
        context = {"posts": {"posts": [1, 2, 3]}}
        assert resolver.get_array(context, "posts") == [1, 2, 3]

    def test_same_named_unwrap_uses_last_segment(self, resolver):
        context = {"blog": {"posts": {"posts": ["x"]}}}
        assert resolver.get_array(context, "blog.posts") == ["x"]

    def test_map_without_same_named_sequence_is_wrapped(self, resolver):
        context = {"author": {"name": "Ada"}}
        assert resolver.get_array(context, "author") == [{"name": "Ada"}]

    def test_scalar_is_wrapped(self, resolver):
        assert resolver.get_array({"tag": "solo"}, "tag") == ["solo"]
        assert resolver.get_array({"count": 0}, "count") == [0]

    def test_missing_is_empty(self, resolver):
        assert resolver.get_array({}, "nothing") == []


class TestBuildFrame:
    """Tests for ContextResolver.build_frame."""

    def test_map_item_keys_are_spread(self, resolver):
        frame = resolver.build_frame({"title": "T"}, "posts", {"site": "S"}, 1)
        assert frame["title"] == "T"
        assert frame["this"] == {"title": "T"}
        assert frame["site"] == "S"
        assert frame["@index"] == 1

    def test_item_keys_win_over_parent(self, resolver):
        frame = resolver.build_frame({"title": "Item"}, "posts", {"title": "Page"}, 1)
        assert frame["title"] == "Item"

    def test_loop_path_is_not_copied(self, resolver):
        frame = resolver.build_frame("a", "tags", {"tags": ["a"], "site": "S"}, 2)
        assert "tags" not in frame
        assert frame["site"] == "S"

    def test_primitive_item_gets_parent_keys(self, resolver):
        frame = resolver.build_frame("a", "tags", {"site": "S"}, 3)
        assert frame == {"this": "a", "site": "S", "@index": 3}

    def test_parent_is_not_mutated(self, resolver):
        parent = {"site": "S"}
        resolver.build_frame({"title": "T"}, "posts", parent, 1)
        assert parent == {"site": "S"}
