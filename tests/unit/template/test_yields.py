"""Unit tests for layout yields."""

import pytest

from quire_core.template import RenderState
from quire_core.template.processors import YieldProcessor


@pytest.fixture
def processor():
    return YieldProcessor()


class TestExtract:
    """Tests for YieldProcessor.extract."""

    def test_definitions_removed_and_stored(self, processor):
        state = RenderState(context={})
        result = processor.extract('a{{@yield "head"}}  <style/>  {{/yield}}b', state)
        assert result == "ab"
        assert state.yields == {"head": "<style/>"}

    def test_bare_markers_kept(self, processor):
        state = RenderState(context={})
        template = '{{@yield "body"}}x'
        assert processor.extract(template, state) == template
        assert state.yields == {}

    def test_last_definition_wins(self, processor):
        state = RenderState(context={})
        processor.extract('{{@yield "a"}}1{{/yield}}{{@yield "a"}}2{{/yield}}', state)
        assert state.yields == {"a": "2"}


class TestInsert:
    """Tests for YieldProcessor.insert."""

    def test_definition_keeps_default_and_appends_custom(self, processor):
        state = RenderState(context={}, yields={"head": "C"})
        assert processor.insert('{{@yield "head"}}D{{/yield}}', state) == "DC"

    def test_definition_without_custom_keeps_default(self, processor):
        state = RenderState(context={})
        assert processor.insert('<{{@yield "head"}}D{{/yield}}>', state) == "<D>"

    def test_bare_marker_replaced(self, processor):
        state = RenderState(context={}, yields={"body": "B"})
        assert processor.insert('<main>{{@yield "body"}}</main>', state) == "<main>B</main>"

    def test_bare_marker_without_custom_is_empty(self, processor):
        state = RenderState(context={})
        assert processor.insert("<main>{{@yield body}}</main>", state) == "<main></main>"

    def test_default_name(self, processor):
        state = RenderState(context={}, yields={"default": "X"})
        assert processor.insert("{{@yield}}", state) == "X"
