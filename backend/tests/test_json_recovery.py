"""
Tests for JSON recovery of model output.

Covers fence stripping, leading commentary, truncated arrays (keep every closed
element, drop the partial one), the string-aware scanner, and failure cases.
"""

import json

import pytest

from longevity_chef.services.json_recovery import (
    MalformedResponse,
    Shape,
    recover_json,
    strip_code_fence,
)


# =============================================================================
# Clean input
# =============================================================================

class TestCleanInput:

    def test_array_is_returned_as_parsed(self):
        text = '[{"title": "A", "servings": 2}, {"title": "B", "servings": 4}]'
        assert recover_json(text, Shape.ARRAY) == json.loads(text)

    def test_object_is_returned_as_parsed(self):
        text = '{"id": "r1", "title": "Soup", "ingredients": [{"name": "leek"}]}'
        assert recover_json(text, Shape.OBJECT) == json.loads(text)

    def test_empty_array(self):
        assert recover_json("[]", Shape.ARRAY) == []

    def test_json_fence_is_stripped(self):
        text = '```json\n[{"title": "A"}]\n```'
        assert recover_json(text, Shape.ARRAY) == [{"title": "A"}]

    def test_bare_fence_is_stripped(self):
        text = '```\n{"title": "A"}\n```'
        assert recover_json(text, Shape.OBJECT) == {"title": "A"}

    def test_leading_commentary_is_discarded(self):
        text = 'Here are your recipes:\n[{"title": "A"}]'
        assert recover_json(text, Shape.ARRAY) == [{"title": "A"}]

    def test_object_after_commentary(self):
        assert recover_json('Sure! {"id": "r1"}', Shape.OBJECT) == {"id": "r1"}

    def test_strip_code_fence_leaves_plain_text_alone(self):
        assert strip_code_fence('{"a": 1}') == '{"a": 1}'


# =============================================================================
# Truncated arrays
# =============================================================================

class TestTruncationRecovery:

    def test_keeps_closed_elements_and_drops_partial_one(self):
        text = '[{"title": "A", "n": 1}, {"title": "B", "n": 2}, {"title": "C", "n'
        assert recover_json(text, Shape.ARRAY) == [
            {"title": "A", "n": 1},
            {"title": "B", "n": 2},
        ]

    def test_truncated_inside_nested_list(self):
        text = (
            '[{"title": "A", "ingredients": [{"name": "kale"}]}, '
            '{"title": "B", "ingredients": [{"name": "lentils"}, {"na'
        )
        assert recover_json(text, Shape.ARRAY) == [{"title": "A", "ingredients": [{"name": "kale"}]}]

    def test_single_closed_element_without_separator(self):
        assert recover_json('[{"title": "A"}', Shape.ARRAY) == [{"title": "A"}]

    def test_truncated_fenced_reply(self):
        text = '```json\n[{"title": "A"}, {"title": "B"'
        assert recover_json(text, Shape.ARRAY) == [{"title": "A"}]

    def test_no_closed_element_fails(self):
        with pytest.raises(MalformedResponse):
            recover_json('[{"title": "A", "ingredients": [', Shape.ARRAY)

    def test_brace_comma_inside_string_is_not_a_cut_point(self):
        text = '[{"note": "plain"}, {"note": "ends with },'
        assert recover_json(text, Shape.ARRAY) == [{"note": "plain"}]

    def test_braces_inside_closed_string_are_kept(self):
        text = '[{"note": "Tricky }, {"}, {"note": "cut'
        assert recover_json(text, Shape.ARRAY) == [{"note": "Tricky }, {"}]

    def test_escaped_quotes_do_not_end_strings(self):
        text = r'[{"q": "say \"hi\" }"}, {"q": "tr'
        assert recover_json(text, Shape.ARRAY) == [{"q": 'say "hi" }'}]

    def test_trailing_text_after_complete_array(self):
        text = '[{"a": 1}, {"a": 2}] Enjoy your week!'
        assert recover_json(text, Shape.ARRAY) == [{"a": 1}, {"a": 2}]

    def test_trailing_comma_falls_back_to_last_element(self):
        assert recover_json('[{"a": 1}, {"a": 2},]', Shape.ARRAY) == [{"a": 1}, {"a": 2}]

    def test_recovery_is_idempotent(self):
        text = '[{"title": "A", "tags": ["x"]}, {"title": "B"}, {"title": "C", "tags": ["y'
        first = recover_json(text, Shape.ARRAY)
        assert recover_json(json.dumps(first), Shape.ARRAY) == first


# =============================================================================
# Failures
# =============================================================================

class TestMalformed:

    def test_truncated_object_is_not_recoverable(self):
        with pytest.raises(MalformedResponse):
            recover_json('{"title": "A", "ingr', Shape.OBJECT)

    def test_object_where_array_expected(self):
        with pytest.raises(MalformedResponse):
            recover_json('{"title": "A"}', Shape.ARRAY)

    def test_plain_prose(self):
        with pytest.raises(MalformedResponse):
            recover_json("I'm sorry, I can't help with that.", Shape.ARRAY)

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_reply(self, text):
        with pytest.raises(MalformedResponse):
            recover_json(text, Shape.ARRAY)

    def test_malformed_response_is_a_value_error(self):
        assert issubclass(MalformedResponse, ValueError)
