"""Tests for mdmirror.editing formatting commands."""

import pytest

from mdmirror.editing import insert_block, toggle_line_prefix, wrap_selection


class TestWrapSelection:
    def test_wraps_selection(self):
        edit = wrap_selection("make this bold", 10, 14, "**")
        assert edit.text == "make this **bold**"
        assert edit.text[edit.start : edit.end] == "bold"

    def test_unwraps_already_wrapped(self):
        edit = wrap_selection("make this **bold**", 12, 16, "**")
        assert edit.text == "make this bold"
        assert (edit.start, edit.end) == (10, 14)

    def test_toggle_twice_restores_text(self):
        first = wrap_selection("a ~~b~~ c", 4, 5, "~~")
        second = wrap_selection(first.text, first.start, first.end, "~~")
        assert first.text == "a b c"
        assert second.text == "a ~~b~~ c"

    def test_distinct_closing_marker(self):
        edit = wrap_selection("link", 0, 4, "[", "](url)")
        assert edit.text == "[link](url)"
        assert wrap_selection(edit.text, 1, 5, "[", "](url)").text == "link"

    @pytest.mark.parametrize(
        "marker, placeholder",
        [
            ("**", "bold text"),
            ("*", "italic text"),
            ("~~", "strikethrough text"),
            ("`", "code"),
            ("==", "text"),
        ],
    )
    def test_empty_selection_inserts_placeholder(self, marker, placeholder):
        edit = wrap_selection("ab", 1, 1, marker)
        assert edit.text == f"a{marker}{placeholder}{marker}b"
        assert edit.text[edit.start : edit.end] == placeholder

    def test_marker_at_document_start_is_not_unwrapped(self):
        edit = wrap_selection("x*", 0, 1, "*")
        assert edit.text == "*x**"

    def test_reversed_selection(self):
        assert wrap_selection("word", 4, 0, "`").text == "`word`"


class TestToggleLinePrefix:
    def test_adds_prefix_to_caret_line(self):
        edit = toggle_line_prefix("one\ntwo\nthree", 6, 6, "> ")
        assert edit.text == "one\n> two\nthree"
        assert (edit.start, edit.end) == (8, 8)

    def test_removes_existing_prefix(self):
        edit = toggle_line_prefix("one\n- two", 9, 9, "- ")
        assert edit.text == "one\ntwo"
        assert (edit.start, edit.end) == (7, 7)

    def test_caret_inside_removed_prefix_moves_to_line_start(self):
        edit = toggle_line_prefix("## Title", 1, 1, "## ")
        assert edit.text == "Title"
        assert edit.start == edit.end == 0

    def test_offsets_before_line_unchanged(self):
        edit = toggle_line_prefix("one\ntwo", 1, 5, "1. ")
        assert edit.text == "one\n1. two"
        assert (edit.start, edit.end) == (1, 8)

    def test_empty_document(self):
        assert toggle_line_prefix("", 0, 0, "- [ ] ").text == "- [ ] "


class TestInsertBlock:
    def test_blank_line_after_non_empty_line(self):
        edit = insert_block("# Title\nbody", 2, 2, "---")
        assert edit.text == "# Title\n\n---\nbody"
        assert (edit.start, edit.end) == (2, 2)

    def test_no_separator_on_empty_line(self):
        assert insert_block("a\n\nb", 2, 2, "```\ncode\n```").text == (
            "a\n```\ncode\n```\nb"
        )

    def test_appends_at_end_of_last_line(self):
        assert insert_block("text", 0, 0, "| a |").text == "text\n\n| a |"
