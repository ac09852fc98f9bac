"""Tests for frontmatter name extraction."""

from __future__ import annotations

import pytest

from skill_installer.frontmatter import extract_name


class TestExtractName:
    def test_name_from_frontmatter(self):
        assert extract_name("---\nname: foo\n---\n# Body\n", "fallback") == "foo"

    def test_value_is_trimmed(self):
        content = "---\ndescription: x\nname:    my-skill   \n---\nbody"
        assert extract_name(content, "fallback") == "my-skill"

    def test_quoted_value(self):
        assert extract_name('---\nname: "pdf-tools"\n---\n', "fallback") == "pdf-tools"

    def test_crlf_line_endings(self):
        assert extract_name("---\r\nname: win\r\n---\r\nbody", "fallback") == "win"

    def test_no_frontmatter_returns_fallback(self):
        assert extract_name("# Just markdown\nname: nope\n", "fallback") == "fallback"

    def test_block_not_at_start_returns_fallback(self):
        assert extract_name("\n---\nname: late\n---\n", "fallback") == "fallback"

    def test_block_without_name_returns_fallback(self):
        assert extract_name("---\ndescription: only\n---\nbody", "fallback") == "fallback"

    def test_other_keys_ending_in_name_are_ignored(self):
        assert extract_name("---\nusername: bob\n---\n", "fallback") == "fallback"

    def test_nested_name_is_ignored(self):
        content = "---\nmetadata:\n  name: inner\n---\n"
        assert extract_name(content, "fallback") == "fallback"

    def test_empty_name_does_not_fall_through_to_nested_key(self):
        content = "---\nname:\nmetadata:\n  name: inner\n---\n"
        assert extract_name(content, "fallback") == "fallback"

    def test_first_top_level_name_wins(self):
        content = "---\nmetadata:\n  name: inner\nname: outer\nname: later\n---\n"
        assert extract_name(content, "fallback") == "outer"

    def test_name_outside_block_is_ignored(self):
        assert extract_name("---\ndescription: x\n---\nname: body\n", "fallback") == "fallback"

    @pytest.mark.parametrize(
        "content",
        ["", "---", "---\nname: unterminated\n", "---\nname:\n---\n", "------\n"],
    )
    def test_malformed_input_never_raises(self, content):
        assert extract_name(content, "fallback") == "fallback"
