"""Tests for delimiter pattern compilation and scanning."""

import re

import pytest

from gpteval.delimiters import DEFAULT_EXPRESSION_REGEX, Marker, compile_pattern, scan_markers


class TestCompilePattern:
    def test_default_is_multiline(self):
        p = compile_pattern(DEFAULT_EXPRESSION_REGEX)
        assert p.flags & re.MULTILINE
        assert not p.flags & re.DOTALL

    def test_dotall_flag(self):
        p = compile_pattern(DEFAULT_EXPRESSION_REGEX, dotall=True)
        assert p.flags & re.DOTALL

    def test_requires_capture_group(self):
        with pytest.raises(ValueError):
            compile_pattern(r"^--.*$")

    def test_invalid_regex(self):
        with pytest.raises(re.error):
            compile_pattern(r"^--(")


class TestScanMarkers:
    def test_markers_and_tail(self, pattern):
        markers = list(scan_markers("--a\nfoo\n--b\nbar", pattern))
        assert markers == [
            Marker("", "a"),
            Marker("\nfoo\n", "b"),
            Marker("\nbar", None),
        ]

    def test_no_tail_when_text_ends_with_marker(self, pattern):
        markers = list(scan_markers("--a\n--b", pattern))
        assert [m.capture for m in markers] == ["a", "b"]

    def test_no_matches_yields_whole_text(self, pattern):
        assert list(scan_markers("plain text", pattern)) == [Marker("plain text", None)]

    def test_empty_text(self, pattern):
        assert list(scan_markers("", pattern)) == []

    def test_marker_space_is_optional(self, pattern):
        markers = list(scan_markers("-- spaced\n--tight", pattern))
        assert [m.capture for m in markers] == ["spaced", "tight"]

    def test_empty_matches_terminate(self, line_pattern):
        markers = list(scan_markers("one\n\ntwo", line_pattern))
        assert [m.capture for m in markers if m.capture] == ["one", "two"]

    def test_is_lazy(self, pattern):
        gen = scan_markers("--a\n--b\n--c", pattern)
        assert next(gen).capture == "a"
