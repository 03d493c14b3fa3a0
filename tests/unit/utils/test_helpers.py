"""Tests for pyscout.utils.helpers module."""

from __future__ import annotations

import codecs

from pyscout.utils.helpers import (
    byte_spans_to_char_spans,
    char_spans_to_byte_spans,
    decode_text,
    highlight_spans,
    looks_binary,
    split_lines,
)


class TestSplitLines:
    """Tests for split_lines."""

    def test_lf(self):
        assert split_lines("a\nb\n") == ["a", "b"]

    def test_crlf(self):
        assert split_lines("a\r\nb\r\n") == ["a", "b"]

    def test_no_trailing_terminator(self):
        assert split_lines("a\nb") == ["a", "b"]

    def test_blank_lines_kept(self):
        assert split_lines("a\n\nb\n") == ["a", "", "b"]

    def test_empty(self):
        assert split_lines("") == []

    def test_only_newline(self):
        assert split_lines("\n") == [""]

    def test_form_feed_is_not_a_break(self):
        assert split_lines("a\x0cb\n") == ["a\x0cb"]

    def test_lone_cr_kept_inside_line(self):
        assert split_lines("a\rb\n") == ["a\rb"]


class TestBinaryAndDecoding:
    """Tests for looks_binary and decode_text."""

    def test_nul_is_binary(self):
        assert looks_binary(b"abc\x00def")

    def test_text_is_not_binary(self):
        assert not looks_binary("héllo".encode("utf-8"))

    def test_decode_utf8(self):
        assert decode_text("héllo".encode("utf-8")) == "héllo"

    def test_decode_failure(self):
        assert decode_text(b"\xff\xfe\xfa") is None

    def test_bom_stripped(self):
        assert decode_text(codecs.BOM_UTF8 + b"abc") == "abc"
        assert decode_text(codecs.BOM_UTF8 + b"abc", "UTF_8") == "abc"

    def test_other_encoding(self):
        assert decode_text(b"caf\xe9", "latin-1") == "café"


class TestSpans:
    """Tests for span conversion and highlighting."""

    def test_byte_spans_ascii(self):
        assert char_spans_to_byte_spans("TODO fix", [(0, 4)]) == [(0, 4)]

    def test_byte_spans_multibyte(self):
        line = "héllo wörld"
        assert char_spans_to_byte_spans(line, [(6, 11)]) == [(7, 13)]

    def test_char_spans_from_bytes(self):
        line = "héllo wörld"
        assert byte_spans_to_char_spans(line, [(7, 13)]) == [(6, 11)]
        assert byte_spans_to_char_spans(line, [(0, 0)]) == [(0, 0)]

    def test_highlight(self):
        assert highlight_spans("TODO fix", [(0, 4)]) == "[TODO] fix"

    def test_highlight_custom_markers(self):
        assert highlight_spans("a b a", [(0, 1), (4, 5)], "<", ">") == "<a> b <a>"

    def test_highlight_no_spans(self):
        assert highlight_spans("plain", []) == "plain"

    def test_highlight_clamps_overlaps(self):
        assert highlight_spans("abcdef", [(0, 3), (2, 4)]) == "[abc][d]ef"
