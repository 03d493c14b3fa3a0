"""
Small text and byte helpers shared by the scanner and the formatters.

Key Functions:
    split_lines: Split text on its own line terminators (LF or CRLF)
    looks_binary: NUL-byte sniffing on the head of a file
    decode_text: Strict decoding that reports failure instead of guessing
    char_spans_to_byte_spans: Convert str offsets to encoded byte offsets
    byte_spans_to_char_spans: The reverse, for rendering byte spans on a str
    highlight_spans: Wrap spans of a line in markers

Example:
    >>> from pyscout.utils.helpers import split_lines, highlight_spans
    >>> split_lines("one\\r\\ntwo\\n")
    ['one', 'two']
    >>> highlight_spans("TODO fix", [(0, 4)])
    '[TODO] fix'
"""

from __future__ import annotations

import codecs
from collections.abc import Iterable

Span = tuple[int, int]


def split_lines(text: str) -> list[str]:
    """
    Split text into lines on ``\\n``, dropping a trailing ``\\r`` from each line.

    Unlike ``str.splitlines`` this never breaks on form feeds, vertical tabs or
    Unicode line separators, so line numbers agree with what editors and
    ``grep -n`` report. A final terminator does not add an empty last line.
    """
    if not text:
        return []
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def looks_binary(head: bytes) -> bool:
    """Return True if the sampled bytes contain a NUL byte."""
    return b"\x00" in head


def decode_text(raw: bytes, encoding: str = "utf-8") -> str | None:
    """
    Strictly decode ``raw`` as ``encoding``.

    A leading byte-order mark for UTF-8 is accepted and removed. Returns None
    when the bytes are not valid in the encoding.
    """
    if encoding.lower().replace("_", "-") in ("utf-8", "utf8") and raw.startswith(
        codecs.BOM_UTF8
    ):
        raw = raw[len(codecs.BOM_UTF8) :]
    try:
        return raw.decode(encoding)
    except UnicodeDecodeError:
        return None


def char_spans_to_byte_spans(
    line: str, spans: Iterable[Span], encoding: str = "utf-8"
) -> list[Span]:
    """Map code-point offsets within ``line`` to byte offsets in ``encoding``."""
    out: list[Span] = []
    for a, b in spans:
        start = len(line[:a].encode(encoding))
        out.append((start, start + len(line[a:b].encode(encoding))))
    return out


def byte_spans_to_char_spans(
    line: str, spans: Iterable[Span], encoding: str = "utf-8"
) -> list[Span]:
    """Map byte offsets into ``line`` encoded with ``encoding`` back to code-point offsets."""
    raw = line.encode(encoding)
    out: list[Span] = []
    for a, b in spans:
        start = len(raw[:a].decode(encoding))
        out.append((start, start + len(raw[a:b].decode(encoding))))
    return out


def highlight_spans(
    line: str, spans: Iterable[Span], marker_left: str = "[", marker_right: str = "]"
) -> str:
    """Lightweight span highlighting for plain text output."""
    ordered = sorted(spans, key=lambda x: x[0])
    if not ordered:
        return line
    out: list[str] = []
    last = 0
    for a, b in ordered:
        a = max(0, min(len(line), a))
        b = max(0, min(len(line), b))
        if a < last:
            a = last
        if b <= a:
            continue
        out.append(line[last:a])
        out.append(marker_left)
        out.append(line[a:b])
        out.append(marker_right)
        last = b
    out.append(line[last:])
    return "".join(out)
