"""Reading whitespace-separated words from text streams."""

from __future__ import annotations

import re
from collections.abc import Iterator
from typing import TextIO

__all__ = ["read_words", "iter_word_lines"]

_WHITESPACE = re.compile(r"[ \n\t\r]+")


def _read_line(stream: TextIO) -> str | None:
    raw = stream.readline()
    if raw == "":
        return None
    return raw[:-1] if raw.endswith("\n") else raw


def _read_logical_line(stream: TextIO) -> str | None:
    """Read one line, joining lines that end in a backslash."""
    line = _read_line(stream)
    if line is None:
        return None
    while line.endswith("\\"):
        nxt = _read_line(stream)
        line = line[:-1] + " " + (nxt or "")
    return line


def _split(line: str) -> list[str]:
    return [w for w in _WHITESPACE.split(line) if w]


def read_words(stream: TextIO) -> list[str]:
    """Read the next logical line and return its words; empty at end of input."""
    line = _read_logical_line(stream)
    return [] if line is None else _split(line)


def iter_word_lines(stream: TextIO) -> Iterator[list[str]]:
    """Yield the words of every logical line, empty lines included."""
    while (line := _read_logical_line(stream)) is not None:
        yield _split(line)