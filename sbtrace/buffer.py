"""Character reader that tracks line and column for error messages."""

from __future__ import annotations

import sys
from typing import Iterator, TextIO


class Buffer:
    """Reads a text stream one character at a time.

    Every line, including the last, is delivered with a trailing newline.
    ``line_number`` counts from 1 and ``column`` from 0.
    """

    def __init__(self, stream: TextIO, print_chars: bool = False, print_lines: bool = False):
        self._stream = stream
        self._print_chars = print_chars
        self._print_lines = print_lines
        self.line = ""
        self._pos = 0
        self.line_number = 0
        self.column = 0
        self._last_printed = 0
        self._exhausted = False

    def _read_line(self) -> bool:
        raw = self._stream.readline()
        if raw == "":
            self._exhausted = True
            return False
        if raw.endswith("\n"):
            raw = raw[:-1]
        self.line = raw + "\n"
        self._pos = 0
        self.column = 0
        self.line_number += 1
        if self._print_lines:
            self.print_line(sys.stdout)
        return True

    def get_ch(self) -> str:
        """Return the next character, or an empty string at end of input."""
        if self._exhausted:
            return ""
        if not self.line:
            if not self._read_line():
                return ""
        else:
            self._pos += 1
            self.column += 1
        while self._pos >= len(self.line):
            if not self._read_line():
                return ""
        ch = self.line[self._pos]
        if self._print_chars:
            print(f"Read character `{ch}'")
        return ch

    def __iter__(self) -> Iterator[str]:
        while ch := self.get_ch():
            yield ch

    def print_line(self, out: TextIO) -> None:
        """Write the current line to ``out`` unless it was written already."""
        if self.line_number > self._last_printed:
            out.write(f"# {self.line}\n")
            self._last_printed = self.line_number