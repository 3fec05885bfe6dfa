"""Source locations for diagnostics and scanned Erlang files."""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from pathlib import Path

_CODING_RE = re.compile(rb"coding\s*[:=]\s*([-\w.]+)")
_ENCODINGS = {
    "utf-8": "utf-8",
    "utf8": "utf-8",
    "latin-1": "latin-1",
    "latin1": "latin-1",
    "iso-8859-1": "latin-1",
}


def source_encoding(data: bytes) -> str:
    """Encoding named by a ``coding:`` comment in the first two lines, else utf-8."""
    for line in data.splitlines()[:2]:
        start = line.find(b"%")
        if start < 0:
            continue
        m = _CODING_RE.search(line, start)
        if m:
            name = m.group(1).decode("ascii", errors="replace").lower()
            if name in _ENCODINGS:
                return _ENCODINGS[name]
    return "utf-8"


@dataclass(frozen=True)
class Span:
    """A range within a source file."""

    file: str
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    def __str__(self) -> str:
        return f"{self.file}:{self.start_line}:{self.start_col}"


NO_SPAN = Span("<unknown>", 0, 0, 0, 0)


class SourceFile:
    """A loaded source file with offset-to-position mapping."""

    def __init__(self, path: Path) -> None:
        self.path = path
        data = path.read_bytes()
        self.encoding = source_encoding(data)
        # strict decoding; callers turn UnicodeDecodeError into a diagnostic
        self.content = data.decode(self.encoding).replace("\r\n", "\n")
        self.lines = self.content.splitlines()
        self._line_starts = [0]
        for i, ch in enumerate(self.content):
            if ch == "\n":
                self._line_starts.append(i + 1)

    def line_at(self, n: int) -> str:
        """Return the 1-indexed line, or empty string if out of range."""
        if 1 <= n <= len(self.lines):
            return self.lines[n - 1]
        return ""

    def position(self, offset: int) -> tuple[int, int]:
        """Map a character offset to a 1-indexed (line, column) pair."""
        idx = bisect.bisect_right(self._line_starts, offset) - 1
        return idx + 1, offset - self._line_starts[idx] + 1

    def span(self, start: int, end: int) -> Span:
        """Build a span covering content[start:end]."""
        start_line, start_col = self.position(start)
        end_line, end_col = self.position(max(start, end - 1))
        return Span(str(self.path), start_line, start_col, end_line, end_col)
