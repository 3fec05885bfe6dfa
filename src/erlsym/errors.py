"""Errors raised while building or querying symbol tables, and their rendering."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from erlsym.source import Span


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    NOTE = "note"


# ANSI color codes
_COLORS = {
    Severity.ERROR: "\033[1;31m",    # bold red
    Severity.WARNING: "\033[1;33m",  # bold yellow
    Severity.NOTE: "\033[1;36m",     # bold cyan
}
_BOLD = "\033[1m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"


@dataclass(frozen=True)
class DiagnosticLabel:
    """Points to a specific source location."""

    span: Span
    message: str = ""


@dataclass
class Diagnostic:
    severity: Severity
    code: str
    message: str
    labels: list[DiagnosticLabel] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)


class DiagnosticRenderer:
    """Renders diagnostics in Rust-style format with optional colors."""

    def __init__(self, *, color: bool = True) -> None:
        self.color = color
        self._file_cache: dict[str, list[str]] = {}

    def _c(self, code: str) -> str:
        return code if self.color else ""

    def _get_source_line(self, filename: str, line_num: int) -> str | None:
        if filename not in self._file_cache:
            path = Path(filename)
            try:
                self._file_cache[filename] = (
                    path.read_text(errors="replace").splitlines() if path.is_file() else []
                )
            except OSError:
                self._file_cache[filename] = []
        lines = self._file_cache[filename]
        if 1 <= line_num <= len(lines):
            return lines[line_num - 1]
        return None

    def render(self, diag: Diagnostic) -> str:
        color = _COLORS[diag.severity]
        bar = f"  {self._c(_BLUE)}   |{self._c(_RESET)}"
        lines = [
            f"{self._c(color)}{diag.severity.value}[{diag.code}]{self._c(_RESET)}"
            f"{self._c(_BOLD)}: {diag.message}{self._c(_RESET)}"
        ]

        for label in diag.labels:
            span = label.span
            lines.append(f"  {self._c(_BLUE)}-->{self._c(_RESET)} {span}")
            source_line = self._get_source_line(span.file, span.start_line)
            if source_line is None:
                continue
            lines.append(bar)
            lines.append(
                f"  {self._c(_BLUE)}{span.start_line:>4} |{self._c(_RESET)} {source_line}"
            )
            if span.start_line == span.end_line:
                carets = "^" * max(1, span.end_col - span.start_col + 1)
                lines.append(
                    f"{bar} {' ' * (span.start_col - 1)}"
                    f"{self._c(color)}{carets}{self._c(_RESET)}"
                )
            if label.message:
                lines.append(f"{bar}   {self._c(color)}{label.message}{self._c(_RESET)}")

        for note in diag.notes:
            lines.append(f"  {self._c(_BLUE)}={self._c(_RESET)} note: {note}")

        return "\n".join(lines)


class SymtabError(Exception):
    """Base error carrying a diagnostic code and an optional location."""

    code = "E000"

    def __init__(
        self,
        message: str,
        *,
        span: Span | None = None,
        notes: Sequence[str] = (),
    ) -> None:
        self.message = message
        self.span = span
        self.notes = list(notes)
        super().__init__(message)

    def diagnostic(self) -> Diagnostic:
        labels = [DiagnosticLabel(self.span)] if self.span is not None else []
        return Diagnostic(Severity.ERROR, self.code, self.message, labels, list(self.notes))


class NameLookupError(SymtabError):
    """A function, operator or type was requested but never declared."""

    code = "E101"

    def __init__(self, kind: str, subject: str, message: str, span: Span) -> None:
        self.kind = kind
        self.subject = subject
        super().__init__(message, span=span)


class ModuleNotFound(SymtabError):
    code = "E201"

    def __init__(self, module: str, search_paths: Sequence[Path]) -> None:
        self.module = module
        self.search_paths = list(search_paths)
        super().__init__(
            f"module {module} not found in any of {len(self.search_paths)} search paths",
            notes=[f"searched {p}" for p in self.search_paths],
        )


class ProjectRootNotFound(SymtabError):
    code = "E202"

    def __init__(self, start_dir: Path, marker: str) -> None:
        self.start_dir = start_dir
        self.marker = marker
        super().__init__(
            f"no project root above {start_dir}",
            notes=[f"looked for a '{marker}' directory in every parent directory"],
        )


class DependencyDirectoryMissing(SymtabError):
    code = "E203"

    def __init__(self, path: Path, reason: str = "does not exist") -> None:
        self.path = path
        super().__init__(f"dependency directory {path} {reason}")


class LibraryRootMissing(SymtabError):
    code = "E204"

    def __init__(self, path: Path, reason: str = "does not exist") -> None:
        self.path = path
        super().__init__(f"runtime library root {path} {reason}")


class RuntimeDiscoveryError(SymtabError):
    code = "E205"


class ParseError(SymtabError):
    code = "E301"


class CatalogError(SymtabError):
    code = "E401"


class ConfigError(SymtabError):
    code = "E501"
