"""Scan Erlang source files for module attributes.

Only the attribute structure is recognised: each top-level form that
starts with ``-name`` becomes a RawAttribute whose text is everything up
to the terminating dot. Function definitions are skipped. Include files
are expanded in place. Preprocessor conditionals are not evaluated, so
attributes from every branch are kept.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator

from erlsym.ast_nodes import RawAttribute
from erlsym.errors import ParseError
from erlsym.source import SourceFile, Span

logger = logging.getLogger(__name__)

_ATTR_RE = re.compile(r"-\s*([a-z][A-Za-z0-9_@]*)")
_INCLUDE_RE = re.compile(r'^\s*\(\s*"([^"]+)"\s*\)\s*$')


@dataclass(frozen=True)
class ParseOptions:
    verbose: bool = False
    include_dirs: tuple[Path, ...] = ()
    lib_roots: tuple[Path, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "include_dirs", tuple(Path(d) for d in self.include_dirs))
        object.__setattr__(self, "lib_roots", tuple(Path(d) for d in self.lib_roots))


def _skip_quoted(text: str, i: int) -> int:
    """Index just past the string or quoted atom opening at ``i``, or -1."""
    quote = text[i]
    i += 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == "\\":
            i += 2
        elif ch == quote:
            return i + 1
        else:
            i += 1
    return -1


def _skip_char_literal(text: str, i: int) -> int:
    """Index just past a ``$c`` or ``$\\c`` character literal at ``i``."""
    if i + 1 < len(text) and text[i + 1] == "\\":
        return i + 3
    return i + 2


def _strip_comments(src: SourceFile) -> str:
    """Blank out ``%`` comments, keeping every offset in place."""
    text = src.content
    out = list(text)
    i, n = 0, len(text)
    while i < n:
        ch = text[i]
        if ch in "\"'":
            end = _skip_quoted(text, i)
            if end < 0:
                raise ParseError("unterminated string or quoted atom", span=src.span(i, i + 1))
            i = end
        elif ch == "$":
            i = _skip_char_literal(text, i)
        elif ch == "%":
            end = text.find("\n", i)
            end = n if end < 0 else end
            out[i:end] = " " * (end - i)
            i = end
        else:
            i += 1
    return "".join(out)


def _split_forms(src: SourceFile, clean: str) -> Iterator[tuple[int, int]]:
    """Yield (start, end) offsets of each form, excluding the final dot."""
    start = i = 0
    last_dot = -2
    n = len(clean)
    while i < n:
        ch = clean[i]
        if ch in "\"'":
            i = _skip_quoted(clean, i)
            if i < 0:
                break
            continue
        if ch == "$":
            i = _skip_char_literal(clean, i)
            continue
        if ch == ".":
            # the last dot of `..` or `...` is not a terminator
            if last_dot != i - 1 and (i + 1 == n or clean[i + 1].isspace()):
                yield start, i
                start = i + 1
            last_dot = i
        i += 1
    if clean[start:].strip():
        first = start + len(clean[start:]) - len(clean[start:].lstrip())
        raise ParseError("form is not terminated by '.'", span=src.span(first, n))


def _include_candidates(
    name: str, kind: str, including: Path, options: ParseOptions
) -> list[Path]:
    """Paths tried for an include, in order.

    ``include_lib("app/include/f.hrl")`` also resolves ``app`` against the
    library roots, matching a directory named ``app`` or ``app-<version>``.
    """
    candidates = [including.parent / name, *(d / name for d in options.include_dirs)]
    if kind == "include_lib":
        app, _, rest = name.partition("/")
        if rest:
            candidates.extend(
                root / rest
                for root in options.lib_roots
                if root.name == app or root.name.startswith(f"{app}-")
            )
        base = Path(name).name
        candidates.extend(d / base for d in options.include_dirs)
    return candidates


def _byte_span(path: Path, data: bytes, offset: int) -> Span:
    line = data.count(b"\n", 0, offset) + 1
    col = offset - (data.rfind(b"\n", 0, offset) + 1) + 1
    return Span(str(path), line, col, line, col)


def _scan(path: Path, options: ParseOptions, seen: set[Path]) -> list[RawAttribute]:
    try:
        src = SourceFile(path)
    except OSError as e:
        raise ParseError(f"cannot read {path}: {e.strerror or e}") from None
    except UnicodeDecodeError as e:
        raise ParseError(
            f"{path} is not valid {e.encoding}", span=_byte_span(path, e.object, e.start)
        ) from None
    seen.add(path.resolve())

    clean = _strip_comments(src)
    attrs: list[RawAttribute] = []
    for start, end in _split_forms(src, clean):
        form = clean[start:end]
        stripped = form.lstrip()
        offset = start + len(form) - len(stripped)
        m = _ATTR_RE.match(stripped)
        if m is None:
            continue
        kind = m.group(1)
        text = stripped[m.end():]
        span = src.span(offset, end)

        if kind in ("include", "include_lib"):
            inc = _INCLUDE_RE.match(text)
            if inc is None:
                raise ParseError(f"malformed -{kind} attribute", span=span)
            candidates = _include_candidates(inc.group(1), kind, path, options)
            target = next((c for c in candidates if c.is_file()), None)
            if target is None:
                raise ParseError(
                    f"include file {inc.group(1)!r} not found",
                    span=span,
                    notes=tuple(f"searched {c}" for c in candidates),
                )
            if target.resolve() not in seen:
                attrs.extend(_scan(target, options, seen))
            continue

        attrs.append(RawAttribute(kind, text.strip(), span))

    if options.verbose:
        logger.info("scanned %s: %d attribute(s)", path, len(attrs))
    return attrs


def parse_file(path: Path, options: ParseOptions | None = None) -> list[RawAttribute]:
    """Return the module attributes of an Erlang source file, in order.

    Raises ParseError if the file cannot be read or decoded, an include
    cannot be found, or the text is not a sequence of dot-terminated forms.
    """
    return _scan(Path(path), options or ParseOptions(), set())
