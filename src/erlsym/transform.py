"""Turn scanned attributes into declaration forms.

``-spec`` attributes become FunctionSpec and ``-type``/``-opaque``
attributes become TypeDecl. Type bodies are kept as raw text; only names,
arities and type variables are extracted.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Sequence

from erlsym.ast_nodes import DeclarationForm, FunctionSpec, OtherForm, RawAttribute, TypeDecl
from erlsym.errors import ParseError
from erlsym.types import RawType, TypeScheme

logger = logging.getLogger(__name__)

_ATOM = r"[a-z][A-Za-z0-9_@]*|'(?:[^'\\]|\\.)*'"
_SPEC_HEAD_RE = re.compile(rf"^(?:(?P<module>{_ATOM})\s*:\s*)?(?P<name>{_ATOM})\s*(?=\()")
_TYPE_HEAD_RE = re.compile(rf"^(?P<name>{_ATOM})\s*(?=\()")
_VAR_RE = re.compile(r"(?<![A-Za-z0-9_@?#])[A-Z_][A-Za-z0-9_@]*")
_VARIABLE_RE = re.compile(r"^[A-Z_][A-Za-z0-9_@]*$")

_OPEN = {"(": ")", "[": "]", "{": "}"}
_CLOSE = set(_OPEN.values())


def _unquote(atom: str) -> str:
    if atom.startswith("'"):
        return re.sub(r"\\(.)", r"\1", atom[1:-1])
    return atom


def _blank_quoted(text: str) -> str:
    """Replace the inside of strings and quoted atoms with spaces."""
    return re.sub(
        r"'(?:[^'\\]|\\.)*'|\"(?:[^\"\\]|\\.)*\"",
        lambda m: m.group(0)[0] + " " * (len(m.group(0)) - 2) + m.group(0)[-1],
        text,
    )


def _split_group(text: str, open_at: int) -> tuple[list[str], int] | None:
    """Split the bracketed group opening at ``open_at`` on top-level commas.

    Returns the stripped items and the index just past the closing bracket,
    or None when the group is unbalanced.
    """
    blank = _blank_quoted(text)
    depth = 0
    items: list[str] = []
    start = open_at + 1
    i = open_at
    while i < len(blank):
        ch = blank[i]
        two = blank[i:i + 2]
        if two == "<<":
            depth += 1
            i += 2
            continue
        if two == ">>":
            depth -= 1
            i += 2
            continue
        if ch in _OPEN:
            depth += 1
        elif ch in _CLOSE:
            depth -= 1
            if depth == 0:
                items.append(text[start:i].strip())
                if items == [""]:
                    items = []
                return items, i + 1
        elif ch == "," and depth == 1:
            items.append(text[start:i].strip())
            start = i + 1
        i += 1
    return None


def _unwrap(text: str) -> str:
    """Strip the optional parentheses of the old ``-spec(...)`` form."""
    if text.startswith("("):
        group = _split_group(text, 0)
        if group is not None and group[1] == len(text):
            return text[1:-1].strip()
    return text


def type_variables(text: str) -> tuple[str, ...]:
    """Distinct type variables in order of first appearance, ``_`` excluded."""
    seen: dict[str, None] = {}
    for m in _VAR_RE.finditer(_blank_quoted(text)):
        if m.group(0) != "_":
            seen.setdefault(m.group(0))
    return tuple(seen)


def _spec(attr: RawAttribute) -> FunctionSpec:
    text = _unwrap(attr.text)
    head = _SPEC_HEAD_RE.match(text)
    if head is None:
        raise ParseError("malformed -spec attribute: expected a function name", span=attr.span)
    group = _split_group(text, head.end())
    if group is None:
        raise ParseError("malformed -spec attribute: unbalanced brackets", span=attr.span)
    args, _ = group
    body = text[head.end():].strip()
    scheme = TypeScheme(type_variables(body), RawType(body))
    return FunctionSpec(_unquote(head.group("name")), len(args), scheme, attr.span)


def _type(attr: RawAttribute) -> TypeDecl:
    text = _unwrap(attr.text)
    head = _TYPE_HEAD_RE.match(text)
    if head is None:
        raise ParseError(f"malformed -{attr.kind} attribute: expected a type name", span=attr.span)
    group = _split_group(text, head.end())
    if group is None:
        raise ParseError(f"malformed -{attr.kind} attribute: unbalanced brackets", span=attr.span)
    params, end = group
    rest = text[end:].lstrip()
    if not rest.startswith("::"):
        raise ParseError(f"malformed -{attr.kind} attribute: expected '::'", span=attr.span)
    bad = [p for p in params if not _VARIABLE_RE.match(p)]
    if bad:
        raise ParseError(
            f"type parameter {bad[0]!r} of {head.group('name')} is not a variable",
            span=attr.span,
        )
    scheme = TypeScheme(tuple(params), RawType(rest[2:].strip()))
    return TypeDecl(_unquote(head.group("name")), scheme, attr.span, opaque=attr.kind == "opaque")


def transform(source_path: Path, raw_forms: Sequence[RawAttribute]) -> list[DeclarationForm]:
    """Map scanned attributes of ``source_path`` to declaration forms, in order."""
    forms: list[DeclarationForm] = []
    for attr in raw_forms:
        if attr.kind == "spec":
            forms.append(_spec(attr))
        elif attr.kind in ("type", "opaque"):
            forms.append(_type(attr))
        else:
            forms.append(OtherForm(attr.kind, attr.span))
    logger.debug("%s: %d declaration form(s)", source_path, len(forms))
    return forms
