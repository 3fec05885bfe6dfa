"""Module-level forms relevant to symbol resolution."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from erlsym.source import NO_SPAN, Span
from erlsym.types import TypeScheme

# ── Raw attributes (scanner output) ──────────────────────────────


@dataclass(frozen=True)
class RawAttribute:
    """One ``-kind text.`` attribute, without the leading dash and final dot."""

    kind: str
    text: str
    span: Span


# ── Declaration forms (transformer output) ───────────────────────


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    arity: int
    scheme: TypeScheme
    span: Span = NO_SPAN


@dataclass(frozen=True)
class TypeDecl:
    name: str
    scheme: TypeScheme
    span: Span = NO_SPAN
    opaque: bool = False

    @property
    def arity(self) -> int:
        return self.scheme.arity


@dataclass(frozen=True)
class OtherForm:
    kind: str
    span: Span = NO_SPAN


DeclarationForm = Union[FunctionSpec, TypeDecl, OtherForm]
