"""References to functions and types, and operator keys.

A reference is either local (``name/arity``, no enclosing module) or
qualified (``module:name/arity``). The two never compare equal, so a
declaration folded without a module tag never collides with one folded
under a module.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union


def _check_arity(arity: int) -> None:
    if isinstance(arity, bool) or not isinstance(arity, int) or arity < 0:
        raise ValueError(f"arity must be a non-negative integer, got {arity!r}")


@dataclass(frozen=True)
class LocalRef:
    name: str
    arity: int

    def __post_init__(self) -> None:
        _check_arity(self.arity)


@dataclass(frozen=True)
class QualifiedRef:
    module: str
    name: str
    arity: int

    def __post_init__(self) -> None:
        _check_arity(self.arity)


GlobalRef = Union[LocalRef, QualifiedRef]


@dataclass(frozen=True)
class OperatorKey:
    name: str
    arity: int

    def __post_init__(self) -> None:
        _check_arity(self.arity)


def make_ref(module: str | None, name: str, arity: int) -> GlobalRef:
    """Local reference when there is no module, qualified otherwise."""
    if module is None:
        return LocalRef(name, arity)
    return QualifiedRef(module, name, arity)


def format_ref(ref: GlobalRef) -> str:
    if isinstance(ref, QualifiedRef):
        return f"{ref.module}:{ref.name}/{ref.arity}"
    return f"{ref.name}/{ref.arity}"


_REF_RE = re.compile(r"^(?:(?P<module>[^:/]+):)?(?P<name>[^:/]+)/(?P<arity>\d+)$")


def parse_ref(text: str) -> GlobalRef:
    """Parse ``mod:name/arity`` or ``name/arity``. Raises ValueError."""
    m = _REF_RE.match(text.strip())
    if m is None:
        raise ValueError(f"invalid reference {text!r}, expected [module:]name/arity")
    return make_ref(m.group("module"), m.group("name"), int(m.group("arity")))
