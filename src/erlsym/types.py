"""Type schemes as seen by the symbol table.

The structure of a type body belongs to the type checker. The table only
needs the number of bound type variables, which gives the arity of a type
declaration.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable


@dataclass(frozen=True)
class RawType:
    """An unparsed type expression, kept verbatim from the source."""

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class TypeScheme:
    tyvars: tuple[str, ...]
    body: Hashable

    @property
    def arity(self) -> int:
        return len(self.tyvars)

    def __str__(self) -> str:
        if not self.tyvars:
            return str(self.body)
        return f"forall {', '.join(self.tyvars)}. {self.body}"
