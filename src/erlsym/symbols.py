"""Symbol table for functions, operators and types across modules.

Tables are persistent: every extension returns a new table that shares
structure with the old one, so a table handed to one consumer stays valid
however other copies are extended.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Iterable, assert_never

import immutables

from erlsym.ast_nodes import DeclarationForm, FunctionSpec, OtherForm, TypeDecl
from erlsym.catalog import TypeCatalog
from erlsym.errors import NameLookupError
from erlsym.refs import GlobalRef, OperatorKey, QualifiedRef, format_ref, make_ref
from erlsym.source import Span
from erlsym.types import TypeScheme

logger = logging.getLogger(__name__)


class SymbolTable:
    """Three independent namespaces: functions, operators and types."""

    __slots__ = ("_funs", "_ops", "_types")

    def __init__(
        self,
        funs: immutables.Map[GlobalRef, TypeScheme] | None = None,
        ops: immutables.Map[OperatorKey, TypeScheme] | None = None,
        types: immutables.Map[GlobalRef, TypeScheme] | None = None,
    ) -> None:
        self._funs = funs if funs is not None else immutables.Map()
        self._ops = ops if ops is not None else immutables.Map()
        self._types = types if types is not None else immutables.Map()

    @property
    def functions(self) -> Mapping[GlobalRef, TypeScheme]:
        return self._funs

    @property
    def operators(self) -> Mapping[OperatorKey, TypeScheme]:
        return self._ops

    @property
    def types(self) -> Mapping[GlobalRef, TypeScheme]:
        return self._types

    # ── Lookup ───────────────────────────────────────────────────

    def find_fun(self, ref: GlobalRef) -> TypeScheme | None:
        return self._funs.get(ref)

    def lookup_fun(self, ref: GlobalRef, loc: Span) -> TypeScheme:
        """Get the declared type of a function. ``loc`` is the use-site."""
        scheme = self.find_fun(ref)
        if scheme is None:
            subject = format_ref(ref)
            raise NameLookupError("function", subject, f"function {subject} undefined", loc)
        return scheme

    def find_op(self, name: str, arity: int) -> TypeScheme | None:
        return self._ops.get(OperatorKey(name, arity))

    def lookup_op(self, name: str, arity: int, loc: Span) -> TypeScheme:
        scheme = self.find_op(name, arity)
        if scheme is None:
            raise NameLookupError(
                "operator",
                f"{name}/{arity}",
                f"operator '{name}' undefined for {arity} arguments",
                loc,
            )
        return scheme

    def find_ty(self, ref: GlobalRef) -> TypeScheme | None:
        return self._types.get(ref)

    def lookup_ty(self, ref: GlobalRef, loc: Span) -> TypeScheme:
        """Get the declared type scheme of a named type. ``loc`` is the use-site."""
        scheme = self.find_ty(ref)
        if scheme is None:
            subject = format_ref(ref)
            raise NameLookupError("type", subject, f"type {subject} undefined", loc)
        return scheme

    # ── Extension ────────────────────────────────────────────────

    def with_fun(self, ref: GlobalRef, scheme: TypeScheme) -> SymbolTable:
        return SymbolTable(self._funs.set(ref, scheme), self._ops, self._types)

    def with_op(self, name: str, arity: int, scheme: TypeScheme) -> SymbolTable:
        return SymbolTable(self._funs, self._ops.set(OperatorKey(name, arity), scheme), self._types)

    def with_ty(self, ref: GlobalRef, scheme: TypeScheme) -> SymbolTable:
        return SymbolTable(self._funs, self._ops, self._types.set(ref, scheme))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, SymbolTable):
            return NotImplemented
        return (
            self._funs == other._funs
            and self._ops == other._ops
            and self._types == other._types
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return (
            f"SymbolTable(functions={len(self._funs)}, "
            f"operators={len(self._ops)}, types={len(self._types)})"
        )


def empty() -> SymbolTable:
    return SymbolTable()


def std_symtab(catalog: TypeCatalog) -> SymbolTable:
    """Seed a table with the catalog's builtin functions and operators.

    Builtin functions are qualified with the catalog's runtime module;
    operators are keyed by name and arity only. No types are declared.
    """
    funs = immutables.Map().mutate()
    for name, arity, scheme in catalog.builtin_functions():
        funs[QualifiedRef(catalog.module, name, arity)] = scheme
    ops = immutables.Map().mutate()
    for name, arity, scheme in catalog.builtin_operators():
        ops[OperatorKey(name, arity)] = scheme
    return SymbolTable(funs.finish(), ops.finish(), immutables.Map())


def extend_symtab(
    forms: Iterable[DeclarationForm], module: str | None, tab: SymbolTable
) -> SymbolTable:
    """Fold the declarations of one module into ``tab``.

    Without a module the declarations are registered under local
    references. A later declaration replaces an earlier one with the same
    reference.
    """
    funs = tab._funs.mutate()
    types = tab._types.mutate()
    n_funs = n_types = 0
    for form in forms:
        match form:
            case FunctionSpec(name=name, arity=arity, scheme=scheme):
                ref = make_ref(module, name, arity)
                if ref in funs:
                    logger.debug(
                        "%s overrides function %s", module or "<local>", format_ref(ref)
                    )
                funs[ref] = scheme
                n_funs += 1
            case TypeDecl(name=name, scheme=scheme):
                ref = make_ref(module, name, scheme.arity)
                if ref in types:
                    logger.debug(
                        "%s overrides type %s", module or "<local>", format_ref(ref)
                    )
                types[ref] = scheme
                n_types += 1
            case OtherForm():
                pass
            case _:
                assert_never(form)
    logger.debug(
        "folded %d function(s) and %d type(s) from %s",
        n_funs, n_types, module or "<local>",
    )
    return SymbolTable(funs.finish(), tab._ops, types.finish())
