"""Shared test helpers for the erlsym test suite."""

from __future__ import annotations

from erlsym.ast_nodes import FunctionSpec, TypeDecl
from erlsym.types import RawType, TypeScheme


def scheme(body: str, *tyvars: str) -> TypeScheme:
    return TypeScheme(tuple(tyvars), RawType(body))


def spec(name: str, arity: int, body: str = "any()", *tyvars: str) -> FunctionSpec:
    return FunctionSpec(name, arity, scheme(body, *tyvars))


def typedecl(name: str, body: str = "term()", *tyvars: str) -> TypeDecl:
    return TypeDecl(name, scheme(body, *tyvars))
