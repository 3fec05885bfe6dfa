"""Builtin function and operator signatures from bundled TOML catalogs."""

from __future__ import annotations

import importlib.resources
import tomllib
from dataclasses import dataclass
from typing import Any

from erlsym.errors import CatalogError
from erlsym.types import RawType, TypeScheme


@dataclass(frozen=True)
class BuiltinSignature:
    name: str
    arity: int
    scheme: TypeScheme


@dataclass(frozen=True)
class TypeCatalog:
    """The builtins of one runtime module, in declaration order."""

    module: str
    functions: tuple[BuiltinSignature, ...] = ()
    operators: tuple[BuiltinSignature, ...] = ()

    def builtin_functions(self) -> list[tuple[str, int, TypeScheme]]:
        return [(s.name, s.arity, s.scheme) for s in self.functions]

    def builtin_operators(self) -> list[tuple[str, int, TypeScheme]]:
        return [(s.name, s.arity, s.scheme) for s in self.operators]


def _signature(entry: Any, section: str, index: int) -> BuiltinSignature:
    where = f"{section}[{index}]"
    if not isinstance(entry, dict):
        raise CatalogError(f"{where}: expected a table")
    try:
        name, arity, body = entry["name"], entry["arity"], entry["type"]
    except KeyError as e:
        raise CatalogError(f"{where}: missing key {e.args[0]!r}") from None
    tyvars = entry.get("tyvars", [])
    if not isinstance(name, str) or not name:
        raise CatalogError(f"{where}: name must be a non-empty string")
    if isinstance(arity, bool) or not isinstance(arity, int) or arity < 0:
        raise CatalogError(f"{where}: arity of {name} must be a non-negative integer")
    if not isinstance(body, str):
        raise CatalogError(f"{where}: type of {name} must be a string")
    if not isinstance(tyvars, list) or not all(isinstance(v, str) for v in tyvars):
        raise CatalogError(f"{where}: tyvars of {name} must be a list of strings")
    return BuiltinSignature(name, arity, TypeScheme(tuple(tyvars), RawType(body)))


def catalog_from_mapping(data: dict[str, Any]) -> TypeCatalog:
    """Validate a parsed catalog document and build a TypeCatalog."""
    module = data.get("module", "erlang")
    if not isinstance(module, str) or not module:
        raise CatalogError("module must be a non-empty string")
    funs = data.get("function", [])
    ops = data.get("operator", [])
    if not isinstance(funs, list) or not isinstance(ops, list):
        raise CatalogError("'function' and 'operator' must be arrays of tables")
    return TypeCatalog(
        module=module,
        functions=tuple(_signature(e, "function", i) for i, e in enumerate(funs)),
        operators=tuple(_signature(e, "operator", i) for i, e in enumerate(ops)),
    )


def load_catalog(resource: str = "builtins.toml") -> TypeCatalog:
    """Load a catalog bundled in the erlsym.stdlib package."""
    pkg = importlib.resources.files("erlsym.stdlib")
    try:
        raw = pkg.joinpath(resource).read_bytes()
    except (FileNotFoundError, IsADirectoryError):
        raise CatalogError(f"no bundled catalog named {resource!r}") from None
    try:
        data = tomllib.loads(raw.decode("utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise CatalogError(f"catalog {resource!r} is not valid TOML: {e}") from None
    return catalog_from_mapping(data)
