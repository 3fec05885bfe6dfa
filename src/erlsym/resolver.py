"""Fold the declarations of dependency modules into a symbol table."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from erlsym.ast_nodes import DeclarationForm, RawAttribute
from erlsym.config import LayoutConfig, ResolverConfig
from erlsym.runtime import find_otp_lib_dir
from erlsym.scanner import ParseOptions, parse_file
from erlsym.search_paths import build_search_paths, locate_module
from erlsym.symbols import SymbolTable, extend_symtab
from erlsym.transform import transform

logger = logging.getLogger(__name__)

ParseFn = Callable[[Path, ParseOptions], list[RawAttribute]]
TransformFn = Callable[[Path, Sequence[RawAttribute]], list[DeclarationForm]]


@dataclass
class DependencyResolver:
    """Locates, parses and folds modules in the order they are given.

    Order matters: a module processed later overrides declarations of an
    earlier one under the same reference.
    """

    lib_dir: Path
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    parse: ParseFn = parse_file
    transform: TransformFn = transform
    verbose: bool = False

    @classmethod
    def from_config(cls, config: ResolverConfig, lib_dir: Path | None = None) -> DependencyResolver:
        """Build a resolver, asking ``erl`` for the library root if none is configured."""
        if lib_dir is None:
            configured = config.runtime.lib_dir
            lib_dir = Path(configured) if configured else find_otp_lib_dir()
        return cls(lib_dir=lib_dir, layout=config.layout, verbose=config.parse.verbose)

    def search_paths(self, source_dir: Path) -> list[Path]:
        return build_search_paths(source_dir, self.lib_dir, self.layout)

    def resolve(
        self, tab: SymbolTable, source_dir: Path, modules: Sequence[str]
    ) -> SymbolTable:
        """Extend ``tab`` with the declarations of ``modules``, left to right."""
        if not modules:
            return tab
        search_paths = self.search_paths(source_dir)
        for module in modules:
            location = locate_module(search_paths, module, self.layout)
            logger.info("path to includes %s", location.include_path)
            options = ParseOptions(
                verbose=self.verbose,
                include_dirs=(location.include_path,),
                lib_roots=tuple(search_paths),
            )
            raw_forms = self.parse(location.source_path, options)
            forms = self.transform(location.source_path, raw_forms)
            tab = extend_symtab(forms, module, tab)
        return tab


def extend_symtab_with_module_list(
    tab: SymbolTable,
    source_dir: Path,
    modules: Sequence[str],
    config: ResolverConfig | None = None,
) -> SymbolTable:
    """Resolve ``modules`` from ``source_dir`` with the given (or default) config."""
    if not modules:
        return tab
    resolver = DependencyResolver.from_config(config or ResolverConfig())
    return resolver.resolve(tab, source_dir, modules)
