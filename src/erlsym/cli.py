"""erlsym command line interface."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn

import click

from erlsym import __version__
from erlsym.catalog import load_catalog
from erlsym.config import load_config_for
from erlsym.errors import DiagnosticRenderer, SymtabError
from erlsym.refs import parse_ref
from erlsym.resolver import DependencyResolver
from erlsym.search_paths import locate_module
from erlsym.source import Span
from erlsym.symbols import std_symtab

_CLI_SPAN = Span("<command line>", 0, 0, 0, 0)


def _fail(err: SymtabError) -> NoReturn:
    renderer = DiagnosticRenderer(color=False)
    click.echo(renderer.render(err.diagnostic()), err=True)
    raise SystemExit(1)


def _resolver(start: Path, lib_dir: str | None) -> DependencyResolver:
    config = load_config_for(start)
    return DependencyResolver.from_config(config, Path(lib_dir) if lib_dir else None)


_lib_dir_option = click.option(
    "--lib-dir",
    type=click.Path(file_okay=False),
    default=None,
    help="Runtime library root (defaults to config, then to code:lib_dir()).",
)


@click.group()
@click.version_option(__version__, prog_name="erlsym")
@click.option("-v", "--verbose", count=True, help="Log progress (-v) or details (-vv).")
def main(verbose: int) -> None:
    """Resolve function, operator and type signatures across Erlang modules."""
    level = logging.WARNING
    if verbose == 1:
        level = logging.INFO
    elif verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False))
@_lib_dir_option
def paths(path: str, lib_dir: str | None) -> None:
    """Print the module search paths in priority order."""
    try:
        for p in _resolver(Path(path), lib_dir).search_paths(Path(path)):
            click.echo(str(p))
    except SymtabError as e:
        _fail(e)


@main.command()
@click.argument("module")
@click.option(
    "--from", "start", default=".", type=click.Path(exists=True, file_okay=False),
    help="Directory to start the project root search from.",
)
@_lib_dir_option
def locate(module: str, start: str, lib_dir: str | None) -> None:
    """Print the source file and include directory of MODULE."""
    try:
        resolver = _resolver(Path(start), lib_dir)
        location = locate_module(resolver.search_paths(Path(start)), module, resolver.layout)
    except SymtabError as e:
        _fail(e)
    click.echo(f"source:  {location.source_path}")
    click.echo(f"include: {location.include_path}")


@main.command()
@click.argument("ref")
@click.option("-m", "--module", "modules", multiple=True, help="Module to load, in order.")
@click.option(
    "--kind", type=click.Choice(["function", "type", "operator"]), default="function",
    show_default=True,
)
@click.option(
    "--from", "start", default=".", type=click.Path(exists=True, file_okay=False),
    help="Directory to start the project root search from.",
)
@_lib_dir_option
def lookup(ref: str, modules: tuple[str, ...], kind: str, start: str, lib_dir: str | None) -> None:
    """Print the declared type of REF.

    REF is [module:]name/arity for functions and types, op/arity for operators.
    """
    try:
        if kind == "operator":
            op, arity = _parse_operator(ref)
        else:
            parsed = parse_ref(ref)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="REF") from None

    try:
        config = load_config_for(Path(start))
        tab = std_symtab(load_catalog(config.runtime.catalog))
        if modules:
            resolver = DependencyResolver.from_config(config, Path(lib_dir) if lib_dir else None)
            tab = resolver.resolve(tab, Path(start), list(modules))
        if kind == "operator":
            scheme = tab.lookup_op(op, arity, _CLI_SPAN)
        elif kind == "type":
            scheme = tab.lookup_ty(parsed, _CLI_SPAN)
        else:
            scheme = tab.lookup_fun(parsed, _CLI_SPAN)
    except SymtabError as e:
        _fail(e)
    click.echo(str(scheme))


def _parse_operator(text: str) -> tuple[str, int]:
    op, _, arity = text.rpartition("/")
    if not op or not arity.isdigit():
        raise ValueError(f"invalid operator {text!r}, expected op/arity")
    return op, int(arity)


@main.command(name="builtins")
@click.option("--operators", is_flag=True, help="List operators instead of functions.")
def builtins_cmd(operators: bool) -> None:
    """List the builtin signatures of the bundled catalog."""
    try:
        catalog = load_catalog(load_config_for().runtime.catalog)
    except SymtabError as e:
        _fail(e)
    entries = catalog.builtin_operators() if operators else catalog.builtin_functions()
    prefix = "" if operators else f"{catalog.module}:"
    for name, arity, scheme in entries:
        click.echo(f"{prefix}{name}/{arity} :: {scheme}")
