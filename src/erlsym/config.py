"""TOML config loading for erlsym.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from erlsym.errors import ConfigError

CONFIG_NAME = "erlsym.toml"


@dataclass
class LayoutConfig:
    """Where sources live inside a project and its dependencies."""

    build_marker: str = "_build"
    dependency_subpath: str = "_build/default/lib"
    source_dir: str = "src"
    include_dir: str = "include"
    source_ext: str = ".erl"


@dataclass
class RuntimeConfig:
    lib_dir: str | None = None
    catalog: str = "builtins.toml"


@dataclass
class ParseConfig:
    verbose: bool = False


@dataclass
class ResolverConfig:
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find erlsym.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    for candidate in (path, *path.parents):
        config = candidate / CONFIG_NAME
        if config.is_file():
            return config
    raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")


def _section(data: dict[str, Any], name: str, cls: type) -> Any:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{name}] must be a table")
    section = cls()
    for f in fields(cls):
        if f.name not in table:
            continue
        value = table[f.name]
        expected = type(getattr(section, f.name))
        if f.name == "lib_dir":
            expected = str
        if not isinstance(value, expected):
            raise ConfigError(f"{name}.{f.name} must be a {expected.__name__}")
        if expected is str and not value:
            raise ConfigError(f"{name}.{f.name} must not be empty")
        setattr(section, f.name, value)
    unknown = sorted(set(table) - {f.name for f in fields(cls)})
    if unknown:
        raise ConfigError(f"unknown key(s) in [{name}]: {', '.join(unknown)}")
    return section


def load_config(path: Path) -> ResolverConfig:
    """Parse an erlsym.toml file into a ResolverConfig."""
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path} is not valid TOML: {e}") from None

    config = ResolverConfig(
        layout=_section(data, "layout", LayoutConfig),
        runtime=_section(data, "runtime", RuntimeConfig),
        parse=_section(data, "parse", ParseConfig),
    )
    if config.runtime.lib_dir is not None:
        lib_dir = Path(config.runtime.lib_dir).expanduser()
        if not lib_dir.is_absolute():
            lib_dir = path.parent / lib_dir
        config.runtime.lib_dir = str(lib_dir)
    return config


def load_config_for(start_path: Path | None = None) -> ResolverConfig:
    """Load the nearest erlsym.toml, or defaults when there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return ResolverConfig()
