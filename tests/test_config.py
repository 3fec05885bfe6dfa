"""Tests for erlsym.toml discovery and loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from erlsym.config import (
    LayoutConfig,
    ResolverConfig,
    find_config,
    load_config,
    load_config_for,
)
from erlsym.errors import ConfigError


def _write(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "erlsym.toml"
    path.write_text(text)
    return path


class TestFindConfig:
    def test_in_start_dir(self, tmp_path):
        path = _write(tmp_path, "")
        assert find_config(tmp_path) == path.resolve()

    def test_walks_up(self, tmp_path):
        path = _write(tmp_path, "")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == path.resolve()

    def test_start_at_file(self, tmp_path):
        path = _write(tmp_path, "")
        erl = tmp_path / "m.erl"
        erl.write_text("")
        assert find_config(erl) == path.resolve()

    def test_not_found(self, tmp_path, monkeypatch):
        monkeypatch.setattr("erlsym.config.CONFIG_NAME", "no-such-erlsym-config.toml")
        with pytest.raises(FileNotFoundError):
            find_config(tmp_path)


class TestLoadConfig:
    def test_defaults(self, tmp_path):
        config = load_config(_write(tmp_path, ""))
        assert config == ResolverConfig()
        assert config.layout.build_marker == "_build"
        assert config.layout.dependency_subpath == "_build/default/lib"
        assert config.runtime.lib_dir is None
        assert config.parse.verbose is False

    def test_overrides(self, tmp_path):
        config = load_config(_write(tmp_path, (
            "[layout]\n"
            'build_marker = "out"\n'
            'dependency_subpath = "out/deps"\n'
            'source_ext = ".erl"\n'
            "[runtime]\n"
            'lib_dir = "/opt/otp/lib"\n'
            'catalog = "builtins.toml"\n'
            "[parse]\n"
            "verbose = true\n"
        )))
        assert config.layout == LayoutConfig(build_marker="out", dependency_subpath="out/deps")
        assert config.runtime.lib_dir == str(Path("/opt/otp/lib"))
        assert config.parse.verbose is True

    def test_relative_lib_dir_is_relative_to_config(self, tmp_path):
        config = load_config(_write(tmp_path, '[runtime]\nlib_dir = "otp/lib"\n'))
        assert config.runtime.lib_dir == str(tmp_path / "otp" / "lib")

    @pytest.mark.parametrize(
        "text, message",
        [
            ("layout = 3\n", r"\[layout\] must be a table"),
            ("[layout]\nbuild_marker = 1\n", "layout.build_marker must be a str"),
            ('[layout]\nsource_dir = ""\n', "must not be empty"),
            ('[parse]\nverbose = "yes"\n', "parse.verbose must be a bool"),
            ("[runtime]\nlib_dir = false\n", "runtime.lib_dir must be a str"),
            ('[layout]\nmarker = "_build"\n', "unknown key"),
            ("[layout\n", "not valid TOML"),
        ],
    )
    def test_invalid(self, tmp_path, text, message):
        with pytest.raises(ConfigError, match=message):
            load_config(_write(tmp_path, text))


class TestLoadConfigFor:
    def test_falls_back_to_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr("erlsym.config.CONFIG_NAME", "no-such-erlsym-config.toml")
        assert load_config_for(tmp_path) == ResolverConfig()

    def test_uses_nearest_file(self, tmp_path):
        _write(tmp_path, '[layout]\nbuild_marker = "_out"\n')
        assert load_config_for(tmp_path).layout.build_marker == "_out"
