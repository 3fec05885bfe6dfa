"""Shared pytest fixtures for the erlsym test suite."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest

from erlsym.source import Span


@dataclass
class ErlTree:
    """A runtime library root plus a rebar-style project on disk."""

    lib_dir: Path
    project: Path

    def app(self, name: str) -> Path:
        path = self.lib_dir / name
        path.mkdir(parents=True, exist_ok=True)
        return path

    def dep(self, name: str) -> Path:
        path = self.project / "_build" / "default" / "lib" / name
        path.mkdir(parents=True, exist_ok=True)
        return path

    def module(self, root: Path, name: str, source: str) -> Path:
        path = root / "src" / f"{name}.erl"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return path

    def header(self, root: Path, name: str, source: str) -> Path:
        path = root / "include" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return path


@pytest.fixture
def tree(tmp_path) -> ErlTree:
    lib_dir = tmp_path / "otp" / "lib"
    lib_dir.mkdir(parents=True)
    project = tmp_path / "proj"
    (project / "_build" / "default" / "lib").mkdir(parents=True)
    (project / "src").mkdir()
    return ErlTree(lib_dir, project)


@pytest.fixture
def loc() -> Span:
    return Span("use.erl", 3, 5, 3, 9)


