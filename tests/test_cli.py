"""Tests for the erlsym CLI."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from erlsym import __version__
from erlsym.catalog import load_catalog
from erlsym.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def project(tree):
    tree.module(tree.app("stdlib"), "lists", "-module(lists).\n-spec reverse([T]) -> [T].\n")
    tree.module(
        tree.project, "shapes",
        "-module(shapes).\n-type shape() :: circle | square.\n-spec area(shape()) -> float().\n",
    )
    return tree


class TestCLI:
    def test_help(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("paths", "locate", "lookup", "builtins"):
            assert command in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestBuiltins:
    def test_functions(self, runner):
        result = runner.invoke(main, ["builtins"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert len(lines) == len(load_catalog().functions)
        assert "erlang:hd/1 :: forall T. fun(([T, ...]) -> T)" in lines

    def test_operators(self, runner):
        result = runner.invoke(main, ["builtins", "--operators"])
        assert result.exit_code == 0
        assert "+/2 :: fun((number(), number()) -> number())" in result.output.splitlines()


class TestPaths:
    def test_priority_order(self, runner, project):
        result = runner.invoke(main, ["paths", str(project.project), "--lib-dir", str(project.lib_dir)])
        assert result.exit_code == 0, result.output
        assert result.output.splitlines() == [
            str(project.lib_dir / "stdlib"),
            str(project.project.resolve()),
        ]

    def test_no_project_root(self, runner, tmp_path):
        (tmp_path / "lib").mkdir()
        (tmp_path / "erlsym.toml").write_text('[layout]\nbuild_marker = "_no_such_marker_dir"\n')
        result = runner.invoke(main, ["paths", str(tmp_path), "--lib-dir", str(tmp_path / "lib")])
        assert result.exit_code == 1
        assert "error[E202]" in result.output


class TestLocate:
    def test_found(self, runner, project):
        result = runner.invoke(main, [
            "locate", "shapes", "--from", str(project.project), "--lib-dir", str(project.lib_dir),
        ])
        assert result.exit_code == 0, result.output
        root = project.project.resolve()
        assert f"source:  {root / 'src' / 'shapes.erl'}" in result.output
        assert f"include: {root / 'include'}" in result.output

    def test_not_found(self, runner, project):
        result = runner.invoke(main, [
            "locate", "ghost", "--from", str(project.project), "--lib-dir", str(project.lib_dir),
        ])
        assert result.exit_code == 1
        assert "error[E201]: module ghost not found in any of 2 search paths" in result.output


class TestLookup:
    def _invoke(self, runner, project, *args):
        return runner.invoke(main, [
            "lookup", *args, "--from", str(project.project), "--lib-dir", str(project.lib_dir),
        ])

    def test_builtin_without_modules(self, runner, project):
        result = self._invoke(runner, project, "erlang:self/0")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "fun(() -> pid())"

    def test_module_function(self, runner, project):
        result = self._invoke(runner, project, "shapes:area/1", "-m", "shapes")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "(shape()) -> float()"

    def test_library_function_with_type_variable(self, runner, project):
        result = self._invoke(runner, project, "lists:reverse/1", "-m", "lists", "-m", "shapes")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "forall T. ([T]) -> [T]"

    def test_type(self, runner, project):
        result = self._invoke(runner, project, "shapes:shape/0", "-m", "shapes", "--kind", "type")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "circle | square"

    def test_operator(self, runner, project):
        result = self._invoke(runner, project, "=:=/2", "--kind", "operator")
        assert result.exit_code == 0, result.output
        assert result.output.strip() == "fun((term(), term()) -> boolean())"

    def test_undefined(self, runner, project):
        result = self._invoke(runner, project, "shapes:perimeter/1", "-m", "shapes")
        assert result.exit_code == 1
        assert "error[E101]: function shapes:perimeter/1 undefined" in result.output

    def test_undefined_operator(self, runner, project):
        result = self._invoke(runner, project, "+/3", "--kind", "operator")
        assert result.exit_code == 1
        assert "operator '+' undefined for 3 arguments" in result.output

    def test_bad_reference(self, runner, project):
        result = self._invoke(runner, project, "not-a-ref")
        assert result.exit_code == 2
        assert "invalid reference" in result.output
