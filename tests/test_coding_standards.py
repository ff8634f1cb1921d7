"""
Tests that enforce coding standards.

These tests verify that the codebase follows our import conventions and
that the merge engine stays free of I/O.
"""

import ast as _ast
import pathlib as _pathlib

import pytest as _pytest

# Directories to check
SRC_DIR = _pathlib.Path(__file__).parent.parent / "src" / "tcsetup"
ENGINE_DIR = SRC_DIR / "yaml_merge"
TESTS_DIR = _pathlib.Path(__file__).parent.parent / "tests"

# Names the engine must not call: it takes text and returns values
_ENGINE_FORBIDDEN_CALLS = {"open", "print", "input"}


def _get_python_files(directory: _pathlib.Path) -> list[_pathlib.Path]:
    """Get all Python files in a directory, recursively."""
    return sorted(directory.rglob("*.py"))


def _extract_from_imports(content: str) -> list[tuple[int, str]]:
    """
    Extract module-level 'from X import Y' statements.

    Returns list of (line_number, statement) tuples.
    Excludes:
    - 'from __future__ import' (allowed)
    - Imports nested in `if TYPE_CHECKING:` blocks (allowed)
    """
    tree = _ast.parse(content)
    found: list[tuple[int, str]] = []

    def visit(nodes: list[_ast.stmt]) -> None:
        for node in nodes:
            if isinstance(node, _ast.ImportFrom):
                if node.module == "__future__":
                    continue
                names = ", ".join(alias.name for alias in node.names)
                found.append((node.lineno, f"from {'.' * node.level}{node.module or ''} import {names}"))
            elif isinstance(node, _ast.If) and "TYPE_CHECKING" in _ast.unparse(node.test):
                continue
            elif isinstance(node, (_ast.If, _ast.Try, _ast.With, _ast.FunctionDef, _ast.ClassDef)):
                visit(node.body)

    visit(tree.body)
    return found


def _unaliased_external_imports(content: str) -> list[tuple[int, str]]:
    """Find `import X` of non-tcsetup modules without an `as _x` alias."""
    tree = _ast.parse(content)
    found: list[tuple[int, str]] = []
    for node in tree.body:
        if not isinstance(node, _ast.Import):
            continue
        for alias in node.names:
            if alias.name == "tcsetup" or alias.name.startswith("tcsetup."):
                continue
            if alias.asname is None or not alias.asname.startswith("_"):
                found.append((node.lineno, f"import {alias.name}" + (f" as {alias.asname}" if alias.asname else "")))
    return found


def _collect(directory: _pathlib.Path, check, *, skip_init: bool = True) -> list[str]:  # type: ignore[no-untyped-def]
    violations: list[str] = []
    for path in _get_python_files(directory):
        if skip_init and path.name == "__init__.py":
            continue
        if path.name == "test_coding_standards.py":
            continue
        for line_num, line in check(path.read_text(encoding="utf-8")):
            violations.append(f"{path}:{line_num}: {line}")
    return violations


class TestImportStyle:
    """Tests for import style compliance."""

    def test_src_no_from_imports(self) -> None:
        """Source files should not use 'from X import Y' pattern."""
        violations = _collect(SRC_DIR, _extract_from_imports)
        if violations:
            _pytest.fail(
                "Found forbidden 'from X import Y' imports:\n"
                + "\n".join(f"  {v}" for v in violations)
                + "\n\nUse 'import X as _x' (external) or 'import X as x' (internal) instead."
            )

    def test_tests_no_from_imports(self) -> None:
        """Test files should not use 'from X import Y' pattern."""
        violations = _collect(TESTS_DIR, _extract_from_imports)
        if violations:
            _pytest.fail("Found forbidden 'from X import Y' imports:\n" + "\n".join(f"  {v}" for v in violations))

    def test_src_external_imports_are_private(self) -> None:
        """External modules are imported as private aliases (import json as _json)."""
        violations = _collect(SRC_DIR, _unaliased_external_imports, skip_init=False)
        if violations:
            _pytest.fail("Found external imports without a '_' alias:\n" + "\n".join(f"  {v}" for v in violations))


class TestEngineIsPure:
    """The merge engine works on text and values only."""

    def test_engine_has_no_io_calls(self) -> None:
        """yaml_merge modules never call open(), print() or input()."""
        violations: list[str] = []
        for path in _get_python_files(ENGINE_DIR):
            tree = _ast.parse(path.read_text(encoding="utf-8"))
            for node in _ast.walk(tree):
                if (
                    isinstance(node, _ast.Call)
                    and isinstance(node.func, _ast.Name)
                    and node.func.id in _ENGINE_FORBIDDEN_CALLS
                ):
                    violations.append(f"{path}:{node.lineno}: {node.func.id}()")
        assert violations == []

    def test_engine_does_not_import_outer_layers(self) -> None:
        """yaml_merge must not depend on config, cli or report."""
        outer = ("tcsetup.config", "tcsetup.cli", "tcsetup.report")
        violations: list[str] = []
        for path in _get_python_files(ENGINE_DIR):
            tree = _ast.parse(path.read_text(encoding="utf-8"))
            for node in _ast.walk(tree):
                names: list[str] = []
                if isinstance(node, _ast.Import):
                    names = [alias.name for alias in node.names]
                elif isinstance(node, _ast.ImportFrom) and node.module:
                    names = [node.module]
                violations.extend(f"{path}: {name}" for name in names if name.startswith(outer))
        assert violations == []


class TestImportExtraction:
    """Tests for the import extraction logic itself."""

    def test_detects_from_import(self) -> None:
        """Should detect basic from imports."""
        imports = _extract_from_imports("from pathlib import Path")
        assert imports == [(1, "from pathlib import Path")]

    def test_allows_future_imports(self) -> None:
        """Should allow __future__ imports."""
        assert _extract_from_imports("from __future__ import annotations") == []

    def test_ignores_type_checking_block(self) -> None:
        """Should ignore imports inside TYPE_CHECKING blocks."""
        content = """
import typing as _typing

if _typing.TYPE_CHECKING:
    from some_module import SomeType

def foo():
    pass
"""
        assert _extract_from_imports(content) == []

    def test_detects_import_inside_function(self) -> None:
        """Function-level from imports are violations too."""
        content = """
def foo():
    from forbidden import Other
"""
        imports = _extract_from_imports(content)
        assert len(imports) == 1
        assert "from forbidden import Other" in imports[0][1]

    def test_unaliased_external_import_detected(self) -> None:
        """`import json` without a private alias is flagged; tcsetup imports are not."""
        content = "import json\nimport yaml as _yaml\nimport tcsetup.config as config\n"
        assert _unaliased_external_imports(content) == [(1, "import json")]
