"""Shared pytest configuration, marker assignment and source-tree fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

SOURCE_FILES: dict[str, str] = {
    "A.java": "class A {}\n",
    "B.java": "class B { void fail() {} }\n",
    "C.java": "class C {}\n",
    "README.md": "# not java\n",
    "Upper.JAVA": "class Upper {}\n",
    "pkg/D.java": "package pkg; class D {}\n",
    "pkg/notes.txt": "notes\n",
    "pkg/deep/E.java": "package pkg.deep; class E {}\n",
    "build/Generated.java": "class Generated {}\n",
    ".hidden/H.java": "class H {}\n",
    ".gitignore": "build/\n",
}


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach suite markers based on test file path."""
    del config
    for item in items:
        path = Path(str(item.fspath))
        parts = set(path.parts)
        if "e2e_tests" in parts:
            item.add_marker(pytest.mark.e2e)
        elif "integration_tests" in parts:
            item.add_marker(pytest.mark.integration)
        elif "unit_tests" in parts:
            item.add_marker(pytest.mark.unit)


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Materialize ``files`` (relative path -> content) under ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def java_tree(tmp_path: Path) -> Path:
    """Source tree with matching, non-matching, ignored and hidden files."""
    return write_tree(tmp_path / "src", SOURCE_FILES)


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    """Existing, empty destination directory."""
    path = tmp_path / "out"
    path.mkdir()
    return path
