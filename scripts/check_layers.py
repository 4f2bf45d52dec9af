#!/usr/bin/env python3
"""Layer boundary and use-case size checks for the java2php package."""

from __future__ import annotations

import ast
from collections.abc import Iterator
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/java2php"

# layer glob -> module prefixes it must not import
FORBIDDEN_IMPORTS: dict[str, tuple[str, ...]] = {
    "application/*.py": ("typer", "httpx", "java2php.adapters", "java2php.cli"),
    "infrastructure/*.py": ("typer", "httpx", "java2php.application", "java2php.cli"),
    "adapters/*.py": ("typer", "java2php.cli"),
    "cli/cli.py": ("httpx",),
}
USE_CASES = PACKAGE / "application/use_cases.py"
MAX_STATEMENTS = 40


def imported_modules(path: Path) -> Iterator[str]:
    """Yield every absolute module name imported by ``path``."""
    tree = ast.parse(path.read_text(encoding="utf-8"), filename=str(path))
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            yield from (alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and node.module and not node.level:
            yield node.module


def layer_violations(package: Path = PACKAGE) -> list[str]:
    violations: list[str] = []
    for pattern, banned in FORBIDDEN_IMPORTS.items():
        for path in sorted(package.glob(pattern)):
            for module in imported_modules(path):
                if any(module == name or module.startswith(f"{name}.") for name in banned):
                    violations.append(f"{path.relative_to(package)} imports {module}")
    return violations


def oversized_use_cases(path: Path = USE_CASES, limit: int = MAX_STATEMENTS) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    found: list[str] = []
    for node in tree.body:
        if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
            continue
        count = sum(isinstance(child, ast.stmt) for child in ast.walk(node)) - 1
        if count > limit:
            found.append(f"{node.name}: {count} statements (limit {limit})")
    return found


def main() -> None:
    """Exit non-zero on any boundary or size violation."""
    problems = layer_violations() + oversized_use_cases()
    if problems:
        raise SystemExit("Layer checks failed:\n" + "\n".join(f"- {p}" for p in problems))
    print("Layer checks passed.")


if __name__ == "__main__":
    main()
