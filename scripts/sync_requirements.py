#!/usr/bin/env python3
"""Write or verify requirements.txt from the pyproject dependency tables.

Usage::

    python scripts/sync_requirements.py          # rewrite requirements.txt
    python scripts/sync_requirements.py --check  # fail when it is stale
"""

from __future__ import annotations

import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
EXTRAS = ("test",)
HEADER = (
    f"# Generated from pyproject.toml (base + extras: {','.join(EXTRAS)})\n"
    "# Do not edit manually; run: python scripts/sync_requirements.py\n\n"
)


def declared(pyproject: Path = ROOT / "pyproject.toml") -> list[str]:
    """Sorted runtime requirements plus those of ``EXTRAS``."""
    project = tomllib.loads(pyproject.read_text(encoding="utf-8"))["project"]
    reqs = set(project.get("dependencies", []))
    for extra in EXTRAS:
        reqs.update(project.get("optional-dependencies", {}).get(extra, []))
    return sorted(req.strip() for req in reqs if req.strip())


def pinned(requirements: Path = ROOT / "requirements.txt") -> list[str]:
    lines = requirements.read_text(encoding="utf-8").splitlines()
    entries = (line.split("#", 1)[0].strip() for line in lines)
    return sorted(entry for entry in entries if entry)


def render(reqs: list[str]) -> str:
    return HEADER + "".join(f"{req}\n" for req in reqs)


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    target = ROOT / "requirements.txt"
    expected = declared()
    if "--check" not in args:
        target.write_text(render(expected), encoding="utf-8")
        print(f"Wrote {len(expected)} requirements to {target.name}")
        return
    actual = pinned(target)
    if actual != expected:
        missing = sorted(set(expected) - set(actual))
        extra = sorted(set(actual) - set(expected))
        raise SystemExit(
            "requirements.txt is out of sync with pyproject.toml "
            f"(missing: {missing or '-'}, unexpected: {extra or '-'}).\n"
            "Run: python scripts/sync_requirements.py"
        )
    print("requirements.txt is in sync.")


if __name__ == "__main__":
    main()
