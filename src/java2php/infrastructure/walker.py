"""Ignore-aware, extension-filtered source tree traversal."""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from pathspec import GitIgnoreSpec

from java2php.errors import DiscoveryError
from java2php.types import EntryKind

logger = logging.getLogger(__name__)

IGNORE_FILENAMES = (".gitignore", ".ignore")
ALWAYS_SKIPPED = frozenset({".git"})


@dataclass(frozen=True)
class WalkEntry:
    """One directory or matching file yielded by :class:`Walker`."""

    path: Path
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind == "directory"


@dataclass(frozen=True)
class _IgnoreRules:
    """Patterns read from one ignore file, relative to ``base``."""

    base: Path
    spec: GitIgnoreSpec

    def decide(self, path: Path, is_dir: bool) -> bool | None:
        """Return ``True`` (ignored), ``False`` (re-included) or ``None``."""
        relative = path.relative_to(self.base).as_posix()
        if is_dir:
            relative += "/"
        return self.spec.check_file(relative).include


def _read_rules(base: Path, ignore_file: Path) -> _IgnoreRules | None:
    try:
        lines = ignore_file.read_text(encoding="utf-8", errors="replace").splitlines()
    except (FileNotFoundError, NotADirectoryError):
        return None
    except OSError as exc:
        raise DiscoveryError(f"{ignore_file}: cannot read ignore file ({exc})") from exc
    spec = GitIgnoreSpec.from_lines(lines)
    active = sum(1 for pattern in spec.patterns if pattern.include is not None)
    if not active:
        return None
    logger.debug("loaded %d ignore patterns from %s", active, ignore_file)
    return _IgnoreRules(base=base, spec=spec)


def _is_ignored(rules: Sequence[_IgnoreRules], path: Path, is_dir: bool) -> bool:
    # Deeper ignore files are checked last so that they take precedence.
    ignored = False
    for rule in rules:
        decision = rule.decide(path, is_dir)
        if decision is not None:
            ignored = decision
    return ignored


class Walker:
    """Enumerate directories and files of one extension under a root.

    Parameters
    ----------
    extension : str, default="java"
        File extension (without dot) to keep; compared case-sensitively.
    respect_ignore_files : bool, default=True
        Honor ``.gitignore``/``.ignore`` files and ``.git/info/exclude``.
        Ignored directories are pruned and never listed.
    include_hidden : bool, default=False
        Also traverse dot-prefixed entries. ``.git`` is always skipped.
    """

    def __init__(
        self,
        extension: str = "java",
        *,
        respect_ignore_files: bool = True,
        include_hidden: bool = False,
    ) -> None:
        self.suffix = f".{extension}"
        self.respect_ignore_files = respect_ignore_files
        self.include_hidden = include_hidden

    def walk(
        self, root: Path, *, exclude: Iterable[Path] = ()
    ) -> Iterator[WalkEntry]:
        """Lazily yield entries under ``root`` (the root itself excluded).

        Every directory is yielded before any of its descendants. Calling
        ``walk`` again starts a fresh traversal. Directories in ``exclude``
        (compared after resolving) are neither yielded nor entered.

        Raises
        ------
        DiscoveryError
            If ``root`` or a directory below it cannot be listed.
        """
        if not root.is_dir():
            raise DiscoveryError(f"{root}: not a directory")

        skipped = {path.resolve() for path in exclude}
        base_rules: tuple[_IgnoreRules, ...] = ()
        if self.respect_ignore_files:
            git_exclude = _read_rules(root, root / ".git" / "info" / "exclude")
            if git_exclude is not None:
                base_rules = (git_exclude,)

        stack: list[tuple[Path, tuple[_IgnoreRules, ...]]] = [(root, base_rules)]
        while stack:
            directory, inherited = stack.pop()
            rules = inherited + self._rules_for(directory)
            subdirs: list[Path] = []
            for path, is_dir in self._list(directory):
                if not self._admits(path, is_dir, rules):
                    continue
                if is_dir and skipped and path.resolve() in skipped:
                    logger.debug("skipped excluded directory %s", path)
                    continue
                if is_dir:
                    yield WalkEntry(path=path, kind="directory")
                    subdirs.append(path)
                else:
                    yield WalkEntry(path=path, kind="file")
            # Reversed so the stack pops subdirectories in name order.
            stack.extend((subdir, rules) for subdir in reversed(subdirs))

    def _rules_for(self, directory: Path) -> tuple[_IgnoreRules, ...]:
        if not self.respect_ignore_files:
            return ()
        found = (_read_rules(directory, directory / name) for name in IGNORE_FILENAMES)
        return tuple(rule for rule in found if rule is not None)

    def _list(self, directory: Path) -> list[tuple[Path, bool]]:
        try:
            with os.scandir(directory) as it:
                entries = [
                    (Path(entry.path), entry.is_dir(follow_symlinks=False))
                    for entry in it
                ]
        except OSError as exc:
            raise DiscoveryError(
                f"{directory}: cannot list directory ({exc.strerror or exc})"
            ) from exc
        entries.sort(key=lambda item: item[0].name)
        return entries

    def _admits(
        self, path: Path, is_dir: bool, rules: Sequence[_IgnoreRules]
    ) -> bool:
        name = path.name
        if name in ALWAYS_SKIPPED:
            return False
        if name.startswith(".") and not self.include_hidden:
            return False
        if not is_dir and (path.suffix != self.suffix or not path.is_file()):
            return False
        if rules and _is_ignored(rules, path, is_dir):
            logger.debug("ignored %s", path)
            return False
        return True
