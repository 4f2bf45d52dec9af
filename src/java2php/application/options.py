"""Typed option objects shared across conversion use-cases."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ConversionOptions:
    """Run behavior that is not part of the validated run input.

    Parameters
    ----------
    source_extension : str, default="java"
        Extension (without dot) of files to translate; matched case-sensitively.
    output_extension : str, default="php"
        Extension (without dot) given to every written file.
    max_concurrency : int | None, default=None
        Upper bound of in-flight translations. ``None`` spawns every task
        without admission control.
    respect_ignore_files : bool, default=True
        Prune subtrees matched by ``.gitignore``/``.ignore`` rules.
    include_hidden : bool, default=False
        Traverse dot-prefixed files and directories.
    """

    source_extension: str = "java"
    output_extension: str = "php"
    max_concurrency: int | None = None
    respect_ignore_files: bool = True
    include_hidden: bool = False

    def __post_init__(self) -> None:
        for name in ("source_extension", "output_extension"):
            value = getattr(self, name)
            if not value or value.startswith(".") or "/" in value:
                raise ValueError(f"{name} must be a bare extension such as 'java'.")
        if self.max_concurrency is not None and self.max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0 when set.")
