"""Destination path mapping and directory creation."""

from __future__ import annotations

import logging
from pathlib import Path

from java2php.errors import FileSystemError, InvalidPathError

logger = logging.getLogger(__name__)


def _with_extension(path: Path, extension: str) -> Path:
    # ``with_suffix`` appends when there is no suffix, matching a set-extension.
    return path.with_suffix(f".{extension}")


def map_destination(
    source_root: Path,
    destination_root: Path,
    source_file: Path,
    output_extension: str = "php",
) -> Path:
    """Mirror ``source_file`` from ``source_root`` under ``destination_root``.

    Parameters
    ----------
    source_root : Path
        Root of the walked source tree.
    destination_root : Path
        Existing directory receiving mirrored output.
    source_file : Path
        File found under ``source_root``.
    output_extension : str, default="php"
        Extension given to the destination file.

    Returns
    -------
    Path
        Same relative path re-rooted under ``destination_root`` with the
        extension replaced.

    Raises
    ------
    InvalidPathError
        If ``source_file`` is not located under ``source_root``.
    """
    try:
        relative = source_file.relative_to(source_root)
    except ValueError as exc:
        raise InvalidPathError(
            f"{source_file} is not under {source_root}", path=source_file
        ) from exc
    if not relative.parts:
        raise InvalidPathError(
            f"{source_file} is the source root itself", path=source_file
        )
    return _with_extension(destination_root / relative, output_extension)


def map_directory(source_root: Path, destination_root: Path, source_dir: Path) -> Path:
    """Mirror a directory found under ``source_root``."""
    try:
        relative = source_dir.relative_to(source_root)
    except ValueError as exc:
        raise InvalidPathError(
            f"{source_dir} is not under {source_root}", path=source_dir
        ) from exc
    return destination_root / relative


def map_single_file(
    source_file: Path,
    destination_root: Path,
    output_extension: str = "php",
) -> Path:
    """Place a lone source file directly under ``destination_root``."""
    if source_file.name in {"", ".", ".."}:
        raise InvalidPathError(f"{source_file}: invalid file name", path=source_file)
    return _with_extension(destination_root / source_file.name, output_extension)


def ensure_dir(path: Path) -> bool:
    """Create one directory if it does not exist yet.

    Returns
    -------
    bool
        ``True`` if the directory was created by this call.

    Raises
    ------
    FileSystemError
        On any failure other than the directory already existing.
    """
    if path.is_dir():
        return False
    try:
        path.mkdir()
    except FileExistsError as exc:
        if path.is_dir():
            return False
        raise FileSystemError(f"{path}: not a directory", path=path) from exc
    except OSError as exc:
        raise FileSystemError(
            f"{path}: cannot create directory ({exc.strerror or exc})", path=path
        ) from exc
    logger.debug("created directory %s", path)
    return True


def ensure_parent_dir(path: Path) -> None:
    """Create the immediate parent directory of ``path`` if absent."""
    ensure_dir(path.parent)
