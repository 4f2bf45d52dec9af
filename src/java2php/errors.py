"""Exception hierarchy shared by the conversion pipeline and the CLI."""

from __future__ import annotations

from pathlib import Path


class Java2PhpError(Exception):
    """Base error for all java2php failures.

    Attributes
    ----------
    exit_code : int
        Process exit code used by the CLI when the error is fatal.
    """

    exit_code: int = 1


class ConfigError(Java2PhpError):
    """Invalid run configuration detected before any file is touched."""

    exit_code = 2


class DiscoveryError(Java2PhpError):
    """Source tree could not be enumerated."""

    exit_code = 3


class FileSystemError(Java2PhpError):
    """Reading, writing or creating a path failed."""

    exit_code = 4

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class InvalidPathError(FileSystemError):
    """Path is not located under the expected root."""


class TranslationError(Java2PhpError):
    """Remote translation of one file failed."""

    exit_code = 4


class TransportError(TranslationError):
    """Network-level failure talking to the completion endpoint."""


class HttpStatusError(TranslationError):
    """Completion endpoint answered with a non-success status."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class RemoteServiceError(TranslationError):
    """Completion endpoint reported an application-level error."""


class EmptyResultError(TranslationError):
    """Completion endpoint answered successfully but with no candidate."""


class MalformedResponseError(TranslationError):
    """Completion endpoint answered with a body that could not be understood."""
