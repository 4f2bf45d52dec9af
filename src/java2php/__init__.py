"""Top-level API for LLM-backed Java to PHP conversion."""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr

from java2php.application.options import ConversionOptions
from java2php.application.results import RunSummary
from java2php.schemas import TranslatorSettings

__version__ = "0.1.0"


def convert_path(
    source: Path,
    destination: Path,
    api_key: SecretStr | str,
    *,
    settings: TranslatorSettings | None = None,
    options: ConversionOptions | None = None,
) -> RunSummary:
    """Convert a Java file or directory tree into PHP.

    Parameters
    ----------
    source : Path
        A ``.java`` file or a directory walked recursively.
    destination : Path
        Existing directory receiving the mirrored ``.php`` files.
    api_key : SecretStr | str
        Bearer token for the completion endpoint.
    settings : TranslatorSettings, optional
        Endpoint, model and prompt configuration.
    options : ConversionOptions, optional
        Extensions, concurrency bound and traversal switches.

    Returns
    -------
    RunSummary
        One outcome per converted file.
    """
    from .api import convert_path as _impl

    return _impl(
        source=source,
        destination=destination,
        api_key=api_key,
        settings=settings,
        options=options,
    )


__all__ = [
    "ConversionOptions",
    "RunSummary",
    "TranslatorSettings",
    "convert_path",
]
