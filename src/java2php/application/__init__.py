"""Application-layer use-cases and option objects."""

from __future__ import annotations

from pathlib import Path

from pydantic import SecretStr

from java2php.application.options import ConversionOptions
from java2php.application.ports import ProgressSink, Translator
from java2php.application.results import ConversionOutcome, ConversionTask, RunSummary
from java2php.schemas import RunConfig


def build_run_config(
    *,
    source_root: Path,
    destination_root: Path,
    credential: SecretStr | str,
) -> RunConfig:
    """Build validated run input via lazy use-case import."""
    from java2php.application.use_cases import build_run_config as _impl

    return _impl(
        source_root=source_root,
        destination_root=destination_root,
        credential=credential,
    )


async def run_conversion(
    config: RunConfig,
    translator: Translator,
    *,
    options: ConversionOptions | None = None,
    reporter: ProgressSink | None = None,
) -> RunSummary:
    """Run a conversion via lazy use-case import."""
    from java2php.application.use_cases import run_conversion as _impl

    return await _impl(config, translator, options=options, reporter=reporter)


__all__ = [
    "ConversionOptions",
    "ConversionOutcome",
    "ConversionTask",
    "ProgressSink",
    "RunSummary",
    "Translator",
    "build_run_config",
    "run_conversion",
]
