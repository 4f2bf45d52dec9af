"""Public conversion API (delegates to application use-cases)."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional

from pydantic import SecretStr

from java2php.adapters.translators import ChatCompletionTranslator, build_client
from java2php.application.options import ConversionOptions
from java2php.application.ports import ProgressSink, Translator
from java2php.application.results import RunSummary
from java2php.application.use_cases import build_run_config, run_conversion
from java2php.schemas import RunConfig, TranslatorSettings


async def convert_path_async(
    config: RunConfig,
    settings: Optional[TranslatorSettings] = None,
    options: Optional[ConversionOptions] = None,
    reporter: Optional[ProgressSink] = None,
    translator: Optional[Translator] = None,
) -> RunSummary:
    """Run a conversion, opening the shared HTTP client when needed."""
    if translator is not None:
        return await run_conversion(
            config, translator, options=options, reporter=reporter
        )
    async with build_client(config.credential, settings) as client:
        return await run_conversion(
            config,
            ChatCompletionTranslator(client, settings),
            options=options,
            reporter=reporter,
        )


def convert_path(
    source: Path,
    destination: Path,
    api_key: SecretStr | str,
    settings: Optional[TranslatorSettings] = None,
    options: Optional[ConversionOptions] = None,
    reporter: Optional[ProgressSink] = None,
    translator: Optional[Translator] = None,
) -> RunSummary:
    """Convert a Java file or tree into PHP under ``destination``."""
    config = build_run_config(
        source_root=source,
        destination_root=destination,
        credential=api_key,
    )
    return asyncio.run(
        convert_path_async(
            config,
            settings=settings,
            options=options,
            reporter=reporter,
            translator=translator,
        )
    )
