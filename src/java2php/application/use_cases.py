"""Application use-cases orchestrating conversion runs."""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from pathlib import Path

from pydantic import SecretStr, ValidationError

from java2php.application.options import ConversionOptions
from java2php.application.ports import ProgressSink, Translator
from java2php.application.results import ConversionOutcome, ConversionTask, RunSummary
from java2php.errors import (
    ConfigError,
    DiscoveryError,
    FileSystemError,
    TranslationError,
)
from java2php.infrastructure.paths import (
    ensure_dir,
    ensure_parent_dir,
    map_destination,
    map_directory,
    map_single_file,
)
from java2php.infrastructure.progress import ProgressReporter
from java2php.infrastructure.walker import Walker
from java2php.schemas import RunConfig

logger = logging.getLogger(__name__)


class RunState(Enum):
    """Lifecycle of a conversion run."""

    INIT = "init"
    VALIDATING = "validating"
    SINGLE_FILE = "single-file"
    TREE_WALK = "tree-walk"
    DRAINING = "draining"
    DONE = "done"


def _enter(state: RunState) -> None:
    logger.debug("run state -> %s", state.value)


def build_run_config(
    *,
    source_root: Path,
    destination_root: Path,
    credential: SecretStr | str,
) -> RunConfig:
    """Use-case: validate raw run input.

    Raises
    ------
    ConfigError
        If the input does not validate.
    """
    try:
        return RunConfig(
            source_root=source_root,
            destination_root=destination_root,
            credential=credential,
        )
    except ValidationError as exc:
        raise ConfigError(f"Invalid run configuration: {exc}") from exc


def validate_destination(destination_root: Path) -> None:
    """Fail fast unless the destination is an existing directory."""
    if not destination_root.is_dir():
        raise ConfigError(f"{destination_root}: Not a directory")


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise FileSystemError(f"{path}: not valid UTF-8 ({exc.reason})", path=path) from exc
    except OSError as exc:
        raise FileSystemError(
            f"{path}: cannot read ({exc.strerror or exc})", path=path
        ) from exc


def _write_output(path: Path, content: str) -> None:
    ensure_parent_dir(path)
    try:
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise FileSystemError(
            f"{path}: cannot write ({exc.strerror or exc})", path=path
        ) from exc


async def convert_file(task: ConversionTask, translator: Translator) -> None:
    """Use-case: read, translate and write one file.

    Raises
    ------
    FileSystemError
        If the source cannot be read or the destination cannot be written.
    TranslationError
        If the translator fails.
    """
    content = await asyncio.to_thread(_read_source, task.source_path)
    translated = await translator.translate(content)
    await asyncio.to_thread(_write_output, task.destination_path, translated)
    logger.debug("wrote %s", task.destination_path)


async def _run_task(
    task: ConversionTask,
    translator: Translator,
    reporter: ProgressSink,
    semaphore: asyncio.Semaphore | None,
) -> ConversionOutcome:
    try:
        if semaphore is None:
            await convert_file(task, translator)
        else:
            async with semaphore:
                await convert_file(task, translator)
    except (FileSystemError, TranslationError) as exc:
        outcome = ConversionOutcome.failure(task, exc)
        logger.info("conversion failed: %s", outcome.message)
        reporter.report_failure(outcome.message)
    except Exception as exc:
        # One file must never cancel its siblings in the task group.
        outcome = ConversionOutcome.failure(task, exc)
        logger.debug("unexpected error converting %s", task.source_path, exc_info=True)
        reporter.report_failure(outcome.message)
    else:
        outcome = ConversionOutcome.success(task)
    reporter.increment()
    return outcome


async def convert_single_file(
    config: RunConfig,
    translator: Translator,
    options: ConversionOptions,
) -> RunSummary:
    """Use-case: convert one file directly under the destination root."""
    destination = map_single_file(
        config.source_root, config.destination_root, options.output_extension
    )
    task = ConversionTask(source_path=config.source_root, destination_path=destination)
    await convert_file(task, translator)
    return RunSummary(mode="single-file", outcomes=(ConversionOutcome.success(task),))


async def convert_tree(
    config: RunConfig,
    translator: Translator,
    options: ConversionOptions,
    reporter: ProgressSink,
    walker: Walker | None = None,
) -> RunSummary:
    """Use-case: mirror a source tree and translate every matching file.

    Directories are created in discovery order before anything beneath them
    is spawned. Each file gets its own task; per-file failures become
    ``Failure`` outcomes. Discovery failures stop spawning, and are raised
    once the already spawned tasks have finished. A destination inside the
    source tree is never walked.

    Raises
    ------
    DiscoveryError
        If the tree cannot be enumerated.
    FileSystemError
        If a mirrored directory cannot be created.
    """
    walker = walker or Walker(
        options.source_extension,
        respect_ignore_files=options.respect_ignore_files,
        include_hidden=options.include_hidden,
    )
    semaphore = (
        asyncio.Semaphore(options.max_concurrency)
        if options.max_concurrency is not None
        else None
    )
    source_root = config.source_root
    destination_root = config.destination_root
    tasks: list[asyncio.Task[ConversionOutcome]] = []
    fatal: DiscoveryError | FileSystemError | None = None

    async with asyncio.TaskGroup() as group:
        try:
            for entry in walker.walk(source_root, exclude=(destination_root,)):
                if entry.is_dir:
                    ensure_dir(map_directory(source_root, destination_root, entry.path))
                    continue
                task = ConversionTask(
                    source_path=entry.path,
                    destination_path=map_destination(
                        source_root,
                        destination_root,
                        entry.path,
                        options.output_extension,
                    ),
                )
                reporter.add_total()
                tasks.append(
                    group.create_task(_run_task(task, translator, reporter, semaphore))
                )
                # Let the new task start its request while discovery continues.
                await asyncio.sleep(0)
        except (DiscoveryError, FileSystemError) as exc:
            fatal = exc
            logger.debug("discovery stopped after %d task(s): %s", len(tasks), exc)
        reporter.set_total(len(tasks))
        _enter(RunState.DRAINING)

    if fatal is not None:
        raise fatal
    return RunSummary(mode="tree", outcomes=tuple(task.result() for task in tasks))


async def run_conversion(
    config: RunConfig,
    translator: Translator,
    *,
    options: ConversionOptions | None = None,
    reporter: ProgressSink | None = None,
    walker: Walker | None = None,
) -> RunSummary:
    """Use-case: run a whole conversion, single file or tree.

    Parameters
    ----------
    config : RunConfig
        Validated source/destination input.
    translator : Translator
        Translation port, shared by every task.
    options : ConversionOptions | None, default=None
        Extensions, concurrency bound and traversal switches.
    reporter : ProgressSink | None, default=None
        Progress sink for tree mode. Defaults to a reporter that only prints
        failure lines.
    walker : Walker | None, default=None
        Custom traversal; built from ``options`` when omitted.

    Returns
    -------
    RunSummary
        One outcome per converted file.

    Raises
    ------
    ConfigError
        If the destination is not an existing directory or the source does
        not exist.
    DiscoveryError
        If the source tree cannot be enumerated.
    FileSystemError, TranslationError
        In single-file mode only, when the conversion fails.
    """
    options = options or ConversionOptions()
    _enter(RunState.INIT)
    _enter(RunState.VALIDATING)
    validate_destination(config.destination_root)

    if config.source_root.is_file():
        _enter(RunState.SINGLE_FILE)
        summary = await convert_single_file(config, translator, options)
        _enter(RunState.DONE)
        return summary

    if not config.source_root.is_dir():
        raise ConfigError(f"{config.source_root}: No such file or directory")

    _enter(RunState.TREE_WALK)
    reporter = reporter or ProgressReporter(enabled=False)
    try:
        summary = await convert_tree(config, translator, options, reporter, walker)
    finally:
        reporter.finish()
    _enter(RunState.DONE)
    logger.info(
        "converted %d/%d file(s), %d failed",
        summary.succeeded,
        summary.total,
        summary.failed,
    )
    return summary
