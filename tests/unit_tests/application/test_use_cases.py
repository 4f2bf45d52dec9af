"""Unit tests for the conversion orchestrator use-cases."""

from __future__ import annotations

import asyncio
import os
from pathlib import Path

import pytest

from java2php.application import use_cases
from java2php.application.options import ConversionOptions
from java2php.application.results import ConversionTask
from java2php.application.use_cases import build_run_config, run_conversion
from java2php.errors import (
    ConfigError,
    DiscoveryError,
    EmptyResultError,
    FileSystemError,
    RemoteServiceError,
)
from java2php.schemas import RunConfig

EXPECTED_OUTPUTS = {"A.php", "B.php", "C.php", "pkg/D.php", "pkg/deep/E.php"}


def _config(source: Path, destination: Path) -> RunConfig:
    return build_run_config(
        source_root=source, destination_root=destination, credential="sk-test"
    )


def _files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


def _dirs(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_dir()}


@pytest.mark.asyncio
async def test_tree_mode_mirrors_every_matching_file(
    java_tree: Path, out_dir: Path, translator, reporter
) -> None:
    """Each .java file yields one .php file at the mirrored path."""
    summary = await run_conversion(
        _config(java_tree, out_dir), translator, reporter=reporter
    )

    assert summary.mode == "tree"
    assert summary.total == 5
    assert summary.failed == 0
    assert _files(out_dir) == EXPECTED_OUTPUTS
    assert (out_dir / "pkg" / "D.php").read_text() == "<?php\n// package pkg; class D {}\n"
    assert len(translator.calls) == 5
    assert reporter.final_total == 5
    assert reporter.completed == 5
    assert reporter.finished


@pytest.mark.asyncio
async def test_non_matching_and_ignored_files_produce_nothing(
    java_tree: Path, out_dir: Path, translator
) -> None:
    """README, notes, ignored and hidden trees are neither copied nor mirrored."""
    await run_conversion(_config(java_tree, out_dir), translator)

    assert _dirs(out_dir) == {"pkg", "pkg/deep"}
    outputs = _files(out_dir)
    assert not any(name.endswith((".md", ".txt", ".JAVA", ".java")) for name in outputs)
    assert "build/Generated.php" not in outputs


@pytest.mark.asyncio
async def test_directory_exists_before_file_is_written(
    java_tree: Path,
    out_dir: Path,
    make_translator,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Mirrored directories are created before any file beneath them is written."""
    parent_existed: dict[Path, bool] = {}
    real_write = use_cases._write_output

    def checking_write(path: Path, content: str) -> None:
        parent_existed[path] = path.parent.is_dir()
        real_write(path, content)

    monkeypatch.setattr(use_cases, "_write_output", checking_write)
    await run_conversion(_config(java_tree, out_dir), make_translator(delay=0.01))

    assert len(parent_existed) == 5
    assert all(parent_existed.values())


@pytest.mark.asyncio
async def test_one_failure_does_not_stop_siblings(
    java_tree: Path, out_dir: Path, make_translator, reporter
) -> None:
    """A failing file is reported while the other files are still produced."""
    translator = make_translator(fail_on=["fail()"])
    summary = await run_conversion(
        _config(java_tree, out_dir), translator, reporter=reporter
    )

    assert (out_dir / "A.php").exists()
    assert (out_dir / "C.php").exists()
    assert not (out_dir / "B.php").exists()
    assert summary.total == 5
    assert summary.failed == 1
    failure = summary.failures[0]
    assert failure.destination_path == out_dir / "B.php"
    assert isinstance(failure.error, RemoteServiceError)
    assert reporter.failures == [f"{out_dir / 'B.php'}: model refused"]
    assert reporter.completed == 5


@pytest.mark.asyncio
async def test_single_file_mode(tmp_path: Path, out_dir: Path, translator) -> None:
    """A lone file lands directly under the destination with the stub output."""
    source = tmp_path / "deep" / "Foo.java"
    source.parent.mkdir()
    source.write_text("class Foo {}")

    summary = await run_conversion(_config(source, out_dir), translator)

    assert summary.mode == "single-file"
    assert _files(out_dir) == {"Foo.php"}
    assert (out_dir / "Foo.php").read_text() == "<?php\n// class Foo {}"


@pytest.mark.asyncio
async def test_single_file_failure_is_raised(
    tmp_path: Path, out_dir: Path, make_translator
) -> None:
    """Single-file mode has no batch: the failure ends the run."""
    source = tmp_path / "Foo.java"
    source.write_text("class Foo { void fail() {} }")

    with pytest.raises(RemoteServiceError):
        await run_conversion(_config(source, out_dir), make_translator(fail_on=["fail"]))
    assert _files(out_dir) == set()


@pytest.mark.asyncio
async def test_rerun_tolerates_existing_directories(
    java_tree: Path, out_dir: Path, translator
) -> None:
    """Running twice against the same destination succeeds."""
    config = _config(java_tree, out_dir)
    first = await run_conversion(config, translator)
    second = await run_conversion(config, translator)
    assert first.failed == second.failed == 0
    assert _files(out_dir) == EXPECTED_OUTPUTS


@pytest.mark.asyncio
async def test_destination_must_be_existing_directory(
    java_tree: Path, tmp_path: Path, translator, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Fail fast with ConfigError before touching any file."""
    touched: list[Path] = []
    monkeypatch.setattr(
        use_cases, "_read_source", lambda path: touched.append(path) or ""
    )
    missing = tmp_path / "missing"

    with pytest.raises(ConfigError, match="Not a directory"):
        await run_conversion(_config(java_tree, missing), translator)

    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")
    with pytest.raises(ConfigError, match="Not a directory"):
        await run_conversion(_config(java_tree, not_a_dir), translator)

    assert touched == []
    assert translator.calls == []
    assert not missing.exists()


@pytest.mark.asyncio
async def test_missing_source_is_config_error(
    tmp_path: Path, out_dir: Path, translator
) -> None:
    """A source that is neither file nor directory is rejected."""
    with pytest.raises(ConfigError, match="No such file or directory"):
        await run_conversion(_config(tmp_path / "nope", out_dir), translator)


@pytest.mark.asyncio
async def test_empty_result_is_a_failure_outcome(
    java_tree: Path, out_dir: Path, make_translator, reporter
) -> None:
    """An empty candidate list fails the file instead of writing an empty one."""
    translator = make_translator(empty_on=["class C"])
    summary = await run_conversion(
        _config(java_tree, out_dir), translator, reporter=reporter
    )

    assert not (out_dir / "C.php").exists()
    assert summary.failed == 1
    assert isinstance(summary.failures[0].error, EmptyResultError)
    assert "no result" in reporter.failures[0]


@pytest.mark.asyncio
async def test_unreadable_source_is_local_failure(
    java_tree: Path,
    out_dir: Path,
    translator,
    reporter,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Read errors fail only the affected file."""
    real_read = use_cases._read_source

    def flaky_read(path: Path) -> str:
        if path.name == "A.java":
            raise FileSystemError(f"{path}: cannot read (Permission denied)", path=path)
        return real_read(path)

    monkeypatch.setattr(use_cases, "_read_source", flaky_read)
    summary = await run_conversion(
        _config(java_tree, out_dir), translator, reporter=reporter
    )

    assert summary.failed == 1
    assert summary.succeeded == 4
    assert "Permission denied" in reporter.failures[0]


@pytest.mark.asyncio
async def test_root_discovery_error_spawns_nothing(
    java_tree: Path,
    out_dir: Path,
    translator,
    reporter,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """An unlistable source root aborts before any task is spawned."""

    def failing_scandir(path: object) -> object:
        raise PermissionError(13, "Permission denied")

    monkeypatch.setattr(os, "scandir", failing_scandir)
    with pytest.raises(DiscoveryError):
        await run_conversion(_config(java_tree, out_dir), translator, reporter=reporter)
    assert translator.calls == []
    assert reporter.total == 0
    assert reporter.finished


@pytest.mark.asyncio
async def test_nested_discovery_error_drains_spawned_tasks(
    java_tree: Path,
    out_dir: Path,
    translator,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """Spawned tasks still finish before a later discovery error is raised."""
    real_scandir = os.scandir

    def failing_scandir(path: object) -> object:
        if Path(str(path)).name == "deep":
            raise PermissionError(13, "Permission denied")
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", failing_scandir)
    with pytest.raises(DiscoveryError, match="deep"):
        await run_conversion(_config(java_tree, out_dir), translator)
    assert {"A.php", "B.php", "C.php", "pkg/D.php"} <= _files(out_dir)


@pytest.mark.asyncio
async def test_unexpected_error_is_contained_to_its_file(
    java_tree: Path, out_dir: Path, reporter
) -> None:
    """A non-domain exception fails one file without cancelling the others."""

    class CrashingTranslator:
        async def translate(self, content: str) -> str:
            if "fail()" in content:
                raise ValueError("decoder exploded")
            await asyncio.sleep(0.05)
            return "<?php\n"

    summary = await run_conversion(
        _config(java_tree, out_dir), CrashingTranslator(), reporter=reporter
    )

    assert summary.total == 5
    assert summary.succeeded == 4
    [failure] = summary.failures
    assert isinstance(failure.error, ValueError)
    assert _files(out_dir) == EXPECTED_OUTPUTS - {"B.php"}
    assert reporter.failures == [f"{out_dir / 'B.php'}: ValueError: decoder exploded"]
    assert reporter.completed == 5


@pytest.mark.asyncio
async def test_destination_inside_source_is_not_walked(
    tmp_path: Path, translator
) -> None:
    """Mirrored output under the source root is never read back as input."""
    project = tmp_path / "proj"
    (project / "pkg").mkdir(parents=True)
    (project / "A.java").write_text("class A {}\n")
    (project / "pkg" / "B.java").write_text("class B {}\n")
    destination = project / "out"
    destination.mkdir()

    summary = await run_conversion(_config(project, destination), translator)

    assert summary.total == 2
    assert _files(destination) == {"A.php", "pkg/B.php"}
    assert _dirs(destination) == {"pkg"}


@pytest.mark.asyncio
async def test_unbounded_fan_out_runs_tasks_concurrently(
    java_tree: Path, out_dir: Path, make_translator
) -> None:
    """Without a limit every file is in flight at the same time."""
    translator = make_translator(delay=0.05)
    await run_conversion(_config(java_tree, out_dir), translator)
    assert translator.max_in_flight == 5


@pytest.mark.asyncio
async def test_max_concurrency_bounds_in_flight_tasks(
    java_tree: Path, out_dir: Path, make_translator
) -> None:
    """A concurrency limit gates translations without changing the result."""
    translator = make_translator(delay=0.02)
    summary = await run_conversion(
        _config(java_tree, out_dir),
        translator,
        options=ConversionOptions(max_concurrency=2),
    )
    assert translator.max_in_flight <= 2
    assert summary.total == 5
    assert _files(out_dir) == EXPECTED_OUTPUTS


@pytest.mark.asyncio
async def test_custom_extensions(tmp_path: Path, out_dir: Path, translator) -> None:
    """Source and output extensions are configurable."""
    source = tmp_path / "src"
    (source / "k").mkdir(parents=True)
    (source / "k" / "Main.kt").write_text("fun main() {}")
    (source / "k" / "Skip.java").write_text("class Skip {}")

    await run_conversion(
        _config(source, out_dir),
        translator,
        options=ConversionOptions(source_extension="kt", output_extension="inc"),
    )
    assert _files(out_dir) == {"k/Main.inc"}


@pytest.mark.asyncio
async def test_convert_file_wraps_write_errors(tmp_path: Path, translator) -> None:
    """Write failures surface as FileSystemError with the destination path."""
    source = tmp_path / "A.java"
    source.write_text("class A {}")
    blocker = tmp_path / "blocker"
    blocker.write_text("file, not directory")
    task = ConversionTask(source_path=source, destination_path=blocker / "A.php")

    with pytest.raises(FileSystemError) as info:
        await use_cases.convert_file(task, translator)
    assert info.value.path == blocker


def test_build_run_config_rejects_blank_key(tmp_path: Path) -> None:
    """An empty credential is a ConfigError."""
    with pytest.raises(ConfigError, match="API key cannot be empty"):
        build_run_config(source_root=tmp_path, destination_root=tmp_path, credential=" ")


@pytest.mark.parametrize(
    "kwargs",
    [
        {"source_extension": ".java"},
        {"output_extension": ""},
        {"max_concurrency": 0},
    ],
)
def test_conversion_options_validation(kwargs: dict[str, object]) -> None:
    """Reject malformed extensions and non-positive limits."""
    with pytest.raises(ValueError):
        ConversionOptions(**kwargs)


def test_tasks_do_not_share_destinations(java_tree: Path, out_dir: Path) -> None:
    """Destination paths are unique per source file."""
    from java2php.infrastructure.paths import map_destination
    from java2php.infrastructure.walker import Walker

    files = [e.path for e in Walker().walk(java_tree) if not e.is_dir]
    destinations = [map_destination(java_tree, out_dir, f) for f in files]
    assert len(set(destinations)) == len(files)


def test_run_is_reentrant_in_fresh_loops(
    java_tree: Path, out_dir: Path, translator
) -> None:
    """The use-case holds no loop-bound global state."""
    config = _config(java_tree, out_dir)
    for _ in range(2):
        summary = asyncio.run(run_conversion(config, translator))
        assert summary.total == 5


@pytest.mark.asyncio
async def test_run_states_are_logged_in_order(
    java_tree: Path, out_dir: Path, translator, caplog: pytest.LogCaptureFixture
) -> None:
    """A tree run passes through every lifecycle state once."""
    caplog.set_level("DEBUG", logger=use_cases.__name__)
    await run_conversion(_config(java_tree, out_dir), translator)

    states = [
        record.getMessage().removeprefix("run state -> ")
        for record in caplog.records
        if record.getMessage().startswith("run state -> ")
    ]
    assert states == ["init", "validating", "tree-walk", "draining", "done"]
