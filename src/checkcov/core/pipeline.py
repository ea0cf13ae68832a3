from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, TypeVar

from checkcov._meta import logger
from checkcov.core.aggregate import CoverageAggregator
from checkcov.core.config import DEFAULT_SKIP_DIRS, ConfigPackage, ThresholdConfig, dump_config, load_config
from checkcov.core.matcher import record_file_coverage
from checkcov.core.model.report import CheckReport, ReportMeta
from checkcov.core.statements import extract_functions
from checkcov.core.thresholds import ThresholdVerifier
from checkcov.errors import (
    ConfigFormatError,
    InvalidTreeError,
    LookupMiss,
    NoInputError,
    ParseError,
    ProfileFormatError,
)
from checkcov.inputs.discover import ProfileIndex, discover_sources, read_module_path, resolve_source_root
from checkcov.inputs.golang import parse_file
from checkcov.inputs.profile import merge_blocks, read_profile
from checkcov.render.render import RenderOptions, render

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence
    from pathlib import Path

    from checkcov.core.model.coverage import CoverageBlock, FileProfile, FunctionCoverage
    from checkcov.core.model.positions import Range
    from checkcov.inputs.discover import SourceFile

T = TypeVar("T")


class PipelineError(Exception):
    """Base class for errors emitted by the pipeline."""


class NoInputFailure(PipelineError):
    """Profile, source directory or config file is missing."""


class DataFailure(PipelineError):
    """Profile or source data is malformed."""


class ConfigFailure(PipelineError):
    """Configuration content is malformed."""


class ThresholdFailure(PipelineError):
    """At least one package is below its minimum."""

    def __init__(self, report: CheckReport) -> None:
        super().__init__("packages failed to meet minimum coverage")
        self.report = report


class UnexpectedFailure(PipelineError):
    """Unexpected failure while analysing or rendering."""


@dataclass(frozen=True, slots=True)
class AnalysisOptions:
    source_root: Path
    profile_path: Path
    skip_dirs: tuple[str, ...] = DEFAULT_SKIP_DIRS
    skip_unparsable: bool = False
    jobs: int = 1


@dataclass(frozen=True, slots=True)
class CoverageRun:
    """Everything the analysis produced, before verification."""

    source_root: Path
    profile_path: Path
    mode: str | None
    aggregator: CoverageAggregator = field(compare=False)
    skipped: tuple[str, ...] = ()


# -----------------------------------------------------------------------------
# Analysis
# -----------------------------------------------------------------------------


def analyze_file(source: SourceFile, blocks: Sequence[CoverageBlock] | None) -> list[FunctionCoverage]:
    """Parse, extract and match one source file."""
    tree = parse_file(source.path, display_path=source.relative)
    return record_file_coverage(extract_functions(tree), blocks)


def _index_profiles(
    profiles: Sequence[FileProfile], index: ProfileIndex, *, source: str
) -> dict[str, tuple[CoverageBlock, ...]]:
    """Group profile blocks by source file.

    Several profile names (an import path and an absolute path, say) can
    name the same file; their blocks are merged by range.
    """
    by_file: dict[str, dict[Range, CoverageBlock]] = {}
    for prof in profiles:
        try:
            target = index.resolve(prof.file_name)
        except LookupMiss as exc:
            logger.debug("%s", exc)
            continue
        blocks = by_file.setdefault(target.relative, {})
        for block in prof.blocks:
            seen = blocks.get(block.range)
            blocks[block.range] = (
                block if seen is None else merge_blocks(seen, block, mode=prof.mode, source=source)
            )
    return {
        rel: tuple(sorted(blocks.values(), key=lambda b: (b.range.start, b.range.end)))
        for rel, blocks in by_file.items()
    }


def _map_ordered(
    fn: Callable[[SourceFile], list[FunctionCoverage] | None],
    files: Sequence[SourceFile],
    jobs: int,
) -> list[list[FunctionCoverage] | None]:
    if jobs <= 1 or len(files) <= 1:
        return [fn(f) for f in files]
    logger.debug("analysing %d files with %d workers", len(files), jobs)
    with ThreadPoolExecutor(max_workers=jobs) as pool:
        return list(pool.map(fn, files))


def collect_coverage(options: AnalysisOptions) -> CoverageRun:
    """Discover sources, read the profile and record coverage per package."""
    root = resolve_source_root(options.source_root)
    files = discover_sources(root, options.skip_dirs)
    profiles = read_profile(options.profile_path)
    index = ProfileIndex(root, files, module_path=read_module_path(root))
    blocks_by_file = _index_profiles(profiles, index, source=str(options.profile_path))

    def analyze(source: SourceFile) -> list[FunctionCoverage] | None:
        try:
            return analyze_file(source, blocks_by_file.get(source.relative))
        except ParseError as exc:
            if not options.skip_unparsable:
                raise
            logger.warning("skipping unparsable file %s", exc)
            return None

    aggregator = CoverageAggregator()
    skipped: list[str] = []
    entries: list[tuple[str, FunctionCoverage]] = []
    for source, result in zip(files, _map_ordered(analyze, files, options.jobs), strict=True):
        aggregator.register(source.package_key)
        if result is None:
            skipped.append(source.relative)
            continue
        entries.extend((source.package_key, fc) for fc in result)
    aggregator.add_all(entries)

    return CoverageRun(
        source_root=root,
        profile_path=options.profile_path,
        mode=profiles[0].mode if profiles else None,
        aggregator=aggregator,
        skipped=tuple(skipped),
    )


def verify_coverage(run: CoverageRun, verifier: ThresholdVerifier) -> CheckReport:
    aggregator = run.aggregator
    functions = {key: aggregator.functions(key) for key in aggregator.package_keys}
    verification = verifier.verify(aggregator.packages(), functions)
    meta = ReportMeta(
        source_root=run.source_root.as_posix(),
        profile=run.profile_path.as_posix(),
        mode=run.mode,
        skipped_files=run.skipped,
    )
    return CheckReport(meta=meta, verification=verification)


# -----------------------------------------------------------------------------
# Entry points with error mapping
# -----------------------------------------------------------------------------


def _guard(action: Callable[[], T]) -> T:
    try:
        return action()
    except NoInputError as exc:
        raise NoInputFailure(str(exc)) from exc
    except ConfigFormatError as exc:
        msg = f"invalid configuration: {exc}"
        raise ConfigFailure(msg) from exc
    except (ProfileFormatError, ParseError, InvalidTreeError) as exc:
        raise DataFailure(str(exc)) from exc
    except OSError as exc:
        raise NoInputFailure(str(exc)) from exc
    except Exception as exc:
        logger.exception("unexpected failure")
        raise UnexpectedFailure(str(exc)) from exc


def load_thresholds(config_file: Path | None, *, no_config: bool, cwd: Path) -> ThresholdConfig:
    """Load the threshold configuration, surfacing errors before any analysis."""
    if no_config:
        return ThresholdConfig()
    return _guard(lambda: load_config(config_file, cwd=cwd))


def run_check(
    options: AnalysisOptions,
    *,
    config: ThresholdConfig,
    default_minimum: float | None = None,
    print_functions: bool = False,
) -> CheckReport:
    """Analyse the sources and verify every package against its minimum."""
    verifier = ThresholdVerifier(config, default_minimum=default_minimum, print_functions=print_functions)
    return _guard(lambda: verify_coverage(collect_coverage(options), verifier))


def evaluate_or_raise(report: CheckReport) -> None:
    if not report.passed:
        raise ThresholdFailure(report)


def render_report(report: CheckReport, *, fmt: str, options: RenderOptions) -> str:
    return _guard(lambda: render(report, fmt=fmt, options=options))


def build_initial_config(options: AnalysisOptions) -> str:
    """Return a YAML config pinning every package at its current coverage."""
    run = _guard(lambda: collect_coverage(options))
    packages = [
        ConfigPackage(name=pkg.package_key, min_coverage_percent=pkg.percent)
        for pkg in run.aggregator.packages()
    ]
    return dump_config(packages)


__all__ = [
    "AnalysisOptions",
    "CheckReport",
    "ConfigFailure",
    "CoverageRun",
    "DataFailure",
    "NoInputFailure",
    "PipelineError",
    "ThresholdFailure",
    "UnexpectedFailure",
    "analyze_file",
    "build_initial_config",
    "collect_coverage",
    "evaluate_or_raise",
    "load_thresholds",
    "render_report",
    "run_check",
    "verify_coverage",
]
