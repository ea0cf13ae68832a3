from __future__ import annotations

import json
from functools import cache
from importlib import resources
from typing import TYPE_CHECKING

from jsonschema import validate

from checkcov import __version__

if TYPE_CHECKING:
    from checkcov.core.model.coverage import FunctionCoverage
    from checkcov.core.model.report import CheckReport
    from checkcov.core.thresholds import PackageOutcome

# -----------------------------------------------------------------------------
# JSON schema loading
# -----------------------------------------------------------------------------

_SCHEMA_FILES: dict[str, str] = {
    "v1": "schema.json",
}


@cache
def get_schema(version: str = "v1") -> dict[str, object]:
    """Load and cache the JSON schema for structured output."""
    try:
        filename = _SCHEMA_FILES[version]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema version: {version!r}. Available versions: {choices}"
        raise ValueError(msg) from exc

    text = resources.files("checkcov.data").joinpath(filename).read_text(encoding="utf-8")
    return json.loads(text)


def _function_payload(fc: FunctionCoverage) -> dict[str, object]:
    out: dict[str, object] = {
        "name": fc.name,
        "file": fc.source_path,
        "statements": fc.statement_count,
        "covered": fc.covered_count,
    }
    if fc.function is not None:
        out["line"] = fc.function.range.start.line
    return out


def _package_payload(outcome: PackageOutcome, *, with_functions: bool) -> dict[str, object]:
    pkg = outcome.package
    out: dict[str, object] = {
        "package": pkg.package_key,
        "statements": pkg.statement_count,
        "executed": pkg.executed_count,
        "percent": pkg.percent,
        "minimum": outcome.minimum,
        "passed": outcome.passed,
    }
    if with_functions:
        out["functions"] = [_function_payload(fc) for fc in outcome.functions]
    return out


def format_json(report: CheckReport, *, with_functions: bool = False) -> str:
    """Render a report as JSON validated against the packaged schema."""
    meta: dict[str, object] = {
        "source_root": report.meta.source_root,
        "profile": report.meta.profile,
        "skipped_files": list(report.meta.skipped_files),
    }
    if report.meta.mode is not None:
        meta["mode"] = report.meta.mode

    schema = get_schema("v1")
    payload: dict[str, object] = {
        "schema": str(schema["$id"]),
        "schema_version": 1,
        "tool": {"name": "checkcov", "version": __version__},
        "meta": meta,
        "passed": report.passed,
        "packages": [_package_payload(o, with_functions=with_functions) for o in report.outcomes],
    }

    validate(payload, schema)
    return json.dumps(payload, indent=2, sort_keys=True)


__all__ = ["format_json", "get_schema"]
