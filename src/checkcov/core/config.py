"""Central configuration and constants for ``checkcov``.

Per-package minimums live in an optional YAML file::

    min_coverage_percentage: 50
    packages:
      - name: pkg/foo
        min_coverage_percentage: 80
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

from checkcov._meta import logger
from checkcov.errors import ConfigFormatError, LookupMiss, NoInputError

if TYPE_CHECKING:
    from collections.abc import Iterable

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

DEFAULT_CONFIG_FILE = ".checkcov.yml"

DEFAULT_SKIP_DIRS: tuple[str, ...] = ("vendor",)

_MIN_KEY = "min_coverage_percentage"


@dataclass(frozen=True, slots=True)
class ConfigPackage:
    """Minimum coverage required of one package."""

    name: str
    min_coverage_percent: float


@dataclass(frozen=True, slots=True)
class ThresholdConfig:
    """Per-package minimums plus an optional file-wide default."""

    packages: tuple[ConfigPackage, ...] = ()
    min_coverage_percent: float | None = None

    def package(self, name: str) -> ConfigPackage:
        """Return the entry named exactly *name*; raise :class:`LookupMiss` otherwise."""
        for pkg in self.packages:
            if pkg.name == name:
                return pkg
        msg = f"no configuration for package {name!r}"
        raise LookupMiss(msg)


def _percentage(value: Any, *, source: str, key: str) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        raise ConfigFormatError(source, f"expected a number, got {value!r}", key=key)
    percent = float(value)
    if math.isnan(percent) or percent < 0 or percent > 100:  # noqa: PLR2004
        raise ConfigFormatError(source, f"percentage out of range: {value!r}", key=key)
    return percent


def _package(entry: Any, *, index: int, source: str) -> ConfigPackage:
    key = f"packages[{index}]"
    if not isinstance(entry, dict):
        raise ConfigFormatError(source, "expected a mapping with 'name' and 'min_coverage_percentage'", key=key)
    name = entry.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ConfigFormatError(source, "package name must be a non-empty string", key=f"{key}.name")
    minimum = _percentage(entry.get(_MIN_KEY, 0), source=source, key=f"{key}.{_MIN_KEY}")
    return ConfigPackage(name=name.strip(), min_coverage_percent=minimum)


def parse_config(text: str, *, source: str = "<config>") -> ThresholdConfig:
    """Parse YAML configuration *text*."""
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigFormatError(source, f"invalid YAML: {exc}") from exc

    if raw is None:
        return ThresholdConfig()
    if not isinstance(raw, dict):
        raise ConfigFormatError(source, f"expected a mapping at the top level, got {type(raw).__name__}")

    default: float | None = None
    if raw.get(_MIN_KEY) is not None:
        default = _percentage(raw[_MIN_KEY], source=source, key=_MIN_KEY)

    entries = raw.get("packages") or []
    if not isinstance(entries, list):
        raise ConfigFormatError(source, "expected a list", key="packages")

    packages: list[ConfigPackage] = []
    seen: set[str] = set()
    for index, entry in enumerate(entries):
        pkg = _package(entry, index=index, source=source)
        if pkg.name in seen:
            raise ConfigFormatError(source, f"duplicate package {pkg.name!r}", key=f"packages[{index}].name")
        seen.add(pkg.name)
        packages.append(pkg)

    unknown = sorted(set(raw) - {_MIN_KEY, "packages"})
    if unknown:
        logger.debug("%s: ignoring unknown keys: %s", source, ", ".join(map(str, unknown)))

    return ThresholdConfig(packages=tuple(packages), min_coverage_percent=default)


def load_config(path: Path | None, *, cwd: Path | None = None) -> ThresholdConfig:
    """Load configuration from *path*, or from the default file in *cwd*.

    A missing default file yields an empty configuration; a missing file that
    was named explicitly is an error.
    """
    explicit = path is not None
    target = path if path is not None else (cwd or Path.cwd()) / DEFAULT_CONFIG_FILE
    if not target.is_file():
        if explicit:
            msg = f"config file not found: {target}"
            raise NoInputError(msg)
        logger.debug("no config file at %s", target)
        return ThresholdConfig()
    logger.debug("reading config from %s", target)
    try:
        text = target.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        msg = f"config file is not valid UTF-8 (byte {exc.start})"
        raise ConfigFormatError(str(target), msg) from exc
    return parse_config(text, source=str(target))


def dump_config(packages: Iterable[ConfigPackage], *, min_coverage_percent: float | None = None) -> str:
    """Serialise a configuration in the format :func:`parse_config` reads."""
    data: dict[str, Any] = {}
    if min_coverage_percent is not None:
        data[_MIN_KEY] = min_coverage_percent
    data["packages"] = [{"name": p.name, _MIN_KEY: p.min_coverage_percent} for p in packages]
    return yaml.safe_dump(data, sort_keys=False)


__all__ = [
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_SKIP_DIRS",
    "LOG_FORMAT",
    "ConfigPackage",
    "ThresholdConfig",
    "dump_config",
    "load_config",
    "parse_config",
]
