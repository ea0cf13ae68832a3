"""Discover Go sources and map coverage profile file names onto them."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from pathspec import PathSpec

from checkcov._meta import logger
from checkcov.errors import LookupMiss, NoInputError

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)

ROOT_PACKAGE = "."


@dataclass(frozen=True, slots=True)
class SourceFile:
    """A discovered Go source file."""

    path: Path
    relative: str  # POSIX path relative to the source root

    @property
    def package_key(self) -> str:
        parent = PurePosixPath(self.relative).parent.as_posix()
        return ROOT_PACKAGE if parent in {"", "."} else parent


def resolve_source_root(path: str | Path | None, *, cwd: Path | None = None) -> Path:
    """Return *path* as an absolute directory (the working directory if omitted)."""
    base = cwd or Path.cwd()
    root = base if path is None else Path(path)
    if not root.is_absolute():
        root = base / root
    root = root.resolve()
    if not root.is_dir():
        msg = f"source directory not found: {root}"
        raise NoInputError(msg)
    return root


def _skip_spec(patterns: Iterable[str]) -> PathSpec:
    lines = []
    for pat in patterns:
        cleaned = pat.strip()
        if cleaned:
            lines.append(cleaned if cleaned.endswith("/") else f"{cleaned}/")
    return PathSpec.from_lines("gitwildmatch", lines)


def _ignored_by_go(name: str) -> bool:
    return name == "testdata" or name.startswith((".", "_"))


def discover_sources(root: Path, skip: Sequence[str] = ("vendor",)) -> list[SourceFile]:
    """Return the non-test ``.go`` files below *root*, sorted by relative path.

    Directories Go ignores (``testdata``, ``.x``, ``_x``) and directories
    matching *skip* (gitwildmatch patterns, e.g. ``vendor``) are not entered.
    """
    spec = _skip_spec(skip)
    found: list[SourceFile] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        kept = []
        for name in sorted(dirnames):
            rel = name if rel_dir == "." else f"{rel_dir}/{name}"
            if _ignored_by_go(name) or spec.match_file(f"{rel}/"):
                logger.debug("skipping directory %s", rel)
                continue
            kept.append(name)
        dirnames[:] = kept
        for name in sorted(filenames):
            if not name.endswith(".go") or name.endswith("_test.go"):
                continue
            rel = name if rel_dir == "." else f"{rel_dir}/{name}"
            found.append(SourceFile(path=current / name, relative=rel))
    found.sort(key=lambda f: f.relative)
    logger.debug("discovered %d Go files under %s", len(found), root)
    return found


def read_module_path(root: Path) -> str | None:
    """Return the ``module`` directive of the nearest ``go.mod`` at or above *root*."""
    for directory in (root, *root.parents):
        go_mod = directory / "go.mod"
        if not go_mod.is_file():
            continue
        match = _MODULE_RE.search(go_mod.read_text(encoding="utf-8"))
        if match is None:
            return None
        module = match.group(1).strip('"')
        rel = root.relative_to(directory).as_posix()
        return module if rel == "." else f"{module}/{rel}"
    return None


class ProfileIndex:
    """Resolve profile file names (import paths or file paths) to source files."""

    def __init__(self, root: Path, files: Sequence[SourceFile], *, module_path: str | None = None) -> None:
        self.root = root
        self.module_path = module_path
        self._by_relative = {f.relative: f for f in files}

    def resolve(self, file_name: str) -> SourceFile:
        """Return the source file *file_name* refers to; raise :class:`LookupMiss` otherwise."""
        name = file_name.replace("\\", "/")
        candidate = Path(file_name)
        if candidate.is_absolute():
            try:
                rel = candidate.resolve().relative_to(self.root).as_posix()
            except (OSError, ValueError):
                rel = None
            if rel is not None and rel in self._by_relative:
                return self._by_relative[rel]
        if self.module_path and not candidate.is_absolute():
            # Import paths of other modules never name local files.
            rel = name.removeprefix(f"{self.module_path}/").removeprefix("./")
            if rel in self._by_relative:
                return self._by_relative[rel]
            where = "has no source file in" if name.startswith(f"{self.module_path}/") else "is outside"
            msg = f"profile file {file_name!r} {where} module {self.module_path}"
            raise LookupMiss(msg)
        matches = [f for r, f in self._by_relative.items() if name == r or name.endswith(f"/{r}")]
        if matches:
            return max(matches, key=lambda f: len(f.relative))
        msg = f"profile file {file_name!r} does not match any source file under {self.root}"
        raise LookupMiss(msg)


__all__ = [
    "ROOT_PACKAGE",
    "ProfileIndex",
    "SourceFile",
    "discover_sources",
    "read_module_path",
    "resolve_source_root",
]
