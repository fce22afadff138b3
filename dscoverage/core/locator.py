"""Source file discovery under the scan root."""

from __future__ import annotations

import logging
import os
from pathlib import Path

__all__ = ["DirectoryNotFoundError", "SourceReadError", "discover_files", "read_sources"]

logger = logging.getLogger(__name__)


class DirectoryNotFoundError(Exception):
    def __init__(self, path: Path, reason: str = "does not exist") -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Scan directory {path} {reason}")


class SourceReadError(Exception):
    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Could not read {path}: {reason}")


def _relative(path: Path, root: Path) -> str:
    return path.relative_to(root).as_posix()


def discover_files(root: Path, extensions: list[str], exclude: list[str]) -> list[Path]:
    """Return files under *root* with an allowed extension and no excluded substring.

    Exclusions are matched against the path relative to *root*, for
    directories as well as files, so an excluded directory is never entered.
    """
    root = Path(root).resolve()
    if not root.exists():
        raise DirectoryNotFoundError(root)
    if not root.is_dir():
        raise DirectoryNotFoundError(root, "is not a directory")

    allowed = set(extensions)
    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        dirnames[:] = [
            d for d in dirnames
            if not any(exc in _relative(current / d, root) + "/" for exc in exclude)
        ]
        for name in filenames:
            path = current / name
            if path.suffix not in allowed:
                continue
            if any(exc in _relative(path, root) for exc in exclude):
                continue
            files.append(path)
    logger.debug("Discovered %d file(s) under %s", len(files), root)
    return sorted(files)


def read_sources(paths: list[Path]) -> dict[Path, str]:
    """Read every file as UTF-8. Any failure aborts the whole batch."""
    contents: dict[Path, str] = {}
    for path in paths:
        try:
            contents[path] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SourceReadError(path, str(exc)) from exc
    return contents
