"""On-disk cache of downloaded assets and resolved binaries.

Every ``(owner, repo, version)`` gets one directory below the cache root::

    <owner>_<repo>_<version>/
        <asset name>                  downloaded release asset
        .binary_path                  resolved executable for the entry
        bin/                          archive extraction directory
        bin/.extracted_binary_path    binary located after extraction

A marker is trusted only while the path it names is an executable file.
"""

from __future__ import annotations

import abc
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

BINARY_MARKER = ".binary_path"
EXTRACTED_MARKER = ".extracted_binary_path"
EXTRACT_DIR = "bin"


@dataclass(frozen=True)
class CacheKey:
    """Identifies one cache entry."""

    owner: str
    repo: str
    version: str

    @property
    def dirname(self) -> str:
        return f"{self.owner}_{self.repo}_{self.version}"


def is_executable_file(path: Path) -> bool:
    return path.is_file() and os.access(path, os.X_OK)


class CacheStore(abc.ABC):
    """Storage for the three levels of memoization used by the pipeline."""

    @abc.abstractmethod
    def entry_dir(self, key: CacheKey) -> Path:
        """Directory holding the files of ``key``, created if needed."""

    @abc.abstractmethod
    def lookup(self, key: CacheKey) -> Path | None:
        """Return the resolved executable of ``key`` if still valid."""

    @abc.abstractmethod
    def record(self, key: CacheKey, binary_path: Path) -> None:
        """Remember the resolved executable of ``key``."""

    @abc.abstractmethod
    def lookup_extracted(self, key: CacheKey) -> Path | None:
        """Return the binary located after extraction if still valid."""

    @abc.abstractmethod
    def record_extracted(self, key: CacheKey, binary_path: Path) -> None:
        """Remember the binary located after extraction."""

    def asset_path(self, key: CacheKey, asset_name: str) -> Path:
        return self.entry_dir(key) / asset_name

    def extract_dir(self, key: CacheKey) -> Path:
        return self.entry_dir(key) / EXTRACT_DIR

    def has_asset(self, key: CacheKey, asset_name: str) -> bool:
        """Whether the asset was already downloaded with a non-zero size."""
        path = self.asset_path(key, asset_name)
        return path.is_file() and path.stat().st_size > 0


def _read_marker(marker: Path) -> Path | None:
    try:
        target = Path(marker.read_text().strip())
    except FileNotFoundError:
        return None
    if not target.is_absolute() or not is_executable_file(target):
        logger.debug("Ignoring stale marker %s", marker)
        return None
    return target


def _write_marker(marker: Path, target: Path) -> None:
    marker.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=marker.parent, prefix=marker.name)
    try:
        with os.fdopen(fd, "w") as f:
            f.write(str(target.resolve()))
        os.replace(tmp, marker)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class FileCacheStore(CacheStore):
    """Cache kept in marker files below a root directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"FileCacheStore({str(self.root)!r})"

    def entry_dir(self, key: CacheKey) -> Path:
        path = self.root / key.dirname
        path.mkdir(parents=True, exist_ok=True)
        return path

    def lookup(self, key: CacheKey) -> Path | None:
        return _read_marker(self.root / key.dirname / BINARY_MARKER)

    def record(self, key: CacheKey, binary_path: Path) -> None:
        _write_marker(self.entry_dir(key) / BINARY_MARKER, binary_path)

    def lookup_extracted(self, key: CacheKey) -> Path | None:
        return _read_marker(self.root / key.dirname / EXTRACT_DIR / EXTRACTED_MARKER)

    def record_extracted(self, key: CacheKey, binary_path: Path) -> None:
        _write_marker(self.extract_dir(key) / EXTRACTED_MARKER, binary_path)
