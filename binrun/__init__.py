"""binrun - Run binaries from GitHub releases.

Resolves a ``github.com/<owner>/<repo>[@<version>]`` reference to the
prebuilt release asset for the current platform, downloads and unpacks it
into a per-user cache, and runs it with the given arguments.
"""

from __future__ import annotations

__version__ = "0.1.0"

# Re-export commonly used functions
from .cache import CacheKey, CacheStore, FileCacheStore
from .config import BinrunConfig
from .download import download_file, find_matching_asset
from .extract import extract_archive
from .locate import find_binary_in_dir
from .reference import RepositoryReference, parse_reference
from .release import list_assets, resolve_latest_version
from .resolve import resolve_binary, run
from .utils import current_platform, setup_logging

__all__ = [
    "BinrunConfig",
    "CacheKey",
    "CacheStore",
    "FileCacheStore",
    "RepositoryReference",
    "current_platform",
    "download_file",
    "extract_archive",
    "find_binary_in_dir",
    "find_matching_asset",
    "list_assets",
    "parse_reference",
    "resolve_binary",
    "resolve_latest_version",
    "run",
    "setup_logging",
]
