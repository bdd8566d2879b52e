"""Resolve a repository reference to a cached, runnable binary."""

from __future__ import annotations

import logging
from pathlib import Path

from .cache import CacheKey, CacheStore, FileCacheStore
from .config import BinrunConfig
from .download import MatchedAsset, download_file, find_matching_asset
from .extract import extract_archive
from .locate import make_executable
from .reference import RepositoryReference, parse_reference
from .release import Release, fetch_release, list_assets
from .runner import run_binary
from .utils import PlatformIdentity, current_platform, log

logger = logging.getLogger(__name__)


def _fetch_asset(
    asset: MatchedAsset,
    key: CacheKey,
    cache: CacheStore,
    config: BinrunConfig,
) -> Path:
    """Download ``asset`` unless a non-empty copy is already cached."""
    asset_path = cache.asset_path(key, asset.name)
    if cache.has_asset(key, asset.name):
        log(f"Using previously downloaded {asset.name}", "debug")
        return asset_path
    log(f"Downloading {asset.download_url}...", "debug")
    return download_file(
        asset.download_url,
        asset_path,
        redirect_limit=config.redirect_limit,
        user_agent=config.user_agent,
        timeout=config.timeout,
    )


def _prepare_executable(
    asset: MatchedAsset,
    key: CacheKey,
    cache: CacheStore,
    config: BinrunConfig,
) -> Path:
    asset_path = _fetch_asset(asset, key, cache, config)

    if not asset.is_archive:
        make_executable(asset_path)
        return asset_path

    extracted = cache.lookup_extracted(key)
    if extracted is not None:
        log("Using previously extracted binary", "debug")
    else:
        extracted = extract_archive(
            asset_path,
            cache.extract_dir(key),
            asset.archive_kind,
            key.repo,
        )
        cache.record_extracted(key, extracted)
    make_executable(extracted)
    return extracted


def resolve_binary(
    reference: str | RepositoryReference,
    config: BinrunConfig | None = None,
    cache: CacheStore | None = None,
    platform: PlatformIdentity | None = None,
) -> Path:
    """Return the path of the executable for ``reference``.

    The release is looked up only as far as needed: a pinned version whose
    cache entry is valid costs no network call, ``latest`` costs one.
    Download, extraction and the binary search are each skipped when the
    cache already holds their result.
    """
    if isinstance(reference, str):
        reference = parse_reference(reference)
    if config is None:
        config = BinrunConfig()
    if cache is None:
        cache = FileCacheStore(config.cache_dir)

    owner, repo = reference.owner, reference.repo
    release: Release | None = None
    if reference.is_latest:
        # the latest endpoint returns the tag together with its assets
        release = fetch_release(owner, repo, reference.version, config)
        version = release.tag_name
    else:
        version = reference.version
    log(f"Using {owner}/{repo}@{version}", "debug")

    key = CacheKey(owner, repo, version)
    cached = cache.lookup(key)
    if cached is not None:
        log("Using cached binary", "debug")
        return cached

    assets = release.assets if release is not None else list_assets(owner, repo, version, config)
    if platform is None:
        platform = current_platform()
    asset = find_matching_asset(assets, platform, repo)

    executable = _prepare_executable(asset, key, cache, config).resolve()
    cache.record(key, executable)
    logger.debug("Resolved %s to %s", reference, executable)
    return executable


def run(
    reference: str | RepositoryReference,
    args: list[str],
    config: BinrunConfig | None = None,
    cache: CacheStore | None = None,
) -> None:
    """Resolve ``reference`` and run the binary with ``args``."""
    executable = resolve_binary(reference, config=config, cache=cache)
    run_binary(executable, args)
