"""Release lookups against the GitHub REST API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import requests

from .config import BinrunConfig
from .errors import (
    ApiError,
    MalformedResponseError,
    ReleaseNotFoundError,
    RepositoryNotFoundError,
)
from .reference import LATEST
from .utils import log

logger = logging.getLogger(__name__)

ACCEPT_HEADER = "application/vnd.github.v3+json"


@dataclass(frozen=True)
class ReleaseAsset:
    """A downloadable file attached to a release."""

    name: str
    download_url: str
    size: int = 0

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> ReleaseAsset:
        return cls(
            name=data["name"],
            download_url=data["browser_download_url"],
            size=int(data.get("size") or 0),
        )


@dataclass(frozen=True)
class Release:
    """A tagged release and its assets, in API order."""

    tag_name: str
    assets: list[ReleaseAsset] = field(default_factory=list)


def _release_url(owner: str, repo: str, version: str, api_url: str) -> str:
    if version == LATEST:
        return f"{api_url}/repos/{owner}/{repo}/releases/latest"
    return f"{api_url}/repos/{owner}/{repo}/releases/tags/{version}"


def _parse_release(response: requests.Response) -> Release:
    try:
        data = response.json()
        tag_name = data["tag_name"]
        assets = [ReleaseAsset.from_api(asset) for asset in data.get("assets", [])]
    except (ValueError, KeyError, TypeError) as e:
        msg = f"Failed to parse GitHub API response: {e}"
        raise MalformedResponseError(msg) from e
    if not isinstance(tag_name, str) or not tag_name:
        msg = "Failed to parse GitHub API response: missing tag_name"
        raise MalformedResponseError(msg)
    return Release(tag_name=tag_name, assets=assets)


def fetch_release(
    owner: str,
    repo: str,
    version: str = LATEST,
    config: BinrunConfig | None = None,
) -> Release:
    """Get release information from GitHub.

    ``version`` is either ``"latest"`` or a tag name. A single request is
    made; responses are not cached.
    """
    if config is None:
        config = BinrunConfig()

    url = _release_url(owner, repo, version, config.api_url.rstrip("/"))
    log(f"Fetching release from {url}", "debug")
    response = requests.get(
        url,
        headers={"User-Agent": config.user_agent, "Accept": ACCEPT_HEADER},
        timeout=config.timeout,
    )
    logger.debug("GET %s -> %s", url, response.status_code)

    if response.status_code == 404:  # noqa: PLR2004
        if version == LATEST:
            msg = f"Repository {owner}/{repo} not found or has no releases"
            raise RepositoryNotFoundError(msg)
        msg = f"Release {version} not found for {owner}/{repo}"
        raise ReleaseNotFoundError(msg)
    if response.status_code != 200:  # noqa: PLR2004
        raise ApiError(response.status_code)

    return _parse_release(response)


def resolve_latest_version(
    owner: str,
    repo: str,
    config: BinrunConfig | None = None,
) -> str:
    """Return the tag name of the latest release."""
    return fetch_release(owner, repo, LATEST, config).tag_name


def list_assets(
    owner: str,
    repo: str,
    version: str,
    config: BinrunConfig | None = None,
) -> list[ReleaseAsset]:
    """Return the assets of a release, ``version`` may be ``"latest"``."""
    return fetch_release(owner, repo, version, config).assets
