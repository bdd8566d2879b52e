"""Asset selection and download functions for binrun."""

from __future__ import annotations

import enum
import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable
from urllib.parse import urljoin

import requests

from .errors import DownloadFailedError, NoMatchingAssetError, TooManyRedirectsError
from .release import ReleaseAsset
from .utils import PlatformIdentity, log

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192
DEFAULT_REDIRECT_LIMIT = 5


class ArchiveKind(str, enum.Enum):
    """How a release asset has to be unpacked."""

    NONE = "none"
    TAR = "tar"
    ZIP = "zip"


@dataclass(frozen=True)
class MatchedAsset:
    """A release asset chosen for the host platform."""

    name: str
    download_url: str
    size: int
    archive_kind: ArchiveKind

    @property
    def is_archive(self) -> bool:
        return self.archive_kind is not ArchiveKind.NONE


@dataclass(frozen=True)
class AssetRule:
    """One matching pass: a regex builder and the archive kind it implies."""

    name: str
    archive_kind: ArchiveKind
    pattern: Callable[[str, str, str, PlatformIdentity], str]


def _tar_pattern(repo: str, os_pattern: str, arch: str, _: PlatformIdentity) -> str:
    return rf"{repo}_{os_pattern}_{arch}\.(?:tar\.gz|tgz)"


def _zip_pattern(repo: str, os_pattern: str, arch: str, _: PlatformIdentity) -> str:
    return rf"{repo}_{os_pattern}_{arch}\.zip"


def _binary_pattern(repo: str, os_pattern: str, arch: str, platform: PlatformIdentity) -> str:
    ext = r"\.exe" if platform.is_windows else ""
    return rf"{repo}(?:_{os_pattern}_{arch})?{ext}"


# Tried in order, first rule with a matching asset wins.
ASSET_RULES: tuple[AssetRule, ...] = (
    AssetRule("tar archive", ArchiveKind.TAR, _tar_pattern),
    AssetRule("zip archive", ArchiveKind.ZIP, _zip_pattern),
    AssetRule("direct binary", ArchiveKind.NONE, _binary_pattern),
)


def asset_regex(rule: AssetRule, repo: str, platform: PlatformIdentity) -> re.Pattern[str]:
    """Compile the case-insensitive regex of ``rule`` for a repo and platform."""
    os_pattern = "(?:" + "|".join(re.escape(name) for name in platform.os_aliases) + ")"
    pattern = rule.pattern(re.escape(repo), os_pattern, re.escape(platform.arch_name), platform)
    return re.compile(pattern, re.IGNORECASE)


def find_matching_asset(
    assets: list[ReleaseAsset],
    platform: PlatformIdentity,
    repo: str,
) -> MatchedAsset:
    """Pick the release asset for ``platform``.

    Each of :data:`ASSET_RULES` is tried in turn against the whole asset
    list; within a rule the first asset in API order wins. Asset names must
    match a rule's regex completely.
    """
    for rule in ASSET_RULES:
        regex = asset_regex(rule, repo, platform)
        for asset in assets:
            if regex.fullmatch(asset.name):
                log(f"Found matching asset: {asset.name} ({rule.name})", "debug")
                return MatchedAsset(
                    name=asset.name,
                    download_url=asset.download_url,
                    size=asset.size,
                    archive_kind=rule.archive_kind,
                )

    msg = f"No matching binary found for {platform.os_name} {platform.arch_name}"
    raise NoMatchingAssetError(msg)


def _is_redirect(response: requests.Response) -> bool:
    return 300 <= response.status_code < 400 and "Location" in response.headers  # noqa: PLR2004


def _write_stream(response: requests.Response, destination: Path) -> None:
    """Write the response body to ``destination``, removing it on failure."""
    try:
        with open(destination, "wb") as f:
            for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                f.write(chunk)
    except BaseException:
        destination.unlink(missing_ok=True)
        raise


def download_file(
    url: str,
    destination: str | Path,
    redirect_limit: int = DEFAULT_REDIRECT_LIMIT,
    user_agent: str = "binrun",
    timeout: float | None = None,
) -> Path:
    """Download a file from a URL to a destination path.

    Redirects are followed by hand, at most ``redirect_limit`` of them.
    The body is streamed to ``destination``; if streaming fails the partial
    file is deleted before the error propagates.
    """
    destination = Path(destination)
    remaining = redirect_limit
    headers = {"User-Agent": user_agent}

    while True:
        log(f"Downloading from {url}", "debug")
        with requests.get(
            url,
            headers=headers,
            stream=True,
            allow_redirects=False,
            timeout=timeout,
        ) as response:
            if _is_redirect(response):
                if remaining <= 0:
                    msg = f"Too many redirects while downloading {url}"
                    raise TooManyRedirectsError(msg)
                remaining -= 1
                url = urljoin(url, response.headers["Location"])
                log(f"Following redirect to {url}", "debug")
                continue

            if response.status_code != 200:  # noqa: PLR2004
                raise DownloadFailedError(url, response.status_code)

            _write_stream(response, destination)
            logger.debug("Saved %s to %s", url, destination)
            return destination
