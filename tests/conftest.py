"""Configuration for pytest fixtures used in binrun tests."""

from __future__ import annotations

import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable

import pytest

from binrun.config import BinrunConfig
from binrun.utils import PlatformIdentity


@pytest.fixture(autouse=True)
def _quiet(monkeypatch: pytest.MonkeyPatch) -> None:
    """Start every test with debug output disabled."""
    monkeypatch.setattr("binrun.utils._VERBOSE", False)


@pytest.fixture
def config(tmp_path: Path) -> BinrunConfig:
    """A configuration whose cache lives in the test's temporary directory."""
    return BinrunConfig(cache_dir=tmp_path / "cache")


@pytest.fixture
def linux_amd64() -> PlatformIdentity:
    return PlatformIdentity(os_name="Linux", arch_name="x86_64")


@pytest.fixture
def darwin_arm64() -> PlatformIdentity:
    return PlatformIdentity(os_name="Darwin", arch_name="arm64")


@pytest.fixture
def windows_amd64() -> PlatformIdentity:
    return PlatformIdentity(os_name="Windows", arch_name="x86_64")


@pytest.fixture
def release_json() -> Callable:
    """Build a release payload shaped like the GitHub API response."""

    def _release_json(tag: str, asset_names: list[str]) -> dict:
        return {
            "tag_name": tag,
            "assets": [
                {
                    "name": name,
                    "browser_download_url": f"https://github.com/dl/{tag}/{name}",
                    "size": 1024,
                }
                for name in asset_names
            ],
        }

    return _release_json


@pytest.fixture
def create_dummy_archive() -> Callable:
    r"""Create an archive file with binary files for testing.

    Returns a function that creates archive files with specified binaries.

    Usage:
        archive_path = create_dummy_archive(
            dest_path=tmp_path / "test.tar.gz",
            binary_names=["mybinary", "otherbinary"],
            archive_type="tar.gz",
            extra_files={"README.md": "docs"},
        )
    """

    def _create_archive(
        dest_path: Path,
        binary_names: str | list[str],
        archive_type: str = "tar.gz",
        binary_content: str = "#!/bin/sh\necho test\n",
        nested_dir: str | None = None,
        extra_files: dict[str, str] | None = None,
    ) -> Path:
        if isinstance(binary_names, str):
            binary_names = [binary_names]

        with tempfile.TemporaryDirectory() as tmp_dir:
            tmp_path = Path(tmp_dir)

            # Create nested directory if requested
            if nested_dir:
                bin_dir = tmp_path / nested_dir
                bin_dir.mkdir(exist_ok=True, parents=True)
            else:
                bin_dir = tmp_path

            created_files = []
            for binary in binary_names:
                bin_file = bin_dir / binary
                bin_file.write_text(binary_content)
                bin_file.chmod(0o755)
                created_files.append(bin_file)

            for name, content in (extra_files or {}).items():
                extra_file = bin_dir / name
                extra_file.write_text(content)
                extra_file.chmod(0o644)
                created_files.append(extra_file)

            if archive_type == "tar.gz":
                with tarfile.open(dest_path, "w:gz") as tar:
                    for file_path in created_files:
                        archive_path = file_path.relative_to(tmp_path)
                        tar.add(file_path, arcname=str(archive_path))
            elif archive_type == "zip":
                with zipfile.ZipFile(dest_path, "w") as zipf:
                    for file_path in created_files:
                        archive_path = file_path.relative_to(tmp_path)
                        zipf.write(file_path, arcname=str(archive_path))
            else:  # pragma: no cover
                msg = f"Unsupported archive type: {archive_type}"
                raise ValueError(msg)

            return dest_path

    return _create_archive
