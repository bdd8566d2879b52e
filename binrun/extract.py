"""Extract release archives and locate the binary inside them."""

from __future__ import annotations

import logging
import tarfile
import zipfile
import zlib
from pathlib import Path

from .download import ArchiveKind
from .errors import ArchiveExtractionError
from .locate import find_binary_in_dir
from .utils import log

logger = logging.getLogger(__name__)


def _unpack_tar_gz(archive_path: Path, extract_dir: Path) -> None:
    # extraction filters arrived in 3.10.12, 3.11.4 and 3.12
    if not hasattr(tarfile, "data_filter"):
        msg = (
            f"Cannot safely extract {archive_path.name}: this Python lacks tarfile "
            "extraction filters, upgrade to 3.10.12, 3.11.4 or newer"
        )
        raise ArchiveExtractionError(msg)
    # "r|gz" reads the archive as one gunzip -> untar stream
    with tarfile.open(archive_path, mode="r|gz") as tar:
        tar.extractall(path=extract_dir, filter="data")


def _zip_mode(info: zipfile.ZipInfo) -> int:
    """Unix permission bits stored in a zip entry, 0 when absent."""
    return (info.external_attr >> 16) & 0o777


def _unpack_zip(archive_path: Path, extract_dir: Path) -> None:
    with zipfile.ZipFile(archive_path) as zip_file:
        for info in zip_file.infolist():
            target = Path(zip_file.extract(info, path=extract_dir))
            mode = _zip_mode(info)
            if mode and not info.is_dir():
                target.chmod(mode)


def _extract(archive_path: str | Path, extract_dir: str | Path, kind: ArchiveKind) -> Path:
    archive_path = Path(archive_path)
    extract_dir = Path(extract_dir)
    extract_dir.mkdir(parents=True, exist_ok=True)
    log(f"Extracting {archive_path.name} to {extract_dir}", "debug")

    try:
        if kind is ArchiveKind.TAR:
            _unpack_tar_gz(archive_path, extract_dir)
        elif kind is ArchiveKind.ZIP:
            _unpack_zip(archive_path, extract_dir)
        else:
            msg = f"Unsupported archive format: {archive_path}"
            raise ArchiveExtractionError(msg)
    except (tarfile.TarError, zipfile.BadZipFile, zlib.error, EOFError, OSError) as e:
        msg = f"Failed to extract {archive_path.name}: {e}"
        raise ArchiveExtractionError(msg) from e

    logger.debug("Extracted %s", archive_path)
    return extract_dir


def extract_tar_gz(archive_path: str | Path, extract_dir: str | Path, repo: str) -> Path:
    """Unpack a ``.tar.gz`` archive and return the path of its binary."""
    return find_binary_in_dir(_extract(archive_path, extract_dir, ArchiveKind.TAR), repo)


def extract_zip(archive_path: str | Path, extract_dir: str | Path, repo: str) -> Path:
    """Unpack a ``.zip`` archive and return the path of its binary."""
    return find_binary_in_dir(_extract(archive_path, extract_dir, ArchiveKind.ZIP), repo)


def extract_archive(
    archive_path: str | Path,
    extract_dir: str | Path,
    kind: ArchiveKind,
    repo: str,
) -> Path:
    """Unpack an archive of the given kind and return the path of its binary."""
    if kind is ArchiveKind.TAR:
        return extract_tar_gz(archive_path, extract_dir, repo)
    if kind is ArchiveKind.ZIP:
        return extract_zip(archive_path, extract_dir, repo)
    msg = f"Unsupported archive format: {archive_path}"
    raise ArchiveExtractionError(msg)
