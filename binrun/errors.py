"""Exceptions raised by binrun."""

from __future__ import annotations


class BinrunError(Exception):
    """Base class for all binrun failures."""

    def __init__(self, message: str) -> None:
        """Initialize the error with a human readable message."""
        self.message = message
        super().__init__(message)


class InvalidReferenceError(BinrunError):
    """The repository reference does not follow the expected grammar."""

    def __init__(self, reference: str) -> None:
        """Initialize the InvalidReferenceError."""
        self.reference = reference
        super().__init__(f"Invalid GitHub repository format: {reference}")


class RepositoryNotFoundError(BinrunError):
    """The repository does not exist or has no releases."""


class ReleaseNotFoundError(BinrunError):
    """The requested release tag does not exist."""


class ApiError(BinrunError):
    """The release API answered with an unexpected status code."""

    def __init__(self, status: int) -> None:
        """Initialize the ApiError."""
        self.status = status
        super().__init__(f"GitHub API returned status code {status}")


class MalformedResponseError(BinrunError):
    """The release API response could not be decoded."""


class UnsupportedPlatformError(BinrunError):
    """The host OS or architecture is not supported."""


class NoMatchingAssetError(BinrunError):
    """No release asset fits the host platform."""


class TooManyRedirectsError(BinrunError):
    """A download exceeded the redirect limit."""


class DownloadFailedError(BinrunError):
    """A download ended with a non-200 status."""

    def __init__(self, url: str, status: int) -> None:
        """Initialize the DownloadFailedError."""
        self.url = url
        self.status = status
        super().__init__(f"Failed to download {url}: server returned {status}")


class ArchiveExtractionError(BinrunError):
    """An archive could not be unpacked."""


class BinaryNotFoundError(BinrunError):
    """No executable could be located in an extracted archive."""


class ChildProcessFailedError(BinrunError):
    """The resolved binary could not be started."""


class NonZeroExitError(BinrunError):
    """The resolved binary exited with a non-zero code."""

    def __init__(self, code: int) -> None:
        """Initialize the NonZeroExitError."""
        self.code = code
        super().__init__(f"Process exited with code {code}")
