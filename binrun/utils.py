"""Utility functions for binrun."""

from __future__ import annotations

import logging
import platform as _platform
from dataclasses import dataclass
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from .errors import UnsupportedPlatformError

# stdout belongs to the wrapped binary
console = Console(stderr=True)

_VERBOSE = False

logger = logging.getLogger("binrun")

_OS_NAMES = {
    "darwin": "Darwin",
    "linux": "Linux",
    "windows": "Windows",
}

_ARCH_NAMES = {
    "x86_64": "x86_64",
    "amd64": "x86_64",
    "x64": "x86_64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "i386": "386",
    "i686": "386",
    "x86": "386",
}


def setup_logging(verbose: bool = False) -> None:  # noqa: FBT001, FBT002
    """Configure logging level based on verbosity."""
    global _VERBOSE
    _VERBOSE = verbose
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_time=False, show_path=False))
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def log(
    message: str,
    level: Literal["debug", "warning", "error"] = "debug",
    print_exception: bool = False,  # noqa: FBT001, FBT002
) -> None:
    """Print a message to stderr, colored by level.

    ``debug`` messages are only shown after ``setup_logging(verbose=True)``.
    """
    if level == "debug" and not _VERBOSE:
        return
    if level == "debug":
        console.print(f"🐛 [dim]{escape(message)}[/dim]", highlight=False, soft_wrap=True)
    elif level == "warning":
        console.print(f"⚠️ [yellow]{escape(message)}[/yellow]", highlight=False, soft_wrap=True)
    elif level == "error":
        console.print(f"❌ [bold red]{escape(message)}[/bold red]", highlight=False, soft_wrap=True)
    if print_exception:
        console.print_exception()


def is_verbose() -> bool:
    """Return whether debug output is enabled."""
    return _VERBOSE


@dataclass(frozen=True)
class PlatformIdentity:
    """OS and architecture names as they appear in release asset names."""

    os_name: str
    arch_name: str

    @property
    def is_windows(self) -> bool:
        return self.os_name == "Windows"

    @property
    def os_aliases(self) -> tuple[str, ...]:
        """Names an asset may use for this OS."""
        if self.os_name == "Darwin":
            return ("Darwin", "macOS")
        return (self.os_name,)


def current_platform(
    system: str | None = None,
    machine: str | None = None,
) -> PlatformIdentity:
    """Detect the current platform and architecture.

    ``system`` and ``machine`` default to the values reported by the
    :mod:`platform` module and can be passed explicitly for testing.
    """
    system = (system if system is not None else _platform.system()).lower()
    machine = (machine if machine is not None else _platform.machine()).lower()

    if system not in _OS_NAMES:
        msg = f"Unsupported platform: {system}"
        raise UnsupportedPlatformError(msg)
    if machine not in _ARCH_NAMES:
        msg = f"Unsupported architecture: {machine}"
        raise UnsupportedPlatformError(msg)

    return PlatformIdentity(os_name=_OS_NAMES[system], arch_name=_ARCH_NAMES[machine])
