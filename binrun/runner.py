"""Run the resolved binary."""

from __future__ import annotations

import subprocess
from pathlib import Path

from .errors import ChildProcessFailedError, NonZeroExitError
from .utils import log


def run_binary(executable: str | Path, args: list[str]) -> None:
    """Run ``executable`` with ``args`` and wait for it to exit.

    Standard streams and the environment are inherited unchanged. A
    non-zero exit raises :class:`NonZeroExitError`.
    """
    command = [str(executable), *args]
    log(f"Running {' '.join(command)}", "debug")
    try:
        completed = subprocess.run(command, check=False)  # noqa: S603
    except OSError as e:
        msg = f"Failed to start {executable}: {e}"
        raise ChildProcessFailedError(msg) from e
    if completed.returncode != 0:
        raise NonZeroExitError(completed.returncode)
