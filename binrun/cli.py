"""Command-line interface for binrun."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import NoReturn

from . import __version__
from .config import BinrunConfig
from .resolve import run
from .utils import is_verbose, log, setup_logging


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    """Create command-line argument parser."""
    parser = _ArgumentParser(
        prog="binrun",
        description="binrun - Run prebuilt binaries from GitHub releases",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print what binrun is doing to stderr",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        help="Path to configuration file (default: ~/.binrun/config.yaml)",
    )
    parser.add_argument(
        "--cache-dir",
        type=str,
        help="Cache directory (default: ~/.binrun/cache)",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"binrun v{__version__}",
    )
    parser.add_argument(
        "reference",
        nargs="?",
        help="Repository as github.com/<owner>/<repo>[@<version>]",
    )
    parser.add_argument(
        "args",
        nargs=argparse.REMAINDER,
        help="Arguments passed to the binary",
    )
    return parser


_VALUE_OPTIONS = ("--config-file", "--cache-dir")


def _reference_index(argv: list[str]) -> int | None:
    """Index of the repository reference in ``argv``, skipping binrun's options."""
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--":
            return i + 1 if i + 1 < len(argv) else None
        if arg in _VALUE_OPTIONS:
            i += 2
            continue
        if not arg.startswith("-"):
            return i
        i += 1
    return None


def parse_arguments(
    parser: argparse.ArgumentParser,
    argv: list[str] | None = None,
) -> argparse.Namespace:
    """Parse binrun's own options and keep everything after the reference verbatim.

    ``argparse.REMAINDER`` drops a ``--`` that follows the reference, so the
    child's arguments are sliced off ``argv`` before parsing.
    """
    if argv is None:
        argv = sys.argv[1:]
    index = _reference_index(argv)
    if index is None:
        return parser.parse_args(argv)
    args = parser.parse_args(argv[: index + 1])
    args.args = argv[index + 1 :]
    return args


def main(argv: list[str] | None = None) -> None:
    """Main function to parse arguments and run the binary."""
    parser = create_parser()
    args = parse_arguments(parser, argv)

    setup_logging(args.debug)

    if not args.reference:
        parser.error("a repository reference such as github.com/owner/repo is required")

    try:
        config = BinrunConfig.load_from_file(args.config_file)

        # Override cache directory if specified
        if args.cache_dir:
            config.cache_dir = Path(args.cache_dir).expanduser()

        run(args.reference, args.args, config=config)

    except Exception as e:  # noqa: BLE001
        log(f"Error: {e!s}", "error", print_exception=is_verbose())
        sys.exit(1)


if __name__ == "__main__":
    main()
