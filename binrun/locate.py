"""Locate the executable inside an extracted archive.

The search is driven by named rules, each a pure predicate over a
:class:`Candidate`:

* ``ORDERING_RULES`` sort the entries of every directory. An entry that
  satisfies an earlier rule sorts before one that does not; ties keep the
  name order of the listing.
* ``STRICT_RULES`` must all accept a file in the first pass.
* ``LOOSE_RULES`` must all accept a file in the fallback pass, which runs
  only when the first pass finds nothing.
* ``PREFERENCE_RULE`` marks an accepted file as the intended binary. The
  first preferred file ends the search; otherwise the first accepted file
  is used.

Both passes walk the tree depth-first, visiting each directory in sorted
order, and never descend more than ``MAX_DEPTH`` levels below the root.
"""

from __future__ import annotations

import logging
import os
import re
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, NamedTuple

from .errors import BinaryNotFoundError
from .utils import log

logger = logging.getLogger(__name__)

MAX_DEPTH = 3

NON_BINARY_EXTENSIONS = (
    ".md",
    ".txt",
    ".json",
    ".yaml",
    ".yml",
    ".toml",
    ".cfg",
    ".ini",
    ".html",
    ".js",
    ".ts",
    ".css",
    ".scss",
    ".py",
    ".rb",
    ".go",
    ".rs",
    ".java",
    ".c",
    ".cpp",
    ".h",
    ".hpp",
)

_DOC_PREFIX_RE = re.compile(r"^(readme|license|changelog|contributing)", re.IGNORECASE)
_DOC_NAME_RE = re.compile(r"^(license|copying|readme|changelog|contributing)$", re.IGNORECASE)


class Candidate(NamedTuple):
    """A directory entry under consideration."""

    path: Path
    repo: str

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class Rule:
    """A named predicate over a candidate."""

    name: str
    check: Callable[[Candidate], bool]

    def __call__(self, candidate: Candidate) -> bool:
        return self.check(candidate)


def matches_repo_name(candidate: Candidate) -> bool:
    """The file name contains the repository name, case-insensitively."""
    return candidate.repo.lower() in candidate.name.lower()


def looks_like_documentation(candidate: Candidate) -> bool:
    """The file name starts with readme, license, changelog or contributing."""
    return bool(_DOC_PREFIX_RE.match(candidate.name))


def is_regular_file(candidate: Candidate) -> bool:
    return candidate.path.is_file()


def has_exec_bit(candidate: Candidate) -> bool:
    """Any of the user, group or other execute bits is set."""
    return bool(candidate.path.stat().st_mode & 0o111)


def has_binary_extension(candidate: Candidate) -> bool:
    """The file does not end in a source, config or documentation extension."""
    return not candidate.name.lower().endswith(NON_BINARY_EXTENSIONS)


def is_not_documentation(candidate: Candidate) -> bool:
    return not looks_like_documentation(candidate)


def has_no_extension_or_exe(candidate: Candidate) -> bool:
    return "." not in candidate.name or candidate.name.lower().endswith(".exe")


def is_not_documentation_name(candidate: Candidate) -> bool:
    """The file is not literally named LICENSE, COPYING, README and so on."""
    return not _DOC_NAME_RE.match(candidate.name)


ORDERING_RULES: tuple[Rule, ...] = (
    Rule("repository name first", matches_repo_name),
    Rule("documentation last", is_not_documentation),
)

STRICT_RULES: tuple[Rule, ...] = (
    Rule("regular file", is_regular_file),
    Rule("executable permission", has_exec_bit),
    Rule("binary extension", has_binary_extension),
    Rule("not documentation", is_not_documentation),
)

LOOSE_RULES: tuple[Rule, ...] = (
    Rule("regular file", is_regular_file),
    Rule("no extension or .exe", has_no_extension_or_exe),
    Rule("not documentation", is_not_documentation_name),
)

PREFERENCE_RULE = Rule("repository name", matches_repo_name)


def sort_candidates(candidates: list[Candidate]) -> list[Candidate]:
    """Order the entries of one directory by :data:`ORDERING_RULES`."""
    return sorted(
        candidates,
        key=lambda c: tuple(not rule(c) for rule in ORDERING_RULES),
    )


def _list_dir(directory: Path, repo: str) -> list[Candidate]:
    entries = sorted(os.listdir(directory))
    return sort_candidates([Candidate(directory / entry, repo) for entry in entries])


class SearchResult(NamedTuple):
    """Outcome of a traversal: the best file so far and whether to stop."""

    best: Path | None
    stop: bool


def _search(
    directory: Path,
    repo: str,
    rules: tuple[Rule, ...],
    depth: int = 0,
    best: Path | None = None,
) -> SearchResult:
    if depth > MAX_DEPTH:
        return SearchResult(best, stop=False)

    for candidate in _list_dir(directory, repo):
        if candidate.path.is_dir():
            result = _search(candidate.path, repo, rules, depth + 1, best)
            if result.stop:
                return result
            best = result.best
            continue
        if not all(rule(candidate) for rule in rules):
            continue
        if PREFERENCE_RULE(candidate):
            return SearchResult(candidate.path, stop=True)
        if best is None:
            best = candidate.path

    return SearchResult(best, stop=False)


def make_executable(path: Path) -> None:
    """Add the execute bits for user, group and other."""
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def find_binary_in_dir(directory: str | Path, repo: str) -> Path:
    """Find the binary for ``repo`` in an extracted directory tree.

    Raises :class:`BinaryNotFoundError` when neither pass finds a file. The
    returned file is made executable.
    """
    directory = Path(directory)
    best = _search(directory, repo, STRICT_RULES).best
    if best is None:
        log("No executable found, looking for files without extension", "debug")
        best = _search(directory, repo, LOOSE_RULES).best
    if best is None:
        msg = f"Could not find binary in extracted archive {directory}"
        raise BinaryNotFoundError(msg)

    make_executable(best)
    logger.debug("Located binary %s", best)
    return best
