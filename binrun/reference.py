"""Parsing of ``github.com/owner/repo[@version]`` references."""

from __future__ import annotations

import re
from dataclasses import dataclass

from .errors import InvalidReferenceError

LATEST = "latest"

_REFERENCE_RE = re.compile(r"github\.com/([\w.-]+)/([\w.-]+)(?:@([\w.-]+))?", re.ASCII)


@dataclass(frozen=True)
class RepositoryReference:
    """A repository on GitHub and the release version to use."""

    owner: str
    repo: str
    version: str = LATEST

    @property
    def is_latest(self) -> bool:
        return self.version == LATEST

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"

    def __str__(self) -> str:
        """Serialize back to the reference grammar."""
        reference = f"github.com/{self.owner}/{self.repo}"
        if not self.is_latest:
            reference += f"@{self.version}"
        return reference


def parse_reference(reference: str) -> RepositoryReference:
    """Parse a reference such as ``github.com/acme/widget@v1.2.0``.

    The version defaults to ``"latest"``. Anything that does not match the
    grammar exactly raises :class:`InvalidReferenceError`; no normalization
    of case or trailing slashes is attempted.
    """
    match = _REFERENCE_RE.fullmatch(reference)
    if not match:
        raise InvalidReferenceError(reference)
    owner, repo, version = match.groups()
    return RepositoryReference(owner=owner, repo=repo, version=version or LATEST)
