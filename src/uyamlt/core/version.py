"""
Unity editor version identifiers.

Unity versions look like ``2022.3.11f1``: major, minor and patch numbers,
a release type letter, a build number, and an optional regional suffix
such as ``c1`` for China builds. Plain string ordering gets these wrong
(``2022.3.9f1`` sorts after ``2022.3.10f1``), so they are parsed first.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

# x = experimental, a = alpha, b = beta, f = final, p = patch
RELEASE_TYPE_RANK = {"x": 0, "a": 1, "b": 2, "f": 3, "p": 4}

VERSION_PATTERN = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)\.(?P<patch>\d+)"
    r"(?:(?P<type>[xabfp])(?P<build>\d+))?"
    r"(?P<suffix>.*)$"
)


@dataclass(frozen=True, order=True)
class UnityVersion:
    """A parsed Unity editor version, ordered by release."""
    major: int
    minor: int
    patch: int
    release_rank: int
    build: int
    suffix: str
    raw: str = field(compare=False)

    @property
    def release_type(self) -> str:
        for letter, rank in RELEASE_TYPE_RANK.items():
            if rank == self.release_rank:
                return letter
        return ""

    def __str__(self) -> str:
        return self.raw


def parse_version(text: str) -> Optional[UnityVersion]:
    """
    Parse a Unity editor version string.

    Args:
        text: Version such as "2022.3.11f1" or "6000.0.23f1c1"

    Returns:
        UnityVersion, or None if the text is not a Unity version
    """
    match = VERSION_PATTERN.match(text.strip())
    if not match:
        return None

    release_type = match.group("type")
    if release_type:
        rank = RELEASE_TYPE_RANK[release_type]
        build = int(match.group("build"))
    else:
        # "2022.3.11" with no release letter is treated as a final build 0
        rank = RELEASE_TYPE_RANK["f"]
        build = 0

    return UnityVersion(
        major=int(match.group("major")),
        minor=int(match.group("minor")),
        patch=int(match.group("patch")),
        release_rank=rank,
        build=build,
        suffix=match.group("suffix"),
        raw=text,
    )


def version_sort_key(text: str) -> tuple:
    """
    Sort key that orders any set of version strings deterministically.

    Parseable versions sort above unparseable ones. Unparseable ones are
    ordered by their raw text, and so are parseable ties.
    """
    parsed = parse_version(text)
    if parsed is None:
        return (0, (), text)
    return (1, parsed, text)


def latest_version(versions) -> Optional[str]:
    """Return the highest version string from an iterable, or None if empty."""
    versions = list(versions)
    if not versions:
        return None
    return max(versions, key=version_sort_key)
