"""
Choosing which Unity installation's UnityYAMLMerge to run.

Policy:
1. ``force`` ignores the project and takes the newest installation.
2. A project's declared editor version wins when it is installed.
3. Otherwise the newest installation is used, unless the fallback
   policy is ``none``.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional

from uyamlt.core.errors import (
    NoInstallationsError,
    ProjectVersionNotFoundError,
    VersionNotInstalledError,
)
from uyamlt.core.installation import UnityInstallation, installations_by_version
from uyamlt.core.project import ProjectVersion, read_project_version
from uyamlt.core.version import version_sort_key

logger = logging.getLogger(__name__)


class FallbackPolicy(Enum):
    """What to do when the project does not pin an installed version."""
    LATEST = "latest"
    NONE = "none"


class SelectionReason(Enum):
    """Why an installation was selected."""
    PROJECT = "project"  # Matches the project's declared version
    LATEST = "latest"  # No project version; newest installed
    FALLBACK = "fallback"  # Declared version missing; newest installed
    FORCED = "forced"  # --force; newest installed


@dataclass
class SelectionRequest:
    """Inputs for choosing an installation."""
    project_root: Optional[Path] = None
    force: bool = False
    fallback: FallbackPolicy = FallbackPolicy.LATEST


@dataclass(frozen=True)
class Selection:
    """The chosen installation and why it was chosen."""
    installation: UnityInstallation
    reason: SelectionReason
    project_version: Optional[ProjectVersion] = field(default=None, compare=False)


def latest_installation(installations: list[UnityInstallation]) -> UnityInstallation:
    """
    Get the installation with the highest version.

    Raises:
        NoInstallationsError: If there are no installations
    """
    if not installations:
        raise NoInstallationsError()
    return max(installations, key=lambda i: version_sort_key(i.version))


def select_for_version(
    installations: list[UnityInstallation],
    declared: Optional[str],
    fallback: FallbackPolicy = FallbackPolicy.LATEST,
) -> Selection:
    """
    Apply the selection policy to an already-known declared version.

    Args:
        installations: Discovered installations
        declared: Version declared by the project, or None
        fallback: Whether to fall back to the newest installation

    Raises:
        NoInstallationsError: If there are no installations
        VersionNotInstalledError: Declared version missing and fallback is NONE
        ProjectVersionNotFoundError: Nothing declared and fallback is NONE
    """
    if not installations:
        raise NoInstallationsError()

    if declared is not None:
        by_version = installations_by_version(installations)
        if declared in by_version:
            return Selection(by_version[declared], SelectionReason.PROJECT)
        if fallback is FallbackPolicy.NONE:
            raise VersionNotInstalledError(declared, sorted(by_version, key=version_sort_key))
        latest = latest_installation(installations)
        logger.warning(
            f"Unity {declared} is not installed, falling back to {latest.version}"
        )
        return Selection(latest, SelectionReason.FALLBACK)

    if fallback is FallbackPolicy.NONE:
        raise ProjectVersionNotFoundError()
    return Selection(latest_installation(installations), SelectionReason.LATEST)


def choose_installation(
    installations: list[UnityInstallation],
    request: SelectionRequest,
) -> Selection:
    """
    Select the most appropriate installation for a request.

    Reads the project's ProjectVersion.txt when a project root is given.
    An invalid or unreadable version file is an error; a missing one
    counts as "no declared version".
    """
    if not installations:
        raise NoInstallationsError()

    if request.force:
        selection = Selection(latest_installation(installations), SelectionReason.FORCED)
        logger.info(f"Forced selection of {selection.installation}")
        return selection

    project_version = None
    if request.project_root is not None:
        try:
            project_version = read_project_version(request.project_root)
        except ProjectVersionNotFoundError:
            if request.fallback is FallbackPolicy.NONE:
                raise
            logger.info(f"{request.project_root} has no ProjectVersion.txt, choosing latest version")
    else:
        logger.info("Not inside a Unity project, choosing latest version")

    declared = project_version.editor_version if project_version else None
    selection = select_for_version(installations, declared, request.fallback)
    if project_version is not None:
        selection = Selection(selection.installation, selection.reason, project_version)

    logger.info(f"Selected {selection.installation} ({selection.reason.value})")
    return selection
