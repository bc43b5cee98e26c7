"""Core logic for discovering, selecting and running UnityYAMLMerge."""

from uyamlt.core.errors import (
    InvalidProjectVersionError,
    InvocationError,
    MergeToolNotFoundError,
    NoInstallationsError,
    ProjectVersionNotFoundError,
    ProjectVersionUnreadableError,
    TrampolineError,
    UnsupportedPlatformError,
    VersionNotInstalledError,
)
from uyamlt.core.installation import (
    OperatingSystem,
    UnityInstallation,
    discover_installations,
    installations_by_version,
)
from uyamlt.core.invoker import MergeCommand, build_command, invoke
from uyamlt.core.project import ProjectVersion, read_project_version
from uyamlt.core.selector import (
    FallbackPolicy,
    Selection,
    SelectionReason,
    SelectionRequest,
    choose_installation,
)
from uyamlt.core.version import UnityVersion, parse_version

__all__ = [
    "InvalidProjectVersionError",
    "InvocationError",
    "MergeToolNotFoundError",
    "NoInstallationsError",
    "ProjectVersionNotFoundError",
    "ProjectVersionUnreadableError",
    "TrampolineError",
    "UnsupportedPlatformError",
    "VersionNotInstalledError",
    "OperatingSystem",
    "UnityInstallation",
    "discover_installations",
    "installations_by_version",
    "MergeCommand",
    "build_command",
    "invoke",
    "ProjectVersion",
    "read_project_version",
    "FallbackPolicy",
    "Selection",
    "SelectionReason",
    "SelectionRequest",
    "choose_installation",
    "UnityVersion",
    "parse_version",
]
