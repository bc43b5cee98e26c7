"""
Errors raised while resolving and invoking UnityYAMLMerge.

Every error carries the process exit code the command line should end with.
"""

from pathlib import Path
from typing import Optional


class TrampolineError(Exception):
    """Base class for all resolution and invocation failures."""

    exit_code = 1


class UnsupportedPlatformError(TrampolineError):
    def __init__(self, system: str):
        super().__init__(f"Unity is not officially supported on this OS: {system}")
        self.system = system


class NoInstallationsError(TrampolineError):
    def __init__(self, searched: Optional[list[Path]] = None):
        self.searched = searched or []
        message = "Could not find any Unity installations"
        if self.searched:
            message += " in " + ", ".join(str(p) for p in self.searched)
        super().__init__(message)


class VersionNotInstalledError(TrampolineError):
    """The project declares an editor version that is not installed."""

    def __init__(self, version: str, installed: list[str]):
        self.version = version
        self.installed = installed
        available = ", ".join(installed) if installed else "none"
        super().__init__(
            f"Unity {version} required by the project is not installed "
            f"(installed: {available})"
        )


class ProjectVersionNotFoundError(TrampolineError):
    def __init__(self, project_root: Optional[Path] = None):
        self.project_root = project_root
        if project_root is None:
            message = "Could not find a Unity project to read ProjectVersion.txt from"
        else:
            message = f"Could not find ProjectVersion.txt for project {project_root}"
        super().__init__(message)


class InvalidProjectVersionError(TrampolineError):
    def __init__(self, path: Optional[Path] = None):
        self.path = path
        where = f": {path}" if path else ""
        super().__init__(f"Invalid project version file detected{where}")


class ProjectVersionUnreadableError(TrampolineError):
    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Could not read {path}: {reason}")


class MergeToolNotFoundError(TrampolineError):
    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"Could not find UnityYAMLMerge at {path}")


class InvocationError(TrampolineError):
    """Spawning the merge executable failed."""

    def __init__(self, executable: Path, reason: str, exit_code: int = 126):
        super().__init__(f"Could not run {executable}: {reason}")
        self.executable = executable
        self.exit_code = exit_code
