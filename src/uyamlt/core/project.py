"""
Reading the editor version a Unity project was saved with.

Unity writes ``ProjectSettings/ProjectVersion.txt`` into every project::

    m_EditorVersion: 2022.3.11f1
    m_EditorVersionWithRevision: 2022.3.11f1 (d00248457e15)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from uyamlt.core.errors import (
    InvalidProjectVersionError,
    ProjectVersionNotFoundError,
    ProjectVersionUnreadableError,
)

logger = logging.getLogger(__name__)

PROJECT_VERSION_FILE = Path("ProjectSettings") / "ProjectVersion.txt"

EDITOR_VERSION_KEY = "m_EditorVersion:"
EDITOR_REVISION_KEY = "m_EditorVersionWithRevision:"


@dataclass(frozen=True)
class ProjectVersion:
    """Editor version declared by a Unity project."""
    editor_version: str
    revision: Optional[str] = None  # Changeset hash, e.g. "d00248457e15"
    path: Optional[Path] = None


def parse_project_version(text: str, path: Optional[Path] = None) -> ProjectVersion:
    """
    Parse the contents of a ProjectVersion.txt file.

    Args:
        text: File contents
        path: Where the contents came from (for error messages)

    Raises:
        InvalidProjectVersionError: If no m_EditorVersion line is present
    """
    editor_version = None
    revision = None

    for line in text.splitlines():
        line = line.strip()
        if line.startswith(EDITOR_VERSION_KEY):
            editor_version = line[len(EDITOR_VERSION_KEY):].strip()
        elif line.startswith(EDITOR_REVISION_KEY):
            # "2022.3.11f1 (d00248457e15)"
            value = line[len(EDITOR_REVISION_KEY):].strip()
            if "(" in value and value.endswith(")"):
                revision = value[value.index("(") + 1:-1].strip() or None

    if not editor_version:
        raise InvalidProjectVersionError(path)

    return ProjectVersion(editor_version=editor_version, revision=revision, path=path)


def locate_project_version_file(project_root: Path) -> Path:
    """
    Locate ProjectVersion.txt within a Unity project.

    Raises:
        ProjectVersionNotFoundError: If the project has no version file
    """
    version_file = project_root / PROJECT_VERSION_FILE
    if not version_file.is_file():
        raise ProjectVersionNotFoundError(project_root)
    return version_file


def read_project_version(project_root: Path) -> ProjectVersion:
    """Read the editor version declared by the project at ``project_root``."""
    version_file = locate_project_version_file(project_root)
    try:
        contents = version_file.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise ProjectVersionUnreadableError(version_file, str(e)) from e

    project_version = parse_project_version(contents, version_file)
    logger.info(f"Project {project_root} uses Unity {project_version.editor_version}")
    return project_version
