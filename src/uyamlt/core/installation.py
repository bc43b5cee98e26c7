"""
Discovery of Unity Editor installations managed by Unity Hub.

Unity Hub keeps every editor side by side under ``<base>/Unity/Hub/Editor``,
one directory per version, with the same layout on all platforms. Only the
base directory and the location of UnityYAMLMerge inside an editor differ.
"""

import logging
import os
import platform
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from uyamlt.core.errors import MergeToolNotFoundError, UnsupportedPlatformError
from uyamlt.core.version import version_sort_key

logger = logging.getLogger(__name__)


class OperatingSystem(Enum):
    """Platforms the Unity Editor runs on."""
    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"


# UnityYAMLMerge location relative to an editor version directory
MERGE_TOOL_PATHS = {
    OperatingSystem.WINDOWS: Path("Editor/Data/Tools/UnityYAMLMerge.exe"),
    OperatingSystem.MACOS: Path("Unity.app/Contents/Tools/UnityYAMLMerge"),
    OperatingSystem.LINUX: Path("Editor/Data/Tools/UnityYAMLMerge"),
}


@dataclass(frozen=True)
class UnityInstallation:
    """An installed Unity Editor and its bundled merge tool."""
    version: str
    path: Path  # Editor version directory, e.g. .../Hub/Editor/2022.3.11f1
    merge_tool: Path

    def __str__(self) -> str:
        return f"Unity {self.version} ({self.path})"


def get_current_os(system: Optional[str] = None) -> OperatingSystem:
    """
    Map the running platform onto an OperatingSystem.

    Raises:
        UnsupportedPlatformError: On platforms Unity does not support
    """
    system = system or platform.system()
    name = system.lower()
    if name == "windows":
        return OperatingSystem.WINDOWS
    if name == "darwin":
        return OperatingSystem.MACOS
    if name == "linux":
        return OperatingSystem.LINUX
    raise UnsupportedPlatformError(system)


def get_hub_base_path(os_type: OperatingSystem) -> Path:
    """Directory that contains the ``Unity`` folder created by Unity Hub."""
    if os_type is OperatingSystem.WINDOWS:
        return Path(os.environ.get("PROGRAMFILES") or "C:\\Program Files")
    if os_type is OperatingSystem.MACOS:
        return Path("/Applications")
    return Path.home()


def get_hub_editor_path(os_type: OperatingSystem) -> Path:
    """Full path of the Hub editor directory for the given platform."""
    return get_hub_base_path(os_type) / "Unity" / "Hub" / "Editor"


def get_merge_tool_path(os_type: OperatingSystem, editor_path: Path) -> Path:
    """
    Get the path of UnityYAMLMerge for an editor installation.

    Raises:
        MergeToolNotFoundError: If the executable is missing
    """
    merge_tool = editor_path / MERGE_TOOL_PATHS[os_type]
    if not merge_tool.is_file():
        raise MergeToolNotFoundError(merge_tool)
    return merge_tool


def scan_editor_directory(
    os_type: OperatingSystem,
    editor_dir: Path,
) -> list[UnityInstallation]:
    """
    Scan one editor directory for installed versions.

    A missing or unreadable directory yields no installations, and
    an unreadable version directory is skipped.
    """
    try:
        entries = sorted(editor_dir.iterdir())
    except OSError as e:
        logger.info(f"Cannot read editor directory {editor_dir}: {e}")
        return []

    installations = []
    for entry in entries:
        try:
            if not entry.is_dir():
                continue
            merge_tool = get_merge_tool_path(os_type, entry)
        except (MergeToolNotFoundError, OSError) as e:
            logger.debug(f"Skipping {entry.name}: {e}")
            continue
        installation = UnityInstallation(
            version=entry.name,
            path=entry,
            merge_tool=merge_tool,
        )
        logger.info(f"Installation detected: {installation}")
        installations.append(installation)
    return installations


def discover_installations(
    editor_dirs: Optional[list[Path]] = None,
    os_type: Optional[OperatingSystem] = None,
) -> list[UnityInstallation]:
    """
    Find all Unity installations that ship UnityYAMLMerge.

    Args:
        editor_dirs: Directories to scan instead of the Unity Hub default
        os_type: Platform layout to assume (detected if None)

    Returns:
        Installations ordered from oldest to newest version. When the same
        version appears in several directories the first one wins.
    """
    if os_type is None:
        os_type = get_current_os()
    if not editor_dirs:
        editor_dirs = [get_hub_editor_path(os_type)]

    found: dict[str, UnityInstallation] = {}
    for editor_dir in editor_dirs:
        for installation in scan_editor_directory(os_type, editor_dir):
            if installation.version in found:
                logger.debug(
                    f"Ignoring duplicate {installation.version} at {installation.path}"
                )
                continue
            found[installation.version] = installation

    return sorted(found.values(), key=lambda i: version_sort_key(i.version))


def installations_by_version(
    installations: list[UnityInstallation],
) -> dict[str, UnityInstallation]:
    """Map version identifier to installation."""
    return {installation.version: installation for installation in installations}
