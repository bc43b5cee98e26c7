"""
Unity project detection for merges started by Git or Perforce.

git mergetool runs in the work tree, but P4V and some Git GUIs start the
merge tool from elsewhere and pass temporary copies of the files. This
module finds the Unity project from the working directory, the file paths,
or the VCS workspace, in that order.
"""

import logging
import os
import subprocess
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def is_unity_project(path: Path) -> bool:
    """A Unity project has both Assets and ProjectSettings folders."""
    return (path / "Assets").is_dir() and (path / "ProjectSettings").is_dir()


def find_project_root(start: Path) -> Optional[Path]:
    """
    Find Unity project root by searching upward from a path.

    Args:
        start: A file or directory, possibly inside a Unity project

    Returns:
        Path to project root, or None if not found
    """
    try:
        current = start.resolve()
    except OSError:
        return None

    # If it's a file, start from parent
    if current.is_file():
        current = current.parent

    while True:
        if is_unity_project(current):
            return current
        if current == current.parent:  # Filesystem root
            return None
        current = current.parent


def detect_vcs_workspace() -> Optional[Path]:
    """
    Detect VCS workspace root from environment variables and commands.

    Tries Git (GIT_WORK_TREE, GIT_DIR, git rev-parse) and then
    Perforce (P4ROOT, p4 info).

    Returns:
        Path to workspace root, or None if not detected
    """
    workspace = _detect_git_workspace()
    if workspace:
        return workspace
    return _detect_perforce_workspace()


def _detect_git_workspace() -> Optional[Path]:
    """Detect Git workspace root."""
    # Set by git difftool/mergetool in some configurations
    git_work_tree = os.environ.get("GIT_WORK_TREE")
    if git_work_tree:
        path = Path(git_work_tree)
        if path.is_dir():
            return path

    git_dir = os.environ.get("GIT_DIR")
    if git_dir:
        git_path = Path(git_dir)
        if git_path.name == ".git" and git_path.parent.is_dir():
            return git_path.parent

    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            capture_output=True,
            text=True,
            timeout=5,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug(f"git rev-parse failed: {e}")
        return None

    if result.returncode == 0:
        toplevel = result.stdout.strip()
        if toplevel and Path(toplevel).is_dir():
            return Path(toplevel)
    return None


def _detect_perforce_workspace() -> Optional[Path]:
    """Detect Perforce workspace root."""
    p4root = os.environ.get("P4ROOT")
    if p4root:
        path = Path(p4root)
        if path.is_dir():
            return path

    # P4V exports P4CLIENT when calling external tools
    cmd = ["p4"]
    p4client = os.environ.get("P4CLIENT")
    if p4client:
        cmd.extend(["-c", p4client])
    cmd.append("info")

    try:
        result = subprocess.run(
            cmd,
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (subprocess.TimeoutExpired, FileNotFoundError, OSError) as e:
        logger.debug(f"p4 info failed: {e}")
        return None

    if result.returncode != 0:
        return None
    for line in result.stdout.splitlines():
        if line.startswith("Client root:"):
            root_path = line.split(":", 1)[1].strip()
            if root_path and root_path != "*unknown*" and Path(root_path).is_dir():
                return Path(root_path)
    return None


def find_unity_in_workspace(workspace: Path) -> Optional[Path]:
    """Find a Unity project at or directly below a workspace root."""
    if not workspace.is_dir():
        return None
    if is_unity_project(workspace):
        return workspace
    try:
        subdirs = sorted(p for p in workspace.iterdir() if p.is_dir())
    except OSError:
        return None
    for subdir in subdirs:
        if is_unity_project(subdir):
            return subdir
    return None


def detect_unity_project_root(
    start: Optional[Path] = None,
    file_paths: Optional[list[Path]] = None,
    use_vcs: bool = True,
) -> Optional[Path]:
    """
    Detect the Unity project a merge belongs to.

    Priority order:
    1. Upward search from ``start`` (the working directory by default)
    2. Upward search from each file path
    3. VCS workspace root, or a Unity project directly inside it

    Returns:
        Path to Unity project root, or None if not found
    """
    if start is None:
        start = Path.cwd()

    found = find_project_root(start)
    if found:
        logger.debug(f"Project found from working directory: {found}")
        return found

    for file_path in file_paths or []:
        if file_path.exists():
            found = find_project_root(file_path)
            if found:
                logger.debug(f"Project found from {file_path}: {found}")
                return found

    if use_vcs:
        workspace = detect_vcs_workspace()
        logger.debug(f"VCS workspace: {workspace}")
        if workspace:
            found = find_unity_in_workspace(workspace)
            if found:
                logger.debug(f"Project found in VCS workspace {workspace}: {found}")
                return found

    return None

