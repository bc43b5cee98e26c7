"""Shared fixtures: fake Unity Hub editor trees and Unity projects."""

import logging
import stat
from pathlib import Path

import pytest

from uyamlt.core.installation import MERGE_TOOL_PATHS, OperatingSystem


def make_editor(editor_dir: Path, version: str, os_type=OperatingSystem.LINUX) -> Path:
    """Create an editor version directory containing a UnityYAMLMerge stub."""
    merge_tool = editor_dir / version / MERGE_TOOL_PATHS[os_type]
    merge_tool.parent.mkdir(parents=True, exist_ok=True)
    merge_tool.write_text("#!/bin/sh\nexit 0\n")
    merge_tool.chmod(merge_tool.stat().st_mode | stat.S_IXUSR)
    return merge_tool


def make_project(root: Path, version=None) -> Path:
    """Create a Unity project, optionally with a ProjectVersion.txt."""
    (root / "Assets").mkdir(parents=True, exist_ok=True)
    (root / "ProjectSettings").mkdir(parents=True, exist_ok=True)
    if version is not None:
        (root / "ProjectSettings" / "ProjectVersion.txt").write_text(
            f"m_EditorVersion: {version}\n"
            f"m_EditorVersionWithRevision: {version} (d00248457e15)\n"
        )
    return root


@pytest.fixture
def editor_dir(tmp_path):
    path = tmp_path / "Hub" / "Editor"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def linux(monkeypatch):
    """Pretend to run on Linux so the editor layout is predictable."""
    monkeypatch.setattr("uyamlt.core.installation.platform.system", lambda: "Linux")


@pytest.fixture
def no_vcs(monkeypatch):
    """Disable VCS workspace detection."""
    monkeypatch.setattr("uyamlt.utils.vcs_detector.detect_vcs_workspace", lambda: None)
    for name in ("GIT_WORK_TREE", "GIT_DIR", "P4ROOT", "P4CLIENT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def env(monkeypatch, editor_dir):
    """Point the CLI at the fake editor directory with a clean environment."""
    monkeypatch.setenv("UYAMLT_EDITOR_DIR", str(editor_dir))
    monkeypatch.delenv("UYAMLT_DRY_RUN", raising=False)
    monkeypatch.delenv("UYAMLT_LOG_LEVEL", raising=False)
    return monkeypatch


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    package_logger = logging.getLogger("uyamlt")
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
    package_logger.setLevel(logging.NOTSET)
