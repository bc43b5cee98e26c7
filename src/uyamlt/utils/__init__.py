"""Utility functions."""

from uyamlt.utils.log_handler import setup_logging
from uyamlt.utils.vcs_detector import detect_unity_project_root, find_project_root

__all__ = [
    "setup_logging",
    "detect_unity_project_root",
    "find_project_root",
]
