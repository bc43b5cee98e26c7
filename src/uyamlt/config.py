"""
Runtime settings read from environment variables.

UYAMLT_DRY_RUN      Resolve everything but do not run UnityYAMLMerge
UYAMLT_EDITOR_DIR   Editor directories to search instead of Unity Hub's
                    (separated by os.pathsep)
UYAMLT_LOG_LEVEL    Default log level name (DEBUG, INFO, WARNING, ...)
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional

DRY_RUN_ENV = "UYAMLT_DRY_RUN"
EDITOR_DIR_ENV = "UYAMLT_EDITOR_DIR"
LOG_LEVEL_ENV = "UYAMLT_LOG_LEVEL"

_FALSE_VALUES = {"", "0", "false", "no", "off"}


@dataclass
class Settings:
    """Environment-derived settings for one run."""
    dry_run: bool = False
    editor_dirs: list[Path] = field(default_factory=list)
    log_level: Optional[int] = None

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        if environ is None:
            environ = os.environ

        dry_run = environ.get(DRY_RUN_ENV, "").strip().lower() not in _FALSE_VALUES

        editor_dirs = [
            Path(entry)
            for entry in environ.get(EDITOR_DIR_ENV, "").split(os.pathsep)
            if entry.strip()
        ]

        log_level = None
        level_name = environ.get(LOG_LEVEL_ENV, "").strip().upper()
        if level_name:
            value = logging.getLevelName(level_name)
            if isinstance(value, int):
                log_level = value

        return cls(dry_run=dry_run, editor_dirs=editor_dirs, log_level=log_level)
