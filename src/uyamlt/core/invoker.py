"""
Running UnityYAMLMerge with the caller's arguments.

The child inherits stdin, stdout and stderr, and its exit code becomes
ours. Diagnostics from this side only ever go through logging (stderr).
"""

import logging
import shlex
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

from uyamlt.core.errors import InvocationError
from uyamlt.core.installation import UnityInstallation

logger = logging.getLogger(__name__)

# Shell conventions for "command not found" and "not executable"
EXIT_NOT_FOUND = 127
EXIT_NOT_EXECUTABLE = 126


@dataclass(frozen=True)
class MergeCommand:
    """A fully resolved command line for UnityYAMLMerge."""
    executable: Path
    args: tuple[str, ...]

    @property
    def argv(self) -> list[str]:
        return [str(self.executable), *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv)


def build_command(installation: UnityInstallation, args: list[str]) -> MergeCommand:
    """Build the command line that runs an installation's merge tool."""
    executable = installation.merge_tool.resolve()
    return MergeCommand(executable=executable, args=tuple(args))


def report_command(command: MergeCommand, stream: Optional[TextIO] = None) -> None:
    """Write the resolved executable and arguments for dry runs."""
    stream = stream or sys.stdout
    print(f"executable: {command.executable}", file=stream)
    print(f"arguments: {shlex.join(command.args)}", file=stream)


def run_command(command: MergeCommand) -> int:
    """
    Spawn the merge tool and wait for it.

    Returns:
        The child's exit code; 128 + N if it was killed by signal N

    Raises:
        InvocationError: If the executable could not be started
    """
    logger.info(f"Passing through: {command}")
    try:
        process = subprocess.Popen(command.argv)
    except FileNotFoundError as e:
        raise InvocationError(command.executable, str(e), EXIT_NOT_FOUND) from e
    except OSError as e:
        raise InvocationError(command.executable, str(e), EXIT_NOT_EXECUTABLE) from e

    while True:
        try:
            returncode = process.wait()
            break
        except KeyboardInterrupt:
            # The child is in our process group and got the same signal
            logger.debug("Interrupted, waiting for UnityYAMLMerge to exit")

    if returncode < 0:
        return 128 - returncode
    return returncode


def invoke(
    command: MergeCommand,
    dry_run: bool = False,
    stream: Optional[TextIO] = None,
) -> int:
    """
    Run or, in dry-run mode, only report the merge command.

    Returns:
        Exit code to terminate with
    """
    if dry_run:
        logger.info("Dry run, not starting UnityYAMLMerge")
        report_command(command, stream)
        return 0
    return run_command(command)
