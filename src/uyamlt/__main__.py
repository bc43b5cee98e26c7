"""
Entry point for uyamlt.

Usage:
    uyamlt merge [-p PROJECT] BASE REMOTE LOCAL MERGED   # git/P4V merge tool
    uyamlt exec [-p PROJECT] -- ARGS...                   # forward ARGS as-is
    uyamlt which [-p PROJECT]                             # print merge tool path
    uyamlt list                                           # list installations

The trampoline consumes -p as the Unity project path. To forward a command
line to UnityYAMLMerge exactly as written (for example an existing
"merge -p BASE REMOTE LOCAL MERGED" configuration), use exec:
    uyamlt exec -- merge -p "$BASE" "$REMOTE" "$LOCAL" "$MERGED"

Git configuration example:
    [mergetool "unityyamlmerge"]
        trustExitCode = false
        cmd = uyamlt merge "$BASE" "$REMOTE" "$LOCAL" "$MERGED"
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from uyamlt import __version__
from uyamlt.config import Settings
from uyamlt.core.errors import NoInstallationsError, TrampolineError
from uyamlt.core.installation import (
    UnityInstallation,
    discover_installations,
    get_current_os,
    get_hub_editor_path,
)
from uyamlt.core.invoker import build_command, invoke
from uyamlt.core.selector import (
    FallbackPolicy,
    Selection,
    SelectionRequest,
    choose_installation,
)
from uyamlt.core.version import version_sort_key
from uyamlt.utils.log_handler import setup_logging, verbosity_to_level
from uyamlt.utils.vcs_detector import detect_unity_project_root, find_project_root

logger = logging.getLogger("uyamlt.cli")

PROG = "uyamlt"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Run the UnityYAMLMerge of the right Unity Hub installation",
    )

    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Log to stderr (-v info, -vv debug)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Options shared by every command that selects an installation
    selection = argparse.ArgumentParser(add_help=False)
    selection.add_argument(
        "--project", "-p",
        type=Path,
        metavar="PROJECT",
        help="Unity project whose ProjectVersion.txt picks the editor "
             "(detected from the working directory and VCS if omitted)",
    )
    selection.add_argument(
        "--force",
        action="store_true",
        help="Ignore the project's editor version and use the latest installed",
    )
    selection.add_argument(
        "--fallback",
        choices=[policy.value for policy in FallbackPolicy],
        default=FallbackPolicy.LATEST.value,
        help="Use the latest installation when the project's version is not "
             "available (latest, default) or fail (none)",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    merge = subparsers.add_parser(
        "merge",
        parents=[selection],
        help="3-way merge: runs 'UnityYAMLMerge merge -p BASE REMOTE LOCAL MERGED'. "
             "-p here names the Unity project; use 'exec -- merge -p ...' to "
             "forward UnityYAMLMerge's own arguments unchanged",
    )
    merge.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="BASE REMOTE LOCAL MERGED, followed by any extra arguments",
    )

    run = subparsers.add_parser(
        "exec",
        parents=[selection],
        help="Forward arguments to UnityYAMLMerge unchanged (put them after --)",
    )
    run.add_argument("args", nargs="*", metavar="ARG")

    subparsers.add_parser(
        "which",
        parents=[selection],
        help="Print the path of the UnityYAMLMerge that would run",
    )

    subparsers.add_parser(
        "list",
        parents=[selection],
        help="List detected Unity installations",
    )

    return parser


def forwarded_arguments(args: argparse.Namespace) -> list[str]:
    """Arguments passed on to UnityYAMLMerge."""
    if args.command == "merge":
        return ["merge", "-p", *args.files]
    if args.command == "exec":
        return list(args.args)
    return []


def resolve_project_root(args: argparse.Namespace) -> Optional[Path]:
    """Unity project for this run: -p if given, else detected."""
    if args.project is not None:
        return find_project_root(args.project) or args.project
    file_paths = [Path(f) for f in getattr(args, "files", [])]
    return detect_unity_project_root(file_paths=file_paths)


def find_installations(settings: Settings) -> list[UnityInstallation]:
    """
    Discover installations, failing when there are none.

    Raises:
        NoInstallationsError: If nothing was found
    """
    installations = discover_installations(settings.editor_dirs or None)
    if not installations:
        searched = settings.editor_dirs or [get_hub_editor_path(get_current_os())]
        raise NoInstallationsError(searched)
    return installations


def select(
    args: argparse.Namespace,
    installations: list[UnityInstallation],
) -> Selection:
    project_root = resolve_project_root(args)
    logger.info(f"Project root: {project_root}")
    request = SelectionRequest(
        project_root=project_root,
        force=args.force,
        fallback=FallbackPolicy(args.fallback),
    )
    return choose_installation(installations, request)


def list_installations(
    args: argparse.Namespace,
    installations: list[UnityInstallation],
) -> int:
    """Print installations newest first, marking the one that would run."""
    try:
        selected = select(args, installations).installation
    except TrampolineError as e:
        logger.warning(f"No installation would be selected: {e}")
        selected = None

    ordered = sorted(installations, key=lambda i: version_sort_key(i.version), reverse=True)
    for installation in ordered:
        marker = "*" if installation == selected else " "
        print(f"{marker} {installation.version}\t{installation.merge_tool}")
    return 0


def run(args: argparse.Namespace, settings: Settings) -> int:
    """Execute a parsed command line."""
    installations = find_installations(settings)

    if args.command == "list":
        return list_installations(args, installations)

    selection = select(args, installations)

    if args.command == "which":
        print(selection.installation.merge_tool.resolve())
        return 0

    command = build_command(selection.installation, forwarded_arguments(args))
    return invoke(command, dry_run=settings.dry_run)


def main(argv: Optional[list[str]] = None) -> int:
    settings = Settings.from_environ()
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "merge" and len(args.files) < 4:
        parser.error("merge needs BASE, REMOTE, LOCAL and MERGED file paths")

    setup_logging(verbosity_to_level(args.verbose, settings.log_level))

    try:
        return run(args, settings)
    except TrampolineError as e:
        logger.debug("Resolution failed", exc_info=True)
        print(f"{PROG}: error: {e}", file=sys.stderr)
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
