"""
Command-line interface for gh-setup.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Final

from pydantic import ValidationError

from .commands import run_init, run_labels, run_milestones
from .config import AppSettings, load_config
from .console import Console
from .exceptions import PreflightError
from .gateway import GhCliGateway
from .preflight import preflight
from .utils import setup_logging

if TYPE_CHECKING:
    from collections.abc import Sequence

logger: logging.Logger = logging.getLogger(__name__)

COMMANDS: Final[dict[str, str]] = {
    "init": "Repository setup (branch protection, settings, security)",
    "milestones": "Create/update weekly milestones",
    "labels": "Sync labels from .gh-setup.yml",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    commands_help = "\n".join(f"  {name:<12}  {description}" for name, description in COMMANDS.items())
    parser = argparse.ArgumentParser(
        prog="gh-setup",
        description="Interactive GitHub repository setup CLI",
        epilog=f"Commands:\n{commands_help}",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    _ = parser.add_argument("command", nargs="?", help="Command to run (init, milestones, labels)")

    _ = parser.add_argument("--repo", "-r", help="Target repository (owner/repo). Detected from origin if omitted")

    _ = parser.add_argument("--config", "-c", type=Path, help="Config file (default: .gh-setup.yml)")

    _ = parser.add_argument(
        "--verbose",
        "-v",
        action="count",
        default=0,
        help="Increase console log verbosity (-v for INFO, -vv for DEBUG)",
    )

    return parser


def run(argv: Sequence[str] | None = None) -> int:
    """Parse arguments, run the command, and return the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    command: str | None = args.command
    if command not in COMMANDS:
        parser.print_help()
        return 1 if command else 0

    console = Console()
    try:
        settings = AppSettings()
    except ValidationError as e:
        console.report_error(f"Invalid environment settings: {e}")
        return 1

    verbosity: int = args.verbose
    setup_logging(verbosity=verbosity, log_file=settings.log_file)

    console.report_info(f"gh-setup {command}")
    try:
        repo = preflight(console, repo=args.repo, gh_path=settings.gh_path)
    except PreflightError as e:
        console.report_error(str(e))
        return 1
    console.report_info(f"Repository: {repo}")

    gateway = GhCliGateway(settings.gh_path)
    if command == "init":
        return run_init(gateway, console, repo)

    config_path: Path = args.config or settings.config_path
    config = load_config(config_path, console)
    if command == "milestones":
        return run_milestones(gateway, console, repo, config, default_timezone=settings.timezone)
    return run_labels(gateway, console, repo, config)


def main() -> None:
    """Main entry point."""
    try:
        sys.exit(run())
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception:
        logger.exception("gh-setup failed")
        sys.exit(1)
