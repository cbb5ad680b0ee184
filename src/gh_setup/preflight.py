"""Checks that gh is usable and determination of the target repository."""

from __future__ import annotations

import logging
import re
import subprocess
from typing import TYPE_CHECKING

from .exceptions import PreflightError
from .models import RepositoryRef

if TYPE_CHECKING:
    from .protocols import Prompter

logger: logging.Logger = logging.getLogger(__name__)

_GITHUB_HOSTS = ("github.com", "www.github.com")
_REPO_PATH = re.compile(r"[^/\s]+/[^/\s]+")


def _run_quietly(cmd: list[str]) -> subprocess.CompletedProcess[str] | None:
    try:
        return subprocess.run(cmd, check=False, capture_output=True, text=True)  # noqa: S603
    except OSError:
        logger.debug(f"Could not run {cmd[0]}", exc_info=True)
        return None


def is_gh_installed(gh_path: str = "gh") -> bool:
    result = _run_quietly([gh_path, "--version"])
    return result is not None and result.returncode == 0


def is_gh_authenticated(gh_path: str = "gh") -> bool:
    result = _run_quietly([gh_path, "auth", "status"])
    return result is not None and result.returncode == 0


def parse_github_remote(url: str) -> str | None:
    """Extract ``owner/repo`` from a github.com remote URL.

    Handles SSH (``git@github.com:owner/repo.git``), ``ssh://`` and HTTPS
    URLs, with or without the ``.git`` suffix.

    Args:
        url: Remote URL

    Returns:
        The repository path, or None if the URL is not a github.com repository
    """
    normalized = url.strip().rstrip("/").removesuffix(".git")
    if "://" in normalized:
        # https://github.com/owner/repo or ssh://git@github.com/owner/repo
        parts = normalized.split("/", 3)
        if len(parts) != 4:
            return None
        host = parts[2].split("@")[-1].split(":")[0]
        path = parts[3]
    elif ":" in normalized:
        # git@github.com:owner/repo
        prefix, _, path = normalized.partition(":")
        host = prefix.split("@")[-1]
    else:
        return None

    if host not in _GITHUB_HOSTS or not _REPO_PATH.fullmatch(path):
        return None
    return path


def detect_repo(cwd: str | None = None) -> str | None:
    """Return ``owner/repo`` of the ``origin`` remote, if it is on github.com."""
    result = _run_quietly(["git", "-C", cwd or ".", "remote", "get-url", "origin"])
    if result is None or result.returncode != 0:
        logger.debug("No origin remote found")
        return None
    return parse_github_remote(result.stdout)


def _validate_repo_input(value: str) -> str | None:
    if not _REPO_PATH.fullmatch(value.strip()):
        return "Format: owner/repo"
    return None


def preflight(prompter: Prompter, *, repo: str | None = None, gh_path: str = "gh") -> RepositoryRef:
    """Verify gh is installed and authenticated, then settle the target repository.

    An explicitly supplied ``repo`` is used as is. Otherwise the repository of
    the ``origin`` remote is offered, and the user is asked to type one if it is
    declined or cannot be detected.

    Raises:
        PreflightError: If gh is unusable, the repository is invalid, or the
            user aborts
    """
    if not is_gh_installed(gh_path):
        msg = "GitHub CLI (gh) is not installed. Install it from https://cli.github.com"
        raise PreflightError(msg)

    if not is_gh_authenticated(gh_path):
        msg = "GitHub CLI is not authenticated. Run 'gh auth login' first."
        raise PreflightError(msg)

    if repo:
        try:
            return RepositoryRef.parse(repo)
        except ValueError as e:
            raise PreflightError(str(e)) from e

    detected = detect_repo()
    if detected:
        if prompter.confirm(f"Use detected repository: {detected}?"):
            return RepositoryRef.parse(detected)

    answer = prompter.text("Enter repository (owner/repo):", validate=_validate_repo_input)
    if answer is None:
        msg = "No repository selected"
        raise PreflightError(msg)
    return RepositoryRef.parse(answer)
