"""
Tests for gh checks, remote URL parsing and repository selection.
"""

from __future__ import annotations

import subprocess
from unittest.mock import patch

import pytest

from fakes import ScriptedPrompter
from gh_setup.exceptions import PreflightError
from gh_setup.models import RepositoryRef
from gh_setup.preflight import detect_repo, is_gh_authenticated, is_gh_installed, parse_github_remote, preflight


def _fake_run(*, installed: bool = True, authenticated: bool = True, origin: str | None = None):  # noqa: ANN202
    """Build a subprocess.run replacement answering gh and git commands."""

    def run(cmd: list[str], **_kwargs: object) -> subprocess.CompletedProcess[str]:
        if cmd[1:] == ["--version"]:
            if not installed:
                raise FileNotFoundError(cmd[0])
            return subprocess.CompletedProcess(cmd, 0, stdout="gh version 2.60.0\n", stderr="")
        if cmd[1:] == ["auth", "status"]:
            return subprocess.CompletedProcess(cmd, 0 if authenticated else 1, stdout="", stderr="")
        if cmd[0] == "git":
            if origin is None:
                return subprocess.CompletedProcess(cmd, 2, stdout="", stderr="error: No such remote 'origin'\n")
            return subprocess.CompletedProcess(cmd, 0, stdout=f"{origin}\n", stderr="")
        msg = f"Unexpected command: {cmd}"
        raise AssertionError(msg)

    return run


@pytest.mark.unit
class TestParseGithubRemote:
    """Test parse_github_remote function."""

    @pytest.mark.parametrize(
        "url",
        [
            "https://github.com/owner/repo.git",
            "https://github.com/owner/repo",
            "https://github.com/owner/repo/",
            "git@github.com:owner/repo.git",
            "git@github.com:owner/repo",
            "ssh://git@github.com/owner/repo.git",
            "ssh://git@github.com:22/owner/repo.git",
            "https://www.github.com/owner/repo.git",
        ],
    )
    def test_github_urls(self, url: str) -> None:
        assert parse_github_remote(url) == "owner/repo"

    def test_dots_and_dashes_in_names(self) -> None:
        assert parse_github_remote("git@github.com:my-org/my.repo-name.git") == "my-org/my.repo-name"

    @pytest.mark.parametrize(
        "url",
        [
            "https://gitlab.com/owner/repo.git",
            "git@gitlab.com:owner/repo.git",
            "https://github.com/owner",
            "https://github.com/owner/repo/tree/main",
            "/srv/git/repo.git",
            "",
        ],
    )
    def test_non_github_or_malformed_urls(self, url: str) -> None:
        assert parse_github_remote(url) is None


@pytest.mark.unit
class TestGhChecks:
    """Test is_gh_installed, is_gh_authenticated and detect_repo."""

    def test_installed_and_authenticated(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run()):
            assert is_gh_installed() is True
            assert is_gh_authenticated() is True

    def test_missing_binary(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(installed=False)):
            assert is_gh_installed("/no/such/gh") is False

    def test_not_authenticated(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(authenticated=False)):
            assert is_gh_authenticated() is False

    def test_detect_repo_from_origin(self) -> None:
        with patch(
            "gh_setup.preflight.subprocess.run",
            side_effect=_fake_run(origin="git@github.com:acme/widgets.git"),
        ) as run:
            assert detect_repo("/work/widgets") == "acme/widgets"
        assert run.call_args.args[0] == ["git", "-C", "/work/widgets", "remote", "get-url", "origin"]

    def test_detect_repo_without_origin(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run()):
            assert detect_repo() is None


@pytest.mark.unit
class TestPreflight:
    """Test the preflight sequence."""

    def test_gh_not_installed(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(installed=False)):
            with pytest.raises(PreflightError, match="not installed"):
                preflight(ScriptedPrompter())

    def test_gh_not_authenticated(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(authenticated=False)):
            with pytest.raises(PreflightError, match="gh auth login"):
                preflight(ScriptedPrompter())

    def test_explicit_repo_skips_detection(self) -> None:
        prompter = ScriptedPrompter()
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(origin="git@github.com:a/b.git")):
            repo = preflight(prompter, repo="acme/widgets")
        assert repo == RepositoryRef("acme", "widgets")
        assert prompter.questions == []

    def test_invalid_explicit_repo(self) -> None:
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run()):
            with pytest.raises(PreflightError, match="Expected format"):
                preflight(ScriptedPrompter(), repo="acme")

    def test_detected_repo_confirmed(self) -> None:
        prompter = ScriptedPrompter(confirms=[True])
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(origin="https://github.com/acme/widgets")):
            repo = preflight(prompter)
        assert repo == RepositoryRef("acme", "widgets")
        assert prompter.questions == ["Use detected repository: acme/widgets?"]

    def test_detected_repo_declined_asks_for_one(self) -> None:
        prompter = ScriptedPrompter(confirms=[False], texts=["acme/other"])
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run(origin="https://github.com/acme/widgets")):
            repo = preflight(prompter)
        assert repo == RepositoryRef("acme", "other")

    def test_nothing_detected_asks_for_one(self) -> None:
        prompter = ScriptedPrompter(texts=["acme/widgets"])
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run()):
            repo = preflight(prompter)
        assert repo == RepositoryRef("acme", "widgets")
        assert prompter.questions == ["Enter repository (owner/repo):"]

    def test_aborted_prompt(self) -> None:
        prompter = ScriptedPrompter(texts=[None])
        with patch("gh_setup.preflight.subprocess.run", side_effect=_fake_run()):
            with pytest.raises(PreflightError, match="No repository selected"):
                preflight(prompter)
