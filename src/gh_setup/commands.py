"""
The init, milestones and labels commands.

Each command gathers desired state (config document or prompts), hands it to
the reconciliation core, and reports the outcome. Commands return a process
exit code: 0 on success or when the user cancels, 1 on any failure.
"""

from __future__ import annotations

import datetime as dt
import logging
from typing import TYPE_CHECKING, Final

from . import github_api as gha
from .exceptions import GatewayError
from .labels import sync_labels
from .milestones import fetch_milestone_index, sync_milestones
from .models import BranchProtectionSettings, RepoSettings, RunSummary, SecuritySettings
from .repo_settings import apply_settings, plan_settings_tasks
from .schedule import generate_schedule

if TYPE_CHECKING:
    from .config import SetupConfig
    from .models import RepositoryRef
    from .protocols import Gateway, Prompter, Reporter

logger: logging.Logger = logging.getLogger(__name__)

BRANCH_PROTECTION_OPTIONS: Final[list[tuple[str, str]]] = [
    ("block_direct_pushes", "Block direct pushes"),
    ("require_pr_reviews", "Require PR reviews"),
    ("require_status_checks", "Require status checks"),
    ("require_conversation_resolution", "Require conversation resolution"),
    ("enforce_admins", "Enforce for admins"),
    ("allow_force_pushes", "Allow force pushes"),
    ("block_deletion", "Block branch deletion"),
]
REPO_OPTIONS: Final[list[tuple[str, str]]] = [
    ("delete_branch_on_merge", "Auto-delete branches after merge"),
    ("allow_squash_merge", "Allow squash merge"),
    ("allow_merge_commit", "Allow merge commit"),
    ("allow_rebase_merge", "Allow rebase merge"),
]
SECURITY_OPTIONS: Final[list[tuple[str, str]]] = [
    ("dependabot_alerts", "Dependabot alerts"),
    ("dependabot_security_updates", "Dependabot security updates"),
    ("secret_scanning", "Secret scanning (public repos or GHAS)"),
    ("secret_scanning_push_protection", "Secret scanning push protection (public repos or GHAS)"),
]


def report_summary(reporter: Reporter, summary: RunSummary) -> None:
    """Print one line per failure, then the counts."""
    for failure in summary.failures:
        reporter.report_error(f"  {failure.item_key}: {failure.error}")
    reporter.report_info(summary.format_counts())


def _summary_lines(title: str, options: list[tuple[str, str]], selected: list[str]) -> list[str]:
    lines = [title]
    lines.extend(f"  + {label}" for value, label in options if value in selected)
    if not selected:
        lines.append("  (none)")
    return lines


def run_init(gateway: Gateway, prompter: Prompter, repo: RepositoryRef) -> int:
    """Interactively configure branch protection, repository and security settings."""
    try:
        default_branch = gha.get_repo_info(gateway, repo).default_branch
    except GatewayError as e:
        logger.info(f"Could not read default branch, using 'main': {e.message}")
        default_branch = "main"

    branch = prompter.text(
        "Branch to protect:",
        default=default_branch,
        validate=lambda v: None if v else "Branch name is required",
    )
    if branch is None:
        prompter.report_info("Setup cancelled.")
        return 0

    protection_choices = prompter.multiselect(
        "Branch protection rules:",
        BRANCH_PROTECTION_OPTIONS,
        initial=["block_direct_pushes", "block_deletion"],
    )
    if protection_choices is None:
        prompter.report_info("Setup cancelled.")
        return 0

    required_approvals = 1
    if "require_pr_reviews" in protection_choices:
        approvals = prompter.select("Required number of approvals:", [(1, "1"), (2, "2"), (3, "3")])
        if approvals is None:
            prompter.report_info("Setup cancelled.")
            return 0
        required_approvals = approvals

    branch_protection = BranchProtectionSettings(
        **{value: value in protection_choices for value, _ in BRANCH_PROTECTION_OPTIONS},
        required_approvals=required_approvals,
    )

    repo_choices = prompter.multiselect(
        "Repository settings:",
        REPO_OPTIONS,
        initial=["delete_branch_on_merge", "allow_squash_merge"],
    )
    if repo_choices is None:
        prompter.report_info("Setup cancelled.")
        return 0
    repo_settings = RepoSettings(**{value: value in repo_choices for value, _ in REPO_OPTIONS})

    if not repo_settings.has_merge_strategy:
        prompter.report_warning("No merge strategy selected, PRs cannot be merged.")
        if not prompter.confirm("Continue anyway?", default=False):
            prompter.report_info("Setup cancelled.")
            return 0

    security_choices = prompter.multiselect("Security features:", SECURITY_OPTIONS, initial=["dependabot_alerts"])
    if security_choices is None:
        prompter.report_info("Setup cancelled.")
        return 0
    security = SecuritySettings(**{value: value in security_choices for value, _ in SECURITY_OPTIONS})

    protection_lines = _summary_lines(f"Branch protection ({branch}):", BRANCH_PROTECTION_OPTIONS, protection_choices)
    if branch_protection.require_pr_reviews:
        plural = "s" if required_approvals > 1 else ""
        protection_lines = [
            f"{line} ({required_approvals} approval{plural})" if line == "  + Require PR reviews" else line
            for line in protection_lines
        ]
    summary_lines = [
        f"Repository: {repo}",
        "",
        *protection_lines,
        "",
        *_summary_lines("Repository settings:", REPO_OPTIONS, repo_choices),
        "",
        *_summary_lines("Security:", SECURITY_OPTIONS, security_choices),
    ]
    prompter.note("\n".join(summary_lines), "Settings to apply")

    if not prompter.confirm("Apply these settings?"):
        prompter.report_info("Setup cancelled.")
        return 0

    tasks = plan_settings_tasks(repo, branch, branch_protection, repo_settings, security)
    if not tasks:
        prompter.report_info("No settings to apply.")
        return 0

    summary = RunSummary.from_outcomes(apply_settings(gateway, tasks))
    if summary.ok:
        prompter.report_info(f"{summary.succeeded_count}/{summary.total} settings applied. Setup complete!")
        return 0

    prompter.report_warning(f"{summary.succeeded_count}/{summary.total} settings applied. Failures:")
    for failure in summary.failures:
        prompter.report_error(f"  {failure.item_key}: {failure.error}")
    prompter.report_info("Setup finished with some errors.")
    return 1


def _validate_start_date(value: str) -> str | None:
    try:
        start = dt.date.fromisoformat(value)
    except ValueError:
        return "Format: YYYY-MM-DD"
    if start.weekday() != 6:
        return f"{value} is a {start.strftime('%A')}, enter a Sunday"
    return None


def _validate_weeks(value: str) -> str | None:
    if not value.isdigit() or int(value) < 1:
        return "Enter a positive integer"
    return None


def run_milestones(
    gateway: Gateway,
    prompter: Prompter,
    repo: RepositoryRef,
    config: SetupConfig | None,
    *,
    default_timezone: str = "UTC",
) -> int:
    """Create or update weekly milestones from config or interactive input."""
    if config is not None and config.milestones is not None:
        start_date = config.milestones.start_date
        weeks = config.milestones.weeks
        timezone = config.milestones.timezone or default_timezone
        prompter.report_info(f"Config: startDate={start_date.isoformat()}, weeks={weeks}, timezone={timezone}")
    else:
        start_input = prompter.text("Start date (first Sunday, YYYY-MM-DD):", validate=_validate_start_date)
        if start_input is None:
            prompter.report_info("Cancelled.")
            return 0
        weeks_input = prompter.text("Number of weeks:", default="52", validate=_validate_weeks)
        if weeks_input is None:
            prompter.report_info("Cancelled.")
            return 0
        start_date = dt.date.fromisoformat(start_input)
        weeks = int(weeks_input)
        timezone = default_timezone

    descriptors = generate_schedule(start_date, weeks, timezone)

    try:
        index = fetch_milestone_index(gateway, repo, prompter, timezone)
    except GatewayError as e:
        prompter.report_error(f"Failed to fetch milestones: {e.message}")
        return 1

    if not prompter.confirm(
        f"Create/update {weeks} weekly milestones starting from {start_date.isoformat()} ({timezone})?"
    ):
        prompter.report_info("Cancelled.")
        return 0

    summary = sync_milestones(gateway, repo, descriptors, prompter, timezone, index=index)
    report_summary(prompter, summary)
    return 0 if summary.ok else 1


def run_labels(gateway: Gateway, prompter: Prompter, repo: RepositoryRef, config: SetupConfig | None) -> int:
    """Sync labels from the config document. Requires a non-empty labels section."""
    desired = config.label_descriptors() if config is not None else []
    if not desired:
        prompter.report_error("No labels defined in .gh-setup.yml")
        prompter.report_info("Add a 'labels' section to .gh-setup.yml and try again.")
        return 1

    try:
        summary = sync_labels(gateway, repo, desired, prompter)
    except GatewayError as e:
        prompter.report_error(f"Failed to fetch labels: {e.message}")
        return 1

    if summary is None:
        return 0
    report_summary(prompter, summary)
    return 0 if summary.ok else 1
