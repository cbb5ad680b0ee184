"""
Mapping of selected repository options to GitHub API calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from . import github_api as gha
from .batch import apply_each

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from .models import ApplyOutcome, BranchProtectionSettings, RepoSettings, RepositoryRef, SecuritySettings
    from .protocols import Gateway

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SettingsTask:
    """One independent settings change."""

    title: str
    run: Callable[[Gateway], None]


def _review_requirement(required_approvals: int) -> dict[str, Any]:
    return {
        "required_approving_review_count": required_approvals,
        "dismiss_stale_reviews": False,
        "require_code_owner_reviews": False,
    }


def build_branch_protection_payload(settings: BranchProtectionSettings) -> dict[str, Any]:
    """Compose the branch protection PUT body.

    Required reviews and blocked direct pushes share one field. Reviews take
    precedence; blocking direct pushes alone is enforced as a pull request
    requirement with zero approvals.
    """
    reviews: dict[str, Any] | None = None
    if settings.require_pr_reviews:
        reviews = _review_requirement(settings.required_approvals)
    elif settings.block_direct_pushes:
        reviews = _review_requirement(0)

    return {
        "required_status_checks": {"strict": True, "contexts": []} if settings.require_status_checks else None,
        "enforce_admins": settings.enforce_admins,
        "required_pull_request_reviews": reviews,
        "restrictions": None,
        "allow_force_pushes": settings.allow_force_pushes,
        "allow_deletions": not settings.block_deletion,
        "required_conversation_resolution": settings.require_conversation_resolution,
        "block_creations": False,
        "lock_branch": False,
        "allow_fork_syncing": False,
    }


def build_repo_settings_payload(settings: RepoSettings) -> dict[str, Any]:
    return {
        "delete_branch_on_merge": settings.delete_branch_on_merge,
        "allow_squash_merge": settings.allow_squash_merge,
        "allow_merge_commit": settings.allow_merge_commit,
        "allow_rebase_merge": settings.allow_rebase_merge,
    }


def plan_settings_tasks(
    repo: RepositoryRef,
    branch: str,
    branch_protection: BranchProtectionSettings,
    repo_settings: RepoSettings,
    security: SecuritySettings,
) -> list[SettingsTask]:
    """Turn the selected options into independent tasks.

    Each enabled security feature gets its own call, so enabling one never
    disables or rewrites another.
    """
    tasks: list[SettingsTask] = []

    if branch_protection.any_selected:
        payload = build_branch_protection_payload(branch_protection)
        tasks.append(
            SettingsTask(
                title=f"Branch protection ({branch})",
                run=lambda gw: gha.update_branch_protection(gw, repo, branch, payload),
            )
        )

    if repo_settings.any_selected:
        repo_payload = build_repo_settings_payload(repo_settings)
        tasks.append(
            SettingsTask(title="Repository settings", run=lambda gw: gha.update_repo_settings(gw, repo, repo_payload))
        )

    security_tasks: list[tuple[bool, str, Callable[[Gateway, RepositoryRef], None]]] = [
        (security.dependabot_alerts, "Dependabot alerts", gha.enable_dependabot_alerts),
        (security.dependabot_security_updates, "Dependabot security updates", gha.enable_dependabot_security_updates),
        (security.secret_scanning, "Secret scanning", gha.enable_secret_scanning),
        (
            security.secret_scanning_push_protection,
            "Secret scanning push protection",
            gha.enable_secret_scanning_push_protection,
        ),
    ]
    for enabled, title, enable in security_tasks:
        if enabled:
            tasks.append(SettingsTask(title=title, run=lambda gw, enable=enable: enable(gw, repo)))

    return tasks


def apply_settings(gateway: Gateway, tasks: Sequence[SettingsTask]) -> list[ApplyOutcome]:
    """Run every task in order, one outcome per task."""
    outcomes = apply_each(tasks, lambda task: task.title, "apply", lambda task: task.run(gateway))
    for outcome in outcomes:
        if outcome.succeeded:
            logger.info(f"{outcome.item_key}: done")
        else:
            logger.info(f"{outcome.item_key}: failed ({outcome.error})")
    return outcomes
