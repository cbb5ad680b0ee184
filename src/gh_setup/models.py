"""Data models shared by the reconcilers, the settings applicator and the CLI.

Everything here lives for a single command invocation. Remote state is always
re-fetched, so none of these objects are persisted.
"""

from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True)
class RepositoryRef:
    """Target repository, identified by ``owner/name``."""

    owner: str
    name: str

    @classmethod
    def parse(cls, repo_path: str) -> RepositoryRef:
        """Parse an ``owner/name`` string.

        Raises:
            ValueError: If the path is not exactly two non-empty segments
        """
        path = repo_path.strip()
        parts = path.split("/")
        if len(parts) != 2:
            msg = f"Invalid GitHub repository path '{repo_path}'. Expected format: 'owner/repository'"
            raise ValueError(msg)
        owner, name = parts
        if not owner or not name:
            msg = f"Invalid GitHub repository path '{repo_path}'. Both owner and repository name must be non-empty"
            raise ValueError(msg)
        return cls(owner=owner, name=name)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class MilestoneDescriptor:
    """A weekly milestone that has not been applied yet."""

    title: str
    description: str
    week_start: dt.date
    week_end: dt.date  # Saturday of the week
    due_on_utc: dt.datetime  # Timezone-aware, in UTC

    @property
    def date_key(self) -> str:
        """Matching key against remote milestones: the week's end date."""
        return self.week_end.isoformat()

    @property
    def due_on_iso(self) -> str:
        """Due instant in the form GitHub expects (``YYYY-MM-DDTHH:MM:SSZ``)."""
        return self.due_on_utc.astimezone(dt.UTC).strftime("%Y-%m-%dT%H:%M:%SZ")


@dataclass
class RemoteMilestone:
    """A milestone as returned by the GitHub API."""

    number: int
    title: str
    description: str = ""
    due_on: dt.datetime | None = None
    state: Literal["open", "closed"] = "open"

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RemoteMilestone:
        raw_due: str | None = data.get("due_on")
        return cls(
            number=int(data["number"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            due_on=dt.datetime.fromisoformat(raw_due) if raw_due else None,
            state="closed" if data.get("state") == "closed" else "open",
        )


@dataclass(frozen=True)
class MilestoneUpdate:
    """Correct title and description of an existing milestone.

    The due date is never re-sent; the milestone was matched by it.
    """

    number: int
    descriptor: MilestoneDescriptor


@dataclass(frozen=True)
class LabelDescriptor:
    """A desired label from the configuration document."""

    name: str
    color: str  # Hex color, '#' prefix optional
    description: str | None = None


@dataclass
class RemoteLabel:
    """A label as returned by the GitHub API."""

    name: str
    color: str  # Hex color without '#' prefix
    description: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> RemoteLabel:
        return cls(name=data["name"], color=data.get("color") or "", description=data.get("description"))


@dataclass(frozen=True)
class ReconciliationPlan[C, U]:
    """Create/update set computed from desired and remote state.

    Plans are pure data: building one never touches the network.
    """

    to_create: tuple[C, ...] = ()
    to_update: tuple[U, ...] = ()
    unchanged_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.to_create and not self.to_update


@dataclass(frozen=True)
class ApplyOutcome:
    """Result of applying one item of a batch."""

    item_key: str
    action: Literal["create", "update", "apply"]
    succeeded: bool
    error: str | None = None


@dataclass
class RunSummary:
    """Aggregated outcomes of one batch."""

    created_count: int = 0
    updated_count: int = 0
    failed_count: int = 0
    applied_count: int = 0
    failures: list[ApplyOutcome] = field(default_factory=list)

    @classmethod
    def from_outcomes(cls, outcomes: Iterable[ApplyOutcome]) -> RunSummary:
        summary = cls()
        for outcome in outcomes:
            if not outcome.succeeded:
                summary.failed_count += 1
                summary.failures.append(outcome)
            elif outcome.action == "create":
                summary.created_count += 1
            elif outcome.action == "update":
                summary.updated_count += 1
            else:
                summary.applied_count += 1
        return summary

    @property
    def succeeded_count(self) -> int:
        return self.created_count + self.updated_count + self.applied_count

    @property
    def total(self) -> int:
        return self.succeeded_count + self.failed_count

    @property
    def ok(self) -> bool:
        return self.failed_count == 0

    def format_counts(self) -> str:
        return f"Created: {self.created_count} / Updated: {self.updated_count} / Failed: {self.failed_count}"


@dataclass(frozen=True)
class RepoInfo:
    """The subset of repository metadata the tool reads."""

    default_branch: str
    visibility: str


@dataclass
class BranchProtectionSettings:
    """Selected branch protection rules."""

    block_direct_pushes: bool = False
    require_pr_reviews: bool = False
    required_approvals: int = 1
    require_status_checks: bool = False
    require_conversation_resolution: bool = False
    enforce_admins: bool = False
    allow_force_pushes: bool = False
    block_deletion: bool = False

    @property
    def any_selected(self) -> bool:
        return any(
            (
                self.block_direct_pushes,
                self.require_pr_reviews,
                self.require_status_checks,
                self.require_conversation_resolution,
                self.enforce_admins,
                self.allow_force_pushes,
                self.block_deletion,
            )
        )


@dataclass
class RepoSettings:
    """Selected repository merge and branch-cleanup options."""

    delete_branch_on_merge: bool = False
    allow_squash_merge: bool = False
    allow_merge_commit: bool = False
    allow_rebase_merge: bool = False

    @property
    def any_selected(self) -> bool:
        return any(
            (self.delete_branch_on_merge, self.allow_squash_merge, self.allow_merge_commit, self.allow_rebase_merge)
        )

    @property
    def has_merge_strategy(self) -> bool:
        return self.allow_squash_merge or self.allow_merge_commit or self.allow_rebase_merge


@dataclass
class SecuritySettings:
    """Security features to enable."""

    dependabot_alerts: bool = False
    dependabot_security_updates: bool = False
    secret_scanning: bool = False
    secret_scanning_push_protection: bool = False
