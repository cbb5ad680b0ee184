"""
Weekly milestone reconciliation.

Remote milestones are matched by due date, never by number: a generated
week matches the remote milestone whose due instant falls on the week's
Saturday in the configured timezone. Matched milestones get their title and
description corrected; unmatched weeks are created.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from . import github_api as gha
from .batch import apply_each
from .models import MilestoneUpdate, ReconciliationPlan, RunSummary
from .schedule import local_date_key

if TYPE_CHECKING:
    import datetime as dt
    from collections.abc import Sequence

    from .models import ApplyOutcome, MilestoneDescriptor, RemoteMilestone, RepositoryRef
    from .protocols import Gateway, Reporter

logger: logging.Logger = logging.getLogger(__name__)

type MilestonePlan = ReconciliationPlan[MilestoneDescriptor, MilestoneUpdate]


@dataclass
class MilestoneIndex:
    """Remote milestone numbers keyed by due date (``YYYY-MM-DD``)."""

    numbers: dict[str, int] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


def index_milestones(remote: Sequence[RemoteMilestone], timezone: str = "UTC") -> MilestoneIndex:
    """Index remote milestones by the local calendar date of their due instant.

    Milestones without a due date cannot match a week and are skipped. When two
    milestones share a due date, the later one in ``remote`` wins and a warning
    naming both is recorded.
    """
    index = MilestoneIndex()
    by_key: dict[str, RemoteMilestone] = {}
    for milestone in remote:
        if milestone.due_on is None:
            continue
        key = local_date_key(milestone.due_on, timezone)
        previous = by_key.get(key)
        if previous is not None:
            index.warnings.append(
                f'Duplicate due_on date {key}: milestone #{milestone.number} ("{milestone.title}") '
                f'overwrites #{previous.number} ("{previous.title}")'
            )
        by_key[key] = milestone
        index.numbers[key] = milestone.number
    return index


def plan_milestones(
    descriptors: Sequence[MilestoneDescriptor],
    index: MilestoneIndex,
) -> MilestonePlan:
    """Classify each generated week as create or update.

    Pure: the plan depends only on the descriptors and the index.
    """
    to_create: list[MilestoneDescriptor] = []
    to_update: list[MilestoneUpdate] = []
    for descriptor in descriptors:
        existing_number = index.numbers.get(descriptor.date_key)
        if existing_number is None:
            to_create.append(descriptor)
        else:
            to_update.append(MilestoneUpdate(number=existing_number, descriptor=descriptor))
    return ReconciliationPlan(to_create=tuple(to_create), to_update=tuple(to_update))


def apply_milestone_plan(
    gateway: Gateway,
    repo: RepositoryRef,
    plan: MilestonePlan,
) -> list[ApplyOutcome]:
    """Apply a milestone plan in week order, one outcome per milestone."""

    def create(item: MilestoneDescriptor) -> None:
        gha.create_milestone(gateway, repo, item.title, item.description, item.due_on_iso)

    def update(item: MilestoneUpdate) -> None:
        gha.update_milestone(gateway, repo, item.number, item.descriptor.title, item.descriptor.description)

    def week_end(step: MilestoneDescriptor | MilestoneUpdate) -> dt.date:
        return step.descriptor.week_end if isinstance(step, MilestoneUpdate) else step.week_end

    outcomes: list[ApplyOutcome] = []
    for step in sorted([*plan.to_create, *plan.to_update], key=week_end):
        if isinstance(step, MilestoneUpdate):
            outcomes += apply_each([step], lambda u: u.descriptor.title, "update", update)
        else:
            outcomes += apply_each([step], lambda d: d.title, "create", create)
    return outcomes


def fetch_milestone_index(
    gateway: Gateway,
    repo: RepositoryRef,
    reporter: Reporter,
    timezone: str = "UTC",
) -> MilestoneIndex:
    """Fetch existing milestones and index them, surfacing duplicate dates.

    Raises:
        GatewayError: If the milestones cannot be listed
    """
    existing = gha.list_milestones(gateway, repo)
    logger.info(f"Found {len(existing)} existing milestones in {repo}")
    index = index_milestones(existing, timezone)
    for warning in index.warnings:
        logger.warning(warning)
        reporter.report_warning(warning)
    return index


def sync_milestones(
    gateway: Gateway,
    repo: RepositoryRef,
    descriptors: Sequence[MilestoneDescriptor],
    reporter: Reporter,
    timezone: str = "UTC",
    *,
    index: MilestoneIndex | None = None,
) -> RunSummary:
    """Create or update one milestone per descriptor.

    Args:
        gateway: Gateway used for all API calls
        repo: Target repository
        descriptors: Generated weekly milestones
        reporter: Receives duplicate-date warnings
        timezone: Zone the descriptors were generated in
        index: Previously fetched index; fetched here when omitted

    Returns:
        Summary of created, updated and failed milestones

    Raises:
        GatewayError: If the existing milestones cannot be listed
    """
    if index is None:
        index = fetch_milestone_index(gateway, repo, reporter, timezone)
    plan = plan_milestones(descriptors, index)
    logger.info(f"Milestone plan for {repo}: {len(plan.to_create)} to create, {len(plan.to_update)} to update")
    summary = RunSummary.from_outcomes(apply_milestone_plan(gateway, repo, plan))
    logger.info(f"Milestones for {repo}: {summary.format_counts()}")
    return summary
