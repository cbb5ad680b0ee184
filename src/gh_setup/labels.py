"""
Label reconciliation against the labels defined in the config document.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from . import github_api as gha
from .batch import apply_each
from .models import ReconciliationPlan, RunSummary

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .models import ApplyOutcome, LabelDescriptor, RemoteLabel, RepositoryRef
    from .protocols import Gateway, Reporter

logger: logging.Logger = logging.getLogger(__name__)

type LabelPlan = ReconciliationPlan[LabelDescriptor, LabelDescriptor]


def normalize_color(color: str) -> str:
    """Strip a leading '#' and lowercase, e.g. ``"#D73A4A"`` -> ``"d73a4a"``."""
    return color.strip().removeprefix("#").lower()


def plan_labels(desired: Sequence[LabelDescriptor], remote: Sequence[RemoteLabel]) -> LabelPlan:
    """Classify each desired label as create, update or unchanged.

    Matching is case-insensitive on name, as GitHub labels are. A label is
    updated when its normalized color or its description (missing counts as
    empty) differs. Remote labels that are not desired are left alone: label
    sync never deletes.

    Args:
        desired: Labels from the config document
        remote: Labels currently in the repository

    Returns:
        The plan; unchanged labels are only counted
    """
    existing: dict[str, RemoteLabel] = {label.name.lower(): label for label in remote}
    seen: set[str] = set()
    to_create: list[LabelDescriptor] = []
    to_update: list[LabelDescriptor] = []
    unchanged = 0

    for label in desired:
        key = label.name.lower()
        if key in seen:
            logger.warning(f"Label '{label.name}' is defined more than once; keeping the first definition")
            continue
        seen.add(key)

        current = existing.get(key)
        if current is None:
            to_create.append(label)
            continue

        color_changed = normalize_color(current.color) != normalize_color(label.color)
        description_changed = (current.description or "") != (label.description or "")
        if color_changed or description_changed:
            to_update.append(label)
        else:
            unchanged += 1

    return ReconciliationPlan(to_create=tuple(to_create), to_update=tuple(to_update), unchanged_count=unchanged)


def format_label_plan(plan: LabelPlan) -> str:
    """Render the plan as the diff shown before confirmation."""
    lines: list[str] = []
    if plan.to_create:
        lines.append(f"Create ({len(plan.to_create)}):")
        lines.extend(f"  + {label.name} (#{normalize_color(label.color)})" for label in plan.to_create)
    if plan.to_update:
        lines.append(f"Update ({len(plan.to_update)}):")
        lines.extend(f"  ~ {label.name} (#{normalize_color(label.color)})" for label in plan.to_update)
    lines.append(f"Unchanged: {plan.unchanged_count}")
    return "\n".join(lines)


def apply_label_plan(gateway: Gateway, repo: RepositoryRef, plan: LabelPlan) -> list[ApplyOutcome]:
    """Create, then update, every label in the plan. One outcome per label."""

    def create(label: LabelDescriptor) -> None:
        gha.create_label(gateway, repo, label.name, normalize_color(label.color), label.description or "")

    def update(label: LabelDescriptor) -> None:
        gha.update_label(gateway, repo, label.name, normalize_color(label.color), label.description or "")

    outcomes = apply_each(plan.to_create, lambda label: label.name, "create", create)
    outcomes += apply_each(plan.to_update, lambda label: label.name, "update", update)
    return outcomes


def sync_labels(
    gateway: Gateway,
    repo: RepositoryRef,
    desired: Sequence[LabelDescriptor],
    reporter: Reporter,
) -> RunSummary | None:
    """Fetch remote labels, show the diff, and apply it once confirmed.

    Returns:
        The run summary, or None when there was nothing to do or the user
        declined

    Raises:
        GatewayError: If the existing labels cannot be listed
    """
    existing = gha.list_labels(gateway, repo)
    logger.info(f"Found {len(existing)} existing labels in {repo}")

    plan = plan_labels(desired, existing)
    if plan.is_empty:
        reporter.report_info("All labels are up to date.")
        return None

    reporter.report_info(f"Label changes:\n{format_label_plan(plan)}")
    if not reporter.confirm("Apply these changes?"):
        logger.info("Label sync cancelled by user")
        return None

    summary = RunSummary.from_outcomes(apply_label_plan(gateway, repo, plan))
    logger.info(f"Labels for {repo}: {summary.format_counts()}")
    return summary
