"""The GitHub REST endpoints used by gh-setup, expressed over a Gateway."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from .exceptions import GatewayError
from .models import RemoteLabel, RemoteMilestone, RepoInfo

if TYPE_CHECKING:
    from collections.abc import Callable

    from .models import RepositoryRef
    from .protocols import Gateway

# Module-wide logger
logger: logging.Logger = logging.getLogger(__name__)


def _label_path(repo: RepositoryRef, name: str) -> str:
    return f"/repos/{repo}/labels/{quote(name, safe='')}"


def _parse_list[T](data: Any, what: str, parse: Callable[[dict[str, Any]], T]) -> list[T]:
    """Parse a list response item by item; any malformed item becomes a GatewayError."""
    if data is None:
        return []
    if not isinstance(data, list):
        msg = f"Unexpected response while listing {what}: expected a list"
        raise GatewayError(msg)
    items: list[T] = []
    for position, item in enumerate(data):
        if not isinstance(item, dict):
            msg = f"Unexpected response while listing {what}: item {position} is not an object"
            raise GatewayError(msg)
        try:
            items.append(parse(item))
        except (KeyError, TypeError, ValueError) as e:
            msg = f"Unexpected response while listing {what}: item {position} is malformed ({e!r})"
            raise GatewayError(msg) from e
    return items


def get_repo_info(gateway: Gateway, repo: RepositoryRef) -> RepoInfo:
    data = gateway.invoke("GET", f"/repos/{repo}")
    if not isinstance(data, dict):
        msg = f"Unexpected response for repository {repo}"
        raise GatewayError(msg)
    return RepoInfo(default_branch=data.get("default_branch") or "main", visibility=data.get("visibility") or "")


def update_branch_protection(gateway: Gateway, repo: RepositoryRef, branch: str, payload: dict[str, Any]) -> None:
    gateway.invoke("PUT", f"/repos/{repo}/branches/{quote(branch, safe='')}/protection", payload)


def update_repo_settings(gateway: Gateway, repo: RepositoryRef, payload: dict[str, Any]) -> None:
    gateway.invoke("PATCH", f"/repos/{repo}", payload)


def enable_dependabot_alerts(gateway: Gateway, repo: RepositoryRef) -> None:
    gateway.invoke("PUT", f"/repos/{repo}/vulnerability-alerts")


def enable_dependabot_security_updates(gateway: Gateway, repo: RepositoryRef) -> None:
    gateway.invoke("PUT", f"/repos/{repo}/automated-security-fixes")


def enable_secret_scanning(gateway: Gateway, repo: RepositoryRef) -> None:
    """Enable secret scanning without touching any other security feature."""
    gateway.invoke("PATCH", f"/repos/{repo}", {"security_and_analysis": {"secret_scanning": {"status": "enabled"}}})


def enable_secret_scanning_push_protection(gateway: Gateway, repo: RepositoryRef) -> None:
    gateway.invoke(
        "PATCH",
        f"/repos/{repo}",
        {"security_and_analysis": {"secret_scanning_push_protection": {"status": "enabled"}}},
    )


def list_milestones(gateway: Gateway, repo: RepositoryRef) -> list[RemoteMilestone]:
    """List all milestones, open and closed, across all pages."""
    data = gateway.invoke("GET", f"/repos/{repo}/milestones?state=all&per_page=100", paginate=True)
    return _parse_list(data, "milestones", RemoteMilestone.from_api)


def create_milestone(gateway: Gateway, repo: RepositoryRef, title: str, description: str, due_on: str) -> int:
    """Create a milestone and return its number."""
    data = gateway.invoke(
        "POST",
        f"/repos/{repo}/milestones",
        {"title": title, "description": description, "due_on": due_on},
    )
    number = data.get("number", 0) if isinstance(data, dict) else 0
    logger.debug(f"Created milestone #{number}: {title}")
    return int(number)


def update_milestone(gateway: Gateway, repo: RepositoryRef, number: int, title: str, description: str) -> None:
    """Update title and description of a milestone. The due date is left alone."""
    gateway.invoke("PATCH", f"/repos/{repo}/milestones/{number}", {"title": title, "description": description})
    logger.debug(f"Updated milestone #{number}: {title}")


def list_labels(gateway: Gateway, repo: RepositoryRef) -> list[RemoteLabel]:
    data = gateway.invoke("GET", f"/repos/{repo}/labels?per_page=100", paginate=True)
    return _parse_list(data, "labels", RemoteLabel.from_api)


def create_label(gateway: Gateway, repo: RepositoryRef, name: str, color: str, description: str) -> None:
    gateway.invoke("POST", f"/repos/{repo}/labels", {"name": name, "color": color, "description": description})
    logger.debug(f"Created label: {name}")


def update_label(gateway: Gateway, repo: RepositoryRef, name: str, color: str, description: str) -> None:
    gateway.invoke("PATCH", _label_path(repo, name), {"color": color, "description": description})
    logger.debug(f"Updated label: {name}")


def delete_label(gateway: Gateway, repo: RepositoryRef, name: str) -> None:
    """Delete a label. Label sync never calls this; remote-only labels are kept."""
    gateway.invoke("DELETE", _label_path(repo, name))
    logger.debug(f"Deleted label: {name}")
