"""Sequential, non-aborting application of a batch of changes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from .exceptions import GatewayError
from .models import ApplyOutcome

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

logger: logging.Logger = logging.getLogger(__name__)


def apply_each[T](
    items: Iterable[T],
    key: Callable[[T], str],
    action: Literal["create", "update", "apply"],
    fn: Callable[[T], object],
) -> list[ApplyOutcome]:
    """Apply ``fn`` to every item in order, one outcome per item.

    A failing item is recorded and the loop continues; already-applied items
    are never rolled back.
    """
    outcomes: list[ApplyOutcome] = []
    for item in items:
        item_key = key(item)
        try:
            fn(item)
        except GatewayError as e:
            logger.debug(f"Failed to {action} {item_key}: {e.message}")
            outcomes.append(ApplyOutcome(item_key=item_key, action=action, succeeded=False, error=e.message))
            continue
        outcomes.append(ApplyOutcome(item_key=item_key, action=action, succeeded=True))
    return outcomes
