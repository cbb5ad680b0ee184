"""
Pytest configuration and fixtures.

Tests marked ``integration`` run a whole command against the fake gateway and
fail if gh-setup logs anything at WARNING or above. Unit tests may log freely.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, override

import pytest

if TYPE_CHECKING:
    from collections.abc import Generator

_STASH_KEY = pytest.StashKey[list[logging.LogRecord]]()


class WarningCollector(logging.Handler):
    """Collect WARNING and above records emitted while a test runs."""

    def __init__(self, records: list[logging.LogRecord]) -> None:
        super().__init__(level=logging.WARNING)
        self.records = records

    @override
    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)


@pytest.fixture(autouse=True)
def collect_warnings_for_integration_tests(request: pytest.FixtureRequest) -> Generator[None]:
    """Attach a warning collector to the root logger for integration tests."""
    if request.node.get_closest_marker("integration") is None:
        yield
        return

    records: list[logging.LogRecord] = []
    request.node.stash[_STASH_KEY] = records
    handler = WarningCollector(records)
    root_logger = logging.getLogger()
    root_logger.addHandler(handler)
    try:
        yield
    finally:
        root_logger.removeHandler(handler)


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo[None]) -> Generator[None]:  # type: ignore[misc]
    """Turn a passing integration test into a failure when warnings were logged."""
    outcome = yield
    report = outcome.get_result()

    if call.when != "call" or report.outcome != "passed":
        return

    records = item.stash.get(_STASH_KEY, [])
    if records:
        details = "\n".join(
            f"  - {record.levelname}: {record.getMessage()} (in {record.name}:{record.lineno})" for record in records
        )
        report.outcome = "failed"
        report.longrepr = f"Integration test logged {len(records)} warning(s):\n{details}"
