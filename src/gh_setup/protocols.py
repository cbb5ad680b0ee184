"""Protocols defining the capabilities injected into the reconciliation core.

The core never shells out or talks to a terminal directly. It receives:

1. Gateway: performs GitHub API calls (the real one runs ``gh api``)
2. Reporter: surfaces progress, warnings and errors, and asks for confirmation
3. Prompter: a Reporter that can also elicit input, used by the command layer

This separation allows:
- Testing reconcilers with an in-memory gateway returning canned JSON
- Running the core without a terminal (scripted reporter in tests)
- Keeping prompt rendering out of the reconciliation logic
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence


class Gateway(Protocol):
    """Protocol for invoking GitHub REST endpoints.

    Implementations must raise ``GatewayError`` (and nothing else) when a call
    fails, so that batch callers can record the failure and continue.
    """

    def invoke(
        self,
        method: str,
        endpoint: str,
        body: Any = None,
        *,
        paginate: bool = False,
    ) -> Any:
        """Call an endpoint and return the parsed JSON response.

        Args:
            method: HTTP method (GET, POST, PUT, PATCH or DELETE)
            endpoint: Path-only API route, e.g. ``/repos/owner/name/labels``
            body: Optional JSON-serializable request body
            paginate: Retrieve all pages and return them as one flat list

        Returns:
            The parsed response, or None for an empty response body

        Raises:
            GatewayError: If the call fails or the response cannot be parsed
        """
        ...


class Reporter(Protocol):
    """Protocol for user-visible reporting and confirmation."""

    def report_info(self, message: str) -> None: ...

    def report_warning(self, message: str) -> None: ...

    def report_error(self, message: str) -> None: ...

    def confirm(self, message: str, *, default: bool = True) -> bool:
        """Ask a yes/no question. Returns False if the user aborts."""
        ...


class Prompter(Reporter, Protocol):
    """Protocol for interactive elicitation of desired state.

    Every method returns None when the user aborts the prompt.
    """

    def note(self, message: str, title: str = "") -> None:
        """Show a multi-line block of information."""
        ...

    def text(
        self,
        message: str,
        *,
        default: str | None = None,
        validate: Callable[[str], str | None] | None = None,
    ) -> str | None:
        """Ask for free text. ``validate`` returns an error message or None."""
        ...

    def select[T](self, message: str, options: Sequence[tuple[T, str]]) -> T | None:
        """Ask the user to pick exactly one option."""
        ...

    def multiselect[T](
        self,
        message: str,
        options: Sequence[tuple[T, str]],
        *,
        initial: Sequence[T] = (),
    ) -> list[T] | None:
        """Ask the user to pick any number of options."""
        ...
