"""GitHub API gateway backed by the authenticated ``gh`` command-line client."""

from __future__ import annotations

import json
import logging
import subprocess
import threading
from typing import Any, Final

from .exceptions import GatewayError

logger: logging.Logger = logging.getLogger(__name__)

ALLOWED_METHODS: Final[frozenset[str]] = frozenset({"GET", "POST", "PUT", "PATCH", "DELETE"})
_ACCEPT_HEADER: Final[str] = "Accept: application/vnd.github+json"


def flatten_pages(data: Any) -> Any:
    """Flatten the page-of-pages result of ``gh api --paginate --slurp``.

    ``[[a, b], [c]]`` becomes ``[a, b, c]``. Anything that is not a list of
    lists is returned unchanged, so an empty result stays ``[]``.
    """
    if isinstance(data, list) and all(isinstance(page, list) for page in data):
        return [item for page in data for item in page]
    return data


def _validate_request(method: str, endpoint: str) -> None:
    if method not in ALLOWED_METHODS:
        msg = f"Unsupported HTTP method: {method}"
        raise ValueError(msg)
    if not endpoint.startswith("/") or "://" in endpoint:
        msg = f"Endpoint must be a path-only API route: {endpoint}"
        raise ValueError(msg)


class GhCliGateway:
    """Invokes ``gh api`` as a subprocess, one call at a time.

    Request bodies are passed on stdin (``--input -``) so they never show up
    in the process list or hit argument length limits.
    """

    def __init__(self, gh_path: str = "gh") -> None:
        self.gh_path: str = gh_path
        self._lock: threading.Lock = threading.Lock()

    def build_command(self, method: str, endpoint: str, *, has_body: bool, paginate: bool) -> list[str]:
        """Build the argv for a ``gh api`` call."""
        cmd = [self.gh_path, "api", "--method", method, "-H", _ACCEPT_HEADER, endpoint]
        if paginate:
            cmd += ["--paginate", "--slurp"]
        if has_body:
            cmd += ["--input", "-"]
        return cmd

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
            endpoint: Path-only API route
            body: Optional JSON-serializable request body, sent on stdin
            paginate: Fetch all pages and flatten them into one list

        Returns:
            Parsed JSON, or None when gh printed nothing (e.g. 204 No Content)

        Raises:
            ValueError: If method or endpoint violate the call contract
            GatewayError: If gh fails or its output is not valid JSON
        """
        _validate_request(method, endpoint)
        command = f"{method} {endpoint}"
        cmd = self.build_command(method, endpoint, has_body=body is not None, paginate=paginate)
        stdin_text = json.dumps(body) if body is not None else None

        logger.debug(f"gh api {command}{' (paginated)' if paginate else ''}")
        with self._lock:
            try:
                result = subprocess.run(  # noqa: S603
                    cmd,
                    input=stdin_text,
                    capture_output=True,
                    text=True,
                    check=False,
                )
            except OSError as e:
                msg = f"Failed to run {self.gh_path}: {e}"
                raise GatewayError(msg, command=command) from e

        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            msg = stderr or f"gh api {command} failed with exit code {result.returncode}"
            logger.debug(f"gh api {command} failed: {msg}")
            raise GatewayError(msg, returncode=result.returncode, command=command)

        output = (result.stdout or "").strip()
        if not output:
            return None

        try:
            parsed: Any = json.loads(output)
        except json.JSONDecodeError as e:
            msg = f"Failed to parse response of gh api {command}: {e}"
            raise GatewayError(msg, command=command) from e

        return flatten_pages(parsed) if paginate else parsed
