"""
Utility functions for the gh-setup tool.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def setup_logging(*, verbosity: int = 0, log_file: Path | None = None) -> None:
    """Configure logging.

    The console shows warnings by default, INFO with ``-v`` and DEBUG with
    ``-vv``. The optional log file always receives DEBUG.
    """
    if verbosity >= 2:
        console_level = logging.DEBUG
    elif verbosity == 1:
        console_level = logging.INFO
    else:
        console_level = logging.WARNING

    console_handler = logging.StreamHandler()
    console_handler.setLevel(console_level)
    handlers: list[logging.Handler] = [console_handler]

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, mode="a")
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)

    logging.basicConfig(
        level=logging.DEBUG if log_file is not None else console_level,
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
