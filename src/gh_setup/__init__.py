"""
gh-setup

Provisions and reconciles GitHub repository configuration (branch protection,
repository options, security features, weekly milestones and labels) through
the authenticated GitHub CLI.
"""

from __future__ import annotations

from .cli import main
from .exceptions import ConfigError, GatewayError, GhSetupError, PreflightError
from .gateway import GhCliGateway
from .labels import plan_labels, sync_labels
from .milestones import plan_milestones, sync_milestones
from .schedule import generate_schedule
from .utils import setup_logging

# Package version
__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "GatewayError",
    "GhCliGateway",
    "GhSetupError",
    "PreflightError",
    "generate_schedule",
    "main",
    "plan_labels",
    "plan_milestones",
    "setup_logging",
    "sync_labels",
    "sync_milestones",
]
