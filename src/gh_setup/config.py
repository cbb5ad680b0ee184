"""Configuration for gh-setup.

Two sources are involved:

- Application settings, from environment variables and a local `.env` file
  (if present), via pydantic-settings.
- The desired-state document (`.gh-setup.yml` by default), parsed with
  PyYAML and validated with pydantic.

A malformed document is reported and treated as absent, so commands that can
prompt for their input fall back to interactive mode.
"""

from __future__ import annotations

import datetime as dt
import logging
import re
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigError
from .models import LabelDescriptor
from .schedule import get_zone

if TYPE_CHECKING:
    from .protocols import Reporter

logger: logging.Logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(".gh-setup.yml")

_HEX_COLOR = re.compile(r"#?[0-9a-fA-F]{6}")


def _check_timezone(value: str) -> str:
    get_zone(value)
    return value


class AppSettings(BaseSettings):
    """Settings for the gh-setup CLI.

    Environment variables:
    - GH_SETUP_GH_PATH   (optional) gh executable, default ``gh``
    - GH_SETUP_CONFIG    (optional) desired-state document path
    - GH_SETUP_TIMEZONE  (optional) zone for milestone due dates, default ``UTC``
    - GH_SETUP_LOG_FILE  (optional) also write logs to this file
    """

    gh_path: str = Field(
        default="gh",
        validation_alias="GH_SETUP_GH_PATH",
        description="Path or name of the GitHub CLI executable",
    )
    config_path: Path = Field(
        default=DEFAULT_CONFIG_PATH,
        validation_alias="GH_SETUP_CONFIG",
        description="Path of the desired-state YAML document",
    )
    timezone: str = Field(
        default="UTC",
        validation_alias="GH_SETUP_TIMEZONE",
        description="IANA timezone used when the document does not name one",
    )
    log_file: Path | None = Field(
        default=None,
        validation_alias="GH_SETUP_LOG_FILE",
        description="Optional log file (DEBUG level)",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        return _check_timezone(value)


class MilestonesConfig(BaseModel):
    """The ``milestones`` section of the document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    start_date: dt.date = Field(alias="startDate")
    weeks: int = Field(gt=0, strict=True)
    timezone: str | None = None

    @field_validator("start_date", mode="before")
    @classmethod
    def _parse_start_date(cls, value: Any) -> Any:
        if isinstance(value, str):
            try:
                return dt.date.fromisoformat(value.strip())
            except ValueError as e:
                msg = "startDate must be a date in YYYY-MM-DD format"
                raise ValueError(msg) from e
        return value

    @field_validator("start_date")
    @classmethod
    def _require_sunday(cls, value: dt.date) -> dt.date:
        if value.weekday() != 6:
            msg = f"startDate must be a Sunday, got {value.strftime('%A')} {value.isoformat()}"
            raise ValueError(msg)
        return value

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str | None) -> str | None:
        return _check_timezone(value) if value is not None else None


class LabelConfig(BaseModel):
    """One entry of the ``labels`` section."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    color: str
    description: str | None = None

    @field_validator("color", mode="before")
    @classmethod
    def _validate_color(cls, value: Any) -> Any:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"color must be a 6-digit hex color, got {value!r}"
            raise ValueError(msg)
        return value.strip()


class SetupConfig(BaseModel):
    """The whole desired-state document."""

    model_config = ConfigDict(extra="ignore")

    milestones: MilestonesConfig | None = None
    labels: list[LabelConfig] | None = None

    def label_descriptors(self) -> list[LabelDescriptor]:
        return [
            LabelDescriptor(name=label.name, color=label.color, description=label.description)
            for label in self.labels or []
        ]


def parse_config(content: str) -> SetupConfig | None:
    """Parse and validate a desired-state document.

    Returns:
        The validated config, or None for an empty document

    Raises:
        ConfigError: If the document is not valid YAML or fails validation
    """
    try:
        data: Any = yaml.safe_load(content)
    except yaml.YAMLError as e:
        msg = f"Invalid YAML: {e}"
        raise ConfigError(msg) from e

    if data is None:
        return None
    if not isinstance(data, dict):
        msg = "Invalid config: the document must be a mapping"
        raise ConfigError(msg)

    try:
        return SetupConfig.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in e.errors()
        )
        msg = f"Invalid config: {problems}"
        raise ConfigError(msg) from e


def load_config(path: Path = DEFAULT_CONFIG_PATH, reporter: Reporter | None = None) -> SetupConfig | None:
    """Load the desired-state document, treating any problem as "no config".

    Args:
        path: Document location
        reporter: Receives a warning when the document exists but is invalid

    Returns:
        The validated config, or None when missing, empty or invalid
    """
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug(f"No config file at {path}")
        return None
    except OSError as e:
        logger.warning(f"Could not read {path}: {e}")
        if reporter is not None:
            reporter.report_warning(f"Could not read {path}: {e}")
        return None

    try:
        config = parse_config(content)
    except ConfigError as e:
        logger.warning(f"Ignoring {path}: {e}")
        if reporter is not None:
            reporter.report_warning(f"Ignoring {path}: {e}")
        return None

    logger.debug(f"Loaded config from {path}")
    return config
