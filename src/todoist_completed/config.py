# SPDX-FileCopyrightText: 2025 Todoist Completed Contributors
# SPDX-License-Identifier: MPL-2.0

"""Settings for the completed-tasks report."""

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

import yaml

from todoist_completed.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_DATE_FORMAT = "YYYY-MM-DD"
DEFAULT_TIMEOUT = 30.0
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "todoist-completed" / "config.yaml"

TOKEN_ENV = "TODOIST_API_KEY"
CONFIG_PATH_ENV = "TODOIST_COMPLETED_CONFIG"


@dataclass(frozen=True)
class Settings:
    """Read-only configuration passed into every fetch."""

    api_token: str = ""
    date_format: str = DEFAULT_DATE_FORMAT
    timeout: float = DEFAULT_TIMEOUT

    def require_token(self) -> str:
        """Return the API token, or raise if none is configured."""
        if not self.api_token:
            raise ConfigurationError(
                "Todoist API token is not set. "
                f"Set {TOKEN_ENV} or api_token in the config file."
            )
        return self.api_token

    def with_date_format(self, date_format: str | None) -> "Settings":
        if not date_format:
            return self
        return replace(self, date_format=date_format.strip())


def _read_config_file(path: Path) -> dict:
    if not path.exists():
        logger.warning(f"No config found at {path}, using defaults")
        return {}

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (yaml.YAMLError, OSError) as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_settings(
    config_path: Path | None = None,
    environ: dict | None = None,
) -> Settings:
    """Load settings from the YAML config file and the environment.

    The environment token wins over the file. Blank values fall back to
    defaults.

    Args:
        config_path: Explicit config file; defaults to $TODOIST_COMPLETED_CONFIG
            or ~/.config/todoist-completed/config.yaml
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Immutable Settings value

    Raises:
        ConfigurationError: If the file is unreadable or has bad values
    """
    env = os.environ if environ is None else environ
    if config_path is None:
        config_path = Path(env.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)

    data = _read_config_file(config_path)

    token = str(env.get(TOKEN_ENV) or data.get("api_token") or "").strip()
    date_format = str(data.get("date_format") or "").strip() or DEFAULT_DATE_FORMAT

    raw_timeout = data.get("timeout", DEFAULT_TIMEOUT)
    try:
        timeout = float(raw_timeout)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Invalid timeout in config: {raw_timeout!r}") from e
    if timeout <= 0:
        raise ConfigurationError(f"Timeout must be positive, got {timeout}")

    return Settings(api_token=token, date_format=date_format, timeout=timeout)
