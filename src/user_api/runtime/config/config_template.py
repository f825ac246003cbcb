"""Loading ``config.yaml`` with shell-style environment placeholders.

Placeholders are resolved on the raw text before YAML parsing:

- ``${NAME}``: the variable must be set
- ``${NAME:-fallback}``: ``fallback`` when the variable is unset
- ``${NAME:?hint}``: the variable must be set, ``hint`` explains why
"""

import os
import re
from pathlib import Path

import yaml
from loguru import logger
from pydantic import ValidationError

from src.user_api.runtime.config.config_data import ConfigData

_PLACEHOLDER = re.compile(r"\$\{([^}]+)\}")


def _resolve(expression: str) -> str:
    name, sep, fallback = expression.partition(":-")
    if sep:
        return os.environ.get(name, fallback)

    name, sep, hint = expression.partition(":?")
    value = os.environ.get(name)
    if value is not None:
        return value
    if sep:
        raise ValueError(f"Required environment variable {name}: {hint}")
    raise ValueError(f"Required environment variable {name} not set")


def substitute_env_vars(text: str) -> str:
    """Replace every ``${...}`` placeholder in ``text``.

    Raises:
        ValueError: If a required variable is unset
    """
    return _PLACEHOLDER.sub(lambda match: _resolve(match.group(1)), text)


def apply_environment_overrides(env_mode: str) -> list[str]:
    """Copy ``<ENV>_NAME`` variables onto ``NAME`` for the active environment.

    Returns the names of the variables that were set.
    """
    prefix = f"{env_mode.upper()}_"
    overrides = {
        name[len(prefix):]: value
        for name, value in os.environ.items()
        if name.startswith(prefix) and len(name) > len(prefix)
    }
    os.environ.update(overrides)
    return list(overrides)


def load_templated_yaml(file_path: Path) -> ConfigData:
    """Read ``file_path``, resolve placeholders and validate the ``config`` section.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If a required variable is unset, the YAML is malformed or
            the values do not form a valid configuration
    """
    raw = Path(file_path).read_text()

    env_mode = os.getenv("APP_ENVIRONMENT", "development")
    overridden = apply_environment_overrides(env_mode)
    logger.info("Loading {} for {} (overrides: {})", file_path, env_mode, overridden or "none")

    try:
        document = yaml.safe_load(substitute_env_vars(raw))
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML: {e}") from e
    if not document:
        raise ValueError("Failed to parse YAML: the document is empty")

    try:
        config = ConfigData.model_validate(document.get("config") or {})
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e

    if config.app.environment == "production" and config.storage.backend == "memory":
        logger.warning("Users are kept in memory in production and are lost on restart")
    return config
