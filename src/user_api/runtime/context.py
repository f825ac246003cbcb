"""Process configuration and the per-context view of it.

The configuration file is located through :class:`RuntimeEnvironment`, loaded
once at import and exposed through a ``ContextVar`` so that tests and
commands can layer overrides with :func:`with_context` without touching the
process-wide defaults.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.user_api.runtime.config.config_data import ConfigData
from src.user_api.runtime.config.config_template import load_templated_yaml


class RuntimeEnvironment(BaseSettings):
    """Where the configuration comes from: ``APP_*`` variables or ``.env``."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    config_file: Path = Field(default=Path("config.yaml"), validation_alias="APP_CONFIG_FILE")


@dataclass
class AppContext:
    config: ConfigData


def load_default_config() -> ConfigData:
    """Load the configuration file, or the built-in defaults if there is none."""
    config_file = RuntimeEnvironment().config_file
    if not config_file.exists():
        logger.warning("No configuration at {}, running on defaults", config_file)
        return ConfigData()
    return load_templated_yaml(config_file)


_app_context: ContextVar[AppContext] = ContextVar(
    "user_api_context", default=AppContext(config=load_default_config())
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _explicit_values(model: BaseModel) -> dict[str, Any]:
    """Values the caller assigned on ``model``, nested models included.

    A nested model contributes only its own assigned values; it is taken
    whole when it was assigned as a unit and none of its fields were.
    """
    values: dict[str, Any] = {}
    for name, value in model:
        if isinstance(value, BaseModel):
            nested = _explicit_values(value)
            if nested:
                values[name] = nested
            elif name in model.model_fields_set:
                values[name] = value.model_dump()
        elif name in model.model_fields_set:
            values[name] = value
    return values


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    merged = dict(target)
    for key, value in updates.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_update(current, value)
        else:
            merged[key] = value
    return merged


@contextmanager
def with_context(config_override: ConfigData | None = None):
    """Layer the assigned fields of ``config_override`` over the current config.

    Example:
        override = ConfigData()
        override.pagination.max_page_size = 50
        with with_context(override):
            assert get_config().pagination.max_page_size == 50
    """
    if config_override is None:
        yield
        return
    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    current = get_context()
    merged = ConfigData.model_validate(
        _deep_update(current.config.model_dump(), _explicit_values(config_override))
    )
    token = set_context(replace(current, config=merged))
    try:
        yield
    finally:
        _app_context.reset(token)


def set_config(config: ConfigData) -> None:
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    return get_context().config
