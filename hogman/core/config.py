"""Configuration: environment settings and per-invocation CLI options."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from hogman.core.errors import ErrorKind, HogmanError

DEFAULT_HOST = "https://app.posthog.com"
CONFIG_FILE_NAME = "config.json"


class EnvSettings(BaseSettings):
    """PostHog credentials supplied through the environment.

    When ``POSTHOG_API_KEY`` is set it overrides every stored profile.
    Only real environment variables are read, never a ``.env`` file.
    """

    model_config = SettingsConfigDict(env_prefix="POSTHOG_", extra="ignore")

    api_key: Optional[str] = None
    host: str = DEFAULT_HOST
    project_id: Optional[int] = None

    @field_validator("project_id", mode="before")
    @classmethod
    def _blank_project_is_unset(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("host", mode="before")
    @classmethod
    def _blank_host_is_default(cls, value):
        if isinstance(value, str) and not value.strip():
            return DEFAULT_HOST
        return value


def load_env_settings() -> EnvSettings:
    """Read environment settings, mapping bad values to a config error.

    Host and project are only used alongside ``POSTHOG_API_KEY``, so without
    a key their values are not validated and the defaults are returned.
    """
    try:
        return EnvSettings()
    except ValidationError as e:
        if not os.environ.get("POSTHOG_API_KEY", "").strip():
            return EnvSettings.model_construct()
        fields = ", ".join(
            "POSTHOG_" + str(err["loc"][0]).upper() for err in e.errors() if err.get("loc")
        )
        raise HogmanError(
            ErrorKind.CONFIG_ERROR,
            f"Invalid environment configuration: {fields or e}",
        ) from e


def default_config_path() -> Path:
    """Location of the credential store file.

    ``HOGMAN_CONFIG_DIR`` overrides the default ``~/.config/hogman``.
    """
    config_dir = os.getenv("HOGMAN_CONFIG_DIR")
    if config_dir:
        return Path(config_dir).expanduser() / CONFIG_FILE_NAME
    return Path.home() / ".config" / "hogman" / CONFIG_FILE_NAME


@dataclass
class CLIConfig:
    """Options for a single hogman invocation.

    Built once in ``main()`` from the global flags and handed to every
    command, so nothing about output mode lives in module state.
    """

    json_mode: bool = False
    account: Optional[str] = None
    project: Optional[int] = None
    verbose: bool = False
    config_path: Path = field(default_factory=default_config_path)
