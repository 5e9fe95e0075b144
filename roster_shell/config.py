"""
Shell configuration.

Read from the environment, optionally seeded from a ``.env`` file:

  ROSTER_LOG_LEVEL          root log level           (default WARNING)
  ROSTER_PROMPT             main prompt              (default "> ")
  ROSTER_STRICT_INVARIANTS  check after mutations    (default true)
"""

from __future__ import annotations

import logging
import os
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class ConfigError(Exception):
    """Raised when configuration cannot be loaded or is invalid."""


class ShellConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    log_level: str = "WARNING"
    prompt: str = "> "
    strict_invariants: bool = True

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"unknown log level {value!r}")
        return level


def load_config(env_file: Optional[str] = None) -> ShellConfig:
    """
    Load a .env file (explicit path, or ./.env if present) and build
    a ShellConfig from the environment. Existing variables win.
    """
    if env_file is not None:
        if not os.path.exists(env_file):
            raise ConfigError(f"env file not found: {env_file}")
        load_dotenv(env_file)
    else:
        env_path = os.path.join(os.getcwd(), ".env")
        if os.path.exists(env_path):
            load_dotenv(env_path)

    values = {}
    for key, var in (
        ("log_level", "ROSTER_LOG_LEVEL"),
        ("prompt", "ROSTER_PROMPT"),
        ("strict_invariants", "ROSTER_STRICT_INVARIANTS"),
    ):
        if var in os.environ:
            values[key] = os.environ[var]

    try:
        return ShellConfig(**values)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
