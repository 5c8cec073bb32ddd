"""
Application configuration.

Settings come from a plain dict (usually a JSON file passed with
``--config``), then the ``EDURECORDS_DATA_FILE`` environment variable, then
explicit overrides such as command-line flags. The result is validated by
``AppConfig``.
"""

import json
import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from .core.exceptions import ConfigurationError

DATA_FILE_ENV = "EDURECORDS_DATA_FILE"


class AppConfig(BaseModel):
    data_file: str = Field("edurecords_data.txt", min_length=1)
    log_level: str = Field("WARNING", pattern=r'^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$')
    log_file: Optional[str] = None
    autoload: bool = False
    escape_word: str = Field("menu", min_length=1)


def load_config(path: Optional[str] = None,
                overrides: Optional[Dict[str, Any]] = None,
                environ: Optional[Dict[str, str]] = None) -> AppConfig:
    """Build an ``AppConfig`` from a JSON file, the environment and overrides."""
    values: Dict[str, Any] = {}

    if path:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Cannot read config file {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Config file {path} must contain a JSON object")
        values.update(data)

    env = os.environ if environ is None else environ
    if env.get(DATA_FILE_ENV):
        values["data_file"] = env[DATA_FILE_ENV]

    for key, value in (overrides or {}).items():
        if value is not None:
            values[key] = value

    if isinstance(values.get("log_level"), str):
        values["log_level"] = values["log_level"].upper()

    try:
        return AppConfig(**values)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}", details={"errors": e.errors()})
