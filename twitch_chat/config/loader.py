"""Configuration loading from a JSON file and environment variables."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from ..errors import ConfigurationError
from .model import SessionConfig

CONFIG_FILE_ENV = "TWITCH_CHAT_CONF_FILE"
DEFAULT_CONFIG_FILE = "twitch_chat.conf"

# Environment variable -> SessionConfig field
ENV_OVERRIDES = {
    "TWITCH_OAUTH_TOKEN": "oauth_token",
    "TWITCH_NICKNAME": "nickname",
    "TWITCH_CHAT_URL": "url",
    "TWITCH_CAPABILITIES": "capabilities",
}


def get_config_path(path: str | os.PathLike[str] | None = None) -> Path:
    return Path(path or os.environ.get(CONFIG_FILE_ENV, DEFAULT_CONFIG_FILE))


def load_raw_config(path: str | os.PathLike[str]) -> dict[str, Any]:
    """Read the JSON config file; a missing file yields an empty dict."""
    config_path = Path(path)
    try:
        with config_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        logging.debug(f"📁 No config file at {config_path}")
        return {}
    except json.JSONDecodeError as e:
        raise ConfigurationError(
            f"Config file is not valid JSON: {e}", data={"path": str(config_path)}
        ) from e
    if not isinstance(data, dict):
        raise ConfigurationError(
            "Config file must contain a JSON object", data={"path": str(config_path)}
        )
    return data


def apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    merged = dict(data)
    for env_name, field_name in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value is not None:
            merged[field_name] = value
    return merged


def load_session_config(path: str | os.PathLike[str] | None = None) -> SessionConfig:
    """Build a ``SessionConfig`` from the config file overlaid with env vars.

    Raises:
        ConfigurationError: If the file is unreadable or fails validation.
    """
    config_path = get_config_path(path)
    data = apply_env_overrides(load_raw_config(config_path))
    # Unknown keys (e.g. channel lists used by the CLI) are ignored
    known = {k: v for k, v in data.items() if k in SessionConfig.model_fields}
    try:
        return SessionConfig.model_validate(known)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid session config: {e.error_count()} error(s)",
            data={"path": str(config_path), "errors": e.errors()},
        ) from e
