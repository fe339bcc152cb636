"""Storage of authentication settings in the user's configuration directory."""

from __future__ import annotations

import json
import os
from pathlib import Path

from .models import AnytypeError, AuthConfig

CONFIG_FILE_NAME = "anytype_auth.json"
CONFIG_DIR_NAME = "anytype-go"
CONFIG_FILE_MODE = 0o600
CONFIG_DIR_MODE = 0o755


class ConfigNotFoundError(AnytypeError, FileNotFoundError):
    """The configuration file does not exist."""

    default_message = "configuration file not found"


class InvalidConfigError(AnytypeError, ValueError):
    """The configuration is missing or incomplete."""

    default_message = "invalid configuration"


def config_file_path(home: str | os.PathLike[str] | None = None) -> Path:
    """Path of the configuration file, creating its directory if needed."""
    base = Path.home() if home is None else Path(home)
    config_dir = base / ".config" / CONFIG_DIR_NAME
    config_dir.mkdir(mode=CONFIG_DIR_MODE, parents=True, exist_ok=True)
    return config_dir / CONFIG_FILE_NAME


def validate_config(config: AuthConfig | None) -> None:
    """Raise InvalidConfigError unless every field is set."""
    if config is None:
        raise InvalidConfigError()
    missing = (
        ("API URL", config.api_url),
        ("session token", config.session_token),
        ("app key", config.app_key),
        ("timestamp", config.timestamp),
    )
    for label, value in missing:
        if not value:
            raise InvalidConfigError(f"invalid configuration: missing {label}")


def load_auth_config(home: str | os.PathLike[str] | None = None) -> AuthConfig:
    """Read and validate the stored configuration."""
    path = config_file_path(home)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise ConfigNotFoundError() from exc
    try:
        config = AuthConfig.from_dict(json.loads(text))
    except (TypeError, ValueError) as exc:
        raise InvalidConfigError(f"error parsing config file: {exc}") from exc
    validate_config(config)
    return config


def save_auth_config(
    config: AuthConfig | None, home: str | os.PathLike[str] | None = None
) -> Path:
    """Validate and write the configuration; return the file's path."""
    validate_config(config)
    path = config_file_path(home)
    text = json.dumps(config.to_dict(), indent=2)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, CONFIG_FILE_MODE)
    with open(fd, "w", encoding="utf-8") as handle:
        handle.write(text)
    return path


def remove_config(home: str | os.PathLike[str] | None = None) -> None:
    """Delete the configuration file if it exists."""
    config_file_path(home).unlink(missing_ok=True)