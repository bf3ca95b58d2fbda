from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv

from .errors import ConfigError


load_dotenv(override=False)

CONFIG_PATH_ENV = "GSHEET_PROCESSOR_CONFIG"


def _package_root() -> Path:
    # This file lives under <root>/gsheet_processor/core
    return Path(__file__).resolve().parents[1]


def _config_dir() -> Path:
    return _package_root() / "config"


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Return the profiles file to read.

    Order: explicit ``path``, ``GSHEET_PROCESSOR_CONFIG``, then the packaged
    ``config/profiles.yaml``. Relative paths are taken from the working directory.
    """
    if path:
        return Path(path).expanduser()
    env = os.getenv(CONFIG_PATH_ENV)
    if env:
        return Path(env).expanduser()
    return _config_dir() / "profiles.yaml"


def load_profiles(path: str | Path | None = None) -> dict[str, Mapping[str, Any]]:
    """Load the ``sheets`` section of profiles.yaml.

    Returns a dict of profile-key -> raw mapping.
    """
    cfg_path = resolve_config_path(path)
    if not cfg_path.exists():
        raise ConfigError(f"profiles.yaml not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigError("profiles.yaml must contain a mapping")
    section = data.get("sheets")
    if not isinstance(section, Mapping) or not section:
        raise ConfigError("profiles.yaml does not define any sheets profiles")
    profiles: dict[str, Mapping[str, Any]] = {}
    for key, value in section.items():
        if not isinstance(value, Mapping):
            raise ConfigError(f"sheets profile {key} must be a mapping")
        profiles[str(key)] = value
    return profiles


def expand_env(value: Any) -> Any:
    """Expand ``${VAR}`` references, failing on unset variables."""
    if isinstance(value, str):
        expanded = os.path.expandvars(value)
        if "${" in value and "}" in value and expanded == value:
            raise ConfigError(f"Environment variable not set for value: {value}")
        return expanded
    return value
