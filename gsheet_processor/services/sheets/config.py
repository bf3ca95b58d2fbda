"""Configuration loader for the Google Sheets values client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

from gsheet_processor.core.errors import ConfigError
from gsheet_processor.core.profiles import expand_env, load_profiles

DEFAULT_BASE_URL = "https://sheets.googleapis.com/v4/spreadsheets"
DEFAULT_TIMEOUT = 10.0
DEFAULT_SHEET_NUMBER = 1

API_KEY_ENV = "GSHEETS_API_KEY"
SHEET_ID_ENV = "GSHEETS_SHEET_ID"
TIMEOUT_ENV = "GSHEETS_TIMEOUT_SEC"


@dataclass(slots=True)
class SheetConfig:
    """Resolved configuration for a single spreadsheet read."""

    api_key: str
    sheet_id: str
    sheet_name: str | None = None
    sheet_number: int = DEFAULT_SHEET_NUMBER
    timeout_sec: float = DEFAULT_TIMEOUT
    base_url: str = DEFAULT_BASE_URL

    def __post_init__(self) -> None:
        validate_api_key(self.api_key)
        if not isinstance(self.sheet_id, str) or not self.sheet_id.strip():
            raise ConfigError("Missing spreadsheet id")
        if isinstance(self.sheet_number, bool) or not isinstance(self.sheet_number, int):
            raise ConfigError("sheet_number must be an integer")
        if self.sheet_number < 1:
            raise ConfigError("sheet_number must be >= 1")

    @property
    def resolved_sheet_name(self) -> str:
        """Return the explicit sheet name, or ``Sheet<number>`` when none is set."""

        if self.sheet_name:
            return self.sheet_name
        return f"Sheet{self.sheet_number}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "SheetConfig":
        """Create a configuration instance from a mapping.

        Values may reference environment variables as ``${NAME}``.
        """

        def _require(key: str) -> str:
            value = data.get(key)
            if value is None or (isinstance(value, str) and not value.strip()):
                if key == "api_key":
                    raise ConfigError("Missing Sheets API key")
                raise ConfigError(f"Missing required sheets config value: {key}")
            return str(expand_env(value))

        sheet_name = expand_env(data.get("sheet_name"))
        raw_number = data.get("sheet_number")
        try:
            sheet_number = DEFAULT_SHEET_NUMBER if raw_number in (None, "") else int(raw_number)
            timeout_sec = float(data.get("timeout_sec", DEFAULT_TIMEOUT))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid numeric sheets config value: {exc}") from exc

        return cls(
            api_key=_require("api_key"),
            sheet_id=_require("sheet_id"),
            sheet_name=str(sheet_name) if sheet_name else None,
            sheet_number=sheet_number,
            timeout_sec=timeout_sec,
            base_url=str(expand_env(data.get("base_url") or DEFAULT_BASE_URL)),
        )

    @classmethod
    def from_profile(cls, profile_name: str, *, config_path: str | Path | None = None) -> "SheetConfig":
        """Create a configuration instance from profiles.yaml.

        Args:
            profile_name: Profile name under the ``sheets`` section.
            config_path: Optional override for the config file path.

        Raises:
            ConfigError: If the profile is missing or invalid.
        """

        raw = load_profiles(config_path).get(profile_name)
        if raw is None:
            raise ConfigError(f"sheets profile '{profile_name}' not found in profiles.yaml")
        return cls.from_mapping(raw)


def validate_api_key(api_key: Any) -> str:
    """Return ``api_key`` or raise ``ConfigError`` when it is missing or empty."""

    if not isinstance(api_key, str) or not api_key.strip():
        raise ConfigError("Missing Sheets API key")
    return api_key


def _read_env(key: str) -> str | None:
    value = os.getenv(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def load_timeout(config: SheetConfig | None = None) -> float:
    """Return the request timeout in seconds."""

    value = _read_env(TIMEOUT_ENV)
    if value is not None:
        try:
            return float(value)
        except ValueError as exc:
            raise ConfigError(f"Environment variable {TIMEOUT_ENV} must be a number") from exc
    if config:
        return float(config.timeout_sec)
    return DEFAULT_TIMEOUT


def resolve_config(
    profile: str | None = None,
    *,
    config_path: str | Path | None = None,
    profiles: Mapping[str, Mapping[str, Any]] | None = None,
    **overrides: Any,
) -> SheetConfig:
    """Resolve configuration from a profile, the environment and explicit overrides.

    Explicit overrides win over environment variables, which win over the profile.
    ``None`` overrides are ignored. Pass already loaded ``profiles`` to skip
    reading profiles.yaml again.
    """

    data: dict[str, Any] = {}
    if profile:
        if profiles is None:
            profiles = load_profiles(config_path)
        raw = profiles.get(profile)
        if raw is None:
            raise ConfigError(f"sheets profile '{profile}' not found in profiles.yaml")
        data.update(raw)

    env_api_key = _read_env(API_KEY_ENV)
    env_sheet_id = _read_env(SHEET_ID_ENV)
    if env_api_key:
        data["api_key"] = env_api_key
    if env_sheet_id:
        data["sheet_id"] = env_sheet_id
    if _read_env(TIMEOUT_ENV) is not None:
        data["timeout_sec"] = load_timeout()

    data.update({key: value for key, value in overrides.items() if value is not None})
    return SheetConfig.from_mapping(data)


__all__ = [
    "SheetConfig",
    "API_KEY_ENV",
    "SHEET_ID_ENV",
    "TIMEOUT_ENV",
    "DEFAULT_BASE_URL",
    "load_timeout",
    "resolve_config",
    "validate_api_key",
]
