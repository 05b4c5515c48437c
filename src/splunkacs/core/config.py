"""
Configuration schema and loading for splunkacs.

Uses Pydantic for validation and Dynaconf for multi-source loading.
Settings are frozen (immutable) after construction.
"""

import os
import re
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

# ${VAR} or ${VAR:-default}
_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

# Keys whose values never leave the process unmasked
_SECRET_FIELD_NAMES = frozenset({"token"})


class RetryBudgetSettings(BaseModel):
    """Attempt budget for one propagation wait.

    max_attempts is the TOTAL number of fetches, not the number of retries.
    """

    model_config = {"frozen": True}

    max_attempts: int = Field(default=20, gt=0, description="Maximum number of fetches")
    interval_seconds: float = Field(default=10.0, ge=0, description="Fixed delay between fetches")


class PropagationSettings(BaseModel):
    """Retry budgets for each call site that waits on eventual consistency.

    Defaults reproduce the tolerances ACS has needed in practice: token and
    index creation can take a few minutes to become visible, token updates
    settle faster.
    """

    model_config = {"frozen": True}

    hec_token_create: RetryBudgetSettings = Field(
        default_factory=lambda: RetryBudgetSettings(max_attempts=20, interval_seconds=10.0),
        description="Wait for a new HEC token to become visible",
    )
    hec_token_update: RetryBudgetSettings = Field(
        default_factory=lambda: RetryBudgetSettings(max_attempts=10, interval_seconds=10.0),
        description="Wait for a HEC token update to take effect",
    )
    index_create: RetryBudgetSettings = Field(
        default_factory=lambda: RetryBudgetSettings(max_attempts=20, interval_seconds=10.0),
        description="Wait for a new index to become visible",
    )
    index_update: RetryBudgetSettings = Field(
        default_factory=lambda: RetryBudgetSettings(max_attempts=20, interval_seconds=10.0),
        description="Wait for an index update to take effect",
    )
    retryable_status_codes: tuple[int, ...] = Field(
        default=(),
        description="HTTP statuses treated as transient while polling (404 is handled per predicate)",
    )
    deadline_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Overall wall-clock limit for a single wait; None means budget only",
    )

    @field_validator("retryable_status_codes")
    @classmethod
    def validate_status_codes(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        for code in v:
            if not 100 <= code <= 599:
                raise ValueError(f"not an HTTP status code: {code}")
            if code == 404:
                raise ValueError("404 is classified as not-found and cannot be marked retryable")
        return v


class LoggingSettings(BaseModel):
    """Log output configuration."""

    model_config = {"frozen": True}

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")
    json_output: bool = Field(default=False, description="Emit JSON lines instead of console output")

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v


class SplunkAcsSettings(BaseModel):
    """Top-level configuration.

    deployment_name and token are optional here because the provider falls
    back to SPLUNK_DEPLOYMENT_NAME / SPLUNK_AUTH_TOKEN. Missing values are
    reported by AcsProvider.configure(), not at load time.
    """

    model_config = {"frozen": True}

    deployment_name: str | None = Field(default=None, description="URL prefix of the Splunk Cloud stack")
    token: str | None = Field(default=None, repr=False, description="JWT authentication token")
    api_base_url: str = Field(default="https://admin.splunk.com", description="ACS host")
    request_timeout_seconds: float = Field(default=30.0, gt=0, description="Per-request HTTP timeout")
    propagation: PropagationSettings = Field(default_factory=PropagationSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        if not v.startswith(("https://", "http://")):
            raise ValueError(f"api_base_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")


def _expand_env_vars(config: dict[str, Any]) -> dict[str, Any]:
    """Recursively expand ${VAR} and ${VAR:-default} patterns in config values."""

    def _expand_string(value: str) -> str:
        def replacer(match: re.Match[str]) -> str:
            env_value = os.environ.get(match.group(1))
            if env_value is not None:
                return env_value
            default = match.group(2)
            if default is not None:
                return default
            # Unresolved; validation (or the provider) will report it
            return match.group(0)

        return _ENV_VAR_PATTERN.sub(replacer, value)

    def _expand_value(value: Any) -> Any:
        if isinstance(value, str):
            return _expand_string(value)
        elif isinstance(value, dict):
            return {k: _expand_value(v) for k, v in value.items()}
        elif isinstance(value, list):
            return [_expand_value(item) for item in value]
        else:
            return value

    return {k: _expand_value(v) for k, v in config.items()}


def _lowercase_keys(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(k).lower(): _lowercase_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_lowercase_keys(item) for item in value]
    return value


def load_settings(config_path: Path | None = None) -> SplunkAcsSettings:
    """Load settings from an optional YAML file with environment overrides.

    Uses Dynaconf for multi-source loading with precedence:
    1. Environment variables (SPLUNKACS_*) - highest priority
    2. Config file
    3. Defaults from Pydantic schema - lowest priority

    Environment variable format: SPLUNKACS_PROPAGATION__INDEX_CREATE__MAX_ATTEMPTS
    for nested keys.

    Args:
        config_path: Path to YAML configuration file, or None for env only

    Returns:
        Validated SplunkAcsSettings instance

    Raises:
        ValidationError: If configuration fails Pydantic validation
        FileNotFoundError: If config_path is given but doesn't exist
    """
    from dynaconf import Dynaconf

    # Dynaconf silently accepts missing files
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    dynaconf_settings = Dynaconf(
        envvar_prefix="SPLUNKACS",
        settings_files=[str(config_path)] if config_path is not None else [],
        environments=False,
        load_dotenv=False,
        merge_enabled=True,
    )

    # Dynaconf returns uppercase keys; filter its own bookkeeping
    internal_keys = {"LOAD_DOTENV", "ENVIRONMENTS", "SETTINGS_FILES"}
    raw_config = {k: v for k, v in dynaconf_settings.as_dict().items() if k not in internal_keys}
    raw_config = _lowercase_keys(raw_config)
    raw_config = _expand_env_vars(raw_config)

    return SplunkAcsSettings(**raw_config)


def resolve_config(settings: SplunkAcsSettings) -> dict[str, Any]:
    """Dump settings with secrets masked, safe for logs and ``config`` output."""

    def _mask(value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: ("***" if k in _SECRET_FIELD_NAMES and v else _mask(v))
                for k, v in value.items()
            }
        return value

    masked: dict[str, Any] = _mask(settings.model_dump(mode="json"))
    return masked
