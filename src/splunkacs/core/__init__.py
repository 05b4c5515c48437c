"""Core infrastructure: configuration and logging."""

from splunkacs.core.config import (
    LoggingSettings,
    PropagationSettings,
    RetryBudgetSettings,
    SplunkAcsSettings,
    load_settings,
    resolve_config,
)
from splunkacs.core.logging import configure_logging

__all__ = [
    "LoggingSettings",
    "PropagationSettings",
    "RetryBudgetSettings",
    "SplunkAcsSettings",
    "configure_logging",
    "load_settings",
    "resolve_config",
]
