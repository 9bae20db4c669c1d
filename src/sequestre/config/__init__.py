"""Configuration loading."""

from sequestre.config.settings import (
    SequestreConfig,
    TimeoutConfig,
    get_settings,
    load_config,
    reset_settings,
)

__all__ = [
    "SequestreConfig",
    "TimeoutConfig",
    "get_settings",
    "load_config",
    "reset_settings",
]
