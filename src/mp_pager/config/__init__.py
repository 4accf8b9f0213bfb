"""Config – 12-factor settings and loaders."""

from mp_pager.config.settings import (
    DotenvSettingsLoader,
    EnvSettingsLoader,
    PagerSettings,
    Settings,
    SettingsFactory,
    SettingsLoader,
)
from mp_pager.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    PagerConfigurationError,
)

__all__ = [
    "ConfigError",
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "PagerConfigurationError",
    "PagerSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
