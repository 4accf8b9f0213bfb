"""Config settings – 12-factor env-based configuration."""
from mp_pager.config.settings.base import Settings
from mp_pager.config.settings.factory import SettingsFactory
from mp_pager.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_pager.config.settings.pager import PagerSettings

__all__ = [
    "DotenvSettingsLoader",
    "EnvSettingsLoader",
    "PagerSettings",
    "Settings",
    "SettingsFactory",
    "SettingsLoader",
]
