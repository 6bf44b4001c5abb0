"""Configuration adapters."""

from trip_tracker.adapters.config.app_config import PAGE_SIZE_OPTIONS, AppConfig
from trip_tracker.adapters.config.view_configuration_loader import ViewConfigurationLoader

__all__ = ["PAGE_SIZE_OPTIONS", "AppConfig", "ViewConfigurationLoader"]
