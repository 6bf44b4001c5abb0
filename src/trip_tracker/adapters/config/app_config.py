"""12-factor configuration adapter using environment variables and TOML config."""

import tomllib
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PAGE_SIZE_OPTIONS = (10, 25, 50)


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend API configuration
    api_base_url: str = Field(
        default="http://localhost:5000/api", description="Base URL of the trip backend API"
    )
    api_timeout: int = Field(default=10, description="Timeout for API requests in seconds")
    api_token: str | None = Field(
        default=None, description="Bearer token sent with every API request"
    )
    min_request_delay_seconds: float = Field(
        default=0.5,
        description="Minimum delay between API requests to avoid rate limiting",
    )

    # Refresh configuration
    refresh_interval_seconds: int = Field(
        default=30, description="Interval between active trip refreshes in seconds"
    )

    # Display configuration
    default_page_size: int = Field(default=10, description="Trips shown per page")
    timezone: str = Field(
        default="Asia/Manila",
        description="Timezone for 'Today' filters and displayed times (IANA timezone name)",
    )
    currency: str = Field(default="PHP", description="ISO currency code for trip values")
    log_level: str = Field(default="INFO", description="Logging level")

    # TOML config file path with [display] overrides and [[views]]
    config_file: str | None = Field(
        default=None,
        description="Path to TOML configuration file for monitored views and display settings",
    )

    @field_validator("refresh_interval_seconds")
    @classmethod
    def validate_refresh_interval(cls, v: int) -> int:
        """Validate the refresh interval is positive."""
        if v <= 0:
            raise ValueError("refresh_interval_seconds must be positive")
        return v

    @field_validator("default_page_size")
    @classmethod
    def validate_page_size(cls, v: int) -> int:
        """Validate the page size is one of the offered options."""
        if v not in PAGE_SIZE_OPTIONS:
            raise ValueError(f"default_page_size must be one of {PAGE_SIZE_OPTIONS}")
        return v

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be an IANA timezone name, got '{v}'") from e
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return v.upper()

    @model_validator(mode="after")
    def strip_base_url(self) -> "AppConfig":
        """Drop a trailing slash so paths can be appended directly."""
        self.api_base_url = self.api_base_url.rstrip("/")
        return self

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)

    def _load_toml_data(self) -> dict[str, Any]:
        """Load and parse TOML file, updating display settings."""
        if not self.config_file:
            raise ValueError("config_file must be set to load views configuration")

        config_path = Path(self.config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "rb") as f:
            toml_data = tomllib.load(f)

        # Update display settings from TOML if present
        display = toml_data.get("display", {})
        if "refresh_interval_seconds" in display:
            self.refresh_interval_seconds = self.validate_refresh_interval(
                display["refresh_interval_seconds"]
            )
        if "default_page_size" in display:
            self.default_page_size = self.validate_page_size(display["default_page_size"])
        if "timezone" in display:
            self.timezone = self.validate_timezone(display["timezone"])
        if "currency" in display:
            self.currency = display["currency"]

        # Update API settings from TOML if present
        api_config = toml_data.get("api", {})
        if "base_url" in api_config:
            self.api_base_url = str(api_config["base_url"]).rstrip("/")
        if "min_request_delay_seconds" in api_config:
            self.min_request_delay_seconds = api_config["min_request_delay_seconds"]

        return toml_data

    def get_views_config(self) -> list[dict[str, Any]]:
        """Parse and return the [[views]] tables from the TOML file.

        Raises ValueError if views are malformed or their names are not unique.
        """
        toml_data = self._load_toml_data()
        views = toml_data.get("views", [])
        if not isinstance(views, list):
            raise ValueError("TOML config 'views' must be a list")

        for view in views:
            if not isinstance(view, dict) or "name" not in view:
                raise ValueError("All views must have a 'name' field")

        names = [view["name"] for view in views]
        if len(names) != len(set(names)):
            duplicates = {name for name in names if names.count(name) > 1}
            raise ValueError(f"View names must be unique. Duplicate names found: {duplicates}")

        return views
