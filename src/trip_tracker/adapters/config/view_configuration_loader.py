"""View configuration loader."""

import logging
from typing import Any

from trip_tracker.adapters.config.app_config import AppConfig
from trip_tracker.domain.models import DateRange, TripStatus, ViewConfiguration, ViewKind

logger = logging.getLogger(__name__)


def _optional_int(value: Any) -> int | None:
    if value is None:
        return None
    try:
        return int(value)
    except (ValueError, TypeError):
        return None


class ViewConfigurationLoader:
    """Loads monitored view configurations from app config."""

    @staticmethod
    def load_view_config_from_data(
        view_data: dict[str, Any], config: AppConfig
    ) -> ViewConfiguration | None:
        """Load a single view configuration from data dict."""
        if not isinstance(view_data, dict):
            return None

        name = view_data.get("name")
        if not name or not isinstance(name, str):
            return None

        try:
            kind = ViewKind(str(view_data.get("kind", ViewKind.ACTIVE)).lower())
        except ValueError as e:
            raise ValueError(f"View '{name}' has unknown kind '{view_data.get('kind')}'") from e

        status = view_data.get("status")
        if status in (None, "", "All"):
            status = None
        else:
            try:
                status = TripStatus(status)
            except ValueError as e:
                raise ValueError(f"View '{name}' has unknown status '{status}'") from e

        try:
            date_range = DateRange(view_data.get("date_range", DateRange.ALL))
        except ValueError as e:
            raise ValueError(
                f"View '{name}' has unknown date_range '{view_data.get('date_range')}'"
            ) from e

        page_size = _optional_int(view_data.get("page_size")) or config.default_page_size
        if page_size < 1:
            page_size = config.default_page_size

        refresh_interval = _optional_int(view_data.get("refresh_interval_seconds"))
        if refresh_interval is not None and refresh_interval <= 0:
            logger.warning(f"Ignoring non-positive refresh_interval_seconds for view '{name}'")
            refresh_interval = None

        return ViewConfiguration(
            name=name,
            kind=kind,
            dispatcher_id=_optional_int(view_data.get("dispatcher_id")),
            warehouse_id=_optional_int(view_data.get("warehouse_id")),
            status=status,
            date_range=date_range,
            page_size=page_size,
            refresh_interval_seconds=refresh_interval,
        )

    @staticmethod
    def load(config: AppConfig) -> list[ViewConfiguration]:
        """Load view configurations from app config."""
        view_configs: list[ViewConfiguration] = []
        for view_data in config.get_views_config():
            view_config = ViewConfigurationLoader.load_view_config_from_data(view_data, config)
            if view_config is not None:
                view_configs.append(view_config)
        return view_configs
