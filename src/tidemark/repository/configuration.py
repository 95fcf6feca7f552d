# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from tidemark import configuration


class ConfigurationRepository:
    def __init__(self) -> None:
        self._config: Optional[configuration.Configuration] = None
        self.is_dirty = False

    @property
    def config(self) -> configuration.Configuration:
        if self._config is None:
            self.__load_data()
        if self._config is None:
            raise ValueError()
        return self._config

    def __load_data(self) -> None:
        if configuration.APP_CONFIG_PATH.is_file():
            self._config = load(
                configuration.APP_CONFIG_PATH.read_text(), Loader=Loader
            )
        if self._config is None:
            self._config = configuration.get_default_configuration()
            return

        # Back-fill keys introduced after the file was written
        defaults = configuration.get_default_configuration()
        for key, value in defaults.items():
            if key not in self._config:
                self._config[key] = value  # type: ignore[literal-required]

    def __save_data(self, config: configuration.Configuration) -> None:
        configuration.APP_CONFIG_PATH.write_text(dump(dict(config), Dumper=Dumper))

    def flush(self) -> bool:
        if self._config is not None and self.is_dirty:
            self.__save_data(self._config)
            self.is_dirty = False
            return True
        return False

    def reset(self) -> None:
        """Drop the cached configuration so the next read reloads the file."""
        self._config = None
        self.is_dirty = False

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        log_level: Optional[str] = None,
        default_monthly_capacity: Optional[int] = None,
        fallback_hourly_rate: Optional[int] = None,
        report_window_days: Optional[int] = None,
        reconnect_backoff_seconds: Optional[float] = None,
        reconnect_backoff_max_seconds: Optional[float] = None,
        refresh_dependent_tasks: Optional[bool] = None,
    ) -> None:
        self.is_dirty = True

        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if log_level is not None:
            self.config["log_level"] = log_level.upper()
        if default_monthly_capacity is not None:
            self.config["default_monthly_capacity"] = default_monthly_capacity
        if fallback_hourly_rate is not None:
            self.config["fallback_hourly_rate"] = fallback_hourly_rate
        if report_window_days is not None:
            self.config["report_window_days"] = report_window_days
        if reconnect_backoff_seconds is not None:
            self.config["reconnect_backoff_seconds"] = reconnect_backoff_seconds
        if reconnect_backoff_max_seconds is not None:
            self.config["reconnect_backoff_max_seconds"] = (
                reconnect_backoff_max_seconds
            )
        if refresh_dependent_tasks is not None:
            self.config["refresh_dependent_tasks"] = refresh_dependent_tasks


CONFIGURATION_REPO = ConfigurationRepository()
