# SPDX-License-Identifier: MIT

from copy import deepcopy
from typing import Optional

from yaml import dump, load

try:
    from yaml import CDumper as Dumper
    from yaml import CLoader as Loader  # noqa: F401
except ImportError:
    from yaml import Dumper, Loader  # type: ignore[assignment]

from lifeline import configuration

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


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
            self._config = deepcopy(configuration.DEFAULT_CONFIGURATION)

        # Fill in settings added after the file was written
        for key, value in configuration.DEFAULT_CONFIGURATION.items():
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

    def get_config(self) -> configuration.Configuration:
        return deepcopy(self.config)

    def update_config(
        self,
        show_header: Optional[bool] = None,
        data_path: Optional[str] = None,
        remove_data_path: bool = False,
        reminder_threshold_minutes: Optional[int] = None,
        reminder_interval_seconds: Optional[int] = None,
        log_level: Optional[str] = None,
    ) -> None:
        if reminder_threshold_minutes is not None and reminder_threshold_minutes < 1:
            raise ValueError("reminder_threshold_minutes must be at least 1")
        if reminder_interval_seconds is not None and reminder_interval_seconds < 1:
            raise ValueError("reminder_interval_seconds must be at least 1")
        if log_level is not None and log_level.upper() not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

        self.is_dirty = True

        if show_header is not None:
            self.config["show_header"] = show_header
        if data_path is not None:
            self.config["data_path"] = data_path
        if remove_data_path:
            self.config["data_path"] = None
        if reminder_threshold_minutes is not None:
            self.config["reminder_threshold_minutes"] = reminder_threshold_minutes
        if reminder_interval_seconds is not None:
            self.config["reminder_interval_seconds"] = reminder_interval_seconds
        if log_level is not None:
            self.config["log_level"] = log_level.upper()


CONFIGURATION_REPO = ConfigurationRepository()
