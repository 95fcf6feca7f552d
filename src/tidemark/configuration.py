# SPDX-License-Identifier: MIT

from pathlib import Path
from typing import Optional, TypedDict

from yaml import load

try:
    from yaml import CLoader as Loader
except ImportError:
    from yaml import Loader  # type: ignore[assignment]
import platformdirs

APP_NAME = "tidemark"

CONFIG_PATH = platformdirs.user_config_path(APP_NAME)
APP_CONFIG_PATH = CONFIG_PATH / "config.yaml"

# Set dynamically by load_data_path_configuration()
DATA_PATH: Path = platformdirs.user_data_path(APP_NAME)


class Configuration(TypedDict):
    data_path: Optional[str]
    log_level: str
    default_monthly_capacity: int
    fallback_hourly_rate: int
    report_window_days: int
    reconnect_backoff_seconds: float
    reconnect_backoff_max_seconds: float
    refresh_dependent_tasks: bool


def get_default_configuration() -> Configuration:
    return {
        "data_path": None,
        "log_level": "WARNING",
        "default_monthly_capacity": 160,
        "fallback_hourly_rate": 150,
        "report_window_days": 30,
        "reconnect_backoff_seconds": 1.0,
        "reconnect_backoff_max_seconds": 30.0,
        "refresh_dependent_tasks": True,
    }


def load_data_path_configuration() -> None:
    """
    Load the configuration and set DATA_PATH dynamically.

    This must be called after the config file exists and before any
    source is constructed from DATA_PATH.
    """
    global DATA_PATH

    if not APP_CONFIG_PATH.is_file():
        # Config doesn't exist yet, use defaults
        return

    config: Optional[Configuration] = load(APP_CONFIG_PATH.read_text(), Loader=Loader)
    if config is None:
        return
    data_path_setting = config.get("data_path")

    if data_path_setting is not None:
        DATA_PATH = Path(data_path_setting)
