"""Tests for the YAML configuration file and its repository."""

from yaml import dump, load

from tidemark import configuration
from tidemark.initialize import initialize
from tidemark.repository.configuration import ConfigurationRepository


def test_missing_file_gives_defaults(isolated_config):
    repository = ConfigurationRepository()

    assert repository.get_config() == configuration.get_default_configuration()


def test_older_files_are_back_filled(isolated_config):
    isolated_config.write_text(dump({"log_level": "DEBUG", "fallback_hourly_rate": 200}))
    repository = ConfigurationRepository()

    config = repository.get_config()

    assert config["log_level"] == "DEBUG"
    assert config["fallback_hourly_rate"] == 200
    assert config["default_monthly_capacity"] == 160
    assert config["refresh_dependent_tasks"] is True


def test_update_and_flush(isolated_config):
    repository = ConfigurationRepository()

    repository.update_config(log_level="info", report_window_days=7)
    assert repository.flush() is True
    assert repository.flush() is False

    saved = load(isolated_config.read_text(), Loader=configuration.Loader)
    assert saved["log_level"] == "INFO"
    assert saved["report_window_days"] == 7


def test_get_config_returns_a_copy(isolated_config):
    repository = ConfigurationRepository()

    repository.get_config()["log_level"] = "ERROR"

    assert repository.get_config()["log_level"] == "WARNING"


def test_initialize_creates_config_and_data_dirs(isolated_config, tmp_path):
    data_dir = tmp_path / "custom-data"
    isolated_config.parent.rmdir()
    initialize()
    assert isolated_config.is_file()

    isolated_config.write_text(dump({"data_path": str(data_dir)}))
    configuration.load_data_path_configuration()

    assert configuration.DATA_PATH == data_dir
