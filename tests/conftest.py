"""
Pytest configuration and shared fixtures.

Provides the example remote tables, a store loaded from them, and an
isolated configuration file for the terminal tests.
"""

from pathlib import Path
from typing import Any, Iterator

import pytest
from yaml import dump

from factories import example_tables
from tidemark import configuration
from tidemark.model.snapshot import StoreSnapshot
from tidemark.repository.configuration import CONFIGURATION_REPO
from tidemark.repository.entity_store import EntityStore
from tidemark.service.bulk_load import BulkLoader
from tidemark.service.resolver import StoreResolver
from tidemark.source.memory import MemorySource

# ==============================================================================
# Source and store fixtures
# ==============================================================================


@pytest.fixture
def raw_tables() -> dict[str, list[dict[str, Any]]]:
    return example_tables()


@pytest.fixture
def source(raw_tables) -> MemorySource:
    return MemorySource(raw_tables)


@pytest.fixture
def store() -> EntityStore:
    return EntityStore()


@pytest.fixture
def loaded_store(store, source) -> EntityStore:
    BulkLoader(store, source, StoreResolver(store)).load_all()
    return store


@pytest.fixture
def snapshot(loaded_store) -> StoreSnapshot:
    return loaded_store.snapshot()


# ==============================================================================
# Configuration fixtures
# ==============================================================================


@pytest.fixture
def isolated_config(tmp_path, monkeypatch) -> Iterator[Path]:
    """Point the configuration file at a temporary directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config_path = config_dir / "config.yaml"
    monkeypatch.setattr(configuration, "CONFIG_PATH", config_dir)
    monkeypatch.setattr(configuration, "APP_CONFIG_PATH", config_path)
    monkeypatch.setattr(configuration, "DATA_PATH", tmp_path / "data")
    CONFIGURATION_REPO.reset()
    yield config_path
    CONFIGURATION_REPO.reset()


@pytest.fixture
def data_dir(tmp_path, raw_tables) -> Path:
    """The example tables exported as <table>.yaml files."""
    directory = tmp_path / "export"
    directory.mkdir()
    for table, rows in raw_tables.items():
        (directory / f"{table}.yaml").write_text(dump(rows))
    return directory
