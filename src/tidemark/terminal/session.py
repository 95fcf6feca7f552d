# SPDX-License-Identifier: MIT

import logging
from pathlib import Path
from typing import Optional

import typer

from tidemark import configuration
from tidemark.model.load import LoadStats
from tidemark.repository.configuration import CONFIGURATION_REPO
from tidemark.service.session import SyncSession
from tidemark.source.yaml_source import YamlChangeLog, YamlSource

logger = logging.getLogger(__name__)


def open_session(
    data_dir: Optional[Path], changes: Optional[Path]
) -> tuple[SyncSession, list[LoadStats]]:
    """Bulk-load the data directory, then replay the change log if given."""
    config = CONFIGURATION_REPO.get_config()
    data_dir = data_dir if data_dir is not None else configuration.DATA_PATH
    if not data_dir.is_dir():
        raise typer.BadParameter(f"Data directory {data_dir} does not exist")

    feed = None
    if changes is not None:
        if not changes.is_file():
            raise typer.BadParameter(f"Change log {changes} does not exist")
        feed = YamlChangeLog(
            changes,
            backoff_seconds=config["reconnect_backoff_seconds"],
            backoff_max_seconds=config["reconnect_backoff_max_seconds"],
        )

    session = SyncSession(
        YamlSource(data_dir),
        feed,
        refresh_dependent_tasks=config["refresh_dependent_tasks"],
    )
    load_stats = session.load()
    if feed is not None:
        session.follow()
    logger.debug("Session ready at generation %d", session.store.generation)
    return session, load_stats
