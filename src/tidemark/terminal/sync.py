# SPDX-License-Identifier: MIT

from collections import Counter
from pathlib import Path
from typing import Annotated, Optional

import typer

from tidemark.model.entity_type import ENTITY_TYPES
from tidemark.terminal.session import open_session
from tidemark.view.view.views.sync import sync_report


def sync(
    data_dir: Annotated[
        Optional[Path],
        typer.Option("--data-dir", "-d", help="Directory of <table>.yaml exports"),
    ] = None,
    changes: Annotated[
        Optional[Path],
        typer.Option("--changes", "-c", help="YAML change log to replay after loading"),
    ] = None,
) -> None:
    """Bulk-load the exported tables, replay changes and show what the store holds."""
    session, load_stats = open_session(data_dir, changes)
    with session:
        outcomes: Optional[Counter[str]] = None
        if session.consumer is not None:
            outcomes = Counter(
                {outcome.value: count for outcome, count in session.consumer.outcomes.items()}
            )
        sync_report(
            load_stats,
            session.store.generation,
            {kind: session.store.count(kind) for kind in ENTITY_TYPES},
            outcomes,
        )
