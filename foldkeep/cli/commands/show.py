# foldkeep/cli/commands/show.py
"""
List tracked files and their stored folds.

Usage:
    foldkeep show
    foldkeep show ./my-project --folds
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from foldkeep.cli.ui import UINotifier, ui
from foldkeep.config.loader import load_settings
from foldkeep.core.exceptions import IdentityLoadError, SetupError
from foldkeep.core.paths import FoldPaths
from foldkeep.persistence.session import open_session


def command(root: Path, folds: bool = False) -> None:
    """Print identity -> record id -> fold count for a project. Read-only."""
    settings = load_settings()
    paths = FoldPaths(root, settings.directory, settings.config_file, settings.mapping_file)

    try:
        session = asyncio.run(open_session(paths, notifier=UINotifier(), create_missing=False))
    except (SetupError, IdentityLoadError) as e:
        ui.error(str(e))
        raise typer.Exit(1)

    items = session.registry.items()
    if not items:
        ui.info(f"No tracked files in {paths.directory}")
        return

    rows = []
    for identity, record_id in items:
        ranges = session.store.get(record_id)
        row = [identity, record_id, str(len(ranges))]
        if folds:
            row.append(", ".join(str(r) for r in ranges) or "-")
        rows.append(row)

    columns = ["File", "Record", "Folds"]
    if folds:
        columns.append("Ranges")
    ui.table(f"Tracked files ({len(items)})", columns, rows)
