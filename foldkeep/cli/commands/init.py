# foldkeep/cli/commands/init.py
"""
Create the persistence directory for a project.

Usage:
    foldkeep init               # current directory
    foldkeep init ./my-project
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer

from foldkeep.cli.ui import ui
from foldkeep.config.loader import load_settings
from foldkeep.core.exceptions import WriteError
from foldkeep.core.paths import FoldPaths
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import CLI
from foldkeep.persistence.session import EMPTY_OBJECT
from foldkeep.storage.documents import DocumentStore

logger = get_logger(__name__)


async def _create_documents(paths: FoldPaths) -> list[str]:
    documents = DocumentStore(paths.directory)
    created = []
    for name in (paths.config_name, paths.mapping_name):
        if not await documents.exists(name):
            await documents.write(name, EMPTY_OBJECT)
            created.append(name)
    return created


def command(root: Path) -> None:
    """Create {root}/.js-folds with empty config and mapping documents."""
    if not root.is_dir():
        ui.error(f"Project root not found: {root}")
        raise typer.Exit(1)

    settings = load_settings()
    paths = FoldPaths(root, settings.directory, settings.config_file, settings.mapping_file)

    ui.header("foldkeep init", str(paths.directory))

    existed = paths.directory.is_dir()
    try:
        paths.ensure_directory()
        created = asyncio.run(_create_documents(paths))
    except (OSError, WriteError) as e:
        logger.error(f"{CLI} init failed: {e}")
        ui.error(str(e))
        raise typer.Exit(1)

    if not existed:
        ui.success(f"Created {paths.directory}")
    for name in created:
        ui.success(f"Created {name}")
    if existed and not created:
        ui.info("Already initialized, nothing to do")
