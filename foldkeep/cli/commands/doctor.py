# foldkeep/cli/commands/doctor.py
"""
Persistence diagnostics command.

Usage:
    foldkeep doctor              # Check the current project
    foldkeep doctor ./project

Checks:
    - Persistence directory exists
    - config.json is a JSON object with valid overrides
    - foldsPropaties.json is a flat object of strings
    - No record id is shared by two files
    - Every referenced record document decodes
    - No record document is left unreferenced
"""

from __future__ import annotations

from collections import Counter
from pathlib import Path
from typing import Optional

import typer

from foldkeep.cli.ui import ui
from foldkeep.config.loader import load_settings, parse_config_document
from foldkeep.core.exceptions import ConfigError, IdentityLoadError, MalformedRecordError
from foldkeep.core.paths import FoldPaths
from foldkeep.logging.logger import get_logger
from foldkeep.persistence.codec import RangeCodec
from foldkeep.persistence.registry import IdentityRegistry

logger = get_logger(__name__)


# =============================================================================
# Check Functions
# =============================================================================


def _read(path: Path) -> Optional[str]:
    if not path.is_file():
        return None
    return path.read_text(encoding="utf-8")


def _check_config(paths: FoldPaths) -> tuple[bool, str]:
    try:
        text = _read(paths.config)
    except (OSError, UnicodeDecodeError) as e:
        return False, f"Unreadable: {e}"
    if text is None:
        return True, "Not found (created on next load)"
    try:
        load_settings(parse_config_document(text))
    except ConfigError as e:
        return False, f"Invalid: {e}"
    return True, "Valid"


def _check_mapping(paths: FoldPaths) -> tuple[Optional[IdentityRegistry], str]:
    registry = IdentityRegistry()
    try:
        text = _read(paths.mapping)
        registry.load(text)
    except (OSError, UnicodeDecodeError) as e:
        return None, f"Unreadable: {e}"
    except IdentityLoadError as e:
        return None, f"Invalid: {e}"
    if text is None:
        return registry, "Not found (created on next load)"
    return registry, f"{len(registry)} tracked file(s)"


def _check_record(paths: FoldPaths, codec: RangeCodec, record_id: str) -> tuple[bool, str]:
    try:
        text = _read(paths.record(record_id))
    except (OSError, UnicodeDecodeError) as e:
        return False, f"Unreadable: {e}"
    if text is None:
        return True, "Not written yet"
    try:
        ranges = codec.decode(text, record_id=record_id)
    except MalformedRecordError as e:
        return False, str(e)
    return True, f"{len(ranges)} fold(s)"


# =============================================================================
# Main Command
# =============================================================================


def command(root: Path) -> None:
    """Run every check and exit non-zero if any fails."""
    settings = load_settings()
    paths = FoldPaths(root, settings.directory, settings.config_file, settings.mapping_file)

    ui.header("foldkeep doctor", str(paths.directory))
    problems = 0

    ui.section("Directory")
    if not paths.directory.is_dir():
        ui.status(paths.directory.name, False, "Not found (run 'foldkeep init')")
        raise typer.Exit(1)
    ui.status(paths.directory.name, True)

    ui.section("Documents")
    ok, detail = _check_config(paths)
    ui.status(paths.config_name, ok, detail)
    problems += not ok

    registry, detail = _check_mapping(paths)
    ui.status(paths.mapping_name, registry is not None, detail)
    if registry is None:
        raise typer.Exit(1)

    shared = [rid for rid, n in Counter(rid for _, rid in registry.items()).items() if n > 1]
    for record_id in shared:
        owners = [identity for identity, rid in registry.items() if rid == record_id]
        ui.status(f"record {record_id}", False, f"shared by {', '.join(owners)}")
        problems += 1

    ui.section("Records")
    codec = RangeCodec()
    for identity, record_id in registry.items():
        ok, detail = _check_record(paths, codec, record_id)
        ui.status(f"{record_id}  {identity}", ok, detail)
        problems += not ok

    referenced = set(registry.record_ids())
    for path in paths.record_files():
        record_id = FoldPaths.record_id_of(path)
        if record_id not in referenced:
            ui.warning(f"Unreferenced record {path.name}")

    if problems:
        ui.error(f"{problems} problem(s) found")
        raise typer.Exit(1)
    ui.success("All checks passed")
