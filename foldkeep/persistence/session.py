# foldkeep/persistence/session.py
"""
FoldSession - all persistence state for one activation.

A session is created by open_session() once the persistence directory has
been found, and owns:
- the identity registry (foldsPropaties.json)
- the fold record store (<record_id>.json)
- the capture engine working on both
- the document store doing the I/O

Nothing here is global: the coordinator and the CLI each hold their own
session object.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from foldkeep.config.loader import load_settings, parse_config_document
from foldkeep.config.schema import FoldSettings
from foldkeep.core.exceptions import (
    ConfigError,
    IdentityLoadError,
    MalformedRecordError,
    SetupError,
    WriteError,
)
from foldkeep.core.host import LoggingNotifier, Notifier
from foldkeep.core.paths import FoldPaths
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import PERSISTENCE
from foldkeep.persistence.capture import CaptureEngine
from foldkeep.persistence.codec import RangeCodec
from foldkeep.persistence.records import FoldRecordStore
from foldkeep.persistence.registry import IdentityRegistry
from foldkeep.storage.documents import DocumentStore

logger = get_logger(__name__)

EMPTY_OBJECT = "{}"


@dataclass
class FlushResult:
    """Outcome of writing session state to disk."""

    written: List[str] = field(default_factory=list)
    errors: List[WriteError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def __str__(self) -> str:
        return f"written {len(self.written)}, errors {len(self.errors)}"


@dataclass
class FoldSession:
    """In-memory persistence state plus the means to write it back."""

    paths: FoldPaths
    settings: FoldSettings
    documents: DocumentStore
    registry: IdentityRegistry
    store: FoldRecordStore
    capture: CaptureEngine
    config: Dict[str, Any] = field(default_factory=dict)
    load_errors: List[MalformedRecordError] = field(default_factory=list)
    _flush_lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    async def flush(self) -> FlushResult:
        """
        Write the identity mapping and every pending fold record.

        Flushes run one at a time; an overlapping call waits and then writes
        whatever is still pending. A failed write leaves that record pending
        so the next flush retries it with whatever is in memory then. A record
        captured again while its write is in flight also stays pending.
        """
        async with self._flush_lock:
            return await self._flush_locked()

    async def _flush_locked(self) -> FlushResult:
        result = FlushResult()

        mapping_name = self.paths.mapping_name
        try:
            await self.documents.write(mapping_name, self.registry.serialize())
            result.written.append(mapping_name)
        except WriteError as e:
            logger.error(f"{PERSISTENCE} {e}")
            result.errors.append(e)

        for record_id in self.store.pending(self.registry.record_ids()):
            name = self.paths.record_name(record_id)
            version = self.store.version(record_id)
            try:
                await self.documents.write(name, self.store.serialize(record_id))
            except WriteError as e:
                logger.error(f"{PERSISTENCE} {e}")
                result.errors.append(e)
                continue
            self.store.mark_persisted(record_id, version)
            result.written.append(name)

        logger.debug(f"{PERSISTENCE} Flush: {result}")
        return result


# =============================================================================
# Loading
# =============================================================================


async def _read_document(documents: DocumentStore, name: str, create_missing: bool) -> str:
    if create_missing:
        return await documents.ensure(name, EMPTY_OBJECT)
    text = await documents.read(name)
    return EMPTY_OBJECT if text is None else text


async def _read_config(documents: DocumentStore, paths: FoldPaths, create_missing: bool) -> str:
    try:
        return await _read_document(documents, paths.config_name, create_missing)
    except (OSError, UnicodeDecodeError, WriteError) as e:
        raise SetupError(f"Cannot read {paths.config_name}: {e}", path=paths.config) from e


async def _read_mapping(documents: DocumentStore, paths: FoldPaths, create_missing: bool) -> str:
    try:
        return await _read_document(documents, paths.mapping_name, create_missing)
    except (OSError, UnicodeDecodeError, WriteError) as e:
        raise IdentityLoadError(f"Cannot read {paths.mapping_name}: {e}") from e


async def _load_record(
    documents: DocumentStore,
    store: FoldRecordStore,
    record_id: str,
) -> Optional[MalformedRecordError]:
    name = FoldPaths.record_name(record_id)
    try:
        try:
            text = await documents.read(name)
        except (OSError, UnicodeDecodeError) as e:
            raise MalformedRecordError(f"Unreadable fold record: {e}", record_id=record_id) from e
        store.load(record_id, text)
    except MalformedRecordError as e:
        store.degrade(record_id)
        return e
    return None


def _resolve_settings(config: Dict[str, Any], notifier: Notifier) -> FoldSettings:
    try:
        return load_settings(config)
    except ConfigError as e:
        notifier.add_warning(f"{e}. Using default settings.")
        return load_settings(None)


async def open_session(
    paths: FoldPaths,
    notifier: Optional[Notifier] = None,
    settings: Optional[FoldSettings] = None,
    create_missing: bool = True,
) -> FoldSession:
    """
    Load all persisted state for a project.

    Steps:
    1. Check the persistence directory exists
    2. Read config.json (created as {} if absent) and resolve settings
    3. Read foldsPropaties.json (created as {} if absent)
    4. Load every referenced fold record concurrently

    A fold record that cannot be decoded loads as empty and is reported
    through `notifier`; it does not fail the session.

    With `create_missing=False` nothing is written: absent documents read
    as empty objects. Read-only callers such as `foldkeep show` use this.

    Raises:
        SetupError: If the directory is missing or config.json is unreadable
        IdentityLoadError: If foldsPropaties.json is unreadable or malformed
    """
    notifier = notifier or LoggingNotifier()

    if not paths.directory.is_dir():
        raise SetupError(
            f"There is no {paths.directory.name} directory. Please check in project directory.",
            path=paths.directory,
        )

    documents = DocumentStore(paths.directory)

    config_text = await _read_config(documents, paths, create_missing)
    try:
        config = parse_config_document(config_text)
    except ConfigError as e:
        notifier.add_warning(f"{e}. Using default settings.")
        config = {}

    if settings is None:
        settings = _resolve_settings(config, notifier)

    mapping_text = await _read_mapping(documents, paths, create_missing)
    registry = IdentityRegistry(id_length=settings.record_id_length, indent=settings.indent)
    registry.load(mapping_text)

    store = FoldRecordStore(RangeCodec(indent=settings.indent))
    outcomes = await asyncio.gather(
        *(_load_record(documents, store, rid) for rid in registry.record_ids())
    )
    load_errors = [e for e in outcomes if e is not None]
    for error in load_errors:
        logger.warning(f"{PERSISTENCE} {error}")
        notifier.add_warning(f"Folds not restored: {error}")

    logger.info(
        f"{PERSISTENCE} Loaded {len(registry)} identities, "
        f"{len(store) - len(load_errors)} fold records from {paths.directory}"
    )

    return FoldSession(
        paths=paths,
        settings=settings,
        documents=documents,
        registry=registry,
        store=store,
        capture=CaptureEngine(registry, store),
        config=config,
        load_errors=load_errors,
    )


__all__ = ["FoldSession", "FlushResult", "open_session"]
