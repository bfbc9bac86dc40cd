# foldkeep/persistence/coordinator.py
"""
PersistenceCoordinator - fold persistence lifecycle.

States:
    UNINITIALIZED --initialize()--> LOADING --> READY <--> FLUSHING
                         ^             |
                         +---failure---+

Key responsibilities:
- Load the session at activation and restore folds on open buffers
- Subscribe to host events (open, rename, close)
- Capture + flush on close, session end and checkpoints
- Report every failure through the Notifier exactly once

This is the ONLY place that reacts to host lifecycle events.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Coroutine, List, Optional, Sequence, Set, Union

from foldkeep.config.loader import load_settings
from foldkeep.config.schema import FoldSettings
from foldkeep.core.exceptions import IdentityLoadError, SetupError
from foldkeep.core.host import EditorBuffer, LoggingNotifier, Notifier, Workspace
from foldkeep.core.paths import FoldPaths, resolve_project_root
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import PERSISTENCE
from foldkeep.persistence.session import FlushResult, FoldSession, open_session

logger = get_logger(__name__)


class CoordinatorState(str, Enum):
    """Lifecycle state of a coordinator."""

    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FLUSHING = "flushing"


class PersistenceCoordinator:
    """
    Drives load, restore, capture and flush for one workspace.

    Usage:
        coordinator = PersistenceCoordinator(workspace, notifier)
        await coordinator.initialize("/path/to/project")

        # host events are wired automatically once READY
        ...

        await coordinator.deactivate()
    """

    def __init__(
        self,
        workspace: Workspace,
        notifier: Optional[Notifier] = None,
        settings: Optional[FoldSettings] = None,
    ) -> None:
        self._workspace = workspace
        self._notifier = notifier or LoggingNotifier()
        self._settings = settings
        self._state = CoordinatorState.UNINITIALIZED
        self._session: Optional[FoldSession] = None
        self._unsubscribers: List[Callable[[], None]] = []
        self._tasks: Set[asyncio.Task] = set()
        self._active_flushes = 0

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def session(self) -> Optional[FoldSession]:
        return self._session

    @property
    def is_ready(self) -> bool:
        return self._state in (CoordinatorState.READY, CoordinatorState.FLUSHING)

    # -------------------------------------------------------------------------
    # Activation
    # -------------------------------------------------------------------------

    async def initialize(self, project_root: Union[str, Path]) -> CoordinatorState:
        """
        Load persisted state for `project_root` and start tracking folds.

        Only runs from UNINITIALIZED. Setup and identity-mapping failures are
        reported once and leave the coordinator UNINITIALIZED.
        """
        if self._state is not CoordinatorState.UNINITIALIZED:
            logger.debug(f"{PERSISTENCE} initialize() ignored in state {self._state.value}")
            return self._state

        base = self._settings or load_settings()
        paths = FoldPaths(
            project_root,
            directory_name=base.directory,
            config_file=base.config_file,
            mapping_file=base.mapping_file,
        )

        self._state = CoordinatorState.LOADING
        try:
            session = await open_session(paths, self._notifier, self._settings)
        except (SetupError, IdentityLoadError) as e:
            self._state = CoordinatorState.UNINITIALIZED
            logger.error(f"{PERSISTENCE} Initialization failed: {e}")
            self._notifier.add_error(str(e))
            return self._state

        self._session = session
        self._state = CoordinatorState.READY

        for buffer in self._workspace.open_buffers():
            self.on_buffer_opened(buffer)
        self._subscribe()

        logger.info(f"{PERSISTENCE} Tracking folds in {paths.directory}")
        return self._state

    async def initialize_from_roots(self, roots: Sequence[Union[str, Path]]) -> CoordinatorState:
        """Initialize against the first of the host's project roots."""
        try:
            root = resolve_project_root(roots)
        except SetupError as e:
            logger.error(f"{PERSISTENCE} Initialization failed: {e}")
            self._notifier.add_error(str(e))
            return self._state
        return await self.initialize(root)

    # -------------------------------------------------------------------------
    # Host Events
    # -------------------------------------------------------------------------

    def on_buffer_opened(self, buffer: EditorBuffer) -> int:
        """
        Apply stored folds to a newly opened buffer.

        Returns:
            Number of folds applied
        """
        if not self.is_ready:
            logger.debug(f"{PERSISTENCE} Buffer opened before ready, ignored")
            return 0
        assert self._session is not None
        return self._session.capture.restore(buffer)

    async def on_path_renamed(self, old_path: str, new_path: str) -> Optional[FlushResult]:
        """Move a file's record to its new path and write the mapping through."""
        if not self.is_ready:
            logger.debug(f"{PERSISTENCE} Rename before ready, ignored")
            return None
        assert self._session is not None

        self._session.registry.rename(old_path, new_path)
        return await self.flush()

    async def on_buffer_closed(self) -> Optional[FlushResult]:
        """Capture every open buffer and flush."""
        return await self._capture_and_flush("buffer closed")

    async def on_session_end(self) -> Optional[FlushResult]:
        """Capture every open buffer and flush before the host exits."""
        return await self._capture_and_flush("session end")

    async def checkpoint(self) -> Optional[FlushResult]:
        """Periodic serialization point; same work as session end."""
        return await self._capture_and_flush("checkpoint")

    # -------------------------------------------------------------------------
    # Flush
    # -------------------------------------------------------------------------

    async def flush(self) -> Optional[FlushResult]:
        """
        Write all in-memory state to disk.

        Returns:
            FlushResult, or None if the coordinator is not ready
        """
        if not self.is_ready:
            logger.debug(f"{PERSISTENCE} Flush before ready, ignored")
            return None
        assert self._session is not None

        self._active_flushes += 1
        self._state = CoordinatorState.FLUSHING
        try:
            result = await self._session.flush()
        finally:
            self._active_flushes -= 1
            if self._active_flushes == 0:
                self._state = CoordinatorState.READY

        for error in result.errors:
            self._notifier.add_error(str(error))
        return result

    async def _capture_and_flush(self, reason: str) -> Optional[FlushResult]:
        if not self.is_ready:
            logger.debug(f"{PERSISTENCE} {reason} before ready, ignored")
            return None
        assert self._session is not None

        captured = self._session.capture.capture(self._workspace.open_buffers())
        logger.debug(f"{PERSISTENCE} {reason}: captured {len(captured)} record(s)")
        return await self.flush()

    # -------------------------------------------------------------------------
    # Subscriptions
    # -------------------------------------------------------------------------

    def _subscribe(self) -> None:
        ws = self._workspace
        self._unsubscribers = [
            ws.on_buffer_opened(self.on_buffer_opened),
            ws.on_path_renamed(lambda old, new: self._spawn(self.on_path_renamed(old, new))),
            ws.on_buffer_closed(lambda: self._spawn(self.on_buffer_closed())),
        ]

    def _spawn(self, work: Coroutine[Any, Any, Optional[FlushResult]]) -> None:
        """Run a fire-and-forget trigger on the running loop."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(work)
            return

        task = loop.create_task(work)
        self._tasks.add(task)
        task.add_done_callback(self._task_done)

    def _task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"{PERSISTENCE} Background flush failed: {error}", exc_info=error)
            self._notifier.add_error(str(error))

    async def drain(self) -> None:
        """Wait for every pending fire-and-forget trigger to finish."""
        while self._tasks:
            pending = list(self._tasks)
            await asyncio.gather(*pending, return_exceptions=True)
            self._tasks.difference_update(pending)

    def dispose(self) -> None:
        """Drop all host subscriptions."""
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []

    async def deactivate(self) -> Optional[FlushResult]:
        """Final flush (when ready) and unsubscribe. Safe in any state."""
        result = None
        if self.is_ready:
            await self.drain()
            result = await self.on_session_end()
        self.dispose()
        return result


__all__ = ["PersistenceCoordinator", "CoordinatorState"]
