# foldkeep/core/host.py
"""
Protocols for the host editor.

foldkeep never talks to an editor directly. Whatever embeds it supplies
objects that satisfy these protocols:

- EditorBuffer: one open text buffer
- Workspace: the set of open buffers plus lifecycle subscriptions
- Notifier: operator-facing diagnostics
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Optional, Protocol, Sequence, Tuple, runtime_checkable

from foldkeep.core.ranges import PointPair

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]


@runtime_checkable
class EditorBuffer(Protocol):
    """Protocol for an open text buffer."""

    def get_path(self) -> Optional[str]:
        """Logical path of the buffer, or None for unsaved/untitled buffers."""
        ...

    def folded_ranges(self) -> Iterable[Tuple[PointPair, PointPair]]:
        """Currently folded regions as ((row, col), (row, col)) pairs."""
        ...

    def fold_range(self, start: PointPair, end: PointPair) -> None:
        """
        Fold the region between start and end.

        Folding an already-folded or out-of-bounds region must be tolerated.
        """
        ...


@runtime_checkable
class Workspace(Protocol):
    """Protocol for the editor workspace."""

    def open_buffers(self) -> Sequence[EditorBuffer]:
        """All buffers currently open."""
        ...

    def on_buffer_opened(self, callback: Callable[[EditorBuffer], None]) -> Unsubscribe:
        """Subscribe to buffers opened from now on."""
        ...

    def on_path_renamed(self, callback: Callable[[str, str], None]) -> Unsubscribe:
        """Subscribe to buffer path changes (old_path, new_path)."""
        ...

    def on_buffer_closed(self, callback: Callable[[], None]) -> Unsubscribe:
        """Subscribe to buffers being closed."""
        ...


@runtime_checkable
class Notifier(Protocol):
    """Protocol for operator-facing diagnostics."""

    def add_error(self, message: str) -> None: ...

    def add_warning(self, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes diagnostics to the log."""

    def __init__(self, log: Optional[logging.Logger] = None) -> None:
        self._log = log or logger

    def add_error(self, message: str) -> None:
        self._log.error(message)

    def add_warning(self, message: str) -> None:
        self._log.warning(message)


__all__ = ["EditorBuffer", "Workspace", "Notifier", "LoggingNotifier", "Unsubscribe"]
