# foldkeep/storage/documents.py
"""
Async UTF-8 document I/O for the persistence directory.

Key responsibilities:
- Read a named document (None when absent)
- Write a named document through a per-write temp file + replace
- Create a document with default content on first access

Key non-responsibilities:
- NO parsing (callers own their formats)
- NO directory creation (a missing directory is a setup problem)
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional
from uuid import uuid4

import aiofiles
import aiofiles.os

from foldkeep.core.exceptions import WriteError
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import STORAGE

logger = get_logger(__name__)

ENCODING = "utf-8"


class DocumentStore:
    """
    Reads and writes documents inside one directory.

    Usage:
        documents = DocumentStore(paths.directory)

        text = await documents.read("foldsPropaties.json")   # None if absent
        await documents.write("ab12cd34.json", "[]")
        text = await documents.ensure("config.json", "{}")
    """

    def __init__(self, directory: Path) -> None:
        self._directory = Path(directory)

    @property
    def directory(self) -> Path:
        return self._directory

    def path(self, name: str) -> Path:
        return self._directory / name

    def directory_exists(self) -> bool:
        return self._directory.is_dir()

    async def exists(self, name: str) -> bool:
        return await aiofiles.os.path.isfile(self.path(name))

    async def read(self, name: str) -> Optional[str]:
        """
        Read a document.

        Returns:
            Document text, or None if the document does not exist

        Raises:
            OSError: If the document exists but cannot be read
            UnicodeDecodeError: If the document is not UTF-8
        """
        path = self.path(name)
        if not await aiofiles.os.path.isfile(path):
            return None

        async with aiofiles.open(path, "r", encoding=ENCODING) as f:
            text = await f.read()

        logger.debug(f"{STORAGE} Read {path} ({len(text)} chars)")
        return text

    async def write(self, name: str, text: str) -> None:
        """
        Write a document, replacing any previous content.

        Each call writes its own temp file, so overlapping writes of the same
        document never share one; the last replace wins.

        Raises:
            WriteError: If the write or the final replace fails
        """
        path = self.path(name)
        temp_path = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
        try:
            async with aiofiles.open(temp_path, "w", encoding=ENCODING) as f:
                await f.write(text)
            await aiofiles.os.replace(temp_path, path)
        except OSError as e:
            if await aiofiles.os.path.exists(temp_path):
                await aiofiles.os.remove(temp_path)
            raise WriteError(f"Failed to write document: {e}", document=name) from e

        logger.debug(f"{STORAGE} Wrote {path} ({len(text)} chars)")

    async def ensure(self, name: str, default: str = "{}") -> str:
        """
        Read a document, creating it with `default` content if absent.

        Raises:
            OSError: If an existing document cannot be read
            WriteError: If the document has to be created and cannot be
        """
        text = await self.read(name)
        if text is not None:
            return text

        logger.info(f"{STORAGE} No {name} found in {self._directory}, creating {default}")
        await self.write(name, default)
        return default

    def __repr__(self) -> str:
        return f"DocumentStore({str(self._directory)!r})"


__all__ = ["DocumentStore", "ENCODING"]
