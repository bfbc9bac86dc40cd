# foldkeep/core/paths.py
"""
Central path management for foldkeep.

ALL components that need a persistence path should use this module.
No hardcoded file names anywhere else in the codebase.

Layout (rooted in a project directory):
    {project}/.js-folds/
    ├── config.json            # Freeform config, created as {} if absent
    ├── foldsPropaties.json    # File identity -> record id mapping
    └── <record_id>.json       # Encoded fold ranges for one file

Unlike a process-wide workspace, a FoldPaths instance belongs to one
persistence session and is passed to whoever needs it.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

from foldkeep.core.exceptions import SetupError

DEFAULT_DIRECTORY = ".js-folds"
DEFAULT_CONFIG_FILE = "config.json"
DEFAULT_MAPPING_FILE = "foldsPropaties.json"
RECORD_SUFFIX = ".json"


def resolve_project_root(roots: Sequence[Union[str, Path]]) -> Path:
    """
    Pick the project root from the host's list of roots.

    The first root wins. A host with no open project has nothing to
    persist into.

    Raises:
        SetupError: If no roots are available
    """
    if not roots:
        raise SetupError("No project root is open")
    return Path(roots[0])


class FoldPaths:
    """
    Path layout for one project's persistence directory.

    Usage:
        paths = FoldPaths("/path/to/project")

        paths.directory          # /path/to/project/.js-folds
        paths.mapping            # .../foldsPropaties.json
        paths.record("ab12cd34") # .../ab12cd34.json
    """

    def __init__(
        self,
        project_root: Union[str, Path],
        directory_name: str = DEFAULT_DIRECTORY,
        config_file: str = DEFAULT_CONFIG_FILE,
        mapping_file: str = DEFAULT_MAPPING_FILE,
    ) -> None:
        self._root = Path(project_root)
        self._directory_name = directory_name
        self._config_file = config_file
        self._mapping_file = mapping_file

    @property
    def project_root(self) -> Path:
        return self._root

    @property
    def directory(self) -> Path:
        """
        The persistence directory.

        Location: {project}/.js-folds/
        """
        return self._root / self._directory_name

    def ensure_directory(self) -> Path:
        """Get the persistence directory and create it if it doesn't exist."""
        path = self.directory
        path.mkdir(parents=True, exist_ok=True)
        return path

    @property
    def config_name(self) -> str:
        return self._config_file

    @property
    def mapping_name(self) -> str:
        return self._mapping_file

    @property
    def config(self) -> Path:
        """
        Freeform config document.

        Location: {directory}/config.json
        """
        return self.directory / self._config_file

    @property
    def mapping(self) -> Path:
        """
        Identity mapping document.

        Location: {directory}/foldsPropaties.json
        """
        return self.directory / self._mapping_file

    @staticmethod
    def record_name(record_id: str) -> str:
        return f"{record_id}{RECORD_SUFFIX}"

    def record(self, record_id: str) -> Path:
        """
        Fold record document for one record id.

        Location: {directory}/{record_id}.json
        """
        return self.directory / self.record_name(record_id)

    def record_files(self) -> list[Path]:
        """Every record-shaped document in the directory (config and mapping excluded)."""
        if not self.directory.is_dir():
            return []
        reserved = {self._config_file, self._mapping_file}
        return sorted(
            p
            for p in self.directory.glob(f"*{RECORD_SUFFIX}")
            if p.is_file() and p.name not in reserved
        )

    @staticmethod
    def record_id_of(path: Path) -> Optional[str]:
        """Record id encoded in a record document's file name."""
        if path.suffix != RECORD_SUFFIX:
            return None
        return path.stem

    def __repr__(self) -> str:
        return f"FoldPaths({str(self.directory)!r})"


__all__ = [
    "FoldPaths",
    "resolve_project_root",
    "DEFAULT_DIRECTORY",
    "DEFAULT_CONFIG_FILE",
    "DEFAULT_MAPPING_FILE",
]
