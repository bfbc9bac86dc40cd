# foldkeep/persistence/registry.py
"""
IdentityRegistry - file identity to record id mapping.

Backs foldsPropaties.json: a flat JSON object from each file's logical path
to the opaque id naming its fold record. Ids are decoupled from paths so a
rename only rewrites the key.

Record ids are random lowercase alphanumerics. With the default length of 8
there are 36**8 (about 2.8e12) possible ids; a freshly generated id is still
checked against the ids already present and regenerated on conflict.
"""

from __future__ import annotations

import json
import secrets
import string
from typing import Dict, Iterator, List, Optional, Tuple

from pydantic import TypeAdapter, ValidationError

from foldkeep.core.exceptions import IdentityLoadError
from foldkeep.logging.logger import get_logger
from foldkeep.logging.tags import PERSISTENCE

logger = get_logger(__name__)

RECORD_ID_ALPHABET = string.ascii_lowercase + string.digits

_MAPPING = TypeAdapter(Dict[str, str])


def generate_record_id(length: int = 8) -> str:
    """Random lowercase alphanumeric id of the given length."""
    return "".join(secrets.choice(RECORD_ID_ALPHABET) for _ in range(length))


class IdentityRegistry:
    """
    In-memory identity mapping for one session.

    Usage:
        registry = IdentityRegistry()
        registry.load(text)

        record_id = registry.ensure("/project/src/app.js")
        registry.rename("/project/src/app.js", "/project/src/main.js")
        text = registry.serialize()
    """

    def __init__(self, id_length: int = 8, indent: Optional[int] = None) -> None:
        self._id_length = id_length
        self._indent = indent
        self._mapping: Dict[str, str] = {}

    def load(self, raw_text: Optional[str]) -> Dict[str, str]:
        """
        Replace the mapping with the parsed document.

        None or blank text is an empty mapping.

        Raises:
            IdentityLoadError: If the text is not a JSON object of strings
        """
        if raw_text is None or not raw_text.strip():
            self._mapping = {}
            return dict(self._mapping)

        try:
            self._mapping = _MAPPING.validate_json(raw_text, strict=True)
        except ValidationError as e:
            raise IdentityLoadError(f"Invalid identity mapping: {e}") from e

        logger.debug(f"{PERSISTENCE} Loaded {len(self._mapping)} identities")
        return dict(self._mapping)

    def resolve(self, identity: str) -> Optional[str]:
        return self._mapping.get(identity)

    def ensure(self, identity: str) -> str:
        """Existing record id for `identity`, or a newly assigned one."""
        record_id = self._mapping.get(identity)
        if record_id is not None:
            return record_id

        taken = set(self._mapping.values())
        record_id = generate_record_id(self._id_length)
        while record_id in taken:
            logger.debug(f"{PERSISTENCE} Record id collision on {record_id}, regenerating")
            record_id = generate_record_id(self._id_length)

        self._mapping[identity] = record_id
        logger.debug(f"{PERSISTENCE} Assigned {record_id} to {identity}")
        return record_id

    def rename(self, old_identity: str, new_identity: str) -> bool:
        """
        Move the record id from `old_identity` to `new_identity`.

        An unknown `old_identity` is a no-op. A record id already held by
        `new_identity` is replaced.

        Returns:
            True if the mapping changed
        """
        if old_identity not in self._mapping:
            logger.debug(f"{PERSISTENCE} Rename of untracked {old_identity} ignored")
            return False
        if old_identity == new_identity:
            return False

        self._mapping[new_identity] = self._mapping.pop(old_identity)
        logger.debug(f"{PERSISTENCE} Renamed {old_identity} -> {new_identity}")
        return True

    def serialize(self) -> str:
        """JSON object text, one entry per identity in iteration order."""
        if self._indent is None:
            return json.dumps(self._mapping, ensure_ascii=False, separators=(",", ":"))
        return json.dumps(self._mapping, ensure_ascii=False, indent=self._indent)

    def record_ids(self) -> List[str]:
        """Distinct record ids, first-seen order."""
        return list(dict.fromkeys(self._mapping.values()))

    def items(self) -> List[Tuple[str, str]]:
        return list(self._mapping.items())

    def __contains__(self, identity: object) -> bool:
        return identity in self._mapping

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._mapping))

    def __len__(self) -> int:
        return len(self._mapping)


__all__ = ["IdentityRegistry", "generate_record_id", "RECORD_ID_ALPHABET"]
