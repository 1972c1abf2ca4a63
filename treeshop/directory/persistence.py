"""
directory/persistence.py - Record storage backends.

JsonFilePersistence keeps one JSON file per entity type under a data
directory. Writes go to a temporary file that is then renamed over the
target, so a failed save leaves the previous file intact.
"""

from __future__ import annotations
from copy import deepcopy
from pathlib import Path
from typing import Dict, List, Union
import json
import logging
import os
import tempfile

from ..errors import ErrorCode, PersistenceError
from ..integrations.persistence import Record

logger = logging.getLogger(__name__)


class JsonFilePersistence:
    """
    File-backed persistence.

    Layout:
        <data_dir>/equipment.json
        <data_dir>/employee.json
        <data_dir>/loadout.json
        ...
    """

    def __init__(self, data_dir: Union[str, Path]):
        self.data_dir = Path(data_dir)

    def path_for(self, entity: str) -> Path:
        return self.data_dir / f"{entity}.json"

    def load_all(self, entity: str) -> List[Record]:
        path = self.path_for(entity)
        if not path.exists():
            return []
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load {entity} from {path}: {e}")
            raise PersistenceError(entity, f"load failed: {e}", ErrorCode.PER_LOAD_FAILED) from e

        if not isinstance(data, list):
            raise PersistenceError(
                entity, f"expected a list of records in {path}", ErrorCode.PER_CORRUPT_RECORD,
            )
        return data

    def save_all(self, entity: str, records: List[Record]) -> None:
        path = self.path_for(entity)
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.data_dir, prefix=f".{entity}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(records, f, indent=2, default=str)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to save {entity} to {path}: {e}")
            raise PersistenceError(entity, f"save failed: {e}", ErrorCode.PER_SAVE_FAILED) from e

        logger.debug(f"Saved {len(records)} {entity} records to {path}")


class InMemoryPersistence:
    """Process-local persistence for tests and ephemeral sessions."""

    def __init__(self):
        self._store: Dict[str, List[Record]] = {}
        self.fail_saves = False

    def load_all(self, entity: str) -> List[Record]:
        return deepcopy(self._store.get(entity, []))

    def save_all(self, entity: str, records: List[Record]) -> None:
        if self.fail_saves:
            raise PersistenceError(entity, "save rejected by backend", ErrorCode.PER_SAVE_FAILED)
        self._store[entity] = deepcopy(records)
