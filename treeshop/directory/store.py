"""
directory/store.py - Keyed record directories.

A Directory is an explicit, instance-scoped repository for one entity type
(equipment, employees, loadouts, customers, proposals). Pricing and cost
code receives directories by reference; nothing here is process-global.

Mutations are all-or-nothing with respect to persistence: when a save
fails, the in-memory collection is restored to its last persisted
contents (including records edited in place before update()) and the
PersistenceError propagates to the caller.
"""

from __future__ import annotations
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, Iterator, List, Optional, TypeVar
import logging

from ..errors import DuplicateRecordError, PersistenceError, UnknownRecordError
from ..integrations.persistence import Persistence, Record


logger = logging.getLogger(__name__)

T = TypeVar("T")


class ChangeAction:
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    LOAD = "load"


@dataclass
class DirectoryChange:
    """Notification sent to listeners after a committed mutation."""
    entity: str
    action: str
    record_id: Optional[str] = None


ChangeListener = Callable[[DirectoryChange], None]


class Directory(Generic[T]):
    """
    Insertion-ordered, keyed collection of records.

    Usage:
        equipment = Directory("equipment", Equipment.from_dict,
                              key=lambda e: e.equipment_id,
                              persistence=JsonFilePersistence("data"))
        equipment.load()
        equipment.add(Equipment.from_defaults("Chipper #2", EquipmentCategory.CHIPPER))
    """

    def __init__(
        self,
        entity: str,
        from_dict: Callable[[Record], T],
        key: Callable[[T], str],
        persistence: Optional[Persistence] = None,
        autosave: bool = True,
    ):
        self.entity = entity
        self._from_dict = from_dict
        self._key = key
        self.persistence = persistence
        self.autosave = autosave

        self._records: Dict[str, T] = {}
        # Serialized form of the last successful load or save
        self._persisted: Dict[str, Record] = {}
        self._listeners: List[ChangeListener] = []

    # -------------------------------------------------------------------------
    # Read access
    # -------------------------------------------------------------------------

    def get(self, record_id: str) -> Optional[T]:
        """Return the record with this id, or None."""
        return self._records.get(record_id)

    def all(self) -> List[T]:
        return list(self._records.values())

    def ids(self) -> List[str]:
        return list(self._records.keys())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._records.values()))

    # -------------------------------------------------------------------------
    # Mutation
    # -------------------------------------------------------------------------

    def add(self, record: T) -> T:
        record_id = self._key(record)
        if record_id in self._records:
            raise DuplicateRecordError(self.entity, record_id)

        self._commit(ChangeAction.ADD, record_id, lambda: self._records.__setitem__(record_id, record))
        return record

    def update(self, record: T) -> T:
        """Replace the stored record that has the same id."""
        record_id = self._key(record)
        if record_id not in self._records:
            raise UnknownRecordError(self.entity, record_id)

        self._commit(ChangeAction.UPDATE, record_id, lambda: self._records.__setitem__(record_id, record))
        return record

    def delete(self, record_id: str) -> T:
        record = self._records.get(record_id)
        if record is None:
            raise UnknownRecordError(self.entity, record_id)

        self._commit(ChangeAction.DELETE, record_id, lambda: self._records.pop(record_id))
        return record

    def _commit(self, action: str, record_id: str, apply: Callable[[], Any]) -> None:
        previous = dict(self._records)
        apply()

        if self.autosave and self.persistence is not None:
            try:
                self.save()
            except PersistenceError:
                self._restore(previous)
                logger.error(f"{self.entity}: {action} of {record_id} rolled back after save failure")
                raise

        logger.debug(f"{self.entity}: {action} {record_id}")
        self._notify(DirectoryChange(self.entity, action, record_id))

    def _restore(self, previous: Dict[str, T]) -> None:
        """
        Rebuild the collection from the last persisted contents.

        Records edited in place since then are replaced by fresh copies;
        untouched records keep their identity.
        """
        restored: Dict[str, T] = {}
        for record_id, data in self._persisted.items():
            record = previous.get(record_id)
            if record is None or self._to_dict(record) != data:
                record = self._from_dict(deepcopy(data))
            restored[record_id] = record
        self._records = restored

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def load(self) -> int:
        """
        Replace the in-memory collection with the persisted one.

        Returns the number of records loaded. On failure the current
        contents are kept and PersistenceError propagates.
        """
        if self.persistence is None:
            return len(self._records)

        raw = self.persistence.load_all(self.entity)
        loaded: Dict[str, T] = {}
        for data in raw:
            try:
                record = self._from_dict(data)
            except (TypeError, ValueError, KeyError) as e:
                raise PersistenceError(self.entity, f"corrupt record {data!r}: {e}") from e
            loaded[self._key(record)] = record

        self._records = loaded
        self._persisted = {record_id: self._to_dict(r) for record_id, r in loaded.items()}
        logger.info(f"Loaded {len(loaded)} {self.entity} records")
        self._notify(DirectoryChange(self.entity, ChangeAction.LOAD))
        return len(loaded)

    def save(self) -> None:
        if self.persistence is None:
            return
        payload = {record_id: self._to_dict(r) for record_id, r in self._records.items()}
        self.persistence.save_all(self.entity, list(payload.values()))
        self._persisted = payload

    @staticmethod
    def _to_dict(record: Any) -> Record:
        return record.to_dict()

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def subscribe(self, listener: ChangeListener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: ChangeListener) -> bool:
        try:
            self._listeners.remove(listener)
            return True
        except ValueError:
            return False

    def _notify(self, change: DirectoryChange) -> None:
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception as e:
                logger.error(f"{self.entity} listener failed on {change.action}: {e}")
