"""
loadout/cache.py - Memoized loadout cost.

An entry is served only while it is younger than the TTL and no
referenced directory has changed since it was computed. Any mutation of
the equipment or employee directory drops every entry; a loadout
mutation drops that loadout's entry.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Dict, Optional
import logging
import time

from ..directory import ChangeAction, DirectoryChange
from .aggregator import LoadoutAggregator, LoadoutCostBreakdown
from .schema import Loadout

if TYPE_CHECKING:
    from ..directory import Directory

logger = logging.getLogger(__name__)


DEFAULT_TTL_SECONDS = 60.0


@dataclass
class _CacheEntry:
    breakdown: LoadoutCostBreakdown
    computed_at: float


class LoadoutCostCache:
    """TTL cache in front of a LoadoutAggregator."""

    def __init__(
        self,
        aggregator: LoadoutAggregator,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.aggregator = aggregator
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, _CacheEntry] = {}

        self.hits = 0
        self.misses = 0

        aggregator.equipment.subscribe(self._on_resource_change)
        aggregator.employees.subscribe(self._on_resource_change)

    def watch_loadouts(self, loadouts: "Directory[Loadout]") -> None:
        """Invalidate entries when the loadout directory changes."""
        loadouts.subscribe(self._on_loadout_change)

    def get(self, loadout: Loadout) -> LoadoutCostBreakdown:
        now = self._clock()
        entry = self._entries.get(loadout.loadout_id)

        if entry is not None and now - entry.computed_at < self.ttl_seconds:
            self.hits += 1
            logger.debug(f"Loadout cost cache hit: {loadout.loadout_id}")
            return entry.breakdown

        self.misses += 1
        breakdown = self.aggregator.calculate(loadout)
        self._entries[loadout.loadout_id] = _CacheEntry(breakdown, now)
        return breakdown

    def invalidate(self, loadout_id: Optional[str] = None) -> None:
        """Drop one entry, or all entries when no id is given."""
        if loadout_id is None:
            self._entries.clear()
        else:
            self._entries.pop(loadout_id, None)

    def __len__(self) -> int:
        return len(self._entries)

    def _on_resource_change(self, change: DirectoryChange) -> None:
        logger.debug(f"Loadout cost cache cleared after {change.entity} {change.action}")
        self.invalidate()

    def _on_loadout_change(self, change: DirectoryChange) -> None:
        if change.action == ChangeAction.LOAD or change.record_id is None:
            self.invalidate()
        else:
            self.invalidate(change.record_id)
