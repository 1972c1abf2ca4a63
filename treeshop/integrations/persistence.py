"""
integrations/persistence.py - Whole-collection persistence contract.

Directories read and write one entity type at a time as a full list of
plain record dicts. Partial or streamed access is not assumed.
"""

from __future__ import annotations
from typing import Any, Dict, List, Protocol


Record = Dict[str, Any]


# =========================================================================
# Protocol for Record Storage
# =========================================================================

class Persistence(Protocol):
    """Protocol for record storage backends."""

    def load_all(self, entity: str) -> List[Record]:
        """Return every stored record of an entity type (empty if none)."""
        ...

    def save_all(self, entity: str, records: List[Record]) -> None:
        """Replace the stored collection of an entity type."""
        ...
