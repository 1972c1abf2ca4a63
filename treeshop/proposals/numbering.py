"""
proposals/numbering.py - Proposal number generation.

Numbers have the form EST-yyyyMMdd-NNN. NNN is one more than the count of
existing numbers that already carry that day's prefix.

Count-then-insert is not atomic: two writers numbering on the same day
from the same snapshot will produce the same number. Single-writer use
only.
"""

from __future__ import annotations
from datetime import date, datetime
from typing import Iterable, Union

NUMBER_PREFIX = "EST"


def day_prefix(on: Union[date, datetime]) -> str:
    return f"{NUMBER_PREFIX}-{on:%Y%m%d}-"


def next_proposal_number(existing: Iterable[str], on: Union[date, datetime]) -> str:
    """Next number for the given day, given every number already issued."""
    prefix = day_prefix(on)
    count = sum(1 for number in existing if number.startswith(prefix))
    return f"{prefix}{count + 1:03d}"
