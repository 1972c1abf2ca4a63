"""
pricing/line_items.py - Service request line items.

A line item carries the measurements for one service request. Its
unit_price and total_price are filled in by the pricer; a line item
belongs to exactly one proposal and is serialized inside it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .enums import ServiceType
from .tree_score import tree_score


@dataclass
class LineItem:
    """One priced (or to-be-priced) service request."""
    service_type: ServiceType
    description: str = ""
    quantity: float = 1.0

    # Tree measurements (ft / in)
    height: float = 0.0
    dbh: float = 0.0
    canopy_radius: float = 0.0
    trim_percent: float = 100.0

    # Stump measurements
    stump_diameter: float = 0.0
    stump_height: Optional[float] = None
    grind_depth: Optional[float] = None

    # Acreage work
    acres: Optional[float] = None
    max_dbh: Optional[float] = None

    # Risk / access flags
    near_structure: bool = False
    power_lines: bool = False
    slope: bool = False
    afiss_factors: List[str] = field(default_factory=list)

    # Computed by the pricer
    unit_price: float = 0.0
    total_price: float = 0.0
    af_score: int = 0
    estimated_hours: float = 0.0
    is_priced: bool = False

    sort_order: int = 0

    def __post_init__(self):
        if isinstance(self.service_type, str):
            self.service_type = ServiceType(self.service_type)

    @property
    def tree_score(self) -> float:
        return tree_score(self.height, self.dbh, self.canopy_radius)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_type": self.service_type.value,
            "description": self.description,
            "quantity": self.quantity,
            "height": self.height,
            "dbh": self.dbh,
            "canopy_radius": self.canopy_radius,
            "trim_percent": self.trim_percent,
            "stump_diameter": self.stump_diameter,
            "stump_height": self.stump_height,
            "grind_depth": self.grind_depth,
            "acres": self.acres,
            "max_dbh": self.max_dbh,
            "near_structure": self.near_structure,
            "power_lines": self.power_lines,
            "slope": self.slope,
            "afiss_factors": list(self.afiss_factors),
            "unit_price": self.unit_price,
            "total_price": self.total_price,
            "af_score": self.af_score,
            "estimated_hours": self.estimated_hours,
            "is_priced": self.is_priced,
            "sort_order": self.sort_order,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LineItem":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)
