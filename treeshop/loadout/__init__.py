"""
loadout/ - Crew loadout cost aggregation.

A loadout bundles equipment (with utilization) and employees (with role);
its hourly cost estimates crew operating cost for a job type.
"""

from .schema import (
    Loadout,
    LoadoutEquipment,
    LoadoutEmployee,
    DEFAULT_MARKUP_MULTIPLIER,
)

from .aggregator import (
    LoadoutAggregator,
    LoadoutCostBreakdown,
    EquipmentCostLine,
    EmployeeCostLine,
)

from .cache import LoadoutCostCache, DEFAULT_TTL_SECONDS

from .templates import (
    build_default_loadouts,
    seed_default_loadouts,
)


__all__ = [
    "Loadout",
    "LoadoutEquipment",
    "LoadoutEmployee",
    "DEFAULT_MARKUP_MULTIPLIER",
    "LoadoutAggregator",
    "LoadoutCostBreakdown",
    "EquipmentCostLine",
    "EmployeeCostLine",
    "LoadoutCostCache",
    "DEFAULT_TTL_SECONDS",
    "build_default_loadouts",
    "seed_default_loadouts",
]
