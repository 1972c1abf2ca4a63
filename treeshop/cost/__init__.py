"""
cost/ - Equipment and labor cost model.

Equipment hourly rate (depreciation, interest, insurance, fuel,
maintenance, wear parts) and employee burdened hourly cost.
"""

from .enums import (
    EquipmentCategory,
    EmployeePosition,
)

from .schema import (
    Equipment,
    Employee,
    EquipmentDefaults,
    HourlyRateBreakdown,
    BurdenBreakdown,
    EQUIPMENT_DEFAULTS,
    BURDEN_MULTIPLIERS,
    TYPICAL_WAGE_RANGES,
    DEFAULT_FUEL_PRICE,
    new_record_id,
)

from .models import (
    EquipmentCostModel,
    LaborCostModel,
)


__all__ = [
    # Enums
    "EquipmentCategory",
    "EmployeePosition",
    # Schema
    "Equipment",
    "Employee",
    "EquipmentDefaults",
    "HourlyRateBreakdown",
    "BurdenBreakdown",
    "EQUIPMENT_DEFAULTS",
    "BURDEN_MULTIPLIERS",
    "TYPICAL_WAGE_RANGES",
    "DEFAULT_FUEL_PRICE",
    "new_record_id",
    # Models
    "EquipmentCostModel",
    "LaborCostModel",
]
