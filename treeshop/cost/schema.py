"""
cost/schema.py - Cost data structures.

Equipment and employee records, the hourly-rate and burden breakdowns
produced by the cost models, and the immutable category defaults tables.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple
import uuid

from .enums import EquipmentCategory, EmployeePosition
from ..errors import EquipmentConfigurationError, ErrorCode


DEFAULT_FUEL_PRICE = 4.25          # USD/gal
DEFAULT_SALVAGE_FRACTION = 0.25    # of purchase price


def new_record_id() -> str:
    return uuid.uuid4().hex


# =============================================================================
# DEFAULTS TABLES
# =============================================================================

@dataclass(frozen=True)
class EquipmentDefaults:
    """Default cost template for one equipment category."""
    purchase_price: float
    salvage_percent: float
    expected_life_hours: float
    fuel_burn_gph: float
    maintenance_factor: float
    insurance_rate: float
    annual_hours: float

    @property
    def salvage_value(self) -> float:
        return self.purchase_price * self.salvage_percent / 100


EQUIPMENT_DEFAULTS: Mapping[EquipmentCategory, EquipmentDefaults] = MappingProxyType({
    EquipmentCategory.BUCKET_TRUCK: EquipmentDefaults(165000, 30, 10000, 6.5, 60, 3, 2000),
    EquipmentCategory.CHIPPER: EquipmentDefaults(50000, 25, 5000, 2.5, 90, 3, 1800),
    EquipmentCategory.STUMP_GRINDER: EquipmentDefaults(45000, 25, 5000, 2.8, 90, 3, 1600),
    EquipmentCategory.FORESTRY_MULCHER: EquipmentDefaults(118000, 20, 6000, 5.5, 100, 4, 1800),
    EquipmentCategory.DUMP_TRUCK: EquipmentDefaults(85000, 35, 8000, 4.0, 50, 3, 2000),
    EquipmentCategory.PICKUP_TRUCK: EquipmentDefaults(65000, 40, 8000, 2.5, 50, 2.5, 2200),
    EquipmentCategory.TRAILER: EquipmentDefaults(15000, 30, 10000, 0.0, 30, 2, 2000),
    EquipmentCategory.CRANE: EquipmentDefaults(350000, 30, 12000, 8.0, 70, 5, 1500),
    EquipmentCategory.MINI_EXCAVATOR: EquipmentDefaults(70000, 25, 8000, 3.0, 75, 3, 1700),
    EquipmentCategory.CHAINSAW: EquipmentDefaults(1000, 10, 2400, 0.3, 100, 0, 1200),
    EquipmentCategory.CLIMBING_GEAR: EquipmentDefaults(1500, 10, 5000, 0.0, 20, 0, 1800),
    EquipmentCategory.RIGGING_EQUIPMENT: EquipmentDefaults(1000, 10, 5000, 0.0, 20, 0, 1800),
    EquipmentCategory.HAND_TOOLS: EquipmentDefaults(400, 10, 2400, 0.0, 50, 0, 2000),
    EquipmentCategory.SAFETY_GEAR: EquipmentDefaults(300, 0, 2000, 0.0, 0, 0, 2000),
})


BURDEN_MULTIPLIERS: Mapping[EmployeePosition, float] = MappingProxyType({
    EmployeePosition.GROUND_CREW_ENTRY: 1.6,
    EmployeePosition.GROUND_CREW_EXPERIENCED: 1.65,
    EmployeePosition.CLIMBER_APPRENTICE: 1.7,
    EmployeePosition.CLIMBER_EXPERIENCED: 1.75,
    EmployeePosition.CREW_LEADER: 1.8,
    EmployeePosition.CERTIFIED_ARBORIST: 1.9,
    EmployeePosition.EQUIPMENT_OPERATOR: 1.85,
    EmployeePosition.FOREMAN: 2.0,
})


# Typical base wage range (USD/hr) per position, informational
TYPICAL_WAGE_RANGES: Mapping[EmployeePosition, Tuple[float, float]] = MappingProxyType({
    EmployeePosition.GROUND_CREW_ENTRY: (15.0, 20.0),
    EmployeePosition.GROUND_CREW_EXPERIENCED: (18.0, 25.0),
    EmployeePosition.CLIMBER_APPRENTICE: (22.0, 28.0),
    EmployeePosition.CLIMBER_EXPERIENCED: (25.0, 35.0),
    EmployeePosition.CREW_LEADER: (30.0, 40.0),
    EmployeePosition.CERTIFIED_ARBORIST: (35.0, 45.0),
    EmployeePosition.EQUIPMENT_OPERATOR: (28.0, 38.0),
    EmployeePosition.FOREMAN: (40.0, 50.0),
})


# =============================================================================
# RECORDS
# =============================================================================

_DIVISOR_FIELDS: Mapping[str, ErrorCode] = MappingProxyType({
    "expected_life_hours": ErrorCode.CFG_NON_POSITIVE_LIFE_HOURS,
    "annual_hours": ErrorCode.CFG_NON_POSITIVE_ANNUAL_HOURS,
})


@dataclass
class Equipment:
    """
    Owned equipment item.

    Life hours and annual hours are divisors in the hourly-rate model and
    must be strictly positive; construction or assignment fails otherwise.
    """
    equipment_id: str
    name: str
    category: EquipmentCategory
    purchase_price: float
    salvage_value: Optional[float] = None
    expected_life_hours: float = 5000.0
    annual_hours: float = 1800.0
    fuel_burn_gph: float = 0.0
    fuel_price_per_gallon: float = DEFAULT_FUEL_PRICE
    maintenance_factor: float = 0.0     # % of depreciation
    insurance_rate: float = 0.0         # % of purchase price per year

    manufacturer: str = ""
    model: str = ""
    year: Optional[int] = None
    serial_number: str = ""
    notes: str = ""
    is_active: bool = True

    def __post_init__(self):
        if isinstance(self.category, str):
            self.category = EquipmentCategory(self.category)
        if self.salvage_value is None:
            self.salvage_value = self.purchase_price * DEFAULT_SALVAGE_FRACTION

    def __setattr__(self, name: str, value: Any) -> None:
        # Runs for dataclass __init__ assignments as well as later edits
        code = _DIVISOR_FIELDS.get(name)
        if code is not None and not value > 0:
            raise EquipmentConfigurationError(name, value, code)
        super().__setattr__(name, value)

    @classmethod
    def from_defaults(
        cls,
        name: str,
        category: EquipmentCategory,
        equipment_id: Optional[str] = None,
        **overrides: Any,
    ) -> "Equipment":
        """Create an equipment record from the category defaults table."""
        defaults = EQUIPMENT_DEFAULTS[category]
        values = {
            "purchase_price": defaults.purchase_price,
            "salvage_value": defaults.salvage_value,
            "expected_life_hours": defaults.expected_life_hours,
            "annual_hours": defaults.annual_hours,
            "fuel_burn_gph": defaults.fuel_burn_gph,
            "maintenance_factor": defaults.maintenance_factor,
            "insurance_rate": defaults.insurance_rate,
        }
        values.update(overrides)
        return cls(
            equipment_id=equipment_id or new_record_id(),
            name=name,
            category=category,
            **values,
        )

    @property
    def hourly_rate(self) -> float:
        from .models.equipment import EquipmentCostModel
        return EquipmentCostModel().hourly_rate(self).hourly_rate

    def to_dict(self) -> Dict[str, Any]:
        return {
            "equipment_id": self.equipment_id,
            "name": self.name,
            "category": self.category.value,
            "purchase_price": self.purchase_price,
            "salvage_value": self.salvage_value,
            "expected_life_hours": self.expected_life_hours,
            "annual_hours": self.annual_hours,
            "fuel_burn_gph": self.fuel_burn_gph,
            "fuel_price_per_gallon": self.fuel_price_per_gallon,
            "maintenance_factor": self.maintenance_factor,
            "insurance_rate": self.insurance_rate,
            "manufacturer": self.manufacturer,
            "model": self.model,
            "year": self.year,
            "serial_number": self.serial_number,
            "notes": self.notes,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Equipment":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


@dataclass
class Employee:
    """Crew member with a burdened hourly cost."""
    employee_id: str
    first_name: str
    last_name: str
    position: EmployeePosition
    base_hourly_rate: float
    burden_multiplier: Optional[float] = None

    email: str = ""
    phone: str = ""
    hire_date: Optional[str] = None
    is_active: bool = True

    def __post_init__(self):
        if isinstance(self.position, str):
            self.position = EmployeePosition(self.position)
        if self.burden_multiplier is None:
            self.burden_multiplier = BURDEN_MULTIPLIERS[self.position]

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def true_hourly_cost(self) -> float:
        return self.base_hourly_rate * self.burden_multiplier

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "position": self.position.value,
            "base_hourly_rate": self.base_hourly_rate,
            "burden_multiplier": self.burden_multiplier,
            "email": self.email,
            "phone": self.phone,
            "hire_date": self.hire_date,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Employee":
        known = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**known)


# =============================================================================
# BREAKDOWNS
# =============================================================================

@dataclass
class HourlyRateBreakdown:
    """Per-hour ownership and operating cost components. Unrounded."""
    depreciation: float = 0.0
    interest: float = 0.0
    insurance: float = 0.0
    fuel: float = 0.0
    maintenance: float = 0.0
    wear_parts: float = 0.0
    hourly_rate: float = 0.0

    @property
    def ownership_cost(self) -> float:
        return self.depreciation + self.interest + self.insurance

    @property
    def operating_cost(self) -> float:
        return self.fuel + self.maintenance + self.wear_parts

    def to_dict(self) -> Dict[str, Any]:
        return {
            "depreciation": round(self.depreciation, 4),
            "interest": round(self.interest, 4),
            "insurance": round(self.insurance, 4),
            "fuel": round(self.fuel, 4),
            "maintenance": round(self.maintenance, 4),
            "wear_parts": round(self.wear_parts, 4),
            "hourly_rate": round(self.hourly_rate, 2),
        }


@dataclass
class BurdenBreakdown:
    """Informational split of an employee's burden over base wage."""
    base_wage: float = 0.0
    burden_multiplier: float = 1.0
    tax_burden: float = 0.0
    benefits_burden: float = 0.0
    overhead_burden: float = 0.0
    total_burden: float = 0.0
    true_hourly_cost: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "base_wage": round(self.base_wage, 2),
            "burden_multiplier": self.burden_multiplier,
            "tax_burden": round(self.tax_burden, 2),
            "benefits_burden": round(self.benefits_burden, 2),
            "overhead_burden": round(self.overhead_burden, 2),
            "total_burden": round(self.total_burden, 2),
            "true_hourly_cost": round(self.true_hourly_cost, 2),
        }
