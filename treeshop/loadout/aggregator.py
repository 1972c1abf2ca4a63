"""
loadout/aggregator.py - Loadout cost aggregation.

Combines equipment utilization and crew assignments into an hourly crew
operating cost:

    equipment_cost = sum(equipment.hourly_rate * utilization / 100)
    employee_cost  = sum(employee.true_hourly_cost)
    total_cost     = equipment_cost + employee_cost

References that no longer resolve against the directories contribute
nothing. They are reported in the breakdown (missing ids) so callers that
need strict validation can check resolution counts themselves.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Optional
import logging

from ..cost.models import EquipmentCostModel, LaborCostModel
from .schema import Loadout, DEFAULT_MARKUP_MULTIPLIER

if TYPE_CHECKING:
    from ..cost.schema import Equipment, Employee
    from ..directory import Directory

logger = logging.getLogger(__name__)


# =============================================================================
# BREAKDOWN DATACLASSES
# =============================================================================

@dataclass
class EquipmentCostLine:
    """One resolved equipment reference."""
    equipment_id: str
    name: str
    hourly_rate: float
    utilization_percent: float
    cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "equipment_id": self.equipment_id,
            "name": self.name,
            "hourly_rate": round(self.hourly_rate, 2),
            "utilization_percent": self.utilization_percent,
            "cost": round(self.cost, 2),
        }


@dataclass
class EmployeeCostLine:
    """One resolved crew assignment."""
    employee_id: str
    name: str
    role: str
    true_hourly_cost: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "name": self.name,
            "role": self.role,
            "true_hourly_cost": round(self.true_hourly_cost, 2),
        }


@dataclass
class LoadoutCostBreakdown:
    """Hourly cost of a loadout at evaluation time. Unrounded."""
    loadout_id: str
    loadout_name: str
    equipment_cost: float = 0.0
    employee_cost: float = 0.0
    markup_multiplier: float = DEFAULT_MARKUP_MULTIPLIER

    equipment_lines: List[EquipmentCostLine] = field(default_factory=list)
    employee_lines: List[EmployeeCostLine] = field(default_factory=list)

    missing_equipment_ids: List[str] = field(default_factory=list)
    missing_employee_ids: List[str] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        return self.equipment_cost + self.employee_cost

    @property
    def resolved_equipment(self) -> int:
        return len(self.equipment_lines)

    @property
    def resolved_employees(self) -> int:
        return len(self.employee_lines)

    @property
    def is_complete(self) -> bool:
        """True when every reference resolved."""
        return not self.missing_equipment_ids and not self.missing_employee_ids

    def with_markup(self, multiplier: Optional[float] = None) -> float:
        """Suggested billable hourly rate (total cost x markup)."""
        if multiplier is None:
            multiplier = self.markup_multiplier
        return self.total_cost * multiplier

    @property
    def billable_rate(self) -> float:
        return self.with_markup()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loadout_id": self.loadout_id,
            "loadout_name": self.loadout_name,
            "equipment_cost": round(self.equipment_cost, 2),
            "employee_cost": round(self.employee_cost, 2),
            "total_cost": round(self.total_cost, 2),
            "markup_multiplier": self.markup_multiplier,
            "billable_rate": round(self.billable_rate, 2),
            "resolved_equipment": self.resolved_equipment,
            "resolved_employees": self.resolved_employees,
            "missing_equipment_ids": list(self.missing_equipment_ids),
            "missing_employee_ids": list(self.missing_employee_ids),
            "equipment": [line.to_dict() for line in self.equipment_lines],
            "employees": [line.to_dict() for line in self.employee_lines],
        }


# =============================================================================
# AGGREGATOR
# =============================================================================

class LoadoutAggregator:
    """
    Evaluates loadouts against equipment and employee directories.

    The directories are passed in explicitly and only read.
    """

    def __init__(
        self,
        equipment: "Directory[Equipment]",
        employees: "Directory[Employee]",
        equipment_model: Optional[EquipmentCostModel] = None,
        labor_model: Optional[LaborCostModel] = None,
    ):
        self.equipment = equipment
        self.employees = employees
        self.equipment_model = equipment_model or EquipmentCostModel()
        self.labor_model = labor_model or LaborCostModel()

    def calculate(self, loadout: Loadout) -> LoadoutCostBreakdown:
        """Compute the hourly cost breakdown for one loadout."""
        breakdown = LoadoutCostBreakdown(
            loadout_id=loadout.loadout_id,
            loadout_name=loadout.name,
            markup_multiplier=loadout.markup_multiplier,
        )

        self._add_equipment(breakdown, loadout)
        self._add_employees(breakdown, loadout)

        if not breakdown.is_complete:
            logger.warning(
                f"Loadout '{loadout.name}' has unresolved references: "
                f"equipment={breakdown.missing_equipment_ids} "
                f"employees={breakdown.missing_employee_ids}"
            )

        return breakdown

    def calculate_all(self, loadouts: List[Loadout]) -> List[LoadoutCostBreakdown]:
        return [self.calculate(loadout) for loadout in loadouts]

    def _add_equipment(self, breakdown: LoadoutCostBreakdown, loadout: Loadout) -> None:
        for ref in loadout.equipment:
            item = self.equipment.get(ref.equipment_id)
            if item is None:
                breakdown.missing_equipment_ids.append(ref.equipment_id)
                continue

            rate = self.equipment_model.hourly_rate(item).hourly_rate
            cost = rate * ref.utilization_percent / 100
            breakdown.equipment_cost += cost
            breakdown.equipment_lines.append(EquipmentCostLine(
                equipment_id=item.equipment_id,
                name=item.name,
                hourly_rate=rate,
                utilization_percent=ref.utilization_percent,
                cost=cost,
            ))

    def _add_employees(self, breakdown: LoadoutCostBreakdown, loadout: Loadout) -> None:
        for ref in loadout.employees:
            person = self.employees.get(ref.employee_id)
            if person is None:
                breakdown.missing_employee_ids.append(ref.employee_id)
                continue

            cost = self.labor_model.true_hourly_cost(person)
            breakdown.employee_cost += cost
            breakdown.employee_lines.append(EmployeeCostLine(
                employee_id=person.employee_id,
                name=person.full_name,
                role=ref.role,
                true_hourly_cost=cost,
            ))
