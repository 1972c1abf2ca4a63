"""
loadout/schema.py - Crew loadout records.

A loadout references equipment and employees by id only. References are
resolved against the directories at evaluation time.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..errors import ErrorCode, TreeShopError


DEFAULT_MARKUP_MULTIPLIER = 3.0


@dataclass
class LoadoutEquipment:
    """Equipment reference with utilization (0-100 %)."""
    equipment_id: str
    utilization_percent: float = 100.0

    def __post_init__(self):
        if not 0.0 <= self.utilization_percent <= 100.0:
            raise TreeShopError(
                f"utilization_percent must be within 0-100 (got {self.utilization_percent})",
                code=ErrorCode.CFG_INVALID_VALUE,
                details={"equipment_id": self.equipment_id},
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "equipment_id": self.equipment_id,
            "utilization_percent": self.utilization_percent,
        }


@dataclass
class LoadoutEmployee:
    """Employee reference with a role label."""
    employee_id: str
    role: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "employee_id": self.employee_id,
            "role": self.role,
        }


@dataclass
class Loadout:
    """Named bundle of equipment and crew for one job type."""
    loadout_id: str
    name: str
    description: str = ""
    equipment: List[LoadoutEquipment] = field(default_factory=list)
    employees: List[LoadoutEmployee] = field(default_factory=list)
    markup_multiplier: float = DEFAULT_MARKUP_MULTIPLIER
    is_active: bool = True

    def add_equipment(self, equipment_id: str, utilization_percent: float = 100.0) -> None:
        self.equipment.append(LoadoutEquipment(equipment_id, utilization_percent))

    def add_employee(self, employee_id: str, role: str = "") -> None:
        self.employees.append(LoadoutEmployee(employee_id, role))

    def remove_equipment(self, equipment_id: str) -> bool:
        before = len(self.equipment)
        self.equipment = [e for e in self.equipment if e.equipment_id != equipment_id]
        return len(self.equipment) < before

    def remove_employee(self, employee_id: str) -> bool:
        before = len(self.employees)
        self.employees = [e for e in self.employees if e.employee_id != employee_id]
        return len(self.employees) < before

    @property
    def crew_size(self) -> int:
        return len(self.employees)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "loadout_id": self.loadout_id,
            "name": self.name,
            "description": self.description,
            "equipment": [e.to_dict() for e in self.equipment],
            "employees": [e.to_dict() for e in self.employees],
            "markup_multiplier": self.markup_multiplier,
            "is_active": self.is_active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Loadout":
        return cls(
            loadout_id=data["loadout_id"],
            name=data["name"],
            description=data.get("description", ""),
            equipment=[LoadoutEquipment(**e) for e in data.get("equipment", [])],
            employees=[LoadoutEmployee(**e) for e in data.get("employees", [])],
            markup_multiplier=data.get("markup_multiplier", DEFAULT_MARKUP_MULTIPLIER),
            is_active=data.get("is_active", True),
        )
