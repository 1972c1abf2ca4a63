"""
loadout/templates.py - Default loadout templates.

Builds the standard job loadouts from whatever equipment and crew are
currently on file. A template slot that cannot be filled is left out.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, List, Optional
import logging

from ..cost.enums import EquipmentCategory, EmployeePosition
from ..cost.schema import new_record_id
from .schema import Loadout

if TYPE_CHECKING:
    from ..cost.schema import Equipment, Employee
    from ..directory import Directory

logger = logging.getLogger(__name__)


def _first_equipment(equipment: "Directory[Equipment]", category: EquipmentCategory) -> Optional["Equipment"]:
    for item in equipment:
        if item.category == category:
            return item
    return None


def _crew(employees: "Directory[Employee]", position: EmployeePosition) -> List["Employee"]:
    return [e for e in employees if e.position == position]


def tree_removal_template(
    equipment: "Directory[Equipment]",
    employees: "Directory[Employee]",
) -> Loadout:
    loadout = Loadout(
        loadout_id=new_record_id(),
        name="Tree Removal - Standard",
        description="Standard tree removal crew with bucket truck and chipper",
    )

    for category, utilization in (
        (EquipmentCategory.BUCKET_TRUCK, 100.0),
        (EquipmentCategory.CHIPPER, 80.0),
        (EquipmentCategory.DUMP_TRUCK, 100.0),
    ):
        item = _first_equipment(equipment, category)
        if item is not None:
            loadout.add_equipment(item.equipment_id, utilization)

    leaders = _crew(employees, EmployeePosition.CREW_LEADER)
    if leaders:
        loadout.add_employee(leaders[0].employee_id, "Crew Leader")

    climbers = _crew(employees, EmployeePosition.CLIMBER_EXPERIENCED)
    if climbers:
        loadout.add_employee(climbers[0].employee_id, "Primary Climber")

    # First and last experienced ground hand
    ground = _crew(employees, EmployeePosition.GROUND_CREW_EXPERIENCED)
    for person in ground[:1] + ground[1:][-1:]:
        loadout.add_employee(person.employee_id, "Ground Support")

    return loadout


def stump_grinding_template(
    equipment: "Directory[Equipment]",
    employees: "Directory[Employee]",
) -> Loadout:
    loadout = Loadout(
        loadout_id=new_record_id(),
        name="Stump Grinding",
        description="Basic stump grinding with operator",
    )

    for category in (EquipmentCategory.STUMP_GRINDER, EquipmentCategory.PICKUP_TRUCK):
        item = _first_equipment(equipment, category)
        if item is not None:
            loadout.add_equipment(item.equipment_id, 100.0)

    operators = _crew(employees, EmployeePosition.EQUIPMENT_OPERATOR)
    if operators:
        loadout.add_employee(operators[0].employee_id, "Equipment Operator")

    helpers = _crew(employees, EmployeePosition.GROUND_CREW_ENTRY)
    if helpers:
        loadout.add_employee(helpers[0].employee_id, "Helper")

    return loadout


def build_default_loadouts(
    equipment: "Directory[Equipment]",
    employees: "Directory[Employee]",
) -> List[Loadout]:
    """Return the default templates that have at least one equipment slot filled."""
    templates = [
        tree_removal_template(equipment, employees),
        stump_grinding_template(equipment, employees),
    ]
    return [t for t in templates if t.equipment]


def seed_default_loadouts(
    loadouts: "Directory[Loadout]",
    equipment: "Directory[Equipment]",
    employees: "Directory[Employee]",
) -> int:
    """Add the default templates to an empty loadout directory."""
    if len(loadouts) > 0:
        return 0

    created = build_default_loadouts(equipment, employees)
    for loadout in created:
        loadouts.add(loadout)

    logger.info(f"Seeded {len(created)} default loadouts")
    return len(created)
