"""
cost/enums.py - Cost model enumerations.

Equipment categories and crew positions used by the cost model and the
defaults tables.
"""

from enum import Enum


class EquipmentCategory(Enum):
    """Machine and gear types carried by a tree-service fleet."""
    BUCKET_TRUCK = "bucket_truck"
    CHIPPER = "chipper"
    STUMP_GRINDER = "stump_grinder"
    DUMP_TRUCK = "dump_truck"
    PICKUP_TRUCK = "pickup_truck"
    TRAILER = "trailer"
    FORESTRY_MULCHER = "forestry_mulcher"
    CRANE = "crane"
    MINI_EXCAVATOR = "mini_excavator"
    CHAINSAW = "chainsaw"
    CLIMBING_GEAR = "climbing_gear"
    RIGGING_EQUIPMENT = "rigging_equipment"
    HAND_TOOLS = "hand_tools"
    SAFETY_GEAR = "safety_gear"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    EquipmentCategory.BUCKET_TRUCK: "Bucket Truck",
    EquipmentCategory.CHIPPER: "Chipper",
    EquipmentCategory.STUMP_GRINDER: "Stump Grinder",
    EquipmentCategory.DUMP_TRUCK: "Dump Truck",
    EquipmentCategory.PICKUP_TRUCK: "Pickup Truck",
    EquipmentCategory.TRAILER: "Trailer",
    EquipmentCategory.FORESTRY_MULCHER: "Forestry Mulcher",
    EquipmentCategory.CRANE: "Crane",
    EquipmentCategory.MINI_EXCAVATOR: "Mini Excavator",
    EquipmentCategory.CHAINSAW: "Chainsaw",
    EquipmentCategory.CLIMBING_GEAR: "Climbing Gear",
    EquipmentCategory.RIGGING_EQUIPMENT: "Rigging Equipment",
    EquipmentCategory.HAND_TOOLS: "Hand Tools",
    EquipmentCategory.SAFETY_GEAR: "Safety Gear",
}


class EmployeePosition(Enum):
    """Crew positions, ordered from entry level to foreman."""
    GROUND_CREW_ENTRY = "ground_crew_entry"
    GROUND_CREW_EXPERIENCED = "ground_crew_experienced"
    CLIMBER_APPRENTICE = "climber_apprentice"
    CLIMBER_EXPERIENCED = "climber_experienced"
    CREW_LEADER = "crew_leader"
    CERTIFIED_ARBORIST = "certified_arborist"
    EQUIPMENT_OPERATOR = "equipment_operator"
    FOREMAN = "foreman"

    @property
    def label(self) -> str:
        return _POSITION_LABELS[self]


_POSITION_LABELS = {
    EmployeePosition.GROUND_CREW_ENTRY: "Ground Crew (Entry)",
    EmployeePosition.GROUND_CREW_EXPERIENCED: "Ground Crew (Experienced)",
    EmployeePosition.CLIMBER_APPRENTICE: "Climber (Apprentice)",
    EmployeePosition.CLIMBER_EXPERIENCED: "Climber (Experienced)",
    EmployeePosition.CREW_LEADER: "Crew Leader",
    EmployeePosition.CERTIFIED_ARBORIST: "Certified Arborist",
    EmployeePosition.EQUIPMENT_OPERATOR: "Equipment Operator",
    EmployeePosition.FOREMAN: "Foreman",
}
