"""
bootstrap/sample_data.py - Starter fleet and crew.

Seeded into empty directories on first run so loadout templates and
quotes have something to work with.
"""

from __future__ import annotations
from typing import List

from ..cost.enums import EquipmentCategory, EmployeePosition
from ..cost.schema import DEFAULT_FUEL_PRICE, Employee, Equipment, new_record_id


def sample_equipment(fuel_price: float = DEFAULT_FUEL_PRICE) -> List[Equipment]:
    C = EquipmentCategory

    def item(name, category, manufacturer, model, year, price, salvage, life, annual, fuel, maint, ins):
        return Equipment(
            equipment_id=new_record_id(),
            name=name,
            category=category,
            manufacturer=manufacturer,
            model=model,
            year=year,
            purchase_price=price,
            salvage_value=salvage,
            expected_life_hours=life,
            annual_hours=annual,
            fuel_burn_gph=fuel,
            fuel_price_per_gallon=fuel_price,
            maintenance_factor=maint,
            insurance_rate=ins,
        )

    fleet = [
        item("Altec Bucket Truck #1", C.BUCKET_TRUCK, "Altec", "LRV-60", 2021,
             165000, 49500, 10000, 2000, 6.5, 60, 3),
        item("Bandit Chipper #1", C.CHIPPER, "Bandit", "150XP", 2022,
             50000, 12500, 5000, 1800, 2.5, 90, 3),
        item("Rayco Stump Grinder", C.STUMP_GRINDER, "Rayco", "RG80", 2020,
             45000, 11250, 5000, 1600, 2.8, 90, 3),
        item("F-350 Dump Truck", C.DUMP_TRUCK, "Ford", "F-350", 2022,
             85000, 29750, 8000, 2000, 4.0, 50, 3),
        item("Service Truck", C.PICKUP_TRUCK, "Chevrolet", "Silverado 2500", 2023,
             65000, 26000, 8000, 2200, 2.5, 50, 2.5),
    ]

    for name, category in (
        ("Equipment Trailer", C.TRAILER),
        ("Stihl MS 661", C.CHAINSAW),
        ("Climbing Kit", C.CLIMBING_GEAR),
        ("Rigging Set", C.RIGGING_EQUIPMENT),
    ):
        fleet.append(Equipment.from_defaults(name, category, fuel_price_per_gallon=fuel_price))

    return fleet


def sample_employees() -> List[Employee]:
    P = EmployeePosition
    crew = [
        ("Mike", "Johnson", P.CREW_LEADER, 35.0),
        ("Tom", "Anderson", P.CERTIFIED_ARBORIST, 40.0),
        ("Jake", "Williams", P.CLIMBER_EXPERIENCED, 28.0),
        ("Carlos", "Rodriguez", P.CLIMBER_EXPERIENCED, 26.0),
        ("David", "Miller", P.GROUND_CREW_EXPERIENCED, 22.0),
        ("Ryan", "Thompson", P.GROUND_CREW_EXPERIENCED, 20.0),
        ("Alex", "Martinez", P.GROUND_CREW_ENTRY, 18.0),
        ("Steve", "Cooper", P.EQUIPMENT_OPERATOR, 32.0),
    ]
    return [
        Employee(
            employee_id=new_record_id(),
            first_name=first,
            last_name=last,
            position=position,
            base_hourly_rate=wage,
        )
        for first, last, position, wage in crew
    ]
