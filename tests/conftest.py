"""
TreeShop Test Configuration and Fixtures

Directories over in-memory persistence, a sample chipper and crew, and a
controllable clock for cache and expiry tests.
"""

import pytest
from datetime import datetime, timezone

from treeshop.cost import Equipment, Employee, EquipmentCategory, EmployeePosition
from treeshop.directory import InMemoryPersistence


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def persistence():
    return InMemoryPersistence()


@pytest.fixture
def equipment_dir(persistence):
    from treeshop.bootstrap.app import equipment_directory
    return equipment_directory(persistence)


@pytest.fixture
def employee_dir(persistence):
    from treeshop.bootstrap.app import employee_directory
    return employee_directory(persistence)


@pytest.fixture
def loadout_dir(persistence):
    from treeshop.bootstrap.app import loadout_directory
    return loadout_directory(persistence)


@pytest.fixture
def proposal_dir(persistence):
    from treeshop.bootstrap.app import proposal_directory
    return proposal_directory(persistence)


@pytest.fixture
def chipper():
    """Bandit chipper with round-number cost inputs."""
    return Equipment(
        equipment_id="chipper-1",
        name="Bandit Chipper #1",
        category=EquipmentCategory.CHIPPER,
        purchase_price=50000.0,
        salvage_value=12500.0,
        expected_life_hours=5000.0,
        annual_hours=1800.0,
        fuel_burn_gph=2.5,
        fuel_price_per_gallon=4.25,
        maintenance_factor=90.0,
        insurance_rate=3.0,
    )


@pytest.fixture
def crew_leader():
    return Employee(
        employee_id="emp-leader",
        first_name="Mike",
        last_name="Johnson",
        position=EmployeePosition.CREW_LEADER,
        base_hourly_rate=35.0,
    )


@pytest.fixture
def climber():
    return Employee(
        employee_id="emp-climber",
        first_name="Jake",
        last_name="Williams",
        position=EmployeePosition.CLIMBER_EXPERIENCED,
        base_hourly_rate=28.0,
    )


@pytest.fixture
def memory_config(monkeypatch, tmp_path):
    """Config that keeps records in memory and never touches ./data."""
    from treeshop.bootstrap.config import TreeShopConfig

    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("TREESHOP_STORAGE_BACKEND", "memory")
    return TreeShopConfig.from_env()
