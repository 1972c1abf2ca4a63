"""
bootstrap/app.py - Application context.

Wires directories over the configured persistence backend and exposes the
aggregator, pricer and assembler built on top of them.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional
import logging
import time
from zoneinfo import ZoneInfo

from ..cost.schema import Employee, Equipment
from ..directory import Directory, InMemoryPersistence, JsonFilePersistence
from ..integrations.persistence import Persistence
from ..loadout import Loadout, LoadoutAggregator, LoadoutCostCache, seed_default_loadouts
from ..pricing import TreeScorePricer, default_rate_table
from ..proposals import Customer, Proposal, ProposalAssembler
from .config import TreeShopConfig, load_config
from .sample_data import sample_employees, sample_equipment

logger = logging.getLogger("bootstrap.app")


def equipment_directory(persistence: Optional[Persistence] = None) -> "Directory[Equipment]":
    return Directory("equipment", Equipment.from_dict, lambda r: r.equipment_id, persistence)


def employee_directory(persistence: Optional[Persistence] = None) -> "Directory[Employee]":
    return Directory("employee", Employee.from_dict, lambda r: r.employee_id, persistence)


def loadout_directory(persistence: Optional[Persistence] = None) -> "Directory[Loadout]":
    return Directory("loadout", Loadout.from_dict, lambda r: r.loadout_id, persistence)


def customer_directory(persistence: Optional[Persistence] = None) -> "Directory[Customer]":
    return Directory("customer", Customer.from_dict, lambda r: r.customer_id, persistence)


def proposal_directory(persistence: Optional[Persistence] = None) -> "Directory[Proposal]":
    return Directory("proposal", Proposal.from_dict, lambda r: r.proposal_id, persistence)


def build_persistence(config: TreeShopConfig) -> Persistence:
    if config.storage.backend == "memory":
        return InMemoryPersistence()
    return JsonFilePersistence(Path(config.storage.data_dir))


@dataclass
class AppContext:
    """Runtime application context."""
    config: TreeShopConfig
    persistence: Persistence

    equipment: "Directory[Equipment]"
    employees: "Directory[Employee]"
    loadouts: "Directory[Loadout]"
    customers: "Directory[Customer]"
    proposals: "Directory[Proposal]"

    aggregator: LoadoutAggregator
    pricer: TreeScorePricer
    assembler: ProposalAssembler
    loadout_cache: Optional[LoadoutCostCache] = None

    start_time: float = field(default_factory=time.time)
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def build(
        cls,
        config: Optional[TreeShopConfig] = None,
        persistence: Optional[Persistence] = None,
    ) -> "AppContext":
        """Build directories and services, load stored records, seed when empty."""
        config = config or load_config()
        persistence = persistence or build_persistence(config)

        equipment = equipment_directory(persistence)
        employees = employee_directory(persistence)
        loadouts = loadout_directory(persistence)
        customers = customer_directory(persistence)
        proposals = proposal_directory(persistence)

        for directory in (equipment, employees, loadouts, customers, proposals):
            directory.load()

        if config.storage.seed_sample_data:
            _seed(config, equipment, employees, loadouts)

        aggregator = LoadoutAggregator(equipment, employees)
        cache = None
        if config.cache.enabled:
            cache = LoadoutCostCache(aggregator, ttl_seconds=config.cache.loadout_ttl_seconds)
            cache.watch_loadouts(loadouts)

        pricer = TreeScorePricer(
            rate_table=default_rate_table().with_overrides(config.pricing.rate_overrides),
            labor_rate=config.pricing.labor_rate,
        )
        assembler = ProposalAssembler(
            proposals,
            pricer,
            validity_days=config.pricing.validity_days,
            apply_bundle_discount=config.pricing.apply_bundle_discount,
            number_timezone=ZoneInfo(config.pricing.number_timezone) if config.pricing.number_timezone else None,
        )

        logger.info(
            f"Application context ready: {len(equipment)} equipment, "
            f"{len(employees)} employees, {len(loadouts)} loadouts, {len(proposals)} proposals"
        )
        return cls(
            config=config,
            persistence=persistence,
            equipment=equipment,
            employees=employees,
            loadouts=loadouts,
            customers=customers,
            proposals=proposals,
            aggregator=aggregator,
            pricer=pricer,
            assembler=assembler,
            loadout_cache=cache,
        )

    def loadout_cost(self, loadout: Loadout):
        """Loadout cost breakdown, through the cache when enabled."""
        if self.loadout_cache is not None:
            return self.loadout_cache.get(loadout)
        return self.aggregator.calculate(loadout)

    def get_uptime(self) -> float:
        return time.time() - self.start_time

    def summary(self) -> Dict[str, Any]:
        return {
            "environment": self.config.environment,
            "version": self.config.version,
            "equipment": len(self.equipment),
            "employees": len(self.employees),
            "loadouts": len(self.loadouts),
            "customers": len(self.customers),
            "proposals": len(self.proposals),
        }


def _seed(
    config: TreeShopConfig,
    equipment: "Directory[Equipment]",
    employees: "Directory[Employee]",
    loadouts: "Directory[Loadout]",
) -> List[str]:
    seeded = []
    if len(equipment) == 0:
        for item in sample_equipment(config.pricing.fuel_price_per_gallon):
            equipment.add(item)
        seeded.append("equipment")
    if len(employees) == 0:
        for person in sample_employees():
            employees.add(person)
        seeded.append("employees")
    if seed_default_loadouts(loadouts, equipment, employees):
        seeded.append("loadouts")

    if seeded:
        logger.info(f"Seeded sample data: {', '.join(seeded)}")
    return seeded
