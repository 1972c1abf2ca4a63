"""
pricing/rates.py - Service rate table and production constants.

The base-rate table is business configuration. It is a lookup keyed by
ServiceType, built once and replaced (never mutated) when overrides are
applied from configuration.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional
import logging

from ..errors import ErrorCode, PricingError
from .enums import EquipmentClass, PricingMethod, ServiceType, UrgencyTier

logger = logging.getLogger(__name__)


# =============================================================================
# PRODUCTION CONSTANTS
# =============================================================================

BASE_POINTS_PER_HOUR = 50.0        # single climber, manual work
CREW_EFFICIENCY_STEP = 0.30        # per additional crew member
CREW_LABOR_RATE = 35.0             # USD/hr per crew member, cost side

CLEANUP_SURCHARGE = 0.15
HAULING_SURCHARGE = 0.20

URGENCY_MULTIPLIERS: Mapping[UrgencyTier, float] = MappingProxyType({
    UrgencyTier.NORMAL: 1.0,
    UrgencyTier.PRIORITY: 1.25,
    UrgencyTier.EMERGENCY: 1.5,
})


@dataclass(frozen=True)
class EquipmentClassProfile:
    """Billing rate, production efficiency and operating cost of an equipment class."""
    billing_rate: float         # USD/hr charged
    efficiency: float           # points-per-hour multiplier
    operating_cost: float       # USD/hr cost


EQUIPMENT_CLASS_PROFILES: Mapping[EquipmentClass, EquipmentClassProfile] = MappingProxyType({
    EquipmentClass.MANUAL: EquipmentClassProfile(150.0, 1.0, 20.0),
    EquipmentClass.SMALL_CHIPPER: EquipmentClassProfile(250.0, 1.3, 50.0),
    EquipmentClass.LARGE_CHIPPER: EquipmentClassProfile(350.0, 1.5, 80.0),
    EquipmentClass.CRANE: EquipmentClassProfile(500.0, 2.0, 200.0),
    EquipmentClass.BUCKET: EquipmentClassProfile(450.0, 1.8, 150.0),
    EquipmentClass.MULCHER: EquipmentClassProfile(600.0, 2.5, 250.0),
})


# =============================================================================
# SERVICE RATES
# =============================================================================

@dataclass(frozen=True)
class ServiceRate:
    """Pricing configuration for one service type."""
    service_type: ServiceType
    method: PricingMethod
    base_rate: float
    unit: str
    point_rate: float = 0.0
    minimum: float = 0.0
    service_multiplier: float = 1.0
    default_equipment: EquipmentClass = EquipmentClass.SMALL_CHIPPER
    description: str = ""

    @property
    def is_score_based(self) -> bool:
        return self.method in (PricingMethod.PRODUCTION, PricingMethod.PER_POINT)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_type": self.service_type.value,
            "method": self.method.value,
            "base_rate": self.base_rate,
            "unit": self.unit,
            "point_rate": self.point_rate,
            "minimum": self.minimum,
            "service_multiplier": self.service_multiplier,
            "default_equipment": self.default_equipment.value,
            "description": self.description,
        }


_OVERRIDABLE_FIELDS = ("base_rate", "point_rate", "minimum", "service_multiplier", "unit")


class ServiceRateTable:
    """Immutable ServiceType -> ServiceRate lookup."""

    def __init__(self, rates: Mapping[ServiceType, ServiceRate]):
        self._rates: Mapping[ServiceType, ServiceRate] = MappingProxyType(dict(rates))

    def get(self, service_type: ServiceType) -> ServiceRate:
        rate = self._rates.get(service_type)
        if rate is None:
            raise PricingError(
                f"No rate configured for service type: {service_type.value}",
                code=ErrorCode.PRC_UNKNOWN_SERVICE,
                details={"service_type": service_type.value},
            )
        return rate

    def __contains__(self, service_type: object) -> bool:
        return service_type in self._rates

    def __iter__(self) -> Iterator[ServiceRate]:
        return iter(self._rates.values())

    def __len__(self) -> int:
        return len(self._rates)

    def with_overrides(self, overrides: Optional[Dict[str, Dict[str, Any]]]) -> "ServiceRateTable":
        """
        Return a new table with per-service field overrides applied.

        overrides: {"tree_removal": {"minimum": 900.0}, ...}
        """
        if not overrides:
            return self

        rates = dict(self._rates)
        for service_key, fields in overrides.items():
            try:
                service_type = ServiceType(service_key)
            except ValueError as e:
                raise PricingError(
                    f"Unknown service type in rate overrides: {service_key}",
                    details={"service_type": service_key},
                ) from e

            changes = {k: v for k, v in fields.items() if k in _OVERRIDABLE_FIELDS}
            ignored = set(fields) - set(changes)
            if ignored:
                logger.warning(f"Ignoring non-overridable rate fields for {service_key}: {sorted(ignored)}")
            rates[service_type] = replace(self.get(service_type), **changes)

        return ServiceRateTable(rates)

    def to_dict(self) -> Dict[str, Any]:
        return {rate.service_type.value: rate.to_dict() for rate in self._rates.values()}


def default_rate_table() -> ServiceRateTable:
    S = ServiceType
    M = PricingMethod
    E = EquipmentClass
    return ServiceRateTable({
        S.TREE_REMOVAL: ServiceRate(S.TREE_REMOVAL, M.PRODUCTION, 750.0, "per tree",
                                    minimum=850.0, service_multiplier=1.0,
                                    default_equipment=E.LARGE_CHIPPER,
                                    description="Complete tree removal"),
        S.TREE_TRIMMING: ServiceRate(S.TREE_TRIMMING, M.PRODUCTION, 450.0, "per tree",
                                     minimum=500.0, service_multiplier=0.8,
                                     default_equipment=E.SMALL_CHIPPER,
                                     description="Crown reduction, thinning and pruning"),
        S.STUMP_GRINDING: ServiceRate(S.STUMP_GRINDING, M.PER_POINT, 250.0, "per stump",
                                      point_rate=1.75, minimum=150.0,
                                      default_equipment=E.MANUAL,
                                      description="Stump grinding below grade"),
        S.FORESTRY_MULCHING: ServiceRate(S.FORESTRY_MULCHING, M.ACREAGE, 2500.0, "per acre",
                                         default_equipment=E.MULCHER,
                                         description="Forestry mulching by acreage"),
        S.EMERGENCY: ServiceRate(S.EMERGENCY, M.HOURLY, 1200.0, "per hour",
                                 service_multiplier=2.0,
                                 default_equipment=E.LARGE_CHIPPER,
                                 description="Emergency and storm response"),
        S.LAND_CLEARING: ServiceRate(S.LAND_CLEARING, M.FLAT, 3000.0, "per day",
                                     default_equipment=E.MULCHER,
                                     description="Land clearing"),
        S.CRANE_REMOVAL: ServiceRate(S.CRANE_REMOVAL, M.FLAT, 2000.0, "per lift",
                                     default_equipment=E.CRANE,
                                     description="Crane-assisted removal"),
        S.HEALTH_ASSESSMENT: ServiceRate(S.HEALTH_ASSESSMENT, M.FLAT, 150.0, "per assessment",
                                         default_equipment=E.MANUAL,
                                         description="Arborist tree health assessment"),
        S.WOOD_RETENTION: ServiceRate(S.WOOD_RETENTION, M.FLAT, 200.0, "per cord",
                                      default_equipment=E.SMALL_CHIPPER,
                                      description="Firewood cutting and stacking"),
        S.RIGHT_OF_WAY: ServiceRate(S.RIGHT_OF_WAY, M.FLAT, 1500.0, "per 100ft",
                                    default_equipment=E.BUCKET,
                                    description="Right-of-way clearing"),
    })
