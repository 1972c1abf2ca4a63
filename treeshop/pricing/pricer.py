"""
pricing/pricer.py - TreeScore pricing engine.

Converts measurements, AFISS factors and job options into a unit and
total price:

    adjusted score = service score x AFISS multiplier (+ factor points)
    effective PpH  = 50 x (1 + (crew - 1) x 0.3) x equipment efficiency
    base price     = per the service's pricing method, floored at its minimum
    unit price     = base (+15 % cleanup) (+20 % hauling) x urgency multiplier
    total price    = unit price x quantity

The AFISS multiplier only applies to score-based services. Estimated
hours, crew cost and margin come from the crew size and equipment class.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import logging
import math

from ..errors import ErrorCode, PricingError
from .afiss import AFISSAssessment, assessment_for_flags
from .enums import EquipmentClass, PricingMethod, ServiceType, TreeComplexity, UrgencyTier
from .line_items import LineItem
from .rates import (
    BASE_POINTS_PER_HOUR,
    CLEANUP_SURCHARGE,
    CREW_EFFICIENCY_STEP,
    CREW_LABOR_RATE,
    EQUIPMENT_CLASS_PROFILES,
    HAULING_SURCHARGE,
    URGENCY_MULTIPLIERS,
    ServiceRate,
    ServiceRateTable,
    default_rate_table,
)
from .tree_score import stump_score, tree_score, trim_score

logger = logging.getLogger(__name__)


DEFAULT_CREW_SIZE = 2
DEFAULT_ACRES = 1.0
DEFAULT_MULCH_DBH = 6.0     # inches, DBH class the acreage rate is quoted for
CREW_DAY_HOURS = 8.0


# =============================================================================
# REQUEST / RESULT
# =============================================================================

@dataclass
class PricingRequest:
    """Inputs for pricing one service request."""
    service_type: ServiceType
    quantity: float = 1.0

    height: float = 0.0
    dbh: float = 0.0
    canopy_radius: float = 0.0
    trim_percent: float = 100.0

    stump_diameter: float = 0.0
    stump_height: Optional[float] = None
    grind_depth: Optional[float] = None

    acres: Optional[float] = None
    max_dbh: Optional[float] = None

    afiss: Optional[AFISSAssessment] = None
    near_structure: bool = False
    power_lines: bool = False
    slope: bool = False

    includes_cleanup: bool = False
    includes_hauling: bool = False
    urgency: UrgencyTier = UrgencyTier.NORMAL
    equipment_class: Optional[EquipmentClass] = None
    crew_size: int = DEFAULT_CREW_SIZE

    @classmethod
    def from_line_item(cls, item: LineItem, **options: Any) -> "PricingRequest":
        afiss = AFISSAssessment.from_names(item.afiss_factors) if item.afiss_factors else None
        return cls(
            service_type=item.service_type,
            quantity=item.quantity,
            height=item.height,
            dbh=item.dbh,
            canopy_radius=item.canopy_radius,
            trim_percent=item.trim_percent,
            stump_diameter=item.stump_diameter,
            stump_height=item.stump_height,
            grind_depth=item.grind_depth,
            acres=item.acres,
            max_dbh=item.max_dbh,
            afiss=afiss,
            near_structure=item.near_structure,
            power_lines=item.power_lines,
            slope=item.slope,
            **options,
        )


@dataclass
class PricingResult:
    """Priced service request. Monetary values are unrounded."""
    service_type: ServiceType
    method: PricingMethod
    unit: str
    quantity: float

    base_score: float = 0.0
    adjusted_score: float = 0.0
    af_score: int = 0
    afiss_multiplier: float = 1.0
    afiss_factors: List[str] = field(default_factory=list)

    base_price: float = 0.0
    minimum_applied: bool = False
    cleanup_amount: float = 0.0
    hauling_amount: float = 0.0
    urgency_multiplier: float = 1.0
    unit_price: float = 0.0
    total_price: float = 0.0

    equipment_class: EquipmentClass = EquipmentClass.MANUAL
    crew_size: int = DEFAULT_CREW_SIZE
    effective_pph: float = 0.0
    estimated_hours: float = 0.0
    labor_cost: float = 0.0
    equipment_cost: float = 0.0

    @property
    def total_cost(self) -> float:
        return self.labor_cost + self.equipment_cost

    @property
    def profit_margin(self) -> float:
        if self.total_price <= 0:
            return 0.0
        return (self.total_price - self.total_cost) / self.total_price

    @property
    def complexity(self) -> TreeComplexity:
        return TreeComplexity.for_score(self.adjusted_score)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "service_type": self.service_type.value,
            "method": self.method.value,
            "unit": self.unit,
            "quantity": self.quantity,
            "base_score": round(self.base_score, 2),
            "adjusted_score": round(self.adjusted_score, 2),
            "af_score": self.af_score,
            "afiss_multiplier": round(self.afiss_multiplier, 4),
            "afiss_factors": list(self.afiss_factors),
            "base_price": round(self.base_price, 2),
            "minimum_applied": self.minimum_applied,
            "cleanup_amount": round(self.cleanup_amount, 2),
            "hauling_amount": round(self.hauling_amount, 2),
            "urgency_multiplier": self.urgency_multiplier,
            "unit_price": round(self.unit_price, 2),
            "total_price": round(self.total_price, 2),
            "equipment_class": self.equipment_class.value,
            "crew_size": self.crew_size,
            "effective_pph": round(self.effective_pph, 2),
            "estimated_hours": round(self.estimated_hours, 2),
            "labor_cost": round(self.labor_cost, 2),
            "equipment_cost": round(self.equipment_cost, 2),
            "profit_margin": round(self.profit_margin, 4),
            "complexity": self.complexity.value,
        }


@dataclass
class PropertyPricingResult:
    """Several requests priced together for one property."""
    results: List[PricingResult] = field(default_factory=list)
    bulk_discount_rate: float = 0.0

    @property
    def tree_count(self) -> int:
        return len(self.results)

    @property
    def total_score(self) -> float:
        return sum(r.adjusted_score for r in self.results)

    @property
    def subtotal(self) -> float:
        return sum(r.total_price for r in self.results)

    @property
    def discount_amount(self) -> float:
        return self.subtotal * self.bulk_discount_rate

    @property
    def total_price(self) -> float:
        return self.subtotal - self.discount_amount

    @property
    def total_hours(self) -> float:
        return sum(r.estimated_hours for r in self.results)

    @property
    def crew_days(self) -> int:
        return math.ceil(self.total_hours / CREW_DAY_HOURS)

    @property
    def recommended_crew_size(self) -> int:
        hours = self.total_hours
        if hours > 40:
            return 3
        if hours > 16:
            return 2
        return 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tree_count": self.tree_count,
            "total_score": round(self.total_score, 2),
            "subtotal": round(self.subtotal, 2),
            "bulk_discount_rate": self.bulk_discount_rate,
            "discount_amount": round(self.discount_amount, 2),
            "total_price": round(self.total_price, 2),
            "total_hours": round(self.total_hours, 2),
            "crew_days": self.crew_days,
            "recommended_crew_size": self.recommended_crew_size,
            "results": [r.to_dict() for r in self.results],
        }


# =============================================================================
# PRICER
# =============================================================================

class TreeScorePricer:
    """
    Service pricing from TreeScore, AFISS and job options.

    Stateless apart from the rate table it is constructed with.
    """

    def __init__(
        self,
        rate_table: Optional[ServiceRateTable] = None,
        labor_rate: float = CREW_LABOR_RATE,
    ):
        self.rate_table = rate_table or default_rate_table()
        self.labor_rate = labor_rate

    def base_score(self, request: PricingRequest) -> float:
        """Unadjusted score for the request's service type."""
        if request.service_type == ServiceType.STUMP_GRINDING:
            return stump_score(request.stump_diameter, request.stump_height, request.grind_depth)
        if request.service_type == ServiceType.TREE_TRIMMING:
            return trim_score(request.height, request.dbh, request.canopy_radius, request.trim_percent)
        return tree_score(request.height, request.dbh, request.canopy_radius)

    def effective_pph(self, crew_size: int, equipment_class: EquipmentClass) -> float:
        """Points per hour for a crew working with an equipment class."""
        crew_multiplier = 1 + (crew_size - 1) * CREW_EFFICIENCY_STEP
        return BASE_POINTS_PER_HOUR * crew_multiplier * EQUIPMENT_CLASS_PROFILES[equipment_class].efficiency

    def price(self, request: PricingRequest) -> PricingResult:
        """Price one service request."""
        if request.crew_size < 1:
            raise PricingError(
                f"crew_size must be at least 1 (got {request.crew_size})",
                code=ErrorCode.CFG_INVALID_VALUE,
            )
        if request.quantity < 0:
            raise PricingError(
                f"quantity must not be negative (got {request.quantity})",
                code=ErrorCode.CFG_INVALID_VALUE,
            )

        rate = self.rate_table.get(request.service_type)
        equipment_class = request.equipment_class or rate.default_equipment

        result = PricingResult(
            service_type=request.service_type,
            method=rate.method,
            unit=rate.unit,
            quantity=request.quantity,
            equipment_class=equipment_class,
            crew_size=request.crew_size,
        )

        self._score(result, request, rate)
        self._production(result, request, rate)
        self._base_price(result, request, rate)
        self._adjustments(result, request)
        self._costs(result)

        logger.debug(
            f"Priced {request.service_type.value}: score={result.adjusted_score:.1f} "
            f"unit={result.unit_price:.2f} total={result.total_price:.2f}"
        )
        return result

    def price_property(
        self,
        requests: List[PricingRequest],
        bulk_discount: float = 0.0,
    ) -> PropertyPricingResult:
        """
        Price every request for a property and apply a bulk discount.

        The discount is a fraction of the combined price (0.1 = 10 %).
        Crew days assume 8-hour days.
        """
        if not 0.0 <= bulk_discount <= 1.0:
            raise PricingError(
                f"bulk_discount must be between 0 and 1 (got {bulk_discount})",
                code=ErrorCode.CFG_INVALID_VALUE,
            )

        result = PropertyPricingResult(
            results=[self.price(request) for request in requests],
            bulk_discount_rate=bulk_discount,
        )
        logger.info(
            f"Priced property: {result.tree_count} requests, {result.total_hours:.1f} h, "
            f"total={result.total_price:.2f}"
        )
        return result

    def price_line_item(self, item: LineItem, **options: Any) -> PricingResult:
        """
        Price a line item in place.

        Options are forwarded to PricingRequest (includes_cleanup,
        includes_hauling, urgency, equipment_class, crew_size).
        """
        result = self.price(PricingRequest.from_line_item(item, **options))
        item.unit_price = result.unit_price
        item.total_price = result.total_price
        item.af_score = result.af_score
        item.estimated_hours = result.estimated_hours
        item.is_priced = True
        return result

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def _score(self, result: PricingResult, request: PricingRequest, rate: ServiceRate) -> None:
        result.base_score = self.base_score(request)
        assessment = assessment_for_flags(
            near_structure=request.near_structure,
            power_lines=request.power_lines,
            slope=request.slope,
            base=request.afiss,
        )
        result.afiss_factors = [f.name for f in assessment.selected]

        if rate.is_score_based:
            result.afiss_multiplier = assessment.total_multiplier
            result.adjusted_score = assessment.adjusted_score(result.base_score)
            result.af_score = assessment.total_af_score(result.base_score)
        else:
            result.adjusted_score = result.base_score
            result.af_score = AFISSAssessment().total_af_score(result.base_score)

    def _production(self, result: PricingResult, request: PricingRequest, rate: ServiceRate) -> None:
        result.effective_pph = self.effective_pph(request.crew_size, result.equipment_class)

        if rate.is_score_based:
            hours_per_unit = result.adjusted_score / result.effective_pph
        elif rate.method == PricingMethod.HOURLY:
            hours_per_unit = 1.0
        else:
            hours_per_unit = 0.0

        result.estimated_hours = hours_per_unit * request.quantity

    def _base_price(self, result: PricingResult, request: PricingRequest, rate: ServiceRate) -> None:
        if rate.method == PricingMethod.PRODUCTION:
            hours_per_unit = result.adjusted_score / result.effective_pph
            billing_rate = EQUIPMENT_CLASS_PROFILES[result.equipment_class].billing_rate
            price = hours_per_unit * billing_rate * rate.service_multiplier
        elif rate.method == PricingMethod.PER_POINT:
            price = result.adjusted_score * rate.point_rate
        elif rate.method == PricingMethod.ACREAGE:
            acres = request.acres if request.acres is not None else DEFAULT_ACRES
            dbh_class = request.max_dbh if request.max_dbh else DEFAULT_MULCH_DBH
            price = rate.base_rate * acres * dbh_class / DEFAULT_MULCH_DBH
        elif rate.method == PricingMethod.HOURLY:
            price = rate.base_rate * rate.service_multiplier
        else:
            price = rate.base_rate

        if price < rate.minimum:
            price = rate.minimum
            result.minimum_applied = True

        result.base_price = price

    def _adjustments(self, result: PricingResult, request: PricingRequest) -> None:
        price = result.base_price

        if request.includes_cleanup:
            result.cleanup_amount = price * CLEANUP_SURCHARGE
            price += result.cleanup_amount

        if request.includes_hauling:
            result.hauling_amount = price * HAULING_SURCHARGE
            price += result.hauling_amount

        result.urgency_multiplier = URGENCY_MULTIPLIERS[UrgencyTier(request.urgency)]
        result.unit_price = price * result.urgency_multiplier
        result.total_price = result.unit_price * request.quantity

    def _costs(self, result: PricingResult) -> None:
        profile = EQUIPMENT_CLASS_PROFILES[result.equipment_class]
        result.labor_cost = result.estimated_hours * result.crew_size * self.labor_rate
        result.equipment_cost = result.estimated_hours * profile.operating_cost
