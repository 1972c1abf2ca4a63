"""
pricing/afiss.py - AFISS risk/access factor catalog and assessment.

AFISS (Access, Fall zone, Interference, Severity, Site) is a percentage
uplift on score-based pricing. Each catalog factor carries a percentage
contribution and an optional flat point addition. Any subset of factors
may be selected; there are no exclusion rules.

    total_multiplier = 1 + sum(selected percentages) / 100
    total_af_score   = round(base * total_multiplier + sum(selected points))
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import math
import re

from ..errors import ErrorCode, PricingError
from .enums import AFISSCategory, ImpactType


# =============================================================================
# FACTOR
# =============================================================================

@dataclass(frozen=True)
class AFISSFactor:
    """One catalog factor. Percent is stored as a percentage (15.0 = 15 %)."""
    name: str
    category: AFISSCategory
    percent: float
    description: str = ""
    search_terms: Tuple[str, ...] = ()
    impact: ImpactType = ImpactType.BOTH
    points: float = 0.0

    @property
    def factor_id(self) -> str:
        return re.sub(r"[^a-z0-9]+", "_", self.name.lower()).strip("_")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factor_id": self.factor_id,
            "name": self.name,
            "category": self.category.value,
            "percent": self.percent,
            "points": self.points,
            "description": self.description,
            "impact": self.impact.value,
        }


def _f(name, category, percent, description, terms, impact) -> AFISSFactor:
    return AFISSFactor(name, category, percent, description, tuple(terms), impact)


_S = AFISSCategory.STRUCTURES
_L = AFISSCategory.LANDSCAPE
_U = AFISSCategory.UTILITIES
_A = AFISSCategory.ACCESS
_P = AFISSCategory.PROJECT


AFISS_FACTORS: Tuple[AFISSFactor, ...] = (
    # Structures & Infrastructure
    _f("House/Building Proximity", _S, 15, "Structures within potential drop zone",
       ["house", "building", "home", "structure", "roof"], ImpactType.BOTH),
    _f("Pool & Water Features", _S, 20, "Swimming pools, hot tubs, fountains",
       ["pool", "swimming", "hot tub", "spa", "fountain", "water feature"], ImpactType.SCORE),
    _f("Deck & Patio", _S, 12, "Elevated surfaces and outdoor living areas",
       ["deck", "patio", "porch", "balcony", "terrace"], ImpactType.BOTH),
    _f("Fencing", _S, 8, "Property boundaries and barriers",
       ["fence", "gate", "wall", "barrier", "boundary"], ImpactType.PRODUCTION),
    _f("Driveway & Walkways", _S, 10, "Paved surfaces requiring protection",
       ["driveway", "sidewalk", "walkway", "path", "pavement", "concrete"], ImpactType.PRODUCTION),
    _f("Outbuildings", _S, 12, "Sheds, garages, workshops",
       ["shed", "garage", "workshop", "barn", "outbuilding"], ImpactType.BOTH),

    # Landscape & Aesthetic Features
    _f("Premium Lawn", _L, 8, "Manicured or specialty grass areas",
       ["lawn", "grass", "turf", "yard", "zoysia", "bermuda"], ImpactType.PRODUCTION),
    _f("Garden Beds", _L, 10, "Flower beds, vegetable gardens",
       ["garden", "flowers", "plants", "beds", "landscaping", "vegetables"], ImpactType.PRODUCTION),
    _f("Ornamental Trees/Shrubs", _L, 12, "Specimen plants and shaped shrubs",
       ["shrubs", "bushes", "ornamental", "topiary", "specimen"], ImpactType.PRODUCTION),
    _f("Irrigation System", _L, 8, "Sprinklers and underground irrigation",
       ["sprinkler", "irrigation", "watering", "drip"], ImpactType.PRODUCTION),
    _f("Hardscaping", _L, 15, "Decorative stone, pavers, retaining walls",
       ["hardscape", "pavers", "stone", "brick", "retaining wall"], ImpactType.BOTH),

    # Utilities & Services
    _f("Power Lines", _U, 30, "Overhead electrical lines",
       ["power", "electric", "electrical", "lines", "wires", "voltage"], ImpactType.BOTH),
    _f("Gas Lines", _U, 25, "Natural gas or propane systems",
       ["gas", "propane", "natural gas", "fuel", "tank"], ImpactType.BOTH),
    _f("Cable/Internet", _U, 12, "Communication lines",
       ["cable", "internet", "phone", "fiber", "communication"], ImpactType.PRODUCTION),
    _f("Water/Sewer", _U, 18, "Water mains, sewer lines, septic",
       ["water", "sewer", "septic", "plumbing", "pipes"], ImpactType.BOTH),
    _f("HVAC Equipment", _U, 15, "AC units, heat pumps, generators",
       ["ac", "hvac", "air conditioner", "heat pump", "generator"], ImpactType.PRODUCTION),

    # Access & Site Conditions
    _f("Narrow Access", _A, 18, "Limited entry points or tight spaces",
       ["narrow", "tight", "limited", "small gate", "restricted"], ImpactType.PRODUCTION),
    _f("Steep Slope", _A, 22, "Challenging terrain angles",
       ["steep", "slope", "hill", "incline", "grade"], ImpactType.BOTH),
    _f("Backyard Location", _A, 12, "Interior property position",
       ["backyard", "back yard", "rear", "behind house"], ImpactType.PRODUCTION),
    _f("Poor Ground Conditions", _A, 15, "Wet, muddy, or unstable soil",
       ["mud", "wet", "soft", "saturated", "unstable", "swamp"], ImpactType.PRODUCTION),
    _f("Distance from Road", _A, 14, "Long carry/drag distances",
       ["far", "distance", "remote", "carry", "drag"], ImpactType.PRODUCTION),

    # Project-Specific Factors
    _f("Dead/Diseased Tree", _P, 20, "Compromised tree structure",
       ["dead", "diseased", "dying", "decay", "rotten"], ImpactType.SCORE),
    _f("Emergency/Storm", _P, 35, "Urgent or storm damage work",
       ["emergency", "storm", "urgent", "damage", "fallen"], ImpactType.BOTH),
    _f("Permits Required", _P, 15, "Municipal approvals needed",
       ["permit", "approval", "city", "municipal", "hoa"], ImpactType.PRODUCTION),
    _f("Crane Required", _P, 40, "Specialized equipment needed",
       ["crane", "lift", "bucket", "specialized equipment"], ImpactType.BOTH),
    _f("Historic/Protected", _P, 25, "Heritage or protected status",
       ["historic", "heritage", "protected", "landmark"], ImpactType.BOTH),
)


_BY_NAME: Mapping[str, AFISSFactor] = MappingProxyType({f.name: f for f in AFISS_FACTORS})
_BY_ID: Mapping[str, AFISSFactor] = MappingProxyType({f.factor_id: f for f in AFISS_FACTORS})


AFISS_PRESETS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "Suburban Standard": ("House/Building Proximity", "Premium Lawn", "Driveway & Walkways"),
    "Luxury Estate": ("Pool & Water Features", "Premium Lawn", "Garden Beds",
                      "Hardscaping", "Irrigation System"),
    "Tight Access": ("Narrow Access", "Backyard Location", "Fencing"),
    "Utility Hazard": ("Power Lines", "Cable/Internet", "HVAC Equipment"),
    "Emergency Storm": ("Emergency/Storm", "Dead/Diseased Tree", "House/Building Proximity"),
})


# Line-item risk flags -> catalog factor
RISK_FLAG_FACTORS: Mapping[str, str] = MappingProxyType({
    "near_structure": "House/Building Proximity",
    "power_lines": "Power Lines",
    "slope": "Steep Slope",
})


# =============================================================================
# CATALOG LOOKUP
# =============================================================================

def get_factor(key: str) -> AFISSFactor:
    """Look up a factor by display name or factor id."""
    factor = _BY_NAME.get(key) or _BY_ID.get(key)
    if factor is None:
        raise PricingError(
            f"Unknown AFISS factor: {key}",
            code=ErrorCode.PRC_UNKNOWN_FACTOR,
            details={"factor": key},
        )
    return factor


def factors_by_category(category: AFISSCategory) -> List[AFISSFactor]:
    return [f for f in AFISS_FACTORS if f.category == category]


def search(query: str) -> List[AFISSFactor]:
    """Factors whose name, description or search terms contain the query."""
    q = query.strip().lower()
    if not q:
        return []

    results = []
    for factor in AFISS_FACTORS:
        if q in factor.name.lower() or q in factor.description.lower():
            results.append(factor)
        elif any(q in term for term in factor.search_terms):
            results.append(factor)
    return results


def suggest_factors(description: str, limit: int = 10) -> List[AFISSFactor]:
    """
    Suggest factors from a free-text site description.

    Scoring: +10 per search term found in the text, +5 per word of the
    factor name found in the text. Highest score first.
    """
    text = description.lower()
    scored = []
    for factor in AFISS_FACTORS:
        score = 0
        for term in factor.search_terms:
            if term in text:
                score += 10
        for word in factor.name.lower().split(" "):
            if word in text:
                score += 5
        if score > 0:
            scored.append((score, factor))

    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [factor for _, factor in scored[:limit]]


# =============================================================================
# ASSESSMENT
# =============================================================================

@dataclass
class AFISSAssessment:
    """A selection of AFISS factors for one job or line item."""
    selected: List[AFISSFactor] = field(default_factory=list)

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "AFISSAssessment":
        assessment = cls()
        for name in names:
            assessment.select(get_factor(name))
        return assessment

    @classmethod
    def from_preset(cls, preset: str) -> "AFISSAssessment":
        if preset not in AFISS_PRESETS:
            raise PricingError(
                f"Unknown AFISS preset: {preset}",
                code=ErrorCode.PRC_UNKNOWN_FACTOR,
                details={"preset": preset},
            )
        return cls.from_names(AFISS_PRESETS[preset])

    def is_selected(self, factor: AFISSFactor) -> bool:
        return factor in self.selected

    def select(self, factor: AFISSFactor) -> None:
        if factor not in self.selected:
            self.selected.append(factor)

    def deselect(self, factor: AFISSFactor) -> None:
        if factor in self.selected:
            self.selected.remove(factor)

    def toggle(self, factor: AFISSFactor) -> bool:
        """Flip selection. Returns the new selected state."""
        if factor in self.selected:
            self.selected.remove(factor)
            return False
        self.selected.append(factor)
        return True

    def factors_for(self, category: AFISSCategory) -> List[AFISSFactor]:
        return [f for f in self.selected if f.category == category]

    @property
    def total_percent(self) -> float:
        return sum(f.percent for f in self.selected)

    @property
    def total_points(self) -> float:
        return sum(f.points for f in self.selected)

    @property
    def total_multiplier(self) -> float:
        return 1 + self.total_percent / 100

    def adjusted_score(self, base_score: float) -> float:
        """Unrounded base x multiplier + points, used for pricing."""
        return base_score * self.total_multiplier + self.total_points

    def total_af_score(self, base_score: float) -> int:
        """Adjusted score rounded half-up to a whole point, for display."""
        return int(math.floor(self.adjusted_score(base_score) + 0.5))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "factors": [f.name for f in self.selected],
            "total_percent": self.total_percent,
            "total_points": self.total_points,
            "total_multiplier": round(self.total_multiplier, 4),
        }


def assessment_for_flags(
    near_structure: bool = False,
    power_lines: bool = False,
    slope: bool = False,
    base: Optional[AFISSAssessment] = None,
) -> AFISSAssessment:
    """Copy of base (or a new assessment) with risk-flag factors selected."""
    assessment = AFISSAssessment(list(base.selected) if base else [])
    flags = {"near_structure": near_structure, "power_lines": power_lines, "slope": slope}
    for flag, enabled in flags.items():
        if enabled:
            assessment.select(_BY_NAME[RISK_FLAG_FACTORS[flag]])
    return assessment
