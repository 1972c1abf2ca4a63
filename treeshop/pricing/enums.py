"""
pricing/enums.py - Pricing enumerations.
"""

from enum import Enum


class ServiceType(Enum):
    """Billable service types."""
    TREE_REMOVAL = "tree_removal"
    TREE_TRIMMING = "tree_trimming"
    STUMP_GRINDING = "stump_grinding"
    FORESTRY_MULCHING = "forestry_mulching"
    EMERGENCY = "emergency"
    LAND_CLEARING = "land_clearing"
    CRANE_REMOVAL = "crane_removal"
    HEALTH_ASSESSMENT = "health_assessment"
    WOOD_RETENTION = "wood_retention"
    RIGHT_OF_WAY = "right_of_way"


class PricingMethod(Enum):
    """How a service's base price is derived."""
    PRODUCTION = "production"    # adjusted score / points-per-hour x billing rate
    PER_POINT = "per_point"      # adjusted score x per-point rate
    ACREAGE = "acreage"          # base rate x acres x DBH class
    HOURLY = "hourly"            # base rate x surcharge x hours
    FLAT = "flat"                # base rate x quantity


class UrgencyTier(str, Enum):
    """Scheduling urgency."""
    NORMAL = "normal"
    PRIORITY = "priority"
    EMERGENCY = "emergency"


class EquipmentClass(str, Enum):
    """Equipment class driving production rate and billing rate."""
    MANUAL = "manual"
    SMALL_CHIPPER = "small_chipper"
    LARGE_CHIPPER = "large_chipper"
    CRANE = "crane"
    BUCKET = "bucket"
    MULCHER = "mulcher"


class AFISSCategory(Enum):
    """AFISS factor groups."""
    STRUCTURES = "structures"
    LANDSCAPE = "landscape"
    UTILITIES = "utilities"
    ACCESS = "access"
    PROJECT = "project"

    @property
    def full_name(self) -> str:
        return {
            AFISSCategory.STRUCTURES: "Structures & Infrastructure",
            AFISSCategory.LANDSCAPE: "Landscape & Aesthetic Features",
            AFISSCategory.UTILITIES: "Utilities & Services",
            AFISSCategory.ACCESS: "Access & Site Conditions",
            AFISSCategory.PROJECT: "Project-Specific Factors",
        }[self]


class ImpactType(Enum):
    """What an AFISS factor affects."""
    SCORE = "score"
    PRODUCTION = "production"
    BOTH = "both"


class TreeComplexity(str, Enum):
    """Complexity band of an adjusted tree score."""
    LOW = "low"             # below 50 points
    MEDIUM = "medium"       # 50 to 150
    HIGH = "high"           # 150 to 300
    EXTREME = "extreme"     # 300 and above

    @classmethod
    def for_score(cls, score: float) -> "TreeComplexity":
        if score < 50:
            return cls.LOW
        if score < 150:
            return cls.MEDIUM
        if score < 300:
            return cls.HIGH
        return cls.EXTREME
