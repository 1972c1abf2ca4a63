"""
pricing/ - TreeScore / AFISS pricing.

Tree complexity score, the AFISS risk/access factor catalog, the service
rate table, and the pricer that turns a service request into a price.
"""

from .enums import (
    ServiceType,
    PricingMethod,
    UrgencyTier,
    EquipmentClass,
    AFISSCategory,
    ImpactType,
    TreeComplexity,
)

from .tree_score import tree_score, trim_score, stump_score

from .afiss import (
    AFISSFactor,
    AFISSAssessment,
    AFISS_FACTORS,
    AFISS_PRESETS,
    RISK_FLAG_FACTORS,
    get_factor,
    factors_by_category,
    search,
    suggest_factors,
    assessment_for_flags,
)

from .rates import (
    ServiceRate,
    ServiceRateTable,
    EquipmentClassProfile,
    EQUIPMENT_CLASS_PROFILES,
    URGENCY_MULTIPLIERS,
    default_rate_table,
)

from .line_items import LineItem

from .pricer import (
    TreeScorePricer,
    PricingRequest,
    PricingResult,
    PropertyPricingResult,
)


__all__ = [
    # Enums
    "ServiceType",
    "PricingMethod",
    "UrgencyTier",
    "EquipmentClass",
    "AFISSCategory",
    "ImpactType",
    "TreeComplexity",
    # Scores
    "tree_score",
    "trim_score",
    "stump_score",
    # AFISS
    "AFISSFactor",
    "AFISSAssessment",
    "AFISS_FACTORS",
    "AFISS_PRESETS",
    "RISK_FLAG_FACTORS",
    "get_factor",
    "factors_by_category",
    "search",
    "suggest_factors",
    "assessment_for_flags",
    # Rates
    "ServiceRate",
    "ServiceRateTable",
    "EquipmentClassProfile",
    "EQUIPMENT_CLASS_PROFILES",
    "URGENCY_MULTIPLIERS",
    "default_rate_table",
    # Pricing
    "LineItem",
    "TreeScorePricer",
    "PricingRequest",
    "PricingResult",
    "PropertyPricingResult",
]
