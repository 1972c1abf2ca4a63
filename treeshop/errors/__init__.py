"""
errors/ - Error Taxonomy

Structured exception hierarchy shared by every treeshop component.
"""

from .taxonomy import (
    ErrorCategory,
    ErrorCode,
    TreeShopError,
    EquipmentConfigurationError,
    PersistenceError,
    InvalidTransitionError,
    UnknownRecordError,
    DuplicateRecordError,
    PricingError,
)

__all__ = [
    "ErrorCategory",
    "ErrorCode",
    "TreeShopError",
    "EquipmentConfigurationError",
    "PersistenceError",
    "InvalidTransitionError",
    "UnknownRecordError",
    "DuplicateRecordError",
    "PricingError",
]
