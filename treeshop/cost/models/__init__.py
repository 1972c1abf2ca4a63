"""
cost/models/__init__.py - Cost model exports.
"""

from .equipment import EquipmentCostModel
from .labor import LaborCostModel


__all__ = [
    "EquipmentCostModel",
    "LaborCostModel",
]
