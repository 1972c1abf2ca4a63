"""
pricing/tree_score.py - Tree and stump complexity scores.

TreeScore = height + 2 x DBH + canopy diameter (2 x canopy radius).

The score is only defined for measured trees (height > 0 and DBH > 0);
anything else scores 0 so unmeasured line items show no score.
"""

from __future__ import annotations
from typing import Optional


def tree_score(height: float, dbh: float, canopy_radius: float = 0.0) -> float:
    """Tree complexity score in points."""
    if not (height > 0 and dbh > 0):
        return 0.0
    canopy_diameter = 2 * canopy_radius
    return height + dbh * 2 + canopy_diameter


def trim_score(
    height: float,
    dbh: float,
    canopy_radius: float = 0.0,
    trim_percent: float = 100.0,
) -> float:
    """Tree score scaled by the share of the canopy being trimmed."""
    return tree_score(height, dbh, canopy_radius) * trim_percent / 100


def stump_score(
    diameter: float,
    height_above_grade: Optional[float] = None,
    grind_depth: Optional[float] = None,
) -> float:
    """
    Stump score = (height above grade + grind depth) x diameter.

    Height above grade and grind depth default to 1 ft each.
    """
    if not diameter > 0:
        return 0.0
    above = height_above_grade if height_above_grade is not None else 1.0
    depth = grind_depth if grind_depth is not None else 1.0
    return (above + depth) * diameter
