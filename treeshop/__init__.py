"""
treeshop - Tree service cost and pricing engine.

Equipment and labor cost models, crew loadouts, TreeScore/AFISS pricing,
and proposal assembly over pluggable record storage.
"""

__version__ = "0.1.0"
