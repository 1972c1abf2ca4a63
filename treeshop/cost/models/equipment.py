"""
cost/models/equipment.py - Equipment hourly rate model.

Blended ownership and operating cost per machine hour.
"""

from __future__ import annotations

from ..schema import Equipment, HourlyRateBreakdown


# Annual interest on average invested capital
INTEREST_RATE = 0.06

# Wear parts allowance (teeth, blades, belts), fraction of depreciation
WEAR_PARTS_FACTOR = 0.20


class EquipmentCostModel:
    """Equipment ownership and operating cost estimation."""

    def __init__(
        self,
        interest_rate: float = INTEREST_RATE,
        wear_parts_factor: float = WEAR_PARTS_FACTOR,
    ):
        self.interest_rate = interest_rate
        self.wear_parts_factor = wear_parts_factor

    def hourly_rate(self, equipment: Equipment) -> HourlyRateBreakdown:
        """
        Compute the hourly rate breakdown for one equipment record.

        Ownership:
        - depreciation = (P - S) / life_hours
        - interest     = ((P + S) / 2 * rate) / annual_hours
        - insurance    = (P * I/100) / annual_hours

        Operating:
        - fuel         = burn_gph * fuel_price
        - maintenance  = depreciation * M/100
        - wear parts   = depreciation * 0.20

        The hourly rate is the plain sum of the six components.
        """
        breakdown = HourlyRateBreakdown()

        self._add_ownership(breakdown, equipment)
        self._add_operating(breakdown, equipment)

        breakdown.hourly_rate = (
            breakdown.depreciation
            + breakdown.interest
            + breakdown.insurance
            + breakdown.fuel
            + breakdown.maintenance
            + breakdown.wear_parts
        )
        return breakdown

    def _add_ownership(self, breakdown: HourlyRateBreakdown, equipment: Equipment) -> None:
        price = equipment.purchase_price
        salvage = equipment.salvage_value

        breakdown.depreciation = (price - salvage) / equipment.expected_life_hours

        average_investment = (price + salvage) / 2
        breakdown.interest = (average_investment * self.interest_rate) / equipment.annual_hours

        annual_insurance = price * equipment.insurance_rate / 100
        breakdown.insurance = annual_insurance / equipment.annual_hours

    def _add_operating(self, breakdown: HourlyRateBreakdown, equipment: Equipment) -> None:
        breakdown.fuel = equipment.fuel_burn_gph * equipment.fuel_price_per_gallon
        breakdown.maintenance = breakdown.depreciation * equipment.maintenance_factor / 100
        breakdown.wear_parts = breakdown.depreciation * self.wear_parts_factor
