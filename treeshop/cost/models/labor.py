"""
cost/models/labor.py - Labor burden model.
"""

from __future__ import annotations

from ..schema import Employee, BurdenBreakdown


# Fractions of base wage
PAYROLL_TAX_FACTOR = 0.30
BENEFITS_FACTOR = 0.25


class LaborCostModel:
    """Employee burdened cost estimation."""

    def true_hourly_cost(self, employee: Employee) -> float:
        return employee.base_hourly_rate * employee.burden_multiplier

    def burden_breakdown(self, employee: Employee) -> BurdenBreakdown:
        """
        Split an employee's burden into tax, benefits and overhead.

        Overhead is whatever remains of (multiplier - 1) after tax and
        benefits, so the three parts always sum to base * (multiplier - 1).
        It goes negative for multipliers below 1.55.
        """
        base = employee.base_hourly_rate
        multiplier = employee.burden_multiplier

        tax = base * PAYROLL_TAX_FACTOR
        benefits = base * BENEFITS_FACTOR
        overhead = base * (multiplier - 1 - PAYROLL_TAX_FACTOR - BENEFITS_FACTOR)

        return BurdenBreakdown(
            base_wage=base,
            burden_multiplier=multiplier,
            tax_burden=tax,
            benefits_burden=benefits,
            overhead_burden=overhead,
            total_burden=base * (multiplier - 1),
            true_hourly_cost=self.true_hourly_cost(employee),
        )
