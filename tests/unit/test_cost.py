"""
Unit tests for the equipment and labor cost models.

Tests EquipmentCostModel, LaborCostModel, and the Equipment/Employee records.
"""

import math

import pytest

from treeshop.cost import (
    BURDEN_MULTIPLIERS,
    EQUIPMENT_DEFAULTS,
    Employee,
    EmployeePosition,
    Equipment,
    EquipmentCategory,
    EquipmentCostModel,
    LaborCostModel,
)
from treeshop.errors import EquipmentConfigurationError, ErrorCode


class TestEquipmentHourlyRate:
    """Tests for the equipment hourly rate breakdown."""

    def test_chipper_components(self, chipper):
        """Test each component for a 50k chipper."""
        breakdown = EquipmentCostModel().hourly_rate(chipper)

        assert breakdown.depreciation == pytest.approx(7.5)
        assert breakdown.interest == pytest.approx(1.0416667, rel=1e-6)
        assert breakdown.insurance == pytest.approx(0.8333333, rel=1e-6)
        assert breakdown.fuel == pytest.approx(10.625)
        assert breakdown.maintenance == pytest.approx(6.75)
        assert breakdown.wear_parts == pytest.approx(1.5)

    def test_chipper_total(self, chipper):
        """Components sum to 28.25."""
        breakdown = EquipmentCostModel().hourly_rate(chipper)
        assert breakdown.hourly_rate == pytest.approx(28.25)

    def test_rate_is_sum_of_components(self, chipper):
        """Hourly rate equals the six components added in order."""
        b = EquipmentCostModel().hourly_rate(chipper)
        assert b.hourly_rate == (
            b.depreciation + b.interest + b.insurance + b.fuel + b.maintenance + b.wear_parts
        )
        assert b.hourly_rate == pytest.approx(b.ownership_cost + b.operating_cost)

    def test_hourly_rate_property(self, chipper):
        assert chipper.hourly_rate == pytest.approx(28.25)

    def test_no_fuel_no_fuel_component(self):
        """Test equipment without fuel burn has zero fuel cost."""
        trailer = Equipment.from_defaults("Trailer", EquipmentCategory.TRAILER)
        breakdown = EquipmentCostModel().hourly_rate(trailer)
        assert breakdown.fuel == 0.0
        assert breakdown.hourly_rate > 0.0

    def test_rate_increases_with_purchase_price(self, chipper):
        """Holding everything else fixed, a dearer machine costs more per hour."""
        model = EquipmentCostModel()
        rates = []
        for price in (20000.0, 40000.0, 60000.0, 80000.0):
            chipper.purchase_price = price
            rates.append(model.hourly_rate(chipper).hourly_rate)
        assert rates == sorted(rates)
        assert len(set(rates)) == len(rates)

    def test_custom_interest_rate(self, chipper):
        breakdown = EquipmentCostModel(interest_rate=0.12).hourly_rate(chipper)
        assert breakdown.interest == pytest.approx(2.0833333, rel=1e-6)

    def test_to_dict_rounds(self, chipper):
        d = EquipmentCostModel().hourly_rate(chipper).to_dict()
        assert d["hourly_rate"] == 28.25
        assert d["interest"] == 1.0417


class TestEquipmentValidation:
    """Tests for Equipment construction checks."""

    @pytest.mark.parametrize("life_hours", [0.0, -100.0, float("nan")])
    def test_non_positive_life_hours(self, life_hours):
        with pytest.raises(EquipmentConfigurationError) as exc:
            Equipment("x", "Bad", EquipmentCategory.CHIPPER, 50000.0, expected_life_hours=life_hours)
        assert exc.value.code == ErrorCode.CFG_NON_POSITIVE_LIFE_HOURS
        assert exc.value.field_name == "expected_life_hours"

    @pytest.mark.parametrize("annual_hours", [0.0, -1.0, float("nan")])
    def test_non_positive_annual_hours(self, annual_hours):
        with pytest.raises(EquipmentConfigurationError) as exc:
            Equipment("x", "Bad", EquipmentCategory.CHIPPER, 50000.0, annual_hours=annual_hours)
        assert exc.value.code == ErrorCode.CFG_NON_POSITIVE_ANNUAL_HOURS

    @pytest.mark.parametrize("field_name", ["expected_life_hours", "annual_hours"])
    def test_edit_to_non_positive_rejected(self, chipper, field_name):
        before = getattr(chipper, field_name)
        with pytest.raises(EquipmentConfigurationError) as exc:
            setattr(chipper, field_name, 0)
        assert exc.value.field_name == field_name
        assert getattr(chipper, field_name) == before
        assert math.isfinite(EquipmentCostModel().hourly_rate(chipper).hourly_rate)

    def test_valid_edit_accepted(self, chipper):
        chipper.annual_hours = 1200.0
        assert chipper.annual_hours == 1200.0

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            Equipment("x", "Bad", EquipmentCategory.CHIPPER, 50000.0, annual_hours=0)

    def test_default_salvage_is_quarter_of_price(self):
        item = Equipment("x", "Saw", EquipmentCategory.CHAINSAW, 1000.0)
        assert item.salvage_value == 250.0

    def test_category_from_string(self):
        item = Equipment("x", "Chipper", "chipper", 50000.0)
        assert item.category is EquipmentCategory.CHIPPER


class TestEquipmentDefaults:
    """Tests for the category defaults table."""

    def test_every_category_has_defaults(self):
        for category in EquipmentCategory:
            assert category in EQUIPMENT_DEFAULTS

    def test_defaults_table_is_read_only(self):
        with pytest.raises(TypeError):
            EQUIPMENT_DEFAULTS[EquipmentCategory.CHIPPER] = None

    def test_from_defaults(self):
        item = Equipment.from_defaults("Bucket #2", EquipmentCategory.BUCKET_TRUCK)
        assert item.purchase_price == 165000
        assert item.salvage_value == pytest.approx(49500.0)
        assert item.expected_life_hours == 10000
        assert item.equipment_id

    def test_from_defaults_overrides(self):
        item = Equipment.from_defaults(
            "Chipper", EquipmentCategory.CHIPPER, equipment_id="c-9", fuel_price_per_gallon=5.0,
        )
        assert item.equipment_id == "c-9"
        assert item.fuel_price_per_gallon == 5.0

    def test_round_trip(self, chipper):
        restored = Equipment.from_dict(chipper.to_dict())
        assert restored == chipper

    def test_from_dict_ignores_unknown_keys(self, chipper):
        data = chipper.to_dict()
        data["legacy_field"] = 1
        assert Equipment.from_dict(data).equipment_id == chipper.equipment_id


class TestLaborCost:
    """Tests for LaborCostModel."""

    def test_default_burden_from_position(self, crew_leader):
        assert crew_leader.burden_multiplier == BURDEN_MULTIPLIERS[EmployeePosition.CREW_LEADER]
        assert crew_leader.true_hourly_cost == pytest.approx(63.0)

    def test_explicit_burden_kept(self):
        emp = Employee("e", "A", "B", EmployeePosition.FOREMAN, 40.0, burden_multiplier=1.5)
        assert LaborCostModel().true_hourly_cost(emp) == pytest.approx(60.0)

    def test_full_name(self, climber):
        assert climber.full_name == "Jake Williams"

    @pytest.mark.parametrize("position", list(EmployeePosition))
    def test_burden_breakdown_reconciles(self, position):
        """Tax + benefits + overhead equals base x (multiplier - 1)."""
        emp = Employee("e", "A", "B", position, 27.5)
        b = LaborCostModel().burden_breakdown(emp)
        assert abs(b.tax_burden + b.benefits_burden + b.overhead_burden - b.total_burden) < 1e-9
        assert abs(b.base_wage + b.total_burden - b.true_hourly_cost) < 1e-9

    def test_burden_components(self, crew_leader):
        b = LaborCostModel().burden_breakdown(crew_leader)
        assert b.tax_burden == pytest.approx(10.5)
        assert b.benefits_burden == pytest.approx(8.75)
        assert b.overhead_burden == pytest.approx(8.75)

    def test_low_multiplier_gives_negative_overhead(self):
        emp = Employee("e", "A", "B", EmployeePosition.GROUND_CREW_ENTRY, 20.0, burden_multiplier=1.4)
        b = LaborCostModel().burden_breakdown(emp)
        assert b.overhead_burden < 0
        assert math.isclose(b.total_burden, 8.0)

    def test_round_trip(self, climber):
        assert Employee.from_dict(climber.to_dict()) == climber
