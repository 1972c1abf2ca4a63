"""
Unit tests for TreeScore and the AFISS factor catalog.
"""

import pytest

from treeshop.errors import ErrorCode, PricingError
from treeshop.pricing import (
    AFISS_FACTORS,
    AFISS_PRESETS,
    AFISSAssessment,
    AFISSCategory,
    AFISSFactor,
    assessment_for_flags,
    factors_by_category,
    get_factor,
    search,
    stump_score,
    suggest_factors,
    tree_score,
    trim_score,
)


class TestTreeScore:
    """Tests for the tree, trim and stump scores."""

    def test_basic_tree(self):
        """50 ft, 12 in DBH, no canopy -> 74 points."""
        assert tree_score(50, 12) == 74

    def test_canopy_counts_as_diameter(self):
        assert tree_score(50, 12, canopy_radius=10) == 94

    def test_ten_foot_canopy(self):
        """40 ft, 12 in DBH, 10 ft canopy diameter -> 40 + 24 + 10."""
        assert tree_score(40, 12, canopy_radius=5) == 74

    @pytest.mark.parametrize("height,dbh", [(0, 12), (50, 0), (-5, 12), (50, -1), (0, 0)])
    def test_unmeasured_tree_scores_zero(self, height, dbh):
        assert tree_score(height, dbh, canopy_radius=10) == 0.0

    def test_trim_score_scales(self):
        assert trim_score(50, 12, 10, trim_percent=25) == pytest.approx(23.5)
        assert trim_score(50, 12, 10) == 94

    def test_stump_defaults(self):
        assert stump_score(24) == 48

    def test_stump_explicit(self):
        assert stump_score(30, height_above_grade=2, grind_depth=1.5) == pytest.approx(105)

    def test_stump_zero_diameter(self):
        assert stump_score(0, 2, 2) == 0.0


class TestAFISSCatalog:
    """Tests for factor lookup."""

    def test_catalog_size(self):
        assert len(AFISS_FACTORS) == 26

    def test_every_category_populated(self):
        for category in AFISSCategory:
            assert factors_by_category(category)

    def test_get_by_name_and_id(self):
        by_name = get_factor("Power Lines")
        assert by_name.percent == 30
        assert get_factor(by_name.factor_id) is by_name
        assert by_name.factor_id == "power_lines"

    def test_unknown_factor(self):
        with pytest.raises(PricingError) as exc:
            get_factor("Lava Flow")
        assert exc.value.code == ErrorCode.PRC_UNKNOWN_FACTOR

    def test_search_term(self):
        names = [f.name for f in search("pool")]
        assert "Pool & Water Features" in names

    def test_search_blank(self):
        assert search("   ") == []

    def test_search_case_insensitive(self):
        assert search("POWER") == search("power")

    def test_suggest_from_description(self):
        suggestions = suggest_factors("Big oak over the house roof, power lines on the street side")
        names = [f.name for f in suggestions]
        assert "House/Building Proximity" in names
        assert "Power Lines" in names

    def test_suggest_limit(self):
        assert len(suggest_factors("house pool deck fence driveway shed lawn garden", limit=3)) == 3

    def test_presets_resolve(self):
        for preset in AFISS_PRESETS:
            assert AFISSAssessment.from_preset(preset).selected

    def test_unknown_preset(self):
        with pytest.raises(PricingError):
            AFISSAssessment.from_preset("Moon Base")


class TestAFISSAssessment:
    """Tests for the AFISS multiplier and adjusted score."""

    def test_custom_factors(self):
        """10 % and 5 % factors on a 100 point tree -> 1.15 and 115."""
        a = AFISSFactor("Alpha", AFISSCategory.ACCESS, 10)
        b = AFISSFactor("Beta", AFISSCategory.PROJECT, 5)
        assessment = AFISSAssessment([a, b])
        assert assessment.total_multiplier == pytest.approx(1.15)
        assert assessment.total_af_score(100) == 115

    def test_empty_assessment(self):
        assessment = AFISSAssessment()
        assert assessment.total_multiplier == 1.0
        assert assessment.total_af_score(74) == 74

    def test_points_added_after_multiplier(self):
        factor = AFISSFactor("Bonus", AFISSCategory.PROJECT, 10, points=5)
        assessment = AFISSAssessment([factor])
        assert assessment.adjusted_score(100) == pytest.approx(115)

    def test_rounds_half_up(self):
        factor = AFISSFactor("Half", AFISSCategory.PROJECT, 50)
        assert AFISSAssessment([factor]).total_af_score(1) == 2

    def test_select_is_idempotent(self):
        assessment = AFISSAssessment()
        factor = get_factor("Fencing")
        assessment.select(factor)
        assessment.select(factor)
        assert assessment.total_percent == 8

    def test_toggle(self):
        assessment = AFISSAssessment()
        factor = get_factor("Fencing")
        assert assessment.toggle(factor) is True
        assert assessment.is_selected(factor)
        assert assessment.toggle(factor) is False
        assert not assessment.is_selected(factor)

    def test_deselect(self):
        assessment = AFISSAssessment.from_names(["Fencing", "Garden Beds"])
        assessment.deselect(get_factor("Fencing"))
        assert [f.name for f in assessment.selected] == ["Garden Beds"]

    def test_factors_for_category(self):
        assessment = AFISSAssessment.from_names(["Fencing", "Power Lines", "Gas Lines"])
        assert len(assessment.factors_for(AFISSCategory.UTILITIES)) == 2

    def test_flags_add_factors(self):
        assessment = assessment_for_flags(near_structure=True, power_lines=True, slope=True)
        assert assessment.total_percent == 15 + 30 + 22

    def test_flags_do_not_double_count(self):
        base = AFISSAssessment.from_names(["Power Lines"])
        assessment = assessment_for_flags(power_lines=True, base=base)
        assert assessment.total_percent == 30

    def test_flags_leave_base_untouched(self):
        base = AFISSAssessment.from_names(["Fencing"])
        assessment_for_flags(slope=True, base=base)
        assert len(base.selected) == 1
