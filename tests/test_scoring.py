"""
Tests for preference scoring.
"""

import pytest

from tastelog.schema import SakePreferences, UserPreferences, VintageRange, WinePreferences
from tastelog.scoring import score_item, score_sake, score_wine


@pytest.fixture
def wine_prefs():
    return WinePreferences(
        preferred_regions={"France": 13},
        preferred_grapes={"Merlot": 9},
        preferred_vintage_range=VintageRange(min=2010, max=2018),
        average_rating=4.0,
    )


@pytest.fixture
def sake_prefs():
    return SakePreferences(
        preferred_breweries={"朝日酒造": 5},
        preferred_types={"純米酒": 13},
        preferred_regions={"新潟県": 9},
        average_rating=4.0,
    )


class TestScoreWine:
    """Test wine scoring against the wine profile."""

    def test_region_and_grape(self, make_wine, wine_prefs):
        """Each matching dimension adds weight times its factor."""
        wine = make_wine(region="France", grape="Merlot")
        assert score_wine(wine, wine_prefs) == pytest.approx(13 * 0.4 + 9 * 0.4)

    def test_vintage_bonus_is_flat(self, make_wine, wine_prefs):
        """Any vintage inside the range adds average_rating * 0.2."""
        edge = make_wine(vintage=2010)
        middle = make_wine(vintage=2014)
        assert score_wine(edge, wine_prefs) == pytest.approx(0.8)
        assert score_wine(middle, wine_prefs) == pytest.approx(0.8)

    def test_vintage_outside_range(self, make_wine, wine_prefs):
        """A vintage past the range earns nothing."""
        assert score_wine(make_wine(vintage=2019), wine_prefs) == 0.0

    def test_no_matches_scores_zero(self, make_wine, wine_prefs):
        """Unknown values score zero."""
        wine = make_wine(region="Chile", grape="Carmenere")
        assert score_wine(wine, wine_prefs) == 0.0

    def test_missing_attributes_score_zero(self, make_wine, wine_prefs):
        """A wine with no attributes scores zero."""
        assert score_wine(make_wine(), wine_prefs) == 0.0

    def test_no_vintage_range(self, make_wine):
        """Without a range the vintage is ignored."""
        prefs = WinePreferences(average_rating=4.5)
        assert score_wine(make_wine(vintage=2015), prefs) == 0.0


class TestScoreSake:
    """Test sake scoring against the sake profile."""

    def test_all_dimensions(self, make_sake, sake_prefs):
        """Brewery, type and region weights add up."""
        sake = make_sake(brewery="朝日酒造", type="純米酒", region="新潟県")
        expected = 5 * 0.3 + 13 * 0.4 + 9 * 0.3
        assert score_sake(sake, sake_prefs) == pytest.approx(expected)

    def test_type_only(self, make_sake, sake_prefs):
        """Type alone contributes its weight times 0.4."""
        assert score_sake(make_sake(type="純米酒"), sake_prefs) == pytest.approx(5.2)

    def test_unknown_values(self, make_sake, sake_prefs):
        """Values absent from the profile score zero."""
        sake = make_sake(brewery="八海醸造", type="吟醸酒", region="山形県")
        assert score_sake(sake, sake_prefs) == 0.0


class TestScoreItem:
    """Test category dispatch."""

    def test_routes_by_category(self, make_wine, make_sake, wine_prefs, sake_prefs):
        """Wines and sakes are scored against their own profile."""
        prefs = UserPreferences(wine=wine_prefs, sake=sake_prefs)
        assert score_item(make_wine(region="France"), prefs) == pytest.approx(5.2)
        assert score_item(make_sake(region="新潟県"), prefs) == pytest.approx(2.7)

    def test_scores_are_non_negative(self, make_wine, wine_prefs):
        """Scores are never negative."""
        prefs = UserPreferences(wine=wine_prefs)
        for wine in [make_wine(), make_wine(region="France"), make_wine(vintage=1900)]:
            assert score_item(wine, prefs) >= 0.0
