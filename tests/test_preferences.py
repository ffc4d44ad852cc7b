"""
Tests for the preference profile builder.
"""

import pytest

from tastelog.preferences import build_user_preferences


class TestWinePreferences:
    """Test wine profile accumulation."""

    def test_region_weights_sum_ratings(self, make_wine):
        """Three French wines rated 5, 4, 4 give France a weight of 13."""
        wines = [
            make_wine(rating=5, region="France", grape="Cabernet Sauvignon"),
            make_wine(rating=4, region="France", grape="Cabernet Sauvignon"),
            make_wine(rating=4, region="France", grape="Merlot"),
        ]
        prefs = build_user_preferences(wines, [])

        assert prefs.wine.preferred_regions == {"France": 13}
        assert prefs.wine.preferred_grapes == {"Cabernet Sauvignon": 9, "Merlot": 4}

    def test_low_rated_wines_do_not_contribute(self, make_wine):
        """Wines rated below 4 add nothing to the weight maps."""
        wines = [
            make_wine(rating=5, region="France"),
            make_wine(rating=3, region="Italy"),
            make_wine(rating=1, region="France"),
        ]
        prefs = build_user_preferences(wines, [])

        assert prefs.wine.preferred_regions == {"France": 5}
        assert "Italy" not in prefs.wine.preferred_regions

    def test_average_covers_all_wines(self, make_wine):
        """The average includes low-rated wines, not only liked ones."""
        wines = [make_wine(rating=5), make_wine(rating=2), make_wine(rating=2)]
        prefs = build_user_preferences(wines, [])
        assert prefs.wine.average_rating == pytest.approx(3.0)

    def test_vintage_range_spans_high_rated(self, make_wine):
        """The range covers liked wines with a vintage and ignores disliked ones."""
        wines = [
            make_wine(rating=4, vintage=2018),
            make_wine(rating=5, vintage=2012),
            make_wine(rating=5),
            make_wine(rating=2, vintage=1990),
        ]
        prefs = build_user_preferences(wines, [])

        assert prefs.wine.preferred_vintage_range.min == 2012
        assert prefs.wine.preferred_vintage_range.max == 2018

    def test_vintage_range_absent_without_vintages(self, make_wine):
        """No liked wine with a vintage means no range."""
        wines = [make_wine(rating=5, region="France"), make_wine(rating=1, vintage=2000)]
        prefs = build_user_preferences(wines, [])
        assert prefs.wine.preferred_vintage_range is None

    def test_keys_are_case_sensitive(self, make_wine):
        """Values differing only in case are separate keys."""
        wines = [make_wine(rating=4, region="France"), make_wine(rating=4, region="france")]
        prefs = build_user_preferences(wines, [])
        assert prefs.wine.preferred_regions == {"France": 4, "france": 4}

    def test_empty_values_are_skipped(self, make_wine):
        """Blank and missing attributes never become keys."""
        wines = [make_wine(rating=5, region=""), make_wine(rating=5, region=None)]
        prefs = build_user_preferences(wines, [])
        assert prefs.wine.preferred_regions == {}


class TestSakePreferences:
    """Test sake profile accumulation."""

    def test_types_and_regions(self, make_sake):
        """Every sake dimension accumulates ratings of liked sakes."""
        sakes = [
            make_sake(rating=5, type="純米酒", region="新潟県", brewery="朝日酒造"),
            make_sake(rating=4, type="純米酒", region="新潟県"),
            make_sake(rating=4, type="純米酒", region="山形県"),
        ]
        prefs = build_user_preferences([], sakes)

        assert prefs.sake.preferred_types["純米酒"] > 0
        assert prefs.sake.preferred_types == {"純米酒": 13}
        assert prefs.sake.preferred_regions == {"新潟県": 9, "山形県": 4}
        assert prefs.sake.preferred_breweries == {"朝日酒造": 5}
        assert prefs.sake.average_rating == pytest.approx(13 / 3)


class TestEmptyInput:
    """Empty categories never raise."""

    def test_both_empty(self):
        """No records gives empty maps and zero averages."""
        prefs = build_user_preferences([], [])

        assert prefs.wine.preferred_regions == {}
        assert prefs.wine.preferred_vintage_range is None
        assert prefs.wine.average_rating == 0
        assert prefs.sake.preferred_types == {}
        assert prefs.sake.average_rating == 0

    def test_no_high_rated_records(self, make_wine):
        """Without liked records only the average is set."""
        wines = [make_wine(rating=2, region="France"), make_wine(rating=3, region="Spain")]
        prefs = build_user_preferences(wines, [])

        assert prefs.wine.preferred_regions == {}
        assert prefs.wine.average_rating == pytest.approx(2.5)


class TestDeterminism:
    """Input order changes nothing a consumer reads by key."""

    def test_order_independent_weights(self, make_wine):
        """Reversing the input yields the same profile."""
        wines = [
            make_wine(rating=5, region="France", grape="Merlot", vintage=2010),
            make_wine(rating=4, region="Italy", grape="Sangiovese", vintage=2016),
            make_wine(rating=4, region="France", grape="Syrah"),
        ]
        forward = build_user_preferences(wines, [])
        backward = build_user_preferences(list(reversed(wines)), [])

        assert forward.wine.preferred_regions == backward.wine.preferred_regions
        assert forward.wine.preferred_grapes == backward.wine.preferred_grapes
        assert forward.wine.preferred_vintage_range == backward.wine.preferred_vintage_range
        assert forward.wine.average_rating == backward.wine.average_rating
