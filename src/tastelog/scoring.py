"""
Preference scoring.

Scores a record against one category of the preference profile. The score is
a weighted sum of accumulated historical ratings, so it is non-negative and
unbounded above; it is not a probability.
"""

from typing import Dict, Optional

from tastelog.constants import SimilarityWeights
from tastelog.schema import (
    RatedItem,
    Sake,
    SakePreferences,
    UserPreferences,
    Wine,
    WinePreferences,
)
from tastelog.utils import has_value


def weight_for(value: Optional[str], weights: Dict[str, int]) -> int:
    """Accumulated weight for a defined attribute value, 0 if unknown."""
    if not has_value(value):
        return 0
    return weights.get(value, 0)


def score_wine(wine: Wine, preferences: WinePreferences) -> float:
    """
    Affinity of a wine to the wine profile.

    Region and grape add weight * dimension weight. A vintage inside the
    preferred span adds a flat average_rating * vintage weight.
    """
    weights = SimilarityWeights.WINE
    score = 0.0

    score += weight_for(wine.region, preferences.preferred_regions) * weights["region"]
    score += weight_for(wine.grape, preferences.preferred_grapes) * weights["grape"]

    vintage_range = preferences.preferred_vintage_range
    if has_value(wine.vintage) and vintage_range is not None and vintage_range.contains(wine.vintage):
        score += preferences.average_rating * weights["vintage"]

    return score


def score_sake(sake: Sake, preferences: SakePreferences) -> float:
    """Affinity of a sake to the sake profile."""
    weights = SimilarityWeights.SAKE
    score = 0.0

    score += weight_for(sake.brewery, preferences.preferred_breweries) * weights["brewery"]
    score += weight_for(sake.type, preferences.preferred_types) * weights["type"]
    score += weight_for(sake.region, preferences.preferred_regions) * weights["region"]

    return score


def score_item(item: RatedItem, preferences: UserPreferences) -> float:
    """Score any record against its own category of the profile."""
    if isinstance(item, Wine):
        return score_wine(item, preferences.wine)
    if isinstance(item, Sake):
        return score_sake(item, preferences.sake)
    raise ValueError(f"Unsupported record: {type(item).__name__}")
