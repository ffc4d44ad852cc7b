"""
Pairwise similarity between records of the same category.

Weighted partial-attribute matching: a dimension only counts when both records
define it, and the result is normalized by the weights that actually took part,
so missing data never reads as a mismatch.
"""

from typing import Callable, Dict, Iterable, Tuple

from tastelog.constants import RecommendationConfig, SimilarityWeights
from tastelog.schema import RatedItem, Sake, Wine
from tastelog.utils import has_value, safe_divide


def exact_match(a, b) -> float:
    """1.0 for identical values (case-sensitive), else 0.0."""
    return 1.0 if a == b else 0.0


def vintage_match(year_a: int, year_b: int) -> float:
    """Linear decay from 1.0 (same year) to 0.0 at VINTAGE_DECAY_YEARS apart."""
    gap = abs(year_a - year_b)
    return max(0.0, 1.0 - gap / RecommendationConfig.VINTAGE_DECAY_YEARS)


def weighted_similarity(
    a: RatedItem,
    b: RatedItem,
    dimensions: Iterable[Tuple[str, Callable[..., float]]],
    weights: Dict[str, float],
) -> float:
    """Normalized weighted match over the dimensions both records define."""
    score = 0.0
    total_weight = 0.0

    for attribute, matcher in dimensions:
        value_a = getattr(a, attribute)
        value_b = getattr(b, attribute)
        if not (has_value(value_a) and has_value(value_b)):
            continue

        weight = weights[attribute]
        score += matcher(value_a, value_b) * weight
        total_weight += weight

    return safe_divide(score, total_weight)


WINE_DIMENSIONS = (
    ("region", exact_match),
    ("grape", exact_match),
    ("vintage", vintage_match),
)

SAKE_DIMENSIONS = (
    ("brewery", exact_match),
    ("type", exact_match),
    ("region", exact_match),
)


def wine_similarity(wine_a: Wine, wine_b: Wine) -> float:
    """Similarity of two wines in [0, 1] (region 0.4, grape 0.4, vintage 0.2)."""
    return weighted_similarity(wine_a, wine_b, WINE_DIMENSIONS, SimilarityWeights.WINE)


def sake_similarity(sake_a: Sake, sake_b: Sake) -> float:
    """Similarity of two sakes in [0, 1] (brewery 0.3, type 0.4, region 0.3)."""
    return weighted_similarity(sake_a, sake_b, SAKE_DIMENSIONS, SimilarityWeights.SAKE)


def calculate_similarity(a: RatedItem, b: RatedItem) -> float:
    """
    Dispatch to the category-specific calculator.

    Raises:
        ValueError: If the records belong to different categories
    """
    if isinstance(a, Wine) and isinstance(b, Wine):
        return wine_similarity(a, b)
    if isinstance(a, Sake) and isinstance(b, Sake):
        return sake_similarity(a, b)
    raise ValueError(
        f"Cannot compare {type(a).__name__} with {type(b).__name__}"
    )
