"""Natural-language explanations attached to recommendations."""

import math
from typing import List, Optional

from tastelog.constants import ReasonText, RecommendationConfig, RecordType
from tastelog.schema import RatedItem, UserPreferences
from tastelog.utils import has_value


def _wine_fragments(wine, preferences: UserPreferences) -> List[str]:
    prefs = preferences.wine
    fragments = []

    if has_value(wine.region) and prefs.preferred_regions.get(wine.region):
        fragments.append(f'preferred region "{wine.region}"')
    if has_value(wine.grape) and prefs.preferred_grapes.get(wine.grape):
        fragments.append(f'preferred grape "{wine.grape}"')

    span = prefs.preferred_vintage_range
    if has_value(wine.vintage) and span is not None and span.contains(wine.vintage):
        fragments.append(f"preferred vintage range {span.min}-{span.max}")

    return fragments


def _sake_fragments(sake, preferences: UserPreferences) -> List[str]:
    prefs = preferences.sake
    fragments = []

    if has_value(sake.brewery) and prefs.preferred_breweries.get(sake.brewery):
        fragments.append(f'preferred brewery "{sake.brewery}"')
    if has_value(sake.type) and prefs.preferred_types.get(sake.type):
        fragments.append(f'preferred type "{sake.type}"')
    if has_value(sake.region) and prefs.preferred_regions.get(sake.region):
        fragments.append(f'preferred region "{sake.region}"')

    return fragments


def format_percent(similarity: float) -> str:
    """Whole percent, rounding halves up."""
    return f"{math.floor(similarity * 100 + 0.5)}%"


def build_reason(
    item: RatedItem,
    record_type: RecordType,
    preferences: UserPreferences,
    similarity: Optional[float] = None,
) -> str:
    """
    Explain why an item is recommended.

    Lists every profile dimension the item matches, plus the similarity when
    it clears the similarity threshold. Falls back to a generic phrase, so the
    result is never empty.

    Args:
        item: Recommended record
        record_type: Category of the record
        preferences: Current preference profile
        similarity: Pairwise similarity to the seed, if any

    Returns:
        Reason string
    """
    if record_type == RecordType.WINE:
        fragments = _wine_fragments(item, preferences)
    else:
        fragments = _sake_fragments(item, preferences)

    if similarity is not None and similarity > RecommendationConfig.SIMILARITY_THRESHOLD:
        fragments.append(f"similarity {format_percent(similarity)}")

    if not fragments:
        return ReasonText.NEW_DISCOVERY

    return ReasonText.SEPARATOR.join(fragments) + ReasonText.CLOSING
