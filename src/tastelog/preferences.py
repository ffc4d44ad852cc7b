"""
Preference profile builder.

Turns a user's rated history into per-category weight maps: every attribute
value seen on a high-rated record accumulates that record's rating. Wines also
get a preferred vintage span. Averages cover the whole category, not only the
liked records.
"""

import logging
from typing import Dict, List, Optional, Sequence

import pandas as pd

from tastelog.constants import ColumnNames, RecommendationConfig
from tastelog.schema import (
    Sake,
    SakePreferences,
    UserPreferences,
    VintageRange,
    Wine,
    WinePreferences,
)
from tastelog.utils import safe_divide

logger = logging.getLogger(__name__)


def records_to_dataframe(records: Sequence, columns: List[str]) -> pd.DataFrame:
    """Flatten records into a DataFrame, keeping input order."""
    rows = [record.model_dump() for record in records]
    return pd.DataFrame(rows, columns=columns)


def high_rated(df: pd.DataFrame) -> pd.DataFrame:
    """Rows rated at or above the high-rating threshold."""
    return df[df[ColumnNames.RATING] >= RecommendationConfig.HIGH_RATING_THRESHOLD]


def accumulate_weights(df: pd.DataFrame, column: str) -> Dict[str, int]:
    """
    Sum ratings per distinct non-empty value of `column`.

    Keys are exact values; no case or whitespace folding.
    """
    values = df[df[column].notna() & (df[column] != "")]
    if values.empty:
        return {}

    totals = values.groupby(column, sort=False)[ColumnNames.RATING].sum()
    return {str(value): int(total) for value, total in totals.items()}


def average_rating(df: pd.DataFrame) -> float:
    """Mean rating over all rows, 0 for an empty category."""
    return float(safe_divide(df[ColumnNames.RATING].sum(), len(df)))


def vintage_range(df: pd.DataFrame) -> Optional[VintageRange]:
    """Span of defined vintages, or None when no row has one."""
    vintages = df[ColumnNames.VINTAGE].dropna()
    if vintages.empty:
        return None
    return VintageRange(min=int(vintages.min()), max=int(vintages.max()))


def build_wine_preferences(wines: Sequence[Wine]) -> WinePreferences:
    """Wine half of the profile."""
    if not wines:
        return WinePreferences()

    df = records_to_dataframe(wines, ColumnNames.wine_columns())
    liked = high_rated(df)

    return WinePreferences(
        preferred_regions=accumulate_weights(liked, ColumnNames.REGION),
        preferred_grapes=accumulate_weights(liked, ColumnNames.GRAPE),
        preferred_vintage_range=vintage_range(liked),
        average_rating=average_rating(df),
    )


def build_sake_preferences(sakes: Sequence[Sake]) -> SakePreferences:
    """Sake half of the profile."""
    if not sakes:
        return SakePreferences()

    df = records_to_dataframe(sakes, ColumnNames.sake_columns())
    liked = high_rated(df)

    return SakePreferences(
        preferred_breweries=accumulate_weights(liked, ColumnNames.BREWERY),
        preferred_types=accumulate_weights(liked, ColumnNames.TYPE),
        preferred_regions=accumulate_weights(liked, ColumnNames.REGION),
        average_rating=average_rating(df),
    )


def build_user_preferences(wines: Sequence[Wine], sakes: Sequence[Sake]) -> UserPreferences:
    """
    Build the full preference profile from both record snapshots.

    Pure function of its inputs; either list may be empty.

    Args:
        wines: Every wine the user has rated
        sakes: Every sake the user has rated

    Returns:
        UserPreferences for both categories
    """
    preferences = UserPreferences(
        wine=build_wine_preferences(wines),
        sake=build_sake_preferences(sakes),
    )
    logger.debug(
        f"Profile built from {len(wines)} wines and {len(sakes)} sakes "
        f"({len(preferences.wine.preferred_regions)} wine regions, "
        f"{len(preferences.sake.preferred_types)} sake types)"
    )
    return preferences
