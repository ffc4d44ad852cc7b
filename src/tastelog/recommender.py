"""
RecommendationEngine: explainable, rule-based wine and sake recommendations

Works only on the user's own history (no cross-user data, no external catalog):
1. Build a preference profile from high-rated records
2. Re-surface records similar to the first few high-rated "seeds"
3. Re-surface records whose preference score beats the category average
4. Rank everything on one scale and keep the top few

Selection is done in the store's list order. For a fixed input order the
output is deterministic.
"""

import asyncio
import itertools
import logging
import time
from typing import Callable, List, Optional, Sequence

from tastelog.constants import (
    ReasonText,
    RecommendationConfig,
    RecommendationStrategy,
    RecordType,
)
from tastelog.error_handling import safe_async
from tastelog.preferences import build_user_preferences
from tastelog.reasons import build_reason
from tastelog.schema import RatedItem, Recommendation, Sake, UserPreferences, Wine
from tastelog.scoring import score_item
from tastelog.similarity import calculate_similarity
from tastelog.store import RecordStore

logger = logging.getLogger(__name__)

IdGenerator = Callable[[str], str]

# Shared by every engine in the process so ids never repeat
_id_counter = itertools.count(1)


def default_id_generator(prefix: str) -> str:
    """Prefix + millisecond timestamp + process-wide sequence number."""
    return f"{prefix}_{int(time.time() * 1000)}_{next(_id_counter)}"


def is_high_rated(item: RatedItem) -> bool:
    """True for ratings at or above HIGH_RATING_THRESHOLD (the "liked" set)."""
    return item.rating >= RecommendationConfig.HIGH_RATING_THRESHOLD


class RecommendationEngine:
    """
    Recommendation generator over a record store.

    Instantiate once at the composition root and share it. The only state is
    the id generator.

    Usage:
        engine = RecommendationEngine(InMemoryRecordStore())
        recommendations = await engine.generate_recommendations()
    """

    def __init__(self, store: RecordStore, id_generator: Optional[IdGenerator] = None):
        """
        Initialize the engine

        Args:
            store: Source of the wine and sake snapshots
            id_generator: Maps an id prefix to a unique id (default: timestamp + counter)
        """
        self.store = store
        self.id_generator = id_generator or default_id_generator

    async def _fetch_snapshots(self):
        """Fetch both categories together; either failure aborts."""
        wines, sakes = await asyncio.gather(
            self.store.list_wines(),
            self.store.list_sakes(),
        )
        return list(wines), list(sakes)

    @safe_async(fallback=list, error_message="Recommendation generation failed")
    async def generate_recommendations(self) -> List[Recommendation]:
        """
        Generate ranked recommendations from the current store snapshot.

        Never raises: store or computation failures are logged and produce an
        empty list.

        Returns:
            Up to MAX_RECOMMENDATIONS recommendations, best first
        """
        wines, sakes = await self._fetch_snapshots()
        return self.recommend(wines, sakes)

    def recommend(self, wines: Sequence[Wine], sakes: Sequence[Sake]) -> List[Recommendation]:
        """
        Rank recommendations for explicit snapshots.

        Args:
            wines: Wine snapshot in store order
            sakes: Sake snapshot in store order

        Returns:
            Up to MAX_RECOMMENDATIONS recommendations, best first
        """
        total_records = len(wines) + len(sakes)
        if total_records < RecommendationConfig.MIN_RECORDS_FOR_RECOMMENDATIONS:
            logger.info(
                f"Not enough records for recommendations ({total_records} < "
                f"{RecommendationConfig.MIN_RECORDS_FOR_RECOMMENDATIONS})"
            )
            return []

        preferences = build_user_preferences(wines, sakes)
        candidates: List[Recommendation] = []

        if wines:
            candidates.extend(self._category_recommendations(wines, RecordType.WINE, preferences))
        if sakes:
            candidates.extend(self._category_recommendations(sakes, RecordType.SAKE, preferences))

        # sorted() is stable, so ties keep generation order
        ranked = sorted(candidates, key=lambda rec: rec.similarity, reverse=True)
        result = ranked[:RecommendationConfig.MAX_RECOMMENDATIONS]

        logger.info(f"Generated {len(result)} recommendations from {len(candidates)} candidates")
        return result

    def _category_recommendations(
        self,
        items: Sequence[RatedItem],
        record_type: RecordType,
        preferences: UserPreferences,
    ) -> List[Recommendation]:
        high_rated = [item for item in items if is_high_rated(item)]

        recommendations = self._similar_recommendations(items, high_rated, record_type, preferences)
        recommendations.extend(
            self._preference_recommendations(items, high_rated, record_type, preferences)
        )
        return recommendations

    def _similar_recommendations(
        self,
        items: Sequence[RatedItem],
        high_rated: Sequence[RatedItem],
        record_type: RecordType,
        preferences: UserPreferences,
    ) -> List[Recommendation]:
        """Records similar to the first high-rated seeds, kept only if they score > 0."""
        recommendations = []
        seeds = high_rated[:RecommendationConfig.MAX_SEEDS_PER_CATEGORY]

        for seed in seeds:
            matches = []
            for item in items:
                if item.id == seed.id:
                    continue
                similarity = calculate_similarity(seed, item)
                if similarity > RecommendationConfig.SIMILARITY_THRESHOLD:
                    matches.append((item, similarity))

            for item, similarity in matches[:RecommendationConfig.MAX_MATCHES_PER_SEED]:
                score = score_item(item, preferences)
                if score <= 0:
                    continue

                recommendations.append(Recommendation(
                    id=self.id_generator(f"{record_type.value}_rec_{item.id}"),
                    type=record_type,
                    name=f"{item.name}{ReasonText.SIMILAR_SUFFIX}",
                    reason=build_reason(item, record_type, preferences, similarity),
                    similarity=similarity + score / RecommendationConfig.SIMILAR_SCORE_DIVISOR,
                    suggested_item=item,
                    strategy=RecommendationStrategy.SIMILAR,
                    seed_id=seed.id,
                ))

        return recommendations

    def _preference_recommendations(
        self,
        items: Sequence[RatedItem],
        high_rated: Sequence[RatedItem],
        record_type: RecordType,
        preferences: UserPreferences,
    ) -> List[Recommendation]:
        """Records outside the high-rated set whose score beats the category average."""
        if record_type == RecordType.WINE:
            average = preferences.wine.average_rating
        else:
            average = preferences.sake.average_rating

        high_rated_ids = {item.id for item in high_rated}
        picks = []
        for item in items:
            if item.id in high_rated_ids:
                continue
            score = score_item(item, preferences)
            if score > average:
                picks.append((item, score))

        return [
            Recommendation(
                id=self.id_generator(f"{record_type.value}_pref_{item.id}"),
                type=record_type,
                name=f"{item.name}{ReasonText.PREFERENCE_SUFFIX}",
                reason=build_reason(item, record_type, preferences),
                similarity=score / RecommendationConfig.PREFERENCE_SCORE_DIVISOR,
                suggested_item=item,
                strategy=RecommendationStrategy.PREFERENCE,
            )
            for item, score in picks[:RecommendationConfig.MAX_PREFERENCE_PICKS]
        ]

    async def get_user_preferences(self) -> UserPreferences:
        """
        Current preference profile, for inspection and debugging.

        Unlike generate_recommendations, store errors propagate.
        """
        wines, sakes = await self._fetch_snapshots()
        return build_user_preferences(wines, sakes)

    def get_recommendation_config(self) -> dict:
        """Engine thresholds as a plain dict."""
        return RecommendationConfig.as_dict()
