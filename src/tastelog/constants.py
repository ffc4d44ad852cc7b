"""
Tastelog Constants and Enums

Centralized constants, enums, and magic values for the recommendation engine
and the record store.
"""

from enum import Enum


# =======================
# RECORD ENUMS
# =======================

class RecordType(str, Enum):
    """Record categories handled by the engine."""
    WINE = "wine"
    SAKE = "sake"


class SakeType(str, Enum):
    """Sake classifications accepted for the `type` attribute."""
    JUNMAI = "純米酒"
    HONJOZO = "本醸造酒"
    GINJO = "吟醸酒"
    JUNMAI_GINJO = "純米吟醸酒"
    DAIGINJO = "大吟醸酒"
    JUNMAI_DAIGINJO = "純米大吟醸酒"
    TOKUBETSU_JUNMAI = "特別純米酒"
    TOKUBETSU_HONJOZO = "特別本醸造酒"
    OTHER = "その他"

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


class RecommendationStrategy(str, Enum):
    """How a recommendation was produced."""
    SIMILAR = "similar"
    PREFERENCE = "preference"


# =======================
# ALGORITHM CONSTANTS
# =======================

class RecommendationConfig:
    """
    Recommendation engine thresholds.

    Below MIN_RECORDS_FOR_RECOMMENDATIONS records there is not enough signal,
    so the engine returns nothing.
    """

    MIN_RECORDS_FOR_RECOMMENDATIONS = 3
    MAX_RECOMMENDATIONS = 5

    # Ratings are 1-5; 4 and above count as "liked"
    HIGH_RATING_THRESHOLD = 4

    # Pairwise similarity must exceed this to count as "similar"
    SIMILARITY_THRESHOLD = 0.3

    # Selection limits, applied in list order
    MAX_SEEDS_PER_CATEGORY = 3
    MAX_MATCHES_PER_SEED = 2
    MAX_PREFERENCE_PICKS = 2

    # Score scaling into the shared ranking value
    SIMILAR_SCORE_DIVISOR = 10.0
    PREFERENCE_SCORE_DIVISOR = 5.0

    # Vintage similarity decays to zero at this many years apart
    VINTAGE_DECAY_YEARS = 10.0

    @classmethod
    def as_dict(cls) -> dict:
        return {
            "min_records_for_recommendations": cls.MIN_RECORDS_FOR_RECOMMENDATIONS,
            "max_recommendations": cls.MAX_RECOMMENDATIONS,
            "high_rating_threshold": cls.HIGH_RATING_THRESHOLD,
            "similarity_threshold": cls.SIMILARITY_THRESHOLD,
        }


class SimilarityWeights:
    """Per-category dimension weights. Each category sums to 1.0."""

    WINE = {
        "region": 0.4,
        "grape": 0.4,
        "vintage": 0.2,
    }

    SAKE = {
        "brewery": 0.3,
        "type": 0.4,
        "region": 0.3,
    }


# =======================
# TEXT CONSTANTS
# =======================

class ReasonText:
    """Fragments used by the reason formatter."""

    SEPARATOR = ", "
    CLOSING = " - recommended based on your preferences"
    NEW_DISCOVERY = "Recommended as a new discovery"

    SIMILAR_SUFFIX = " (similar recommendation)"
    PREFERENCE_SUFFIX = " (preference recommendation)"


# =======================
# VALIDATION LIMITS
# =======================

class ValidationLimits:
    """Input limits enforced by the record store."""

    MIN_RATING = 1
    MAX_RATING = 5

    MIN_VINTAGE = 1800

    MAX_NAME_LENGTH = 100
    MAX_ATTRIBUTE_LENGTH = 100
    MAX_SAKE_TYPE_LENGTH = 50
    MAX_NOTES_LENGTH = 500


# =======================
# COLUMN NAME CONSTANTS
# =======================

class ColumnNames:
    """CSV column names for the file-backed store."""

    ID = "id"
    NAME = "name"
    RATING = "rating"
    NOTES = "notes"
    PHOTO_URI = "photo_uri"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"

    REGION = "region"
    GRAPE = "grape"
    VINTAGE = "vintage"

    BREWERY = "brewery"
    TYPE = "type"

    @classmethod
    def wine_columns(cls) -> list:
        return [cls.ID, cls.NAME, cls.REGION, cls.GRAPE, cls.VINTAGE, cls.RATING,
                cls.NOTES, cls.PHOTO_URI, cls.CREATED_AT, cls.UPDATED_AT]

    @classmethod
    def sake_columns(cls) -> list:
        return [cls.ID, cls.NAME, cls.BREWERY, cls.TYPE, cls.REGION, cls.RATING,
                cls.NOTES, cls.PHOTO_URI, cls.CREATED_AT, cls.UPDATED_AT]


class FilePaths:
    """Standard file names used by the CSV store."""

    DATA_DIR = "data"
    WINES_CSV = "wines.csv"
    SAKES_CSV = "sakes.csv"
