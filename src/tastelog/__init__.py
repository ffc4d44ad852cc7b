"""Tastelog - a wine and sake tasting log with explainable recommendations."""

from tastelog.recommender import RecommendationEngine
from tastelog.schema import Recommendation, Sake, UserPreferences, Wine
from tastelog.store import CsvRecordStore, InMemoryRecordStore, RetryingRecordStore

__version__ = "0.1.0"

__all__ = [
    'RecommendationEngine',
    'Recommendation',
    'Wine',
    'Sake',
    'UserPreferences',
    'InMemoryRecordStore',
    'CsvRecordStore',
    'RetryingRecordStore',
    '__version__',
]
