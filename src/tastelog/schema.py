"""Pydantic schemas for Tastelog records, preference profiles and recommendations."""

from datetime import date, datetime
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tastelog.constants import (
    RecommendationStrategy,
    RecordType,
    SakeType,
    ValidationLimits,
)
from tastelog.utils import blank_to_none


# =======================
# STORED RECORDS
# =======================

class RatedRecord(BaseModel):
    """Fields shared by every rated record."""

    model_config = ConfigDict(use_enum_values=True)

    id: str = Field(..., description="Opaque unique identifier, assigned at creation")
    rating: int = Field(..., description="Rating (1-5), validated on input")
    notes: Optional[str] = Field(None, description="Free-form tasting notes")
    photo_uri: Optional[str] = Field(None, description="Location of the label photo")
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class Wine(RatedRecord):
    """A rated wine."""

    name: str = Field(..., description="Wine name")
    region: Optional[str] = Field(None, description="Wine region (e.g., Bordeaux)")
    grape: Optional[str] = Field(None, description="Grape variety")
    vintage: Optional[int] = Field(None, description="Vintage year")


class Sake(RatedRecord):
    """A rated sake."""

    name: str = Field(..., description="Sake name")
    brewery: Optional[str] = Field(None, description="Brewery (kura)")
    type: Optional[SakeType] = Field(None, description="Sake classification")
    region: Optional[str] = Field(None, description="Prefecture or region")


RatedItem = Union[Wine, Sake]


# =======================
# RECORD INPUT
# =======================

class _RecordInput(BaseModel):
    """Validation rules shared by create and update payloads."""

    model_config = ConfigDict(use_enum_values=True)

    @field_validator('name', check_fields=False)
    @classmethod
    def name_not_blank(cls, value):
        if value is not None and not value.strip():
            raise ValueError("name is required")
        return value

    @field_validator('region', 'grape', 'brewery', 'type', 'notes', 'photo_uri',
                     mode='before', check_fields=False)
    @classmethod
    def blank_strings_to_none(cls, value):
        return blank_to_none(value)

    @field_validator('vintage', check_fields=False)
    @classmethod
    def vintage_in_range(cls, value):
        if value is None:
            return value
        latest = date.today().year + 1
        if not ValidationLimits.MIN_VINTAGE <= value <= latest:
            raise ValueError(f"vintage must be between {ValidationLimits.MIN_VINTAGE} and {latest}")
        return value


class WineCreate(_RecordInput):
    """Payload for creating a wine record."""

    name: str = Field(..., max_length=ValidationLimits.MAX_NAME_LENGTH)
    region: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    grape: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    vintage: Optional[int] = None
    rating: int = Field(..., ge=ValidationLimits.MIN_RATING, le=ValidationLimits.MAX_RATING)
    notes: Optional[str] = Field(None, max_length=ValidationLimits.MAX_NOTES_LENGTH)
    photo_uri: Optional[str] = None


class WineUpdate(_RecordInput):
    """Partial wine update. Only fields that are set are applied."""

    name: Optional[str] = Field(None, max_length=ValidationLimits.MAX_NAME_LENGTH)
    region: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    grape: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    vintage: Optional[int] = None
    rating: Optional[int] = Field(None, ge=ValidationLimits.MIN_RATING, le=ValidationLimits.MAX_RATING)
    notes: Optional[str] = Field(None, max_length=ValidationLimits.MAX_NOTES_LENGTH)
    photo_uri: Optional[str] = None


class SakeCreate(_RecordInput):
    """Payload for creating a sake record."""

    name: str = Field(..., max_length=ValidationLimits.MAX_NAME_LENGTH)
    brewery: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    type: Optional[SakeType] = None
    region: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    rating: int = Field(..., ge=ValidationLimits.MIN_RATING, le=ValidationLimits.MAX_RATING)
    notes: Optional[str] = Field(None, max_length=ValidationLimits.MAX_NOTES_LENGTH)
    photo_uri: Optional[str] = None


class SakeUpdate(_RecordInput):
    """Partial sake update. Only fields that are set are applied."""

    name: Optional[str] = Field(None, max_length=ValidationLimits.MAX_NAME_LENGTH)
    brewery: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    type: Optional[SakeType] = None
    region: Optional[str] = Field(None, max_length=ValidationLimits.MAX_ATTRIBUTE_LENGTH)
    rating: Optional[int] = Field(None, ge=ValidationLimits.MIN_RATING, le=ValidationLimits.MAX_RATING)
    notes: Optional[str] = Field(None, max_length=ValidationLimits.MAX_NOTES_LENGTH)
    photo_uri: Optional[str] = None


# =======================
# PREFERENCE PROFILE
# =======================

class VintageRange(BaseModel):
    """Inclusive vintage span of high-rated wines."""

    min: int
    max: int

    def contains(self, vintage: int) -> bool:
        return self.min <= vintage <= self.max


class WinePreferences(BaseModel):
    """Accumulated wine preferences. Map values are summed ratings."""

    preferred_regions: Dict[str, int] = Field(default_factory=dict)
    preferred_grapes: Dict[str, int] = Field(default_factory=dict)
    preferred_vintage_range: Optional[VintageRange] = None
    average_rating: float = 0.0


class SakePreferences(BaseModel):
    """Accumulated sake preferences. Map values are summed ratings."""

    preferred_breweries: Dict[str, int] = Field(default_factory=dict)
    preferred_types: Dict[str, int] = Field(default_factory=dict)
    preferred_regions: Dict[str, int] = Field(default_factory=dict)
    average_rating: float = 0.0


class UserPreferences(BaseModel):
    """Preference profile for both categories, rebuilt on every request."""

    wine: WinePreferences = Field(default_factory=WinePreferences)
    sake: SakePreferences = Field(default_factory=SakePreferences)


# =======================
# RECOMMENDATIONS
# =======================

class Recommendation(BaseModel):
    """A ranked, explained suggestion drawn from the user's own records."""

    id: str = Field(..., description="Unique within the process")
    type: RecordType
    name: str = Field(..., description="Item name with a source suffix")
    reason: str = Field(..., min_length=1, description="Human-readable explanation")
    similarity: float = Field(..., description="Ranking value, higher is better")
    suggested_item: RatedItem
    strategy: RecommendationStrategy
    seed_id: Optional[str] = Field(None, description="Seed record for similarity-based picks")


class RecommendationList(BaseModel):
    """Serializable wrapper around a generation result."""

    recommendations: List[Recommendation] = Field(default_factory=list)
