"""Data model shared by the search pipelines.

Candidates come from the persistence layer (ORM rows, cached JSON dicts) and
are validated into immutable pydantic models at the engine boundary. Results
produced per request are plain dataclasses.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AccommodationType(IntEnum):
    """Property type codes as stored by the booking backend."""
    HOTEL = 0
    HOMESTAY = 1
    VILLA = 2


class Benefit(BaseModel):
    """Amenity attached to an accommodation (pool, parking, breakfast...)."""
    model_config = ConfigDict(frozen=True, from_attributes=True, populate_by_name=True)

    id: int | None = Field(default=None, validation_alias=AliasChoices("id", "Id"))
    name: str = Field(default="", validation_alias=AliasChoices("name", "Name"))


class Candidate(BaseModel):
    """Accommodation record scored against a query. Read-only to the engine."""
    model_config = ConfigDict(frozen=True, from_attributes=True, populate_by_name=True)

    id: int
    name: str = ""
    type: AccommodationType | None = None
    star_category: int | None = Field(
        default=None,
        validation_alias=AliasChoices("star_category", "num"),
        description="Star rating; stored as `num` by the booking backend",
    )
    province: str = ""
    district: str = ""
    ward: str = ""
    benefits: tuple[Benefit, ...] = ()

    # Structured-filter fields
    status: int | None = None
    num_bed: int | None = Field(default=None, validation_alias=AliasChoices("num_bed", "numBed"))
    num_tolet: int | None = Field(default=None, validation_alias=AliasChoices("num_tolet", "numTolet"))
    people: int | None = None


@dataclass(frozen=True)
class QueryHints:
    """Structured signals inferred from a free-text query.

    ``None`` means the signal was not detected.
    """
    normalized_query: str
    type: AccommodationType | None = None
    star_rating: int | None = None


@dataclass
class ScoredResult:
    """Single ranked search hit; only built for positive scores."""
    candidate: Candidate
    score: int
    rank: int = 0


@dataclass
class SignalTrace:
    """Audit trace for one relevance signal."""
    signal: str
    matched: bool
    points: int = 0
    reason: str = ""


@dataclass
class ScoreBreakdown:
    """Per-signal explanation of a candidate's score."""
    candidate_id: int
    traces: list[SignalTrace] = field(default_factory=list)

    @property
    def total(self) -> int:
        return sum(t.points for t in self.traces)
