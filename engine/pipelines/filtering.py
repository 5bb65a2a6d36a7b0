"""Structured filters applied to the corpus before relevance ranking.

Mirrors the listing endpoint's query-string filters: exact matches on numeric
attributes, case-insensitive containment on province/district, fuzzy name
lookup and any-of benefit ids.
"""
from __future__ import annotations

import logging
from typing import Sequence

from pydantic import BaseModel, ConfigDict, Field

from engine.models import AccommodationType, Candidate
from engine.pipelines.normalization import normalize_text
from fuzzy.index import DEFAULT_NGRAM_SIZES, MatchIndex, build_index

logger = logging.getLogger(__name__)


class AccommodationFilter(BaseModel):
    """Optional structured constraints; unset fields do not filter."""
    model_config = ConfigDict(extra="forbid")

    type: AccommodationType | None = None
    status: int | None = None
    province: str | None = Field(default=None, description="Case-insensitive substring")
    district: str | None = Field(default=None, description="Case-insensitive substring")
    name: str | None = Field(default=None, description="Fuzzy-matched against corpus names")
    num_bed: int | None = Field(default=None, ge=0)
    num_tolet: int | None = Field(default=None, ge=0)
    people: int | None = Field(default=None, ge=0)
    star_category: int | None = Field(default=None, ge=0)
    benefit_ids: list[int] = Field(default_factory=list)

    def is_empty(self) -> bool:
        return all(
            value is None or value == "" or value == []
            for value in self.model_dump().values()
        )


def _matches(candidate: Candidate, filters: AccommodationFilter, wanted_name: str | None) -> bool:
    if filters.type is not None and candidate.type != filters.type:
        return False
    if filters.status is not None and candidate.status != filters.status:
        return False
    if filters.province and filters.province.lower() not in candidate.province.lower():
        return False
    if filters.district and filters.district.lower() not in candidate.district.lower():
        return False
    if wanted_name is not None:
        if not wanted_name or normalize_text(candidate.name) != wanted_name:
            return False
    if filters.num_bed is not None and candidate.num_bed != filters.num_bed:
        return False
    if filters.num_tolet is not None and candidate.num_tolet != filters.num_tolet:
        return False
    if filters.people is not None and candidate.people != filters.people:
        return False
    if filters.star_category is not None and candidate.star_category != filters.star_category:
        return False
    if filters.benefit_ids:
        wanted = set(filters.benefit_ids)
        if not any(b.id in wanted for b in candidate.benefits):
            return False
    return True


def apply_filters(
    candidates: Sequence[Candidate],
    filters: AccommodationFilter | None,
    *,
    name_index: MatchIndex | None = None,
    ngram_sizes: Sequence[int] = DEFAULT_NGRAM_SIZES,
) -> list[Candidate]:
    """Return the candidates passing every set filter, in corpus order.

    Args:
        candidates: Corpus to filter
        filters: Constraints; None keeps everything
        name_index: Index over corpus names for the fuzzy name filter;
            built from ``candidates`` if needed and not given
        ngram_sizes: Substring lengths for a name index built here

    Returns:
        Filtered list of candidates
    """
    if filters is None or filters.is_empty():
        return list(candidates)

    wanted_name = None
    if filters.name and filters.name.strip():
        if name_index is None:
            name_index = build_index((c.name for c in candidates), ngram_sizes)
        # "" when nothing resembles the name; that keeps no candidate
        wanted_name = name_index.closest(normalize_text(filters.name))

    kept = [c for c in candidates if _matches(c, filters, wanted_name)]
    logger.debug(f"Filters kept {len(kept)}/{len(candidates)} candidates")
    return kept
