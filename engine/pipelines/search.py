"""Search orchestration: structured filters followed by relevance ranking.

Entry point for callers holding a corpus fetched from storage or cache. The
engine does no I/O and rebuilds its indexes from the corpus it is given, so
results always reflect the records passed in.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from engine.config import Settings, get_settings
from engine.models import Candidate, ScoredResult
from engine.pipelines.filtering import AccommodationFilter, apply_filters
from engine.pipelines.ranking import rank
from fuzzy.index import build_indexes

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    """Result of one search request, ready for pagination."""
    query: str
    total_candidates: int
    ranked: bool
    results: list[ScoredResult] = field(default_factory=list)
    candidates: list[Candidate] = field(default_factory=list)


def search(
    query: str | None,
    corpus: Sequence[Candidate],
    *,
    filters: AccommodationFilter | None = None,
    settings: Settings | None = None,
) -> SearchOutcome:
    """Filter the corpus, then rank it when a query is given.

    Args:
        query: Free-text query; blank skips ranking
        corpus: All candidates for this request
        filters: Structured constraints applied before ranking
        settings: Engine settings (default: cached environment settings)

    Returns:
        SearchOutcome. With a query, ``candidates`` follows ``results``;
        without one, it is the filtered corpus in its original order.
    """
    settings = settings or get_settings()
    query = query or ""

    # Indexes cover the whole corpus so filters cannot narrow what the query resolves to
    indexes = build_indexes(corpus, settings.search.ngram_sizes)
    filtered = apply_filters(corpus, filters, name_index=indexes.name)

    if not query.strip():
        return SearchOutcome(
            query=query,
            total_candidates=len(filtered),
            ranked=False,
            candidates=filtered,
        )

    results = rank(query, filtered, settings=settings, indexes=indexes)
    logger.info(
        f"Search {query!r}: {len(corpus)} in corpus, {len(filtered)} after filters, "
        f"{len(results)} ranked"
    )
    return SearchOutcome(
        query=query,
        total_candidates=len(filtered),
        ranked=True,
        results=results,
        candidates=[r.candidate for r in results],
    )
