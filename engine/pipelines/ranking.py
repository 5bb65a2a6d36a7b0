"""Ranking pipeline: score a corpus against a query and order by relevance.

Workflow:
1. Interpret the query once (type, star rating)
2. Build the corpus-wide province/district/ward/name indexes
3. Score every candidate on a bounded thread pool
4. Drop zero scores
5. Sort by score descending, ties by candidate id
"""
from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from engine.config import Settings, get_settings
from engine.models import Candidate, QueryHints, ScoredResult
from engine.rules import CandidateScorer
from fuzzy.index import SearchIndexes, build_indexes
from fuzzy.query import get_interpreter

logger = logging.getLogger(__name__)


def score_candidates(
    scorer: CandidateScorer,
    query: str,
    candidates: Sequence[Candidate],
    indexes: SearchIndexes,
    hints: QueryHints,
    *,
    max_workers: int,
    parallel_threshold: int = 0,
) -> list[int]:
    """Score candidates concurrently, returning scores in corpus order.

    Indexes, hints and the scorer are immutable, so workers share them
    without locking. Small batches, or a single worker, run inline.
    """
    def _score(candidate: Candidate) -> int:
        return scorer.score(query, candidate, indexes, hints=hints)

    if max_workers <= 1 or len(candidates) < parallel_threshold:
        return [_score(c) for c in candidates]

    workers = min(max_workers, len(candidates))
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="score") as executor:
        return list(executor.map(_score, candidates))


def rank(
    query: str,
    candidates: Sequence[Candidate],
    *,
    settings: Settings | None = None,
    indexes: SearchIndexes | None = None,
) -> list[ScoredResult]:
    """Rank candidates by relevance to a free-text query.

    Args:
        query: Raw user query
        candidates: Corpus for this request
        settings: Engine settings (default: cached environment settings)
        indexes: Prebuilt indexes, usually over the unfiltered corpus
            ``candidates`` was drawn from; built from ``candidates`` if None

    Returns:
        ScoredResults with score > 0, sorted by score descending
    """
    if not candidates or not query or not query.strip():
        return []

    settings = settings or get_settings()
    start_time = time.perf_counter()

    ngram_sizes = tuple(settings.search.ngram_sizes)
    interpreter = get_interpreter(ngram_sizes)
    hints = interpreter.interpret(query)
    if indexes is None:
        indexes = build_indexes(candidates, ngram_sizes)

    scorer = CandidateScorer(settings.scoring, interpreter)
    scores = score_candidates(
        scorer,
        query,
        candidates,
        indexes,
        hints,
        max_workers=settings.search.max_workers,
        parallel_threshold=settings.search.parallel_threshold,
    )

    scored = [
        (position, candidate, value)
        for position, (candidate, value) in enumerate(zip(candidates, scores))
        if value > 0
    ]
    if settings.search.deterministic_ties:
        scored.sort(key=lambda item: (-item[2], item[1].id, item[0]))
    else:
        scored.sort(key=lambda item: -item[2])

    results = [
        ScoredResult(candidate=candidate, score=value, rank=idx + 1)
        for idx, (_, candidate, value) in enumerate(scored)
    ]

    elapsed_ms = round((time.perf_counter() - start_time) * 1000, 1)
    logger.info(
        f"Ranked {len(candidates)} candidates: {len(results)} relevant "
        f"(type={hints.type.name if hints.type is not None else None}, "
        f"stars={hints.star_rating}, {elapsed_ms} ms)"
    )
    return results
