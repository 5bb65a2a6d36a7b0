"""Approximate string lookup over a fixed vocabulary.

Values are indexed by their overlapping substrings (character n-grams), so a
lookup only touches values that share at least one substring with the query.
Candidates are ranked by n-gram overlap, with rapidfuzz breaking ties.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Iterable, Sequence

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

from engine.models import Candidate
from engine.pipelines.normalization import normalize_text

logger = logging.getLogger(__name__)

DEFAULT_NGRAM_SIZES: tuple[int, ...] = (2, 3, 4)


def _ngrams(text: str, sizes: Sequence[int]) -> set[str]:
    """Distinct overlapping substrings of every configured length.

    Strings shorter than a size contribute themselves whole.
    """
    grams: set[str] = set()
    for n in sizes:
        if len(text) < n:
            if text:
                grams.add(text)
            continue
        for i in range(len(text) - n + 1):
            grams.add(text[i:i + n])
    return grams


def similarity(a: str, b: str) -> float:
    """Edit-distance similarity: 1 - levenshtein(a, b) / max(len(a), len(b)).

    Two empty strings are identical (1.0).
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / longest


class MatchIndex:
    """Immutable n-gram index answering "closest known value to this query".

    Safe to share read-only between threads once built.
    """

    def __init__(
        self,
        values: Iterable[str],
        ngram_sizes: Sequence[int] = DEFAULT_NGRAM_SIZES,
    ) -> None:
        """Build the index.

        Args:
            values: Already-normalized strings; duplicates and empty
                strings are dropped
            ngram_sizes: Substring lengths to index
        """
        self.ngram_sizes = tuple(sorted(set(ngram_sizes)))
        self._values: tuple[str, ...] = tuple(sorted({v for v in values if v}))
        self._value_grams: tuple[frozenset[str], ...] = tuple(
            frozenset(_ngrams(v, self.ngram_sizes)) for v in self._values
        )

        postings: dict[str, list[int]] = defaultdict(list)
        for value_id, grams in enumerate(self._value_grams):
            for gram in grams:
                postings[gram].append(value_id)
        self._postings: dict[str, tuple[int, ...]] = {
            gram: tuple(ids) for gram, ids in postings.items()
        }

        logger.debug(
            f"Built match index: {len(self._values)} values, "
            f"{len(self._postings)} substrings, sizes={self.ngram_sizes}"
        )

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, value: object) -> bool:
        return value in self._values

    @property
    def values(self) -> tuple[str, ...]:
        return self._values

    def closest(self, query: str) -> str:
        """Return the indexed value nearest to ``query``, or "" if none.

        Nearness is the Dice overlap of n-gram sets. Equal overlaps fall back
        to rapidfuzz partial_ratio, then to alphabetical order, so the answer
        is deterministic.
        """
        if not query or not self._values:
            return ""

        query_grams = _ngrams(query, self.ngram_sizes)
        shared: dict[int, int] = defaultdict(int)
        for gram in query_grams:
            for value_id in self._postings.get(gram, ()):
                shared[value_id] += 1

        if not shared:
            return ""

        def overlap(value_id: int) -> float:
            return 2.0 * shared[value_id] / (len(query_grams) + len(self._value_grams[value_id]))

        best_overlap = max(overlap(value_id) for value_id in shared)
        tied = [value_id for value_id in shared if overlap(value_id) == best_overlap]
        if len(tied) == 1:
            return self._values[tied[0]]

        # Ids follow alphabetical order; max() keeps the first of equal ratios
        tied.sort()
        best = max(tied, key=lambda value_id: fuzz.partial_ratio(self._values[value_id], query))
        return self._values[best]


def build_index(
    raw_values: Iterable[str | None],
    ngram_sizes: Sequence[int] = DEFAULT_NGRAM_SIZES,
) -> MatchIndex:
    """Normalize raw field values and index the distinct non-empty ones."""
    return MatchIndex((normalize_text(v) for v in raw_values), ngram_sizes)


@dataclass(frozen=True)
class SearchIndexes:
    """Corpus-wide indexes shared by every scorer of one request."""
    province: MatchIndex
    district: MatchIndex
    ward: MatchIndex
    name: MatchIndex


def build_indexes(
    candidates: Sequence[Candidate],
    ngram_sizes: Sequence[int] = DEFAULT_NGRAM_SIZES,
) -> SearchIndexes:
    """Index the distinct province, district, ward and name values of a corpus."""
    indexes = SearchIndexes(
        province=build_index((c.province for c in candidates), ngram_sizes),
        district=build_index((c.district for c in candidates), ngram_sizes),
        ward=build_index((c.ward for c in candidates), ngram_sizes),
        name=build_index((c.name for c in candidates), ngram_sizes),
    )
    logger.debug(
        f"Indexed {len(candidates)} candidates: {len(indexes.province)} provinces, "
        f"{len(indexes.district)} districts, {len(indexes.ward)} wards, "
        f"{len(indexes.name)} names"
    )
    return indexes
