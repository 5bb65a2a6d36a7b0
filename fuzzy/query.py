"""Query interpretation: property type and star rating from free text.

Each property type owns a match index over its keyword synonyms. A type is
detected only when its closest keyword actually appears in the query, and
types are tried in taxonomy order (Hotel, Homestay, Villa), so priority, not
match quality, settles queries naming several types.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Sequence

from engine.models import AccommodationType, QueryHints
from engine.pipelines.normalization import normalize_text
from fuzzy.index import DEFAULT_NGRAM_SIZES, MatchIndex, build_index
from taxonomy.type_keywords import STAR_RATING_PATTERN, TYPE_KEYWORDS

logger = logging.getLogger(__name__)

_STAR_RE = re.compile(STAR_RATING_PATTERN)


@dataclass(frozen=True)
class TypeMatcher:
    """Keyword index for one property type."""
    type: AccommodationType
    label: str
    index: MatchIndex


def extract_star_rating(normalized_query: str) -> int | None:
    """Return N from the first "N sao" in the query, or None."""
    match = _STAR_RE.search(normalized_query)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        return None


class QueryInterpreter:
    """Derives structured hints from raw query text.

    Immutable after construction; one instance serves concurrent requests.
    """

    def __init__(
        self,
        taxonomy: list[dict] | None = None,
        ngram_sizes: Sequence[int] = DEFAULT_NGRAM_SIZES,
    ) -> None:
        """Initialize the interpreter.

        Args:
            taxonomy: Type keyword entries in priority order. If None, loads
                the default taxonomy.
            ngram_sizes: Substring lengths for the keyword indexes
        """
        taxonomy = taxonomy if taxonomy is not None else TYPE_KEYWORDS
        self.matchers: tuple[TypeMatcher, ...] = tuple(
            TypeMatcher(
                type=AccommodationType(entry["type_code"]),
                label=entry["label"],
                index=build_index(entry["synonyms"], ngram_sizes),
            )
            for entry in taxonomy
        )
        logger.info(f"Loaded {len(self.matchers)} property types for query interpretation")

    def detect_type(self, normalized_query: str) -> AccommodationType | None:
        """First type, in priority order, whose closest keyword is in the query."""
        for matcher in self.matchers:
            keyword = matcher.index.closest(normalized_query)
            if keyword and keyword in normalized_query:
                logger.debug(f"Query matched {matcher.label} via keyword {keyword!r}")
                return matcher.type
        return None

    def interpret(self, query: str) -> QueryHints:
        """Normalize the query and extract type and star rating.

        The star rating is only reported together with a detected type.
        """
        normalized = normalize_text(query)
        rating = extract_star_rating(normalized)
        accommodation_type = self.detect_type(normalized)
        if accommodation_type is None:
            return QueryHints(normalized_query=normalized)
        return QueryHints(
            normalized_query=normalized,
            type=accommodation_type,
            star_rating=rating,
        )

    def parse_type(self, query: str) -> tuple[int, int]:
        """Integer form of ``interpret``: (type code, stars), -1 when absent."""
        hints = self.interpret(query)
        return (
            int(hints.type) if hints.type is not None else -1,
            hints.star_rating if hints.star_rating is not None else -1,
        )


@lru_cache(maxsize=8)
def get_interpreter(ngram_sizes: tuple[int, ...] = DEFAULT_NGRAM_SIZES) -> QueryInterpreter:
    """Cached interpreter over the default taxonomy."""
    return QueryInterpreter(ngram_sizes=ngram_sizes)


def parse_type(query: str) -> tuple[int, int]:
    """(type code, star rating) for ``query`` using the default interpreter."""
    return get_interpreter().parse_type(query)
