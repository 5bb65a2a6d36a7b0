"""Relevance rules for scoring one accommodation against a query.

Each signal (name, type, rating, location, benefits) is evaluated into a
SignalTrace so a score can be audited; the score itself is the sum of the
trace points.
"""
from __future__ import annotations

import logging

from engine.config import ScoringSettings
from engine.models import Candidate, QueryHints, ScoreBreakdown, SignalTrace
from engine.pipelines.normalization import normalize_text
from fuzzy.index import MatchIndex, SearchIndexes, similarity
from fuzzy.query import QueryInterpreter, get_interpreter

logger = logging.getLogger(__name__)


class CandidateScorer:
    """Pure scoring function over (query, candidate, shared indexes).

    Holds only immutable configuration, so one scorer is shared by all
    worker threads of a request.
    """

    def __init__(
        self,
        weights: ScoringSettings | None = None,
        interpreter: QueryInterpreter | None = None,
    ):
        """Initialize the scorer.

        Args:
            weights: Signal weights (defaults from ScoringSettings)
            interpreter: Query interpreter (defaults to the cached one)
        """
        self.weights = weights or ScoringSettings()
        self.interpreter = interpreter or get_interpreter()

    def explain(
        self,
        query: str,
        candidate: Candidate,
        indexes: SearchIndexes,
        *,
        hints: QueryHints | None = None,
    ) -> ScoreBreakdown:
        """Evaluate every signal for a candidate.

        Args:
            query: Raw user query
            candidate: Candidate to score
            indexes: Corpus-wide match indexes
            hints: Pre-interpreted query; computed from ``query`` if None

        Returns:
            ScoreBreakdown whose total is the candidate's score
        """
        if hints is None:
            hints = self.interpreter.interpret(query)
        q = hints.normalized_query

        traces = [
            self._eval_field("name", q, candidate.name, indexes.name, self.weights.name_weight),
            self._eval_type(hints, candidate),
            self._eval_rating(hints, candidate),
            self._eval_field("province", q, candidate.province, indexes.province, self.weights.province_weight),
            self._eval_field("district", q, candidate.district, indexes.district, self.weights.district_weight),
            self._eval_field("ward", q, candidate.ward, indexes.ward, self.weights.ward_weight),
            self._eval_benefits(q, candidate),
        ]
        return ScoreBreakdown(candidate_id=candidate.id, traces=traces)

    def score(
        self,
        query: str,
        candidate: Candidate,
        indexes: SearchIndexes,
        *,
        hints: QueryHints | None = None,
    ) -> int:
        """Relevance score of a candidate; 0 when nothing matches."""
        return self.explain(query, candidate, indexes, hints=hints).total

    @staticmethod
    def _eval_field(
        signal: str,
        normalized_query: str,
        value: str,
        index: MatchIndex,
        points: int,
    ) -> SignalTrace:
        """Closest indexed value to the query must be this candidate's value."""
        normalized_value = normalize_text(value)
        if not normalized_value:
            return SignalTrace(signal=signal, matched=False, reason="Field is empty")

        closest = index.closest(normalized_query)
        if closest != normalized_value:
            return SignalTrace(
                signal=signal,
                matched=False,
                reason=f"Closest {signal} is {closest!r}" if closest else f"No {signal} resembles the query",
            )
        return SignalTrace(
            signal=signal,
            matched=True,
            points=points,
            reason=f"Query points to {signal} {normalized_value!r}",
        )

    def _eval_type(self, hints: QueryHints, candidate: Candidate) -> SignalTrace:
        if hints.type is None:
            return SignalTrace(signal="type", matched=False, reason="No property type in query")
        if candidate.type != hints.type:
            return SignalTrace(
                signal="type",
                matched=False,
                reason=f"Query asks for {hints.type.name.lower()}",
            )
        return SignalTrace(
            signal="type",
            matched=True,
            points=self.weights.type_weight,
            reason=f"Property type is {hints.type.name.lower()}",
        )

    def _eval_rating(self, hints: QueryHints, candidate: Candidate) -> SignalTrace:
        if hints.star_rating is None:
            return SignalTrace(signal="rating", matched=False, reason="No star rating in query")
        if candidate.star_category != hints.star_rating:
            return SignalTrace(
                signal="rating",
                matched=False,
                reason=f"Query asks for {hints.star_rating} stars, candidate has {candidate.star_category}",
            )
        return SignalTrace(
            signal="rating",
            matched=True,
            points=self.weights.rating_weight,
            reason=f"{hints.star_rating}-star rating",
        )

    def _eval_benefits(self, normalized_query: str, candidate: Candidate) -> SignalTrace:
        """Points per benefit resembling or mentioned in the query, capped."""
        cap = self.weights.benefit_cap
        threshold = self.weights.benefit_similarity_threshold
        total = 0
        matched: list[str] = []

        for benefit in candidate.benefits:
            name = normalize_text(benefit.name)
            if not name:
                continue
            if similarity(normalized_query, name) > threshold or name in normalized_query:
                total += self.weights.benefit_points
                matched.append(name)
                if total >= cap:
                    break

        total = min(total, cap)
        if not matched:
            return SignalTrace(signal="benefits", matched=False, reason="No benefit mentioned")
        return SignalTrace(
            signal="benefits",
            matched=True,
            points=total,
            reason=f"Mentions {', '.join(matched)}",
        )


def score(
    query: str,
    candidate: Candidate,
    indexes: SearchIndexes,
    *,
    hints: QueryHints | None = None,
    weights: ScoringSettings | None = None,
) -> int:
    """Score one candidate with default (or given) weights."""
    return CandidateScorer(weights).score(query, candidate, indexes, hints=hints)


def explain(
    query: str,
    candidate: Candidate,
    indexes: SearchIndexes,
    *,
    hints: QueryHints | None = None,
    weights: ScoringSettings | None = None,
) -> ScoreBreakdown:
    """Per-signal breakdown of ``score``."""
    return CandidateScorer(weights).explain(query, candidate, indexes, hints=hints)
