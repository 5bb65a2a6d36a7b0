"""Tests for structured pre-filters."""

import pytest
from pydantic import ValidationError

from engine.models import AccommodationType
from engine.pipelines.filtering import AccommodationFilter, apply_filters


def _ids(candidates):
    return [c.id for c in candidates]


class TestApplyFilters:
    """Filter semantics."""

    def test_no_filters_keeps_everything(self, corpus):
        kept = apply_filters(corpus, None)
        assert kept == corpus
        assert kept is not corpus
        assert apply_filters(corpus, AccommodationFilter()) == corpus

    @pytest.mark.parametrize(
        "filters, expected",
        [
            (AccommodationFilter(type=AccommodationType.HOTEL), [1, 4]),
            (AccommodationFilter(status=0), [3]),
            (AccommodationFilter(num_bed=2), [1, 4]),
            (AccommodationFilter(people=8), [3]),
            (AccommodationFilter(star_category=5), [3]),
            (AccommodationFilter(benefit_ids=[2]), [1, 3]),
            (AccommodationFilter(type=AccommodationType.HOTEL, star_category=4), [4]),
        ],
    )
    def test_exact_filters(self, corpus, filters, expected):
        assert _ids(apply_filters(corpus, filters)) == expected

    def test_location_substring_ignores_case(self, corpus):
        assert _ids(apply_filters(corpus, AccommodationFilter(province="NẴNG"))) == [1, 4]
        assert _ids(apply_filters(corpus, AccommodationFilter(district="trà"))) == [4]

    def test_fuzzy_name(self, corpus):
        assert _ids(apply_filters(corpus, AccommodationFilter(name="sunrise hotl"))) == [1]

    def test_unknown_name_keeps_nothing(self, corpus):
        assert apply_filters(corpus, AccommodationFilter(name="qqqq")) == []


class TestAccommodationFilter:
    """Filter model validation."""

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            AccommodationFilter(color="blue")

    def test_rejects_negative_counts(self):
        with pytest.raises(ValidationError):
            AccommodationFilter(num_bed=-1)

    def test_is_empty(self):
        assert AccommodationFilter().is_empty()
        assert not AccommodationFilter(type=1).is_empty()
