"""Tests for the approximate match index and string similarity."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from fuzzy.index import MatchIndex, build_index, build_indexes, similarity


class TestSimilarity:
    """Edit-distance similarity."""

    @pytest.mark.parametrize("text", ["a", "ho boi", "khach san da nang"])
    def test_identical_strings(self, text):
        assert similarity(text, text) == 1.0

    def test_both_empty(self):
        assert similarity("", "") == 1.0

    def test_one_empty(self):
        assert similarity("", "abc") == 0.0

    def test_known_distance(self):
        # kitten -> sitting needs 3 edits over 7 characters
        assert similarity("kitten", "sitting") == pytest.approx(1 - 3 / 7)

    def test_symmetric(self):
        assert similarity("wifi mien phi", "wifi") == similarity("wifi", "wifi mien phi")


class TestMatchIndex:
    """Closest-value lookup."""

    def test_empty_index_returns_empty(self):
        assert MatchIndex([]).closest("da nang") == ""

    def test_empty_query_returns_empty(self):
        assert MatchIndex(["da nang"]).closest("") == ""

    def test_no_shared_substring_returns_empty(self):
        assert MatchIndex(["abc"]).closest("xyz") == ""

    def test_value_mentioned_in_longer_query(self):
        index = MatchIndex(["da nang", "ha noi", "khanh hoa"])
        assert index.closest("khach san 3 sao da nang") == "da nang"

    def test_tolerates_typos(self):
        index = MatchIndex(["da nang", "ha noi", "khanh hoa"])
        assert index.closest("ha noj") == "ha noi"

    def test_ties_resolve_alphabetically(self):
        index = MatchIndex(["ba", "ab"], ngram_sizes=(2,))
        assert index.closest("ab ba") == "ab"

    def test_deduplicates_and_drops_empty_values(self):
        index = MatchIndex(["ha noi", "ha noi", "", "da nang"])
        assert len(index) == 2
        assert index.values == ("da nang", "ha noi")

    def test_build_index_normalizes(self):
        index = build_index(["Đà Nẵng", "da nang", "Hà Nội", None, "  "])
        assert len(index) == 2
        assert "da nang" in index
        assert "Đà Nẵng" not in index

    def test_concurrent_lookups_agree(self):
        index = MatchIndex(["da nang", "ha noi", "khanh hoa", "ho chi minh"])
        queries = ["khach san da nang", "ha noi", "nha trang khanh hoa", "sai gon ho chi minh"] * 25

        with ThreadPoolExecutor(max_workers=8) as executor:
            threaded = list(executor.map(index.closest, queries))

        assert threaded == [index.closest(q) for q in queries]


class TestSearchIndexes:
    """Corpus-wide field indexes."""

    def test_distinct_field_values(self, indexes):
        assert set(indexes.province.values) == {"da nang", "ha noi", "khanh hoa"}
        assert len(indexes.district) == 4
        assert len(indexes.ward) == 4
        assert "zzz" in indexes.name

    def test_empty_corpus(self):
        indexes = build_indexes([])
        assert len(indexes.name) == 0
        assert indexes.province.closest("da nang") == ""
