"""Tests for edit distance and fuzzy vocabulary lookup."""

import itertools

import pytest

from policy_search.core.exceptions import SearchCancelledError
from policy_search.search.fuzzy import (
    FuzzyMatcher, SymSpellIndex, generate_deletes, levenshtein_distance,
)
from policy_search.search.indexer import InvertedIndex


WORDS = ["password", "passwrd", "policy", "police", "vpn", "ab", "xy", "incident", "", "kitten", "sitting"]


def _index(*terms) -> InvertedIndex:
    return InvertedIndex(postings={t: [] for t in terms})


class TestLevenshtein:
    def test_known_values(self):
        assert levenshtein_distance("kitten", "sitting") == 3
        assert levenshtein_distance("passwrd", "password") == 1
        assert levenshtein_distance("", "abc") == 3
        assert levenshtein_distance("abc", "") == 3

    def test_single_edits(self):
        assert levenshtein_distance("vpn", "vpns") == 1  # вставка
        assert levenshtein_distance("vpns", "vpn") == 1  # удаление
        assert levenshtein_distance("vpn", "vpm") == 1  # замена

    def test_reflexive(self):
        for word in WORDS:
            assert levenshtein_distance(word, word) == 0

    def test_symmetric_and_non_negative(self):
        for a, b in itertools.combinations(WORDS, 2):
            d = levenshtein_distance(a, b)
            assert d == levenshtein_distance(b, a)
            assert d >= 0
            assert (d == 0) == (a == b)

    def test_triangle_inequality(self):
        for a, b, c in itertools.permutations(WORDS[:7], 3):
            assert levenshtein_distance(a, c) <= levenshtein_distance(a, b) + levenshtein_distance(b, c)


class TestSymSpell:
    def test_generate_deletes(self):
        assert generate_deletes("abc", 1) == {"bc", "ac", "ab"}
        assert "" in generate_deletes("ab", 2)

    def test_candidates_include_typo_source(self):
        index = SymSpellIndex(["password", "policy"], max_distance=2)
        assert "password" in index.candidates("passwrd")


class TestFuzzyMatcher:
    def test_finds_terms_within_distance(self):
        matcher = FuzzyMatcher(max_distance=2)
        found = matcher.find("passwrd", _index("password", "policy", "vpn"))
        assert found == [("password", 1)]

    def test_sorted_by_distance_then_term(self):
        matcher = FuzzyMatcher(max_distance=2)
        found = matcher.find("polic", _index("police", "policy", "polo", "vpn"))
        assert found == [("police", 1), ("policy", 1), ("polo", 2)]

    def test_nothing_within_distance(self):
        matcher = FuzzyMatcher(max_distance=2)
        assert matcher.find("xyz123", _index("password", "policy", "vpn")) == []

    @pytest.mark.parametrize("term", ["passwrd", "polcy", "xy", "incidnet", "vpm", "zzzzzz", "ab"])
    def test_symspell_matches_scan(self, term):
        index = _index("password", "policy", "police", "ab", "cd", "incident", "vpn", "vpns", "report")
        scan = FuzzyMatcher(strategy="scan").find(term, index)
        symspell = FuzzyMatcher(strategy="symspell").find(term, index)
        assert symspell == scan

    def test_symspell_index_is_cached_per_snapshot(self):
        matcher = FuzzyMatcher(strategy="symspell")
        index = _index("password", "policy")
        matcher.find("passwrd", index)
        first = matcher._symspell_for(index)
        matcher.find("polcy", index)
        assert matcher._symspell_for(index) is first

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            FuzzyMatcher(strategy="bk-tree")

    def test_checkpoint_can_cancel(self):
        def checkpoint():
            raise SearchCancelledError("passwrd")

        with pytest.raises(SearchCancelledError):
            FuzzyMatcher().find("passwrd", _index("password"), checkpoint)
