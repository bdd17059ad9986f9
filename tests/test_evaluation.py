"""Tests for answer matching and rank statistics."""

import pytest

from wikisearch.evaluation import (
    RankStatistics,
    evaluate_queries,
    exact_match,
    find_answer_rank,
    pattern_match,
)
from wikisearch.query_source import QuestionRecord
from wikisearch.searcher import ScoredResult


def test_statistics_aggregation():
    stats = RankStatistics.from_ranks([1, 1, 3, 0], top_k=10)

    assert stats.hits_at(1) == 2
    assert stats.hits_at(3) == 1
    assert stats.hits_at(2) == 0
    assert stats.hits_at(0) == 1
    assert stats.total_queries == 4
    assert stats.hits_in_top_k == 3
    assert stats.precision_at_one == 0.5


def test_statistics_without_queries():
    stats = RankStatistics()
    assert stats.hits_in_top_k == 0
    assert stats.precision_at_one == 0.0


def test_statistics_reject_ranks_outside_top_k():
    stats = RankStatistics(top_k=3)
    with pytest.raises(ValueError):
        stats.record(4)


def test_statistics_to_dict():
    report = RankStatistics.from_ranks([2, 0], top_k=3).to_dict()
    assert report == {
        "hits_at_position": {1: 0, 2: 1, 3: 0},
        "misses": 1,
        "hits_in_top_k": 1,
        "precision_at_1": 0.0,
    }


class TestPredicates:
    def test_exact_match_ignores_case(self):
        assert exact_match("Washington Post", "washington post")
        assert not exact_match("The Washington Post", "Washington Post")

    def test_pattern_match_is_a_full_match(self):
        assert pattern_match("Washington Post", "WASHINGTON POST")
        assert not pattern_match("The Washington Post", "Washington Post")

    def test_pattern_match_supports_alternatives(self):
        assert pattern_match("The Washington Post", "Washington Post|The Washington Post")

    def test_invalid_pattern_is_compared_literally(self):
        assert pattern_match("Band (", "band (")
        assert not pattern_match("Band", "band (")


def test_find_answer_rank(built):
    _, store = built
    results = [ScoredResult(2, 3.0), ScoredResult(0, 2.0), ScoredResult(1, 1.0)]

    assert find_answer_rank(results, "Washington Post", store) == 2
    assert find_answer_rank(results, "New York City", store) == 1
    assert find_answer_rank(results, "Chicago Tribune", store) == 0
    assert find_answer_rank([], "Washington Post", store) == 0


def test_find_answer_rank_uses_predicate(built):
    _, store = built
    results = [ScoredResult(1, 1.0)]

    assert find_answer_rank(results, "the new york times", store, exact_match) == 1
    assert find_answer_rank(results, "new york times", store, lambda title, answer: answer in title.lower()) == 1


def test_evaluate_queries(engine):
    questions = [
        QuestionRecord("newspapers", "This newspaper is American.", "Washington Post"),
        QuestionRecord("MARSUPIALS", "Quokka zebra", "Kangaroo"),
    ]
    stats, outcomes = evaluate_queries(engine, questions, top_k=10)

    assert [o.rank for o in outcomes] == [1, 0]
    assert [o.number for o in outcomes] == [1, 2]
    assert outcomes[0].top_title == "Washington Post"
    assert outcomes[1].top_title is None
    assert stats.hits_in_top_k == 1
    assert stats.precision_at_one == 0.5
