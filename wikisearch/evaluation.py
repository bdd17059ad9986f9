"""
Evaluation of ranked results against expected Jeopardy answers.

For each question the rank (1-based) of the first result whose title matches
the expected answer is recorded, 0 when no result in the top K matches.
Ranks are aggregated into hits per position, hits in top K and P@1.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Sequence

from .document_store import DocumentStore
from .query_source import QuestionRecord
from .searcher import SEARCH_HITS_PER_PAGE, ScoredResult, SearchEngine

logger = logging.getLogger(__name__)

AnswerPredicate = Callable[[str, str], bool]


def exact_match(title: str, answer: str) -> bool:
    """Case-insensitive string equality."""
    return title.lower() == answer.lower()


def pattern_match(title: str, answer: str) -> bool:
    """
    Case-insensitive full match of the answer, read as a regular expression,
    against the title. Answers such as "Post|Washington Post" list
    alternatives. An answer that is not a valid pattern is compared literally.
    """
    try:
        return re.fullmatch(answer.lower(), title.lower()) is not None
    except re.error:
        return exact_match(title, answer)


PREDICATES: dict[str, AnswerPredicate] = {
    "pattern": pattern_match,
    "exact": exact_match,
}


def find_answer_rank(
    results: Sequence[ScoredResult],
    answer: str,
    store: DocumentStore,
    predicate: AnswerPredicate = pattern_match,
) -> int:
    """Return the 1-based position of the first result matching answer, or 0."""
    for position, result in enumerate(results, start=1):
        if predicate(store.title(result.doc_id), answer):
            return position
    return 0


@dataclass
class RankStatistics:
    """Number of questions answered at each result position (0 = missed)."""

    top_k: int = SEARCH_HITS_PER_PAGE
    hits_at_position: Counter = field(default_factory=Counter)

    @classmethod
    def from_ranks(cls, ranks: Iterable[int], top_k: int = SEARCH_HITS_PER_PAGE) -> "RankStatistics":
        stats = cls(top_k=top_k)
        for rank in ranks:
            stats.record(rank)
        return stats

    def record(self, rank: int) -> None:
        if rank < 0 or rank > self.top_k:
            raise ValueError(f"Rank {rank} outside 0..{self.top_k}")
        self.hits_at_position[rank] += 1

    def hits_at(self, position: int) -> int:
        return self.hits_at_position.get(position, 0)

    @property
    def total_queries(self) -> int:
        return sum(self.hits_at_position.values())

    @property
    def hits_in_top_k(self) -> int:
        return sum(self.hits_at(i) for i in range(1, self.top_k + 1))

    @property
    def precision_at_one(self) -> float:
        total = self.total_queries
        if total == 0:
            return 0.0
        return self.hits_at(1) / total

    def to_dict(self) -> dict:
        return {
            "hits_at_position": {i: self.hits_at(i) for i in range(1, self.top_k + 1)},
            "misses": self.hits_at(0),
            "hits_in_top_k": self.hits_in_top_k,
            "precision_at_1": self.precision_at_one,
        }


@dataclass(frozen=True)
class QuestionOutcome:
    number: int
    question: QuestionRecord
    rank: int
    top_title: str | None


def evaluate_queries(
    engine: SearchEngine,
    questions: Iterable[QuestionRecord],
    *,
    top_k: int = SEARCH_HITS_PER_PAGE,
    predicate: AnswerPredicate = pattern_match,
) -> tuple[RankStatistics, List[QuestionOutcome]]:
    """Search every question and aggregate the rank of its expected answer."""
    stats = RankStatistics(top_k=top_k)
    outcomes: List[QuestionOutcome] = []
    for number, question in enumerate(questions, start=1):
        results = engine.search_results(question.clue, question.category, top_k)
        rank = find_answer_rank(results, question.answer, engine.store, predicate)
        stats.record(rank)
        top_title = engine.store.title(results[0].doc_id) if results else None
        outcomes.append(QuestionOutcome(number, question, rank, top_title))
        logger.debug("Question %d: rank %d (%s)", number, rank, question.answer)
    logger.info(
        "Evaluated %d questions: %d in top %d, P@1 %.3f",
        stats.total_queries, stats.hits_in_top_k, top_k, stats.precision_at_one,
    )
    return stats, outcomes
