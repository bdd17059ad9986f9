"""
Search executor and the clue/category search API.

The executor evaluates a disjunctive Query against the positional index:
every document matching at least one clause is a candidate, its score is the
sum of the BM25 contributions of the clauses it matches, and candidates are
ranked by score with ties kept in first-seen order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

from .document_store import Document, DocumentStore
from .posting import PositionalIndex
from .query import Clause, FieldMatchClause, PhraseClause, Query, QueryBuilder, TermClause
from .similarity import BM25Similarity

# Number of ranked results returned per question
SEARCH_HITS_PER_PAGE = 10


@dataclass(frozen=True)
class ScoredResult:
    doc_id: int
    score: float


def phrase_frequency(position_lists: List[List[int]]) -> int:
    """
    Count the start positions p such that term i of the phrase occurs at p + i
    for every i.
    """
    if not position_lists:
        return 0
    followers = [set(positions) for positions in position_lists[1:]]
    count = 0
    for start in position_lists[0]:
        if all(start + offset in positions for offset, positions in enumerate(followers, start=1)):
            count += 1
    return count


class SearchExecutor:
    """Evaluates structured queries against a built index."""

    def __init__(self, index: PositionalIndex, similarity: BM25Similarity | None = None) -> None:
        self.index = index
        self.similarity = similarity or BM25Similarity()

    def _term_scores(self, field: str, term: str, scores: Dict[int, float], boost: float = 1.0) -> None:
        for posting in self.index.postings(field, term):
            weight = self.similarity.term_score(self.index, field, term, posting.doc_id, posting.tf)
            scores[posting.doc_id] = scores.get(posting.doc_id, 0.0) + boost * weight

    def _phrase_scores(self, clause: PhraseClause, scores: Dict[int, float]) -> None:
        terms = clause.terms
        if not terms:
            return
        if len(terms) == 1:
            self._term_scores(clause.field, terms[0], scores, boost=clause.boost)
            return

        # Candidates come from the first term; the rest are looked up per document.
        others: List[Dict[int, List[int]]] = []
        for term in terms[1:]:
            postings = self.index.postings(clause.field, term)
            if not postings:
                return
            others.append({p.doc_id: p.positions for p in postings})

        total_docs = self.index.total_documents()
        idf = sum(
            self.similarity.idf(self.index.document_frequency(clause.field, t), total_docs)
            for t in terms
        )
        avg_length = self.index.average_field_length(clause.field)
        for posting in self.index.postings(clause.field, terms[0]):
            position_lists = [posting.positions]
            for by_doc in others:
                positions = by_doc.get(posting.doc_id)
                if positions is None:
                    break
                position_lists.append(positions)
            else:
                freq = phrase_frequency(position_lists)
                if freq == 0:
                    continue
                field_length = self.index.field_length(clause.field, posting.doc_id)
                weight = self.similarity.score(idf, freq, field_length, avg_length)
                scores[posting.doc_id] = scores.get(posting.doc_id, 0.0) + clause.boost * weight

    def clause_scores(self, clause: Clause) -> Dict[int, float]:
        """Return doc_id -> score contribution of one clause, in match order."""
        scores: Dict[int, float] = {}
        if isinstance(clause, TermClause):
            self._term_scores(clause.field, clause.term, scores)
        elif isinstance(clause, PhraseClause):
            self._phrase_scores(clause, scores)
        elif isinstance(clause, FieldMatchClause):
            for term in clause.terms:
                self._term_scores(clause.field, term, scores)
        else:
            raise TypeError(f"Unsupported clause: {clause!r}")
        return scores

    def search(self, query: Query, top_k: int = SEARCH_HITS_PER_PAGE) -> List[ScoredResult]:
        """Return at most top_k results, best first."""
        if top_k <= 0 or query.is_empty():
            return []

        # dict order is first-seen candidate order
        totals: Dict[int, float] = {}
        for clause in query.clauses:
            for doc_id, score in self.clause_scores(clause).items():
                totals[doc_id] = totals.get(doc_id, 0.0) + score

        # sorted() is stable, so equal scores keep first-seen order
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return [ScoredResult(doc_id, score) for doc_id, score in ranked[:top_k]]


class SearchEngine:
    """
    Search API over a built index: clue + category in, ranked titles out.
    The index, document store, builder and similarity are all passed in.
    """

    def __init__(
        self,
        index: PositionalIndex,
        store: DocumentStore,
        builder: QueryBuilder | None = None,
        similarity: BM25Similarity | None = None,
    ) -> None:
        self.index = index
        self.store = store
        self.builder = builder or QueryBuilder(index.normalizer)
        self.executor = SearchExecutor(index, similarity)

    def search_results(self, clue: str, category: str, top_k: int = SEARCH_HITS_PER_PAGE) -> List[ScoredResult]:
        return self.executor.search(self.builder.build(clue, category), top_k)

    def search_documents(self, clue: str, category: str, top_k: int = SEARCH_HITS_PER_PAGE) -> List[Tuple[Document, float]]:
        return [(self.store.get(r.doc_id), r.score) for r in self.search_results(clue, category, top_k)]

    def search(self, clue: str, category: str, top_k: int = SEARCH_HITS_PER_PAGE) -> List[Tuple[str, float]]:
        """Return [(title, score), ...] for the best top_k documents."""
        return [(doc.title, score) for doc, score in self.search_documents(clue, category, top_k)]
