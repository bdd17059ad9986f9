"""BM25 similarity used to score term and phrase matches against the index."""

from __future__ import annotations

import math

from .posting import PositionalIndex

DEFAULT_K1 = 1.14
DEFAULT_B = 0.15


class BM25Similarity:
    """
    BM25 with tunable k1 (term-frequency saturation) and b (length
    normalization). Scores are never negative: idf uses the 1 + ratio form and
    a zero average field length disables length normalization.
    """

    def __init__(self, k1: float = DEFAULT_K1, b: float = DEFAULT_B) -> None:
        if k1 < 0:
            raise ValueError(f"k1 must be non-negative, got {k1}")
        if not 0.0 <= b <= 1.0:
            raise ValueError(f"b must be in [0, 1], got {b}")
        self.k1 = k1
        self.b = b

    @staticmethod
    def idf(doc_freq: int, total_docs: int) -> float:
        """ln(1 + (N - df + 0.5) / (df + 0.5)); 0 for absent terms."""
        if doc_freq <= 0 or total_docs <= 0:
            return 0.0
        df = min(doc_freq, total_docs)
        return math.log(1.0 + (total_docs - df + 0.5) / (df + 0.5))

    def tf_norm(self, tf: float, field_length: int, avg_field_length: float) -> float:
        """Saturated, length-normalized term frequency (BM25 without idf)."""
        if tf <= 0:
            return 0.0
        if avg_field_length > 0:
            length_norm = 1.0 - self.b + self.b * field_length / avg_field_length
        else:
            length_norm = 1.0
        return tf * (self.k1 + 1.0) / (tf + self.k1 * length_norm)

    def score(self, idf: float, tf: float, field_length: int, avg_field_length: float) -> float:
        return idf * self.tf_norm(tf, field_length, avg_field_length)

    def term_score(self, index: PositionalIndex, field: str, term: str, doc_id: int, tf: int) -> float:
        """Score one term occurring tf times in doc_id's field."""
        idf = self.idf(index.document_frequency(field, term), index.total_documents())
        return self.score(
            idf,
            tf,
            index.field_length(field, doc_id),
            index.average_field_length(field),
        )

    def __repr__(self) -> str:
        return f"BM25Similarity(k1={self.k1}, b={self.b})"
