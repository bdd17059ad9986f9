"""
Structured queries and the builder that turns a Jeopardy clue plus its
category into one.

A Query is a disjunction of clauses: a document matching any clause is a
candidate, and every clause it matches adds to its score.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .document_store import FIELDS
from .tokenizer import TextNormalizer

# Boost applied to phrase clauses built from quoted spans of the clue
PHRASE_BOOST = 2.5

QUOTE = '"'


def _check_field(field: str) -> None:
    if field not in FIELDS:
        raise ValueError(f"Unknown field: {field!r}")


@dataclass(frozen=True)
class TermClause:
    """Match a single term in a field."""

    field: str
    term: str

    def __post_init__(self) -> None:
        _check_field(self.field)


@dataclass(frozen=True)
class PhraseClause:
    """Match the terms adjacent and in order in a field."""

    field: str
    terms: tuple[str, ...]
    boost: float = 1.0

    def __post_init__(self) -> None:
        _check_field(self.field)
        object.__setattr__(self, "terms", tuple(self.terms))


@dataclass(frozen=True)
class FieldMatchClause:
    """Match any of the terms in a field; matched term scores are summed."""

    field: str
    terms: tuple[str, ...]

    def __post_init__(self) -> None:
        _check_field(self.field)
        # distinct terms, first occurrence order
        object.__setattr__(self, "terms", tuple(dict.fromkeys(self.terms)))


Clause = Union[TermClause, PhraseClause, FieldMatchClause]


@dataclass(frozen=True)
class Query:
    """Disjunction (SHOULD semantics) of clauses."""

    clauses: tuple[Clause, ...] = ()

    def __len__(self) -> int:
        return len(self.clauses)

    def is_empty(self) -> bool:
        return not self.clauses

    def phrase_clauses(self) -> list[PhraseClause]:
        return [c for c in self.clauses if isinstance(c, PhraseClause)]

    def field_match_clauses(self) -> list[FieldMatchClause]:
        return [c for c in self.clauses if isinstance(c, FieldMatchClause)]


def extract_quoted_spans(clue: str) -> list[str]:
    """
    Return the quoted spans of clue: the odd-indexed segments after splitting
    on double quotes. With an odd number of quotes the text after the last
    quote is not a phrase.
    """
    if QUOTE not in clue:
        return []
    segments = clue.split(QUOTE)
    # segments[i] is closed by a quote only when another segment follows it
    return [segments[i] for i in range(1, len(segments) - 1, 2)]


class QueryBuilder:
    """
    Builds the multi-field query for a clue and its category:
    - one body phrase clause per quoted span of the clue (boosted)
    - the clue and category together, matched against the body
    - the category alone, matched against the categories field

    The clue and category are natural-language text. They never go through a
    query syntax, so characters such as + - : ( ) * are ordinary text.
    """

    def __init__(self, normalizer: TextNormalizer, *, phrase_boost: float = PHRASE_BOOST) -> None:
        self.normalizer = normalizer
        self.phrase_boost = phrase_boost

    def build(self, clue: str, category: str) -> Query:
        if not isinstance(clue, str) or not isinstance(category, str):
            raise TypeError(
                f"clue and category must be str, got {type(clue).__name__} and {type(category).__name__}"
            )

        clauses: list[Clause] = []
        for span in extract_quoted_spans(clue):
            terms = self.normalizer.normalize(span)
            if terms:
                clauses.append(PhraseClause("body", tuple(terms), boost=self.phrase_boost))

        clauses.append(FieldMatchClause("body", tuple(self.normalizer.normalize(clue + "\n" + category))))
        clauses.append(FieldMatchClause("categories", tuple(self.normalizer.normalize(category))))
        return Query(tuple(clauses))
