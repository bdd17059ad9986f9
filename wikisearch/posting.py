"""
Posting and positional index data structures.

A posting represents a term's occurrences in one field of one document:
document id, term frequency and the ordered token positions of the term.
Every field (title, categories, body) has its own independent index.
"""

from dataclasses import dataclass, field
from typing import Iterator

from .document_store import FIELDS, Document
from .tokenizer import TextNormalizer


@dataclass
class Posting:
    """
    Represents a term's occurrences in a document field.
    - doc_id: document identifier in the DocumentStore
    - positions: zero-based positions in the normalized token sequence
    """

    doc_id: int
    positions: list[int] = field(default_factory=list)

    @property
    def tf(self) -> int:
        return len(self.positions)

    def __repr__(self) -> str:
        return f"Posting(doc_id={self.doc_id!r}, tf={self.tf}, positions={self.positions!r})"


class FieldIndex:
    """
    Inverted index for one field: map from term -> list of postings, kept in
    document insertion order, plus the token count of the field per document.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._index: dict[str, list[Posting]] = {}
        self._lengths: dict[int, int] = {}
        self._total_length = 0

    def add(self, doc_id: int, terms: list[str]) -> None:
        """Index the normalized terms of this field for one document."""
        if doc_id in self._lengths:
            raise ValueError(f"Document {doc_id} already indexed in field {self.name!r}")
        self._lengths[doc_id] = len(terms)
        self._total_length += len(terms)

        current: dict[str, Posting] = {}
        for position, term in enumerate(terms):
            posting = current.get(term)
            if posting is None:
                posting = Posting(doc_id=doc_id)
                current[term] = posting
                self._index.setdefault(term, []).append(posting)
            posting.positions.append(position)

    def get_postings(self, term: str) -> list[Posting]:
        """Return the list of postings for a term, or empty list."""
        return self._index.get(term, [])

    def document_frequency(self, term: str) -> int:
        # one posting per document, so df is the postings length
        return len(self._index.get(term, ()))

    def field_length(self, doc_id: int) -> int:
        return self._lengths.get(doc_id, 0)

    @property
    def total_length(self) -> int:
        return self._total_length

    def terms(self) -> Iterator[str]:
        """Iterate over all terms in the field."""
        return iter(self._index)

    def __len__(self) -> int:
        return len(self._index)

    def to_dict(self) -> dict:
        """Serialize to a JSON-serializable dict for saving."""
        return {
            "lengths": [[doc_id, length] for doc_id, length in self._lengths.items()],
            "postings": {
                term: [[p.doc_id, p.tf, p.positions] for p in postings]
                for term, postings in self._index.items()
            },
        }

    @classmethod
    def from_dict(cls, name: str, data: dict) -> "FieldIndex":
        index = cls(name)
        for doc_id, length in data.get("lengths", []):
            index._lengths[int(doc_id)] = int(length)
            index._total_length += int(length)
        for term, postings in data.get("postings", {}).items():
            restored = []
            for doc_id, tf, positions in postings:
                if tf != len(positions):
                    raise ValueError(f"Corrupt posting for {term!r} in document {doc_id}")
                restored.append(Posting(doc_id=int(doc_id), positions=[int(p) for p in positions]))
            index._index[term] = restored
        return index


class PositionalIndex:
    """
    Per-field positional inverted index over a batch of documents.
    Built once with add_document, read-only afterwards.
    """

    def __init__(self, normalizer: TextNormalizer, fields: tuple[str, ...] = FIELDS) -> None:
        self.normalizer = normalizer
        self.fields = tuple(fields)
        self._fields = {name: FieldIndex(name) for name in self.fields}
        self._num_docs = 0

    def add_document(self, doc: Document) -> None:
        """Normalize every field of doc and record its postings."""
        for name, field_index in self._fields.items():
            field_index.add(doc.doc_id, self.normalizer.normalize(doc.field(name)))
        self._num_docs += 1

    def field(self, name: str) -> FieldIndex:
        """Return the index of one field (ValueError if the field is unknown)."""
        try:
            return self._fields[name]
        except KeyError:
            raise ValueError(f"Unknown field: {name!r}") from None

    def postings(self, field_name: str, term: str) -> list[Posting]:
        field_index = self._fields.get(field_name)
        if field_index is None:
            return []
        return field_index.get_postings(term)

    def document_frequency(self, field_name: str, term: str) -> int:
        field_index = self._fields.get(field_name)
        return field_index.document_frequency(term) if field_index is not None else 0

    def field_length(self, field_name: str, doc_id: int) -> int:
        field_index = self._fields.get(field_name)
        return field_index.field_length(doc_id) if field_index is not None else 0

    def total_documents(self) -> int:
        return self._num_docs

    def average_field_length(self, field_name: str) -> float:
        """Mean token count of the field over all indexed documents (0.0 if none)."""
        field_index = self._fields.get(field_name)
        if field_index is None or self._num_docs == 0:
            return 0.0
        return field_index.total_length / self._num_docs

    def to_dict(self) -> dict:
        return {
            "num_docs": self._num_docs,
            "fields": {name: f.to_dict() for name, f in self._fields.items()},
        }

    @classmethod
    def from_dict(cls, data: dict, normalizer: TextNormalizer) -> "PositionalIndex":
        fields = tuple(data["fields"])
        index = cls(normalizer, fields=fields)
        index._fields = {name: FieldIndex.from_dict(name, data["fields"][name]) for name in fields}
        index._num_docs = int(data["num_docs"])
        return index
