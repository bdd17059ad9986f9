"""
Document store: the arena of indexed documents, addressed by integer doc_id.
Postings in the positional index point into this store.
"""

from dataclasses import dataclass
from typing import Iterator

# Indexed fields, in the order they are analyzed
FIELDS = ("title", "categories", "body")


@dataclass(frozen=True)
class Document:
    """
    A parsed wiki page once it has been given an id.
    - doc_id: position in the store, stable for the lifetime of the index
    - categories: comma/space separated category list, as found in the corpus
    """

    doc_id: int
    title: str
    categories: str
    body: str

    def field(self, name: str) -> str:
        """Return the text of one of the indexed fields."""
        if name not in FIELDS:
            raise ValueError(f"Unknown field: {name!r}")
        return getattr(self, name)

    def to_dict(self) -> dict:
        return {
            "doc_id": self.doc_id,
            "title": self.title,
            "categories": self.categories,
            "body": self.body,
        }


class DocumentStore:
    """Append-only list of documents; doc_id is the list index."""

    def __init__(self) -> None:
        self._docs: list[Document] = []

    def add(self, title: str, categories: str = "", body: str = "") -> Document:
        """Store a new document and return it with its assigned doc_id."""
        doc = Document(
            doc_id=len(self._docs),
            title=title or "",
            categories=categories or "",
            body=body or "",
        )
        self._docs.append(doc)
        return doc

    def get(self, doc_id: int) -> Document:
        """Return the document with doc_id (IndexError if unknown)."""
        if doc_id < 0:
            raise IndexError(f"No document with id {doc_id}")
        return self._docs[doc_id]

    def title(self, doc_id: int) -> str:
        return self.get(doc_id).title

    def __iter__(self) -> Iterator[Document]:
        return iter(self._docs)

    def __len__(self) -> int:
        return len(self._docs)

    def __contains__(self, doc_id: int) -> bool:
        return 0 <= doc_id < len(self._docs)

    def to_list(self) -> list[dict]:
        """Serialize to a JSON-serializable list, in doc_id order."""
        return [doc.to_dict() for doc in self._docs]

    @classmethod
    def from_list(cls, items: list[dict]) -> "DocumentStore":
        store = cls()
        for i, item in enumerate(items):
            if item.get("doc_id", i) != i:
                raise ValueError(f"Document ids out of order at position {i}")
            store.add(item["title"], item.get("categories", ""), item.get("body", ""))
        return store
