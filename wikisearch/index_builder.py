"""
Index builder: parses wiki dump files and constructs the positional index
and document store in a single pass. Also saves/loads a built index as JSON.

Wiki file format, one page after another:
    [[Page Title]]
    CATEGORIES: Category one, Category two
    ==Sub heading==
    [[File:alt text of an attachment]]
    body text ...
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Iterator, NamedTuple

from .document_store import DocumentStore
from .posting import PositionalIndex
from .tokenizer import TextNormalizer

logger = logging.getLogger(__name__)

CATEGORIES_PREFIX = "CATEGORIES:"
ATTACHMENT_PREFIX = "[[File:"

INDEX_FORMAT_VERSION = 1


class WikiPage(NamedTuple):
    title: str
    categories: str
    body: str


def _is_attachment(line: str) -> bool:
    return line.startswith(ATTACHMENT_PREFIX)


def _is_title(line: str) -> bool:
    return not _is_attachment(line) and line.startswith("[[") and line.endswith("]]")


def _is_category_list(line: str) -> bool:
    return line.startswith(CATEGORIES_PREFIX)


def _is_sub_heading(line: str) -> bool:
    return line.startswith("=") and line.endswith("=")


def parse_wiki_lines(lines: Iterable[str]) -> Iterator[WikiPage]:
    """Yield one WikiPage per [[Title]] section of lines."""
    title: str | None = None
    categories = ""
    body: list[str] = []

    for raw in lines:
        line = raw.strip()
        if not line:
            continue

        if _is_title(line):
            if title is not None:
                yield WikiPage(title, categories, "\n".join(body))
            title = line[2:-2].strip()
            categories = ""
            body = []
            continue

        if title is None:
            logger.debug("Skipping line outside of any page: %.40s", line)
            continue

        if _is_category_list(line):
            categories = line[len(CATEGORIES_PREFIX):].strip()
            continue

        if _is_sub_heading(line):
            line = line.replace("=", "").strip()
        elif _is_attachment(line):
            line = line[len(ATTACHMENT_PREFIX):]
            if line.endswith("]]"):
                line = line[:-2]
            line = line.strip()

        if line:
            body.append(line)

    if title is not None:
        yield WikiPage(title, categories, "\n".join(body))


def iter_wiki_pages(filepath: Path) -> Iterator[WikiPage]:
    """Parse every page in one wiki file."""
    with open(filepath, "r", encoding="utf-8") as f:
        yield from parse_wiki_lines(f)


def iter_wiki_directory(wiki_dir: Path) -> Iterator[WikiPage]:
    """
    Parse every file of a wiki directory, in sorted filename order so that
    doc ids are the same on every build.
    """
    wiki_dir = Path(wiki_dir)
    if not wiki_dir.is_dir():
        raise FileNotFoundError(f"Wiki directory not found: {wiki_dir}")
    for filepath in sorted(p for p in wiki_dir.iterdir() if p.is_file()):
        logger.info("Indexing file: %s", filepath.name)
        yield from iter_wiki_pages(filepath)


def build_index(
    pages: Iterable[WikiPage],
    normalizer: TextNormalizer | None = None,
) -> tuple[PositionalIndex, DocumentStore]:
    """
    Build the positional index and document store from parsed pages.
    Doc ids are assigned 0, 1, 2, ... in input order.
    Returns (index, store).
    """
    index = PositionalIndex(normalizer or TextNormalizer())
    store = DocumentStore()
    for page in pages:
        doc = store.add(page.title, page.categories, page.body)
        index.add_document(doc)
    logger.info("Indexed %d documents", len(store))
    return index, store


def build_index_from_directory(
    wiki_dir: Path,
    normalizer: TextNormalizer | None = None,
) -> tuple[PositionalIndex, DocumentStore]:
    return build_index(iter_wiki_directory(wiki_dir), normalizer)


def save_index(path: Path, index: PositionalIndex, store: DocumentStore) -> None:
    """
    Write the documents, the normalizer settings and every field's postings
    to one JSON file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "version": INDEX_FORMAT_VERSION,
        "normalizer": index.normalizer.settings(),
        "documents": store.to_list(),
        "index": index.to_dict(),
    }
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False)
    logger.info("Index saved to %s", path)


def load_index(
    path: Path,
    normalizer: TextNormalizer | None = None,
) -> tuple[PositionalIndex, DocumentStore]:
    """
    Load an index written by save_index. Without a normalizer, one is
    rebuilt from the saved settings; a given normalizer must be configured
    like the one the index was built with (ValueError otherwise).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Index file not found: {path}")
    with open(path, "r", encoding="utf-8") as f:
        payload = json.load(f)
    if not isinstance(payload, dict) or payload.get("version") != INDEX_FORMAT_VERSION:
        version = payload.get("version") if isinstance(payload, dict) else None
        raise ValueError(f"Unsupported index format version: {version!r}")

    try:
        saved = TextNormalizer.from_settings(payload["normalizer"])
        if normalizer is None:
            normalizer = saved
        elif normalizer.settings() != saved.settings():
            raise ValueError(
                f"Index {path} was built with {saved!r}, cannot search it with {normalizer!r}"
            )
        store = DocumentStore.from_list(payload["documents"])
        index = PositionalIndex.from_dict(payload["index"], normalizer)
    except (KeyError, TypeError) as e:
        raise ValueError(f"Malformed index file {path}: missing or invalid {e}") from e

    if index.total_documents() != len(store):
        raise ValueError(
            f"Index holds {index.total_documents()} documents but the store has {len(store)}"
        )
    return index, store
