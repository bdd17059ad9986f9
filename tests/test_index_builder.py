"""Tests for wiki parsing, the batch build and JSON persistence."""

import json

import pytest

from wikisearch.index_builder import (
    WikiPage,
    build_index,
    build_index_from_directory,
    iter_wiki_directory,
    load_index,
    parse_wiki_lines,
    save_index,
)
from wikisearch.searcher import SearchEngine
from wikisearch.tokenizer import TextNormalizer

WIKI_TEXT = """\
stray text before any page

[[Washington Post]]
CATEGORIES: Newspapers, Washington D.C.
The Washington Post is an American newspaper.
==History==
[[File:Post building.jpg|The building]]
It was founded in 1877.

[[New York City]]
CATEGORIES: Cities
New York City is big.
"""


def test_parse_wiki_lines_splits_pages():
    pages = list(parse_wiki_lines(WIKI_TEXT.splitlines()))

    assert [p.title for p in pages] == ["Washington Post", "New York City"]
    assert pages[0].categories == "Newspapers, Washington D.C."
    assert pages[0].body == "\n".join([
        "The Washington Post is an American newspaper.",
        "History",
        "Post building.jpg|The building",
        "It was founded in 1877.",
    ])
    assert pages[1] == WikiPage("New York City", "Cities", "New York City is big.")


def test_parse_wiki_lines_page_without_categories():
    pages = list(parse_wiki_lines(["[[Lonely]]", "just text"]))
    assert pages == [WikiPage("Lonely", "", "just text")]


def test_parse_wiki_lines_empty_input():
    assert list(parse_wiki_lines([])) == []
    assert list(parse_wiki_lines(["", "no title here"])) == []


def test_iter_wiki_directory_is_sorted(tmp_path):
    (tmp_path / "b.txt").write_text("[[Second]]\nbody b\n", encoding="utf-8")
    (tmp_path / "a.txt").write_text("[[First]]\nbody a\n", encoding="utf-8")

    assert [p.title for p in iter_wiki_directory(tmp_path)] == ["First", "Second"]


def test_iter_wiki_directory_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        list(iter_wiki_directory(tmp_path / "missing"))


def test_build_index_from_directory(tmp_path, normalizer):
    (tmp_path / "pages.txt").write_text(WIKI_TEXT, encoding="utf-8")
    index, store = build_index_from_directory(tmp_path, normalizer)

    assert len(store) == 2
    assert index.total_documents() == 2
    assert store.get(0).title == "Washington Post"
    assert index.postings("title", "washington")[0].doc_id == 0


def test_build_index_assigns_ids_in_order(corpus, normalizer):
    index, store = build_index(corpus, normalizer)
    assert [doc.doc_id for doc in store] == list(range(len(corpus)))
    assert [doc.title for doc in store] == [page.title for page in corpus]


def test_save_and_load_preserve_search(tmp_path, built, normalizer):
    index, store = built
    path = tmp_path / "data" / "index.json"
    save_index(path, index, store)

    loaded_index, loaded_store = load_index(path, normalizer)
    assert loaded_store.to_list() == store.to_list()
    assert loaded_index.total_documents() == index.total_documents()
    for name in index.fields:
        assert loaded_index.average_field_length(name) == index.average_field_length(name)

    clue, category = "This newspaper is American.", "newspapers"
    assert SearchEngine(loaded_index, loaded_store).search(clue, category) == SearchEngine(index, store).search(
        clue, category
    )


def test_load_index_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_index(tmp_path / "nope.json")


def test_load_index_rejects_unknown_version(tmp_path):
    path = tmp_path / "index.json"
    path.write_text(json.dumps({"version": 99}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_index(path)


def test_load_index_restores_saved_normalizer(tmp_path):
    pages = [WikiPage("Washington Post", "newspapers", "Daily newspapers publishing stories.")]
    index, store = build_index(pages, TextNormalizer(stem=False))
    path = tmp_path / "index.json"
    save_index(path, index, store)

    loaded_index, loaded_store = load_index(path)

    assert loaded_index.normalizer.settings() == index.normalizer.settings()
    assert not loaded_index.normalizer.stem
    clue, category = "newspapers publishing", "newspapers"
    expected = SearchEngine(index, store).search(clue, category)
    assert expected
    assert SearchEngine(loaded_index, loaded_store).search(clue, category) == expected


def test_load_index_rejects_different_normalizer(tmp_path, built):
    index, store = built
    path = tmp_path / "index.json"
    save_index(path, index, store)

    with pytest.raises(ValueError, match="was built with"):
        load_index(path, TextNormalizer(stem=False))
    assert load_index(path, TextNormalizer())[1].to_list() == store.to_list()


@pytest.mark.parametrize("missing", ["documents", "index", "normalizer"])
def test_load_index_malformed_payload(tmp_path, built, missing):
    index, store = built
    path = tmp_path / "index.json"
    save_index(path, index, store)
    payload = json.loads(path.read_text(encoding="utf-8"))
    del payload[missing]
    path.write_text(json.dumps(payload), encoding="utf-8")

    with pytest.raises(ValueError, match="Malformed index file"):
        load_index(path)
