"""Shared fixtures: a tiny wiki corpus and the engine built over it."""

import pytest

from wikisearch.index_builder import WikiPage, build_index
from wikisearch.searcher import SearchEngine
from wikisearch.tokenizer import TextNormalizer

CORPUS = [
    WikiPage(
        "Washington Post",
        "newspapers",
        "The Washington Post is an American newspaper.",
    ),
    WikiPage(
        "The New York Times",
        "Newspapers, New York City",
        "The New York Times is a daily newspaper based in New York City. It covers world news.",
    ),
    WikiPage(
        "New York City",
        "Cities, New York",
        "New York City is the most populous city in the United States.\nThe city has many newspapers.",
    ),
    WikiPage("Empty Page", "", ""),
]


@pytest.fixture
def normalizer():
    return TextNormalizer()


@pytest.fixture
def plain_normalizer():
    """No stemming and no stop words, so terms are just lowercased words."""
    return TextNormalizer(stem=False, stopwords=())


@pytest.fixture
def corpus():
    return list(CORPUS)


@pytest.fixture
def built(corpus, normalizer):
    return build_index(corpus, normalizer)


@pytest.fixture
def engine(built):
    index, store = built
    return SearchEngine(index, store)
