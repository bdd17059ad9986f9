"""
Text normalization shared by the indexer and the query builder.
Tokenizes on word characters, strips possessives, lowercases, removes English
stop words and applies the Porter stemmer.

The same TextNormalizer instance must be used to build the index and to build
queries against it, otherwise terms silently stop matching.
"""

import re

from nltk.stem import PorterStemmer
from nltk.tokenize import RegexpTokenizer

# Classic English stop set
ENGLISH_STOP_WORDS = frozenset([
    "a", "an", "and", "are", "as", "at", "be", "but", "by", "for", "if",
    "in", "into", "is", "it", "no", "not", "of", "on", "or", "such", "that",
    "the", "their", "then", "there", "these", "they", "this", "to", "was",
    "will", "with",
])

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_POSSESSIVE = re.compile(r"['’]s$")
_WORD_TOKENIZER = RegexpTokenizer(r"\w+(?:['’]\w+)*")


def strip_control_chars(text: str) -> str:
    """Remove control characters (including newlines) from text."""
    return _CONTROL_CHARS.sub("", text)


def tokenize(text: str) -> list[str]:
    """
    Split text into lowercase word tokens with possessive 's removed.
    Control characters act as separators.
    """
    if not text:
        return []
    text = _CONTROL_CHARS.sub(" ", text)
    tokens = []
    for raw in _WORD_TOKENIZER.tokenize(text.lower()):
        token = _POSSESSIVE.sub("", raw)
        if token:
            tokens.append(token)
    return tokens


class TextNormalizer:
    """
    Turns raw text into the ordered sequence of index terms.

    Deterministic: the same text always produces the same terms. Positions in
    the index are indexes into this sequence, so removed stop words leave no
    gap.
    """

    def __init__(
        self,
        *,
        stem: bool = True,
        stopwords: frozenset[str] | set[str] | None = ENGLISH_STOP_WORDS,
    ) -> None:
        self.stem = stem
        self.stopwords = frozenset(stopwords or ())
        self._stemmer = PorterStemmer() if stem else None

    def normalize(self, text: str | None) -> list[str]:
        """Return the normalized terms for text; empty or None gives []."""
        if not text:
            return []
        terms = [t for t in tokenize(text) if t not in self.stopwords]
        if self._stemmer is not None:
            terms = [self._stemmer.stem(t) for t in terms]
        return terms

    def settings(self) -> dict:
        """JSON-serializable configuration; equal settings normalize identically."""
        return {"stem": self.stem, "stopwords": sorted(self.stopwords)}

    @classmethod
    def from_settings(cls, settings: dict) -> "TextNormalizer":
        return cls(stem=bool(settings["stem"]), stopwords=frozenset(settings["stopwords"]))

    def __repr__(self) -> str:
        return f"TextNormalizer(stem={self.stem}, stopwords={len(self.stopwords)})"
