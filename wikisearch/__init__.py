"""Positional index and BM25 search engine for Jeopardy questions over Wikipedia pages."""

from .document_store import Document, DocumentStore
from .evaluation import RankStatistics, evaluate_queries, find_answer_rank
from .index_builder import build_index, build_index_from_directory, load_index, save_index
from .posting import Posting, PositionalIndex
from .query import FieldMatchClause, PhraseClause, Query, QueryBuilder, TermClause
from .searcher import ScoredResult, SearchEngine, SearchExecutor
from .similarity import BM25Similarity
from .tokenizer import TextNormalizer
