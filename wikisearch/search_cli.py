"""
Query engine for the Jeopardy questions.

Builds (or loads) the positional index, runs every question of the queries
file through the clue + category search, reports the position at which the
expected answer was found and prints hits per position, hits in the top K and
P@1. With --interactive, reads category/clue pairs from the console instead.

Usage (from repo root):
    python -m wikisearch.search_cli \
        --wiki-dir data/wiki-data \
        --queries data/queries.txt
    python -m wikisearch.search_cli --index data/index.json --interactive
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, List

from .evaluation import PREDICATES, QuestionOutcome, RankStatistics, evaluate_queries
from .index_builder import build_index_from_directory, load_index
from .query import QueryBuilder
from .query_source import read_queries
from .searcher import SEARCH_HITS_PER_PAGE, SearchEngine
from .similarity import DEFAULT_B, DEFAULT_K1, BM25Similarity
from .tokenizer import ENGLISH_STOP_WORDS, TextNormalizer


def print_outcomes(outcomes: List[QuestionOutcome]) -> None:
    print("---------------QUERY RESULTS--------------------------")
    for outcome in outcomes:
        print(f"\nAnswer to Question {outcome.number}: {outcome.question.answer}")
        if outcome.rank:
            print(f"Hit at position: {outcome.rank}")


def print_statistics(stats: RankStatistics) -> None:
    print("---------------STATISTICS-----------------------------")
    for position in range(1, stats.top_k + 1):
        print(f"Docs in position {position}: {stats.hits_at(position)}")
    print(f"\nHits in top {stats.top_k} Documents: {stats.hits_in_top_k}")
    print(f"P@1: {stats.precision_at_one:.2f}")


def run_search_loop(engine: SearchEngine, top_k: int = SEARCH_HITS_PER_PAGE) -> None:
    """
    Interactive command-line search loop.
    """
    print(f"Loaded index of {len(engine.store)} documents.")
    print("Enter a category and a clue. Empty clue or Ctrl+C to exit.")
    while True:
        try:
            category = input("category> ").strip()
            clue = input("clue> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break
        if not clue:
            break

        ranked = engine.search(clue, category, top_k)
        if not ranked:
            print("No documents matched the query.")
            continue
        print(f"Top {len(ranked)} results:")
        for rank, (title, score) in enumerate(ranked, start=1):
            print(f"{rank:2d}. score={score:.4f}  {title}")


def _load_engine(args: argparse.Namespace) -> SearchEngine:
    normalizer = TextNormalizer(
        stem=not args.no_stem,
        stopwords=() if args.keep_stopwords else ENGLISH_STOP_WORDS,
    )
    if args.index is not None:
        # a saved index brings its own normalizer; explicit flags must agree with it
        explicit = args.no_stem or args.keep_stopwords
        index, store = load_index(args.index, normalizer if explicit else None)
    else:
        print("---------------BUILDING INDEX-------------------------")
        index, store = build_index_from_directory(args.wiki_dir, normalizer)
        print("---------------INDEX BUILT SUCCESSFULLY---------------\n")
    return SearchEngine(
        index,
        store,
        QueryBuilder(index.normalizer),
        BM25Similarity(k1=args.k1, b=args.b),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Jeopardy question answering over Wikipedia pages.")
    source = parser.add_mutually_exclusive_group()
    source.add_argument(
        "--index",
        type=Path,
        default=None,
        help="Path to a JSON index written by build_index.py.",
    )
    source.add_argument(
        "--wiki-dir",
        type=Path,
        default=Path("data/wiki-data"),
        help="Directory of wiki files to index in memory (default: data/wiki-data).",
    )
    parser.add_argument(
        "--queries",
        type=Path,
        default=Path("data/queries.txt"),
        help="Path to the questions file.",
    )
    parser.add_argument("--top", type=int, default=SEARCH_HITS_PER_PAGE, help="Number of results per question.")
    parser.add_argument("--k1", type=float, default=DEFAULT_K1, help="BM25 term-frequency saturation.")
    parser.add_argument("--b", type=float, default=DEFAULT_B, help="BM25 length normalization.")
    parser.add_argument(
        "--match",
        choices=sorted(PREDICATES),
        default="pattern",
        help="How result titles are compared with expected answers.",
    )
    parser.add_argument("--no-stem", action="store_true", help="Disable Porter stemming.")
    parser.add_argument("--keep-stopwords", action="store_true", help="Do not remove stop words.")
    parser.add_argument("--interactive", action="store_true", help="Read clues from the console.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log progress.")
    return parser


def main(argv: Iterable[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.top <= 0:
        print("--top must be a positive integer.")
        return 1

    try:
        engine = _load_engine(args)
        if args.interactive:
            run_search_loop(engine, top_k=args.top)
            return 0
        stats, outcomes = evaluate_queries(
            engine,
            read_queries(args.queries),
            top_k=args.top,
            predicate=PREDICATES[args.match],
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1

    print_outcomes(outcomes)
    print_statistics(stats)
    return 0


if __name__ == "__main__":
    sys.exit(main())
