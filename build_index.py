"""
Build the positional index of the Wikipedia pages and print index analytics.

Usage:
    python build_index.py --wiki-dir data/wiki-data --output data/index.json

Output:
  - data/index.json   (documents plus per-field postings with positions)
  - Analytics table printed to console
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent))

from wikisearch.index_builder import build_index_from_directory, save_index
from wikisearch.tokenizer import ENGLISH_STOP_WORDS, TextNormalizer


def main() -> None:
    base = Path(__file__).resolve().parent
    parser = argparse.ArgumentParser(description="Build the positional index of the wiki pages")
    parser.add_argument(
        "--wiki-dir",
        type=Path,
        default=base / "data" / "wiki-data",
        help="Directory of wiki files (default: data/wiki-data)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=base / "data" / "index.json",
        help="Output path for the index JSON (default: data/index.json)",
    )
    parser.add_argument("--no-stem", action="store_true", help="Disable Porter stemming")
    parser.add_argument("--keep-stopwords", action="store_true", help="Do not remove stop words")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every indexed file")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.wiki_dir.exists():
        print(f"No wiki folder found at {args.wiki_dir}.")
        sys.exit(1)

    normalizer = TextNormalizer(
        stem=not args.no_stem,
        stopwords=() if args.keep_stopwords else ENGLISH_STOP_WORDS,
    )
    print("---------------BUILDING INDEX-------------------------")
    index, store = build_index_from_directory(args.wiki_dir, normalizer)
    if len(store) == 0:
        print("No wiki pages found in the wiki folder.")
        sys.exit(1)
    save_index(args.output, index, store)
    print("---------------INDEX BUILT SUCCESSFULLY---------------")

    index_size_kb = args.output.stat().st_size / 1024

    print("\n" + "=" * 50)
    print("INDEX ANALYTICS")
    print("=" * 50)
    print()
    print("| Metric                        | Value |")
    print("|-------------------------------|-------|")
    print(f"| Number of indexed documents   | {len(store)} |")
    for name in index.fields:
        print(f"| Unique terms in {name:<13} | {len(index.field(name))} |")
    print(f"| Total size of index (KB)      | {index_size_kb:.2f} |")
    print()
    print("=" * 50)
    print(f"\nIndex saved to: {args.output}")
    print()


if __name__ == "__main__":
    main()
