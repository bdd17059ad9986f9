"""
Reader for the Jeopardy questions file.

The file holds one question per 4-line block:
    CATEGORY
    clue text
    expected answer
    (blank line)
"""

import logging
from pathlib import Path
from typing import Iterator, NamedTuple

from .tokenizer import strip_control_chars

logger = logging.getLogger(__name__)


class QuestionRecord(NamedTuple):
    category: str
    clue: str
    answer: str


def parse_questions(lines: list[str]) -> Iterator[QuestionRecord]:
    """Yield a QuestionRecord for every complete block of lines."""
    for start in range(0, len(lines), 4):
        block = lines[start:start + 3]
        if len(block) < 3:
            if any(line.strip() for line in block):
                logger.warning("Ignoring incomplete question block at line %d", start + 1)
            return
        category, clue, answer = block
        yield QuestionRecord(
            category=strip_control_chars(category),
            clue=strip_control_chars(clue),
            answer=answer.rstrip("\r\n"),
        )


def read_queries(path: Path) -> Iterator[QuestionRecord]:
    """Read all questions from path (FileNotFoundError if it does not exist)."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Queries file not found: {path}")
    lines = path.read_text(encoding="utf-8").splitlines()
    return parse_questions(lines)
