from __future__ import annotations

from collections.abc import Iterable, Iterator
import logging
from pathlib import Path

from .errors import MalformedInputError
from .schema import QuestionRecord

logger = logging.getLogger(__name__)

LINES_PER_RECORD = 4
ANSWER_DELIMITER = "|"


def _strip_terminator(line: str) -> str:
    return line.rstrip("\r\n")


def build_record(category: str, clue: str, answers: str) -> QuestionRecord:
    """Build one record from the category, clue, and pipe-delimited answers lines."""
    category = category.replace("\r", "").replace("\n", "")
    candidates = tuple(answer.strip() for answer in answers.split(ANSWER_DELIMITER))
    return QuestionRecord(query=f"{clue} {category}", candidate_answers=candidates)


def parse_questions(lines: Iterable[str]) -> Iterator[QuestionRecord]:
    """Lazily parse question-file lines into `QuestionRecord` values.

    Each record consumes exactly four lines: category, clue, pipe-delimited
    answers, and a blank separator.

    Args:
        lines: Raw lines, with or without trailing line terminators.

    Yields:
        One `QuestionRecord` per complete four-line group, in file order.

    Raises:
        MalformedInputError: If a group is cut short or its separator line
            is not blank.
    """
    iterator = iter(lines)
    line_number = 0
    while True:
        group: list[str] = []
        for line in iterator:
            group.append(_strip_terminator(line))
            if len(group) == LINES_PER_RECORD:
                break

        if not group:
            return

        start = line_number + 1
        line_number += len(group)
        if len(group) < LINES_PER_RECORD:
            raise MalformedInputError(
                f"Incomplete question group starting at line {start}: "
                f"expected {LINES_PER_RECORD} lines, found {len(group)}"
            )

        category, clue, answers, separator = group
        if separator.strip():
            raise MalformedInputError(
                f"Question group starting at line {start} is not followed by a blank line "
                f"(line {line_number}: {separator!r})"
            )
        yield build_record(category, clue, answers)


def iter_question_file(path: str | Path) -> Iterator[QuestionRecord]:
    """Stream records from a question file, closing it on every exit path."""
    source = Path(path)
    try:
        file_handle = source.open("r", encoding="utf-8", newline="")
    except OSError as exc:
        raise MalformedInputError(f"Cannot read question file {source}: {exc}") from exc

    logger.info("Reading questions from %s", source)
    with file_handle:
        try:
            yield from parse_questions(file_handle)
        except UnicodeDecodeError as exc:
            raise MalformedInputError(f"Question file {source} is not valid UTF-8: {exc}") from exc
