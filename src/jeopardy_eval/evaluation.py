from __future__ import annotations

from collections.abc import Sequence
import logging

from .schema import QuestionRecord, RetrievalResult, ScoreState

logger = logging.getLogger(__name__)


def match_rank(retrieved_answer: str, candidate_answers: Sequence[str]) -> int | None:
    """Return the 1-based rank of the first candidate equal to the retrieved answer.

    Comparison is exact and case-sensitive on trimmed text.
    """
    retrieved = retrieved_answer.strip()
    for rank, candidate in enumerate(candidate_answers, start=1):
        if candidate.strip() == retrieved:
            return rank
    return None


def evaluate_answer(
    state: ScoreState,
    result: RetrievalResult | None,
    record: QuestionRecord,
) -> int | None:
    """Score one retrieval against the record's ranked candidates.

    A hit adds `1 / rank` to the reciprocal-rank sum and is appended to the
    match log; a miss (including no retrieval result) only counts towards
    the total.

    Args:
        state: Running score state, mutated in place.
        result: Top-1 retrieval for the record, or `None` when the index
            returned no hits.
        record: Parsed question with its ordered candidate answers.

    Returns:
        The matched 1-based rank, or `None` on a miss.
    """
    rank = None
    if result is not None:
        rank = match_rank(result.retrieved_answer, record.candidate_answers)

    if rank is not None:
        retrieved = result.retrieved_answer.strip()
        state.answered_right += 1
        state.sum_reciprocal_rank += 1.0 / rank
        state.match_log.append((retrieved, record.candidate_answers[rank - 1]))
        logger.debug("Hit at rank %d for %r", rank, record.query)
    else:
        logger.debug("Miss for %r", record.query)

    state.answered_total += 1
    return rank
