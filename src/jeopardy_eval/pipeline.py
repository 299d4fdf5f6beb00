from __future__ import annotations

from collections.abc import Iterable
from contextlib import closing
import logging
from pathlib import Path
from typing import Callable

from .evaluation import evaluate_answer
from .io_utils import iter_question_file
from .retrieval import DEFAULT_ANSWER_FIELD, DEFAULT_SEARCH_FIELD, AnswerRetriever
from .schema import QuestionRecord, RetrievalResult, ScoreState
from .tracing import (
    ATTR_QUESTIONS_RIGHT,
    ATTR_QUESTIONS_TOTAL,
    get_tracer,
    traced_retrieval,
)

logger = logging.getLogger(__name__)

RetrieveFn = Callable[[str], RetrievalResult | None]


def run_evaluation(
    records: Iterable[QuestionRecord],
    retrieve_fn: RetrieveFn,
    state: ScoreState | None = None,
) -> ScoreState:
    """Retrieve and score each record in turn, stopping on the first error.

    Args:
        records: Parsed questions; consumed lazily, one at a time.
        retrieve_fn: Callable returning the top-1 retrieval for a query.
        state: Existing score state to continue; a fresh one when omitted.

    Returns:
        The score state after every record has been evaluated.
    """
    state = state if state is not None else ScoreState()
    tracer = get_tracer("jeopardy-eval.pipeline")

    with tracer.start_as_current_span("evaluation-run") as span:
        for record in records:
            result = retrieve_fn(record.query)
            evaluate_answer(state, result, record)
        span.set_attribute(ATTR_QUESTIONS_TOTAL, state.answered_total)
        span.set_attribute(ATTR_QUESTIONS_RIGHT, state.answered_right)

    logger.info("Evaluated %d questions, %d answered right", state.answered_total, state.answered_right)
    return state


def evaluate_question_file(
    questions_path: str | Path,
    index_dir: str | Path,
    search_field: str = DEFAULT_SEARCH_FIELD,
    answer_field: str = DEFAULT_ANSWER_FIELD,
) -> ScoreState:
    """Run a full evaluation of a question file against an on-disk index.

    The index and the question file are opened once for the run and closed
    on every exit path.
    """
    tracer = get_tracer("jeopardy-eval.retrieval")
    with AnswerRetriever(index_dir, search_field=search_field, answer_field=answer_field) as retriever:
        retrieve = traced_retrieval(retriever.retrieve, tracer)
        with closing(iter_question_file(questions_path)) as records:
            return run_evaluation(records, retrieve)
