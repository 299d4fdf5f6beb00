from __future__ import annotations

from dataclasses import dataclass

from .errors import NoDataError
from .schema import ScoreState

NOT_AVAILABLE = "N/A"


@dataclass(frozen=True, slots=True)
class ScoreSummary:
    """Final aggregate metrics; `precision` and `mrr` are `None` when no data."""

    precision: float | None
    mrr: float | None
    total: int
    correct: int
    incorrect: int


def precision(state: ScoreState) -> float:
    """Fraction of processed questions whose top hit matched a candidate."""
    if state.answered_total == 0:
        raise NoDataError("Precision is undefined: no questions were processed")
    return state.answered_right / state.answered_total


def mean_reciprocal_rank(state: ScoreState) -> float:
    """Average of `1 / rank` over processed questions, misses contributing 0."""
    if state.answered_total == 0:
        raise NoDataError("Mean reciprocal rank is undefined: no questions were processed")
    return state.sum_reciprocal_rank / state.answered_total


def compute_scores(state: ScoreState) -> ScoreSummary:
    """Aggregate a finished run without mutating its state."""
    correct = len(state.match_log)
    has_data = state.answered_total > 0
    return ScoreSummary(
        precision=precision(state) if has_data else None,
        mrr=mean_reciprocal_rank(state) if has_data else None,
        total=state.answered_total,
        correct=correct,
        incorrect=state.answered_total - correct,
    )


def _format_metric(value: float | None) -> str:
    return NOT_AVAILABLE if value is None else str(value)


def render_report(state: ScoreState) -> str:
    """Render the console summary followed by the error-analysis block.

    Only matched questions are itemized; misses appear in the counts alone.
    """
    summary = compute_scores(state)
    lines = [
        f"\tPrecision: {_format_metric(summary.precision)}",
        f"\tMean Reciprocal Rank (MRR): {_format_metric(summary.mrr)}",
        f"\tTotal Questions Processed: {summary.total}",
        "",
        "Error Analysis:",
        f"Number of Correct Answers: {summary.correct}",
        f"Number of Incorrect Answers: {summary.incorrect}",
    ]
    if summary.total == 0:
        lines.append("No questions were processed.")

    for retrieved, expected in state.match_log:
        lines.extend(
            [
                f"Question: {retrieved}",
                f"Expected Answer: {expected}",
                f"Correct Answer Provided: {retrieved}",
                "------",
            ]
        )
    return "\n".join(lines)
