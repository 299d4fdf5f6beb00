from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class QuestionRecord:
    """Parsed question: search text plus ranked accepted answers."""

    query: str
    candidate_answers: tuple[str, ...]


@dataclass(slots=True)
class RetrievalResult:
    """Answer field of the single top hit returned for one query."""

    retrieved_answer: str
    source_query: str


@dataclass(slots=True)
class ScoreState:
    """Running counters mutated by the evaluator, read by the reporter."""

    answered_right: int = 0
    answered_total: int = 0
    sum_reciprocal_rank: float = 0.0
    match_log: list[tuple[str, str]] = field(default_factory=list)
