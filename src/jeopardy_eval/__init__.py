"""Top-1 answer evaluation for trivia questions over a full-text search index."""

from .schema import QuestionRecord, RetrievalResult, ScoreState

__all__ = ["QuestionRecord", "RetrievalResult", "ScoreState"]
