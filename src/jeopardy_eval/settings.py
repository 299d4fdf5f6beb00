from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

from .retrieval import DEFAULT_ANSWER_FIELD, DEFAULT_SEARCH_FIELD


@dataclass(slots=True)
class IndexSettings:
    """Field names used when querying the search index."""

    search_field: str = DEFAULT_SEARCH_FIELD
    answer_field: str = DEFAULT_ANSWER_FIELD


@dataclass(slots=True)
class Paths:
    """Input locations for an evaluation run."""

    index_dir: str = "data/index"
    questions_path: str = "data/questions.txt"


@dataclass(slots=True)
class RunSettings:
    """Logging and tracing options."""

    log_level: str = "WARNING"
    trace_endpoint: str | None = None


def load_settings() -> tuple[IndexSettings, Paths, RunSettings]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple containing index field settings, input paths, and run options.
    """
    load_dotenv()
    return (
        IndexSettings(
            search_field=os.getenv("JEOPARDY_SEARCH_FIELD", DEFAULT_SEARCH_FIELD),
            answer_field=os.getenv("JEOPARDY_ANSWER_FIELD", DEFAULT_ANSWER_FIELD),
        ),
        Paths(
            index_dir=os.getenv("JEOPARDY_INDEX_DIR", "data/index"),
            questions_path=os.getenv("JEOPARDY_QUESTIONS_PATH", "data/questions.txt"),
        ),
        RunSettings(
            log_level=os.getenv("JEOPARDY_LOG_LEVEL", "WARNING"),
            trace_endpoint=os.getenv("JEOPARDY_TRACE_ENDPOINT") or None,
        ),
    )
