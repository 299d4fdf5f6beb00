"""Shared pytest fixtures for jeopardy_eval unit tests."""
from __future__ import annotations

from pathlib import Path

import pytest
from whoosh.analysis import StandardAnalyzer
from whoosh.fields import ID, TEXT, Schema
from whoosh.index import create_in

from jeopardy_eval.schema import QuestionRecord, RetrievalResult

INDEX_DOCUMENTS = [
    {"title": "Mars", "tokens": "Mars is the red planet, fourth from the sun. Astronomy of the red dust."},
    {"title": "Jupiter", "tokens": "Jupiter is the largest planet, a gas giant with a great spot."},
    {"title": "Pluto", "tokens": "Pluto is a dwarf planet in the Kuiper belt, demoted in 2006."},
    {"title": "George Washington", "tokens": "First president of the United States, general of the revolution."},
]


def build_index(index_dir: Path, documents: list[dict]) -> Path:
    """Write a small on-disk index with a searched `tokens` and stored `title` field."""
    index_dir.mkdir(parents=True, exist_ok=True)
    schema = Schema(
        title=ID(stored=True),
        tokens=TEXT(analyzer=StandardAnalyzer()),
    )
    index = create_in(str(index_dir), schema)
    writer = index.writer()
    for document in documents:
        writer.add_document(**document)
    writer.commit()
    index.close()
    return index_dir


@pytest.fixture()
def index_dir(tmp_path) -> Path:
    return build_index(tmp_path / "index", INDEX_DOCUMENTS)


@pytest.fixture()
def question_text() -> str:
    return (
        "ASTRONOMY\n"
        "This planet is red\n"
        "Mars|Jupiter\n"
        "\n"
        "U.S. HISTORY\n"
        "First president of the United States\n"
        "George Washington\n"
        "\n"
    )


@pytest.fixture()
def question_file(tmp_path, question_text) -> Path:
    path = tmp_path / "questions.txt"
    path.write_text(question_text, encoding="utf-8")
    return path


@pytest.fixture()
def sample_record() -> QuestionRecord:
    return QuestionRecord(query="This planet is red ASTRONOMY", candidate_answers=("Mars", "Jupiter"))


@pytest.fixture()
def sample_result() -> RetrievalResult:
    return RetrievalResult(retrieved_answer="Mars", source_query="This planet is red ASTRONOMY")


@pytest.fixture()
def make_index(tmp_path):
    """Factory building an extra on-disk index under `tmp_path`."""

    def _make(name: str, documents: list[dict]) -> Path:
        return build_index(tmp_path / name, documents)

    return _make
