"""Tests for pipeline.py — the sequential parse/retrieve/evaluate driver."""
from __future__ import annotations

import pytest

from jeopardy_eval import pipeline
from jeopardy_eval.errors import IndexUnavailableError, MalformedInputError, QuerySyntaxError
from jeopardy_eval.io_utils import parse_questions
from jeopardy_eval.pipeline import evaluate_question_file, run_evaluation
from jeopardy_eval.report import compute_scores
from jeopardy_eval.retrieval import AnswerRetriever
from jeopardy_eval.schema import QuestionRecord, RetrievalResult, ScoreState

RED_PLANET = ["ASTRONOMY", "This planet is red"]


def _fixed_retriever(answer: str | None):
    calls: list[str] = []

    def retrieve(query: str) -> RetrievalResult | None:
        calls.append(query)
        if answer is None:
            return None
        return RetrievalResult(retrieved_answer=answer, source_query=query)

    retrieve.calls = calls
    return retrieve


def _records(answers_line: str) -> list[QuestionRecord]:
    return list(parse_questions(RED_PLANET + [answers_line, ""]))


# ---------------------------------------------------------------------------
# run_evaluation (Scenarios A-D with a stub retriever)
# ---------------------------------------------------------------------------

class TestRunEvaluation:
    def test_scenario_a_rank_1_hit(self):
        state = run_evaluation(_records("Mars|Jupiter"), _fixed_retriever("Mars"))
        summary = compute_scores(state)
        assert state.answered_right == 1
        assert state.answered_total == 1
        assert summary.precision == pytest.approx(1.0)
        assert summary.mrr == pytest.approx(1.0)
        assert len(state.match_log) == 1

    def test_scenario_b_rank_2_hit(self):
        state = run_evaluation(_records("Jupiter|Mars"), _fixed_retriever("Mars"))
        assert state.sum_reciprocal_rank == pytest.approx(0.5)
        assert compute_scores(state).mrr == pytest.approx(0.5)

    def test_scenario_c_wrong_answer(self):
        state = run_evaluation(_records("Mars|Jupiter"), _fixed_retriever("Pluto"))
        assert state.answered_right == 0
        assert state.answered_total == 1
        assert compute_scores(state).precision == 0.0

    def test_scenario_d_no_hits(self):
        state = run_evaluation(_records("Mars|Jupiter"), _fixed_retriever(None))
        assert state == ScoreState(answered_right=0, answered_total=1, sum_reciprocal_rank=0.0, match_log=[])

    def test_queries_passed_to_retriever(self):
        retrieve = _fixed_retriever("Mars")
        run_evaluation(_records("Mars"), retrieve)
        assert retrieve.calls == ["This planet is red ASTRONOMY"]

    def test_zero_records(self):
        state = run_evaluation([], _fixed_retriever("Mars"))
        assert state == ScoreState()

    def test_continues_existing_state(self):
        state = ScoreState(answered_right=1, answered_total=1, sum_reciprocal_rank=1.0)
        run_evaluation(_records("Mars"), _fixed_retriever("Mars"), state=state)
        assert state.answered_total == 2
        assert state.answered_right == 2

    def test_parse_error_stops_run(self):
        retrieve = _fixed_retriever("Mars")
        records = parse_questions(RED_PLANET + ["Mars", "", "BROKEN"])
        with pytest.raises(MalformedInputError):
            run_evaluation(records, retrieve)
        assert len(retrieve.calls) == 1

    def test_retrieval_error_is_not_skipped(self):
        def retrieve(query: str):
            raise QuerySyntaxError("bad query")

        with pytest.raises(QuerySyntaxError):
            run_evaluation(_records("Mars"), retrieve)


# ---------------------------------------------------------------------------
# evaluate_question_file (end-to-end against a real index)
# ---------------------------------------------------------------------------

class TestEvaluateQuestionFile:
    def test_end_to_end(self, question_file, index_dir):
        state = evaluate_question_file(question_file, index_dir)
        assert state.answered_total == 2
        assert state.answered_right == 2
        assert state.sum_reciprocal_rank == pytest.approx(2.0)
        assert state.match_log == [("Mars", "Mars"), ("George Washington", "George Washington")]

    def test_rank_2_end_to_end(self, tmp_path, index_dir):
        path = tmp_path / "q.txt"
        path.write_text("ASTRONOMY\nThis planet is red\nJupiter|Mars\n\n", encoding="utf-8")
        state = evaluate_question_file(path, index_dir)
        assert compute_scores(state).mrr == pytest.approx(0.5)

    def test_no_hit_end_to_end(self, tmp_path, index_dir):
        path = tmp_path / "q.txt"
        path.write_text("OBSCURE\nzyzzyva quixotic\nMars\n\n", encoding="utf-8")
        state = evaluate_question_file(path, index_dir)
        assert state.answered_total == 1
        assert state.answered_right == 0

    def test_idempotent(self, question_file, index_dir):
        first = evaluate_question_file(question_file, index_dir)
        second = evaluate_question_file(question_file, index_dir)
        assert first == second

    def test_missing_index(self, question_file, tmp_path):
        with pytest.raises(IndexUnavailableError):
            evaluate_question_file(question_file, tmp_path / "missing")

    def test_malformed_file(self, tmp_path, index_dir):
        path = tmp_path / "q.txt"
        path.write_text("ASTRONOMY\nThis planet is red\n", encoding="utf-8")
        with pytest.raises(MalformedInputError):
            evaluate_question_file(path, index_dir)

    def test_empty_file(self, tmp_path, index_dir):
        path = tmp_path / "q.txt"
        path.write_text("", encoding="utf-8")
        assert evaluate_question_file(path, index_dir) == ScoreState()

    def test_question_file_closed_when_retrieval_fails(self, monkeypatch, question_file, index_dir):
        closed = []
        real_iter_question_file = pipeline.iter_question_file

        def tracking_iter(path):
            try:
                yield from real_iter_question_file(path)
            finally:
                closed.append(path)

        def failing_retrieve(self, query, top_k=1):
            raise QuerySyntaxError("bad query")

        monkeypatch.setattr(pipeline, "iter_question_file", tracking_iter)
        monkeypatch.setattr(AnswerRetriever, "retrieve", failing_retrieve)

        with pytest.raises(QuerySyntaxError):
            evaluate_question_file(question_file, index_dir)
        assert closed == [question_file]

    def test_question_file_closed_after_success(self, monkeypatch, question_file, index_dir):
        closed = []
        real_iter_question_file = pipeline.iter_question_file

        def tracking_iter(path):
            try:
                yield from real_iter_question_file(path)
            finally:
                closed.append(path)

        monkeypatch.setattr(pipeline, "iter_question_file", tracking_iter)
        evaluate_question_file(question_file, index_dir)
        assert closed == [question_file]
