"""Console entry point: evaluate a question file against a search index."""
from __future__ import annotations

from typing import Optional

import typer

from .errors import EvaluationError
from .logging_config import setup_logging
from .pipeline import evaluate_question_file
from .report import render_report
from .settings import load_settings
from .tracing import configure_tracing

app = typer.Typer(
    name="jeopardy-eval",
    help="Score top-1 answers from a full-text index against trivia questions.",
    add_completion=False,
)


@app.command()
def evaluate(
    questions: Optional[str] = typer.Option(None, "--questions", "-q", help="Question file (4-line groups)"),
    index: Optional[str] = typer.Option(None, "--index", "-i", help="Directory of a built search index"),
    search_field: Optional[str] = typer.Option(None, "--search-field", help="Index field matched against queries"),
    answer_field: Optional[str] = typer.Option(None, "--answer-field", help="Stored index field holding the answer"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level written to stderr"),
    trace_endpoint: Optional[str] = typer.Option(None, "--trace-endpoint", help="OTLP HTTP endpoint for traces"),
):
    """
    Run the evaluation and print precision, MRR, and error analysis.
    """
    index_settings, paths, run_settings = load_settings()

    try:
        setup_logging(log_level or run_settings.log_level)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--log-level") from exc

    endpoint = trace_endpoint or run_settings.trace_endpoint
    if endpoint:
        configure_tracing(endpoint=endpoint)

    try:
        state = evaluate_question_file(
            questions or paths.questions_path,
            index or paths.index_dir,
            search_field=search_field or index_settings.search_field,
            answer_field=answer_field or index_settings.answer_field,
        )
    except EvaluationError as exc:
        typer.echo(f"Error occurred: {exc}")
        raise typer.Exit(code=1)

    typer.echo(render_report(state))
    typer.echo("Program completed, Thank you.")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
