"""Run-fatal error taxonomy for question evaluation."""
from __future__ import annotations


class EvaluationError(Exception):
    """Base class for failures that abort an evaluation run."""


class MalformedInputError(EvaluationError):
    """Question file does not contain a complete four-line group."""


class IndexUnavailableError(EvaluationError):
    """Search index cannot be opened or lacks the configured fields."""


class QuerySyntaxError(EvaluationError):
    """Escaped query text was still rejected by the query parser."""


class NoDataError(EvaluationError, ZeroDivisionError):
    """Aggregate metric requested for a run that processed no questions."""
