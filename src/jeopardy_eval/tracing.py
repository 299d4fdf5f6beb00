"""OpenTelemetry tracing helpers for evaluation runs.

Tracing is opt-in. Without a call to :func:`configure_tracing` the global
no-op provider is used and spans are discarded.

Usage with an OTLP collector:

    from jeopardy_eval.tracing import configure_tracing, get_tracer, traced_retrieval

    configure_tracing(endpoint="http://localhost:6006/v1/traces")
    tracer = get_tracer("jeopardy-eval.retrieval")
    with AnswerRetriever("data/index") as retriever:
        retrieve = traced_retrieval(retriever.retrieve, tracer)
        result = retrieve("This planet is red ASTRONOMY")

Spans recorded per run:

- ``evaluation-run``: one per run, with question and hit totals
- ``retrieval``: one per question, with the query and the retrieved answer
"""
from __future__ import annotations

from typing import Callable

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource, SERVICE_NAME
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    ConsoleSpanExporter,
    SimpleSpanProcessor,
    SpanExporter,
)

from .schema import RetrievalResult

# ---------------------------------------------------------------------------
# Span attribute names
# ---------------------------------------------------------------------------

ATTR_INPUT_VALUE = "input.value"
ATTR_OUTPUT_VALUE = "output.value"
ATTR_RETRIEVAL_DOCUMENTS = "retrieval.documents"
ATTR_QUESTIONS_TOTAL = "evaluation.questions_total"
ATTR_QUESTIONS_RIGHT = "evaluation.questions_right"

# ---------------------------------------------------------------------------
# Provider lifecycle helpers
# ---------------------------------------------------------------------------

_provider: TracerProvider | None = None


def _otlp_exporter(endpoint: str) -> SpanExporter:
    try:
        from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
    except ImportError as exc:  # pragma: no cover
        raise ImportError(
            "Exporting to an OTLP endpoint needs opentelemetry-exporter-otlp-proto-http: "
            "pip install 'jeopardy-eval[otlp]'"
        ) from exc
    return OTLPSpanExporter(endpoint=endpoint)


def configure_tracing(
    endpoint: str | None = None,
    service_name: str = "jeopardy-eval",
    exporter: SpanExporter | None = None,
) -> TracerProvider:
    """Install a provider exporting run spans synchronously.

    An explicit *exporter* wins over *endpoint*; with neither, spans go to
    the console.
    """
    global _provider

    if exporter is None:
        exporter = _otlp_exporter(endpoint) if endpoint else ConsoleSpanExporter()

    _provider = TracerProvider(resource=Resource(attributes={SERVICE_NAME: service_name}))
    _provider.add_span_processor(SimpleSpanProcessor(exporter))
    trace.set_tracer_provider(_provider)
    return _provider


def get_tracer(name: str) -> trace.Tracer:
    provider = _provider if _provider is not None else trace.get_tracer_provider()
    return provider.get_tracer(name)


# ---------------------------------------------------------------------------
# Span-wrapping helpers
# ---------------------------------------------------------------------------


def traced_retrieval(
    retriever: Callable[..., RetrievalResult | None],
    tracer: trace.Tracer,
) -> Callable[..., RetrievalResult | None]:
    """Wrap a retriever callable so every call is recorded as a ``retrieval`` span.

    The span records:

    - ``input.value``: the query text
    - ``retrieval.documents``: 1 for a hit, 0 when nothing matched
    - ``output.value``: the retrieved answer, when there is one
    - span status: OK on success, ERROR on exception

    Args:
        retriever: Callable with signature
            ``(query: str, top_k: int = ...) -> RetrievalResult | None``.
        tracer: Tracer used for span creation.

    Returns:
        A wrapped callable with identical behaviour plus tracing.
    """

    def _wrapped(query: str, **kwargs) -> RetrievalResult | None:
        with tracer.start_as_current_span("retrieval") as span:
            span.set_attribute(ATTR_INPUT_VALUE, query)
            try:
                result = retriever(query, **kwargs)
                span.set_attribute(ATTR_RETRIEVAL_DOCUMENTS, 0 if result is None else 1)
                if result is not None:
                    span.set_attribute(ATTR_OUTPUT_VALUE, result.retrieved_answer)
                span.set_status(trace.StatusCode.OK)
                return result
            except Exception as exc:
                span.set_status(trace.StatusCode.ERROR, str(exc))
                span.record_exception(exc)
                raise

    return _wrapped
