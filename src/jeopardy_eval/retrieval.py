from __future__ import annotations

import logging
from pathlib import Path
import re

from whoosh.index import EmptyIndexError, Index, exists_in, open_dir
from whoosh.qparser import OrGroup, QueryParser
from whoosh.qparser.common import QueryParserError
from whoosh.query import NullQuery

from .errors import IndexUnavailableError, QuerySyntaxError
from .schema import RetrievalResult

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_FIELD = "tokens"
DEFAULT_ANSWER_FIELD = "title"

_RESERVED_CHARS = re.compile(r"[\\+\-!():^\[\]\"{}~*?|&/'<>=]")
_OPERATOR_WORDS = re.compile(r"\b(AND|OR|NOT|ANDNOT|ANDMAYBE|REQUIRE|TO)\b")


def escape_query(text: str) -> str:
    """Neutralize query-language syntax so text is searched as plain terms.

    Reserved characters become spaces and upper-case boolean keywords are
    lower-cased, so no field, phrase, range, wildcard, or boolean query can
    be produced from clue text.
    """
    text = _RESERVED_CHARS.sub(" ", text)
    text = _OPERATOR_WORDS.sub(lambda match: match.group(1).lower(), text)
    return " ".join(text.split())


def open_index(
    index_dir: str | Path,
    search_field: str = DEFAULT_SEARCH_FIELD,
    answer_field: str = DEFAULT_ANSWER_FIELD,
) -> Index:
    """Open an existing Whoosh index and validate the fields the retriever needs.

    Args:
        index_dir: Directory holding a previously built index.
        search_field: Field that query text is matched against.
        answer_field: Stored field returned as the answer of a hit.

    Returns:
        The opened Whoosh index.

    Raises:
        IndexUnavailableError: If the index is missing, unreadable, or its
            schema lacks the searched field or a stored answer field.
    """
    location = Path(index_dir)
    if not location.is_dir():
        raise IndexUnavailableError(f"Index directory not found: {location}")

    try:
        if not exists_in(str(location)):
            raise IndexUnavailableError(f"No search index found in {location}")
        index = open_dir(str(location))
    except (EmptyIndexError, OSError) as exc:
        raise IndexUnavailableError(f"Cannot open search index in {location}: {exc}") from exc

    schema = index.schema
    if search_field not in schema:
        index.close()
        raise IndexUnavailableError(f"Index in {location} has no field {search_field!r}")
    if answer_field not in schema or not schema[answer_field].stored:
        index.close()
        raise IndexUnavailableError(f"Index in {location} has no stored field {answer_field!r}")

    logger.info("Opened search index %s (%d documents)", location, index.doc_count())
    return index


class AnswerRetriever:
    """Top-1 answer lookup against a read-only Whoosh index.

    The index and its searcher are acquired once on entry and released on
    exit, including when evaluation stops on an error.
    """

    def __init__(
        self,
        index_dir: str | Path,
        search_field: str = DEFAULT_SEARCH_FIELD,
        answer_field: str = DEFAULT_ANSWER_FIELD,
    ):
        self.index_dir = Path(index_dir)
        self.search_field = search_field
        self.answer_field = answer_field
        self._index: Index | None = None
        self._searcher = None
        self._parser: QueryParser | None = None

    def open(self) -> AnswerRetriever:
        if self._searcher is not None:
            return self
        index = open_index(self.index_dir, self.search_field, self.answer_field)
        try:
            self._searcher = index.searcher()
        except OSError as exc:
            index.close()
            raise IndexUnavailableError(f"Cannot read search index in {self.index_dir}: {exc}") from exc
        self._index = index
        self._parser = QueryParser(self.search_field, schema=index.schema, group=OrGroup)
        return self

    def close(self) -> None:
        if self._searcher is not None:
            self._searcher.close()
            self._searcher = None
        if self._index is not None:
            self._index.close()
            self._index = None
        self._parser = None

    def __enter__(self) -> AnswerRetriever:
        return self.open()

    def __exit__(self, exc_type, exc, traceback) -> None:
        self.close()

    def retrieve(self, query: str, top_k: int = 1) -> RetrievalResult | None:
        """Return the answer field of the best-matching document, if any.

        Args:
            query: Raw query text; it is escaped before parsing.
            top_k: Number of hits requested from the index; only the first
                is used.

        Returns:
            `RetrievalResult` for the top hit, or `None` when nothing matches.

        Raises:
            IndexUnavailableError: If the retriever is not open or the index
                cannot be read.
            QuerySyntaxError: If the escaped query fails to parse.
        """
        if self._searcher is None or self._parser is None:
            raise IndexUnavailableError("Retriever is not open; use it as a context manager")

        escaped = escape_query(query)
        try:
            parsed = self._parser.parse(escaped)
        except QueryParserError as exc:
            raise QuerySyntaxError(f"Cannot parse query {escaped!r}: {exc}") from exc

        if parsed is NullQuery:
            logger.debug("No searchable terms in %r", query)
            return None

        try:
            hits = self._searcher.search(parsed, limit=top_k)
        except OSError as exc:
            raise IndexUnavailableError(f"Cannot read search index in {self.index_dir}: {exc}") from exc

        if hits.is_empty():
            logger.debug("No hits for %r", query)
            return None

        value = hits[0].get(self.answer_field)
        answer = "" if value is None else str(value)
        logger.debug("Top hit for %r: %r", query, answer)
        return RetrievalResult(retrieved_answer=answer.strip(), source_query=query)
