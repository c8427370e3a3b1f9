"""Query engine: scoped FTS5 search over the document index.

Every query is the conjunction of

- the free-text query over ``content`` (adjacent terms combine with AND)
- ``workspace_id`` in the caller's permitted set
- ``type`` equal to the requested document type, when one is given
"""

from __future__ import annotations

import logging
import re
import sqlite3
from typing import TYPE_CHECKING

from archsearch.indexing.documents import DocumentType, SearchResult
from archsearch.infrastructure.config import DEFAULT_MAX_RESULTS
from archsearch.infrastructure.store import StoreUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from archsearch.infrastructure.store import IndexStore

logger = logging.getLogger(__name__)

# A quoted phrase, or a run of non-space characters.
_TOKEN_RE = re.compile(r'"([^"]*)"|(\S+)')
_OPERATORS = frozenset({"AND", "OR", "NOT"})


class InvalidArgumentError(ValueError):
    """Raised when a search is requested without any permitted workspace."""


class QueryExecutionError(RuntimeError):
    """Raised when a query cannot be translated or executed."""


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def to_match_expression(query: str) -> str:
    """Translate a user query into an FTS5 MATCH expression.

    Words and ``"phrases"`` are quoted so punctuation is literal; ``word*``
    is a prefix query; upper-case ``AND``/``OR``/``NOT`` between terms are
    kept as operators; everything else is joined with AND.  Two operators in
    a row are rejected.
    """
    parts: list[str] = []
    operator: str | None = None

    for match in _TOKEN_RE.finditer(query):
        phrase, word = match.group(1), match.group(2)
        if word in _OPERATORS:
            if operator is not None:
                raise QueryExecutionError(
                    f"Operators {operator} and {word} cannot follow each other: {query!r}"
                )
            if parts:
                operator = word
            continue

        if phrase is not None:
            if not phrase.strip():
                continue
            term = _quote(phrase)
        else:
            stem = word.rstrip("*")
            if not stem:
                continue
            term = _quote(stem) + ("*" if stem != word else "")

        if parts:
            parts.append(operator or "AND")
        parts.append(term)
        operator = None

    if not parts:
        raise QueryExecutionError(f"Query has no searchable terms: {query!r}")
    return " ".join(parts)


def _build_sql(workspace_count: int, *, with_type: bool) -> str:
    placeholders = ", ".join("?" for _ in range(workspace_count))
    sql = (
        "SELECT url, workspace_id, type, name, description "
        "FROM documents "
        f"WHERE documents MATCH ? AND workspace_id IN ({placeholders}) "
    )
    if with_type:
        sql += "AND type = ? "
    return sql + "ORDER BY rank LIMIT ?"


def execute_search(
    store: IndexStore,
    query: str,
    type_filter: str | None,
    workspace_ids: Iterable[int],
    *,
    limit: int = DEFAULT_MAX_RESULTS,
) -> list[SearchResult]:
    """Run a scoped query and project the matches.

    Raises :class:`QueryExecutionError` or :class:`StoreUnavailableError`.
    """
    ids = sorted({str(workspace_id) for workspace_id in workspace_ids})
    params: list[object] = [to_match_expression(query), *ids]

    doc_type: DocumentType | None = None
    if type_filter:
        doc_type = DocumentType.parse(type_filter)
        if doc_type is None:
            logger.debug("Unknown document type filter '%s'", type_filter)
            return []
        params.append(doc_type.value)
    params.append(limit)

    sql = _build_sql(len(ids), with_type=doc_type is not None)
    with store.open_for_read() as conn:
        try:
            rows = conn.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise QueryExecutionError(f"Search for {query!r} failed: {exc}") from exc

    return [
        SearchResult(
            workspace_id=int(r["workspace_id"]),
            url=r["url"],
            name=r["name"],
            description=r["description"],
            type=r["type"],
        )
        for r in rows
    ]


def search(
    store: IndexStore,
    query: str,
    type_filter: str | None,
    workspace_ids: Iterable[int],
    *,
    limit: int = DEFAULT_MAX_RESULTS,
) -> list[SearchResult]:
    """Search *store* within *workspace_ids*.

    Raises :class:`InvalidArgumentError` when *workspace_ids* is empty; any
    other failure is logged and yields an empty list.
    """
    ids = set(workspace_ids)
    if not ids:
        raise InvalidArgumentError("One or more workspace IDs must be provided.")

    try:
        return execute_search(store, query, type_filter, ids, limit=limit)
    except (QueryExecutionError, StoreUnavailableError) as exc:
        logger.error("Search failed (workspaces=%s): %s", sorted(ids), exc)
        return []
