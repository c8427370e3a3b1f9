"""Search domain: scoped full-text query engine."""

from archsearch.search.query import (
    InvalidArgumentError,
    QueryExecutionError,
    execute_search,
    search,
    to_match_expression,
)

__all__ = [
    "InvalidArgumentError",
    "QueryExecutionError",
    "execute_search",
    "search",
    "to_match_expression",
]
