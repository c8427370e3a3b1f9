"""Services: search component facade and CLI."""

from archsearch.services.search_component import (
    DisabledSearchComponent,
    PartialIndexError,
    SearchComponent,
    SqliteSearchComponent,
    create_search_component,
)

__all__ = [
    "DisabledSearchComponent",
    "PartialIndexError",
    "SearchComponent",
    "SqliteSearchComponent",
    "create_search_component",
]
