"""Search component: the in-process API the application layer calls.

``index`` replaces every document of a workspace inside one write session:
the delete and all inserts share a transaction, so readers see either the
old or the new document set.  If flattening fails part-way, the documents
produced so far are committed and the failure is logged; the workspace stays
partially indexed until its next successful reindex.
"""

from __future__ import annotations

import abc
import logging
import sqlite3
from typing import TYPE_CHECKING

from archsearch.indexing.pipeline import workspace_documents
from archsearch.infrastructure.config import (
    DEFAULT_MAX_RESULTS,
    IMPLEMENTATION_NONE,
    SearchConfig,
)
from archsearch.infrastructure.store import IndexStore, StoreUnavailableError
from archsearch.search.query import InvalidArgumentError
from archsearch.search.query import search as run_search

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from archsearch.indexing.documents import SearchResult
    from archsearch.model.workspace import Workspace

logger = logging.getLogger(__name__)


class PartialIndexError(RuntimeError):
    """A workspace reindex stopped before every document was written."""

    def __init__(self, workspace_id: int, written: int, cause: BaseException) -> None:
        super().__init__(
            f"Indexing workspace {workspace_id} failed after {written} document(s): {cause}"
        )
        self.workspace_id = workspace_id
        self.written = written


class SearchComponent(abc.ABC):
    """Lifecycle, indexing and scoped search over workspaces."""

    @abc.abstractmethod
    def start(self) -> None: ...

    @abc.abstractmethod
    def stop(self) -> None: ...

    @abc.abstractmethod
    def clear(self) -> None: ...

    @abc.abstractmethod
    def index(self, workspace: Workspace) -> None: ...

    @abc.abstractmethod
    def delete(self, workspace_id: int) -> None: ...

    @abc.abstractmethod
    def search(
        self,
        query: str,
        type_filter: str | None,
        workspace_ids: Iterable[int],
    ) -> list[SearchResult]: ...

    @abc.abstractmethod
    def is_enabled(self) -> bool: ...


class SqliteSearchComponent(SearchComponent):
    """Search backed by the SQLite FTS5 :class:`IndexStore`."""

    def __init__(self, data_dir: Path, *, max_results: int = DEFAULT_MAX_RESULTS) -> None:
        self.store = IndexStore(data_dir)
        self.max_results = max_results

    def start(self) -> None:
        self.store.start()

    def stop(self) -> None:
        self.store.stop()

    def clear(self) -> None:
        self.store.clear()

    def index(self, workspace: Workspace) -> None:
        """Replace all documents of *workspace*.  Errors are logged, not raised."""
        try:
            with self.store.open_for_write() as session:
                session.delete_workspace(workspace.id)
                try:
                    for document in workspace_documents(workspace):
                        session.add(document)
                except Exception as exc:
                    error = PartialIndexError(workspace.id, session.added, exc)
                    logger.error("%s", error, exc_info=exc)
                    return
            logger.debug("Indexed workspace %d: %d document(s)", workspace.id, session.added)
        except (StoreUnavailableError, sqlite3.Error) as exc:
            logger.error("Workspace %d not indexed: %s", workspace.id, exc)

    def delete(self, workspace_id: int) -> None:
        try:
            with self.store.open_for_write() as session:
                session.delete_workspace(workspace_id)
        except (StoreUnavailableError, sqlite3.Error) as exc:
            logger.error("Workspace %d not removed from index: %s", workspace_id, exc)

    def search(
        self,
        query: str,
        type_filter: str | None,
        workspace_ids: Iterable[int],
    ) -> list[SearchResult]:
        return run_search(
            self.store, query, type_filter, workspace_ids, limit=self.max_results
        )

    def is_enabled(self) -> bool:
        return True


class DisabledSearchComponent(SearchComponent):
    """Stand-in used when search is switched off; indexes and finds nothing."""

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def clear(self) -> None:
        pass

    def index(self, workspace: Workspace) -> None:
        pass

    def delete(self, workspace_id: int) -> None:
        pass

    def search(
        self,
        query: str,
        type_filter: str | None,
        workspace_ids: Iterable[int],
    ) -> list[SearchResult]:
        if not set(workspace_ids):
            raise InvalidArgumentError("One or more workspace IDs must be provided.")
        return []

    def is_enabled(self) -> bool:
        return False


def create_search_component(config: SearchConfig) -> SearchComponent:
    """Build the component selected by ``config.implementation``."""
    if config.implementation == IMPLEMENTATION_NONE:
        return DisabledSearchComponent()
    return SqliteSearchComponent(config.data_dir, max_results=config.max_results)
