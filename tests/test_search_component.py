"""Tests for archsearch.services.search_component: index/delete/search."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from archsearch.indexing.documents import DocumentType, IndexedDocument
from archsearch.infrastructure.config import SearchConfig
from archsearch.search.query import InvalidArgumentError
from archsearch.services import search_component as search_component_module
from archsearch.services.search_component import (
    DisabledSearchComponent,
    PartialIndexError,
    SqliteSearchComponent,
    create_search_component,
)
from conftest import make_workspace

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from archsearch.model.workspace import Workspace


class TestIndexAndSearch:
    def test_round_trip(self, component: SqliteSearchComponent, workspace: Workspace) -> None:
        component.index(workspace)
        results = component.search("Payments", "", {workspace.id})
        assert any(r.type == "workspace" and r.name == "Payments" for r in results)

    def test_finds_every_document_type(
        self, component: SqliteSearchComponent, workspace: Workspace
    ) -> None:
        component.index(workspace)
        ids = {workspace.id}
        assert component.search("Route", "diagram", ids)[0].url == "/diagrams#Live"
        assert component.search("settles", "documentation", ids)[0].name == "Payments - Overview"
        decision = component.search("Kafka", "decision", ids)[0]
        assert decision.name == "API - 2. Use Kafka"
        assert decision.description == "Proposed"
        assert decision.url == "/decisions/Payment%20Gateway/API#2"

    def test_technology_is_searchable(
        self, component: SqliteSearchComponent, workspace: Workspace
    ) -> None:
        component.index(workspace)
        urls = {r.url for r in component.search("Spring", "", {workspace.id})}
        assert urls == {"/diagrams#Containers", "/diagrams#Live"}

    def test_workspace_isolation(self, component: SqliteSearchComponent) -> None:
        component.index(make_workspace(1))
        component.index(make_workspace(2))
        for query in ("Payments", "PostgreSQL", "Kafka", "AWS"):
            results = component.search(query, "", {1})
            assert results
            assert all(r.workspace_id == 1 for r in results)

    def test_type_filter(self, component: SqliteSearchComponent, workspace: Workspace) -> None:
        component.index(workspace)
        results = component.search("Use", "Decision", {workspace.id})
        assert {r.type for r in results} == {"decision"}
        assert len(results) == 2

    def test_reindex_replaces(self, component: SqliteSearchComponent, workspace: Workspace) -> None:
        component.index(workspace)
        first = component.store.count(workspace.id)
        component.index(workspace)
        assert component.store.count(workspace.id) == first
        assert first == 11

    def test_reindex_drops_removed_content(
        self, component: SqliteSearchComponent, workspace: Workspace
    ) -> None:
        component.index(workspace)
        workspace.documentation.decisions.clear()
        component.index(workspace)
        assert component.search("PostgreSQL", "", {workspace.id}) == []

    def test_delete(self, component: SqliteSearchComponent) -> None:
        component.index(make_workspace(1))
        component.index(make_workspace(2))
        component.delete(1)
        for query in ("Payments", "PostgreSQL", "Kafka", "Route"):
            assert component.search(query, "", {1}) == []
        assert component.search("Payments", "", {2})

    def test_clear(self, component: SqliteSearchComponent, workspace: Workspace) -> None:
        component.index(workspace)
        component.clear()
        assert component.search("Payments", "", {workspace.id}) == []
        component.index(workspace)
        assert component.search("Payments", "", {workspace.id})

    def test_max_results(self, tmp_path: Path) -> None:
        component = SqliteSearchComponent(tmp_path / "data", max_results=3)
        component.start()
        try:
            component.index(make_workspace())
            assert len(component.search("Payment*", "", {1})) == 3
        finally:
            component.stop()

    def test_default_limit_is_twenty(self, component: SqliteSearchComponent) -> None:
        for workspace_id in range(1, 26):
            component.index(make_workspace(workspace_id))
        results = component.search("Payments", "workspace", set(range(1, 26)))
        assert len(results) == 20

    def test_empty_scope_rejected(self, component: SqliteSearchComponent) -> None:
        with pytest.raises(InvalidArgumentError):
            component.search("x", "", set())

    def test_is_enabled(self, component: SqliteSearchComponent) -> None:
        assert component.is_enabled() is True


class TestFailures:
    def test_partial_failure_keeps_written_documents(
        self,
        component: SqliteSearchComponent,
        workspace: Workspace,
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        component.index(workspace)

        def failing(ws: Workspace) -> Iterator[IndexedDocument]:
            yield IndexedDocument(ws.id, DocumentType.WORKSPACE, "", "Replacement", "", "Replacement")
            raise ValueError("bad element")

        monkeypatch.setattr(search_component_module, "workspace_documents", failing)
        component.index(workspace)

        assert component.store.count(workspace.id) == 1
        assert component.search("Replacement", "", {workspace.id})
        assert "failed after 1 document(s)" in caplog.text

    def test_index_with_unavailable_store_is_logged(
        self, tmp_path: Path, workspace: Workspace, caplog: pytest.LogCaptureFixture
    ) -> None:
        blocker = tmp_path / "data"
        blocker.write_text("not a directory")
        component = SqliteSearchComponent(blocker)
        component.start()

        component.index(workspace)
        component.delete(workspace.id)

        assert f"Workspace {workspace.id} not indexed" in caplog.text
        assert f"Workspace {workspace.id} not removed from index" in caplog.text

    def test_search_before_start_is_empty(self, tmp_path: Path) -> None:
        component = SqliteSearchComponent(tmp_path / "data")
        assert component.search("Payments", "", {1}) == []

    def test_partial_index_error_message(self) -> None:
        error = PartialIndexError(4, 2, ValueError("oops"))
        assert error.workspace_id == 4
        assert error.written == 2
        assert str(error) == "Indexing workspace 4 failed after 2 document(s): oops"


class TestDisabledSearchComponent:
    def test_does_nothing(self, workspace: Workspace) -> None:
        component = DisabledSearchComponent()
        component.start()
        component.index(workspace)
        component.delete(workspace.id)
        component.clear()
        component.stop()
        assert component.search("Payments", "", {workspace.id}) == []
        assert component.is_enabled() is False

    def test_empty_scope_still_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            DisabledSearchComponent().search("x", "", set())


class TestCreateSearchComponent:
    def test_sqlite_by_default(self, tmp_path: Path) -> None:
        component = create_search_component(SearchConfig(data_dir=tmp_path, max_results=7))
        assert isinstance(component, SqliteSearchComponent)
        assert component.max_results == 7
        assert component.store.index_dir == tmp_path / "index"

    def test_none_disables(self, tmp_path: Path) -> None:
        component = create_search_component(SearchConfig(data_dir=tmp_path, implementation="none"))
        assert isinstance(component, DisabledSearchComponent)
