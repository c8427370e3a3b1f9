"""Ordered document stream for one workspace reindex."""

from __future__ import annotations

from typing import TYPE_CHECKING

from archsearch.indexing.decisions import decision_documents
from archsearch.indexing.flattener import flatten_views, workspace_document
from archsearch.indexing.sections import documentation_documents

if TYPE_CHECKING:
    from collections.abc import Iterator

    from archsearch.indexing.documents import IndexedDocument
    from archsearch.model.workspace import Documentation, Element, Workspace


def _documentation_and_decisions(
    workspace: Workspace,
    element: Element | None,
    documentation: Documentation,
    scope: tuple[str, ...] = (),
) -> Iterator[IndexedDocument]:
    yield from documentation_documents(workspace, element, documentation, scope=scope)
    yield from decision_documents(workspace, element, documentation, scope=scope)


def workspace_documents(workspace: Workspace) -> Iterator[IndexedDocument]:
    """Every document for *workspace*, in indexing order.

    Overview, then diagrams by view kind, then documentation and decisions
    of the workspace itself, then of each software system, container and
    component in containment order.  Element-owned URLs carry the names of
    the enclosing system and container, so same-named containers in
    different systems stay distinct.
    """
    yield workspace_document(workspace)
    yield from flatten_views(workspace)
    yield from _documentation_and_decisions(workspace, None, workspace.documentation)

    for system in workspace.model.software_systems:
        system_scope = (system.name,)
        yield from _documentation_and_decisions(
            workspace, system, system.documentation, system_scope
        )
        for container in system.containers:
            container_scope = (*system_scope, container.name)
            yield from _documentation_and_decisions(
                workspace, container, container.documentation, container_scope
            )
            for component in container.components:
                yield from _documentation_and_decisions(
                    workspace,
                    component,
                    component.documentation,
                    (*container_scope, component.name),
                )
