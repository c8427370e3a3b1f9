"""Decision indexer: one document per architecture decision record."""

from __future__ import annotations

from typing import TYPE_CHECKING

from archsearch.indexing.documents import (
    DocumentType,
    IndexedDocument,
    append_all,
    decision_url,
)

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from archsearch.model.workspace import Decision, Documentation, Element, Workspace


def decision_name(owner_name: str, decision: Decision) -> str:
    return f"{owner_name} - {decision.id}. {decision.title}"


def decision_document(
    workspace: Workspace,
    element: Element | None,
    decision: Decision,
    *,
    scope: Sequence[str] | None = None,
) -> IndexedDocument:
    """Flatten *decision*; the status doubles as the display description."""
    owner_name = workspace.name if element is None else element.name
    if scope is None:
        scope = () if element is None else (element.name,)
    return IndexedDocument(
        workspace_id=workspace.id,
        type=DocumentType.DECISION,
        url=decision_url(scope, decision.id),
        name=decision_name(owner_name, decision),
        description=decision.status,
        content=append_all(decision.title, decision.content, decision.status),
    )


def decision_documents(
    workspace: Workspace,
    element: Element | None,
    documentation: Documentation,
    *,
    scope: Sequence[str] | None = None,
) -> Iterator[IndexedDocument]:
    for decision in documentation.decisions:
        yield decision_document(workspace, element, decision, scope=scope)
