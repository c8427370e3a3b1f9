"""Model flattener: workspace overview and one document per view.

View content is assembled from, in order:

1. the view title (or its name when untitled)
2. the view description
3. every element in the view, by capability:
   basics, technology, deployment subtree, instance target
4. every relationship in the view: description, technology
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from archsearch.indexing.documents import (
    DocumentType,
    IndexedDocument,
    append_all,
    diagram_url,
)
from archsearch.model.workspace import HasDeploymentChildren, HasInstanceOf, HasTechnology

if TYPE_CHECKING:
    from collections.abc import Iterator

    from archsearch.model.workspace import Element, Relationship, View, Workspace


def element_basics(element: Element) -> list[str]:
    """Name and description of *element*."""
    return [element.name, element.description]


def element_fragments(element: Element) -> list[str]:
    """All searchable text of *element*, including any deployment subtree.

    Instances contribute their underlying element instead of themselves.
    A deployment node contributes its own basics and technology, then every
    child node (recursively), then its infrastructure nodes, then the
    software system and container instances it hosts.
    """
    if isinstance(element, HasInstanceOf):
        return element_fragments(element.instance_of)

    fragments = element_basics(element)
    if isinstance(element, HasTechnology):
        fragments.append(element.technology)

    if isinstance(element, HasDeploymentChildren):
        for child in element.children:
            fragments.extend(element_fragments(child))
        for infrastructure_node in element.infrastructure_nodes:
            fragments.extend(element_fragments(infrastructure_node))
        for system_instance in element.software_system_instances:
            fragments.extend(element_fragments(system_instance))
        for container_instance in element.container_instances:
            fragments.extend(element_fragments(container_instance))

    return fragments


def relationship_fragments(relationship: Relationship) -> list[str]:
    return [relationship.description, relationship.technology]


def view_content(view: View) -> str:
    """Concatenated searchable text for a single view."""
    fragments: list[str] = [view.title or view.name, view.description]
    for element in view.elements:
        fragments.extend(element_fragments(element))
    for relationship in view.relationships:
        fragments.extend(relationship_fragments(relationship))
    return append_all(*fragments)


def workspace_document(workspace: Workspace) -> IndexedDocument:
    """The overview document; its URL is empty."""
    return IndexedDocument(
        workspace_id=workspace.id,
        type=DocumentType.WORKSPACE,
        url="",
        name=workspace.name,
        description=workspace.description,
        content=append_all(workspace.name, workspace.description),
    )


def view_document(workspace: Workspace, view: View) -> IndexedDocument:
    return IndexedDocument(
        workspace_id=workspace.id,
        type=DocumentType.DIAGRAM,
        url=diagram_url(view.key),
        name=view.name,
        description=view.description,
        content=view_content(view),
    )


def flatten_views(workspace: Workspace) -> Iterator[IndexedDocument]:
    """One diagram document per view, grouped by view kind."""
    for view in workspace.views.all_views():
        yield view_document(workspace, view)
