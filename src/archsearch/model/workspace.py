"""Read-only workspace model: elements, relationships, views, documentation.

Elements share the *basics* (``name`` + ``description``).  Everything else is
an additive capability, checked structurally at runtime:

- :class:`HasTechnology` - containers, components, deployment and
  infrastructure nodes
- :class:`HasDeploymentChildren` - deployment nodes
- :class:`HasInstanceOf` - software system and container instances

Indexing code dispatches on these capabilities instead of concrete classes, so
an element kind added later still contributes its basics.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------


@runtime_checkable
class HasTechnology(Protocol):
    technology: str


@runtime_checkable
class HasDeploymentChildren(Protocol):
    children: list[DeploymentNode]
    infrastructure_nodes: list[InfrastructureNode]
    software_system_instances: list[SoftwareSystemInstance]
    container_instances: list[ContainerInstance]


@runtime_checkable
class HasInstanceOf(Protocol):
    @property
    def instance_of(self) -> Element: ...


# ---------------------------------------------------------------------------
# Documentation
# ---------------------------------------------------------------------------


@dataclass
class Section:
    """One raw documentation block; may hold several headings."""

    content: str = ""
    filename: str = ""
    format: str = "Markdown"


@dataclass
class Decision:
    """An architecture decision record."""

    id: str
    title: str = ""
    status: str = ""
    content: str = ""
    date: str = ""
    format: str = "Markdown"


@dataclass
class Documentation:
    sections: list[Section] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


@dataclass
class Element:
    id: str
    name: str = ""
    description: str = ""


@dataclass
class CustomElement(Element):
    pass


@dataclass
class Person(Element):
    pass


@dataclass
class Component(Element):
    technology: str = ""
    documentation: Documentation = field(default_factory=Documentation)


@dataclass
class Container(Element):
    technology: str = ""
    components: list[Component] = field(default_factory=list)
    documentation: Documentation = field(default_factory=Documentation)


@dataclass
class SoftwareSystem(Element):
    containers: list[Container] = field(default_factory=list)
    documentation: Documentation = field(default_factory=Documentation)


@dataclass
class InfrastructureNode(Element):
    technology: str = ""


@dataclass
class SoftwareSystemInstance(Element):
    software_system: SoftwareSystem | None = None

    @property
    def instance_of(self) -> Element:
        if self.software_system is None:
            return Element(self.id, self.name, self.description)
        return self.software_system


@dataclass
class ContainerInstance(Element):
    container: Container | None = None

    @property
    def instance_of(self) -> Element:
        if self.container is None:
            return Element(self.id, self.name, self.description)
        return self.container


@dataclass
class DeploymentNode(Element):
    technology: str = ""
    environment: str = "Default"
    children: list[DeploymentNode] = field(default_factory=list)
    infrastructure_nodes: list[InfrastructureNode] = field(default_factory=list)
    software_system_instances: list[SoftwareSystemInstance] = field(default_factory=list)
    container_instances: list[ContainerInstance] = field(default_factory=list)


@dataclass
class Relationship:
    id: str
    source_id: str = ""
    destination_id: str = ""
    description: str = ""
    technology: str = ""


# ---------------------------------------------------------------------------
# Views
# ---------------------------------------------------------------------------


class ViewKind(enum.Enum):
    """View kinds, declared in indexing order."""

    CUSTOM = "custom"
    SYSTEM_LANDSCAPE = "system_landscape"
    SYSTEM_CONTEXT = "system_context"
    CONTAINER = "container"
    COMPONENT = "component"
    DYNAMIC = "dynamic"
    DEPLOYMENT = "deployment"


@dataclass
class View:
    key: str
    kind: ViewKind
    name: str = ""
    title: str = ""
    description: str = ""
    elements: list[Element] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)


@dataclass
class ViewSet:
    custom_views: list[View] = field(default_factory=list)
    system_landscape_views: list[View] = field(default_factory=list)
    system_context_views: list[View] = field(default_factory=list)
    container_views: list[View] = field(default_factory=list)
    component_views: list[View] = field(default_factory=list)
    dynamic_views: list[View] = field(default_factory=list)
    deployment_views: list[View] = field(default_factory=list)

    def by_kind(self, kind: ViewKind) -> list[View]:
        return {
            ViewKind.CUSTOM: self.custom_views,
            ViewKind.SYSTEM_LANDSCAPE: self.system_landscape_views,
            ViewKind.SYSTEM_CONTEXT: self.system_context_views,
            ViewKind.CONTAINER: self.container_views,
            ViewKind.COMPONENT: self.component_views,
            ViewKind.DYNAMIC: self.dynamic_views,
            ViewKind.DEPLOYMENT: self.deployment_views,
        }[kind]

    def all_views(self) -> list[View]:
        """Every view, grouped by kind in :class:`ViewKind` order."""
        views: list[View] = []
        for kind in ViewKind:
            views.extend(self.by_kind(kind))
        return views


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


@dataclass
class Model:
    people: list[Person] = field(default_factory=list)
    software_systems: list[SoftwareSystem] = field(default_factory=list)
    custom_elements: list[CustomElement] = field(default_factory=list)
    deployment_nodes: list[DeploymentNode] = field(default_factory=list)
    relationships: list[Relationship] = field(default_factory=list)


@dataclass
class Workspace:
    """Top-level architecture model document."""

    id: int
    name: str = ""
    description: str = ""
    model: Model = field(default_factory=Model)
    views: ViewSet = field(default_factory=ViewSet)
    documentation: Documentation = field(default_factory=Documentation)
