"""Workspace file loader.

Reads a Structurizr-style workspace document (JSON or YAML) into the
read-only :mod:`archsearch.model.workspace` dataclasses.  View element and
relationship references (``{"id": ...}``) are resolved against the model;
dangling references are dropped with a warning.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import yaml

from archsearch.model.workspace import (
    Component,
    Container,
    ContainerInstance,
    CustomElement,
    Decision,
    DeploymentNode,
    Documentation,
    Element,
    InfrastructureNode,
    Model,
    Person,
    Relationship,
    Section,
    SoftwareSystem,
    SoftwareSystemInstance,
    View,
    ViewKind,
    ViewSet,
    Workspace,
)

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

# Workspace-document keys for each view kind.
_VIEW_KEYS: dict[ViewKind, str] = {
    ViewKind.CUSTOM: "customViews",
    ViewKind.SYSTEM_LANDSCAPE: "systemLandscapeViews",
    ViewKind.SYSTEM_CONTEXT: "systemContextViews",
    ViewKind.CONTAINER: "containerViews",
    ViewKind.COMPONENT: "componentViews",
    ViewKind.DYNAMIC: "dynamicViews",
    ViewKind.DEPLOYMENT: "deploymentViews",
}

_VIEW_LABELS: dict[ViewKind, str] = {
    ViewKind.CUSTOM: "Custom",
    ViewKind.SYSTEM_LANDSCAPE: "System Landscape",
    ViewKind.SYSTEM_CONTEXT: "System Context",
    ViewKind.CONTAINER: "Containers",
    ViewKind.COMPONENT: "Components",
    ViewKind.DYNAMIC: "Dynamic",
    ViewKind.DEPLOYMENT: "Deployment",
}


class WorkspaceLoadError(ValueError):
    """Raised when a workspace document cannot be read or is malformed."""


def _str(value: Any) -> str:
    return "" if value is None else str(value)


def _mapping(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise WorkspaceLoadError(f"'{key}' must be a mapping, got {type(value).__name__}")
    return value


def _list(data: dict[str, Any], key: str) -> list[dict[str, Any]]:
    items = data.get(key)
    if items is None:
        return []
    if not isinstance(items, list):
        raise WorkspaceLoadError(f"'{key}' must be a list, got {type(items).__name__}")
    for item in items:
        if not isinstance(item, dict):
            raise WorkspaceLoadError(f"'{key}' entries must be mappings, got {item!r}")
    return items


def _section_order(data: dict[str, Any]) -> int:
    raw = data.get("order", 0)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise WorkspaceLoadError(f"Section order must be an integer, got {raw!r}") from exc


class _Registry:
    """Collects elements and relationships by id while the model is parsed."""

    def __init__(self) -> None:
        self.elements: dict[str, Element] = {}
        self.relationships: dict[str, Relationship] = {}

    def element(self, element: Element, data: dict[str, Any]) -> None:
        self.elements[element.id] = element
        for rel_data in _list(data, "relationships"):
            rel = Relationship(
                id=_str(rel_data.get("id")),
                source_id=_str(rel_data.get("sourceId", element.id)),
                destination_id=_str(rel_data.get("destinationId")),
                description=_str(rel_data.get("description")),
                technology=_str(rel_data.get("technology")),
            )
            self.relationships[rel.id] = rel


def _parse_documentation(data: dict[str, Any]) -> Documentation:
    sections = [
        Section(
            content=_str(s.get("content")),
            filename=_str(s.get("filename")),
            format=_str(s.get("format")) or "Markdown",
        )
        for s in sorted(_list(data, "sections"), key=_section_order)
    ]
    decisions = [
        Decision(
            id=_str(d.get("id")),
            title=_str(d.get("title")),
            status=_str(d.get("status")),
            content=_str(d.get("content")),
            date=_str(d.get("date")),
            format=_str(d.get("format")) or "Markdown",
        )
        for d in _list(data, "decisions")
    ]
    return Documentation(sections=sections, decisions=decisions)


def _basics(data: dict[str, Any]) -> dict[str, str]:
    return {
        "id": _str(data.get("id")),
        "name": _str(data.get("name")),
        "description": _str(data.get("description")),
    }


def _instance_basics(data: dict[str, Any], element: Element | None) -> dict[str, str]:
    """Instances usually carry no name of their own; borrow the element's."""
    basics = _basics(data)
    if element is not None:
        basics["name"] = basics["name"] or element.name
        basics["description"] = basics["description"] or element.description
    return basics


def _parse_software_system(data: dict[str, Any], reg: _Registry) -> SoftwareSystem:
    system = SoftwareSystem(
        **_basics(data),
        documentation=_parse_documentation(_mapping(data, "documentation")),
    )
    reg.element(system, data)
    for c_data in _list(data, "containers"):
        container = Container(
            **_basics(c_data),
            technology=_str(c_data.get("technology")),
            documentation=_parse_documentation(_mapping(c_data, "documentation")),
        )
        reg.element(container, c_data)
        for comp_data in _list(c_data, "components"):
            component = Component(
                **_basics(comp_data),
                technology=_str(comp_data.get("technology")),
                documentation=_parse_documentation(_mapping(comp_data, "documentation")),
            )
            reg.element(component, comp_data)
            container.components.append(component)
        system.containers.append(container)
    return system


def _parse_deployment_node(data: dict[str, Any], reg: _Registry) -> DeploymentNode:
    node = DeploymentNode(
        **_basics(data),
        technology=_str(data.get("technology")),
        environment=_str(data.get("environment")) or "Default",
    )
    reg.element(node, data)
    for child_data in _list(data, "children"):
        node.children.append(_parse_deployment_node(child_data, reg))
    for infra_data in _list(data, "infrastructureNodes"):
        infra = InfrastructureNode(
            **_basics(infra_data), technology=_str(infra_data.get("technology"))
        )
        reg.element(infra, infra_data)
        node.infrastructure_nodes.append(infra)
    for ssi_data in _list(data, "softwareSystemInstances"):
        system = reg.elements.get(_str(ssi_data.get("softwareSystemId")))
        ssi = SoftwareSystemInstance(
            **_instance_basics(ssi_data, system),
            software_system=system if isinstance(system, SoftwareSystem) else None,
        )
        reg.element(ssi, ssi_data)
        node.software_system_instances.append(ssi)
    for ci_data in _list(data, "containerInstances"):
        container = reg.elements.get(_str(ci_data.get("containerId")))
        ci = ContainerInstance(
            **_instance_basics(ci_data, container),
            container=container if isinstance(container, Container) else None,
        )
        reg.element(ci, ci_data)
        node.container_instances.append(ci)
    return node


def _parse_model(data: dict[str, Any], reg: _Registry) -> Model:
    model = Model()
    for p_data in _list(data, "people"):
        person = Person(**_basics(p_data))
        reg.element(person, p_data)
        model.people.append(person)
    for ce_data in _list(data, "customElements"):
        custom = CustomElement(**_basics(ce_data))
        reg.element(custom, ce_data)
        model.custom_elements.append(custom)
    # Systems first: instances in deployment nodes refer to them.
    for ss_data in _list(data, "softwareSystems"):
        model.software_systems.append(_parse_software_system(ss_data, reg))
    for dn_data in _list(data, "deploymentNodes"):
        model.deployment_nodes.append(_parse_deployment_node(dn_data, reg))
    model.relationships = list(reg.relationships.values())
    return model


def _default_view_name(kind: ViewKind, data: dict[str, Any], reg: _Registry) -> str:
    """Display name for a view that does not declare one."""
    label = _VIEW_LABELS[kind]
    scope_id = _str(data.get("softwareSystemId") or data.get("containerId") or data.get("elementId"))
    scope = reg.elements.get(scope_id)
    if kind is ViewKind.DEPLOYMENT:
        environment = _str(data.get("environment")) or "Default"
        prefix = scope.name if scope is not None else "Deployment"
        return f"{prefix} - {environment}"
    if scope is not None:
        return f"{scope.name} - {label}"
    return label


def _parse_view(kind: ViewKind, data: dict[str, Any], reg: _Registry) -> View:
    key = _str(data.get("key"))
    view = View(
        key=key,
        kind=kind,
        title=_str(data.get("title")),
        description=_str(data.get("description")),
    )
    view.name = _str(data.get("name")) or view.title or _default_view_name(kind, data, reg)

    for ref in _list(data, "elements"):
        element = reg.elements.get(_str(ref.get("id")))
        if element is None:
            logger.warning("View '%s' references unknown element '%s'", key, ref.get("id"))
            continue
        view.elements.append(element)
    for ref in _list(data, "relationships"):
        rel = reg.relationships.get(_str(ref.get("id")))
        if rel is None:
            logger.warning("View '%s' references unknown relationship '%s'", key, ref.get("id"))
            continue
        view.relationships.append(rel)
    return view


def workspace_from_dict(data: dict[str, Any]) -> Workspace:
    """Build a :class:`Workspace` from a parsed workspace document."""
    if not isinstance(data, dict):
        raise WorkspaceLoadError("Workspace document must be a mapping")
    raw_id = data.get("id")
    try:
        workspace_id = int(raw_id)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise WorkspaceLoadError(f"Workspace id must be an integer, got {raw_id!r}") from exc

    reg = _Registry()
    model = _parse_model(_mapping(data, "model"), reg)

    views = ViewSet()
    views_data = _mapping(data, "views")
    for kind, key in _VIEW_KEYS.items():
        views.by_kind(kind).extend(_parse_view(kind, v, reg) for v in _list(views_data, key))

    return Workspace(
        id=workspace_id,
        name=_str(data.get("name")),
        description=_str(data.get("description")),
        model=model,
        views=views,
        documentation=_parse_documentation(_mapping(data, "documentation")),
    )


def load_workspace(path: Path) -> Workspace:
    """Load a workspace from a ``.json`` / ``.yml`` / ``.yaml`` file."""
    try:
        text = path.read_text(encoding="utf-8")
        data = yaml.safe_load(text)
    except (OSError, yaml.YAMLError) as exc:
        raise WorkspaceLoadError(f"Cannot read workspace file {path}: {exc}") from exc
    if data is None:
        raise WorkspaceLoadError(f"Workspace file {path} is empty")
    return workspace_from_dict(data)
