"""Model domain: read-only workspace entities and the workspace-file loader."""

from archsearch.model.loader import WorkspaceLoadError, load_workspace, workspace_from_dict
from archsearch.model.workspace import (
    Component,
    Container,
    ContainerInstance,
    CustomElement,
    Decision,
    DeploymentNode,
    Documentation,
    Element,
    HasDeploymentChildren,
    HasInstanceOf,
    HasTechnology,
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

__all__ = [
    "Component",
    "Container",
    "ContainerInstance",
    "CustomElement",
    "Decision",
    "DeploymentNode",
    "Documentation",
    "Element",
    "HasDeploymentChildren",
    "HasInstanceOf",
    "HasTechnology",
    "InfrastructureNode",
    "Model",
    "Person",
    "Relationship",
    "Section",
    "SoftwareSystem",
    "SoftwareSystemInstance",
    "View",
    "ViewKind",
    "ViewSet",
    "Workspace",
    "WorkspaceLoadError",
    "load_workspace",
    "workspace_from_dict",
]
