"""Shared test fixtures for archsearch."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from archsearch.infrastructure.store import IndexStore
from archsearch.model.workspace import (
    Component,
    Container,
    ContainerInstance,
    Decision,
    DeploymentNode,
    Documentation,
    InfrastructureNode,
    Model,
    Person,
    Relationship,
    Section,
    SoftwareSystem,
    View,
    ViewKind,
    ViewSet,
    Workspace,
)
from archsearch.services.search_component import SqliteSearchComponent

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


def make_workspace(workspace_id: int = 1) -> Workspace:
    """A small payments workspace touching every indexed part of the model."""
    customer = Person("1", "Customer", "A card holder")
    component = Component(
        "4",
        "Fraud Checker",
        "Scores transactions",
        technology="Python",
        documentation=Documentation(sections=[Section("## Scoring\nGradient boosted trees.")]),
    )
    api = Container(
        "3",
        "API",
        "Accepts payment requests",
        technology="Java and Spring Boot",
        components=[component],
        documentation=Documentation(
            decisions=[
                Decision("2", "Use Kafka", "Proposed", "Events are published to Kafka.", "2024-02-01")
            ]
        ),
    )
    gateway = SoftwareSystem(
        "2",
        "Payment Gateway",
        "Handles card payments",
        containers=[api],
        documentation=Documentation(
            sections=[Section("Gateway intro.\n== Context\nSits behind the load balancer.")]
        ),
    )
    uses = Relationship("10", "1", "2", "Makes payments using", "HTTPS")

    api_instance = ContainerInstance("7", "API", "", container=api)
    route53 = InfrastructureNode("8", "Route 53", "Routes traffic", technology="DNS")
    ec2 = DeploymentNode(
        "6", "EC2", "Virtual machine", technology="Amazon Linux", container_instances=[api_instance]
    )
    aws = DeploymentNode(
        "5",
        "AWS",
        "Cloud region",
        technology="Amazon Web Services",
        children=[ec2],
        infrastructure_nodes=[route53],
    )

    views = ViewSet(
        system_context_views=[
            View(
                "Context",
                ViewKind.SYSTEM_CONTEXT,
                name="Payment Gateway - System Context",
                elements=[customer, gateway],
                relationships=[uses],
            )
        ],
        container_views=[
            View(
                "Containers",
                ViewKind.CONTAINER,
                name="Payment Gateway - Containers",
                title="Gateway internals",
                elements=[api],
            )
        ],
        deployment_views=[
            View(
                "Live",
                ViewKind.DEPLOYMENT,
                name="Payment Gateway - Live",
                description="Production deployment",
                elements=[aws],
            )
        ],
    )

    return Workspace(
        id=workspace_id,
        name="Payments",
        description="Payment processing",
        model=Model(
            people=[customer],
            software_systems=[gateway],
            deployment_nodes=[aws],
            relationships=[uses],
        ),
        views=views,
        documentation=Documentation(
            sections=[Section("intro\n## Overview\nThe platform settles card transactions.")],
            decisions=[
                Decision("1", "Use PostgreSQL", "Accepted", "Ledger storage is PostgreSQL.", "2024-01-10")
            ],
        ),
    )


@pytest.fixture()
def workspace() -> Workspace:
    return make_workspace()


@pytest.fixture()
def store(tmp_path: Path) -> Iterator[IndexStore]:
    """A started index store under ``tmp_path``."""
    index_store = IndexStore(tmp_path / "data")
    index_store.start()
    yield index_store
    index_store.stop()


@pytest.fixture()
def component(tmp_path: Path) -> Iterator[SqliteSearchComponent]:
    """A started SQLite search component under ``tmp_path``."""
    search_component = SqliteSearchComponent(tmp_path / "data")
    search_component.start()
    yield search_component
    search_component.stop()
