"""Shared fixtures and builders for the test suite."""
import pytest

from n8n_workflow_builder.compiler import WorkflowCompiler
from n8n_workflow_builder.models import ConnectionSpec, NodeSpec, WorkflowSpec


def node(name: str, type: str = "n8n-nodes-base.noOp", **kwargs) -> NodeSpec:
    return NodeSpec(name=name, type=type, **kwargs)


def link(source: str, target: str, **kwargs) -> ConnectionSpec:
    return ConnectionSpec(source=source, target=target, **kwargs)


def workflow(nodes, connections=(), name=None) -> WorkflowSpec:
    return WorkflowSpec(name=name, nodes=nodes, connections=connections)


@pytest.fixture
def compiler():
    """Get a fresh compiler instance."""
    return WorkflowCompiler()
