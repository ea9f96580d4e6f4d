"""Pydantic models for workflow specs and compiled workflows."""
from n8n_workflow_builder.models.workflow_spec import (
    WorkflowSpec,
    NodeSpec,
    ConnectionSpec,
)
from n8n_workflow_builder.models.compiled import (
    CompiledWorkflow,
    CompiledConnection,
    ResolvedNode,
    DEFAULT_WORKFLOW_SETTINGS,
)

__all__ = [
    "WorkflowSpec",
    "NodeSpec",
    "ConnectionSpec",
    "CompiledWorkflow",
    "CompiledConnection",
    "ResolvedNode",
    "DEFAULT_WORKFLOW_SETTINGS",
]
