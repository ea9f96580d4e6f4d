"""Structural validation of a workflow graph.

Checks only graph integrity: at least one node, and every connection
endpoint naming a declared node. Node types and parameters are left to n8n.
Self-loops are allowed; n8n decides what a loop means.
"""
from typing import Mapping, Sequence

from n8n_workflow_builder.compiler.errors import (
    ConnectionSide,
    EmptyWorkflowError,
    UnknownNodeReferenceError,
)
from n8n_workflow_builder.compiler.normalizer import PortConnection
from n8n_workflow_builder.models.compiled import CompiledConnection
from n8n_workflow_builder.models.workflow_spec import NodeSpec


def ensure_not_empty(nodes: Sequence[NodeSpec]) -> None:
    if not nodes:
        raise EmptyWorkflowError()


def reference_errors(
    connection: PortConnection,
    node_ids: Mapping[str, str],
) -> list[UnknownNodeReferenceError]:
    """Unresolved endpoints of one connection, source side first."""
    errors = []
    if connection.source not in node_ids:
        errors.append(UnknownNodeReferenceError(
            connection.index, ConnectionSide.SOURCE, connection.source,
        ))
    if connection.target not in node_ids:
        errors.append(UnknownNodeReferenceError(
            connection.index, ConnectionSide.TARGET, connection.target,
        ))
    return errors


def bind_connection(
    connection: PortConnection,
    node_ids: Mapping[str, str],
) -> CompiledConnection:
    """Address a connection by node identifiers.

    Raises:
        UnknownNodeReferenceError: if either endpoint is not declared.
    """
    errors = reference_errors(connection, node_ids)
    if errors:
        raise errors[0]

    return CompiledConnection(
        index=connection.index,
        source_id=node_ids[connection.source],
        source_name=connection.source,
        target_id=node_ids[connection.target],
        target_name=connection.target,
        source_output=connection.source_output,
        target_input=connection.target_input,
    )


def validate_connections(
    connections: Sequence[PortConnection],
    node_ids: Mapping[str, str],
) -> list[CompiledConnection]:
    """Bind every connection in order, failing on the first dangling one."""
    return [bind_connection(connection, node_ids) for connection in connections]
