"""Name resolution: node name -> stable node identifier."""
from typing import Sequence
from uuid import NAMESPACE_URL, uuid5

from n8n_workflow_builder.compiler.errors import DuplicateNodeNameError
from n8n_workflow_builder.models.workflow_spec import NodeSpec

NODE_ID_NAMESPACE = uuid5(NAMESPACE_URL, "n8n-workflow-builder/node")


def node_id_for(index: int, name: str) -> str:
    """Deterministic, UUID-shaped identifier for the node at ``index``."""
    return str(uuid5(NODE_ID_NAMESPACE, f"{index}:{name}"))


def find_duplicate_names(nodes: Sequence[NodeSpec]) -> list[str]:
    """Names declared more than once, in order of their first duplicate."""
    seen: set[str] = set()
    duplicates: list[str] = []
    for node in nodes:
        if node.name in seen and node.name not in duplicates:
            duplicates.append(node.name)
        seen.add(node.name)
    return duplicates


def resolve_node_ids(nodes: Sequence[NodeSpec]) -> dict[str, str]:
    """Map each node name to its identifier, preserving input order.

    Raises:
        DuplicateNodeNameError: for the first name declared twice. Names are
            compared exactly (case-sensitive).
    """
    node_ids: dict[str, str] = {}
    for index, node in enumerate(nodes):
        if node.name in node_ids:
            raise DuplicateNodeNameError(node.name)
        node_ids[node.name] = node_id_for(index, node.name)
    return node_ids


def first_node_ids(nodes: Sequence[NodeSpec]) -> dict[str, str]:
    """Like ``resolve_node_ids`` but keeps the first node for a repeated name."""
    node_ids: dict[str, str] = {}
    for index, node in enumerate(nodes):
        node_ids.setdefault(node.name, node_id_for(index, node.name))
    return node_ids
