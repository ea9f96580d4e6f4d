"""CompiledWorkflow - the engine-ready graph produced by the compiler.

Nodes are addressed by stable identifier instead of by name, every node has
a concrete position, and every connection carries explicit port indices.
``CompiledWorkflow.to_n8n()`` renders the body n8n's create/update
endpoints expect.
"""
from copy import deepcopy
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Sent with every workflow; n8n rejects create/update bodies without settings.
# Note: 'tags' and 'staticData' are read-only in the n8n API - never include them
DEFAULT_WORKFLOW_SETTINGS = {
    "executionOrder": "v1",
    "saveManualExecutions": True,
    "callerPolicy": "workflowsFromSameOwner",
}

MAIN_CONNECTION_TYPE = "main"


class ResolvedNode(BaseModel):
    """A declared node with its identifier and layout position assigned."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable node identifier")
    index: int = Field(..., description="Position of the node in the input")
    name: str
    type: str
    type_version: Union[int, float] = 1
    parameters: dict[str, Any] = Field(default_factory=dict)
    position: tuple[int, int]
    credentials: Optional[dict[str, Any]] = None

    def to_n8n(self) -> dict:
        """Render the node; nested dicts are copies, never shared with the model."""
        node = {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "typeVersion": self.type_version,
            "position": list(self.position),
            "parameters": deepcopy(self.parameters),
        }
        if self.credentials:
            node["credentials"] = deepcopy(self.credentials)
        return node


class CompiledConnection(BaseModel):
    """A connection addressed by resolved node identifiers."""

    model_config = ConfigDict(frozen=True)

    index: int = Field(..., description="Position of the connection in the input")
    source_id: str
    source_name: str
    target_id: str
    target_name: str
    source_output: int = 0
    target_input: int = 0

    @property
    def is_self_loop(self) -> bool:
        return self.source_id == self.target_id


class CompiledWorkflow(BaseModel):
    """Validated, fully resolved workflow ready to send to n8n."""

    model_config = ConfigDict(frozen=True)

    name: str
    nodes: tuple[ResolvedNode, ...]
    connections: tuple[CompiledConnection, ...] = ()

    def get_node(self, node_id: str) -> Optional[ResolvedNode]:
        """Get a node by its identifier."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_n8n(self) -> dict:
        """Render the workflow in n8n's JSON format.

        n8n keys connections by source node name and groups them by output
        index:
        {
            "Node Name": {
                "main": [
                    [{"node": "Target Node", "type": "main", "index": 0}],  # output 0
                    [{"node": "Target Node 2", "type": "main", "index": 0}],  # output 1
                ]
            }
        }
        Source keys appear in order of first use and each output slot keeps
        the input order of its targets.
        """
        connections: dict[str, dict[str, list]] = {}

        for conn in self.connections:
            outputs = connections.setdefault(
                conn.source_name, {MAIN_CONNECTION_TYPE: []}
            )[MAIN_CONNECTION_TYPE]
            while len(outputs) <= conn.source_output:
                outputs.append([])
            outputs[conn.source_output].append({
                "node": conn.target_name,
                "type": MAIN_CONNECTION_TYPE,
                "index": conn.target_input,
            })

        return {
            "name": self.name,
            "nodes": [node.to_n8n() for node in self.nodes],
            "connections": connections,
            "settings": dict(DEFAULT_WORKFLOW_SETTINGS),
        }
