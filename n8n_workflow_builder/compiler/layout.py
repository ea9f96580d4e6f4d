"""Default canvas layout for nodes that don't specify a position."""
from typing import Sequence

from n8n_workflow_builder.models.workflow_spec import NodeSpec

LAYOUT_ORIGIN = (250, 300)
LAYOUT_STRIDE_X = 200


def default_position(index: int) -> tuple[int, int]:
    """Position of the ``index``-th node on a single left-to-right row."""
    x, y = LAYOUT_ORIGIN
    return (x + LAYOUT_STRIDE_X * index, y)


def assign_positions(nodes: Sequence[NodeSpec]) -> list[tuple[int, int]]:
    """One position per node; explicit positions are kept as given."""
    return [
        node.position if node.position is not None else default_position(index)
        for index, node in enumerate(nodes)
    ]
