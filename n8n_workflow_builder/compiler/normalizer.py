"""Connection normalization: explicit, validated port indices.

Turns each ConnectionSpec into a PortConnection with both port indices
filled in. Name binding happens afterwards in the validator, so a
connection naming an unknown node still normalizes here.
"""
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from n8n_workflow_builder.compiler.errors import InvalidPortIndexError
from n8n_workflow_builder.models.workflow_spec import ConnectionSpec

SOURCE_OUTPUT_FIELD = "sourceOutput"
TARGET_INPUT_FIELD = "targetInput"


@dataclass(frozen=True)
class PortConnection:
    """A connection with defaulted ports, still addressed by node name."""
    index: int
    source: str
    target: str
    source_output: int
    target_input: int


def normalize_port(value: Optional[Any], connection_index: int, field: str) -> int:
    """Default an omitted port to 0 and reject anything but a non-negative int."""
    if value is None:
        return 0
    # bool is an int subclass but never a port
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidPortIndexError(connection_index, field, value)
    return value


def port_errors(index: int, connection: ConnectionSpec) -> list[InvalidPortIndexError]:
    """All port problems of one connection, source output first."""
    errors = []
    for field, value in (
        (SOURCE_OUTPUT_FIELD, connection.source_output),
        (TARGET_INPUT_FIELD, connection.target_input),
    ):
        try:
            normalize_port(value, index, field)
        except InvalidPortIndexError as e:
            errors.append(e)
    return errors


def normalize_connection(index: int, connection: ConnectionSpec) -> PortConnection:
    return PortConnection(
        index=index,
        source=connection.source,
        target=connection.target,
        source_output=normalize_port(connection.source_output, index, SOURCE_OUTPUT_FIELD),
        target_input=normalize_port(connection.target_input, index, TARGET_INPUT_FIELD),
    )


def normalize_connections(connections: Sequence[ConnectionSpec]) -> list[PortConnection]:
    """Normalize every connection, keeping input order.

    Raises:
        InvalidPortIndexError: for the first connection with a bad port.
    """
    return [
        normalize_connection(index, connection)
        for index, connection in enumerate(connections)
    ]
