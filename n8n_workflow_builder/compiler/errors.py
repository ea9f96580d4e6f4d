"""Errors raised while compiling a WorkflowSpec.

Every rejected input produces exactly one of these. Each carries a stable
``kind`` string so callers (the MCP layer, tests) can branch on it without
importing the concrete classes.
"""
from enum import Enum
from typing import Any, Optional


class ConnectionSide(str, Enum):
    """Which end of a connection an error refers to."""
    SOURCE = "source"
    TARGET = "target"


class CompileError(Exception):
    """Base class for workflow compilation failures."""

    kind: str = "CompileError"

    def to_dict(self) -> dict:
        """Structured form of the error for tool responses."""
        return {"kind": self.kind, "message": str(self)}


class EmptyWorkflowError(CompileError):
    """The workflow declares no nodes."""

    kind = "EmptyWorkflow"

    def __init__(self):
        super().__init__("Workflow must declare at least one node")


class DuplicateNodeNameError(CompileError):
    """Two or more nodes share the same name."""

    kind = "DuplicateNodeName"

    def __init__(self, name: str):
        super().__init__(f"Duplicate node name: '{name}'")
        self.name = name

    def to_dict(self) -> dict:
        return {**super().to_dict(), "name": self.name}


class UnknownNodeReferenceError(CompileError):
    """A connection names a node that was never declared."""

    kind = "UnknownNodeReference"

    def __init__(self, connection_index: int, side: ConnectionSide, name: str):
        side = ConnectionSide(side)
        super().__init__(
            f"Connection {connection_index} {side.value} references unknown node '{name}'"
        )
        self.connection_index = connection_index
        self.side = side
        self.name = name

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "connection_index": self.connection_index,
            "side": self.side.value,
            "name": self.name,
        }


class InvalidPortIndexError(CompileError):
    """A connection carries a negative or non-integer port index."""

    kind = "InvalidPortIndex"

    def __init__(self, connection_index: int, field: str, value: Any):
        super().__init__(
            f"Connection {connection_index} has invalid {field}: {value!r} "
            "(expected a non-negative integer)"
        )
        self.connection_index = connection_index
        self.field = field
        self.value = value

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "connection_index": self.connection_index,
            "field": self.field,
            "value": self.value,
        }


class InvalidWorkflowSpecError(CompileError):
    """Tool arguments could not be parsed into a WorkflowSpec."""

    kind = "InvalidWorkflowSpec"

    def __init__(self, location: tuple, detail: str, value: Optional[Any] = None):
        where = ".".join(str(part) for part in location) or "<root>"
        super().__init__(f"Invalid workflow spec at {where}: {detail}")
        self.location = tuple(location)
        self.detail = detail
        self.value = value

    def to_dict(self) -> dict:
        return {
            **super().to_dict(),
            "location": list(self.location),
            "detail": self.detail,
        }
