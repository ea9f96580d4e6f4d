"""Compiler to transform a WorkflowSpec into an n8n-ready CompiledWorkflow.

The compiler handles:
- Resolving node names to stable identifiers
- Normalizing connection port indices
- Checking that every connection references a declared node
- Assigning default positions for layout

It performs no I/O. Every call works on its own input and returns freshly
built, immutable output, so one compiler can be shared freely.
"""
from copy import deepcopy
from typing import Any, Mapping

import structlog
from pydantic import ValidationError

from n8n_workflow_builder.compiler.errors import (
    CompileError,
    DuplicateNodeNameError,
    EmptyWorkflowError,
    InvalidWorkflowSpecError,
)
from n8n_workflow_builder.compiler.layout import assign_positions
from n8n_workflow_builder.compiler.normalizer import (
    PortConnection,
    normalize_connections,
    port_errors,
)
from n8n_workflow_builder.compiler.resolver import (
    find_duplicate_names,
    first_node_ids,
    resolve_node_ids,
)
from n8n_workflow_builder.compiler.validator import (
    ensure_not_empty,
    reference_errors,
    validate_connections,
)
from n8n_workflow_builder.models.compiled import CompiledWorkflow, ResolvedNode
from n8n_workflow_builder.models.workflow_spec import WorkflowSpec

logger = structlog.get_logger()

DEFAULT_WORKFLOW_NAME = "New Workflow"


class WorkflowCompiler:
    """Compiles WorkflowSpec to CompiledWorkflow."""

    def __init__(self, default_name: str = DEFAULT_WORKFLOW_NAME):
        self.default_name = default_name

    def compile(self, spec: WorkflowSpec) -> CompiledWorkflow:
        """Compile a WorkflowSpec, failing on the first structural error.

        Stages run in a fixed order, so the error raised for a spec with
        several problems is always the same one ``check`` lists first.

        Raises:
            CompileError: one of EmptyWorkflowError, DuplicateNodeNameError,
                InvalidPortIndexError or UnknownNodeReferenceError.
        """
        name = spec.name or self.default_name
        logger.info(
            "compile_start",
            workflow_name=name,
            node_count=len(spec.nodes),
            connection_count=len(spec.connections),
        )

        try:
            ensure_not_empty(spec.nodes)
            node_ids = resolve_node_ids(spec.nodes)
            port_connections = normalize_connections(spec.connections)
            connections = validate_connections(port_connections, node_ids)
        except CompileError as e:
            logger.warning("compile_failed", workflow_name=name, **e.to_dict())
            raise

        positions = assign_positions(spec.nodes)
        nodes = tuple(
            ResolvedNode(
                id=node_ids[node.name],
                index=index,
                name=node.name,
                type=node.type,
                type_version=node.type_version,
                parameters=deepcopy(node.parameters),
                position=positions[index],
                credentials=deepcopy(node.credentials),
            )
            for index, node in enumerate(spec.nodes)
        )

        compiled = CompiledWorkflow(
            name=name,
            nodes=nodes,
            connections=tuple(connections),
        )

        logger.info(
            "compile_complete",
            workflow_name=name,
            node_count=len(compiled.nodes),
            connection_count=len(compiled.connections),
        )

        return compiled

    def check(self, spec: WorkflowSpec) -> list[CompileError]:
        """Collect every structural error in one pass.

        Errors are ordered the way ``compile`` encounters them: duplicate
        names, then port problems, then dangling references, each in input
        order. Returns an empty list for a spec that compiles.
        """
        if not spec.nodes:
            return [EmptyWorkflowError()]

        errors: list[CompileError] = [
            DuplicateNodeNameError(name) for name in find_duplicate_names(spec.nodes)
        ]

        for index, connection in enumerate(spec.connections):
            errors.extend(port_errors(index, connection))

        node_ids = first_node_ids(spec.nodes)
        for index, connection in enumerate(spec.connections):
            # Ports are checked above; only the endpoint names matter here
            endpoints = PortConnection(index, connection.source, connection.target, 0, 0)
            errors.extend(reference_errors(endpoints, node_ids))

        return errors

    def parse(self, arguments: Mapping[str, Any]) -> WorkflowSpec:
        """Build a WorkflowSpec from deserialized tool arguments.

        Raises:
            InvalidWorkflowSpecError: for a missing or mistyped field. Port values
                are left to the normalizer so stage order holds.
        """
        try:
            return WorkflowSpec.model_validate(arguments)
        except ValidationError as e:
            raise spec_error_from_validation(e) from e

    def compile_arguments(self, arguments: Mapping[str, Any]) -> CompiledWorkflow:
        """Parse raw tool arguments and compile them."""
        return self.compile(self.parse(arguments))


def spec_error_from_validation(error: ValidationError) -> InvalidWorkflowSpecError:
    """Map the first pydantic error to a typed compile error."""
    first = error.errors()[0]
    location = tuple(first.get("loc", ()))
    return InvalidWorkflowSpecError(location, first.get("msg", "invalid value"), first.get("input"))


_default_compiler = WorkflowCompiler()


def compile_workflow(spec: WorkflowSpec) -> CompiledWorkflow:
    """Compile with default settings."""
    return _default_compiler.compile(spec)
