"""Compiler from the simplified workflow form to n8n-ready graphs."""
from n8n_workflow_builder.compiler.compiler import (
    WorkflowCompiler,
    compile_workflow,
    DEFAULT_WORKFLOW_NAME,
)
from n8n_workflow_builder.compiler.errors import (
    CompileError,
    ConnectionSide,
    EmptyWorkflowError,
    DuplicateNodeNameError,
    UnknownNodeReferenceError,
    InvalidPortIndexError,
    InvalidWorkflowSpecError,
)

__all__ = [
    "WorkflowCompiler",
    "compile_workflow",
    "DEFAULT_WORKFLOW_NAME",
    "CompileError",
    "ConnectionSide",
    "EmptyWorkflowError",
    "DuplicateNodeNameError",
    "UnknownNodeReferenceError",
    "InvalidPortIndexError",
    "InvalidWorkflowSpecError",
]
