"""MCP tool definitions and dispatch.

Each tool maps onto one n8n client call. ``create_workflow`` and
``update_workflow`` run the arguments through the WorkflowCompiler first,
so nothing malformed is ever sent to n8n.
"""
from typing import Any, Awaitable, Callable, Optional

import structlog
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData, Tool

from n8n_workflow_builder.compiler import CompileError, WorkflowCompiler
from n8n_workflow_builder.n8n.client import N8NClient
from n8n_workflow_builder.n8n.filters import DEFAULT_LIST_LIMIT, filter_workflows

logger = structlog.get_logger()

_ID_SCHEMA = {
    "type": "object",
    "properties": {"id": {"type": "string", "description": "The ID of the workflow"}},
    "required": ["id"],
}

_NODE_SCHEMA = {
    "type": "object",
    "properties": {
        "type": {"type": "string"},
        "name": {"type": "string"},
        "parameters": {"type": "object"},
        "typeVersion": {"type": "number"},
        "position": {"type": "array", "items": {"type": "number"}},
        "credentials": {"type": "object"},
    },
    "required": ["type", "name"],
}

_CONNECTION_SCHEMA = {
    "type": "object",
    "properties": {
        "source": {"type": "string"},
        "target": {"type": "string"},
        "sourceOutput": {"type": "number", "default": 0},
        "targetInput": {"type": "number", "default": 0},
    },
    "required": ["source", "target"],
}

_WORKFLOW_PROPERTIES = {
    "name": {"type": "string"},
    "nodes": {"type": "array", "items": _NODE_SCHEMA},
    "connections": {"type": "array", "items": _CONNECTION_SCHEMA},
}

TOOL_DEFINITIONS = [
    # Workflow tools
    Tool(
        name="list_workflows",
        description="List workflows from n8n with optional search, filter and pagination",
        inputSchema={
            "type": "object",
            "properties": {
                "search": {
                    "type": "string",
                    "description": "Search workflows by name (case-insensitive)",
                },
                "active": {
                    "type": "boolean",
                    "description": "Filter by active status (true=active only, false=inactive only, omitted=all)",
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Filter by workflow tags",
                },
                "limit": {
                    "type": "number",
                    "default": DEFAULT_LIST_LIMIT,
                    "description": "Maximum number of workflows to return",
                },
                "offset": {
                    "type": "number",
                    "default": 0,
                    "description": "Number of workflows to skip for pagination",
                },
            },
        },
    ),
    Tool(
        name="execute_workflow",
        description="Execute a workflow manually by ID",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "string", "description": "The ID of the workflow to execute"},
                "inputData": {
                    "type": "object",
                    "description": "Optional input data to pass to the workflow (for manual trigger workflows)",
                },
            },
            "required": ["id"],
        },
    ),
    Tool(
        name="retry_execution",
        description="Retry a failed execution",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "number", "description": "The ID of the execution to retry"},
            },
            "required": ["id"],
        },
    ),
    Tool(
        name="create_workflow",
        description="Create a new workflow in n8n",
        inputSchema={
            "type": "object",
            "properties": _WORKFLOW_PROPERTIES,
            "required": ["nodes"],
        },
    ),
    Tool(
        name="validate_workflow",
        description="Check a workflow definition locally and return every structural error, or the compiled n8n workflow",
        inputSchema={
            "type": "object",
            "properties": _WORKFLOW_PROPERTIES,
            "required": ["nodes"],
        },
    ),
    Tool(name="get_workflow", description="Get a workflow by ID", inputSchema=_ID_SCHEMA),
    Tool(
        name="update_workflow",
        description="Update an existing workflow",
        inputSchema={
            "type": "object",
            "properties": {"id": {"type": "string"}, **_WORKFLOW_PROPERTIES},
            "required": ["id", "nodes"],
        },
    ),
    Tool(name="delete_workflow", description="Delete a workflow by ID", inputSchema=_ID_SCHEMA),
    Tool(name="activate_workflow", description="Activate a workflow by ID", inputSchema=_ID_SCHEMA),
    Tool(name="deactivate_workflow", description="Deactivate a workflow by ID", inputSchema=_ID_SCHEMA),
    # Execution tools
    Tool(
        name="list_executions",
        description="List all executions from n8n with optional filters",
        inputSchema={
            "type": "object",
            "properties": {
                "includeData": {"type": "boolean"},
                "status": {"type": "string", "enum": ["error", "success", "waiting"]},
                "workflowId": {"type": "string"},
                "projectId": {"type": "string"},
                "limit": {"type": "number"},
                "cursor": {"type": "string"},
            },
        },
    ),
    Tool(
        name="get_execution",
        description="Get details of a specific execution by ID",
        inputSchema={
            "type": "object",
            "properties": {
                "id": {"type": "number"},
                "includeData": {"type": "boolean"},
            },
            "required": ["id"],
        },
    ),
    Tool(
        name="delete_execution",
        description="Delete an execution by ID",
        inputSchema={
            "type": "object",
            "properties": {"id": {"type": "number"}},
            "required": ["id"],
        },
    ),
]


def invalid_params(message: str, data: Optional[Any] = None) -> McpError:
    return McpError(ErrorData(code=INVALID_PARAMS, message=message, data=data))


def _require_id(arguments: dict, what: str) -> Any:
    value = arguments.get("id")
    if value is None or value == "":
        raise invalid_params(f"{what} ID is required")
    return value


def _execution_id(arguments: dict) -> int:
    value = _require_id(arguments, "Execution")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise invalid_params("Execution ID must be a number")


def _int_argument(arguments: dict, key: str, default: int) -> int:
    value = arguments.get(key)
    if value is None or value == "":
        return default
    # bool is an int subclass but never a count
    if isinstance(value, bool):
        raise invalid_params(f"{key} must be a number")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise invalid_params(f"{key} must be a number")


class ToolDispatcher:
    """Routes MCP tool calls to the n8n client."""

    def __init__(self, client: N8NClient, compiler: Optional[WorkflowCompiler] = None):
        self.client = client
        self.compiler = compiler or WorkflowCompiler()
        self._handlers: dict[str, Callable[[dict], Awaitable[Any]]] = {
            "list_workflows": self.list_workflows,
            "execute_workflow": self.execute_workflow,
            "retry_execution": self.retry_execution,
            "create_workflow": self.create_workflow,
            "validate_workflow": self.validate_workflow,
            "get_workflow": self.get_workflow,
            "update_workflow": self.update_workflow,
            "delete_workflow": self.delete_workflow,
            "activate_workflow": self.activate_workflow,
            "deactivate_workflow": self.deactivate_workflow,
            "list_executions": self.list_executions,
            "get_execution": self.get_execution,
            "delete_execution": self.delete_execution,
        }

    @property
    def tool_names(self) -> list[str]:
        return list(self._handlers)

    async def call(self, name: str, arguments: Optional[dict]) -> Any:
        """Run a tool and return its JSON-serializable result.

        Raises:
            McpError: METHOD_NOT_FOUND for unknown tools, INVALID_PARAMS for
                missing IDs and workflow definitions that don't compile.
            N8NClientError: when n8n rejects the request.
        """
        handler = self._handlers.get(name)
        if handler is None:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))

        logger.info("tool_call", tool=name)
        try:
            return await handler(arguments or {})
        except CompileError as e:
            raise invalid_params(f"{e.kind}: {e}", data=e.to_dict()) from e

    # Workflow tools

    async def list_workflows(self, arguments: dict) -> dict:
        workflows = await self.client.list_all_workflows()
        return filter_workflows(
            workflows,
            search=arguments.get("search"),
            active=arguments.get("active"),
            tags=arguments.get("tags"),
            offset=_int_argument(arguments, "offset", 0),
            limit=_int_argument(arguments, "limit", DEFAULT_LIST_LIMIT),
        )

    async def execute_workflow(self, arguments: dict) -> dict:
        workflow_id = _require_id(arguments, "Workflow")
        return await self.client.execute_workflow(str(workflow_id), arguments.get("inputData"))

    async def retry_execution(self, arguments: dict) -> dict:
        return await self.client.retry_execution(_execution_id(arguments))

    async def create_workflow(self, arguments: dict) -> dict:
        compiled = self.compiler.compile_arguments(arguments)
        return await self.client.create_workflow(compiled.to_n8n())

    async def validate_workflow(self, arguments: dict) -> dict:
        try:
            spec = self.compiler.parse(arguments)
        except CompileError as e:
            return {"valid": False, "errors": [e.to_dict()]}

        errors = self.compiler.check(spec)
        if errors:
            return {"valid": False, "errors": [e.to_dict() for e in errors]}

        return {"valid": True, "errors": [], "workflow": self.compiler.compile(spec).to_n8n()}

    async def get_workflow(self, arguments: dict) -> dict:
        return await self.client.get_workflow(str(_require_id(arguments, "Workflow")))

    async def update_workflow(self, arguments: dict) -> dict:
        workflow_id = str(_require_id(arguments, "Workflow"))
        compiled = self.compiler.compile_arguments(arguments)

        # Keep the current name rather than renaming to the default
        if not arguments.get("name"):
            existing = await self.client.get_workflow(workflow_id)
            if existing.get("name"):
                compiled = compiled.model_copy(update={"name": existing["name"]})

        return await self.client.update_workflow(workflow_id, compiled.to_n8n())

    async def delete_workflow(self, arguments: dict) -> dict:
        return await self.client.delete_workflow(str(_require_id(arguments, "Workflow")))

    async def activate_workflow(self, arguments: dict) -> dict:
        return await self.client.activate_workflow(str(_require_id(arguments, "Workflow")))

    async def deactivate_workflow(self, arguments: dict) -> dict:
        return await self.client.deactivate_workflow(str(_require_id(arguments, "Workflow")))

    # Execution tools

    async def list_executions(self, arguments: dict) -> dict:
        return await self.client.list_executions(
            include_data=arguments.get("includeData"),
            status=arguments.get("status"),
            workflow_id=arguments.get("workflowId"),
            project_id=arguments.get("projectId"),
            limit=arguments.get("limit"),
            cursor=arguments.get("cursor"),
        )

    async def get_execution(self, arguments: dict) -> dict:
        return await self.client.get_execution(
            _execution_id(arguments),
            include_data=bool(arguments.get("includeData")),
        )

    async def delete_execution(self, arguments: dict) -> dict:
        return await self.client.delete_execution(_execution_id(arguments))
