"""MCP resources: workflow listings, workflow/execution details and stats."""
import re
from typing import Any

import structlog
from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, ErrorData, Resource, ResourceTemplate

from n8n_workflow_builder.n8n.client import N8NClient, N8NClientError
from n8n_workflow_builder.n8n.stats import ExecutionStats, summarize_executions

logger = structlog.get_logger()

JSON_MIME_TYPE = "application/json"

WORKFLOWS_URI = "n8n://workflows"
EXECUTION_STATS_URI = "n8n://execution-stats"

_WORKFLOW_URI = re.compile(r"^n8n://workflows/(.+)$")
_EXECUTION_URI = re.compile(r"^n8n://executions/(.+)$")

RESOURCES = [
    Resource(
        uri=WORKFLOWS_URI,
        name="Workflows List",
        description="List of all available workflows",
        mimeType=JSON_MIME_TYPE,
    ),
    Resource(
        uri=EXECUTION_STATS_URI,
        name="Execution Statistics",
        description="Summary statistics of workflow executions",
        mimeType=JSON_MIME_TYPE,
    ),
]

RESOURCE_TEMPLATES = [
    ResourceTemplate(
        uriTemplate="n8n://workflows/{id}",
        name="Workflow Details",
        description="Details of a specific workflow",
        mimeType=JSON_MIME_TYPE,
    ),
    ResourceTemplate(
        uriTemplate="n8n://executions/{id}",
        name="Execution Details",
        description="Details of a specific execution",
        mimeType=JSON_MIME_TYPE,
    ),
]


def _invalid(message: str) -> McpError:
    return McpError(ErrorData(code=INVALID_PARAMS, message=message))


class ResourceReader:
    """Resolves resource URIs to JSON-serializable content."""

    def __init__(self, client: N8NClient, stats_limit: int = 100):
        self.client = client
        self.stats_limit = stats_limit

    async def read(self, uri: str) -> Any:
        """Read a resource.

        Raises:
            McpError: INVALID_PARAMS for unknown URIs, non-numeric execution
                IDs and workflows/executions n8n can't find.
        """
        # AnyUrl may add a trailing slash to bare scheme://host URIs
        uri = str(uri).rstrip("/")
        logger.info("read_resource", uri=uri)

        if uri == WORKFLOWS_URI:
            return await self.client.list_all_workflows()

        if uri == EXECUTION_STATS_URI:
            return await self.execution_stats()

        match = _WORKFLOW_URI.match(uri)
        if match:
            workflow_id = match.group(1)
            try:
                return await self.client.get_workflow(workflow_id)
            except N8NClientError as e:
                raise _invalid(f"Workflow with ID {workflow_id} not found") from e

        match = _EXECUTION_URI.match(uri)
        if match:
            try:
                execution_id = int(match.group(1))
            except ValueError:
                raise _invalid("Execution ID must be a number")
            try:
                return await self.client.get_execution(execution_id, include_data=True)
            except N8NClientError as e:
                raise _invalid(f"Execution with ID {execution_id} not found") from e

        raise _invalid(f"Resource not found: {uri}")

    async def execution_stats(self) -> dict:
        """Stats over the latest executions; zeros plus an error if n8n fails."""
        try:
            page = await self.client.list_executions(limit=self.stats_limit)
        except N8NClientError as e:
            logger.error("execution_stats_error", error=str(e))
            return ExecutionStats(error="Failed to retrieve execution statistics").to_dict()

        return summarize_executions(page.get("data", [])).to_dict()
