"""MCP server wiring: tool and resource handlers over the low-level Server."""
import json
from typing import Any, Iterable, Optional

import structlog
from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource, ResourceTemplate, TextContent, Tool
from pydantic import AnyUrl

from n8n_workflow_builder import __version__
from n8n_workflow_builder.compiler import WorkflowCompiler
from n8n_workflow_builder.config import Settings, get_settings
from n8n_workflow_builder.n8n.client import N8NClient
from n8n_workflow_builder.server.resources import (
    JSON_MIME_TYPE,
    RESOURCE_TEMPLATES,
    RESOURCES,
    ResourceReader,
)
from n8n_workflow_builder.server.tools import TOOL_DEFINITIONS, ToolDispatcher

logger = structlog.get_logger()


def to_json_text(result: Any) -> str:
    return json.dumps(result, indent=2, default=str)


def build_server(
    client: N8NClient,
    settings: Optional[Settings] = None,
    compiler: Optional[WorkflowCompiler] = None,
) -> Server:
    """Create the MCP server with every tool and resource registered."""
    settings = settings or get_settings()
    dispatcher = ToolDispatcher(client, compiler)
    reader = ResourceReader(client, stats_limit=settings.execution_stats_limit)

    server = Server(settings.app_name, version=__version__)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        return list(TOOL_DEFINITIONS)

    @server.call_tool()
    async def call_tool(name: str, arguments: dict) -> list[TextContent]:
        try:
            result = await dispatcher.call(name, arguments)
        except Exception as e:
            # The SDK turns the exception into an error result for the agent
            logger.error("tool_call_failed", tool=name, error=str(e))
            raise
        return [TextContent(type="text", text=to_json_text(result))]

    @server.list_resources()
    async def list_resources() -> list[Resource]:
        return list(RESOURCES)

    @server.list_resource_templates()
    async def list_resource_templates() -> list[ResourceTemplate]:
        return list(RESOURCE_TEMPLATES)

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        content = await reader.read(str(uri))
        return [ReadResourceContents(content=to_json_text(content), mime_type=JSON_MIME_TYPE)]

    return server
