"""MCP server exposing n8n workflows and executions as tools and resources."""
from n8n_workflow_builder.server.app import build_server
from n8n_workflow_builder.server.resources import ResourceReader
from n8n_workflow_builder.server.tools import TOOL_DEFINITIONS, ToolDispatcher

__all__ = ["build_server", "ResourceReader", "TOOL_DEFINITIONS", "ToolDispatcher"]
