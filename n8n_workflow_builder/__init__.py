"""MCP server for building and running n8n workflows."""

__version__ = "0.3.0"
