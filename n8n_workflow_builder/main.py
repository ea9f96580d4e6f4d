"""MCP stdio server entry point."""
import asyncio
import logging
import sys

import structlog
from mcp.server.stdio import stdio_server

from n8n_workflow_builder.config import Settings, get_settings
from n8n_workflow_builder.n8n.client import N8NClient
from n8n_workflow_builder.server import build_server


def configure_logging(settings: Settings) -> None:
    """Configure structured logging.

    stdout carries the MCP protocol stream, so every log line goes to stderr.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.log_json
        else structlog.dev.ConsoleRenderer(colors=False)
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


async def serve(settings: Settings) -> None:
    logger = structlog.get_logger()

    client = N8NClient()
    server = build_server(client, settings)

    logger.info(
        "application_startup",
        app_name=settings.app_name,
        n8n_host=settings.n8n_host,
    )

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

    logger.info("application_shutdown")


def main() -> None:
    settings = get_settings()
    configure_logging(settings)

    if not settings.has_api_key():
        structlog.get_logger().error(
            "missing_configuration",
            hint="Set N8N_API_KEY (and N8N_HOST) in the environment or .env",
        )
        sys.exit(1)

    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
