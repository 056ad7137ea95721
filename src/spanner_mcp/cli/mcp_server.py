"""MCP server entry point for Spanner operations."""

import sys
import asyncio
import argparse
import signal
from typing import List, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from mcp.types import TextContent
from pydantic import ValidationError

from spanner_mcp import __version__
from spanner_mcp.models.config import ServerConfig
from spanner_mcp.models.error_types import MCPError, InvalidArgumentError
from spanner_mcp.models.tool_requests import PlanRequest, GetDdlRequest, UpdateDdlRequest
from spanner_mcp.services.spanner_service import SpannerService
from spanner_mcp.lib.mcp_tools import explain_plan, get_ddl as fetch_ddl, update_ddl as apply_ddl
from spanner_mcp.transport.stdio_server import StdioTransport
from spanner_mcp.lib.logging_config import setup_logging, get_logger

logger = get_logger(__name__)

# Initialize MCP server
mcp = FastMCP("Spanner MCP", version=__version__)

# Global Spanner service instance
spanner_service: Optional[SpannerService] = None


def initialize_service(config: Optional[ServerConfig] = None) -> SpannerService:
    """Create the Spanner service from configuration."""
    global spanner_service
    try:
        config = config or ServerConfig()
        spanner_service = SpannerService(config.to_dict())
        logger.info("Spanner service initialized")
        return spanner_service
    except Exception as e:
        logger.error(f"Failed to initialize Spanner service: {e}")
        raise


def build_request(model, **arguments):
    """Validate raw tool arguments into a request model.

    Raises:
        InvalidArgumentError: On the first failing field
    """
    try:
        return model(**arguments)
    except ValidationError as e:
        error = e.errors()[0]
        argument = '.'.join(str(part) for part in error['loc']) or model.__name__
        raise InvalidArgumentError(argument, error['msg'])


async def run_tool(tool_name: str, func, model, **arguments) -> List[TextContent]:
    """Validate arguments, run a tool off the event loop and report failures.

    MCP errors are re-raised as ToolError so the caller gets an error
    result carrying the message instead of tool output.
    """
    tool_logger = get_logger(__name__, {'tool': tool_name})
    try:
        if not spanner_service:
            initialize_service()
        request = build_request(model, **arguments)
        tool_logger = tool_logger.bind(database=request.path)
        tool_logger.debug(f"Calling {tool_name}")
        return await asyncio.to_thread(func, spanner_service, request)
    except MCPError as e:
        tool_logger.error(f"MCP error in {tool_name}: {e}")
        suffix = " (retryable)" if e.recoverable else ""
        raise ToolError(f"{e.message}{suffix}") from e
    except Exception as e:
        tool_logger.error(f"Unexpected error in {tool_name}: {e}", exc_info=True)
        raise ToolError(f"Unexpected error: {str(e)}") from e


@mcp.tool(name="plan")
async def plan(query: str, project: str, instance: str, database: str) -> List[TextContent]:
    """Get execution plan for the query. The first content is machine-readable prototext format of QueryPlan message. The second content is human-readable rendered query plan.

    Args:
        query: query text of SQL or GQL
        project: Google Cloud project
        instance: Spanner instance id
        database: Spanner database id
    """
    return await run_tool(
        "plan", explain_plan, PlanRequest,
        query=query, project=project, instance=instance, database=database
    )


@mcp.tool(name="get_ddl")
async def get_ddl(project: str, instance: str, database: str,
                  include_proto_descriptors: bool = False) -> List[TextContent]:
    """Get DDL of the database. The first content is the whole response, and the second content is unmarshalled proto_descriptors (optional).

    Args:
        project: Google Cloud project
        instance: Spanner instance id
        database: Spanner database id
        include_proto_descriptors: Enable only if proto_descriptors is needed.
    """
    return await run_tool(
        "get_ddl", fetch_ddl, GetDdlRequest,
        project=project, instance=instance, database=database,
        include_proto_descriptors=include_proto_descriptors
    )


@mcp.tool(name="update_ddl")
async def update_ddl(project: str, instance: str, database: str,
                     statements: List[str]) -> List[TextContent]:
    """Update DDL of the database

    Args:
        project: Google Cloud project
        instance: Spanner instance id
        database: Spanner database id
        statements: DDL statements
    """
    return await run_tool(
        "update_ddl", apply_ddl, UpdateDdlRequest,
        project=project, instance=instance, database=database, statements=statements
    )


def shutdown_handler(signum, frame):
    """Handle shutdown signals gracefully.

    Args:
        signum: Signal number
        frame: Current stack frame
    """
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    cleanup_resources()
    sys.exit(0)


def cleanup_resources():
    """Clean up all resources on shutdown."""
    global spanner_service

    logger.info("Cleaning up resources...")
    if spanner_service:
        spanner_service.close()
        spanner_service = None
    logger.info("Cleanup complete")


def main():
    """Main entry point for the MCP server."""
    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    parser = argparse.ArgumentParser(description="Spanner MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport mode: stdio (default) or sse"
    )
    parser.add_argument(
        "--host",
        default="127.0.0.1",
        help="Host for SSE server (default: 127.0.0.1)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=3000,
        help="Port for SSE server (default: 3000)"
    )
    parser.add_argument(
        "--config",
        help="Path to YAML configuration file"
    )

    args = parser.parse_args()

    try:
        config = ServerConfig(args.config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(2)

    setup_logging(
        level=config.log_level,
        json_format=config.log_json,
        log_file=config.log_file
    )

    try:
        initialize_service(config)

        if args.transport == "stdio":
            transport = StdioTransport(mcp)
            transport.run()
        else:  # sse
            logger.info(f"Starting Spanner MCP Server in SSE mode on {args.host}:{args.port}")
            mcp.run(
                transport="sse",
                host=args.host,
                port=args.port
            )

    except KeyboardInterrupt:
        logger.info("Server shutdown requested via keyboard interrupt")
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)
    finally:
        cleanup_resources()


if __name__ == "__main__":
    main()
