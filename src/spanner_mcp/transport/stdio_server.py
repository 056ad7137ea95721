"""Standard I/O transport for MCP server."""

import sys
import logging
from fastmcp import FastMCP

logger = logging.getLogger(__name__)


class StdioTransport:
    """MCP server transport using standard input/output."""

    def __init__(self, mcp_instance: FastMCP):
        """Initialize stdio transport.

        Args:
            mcp_instance: FastMCP server instance with registered tools
        """
        self.mcp = mcp_instance

    def run(self):
        """Run the stdio transport server.

        Reads JSON-RPC requests from stdin and writes responses to stdout,
        so nothing else may print to stdout while this runs.
        """
        logger.info(f"Starting {self.mcp.name} in stdio mode")

        try:
            self.mcp.run(transport="stdio")
        except KeyboardInterrupt:
            logger.info("Stdio server shutdown requested")
        except Exception as e:
            logger.error(f"Stdio server error: {e}")
            sys.exit(1)
