"""MCP tool implementations and utilities.

Tools are imported from lib.mcp_tools; this package only exposes the
logging helpers so that services can import lib modules without pulling
in the tool layer.
"""

from .logging_config import setup_logging, get_logger

__all__ = [
    'setup_logging',
    'get_logger'
]
