"""Business logic services for Spanner MCP Server."""

from .spanner_service import SpannerService

__all__ = [
    'SpannerService'
]
