"""Data models for Spanner MCP Server."""

from .config import ServerConfig
from .error_types import (
    MCPError,
    InvalidArgumentError,
    InvalidQueryError,
    DatabaseNotFoundError,
    DatabaseConnectionError,
    DdlOperationError,
    PlanProcessingError
)
from .plan_row import PlanRow, ResolvedChildLink
from .tool_requests import DatabaseRef, PlanRequest, GetDdlRequest, UpdateDdlRequest, database_path

__all__ = [
    'ServerConfig',
    'MCPError',
    'InvalidArgumentError',
    'InvalidQueryError',
    'DatabaseNotFoundError',
    'DatabaseConnectionError',
    'DdlOperationError',
    'PlanProcessingError',
    'PlanRow',
    'ResolvedChildLink',
    'DatabaseRef',
    'PlanRequest',
    'GetDdlRequest',
    'UpdateDdlRequest',
    'database_path'
]
