"""Schema (DDL) MCP tools for Spanner.

This module contains tools that read and change the schema of a database
through the database admin API.
"""

from typing import List

from mcp.types import TextContent

from spanner_mcp.lib.logging_config import get_logger
from spanner_mcp.lib.prototext import format_message, decode_file_descriptor_set
from spanner_mcp.models.tool_requests import GetDdlRequest, UpdateDdlRequest
from spanner_mcp.services.spanner_service import SpannerService

logger = get_logger(__name__)


def get_ddl(spanner_service: SpannerService, request: GetDdlRequest) -> List[TextContent]:
    """Get the DDL of a database.

    The proto descriptors are always decoded so that a corrupt descriptor
    set is reported even when the caller did not ask for it.

    Args:
        spanner_service: Spanner service instance
        request: Validated get_ddl arguments

    Returns:
        One text content with the whole response (proto_descriptors
        cleared), or two when include_proto_descriptors is set: the whole
        response and the decoded FileDescriptorSet
    """
    response = spanner_service.get_database_ddl(request)
    fds = decode_file_descriptor_set(response.proto_descriptors)

    if request.include_proto_descriptors:
        contents = [
            TextContent(type="text", text=format_message(response)),
            TextContent(type="text", text=format_message(fds)),
        ]
    else:
        response.ClearField('proto_descriptors')
        contents = [TextContent(type="text", text=format_message(response))]

    logger.info(f"Fetched DDL of {request.path}: {len(response.statements)} statements, "
                f"{len(fds.file)} proto files")
    return contents


def update_ddl(spanner_service: SpannerService, request: UpdateDdlRequest) -> List[TextContent]:
    """Apply DDL statements to a database and wait for completion.

    Args:
        spanner_service: Spanner service instance
        request: Validated update_ddl arguments

    Returns:
        One text content with the prototext of the operation metadata
    """
    metadata = spanner_service.update_database_ddl(request, request.statements)
    logger.info(f"Applied {len(request.statements)} DDL statement(s) to {request.path}")
    return [TextContent(type="text", text=format_message(metadata))]
