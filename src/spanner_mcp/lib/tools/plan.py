"""Query plan MCP tool for Spanner.

Returns the plan twice: once as machine-readable prototext of the
QueryPlan message and once rendered as an operator tree.
"""

from typing import List

from mcp.types import TextContent

from spanner_mcp.lib.logging_config import get_logger
from spanner_mcp.lib.plan import process_plan, render_plan
from spanner_mcp.lib.prototext import format_message
from spanner_mcp.models.tool_requests import PlanRequest
from spanner_mcp.services.spanner_service import SpannerService

logger = get_logger(__name__)


def explain_plan(spanner_service: SpannerService, request: PlanRequest) -> List[TextContent]:
    """Get the execution plan of a query.

    Args:
        spanner_service: Spanner service instance
        request: Validated plan arguments

    Returns:
        Two text contents:
        - prototext of the QueryPlan message
        - human-readable plan table with predicates
    """
    query_plan = spanner_service.analyze_query(request, request.query)

    rows = process_plan(query_plan)
    rendered = render_plan(rows)
    logger.info(f"Planned query on {request.path}: {len(rows)} operators")

    return [
        TextContent(type="text", text=format_message(query_plan)),
        TextContent(type="text", text=rendered),
    ]
