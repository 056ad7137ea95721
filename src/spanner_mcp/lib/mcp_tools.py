"""MCP Tools Orchestration Layer.

Single entry point for all Spanner MCP tools. The implementations live in
the tools package:

- tools/plan.py: Query planning
- tools/ddl.py: Schema reads and updates
"""

from .tools import (
    explain_plan,
    get_ddl,
    update_ddl
)

__all__ = [
    'explain_plan',
    'get_ddl',
    'update_ddl'
]
