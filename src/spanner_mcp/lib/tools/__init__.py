"""MCP Tools Package - tool implementations for Spanner operations.

Structure:
- plan.py: Query planning (prototext and rendered plan tree)
- ddl.py: Schema operations (read and update DDL)
"""

from .plan import explain_plan
from .ddl import get_ddl, update_ddl

__all__ = [
    'explain_plan',
    'get_ddl',
    'update_ddl'
]
