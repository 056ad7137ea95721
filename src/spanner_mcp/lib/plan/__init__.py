"""Query plan linearization and rendering."""

from .plan_tree import process_plan
from .render import (
    compute_max_id_length,
    render_tree_table,
    format_predicates,
    describe_child_link,
    format_child_links,
    render_plan
)

__all__ = [
    'process_plan',
    'compute_max_id_length',
    'render_tree_table',
    'format_predicates',
    'describe_child_link',
    'format_child_links',
    'render_plan'
]
