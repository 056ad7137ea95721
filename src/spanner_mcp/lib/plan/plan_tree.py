"""Linearize a Spanner query plan into display rows.

Spanner returns a plan as a flat list of PlanNodes that reference each
other by index. Relational nodes form the operator tree; scalar nodes hang
off them as conditions, keys and other expressions. A scalar subquery is
the exception: it is reached through a "Scalar" link and shown as an
operator with its relational children below it. This module walks the
tree from the root in pre-order and produces one PlanRow per operator,
with the remaining scalar children folded into predicates and child links.
"""

import re
from typing import Any, Dict, List

from google.cloud.spanner_v1.types import PlanNode
from google.protobuf import json_format

from spanner_mcp.lib.logging_config import get_logger
from spanner_mcp.lib.prototext import to_pb
from spanner_mcp.models.error_types import PlanProcessingError
from spanner_mcp.models.plan_row import PlanRow, ResolvedChildLink

logger = get_logger(__name__)

BRANCH = "+- "
BAR = "|  "
SPACE = "   "

# Metadata keys folded into the operator title instead of listed as attributes
_TITLE_KEYS = {'call_type', 'iterator_type', 'scan_type', 'scan_target', 'subquery_cluster_node'}


def is_predicate_link(link_type: str) -> bool:
    """Scalar links of these types filter rows and are reported as predicates."""
    return link_type.endswith("Condition") or link_type == "Split Range"


def is_visible_link(child, link_type: str) -> bool:
    """Relational children and scalar subqueries are shown as operator rows."""
    return child.kind == PlanNode.Kind.RELATIONAL or link_type == "Scalar"


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _split_camel(name: str) -> str:
    # "TableScan" -> "Table Scan"
    return re.sub(r'(?<=[a-z0-9])(?=[A-Z])', ' ', name)


def node_title(node) -> str:
    """Describe a relational node: display name, call type and metadata."""
    metadata: Dict[str, Any] = json_format.MessageToDict(node.metadata) if node.HasField('metadata') else {}

    title = node.display_name
    attributes = {}

    scan_type = metadata.get('scan_type')
    if scan_type:
        title = _split_camel(scan_type)
        target = metadata.get('scan_target')
        if target:
            label = scan_type[:-len('Scan')] if scan_type.endswith('Scan') else 'Target'
            attributes[_split_camel(label)] = target

    for key in ('iterator_type', 'call_type'):
        if metadata.get(key):
            title = f"{metadata[key]} {title}"

    for key, value in metadata.items():
        if key not in _TITLE_KEYS:
            attributes[key] = value

    if attributes:
        rendered = ", ".join(f"{k}: {_format_value(v)}" for k, v in sorted(attributes.items()))
        title = f"{title} ({rendered})"
    return title


class _PlanWalker:
    """Pre-order traversal state for one plan."""

    def __init__(self, nodes):
        self.nodes = nodes
        self.rows: List[PlanRow] = []
        self.visited = set()

    def node(self, index: int):
        if index < 0 or index >= len(self.nodes):
            raise PlanProcessingError(f"Plan references unknown node index {index}")
        return self.nodes[index]

    def walk(self, index: int, link_type: str, tree_part: str, child_prefix: str):
        if index in self.visited:
            raise PlanProcessingError(f"Plan node {index} is reached more than once")
        self.visited.add(index)

        node = self.node(index)
        predicates = []
        child_links: Dict[str, List[ResolvedChildLink]] = {}
        visible = []

        for link in node.child_links:
            child = self.node(link.child_index)
            if is_visible_link(child, link.type_):
                visible.append(link)
                continue

            description = child.short_representation.description
            if is_predicate_link(link.type_):
                predicates.append(f"{link.type_}: {description}")
            else:
                child_links.setdefault(link.type_, []).append(
                    ResolvedChildLink(variable_name=link.variable, child_description=description)
                )

        node_text = node_title(node)
        if link_type:
            node_text = f"[{link_type}] {node_text}"

        self.rows.append(PlanRow(
            id=node.index,
            tree_part=tree_part,
            node_text=node_text,
            predicates=tuple(predicates),
            child_links={k: tuple(v) for k, v in child_links.items()},
            marker="*" if predicates else "",
        ))

        for i, link in enumerate(visible):
            last = i == len(visible) - 1
            self.walk(
                link.child_index,
                link.type_,
                child_prefix + BRANCH,
                child_prefix + (SPACE if last else BAR),
            )


def process_plan(query_plan) -> List[PlanRow]:
    """Turn a QueryPlan into rows in pre-order, parents before descendants.

    Args:
        query_plan: QueryPlan message (protobuf or proto-plus)

    Returns:
        Rows for every visible node reachable from the root; empty when
        the plan has no nodes

    Raises:
        PlanProcessingError: If a child link points outside the plan or the
            visible links do not form a tree
    """
    nodes = list(to_pb(query_plan).plan_nodes)
    if not nodes:
        return []

    walker = _PlanWalker(nodes)
    walker.walk(0, "", "", "")
    logger.debug(f"Processed plan: {len(nodes)} nodes, {len(walker.rows)} rows")
    return walker.rows
