"""Shared fixtures for Spanner MCP tests."""

import pytest
from google.cloud.spanner_v1.types import PlanNode, QueryPlan
from google.protobuf import struct_pb2

PlanNodePb = PlanNode.pb()
QueryPlanPb = QueryPlan.pb()

RELATIONAL = int(PlanNode.Kind.RELATIONAL)
SCALAR = int(PlanNode.Kind.SCALAR)


class PlanBuilder:
    """Builds QueryPlan protobuf messages node by node."""

    def __init__(self):
        self.nodes = []

    def node(self, kind, display_name, links=(), metadata=None, description=''):
        """Append a node; links are (child_index, type, variable) tuples."""
        index = len(self.nodes)
        node = PlanNodePb(
            index=index,
            kind=kind,
            display_name=display_name,
            child_links=[
                PlanNodePb.ChildLink(child_index=child, type_=link_type, variable=variable)
                for child, link_type, variable in links
            ],
        )
        if description:
            node.short_representation.description = description
        if metadata:
            struct = struct_pb2.Struct()
            struct.update(metadata)
            node.metadata.CopyFrom(struct)
        self.nodes.append(node)
        return index

    def relational(self, display_name, links=(), metadata=None):
        return self.node(RELATIONAL, display_name, links, metadata)

    def scalar(self, display_name, description, links=()):
        return self.node(SCALAR, display_name, links, description=description)

    def build(self):
        return QueryPlanPb(plan_nodes=self.nodes)


@pytest.fixture
def plan_builder():
    """Factory for hand-built query plans."""
    return PlanBuilder()


@pytest.fixture
def singers_plan():
    """Plan for SELECT * FROM Singers WHERE SingerId = 1 AND FirstName = 'foo'.

    0 Distributed Union           (Split Range predicate)
    1 +- Local Distributed Union
    2    +- Serialize Result      (untyped scalar child)
    3       +- Filter Scan        (Residual Condition)
    4          +- Table Scan
    """
    builder = PlanBuilder()
    builder.relational("Distributed Union", links=[(1, "", ""), (5, "Split Range", "")])
    builder.relational("Distributed Union", links=[(2, "", "")], metadata={"call_type": "Local"})
    builder.relational("Serialize Result", links=[(3, "Input", ""), (6, "", "")])
    builder.relational("Filter Scan", links=[(4, "", ""), (7, "Residual Condition", "")])
    builder.relational("Scan", metadata={
        "scan_type": "TableScan",
        "scan_target": "Singers",
        "Full scan": "true",
    })
    builder.scalar("Function", "($SingerId = 1)")
    builder.scalar("Reference", "$FirstName")
    builder.scalar("Function", "($FirstName = 'foo')")
    return builder.build()
