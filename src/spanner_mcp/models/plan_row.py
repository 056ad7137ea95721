"""Display-ready rows of a linearized Spanner query plan."""

from dataclasses import dataclass, field
from typing import Dict, Tuple


@dataclass(frozen=True)
class ResolvedChildLink:
    """A typed link from an operator to one of its inputs.

    Attributes:
        variable_name: Name the child's result is bound to, empty if unbound
        child_description: Short description of the referenced child
    """

    variable_name: str = ''
    child_description: str = ''


@dataclass(frozen=True)
class PlanRow:
    """One operator of a plan tree, ready for rendering.

    Attributes:
        id: Plan node index, unique within one plan
        tree_part: Indentation and branch characters for the tree column
        node_text: Operator description without indentation
        predicates: Filter and residual conditions, in plan order
        child_links: Scalar child links grouped by link type
        marker: Display decoration placed in front of the ID
    """

    id: int
    tree_part: str = ''
    node_text: str = ''
    predicates: Tuple[str, ...] = ()
    child_links: Dict[str, Tuple[ResolvedChildLink, ...]] = field(default_factory=dict)
    marker: str = ''

    def format_id(self) -> str:
        return f"{self.marker}{self.id}"

    def text(self) -> str:
        return f"{self.tree_part}{self.node_text}"
