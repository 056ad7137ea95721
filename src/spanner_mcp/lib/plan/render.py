"""Plain-text rendering of a linearized query plan.

The report has two parts: an ASCII table of operators (ID, Operator) and a
cross-reference of predicates keyed by row ID, e.g.

    +----+--------------------+
    | ID | Operator           |
    +----+--------------------+
    | *0 | Distributed Union  |
    |  1 | +- Table Scan      |
    +----+--------------------+
    Predicates(identified by ID):
     0: Split Range: ($SingerId = 1)

Rendering is a pure function of the rows; nothing is shared between calls.
"""

from io import StringIO
from typing import List, Sequence

from rich import box
from rich.cells import cell_len
from rich.console import Console
from rich.table import Table
from rich.text import Text

from spanner_mcp.models.plan_row import PlanRow, ResolvedChildLink
from spanner_mcp.lib.logging_config import get_logger

logger = get_logger(__name__)

PREDICATES_HEADER = "Predicates(identified by ID):"
PARAMETERS_HEADER = "Parameters(identified by ID):"

# Borders and cell padding of a two-column ASCII table: "| " + " | " + " |"
_TABLE_CHROME_WIDTH = 7
_TAB_SIZE = 8


def compute_max_id_length(rows: Sequence[PlanRow]) -> int:
    """Return the number of digits of the widest row ID, 0 when there are no rows."""
    return max((len(str(row.id)) for row in rows), default=0)


def _id_prefix(row_id: int, max_id_length: int, first: bool) -> str:
    if first:
        return f"{row_id:>{max_id_length}}:"
    return " " * (max_id_length + 1)


def _text_width(text: str) -> int:
    return max((cell_len(line) for line in text.split("\n")), default=0)


def render_tree_table(rows: Sequence[PlanRow]) -> str:
    """Render rows as an aligned two-column table.

    The ID column is right aligned and the operator column left aligned.
    Operator text is printed verbatim and never wrapped, except that tabs
    are expanded to 8-column stops so the borders stay aligned. An empty row
    sequence renders nothing, not even the header.
    """
    if not rows:
        return ""

    table = Table(
        box=box.ASCII2,
        header_style=None,
        border_style=None,
        show_edge=True,
        expand=False,
    )
    table.add_column(Text("ID", justify="left"), justify="right", no_wrap=True)
    table.add_column(Text("Operator", justify="left"), justify="left", no_wrap=True, overflow="ignore")

    id_width = cell_len("ID")
    text_width = cell_len("Operator")
    for row in rows:
        formatted_id = row.format_id()
        text = row.text().expandtabs(_TAB_SIZE)
        id_width = max(id_width, cell_len(formatted_id))
        text_width = max(text_width, _text_width(text))
        table.add_row(Text(formatted_id), Text(text, tab_size=_TAB_SIZE))

    console = Console(
        file=StringIO(),
        width=id_width + text_width + _TABLE_CHROME_WIDTH,
        color_system=None,
        force_terminal=False,
        force_jupyter=False,
        legacy_windows=False,
        no_color=True,
        highlight=False,
        markup=False,
        emoji=False,
    )
    console.print(table)
    return console.file.getvalue()


def format_predicates(rows: Sequence[PlanRow], max_id_length: int) -> List[str]:
    """Build the predicate cross-reference lines.

    The first predicate of a row carries the right-justified row ID and a
    colon; further predicates of the same row are padded to the same width.
    """
    lines = []
    for row in rows:
        for i, predicate in enumerate(row.predicates):
            prefix = _id_prefix(row.id, max_id_length, first=(i == 0))
            lines.append(f"{prefix} {predicate}")
    return lines


def describe_child_link(link: ResolvedChildLink) -> str:
    """Describe one child link, binding it to its variable when it has one."""
    if link.variable_name:
        return f"${link.variable_name}={link.child_description}"
    return link.child_description


def format_child_links(rows: Sequence[PlanRow], max_id_length: int) -> List[str]:
    """Build one line per typed group of child links, keyed by row ID.

    Link types are visited in sorted order. The untyped group (empty key)
    is skipped, as is any group whose joined description is empty. The
    first line of a row carries the ID; this is tracked separately from the
    predicate lines.
    """
    lines = []
    for row in rows:
        shown_id = False
        for link_type in sorted(row.child_links):
            if link_type == "":
                continue

            joined = ", ".join(describe_child_link(link) for link in row.child_links[link_type])
            if not joined:
                continue

            prefix = _id_prefix(row.id, max_id_length, first=not shown_id)
            shown_id = True
            lines.append(f"{prefix} {link_type}: {joined}")
    return lines


def render_section(header: str, lines: Sequence[str]) -> str:
    """Render a header followed by each line indented by one space, or nothing."""
    if not lines:
        return ""
    buf = [f"{header}\n"]
    buf.extend(f" {line}\n" for line in lines)
    return "".join(buf)


def render_plan(rows: Sequence[PlanRow], include_parameters: bool = False) -> str:
    """Compose the operator table and predicate section into one report.

    Args:
        rows: Plan rows in traversal order
        include_parameters: Also append the child-link section. Off by
            default; the report only lists predicates.

    Returns:
        Newline-delimited plain text, empty for an empty plan
    """
    max_id_length = compute_max_id_length(rows)

    predicates = format_predicates(rows, max_id_length)
    parameters = format_child_links(rows, max_id_length)

    report = render_tree_table(rows) + render_section(PREDICATES_HEADER, predicates)
    if include_parameters:
        report += render_section(PARAMETERS_HEADER, parameters)

    logger.debug(f"Rendered plan: {len(rows)} rows, {len(predicates)} predicates, "
                 f"{len(parameters)} parameter lines")
    return report
