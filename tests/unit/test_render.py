"""Unit tests for plan report rendering."""

import pytest

from spanner_mcp.lib.plan.render import (
    PREDICATES_HEADER,
    PARAMETERS_HEADER,
    compute_max_id_length,
    render_tree_table,
    format_predicates,
    describe_child_link,
    format_child_links,
    render_section,
    render_plan
)
from spanner_mcp.models.plan_row import PlanRow, ResolvedChildLink


def join_rows():
    """A join over two scans with one predicate and typed child links."""
    return [
        PlanRow(
            id=1,
            node_text="Join",
            predicates=("a=b",),
            child_links={
                "Left": (ResolvedChildLink("", "Scan(L)"),),
                "Right": (ResolvedChildLink("r", "Scan(R)"),),
            },
        ),
        PlanRow(id=2, node_text="Scan(L)"),
        PlanRow(id=3, node_text="Scan(R)"),
    ]


class TestComputeMaxIdLength:
    """Tests for the ID column width."""

    def test_empty_rows(self):
        """No rows means no width."""
        assert compute_max_id_length([]) == 0

    def test_widest_id_wins(self):
        """Width is the digit count of the largest ID."""
        rows = [PlanRow(id=1), PlanRow(id=2), PlanRow(id=15)]
        assert compute_max_id_length(rows) == 2

    def test_order_does_not_matter(self):
        """The widest ID may appear anywhere in the sequence."""
        rows = [PlanRow(id=100), PlanRow(id=3)]
        assert compute_max_id_length(rows) == 3

    def test_zero_id(self):
        """ID 0 is one digit wide."""
        assert compute_max_id_length([PlanRow(id=0)]) == 1


class TestRenderTreeTable:
    """Tests for the operator table."""

    def test_empty_rows_render_nothing(self):
        """An empty plan renders no header either."""
        assert render_tree_table([]) == ""

    def test_full_table(self):
        """Table uses ASCII borders, right-aligned IDs and left-aligned text."""
        table = render_tree_table(join_rows())

        assert table == (
            "+----+----------+\n"
            "| ID | Operator |\n"
            "+----+----------+\n"
            "|  1 | Join     |\n"
            "|  2 | Scan(L)  |\n"
            "|  3 | Scan(R)  |\n"
            "+----+----------+\n"
        )

    def test_formatted_id_is_displayed(self):
        """The display label, not the raw ID, goes in the first column."""
        rows = [
            PlanRow(id=0, node_text="Distributed Union", marker="*"),
            PlanRow(id=1, tree_part="+- ", node_text="Table Scan"),
        ]
        lines = render_tree_table(rows).splitlines()

        assert lines[3] == "| *0 | Distributed Union |"
        assert lines[4] == "|  1 | +- Table Scan     |"

    def test_indentation_is_preserved(self):
        """Pre-applied indentation is kept verbatim."""
        rows = [
            PlanRow(id=0, node_text="Root"),
            PlanRow(id=1, tree_part="   +- ", node_text="Leaf"),
        ]
        table = render_tree_table(rows)

        assert "|    +- Leaf |" in table

    def test_long_text_is_not_wrapped(self):
        """Long operator text stays on a single line."""
        text = "Table Scan (" + ", ".join(f"attribute_{i}: value" for i in range(20)) + ")"
        table = render_tree_table([PlanRow(id=7, node_text=text)])

        data_lines = [line for line in table.splitlines() if line.startswith("|  7 |")]
        assert len(data_lines) == 1
        assert text in data_lines[0]

    def test_markup_is_not_interpreted(self):
        """Bracketed text such as link types is printed as-is."""
        table = render_tree_table([PlanRow(id=3, node_text="[Input] Filter Scan")])

        assert "[Input] Filter Scan" in table

    def test_tabs_are_expanded_and_aligned(self):
        """Tabs become spaces to the next 8-column stop and the border lines up."""
        table = render_tree_table([PlanRow(id=0, node_text="a\tb")])
        lines = table.splitlines()

        assert lines[3] == "|  0 | a       b |"
        assert len({len(line) for line in lines}) == 1

    def test_embedded_newline_is_kept(self):
        """Multi-line operator text spans several table lines."""
        table = render_tree_table([PlanRow(id=1, node_text="first line\nsecond line")])

        assert "first line" in table
        assert "second line" in table
        assert "first line\nsecond line" not in table


class TestFormatPredicates:
    """Tests for the predicate cross-reference."""

    def test_first_and_continuation_prefix(self):
        """First predicate shows the ID, later ones are padded to the same width."""
        rows = [PlanRow(id=3, predicates=("p = 1", "q > 2"))]

        assert format_predicates(rows, 2) == [" 3: p = 1", "    q > 2"]

    def test_numbering_restarts_per_row(self):
        """Every row's first predicate carries that row's ID."""
        rows = [
            PlanRow(id=1, predicates=("a",)),
            PlanRow(id=2, predicates=("b",)),
        ]

        assert format_predicates(rows, 1) == ["1: a", "2: b"]

    def test_rows_without_predicates_are_skipped(self):
        """Rows with no predicates contribute nothing and do not disturb numbering."""
        rows = [
            PlanRow(id=1),
            PlanRow(id=10, predicates=("x", "y")),
            PlanRow(id=11),
            PlanRow(id=12, predicates=("z",)),
        ]

        assert format_predicates(rows, 2) == ["10: x", "    y", "12: z"]

    def test_predicate_order_is_preserved(self):
        """Predicates stay in the order the row lists them."""
        rows = [PlanRow(id=0, predicates=("c", "a", "b"))]

        assert format_predicates(rows, 1) == ["0: c", "   a", "   b"]

    def test_no_predicates(self):
        """No predicates, no lines."""
        assert format_predicates([PlanRow(id=0), PlanRow(id=1)], 1) == []


class TestChildLinks:
    """Tests for child-link descriptions."""

    def test_describe_with_variable(self):
        """A bound link shows the variable."""
        link = ResolvedChildLink(variable_name="x", child_description="Scan(Table: T)")
        assert describe_child_link(link) == "$x=Scan(Table: T)"

    def test_describe_without_variable(self):
        """An unbound link is just the description."""
        link = ResolvedChildLink(variable_name="", child_description="Scan(Table: T)")
        assert describe_child_link(link) == "Scan(Table: T)"

    def test_types_in_sorted_order(self):
        """Link types are listed lexicographically regardless of insertion order."""
        row = PlanRow(id=4, child_links={
            "Value": (ResolvedChildLink("v", "1"),),
            "Key": (ResolvedChildLink("k", "2"), ResolvedChildLink("", "3")),
        })

        assert format_child_links([row], 1) == [
            "4: Key: $k=2, 3",
            "   Value: $v=1",
        ]

    def test_empty_type_is_skipped(self):
        """The untyped group never produces a line."""
        row = PlanRow(id=2, child_links={
            "": (ResolvedChildLink("a", "Reference"),),
            "Key": (ResolvedChildLink("", "SingerId"),),
        })

        assert format_child_links([row], 1) == ["2: Key: SingerId"]

    def test_empty_descriptions_skip_type_without_consuming_id(self):
        """A type whose joined description is empty is skipped; the next line still gets the ID."""
        row = PlanRow(id=5, child_links={
            "A": (ResolvedChildLink("", ""),),
            "B": (ResolvedChildLink("", "Scan"),),
        })

        assert format_child_links([row], 2) == [" 5: B: Scan"]

    def test_independent_of_predicates(self):
        """The child-link pass shows the ID even after the predicate pass did."""
        rows = join_rows()
        max_id_length = compute_max_id_length(rows)

        assert format_predicates(rows, max_id_length) == ["1: a=b"]
        assert format_child_links(rows, max_id_length) == [
            "1: Left: Scan(L)",
            "   Right: $r=Scan(R)",
        ]


class TestRenderPlan:
    """Tests for the composed report."""

    def test_empty_plan(self):
        """An empty plan renders an empty report."""
        assert render_plan([]) == ""

    def test_table_only_without_predicates(self):
        """Without predicates the report is exactly the table."""
        rows = [PlanRow(id=0, node_text="Union"), PlanRow(id=1, tree_part="+- ", node_text="Scan")]

        report = render_plan(rows)

        assert report == render_tree_table(rows)
        assert PREDICATES_HEADER not in report

    def test_table_followed_by_predicates(self):
        """Predicates follow the table under their header."""
        rows = join_rows()

        report = render_plan(rows)

        assert report == render_tree_table(rows) + "Predicates(identified by ID):\n 1: a=b\n"

    def test_child_links_not_emitted_by_default(self):
        """Child-link lines are computed but left out of the report."""
        report = render_plan(join_rows())

        assert PARAMETERS_HEADER not in report
        assert "Left:" not in report

    def test_child_links_emitted_on_request(self):
        """The parameters section can be switched on."""
        report = render_plan(join_rows(), include_parameters=True)

        assert report.endswith(
            "Parameters(identified by ID):\n"
            " 1: Left: Scan(L)\n"
            "    Right: $r=Scan(R)\n"
        )

    def test_predicate_ids_align_with_widest_id(self):
        """Predicate prefixes are padded to the widest ID in the plan."""
        rows = [PlanRow(id=i, node_text=f"Op{i}") for i in range(10)]
        rows.append(PlanRow(id=10, node_text="Filter", predicates=("x > 1",)))
        rows[3] = PlanRow(id=3, node_text="Filter", predicates=("y < 2", "z = 3"))

        report = render_plan(rows)
        section = report.split(PREDICATES_HEADER + "\n", 1)[1]

        assert section == "  3: y < 2\n     z = 3\n 10: x > 1\n"


class TestRenderSection:
    """Tests for section rendering."""

    def test_empty_lines(self):
        assert render_section("Header:", []) == ""

    def test_lines_indented_by_one_space(self):
        assert render_section("Header:", ["a", "b"]) == "Header:\n a\n b\n"
