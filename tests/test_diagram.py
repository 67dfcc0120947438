import logging

import pytest
from rich.markup import escape
from rich.text import Text

from aligntree import (
    ConfigurationError,
    ConnectorPolicy,
    Diagram,
    Rect,
    RectMap,
    RendererError,
    TreeNode,
    TreeStructureError,
)
from aligntree.diagram_components.core import Point
from aligntree.diagram_components.diagram import connectors_from


def test_single_node_has_one_rect_and_no_connectors(fixed_renderer):
    tree = TreeNode(5)
    layout = Diagram(tree, fixed_renderer).layout()
    assert layout.rects.ids() == [tree.id]
    assert layout.rects[tree.id] == Rect(0, 0, 5, 3)
    assert layout.connectors == []
    assert layout.guides == {}
    assert (layout.width, layout.height) == (5, 3)


def test_parent_centres_over_middle_of_odd_row(fixed_renderer):
    children = [TreeNode(6), TreeNode(6), TreeNode(6)]
    tree = TreeNode(8, children)
    layout = Diagram(tree, fixed_renderer).layout()
    assert layout.guides[tree.id] == {1}
    assert layout.rects[tree.id].mid_x == layout.rects[children[1].id].mid_x == 13


def test_parent_centres_between_middle_pair_of_even_row(fixed_renderer):
    children = [TreeNode(6) for _ in range(4)]
    tree = TreeNode(8, children)
    layout = Diagram(tree, fixed_renderer).layout()
    assert layout.guides[tree.id] == {1, 2}
    middle = (layout.rects[children[1].id].mid_x + layout.rects[children[2].id].mid_x) / 2
    assert layout.rects[tree.id].mid_x == middle == 18


def test_children_row_is_spaced_and_top_aligned(fixed_renderer):
    children = [TreeNode((6, 3)), TreeNode((4, 5)), TreeNode((2, 1))]
    tree = TreeNode(8, children)
    layout = Diagram(tree, fixed_renderer, horizontal_spacing=3, vertical_spacing=2).layout()
    rects = [layout.rects[child.id] for child in children]
    assert [rect.x for rect in rects] == [0, 9, 16]
    assert {rect.y for rect in rects} == {5}
    assert layout.height == 10


def test_wide_parent_shifts_children_under_it(fixed_renderer):
    child = TreeNode(6)
    tree = TreeNode(30, [child])
    layout = Diagram(tree, fixed_renderer).layout()
    assert layout.rects[tree.id].x == 0
    assert layout.rects[child.id] == Rect(12, 7, 6, 3)
    assert layout.width == 30


def test_parent_aligns_to_guide_subtree_frame(fixed_renderer):
    child = TreeNode(2, [TreeNode(20), TreeNode(2), TreeNode(2)])
    tree = TreeNode(4, [child])
    layout = Diagram(tree, fixed_renderer).layout()
    assert layout.frames[child.id] == Rect(0, 7, 32, 10)
    assert layout.rects[child.id].mid_x == 25
    assert layout.rects[tree.id].mid_x == layout.frames[child.id].mid_x == 16


def test_three_level_geometry(fixed_renderer, three_level_tree):
    layout = Diagram(three_level_tree, fixed_renderer).layout()
    first, second = three_level_tree.children
    assert layout.rects[three_level_tree.id] == Rect(14, 0, 8, 3)
    assert layout.rects[first.id] == Rect(7, 7, 6, 3)
    assert [layout.rects[leaf.id].x for leaf in first.children] == [0, 8, 16]
    assert layout.rects[second.id] == Rect(24, 7, 6, 3)
    assert layout.frames[three_level_tree.id] == Rect(0, 0, 30, 17)
    assert (layout.width, layout.height) == (30, 17)
    assert len(layout.frames) == 6


def test_children_policy_draws_one_connector_per_edge(fixed_renderer, three_level_tree):
    layout = Diagram(three_level_tree, fixed_renderer).layout()
    assert len(layout.connectors) == len(three_level_tree) - 1 == 5
    pairs = [(c.source_id, c.target_id) for c in layout.connectors]
    first, second = three_level_tree.children
    assert pairs == [
        (first.id, first.children[0].id),
        (first.id, first.children[1].id),
        (first.id, first.children[2].id),
        (three_level_tree.id, first.id),
        (three_level_tree.id, second.id),
    ]


def test_descendants_policy_connects_every_descendant(fixed_renderer, three_level_tree):
    diagram = Diagram(three_level_tree, fixed_renderer, connector_policy="descendants")
    layout = diagram.layout()
    assert diagram.connector_policy is ConnectorPolicy.DESCENDANTS
    assert len(layout.connectors) == 8
    from_root = [c.target_id for c in layout.connectors if c.source_id == three_level_tree.id]
    assert len(from_root) == 5


def test_connector_endpoints_use_measured_rects(fixed_renderer, three_level_tree):
    layout = Diagram(three_level_tree, fixed_renderer).layout()
    root_link = next(c for c in layout.connectors if c.source_id == three_level_tree.id)
    assert root_link.start == Point(18, 3)
    assert root_link.end == Point(10, 7)


def test_layout_is_idempotent(fixed_renderer, three_level_tree):
    diagram = Diagram(three_level_tree, fixed_renderer)
    first = diagram.layout()
    second = diagram.layout()
    assert first.rects == second.rects
    assert first.frames == second.frames
    assert first.connectors == second.connectors
    assert diagram.render() == diagram.render()


def test_layout_names_its_coordinate_space(fixed_renderer):
    layout = Diagram(TreeNode(3), fixed_renderer, coordinate_space="org-chart").layout()
    assert layout.coordinate_space == "org-chart"


def test_connectors_skip_missing_root_measurement(caplog):
    tree = TreeNode("root", [TreeNode("child")])
    rects = RectMap.single(tree.children[0].id, Rect(0, 5, 4, 3))
    with caplog.at_level(logging.WARNING):
        assert connectors_from(tree, rects) == []
    assert "skipping" in caplog.text


def test_debug_summary_reports_guide_sets(fixed_renderer, caplog):
    tree = TreeNode(8, [TreeNode(6) for _ in range(4)])
    with caplog.at_level(logging.DEBUG, logger="aligntree"):
        Diagram(tree, fixed_renderer).layout()
    assert f"{tree.id}: [1, 2]" in caplog.text
    assert "4 connectors" in caplog.text


def test_render_single_box():
    assert Diagram(TreeNode("Root")).render() == "╭──────╮\n│ Root │\n╰──────╯"


def test_render_two_children():
    tree = TreeNode("A", [TreeNode("B"), TreeNode("C")])
    expected = "\n".join(
        [
            "    ╭───╮",
            "    │ A │",
            "    ╰───╯",
            "      │",
            "  ╭───┴────╮",
            "  │        │",
            "  ▼        ▼",
            "╭───╮    ╭───╮",
            "│ B │    │ C │",
            "╰───╯    ╰───╯",
        ]
    )
    assert Diagram(tree).render() == expected


def test_render_ascii_without_arrows():
    tree = TreeNode("A", [TreeNode("B"), TreeNode("C")])
    output = Diagram(tree, box_style="ascii", arrows=False).render()
    assert set(output) <= set(" \n+-|ABC")


def test_straight_connectors_end_in_arrows():
    tree = TreeNode("root", [TreeNode("left"), TreeNode("middle"), TreeNode("right")])
    output = Diagram(tree, connector_style="straight").render()
    assert output.count("▼") == 3
    assert "╱" in output and "╲" in output


def test_markup_is_kept_out_of_plain_render():
    tree = TreeNode("[bold]Root[/bold]", [TreeNode("leaf")])
    diagram = Diagram(tree, connector_markup="dim")
    plain = diagram.render()
    markup = diagram.render_markup()
    assert "[bold]" not in plain and "Root" in plain
    assert "[bold]R" in markup and "t[/bold]" in markup
    assert "[dim]" in markup


def test_rich_protocol_returns_text():
    tree = TreeNode("[bold]Root[/bold]", [TreeNode("leaf")])
    diagram = Diagram(tree, connector_markup="dim")
    text = diagram.__rich__()
    assert isinstance(text, Text)
    assert text.plain == diagram.render()


@pytest.mark.parametrize("label", ["list[int]", escape("[bold]x"), "\\\\[bold]x[/bold]", "a \\ b"])
def test_rich_plain_text_matches_render(label):
    diagram = Diagram(TreeNode(label, [TreeNode("leaf")]))
    assert diagram.__rich__().plain == diagram.render()


def test_bracketed_type_names_survive_rendering():
    output = Diagram(TreeNode("list[int]")).render()
    assert "list[int]" in output


def test_escaped_tag_renders_literally():
    output = Diagram(TreeNode(escape("[bold]x"))).render()
    assert "[bold]x" in output


def test_from_dict_builds_diagram():
    diagram = Diagram.from_dict({"value": "root", "children": ["a", "b"]})
    assert len(diagram.layout().connectors) == 2
    assert str(diagram) == diagram.render()


def test_renderer_must_return_measurable_block():
    with pytest.raises(RendererError):
        Diagram(TreeNode("x"), lambda value: "not a block").layout()


@pytest.mark.parametrize(
    "options",
    [
        {"vertical_spacing": 1},
        {"horizontal_spacing": 0},
        {"horizontal_spacing": "4"},
        {"connector_policy": "siblings"},
        {"connector_style": "curved"},
        {"box_style": "dotted"},
        {"box_style": 3},
        {"max_box_width": 5},
        {"arrows": "yes"},
        {"coordinate_space": ""},
        {"connector_markup": 1},
    ],
)
def test_invalid_options_raise_configuration_error(options):
    with pytest.raises(ConfigurationError):
        Diagram(TreeNode("x"), **options)


def test_non_callable_renderer_is_rejected():
    with pytest.raises(ConfigurationError):
        Diagram(TreeNode("x"), node="box")


def test_tree_root_must_be_tree_node():
    with pytest.raises(TreeStructureError):
        Diagram({"value": "root"})
