import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from rich.text import Text

from ..errors import ConfigurationError, TreeStructureError
from .alignment import GuideSet, align_to, centerline, guide_indices
from .canvas import Canvas
from .connector import Connector
from .core import BoxChars, ConnectorPolicy, Rect
from .measure import RectMap
from .node import NodeRenderer, box_renderer, check_block
from .tree import TreeNode

logger = logging.getLogger(__name__)

CONNECTOR_STYLES = ("orthogonal", "straight")


@dataclass
class DiagramLayout:
    """Geometry of one render pass, in the coordinate space of the root."""

    coordinate_space: str
    rects: RectMap = field(default_factory=RectMap)
    frames: RectMap = field(default_factory=RectMap)
    connectors: List[Connector] = field(default_factory=list)
    guides: Dict[int, GuideSet] = field(default_factory=dict)
    blocks: Dict[int, Any] = field(default_factory=dict)
    width: int = 0
    height: int = 0


@dataclass
class _Measured:
    node: TreeNode
    block: Any
    width: int
    height: int
    content_x: int = 0
    children: List["_Measured"] = field(default_factory=list)
    offsets: List[Tuple[int, int]] = field(default_factory=list)
    guides: GuideSet = frozenset()


def connectors_from(
    node: TreeNode, rects: RectMap, policy: ConnectorPolicy = ConnectorPolicy.CHILDREN
) -> List[Connector]:
    """Lines from ``node`` to the rectangles its subtree reported.

    With ``ConnectorPolicy.CHILDREN`` only direct children are connected.
    ``ConnectorPolicy.DESCENDANTS`` connects every other id present in the map.
    """
    source = rects.require_root(node.id)
    if source is None:
        return []
    targets = rects.without(node.id)
    if policy is ConnectorPolicy.CHILDREN:
        targets = targets.restricted(child.id for child in node.children)
    return [
        Connector.between(node.id, source, target_id, target)
        for target_id, target in targets.items()
    ]


class Diagram:

    def __init__(
        self,
        tree: TreeNode,
        node: Optional[NodeRenderer] = None,
        *,
        vertical_spacing: int = 4,
        horizontal_spacing: int = 4,
        connector_policy: Union[str, ConnectorPolicy] = ConnectorPolicy.CHILDREN,
        connector_style: str = "orthogonal",
        box_style: Optional[Union[str, BoxChars]] = None,
        max_box_width: Optional[int] = 36,
        connector_markup: Optional[str] = None,
        arrows: bool = True,
        coordinate_space: str = "aligntree.diagram",
    ):
        if not isinstance(tree, TreeNode):
            raise TreeStructureError("Diagram expects a TreeNode root.")

        for name, value, minimum in (
            ("vertical_spacing", vertical_spacing, 2),
            ("horizontal_spacing", horizontal_spacing, 1),
        ):
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name} must be an integer.")
            if value < minimum:
                raise ConfigurationError(f"{name} must be at least {minimum}.")

        if max_box_width is not None:
            if not isinstance(max_box_width, int) or max_box_width < 10:
                raise ConfigurationError("max_box_width must be an integer of at least 10.")

        try:
            self.connector_policy = ConnectorPolicy.coerce(connector_policy)
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

        if connector_style not in CONNECTOR_STYLES:
            raise ConfigurationError(
                f"connector_style must be one of {', '.join(CONNECTOR_STYLES)}."
            )

        if isinstance(box_style, BoxChars):
            self.chars = box_style
        else:
            style_key = box_style or "rounded"
            if not isinstance(style_key, str):
                raise ConfigurationError("box_style must be a string or BoxChars instance.")
            try:
                self.chars = BoxChars.for_style(style_key)
            except ValueError as exc:
                raise ConfigurationError(str(exc)) from exc

        if connector_markup is not None and not isinstance(connector_markup, str):
            raise ConfigurationError("connector_markup must be a string when provided.")
        if not isinstance(arrows, bool):
            raise ConfigurationError("arrows must be a boolean value.")
        if not isinstance(coordinate_space, str) or not coordinate_space:
            raise ConfigurationError("coordinate_space must be a non-empty string.")
        if node is not None and not callable(node):
            raise ConfigurationError("node must be a callable returning a renderable block.")

        self.tree = tree
        self.node = node or box_renderer(max_width=max_box_width, box_style=self.chars)
        self.v_spacing = vertical_spacing
        self.h_spacing = horizontal_spacing
        self.connector_style = connector_style
        self.connector_markup = connector_markup
        self.arrows = arrows
        self.coordinate_space = coordinate_space

    @classmethod
    def from_dict(cls, payload: Any, node: Optional[NodeRenderer] = None, **options) -> "Diagram":
        return cls(TreeNode.from_dict(payload), node, **options)

    def _measure(self, tree: TreeNode) -> _Measured:
        block = check_block(self.node(tree.value), tree.value)
        if tree.is_leaf:
            return _Measured(tree, block, block.width, block.height)

        children = [self._measure(child) for child in tree.children]
        frames: List[Rect] = []
        cursor = 0
        for child in children:
            frames.append(Rect(cursor, 0, child.width, child.height))
            cursor += child.width + self.h_spacing
        row_width = cursor - self.h_spacing

        guides = guide_indices(len(children))
        content_x = align_to(block.width, centerline(frames, guides))
        row_x = max(-content_x, 0)
        content_x += row_x
        row_y = block.height + self.v_spacing

        return _Measured(
            node=tree,
            block=block,
            width=max(content_x + block.width, row_x + row_width),
            height=row_y + max(child.height for child in children),
            content_x=content_x,
            children=children,
            offsets=[(row_x + int(frame.x), row_y) for frame in frames],
            guides=guides,
        )

    def _place(self, measured: _Measured, x: int, y: int, layout: DiagramLayout) -> RectMap:
        tree = measured.node
        block = measured.block
        rects = RectMap.single(tree.id, Rect(x + measured.content_x, y, block.width, block.height))
        layout.blocks[tree.id] = block

        for child, (dx, dy) in zip(measured.children, measured.offsets):
            child_rects = self._place(child, x + dx, y + dy, layout)
            layout.frames.merge(
                RectMap.single(child.node.id, Rect(x + dx, y + dy, child.width, child.height))
            )
            rects.merge(child_rects)

        if measured.children:
            layout.guides[tree.id] = measured.guides
            layout.connectors.extend(connectors_from(tree, rects, self.connector_policy))
        return rects

    def layout(self) -> DiagramLayout:
        measured = self._measure(self.tree)
        layout = DiagramLayout(
            coordinate_space=self.coordinate_space,
            width=measured.width,
            height=measured.height,
        )
        layout.frames.merge(
            RectMap.single(self.tree.id, Rect(0, 0, measured.width, measured.height))
        )
        layout.rects = self._place(measured, 0, 0, layout)
        logger.debug(
            "Laid out %d nodes in %r: %dx%d cells, %d connectors (%s policy), guides %s.",
            len(layout.rects),
            self.coordinate_space,
            layout.width,
            layout.height,
            len(layout.connectors),
            self.connector_policy.value,
            {node_id: sorted(guides) for node_id, guides in layout.guides.items()},
        )
        return layout

    def _char_to_dirs(self, char: str) -> set:
        chars = self.chars
        mapping = {
            chars.vertical: {"up", "down"},
            chars.horizontal: {"left", "right"},
            chars.top_left: {"down", "right"},
            chars.top_right: {"down", "left"},
            chars.bottom_left: {"up", "right"},
            chars.bottom_right: {"up", "left"},
            chars.tee_down: {"down", "left", "right"},
            chars.tee_up: {"up", "left", "right"},
            chars.tee_right: {"up", "down", "right"},
            chars.tee_left: {"up", "down", "left"},
            chars.cross: {"up", "down", "left", "right"},
        }
        return set(mapping.get(char, set()))

    def _dirs_to_char(self, dirs: set) -> str:
        chars = self.chars
        mapping = {
            frozenset({"up", "down"}): chars.vertical,
            frozenset({"left", "right"}): chars.horizontal,
            frozenset({"down", "right"}): chars.top_left,
            frozenset({"down", "left"}): chars.top_right,
            frozenset({"up", "right"}): chars.bottom_left,
            frozenset({"up", "left"}): chars.bottom_right,
            frozenset({"down", "left", "right"}): chars.tee_down,
            frozenset({"up", "left", "right"}): chars.tee_up,
            frozenset({"up", "down", "right"}): chars.tee_right,
            frozenset({"up", "down", "left"}): chars.tee_left,
            frozenset({"up", "down", "left", "right"}): chars.cross,
        }
        return mapping.get(frozenset(dirs), chars.cross)

    def _set_connector_char(self, canvas: Canvas, x: int, y: int, char: str) -> None:
        canvas.set(x, y, char)
        if self.connector_markup:
            tag = self.connector_markup.strip()
            canvas.insert_markup(x, y, tag if tag.startswith("[") else f"[{tag}]")
            canvas.insert_markup(x, y, "[/]", position="suffix")

    def _write_dirs(self, canvas: Canvas, x: int, y: int, dirs: set) -> None:
        combined = self._char_to_dirs(canvas.get(x, y)) | dirs
        self._set_connector_char(canvas, x, y, self._dirs_to_char(combined))

    def _connector_cells(self, connector: Connector) -> Tuple[int, int, int, int]:
        sx = math.floor(connector.start.x)
        sy = math.floor(connector.start.y)
        ex = math.floor(connector.end.x)
        ey = math.floor(connector.end.y) - 1
        return sx, sy, ex, ey

    def _draw_tip(self, canvas: Canvas, x: int, y: int) -> None:
        if self.arrows:
            self._set_connector_char(canvas, x, y, self.chars.arrow_down)
        else:
            self._write_dirs(canvas, x, y, {"up", "down"})

    def _draw_orthogonal(self, canvas: Canvas, connector: Connector) -> None:
        sx, sy, ex, ey = self._connector_cells(connector)
        branch_y = sy + (ey - sy) // 2

        for y in range(sy, branch_y):
            self._write_dirs(canvas, sx, y, {"up", "down"})

        if ex > sx:
            self._write_dirs(canvas, sx, branch_y, {"up", "right"})
            for x in range(sx + 1, ex):
                self._write_dirs(canvas, x, branch_y, {"left", "right"})
            self._write_dirs(canvas, ex, branch_y, {"left", "down"})
        elif ex < sx:
            self._write_dirs(canvas, sx, branch_y, {"up", "left"})
            for x in range(ex + 1, sx):
                self._write_dirs(canvas, x, branch_y, {"left", "right"})
            self._write_dirs(canvas, ex, branch_y, {"right", "down"})
        else:
            self._write_dirs(canvas, sx, branch_y, {"up", "down"})

        for y in range(branch_y + 1, ey):
            self._write_dirs(canvas, ex, y, {"up", "down"})
        self._draw_tip(canvas, ex, ey)

    def _draw_straight(self, canvas: Canvas, connector: Connector) -> None:
        sx, sy, ex, ey = self._connector_cells(connector)
        points = _line_cells(sx, sy, ex, ey)
        for (x, y), (nx, ny) in zip(points, points[1:]):
            if nx == x:
                glyph = self.chars.vertical
            elif ny == y:
                glyph = self.chars.horizontal
            elif nx > x:
                glyph = self.chars.diagonal_down
            else:
                glyph = self.chars.diagonal_up
            self._set_connector_char(canvas, x, y, glyph)
        self._draw_tip(canvas, ex, ey)

    def _draw_connectors(self, canvas: Canvas, layout: DiagramLayout) -> None:
        draw = self._draw_straight if self.connector_style == "straight" else self._draw_orthogonal
        for connector in layout.connectors:
            draw(canvas, connector)

    def _draw_nodes(self, canvas: Canvas, layout: DiagramLayout) -> None:
        for node_id, rect in layout.rects.items():
            layout.blocks[node_id].draw(canvas, int(rect.x), int(rect.y))

    def render(self, include_markup: bool = False) -> str:
        layout = self.layout()
        canvas = Canvas(width=max(layout.width, 1), height=max(layout.height, 1))
        self._draw_connectors(canvas, layout)
        self._draw_nodes(canvas, layout)
        return canvas.render(crop=True, include_markup=include_markup)

    def render_markup(self) -> str:
        return self.render(include_markup=True)

    def __rich__(self) -> Text:
        return Text.from_markup(self.render_markup(), emoji=False)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"Diagram({self.tree!r}, policy={self.connector_policy.value!r})"


def _line_cells(x0: int, y0: int, x1: int, y1: int) -> List[Tuple[int, int]]:
    cells = []
    dx = abs(x1 - x0)
    dy = -abs(y1 - y0)
    step_x = 1 if x0 < x1 else -1
    step_y = 1 if y0 < y1 else -1
    error = dx + dy
    x, y = x0, y0
    while True:
        cells.append((x, y))
        if x == x1 and y == y1:
            return cells
        doubled = 2 * error
        if doubled >= dy:
            error += dy
            x += step_x
        if doubled <= dx:
            error += dx
            y += step_y
