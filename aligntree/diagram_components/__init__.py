from .core import BoxChars, ConnectorPolicy, Point, Rect
from .tree import ArenaEntry, TreeArena, TreeNode
from .measure import RectMap
from .alignment import GuideSet, centerline, guide_ids, guide_indices
from .connector import Connector, connector_points
from .node import BoxBlock, TextBlock, box_renderer, text_renderer
from .canvas import Canvas
from .diagram import Diagram, DiagramLayout, connectors_from

__all__ = [
    "BoxChars",
    "ConnectorPolicy",
    "Point",
    "Rect",
    "ArenaEntry",
    "TreeArena",
    "TreeNode",
    "RectMap",
    "GuideSet",
    "centerline",
    "guide_ids",
    "guide_indices",
    "Connector",
    "connector_points",
    "BoxBlock",
    "TextBlock",
    "box_renderer",
    "text_renderer",
    "Canvas",
    "Diagram",
    "DiagramLayout",
    "connectors_from",
]
