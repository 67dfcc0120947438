from .diagram_components import (
    BoxBlock,
    BoxChars,
    Canvas,
    Connector,
    ConnectorPolicy,
    Diagram,
    DiagramLayout,
    Rect,
    RectMap,
    TextBlock,
    TreeNode,
    box_renderer,
    connector_points,
    guide_indices,
    text_renderer,
)

__all__ = [
    "Diagram",
    "DiagramLayout",
    "TreeNode",
    "Rect",
    "RectMap",
    "Connector",
    "ConnectorPolicy",
    "BoxBlock",
    "TextBlock",
    "BoxChars",
    "Canvas",
    "box_renderer",
    "text_renderer",
    "connector_points",
    "guide_indices",
]
