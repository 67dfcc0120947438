from .tree_diagram import *
from .errors import *

__version__ = "0.1.0"
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
    "DiagramError",
    "ConfigurationError",
    "LayoutOverflowError",
    "TreeStructureError",
    "RendererError",
]
