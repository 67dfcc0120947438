import logging
from typing import Dict, Iterable, Iterator, Optional

from .core import Rect

logger = logging.getLogger(__name__)


class RectMap:
    """Measured rectangles keyed by node id for one render pass.

    Each node contributes a singleton map and the maps are merged on the way
    back up the recursion. On a key collision the later value wins.
    """

    def __init__(self, rects: Optional[Dict[int, Rect]] = None) -> None:
        self._rects: Dict[int, Rect] = dict(rects or {})

    @classmethod
    def single(cls, node_id: int, rect: Rect) -> "RectMap":
        return cls({node_id: rect})

    @classmethod
    def merged(cls, *maps: "RectMap") -> "RectMap":
        result = cls()
        for other in maps:
            result.merge(other)
        return result

    def merge(self, other: "RectMap") -> "RectMap":
        self._rects.update(other._rects)
        return self

    def get(self, node_id: int) -> Optional[Rect]:
        return self._rects.get(node_id)

    def require_root(self, node_id: int) -> Optional[Rect]:
        rect = self._rects.get(node_id)
        if rect is None:
            logger.warning(
                "No measurement recorded for node %s; skipping its connectors.", node_id
            )
        return rect

    def ids(self):
        return list(self._rects)

    def without(self, node_id: int) -> "RectMap":
        return RectMap({key: rect for key, rect in self._rects.items() if key != node_id})

    def restricted(self, node_ids: Iterable[int]) -> "RectMap":
        wanted = set(node_ids)
        return RectMap({key: rect for key, rect in self._rects.items() if key in wanted})

    def items(self):
        return self._rects.items()

    def __getitem__(self, node_id: int) -> Rect:
        return self._rects[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._rects

    def __iter__(self) -> Iterator[int]:
        return iter(self._rects)

    def __len__(self) -> int:
        return len(self._rects)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RectMap):
            return NotImplemented
        return self._rects == other._rects

    def __repr__(self) -> str:
        return f"RectMap({self._rects!r})"
