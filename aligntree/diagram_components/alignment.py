"""Guide-child selection for sibling rows.

A parent is centred on a shared centre line computed from its "guide"
children: the middle child of an odd-sized row, or the two children that
straddle the midpoint of an even-sized row. Children outside the guide set
keep ordinary centring inside their own row cell.
"""

import math
from typing import FrozenSet, Sequence

from .core import Rect
from .tree import TreeNode

GuideSet = FrozenSet[int]


def guide_indices(count: int) -> GuideSet:
    if count < 1:
        raise ValueError("Guide children require at least one sibling.")
    mid = count // 2
    if count % 2:
        return frozenset({mid})
    return frozenset({mid - 1, mid})


def guide_ids(children: Sequence[TreeNode]) -> GuideSet:
    return frozenset(children[index].id for index in guide_indices(len(children)))


def centerline(frames: Sequence[Rect], guides: GuideSet) -> float:
    """Mean horizontal centre of the guide children's subtree frames."""
    if not guides:
        raise ValueError("centerline needs at least one guide index.")
    return sum(frames[index].mid_x for index in guides) / len(guides)


def align_to(width: int, reference: float) -> int:
    """Left edge that centres a block of ``width`` cells on ``reference``."""
    return math.floor(reference - width / 2)
