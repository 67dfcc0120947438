from typing import Tuple, Union

import pytest

from aligntree import TreeNode


class FixedBlock:
    """Node content with a known size, for geometry assertions."""

    def __init__(self, width: int, height: int = 3):
        self.width = width
        self.height = height

    def draw(self, canvas, x: int, y: int) -> None:
        for row in range(self.height):
            for col in range(self.width):
                canvas.set(x + col, y + row, "#")


def fixed(value: Union[int, Tuple[int, int]]) -> FixedBlock:
    if isinstance(value, tuple):
        return FixedBlock(*value)
    return FixedBlock(value)


@pytest.fixture
def fixed_renderer():
    return fixed


@pytest.fixture
def three_level_tree():
    """Root with two children; the first child has three children of its own."""
    return TreeNode(8, [
        TreeNode(6, [TreeNode(4), TreeNode(4), TreeNode(4)]),
        TreeNode(6),
    ])
