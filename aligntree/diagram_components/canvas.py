import re
from typing import Dict, List, Optional, Tuple

from rich.markup import escape
from wcwidth import wcwidth

from ..errors import LayoutOverflowError

# cell width 0 marks the trailing half of a wide glyph
_CONTINUATION = 0

# a bracket rich would not read as the start of a tag
_LONE_BRACKET = re.compile(r"\[(?![a-z#/@][^\[]*?\])")


def glyph_width(char: str) -> int:
    return max(wcwidth(char), 1)


def escape_glyphs(glyphs: str, before_tag: bool = False) -> str:
    """Escape drawn glyphs so rich markup prints them unchanged.

    rich drops one backslash in front of any bracket and reads a backslash
    run before a tag as escapes, so trailing backslashes are doubled only
    when a tag follows.
    """
    trailing = len(glyphs) - len(glyphs.rstrip("\\"))
    body = _LONE_BRACKET.sub(r"\\[", escape(glyphs)).rstrip("\\")
    return body + "\\" * (trailing * 2 if before_tag else trailing)


class Canvas:

    def __init__(self, width: int, height: int):
        if width < 1 or height < 1:
            raise LayoutOverflowError(f"Canvas size must be positive, got {width}x{height}.")
        self.width = width
        self.height = height
        self.cells = [[" "] * width for _ in range(height)]
        self.widths = [[1] * width for _ in range(height)]
        self.markup: Dict[Tuple[int, int], Dict[str, List[str]]] = {}
        self._bounds: Optional[List[int]] = None

    def _check(self, x: int, y: int) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise LayoutOverflowError(
                f"Drawing at ({x}, {y}) falls outside the {self.width}x{self.height} canvas."
            )

    def _owner(self, x: int, y: int) -> int:
        while x > 0 and self.widths[y][x] == _CONTINUATION:
            x -= 1
        return x

    def _erase(self, x: int, y: int) -> None:
        start = self._owner(x, y)
        span = max(self.widths[y][start], 1)
        for xi in range(start, min(start + span, self.width)):
            self.cells[y][xi] = " "
            self.widths[y][xi] = 1
            self.markup.pop((xi, y), None)

    def _touch(self, x0: int, x1: int, y: int) -> None:
        if self._bounds is None:
            self._bounds = [x0, x1, y, y]
            return
        bounds = self._bounds
        bounds[0] = min(bounds[0], x0)
        bounds[1] = max(bounds[1], x1)
        bounds[2] = min(bounds[2], y)
        bounds[3] = max(bounds[3], y)

    def set(self, x: int, y: int, char: str, width: Optional[int] = None) -> None:
        span = glyph_width(char) if width is None else max(width, 1)
        self._check(x, y)
        self._check(x + span - 1, y)
        for xi in range(x, x + span):
            self._erase(xi, y)
        self.cells[y][x] = char
        self.widths[y][x] = span
        for xi in range(x + 1, x + span):
            self.widths[y][xi] = _CONTINUATION
        self._touch(x, x + span - 1, y)

    def get(self, x: int, y: int) -> str:
        if 0 <= x < self.width and 0 <= y < self.height:
            if self.widths[y][x] == _CONTINUATION:
                return " "
            return self.cells[y][x]
        return " "

    def insert_markup(self, x: int, y: int, markup: str, *, position: str = "prefix") -> None:
        if not markup:
            return
        if position not in {"prefix", "suffix"}:
            raise ValueError(f"Unknown markup position: {position}")
        cell = self.markup.setdefault((x, y), {"prefix": [], "suffix": []})
        cell[position].append(markup)

    def _row(self, y: int, x0: int, x1: int, include_markup: bool) -> str:
        if not include_markup:
            return "".join(
                self.cells[y][x] for x in range(x0, x1 + 1) if self.widths[y][x] != _CONTINUATION
            )
        # glyph runs between tags are escaped so rich prints brackets literally
        parts: List[str] = []
        run: List[str] = []
        for x in range(x0, x1 + 1):
            if self.widths[y][x] == _CONTINUATION:
                continue
            cell = self.markup.get((x, y))
            if cell and cell["prefix"]:
                parts.append(escape_glyphs("".join(run), before_tag=True))
                run = []
                parts.extend(cell["prefix"])
            run.append(self.cells[y][x])
            if cell and cell["suffix"]:
                parts.append(escape_glyphs("".join(run), before_tag=True))
                run = []
                parts.extend(cell["suffix"])
        parts.append(escape_glyphs("".join(run)))
        return "".join(parts)

    def render(self, crop: bool = True, include_markup: bool = False) -> str:
        if crop:
            if self._bounds is None:
                return ""
            x0, x1, y0, y1 = self._bounds
            return "\n".join(
                self._row(y, x0, x1, include_markup).rstrip() for y in range(y0, y1 + 1)
            )
        return "\n".join(
            self._row(y, 0, self.width - 1, include_markup) for y in range(self.height)
        )
