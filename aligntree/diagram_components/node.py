"""Default node renderers.

A node renderer is any callable mapping a tree value to a block. The
diagram only needs the block to expose ``width`` and ``height`` in
character cells and a ``draw(canvas, x, y)`` method. Text may carry rich
style tags such as ``[bold]...[/bold]``; tags take no room and are written
to the canvas markup channel.
"""

import re
from typing import Any, Callable, List, Optional, Tuple, Union

from rich.errors import StyleSyntaxError
from rich.style import Style
from wcwidth import wcwidth

from ..errors import RendererError
from .canvas import Canvas
from .core import BoxChars

Token = Tuple[str, str, int]
NodeRenderer = Callable[[Any], Any]

_TAG = re.compile(r"\[([a-z#/@][^\[]*?)\]")


def _is_style_tag(content: str) -> bool:
    """Whether ``[content]`` is a tag rich would apply rather than print."""
    name = content[1:] if content.startswith("/") else content
    if not name:
        return content == "/"
    if name.startswith(("@", "link")) or "=" in name:
        return True
    try:
        Style.parse(name)
    except StyleSyntaxError:
        return False
    return True


def tokenize_markup(text: str) -> List[Token]:
    """Split rich-style markup into tag, text and newline tokens.

    Backslashes escape a following tag the way ``rich.markup.escape``
    produces them. Bracketed words that are not valid styles stay text.
    """
    tokens: List[Token] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            end = index
            while end < len(text) and text[end] == "\\":
                end += 1
            if end < len(text) and _TAG.match(text, end):
                run = end - index
                tokens.extend(("text", "\\", 1) for _ in range(run // 2))
                if run % 2:
                    tokens.append(("text", "[", 1))
                    end += 1
            elif end < len(text) and text[end] == "[":
                # rich reads "\[" as "[" even when no tag follows
                tokens.extend(("text", "\\", 1) for _ in range(end - index - 1))
            else:
                tokens.extend(("text", "\\", 1) for _ in range(end - index))
            index = end
            continue
        if char == "[":
            match = _TAG.match(text, index)
            if match and _is_style_tag(match.group(1)):
                tokens.append(("tag", match.group(0), 0))
                index = match.end()
                continue
        if char == "\n":
            tokens.append(("newline", char, 0))
        else:
            tokens.append(("text", char, max(wcwidth(char), 1)))
        index += 1
    return tokens


def _closing_tag(tag: str) -> str:
    return f"[/{tag[1:]}" if not tag.startswith("[/") else tag


def wrap_tokens(tokens: List[Token], limit: Optional[int]) -> List[List[Token]]:
    """Split tokens into lines no wider than ``limit`` cells.

    Style tags still open at a line break are closed at the end of the line
    and reopened at the start of the next, so every line is balanced.
    """
    lines: List[List[Token]] = []
    current: List[Token] = []
    used = 0
    open_tags: List[str] = []

    def break_line() -> None:
        nonlocal current, used
        for tag in reversed(open_tags):
            current.append(("tag", _closing_tag(tag), 0))
        lines.append(current)
        current = [("tag", tag, 0) for tag in open_tags]
        used = 0

    for kind, value, width in tokens:
        if kind == "newline":
            break_line()
        elif kind == "tag":
            if not value.startswith("[/"):
                open_tags.append(value)
                current.append((kind, value, width))
                continue
            name = value[2:-1]
            for position in range(len(open_tags) - 1, -1, -1):
                if not name or open_tags[position][1:-1] == name:
                    del open_tags[position]
                    current.append((kind, value, width))
                    break
        else:
            if limit and used + width > limit and used > 0:
                break_line()
            current.append((kind, value, width))
            used += width

    for tag in reversed(open_tags):
        current.append(("tag", _closing_tag(tag), 0))
    lines.append(current)
    return lines


def line_width(line: List[Token]) -> int:
    return sum(width for kind, _, width in line if kind == "text")


def plain_text(line: List[Token]) -> str:
    return "".join(value for kind, value, _ in line if kind == "text")


def _draw_tokens(canvas: Canvas, x: int, y: int, line: List[Token]) -> None:
    cursor = x
    last_glyph: Optional[int] = None
    pending: List[str] = []
    for kind, value, width in line:
        if kind == "tag":
            if not value.startswith("[/"):
                pending.append(value)
            elif pending:
                # opened and closed without any glyph in between
                pending.pop()
            elif last_glyph is not None:
                canvas.insert_markup(last_glyph, y, value, position="suffix")
            continue
        canvas.set(cursor, y, value, width=width)
        for tag in pending:
            canvas.insert_markup(cursor, y, tag)
        pending.clear()
        last_glyph = cursor
        cursor += width


class TextBlock:

    def __init__(self, text: str, max_width: Optional[int] = None):
        self.text = text
        self.lines = wrap_tokens(tokenize_markup(text), max_width)
        self.width = max(1, max(line_width(line) for line in self.lines))
        self.height = len(self.lines)

    def draw(self, canvas: Canvas, x: int, y: int) -> None:
        for row, line in enumerate(self.lines):
            offset = (self.width - line_width(line)) // 2
            _draw_tokens(canvas, x + offset, y + row, line)

    def __repr__(self) -> str:
        return f"TextBlock({self.text!r}, {self.width}x{self.height})"


class BoxBlock(TextBlock):
    """Text framed by a border, with ``padding`` blank cells on each side."""

    def __init__(
        self,
        text: str,
        chars: Optional[BoxChars] = None,
        max_width: Optional[int] = 36,
        padding: int = 1,
    ):
        self.chars = chars or BoxChars()
        self.padding = padding
        frame = 2 + 2 * padding
        content_limit = max(max_width - frame, 1) if max_width else None
        super().__init__(text, content_limit)
        self.inner_width = self.width
        self.width = self.inner_width + frame
        self.height = len(self.lines) + 2

    def draw(self, canvas: Canvas, x: int, y: int) -> None:
        chars = self.chars
        right = x + self.width - 1
        bottom = y + self.height - 1

        canvas.set(x, y, chars.top_left)
        canvas.set(x, bottom, chars.bottom_left)
        for xi in range(x + 1, right):
            canvas.set(xi, y, chars.horizontal)
            canvas.set(xi, bottom, chars.horizontal)
        canvas.set(right, y, chars.top_right)
        canvas.set(right, bottom, chars.bottom_right)

        for row, line in enumerate(self.lines, start=1):
            canvas.set(x, y + row, chars.vertical)
            for xi in range(x + 1, right):
                canvas.set(xi, y + row, " ")
            canvas.set(right, y + row, chars.vertical)
            offset = (self.inner_width - line_width(line)) // 2
            _draw_tokens(canvas, x + 1 + self.padding + offset, y + row, line)

    def __repr__(self) -> str:
        return f"BoxBlock({self.text!r}, {self.width}x{self.height})"


def box_renderer(
    max_width: Optional[int] = 36,
    box_style: Union[str, BoxChars] = "rounded",
    padding: int = 1,
) -> NodeRenderer:
    chars = box_style if isinstance(box_style, BoxChars) else BoxChars.for_style(box_style)

    def render(value: Any) -> BoxBlock:
        return BoxBlock(str(value), chars=chars, max_width=max_width, padding=padding)

    return render


def text_renderer(max_width: Optional[int] = None) -> NodeRenderer:
    def render(value: Any) -> TextBlock:
        return TextBlock(str(value), max_width=max_width)

    return render


def check_block(block: Any, value: Any) -> Any:
    for attribute in ("width", "height"):
        size = getattr(block, attribute, None)
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise RendererError(
                f"Node renderer returned a block with invalid {attribute} {size!r} for {value!r}."
            )
    if not callable(getattr(block, "draw", None)):
        raise RendererError(f"Node renderer returned a block without draw() for {value!r}.")
    return block
