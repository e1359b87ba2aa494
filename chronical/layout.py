"""Minimal terminal styling and block layout helpers."""

from __future__ import annotations

import enum
import math
import re
from dataclasses import dataclass
from typing import NamedTuple, Optional, Tuple

from wcwidth import wcswidth, wcwidth

_ANSI = re.compile(r"\x1b\[[0-9;?]*[A-Za-z]")
_RESET = "\x1b[0m"
_TAB = "    "


class Align(enum.Enum):
    """Position of text or blocks along an axis."""

    LEFT = "left"
    RIGHT = "right"
    TOP = "top"
    BOTTOM = "bottom"
    CENTER = "center"


_FRACTIONS = {
    Align.LEFT: 0.0,
    Align.TOP: 0.0,
    Align.CENTER: 0.5,
    Align.RIGHT: 1.0,
    Align.BOTTOM: 1.0,
}


class _Border(NamedTuple):
    top: str
    bottom: str
    left: str
    right: str
    top_left: str
    top_right: str
    bottom_left: str
    bottom_right: str


NORMAL_BORDER = _Border("─", "─", "│", "│", "┌", "┐", "└", "┘")
THICK_BORDER = _Border("━", "━", "┃", "┃", "┏", "┓", "┗", "┛")


def _line_width(line: str) -> int:
    plain = _ANSI.sub("", line)
    width = wcswidth(plain)
    if width >= 0:
        return width
    return sum(max(wcwidth(char), 0) for char in plain)


def text_width(text: str) -> int:
    """Display width of the widest line, ignoring escape sequences."""
    return max((_line_width(line) for line in text.split("\n")), default=0)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _box(values) -> Tuple[int, int, int, int]:
    if isinstance(values, int):
        values = (values,)
    values = tuple(values)
    if len(values) == 1:
        return (values[0],) * 4
    if len(values) == 2:
        vertical, horizontal = values
        return (vertical, horizontal, vertical, horizontal)
    if len(values) == 3:
        top, horizontal, bottom = values
        return (top, horizontal, bottom, horizontal)
    if len(values) == 4:
        return values
    raise ValueError("expected one to four spacing values")


def _wrap(line: str, limit: int):
    if _line_width(line) <= limit:
        yield line
        return
    chunk, used = "", 0
    for char in line:
        size = max(wcwidth(char), 0)
        if used + size > limit and chunk:
            yield chunk
            chunk, used = "", 0
        chunk += char
        used += size
    yield chunk


def _align_line(line: str, target: int, align: Align) -> str:
    short = max(target - _line_width(line), 0)
    if align is Align.RIGHT:
        return " " * short + line
    if align is Align.CENTER:
        left = short // 2
        return " " * left + line + " " * (short - left)
    return line + " " * short


def _paint(text: str, codes: str) -> str:
    return f"\x1b[{codes}m{text}{_RESET}" if codes else text


def _color_codes(foreground: Optional[str], background: Optional[str], bold=False) -> str:
    codes = []
    if bold:
        codes.append("1")
    if foreground is not None:
        codes.append(f"38;5;{foreground}")
    if background is not None:
        codes.append(f"48;5;{background}")
    return ";".join(codes)


@dataclass(frozen=True)
class Style:
    """How a block of text is coloured, sized, padded and framed.

    Width includes padding but not border or margin. Spacing values take
    one, two or four numbers in the usual top/right/bottom/left order.
    """

    foreground: Optional[str] = None
    background: Optional[str] = None
    bold: bool = False
    width: int = 0
    height: int = 0
    align: Align = Align.LEFT
    padding: Tuple[int, ...] = (0, 0, 0, 0)
    margin: Tuple[int, ...] = (0, 0, 0, 0)
    border: Optional[_Border] = None
    border_foreground: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "padding", _box(self.padding))
        object.__setattr__(self, "margin", _box(self.margin))

    def render(self, text: str) -> str:
        """Lay out the text according to this style."""
        pad_top, pad_right, pad_bottom, pad_left = self.padding
        lines = text.replace("\r\n", "\n").replace("\t", _TAB).split("\n")
        if self.width > 0:
            limit = max(self.width - pad_left - pad_right, 1)
            lines = [piece for line in lines for piece in _wrap(line, limit)]
        lines = [" " * pad_left + line + " " * pad_right for line in lines]
        lines = [""] * pad_top + lines + [""] * pad_bottom
        if len(lines) < self.height:
            lines += [""] * (self.height - len(lines))

        target = max(self.width, max(_line_width(line) for line in lines))
        codes = _color_codes(self.foreground, self.background, self.bold)
        lines = [_paint(_align_line(line, target, self.align), codes) for line in lines]

        if self.border is not None:
            lines = self._frame(lines, target)

        margin_top, margin_right, margin_bottom, margin_left = self.margin
        if any(self.margin):
            lines = [" " * margin_left + line + " " * margin_right for line in lines]
            full = max(_line_width(line) for line in lines)
            lines = [" " * full] * margin_top + lines + [" " * full] * margin_bottom
        return "\n".join(lines)

    def _frame(self, lines, inner: int):
        edge = self.border
        codes = _color_codes(self.border_foreground, None)
        top = _paint(edge.top_left + edge.top * inner + edge.top_right, codes)
        bottom = _paint(edge.bottom_left + edge.bottom * inner + edge.bottom_right, codes)
        left, right = _paint(edge.left, codes), _paint(edge.right, codes)
        return [top, *(left + line + right for line in lines), bottom]


def join_horizontal(position: Align, *blocks: str) -> str:
    """Place blocks side by side, aligning their heights by position."""
    if not blocks:
        return ""
    if len(blocks) == 1:
        return blocks[0]
    split = [block.split("\n") for block in blocks]
    height = max(len(lines) for lines in split)
    fraction = _FRACTIONS[position]
    rows = [""] * height
    for lines in split:
        width = max(_line_width(line) for line in lines)
        extra = height - len(lines)
        above = _round_half_up(extra * fraction)
        padded = [""] * above + lines + [""] * (extra - above)
        rows = [
            row + line + " " * (width - _line_width(line))
            for row, line in zip(rows, padded)
        ]
    return "\n".join(rows)


def join_vertical(position: Align, *blocks: str) -> str:
    """Stack blocks, aligning their lines horizontally by position."""
    if not blocks:
        return ""
    if len(blocks) == 1:
        return blocks[0]
    lines = [line for block in blocks for line in block.split("\n")]
    width = max(_line_width(line) for line in lines)
    fraction = _FRACTIONS[position]
    out = []
    for line in lines:
        short = width - _line_width(line)
        left = _round_half_up(short * fraction)
        out.append(" " * left + line + " " * (short - left))
    return "\n".join(out)


TITLE_STYLE = Style(background="130", padding=(0, 1))
SUBTLE_STYLE = Style(foreground="241")
FOCUSED_STYLE = Style(foreground="205")
TABLE_TITLE_STYLE = Style(foreground="145")
BLURRED_STYLE = Style(foreground="255")

CELL_STYLE = Style(border=NORMAL_BORDER, padding=(0, 1))
CURSOR_STYLE = Style(border=THICK_BORDER, padding=(0, 1))
GIVEN_STYLE = Style(border=NORMAL_BORDER, padding=(0, 1), border_foreground="242")
FILLED_STYLE = CELL_STYLE
INVALID_STYLE = Style(border=NORMAL_BORDER, padding=(0, 1), border_foreground="196")