"""Terminal styling helpers: ANSI colours, section banners and text bars."""

from __future__ import annotations

import math
import re
from decimal import Decimal

RULE_WIDTH = 50
RULE_CHAR = "▬"
BAR_CHAR = "■"

_COLORS = {
    "black": 30,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "white": 37,
}

_ANSI_RE = re.compile(
    r"\x1b(?:\[[0-?]*[ -/]*[@-~]|\][^\x07\x1b]*(?:\x07|\x1b\\)|[@-Z\\-_])"
)


def style(text, color=None, bold=False, reverse=False):
    """Wrap ``text`` in ANSI escape codes for the given colour and attributes."""
    codes = []
    if bold:
        codes.append("1")
    if reverse:
        codes.append("7")
    if color is not None:
        try:
            codes.append(str(_COLORS[color]))
        except KeyError:
            raise ValueError(f"unknown colour: {color!r}") from None
    if not codes:
        return text
    return f"\x1b[{';'.join(codes)}m{text}\x1b[0m"


def strip_ansi(text):
    """Remove every ANSI escape sequence from ``text``."""
    return _ANSI_RE.sub("", text)


def banner(title, color):
    """Return a two-line section header: a reversed title and a coloured rule."""
    head = style(RULE_CHAR, color, bold=True, reverse=True) + style(
        f" {title} ", color, bold=True, reverse=True
    )
    rule = style(RULE_CHAR, color, bold=True) * RULE_WIDTH
    return f"\n{head}\n{rule}"


def text_bar(value, width=30):
    """Render a fraction in [0, 1] as a plain ``[■■   ] 40%`` bar."""
    fill = max(0, min(width, int(value * width)))
    empty = width - fill
    return f"[{BAR_CHAR * fill}{' ' * empty}] {value * 100:.0f}%"


def _display_float(value):
    """Format a float the shortest way, without a trailing ``.0`` for whole numbers."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == int(value):
        return str(int(value))
    text = repr(value)
    if "e" in text or "E" in text:
        return format(Decimal(text), "f")
    return text