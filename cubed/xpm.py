"""Reader for XPM images, both as C source files and as lists of strings."""

from __future__ import annotations

import os
import re
from typing import Iterable, Iterator, Optional

from cubed.colors import lookup_color
from cubed.image import Image

TRANSPARENT = 0xFF000000

_WORD_SPLIT = re.compile(r"[ \t]+")
_QUOTED = re.compile(r'"([^"]*)"')
_HEX = re.compile(r"\s*([+-]?)(?:0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_DECIMAL = re.compile(r"\s*([+-]?\d+)")


class XpmError(ValueError):
    """Raised when XPM data cannot be parsed."""


def split_words(text: str) -> list[str]:
    """Split on runs of spaces and tabs, dropping empty words."""
    return [word for word in _WORD_SPLIT.split(text) if word]


def _find_unquoted(text: str, needle: str) -> int:
    quoted = False
    for index, char in enumerate(text):
        if char == '"':
            quoted = not quoted
        if not quoted and text.startswith(needle, index):
            return index
    return -1


def _blank_comments(text: str, opener: str, closer: str) -> str:
    while (start := _find_unquoted(text, opener)) != -1:
        stop = text.find(closer, start + len(opener))
        stop = len(text) if stop == -1 else stop + len(closer)
        text = text[:start] + " " * (stop - start) + text[stop:]
    return text


def strip_comments(text: str) -> str:
    """Blank out /* */ and // comments outside quotes, keeping the length."""
    text = _blank_comments(text, "/*", "*/")
    return _blank_comments(text, "//", "\n")


def _strtol_hex(text: str) -> int:
    match = _HEX.match(text)
    digits = match.group(2) if match else ""
    if not digits:
        return 0
    value = int(digits, 16)
    return -value if match.group(1) == "-" else value


def _atoi(text: str) -> int:
    match = _DECIMAL.match(text)
    return int(match.group(1)) if match else 0


def text_to_rgb(name: str, end: Optional[str] = None) -> int:
    """Turn an XPM colour spec ("#RRGGBB" or a colour name) into 0xRRGGBB.

    A second word, when given, is joined to the name with a space. Unknown
    names give 0; "None" gives -1.
    """
    if name.startswith("#"):
        return _strtol_hex(name[1:])
    if end is not None:
        name = f"{name} {end}"
    try:
        return lookup_color(name)
    except KeyError:
        return 0


def _next_line(rows: Iterator[str], what: str) -> str:
    try:
        return next(rows)
    except StopIteration:
        raise XpmError(f"missing {what} line") from None


def parse_xpm_lines(lines: Iterable[str]) -> Image:
    """Build an image from the strings of an XPM: header, colours, pixel rows."""
    rows = iter(lines)
    words = split_words(_next_line(rows, "header"))
    if len(words) < 4:
        raise XpmError("header needs width, height, colour count and chars per pixel")
    width, height, ncolors, cpp = (_atoi(word) for word in words[:4])
    if min(width, height, ncolors, cpp) <= 0:
        raise XpmError(f"invalid header values: {' '.join(words[:4])}")

    palette: dict[str, int] = {}
    for _ in range(ncolors):
        line = _next_line(rows, "colour")
        key = line[:cpp]
        spec = split_words(line[cpp:])
        try:
            index = spec.index("c")
        except ValueError:
            raise XpmError(f"colour line without 'c' key: {line!r}") from None
        if index + 1 >= len(spec):
            raise XpmError(f"colour line without a colour: {line!r}")
        end = spec[index + 2] if index + 2 < len(spec) else None
        rgb = text_to_rgb(spec[index + 1], end)
        if cpp <= 2:
            palette[key] = rgb
        else:
            palette.setdefault(key, rgb)

    image = Image(width, height)
    for y in range(height):
        line = _next_line(rows, "pixel row")
        if len(line) < width * cpp:
            raise XpmError(f"pixel row {y} is too short")
        for x in range(width):
            color = palette.get(line[x * cpp:(x + 1) * cpp], 0)
            if color == -1:
                color = TRANSPARENT
            image.put_pixel(x, y, color)
    return image


def parse_xpm_source(text: str) -> Image:
    """Parse an XPM file's text: comments are dropped, quoted strings read."""
    cleaned = strip_comments(text)
    return parse_xpm_lines(match.group(1) for match in _QUOTED.finditer(cleaned))


def load_xpm(path: str | os.PathLike[str]) -> Image:
    """Read and parse an XPM file; OSError propagates if it cannot be read."""
    with open(path, encoding="latin-1") as handle:
        return parse_xpm_source(handle.read())