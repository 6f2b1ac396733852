"""Reading and validating .cub scene descriptions."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Sequence

WHITESPACE = " \t\n\v\f\r"
WALL_KINDS: tuple[str, ...] = ("NO", "EA", "WE", "SO")
COLOR_KINDS: tuple[str, ...] = ("C", "F")
_KINDS = COLOR_KINDS + WALL_KINDS
_REQUIRED = frozenset(_KINDS)

_MAP_MARKERS = frozenset("10NEWSD")
_MAP_CHARS = frozenset("01 NEWSD")
_FLOOD = {"0": "o", "N": "o", "E": "o", "W": "o", "S": "o", "D": "d"}
_SETTLED = frozenset("1oecd")
_COLOR_CHARS = frozenset("0123456789,")
_HEX_DIGITS = "0123456789ABCDEF"
_WORD = re.compile(r"[^ \t\n\v\f\r]*")

# facing -> (dir_x, dir_y, plane_x, plane_y)
_FACINGS: dict[str, tuple[float, float, float, float]] = {
    "N": (0.0, -1.0, 0.66, 0.0),
    "S": (0.0, 1.0, -0.66, 0.0),
    "E": (1.0, 0.0, 0.0, 0.66),
    "W": (-1.0, 0.0, 0.0, -0.66),
}


class ParseError(ValueError):
    """Raised when a scene file is unreadable or invalid.

    ``exit_code`` is the status the program ends with for this error.
    """

    def __init__(self, message: str, exit_code: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code


def _hex_digits(value: int) -> str:
    if value > 16:
        return _hex_digits(value // 16) + _HEX_DIGITS[value % 16]
    return _HEX_DIGITS[value % 16]


@dataclass(frozen=True)
class Color:
    """An RGB colour given in a scene file."""

    red: int
    green: int
    blue: int

    def hexa(self) -> int:
        """Pack the components into one integer by joining their hex digits.

        Components are written without zero padding, so one of 16 or less
        contributes a single digit (16 itself gives "0").
        """
        digits = "".join(_hex_digits(c) for c in (self.red, self.green, self.blue))
        return int(digits, 16)


@dataclass(frozen=True)
class PlayerStart:
    """Where the player stands, which way it faces and its camera plane."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float
    facing: str


@dataclass
class Scene:
    """A fully validated scene: textures, colours, map and player start."""

    textures: dict[str, str]
    ceiling: Color
    floor: Color
    ceiling_spec: str
    floor_spec: str
    grid: list[str]
    player: PlayerStart
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def width(self) -> int:
        return max((len(row) for row in self.grid), default=0)

    @property
    def height(self) -> int:
        return len(self.grid)


def _split_color(text: str) -> list[str]:
    parts = text.split(",")
    if len(parts) != 3 or not all(parts):
        raise ParseError("Colors aren't valid")
    return parts


def _check_color(text: str, parts: Sequence[str]) -> Color:
    if not set(text) <= _COLOR_CHARS:
        raise ParseError("Colors values aren't valid")
    values = [int(part) for part in parts]
    if any(not 0 <= value <= 255 for value in values):
        raise ParseError("Colors values aren't valid")
    return Color(*values)


def parse_color(text: str) -> Color:
    """Parse "R,G,B" with three decimal components from 0 to 255."""
    return _check_color(text, _split_color(text))


def check_texture(line: str, kind: str) -> str:
    """Return the single value following identifier ``kind`` on ``line``.

    Wall textures must name a ".xpm" file; nothing but whitespace may follow.
    """
    if kind not in _KINDS:
        raise ValueError(f"unknown identifier: {kind!r}")
    rest = line[len(kind):].lstrip(WHITESPACE)
    match = _WORD.match(rest)
    word = match.group(0) if match else ""
    if not word:
        raise ParseError("Invalid texture")
    if kind in WALL_KINDS and not word.endswith(".xpm"):
        raise ParseError("Invalid texture")
    if rest[len(word):].strip(WHITESPACE):
        raise ParseError("Invalid texture")
    return word


def _read_header_line(line: str, specs: dict[str, str]) -> None:
    stripped = line.lstrip(WHITESPACE)
    if not stripped:
        return
    kind = next((k for k in _KINDS if stripped.startswith(k + " ")), None)
    if kind is None or kind in specs:
        raise ParseError("Invalid texture")
    specs[kind] = check_texture(stripped, kind)


def _read_header(lines: Sequence[str]) -> tuple[dict[str, str], int]:
    specs: dict[str, str] = {}
    for index, line in enumerate(lines):
        _read_header_line(line, specs)
        if _REQUIRED <= specs.keys():
            return specs, index + 1
    raise ParseError("Missing texture or color")


def check_map(grid: Iterable[str]) -> bool:
    """Tell whether every map character is one of "01 NEWSD"."""
    return all(set(row) <= _MAP_CHARS for row in grid)


def find_player(grid: Sequence[str]) -> PlayerStart:
    """Locate the single N/S/E/W start cell and derive the camera from it."""
    found = [
        (x, y, char)
        for y, row in enumerate(grid)
        for x, char in enumerate(row)
        if char in _FACINGS
    ]
    if len(found) != 1:
        raise ParseError("Player not found or multiple players in map")
    x, y, facing = found[0]
    dir_x, dir_y, plane_x, plane_y = _FACINGS[facing]
    return PlayerStart(x + 0.5, y + 0.5, dir_x, dir_y, plane_x, plane_y, facing)


def _flood_from(cells: list[list[str]], x: int, y: int) -> bool:
    stack = [(x, y)]
    while stack:
        x, y = stack.pop()
        if not (0 <= y < len(cells) and 0 <= x < len(cells[y])):
            return False
        char = cells[y][x]
        if char in _SETTLED:
            continue
        if char not in _FLOOD:
            return False
        cells[y][x] = _FLOOD[char]
        stack.extend(((x - 1, y), (x + 1, y), (x, y - 1), (x, y + 1)))
    return True


def flood_fill(grid: Sequence[str]) -> list[str]:
    """Check every open area is closed by walls and mark it.

    Floors and the start cell become "o", doors become "d". The input is
    left unchanged; the marked grid is returned.
    """
    cells = [list(row) for row in grid]
    for y, row in enumerate(cells):
        for x in range(len(row)):
            if row[x] in _FLOOD and not _flood_from(cells, x, y):
                raise ParseError("Map is invalid")
    return ["".join(row) for row in cells]


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return lines


def parse_text(text: str) -> Scene:
    """Parse the contents of a scene file."""
    lines = _split_lines(text)
    if not lines:
        raise ParseError("Empty File", exit_code=0)
    specs, consumed = _read_header(lines)

    ceiling_parts = _split_color(specs["C"])
    floor_parts = _split_color(specs["F"])
    ceiling = _check_color(specs["C"], ceiling_parts)
    floor = _check_color(specs["F"], floor_parts)

    rest = lines[consumed:]
    if not rest:
        raise ParseError("No map found")
    start = next(
        (i for i, line in enumerate(rest) if _MAP_MARKERS.intersection(line)),
        len(rest),
    )
    grid = rest[start:]
    if not check_map(grid):
        raise ParseError("Invalid char found")
    player = find_player(grid)
    flooded = flood_fill(grid)

    return Scene(
        textures={kind: specs[kind] for kind in WALL_KINDS},
        ceiling=ceiling,
        floor=floor,
        ceiling_spec=specs["C"],
        floor_spec=specs["F"],
        grid=flooded,
        player=player,
    )


def parse(path: str | os.PathLike[str]) -> Scene:
    """Read and parse a ".cub" scene file."""
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise ParseError("Invalid file or no file provided", exit_code=0) from exc
    if not os.fspath(path).endswith(".cub"):
        raise ParseError("File is not in the correct format", exit_code=0)
    return parse_text(raw.decode("utf-8", errors="surrogateescape"))