"""Grid raycasting (DDA), wall columns and the top-down minimap."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from cubed.image import Image
from cubed.parser import PlayerStart

SIDE_X = 0
SIDE_Y = 1

WALL_COLOR_X = 0x0000FF
WALL_COLOR_Y = 0x0000DF

MINIMAP_SIZE = 300
MINIMAP_TILE = 60
MINIMAP_FLOOR = 0x0000AF
MINIMAP_WALL = 0x000000
MINIMAP_RADIUS = 2

_NO_CROSSING = 1e30
_MIN_DISTANCE = 0.000001


@dataclass
class Player:
    """The moving camera: position, view direction, camera plane and speed."""

    x: float
    y: float
    dir_x: float
    dir_y: float
    plane_x: float
    plane_y: float
    speed: float

    @classmethod
    def from_start(cls, start: PlayerStart, speed: float) -> "Player":
        """Create a player placed and oriented as a scene's start cell says."""
        return cls(
            x=start.x,
            y=start.y,
            dir_x=start.dir_x,
            dir_y=start.dir_y,
            plane_x=start.plane_x,
            plane_y=start.plane_y,
            speed=speed,
        )


@dataclass(frozen=True)
class RayHit:
    """Where a ray met a wall and how far along the view direction it was."""

    distance: float
    side: int
    map_x: int
    map_y: int


def _cell(grid: Sequence[str], x: int, y: int) -> str:
    if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
        return grid[y][x]
    raise ValueError(f"ray left the map at cell ({x}, {y})")


def _axis_start(pos: float, cell: int, ray: float, delta: float) -> tuple[int, float]:
    if ray < 0:
        return -1, (pos - cell) * delta
    return 1, (cell + 1.0 - pos) * delta


def cast_ray(grid: Sequence[str], player: Player, column: int, width: int) -> RayHit:
    """Cast the ray for one screen column and walk the grid until a '1' cell."""
    if width <= 0:
        raise ValueError(f"screen width must be positive, got {width}")
    camera_x = 2 * column / float(width) - 1
    ray_x = player.dir_x + player.plane_x * camera_x
    ray_y = player.dir_y + player.plane_y * camera_x
    map_x = int(player.x)
    map_y = int(player.y)

    delta_x = _NO_CROSSING if ray_x == 0 else abs(1 / ray_x)
    delta_y = _NO_CROSSING if ray_y == 0 else abs(1 / ray_y)
    step_x, side_x = _axis_start(player.x, map_x, ray_x, delta_x)
    step_y, side_y = _axis_start(player.y, map_y, ray_y, delta_y)

    while True:
        if side_x < side_y:
            side_x += delta_x
            map_x += step_x
            side = SIDE_X
        else:
            side_y += delta_y
            map_y += step_y
            side = SIDE_Y
        if _cell(grid, map_x, map_y) == "1":
            break

    distance = side_x - delta_x if side == SIDE_X else side_y - delta_y
    return RayHit(distance=distance, side=side, map_x=map_x, map_y=map_y)


def wall_span(distance: float, height: int) -> tuple[int, int]:
    """Return the first and last screen rows of a wall slice at ``distance``.

    The start is clamped to the top of the screen; the end may lie past the
    bottom, which drawing simply never reaches.
    """
    distance = max(distance, _MIN_DISTANCE)
    line_height = int(height / distance)
    start = max(height // 2 - line_height // 2, 0)
    end = max(height // 2 + line_height // 2, 0)
    return start, end


def draw_column(
    image: Image,
    column: int,
    start: int,
    end: int,
    ceiling: int,
    floor: int,
    side: int,
) -> None:
    """Paint one column: ceiling above ``start``, wall to ``end``, floor below."""
    wall = WALL_COLOR_X if side == SIDE_X else WALL_COLOR_Y
    for y in range(image.height):
        if y < start:
            color = ceiling
        elif y <= end:
            color = wall
        else:
            color = floor
        image.put_pixel(column, y, color)


def render_frame(
    grid: Sequence[str], player: Player, image: Image, ceiling: int, floor: int
) -> list[RayHit]:
    """Render the whole view into ``image`` and return the hit of each column."""
    hits = []
    for column in range(image.width):
        hit = cast_ray(grid, player, column, image.width)
        start, end = wall_span(hit.distance, image.height)
        draw_column(image, column, start, end, ceiling, floor, hit.side)
        hits.append(hit)
    return hits


def _draw_tile(image: Image, tile_x: int, tile_y: int, color: int) -> None:
    left = (tile_x - 1) * MINIMAP_TILE
    top = (tile_y - 1) * MINIMAP_TILE
    for y in range(max(top, 0), min(top + MINIMAP_TILE, image.height)):
        for x in range(max(left, 0), min(left + MINIMAP_TILE, image.width)):
            image.put_pixel(x, y, color)


def draw_minimap(grid: Sequence[str], player: Player, image: Image) -> None:
    """Draw the cells around the player as 60-pixel tiles, floors in blue."""
    pos_y = max(player.y - MINIMAP_RADIUS, 0.0)
    tile_y = 1
    while pos_y <= player.y + MINIMAP_RADIUS:
        tile_x = 1
        pos_x = max(player.x - MINIMAP_RADIUS, 0.0)
        while pos_x <= player.x + MINIMAP_RADIUS and pos_y < len(grid):
            row = grid[int(pos_y)]
            cell_x = int(pos_x)
            is_floor = cell_x < len(row) and row[cell_x] == "o"
            _draw_tile(image, tile_x, tile_y, MINIMAP_FLOOR if is_floor else MINIMAP_WALL)
            pos_x += 1
            tile_x += 1
        tile_y += 1
        pos_y += 1