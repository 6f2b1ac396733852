"""Game state, keyboard handling, movement and the interactive window."""

from __future__ import annotations

import math
import sys
from enum import Enum
from typing import Optional, Sequence

from cubed.image import Image
from cubed.parser import ParseError, Scene, parse
from cubed.raycast import (
    MINIMAP_SIZE,
    Player,
    RayHit,
    draw_minimap,
    render_frame,
)

WIDTH = 640
HEIGHT = 480
TITLE = "NEETs"

MOVE_SPEED = 0.05
RUN_SPEED = 0.1
ROT_SPEED = 0.05

MINIMAP_OFFSET = (20, 20)

# X11 keysyms.
KEY_ESCAPE = 65307
KEY_RIGHT = 65363
KEY_LEFT = 65361
KEY_SHIFT = 65505
KEY_W = ord("w")
KEY_S = ord("s")
KEY_A = ord("a")
KEY_D = ord("d")
KEY_M = ord("m")


class Action(Enum):
    """A held-down movement or turning action."""

    FORWARD = "forward"
    BACK = "back"
    LEFT = "left"
    RIGHT = "right"
    TURN_RIGHT = "turn_right"
    TURN_LEFT = "turn_left"


_KEY_ACTIONS: dict[int, Action] = {
    KEY_W: Action.FORWARD,
    KEY_S: Action.BACK,
    KEY_A: Action.LEFT,
    KEY_D: Action.RIGHT,
    KEY_RIGHT: Action.TURN_RIGHT,
    KEY_LEFT: Action.TURN_LEFT,
}


class Game:
    """A running scene: the player, the held keys and the rendered images."""

    def __init__(self, scene: Scene, width: int = WIDTH, height: int = HEIGHT) -> None:
        self.scene = scene
        self.grid: list[str] = list(scene.grid)
        self.player = Player.from_start(scene.player, MOVE_SPEED)
        self.ceiling = scene.ceiling.hexa()
        self.floor = scene.floor.hexa()
        self.image = Image(width, height)
        self.minimap = Image(MINIMAP_SIZE, MINIMAP_SIZE)
        self.actions: set[Action] = set()
        self.show_minimap = False
        self.closed = False
        self.hits: list[RayHit] = []
        self.render()

    def key_press(self, keycode: int) -> None:
        """Handle a key going down."""
        if keycode == KEY_ESCAPE:
            self.closed = True
        if keycode == KEY_M:
            self.show_minimap = not self.show_minimap
        action = _KEY_ACTIONS.get(keycode)
        if action is not None:
            self.actions.add(action)
        if keycode == KEY_SHIFT:
            self.player.speed = RUN_SPEED

    def key_release(self, keycode: int) -> None:
        """Handle a key coming up."""
        action = _KEY_ACTIONS.get(keycode)
        if action is not None:
            self.actions.discard(action)
        if keycode == KEY_SHIFT:
            self.player.speed = MOVE_SPEED

    def _is_floor(self, x: float, y: float) -> bool:
        if x < 0 or y < 0:
            return False
        row, col = int(y), int(x)
        return row < len(self.grid) and col < len(self.grid[row]) and self.grid[row][col] == "o"

    def _try_move(self, dx: float, dy: float) -> None:
        new_x = self.player.x + dx
        new_y = self.player.y + dy
        if self._is_floor(new_x, new_y):
            self.player.x = new_x
            self.player.y = new_y

    def move_forward(self, speed: float) -> None:
        """Step along the view direction if the target cell is floor."""
        self._try_move(self.player.dir_x * speed, self.player.dir_y * speed)

    def move_back(self, speed: float) -> None:
        """Step against the view direction if the target cell is floor."""
        self._try_move(-self.player.dir_x * speed, -self.player.dir_y * speed)

    def move_left(self, speed: float) -> None:
        """Strafe against the camera plane if the target cell is floor."""
        self._try_move(-self.player.plane_x * speed, -self.player.plane_y * speed)

    def move_right(self, speed: float) -> None:
        """Strafe along the camera plane if the target cell is floor."""
        self._try_move(self.player.plane_x * speed, self.player.plane_y * speed)

    def _rotate(self, angle: float) -> None:
        cos_a, sin_a = math.cos(angle), math.sin(angle)
        p = self.player
        p.dir_x, p.dir_y = (
            p.dir_x * cos_a - p.dir_y * sin_a,
            p.dir_x * sin_a + p.dir_y * cos_a,
        )
        p.plane_x, p.plane_y = (
            p.plane_x * cos_a - p.plane_y * sin_a,
            p.plane_x * sin_a + p.plane_y * cos_a,
        )

    def look_right(self) -> None:
        """Turn the view and camera plane clockwise on screen."""
        self._rotate(ROT_SPEED)

    def look_left(self) -> None:
        """Turn the view and camera plane anticlockwise on screen."""
        self._rotate(-ROT_SPEED)

    def update(self) -> bool:
        """Apply the held actions once; return whether the frame was redrawn."""
        if not self.actions:
            return False
        speed = self.player.speed
        if Action.FORWARD in self.actions:
            self.move_forward(speed)
        elif Action.BACK in self.actions:
            self.move_back(speed)
        if Action.LEFT in self.actions:
            self.move_left(speed)
        if Action.RIGHT in self.actions:
            self.move_right(speed)
        if Action.TURN_RIGHT in self.actions:
            self.look_right()
        if Action.TURN_LEFT in self.actions:
            self.look_left()
        self.render()
        return True

    def render(self) -> list[RayHit]:
        """Redraw the view and the minimap; return the hit of each column."""
        self.hits = render_frame(self.grid, self.player, self.image, self.ceiling, self.floor)
        draw_minimap(self.grid, self.player, self.minimap)
        return self.hits


def describe_scene(scene: Scene) -> str:
    """Summarise a parsed scene: textures, colours, start and map rows."""
    lines = [
        f"NO = {scene.textures['NO']}",
        f"EA = {scene.textures['EA']}",
        f"SO = {scene.textures['SO']}",
        f"WE = {scene.textures['WE']}",
        f"Ceiling = {scene.ceiling_spec}",
        f"R = {scene.ceiling.red}",
        f"G = {scene.ceiling.green}",
        f"B = {scene.ceiling.blue}",
        f"Floor = {scene.floor_spec}",
        f"R = {scene.floor.red}",
        f"G = {scene.floor.green}",
        f"B = {scene.floor.blue}",
        f"hexa ceiling = {scene.ceiling.hexa()}",
        f"hexa floor = {scene.floor.hexa()}",
        f"player cords x = {scene.player.x:f} y = {scene.player.y:f}",
    ]
    lines.extend(scene.grid)
    return "\n".join(lines)


def _surface(pygame, image: Image):
    return pygame.image.frombuffer(image.to_rgb_bytes(), (image.width, image.height), "RGB")


def _keysym(pygame, key: int) -> int:
    special = {
        pygame.K_ESCAPE: KEY_ESCAPE,
        pygame.K_RIGHT: KEY_RIGHT,
        pygame.K_LEFT: KEY_LEFT,
        pygame.K_LSHIFT: KEY_SHIFT,
        pygame.K_RSHIFT: KEY_SHIFT,
    }
    return special.get(key, key)


def _run(game: Game) -> None:
    import pygame

    pygame.init()
    try:
        screen = pygame.display.set_mode((game.image.width, game.image.height))
        pygame.display.set_caption(TITLE)
        pygame.mouse.set_visible(False)
        clock = pygame.time.Clock()
        dirty = True
        shown_minimap = game.show_minimap
        while not game.closed:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    game.closed = True
                elif event.type == pygame.KEYDOWN:
                    game.key_press(_keysym(pygame, event.key))
                elif event.type == pygame.KEYUP:
                    game.key_release(_keysym(pygame, event.key))
            if game.closed:
                break
            if game.update() or game.show_minimap != shown_minimap:
                dirty = True
            if dirty:
                screen.blit(_surface(pygame, game.image), (0, 0))
                if game.show_minimap:
                    screen.blit(_surface(pygame, game.minimap), MINIMAP_OFFSET)
                pygame.display.flip()
                shown_minimap = game.show_minimap
                dirty = False
            clock.tick(60)
        print("\n\nGAME CLOSING")
    finally:
        pygame.quit()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Load the scene named on the command line and play it."""
    args = list(sys.argv[1:] if argv is None else argv)
    if len(args) != 1:
        print("Error\nNot valid amount of arguments", file=sys.stderr)
        return 1
    try:
        scene = parse(args[0])
    except ParseError as exc:
        print(f"Error\n{exc.message}", file=sys.stderr)
        return exc.exit_code
    print(describe_scene(scene))
    game = Game(scene)
    print(f"x = {game.player.x:f}   y = {game.player.y:f}")
    _run(game)
    return 0