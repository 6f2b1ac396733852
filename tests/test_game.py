import math

import pytest

from cubed.game import (
    KEY_A,
    KEY_D,
    KEY_ESCAPE,
    KEY_LEFT,
    KEY_M,
    KEY_RIGHT,
    KEY_S,
    KEY_SHIFT,
    KEY_W,
    MOVE_SPEED,
    RUN_SPEED,
    Action,
    Game,
    describe_scene,
    main,
)
from cubed.parser import parse_text

SCENE_TEXT = (
    "NO ./n.xpm\n"
    "SO ./s.xpm\n"
    "WE ./w.xpm\n"
    "EA ./e.xpm\n"
    "F 100,50,0\n"
    "C 0,0,255\n"
    "\n"
    "11111\n"
    "10001\n"
    "10N01\n"
    "10001\n"
    "11111\n"
)


@pytest.fixture
def game():
    return Game(parse_text(SCENE_TEXT), 16, 12)


def test_forward_key_moves_player(game):
    start_y = game.player.y
    game.key_press(KEY_W)
    assert Action.FORWARD in game.actions
    assert game.update() is True
    assert game.player.y == pytest.approx(start_y - MOVE_SPEED)
    assert game.player.x == pytest.approx(2.5)


def test_release_stops_movement(game):
    game.key_press(KEY_S)
    game.key_release(KEY_S)
    assert game.actions == set()
    y = game.player.y
    assert game.update() is False
    assert game.player.y == y


def test_forward_wins_over_back(game):
    game.key_press(KEY_W)
    game.key_press(KEY_S)
    start_y = game.player.y
    game.update()
    assert game.player.y < start_y


def test_strafe_left_and_right_cancel(game):
    x = game.player.x
    game.move_left(0.5)
    assert game.player.x < x
    game.move_right(0.5)
    assert game.player.x == pytest.approx(x)


def test_move_blocked_by_wall(game):
    game.move_forward(0.5)
    assert game.player.y == pytest.approx(2.0)
    game.move_forward(1.0)
    assert game.player.y == pytest.approx(1.0)
    game.move_forward(1.0)
    assert game.player.y == pytest.approx(1.0)


def test_shift_switches_speed(game):
    game.key_press(KEY_SHIFT)
    assert game.player.speed == RUN_SPEED
    game.key_release(KEY_SHIFT)
    assert game.player.speed == MOVE_SPEED


def test_escape_closes(game):
    assert game.closed is False
    game.key_press(KEY_ESCAPE)
    assert game.closed is True


def test_minimap_toggle(game):
    game.key_press(KEY_M)
    assert game.show_minimap is True
    game.key_press(KEY_M)
    assert game.show_minimap is False


def test_rotation_round_trip_and_length(game):
    p = game.player
    before = (p.dir_x, p.dir_y, p.plane_x, p.plane_y)
    game.look_right()
    assert math.hypot(p.dir_x, p.dir_y) == pytest.approx(1.0)
    assert (p.dir_x, p.dir_y) != pytest.approx(before[:2])
    game.look_left()
    assert (p.dir_x, p.dir_y, p.plane_x, p.plane_y) == pytest.approx(before)


def test_turn_keys_register_actions(game):
    game.key_press(KEY_RIGHT)
    game.key_press(KEY_LEFT)
    game.key_press(KEY_A)
    game.key_press(KEY_D)
    assert game.actions == {
        Action.TURN_RIGHT,
        Action.TURN_LEFT,
        Action.LEFT,
        Action.RIGHT,
    }


def test_render_covers_every_column(game):
    hits = game.render()
    assert len(hits) == game.image.width
    assert game.image.get_pixel(0, 0) == game.ceiling
    assert game.image.get_pixel(0, game.image.height - 1) & 0xFFFFFF in (
        game.floor,
        0x0000FF,
        0x0000DF,
    )


def test_describe_scene():
    text = describe_scene(parse_text(SCENE_TEXT))
    lines = text.splitlines()
    assert lines[0] == "NO = ./n.xpm"
    assert "Ceiling = 0,0,255" in lines
    assert "player cords x = 2.500000 y = 2.500000" in lines
    assert lines[-1] == "11111"


def test_main_wrong_argument_count(capsys):
    assert main([]) == 1
    assert "Not valid amount of arguments" in capsys.readouterr().err


def test_main_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "missing.cub")]) == 0
    assert "Invalid file or no file provided" in capsys.readouterr().err


def test_main_wrong_extension(tmp_path, capsys):
    path = tmp_path / "scene.txt"
    path.write_text(SCENE_TEXT)
    assert main([str(path)]) == 0
    assert "File is not in the correct format" in capsys.readouterr().err


def test_main_invalid_map(tmp_path, capsys):
    path = tmp_path / "scene.cub"
    path.write_text(SCENE_TEXT.replace("10N01", "10N0 "))
    assert main([str(path)]) == 1
    assert "Map is invalid" in capsys.readouterr().err