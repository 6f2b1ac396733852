import pytest

from cubed.parser import (
    Color,
    ParseError,
    check_map,
    check_texture,
    find_player,
    flood_fill,
    parse,
    parse_color,
    parse_text,
)

HEADER = (
    "NO ./textures/north.xpm\n"
    "SO ./textures/south.xpm\n"
    "WE ./textures/west.xpm\n"
    "EA ./textures/east.xpm\n"
    "\n"
    "F 220,100,0\n"
    "C 225,30,0\n"
)
MAP = "111111\n100001\n10N001\n111111\n"
VALID = HEADER + "\n" + MAP


def _error(text):
    with pytest.raises(ParseError) as info:
        parse_text(text)
    return info.value


def test_parse_text_reads_textures():
    scene = parse_text(VALID)
    assert scene.textures == {
        "NO": "./textures/north.xpm",
        "SO": "./textures/south.xpm",
        "WE": "./textures/west.xpm",
        "EA": "./textures/east.xpm",
    }


def test_parse_text_reads_colors():
    scene = parse_text(VALID)
    assert scene.floor == Color(220, 100, 0)
    assert scene.ceiling == Color(225, 30, 0)
    assert scene.floor_spec == "220,100,0"
    assert scene.ceiling_spec == "225,30,0"


def test_parse_text_floods_grid():
    scene = parse_text(VALID)
    assert scene.grid == ["111111", "1oooo1", "1oooo1", "111111"]
    assert scene.height == 4
    assert scene.width == 6


def test_parse_text_player_start():
    player = parse_text(VALID).player
    assert (player.x, player.y) == (2.5, 2.5)
    assert player.facing == "N"
    assert (player.dir_x, player.dir_y) == (0.0, -1.0)


def test_header_order_and_indent_do_not_matter():
    text = (
        "C 225,30,0\n"
        "   F 220,100,0\n"
        "\tEA ./textures/east.xpm\n"
        "WE ./textures/west.xpm\n"
        "SO ./textures/south.xpm\n"
        "NO ./textures/north.xpm\n"
        "\n\n" + MAP
    )
    scene = parse_text(text)
    assert scene.grid == parse_text(VALID).grid
    assert scene.textures["EA"] == "./textures/east.xpm"


def test_map_without_trailing_newline():
    scene = parse_text(VALID.rstrip("\n"))
    assert scene.grid == parse_text(VALID).grid


def test_empty_text():
    error = _error("")
    assert error.message == "Empty File"
    assert error.exit_code == 0


def test_missing_texture_at_end_of_file():
    text = HEADER.replace("C 225,30,0\n", "")
    assert _error(text).message == "Missing texture or color"


def test_map_before_header_complete_is_invalid_texture():
    text = HEADER.replace("C 225,30,0\n", "") + MAP
    assert _error(text).message == "Invalid texture"


def test_duplicate_texture():
    text = "NO a.xpm\nNO b.xpm\n" + HEADER
    assert _error(text).message == "Invalid texture"


def test_unknown_identifier():
    assert _error("XX foo\n" + VALID).message == "Invalid texture"


def test_wall_texture_needs_xpm():
    text = VALID.replace("north.xpm", "north.png")
    assert _error(text).message == "Invalid texture"


def test_color_with_spaces_is_invalid_texture():
    text = VALID.replace("F 220,100,0", "F 220, 100, 0")
    assert _error(text).message == "Invalid texture"


def test_no_map_found():
    error = _error(HEADER)
    assert error.message == "No map found"
    assert error.exit_code == 1


def test_only_blank_lines_after_header():
    assert _error(HEADER + "\n\n").message == (
        "Player not found or multiple players in map"
    )


def test_invalid_char_in_map():
    text = HEADER + "111111\n10X001\n10N001\n111111\n"
    assert _error(text).message == "Invalid char found"


def test_two_players():
    text = HEADER + "111111\n10S001\n10N001\n111111\n"
    assert _error(text).message == "Player not found or multiple players in map"


def test_open_map():
    text = HEADER + "111\n10N\n111\n"
    assert _error(text).message == "Map is invalid"


def test_malformed_color():
    text = VALID.replace("F 220,100,0", "F 220,100")
    assert _error(text).message == "Colors aren't valid"


def test_color_out_of_range():
    text = VALID.replace("F 220,100,0", "F 220,100,300")
    assert _error(text).message == "Colors values aren't valid"


def test_all_colors_split_before_values_checked():
    text = VALID.replace("C 225,30,0", "C 225,30,300").replace(
        "F 220,100,0", "F 220,100"
    )
    assert _error(text).message == "Colors aren't valid"


def test_parse_color_valid():
    assert parse_color("0,128,255") == Color(0, 128, 255)
    assert parse_color("007,10,1") == Color(7, 10, 1)


@pytest.mark.parametrize(
    "text", ["1,2", "1,,3", "1,2,3,4", ",1,2", "1,2,", "1,2,3,"]
)
def test_parse_color_bad_shape(text):
    with pytest.raises(ParseError, match="Colors aren't valid"):
        parse_color(text)


@pytest.mark.parametrize("text", ["256,0,0", "1,a,3", "1,-2,3", "1,2,+3"])
def test_parse_color_bad_values(text):
    with pytest.raises(ParseError, match="Colors values aren't valid"):
        parse_color(text)


def test_hexa_white():
    assert Color(255, 255, 255).hexa() == 0xFFFFFF


def test_hexa_small_component_has_one_digit():
    assert Color(220, 100, 0).hexa() == 0xDC640


@pytest.mark.parametrize("rgb", [(17, 18, 19), (128, 64, 32), (200, 250, 100)])
def test_hexa_matches_packing_above_sixteen(rgb):
    red, green, blue = rgb
    assert Color(*rgb).hexa() == (red << 16) | (green << 8) | blue


def test_check_texture_wall():
    assert check_texture("NO ./a.xpm", "NO") == "./a.xpm"
    assert check_texture("EA\t x.xpm  \t\n", "EA") == "x.xpm"


def test_check_texture_color():
    assert check_texture("C 1,2,3\n", "C") == "1,2,3"


@pytest.mark.parametrize(
    "line, kind",
    [("NO ./a.png", "NO"), ("NO a.xpm b", "NO"), ("F ", "F"), ("C  \n", "C")],
)
def test_check_texture_rejects(line, kind):
    with pytest.raises(ParseError, match="Invalid texture"):
        check_texture(line, kind)


def test_check_texture_unknown_kind():
    with pytest.raises(ValueError):
        check_texture("XX foo", "XX")


def test_check_map():
    assert check_map(["1 1", "10N1", "1D01"]) is True
    assert check_map(["1X1"]) is False
    assert check_map(["1\t1"]) is False


@pytest.mark.parametrize(
    "facing, expected",
    [
        ("N", (0.0, -1.0, 0.66, 0.0)),
        ("S", (0.0, 1.0, -0.66, 0.0)),
        ("E", (1.0, 0.0, 0.0, 0.66)),
        ("W", (-1.0, 0.0, 0.0, -0.66)),
    ],
)
def test_find_player_directions(facing, expected):
    player = find_player(["111", "1" + facing + "1", "111"])
    assert (player.dir_x, player.dir_y, player.plane_x, player.plane_y) == expected
    assert player.facing == facing
    assert (player.x - 0.5, player.y - 0.5) == (1, 1)


def test_find_player_missing():
    with pytest.raises(ParseError, match="Player not found"):
        find_player(["111", "101", "111"])


def test_flood_fill_marks_doors_and_floor():
    grid = ["1111", "1D01", "1N11", "1111"]
    assert flood_fill(grid) == ["1111", "1do1", "1o11", "1111"]
    assert grid == ["1111", "1D01", "1N11", "1111"]


def test_flood_fill_space_leak():
    with pytest.raises(ParseError, match="Map is invalid"):
        flood_fill(["1111", "10 1", "1111"])


def test_flood_fill_second_region_leak():
    with pytest.raises(ParseError, match="Map is invalid"):
        flood_fill(["11111", "10101", "11101"])


def test_flood_fill_short_row_below():
    with pytest.raises(ParseError, match="Map is invalid"):
        flood_fill(["1111", "1001", "11"])


def test_parse_file(tmp_path):
    path = tmp_path / "map.cub"
    path.write_text(VALID)
    scene = parse(path)
    assert scene.grid == ["111111", "1oooo1", "1oooo1", "111111"]
    assert scene.player.facing == "N"


def test_parse_wrong_extension(tmp_path):
    path = tmp_path / "map.txt"
    path.write_text(VALID)
    with pytest.raises(ParseError) as info:
        parse(path)
    assert info.value.message == "File is not in the correct format"
    assert info.value.exit_code == 0


def test_parse_missing_file(tmp_path):
    with pytest.raises(ParseError) as info:
        parse(tmp_path / "absent.cub")
    assert info.value.message == "Invalid file or no file provided"
    assert info.value.exit_code == 0