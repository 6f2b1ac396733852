# cubed

A small first-person maze viewer. It reads a `.cub` scene file and draws the
maze with a column raycaster in a 640x480 pygame window titled "NEETs".

## Install

```
pip install .
```

## Run

```
cubed path/to/scene.cub
```

The command takes exactly one argument. When the scene loads, it prints a
summary of the scene: texture paths, colours, start position and map rows.
Then it opens the window.

When something is wrong, it prints `Error` and a one-line reason to standard
error. It then exits with one of two statuses:

- 0 if the file cannot be read, does not end in `.cub`, or is empty;
- 1 for any other problem, such as a wrong argument count or an invalid texture, colour or map.

### Controls

| Key          | Action                                  |
|--------------|-----------------------------------------|
| W / S        | move forward / back (W wins if both)    |
| A / D        | strafe left / right                     |
| Left / Right | turn                                    |
| Shift        | run while held                          |
| M            | toggle the minimap                      |
| Esc          | quit                                    |

You can only step onto open floor cells.

The minimap is 300x300 pixels and sits at (20, 20). It shows the cells
around the player as 60-pixel tiles: floor is drawn in blue and everything
else in black.

## Scene files

```
NO ./textures/north.xpm
SO ./textures/south.xpm
WE ./textures/west.xpm
EA ./textures/east.xpm

F 220,100,0
C 225,30,0

111111
100101
101001
1100N1
111111
```

- The header lines may come in any order, and blank lines between them are allowed.
- Each identifier is followed by a space and exactly one value. Only whitespace may come after the value.
- `NO`, `SO`, `WE` and `EA` each name a file ending in `.xpm`. `F` and `C` give the floor and ceiling colours as `R,G,B`: digits and commas only, each value from 0 to 255. Each identifier may appear only once.
- The map starts at the first line after the header that contains one of `10NEWSD`.
- The map may use only `0`, `1`, spaces, `D` and exactly one player start: `N`, `S`, `E` or `W`. The player stands in the middle of that cell and faces that way.
- Every `0`, `D` and start cell must be closed in by walls (`1`). The map edge and spaces do not count as walls.

Floor and ceiling colours are packed by `Color.hexa()`. It joins the hex
digits of the three components with no zero padding. So a component of 16
or less gives a single digit, and 16 itself gives `0`.

## What it does not do

The wall textures named in a scene are checked and recorded, but they are
never loaded or drawn. Walls are filled in two flat shades of blue, one for
each wall orientation. Door cells (`D`) are accepted in the map. They block
movement, but rays pass through them as if they were open. There is no
mouse look, and there are no sprites or sound.

## Library use

The modules can also be used without a window:

- `cubed.parser.parse(path)` and `cubed.parser.parse_text(text)` return a `Scene`, or raise `ParseError`. `ParseError` carries `message` and `exit_code`. The module also has `parse_color`, `check_texture`, `check_map`, `find_player` and `flood_fill`.
- `cubed.image.Image(width, height, bits_per_pixel=32, big_endian=False)` is a packed pixel buffer. It has `put_pixel`, `get_pixel`, `fill`, `line_length` and `to_rgb_bytes`.
- `cubed.raycast.cast_ray(grid, player, column, width)` gives a `RayHit`, and `cubed.raycast.wall_span(distance, height)` gives the rows a wall covers. `cubed.raycast.render_frame(grid, player, image, ceiling, floor)` draws one frame into an `Image`, and `cubed.raycast.draw_minimap(grid, player, image)` draws the minimap.
- `cubed.game.Game(scene)` holds the running state, without opening a window. It has `key_press`, `key_release`, `update` and `render`, which take X11 keysym codes. `cubed.game.describe_scene(scene)` returns the startup summary.
- `cubed.xpm.load_xpm(path)` and `cubed.xpm.parse_xpm_source(text)` read XPM pictures into an `Image`. `parse_xpm_lines(lines)` does the same from the picture's strings. Malformed input raises `XpmError`.
- `cubed.colors.lookup_color(name)` resolves X11 colour names, matched case-insensitively. `color_names()` lists them.

## Tests

```
pip install .[test]
pytest
```