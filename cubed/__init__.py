"""Raycasting maze viewer for .cub scene files, with XPM and colour-name readers."""

__version__ = "0.1.0"
__all__ = ["colors", "image", "xpm", "parser", "raycast", "game"]