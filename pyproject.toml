[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cubed"
version = "0.1.0"
description = "A small raycasting first-person maze viewer driven by .cub scene files"
requires-python = ">=3.10"
keywords = ["raycasting", "maze", "game", "xpm", "pygame"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: End Users/Desktop",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Games/Entertainment :: First Person Shooters",
]
dependencies = [
    "pygame",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
cubed = "cubed.game:main"

[tool.hatch.build.targets.wheel]
packages = ["cubed"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
