[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yaffe"
version = "0.8.1"
description = "Core of a fullscreen front-end for launching emulated games and applications"
requires-python = ">=3.10"
dependencies = []
keywords = ["emulator", "frontend", "launcher", "games", "roms", "gamepad"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
yaffe-helper = "yaffe.helper:main"

[tool.hatch.build.targets.wheel]
packages = ["yaffe"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
