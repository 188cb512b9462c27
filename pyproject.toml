[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "matrixrain"
version = "0.1.0"
description = "Building blocks for Matrix-style terminal animations: palettes, frame buffer, banner layout, Game of Life and Mandelbrot"
requires-python = ">=3.10"
dependencies = []
keywords = ["matrix", "terminal", "screensaver", "ansi", "animation"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Screen Savers",
    "Topic :: Terminals",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["matrixrain"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
