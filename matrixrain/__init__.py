"""Palettes, frame buffer, banner layout, Game of Life and Mandelbrot pieces for terminal rain animations."""

__version__ = "0.1.0"