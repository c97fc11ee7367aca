"""Steamcodle: guess the Steam review percentage of a featured game."""

__version__ = "0.1.0"
