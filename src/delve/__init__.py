"""Simulation core for a floor-by-floor dungeon crawler."""

__version__ = "0.1.0"
