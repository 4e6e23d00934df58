"""
Maze generation for ghostmaze.

Contains the Hunt-and-Kill carver, the full-resolution scaler, exit placement and
region classification, plus the level generator that chains them.
"""
from .tiles import FloorCell, WallCell, WallGrid
from .generator import Level, LevelGenerator, generate_level
from .regions import SpawnPools

__all__ = ["FloorCell", "WallCell", "WallGrid", "Level", "LevelGenerator", "generate_level", "SpawnPools"]
