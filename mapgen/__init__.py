"""Maze-and-rooms dungeon generation with secret passages, traps, slides and ladders."""

from .config import GenerationConfig
from .constants import Direction, EdgeType, TileType
from .world.dungeon_map import DungeonMap, Point
from .world.procgen import GeneratedDungeon, generate_dungeon

__all__ = [
    "GenerationConfig",
    "Direction",
    "EdgeType",
    "TileType",
    "DungeonMap",
    "Point",
    "GeneratedDungeon",
    "generate_dungeon",
]
