# mapgen/mappings.py
"""
Colour and glyph lookup tables for the two exported views of a dungeon.

The SECRET view shows everything. The PUBLIC view is the player's map:
secret corridors and ladders blend into the rock, pitfalls look like plain
corridor, trap slides look like real slides and hidden doors are not drawn.
An edge colour of ``None`` means the edge is deliberately left undrawn.
"""
from typing import Dict, Optional, Tuple

from mapgen.constants import EdgeType, TileType

Color = Tuple[int, int, int]

WHITE: Color = (255, 255, 255)
BLACK: Color = (0, 0, 0)

# Base palette
CORRIDOR_COLOR: Color = (211, 211, 211)  # LightGray
WALL_COLOR: Color = (105, 105, 105)  # DimGray
SECRET_CORRIDOR_COLOR: Color = (72, 61, 139)  # DarkSlateBlue
ROOM_COLOR: Color = (245, 222, 179)  # Wheat
ROOM_ORIGIN_COLOR: Color = (222, 184, 135)  # BurlyWood
PITFALL_COLOR: Color = (139, 0, 0)  # DarkRed
SPIKES_COLOR: Color = (255, 215, 0)  # Gold
LAVA_COLOR: Color = (255, 69, 0)  # OrangeRed
SLIDE_COLOR: Color = (70, 130, 180)  # SteelBlue
TRAP_SLIDE_COLOR: Color = (178, 34, 34)  # Firebrick
LADDER_COLOR: Color = (139, 69, 19)  # SaddleBrown

SECRET_TILE_COLORS: Dict[TileType, Color] = {
    TileType.EMPTY: WHITE,
    TileType.WALL: WALL_COLOR,
    TileType.CORRIDOR: CORRIDOR_COLOR,
    TileType.SECRET_CORRIDOR: SECRET_CORRIDOR_COLOR,
    TileType.ROOM: ROOM_COLOR,
    TileType.ROOM_ORIGIN: ROOM_ORIGIN_COLOR,
    TileType.TRAP_PITFALL: PITFALL_COLOR,
    TileType.SPIKES: SPIKES_COLOR,
    TileType.LAVA: LAVA_COLOR,
    TileType.SLIDE: SLIDE_COLOR,
    TileType.TRAP_SLIDE: TRAP_SLIDE_COLOR,
    TileType.LADDER_UP: LADDER_COLOR,
    TileType.LADDER_DOWN: LADDER_COLOR,
}

PUBLIC_TILE_COLORS: Dict[TileType, Color] = {
    **SECRET_TILE_COLORS,
    TileType.SECRET_CORRIDOR: WALL_COLOR,
    TileType.ROOM_ORIGIN: ROOM_COLOR,
    TileType.TRAP_PITFALL: CORRIDOR_COLOR,
    TileType.TRAP_SLIDE: SLIDE_COLOR,
    TileType.LADDER_DOWN: WALL_COLOR,
}

SECRET_EDGE_COLORS: Dict[EdgeType, Optional[Color]] = {
    EdgeType.ROOM_WALL: BLACK,
    EdgeType.DOOR: (160, 82, 45),  # Sienna
    EdgeType.HIDDEN_DOOR: (255, 0, 255),  # Magenta
    EdgeType.REINFORCED_DOOR: (85, 107, 47),  # DarkOliveGreen
    EdgeType.WINDOW: (135, 206, 235),  # SkyBlue
    EdgeType.EMBRASURE: (255, 140, 0),  # DarkOrange
}

PUBLIC_EDGE_COLORS: Dict[EdgeType, Optional[Color]] = {
    **SECRET_EDGE_COLORS,
    EdgeType.HIDDEN_DOOR: None,
}

SECRET_TILE_TEXT: Dict[TileType, str] = {
    TileType.ROOM_ORIGIN: "O",
    TileType.TRAP_PITFALL: "T",
    TileType.SLIDE: "S",
    TileType.TRAP_SLIDE: "X",
    TileType.LADDER_UP: "<",
    TileType.LADDER_DOWN: ">",
}

PUBLIC_TILE_TEXT: Dict[TileType, str] = {
    TileType.SLIDE: "S",
    TileType.TRAP_SLIDE: "S",
    TileType.LADDER_UP: "<",
}

__all__ = [
    "Color",
    "SECRET_TILE_COLORS",
    "PUBLIC_TILE_COLORS",
    "SECRET_EDGE_COLORS",
    "PUBLIC_EDGE_COLORS",
    "SECRET_TILE_TEXT",
    "PUBLIC_TILE_TEXT",
]
