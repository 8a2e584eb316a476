from enum import IntEnum
from typing import Final, Tuple


class TileType(IntEnum):
    """Semantic tile identifiers stored in ``DungeonMap.tiles``."""

    EMPTY = 0  # No feature, renders as background
    WALL = 1
    CORRIDOR = 2
    SECRET_CORRIDOR = 3
    ROOM = 4
    ROOM_ORIGIN = 5
    TRAP_PITFALL = 6
    SPIKES = 7
    LAVA = 8
    SLIDE = 9
    TRAP_SLIDE = 10
    LADDER_UP = 11
    LADDER_DOWN = 12


class EdgeType(IntEnum):
    """Boundary features stored per cell side in ``DungeonMap.edges``."""

    ROOM_WALL = 1
    DOOR = 2
    HIDDEN_DOOR = 3
    REINFORCED_DOOR = 4
    WINDOW = 5
    EMBRASURE = 6


class Direction(IntEnum):
    """Cell sides. The value is the slot index in the edge array."""

    TOP = 0
    RIGHT = 1
    BOTTOM = 2
    LEFT = 3


NO_EDGE: Final[int] = 0

# (dx, dy) per direction; y grows downwards
DIRECTION_DELTAS: Final[dict[Direction, Tuple[int, int]]] = {
    Direction.TOP: (0, -1),
    Direction.RIGHT: (1, 0),
    Direction.BOTTOM: (0, 1),
    Direction.LEFT: (-1, 0),
}

OPPOSITE_DIRECTION: Final[dict[Direction, Direction]] = {
    Direction.TOP: Direction.BOTTOM,
    Direction.RIGHT: Direction.LEFT,
    Direction.BOTTOM: Direction.TOP,
    Direction.LEFT: Direction.RIGHT,
}

ALL_DIRECTIONS: Final[Tuple[Direction, ...]] = tuple(Direction)
VERTICAL_DIRECTIONS: Final[Tuple[Direction, ...]] = (Direction.TOP, Direction.BOTTOM)
HORIZONTAL_DIRECTIONS: Final[Tuple[Direction, ...]] = (Direction.LEFT, Direction.RIGHT)

# 4-neighbour offsets in scan order: south, east, north, west
NEIGHBOR_OFFSETS: Final[Tuple[Tuple[int, int], ...]] = ((0, 1), (1, 0), (0, -1), (-1, 0))

ROOM_TILE_TYPES: Final[frozenset[TileType]] = frozenset(
    {TileType.ROOM, TileType.ROOM_ORIGIN}
)
TRAVERSABLE_TILE_TYPES: Final[frozenset[TileType]] = frozenset(
    {TileType.CORRIDOR, TileType.ROOM, TileType.ROOM_ORIGIN}
)
OVERRIDABLE_TILE_TYPES: Final[frozenset[TileType]] = frozenset(
    {TileType.WALL, TileType.CORRIDOR}
)

# Names used in serialized documents
TILE_NAMES: Final[dict[TileType, str]] = {
    TileType.WALL: "wall",
    TileType.CORRIDOR: "corridor",
    TileType.SECRET_CORRIDOR: "secretCorridor",
    TileType.ROOM: "room",
    TileType.ROOM_ORIGIN: "roomOrigin",
    TileType.TRAP_PITFALL: "trapPitfall",
    TileType.SPIKES: "spikes",
    TileType.LAVA: "lava",
    TileType.SLIDE: "slide",
    TileType.TRAP_SLIDE: "trapSlide",
    TileType.LADDER_UP: "ladderUp",
    TileType.LADDER_DOWN: "ladderDown",
}

EDGE_NAMES: Final[dict[EdgeType, str]] = {
    EdgeType.ROOM_WALL: "roomWall",
    EdgeType.DOOR: "door",
    EdgeType.HIDDEN_DOOR: "hiddenDoor",
    EdgeType.REINFORCED_DOOR: "reinforcedDoor",
    EdgeType.WINDOW: "window",
    EdgeType.EMBRASURE: "embrasure",
}

DIRECTION_NAMES: Final[dict[Direction, str]] = {
    Direction.TOP: "top",
    Direction.RIGHT: "right",
    Direction.BOTTOM: "bottom",
    Direction.LEFT: "left",
}

__all__ = [
    "TileType",
    "EdgeType",
    "Direction",
    "NO_EDGE",
    "DIRECTION_DELTAS",
    "OPPOSITE_DIRECTION",
    "ALL_DIRECTIONS",
    "VERTICAL_DIRECTIONS",
    "HORIZONTAL_DIRECTIONS",
    "NEIGHBOR_OFFSETS",
    "ROOM_TILE_TYPES",
    "TRAVERSABLE_TILE_TYPES",
    "OVERRIDABLE_TILE_TYPES",
    "TILE_NAMES",
    "EDGE_NAMES",
    "DIRECTION_NAMES",
]
