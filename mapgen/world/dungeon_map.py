# mapgen/world/dungeon_map.py
import math
from typing import Iterable, List, NamedTuple, Optional

import numpy as np
import structlog

from mapgen.constants import (
    DIRECTION_DELTAS,
    NEIGHBOR_OFFSETS,
    NO_EDGE,
    Direction,
    EdgeType,
    TileType,
)

log = structlog.get_logger()


class Point(NamedTuple):
    """An integer map coordinate."""

    x: int
    y: int


def distance(p1: Point, p2: Point) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.y - p1.y)


class DungeonMap:
    def __init__(
        self, width: int, height: int, fill_type: TileType = TileType.EMPTY
    ):
        """
        Initializes the map with all tiles set to ``fill_type`` and no edges.

        ``tiles`` has shape ``(height, width)`` and ``edges`` has shape
        ``(height, width, 4)``; both are indexed ``[y, x]``. Edge slots follow
        ``Direction`` values and hold ``NO_EDGE`` when empty.
        """
        if width <= 0 or height <= 0:
            log.error("Invalid map dimensions", width=width, height=height)
            raise ValueError("Map width and height must be positive integers.")
        self._width = width
        self._height = height

        self.tiles: np.ndarray = np.full(
            (height, width), fill_value=int(fill_type), dtype=np.uint8, order="C"
        )
        self.edges: np.ndarray = np.zeros(
            (height, width, len(Direction)), dtype=np.uint8, order="C"
        )
        log.debug("DungeonMap arrays initialized", shape=(height, width))

    @classmethod
    def create(
        cls, width: int, height: int, fill_type: TileType = TileType.EMPTY
    ) -> "DungeonMap":
        return cls(width, height, fill_type)

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    def copy(self) -> "DungeonMap":
        clone = DungeonMap.__new__(DungeonMap)
        clone._width = self._width
        clone._height = self._height
        clone.tiles = self.tiles.copy()
        clone.edges = self.edges.copy()
        return clone

    # --- Bounds ---
    def in_bounds(self, x: int, y: int) -> bool:
        """Checks if the given coordinates are within the map boundaries."""
        return 0 <= x < self._width and 0 <= y < self._height

    def require_in_bounds(self, x: int, y: int) -> None:
        # numpy would silently wrap negative indices
        if not self.in_bounds(x, y):
            raise IndexError(
                f"({x}, {y}) outside {self._width}x{self._height} map"
            )

    # --- Tiles ---
    def get_tile(self, x: int, y: int) -> TileType:
        self.require_in_bounds(x, y)
        return TileType(int(self.tiles[y, x]))

    def set_tile(self, x: int, y: int, tile_type: TileType) -> None:
        self.require_in_bounds(x, y)
        self.tiles[y, x] = int(tile_type)

    def tiles_of_type(self, tile_type: TileType) -> List[Point]:
        """All coordinates holding ``tile_type``, in row-major order."""
        return [
            Point(int(x), int(y))
            for y, x in np.argwhere(self.tiles == int(tile_type))
        ]

    def count(self, tile_type: TileType) -> int:
        return int(np.count_nonzero(self.tiles == int(tile_type)))

    def fill_rect(
        self,
        x: int,
        y: int,
        width: int,
        height: int,
        tile_type: TileType,
        replace_only: Optional[TileType] = None,
    ) -> None:
        """
        Sets every in-bounds cell of the rectangle to ``tile_type``. With
        ``replace_only`` only cells currently of that type are overwritten.
        """
        x_start = max(0, x)
        y_start = max(0, y)
        x_end = min(self._width, x + width)
        y_end = min(self._height, y + height)
        if x_start >= x_end or y_start >= y_end:
            return
        region = self.tiles[y_start:y_end, x_start:x_end]
        if replace_only is None:
            region[...] = int(tile_type)
        else:
            region[region == int(replace_only)] = int(tile_type)

    # --- Neighbourhood queries ---
    def neighbors4(self, x: int, y: int) -> List[Point]:
        """In-bounds 4-neighbours ordered south, east, north, west."""
        return [
            Point(x + dx, y + dy)
            for dx, dy in NEIGHBOR_OFFSETS
            if self.in_bounds(x + dx, y + dy)
        ]

    def neighbors_of_type(
        self, x: int, y: int, tile_types: Iterable[TileType]
    ) -> List[Point]:
        wanted = {int(t) for t in tile_types}
        return [p for p in self.neighbors4(x, y) if int(self.tiles[p.y, p.x]) in wanted]

    def unvisited_neighbors(
        self,
        x: int,
        y: int,
        step: int,
        unvisited_types: Iterable[TileType] = (TileType.WALL,),
    ) -> List[Point]:
        """
        Points ``step`` cells away in each cardinal direction (north, east,
        south, west) that are in bounds and still hold one of
        ``unvisited_types``.
        """
        wanted = {int(t) for t in unvisited_types}
        candidates = ((x, y - step), (x + step, y), (x, y + step), (x - step, y))
        return [
            Point(nx, ny)
            for nx, ny in candidates
            if self.in_bounds(nx, ny) and int(self.tiles[ny, nx]) in wanted
        ]

    def is_adjacent_to_type(self, x: int, y: int, tile_type: TileType) -> bool:
        return bool(self.neighbors_of_type(x, y, (tile_type,)))

    def all_neighbors_in(
        self, x: int, y: int, tile_types: Iterable[TileType]
    ) -> bool:
        """True when every in-bounds neighbour holds one of ``tile_types``."""
        wanted = {int(t) for t in tile_types}
        return all(
            int(self.tiles[p.y, p.x]) in wanted for p in self.neighbors4(x, y)
        )

    def find_nearest_tile(
        self, x: int, y: int, tile_type: TileType, ignore_start: bool = True
    ) -> Optional[Point]:
        """Nearest tile of ``tile_type`` by Euclidean distance, ties to scan order."""
        positions = np.argwhere(self.tiles == int(tile_type))
        if ignore_start and positions.size:
            positions = positions[~((positions[:, 0] == y) & (positions[:, 1] == x))]
        if positions.size == 0:
            return None
        dist_sq = (positions[:, 0] - y) ** 2 + (positions[:, 1] - x) ** 2
        best_y, best_x = positions[int(np.argmin(dist_sq))]
        return Point(int(best_x), int(best_y))

    # --- Edges ---
    def get_edge(self, x: int, y: int, direction: Direction) -> Optional[EdgeType]:
        self.require_in_bounds(x, y)
        value = int(self.edges[y, x, int(direction)])
        return EdgeType(value) if value != NO_EDGE else None

    def set_edge(
        self, x: int, y: int, direction: Direction, edge_type: Optional[EdgeType]
    ) -> None:
        self.require_in_bounds(x, y)
        self.edges[y, x, int(direction)] = (
            NO_EDGE if edge_type is None else int(edge_type)
        )

    def edges_at(self, x: int, y: int) -> dict[Direction, EdgeType]:
        """Sparse view of the edges set on one cell."""
        self.require_in_bounds(x, y)
        return {
            direction: EdgeType(int(value))
            for direction, value in zip(Direction, self.edges[y, x])
            if value != NO_EDGE
        }

    def has_edge_type(self, x: int, y: int, edge_type: EdgeType) -> bool:
        self.require_in_bounds(x, y)
        return bool(np.any(self.edges[y, x] == int(edge_type)))

    def is_near_edge_type(
        self, x: int, y: int, edge_type: EdgeType, radius: int
    ) -> bool:
        """True if any cell in the square window of ``radius`` carries ``edge_type``."""
        self.require_in_bounds(x, y)
        window = self.edges[
            max(0, y - radius) : min(self._height, y + radius + 1),
            max(0, x - radius) : min(self._width, x + radius + 1),
        ]
        return bool(np.any(window == int(edge_type)))

    def neighbor_in_direction(
        self, x: int, y: int, direction: Direction
    ) -> Optional[Point]:
        dx, dy = DIRECTION_DELTAS[direction]
        if not self.in_bounds(x + dx, y + dy):
            return None
        return Point(x + dx, y + dy)

    # --- Cropping ---
    def shrink(self, margin: int) -> "DungeonMap":
        """Returns a new map with ``margin`` cells cut from every side."""
        if margin < 0:
            raise ValueError("margin must not be negative")
        if self._width <= 2 * margin or self._height <= 2 * margin:
            log.error(
                "Map too small to shrink",
                width=self._width,
                height=self._height,
                margin=margin,
            )
            raise ValueError("Map too small for the requested margin.")
        shrunk = DungeonMap.__new__(DungeonMap)
        shrunk._width = self._width - 2 * margin
        shrunk._height = self._height - 2 * margin
        y_slice = slice(margin, self._height - margin)
        x_slice = slice(margin, self._width - margin)
        shrunk.tiles = self.tiles[y_slice, x_slice].copy(order="C")
        shrunk.edges = self.edges[y_slice, x_slice].copy(order="C")
        return shrunk

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DungeonMap):
            return NotImplemented
        return np.array_equal(self.tiles, other.tiles) and np.array_equal(
            self.edges, other.edges
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"DungeonMap(width={self._width}, height={self._height})"
