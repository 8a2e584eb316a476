# mapgen/world/edges.py
"""Directional edge derivation shared by room, secret passage and ladder code."""
from typing import Callable, Iterable, List, NamedTuple, Optional

import structlog

from mapgen.constants import (
    OPPOSITE_DIRECTION,
    ROOM_TILE_TYPES,
    Direction,
    EdgeType,
    TileType,
)
from mapgen.world.dungeon_map import DungeonMap, Point

log = structlog.get_logger()


class DoorScan(NamedTuple):
    """How to pick the outermost door tile of a room on one side."""

    direction: Direction
    dx: int
    dy: int
    vertical: bool
    # Is candidate value better than the current best?
    compare: Callable[[int, int], bool]
    # Is candidate value on the far side of (or level with) the origin?
    origin_compare: Callable[[int, int], bool]


DOOR_SCANS: List[DoorScan] = [
    DoorScan(Direction.TOP, 0, -1, True, lambda a, b: a < b, lambda a, b: a <= b),
    DoorScan(Direction.BOTTOM, 0, 1, True, lambda a, b: a > b, lambda a, b: a >= b),
    DoorScan(Direction.LEFT, -1, 0, False, lambda a, b: a < b, lambda a, b: a <= b),
    DoorScan(Direction.RIGHT, 1, 0, False, lambda a, b: a > b, lambda a, b: a >= b),
]

DOOR_SOURCE_EDGES = frozenset({EdgeType.ROOM_WALL, EdgeType.EMBRASURE})


def direction_between(a: Point, b: Point) -> Direction:
    """Cardinal direction from ``a`` to the 4-adjacent point ``b``."""
    dx, dy = b.x - a.x, b.y - a.y
    if abs(dx) + abs(dy) != 1:
        raise ValueError(f"{a} and {b} are not 4-adjacent")
    if dx == 1:
        return Direction.RIGHT
    if dx == -1:
        return Direction.LEFT
    return Direction.BOTTOM if dy == 1 else Direction.TOP


def create_edges_between_tiles(
    game_map: DungeonMap,
    tiles: Iterable[Point],
    inner_types: Iterable[TileType],
    outer_types: Iterable[TileType],
    inner_edge: EdgeType,
    outer_edge: EdgeType,
    directions: Iterable[Direction],
    set_inner: bool = True,
    set_outer: bool = False,
) -> DungeonMap:
    """
    Classifies the boundary between scanned tiles and their neighbours.

    For every tile in ``tiles`` whose type is in ``inner_types`` and every
    neighbour in one of ``directions`` whose type is in ``outer_types``:
    with ``set_inner`` the scanned tile gets ``inner_edge`` on that side,
    with ``set_outer`` the neighbour gets ``outer_edge`` on the facing side.
    Edges are assigned, never accumulated, so repeated calls are idempotent.
    """
    inner = {int(t) for t in inner_types}
    outer = {int(t) for t in outer_types}
    allowed = tuple(directions)
    assigned = 0
    for x, y in tiles:
        if int(game_map.tiles[y, x]) not in inner:
            continue
        for direction in allowed:
            neighbor = game_map.neighbor_in_direction(x, y, direction)
            if neighbor is None:
                continue
            if int(game_map.tiles[neighbor.y, neighbor.x]) not in outer:
                continue
            if set_inner:
                game_map.set_edge(x, y, direction, inner_edge)
                assigned += 1
            if set_outer:
                game_map.set_edge(
                    neighbor.x, neighbor.y, OPPOSITE_DIRECTION[direction], outer_edge
                )
                assigned += 1
    log.debug(
        "Edges classified",
        inner_edge=inner_edge.name,
        outer_edge=outer_edge.name,
        assigned=assigned,
    )
    return game_map


def find_door_candidate(
    scan: DoorScan, room_tiles: Iterable[Point], game_map: DungeonMap, origin: Point
) -> Optional[Point]:
    """
    The room tile furthest out along ``scan.direction`` that still lies on
    that side of the origin, faces a corridor and carries a wall or
    embrasure edge there. Ties keep the first tile in ``room_tiles`` order.
    """
    best: Optional[Point] = None
    best_value: Optional[int] = None
    origin_value = origin.y if scan.vertical else origin.x
    room_types = {int(t) for t in ROOM_TILE_TYPES}
    for tile in room_tiles:
        x, y = tile
        if int(game_map.tiles[y, x]) not in room_types:
            continue
        outside = game_map.neighbor_in_direction(x, y, scan.direction)
        if outside is None or game_map.get_tile(*outside) != TileType.CORRIDOR:
            continue
        if game_map.get_edge(x, y, scan.direction) not in DOOR_SOURCE_EDGES:
            continue
        value = y if scan.vertical else x
        if best_value is not None and not scan.compare(value, best_value):
            continue
        if not scan.origin_compare(value, origin_value):
            continue
        if game_map.has_edge_type(x, y, EdgeType.REINFORCED_DOOR):
            continue
        best, best_value = tile, value
    return best


def reconcile_room_edges(game_map: DungeonMap) -> int:
    """
    Re-derives wall/embrasure edges on room tiles whose neighbours changed
    type after the room was grown. Doors are left alone.
    """
    changed = 0
    room_positions = [
        p
        for tile_type in (TileType.ROOM, TileType.ROOM_ORIGIN)
        for p in game_map.tiles_of_type(tile_type)
    ]
    for x, y in room_positions:
        for direction, edge in game_map.edges_at(x, y).items():
            neighbor = game_map.neighbor_in_direction(x, y, direction)
            if neighbor is None:
                continue
            neighbor_type = game_map.get_tile(*neighbor)
            if edge == EdgeType.ROOM_WALL and neighbor_type == TileType.CORRIDOR:
                game_map.set_edge(x, y, direction, EdgeType.EMBRASURE)
                changed += 1
            elif edge == EdgeType.EMBRASURE and neighbor_type == TileType.WALL:
                game_map.set_edge(x, y, direction, EdgeType.ROOM_WALL)
                changed += 1
    if changed:
        log.debug("Room edges reconciled", changed=changed)
    return changed
