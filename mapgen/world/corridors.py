# mapgen/world/corridors.py
from typing import Iterable, List, Optional

import structlog

from game_rng import GameRNG, resolve_rng
from mapgen.constants import (
    HORIZONTAL_DIRECTIONS,
    TRAVERSABLE_TILE_TYPES,
    VERTICAL_DIRECTIONS,
    EdgeType,
    TileType,
)
from mapgen.world.dungeon_map import DungeonMap, Point
from mapgen.world.edges import create_edges_between_tiles

log = structlog.get_logger()

SECRET_CORRIDOR_WIDTH = 1


def carve_corridor_block(
    game_map: DungeonMap,
    x: int,
    y: int,
    corridor_step: int,
    tile_type: TileType = TileType.CORRIDOR,
    replace_only: Optional[TileType] = None,
) -> None:
    """Fills a ``corridor_step`` square centred on ``(x, y)``."""
    half = corridor_step // 2
    game_map.fill_rect(
        x - half, y - half, corridor_step, corridor_step, tile_type, replace_only
    )


def _construct_horizontal(
    game_map: DungeonMap, start: Point, end: Point, corridor_step: int
) -> None:
    for x in range(min(start.x, end.x), max(start.x, end.x) + 1):
        carve_corridor_block(
            game_map, x, start.y, corridor_step, TileType.CORRIDOR, TileType.WALL
        )


def _construct_vertical(
    game_map: DungeonMap, start: Point, end: Point, corridor_step: int
) -> None:
    for y in range(min(start.y, end.y), max(start.y, end.y) + 1):
        carve_corridor_block(
            game_map, start.x, y, corridor_step, TileType.CORRIDOR, TileType.WALL
        )


def construct_corridor(
    game_map: DungeonMap,
    start: Point,
    end: Point,
    corridor_step: int,
    rng: Optional[GameRNG] = None,
) -> DungeonMap:
    """
    Carves an L-shaped corridor between two points. A coin flip decides
    between horizontal-then-vertical and vertical-then-horizontal. Only
    WALL tiles are replaced.
    """
    rng = resolve_rng(rng)
    if rng.coin_flip() == "heads":
        _construct_horizontal(game_map, start, end, corridor_step)
        _construct_vertical(game_map, Point(end.x, start.y), end, corridor_step)
        order = "horizontal_first"
    else:
        _construct_vertical(game_map, start, end, corridor_step)
        _construct_horizontal(game_map, Point(start.x, end.y), end, corridor_step)
        order = "vertical_first"
    log.debug("Carved corridor", start=tuple(start), end=tuple(end), order=order)
    return game_map


def remove_isolated_corridors(game_map: DungeonMap) -> int:
    """
    Demotes to WALL every corridor tile that cannot be reached from any room
    origin through corridor and room tiles. Rooms are never demoted.
    Returns the number of tiles removed.
    """
    traversable = {int(t) for t in TRAVERSABLE_TILE_TYPES}
    visited = set()
    stack: List[Point] = list(game_map.tiles_of_type(TileType.ROOM_ORIGIN))
    visited.update(stack)
    while stack:
        cx, cy = stack.pop()
        for neighbor in game_map.neighbors4(cx, cy):
            if neighbor in visited:
                continue
            if int(game_map.tiles[neighbor.y, neighbor.x]) in traversable:
                visited.add(neighbor)
                stack.append(neighbor)

    removed = 0
    for point in game_map.tiles_of_type(TileType.CORRIDOR):
        if point not in visited:
            game_map.set_tile(point.x, point.y, TileType.WALL)
            removed += 1
    log.info("Isolated corridors removed", removed=removed)
    return removed


def create_secret_corridors(
    game_map: DungeonMap,
    central_point: Point,
    neighbors: Iterable[Point],
    corridor_width: int = SECRET_CORRIDOR_WIDTH,
) -> List[Point]:
    """
    Carves a thin SECRET_CORRIDOR strip from ``central_point`` towards each
    neighbour, replacing WALL only, and puts HIDDEN_DOOR edges where a strip
    meets corridor or room tiles along its long axis.
    Returns the secret tiles created.
    """
    created: List[Point] = []
    for neighbor in neighbors:
        delta_x = neighbor.x - central_point.x
        delta_y = neighbor.y - central_point.y
        strip_w = abs(delta_x) if delta_x else corridor_width
        strip_h = abs(delta_y) if delta_y else corridor_width
        start_x = central_point.x + (0 if delta_x >= 0 else -strip_w + 1)
        start_y = central_point.y + (0 if delta_y >= 0 else -strip_h + 1)

        strip = [
            Point(x, y)
            for y in range(start_y, start_y + strip_h)
            for x in range(start_x, start_x + strip_w)
            if game_map.in_bounds(x, y) and game_map.get_tile(x, y) == TileType.WALL
        ]
        for x, y in strip:
            game_map.set_tile(x, y, TileType.SECRET_CORRIDOR)
        created.extend(strip)

        directions = HORIZONTAL_DIRECTIONS if delta_x else VERTICAL_DIRECTIONS
        create_edges_between_tiles(
            game_map,
            strip,
            [TileType.SECRET_CORRIDOR],
            TRAVERSABLE_TILE_TYPES,
            EdgeType.HIDDEN_DOOR,
            EdgeType.HIDDEN_DOOR,
            directions,
            set_inner=True,
            set_outer=True,
        )
    return created


def generate_secret_corridors_from_room_origins(
    game_map: DungeonMap, wall_step: int
) -> int:
    """
    Links every room origin to each lattice neighbour that is still solid
    wall with a hidden passage. Returns the number of secret tiles carved.
    """
    carved = 0
    origins = game_map.tiles_of_type(TileType.ROOM_ORIGIN)
    for origin in origins:
        targets = game_map.unvisited_neighbors(origin.x, origin.y, wall_step)
        if not targets:
            continue
        carved += len(create_secret_corridors(game_map, origin, targets))
    log.info("Secret corridors generated", origins=len(origins), tiles=carved)
    return carved
